"""Global settings for the mutation toolkit.

The helpers here expose a cheap settings *singleton* with sensible fallbacks
for development. Values come from defaults, an optional ``.env`` file,
environment variables prefixed with :data:`ENV_PREFIX` and explicit
overrides, in increasing order of precedence.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Any, Mapping, MutableMapping

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "load_env_file",
    "reset_settings_cache",
]


ENV_PREFIX = "EVOMUT_"
"""Prefix shared by every environment variable read by the project."""

_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}


def _coerce_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _BOOL_TRUE:
        return True
    if lowered in _BOOL_FALSE:
        return False
    raise ValueError(f"Cannot interpret '{value}' as boolean")


def _parse_value(value: str, *, target: type) -> Any:
    if target is bool:
        return _coerce_bool(value)
    if target is int:
        return int(value)
    if target is float:
        return float(value)
    return value


def _expand_path(path_str: str, *, base: Path) -> Path:
    candidate = Path(path_str).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate


def load_env_file(path: Path) -> Mapping[str, str]:
    """Parse a ``.env`` style file returning a mapping of key/values.

    Blank lines and comments starting with ``#`` are ignored. Only the first
    ``=`` in each line is treated as the separator.
    """

    entries: MutableMapping[str, str] = {}
    if not path.exists():
        return entries

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        entries[key.strip()] = value.strip()
    return entries


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


@dataclass(slots=True, frozen=True)
class Settings:
    """Immutable set of global settings.

    Holds the directories searched for configuration files and receiving
    logs, the seed used when a configuration does not set one and the
    logging format flag.
    """

    project_root: Path
    configs_dir: Path
    logs_dir: Path
    random_seed: int
    structured_logging: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_root": str(self.project_root),
            "configs_dir": str(self.configs_dir),
            "logs_dir": str(self.logs_dir),
            "random_seed": self.random_seed,
            "structured_logging": self.structured_logging,
        }

    @classmethod
    def from_env(
        cls,
        *,
        overrides: Mapping[str, Any] | None = None,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Create :class:`Settings` merging defaults, env file, env vars and overrides."""

        overrides = dict(overrides or {})

        env_mapping: MutableMapping[str, str] = {}
        if env_file is not None:
            env_mapping.update(load_env_file(Path(env_file).expanduser()))

        system_environ = dict(os.environ if environ is None else environ)

        project_root_value = overrides.pop("project_root", None)
        if project_root_value is None:
            project_root_value = env_mapping.get(f"{ENV_PREFIX}PROJECT_ROOT")
        if project_root_value is None:
            project_root_value = system_environ.get(f"{ENV_PREFIX}PROJECT_ROOT")

        if project_root_value is None:
            project_root = _project_root()
        else:
            project_root = Path(str(project_root_value)).expanduser().resolve()

        default_env_path = project_root / ".env"
        if env_file is None and default_env_path.exists():
            env_mapping.update(load_env_file(default_env_path))

        # System environment has the highest precedence after overrides.
        env_mapping.update(system_environ)

        def pull(name: str, *, default: Any, target: type) -> Any:
            key = f"{ENV_PREFIX}{name}"
            if name in overrides:
                value = overrides.pop(name)
                if target is Path:
                    return _expand_path(str(value), base=project_root)
                if isinstance(value, str):
                    return _parse_value(value, target=target)
                return value
            if key in env_mapping:
                raw = env_mapping[key]
                if target is Path:
                    return _expand_path(raw, base=project_root)
                return _parse_value(raw, target=target)
            if target is Path:
                return _expand_path(str(default), base=project_root)
            return default

        configs_dir = pull("CONFIGS_DIR", default="configs", target=Path)
        logs_dir = pull("LOGS_DIR", default="logs", target=Path)
        random_seed = pull("RANDOM_SEED", default=42, target=int)
        structured_logging = pull("STRUCTURED_LOGGING", default=False, target=bool)

        if overrides:
            unknown = ", ".join(sorted(overrides))
            raise KeyError(f"Unknown override(s): {unknown}")

        return cls(
            project_root=project_root,
            configs_dir=configs_dir,
            logs_dir=logs_dir,
            random_seed=int(random_seed),
            structured_logging=bool(structured_logging),
        )


_SETTINGS_CACHE: Settings | None = None


def get_settings(**kwargs: Any) -> Settings:
    """Return cached settings, building them on the first call.

    When keyword arguments are provided the cache is bypassed and freshly
    computed settings are returned. The cache itself can be cleared with
    :func:`reset_settings_cache`.
    """

    global _SETTINGS_CACHE
    if kwargs:
        return Settings.from_env(**kwargs)
    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings.from_env()
    return _SETTINGS_CACHE


def reset_settings_cache() -> None:
    """Clear the singleton cache (useful for tests)."""

    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
