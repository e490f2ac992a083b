"""Configuration loading and validation utilities.

YAML files are parsed with PyYAML and validated against the Pydantic models
of :mod:`evomut.config.schemas`. Every failure (missing file, broken YAML,
schema violation) surfaces as :class:`ConfigError`, the same exception raised
when an operator is constructed with invalid parameters.

Example
-------
>>> from evomut.config.loader import load_config
>>> from evomut.config.schemas import MultiMutationConfig
>>>
>>> config = load_config("configs/multi_mutation.yaml", MultiMutationConfig)
>>> print(config.probability)
0.1
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from .settings import get_settings

__all__ = ["ConfigError", "load_config", "parse_config", "save_config"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigError(Exception):
    """Raised when a configuration is missing, malformed or out of domain."""

    pass


def _resolve_config_path(file_path: Union[str, Path], project_root: Optional[Path] = None) -> Path:
    """Resolve configuration file path.

    Parameters
    ----------
    file_path : str or Path
        Path to configuration file (absolute or relative)
    project_root : Path, optional
        Project root directory. If None, the path is looked up under
        ``Settings.project_root`` and then under ``Settings.configs_dir``.

    Returns
    -------
    Path
        Resolved absolute path

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    """
    path = Path(file_path)

    if path.is_absolute() and path.exists():
        return path

    if project_root is None:
        settings = get_settings()
        candidates = [settings.project_root / path, settings.configs_dir / path]
    else:
        candidates = [project_root / path]

    for resolved in candidates:
        if resolved.exists():
            return resolved

    if path.exists():
        return path.resolve()

    raise FileNotFoundError(f"Config file not found: {file_path}")


def _default_config(schema: Type[T], reason: str) -> T:
    """Return ``schema()`` for non-strict loading, or raise when it has required fields."""
    try:
        return schema()
    except ValidationError as e:
        raise ConfigError(f"{reason}; {schema.__name__} has no default for every field") from e


def parse_config(data: Mapping[str, Any], schema: Type[T], *, source: str = "<mapping>") -> T:
    """Validate an already parsed mapping against ``schema``.

    Raises
    ------
    ConfigError
        When validation fails; the Pydantic error is chained.
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed for {source}:\n{e}") from e


def load_config(
    file_path: Union[str, Path],
    schema: Type[T],
    *,
    project_root: Optional[Path] = None,
    strict: bool = True,
) -> T:
    """Load and validate YAML configuration file.

    Parameters
    ----------
    file_path : str or Path
        Path to YAML configuration file
    schema : Type[BaseModel]
        Pydantic model class to validate against
    project_root : Path, optional
        Project root directory for path resolution
    strict : bool, default=True
        If True, raise exception on validation errors.
        If False, log warnings and return default instance; a schema with
        required fields then raises ConfigError.

    Returns
    -------
    BaseModel
        Validated configuration object

    Raises
    ------
    ConfigError
        If file loading or validation fails (only when strict=True), or
        when no default instance of ``schema`` can be built
    """
    try:
        resolved_path = _resolve_config_path(file_path, project_root)

        logger.debug("Loading config from: %s", resolved_path)
        with open(resolved_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            raise ConfigError(f"Empty configuration file: {file_path}")
        if not isinstance(data, Mapping):
            raise ConfigError(f"Configuration root must be a mapping: {file_path}")

        try:
            config = parse_config(data, schema, source=str(file_path))
        except ConfigError as e:
            if strict:
                raise
            logger.warning("%s", e)
            logger.warning("Returning default configuration")
            return _default_config(schema, str(e).splitlines()[0])
        logger.info("Successfully loaded config: %s", resolved_path.name)
        return config

    except FileNotFoundError as e:
        if strict:
            raise ConfigError(f"Configuration file not found: {file_path}") from e
        logger.warning("Config file not found: %s, using defaults", file_path)
        return _default_config(schema, f"Configuration file not found: {file_path}")
    except yaml.YAMLError as e:
        error_msg = f"Invalid YAML syntax in {file_path}: {e}"
        if strict:
            raise ConfigError(error_msg) from e
        logger.warning(error_msg)
        return _default_config(schema, f"Invalid YAML syntax in {file_path}")


def save_config(
    config: BaseModel, file_path: Union[str, Path], *, project_root: Optional[Path] = None
) -> Path:
    """Save Pydantic configuration model to YAML file.

    Parameters
    ----------
    config : BaseModel
        Configuration object to save
    file_path : str or Path
        Destination file path
    project_root : Path, optional
        Project root directory for path resolution

    Returns
    -------
    Path
        Absolute path to saved file
    """
    path = Path(file_path)

    if not path.is_absolute():
        if project_root is None:
            project_root = get_settings().project_root
        path = project_root / path

    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="python", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

    logger.info("Saved configuration to: %s", path)
    return path
