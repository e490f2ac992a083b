from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import numpy as np

from evomut.config.logging_conf import configure_logging
from evomut.config.settings import Settings, reset_settings_cache
from evomut.mutation.composite import build_multi_mutation
from evomut.mutation.repair import BoundRepair
from evomut.mutation.solution import DoubleSolution


def _cleanup_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    logging.getLogger("evomut.mutation.composite").setLevel(logging.NOTSET)


def teardown_function() -> None:  # pragma: no cover - cleanup helper
    _cleanup_logging()
    reset_settings_cache()


def _settings(tmp_path: Path) -> Settings:
    return Settings.from_env(
        overrides={"project_root": tmp_path, "LOGS_DIR": tmp_path / "logs"}, environ={}
    )


def test_configure_logging_structured_output(tmp_path: Path) -> None:
    stream = io.StringIO()
    settings = _settings(tmp_path)

    configure_logging(settings=settings, structured=True, stream=stream)

    logger = logging.getLogger("config.tests")
    logger.info("structured message", extra={"step": "load"})

    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload["message"] == "structured message"
    assert "lineno" not in payload
    assert payload["step"] == "load"
    assert payload["logger"] == "config.tests"
    assert (settings.logs_dir / "evomut.log").exists()


def test_configure_logging_plaintext(tmp_path: Path) -> None:
    stream = io.StringIO()
    configure_logging(settings=_settings(tmp_path), structured=False, stream=stream)

    logging.getLogger("config.tests").warning("plain message")

    output = stream.getvalue()
    assert "plain message" in output
    assert "WARNING" in output


def test_dispatch_trace_with_module_level(tmp_path: Path) -> None:
    stream = io.StringIO()
    configure_logging(
        settings=_settings(tmp_path),
        level=logging.DEBUG,
        structured=False,
        stream=stream,
        module_levels={"evomut.mutation.composite": "DEBUG"},
    )
    operator = build_multi_mutation(
        0.1,
        BoundRepair(),
        np.random.default_rng(0),
        p_uniform=1,
        p_polynomial=0,
        p_linked_polynomial=0,
        p_non_uniform=0,
        perturbation_uniform=0.5,
        distribution_index_polynomial=20.0,
        distribution_index_linked_polynomial=20.0,
        perturbation_non_uniform=0.5,
        max_iterations_non_uniform=10,
    )
    operator.execute(DoubleSolution([0.5], [0.0], [1.0]))

    output = stream.getvalue()
    assert "Composite mutation ready" in output
    assert "to uniform" in output


def test_structured_dispatch_records_carry_draw_and_strategy(tmp_path: Path) -> None:
    stream = io.StringIO()
    configure_logging(
        settings=_settings(tmp_path),
        level=logging.DEBUG,
        structured=True,
        stream=stream,
        module_levels={"evomut.mutation.composite": "DEBUG"},
    )
    operator = build_multi_mutation(
        0.1,
        BoundRepair(),
        np.random.default_rng(3),
        p_uniform=0,
        p_polynomial=0,
        p_linked_polynomial=1,
        p_non_uniform=0,
        perturbation_uniform=0.5,
        distribution_index_polynomial=20.0,
        distribution_index_linked_polynomial=20.0,
        perturbation_non_uniform=0.5,
        max_iterations_non_uniform=10,
    )
    for _ in range(3):
        operator.execute(DoubleSolution([0.5, 0.5], [0.0, 0.0], [1.0, 1.0]))

    records = [json.loads(line) for line in stream.getvalue().strip().splitlines()]
    dispatches = [r for r in records if "draw" in r]
    assert len(dispatches) == 3
    assert {r["strategy"] for r in dispatches} == {"linked_polynomial"}
    assert all(0.0 <= r["draw"] < 1.0 for r in dispatches)
