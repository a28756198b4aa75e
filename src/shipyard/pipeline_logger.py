"""Structured JSON logging for pipeline execution.

Writes JSON-lines to disk so agents and humans can debug pipeline
runs after the fact. Each log entry is a single JSON object on one line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

_logger = logging.getLogger("shipyard")


def configure_logging(
    log_dir: str | Path, level: int = logging.DEBUG
) -> None:
    """Set up pipeline logging to write JSON-lines to a file.

    Args:
        log_dir: Directory to write ``pipeline.log`` into.
        level: Logging level (default: DEBUG).
    """
    log_path = Path(log_dir) / "pipeline.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(str(log_path))
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    _logger.addHandler(handler)
    _logger.setLevel(level)


def _log(event: dict[str, Any], level: int = logging.INFO) -> None:
    _logger.log(level, json.dumps(event, default=str))


def log_pipeline_start(workspace: str, build_number: int) -> None:
    _log({
        "event": "pipeline_start",
        "workspace": workspace,
        "build_number": build_number,
    })


def log_stage_start(stage_name: str, phase: str) -> None:
    _log({"event": "stage_start", "stage_name": stage_name, "phase": phase})


def log_stage_complete(stage_name: str, duration_ms: float) -> None:
    _log({
        "event": "stage_complete",
        "stage_name": stage_name,
        "duration_ms": round(duration_ms, 2),
    })


def log_stage_skipped(stage_name: str, reason: str) -> None:
    _log({"event": "stage_skipped", "stage_name": stage_name, "reason": reason})


def log_stage_failed(stage_name: str, error: str) -> None:
    _log(
        {"event": "stage_failed", "stage_name": stage_name, "error": error},
        logging.ERROR,
    )


def log_process_exit(command: str, exit_code: int, duration_ms: float) -> None:
    _log({
        "event": "process_exit",
        "command": command,
        "exit_code": exit_code,
        "duration_ms": round(duration_ms, 2),
    })


def log_cleanup_error(stage_name: str, error: str) -> None:
    _log(
        {"event": "cleanup_error", "stage_name": stage_name, "error": error},
        logging.WARNING,
    )


def log_pipeline_complete(success: bool, duration_ms: float) -> None:
    _log({
        "event": "pipeline_complete",
        "success": success,
        "duration_ms": round(duration_ms, 2),
    })
