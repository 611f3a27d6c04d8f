"""Report rendering for the CLI.

Per-manifest outcomes of a run are printed as one line each, or collected
into a single JSON document with --json. Errors that stop a command go to
stderr in the same two shapes.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NoReturn

import click

from trackselect.cli.exit_codes import ExitCode


@dataclass
class ManifestOutcome:
    """Result of processing one manifest."""

    manifest: Path
    success: bool
    mediapackage_id: str | None = None
    output: Path | None = None
    queue_time_ms: int = 0
    job_count: int = 0
    tracks: list[dict[str, Any]] = field(default_factory=list)
    error_message: str | None = None
    exit_code: ExitCode = ExitCode.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "manifest": str(self.manifest),
            "success": self.success,
            "mediapackage": self.mediapackage_id,
        }
        if self.success:
            data["output"] = str(self.output) if self.output else None
            data["queue_time_ms"] = self.queue_time_ms
            data["jobs"] = self.job_count
            data["tracks"] = self.tracks
        else:
            data["error"] = {
                "code": self.exit_code.name,
                "message": self.error_message,
            }
        return data


def format_outcome(outcome: ManifestOutcome) -> str:
    """Render one outcome as a status line."""
    if not outcome.success:
        return (
            f"[FAILED] {outcome.manifest}: {outcome.error_message} "
            f"({outcome.exit_code.name})"
        )
    return (
        f"[OK] {outcome.manifest} -> {outcome.output}: "
        f"{len(outcome.tracks)} track(s), {outcome.job_count} job(s), "
        f"queue time {outcome.queue_time_ms} ms"
    )


def batch_report(
    outcomes: Sequence[ManifestOutcome], workers: int, duration_seconds: float
) -> dict[str, Any]:
    """Build the JSON document for a run over several manifests."""
    failed = sum(1 for o in outcomes if not o.success)
    return {
        "workers": workers,
        "summary": {
            "total": len(outcomes),
            "success": len(outcomes) - failed,
            "failed": failed,
            "jobs": sum(o.job_count for o in outcomes),
            "queue_time_ms": sum(o.queue_time_ms for o in outcomes),
            "duration_seconds": round(duration_seconds, 2),
        },
        "results": [o.to_dict() for o in outcomes],
    }


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print an error to stderr and exit with the given code."""
    if json_output:
        payload = {"status": "failed", "error": {"code": code.name, "message": message}}
        click.echo(json.dumps(payload), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))
