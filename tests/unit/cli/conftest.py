"""Fixtures for CLI tests."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep CLI invocations from reconfiguring the root logger."""
    with patch("trackselect.cli._configure_logging"):
        yield


@pytest.fixture
def remote_compute(compute):
    """Route the CLI's RemoteComputeService to the in-memory fake."""
    with patch("trackselect.cli.run.RemoteComputeService") as mock_class:
        mock_class.return_value.__enter__.return_value = compute
        yield mock_class


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a manifest with a presenter (AV) and a presentation (V) track."""

    def _write(name: str = "mp.json", identifier: str = "mp-1") -> Path:
        path = tmp_path / "in" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "id": identifier,
                    "title": "Lecture",
                    "tracks": [
                        {
                            "id": f"{identifier}-presenter",
                            "flavor": "presenter/source",
                            "uri": "file:///ingest/presenter.mov",
                            "audio": True,
                            "video": True,
                            "tags": ["archive"],
                        },
                        {
                            "id": f"{identifier}-presentation",
                            "flavor": "presentation/source",
                            "uri": "file:///ingest/presentation.mov",
                            "audio": False,
                            "video": True,
                            "tags": ["archive"],
                        },
                    ],
                }
            )
        )
        return path

    return _write
