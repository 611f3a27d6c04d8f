"""CLI command running select-tracks on media package manifests.

Each manifest is processed by one worker; with --workers several manifests
run in parallel, every one logging under its own media package context.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import click

from trackselect.cli.exit_codes import ExitCode
from trackselect.cli.output import (
    ManifestOutcome,
    batch_report,
    error_exit,
    format_outcome,
)
from trackselect.compute.client import RemoteComputeService
from trackselect.config.loader import TomlParseError, get_config
from trackselect.domain.serialization import (
    ManifestError,
    load_manifest,
    save_manifest,
    track_to_dict,
)
from trackselect.selection.exceptions import (
    CompositionError,
    ConfigurationError,
    JobFailedError,
    SelectTracksError,
)
from trackselect.selection.handler import SelectTracksOperation
from trackselect.selection.options import (
    load_yaml_mapping,
    parse_key_values,
    parse_options,
)
from trackselect.workspace.local import LocalWorkspace

logger = logging.getLogger(__name__)

# Lock for synchronizing output across worker threads
_output_lock = threading.Lock()


def exit_code_for(error: Exception) -> ExitCode:
    """Map an operation error to its CLI exit code."""
    if isinstance(error, ConfigurationError):
        return ExitCode.OPTIONS_ERROR
    if isinstance(error, JobFailedError):
        return ExitCode.JOB_FAILED
    if isinstance(error, CompositionError):
        return ExitCode.COMPOSITION_ERROR
    if isinstance(error, ManifestError):
        return ExitCode.MANIFEST_ERROR
    return ExitCode.OPERATION_FAILED


def _validate_workers(
    ctx: click.Context, param: click.Parameter, value: int | None
) -> int | None:
    """Validate --workers option value.

    Raises:
        click.BadParameter: If value is less than 1.
    """
    if value is not None and value < 1:
        raise click.BadParameter("must be at least 1")
    return value


def _load_mapping(
    path: Path | None, pairs: tuple[str, ...], json_output: bool
) -> dict[str, str]:
    """Merge a YAML mapping file with key=value overrides."""
    try:
        result = load_yaml_mapping(path) if path is not None else {}
        result.update(parse_key_values(pairs))
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.OPTIONS_ERROR, json_output)
    return result


def _plan_destinations(
    manifests: tuple[Path, ...], output_dir: Path | None, json_output: bool
) -> list[tuple[Path, Path]]:
    """Pair every manifest with the file its result is written to.

    Two manifests writing the same file would race, so that is an error.
    """
    plan = [(m, m if output_dir is None else output_dir / m.name) for m in manifests]
    claimed: dict[Path, Path] = {}
    for manifest, destination in plan:
        key = destination.resolve()
        if key in claimed:
            error_exit(
                f"{claimed[key]} and {manifest} would both be written to "
                f"{destination}",
                ExitCode.INVALID_ARGUMENTS,
                json_output,
            )
        claimed[key] = manifest
    return plan


def _process_manifest(
    operation: SelectTracksOperation,
    manifest: Path,
    destination: Path,
    operation_config: dict[str, str],
    workflow_config: dict[str, str],
) -> ManifestOutcome:
    """Run the operation on one manifest (worker function)."""
    mediapackage_id = None
    try:
        mediapackage = load_manifest(manifest)
        mediapackage_id = mediapackage.identifier
        result = operation.start(mediapackage, operation_config, workflow_config)
        save_manifest(result.media_package, destination)
    except (SelectTracksError, ManifestError) as e:
        logger.error("Select tracks failed for %s: %s", manifest, e)
        return ManifestOutcome(
            manifest=manifest,
            success=False,
            mediapackage_id=mediapackage_id,
            error_message=str(e),
            exit_code=exit_code_for(e),
        )

    return ManifestOutcome(
        manifest=manifest,
        success=True,
        mediapackage_id=mediapackage_id,
        output=destination,
        queue_time_ms=result.queue_time_ms,
        job_count=result.job_count,
        tracks=[track_to_dict(t) for t in result.tracks],
    )


@click.command("run")
@click.argument(
    "manifests",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@click.option(
    "--options-file",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with operation options (source-flavor, target-flavor, ...)",
)
@click.option(
    "--option",
    "-o",
    "option_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Operation option, overrides --options-file (repeatable)",
)
@click.option(
    "--workflow-file",
    "-w",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with workflow properties (hide_<type>_audio, ...)",
)
@click.option(
    "--property",
    "-p",
    "property_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Workflow property, overrides --workflow-file (repeatable)",
)
@click.option(
    "--compute-url",
    default=None,
    help="Base URL of the compute service (default: from config)",
)
@click.option(
    "--workspace",
    "workspace_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root directory (default: from config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    callback=_validate_workers,
    help="Number of manifests processed in parallel (default: from config or 1)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory receiving the updated manifests",
)
@click.option(
    "--in-place",
    is_flag=True,
    default=False,
    help="Overwrite the input manifests",
)
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    manifests: tuple[Path, ...],
    options_file: Path | None,
    option_pairs: tuple[str, ...],
    workflow_file: Path | None,
    property_pairs: tuple[str, ...],
    compute_url: str | None,
    workspace_root: Path | None,
    workers: int | None,
    output_dir: Path | None,
    in_place: bool,
    json_output: bool,
) -> None:
    """Run select-tracks on media package manifests.

    MANIFESTS are JSON media package manifests. Updated manifests are
    written to --output-dir, or over the inputs with --in-place.

    Examples:

        trackselect run -o source-flavor=*/source -o target-flavor=*/work \\
            --output-dir out/ mp.json

        trackselect run -c options.yaml -p hide_presentation_audio=true \\
            --in-place --workers 4 *.json
    """
    if in_place == (output_dir is not None):
        error_exit(
            "Specify exactly one of --output-dir or --in-place.",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )

    plan = _plan_destinations(manifests, output_dir, json_output)

    operation_config = _load_mapping(options_file, option_pairs, json_output)
    workflow_config = _load_mapping(workflow_file, property_pairs, json_output)

    # Fail before touching any manifest
    try:
        parse_options(operation_config)
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.OPTIONS_ERROR, json_output)

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        config = get_config(
            config_path=config_path,
            compute_url=compute_url,
            workspace_root=workspace_root,
            workers=workers,
            strict=config_path is not None,
        )
    except (TomlParseError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR, json_output)

    if not config.compute.url:
        error_exit(
            "No compute service URL configured. Use --compute-url, "
            "TRACKSELECT_COMPUTE_URL or [compute] url in the config file.",
            ExitCode.CONFIG_ERROR,
            json_output,
        )

    effective_workers = config.processing.workers
    logger.info(
        "Processing %d manifest(s) with %d worker(s), compute service %s",
        len(manifests),
        effective_workers,
        config.compute.url,
    )

    workspace = LocalWorkspace(config.workspace.root)
    outcomes: list[ManifestOutcome] = []
    batch_start_time = time.time()

    with RemoteComputeService(config.compute) as compute:
        operation = SelectTracksOperation(compute, workspace)
        with ThreadPoolExecutor(max_workers=effective_workers) as executor:
            futures = {}
            for manifest, destination in plan:
                future = executor.submit(
                    _process_manifest,
                    operation,
                    manifest,
                    destination,
                    operation_config,
                    workflow_config,
                )
                futures[future] = manifest

            for future in as_completed(futures):
                outcome = future.result()
                outcomes.append(outcome)
                if not json_output:
                    with _output_lock:
                        click.echo(format_outcome(outcome))

    batch_duration = time.time() - batch_start_time
    failed = [o for o in outcomes if not o.success]

    if json_output:
        order = {m: i for i, m in enumerate(manifests)}
        outcomes.sort(key=lambda o: order[o.manifest])
        report = batch_report(outcomes, effective_workers, batch_duration)
        click.echo(json.dumps(report, indent=2))
    else:
        click.echo("")
        click.echo(
            f"Processed {len(outcomes)} manifest(s): "
            f"{len(outcomes) - len(failed)} ok, {len(failed)} failed"
        )

    if failed:
        if len(outcomes) == 1:
            sys.exit(failed[0].exit_code)
        sys.exit(ExitCode.OPERATION_FAILED)
    sys.exit(ExitCode.SUCCESS)
