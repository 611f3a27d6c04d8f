"""CLI commands describing options and manifest contents."""

import json
from pathlib import Path

import click

from trackselect.cli.exit_codes import ExitCode
from trackselect.cli.output import error_exit
from trackselect.domain.enums import SubStream
from trackselect.domain.models import Flavor, Track
from trackselect.domain.serialization import ManifestError, load_manifest, track_to_dict
from trackselect.selection.hide_policy import hide_property
from trackselect.selection.options import describe_options


@click.command("options")
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format",
)
def options_command(json_output: bool) -> None:
    """Show the options of the select-tracks operation."""
    options = describe_options()
    properties = {
        hide_property("<type>", sub_stream): (
            f"Hide the {sub_stream.value} stream of tracks with flavor type <type>"
        )
        for sub_stream in SubStream
    }

    if json_output:
        click.echo(
            json.dumps(
                {"options": options, "workflow_properties": properties}, indent=2
            )
        )
        return

    width = max(len(key) for key in [*options, *properties])
    click.echo("Operation options:")
    for key, description in options.items():
        click.echo(f"  {key:<{width}}  {description}")
    click.echo("")
    click.echo("Workflow properties:")
    for key, description in properties.items():
        click.echo(f"  {key:<{width}}  {description}")


def _format_track(track: Track) -> str:
    streams = "".join(
        [
            "A" if track.has_audio else "-",
            "V" if track.has_video else "-",
        ]
    )
    tags = ",".join(sorted(track.tags)) or "-"
    identifier = track.identifier or "-"
    return f"{identifier}  {track.flavor}  [{streams}]  {tags}  {track.uri}"


@click.command("tracks")
@click.argument(
    "manifest",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--flavor",
    "-f",
    "flavor_str",
    default=None,
    help="Only list tracks matching this flavor (wildcards allowed, e.g. */source)",
)
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format",
)
def tracks_command(manifest: Path, flavor_str: str | None, json_output: bool) -> None:
    """List the tracks of a media package manifest.

    MANIFEST is the path to a JSON media package manifest.
    """
    try:
        mediapackage = load_manifest(manifest)
    except ManifestError as e:
        error_exit(str(e), ExitCode.MANIFEST_ERROR, json_output)

    if flavor_str:
        try:
            flavor = Flavor.parse(flavor_str)
        except ValueError as e:
            error_exit(str(e), ExitCode.INVALID_ARGUMENTS, json_output)
        tracks = mediapackage.get_tracks_by_flavor(flavor)
    else:
        tracks = list(mediapackage.tracks)

    if json_output:
        click.echo(
            json.dumps(
                {
                    "mediapackage": mediapackage.identifier,
                    "tracks": [track_to_dict(t) for t in tracks],
                },
                indent=2,
            )
        )
        return

    click.echo(f"Media package: {mediapackage.identifier}")
    if not tracks:
        click.echo("No tracks found.")
        return
    for track in tracks:
        click.echo(f"  {_format_track(track)}")
