"""Hide-policy resolution.

Workflow configuration can hide the audio or video sub-stream of every
track with a given flavor type via keys named hide_<type>_<substream>,
e.g. hide_presenter_audio=true.
"""

from __future__ import annotations

from collections.abc import Mapping

from trackselect.domain.enums import SubStream


def hide_property(flavor_type: str, sub_stream: SubStream) -> str:
    """Return the configuration key controlling a sub-stream of a flavor type."""
    return f"hide_{flavor_type}_{sub_stream.value}"


def resolve_hidden(
    configuration: Mapping[str, str],
    flavor_type: str | None,
    sub_stream: SubStream,
) -> bool:
    """Decide whether a sub-stream is hidden for a flavor type.

    Only "true" (case-insensitive) hides; missing or unparsable values
    count as not hidden.
    """
    if flavor_type is None:
        return False
    value = configuration.get(hide_property(flavor_type, sub_stream))
    return value is not None and value.strip().lower() == "true"
