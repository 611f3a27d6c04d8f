"""The select-tracks workflow operation.

Usage:
    from trackselect.selection import SelectTracksOperation

    operation = SelectTracksOperation(compute, workspace)
    result = operation.start(mediapackage, operation_config, workflow_config)
"""

from trackselect.selection.classifier import SlotState, TrackSlot, build_slots
from trackselect.selection.dispatcher import JobDispatcher, TrackJobResult
from trackselect.selection.engine import CompositionEngine, CompositionResult
from trackselect.selection.exceptions import (
    CompositionError,
    ConfigurationError,
    JobFailedError,
    OperationError,
    SelectTracksError,
)
from trackselect.selection.handler import (
    Action,
    OperationResult,
    SelectTracksOperation,
)
from trackselect.selection.options import (
    SelectTracksOptions,
    describe_options,
    parse_options,
)
from trackselect.selection.tags import TagDiff

__all__ = [
    # Operation
    "Action",
    "OperationResult",
    "SelectTracksOperation",
    # Options
    "SelectTracksOptions",
    "describe_options",
    "parse_options",
    # Composition
    "CompositionEngine",
    "CompositionResult",
    "JobDispatcher",
    "SlotState",
    "TagDiff",
    "TrackJobResult",
    "TrackSlot",
    "build_slots",
    # Exceptions
    "CompositionError",
    "ConfigurationError",
    "JobFailedError",
    "OperationError",
    "SelectTracksError",
]
