"""Select-tracks workflow operation.

Entry point that ties option parsing, track classification, composition
and the final flavor/tag rewrite together for one media package.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from trackselect.compute.interface import ComputeService
from trackselect.domain.models import MediaPackage, Track
from trackselect.logging.context import operation_context
from trackselect.selection.classifier import build_slots
from trackselect.selection.dispatcher import JobDispatcher
from trackselect.selection.engine import CompositionEngine
from trackselect.selection.options import normalize_configuration, parse_options
from trackselect.selection.rewriter import rewrite_tracks
from trackselect.workspace.interface import Workspace

logger = logging.getLogger(__name__)

OPERATION_NAME = "select-tracks"


class Action(Enum):
    """What the workflow should do after the operation."""

    CONTINUE = "continue"


@dataclass
class OperationResult:
    """Result of running the operation on one media package."""

    action: Action
    media_package: MediaPackage
    queue_time_ms: int = 0
    tracks: list[Track] = field(default_factory=list)
    job_count: int = 0


class SelectTracksOperation:
    """Selects, muxes and re-flavors the tracks of a media package.

    Instances hold no per-package state and may be shared between threads;
    each call to start() runs its jobs strictly one after another.

    Example:
        operation = SelectTracksOperation(compute, workspace)
        result = operation.start(
            mediapackage,
            {"source-flavor": "*/source", "target-flavor": "*/work"},
            {"hide_presentation_audio": "true"},
        )
    """

    def __init__(self, compute: ComputeService, workspace: Workspace) -> None:
        self._compute = compute
        self._workspace = workspace

    def start(
        self,
        mediapackage: MediaPackage,
        operation_config: Mapping[str, Any],
        workflow_config: Mapping[str, Any] | None = None,
    ) -> OperationResult:
        """Run the operation.

        Args:
            mediapackage: Package to process. Produced tracks are added to it.
            operation_config: Operation options (source-flavor, target-flavor,
                target-tags, audio-muxing, force-target).
            workflow_config: Workflow properties with the hide_<type>_<audio|video>
                flags.

        Returns:
            OperationResult with action CONTINUE.

        Raises:
            ConfigurationError: For invalid options or a missing force target.
            CompositionError: If no track shows its video.
            JobFailedError: If a compute job fails.
            OperationError: For compute transport or workspace failures.
        """
        with operation_context(mediapackage.identifier, OPERATION_NAME):
            logger.info("Running select tracks on %s", mediapackage.identifier)
            options = parse_options(operation_config)

            tracks = mediapackage.get_tracks_by_flavor(options.source_flavor)
            if not tracks:
                logger.info(
                    "No audio/video tracks with flavor '%s' found to prepare",
                    options.source_flavor,
                )
                return OperationResult(Action.CONTINUE, mediapackage)

            slots = build_slots(tracks, normalize_configuration(workflow_config or {}))
            for slot in slots:
                logger.debug(
                    "%s: audio=%s (hidden=%s) video=%s (hidden=%s)",
                    slot.source,
                    slot.source.has_audio,
                    slot.hide_audio,
                    slot.source.has_video,
                    slot.hide_video,
                )

            engine = CompositionEngine(JobDispatcher(self._compute, self._workspace))
            composition = engine.compose(
                mediapackage,
                slots,
                audio_muxing=options.audio_muxing,
                force_target=options.force_target,
            )
            rewrite_tracks(
                composition.tracks, options.target_flavor, options.target_tags
            )

            logger.info(
                "Select tracks operation completed, queue time %d ms",
                composition.queue_time_ms,
            )
            return OperationResult(
                Action.CONTINUE,
                mediapackage,
                queue_time_ms=composition.queue_time_ms,
                tracks=composition.tracks,
                job_count=composition.job_count,
            )
