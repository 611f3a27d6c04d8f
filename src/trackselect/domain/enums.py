"""Domain enums for trackselect.

This module contains the enums shared by the selection engine and the
configuration layer.
"""

from enum import Enum


class SubStream(Enum):
    """Sub-stream of a media track that can be shown or hidden."""

    AUDIO = "audio"
    VIDEO = "video"


class AudioMuxing(Enum):
    """Audio muxing mode for the all-video-visible branch.

    - NONE: Keep audio where it is, only strip hidden audio.
    - DUPLICATE: Copy the single audio stream onto every other video track.
    - FORCE: Move the single audio stream onto the force-target track.
    """

    NONE = "none"
    FORCE = "force"
    DUPLICATE = "duplicate"

    @classmethod
    def from_string(cls, value: str) -> "AudioMuxing":
        """Parse a configuration value into an AudioMuxing mode.

        Args:
            value: Configuration string (e.g., "duplicate").

        Returns:
            The matching AudioMuxing member.

        Raises:
            ValueError: If the value is not a known mode.
        """
        for mode in cls:
            if mode.value == value:
                return mode
        raise ValueError(f'invalid audio muxing parameter "{value}"')
