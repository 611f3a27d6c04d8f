"""trackselect - track selection and muxing for media packages."""

__version__ = "0.1.0"
