"""Configuration management for trackselect.

Configuration is layered with the following precedence:
1. CLI flags (highest priority)
2. Environment variables (TRACKSELECT_*)
3. Config file (~/.trackselect/config.toml)
4. Default values (lowest priority)
"""

from trackselect.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from trackselect.config.env import EnvReader
from trackselect.config.loader import (
    TomlParseError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from trackselect.config.logging_factory import (
    apply_cli_overrides,
    setup_cli_logging,
)
from trackselect.config.models import (
    ComputeConfig,
    LoggingConfig,
    ProcessingConfig,
    TrackSelectConfig,
    WorkspaceConfig,
)

__all__ = [
    # Models
    "ComputeConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "TrackSelectConfig",
    "WorkspaceConfig",
    # Loader
    "TomlParseError",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Layering
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
    # Logging
    "apply_cli_overrides",
    "setup_cli_logging",
]
