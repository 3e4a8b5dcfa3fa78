"""Typed configuration schemas for movetree.

These dataclasses are the single source of truth for every setting; YAML
files loaded through :func:`movetree.core.configs.load_config` are converted
with :func:`config_from_dict`.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TreeConfig:
    """Node id scheme of the move tree."""

    root_id: str = "root"
    mainline_prefix: str = "move"
    variation_prefix: str = "var"

    def __post_init__(self) -> None:
        """Validate prefixes."""
        if not self.root_id:
            raise ValueError("root_id must not be empty")
        if self.mainline_prefix == self.variation_prefix:
            msg = f"mainline_prefix and variation_prefix must differ (both '{self.mainline_prefix}')"
            raise ValueError(msg)


@dataclass
class AnnotationConfig:
    """Clock annotation extraction."""

    clock_marker: str = "clk"  # matches [%clk H:MM:SS]


@dataclass
class LoggingConfig:
    """Logging sinks."""

    level: str = "INFO"
    file: str | None = None

    def __post_init__(self) -> None:
        """Normalize and validate the level name."""
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.level}")


@dataclass
class MoveTreeConfig:
    """Top-level configuration combining all sub-configs."""

    tree: TreeConfig = field(default_factory=TreeConfig)
    annotations: AnnotationConfig = field(default_factory=AnnotationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_from_dict(data: dict[str, Any]) -> MoveTreeConfig:
    """Create MoveTreeConfig from a dictionary (e.g., from OmegaConf).

    Args:
        data: Dictionary with configuration values.

    Returns:
        MoveTreeConfig instance.
    """
    return MoveTreeConfig(
        tree=TreeConfig(**data.get("tree", {})),
        annotations=AnnotationConfig(**data.get("annotations", {})),
        logging=LoggingConfig(**data.get("logging", {})),
    )


def config_to_dict(config: MoveTreeConfig) -> dict[str, Any]:
    """Convert MoveTreeConfig to a dictionary for serialization."""
    return asdict(config)
