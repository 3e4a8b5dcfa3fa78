"""Configuration management utilities."""

from movetree.core.configs.loader import load_config, load_tree_config, save_config
from movetree.core.configs.schema import (
    AnnotationConfig,
    LoggingConfig,
    MoveTreeConfig,
    TreeConfig,
    config_from_dict,
    config_to_dict,
)

__all__ = [
    "AnnotationConfig",
    "LoggingConfig",
    "MoveTreeConfig",
    "TreeConfig",
    "config_from_dict",
    "config_to_dict",
    "load_config",
    "load_tree_config",
    "save_config",
]
