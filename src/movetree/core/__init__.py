"""Core move-tree model, annotation extraction and shared utilities."""

from movetree.core.configs import load_config, load_tree_config, save_config
from movetree.core.utils.logging import setup_logging

__all__ = ["load_config", "load_tree_config", "save_config", "setup_logging"]
