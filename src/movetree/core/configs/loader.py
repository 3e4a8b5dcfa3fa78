"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf

from movetree.core.configs.schema import MoveTreeConfig, config_from_dict, config_to_dict


def load_config(config_path: str | Path, overrides: list[str] | None = None) -> DictConfig:
    """Load a configuration file with optional overrides.

    Args:
        config_path: Path to the YAML configuration file.
        overrides: Optional list of CLI-style overrides (e.g., ["tree.root_id=start"]).

    Returns:
        Merged configuration as a DictConfig.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    config = OmegaConf.load(config_path)

    if overrides:
        override_conf = OmegaConf.from_dotlist(overrides)
        config = OmegaConf.merge(config, override_conf)

    return config


def load_tree_config(
    config_path: str | Path | None = None,
    overrides: list[str] | None = None,
) -> MoveTreeConfig:
    """Load a typed MoveTreeConfig, falling back to defaults without a file."""
    if config_path is None:
        if not overrides:
            return MoveTreeConfig()
        data = OmegaConf.to_container(OmegaConf.from_dotlist(overrides), resolve=True)
    else:
        data = OmegaConf.to_container(load_config(config_path, overrides), resolve=True)
    return config_from_dict(data or {})


def save_config(config: DictConfig | MoveTreeConfig | dict[str, Any], path: str | Path) -> None:
    """Save a configuration to a YAML file.

    Args:
        config: Configuration to save.
        path: Path to save the configuration to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(config, MoveTreeConfig):
        config = config_to_dict(config)
    if isinstance(config, dict):
        config = OmegaConf.create(config)

    OmegaConf.save(config, path)
