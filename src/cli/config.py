"""Configuration loading."""

from pathlib import Path
from typing import Optional

import yaml

from .config_models import SpendwatchConfig

DEFAULT_CONFIG_PATH = Path.home() / ".spendwatch" / "config.yaml"


def find_config() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / "config.yaml",
        DEFAULT_CONFIG_PATH,
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config_model(config_path: Optional[Path] = None) -> SpendwatchConfig:
    """Load configuration as Pydantic model with validation."""
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(base_config, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(base_config).__name__}")

    try:
        return SpendwatchConfig.from_dict(base_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")


def write_default_config(config_path: Path = DEFAULT_CONFIG_PATH) -> bool:
    """Write a default config file. Returns False if one already exists."""
    if config_path.exists():
        return False
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = SpendwatchConfig().model_dump(mode="json")
    with open(config_path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return True
