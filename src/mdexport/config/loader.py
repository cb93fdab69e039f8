"""Configuration loader with YAML and environment variable support.

Reads ~/.config/mdexport/config.yaml when present and applies overrides
from MDEXPORT_* environment variables.

Environment variables:
- MDEXPORT_HISTORY_MAX_ITEMS: Override history.max_items
- MDEXPORT_HISTORY_STORAGE_DIR: Override history.storage_dir
- MDEXPORT_RENDER_THEME: Override render.theme
- MDEXPORT_RENDER_TITLE: Override render.title
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mdexport.models.config import Config

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "mdexport" / "config.yaml"

# (environment variable, section, key)
_ENV_OVERRIDES = (
    ("MDEXPORT_HISTORY_MAX_ITEMS", "history", "max_items"),
    ("MDEXPORT_HISTORY_STORAGE_DIR", "history", "storage_dir"),
    ("MDEXPORT_RENDER_THEME", "render", "theme"),
    ("MDEXPORT_RENDER_TITLE", "render", "title"),
)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Unlike Config.load, a missing file is not an error: every setting has
    a default.

    Args:
        config_path: Path to config file. If None, uses ~/.config/mdexport/config.yaml

    Returns:
        Validated Config object

    Raises:
        ValueError: If the file is not a mapping or a value fails validation
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")
    else:
        data = {}

    data = _apply_env_overrides(data)

    # Pydantic will validate the structure
    return Config(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply MDEXPORT_SECTION_KEY environment variables to config data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    result = {section: dict(values) for section, values in data.items() if isinstance(values, dict)}
    result.update({k: v for k, v in data.items() if not isinstance(v, dict)})

    for env_var, section, key in _ENV_OVERRIDES:
        value = os.environ.get(env_var)
        if value is None:
            continue
        result.setdefault(section, {})[key] = value

    return result
