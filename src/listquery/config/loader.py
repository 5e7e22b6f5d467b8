from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from .models import ViewConfig

DEFAULT_VIEWS_PATH = Path("config/views.yaml")

# Settings a top-level `defaults` block may provide for every view
DEFAULTABLE_KEYS = ("page_size", "debounce_seconds")


def load_views_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load list view configuration from YAML file.

    Args:
        path: Optional path to views.yaml file. Defaults to config/views.yaml

    Returns:
        Dictionary with views configuration

    Raises:
        FileNotFoundError: If views config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = path or DEFAULT_VIEWS_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Views config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError("Views config must be a dictionary")
    if "version" not in config:
        raise ValueError("Views config must have 'version' field")

    defaults = config.get("defaults")
    if defaults is not None and not isinstance(defaults, dict):
        raise ValueError("Views config 'defaults' must be a dictionary if provided")

    views = config.get("views")
    if views is None:
        config["views"] = {}
    elif not isinstance(views, dict):
        raise ValueError("Views config 'views' must be a dictionary keyed by view name")
    else:
        for name, view in views.items():
            if not isinstance(view, dict):
                raise ValueError(f"View '{name}' must be a dictionary")

    return config


def list_view_names(config: Dict[str, Any]) -> List[str]:
    """Names of configured views in file order."""
    return list((config.get("views") or {}).keys())


def _normalize_view_entry(name: str, view: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Apply global defaults and predictable container types to one raw view entry."""
    normalized = deepcopy(view)
    normalized["name"] = name
    for key in DEFAULTABLE_KEYS:
        if key in defaults:
            normalized.setdefault(key, defaults[key])

    normalized["searchable_fields"] = list(normalized.get("searchable_fields") or [])
    normalized["filters"] = list(normalized.get("filters") or [])
    normalized["initial_filters"] = dict(normalized.get("initial_filters") or {})
    return normalized


def get_view_config(name: str, config: Dict[str, Any] | None = None) -> ViewConfig:
    """
    Build a validated ViewConfig for one named view.

    Args:
        name: View name under `views`
        config: Optional views config dict. If None, loads from default path.

    Returns:
        ViewConfig with `defaults` merged under the view's own settings

    Raises:
        KeyError: If the view is not configured
        ValueError: If the view fails validation
    """
    if config is None:
        config = load_views_config()

    views = config.get("views") or {}
    if name not in views:
        raise KeyError(f"View not configured: {name}")

    entry = _normalize_view_entry(name, views[name], config.get("defaults") or {})
    try:
        return ViewConfig.model_validate(entry)
    except ValidationError as e:
        raise ValueError(f"Invalid config for view '{name}': {e}") from e
