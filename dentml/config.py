"""Configuration files: YAML or JSON mappings of option values."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .options import DentOptions, field_name

DEFAULT_CONFIG = Path(".dentml.yaml")


def read_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load option values from ``path`` (default ``./.dentml.yaml``).

    ``.json`` files are read as JSON, anything else as YAML. A missing file
    yields an empty mapping.
    """

    config_path = Path(path) if path is not None else DEFAULT_CONFIG
    if not config_path.exists():
        return {}
    text = config_path.read_text(encoding="utf-8")
    if config_path.suffix.lower() == ".json":
        data = json.loads(text) if text.strip() else {}
    else:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def _ignore_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def merge_options(
    config: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> DentOptions:
    """Combine defaults, a config mapping and explicit overrides.

    Later sources win, except ``ignore``, whose lists are concatenated with
    duplicates removed. ``None`` override values are treated as unset.
    """

    data: Dict[str, Any] = {}
    ignore: List[str] = []
    for source in (config or {}, overrides or {}):
        for key, value in source.items():
            name = field_name(key)
            if name == "ignore":
                ignore.extend(_ignore_list(value))
            elif value is not None or source is config:
                data[name] = value
    data["ignore"] = list(dict.fromkeys(ignore))
    return DentOptions.model_validate(data)


__all__ = ["DEFAULT_CONFIG", "merge_options", "read_config"]
