from __future__ import annotations

import yaml
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union


@dataclass
class PreviewConfig:
    """Configuration for the LaTeX → HTML preview."""

    debounce_seconds: float = 0.8  # quiet period before an edit is compiled
    max_macro_depth: int = 32  # nesting limit for \newcommand expansion
    styles: bool = True  # prepend the fixed preview style block
    packages: list[str] = field(default_factory=list)  # extra packages \usepackage may load


@dataclass
class Config:
    """Top-level configuration."""

    preview: PreviewConfig = field(default_factory=PreviewConfig)


def load_config(path: Optional[Path]) -> Config:
    """Load configuration from a YAML file, returning defaults if *path* is None or missing."""
    if path is None or not path.exists():
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    return load_config_from_dict(data)


def load_config_from_dict(data: Mapping[str, Any]) -> Config:
    """Build a Config from a mapping using the ``config.yaml`` schema.

    Unknown keys are ignored.
    """
    if not isinstance(data, Mapping):
        raise TypeError("config data must be a mapping")

    preview_data = data.get("preview") or {}
    if not isinstance(preview_data, Mapping):
        raise TypeError("'preview' config section must be a mapping")

    preview_fields = {
        k: v
        for k, v in preview_data.items()
        if k in PreviewConfig.__dataclass_fields__
    }
    if "packages" in preview_fields:
        preview_fields["packages"] = [str(p) for p in preview_fields["packages"] or []]

    return Config(preview=PreviewConfig(**preview_fields))


def resolve_config(config: Union[Config, Mapping[str, Any], str, Path, None]) -> Config:
    """Accept any supported config form and return a Config."""
    if config is None:
        return Config()
    if isinstance(config, Config):
        return config
    if isinstance(config, Mapping):
        return load_config_from_dict(config)
    if isinstance(config, (str, Path)):
        return load_config(Path(config))
    raise TypeError(
        "config must be None, Config, dict-like mapping, or a config file path."
    )
