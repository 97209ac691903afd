"""Masterless configuration loading"""

from .config_loader import ConfigLoader, build_config, resolve_local_paths

__all__ = ["ConfigLoader", "build_config", "resolve_local_paths"]
