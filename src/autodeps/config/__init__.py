"""
Configuration management.

Configuration file parsing, environment resolution, analysis options.
"""

from autodeps.config.loader import AnalysisOptions, Config, load_config
from autodeps.config.resolver import resolve_config
from autodeps.config.singleton import GlobalConfig, get_config

__all__ = [
    "load_config",
    "Config",
    "AnalysisOptions",
    "resolve_config",
    "GlobalConfig",
    "get_config",
]
