# sitescan/config/__init__.py
"""
Configuration for sitescan runs: the ScanConfig dataclass handed to every
command handler, and the TOML loader that fills it from config files.
"""
from .settings import ScanConfig, ScanMode, OutputFormat, DEFAULT_OUTPUT_FORMAT
from .loader import load_and_merge_configs, apply_config_sources

__all__ = [
    "ScanConfig",
    "ScanMode",
    "OutputFormat",
    "DEFAULT_OUTPUT_FORMAT",
    "load_and_merge_configs",
    "apply_config_sources",
]
