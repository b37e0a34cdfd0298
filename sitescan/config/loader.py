# sitescan/config/loader.py
"""
Handles loading and merging of configuration from TOML files, and layering
those values under the command-line options of a single invocation.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
import structlog

from sitescan.exceptions import ConfigError

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".sitescan.toml", "sitescan.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "sitescan"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# toml key -> ScanConfig attribute.
CONFIG_KEY_TO_SCANCONFIG_ATTR_MAP: Dict[str, str] = {
    "ignore_patterns": "ignore_patterns",
    "ignore": "ignore_patterns",
    "use_default_ignores": "use_default_ignores",
    "follow_symlinks": "follow_symlinks",
    "output_format": "output_format",
    "absolute_paths": "absolute_paths",
    "summary": "show_summary",
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("sitescan", {})
    return data

def load_and_merge_configs(cwd: Optional[Path] = None) -> Dict[str, Any]:
    # user config first, then the first project config found in cwd.
    project_dir = cwd or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        project_profiles = project_settings.pop("profiles", None)
        if isinstance(project_profiles, dict):
            # project profiles extend the user ones, same names win.
            user_profiles = merged_toml_data.get("profiles")
            if isinstance(user_profiles, dict):
                user_profiles.update(project_profiles)
            else:
                merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def _map_toml_values(values: Dict[str, Any]) -> Dict[str, Any]:
    mapped: Dict[str, Any] = {}
    for toml_key, attr in CONFIG_KEY_TO_SCANCONFIG_ATTR_MAP.items():
        if toml_key not in values:
            continue
        value = values[toml_key]
        if attr == "ignore_patterns":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                raise ConfigError(f"'{toml_key}' must be a list of glob strings, got {value!r}")
        mapped[attr] = value
    return mapped

def apply_config_sources(
    raw_config: Dict[str, Any],
    profile_name: Optional[str] = None,
) -> Dict[str, Any]:
    # flattens global keys and the selected profile into ScanConfig kwargs.
    options = _map_toml_values(raw_config)
    if profile_name:
        profiles = raw_config.get("profiles", {})
        profile_values = profiles.get(profile_name) if isinstance(profiles, dict) else None
        if not isinstance(profile_values, dict):
            raise ConfigError(f"config profile '{profile_name}' not found")
        log.info("applying_profile_settings", profile=profile_name)
        options.update(_map_toml_values(profile_values))
    return options
