"""Configuration file loading for Masterless provisioning runs"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from masterless.exceptions import ConfigurationError
from masterless.models.config import ProvisionerConfig

# File key -> (ProvisionerConfig field, expected type)
CONFIG_KEYS = {
    "facter": ("facts", dict),
    "hiera_config_path": ("hiera_config_path", str),
    "module_paths": ("module_paths", list),
    "manifest_file": ("manifest_file", str),
    "manifest_dir": ("manifest_dir", str),
    "prevent_sudo": ("prevent_sudo", bool),
    "staging_directory": ("staging_dir", str),
    "working_directory": ("working_dir", str),
    "clean_staging_directory": ("clean_staging_dir", bool),
    "puppet_bin_dir": ("puppet_bin_dir", str),
    "ignore_exit_codes": ("ignore_exit_codes", bool),
    "extra_arguments": ("extra_arguments", list),
    "install_agent": ("install_agent", bool),
    "agent_url": ("agent_url", str),
}

# Local paths that resolve relative to the config file
LOCAL_PATH_KEYS = ("hiera_config_path", "manifest_file", "manifest_dir")


class ConfigLoader:
    """Loads provisioner settings from YAML"""

    def __init__(self, config_path: Union[str, Path]):
        """
        Initialize config loader

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)

    def load_raw(self) -> Dict[str, Any]:
        """
        Read the YAML file without interpreting it

        Raises:
            ConfigurationError: If the file is missing or not a mapping
        """
        if not self.config_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}"
            )

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}", context=str(e)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{self.config_path} must contain a mapping of settings"
            )
        return data

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> ProvisionerConfig:
        """
        Load configuration, with command-line values taking precedence

        Args:
            overrides: Settings keyed like the file, applied over it

        Returns:
            Resolved ProvisionerConfig
        """
        data = resolve_local_paths(self.load_raw(), self.config_path.parent)
        overrides = resolve_local_paths(overrides or {}, Path.cwd())

        # Facts given on the command line add to the file's facts
        if isinstance(data.get("facter"), dict) and isinstance(
            overrides.get("facter"), dict
        ):
            overrides["facter"] = {**data["facter"], **overrides["facter"]}

        data.update(overrides)
        return build_config(data)


def build_config(data: Dict[str, Any]) -> ProvisionerConfig:
    """
    Convert file-style settings into a ProvisionerConfig

    Args:
        data: Settings keyed like the YAML file

    Raises:
        ConfigurationError: On unknown keys or wrongly typed values
    """
    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            context=f"Valid keys: {', '.join(sorted(CONFIG_KEYS))}",
        )

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        field_name, expected_type = CONFIG_KEYS[key]
        if not isinstance(value, expected_type):
            raise ConfigurationError(
                f"{key} must be a {expected_type.__name__}, got {type(value).__name__}"
            )
        values[field_name] = value

    if "facts" in values:
        values["facts"] = {
            str(name): fact_value(name, value) for name, value in values["facts"].items()
        }
    if "extra_arguments" in values:
        values["extra_arguments"] = [str(arg) for arg in values["extra_arguments"]]

    return ProvisionerConfig.from_dict(values)


def fact_value(name: Any, value: Any) -> str:
    """
    Render a YAML fact value the way puppet sees it

    Booleans keep their YAML spelling (true/false) rather than Python's.

    Raises:
        ConfigurationError: For null, list or mapping values
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None or isinstance(value, (dict, list)):
        raise ConfigurationError(
            f"facter value for {name!r} must be a string, number or boolean"
        )
    return str(value)


def _resolve(path: str, base_dir: Path) -> str:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str(base_dir / candidate)


def resolve_local_paths(data: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    """Make relative local paths in file-style settings absolute"""
    resolved = dict(data)
    for key in LOCAL_PATH_KEYS:
        if isinstance(resolved.get(key), str) and resolved[key]:
            resolved[key] = _resolve(resolved[key], base_dir)
    if isinstance(resolved.get("module_paths"), list):
        resolved["module_paths"] = [
            _resolve(str(path), base_dir) for path in resolved["module_paths"]
        ]
    return resolved
