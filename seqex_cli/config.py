"""Configuration management for CLI"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from seqex.config import Settings
from seqex.exceptions import ConfigurationError as SettingsError
from seqex_cli.utils.exceptions import ConfigurationError


DEFAULT_ENDPOINT = "ingress"

# Configuration file location
CONFIG_DIR = Path.home() / ".seqex"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


@dataclass
class Profile:
    """Configuration profile

    `settings` holds a partial settings mapping, applied over the built-in
    defaults and followed by the `SEQEX_*` environment overrides.
    """
    endpoint: str = DEFAULT_ENDPOINT
    settings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    def to_settings(self, environ=None) -> Settings:
        """
        Resolve the profile into `Settings`

        # Raises
            ConfigurationError: If the settings mapping is invalid
        """
        try:
            return Settings.from_env(Settings.from_dict(self.settings), environ=environ)
        except SettingsError as e:
            raise ConfigurationError(str(e)) from e


class Config:
    """Configuration manager"""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.profiles: Dict[str, Profile] = {}
        self.default_profile = "default"
        self.load()

    def load(self):
        """
        Load configuration from file

        # Raises
            ConfigurationError: If the file is not valid YAML or holds unknown keys
        """
        if not self.config_file.exists():
            # Create default profile
            self.profiles["default"] = Profile()
            return

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid configuration file {self.config_file}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration file {self.config_file}: expected a mapping"
            )

        self.default_profile = data.get("default_profile", "default")
        for name, profile_data in (data.get("profiles") or {}).items():
            try:
                self.profiles[name] = Profile(**(profile_data or {}))
            except TypeError as e:
                raise ConfigurationError(f"Invalid profile '{name}': {e}") from e

        # Ensure default profile exists
        if self.default_profile not in self.profiles:
            self.profiles[self.default_profile] = Profile()

    def save(self):
        """Save configuration to file"""
        # Create config directory if it doesn't exist
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "profiles": {
                name: profile.to_dict()
                for name, profile in self.profiles.items()
            }
        }

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """
        Get profile by name or default

        # Arguments
            name: Profile name, defaults to default_profile

        # Returns
            Profile object

        # Raises
            ConfigurationError: If a named profile does not exist
        """
        profile_name = name or self.default_profile

        if profile_name not in self.profiles:
            if name:
                raise ConfigurationError(
                    f"Profile '{name}' not found in {self.config_file}"
                )
            self.profiles[profile_name] = Profile()

        return self.profiles[profile_name]

    def add_profile(self, name: str, profile: Profile):
        """
        Add or update a profile

        # Arguments
            name: Profile name
            profile: Profile object
        """
        self.profiles[name] = profile

    def delete_profile(self, name: str):
        """
        Delete a profile

        # Arguments
            name: Profile name
        """
        if name in self.profiles:
            del self.profiles[name]
            # If deleted profile was default, switch to 'default'
            if self.default_profile == name:
                self.default_profile = "default"
                if "default" not in self.profiles:
                    self.profiles["default"] = Profile()

    def set_default_profile(self, name: str):
        """
        Set default profile

        # Arguments
            name: Profile name
        """
        if name not in self.profiles:
            self.profiles[name] = Profile()
        self.default_profile = name
