"""
Configuration management for the course dashboard
Handles loading and saving service settings and display preferences
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional


# Environment variables that take precedence over settings.json
ENV_OVERRIDES = {
    "edusphere_service_url": "EDUSPHERE_SERVICE_URL",
    "database_path": "COURSEDASH_DB_PATH",
}


class Config:
    """Configuration manager for the dashboard service"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to ./config)
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.preferences_file = self.config_dir / "preferences.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.preferences = self._load_json(self.preferences_file, self._default_preferences())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            # Keys added after the file was written fall back to defaults
            return {**default, **loaded}
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default service settings"""
        return {
            "edusphere_service_url": "http://localhost:8082/api",
            "request_timeout": 10,
            "database_path": "data/database/coursedash.db",
            "fetch_workers": 3,
            "log_level": "INFO",
            "allowed_origins": [
                "chrome-extension://*",
                "http://localhost:3000",
                "https://localhost:3000",
            ],
        }

    def _default_preferences(self) -> Dict[str, Any]:
        """Default display preferences"""
        return {
            "tasks_limit": 20,
            "announcements_limit": 10,
            "max_rows": 15,
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Environment overrides apply to the settings section only.

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'preferences')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if section == "settings" and key in ENV_OVERRIDES:
            env_value = os.environ.get(ENV_OVERRIDES[key])
            if env_value:
                return env_value

        section_map = {
            "settings": self.settings,
            "preferences": self.preferences
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'preferences')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "preferences": (self.preferences, self.preferences_file)
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    def get_database_path(self) -> Path:
        """Get full path to the user directory database"""
        path = Path(self.get("database_path"))
        if path.is_absolute():
            return path
        base_path = Path(__file__).parent.parent.parent
        return base_path / path

    def get_service_url(self) -> str:
        """Get EduSphere base URL without a trailing slash"""
        return str(self.get("edusphere_service_url")).rstrip("/")
