"""
Configuration management for JeevesBot
Handles loading and saving settings, preferences and the API user list,
plus the deployment values and secrets that come from the environment.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv


CONFIG_DIR_ENV = "JEEVES_CONFIG_DIR"


class Config:
    """Configuration manager for the bot, API and CLI"""

    def __init__(self, config_dir: Optional[Path] = None, load_env: bool = True):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to
                $JEEVES_CONFIG_DIR, then ./config)
            load_env: Read a .env file into the environment first
        """
        if load_env:
            load_dotenv()

        if config_dir is None:
            config_dir = Path(os.getenv(CONFIG_DIR_ENV, Path.cwd() / "config"))

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.preferences_file = self.config_dir / "preferences.json"
        self.auth_file = self.config_dir / "auth.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.preferences = self._load_json(self.preferences_file, self._default_preferences())
        self.authentication = self._load_json(self.auth_file, self._default_authentication())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            # Keys added in newer versions fall back to their defaults
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
        """Default system settings"""
        return {
            "data_directory": "data",
            "calendar_file": "calendar-data.json",
            "memory_file": "conversation-memory.json",
            "timezone": "Europe/Amsterdam",
            "date_format": "%d-%m-%Y",
            "time_format": "%H:%M",
        }

    def _default_preferences(self) -> Dict[str, Any]:
        """Default user preferences"""
        return {
            "daily_reminder_time": "08:00",
            "daily_reminder_enabled": True,
            "upcoming_days": 7,
            "max_messages_per_user": 30,
        }

    def _default_authentication(self) -> Dict[str, Any]:
        """API users: [{"username": ..., "password": ..., "role": ...}]"""
        return {"users": []}

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'preferences', 'authentication')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "preferences": self.preferences,
            "authentication": self.authentication,
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'preferences', 'authentication')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "preferences": (self.preferences, self.preferences_file),
            "authentication": (self.authentication, self.auth_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    # =========================================================================
    # Paths
    # =========================================================================

    def get_data_directory(self) -> Path:
        """Data directory; relative paths resolve against the config dir's parent"""
        data_dir = Path(self.settings["data_directory"])
        if not data_dir.is_absolute():
            data_dir = self.config_dir.parent / data_dir
        return data_dir

    def get_calendar_file(self) -> Path:
        return self.get_data_directory() / self.settings["calendar_file"]

    def get_memory_file(self) -> Path:
        return self.get_data_directory() / self.settings["memory_file"]

    # =========================================================================
    # Locale
    # =========================================================================

    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.settings["timezone"])

    def get_users(self) -> List[Dict[str, str]]:
        users = self.authentication.get("users")
        return users if isinstance(users, list) else []

    # =========================================================================
    # Environment
    # =========================================================================

    @property
    def telegram_bot_token(self) -> Optional[str]:
        return os.getenv("TELEGRAM_BOT_TOKEN")

    @property
    def telegram_chat_id(self) -> Optional[str]:
        return os.getenv("TELEGRAM_CHAT_ID")

    @property
    def environment(self) -> str:
        return os.getenv("ENVIRONMENT", "development")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def webhook_base_url(self) -> Optional[str]:
        return os.getenv("WEBHOOK_BASE_URL")

    @property
    def frontend_url(self) -> str:
        return os.getenv("FRONTEND_URL", "http://localhost:3000")
