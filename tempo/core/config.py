"""
Configuration management for Tempo Planner
Handles loading and saving settings and user preferences
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
from zoneinfo import ZoneInfo


class Config:
    """Configuration manager for the planner"""

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
            "database_path": "data/database/tempo.db",
            "timezone": "UTC",
            "date_format": "%Y-%m-%d",
            "time_format": "%H:%M",
        }

    def _default_preferences(self) -> Dict[str, Any]:
        """Default user preferences"""
        return {
            "work_hours_start": "09:00",
            "work_hours_end": "17:00",
            "work_category_keywords": ["work", "professional", "business", "project"],
            "default_task_priority": 1,
            "prioritizer": "heuristic",
            "history_days": 7,
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'preferences')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "preferences": self.preferences,
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
            "preferences": (self.preferences, self.preferences_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    def get_database_path(self) -> Path:
        """Get full path to database file"""
        path = Path(self.settings["database_path"])
        if path.is_absolute():
            return path
        base_path = Path(__file__).parent.parent.parent
        return base_path / path

    def get_timezone(self) -> ZoneInfo:
        """Timezone that defines calendar-day boundaries."""
        return ZoneInfo(self.get("timezone", default="UTC"))

    def now(self) -> datetime:
        """Current time in the configured timezone."""
        return datetime.now(self.get_timezone())

    def today(self) -> date:
        """Current calendar day in the configured timezone."""
        return self.now().date()

    def get_work_hours(self) -> Tuple[int, int]:
        """Work hours as an inclusive (start_hour, end_hour) pair."""
        start = self.get("work_hours_start", "preferences", "09:00")
        end = self.get("work_hours_end", "preferences", "17:00")
        return int(start.split(":")[0]), int(end.split(":")[0])

    def get_work_keywords(self) -> List[str]:
        """Category name fragments that mark a task as work-related."""
        keywords = self.get("work_category_keywords", "preferences", [])
        return [k.lower() for k in keywords]
