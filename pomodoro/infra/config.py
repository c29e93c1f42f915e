"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
- Type-safe configuration with validation
- Supports multiple sources (YAML, env vars, defaults)
- Easy to test with different configurations

Settings describes the process; IntervalConfig is the read-only slice the
interval engine needs (durations plus the repository).
"""

import os
from pathlib import Path
from typing import Optional, Dict, TYPE_CHECKING
import yaml

from pydantic_settings import BaseSettings, SettingsConfigDict
from pomodoro.domain.models import Category

if TYPE_CHECKING:
    from pomodoro.infra.repository import IntervalRepository


DEFAULT_DURATIONS: Dict[Category, int] = {
    Category.POMODORO: 25 * 60,
    Category.SHORT_BREAK: 5 * 60,
    Category.LONG_BREAK: 15 * 60,
}

# Keys that may come from settings.yaml
YAML_KEYS = ("pomodoro_minutes", "short_break_minutes", "long_break_minutes", "log_level", "database_url")


class IntervalConfig:
    """
    Durations per category and the repository used by the engine.

    Overrides are in seconds. None, zero or negative values fall back to
    the defaults (25/5/15 minutes).
    """

    def __init__(self, repo: "IntervalRepository",
                 pomodoro_duration: Optional[int] = None,
                 short_break_duration: Optional[int] = None,
                 long_break_duration: Optional[int] = None):
        self._repo = repo
        overrides = {
            Category.POMODORO: pomodoro_duration,
            Category.SHORT_BREAK: short_break_duration,
            Category.LONG_BREAK: long_break_duration,
        }
        self._durations = {
            category: int(value) if value and value > 0 else DEFAULT_DURATIONS[category]
            for category, value in overrides.items()
        }

    @property
    def repo(self) -> "IntervalRepository":
        return self._repo

    @property
    def pomodoro_duration(self) -> int:
        return self._durations[Category.POMODORO]

    @property
    def short_break_duration(self) -> int:
        return self._durations[Category.SHORT_BREAK]

    @property
    def long_break_duration(self) -> int:
        return self._durations[Category.LONG_BREAK]

    def duration_for(self, category: Category) -> int:
        """Planned duration in seconds for a new interval of this category"""
        return self._durations[Category(category)]


class Settings(BaseSettings):
    """
    Application settings with multiple sources:
    1. Default values (hardcoded)
    2. YAML config file
    3. Environment variables (highest priority)
    """
    model_config = SettingsConfigDict(
        env_prefix='POMODORO_',
        env_file='.env',
        env_file_encoding='utf-8',
        # YAML values are assigned after init and must be validated too
        validate_assignment=True
    )

    # Application paths
    app_name: str = "Pomodoro"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None

    # Database
    database_url: Optional[str] = None

    # Interval durations, 0 means "use the default"
    pomodoro_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15

    log_level: str = "INFO"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._init_paths()
        self._load_yaml_config()

    def _init_paths(self):
        """Initialize default paths based on OS"""
        if self.config_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.config'
            self.config_dir = base / self.app_name.lower()

        if self.data_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.local' / 'share'
            self.data_dir = base / self.app_name.lower()

        # Create directories if they don't exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _load_yaml_config(self):
        """Load configuration from YAML file, without overriding explicit values"""
        # First check in workspace config folder
        config_file = Path("config/settings.yaml")
        if not config_file.exists():
            # Then check in user's config directory
            config_file = self.config_dir / "settings.yaml"

        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
            if config_data:
                for key in YAML_KEYS:
                    if key in config_data and key not in self.model_fields_set:
                        setattr(self, key, config_data[key])

    def save(self):
        """Save current durations and log level to YAML file"""
        config_file = self.config_dir / "settings.yaml"
        data = {
            "pomodoro_minutes": self.pomodoro_minutes,
            "short_break_minutes": self.short_break_minutes,
            "long_break_minutes": self.long_break_minutes,
            "log_level": self.log_level,
        }
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False)

    def get_db_url(self) -> str:
        """Get database URL, creating default if not set"""
        if self.database_url:
            return self.database_url

        db_path = self.data_dir / 'pomodoro.db'
        return f"sqlite+aiosqlite:///{db_path}"

    def interval_config(self, repo: "IntervalRepository") -> IntervalConfig:
        """Build the engine configuration from the minute-based settings"""
        return IntervalConfig(
            repo,
            pomodoro_duration=self.pomodoro_minutes * 60,
            short_break_duration=self.short_break_minutes * 60,
            long_break_duration=self.long_break_minutes * 60,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
