"""
Runtime settings management
Handles loading/saving user preferences
"""

import os
import logging
import yaml
from pathlib import Path
from typing import Dict, Optional
from dataclasses import dataclass, asdict, field, fields

from .defaults import (SERIAL_DEFAULTS, RECORDER_DEFAULTS, PLAYBACK_DEFAULTS,
                       DEFAULT_COMMAND_TIMEOUT, COMMAND_TIMEOUTS, RECORDINGS_DIR)

logger = logging.getLogger(__name__)

@dataclass
class Settings:
    """Runtime settings that can be modified by user"""

    # Connection
    port: Optional[str] = None
    baudrate: int = SERIAL_DEFAULTS["baudrate"]
    settle_time: float = SERIAL_DEFAULTS["settle_time"]

    # Protocol
    default_timeout: float = DEFAULT_COMMAND_TIMEOUT
    command_timeouts: Dict[str, float] = field(default_factory=lambda: dict(COMMAND_TIMEOUTS))

    # Recording
    sample_rate: int = RECORDER_DEFAULTS["sample_rate"]
    recording_mode: str = RECORDER_DEFAULTS["mode"]
    recordings_dir: str = RECORDINGS_DIR

    # Playback
    playback_speed: float = PLAYBACK_DEFAULTS["speed"]
    move_speed: int = PLAYBACK_DEFAULTS["move_speed"]
    loop_playback: bool = PLAYBACK_DEFAULTS["loop"]

    # UI settings
    log_level: str = "INFO"

    @classmethod
    def load(cls, filepath: str = None) -> "Settings":
        """Load settings from YAML file"""
        if filepath is None:
            filepath = cls._get_default_path()

        if os.path.exists(filepath):
            try:
                with open(filepath, 'r') as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Could not load settings from {filepath}: {e}")
                return cls()

            if not isinstance(data, dict):
                logger.warning(f"Ignoring settings file {filepath}: top level is not a mapping")
                return cls()

            known = {f.name for f in fields(cls)}
            unknown = sorted(set(data) - known)
            if unknown:
                logger.warning(f"Ignoring unknown settings: {', '.join(unknown)}")
            return cls(**{k: v for k, v in data.items() if k in known})

        return cls()  # Return defaults

    def save(self, filepath: str = None):
        """Save settings to YAML file"""
        if filepath is None:
            filepath = self._get_default_path()

        # Ensure directory exists
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(filepath, 'w') as f:
            yaml.safe_dump(asdict(self), f, default_flow_style=False)

    @staticmethod
    def _get_default_path() -> str:
        """Get default settings path"""
        home = Path.home()
        return str(home / ".mycobot_pro" / "settings.yaml")

    def reset_to_defaults(self):
        """Reset all settings to defaults"""
        default = Settings()
        for name in self.__dataclass_fields__:
            setattr(self, name, getattr(default, name))
