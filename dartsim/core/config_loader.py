"""
Configuration loader with validation and defaults.
"""
import copy
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from .io_utils import atomic_write_yaml, load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")


class Config:
    """
    Configuration container with sensible match defaults.
    """

    DEFAULTS = {
        "match": {
            "mode": "x01",  # "x01" or "cricket"
            "start_score": 501,  # 301, 501, 701 ...
            "double_in": False,
            "double_out": True,
        },

        # Exactly two entries, first to throw listed first
        "players": [
            {"name": "Player 1", "is_computer": False, "skill": 5},
            {"name": "Computer", "is_computer": True, "skill": 5},
        ],

        # Display pacing only, never changes outcomes
        "ai": {
            "start_delay_sec": 0.6,
            "dart_delay_sec": 1.5,
            "seed": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Load configuration from file or use defaults.

        Args:
            config_path: Path to config YAML (None = use defaults)
        """
        self.data = copy.deepcopy(self.DEFAULTS)

        if config_path and Path(config_path).exists():
            try:
                user_config = load_yaml(Path(config_path))
                self._merge_config(user_config)
                logger.info(f"Configuration loaded from {config_path}")
            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        else:
            logger.info("Using default configuration")

    def _merge_config(self, user_config: Dict[str, Any]) -> None:
        """Merge user config with defaults."""
        for section, values in user_config.items():
            if isinstance(self.data.get(section), dict) and isinstance(values, dict):
                self.data[section].update(values)
            else:
                self.data[section] = values

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get config value."""
        values = self.data.get(section, {})
        if not isinstance(values, dict):
            return default
        return values.get(key, default)

    def get_section(self, section: str) -> Any:
        """Get entire config section."""
        return self.data.get(section, {})

    def save(self, config_path: Path) -> None:
        """Write the merged configuration back to YAML."""
        atomic_write_yaml(Path(config_path), self.data)
        logger.info(f"Configuration saved to {config_path}")
