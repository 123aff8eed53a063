"""Configuration management for dualmark."""

import json
import logging
from pathlib import Path
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

DEFAULT_STYLE_WINDOW_RADIUS = 50


@dataclass
class Config:
    """Configuration for the edit engine."""

    style_window_radius: int = DEFAULT_STYLE_WINDOW_RADIUS  # Characters scanned each side of the caret
    code_placeholder: str = "Your code here..."
    default_image_alt: str = "image"
    horizontal_rule: str = "------"

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        config_dir = Path.home() / ".config" / "dualmark"
        return config_dir / "config.json"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create default."""
        config_path = cls.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    data = json.load(f)
                return cls(**data).validate()
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Could not load config from {config_path}: {e}. Using defaults.")
                return cls.default()
        else:
            # Create default config
            config = cls.default()
            config.save()
            return config

    @classmethod
    def default(cls) -> "Config":
        """Create default configuration."""
        return cls()

    def save(self) -> None:
        """Save configuration to file."""
        config_path = self.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    def validate(self) -> "Config":
        """Replace unusable values with defaults and return self."""
        if not isinstance(self.style_window_radius, int) or self.style_window_radius <= 0:
            logger.warning(
                f"Invalid style_window_radius {self.style_window_radius!r}, "
                f"using {DEFAULT_STYLE_WINDOW_RADIUS}"
            )
            self.style_window_radius = DEFAULT_STYLE_WINDOW_RADIUS
        return self
