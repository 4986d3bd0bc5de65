"""Enhancement options and options-file loader.

Options are validated with pydantic and serialized with the camelCase
names used by the front end (``mappingStrategy``, ``minConfidence``, ...).
"""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, validator

from .enhancer_logging import get_logger
from .errors import ConfigurationError
from .models import MatchStrategy

logger = get_logger()

# Default options file name
CONFIG_FILENAME = "css-enhancer.config.json"
CONFIG_ENV_VAR = "CSS_ENHANCER_CONFIG"

# snake_case field -> camelCase key
_CAMEL_KEYS = {
    "strict_matching": "strictMatching",
    "ignore_colors": "ignoreColors",
    "ignore_typography": "ignoreTypography",
    "ignore_spacing": "ignoreSpacing",
    "enable_auto_mapping": "enableAutoMapping",
    "mapping_strategy": "mappingStrategy",
    "min_confidence": "minConfidence",
    "max_suggestions": "maxSuggestions",
}


class EnhancementOptions(BaseModel):
    """Options controlling matching, conflict checks and reporting."""

    # Informational only; matching is always fuzzy
    strict_matching: bool = Field(default=False)

    # Disable the similarity bonus and conflict checks per property family
    ignore_colors: bool = Field(default=False)
    ignore_typography: bool = Field(default=False)
    ignore_spacing: bool = Field(default=False)

    enable_auto_mapping: bool = Field(default=True)
    mapping_strategy: MatchStrategy = Field(default=MatchStrategy.HYBRID)
    min_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    max_suggestions: int = Field(default=10, ge=0)

    class Config:
        extra = "forbid"

    @validator("mapping_strategy", pre=True)
    def validate_strategy(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return MatchStrategy(v.strip().lower())
            except ValueError:
                allowed = ", ".join(s.value for s in MatchStrategy)
                raise ValueError(f"Unknown mapping strategy '{v}' (expected {allowed})")
        return v

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary."""
        return {
            "strictMatching": self.strict_matching,
            "ignoreColors": self.ignore_colors,
            "ignoreTypography": self.ignore_typography,
            "ignoreSpacing": self.ignore_spacing,
            "enableAutoMapping": self.enable_auto_mapping,
            "mappingStrategy": self.mapping_strategy.value,
            "minConfidence": self.min_confidence,
            "maxSuggestions": self.max_suggestions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnhancementOptions":
        """Create from a camelCase (or snake_case) dictionary.

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid.
        """
        camel_to_snake = {camel: snake for snake, camel in _CAMEL_KEYS.items()}
        values = {camel_to_snake.get(key, key): value for key, value in data.items()}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid enhancement options: {e}") from e

    def merged(self, overrides: dict[str, Any]) -> "EnhancementOptions":
        """Return a copy with non-None overrides applied (snake_case keys)."""
        data = self.to_dict()
        for key, value in overrides.items():
            if value is not None:
                data[_CAMEL_KEYS.get(key, key)] = value
        return EnhancementOptions.from_dict(data)


class OptionsLoader:
    """Loader for enhancement options files."""

    def __init__(self, project_path: Path | None = None):
        """Initialize the options loader.

        Args:
            project_path: Path to the project root. Defaults to current directory.
        """
        self.project_path = Path(project_path) if project_path else Path.cwd()

    def load(self, config_path: Path | None = None) -> EnhancementOptions:
        """Load enhancement options.

        Precedence (highest to lowest):
        1. Explicit config_path
        2. Environment variable CSS_ENHANCER_CONFIG
        3. css-enhancer.config.json in project root
        4. Default options

        Raises:
            ConfigurationError: If an explicit path does not exist or a
                file cannot be read as valid options.
        """
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(
                    f"Options file not found: {config_path}",
                    config_file=str(config_path),
                )
            return self._load_from_file(config_path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            env_config_path = Path(env_path)
            if env_config_path.exists():
                return self._load_from_file(env_config_path)
            logger.warning(f"{CONFIG_ENV_VAR} points to missing file: {env_path}")

        project_config = self.project_path / CONFIG_FILENAME
        if project_config.exists():
            return self._load_from_file(project_config)

        logger.debug("No enhancement options file found, using defaults")
        return EnhancementOptions()

    def _load_from_file(self, config_path: Path) -> EnhancementOptions:
        logger.debug(f"Loading enhancement options from {config_path}")
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read options file: {e}", config_file=str(config_path)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Options file must contain a JSON object",
                config_file=str(config_path),
            )
        return EnhancementOptions.from_dict(data)

    def save(
        self, options: EnhancementOptions, config_path: Path | None = None
    ) -> Path:
        """Save options to a file.

        Returns:
            Path where options were saved.
        """
        if config_path is None:
            config_path = self.project_path / CONFIG_FILENAME

        content = json.dumps(options.to_dict(), indent=2)
        config_path.write_text(content, encoding="utf-8")
        logger.info(f"Saved enhancement options to {config_path}")
        return config_path


def load_options(
    project_path: Path | None = None, config_path: Path | None = None
) -> EnhancementOptions:
    """Convenience function to load enhancement options."""
    return OptionsLoader(project_path).load(config_path)
