"""
Configuration management for coatpath.

Handles loading, validation, and access to coating settings profiles.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from coatpath.core.coating import FillPattern, MaskAvoidanceStrategy
from coatpath.core.exceptions import ConfigurationError

# Names used by older project files for the avoidance strategies.
_AVOIDANCE_ALIASES = {
    "contour": MaskAvoidanceStrategy.ROUTE_AROUND,
    "avoid": MaskAvoidanceStrategy.ROUTE_AROUND,
    "route_around": MaskAvoidanceStrategy.ROUTE_AROUND,
    "lift": MaskAvoidanceStrategy.LIFT,
}


class CoatingSettings(BaseModel):
    """Process-wide coating defaults, immutable for one computation."""

    model_config = ConfigDict(frozen=True)

    coating_width: float = 10.0
    line_spacing: float = 10.0
    fill_pattern: FillPattern = FillPattern.AUTO

    enable_masking: bool = True
    masking_clearance: float = 0.0
    mask_avoidance: MaskAvoidanceStrategy = MaskAvoidanceStrategy.ROUTE_AROUND

    # Consumed by the G-code emitter, carried here so one profile drives both.
    coating_speed: float = 1000.0
    move_speed: float = 2000.0
    safe_height: float = 80.0
    coating_height: float = 20.0

    yield_interval: int = Field(default=50, ge=1)
    density_grid_size: int = Field(default=5, ge=1)
    density_threshold: float = 0.4

    @field_validator("fill_pattern", mode="before")
    @classmethod
    def _parse_fill_pattern(cls, value: Any) -> FillPattern:
        return FillPattern.parse(value)

    @field_validator("mask_avoidance", mode="before")
    @classmethod
    def _parse_mask_avoidance(cls, value: Any) -> MaskAvoidanceStrategy:
        if isinstance(value, MaskAvoidanceStrategy):
            return value
        key = str(value).lower()
        if key not in _AVOIDANCE_ALIASES:
            raise ValueError(f"unknown mask avoidance strategy: {value!r}")
        return _AVOIDANCE_ALIASES[key]

    @property
    def mask_clearance(self) -> float:
        """Clearance kept around masks: user margin plus half a coating line."""
        return self.masking_clearance + self.coating_width / 2


def _settings_from_mapping(data: dict[str, Any], source: Path) -> CoatingSettings:
    try:
        return CoatingSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid coating settings: {source}",
            details={"error": str(e)},
        )


def load_settings(path: str | Path) -> CoatingSettings:
    """
    Load coating settings from a single YAML file.

    The file may either hold the settings mapping directly or nest it under
    a top-level ``coating`` key.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse settings file: {path}",
            details={"error": str(e)},
        )

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a mapping: {path}")
    return _settings_from_mapping(data.get("coating", data), path)


@dataclass
class ConfigManager:
    """
    Central configuration manager for coatpath.

    Loads and validates coating profiles from ``<config_dir>/profiles/*.yaml``.
    Each profile holds a top-level ``coating`` mapping.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> settings = config.get_profile("fine_spray")
    """

    config_dir: Path
    _profiles: dict[str, CoatingSettings] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        """Initialize configuration manager."""
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all profiles from disk."""
        self._load_profiles()
        self._loaded = True

    def _load_profiles(self) -> None:
        profiles_dir = self.config_dir / "profiles"
        if not profiles_dir.exists():
            return

        for config_file in sorted(profiles_dir.glob("*.yaml")):
            try:
                with open(config_file) as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to load coating profile: {config_file}",
                    details={"error": str(e)},
                )

            if data and "coating" in data:
                self._profiles[config_file.stem] = _settings_from_mapping(
                    data["coating"], config_file
                )

    def get_profile(self, name: str) -> CoatingSettings:
        """
        Get coating settings by profile name.

        Args:
            name: Profile name (without .yaml extension)

        Returns:
            CoatingSettings instance

        Raises:
            ConfigurationError: If profile not found
        """
        if not self._loaded:
            self.load()

        if name not in self._profiles:
            available = list(self._profiles.keys())
            raise ConfigurationError(
                f"Coating profile not found: {name}",
                details={"available": available},
            )
        return self._profiles[name]

    def list_profiles(self) -> list[str]:
        """List available coating profiles."""
        if not self._loaded:
            self.load()
        return list(self._profiles.keys())
