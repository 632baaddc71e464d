"""
Gaze Strategy Classifier Configuration Module
Contains screen layout, classification thresholds and engine settings.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, Union

logger = logging.getLogger(__name__)


class AOI(str, Enum):
    """Screen zones (areas of interest) tracked for gaze statistics."""
    A = "a"  # Left task panel
    B = "b"  # Top-right hint panel
    C = "c"  # Center code editor
    F = "f"  # Bottom-right history panel
    G = "g"  # Non-task area

    @classmethod
    def parse(cls, value: Union[str, "AOI"]) -> "AOI":
        """Coerce a zone id string (case-insensitive) to an AOI."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class WindowPolicy(str, Enum):
    """How the aggregator replaces a window once it is full."""
    TUMBLING = "tumbling"      # Non-overlapping, accumulators cleared
    CARRY_OVER = "carry_over"  # Unexpired samples retained in the next window


ALL_ZONES = (AOI.A, AOI.B, AOI.C, AOI.F, AOI.G)
TASK_ZONES = (AOI.A, AOI.B, AOI.C, AOI.F)

AOI_LABELS = {
    AOI.A: 'left task panel',
    AOI.B: 'top-right hint panel',
    AOI.C: 'center code editor',
    AOI.F: 'bottom-right history panel',
    AOI.G: 'non-task area',
}


@dataclass
class ScreenLayout:
    """Static screen configuration (24 inch monitor at 1920x1080 by default)."""
    width: int = 1920
    height: int = 1080
    diagonal_inches: float = 24.0
    ppi: int = 92
    ratio_a: float = 0.2   # Left column
    ratio_c: float = 0.6   # Center column
    ratio_bf: float = 0.2  # Right column, split evenly between b (top) and f (bottom)
    ratio_g: float = 0.0   # Non-task area is excluded from area normalization

    def area_ratio(self, zone: AOI) -> float:
        """Share of the screen area covered by a zone."""
        if zone == AOI.A:
            return self.ratio_a
        if zone == AOI.C:
            return self.ratio_c
        if zone in (AOI.B, AOI.F):
            return self.ratio_bf / 2
        return self.ratio_g


@dataclass
class EntropyThresholds:
    low: float = 1.2
    high: float = 1.8


@dataclass
class CoverageThresholds:
    # Only exploratory_min takes part in classification
    direct_max: int = 2
    referential_min: int = 2
    referential_max: int = 3
    exploratory_min: int = 3


@dataclass
class GazeDurationThresholds:
    short: float = 200.0  # ms
    long: float = 500.0   # ms, reserved


@dataclass
class SaccadeThresholds:
    # Pixel distances on a 24" screen (~0.5, ~1.5 and ~3 inches)
    small: float = 50.0
    medium: float = 150.0
    large: float = 300.0


# Keys accepted by ClassifierConfig.from_dict besides the snake_case names
_CAMEL_CASE_KEYS = {
    'windowSize': 'window_size_ms',
    'windowSizeMs': 'window_size_ms',
    'saccadeLookbackMs': 'saccade_lookback_ms',
    'zoomScale': 'zoom_scale',
    'confirmationWindows': 'confirmation_windows',
    'windowPolicy': 'window_policy',
    'entropyThresholds': 'entropy_thresholds',
    'coverageThresholds': 'coverage_thresholds',
    'gazeDurationThresholds': 'gaze_duration_thresholds',
    'saccadeThresholds': 'saccade_thresholds',
    'screenLayout': 'screen_layout',
    'screenConfig': 'screen_layout',
    'directMax': 'direct_max',
    'referentialMin': 'referential_min',
    'referentialMax': 'referential_max',
    'exploratoryMin': 'exploratory_min',
    'diagonalInches': 'diagonal_inches',
}

_SECTIONS = {
    'entropy_thresholds': EntropyThresholds,
    'coverage_thresholds': CoverageThresholds,
    'gaze_duration_thresholds': GazeDurationThresholds,
    'saccade_thresholds': SaccadeThresholds,
    'screen_layout': ScreenLayout,
}


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}


def _screen_layout_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the nested resolution/aoiRatios form of a screen layout."""
    data = _normalize_keys(data)
    resolution = data.pop('resolution', None)
    if resolution:
        data.setdefault('width', resolution.get('width'))
        data.setdefault('height', resolution.get('height'))
    ratios = data.pop('aoiRatios', None) or data.pop('aoi_ratios', None)
    if ratios:
        for zone_key, value in ratios.items():
            data.setdefault(f"ratio_{zone_key}", value)
    return data


@dataclass
class ClassifierConfig:
    """Configuration for the classification engine, fixed at construction."""
    window_size_ms: float = 5000.0
    saccade_lookback_ms: float = 2000.0
    zoom_scale: float = 1.5
    confirmation_windows: int = 1
    window_policy: WindowPolicy = WindowPolicy.TUMBLING

    entropy_thresholds: EntropyThresholds = field(default_factory=EntropyThresholds)
    coverage_thresholds: CoverageThresholds = field(default_factory=CoverageThresholds)
    gaze_duration_thresholds: GazeDurationThresholds = field(default_factory=GazeDurationThresholds)
    saccade_thresholds: SaccadeThresholds = field(default_factory=SaccadeThresholds)
    screen_layout: ScreenLayout = field(default_factory=ScreenLayout)

    def validate(self):
        """
        Check that configuration values are usable.

        Raises:
            ValueError: If any value is out of range
        """
        if self.window_size_ms <= 0:
            raise ValueError(f"window_size_ms must be positive, got {self.window_size_ms}")
        if self.saccade_lookback_ms <= 0:
            raise ValueError(f"saccade_lookback_ms must be positive, got {self.saccade_lookback_ms}")
        if self.zoom_scale <= 0 or self.zoom_scale == 1:
            raise ValueError(f"zoom_scale must be positive and not 1, got {self.zoom_scale}")
        if int(self.confirmation_windows) < 1:
            raise ValueError(f"confirmation_windows must be at least 1, got {self.confirmation_windows}")

        layout = self.screen_layout
        if layout.width <= 0 or layout.height <= 0:
            raise ValueError(f"Invalid screen resolution: {layout.width}x{layout.height}")
        for name in ('ratio_a', 'ratio_c', 'ratio_bf'):
            value = getattr(layout, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if layout.ratio_a + layout.ratio_c > 1:
            raise ValueError("ratio_a + ratio_c must not exceed 1")

        return self

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ClassifierConfig":
        """
        Build a configuration from a (possibly partial) dictionary.

        Args:
            data: Overrides in snake_case or camelCase, nested per section

        Returns:
            Validated configuration with defaults for missing keys
        """
        config = cls()
        if not data:
            return config

        for key, value in _normalize_keys(data).items():
            if key in _SECTIONS:
                if key == 'screen_layout':
                    overrides = _screen_layout_kwargs(value)
                else:
                    overrides = _normalize_keys(value)
                section = getattr(config, key)
                for name, section_value in overrides.items():
                    if not hasattr(section, name):
                        raise ValueError(f"Unknown {key} setting: {name}")
                    setattr(section, name, section_value)
            elif key == 'window_policy':
                config.window_policy = WindowPolicy(value)
            elif hasattr(config, key):
                setattr(config, key, value)
            else:
                raise ValueError(f"Unknown configuration setting: {key}")

        logger.debug(f"Configuration loaded from dict: {sorted(data.keys())}")
        return config.validate()

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "ClassifierConfig":
        """Load configuration overrides from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info(f"Configuration loaded from {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['window_policy'] = self.window_policy.value
        return data
