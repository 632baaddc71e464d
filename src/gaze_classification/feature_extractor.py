"""
Statistical feature extraction for completed gaze windows.

Turns the accumulated state of a window into the features the classifier
works on: per-zone visit proportions, Shannon entropy of the visit
distribution, zone coverage, area-normalized density and the medians of
fixation duration and saccade amplitude.
"""

import logging
from typing import Dict, Any, Iterable, Optional
from dataclasses import dataclass

import numpy as np

from config import AOI, ALL_ZONES, ScreenLayout
from .window_aggregator import Window

logger = logging.getLogger(__name__)

COVERAGE_MIN_PROPORTION = 0.05
DENSITY_ZONES = (AOI.A, AOI.C, AOI.B, AOI.F)


def median(values: Iterable[float]) -> float:
    """Median of the values; the mean of the middle two for even counts, 0 when empty."""
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return 0.0
    return float(np.median(data))


def shannon_entropy(proportions: Iterable[float]) -> float:
    """Shannon entropy in bits, ignoring zero proportions."""
    p = np.asarray(list(proportions), dtype=float)
    p = p[p > 0]
    if p.size == 0:
        return 0.0
    return float(-np.sum(p * np.log2(p)))


@dataclass(frozen=True)
class ZoneProportion:
    """Share of a window's gaze that fell in one zone."""
    count_proportion: float
    duration_proportion: float
    raw_count: int
    raw_duration: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'countProportion': self.count_proportion,
            'durationProportion': self.duration_proportion,
            'rawCount': self.raw_count,
            'rawDuration': self.raw_duration,
        }


@dataclass(frozen=True)
class WindowFeatures:
    """Features extracted from a completed window."""
    aoi_proportions: Dict[AOI, ZoneProportion]
    density: Dict[AOI, float]
    entropy: float
    coverage: int
    median_gaze_duration: float
    median_saccade: float
    gaze_count: int  # Total sample count, floored at 1
    total_duration: float  # Total gaze duration (ms), floored at 1
    window_duration_ms: float

    def count_proportion(self, zone: AOI) -> float:
        proportion = self.aoi_proportions.get(zone)
        return proportion.count_proportion if proportion else 0.0

    def raw_duration(self, zone: AOI) -> float:
        proportion = self.aoi_proportions.get(zone)
        return proportion.raw_duration if proportion else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Wire form of the window statistics."""
        return {
            'medianSaccade': self.median_saccade,
            'entropy': self.entropy,
            'coverage': self.coverage,
            'medianGazeDuration': self.median_gaze_duration,
            'aoiProportions': {zone.value: p.to_dict() for zone, p in self.aoi_proportions.items()},
            'densityMetrics': {zone.value: d for zone, d in self.density.items()},
            'gazeCount': self.gaze_count,
            'windowDurationMs': self.window_duration_ms,
        }


def extract_features(window: Window, layout: Optional[ScreenLayout] = None) -> WindowFeatures:
    """
    Compute classification features for a window.

    Args:
        window: Completed window
        layout: Screen layout providing the zone area ratios

    Returns:
        WindowFeatures for the window
    """
    layout = layout or ScreenLayout()

    counts = {zone: window.stats_for(zone).count for zone in ALL_ZONES}
    durations = {zone: window.stats_for(zone).duration for zone in ALL_ZONES}

    total_count = sum(counts.values()) or 1
    total_duration = sum(durations.values()) or 1

    proportions = {
        zone: ZoneProportion(
            count_proportion=counts[zone] / total_count,
            duration_proportion=durations[zone] / total_duration,
            raw_count=counts[zone],
            raw_duration=durations[zone],
        )
        for zone in ALL_ZONES
    }
    count_proportions = [p.count_proportion for p in proportions.values()]

    density = {
        zone: proportions[zone].count_proportion / layout.area_ratio(zone)
        for zone in DENSITY_ZONES
    }

    features = WindowFeatures(
        aoi_proportions=proportions,
        density=density,
        entropy=shannon_entropy(count_proportions),
        coverage=sum(1 for p in count_proportions if p > COVERAGE_MIN_PROPORTION),
        median_gaze_duration=median(s.duration for s in window.samples),
        median_saccade=median(window.saccade_amplitudes),
        gaze_count=total_count,
        total_duration=total_duration,
        window_duration_ms=window.duration_ms,
    )

    logger.debug(f"Window features: entropy={features.entropy:.3f}, coverage={features.coverage}, "
                 f"median_duration={features.median_gaze_duration:.1f}ms, "
                 f"median_saccade={features.median_saccade:.1f}px")
    return features
