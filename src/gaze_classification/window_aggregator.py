"""
Fixed-duration window aggregation for gaze samples.

Accumulates per-zone visit counts and durations together with saccade
amplitude observations over a bounded time window, and detects when the
window is complete. Closure is sample-driven: a window only closes when a
sample arrives whose timestamp shows the window duration has elapsed.
"""

import math
import logging
from typing import List, Optional, Dict
from dataclasses import dataclass, field, replace

from config import AOI, ALL_ZONES, ClassifierConfig, WindowPolicy
from .aoi_resolver import resolve_aoi
from .gaze_sample import GazeSample

logger = logging.getLogger(__name__)


@dataclass
class ZoneStats:
    """Accumulated gaze statistics for one zone."""
    count: int = 0
    duration: float = 0.0  # Sum of sample durations (ms)


def _empty_zone_stats() -> Dict[AOI, ZoneStats]:
    return {zone: ZoneStats() for zone in ALL_ZONES}


@dataclass
class Window:
    """A single aggregation window."""
    start_time: Optional[float] = None
    samples: List[GazeSample] = field(default_factory=list)
    zone_stats: Dict[AOI, ZoneStats] = field(default_factory=_empty_zone_stats)
    saccade_amplitudes: List[float] = field(default_factory=list)
    end_time: Optional[float] = None  # Timestamp of the sample that closed it

    @property
    def is_open(self) -> bool:
        return self.start_time is not None

    @property
    def duration_ms(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    def stats_for(self, zone: AOI) -> ZoneStats:
        """Stats for a zone; zones without an entry count as empty."""
        return self.zone_stats.get(zone) or ZoneStats()

    def record(self, sample: GazeSample):
        """Add a sample's count and duration to its zone."""
        stats = self.zone_stats.setdefault(sample.aoi, ZoneStats())
        stats.count += 1
        stats.duration += sample.duration


class WindowAggregator:
    """
    Accumulates gaze samples into tumbling windows.

    Exactly one window is live at a time. When a sample completes it,
    the window is closed, replaced according to the configured policy,
    and returned to the caller.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        """
        Initialize window aggregator.

        Args:
            config: Engine configuration (window size, saccade look-back,
                windowing policy and screen layout)
        """
        self.config = config or ClassifierConfig()
        self.window = Window()
        self.windows_completed = 0

        logger.info(f"WindowAggregator initialized: {self.config.window_size_ms:.0f}ms "
                    f"{self.config.window_policy.value} windows")

    def add_sample(self, sample: GazeSample, timestamp: float) -> Optional[Window]:
        """
        Add a gaze sample to the live window.

        Args:
            sample: Gaze sample (aoi resolved from x/y when unset)
            timestamp: Sample timestamp in milliseconds

        Returns:
            The closed window if this sample completed it, None otherwise
        """
        window = self.window
        aoi = sample.aoi
        if aoi is None:
            aoi = resolve_aoi(sample.x, sample.y, self.config.screen_layout)
        sample = replace(sample, aoi=aoi, timestamp=timestamp)

        # Everything that can fail runs before the window is modified
        amplitude = self._saccade_amplitude(sample)

        if window.start_time is None:
            window.start_time = timestamp

        window.record(sample)
        if amplitude is not None:
            window.saccade_amplitudes.append(amplitude)

        window.samples.append(sample)

        elapsed = timestamp - window.start_time
        if elapsed < self.config.window_size_ms:
            logger.debug(f"Window progress: {elapsed / 1000:.2f}s/"
                         f"{self.config.window_size_ms / 1000:.2f}s")
            return None

        return self._close_window(timestamp)

    def _saccade_amplitude(self, sample: GazeSample) -> Optional[float]:
        """Distance to the most recent sample within the look-back period."""
        cutoff = sample.timestamp - self.config.saccade_lookback_ms
        for previous in reversed(self.window.samples):
            if previous.timestamp > cutoff:
                return math.hypot(sample.x - previous.x, sample.y - previous.y)
        return None

    def _close_window(self, timestamp: float) -> Window:
        closed = self.window
        closed.end_time = timestamp
        self.windows_completed += 1

        if self.config.window_policy == WindowPolicy.CARRY_OVER:
            self.window = self._carry_over(closed, timestamp)
        else:
            self.window = Window(start_time=timestamp)

        logger.debug(f"Window {self.windows_completed} closed: {len(closed.samples)} samples "
                     f"over {closed.duration_ms:.0f}ms, next starts at {self.window.start_time}")
        return closed

    def _carry_over(self, closed: Window, timestamp: float) -> Window:
        """Build the next window from samples that have not yet expired."""
        retained = [s for s in closed.samples
                    if timestamp - s.timestamp < self.config.window_size_ms]
        window = Window()
        if retained:
            window.start_time = retained[0].timestamp
            window.samples = list(retained)
            for sample in retained:
                window.record(sample)

        logger.debug(f"Window reset, retained {len(retained)} unexpired samples")
        return window

    def progress(self, timestamp: float) -> float:
        """Fraction of the live window elapsed at the given timestamp."""
        if self.window.start_time is None:
            return 0.0
        elapsed = timestamp - self.window.start_time
        return max(0.0, min(1.0, elapsed / self.config.window_size_ms))

    def reset(self):
        """Discard the live window."""
        self.window = Window()
        logger.info("WindowAggregator reset")

    @property
    def sample_count(self) -> int:
        return len(self.window.samples)
