"""
Gaze strategy classification engine.

Orchestrates the complete flow from incoming gaze samples to reading
strategy decisions:
1. Accumulate samples into fixed-duration windows
2. Extract window features when a window completes
3. Classify the features (pure decision)
4. Map the class to a UI layout recommendation
5. Drive the zoom controller from the window's dominant zone

Everything runs synchronously inside ingest(); there are no timers or
background work, and the engine expects callers to serialize calls.
"""

import time
import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Optional, Dict, Any, Union, Tuple, Mapping

from config import AOI, TASK_ZONES, AOI_LABELS, ClassifierConfig
from utils.validation import ValidationUtils, ErrorHandlingUtils
from .gaze_sample import GazeSample, InvalidSampleError, validate_gaze_sample
from .window_aggregator import WindowAggregator, Window
from .feature_extractor import WindowFeatures, extract_features
from .classifier import UserType, UserClassifier, ClassificationDebouncer
from .recommendation import UIRecommendation, get_ui_recommendation
from .zoom_controller import ZoomController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of one completed window."""
    user_type: UserType
    zoomed_area: Optional[AOI]
    stats: WindowFeatures
    ui_recommendation: UIRecommendation
    timestamp: float  # Timestamp of the sample that closed the window (ms)
    diagnostics: Mapping[str, Any] = field(default_factory=dict)  # Read-only view

    def __post_init__(self):
        frozen = {key: MappingProxyType(dict(value)) if isinstance(value, Mapping) else value
                  for key, value in self.diagnostics.items()}
        object.__setattr__(self, 'diagnostics', MappingProxyType(frozen))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'userType': self.user_type.value,
            'zoomedArea': self.zoomed_area.value if self.zoomed_area else None,
            'stats': self.stats.to_dict(),
            'uiRecommendation': self.ui_recommendation.to_dict(),
            'timestamp': self.timestamp,
            'diagnostics': {key: dict(value) if isinstance(value, Mapping) else value
                            for key, value in self.diagnostics.items()},
        }


@dataclass
class EngineStats:
    """Processing statistics for the engine."""
    samples_ingested: int = 0
    windows_completed: int = 0
    type_counts: Dict[str, int] = field(
        default_factory=lambda: {user_type.value: 0 for user_type in UserType})
    last_processing_ms: float = 0.0
    peak_processing_ms: float = 0.0


def classify_features(features: WindowFeatures,
                      classifier: UserClassifier) -> Tuple[UserType, UIRecommendation]:
    """Pure decision: window features to user type and layout recommendation."""
    user_type = classifier.classify(features)
    return user_type, get_ui_recommendation(user_type)


class ZoomPolicy:
    """
    Decides how a classified window drives the zoom controller.

    The task zone with the largest accumulated duration is enlarged,
    whatever the user type; with no positive duration the zoom is reset.
    """

    def __init__(self, scale: float = 1.5):
        self.scale = scale

    def dominant_zone(self, features: WindowFeatures) -> Optional[AOI]:
        """Task zone with the longest gaze; ties go to the first in a, b, c, f order."""
        best_zone = None
        best_duration = 0.0
        for zone in TASK_ZONES:
            duration = features.raw_duration(zone)
            if duration > best_duration:
                best_zone, best_duration = zone, duration
        return best_zone

    def apply(self, features: WindowFeatures, controller: ZoomController,
              timestamp: Optional[float] = None) -> Optional[AOI]:
        """
        Apply the zoom side effect for a completed window.

        Returns:
            The zoomed zone, or None if the zoom was reset
        """
        try:
            zone = self.dominant_zone(features)
        except Exception as e:
            logger.error(f"Error locating the longest-gazed zone: {e}")
            zone = None

        if zone is None:
            logger.info("No dominant zone, keeping default zoom")
            controller.reset()
            return None

        logger.info(f"Zooming longest-gazed zone {zone.value} ({AOI_LABELS[zone]}): "
                    f"{features.raw_duration(zone):.0f}ms")
        controller.set_zoom(zone, self.scale, timestamp=timestamp)
        return zone


class ClassificationEngine:
    """
    Classifies reading strategy from a stream of gaze samples.

    ingest() is the only entry point. It returns None until a sample
    completes the live window, then returns a ClassificationResult.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None,
                 zoom_controller: Optional[ZoomController] = None,
                 zoom_policy: Optional[ZoomPolicy] = None):
        """
        Initialize classification engine.

        Args:
            config: Engine configuration (defaults apply when omitted)
            zoom_controller: Zoom controller with the host's observers
            zoom_policy: Policy driving the zoom controller from results
        """
        self.config = (config or ClassifierConfig()).validate()
        self.aggregator = WindowAggregator(self.config)
        self.classifier = UserClassifier(self.config)
        self.debouncer = ClassificationDebouncer(self.config.confirmation_windows)
        self.zoom_controller = zoom_controller or ZoomController()
        self.zoom_policy = zoom_policy or ZoomPolicy(self.config.zoom_scale)

        self.stats = EngineStats()
        self._last_result: Optional[ClassificationResult] = None

        logger.info(f"ClassificationEngine initialized: window={self.config.window_size_ms:.0f}ms, "
                    f"confirmation_windows={self.debouncer.confirmation_windows}")

    def ingest(self, sample: Union[GazeSample, Dict[str, Any]],
               timestamp: float) -> Optional[ClassificationResult]:
        """
        Process a gaze sample.

        Args:
            sample: GazeSample or {x, y, aoi?, duration} mapping
            timestamp: Sample timestamp in milliseconds

        Returns:
            ClassificationResult when the sample completes a window, else None

        Raises:
            InvalidSampleError: If the sample or timestamp is malformed
        """
        sample = validate_gaze_sample(sample)
        ok, timestamp = ValidationUtils.validate_numeric(timestamp, 'timestamp', "gaze sample")
        if not ok:
            raise InvalidSampleError("Sample timestamp must be a finite number")
        self.stats.samples_ingested += 1

        window = self.aggregator.add_sample(sample, timestamp)
        if window is None:
            return None

        # The aggregator has already opened the next window, so a failing
        # observer below still leaves this one closed.
        return self._complete_window(window, timestamp)

    def _complete_window(self, window: Window, timestamp: float) -> ClassificationResult:
        start_time = time.perf_counter()
        self.stats.windows_completed += 1

        features = extract_features(window, self.config.screen_layout)
        candidate, _ = classify_features(features, self.classifier)

        confirmed = self.debouncer.observe(candidate)
        user_type = confirmed if confirmed is not None else UserType.UNKNOWN
        self.stats.type_counts[user_type.value] += 1

        explanation = self.classifier.explain(features)
        if user_type == UserType.UNKNOWN:
            logger.debug(f"Window unclassified: {explanation}")
        else:
            logger.info(f"User type detected: {user_type.value} "
                        f"(entropy={features.entropy:.2f}, coverage={features.coverage}, "
                        f"median_duration={features.median_gaze_duration:.0f}ms)")

        result = ClassificationResult(
            user_type=user_type,
            zoomed_area=None,
            stats=features,
            ui_recommendation=get_ui_recommendation(user_type),
            timestamp=timestamp,
            diagnostics={
                'candidate_type': candidate.value,
                'c_proportion': features.count_proportion(AOI.C),
                'c_duration': features.raw_duration(AOI.C),
                'total_duration': features.total_duration,
                'rules': explanation['rules'],
            },
        )

        zoomed_area = self.zoom_policy.apply(features, self.zoom_controller, timestamp)
        result = replace(result, zoomed_area=zoomed_area)

        if user_type != UserType.UNKNOWN:
            self._last_result = result

        processing_ms = (time.perf_counter() - start_time) * 1000
        self.stats.last_processing_ms = processing_ms
        self.stats.peak_processing_ms = max(self.stats.peak_processing_ms, processing_ms)
        ErrorHandlingUtils.log_performance_warning("window classification", processing_ms)

        return result

    def last_classification(self) -> Optional[ClassificationResult]:
        """The most recent result with a confirmed (non-unknown) user type."""
        return self._last_result

    def reset(self):
        """Discard the live window, pending confirmations and zoom."""
        self.aggregator.reset()
        self.debouncer.reset()
        self.zoom_controller.reset()
        logger.info("ClassificationEngine reset")

    def get_statistics(self) -> EngineStats:
        return self.stats
