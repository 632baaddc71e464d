"""
Reading strategy classification.

Deterministic, first-match-wins threshold rules over window features:

- direct: attention concentrated on the code editor with long fixations
- referential: attention shared between the code editor and the hint panel
- exploratory: large saccades spread over many zones, including off-task
"""

import logging
from typing import Dict, Any, Optional
from enum import Enum

from config import AOI, ClassifierConfig
from .feature_extractor import WindowFeatures

logger = logging.getLogger(__name__)

# Fixed rule constants that are not part of the configurable thresholds
DIRECT_MIN_C_PROPORTION = 0.2
DIRECT_MIN_C_DENSITY = 0.3
REFERENTIAL_MIN_COMBINED = 0.5
REFERENTIAL_MAX_DENSITY_DIFF = 0.8
REFERENTIAL_MIN_DURATION = 150.0  # ms
EXPLORATORY_MIN_G_PROPORTION = 0.1
EXPLORATORY_MAX_C_DENSITY = 1.5
EXPLORATORY_MAX_DURATION = 1000.0  # ms


class UserType(str, Enum):
    """Reading strategy classes."""
    DIRECT = "direct"
    REFERENTIAL = "referential"
    EXPLORATORY = "exploratory"
    UNKNOWN = "unknown"


class UserClassifier:
    """
    Classifies a window's features into a reading strategy.

    Classification is a pure function of the features and the configured
    thresholds; it has no side effects.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    def is_direct(self, features: WindowFeatures) -> bool:
        return (features.count_proportion(AOI.C) >= DIRECT_MIN_C_PROPORTION and
                features.density[AOI.C] > DIRECT_MIN_C_DENSITY and
                features.median_gaze_duration >= self.config.gaze_duration_thresholds.short)

    def is_referential(self, features: WindowFeatures) -> bool:
        combined = features.count_proportion(AOI.C) + features.count_proportion(AOI.B)
        density_diff = abs(features.density[AOI.C] - features.density[AOI.B])
        return (combined >= REFERENTIAL_MIN_COMBINED and
                density_diff < REFERENTIAL_MAX_DENSITY_DIFF and
                features.median_gaze_duration >= REFERENTIAL_MIN_DURATION)

    def is_exploratory(self, features: WindowFeatures) -> bool:
        return (features.median_saccade >= self.config.saccade_thresholds.large and
                features.entropy >= self.config.entropy_thresholds.high and
                features.coverage >= self.config.coverage_thresholds.exploratory_min and
                features.count_proportion(AOI.G) > EXPLORATORY_MIN_G_PROPORTION and
                features.density[AOI.C] < EXPLORATORY_MAX_C_DENSITY and
                features.median_gaze_duration < EXPLORATORY_MAX_DURATION)

    def classify(self, features: WindowFeatures) -> UserType:
        """
        Classify window features.

        Args:
            features: Features of a completed window

        Returns:
            The first matching user type, UNKNOWN if no rule matches
        """
        if self.is_direct(features):
            return UserType.DIRECT
        if self.is_referential(features):
            return UserType.REFERENTIAL
        if self.is_exploratory(features):
            return UserType.EXPLORATORY
        return UserType.UNKNOWN

    def explain(self, features: WindowFeatures) -> Dict[str, Any]:
        """Rule outcomes and the values they were evaluated on."""
        return {
            'rules': {
                UserType.DIRECT.value: self.is_direct(features),
                UserType.REFERENTIAL.value: self.is_referential(features),
                UserType.EXPLORATORY.value: self.is_exploratory(features),
            },
            'values': {
                'c_proportion': features.count_proportion(AOI.C),
                'b_proportion': features.count_proportion(AOI.B),
                'g_proportion': features.count_proportion(AOI.G),
                'c_density': features.density[AOI.C],
                'b_density': features.density[AOI.B],
                'density_diff': abs(features.density[AOI.C] - features.density[AOI.B]),
                'median_gaze_duration': features.median_gaze_duration,
                'median_saccade': features.median_saccade,
                'entropy': features.entropy,
                'coverage': features.coverage,
            },
        }


class ClassificationDebouncer:
    """
    Confirms a user type only after N consecutive identical classifications.

    UNKNOWN is never held back; it passes through and breaks any streak.
    With confirmation_windows=1 every classification is confirmed immediately.
    """

    def __init__(self, confirmation_windows: int = 1):
        self.confirmation_windows = max(1, int(confirmation_windows))
        self.counts = {user_type: 0 for user_type in UserType if user_type != UserType.UNKNOWN}
        self.last_confirmed: Optional[UserType] = None

    def observe(self, candidate: UserType) -> Optional[UserType]:
        """
        Record a candidate classification.

        Returns:
            The confirmed user type, or None while the candidate is pending
        """
        if candidate == UserType.UNKNOWN:
            self.reset()
            return UserType.UNKNOWN

        for user_type in self.counts:
            if user_type != candidate:
                self.counts[user_type] = 0
        self.counts[candidate] += 1

        if self.counts[candidate] >= self.confirmation_windows:
            self.last_confirmed = candidate
            return candidate

        logger.debug(f"Candidate {candidate.value} pending confirmation "
                     f"({self.counts[candidate]}/{self.confirmation_windows})")
        return None

    def reset(self):
        for user_type in self.counts:
            self.counts[user_type] = 0
