"""
Gaze strategy classification module.
Classifies reading strategy from zone-tagged gaze samples and drives zone zoom.

Core: window aggregation, feature extraction and threshold classification
Side effects: zoom state machine and UI layout recommendations
"""

from .gaze_sample import GazeSample, InvalidSampleError, validate_gaze_sample
from .aoi_resolver import resolve_aoi
from .window_aggregator import WindowAggregator, Window, ZoneStats
from .feature_extractor import WindowFeatures, ZoneProportion, extract_features, median, shannon_entropy
from .classifier import UserType, UserClassifier, ClassificationDebouncer
from .zoom_controller import ZoomController, ZoomEvent, InvalidZoneError
from .recommendation import UIRecommendation, get_ui_recommendation
from .classification_engine import (
    ClassificationEngine, ClassificationResult, EngineStats, ZoomPolicy, classify_features
)

__all__ = [
    # Input and windowing
    'GazeSample', 'InvalidSampleError', 'validate_gaze_sample', 'resolve_aoi',
    'WindowAggregator', 'Window', 'ZoneStats',
    # Features and classification
    'WindowFeatures', 'ZoneProportion', 'extract_features', 'median', 'shannon_entropy',
    'UserType', 'UserClassifier', 'ClassificationDebouncer',
    # Outputs
    'ZoomController', 'ZoomEvent', 'InvalidZoneError',
    'UIRecommendation', 'get_ui_recommendation',
    'ClassificationEngine', 'ClassificationResult', 'EngineStats', 'ZoomPolicy', 'classify_features'
]
