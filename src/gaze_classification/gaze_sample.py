"""
Gaze sample data structures.

Samples are produced by an external capture bridge in screen pixel
coordinates, optionally already tagged with the zone they fall in.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Dict, Any, Union

from config import AOI
from utils.validation import ValidationUtils

logger = logging.getLogger(__name__)


class InvalidSampleError(ValueError):
    """Raised when a gaze sample cannot be interpreted."""


@dataclass
class GazeSample:
    """Data structure for a single gaze sample."""
    x: float  # Screen x coordinate (pixels)
    y: float  # Screen y coordinate (pixels)
    duration: float  # Fixation duration (ms)
    aoi: Optional[AOI] = None  # Resolved from x/y when missing
    timestamp: Optional[float] = None  # Set on ingest (ms)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GazeSample":
        """
        Build a sample from a {x, y, aoi?, duration, timestamp?} mapping.

        Args:
            data: Raw sample mapping

        Returns:
            Validated gaze sample

        Raises:
            InvalidSampleError: If a field is missing or malformed
        """
        try:
            x, y, duration = data['x'], data['y'], data['duration']
        except (KeyError, TypeError) as e:
            raise InvalidSampleError(f"Gaze sample is missing a required field: {e}") from e

        sample = cls(x=x, y=y, duration=duration,
                     aoi=data.get('aoi'), timestamp=data.get('timestamp'))
        return validate_gaze_sample(sample)


def validate_gaze_sample(sample: Union[GazeSample, Dict[str, Any]]) -> GazeSample:
    """
    Validate a gaze sample and return a normalized copy.

    Coordinates and duration become floats and an aoi string becomes an AOI.
    The caller's sample is left untouched.

    Raises:
        InvalidSampleError: If the sample is malformed
    """
    if isinstance(sample, dict):
        return GazeSample.from_dict(sample)
    if not isinstance(sample, GazeSample):
        raise InvalidSampleError(f"Unsupported gaze sample type: {type(sample).__name__}")

    sample = replace(sample)

    for name in ('x', 'y'):
        ok, value = ValidationUtils.validate_numeric(getattr(sample, name), name, "gaze sample")
        if not ok:
            raise InvalidSampleError(f"Invalid {name} coordinate: {getattr(sample, name)!r}")
        setattr(sample, name, value)

    ok, duration = ValidationUtils.validate_numeric_range(
        sample.duration, 0.0, float('inf'), 'duration', "gaze sample")
    if not ok:
        raise InvalidSampleError(f"Invalid gaze duration: {sample.duration!r}")
    sample.duration = duration

    if sample.aoi is not None and sample.aoi != "":
        try:
            sample.aoi = AOI.parse(sample.aoi)
        except ValueError as e:
            raise InvalidSampleError(f"Unknown zone: {sample.aoi!r}") from e
    else:
        sample.aoi = None

    return sample
