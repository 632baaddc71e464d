"""
Zone zoom state machine.

Holds the scale factor of every screen zone and enforces that at most one
task zone is enlarged at a time. Changes are pushed synchronously to
observers injected by the hosting UI layer.
"""

import time
import logging
from types import MappingProxyType
from typing import Optional, Dict, Any, Callable, Mapping
from dataclasses import dataclass

from config import AOI, ALL_ZONES, TASK_ZONES, AOI_LABELS
from utils.validation import ValidationUtils

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 1.0
DEFAULT_ZOOM_SCALE = 1.5


class InvalidZoneError(ValueError):
    """Raised when a zone that cannot be zoomed is requested."""


@dataclass(frozen=True)
class ZoomEvent:
    """Notification sent to the change observer after a zoom."""
    zoomed_area: AOI
    zoom_state: Mapping[AOI, float]  # Read-only view
    timestamp: float  # ms

    def __post_init__(self):
        object.__setattr__(self, 'zoom_state', MappingProxyType(dict(self.zoom_state)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'zoomedArea': self.zoomed_area.value,
            'zoomState': {zone.value: scale for zone, scale in self.zoom_state.items()},
            'timestamp': self.timestamp,
        }


def default_zoom_state() -> Dict[AOI, float]:
    return {zone: DEFAULT_SCALE for zone in ALL_ZONES}


class ZoomController:
    """
    Scale-state machine for the four task zones plus the non-task zone.

    Observers run inside the call that changed the state; exceptions they
    raise propagate to the caller.
    """

    def __init__(self,
                 on_zoom_change: Optional[Callable[[ZoomEvent], None]] = None,
                 on_zoom_reset: Optional[Callable[[Dict[AOI, float]], None]] = None,
                 host_update: Optional[Callable[[Any], None]] = None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize zoom controller.

        Args:
            on_zoom_change: Called with a ZoomEvent after every zoom
            on_zoom_reset: Called with the zoom state after every reset
            host_update: Fallback hook used when an observer is not registered
            clock: Time source in seconds, used for event timestamps
        """
        self._state = default_zoom_state()
        self.on_zoom_change = on_zoom_change
        self.on_zoom_reset = on_zoom_reset
        self.host_update = host_update
        self.clock = clock

        logger.info("ZoomController initialized")

    def set_change_observer(self, callback: Optional[Callable[[ZoomEvent], None]]):
        self.on_zoom_change = callback

    def set_reset_observer(self, callback: Optional[Callable[[Dict[AOI, float]], None]]):
        self.on_zoom_reset = callback

    @property
    def zoom_state(self) -> Dict[AOI, float]:
        """Copy of the current scale of every zone."""
        return dict(self._state)

    @property
    def zoomed_area(self) -> Optional[AOI]:
        """The enlarged task zone, if any."""
        for zone in TASK_ZONES:
            if self._state[zone] != DEFAULT_SCALE:
                return zone
        return None

    def set_zoom(self, zone, scale: float = DEFAULT_ZOOM_SCALE,
                 timestamp: Optional[float] = None) -> Dict[AOI, float]:
        """
        Enlarge a single task zone.

        Args:
            zone: Task zone (a, b, c or f) as AOI or string
            scale: Scale factor for the zone
            timestamp: Event timestamp in ms (defaults to the clock)

        Returns:
            Copy of the new zoom state

        Raises:
            InvalidZoneError: If zone is not a task zone; state is unchanged
            ValueError: If scale is not a positive finite number other than
                1.0; state is unchanged
        """
        try:
            target = AOI.parse(zone)
        except ValueError:
            target = None
        if target not in TASK_ZONES:
            valid = ", ".join(f"{z.value} ({AOI_LABELS[z]})" for z in TASK_ZONES)
            error_msg = f"Invalid zone: {zone!r}, valid zones: {valid}"
            logger.error(error_msg)
            raise InvalidZoneError(error_msg)

        ok, scale = ValidationUtils.validate_numeric(scale, 'scale', "set_zoom")
        if not ok or scale <= 0 or scale == DEFAULT_SCALE:
            error_msg = f"Invalid zoom scale for zone {target.value}: must be positive and not {DEFAULT_SCALE}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        self._state = default_zoom_state()
        self._state[target] = scale
        logger.info(f"Zone {target.value} ({AOI_LABELS[target]}) zoomed to {scale}x")

        if timestamp is None:
            timestamp = self.clock() * 1000
        event = ZoomEvent(zoomed_area=target, zoom_state=self.zoom_state, timestamp=timestamp)

        if self.on_zoom_change is not None:
            self.on_zoom_change(event)
        else:
            self._default_update(event, "change")

        return self.zoom_state

    def reset(self) -> Dict[AOI, float]:
        """
        Restore every zone to the default scale.

        Returns:
            Copy of the new zoom state
        """
        self._state = default_zoom_state()
        logger.info("All zones reset to default scale")

        state = self.zoom_state
        if self.on_zoom_reset is not None:
            self.on_zoom_reset(state)
        else:
            self._default_update(state, "reset")

        return self.zoom_state

    def _default_update(self, payload, kind: str):
        if self.host_update is not None:
            self.host_update(payload)
        else:
            logger.debug(f"No zoom {kind} observer registered: {payload}")
