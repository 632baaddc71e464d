"""
Qt host adapter for the classification engine.

Re-emits zoom notifications and classification results as PyQt6 signals
so editor widgets can connect to them like any other Qt event source.
The adapter only forwards notifications; rendering stays with the
connected widgets.
"""

import logging
from typing import Optional, Dict, Any, Union
from PyQt6.QtCore import QObject, pyqtSignal

from gaze_classification.classification_engine import ClassificationEngine, ClassificationResult
from gaze_classification.gaze_sample import GazeSample
from gaze_classification.zoom_controller import ZoomEvent

logger = logging.getLogger(__name__)


class ZoomSignalBridge(QObject):
    """
    Connects a ClassificationEngine to the Qt signal system.

    Signals are emitted synchronously from within ingest(), so a slot
    that raises aborts the ingest call.
    """

    # PyQt signals for communication with UI
    zoom_changed = pyqtSignal(object)  # ZoomEvent
    zoom_reset = pyqtSignal(object)  # Dict[AOI, float]
    classification_ready = pyqtSignal(object)  # ClassificationResult

    def __init__(self, engine: Optional[ClassificationEngine] = None, parent: Optional[QObject] = None):
        """
        Initialize signal bridge.

        Args:
            engine: Engine to attach to (can be attached later)
            parent: Optional Qt parent object
        """
        super().__init__(parent)
        self.engine = None
        self.last_zoom_event: Optional[ZoomEvent] = None

        if engine is not None:
            self.attach(engine)

        logger.info("ZoomSignalBridge initialized")

    def attach(self, engine: ClassificationEngine):
        """
        Register the bridge as the engine's zoom observers.

        Args:
            engine: Engine whose zoom controller should notify the bridge
        """
        self.engine = engine
        engine.zoom_controller.set_change_observer(self._on_zoom_change)
        engine.zoom_controller.set_reset_observer(self._on_zoom_reset)
        logger.debug("Zoom observers attached to signal bridge")

    def detach(self):
        """Remove the bridge's observers from the attached engine."""
        if self.engine is None:
            return
        self.engine.zoom_controller.set_change_observer(None)
        self.engine.zoom_controller.set_reset_observer(None)
        self.engine = None

    def ingest(self, sample: Union[GazeSample, Dict[str, Any]],
               timestamp: float) -> Optional[ClassificationResult]:
        """
        Forward a gaze sample to the engine.

        Emits classification_ready when the sample completes a window.
        """
        if self.engine is None:
            raise RuntimeError("ZoomSignalBridge is not attached to an engine")

        result = self.engine.ingest(sample, timestamp)
        if result is not None:
            self.classification_ready.emit(result)
        return result

    def _on_zoom_change(self, event: ZoomEvent):
        self.last_zoom_event = event
        self.zoom_changed.emit(event)

    def _on_zoom_reset(self, zoom_state):
        self.last_zoom_event = None
        self.zoom_reset.emit(zoom_state)
