"""
User interface integration for the gaze strategy classifier.

Qt signal adapter wiring engine notifications to host widgets.
"""

from .zoom_bridge import ZoomSignalBridge

__all__ = ['ZoomSignalBridge']
