"""
Utility modules for the gaze strategy classifier.

Validation helpers and logging configuration.
"""

from .validation import ValidationUtils, ErrorHandlingUtils, setup_logging

__all__ = ['ValidationUtils', 'ErrorHandlingUtils', 'setup_logging']
