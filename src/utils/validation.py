"""
Validation and Error Handling Utilities
Centralized validation and logging setup for the gaze strategy classifier.
"""

import logging
import math
from pathlib import Path
from typing import Any, Tuple, Optional, Union


class ValidationUtils:
    """Centralized validation utilities to reduce code duplication"""

    @staticmethod
    def validate_numeric(value: Any, name: str, context="operation") -> Tuple[bool, Optional[float]]:
        """Validate that a value is a finite number (bools are rejected)"""
        if isinstance(value, bool):
            logging.error(f"{context}: Invalid {name} value: {value!r}")
            return False, None
        try:
            value = float(value)
        except (ValueError, TypeError) as e:
            logging.error(f"{context}: Invalid {name} value: {e}")
            return False, None
        if not math.isfinite(value):
            logging.error(f"{context}: {name} must be finite, got {value}")
            return False, None
        return True, value

    @staticmethod
    def validate_numeric_range(value: Any, min_val: float, max_val: float,
                               name: str, context="operation") -> Tuple[bool, Optional[float]]:
        """Validate numeric values are within acceptable ranges"""
        ok, value = ValidationUtils.validate_numeric(value, name, context)
        if not ok:
            return False, None
        if not (min_val <= value <= max_val):
            logging.error(f"{context}: {name} value {value} outside range [{min_val}, {max_val}]")
            return False, None
        return True, value


class ErrorHandlingUtils:
    """Centralized error handling utilities"""

    @staticmethod
    def log_performance_warning(operation: str, duration_ms: float, threshold_ms: float = 50.0):
        """Log performance warnings for slow operations"""
        if duration_ms > threshold_ms:
            logging.warning(f"Performance warning: {operation} took {duration_ms:.2f}ms "
                            f"(threshold: {threshold_ms:.2f}ms)")


def setup_logging(log_file: Optional[Union[str, Path]] = 'gaze_classifier.log',
                  level: int = logging.DEBUG, console_level: int = logging.WARNING):
    """Configure logging with a detailed file handler and a console handler"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers to prevent duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    return logger
