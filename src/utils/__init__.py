"""
Utility modules for the linear regression tool.

Provides:
    - logger: Loguru-based logging with stdout/stderr and file output
    - exceptions: Custom exception classes for error handling
"""

from src.utils.logger import logger, setup_logger
from src.utils.exceptions import (
    # Base
    LinRegToolError,
    # Usage
    UsageError,
    # Dataset
    DatasetError,
    DatasetFormatError,
    DatasetDimensionError,
    # Training / Model
    TrainingError,
    ModelError,
    ModelNotTrainedError,
    ModelSaveError,
    ModelLoadError,
    # Tracking
    TrackingError,
)

__all__ = [
    # Logger
    "logger",
    "setup_logger",
    # Base
    "LinRegToolError",
    # Usage
    "UsageError",
    # Dataset
    "DatasetError",
    "DatasetFormatError",
    "DatasetDimensionError",
    # Training / Model
    "TrainingError",
    "ModelError",
    "ModelNotTrainedError",
    "ModelSaveError",
    "ModelLoadError",
    # Tracking
    "TrackingError",
]
