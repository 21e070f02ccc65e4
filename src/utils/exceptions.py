"""
Custom exceptions for the linear regression tool.

Provides a hierarchy of exceptions for different error scenarios:
- Usage errors (command line)
- Dataset errors (loading and parsing training data)
- Training and model errors (fitting, saving, loading)
"""


class LinRegToolError(Exception):
    """Base exception for all linear regression tool errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


# =============================================================================
# Usage Exceptions
# =============================================================================

class UsageError(LinRegToolError):
    """Error when the command line cannot be used."""
    pass


# =============================================================================
# Dataset Exceptions
# =============================================================================

class DatasetError(LinRegToolError):
    """Base exception for dataset-related errors."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class DatasetFormatError(DatasetError):
    """Error when a dataset file is malformed or of an unknown type."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message, path=path)


class DatasetDimensionError(DatasetError):
    """Error when sample dimensions do not match the dataset dimensions."""
    pass


# =============================================================================
# Training / Model Exceptions
# =============================================================================

class TrainingError(LinRegToolError):
    """Error when the regression pipeline fails to fit."""
    pass


class ModelError(LinRegToolError):
    """Base exception for trained-model errors."""
    pass


class ModelNotTrainedError(ModelError):
    """Error when an operation needs a trained model."""

    def __init__(self, message: str = "Model has not been trained"):
        super().__init__(message)


class ModelSaveError(ModelError):
    """Error when serializing the model to disk fails."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class ModelLoadError(ModelError):
    """Error when a serialized model cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


# =============================================================================
# Tracking Exceptions
# =============================================================================

class TrackingError(LinRegToolError):
    """Error when logging a run to MLflow fails."""
    pass


# Export all exceptions
__all__ = [
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
