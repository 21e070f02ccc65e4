"""
Linear regression pipeline.

Builds the fixed linear regression configuration, trains it on a
RegressionData instance, and saves/loads the fitted pipeline with joblib.
"""

import time
from dataclasses import dataclass
from pathlib import Path
import pickle

import joblib
import numpy as np
from loguru import logger
from sklearn.compose import TransformedTargetRegressor
from sklearn.exceptions import NotFittedError
from sklearn.linear_model import SGDRegressor
from sklearn.metrics import mean_squared_error, r2_score
from sklearn.multioutput import MultiOutputRegressor
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import MinMaxScaler

from src.lin_reg_tool.data_loader import RegressionData
from src.utils.exceptions import (
    ModelLoadError,
    ModelNotTrainedError,
    ModelSaveError,
    TrainingError,
)


@dataclass(frozen=True)
class LinearRegressionConfig:
    """Hyperparameters of the linear regression stage."""

    max_num_epochs: int = 500
    min_change: float = 1.0e-5
    use_validation_set: bool = True
    # Percentage of the training samples held out for validation
    validation_set_size: int = 20
    randomise_training_order: bool = True
    use_scaling: bool = True

    def to_params(self) -> dict:
        """Flat parameter dict for experiment tracking."""
        return {
            "model_type": "LinearRegression",
            "max_num_epochs": self.max_num_epochs,
            "min_change": self.min_change,
            "use_validation_set": self.use_validation_set,
            "validation_set_size": self.validation_set_size,
            "randomise_training_order": self.randomise_training_order,
            "use_scaling": self.use_scaling,
        }


def build_linear_regression(config: LinearRegressionConfig) -> TransformedTargetRegressor | SGDRegressor:
    """
    Create a single-output linear regression estimator.

    When scaling is enabled the targets are scaled to [0, 1] before fitting
    and the predictions are mapped back to the original range.
    """
    regression = SGDRegressor(
        max_iter=config.max_num_epochs,
        tol=config.min_change,
        early_stopping=config.use_validation_set,
        validation_fraction=config.validation_set_size / 100.0,
        shuffle=config.randomise_training_order,
    )
    if not config.use_scaling:
        return regression
    return TransformedTargetRegressor(regressor=regression, transformer=MinMaxScaler())


def build_pipeline(config: LinearRegressionConfig) -> Pipeline:
    """
    Create the processing pipeline with a multidimensional regression stage.

    The linear regression is wrapped so one copy is fitted per target
    dimension.
    """
    steps = []
    if config.use_scaling:
        steps.append(("scaler", MinMaxScaler()))
    steps.append(("regressor", MultiOutputRegressor(build_linear_regression(config))))
    return Pipeline(steps)


class RegressionPipeline:
    """Holds the regression pipeline and its training results."""

    def __init__(self, config: LinearRegressionConfig | None = None, estimator: Pipeline | None = None):
        self.config = config or LinearRegressionConfig()
        self.estimator = estimator if estimator is not None else build_pipeline(self.config)
        self.trained = estimator is not None
        self.training_time: float = 0.0
        self.training_rms_error: float | None = None
        self.training_r2: float | None = None

    @property
    def num_input_dimensions(self) -> int:
        if not self.trained:
            return 0
        return int(self.estimator.n_features_in_)

    @property
    def num_target_dimensions(self) -> int:
        if not self.trained:
            return 0
        return len(self.estimator.named_steps["regressor"].estimators_)

    def train(self, dataset: RegressionData) -> None:
        """
        Fit the pipeline to a dataset.

        Args:
            dataset: Training data

        Raises:
            TrainingError: If the dataset is empty or fitting fails
        """
        if dataset.num_samples == 0:
            raise TrainingError("Training dataset is empty")

        self.trained = False
        start = time.perf_counter()
        try:
            self.estimator.fit(dataset.inputs, dataset.targets)
        except (ValueError, FloatingPointError) as e:
            raise TrainingError(f"Failed to fit regression model: {e}") from e
        self.training_time = time.perf_counter() - start
        self.trained = True

        predictions = self.estimator.predict(dataset.inputs)
        if not np.isfinite(predictions).all():
            self.trained = False
            raise TrainingError("Regression model diverged (non-finite predictions)")

        self.training_rms_error = float(np.sqrt(mean_squared_error(dataset.targets, predictions)))
        self.training_r2 = float(r2_score(dataset.targets, predictions))

        logger.debug(
            f"Trained on {dataset.num_samples} samples in {self.training_time:.3f}s "
            f"(RMS: {self.training_rms_error:.5f}, R²: {self.training_r2:.3f})"
        )

    def predict(self, inputs) -> np.ndarray:
        """
        Predict target vectors.

        Args:
            inputs: (K, N) array or a single input vector

        Returns:
            (K, T) array of predictions
        """
        if not self.trained:
            raise ModelNotTrainedError()

        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.ndim == 1:
            inputs = inputs.reshape(1, -1)
        try:
            return self.estimator.predict(inputs)
        except NotFittedError as e:
            raise ModelNotTrainedError(str(e)) from e

    def save(self, filename: str | Path) -> None:
        """
        Serialize the fitted pipeline with joblib.

        Raises:
            ModelNotTrainedError: If the pipeline has not been trained
            ModelSaveError: If the file cannot be written
        """
        if not self.trained:
            raise ModelNotTrainedError("Cannot save a model that has not been trained")

        path = Path(filename)
        try:
            joblib.dump(self.estimator, path)
        except (OSError, pickle.PicklingError) as e:
            raise ModelSaveError(f"Failed to save model to {path}: {e}", path=str(path)) from e

    @classmethod
    def load(cls, filename: str | Path) -> "RegressionPipeline":
        """
        Load a pipeline saved by save().

        Raises:
            ModelLoadError: If the file is missing or is not a saved pipeline
        """
        path = Path(filename)
        try:
            estimator = joblib.load(path)
        except (OSError, EOFError, pickle.UnpicklingError) as e:
            raise ModelLoadError(f"Failed to load model from {path}: {e}", path=str(path)) from e

        if not isinstance(estimator, Pipeline):
            raise ModelLoadError(
                f"{path} does not contain a regression pipeline (found {type(estimator).__name__})",
                path=str(path),
            )
        return cls(estimator=estimator)


__all__ = [
    "LinearRegressionConfig",
    "RegressionPipeline",
    "build_linear_regression",
    "build_pipeline",
]
