"""
Optional MLflow experiment tracking.

Enabled with MLFLOW_ENABLED=true. Logs the hyperparameters, dataset shape,
training metrics and the fitted pipeline for each training run.
"""

import mlflow
import mlflow.sklearn
from mlflow.exceptions import MlflowException
from loguru import logger

from src.lin_reg_tool.config import settings
from src.lin_reg_tool.data_loader import RegressionData
from src.lin_reg_tool.model import RegressionPipeline
from src.utils.exceptions import TrackingError


def setup_mlflow() -> str:
    """Configure MLflow tracking and return the experiment id."""
    mlflow.set_tracking_uri(settings.mlflow.tracking_uri)

    experiment = mlflow.set_experiment(settings.mlflow.experiment_name)
    logger.info(f"MLflow experiment: {settings.mlflow.experiment_name}")

    return experiment.experiment_id


def log_training_run(pipeline: RegressionPipeline, dataset: RegressionData, dataset_filename: str) -> str:
    """
    Log a trained pipeline to MLflow.

    Args:
        pipeline: Trained regression pipeline
        dataset: Dataset the pipeline was trained on
        dataset_filename: Path the dataset was loaded from

    Returns:
        MLflow run id

    Raises:
        TrackingError: If MLflow rejects the run
    """
    try:
        setup_mlflow()

        with mlflow.start_run() as run:
            mlflow.log_params({
                **pipeline.config.to_params(),
                "dataset": dataset_filename,
                "num_samples": dataset.num_samples,
                "num_input_dimensions": dataset.num_input_dimensions,
                "num_target_dimensions": dataset.num_target_dimensions,
            })

            metrics = {"training_time_seconds": pipeline.training_time}
            if pipeline.training_rms_error is not None:
                metrics["training_rms_error"] = pipeline.training_rms_error
            if pipeline.training_r2 is not None:
                metrics["training_r2"] = pipeline.training_r2
            mlflow.log_metrics(metrics)

            mlflow.sklearn.log_model(
                pipeline.estimator,
                "model",
                registered_model_name=settings.mlflow.registered_model_name,
            )

            logger.info(f"MLflow run: {run.info.run_id}")
            return run.info.run_id
    except (MlflowException, OSError) as e:
        raise TrackingError(f"Failed to log training run to MLflow: {e}") from e


__all__ = ["setup_mlflow", "log_training_run"]
