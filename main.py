"""
Linear Regression Tool - Entry Point

Train a model from a GRT regression data file:
    python main.py -f data.grt

Or from a CSV file with 3 inputs and 1 target:
    python main.py -f data.csv -n 3 -t 1 --model my-model.joblib

Environment variables:
    LOG_LEVEL: Log level (default: INFO)
    LOG_ENABLE_FILE: Also write logs to LOG_LOG_DIR/LOG_LOG_FILE (default: false)
    MLFLOW_ENABLED: Log training runs to MLflow (default: false)
"""

from src.lin_reg_tool.cli import run


if __name__ == "__main__":
    run()
