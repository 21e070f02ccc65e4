"""
Shared fixtures for the linear regression tool tests.
"""

import numpy as np
import pytest
from loguru import logger

from src.lin_reg_tool.data_loader import RegressionData


def make_linear_dataset(num_samples: int = 300, num_targets: int = 1, seed: int = 0) -> RegressionData:
    """Noise-free linear data: y0 = 2*x0 + 3*x1 + 1, y1 = -x0 + 0.5*x1 + 4."""
    rng = np.random.default_rng(seed)
    inputs = rng.uniform(0.0, 10.0, size=(num_samples, 2))
    targets = np.column_stack([
        2.0 * inputs[:, 0] + 3.0 * inputs[:, 1] + 1.0,
        -1.0 * inputs[:, 0] + 0.5 * inputs[:, 1] + 4.0,
    ])[:, :num_targets]

    dataset = RegressionData(2, num_targets, name="linear", info_text="synthetic linear data")
    dataset.inputs = inputs
    dataset.targets = targets
    return dataset


@pytest.fixture
def linear_dataset() -> RegressionData:
    return make_linear_dataset()


@pytest.fixture
def two_target_dataset() -> RegressionData:
    return make_linear_dataset(num_targets=2)


@pytest.fixture
def grt_file(tmp_path, linear_dataset):
    path = tmp_path / "train.grt"
    linear_dataset.save(path)
    return path


@pytest.fixture
def csv_file(tmp_path, two_target_dataset):
    path = tmp_path / "train.csv"
    two_target_dataset.save(path)
    return path


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)
