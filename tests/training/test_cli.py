"""
Tests for the grt-lin-reg-tool command line.

Each test runs main() with an argument list and checks the exit code,
the log output and the files written.
"""

from unittest.mock import patch

import pytest

from src.lin_reg_tool import cli
from src.lin_reg_tool.cli import DEFAULT_MODEL_FILENAME, EXIT_FAILURE, EXIT_SUCCESS, main
from src.lin_reg_tool.config import settings
from src.lin_reg_tool.data_loader import GRT_FILE_HEADER, RegressionData
from src.lin_reg_tool.model import RegressionPipeline
from src.utils.exceptions import TrackingError, TrainingError


@pytest.fixture(autouse=True)
def work_dir(tmp_path, monkeypatch):
    """Run every test in a temporary directory so default model files stay there."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.mark.parametrize("argv", [[], None])
def test_not_enough_arguments(argv, log_messages, monkeypatch):
    """Test that no arguments prints usage and fails without touching files."""
    monkeypatch.setattr("sys.argv", ["grt-lin-reg-tool"])

    with patch.object(RegressionData, "load") as mock_load:
        assert main(argv) == EXIT_FAILURE

    mock_load.assert_not_called()
    assert "Not enough input arguments!" in log_messages
    assert any(line.startswith("grt-lin-reg-tool [options]") for line in log_messages)


def test_missing_filename(log_messages):
    with patch.object(RegressionData, "load") as mock_load:
        assert main(["--model", "out.model"]) == EXIT_FAILURE

    mock_load.assert_not_called()
    assert any("You can set the filename using the -f" in line for line in log_messages)


def test_flag_without_value(log_messages):
    assert main(["-f"]) == EXIT_FAILURE
    assert any(line.startswith("Failed to parse command line") for line in log_messages)


def test_reports_dataset_shape(grt_file, log_messages):
    """Test that sample count and dimensions from the file are reported."""
    assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    assert "- Num training samples: 300" in log_messages
    assert "- Num input dimensions: 2" in log_messages
    assert "- Num target dimensions: 1" in log_messages
    assert "Model Trained!" in log_messages


def test_default_model_filename(grt_file, work_dir):
    assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    model_path = work_dir / DEFAULT_MODEL_FILENAME
    assert model_path.exists()

    prediction = RegressionPipeline.load(model_path).predict([5.0, 5.0])
    assert prediction.shape == (1, 1)


def test_explicit_model_filename(grt_file, work_dir):
    """Test that --model writes a model that can be reloaded and used."""
    assert main(["-f", str(grt_file), "--model", "out.model"]) == EXIT_SUCCESS

    assert (work_dir / "out.model").exists()
    assert not (work_dir / DEFAULT_MODEL_FILENAME).exists()

    # y = 2*x0 + 3*x1 + 1 gives 26 at (5, 5)
    prediction = RegressionPipeline.load(work_dir / "out.model").predict([5.0, 5.0])
    assert 10.0 < prediction[0, 0] < 42.0


def test_csv_with_dimensions(csv_file, work_dir, log_messages):
    assert main(["-f", str(csv_file), "-n", "2", "-t", "2", "--model", "csv.model"]) == EXIT_SUCCESS

    assert "num input dimensions: 2 num target dimensions: 2" in log_messages
    assert "- Num target dimensions: 2" in log_messages

    model = RegressionPipeline.load(work_dir / "csv.model")
    assert model.predict([1.0, 1.0]).shape == (1, 2)


def test_csv_without_dimensions(csv_file, log_messages):
    with patch.object(RegressionPipeline, "train") as mock_train:
        assert main(["-f", str(csv_file)]) == EXIT_FAILURE

    mock_train.assert_not_called()
    assert any(line.startswith("Failed to load training data!") for line in log_messages)


def test_csv_with_invalid_dimension(csv_file):
    """An unparseable -n is treated as absent, so the CSV cannot be loaded."""
    assert main(["-f", str(csv_file), "-n", "two", "-t", "2"]) == EXIT_FAILURE
    assert main(["-f", str(csv_file), "-n", "-2", "-t", "2"]) == EXIT_FAILURE


def test_missing_dataset_file(work_dir, log_messages):
    with patch.object(RegressionPipeline, "train") as mock_train:
        assert main(["-f", str(work_dir / "missing.grt")]) == EXIT_FAILURE

    mock_train.assert_not_called()
    assert not (work_dir / DEFAULT_MODEL_FILENAME).exists()
    assert "Failed to train model!" in log_messages


def test_huge_sample_count_fails_cleanly(work_dir, log_messages):
    """A header claiming far more samples than the file holds is a load failure."""
    path = work_dir / "huge.grt"
    path.write_text(
        f"{GRT_FILE_HEADER}\n"
        "NumInputDimensions: 2\n"
        "NumTargetDimensions: 1\n"
        "TotalNumTrainingExamples: 100000000000000\n"
        "RegressionData:\n"
        "1 2 3\n"
    )

    assert main(["-f", str(path)]) == EXIT_FAILURE
    assert any(line.startswith("Failed to load training data!") for line in log_messages)


def test_grt_file_without_extension(grt_file, work_dir):
    path = grt_file.rename(work_dir / "train")

    assert main(["-f", str(path), "--model", "out.model"]) == EXIT_SUCCESS
    assert (work_dir / "out.model").exists()


def test_training_time_logged_after_save(grt_file, log_messages):
    assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    saved = log_messages.index("- Model saved.")
    timing = next(i for i, line in enumerate(log_messages) if line.startswith("- TrainingTime:"))
    assert saved < timing


def test_training_failure(grt_file, log_messages):
    with patch.object(RegressionPipeline, "train", side_effect=TrainingError("diverged")):
        assert main(["-f", str(grt_file)]) == EXIT_FAILURE

    assert "Failed to train model! diverged" in log_messages


def test_save_failure_is_not_fatal(grt_file, work_dir, log_messages):
    """A model that cannot be saved still counts as trained."""
    model_path = work_dir / "missing-dir" / "out.model"

    assert main(["-f", str(grt_file), "--model", str(model_path)]) == EXIT_SUCCESS

    assert not model_path.exists()
    assert any(line.startswith("Failed to save model to file") for line in log_messages)
    assert "Model Trained!" in log_messages


def test_unknown_flags_are_ignored(grt_file):
    assert main(["-f", str(grt_file), "--verbose", "-x", "3"]) == EXIT_SUCCESS


def test_tracking_disabled_by_default(grt_file):
    with patch.object(cli, "log_training_run") as mock_log:
        assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    mock_log.assert_not_called()


def test_tracking_enabled(grt_file, monkeypatch):
    monkeypatch.setattr(settings.mlflow, "enabled", True)

    with patch.object(cli, "log_training_run", return_value="run-123") as mock_log:
        assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    mock_log.assert_called_once()
    pipeline, dataset, filename = mock_log.call_args.args
    assert pipeline.trained
    assert dataset.num_samples == 300
    assert filename == str(grt_file)


def test_tracking_failure_is_not_fatal(grt_file, monkeypatch, log_messages):
    monkeypatch.setattr(settings.mlflow, "enabled", True)

    with patch.object(cli, "log_training_run", side_effect=TrackingError("tracking server unavailable")):
        assert main(["-f", str(grt_file)]) == EXIT_SUCCESS

    assert "tracking server unavailable" in log_messages
