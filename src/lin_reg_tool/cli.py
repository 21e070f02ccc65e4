"""
Command line tool for training a linear regression model.

The training data can be a GRT regression data file or a CSV file. A CSV file
has one sample per row: the first N columns are the inputs and the last T
columns the targets. N and T are set with -n and -t, which are only required
for CSV files since a GRT file stores them in its header.

Usage:
    grt-lin-reg-tool -f data.grt
    grt-lin-reg-tool -f data.csv -n 3 -t 1 --model my-model.joblib
"""

import argparse
import sys
from typing import Sequence

from src.lin_reg_tool.config import settings
from src.lin_reg_tool.data_loader import RegressionData
from src.lin_reg_tool.model import LinearRegressionConfig, RegressionPipeline
from src.lin_reg_tool.tracking import log_training_run
from src.utils.exceptions import (
    DatasetError,
    LinRegToolError,
    ModelError,
    TrackingError,
    TrainingError,
    UsageError,
)
from src.utils.logger import TOOL_NAME, logger, setup_logger

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DEFAULT_MODEL_FILENAME = "linear-regression-model.joblib"

USAGE_LINES = (
    f"{TOOL_NAME} [options]",
    "\t-f: sets the filename the training data will be loaded from. "
    "The training data can either be a GRT RegressionData file or a CSV file.",
    "\t-n: sets the number of input dimensions in the dataset, only required if the input data format is a CSV file.",
    "\t-t: sets the number of target dimensions in the dataset, only required if the input data format is a CSV file.",
    "\t--model: sets the filename the regression model will be saved to",
)


class CommandLineParser(argparse.ArgumentParser):
    """Argument parser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def create_parser() -> CommandLineParser:
    parser = CommandLineParser(prog=TOOL_NAME, add_help=False, allow_abbrev=False)
    parser.add_argument("-f", dest="filename", default=None, help="training data filename")
    parser.add_argument("-n", dest="num_input_dimensions", default=None, help="number of input dimensions")
    parser.add_argument("-t", dest="num_target_dimensions", default=None, help="number of target dimensions")
    parser.add_argument("--model", dest="model_filename", default=None, help="model output filename")
    return parser


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """Parse the recognized options, ignoring anything else."""
    args, unknown = create_parser().parse_known_args(list(argv))
    if unknown:
        logger.debug(f"Ignoring unrecognized arguments: {' '.join(unknown)}")
    return args


def print_usage() -> None:
    for line in USAGE_LINES:
        logger.info(line)


def _parse_dimension(value: str | None) -> int | None:
    """Return value as a non-negative int, or None if it is missing or invalid."""
    if value is None:
        return None
    try:
        dimension = int(value)
    except ValueError:
        return None
    return dimension if dimension >= 0 else None


def train(args: argparse.Namespace) -> bool:
    """
    Load the training data, train the model and save it.

    Args:
        args: Parsed command line options

    Returns:
        True if the model was trained. A failed save only logs a warning.
    """
    logger.info("Training regression model...")

    if not args.filename:
        logger.error("Failed to parse filename from command line! You can set the filename using the -f.")
        print_usage()
        return False

    model_filename = args.model_filename or DEFAULT_MODEL_FILENAME

    training_data = RegressionData()

    num_input_dimensions = _parse_dimension(args.num_input_dimensions)
    num_target_dimensions = _parse_dimension(args.num_target_dimensions)
    if num_input_dimensions is not None and num_target_dimensions is not None:
        logger.info(
            f"num input dimensions: {num_input_dimensions} num target dimensions: {num_target_dimensions}"
        )
        training_data.set_input_and_target_dimensions(num_input_dimensions, num_target_dimensions)

    logger.info("- Loading Training Data...")
    try:
        training_data.load(args.filename)
    except DatasetError as e:
        logger.error(f"Failed to load training data! {e.message}")
        return False

    logger.info(f"- Num training samples: {training_data.num_samples}")
    logger.info(f"- Num input dimensions: {training_data.num_input_dimensions}")
    logger.info(f"- Num target dimensions: {training_data.num_target_dimensions}")

    pipeline = RegressionPipeline(LinearRegressionConfig())

    logger.info("- Training model...")
    try:
        pipeline.train(training_data)
    except TrainingError as e:
        logger.error(f"Failed to train model! {e.message}")
        return False

    logger.info("- Model trained!")
    logger.info(f"- Training RMS error: {pipeline.training_rms_error:.5f}")

    logger.info(f"- Saving model to: {model_filename}")
    try:
        pipeline.save(model_filename)
        logger.info("- Model saved.")
    except ModelError as e:
        logger.warning(f"Failed to save model to file: {model_filename} ({e.message})")

    logger.info(f"- TrainingTime: {pipeline.training_time * 1000:.3f} ms")

    if settings.mlflow.enabled:
        try:
            log_training_run(pipeline, training_data, args.filename)
        except TrackingError as e:
            logger.warning(e.message)

    return True


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the tool.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else list(argv)

    setup_logger(
        log_level=settings.logging.level,
        log_dir=settings.logging.log_dir,
        log_file=settings.logging.log_file,
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
        enable_file=settings.logging.enable_file,
    )

    if len(argv) < 1:
        logger.error("Not enough input arguments!")
        print_usage()
        return EXIT_FAILURE

    try:
        args = parse_args(argv)
        trained = train(args)
    except UsageError as e:
        logger.error(f"Failed to parse command line: {e.message}")
        print_usage()
        return EXIT_FAILURE
    except LinRegToolError as e:
        logger.error(e.message)
        trained = False

    if trained:
        logger.info("Model Trained!")
        return EXIT_SUCCESS

    logger.error("Failed to train model!")
    print_usage()
    return EXIT_FAILURE


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
