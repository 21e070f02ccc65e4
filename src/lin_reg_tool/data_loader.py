"""
Data loader for labeled regression datasets.

Supports two file formats:
    - GRT regression data files (any name not ending in .csv), which carry the number of
      input and target dimensions in their header
    - CSV files (.csv) with one sample per row, the first N columns holding the
      inputs and the last T columns the targets. N and T must be set before
      loading since the file has no header.
"""

from pathlib import Path

import numpy as np
import polars as pl
from loguru import logger

from src.utils.exceptions import DatasetError, DatasetFormatError, DatasetDimensionError

GRT_FILE_HEADER = "GRT_LABELLED_REGRESSION_DATA_FILE_V1.0"
GRT_DATA_SECTION = "RegressionData:"
CSV_EXTENSIONS = {".csv"}

# External range blocks are followed by one "min max" line per dimension
_RANGE_KEYS = {
    "ExternalInputRanges": "NumInputDimensions",
    "ExternalTargetRanges": "NumTargetDimensions",
}


def _header_int(header: dict[str, str], key: str, path: Path) -> int:
    """Read a non-negative integer value from a parsed GRT header."""
    if key not in header:
        raise DatasetFormatError(f"Missing header field '{key}'", path=str(path))
    try:
        value = int(header[key])
    except ValueError:
        raise DatasetFormatError(
            f"Header field '{key}' is not an integer: {header[key]!r}", path=str(path)
        ) from None
    if value < 0:
        raise DatasetFormatError(f"Header field '{key}' is negative: {value}", path=str(path))
    return value


class RegressionData:
    """
    In-memory labeled regression dataset.

    Inputs are stored as a (K, N) array and targets as a (K, T) array. All
    samples share the same N and T.
    """

    def __init__(
        self,
        num_input_dimensions: int = 0,
        num_target_dimensions: int = 0,
        name: str = "NOT_SET",
        info_text: str = "",
    ):
        self.name = name
        self.info_text = info_text
        self.set_input_and_target_dimensions(num_input_dimensions, num_target_dimensions)

    @property
    def num_input_dimensions(self) -> int:
        return self._num_input_dimensions

    @property
    def num_target_dimensions(self) -> int:
        return self._num_target_dimensions

    @property
    def num_samples(self) -> int:
        return self.inputs.shape[0]

    def __len__(self) -> int:
        return self.num_samples

    def set_input_and_target_dimensions(self, num_input_dimensions: int, num_target_dimensions: int) -> None:
        """Set the expected sample shape. Clears any loaded samples."""
        if num_input_dimensions < 0 or num_target_dimensions < 0:
            raise DatasetDimensionError(
                f"Dimensions must be non-negative, got N={num_input_dimensions} T={num_target_dimensions}"
            )
        self._num_input_dimensions = int(num_input_dimensions)
        self._num_target_dimensions = int(num_target_dimensions)
        self.clear()

    def clear(self) -> None:
        """Remove all samples, keeping the dimensions."""
        self.inputs = np.empty((0, self._num_input_dimensions), dtype=np.float64)
        self.targets = np.empty((0, self._num_target_dimensions), dtype=np.float64)

    def add_sample(self, inputs, targets) -> None:
        """
        Append one sample. Its sizes must match the dataset dimensions.

        Each call copies the arrays, so build large datasets with add_samples.
        """
        inputs = np.asarray(inputs, dtype=np.float64).ravel()
        targets = np.asarray(targets, dtype=np.float64).ravel()

        if inputs.size != self._num_input_dimensions or targets.size != self._num_target_dimensions:
            raise DatasetDimensionError(
                f"Sample has {inputs.size} inputs and {targets.size} targets, "
                f"dataset expects {self._num_input_dimensions} and {self._num_target_dimensions}"
            )

        self.add_samples(inputs.reshape(1, -1), targets.reshape(1, -1))

    def add_samples(self, inputs, targets) -> None:
        """Append a (K, N) block of inputs and a (K, T) block of targets in one copy."""
        inputs = np.asarray(inputs, dtype=np.float64)
        targets = np.asarray(targets, dtype=np.float64)

        if (
            inputs.ndim != 2
            or targets.ndim != 2
            or inputs.shape[0] != targets.shape[0]
            or inputs.shape[1] != self._num_input_dimensions
            or targets.shape[1] != self._num_target_dimensions
        ):
            raise DatasetDimensionError(
                f"Got inputs of shape {inputs.shape} and targets of shape {targets.shape}, "
                f"dataset expects (K, {self._num_input_dimensions}) and (K, {self._num_target_dimensions})"
            )

        self.inputs = np.concatenate([self.inputs, inputs])
        self.targets = np.concatenate([self.targets, targets])

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, filename: str | Path) -> None:
        """
        Load samples from a GRT regression data file or a CSV file.

        Files ending in .csv are read as CSV, anything else as a GRT
        regression data file.

        Args:
            filename: Path to the dataset file

        Raises:
            DatasetError: If the file is missing, unreadable or malformed
        """
        path = Path(filename)
        if not path.is_file():
            raise DatasetError(f"Dataset file not found: {path}", path=str(path))

        try:
            if path.suffix.lower() in CSV_EXTENSIONS:
                self._load_csv(path)
            else:
                self._load_grt(path)
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetError(f"Failed to read {path}: {e}", path=str(path)) from e

        logger.debug(f"Loaded {self.num_samples} samples from {path}")

    def _load_csv(self, path: Path) -> None:
        n, t = self._num_input_dimensions, self._num_target_dimensions
        if n == 0 or t == 0:
            raise DatasetDimensionError(
                "The number of input and target dimensions must be set before loading a CSV file",
                path=str(path),
            )

        try:
            # Read every column as text first so bad fields fail the strict cast
            df = pl.read_csv(path, has_header=False, infer_schema_length=0)
            values = df.select(
                pl.all().str.strip_chars().cast(pl.Float64)
            ).to_numpy()
        except pl.exceptions.PolarsError as e:
            raise DatasetFormatError(f"Failed to parse CSV file: {e}", path=str(path)) from e

        if values.shape[0] == 0:
            raise DatasetFormatError("CSV file contains no samples", path=str(path))

        if values.shape[1] != n + t:
            raise DatasetDimensionError(
                f"CSV file has {values.shape[1]} columns, expected {n} inputs + {t} targets",
                path=str(path),
            )

        if not np.isfinite(values).all():
            row = int(np.argwhere(~np.isfinite(values))[0][0]) + 1
            raise DatasetFormatError("Missing or non-finite value", path=str(path), line=row)

        self.inputs = values[:, :n].astype(np.float64)
        self.targets = values[:, n:].astype(np.float64)

    def _load_grt(self, path: Path) -> None:
        lines = path.read_text(encoding="utf-8").splitlines()

        if not lines or lines[0].strip() != GRT_FILE_HEADER:
            raise DatasetFormatError(
                f"File header is not {GRT_FILE_HEADER}", path=str(path), line=1
            )

        header: dict[str, str] = {}
        index = 1
        while index < len(lines):
            line = lines[index].strip()
            index += 1
            if line == GRT_DATA_SECTION:
                break
            if not line:
                continue
            key, sep, value = line.partition(":")
            if not sep:
                raise DatasetFormatError(f"Malformed header line {line!r}", path=str(path), line=index)
            key = key.strip()
            header[key] = value.strip()
            if key in _RANGE_KEYS:
                # Ranges are refit from the data when scaling is enabled
                index += _header_int(header, _RANGE_KEYS[key], path)
        else:
            raise DatasetFormatError(f"Missing '{GRT_DATA_SECTION}' section", path=str(path))

        n = _header_int(header, "NumInputDimensions", path)
        t = _header_int(header, "NumTargetDimensions", path)
        k = _header_int(header, "TotalNumTrainingExamples", path)
        if n == 0 or t == 0:
            raise DatasetDimensionError(
                f"Dataset must have at least one input and one target dimension, got N={n} T={t}",
                path=str(path),
            )

        # Rows are collected first so the header count cannot size an allocation
        rows: list[list[float]] = []
        while len(rows) < k and index < len(lines):
            line = lines[index].strip()
            index += 1
            if not line:
                continue
            fields = line.split()
            if len(fields) != n + t:
                raise DatasetDimensionError(
                    f"Sample {len(rows) + 1} has {len(fields)} values, expected {n + t} (line {index})",
                    path=str(path),
                )
            try:
                rows.append([float(field) for field in fields])
            except ValueError:
                raise DatasetFormatError(
                    f"Sample {len(rows) + 1} contains a non-numeric value", path=str(path), line=index
                ) from None

        if len(rows) < k:
            raise DatasetFormatError(
                f"Expected {k} samples but found {len(rows)}", path=str(path)
            )

        values = np.array(rows, dtype=np.float64).reshape(k, n + t)
        if not np.isfinite(values).all():
            raise DatasetFormatError("Dataset contains non-finite values", path=str(path))

        self.name = header.get("DatasetName", self.name)
        self.info_text = header.get("InfoText", self.info_text)
        self._num_input_dimensions = n
        self._num_target_dimensions = t
        self.inputs = values[:, :n]
        self.targets = values[:, n:]

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def save(self, filename: str | Path) -> None:
        """
        Save the samples as a CSV file (.csv) or a GRT regression data file.

        Raises:
            DatasetError: If the file cannot be written
        """
        path = Path(filename)
        rows = np.hstack([self.inputs, self.targets])
        try:
            if path.suffix.lower() in CSV_EXTENSIONS:
                pl.DataFrame(rows).write_csv(path, include_header=False)
            else:
                lines = [
                    GRT_FILE_HEADER,
                    f"DatasetName: {self.name}",
                    f"InfoText: {self.info_text}",
                    f"NumInputDimensions: {self._num_input_dimensions}",
                    f"NumTargetDimensions: {self._num_target_dimensions}",
                    f"TotalNumTrainingExamples: {self.num_samples}",
                    "UseExternalRanges: 0",
                    GRT_DATA_SECTION,
                ]
                lines.extend("\t".join(str(float(v)) for v in row) for row in rows)
                path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            raise DatasetError(f"Failed to write {path}: {e}", path=str(path)) from e

        logger.debug(f"Saved {self.num_samples} samples to {path}")


def load_dataset(
    filename: str | Path,
    num_input_dimensions: int | None = None,
    num_target_dimensions: int | None = None,
) -> RegressionData:
    """
    Load a regression dataset from file.

    Args:
        filename: Path to a GRT regression data file or a CSV file
        num_input_dimensions: Number of input columns (required for CSV)
        num_target_dimensions: Number of target columns (required for CSV)

    Returns:
        Loaded RegressionData
    """
    dataset = RegressionData()
    if num_input_dimensions is not None and num_target_dimensions is not None:
        dataset.set_input_and_target_dimensions(num_input_dimensions, num_target_dimensions)
    dataset.load(filename)
    return dataset


__all__ = ["RegressionData", "load_dataset", "GRT_FILE_HEADER"]
