import logging

import numpy as np
import pandas as pd


def load_pixel_matrix_from_csv(path: str, start_row: int, end_row: int) -> np.ndarray:
    """Load rows [start_row, end_row) of a headerless pixel-feature CSV.

    Each row is one flattened image. Returns a float64 array of shape
    (end_row - start_row, n_columns).
    """
    if start_row < 0 or end_row <= start_row:
        raise ValueError(f"Invalid row range [{start_row}, {end_row}).")

    n_rows = end_row - start_row
    try:
        df = pd.read_csv(path, header=None, skiprows=start_row, nrows=n_rows, dtype=np.float64)
    except pd.errors.EmptyDataError as exc:
        raise ValueError(f"Row range [{start_row}, {end_row}) is past the end of {path}.") from exc

    if len(df) != n_rows:
        raise ValueError(
            f"Requested rows [{start_row}, {end_row}) but {path} has only {start_row + len(df)} rows."
        )
    logging.debug("Loaded rows [%s, %s) with %s columns from %s", start_row, end_row, df.shape[1], path)
    return df.to_numpy(dtype=np.float64)


def to_float_array(data: np.ndarray) -> np.ndarray:
    return np.asarray(data, dtype=np.float32)
