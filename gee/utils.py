# utils.py

# Licensed under the Apache License, Version 2.0 (the "License")

import numpy as np
from typing import List, Tuple, Union


def frozen(matrix: np.ndarray) -> np.ndarray:
    """Mark `matrix` read-only and return it."""
    matrix.setflags(write=False)
    return matrix


def as_xy(values: Union[np.ndarray, List, Tuple]) -> np.ndarray:
    """
    Coerce `values` to a C-contiguous (N, 2) float64 array.

    Raises:
        ValueError: if `values` is not (N, 2).
    """
    values = np.ascontiguousarray(values, dtype=np.float64)
    if values.ndim != 2 or values.shape[1] != 2:
        raise ValueError(f"Expected an (N, 2) array, got {values.shape}")
    return values
