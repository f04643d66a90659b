"""
Feature matrix implementation for survey analysis.

This module provides a matrix with named rows (response ids) and named
columns (answer codes), using a pandas DataFrame as the underlying storage.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Union, Any


class FeatureMatrix:
    """
    A binary feature matrix with named rows and columns.

    Row names need not be unique: responses are kept in input order and
    addressed by position as well as by name.
    """

    def __init__(self,
                 matrix: Optional[Union[np.ndarray, pd.DataFrame, List[List[Any]]]] = None,
                 rownames: Optional[List[Any]] = None,
                 colnames: Optional[List[Any]] = None):
        """
        Initialize a FeatureMatrix.

        Args:
            matrix: Matrix data (numpy array, nested lists or pandas DataFrame)
            rownames: List of row names
            colnames: List of column names
        """
        if matrix is None:
            self._matrix = pd.DataFrame(
                index=list(rownames or []),
                columns=list(colnames or []),
                dtype=float
            )
        elif isinstance(matrix, pd.DataFrame):
            self._matrix = matrix.copy()
            if rownames is not None:
                self._matrix.index = list(rownames)
            if colnames is not None:
                self._matrix.columns = list(colnames)
        else:
            matrix = np.asarray(matrix, dtype=float)
            if matrix.ndim == 1 and matrix.size == 0:
                matrix = matrix.reshape(0, len(colnames or []))
            rows = list(rownames) if rownames is not None else list(range(matrix.shape[0]))
            cols = list(colnames) if colnames is not None else list(range(matrix.shape[1]))
            self._matrix = pd.DataFrame(matrix, index=rows, columns=cols)

    @property
    def values(self) -> np.ndarray:
        """Get the matrix as a float numpy array."""
        return self._matrix.to_numpy(dtype=float)

    @property
    def shape(self):
        return self._matrix.shape

    def rownames(self) -> List[Any]:
        """Get the list of row names."""
        return list(self._matrix.index)

    def colnames(self) -> List[Any]:
        """Get the list of column names."""
        return list(self._matrix.columns)

    def __len__(self) -> int:
        return len(self._matrix.index)

    def __repr__(self) -> str:
        return f"FeatureMatrix(rows={len(self.rownames())}, cols={len(self.colnames())})"

    def __str__(self) -> str:
        return (f"FeatureMatrix with {len(self.rownames())} rows and "
                f"{len(self.colnames())} columns\n{self._matrix}")
