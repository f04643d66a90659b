"""
PCA (Principal Component Analysis) implementation for survey responses.

This module provides a custom implementation of PCA on the sample covariance
matrix, using power iteration with deflation to find the leading components.
"""

import logging
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple, Union

from surveymath.math.feature_matrix import FeatureMatrix

logger = logging.getLogger(__name__)

# Norm below which a vector is treated as numerically zero
NORM_EPSILON = 1e-10

# Default seed for the power iteration starting vectors
DEFAULT_SEED = 42

DEFAULT_ITERS = 100

# Stop iterating once successive vectors are this close (1 - |cos angle|)
DEFAULT_TOL = 1e-12


class DegenerateInputError(ValueError):
    """Raised when the sample matrix cannot be analysed (ragged rows, single sample)."""


def normalize_vector(v: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Args:
        v: Vector to normalize

    Returns:
        Normalized vector (the input itself if it has zero length)
    """
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def vector_length(v: np.ndarray) -> float:
    """Calculate the length (norm) of a vector."""
    return float(np.linalg.norm(v))


def proj_vec(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """
    Project vector v onto vector u.

    Args:
        u: Vector to project onto
        v: Vector to project

    Returns:
        Projection of v onto u
    """
    if np.dot(u, u) == 0:
        return np.zeros_like(v)
    return np.dot(u, v) / np.dot(u, u) * u


def as_sample_matrix(samples: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert samples to a 2D float array, checking that every row has the same length.

    Args:
        samples: Sequence of feature vectors, or a 2D array

    Returns:
        Array of shape (n, p)

    Raises:
        DegenerateInputError: If rows have inconsistent lengths
    """
    if isinstance(samples, np.ndarray):
        if samples.ndim != 2:
            raise DegenerateInputError(
                f"Sample matrix must be 2-dimensional, got shape {samples.shape}")
        return samples.astype(float)

    rows = [list(row) for row in samples]
    if not rows:
        return np.zeros((0, 0))

    lengths = {len(row) for row in rows}
    if len(lengths) > 1:
        raise DegenerateInputError(
            f"All feature vectors must have the same length, got lengths {sorted(lengths)}")

    return np.array(rows, dtype=float)


def center_data(data: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Subtract the per-dimension mean from every sample.

    Args:
        data: Sample matrix of shape (n, p)

    Returns:
        Tuple of (center, centered data)
    """
    center = np.mean(data, axis=0)
    return center, data - center


def covariance_matrix(centered: np.ndarray) -> np.ndarray:
    """
    Compute the unbiased sample covariance of already centered data.

    Args:
        centered: Mean-centered sample matrix of shape (n, p), n >= 2

    Returns:
        Symmetric covariance matrix of shape (p, p)
    """
    n = centered.shape[0]
    cov = centered.T @ centered / (n - 1)
    # Remove floating point asymmetry from the matrix product
    return (cov + cov.T) / 2


def rand_starting_vec(dim: int, rng: np.random.Generator) -> np.ndarray:
    """
    Generate a random unit starting vector for power iteration.

    Args:
        dim: Vector dimension
        rng: Random generator to draw from

    Returns:
        Random unit vector
    """
    return normalize_vector(rng.random(dim))


def power_iteration(matrix: np.ndarray,
                    start_vector: np.ndarray,
                    iters: int = DEFAULT_ITERS,
                    tol: float = DEFAULT_TOL) -> np.ndarray:
    """
    Approximate the dominant eigenvector of a symmetric matrix.

    The vector is repeatedly multiplied by the matrix and renormalized.
    Iteration stops after `iters` steps, when the product collapses below
    NORM_EPSILON (the current vector is kept), or when two successive
    vectors point in the same direction to within `tol`.

    Args:
        matrix: Symmetric (possibly deflated) matrix
        start_vector: Initial unit vector
        iters: Maximum number of iterations
        tol: Angular convergence tolerance, as 1 - |cos|

    Returns:
        Approximate dominant eigenvector
    """
    v = start_vector

    for i in range(iters):
        product = matrix @ v
        norm = vector_length(product)

        if norm < NORM_EPSILON:
            logger.debug(f"Power iteration collapsed after {i} iterations")
            break

        normed = product / norm
        converged = 1.0 - abs(float(np.dot(normed, v))) < tol
        v = normed

        if converged:
            logger.debug(f"Power iteration converged after {i + 1} iterations")
            break

    return v


def orthogonalize(v: np.ndarray, basis: List[np.ndarray]) -> Optional[np.ndarray]:
    """
    Remove the components of v along each vector of an orthonormal basis.

    Args:
        v: Candidate vector
        basis: Previously found unit vectors

    Returns:
        Renormalized vector, or None if nothing independent remains
    """
    for prev in basis:
        v = v - proj_vec(prev, v)

    if vector_length(v) < NORM_EPSILON:
        return None
    return normalize_vector(v)


def rayleigh_quotient(matrix: np.ndarray, v: np.ndarray) -> float:
    """Compute v^T * M * v for a unit vector v."""
    return float(v @ matrix @ v)


def deflate(matrix: np.ndarray, v: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Remove the variance along v from a symmetric matrix.

    Args:
        matrix: Symmetric matrix
        v: Unit eigenvector estimate

    Returns:
        Tuple of (deflated matrix, eigenvalue estimate)
    """
    eigval = rayleigh_quotient(matrix, v)
    return matrix - eigval * np.outer(v, v), eigval


def orient_component(v: np.ndarray) -> np.ndarray:
    """
    Flip a component so its largest-magnitude entry is positive.

    Eigenvectors are only defined up to sign; fixing it keeps plot axes stable.
    """
    if v[np.argmax(np.abs(v))] < 0:
        return -v
    return v


def top_eigenvectors(cov: np.ndarray,
                     n_comps: int = 2,
                     iters: int = DEFAULT_ITERS,
                     seed: Optional[int] = DEFAULT_SEED,
                     tol: float = DEFAULT_TOL) -> List[np.ndarray]:
    """
    Find the leading eigenvectors of a covariance matrix.

    Uses power iteration, orthogonalization against earlier components and
    deflation. The input matrix is not modified.

    Args:
        cov: Symmetric covariance matrix
        n_comps: Number of components to find
        iters: Maximum number of iterations per component
        seed: Seed for the starting vectors
        tol: Angular convergence tolerance

    Returns:
        List of at most n_comps unit vectors, by decreasing eigenvalue
    """
    dim = cov.shape[0]
    rng = np.random.default_rng(seed)
    working = cov.copy()
    vectors: List[np.ndarray] = []

    for comp in range(n_comps):
        v = power_iteration(working, rand_starting_vec(dim, rng), iters, tol)
        v = orthogonalize(v, vectors)

        if v is None:
            logger.debug(f"Component {comp} is not independent of earlier components; dropped")
            continue

        vectors.append(v)

        # No need to deflate after the last component
        if comp < n_comps - 1:
            working, _ = deflate(working, v)

    return vectors


def _empty_result(n: int, p: int) -> Dict[str, np.ndarray]:
    return {
        'center': np.zeros(p),
        'comps': np.zeros((0, p)),
        'eigenvalues': np.zeros(0),
        'explained_variance': np.zeros(0),
        'projections': np.zeros((n, 0)),
        'total_variance': 0.0
    }


def compute_pca(samples: Union[np.ndarray, Sequence[Sequence[float]]],
                n_comps: int = 2,
                iters: int = DEFAULT_ITERS,
                seed: Optional[int] = DEFAULT_SEED,
                tol: float = DEFAULT_TOL) -> Dict[str, np.ndarray]:
    """
    Project samples onto their leading principal components.

    Args:
        samples: Sample matrix, one feature vector per row
        n_comps: Number of components to find
        iters: Maximum number of power iterations per component
        seed: Seed for the starting vectors
        tol: Angular convergence tolerance

    Returns:
        Dictionary with 'center', 'comps', 'eigenvalues',
        'explained_variance' (fractions of total variance), 'projections'
        (one row per sample, one column per component found) and
        'total_variance'. Fewer than n_comps components are returned when
        the data has fewer independent directions.

    Raises:
        DegenerateInputError: On ragged input or a single sample
    """
    data = as_sample_matrix(samples)
    n, p = data.shape

    if n == 0 or p == 0:
        return _empty_result(n, p)

    if n == 1:
        raise DegenerateInputError("At least two samples are required to estimate covariance")

    center, centered = center_data(data)
    cov = covariance_matrix(centered)

    comps = [orient_component(v) for v in top_eigenvectors(cov, n_comps, iters, seed, tol)]

    if len(comps) < n_comps:
        logger.info(f"Only {len(comps)} of {n_comps} principal components could be extracted")

    comps_matrix = np.array(comps) if comps else np.zeros((0, p))

    # Variance accounting uses the pristine covariance, never the deflated one
    eigenvalues = np.array([rayleigh_quotient(cov, v) for v in comps])
    total_variance = float(np.trace(cov))

    if total_variance > 0:
        explained = np.clip(eigenvalues / total_variance, 0.0, 1.0)
    else:
        explained = np.zeros(len(comps))

    return {
        'center': center,
        'comps': comps_matrix,
        'eigenvalues': eigenvalues,
        'explained_variance': explained,
        'projections': centered @ comps_matrix.T,
        'total_variance': total_variance
    }


def pca_project_feature_matrix(fmat: FeatureMatrix,
                               n_comps: int = 2,
                               iters: int = DEFAULT_ITERS,
                               seed: Optional[int] = DEFAULT_SEED) -> Tuple[Dict[str, np.ndarray], List[Tuple]]:
    """
    Perform PCA on a FeatureMatrix and project its rows.

    Args:
        fmat: FeatureMatrix with one row per response
        n_comps: Number of components to find
        iters: Maximum number of power iterations per component
        seed: Seed for the starting vectors

    Returns:
        Tuple of (pca_results, list of (row name, projection) pairs in row order)
    """
    pca_results = compute_pca(fmat.values, n_comps, iters, seed)

    projections = [(name, proj) for name, proj in zip(fmat.rownames(), pca_results['projections'])]

    return pca_results, projections
