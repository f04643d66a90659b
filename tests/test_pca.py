"""
Tests for the PCA module.
"""

import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from surveymath.math.pca import (
    normalize_vector, vector_length, proj_vec, as_sample_matrix, center_data,
    covariance_matrix, power_iteration, orthogonalize, deflate, orient_component,
    top_eigenvectors, compute_pca, pca_project_feature_matrix, DegenerateInputError
)
from surveymath.math.feature_matrix import FeatureMatrix


def structured_data(n_samples=100, n_features=10, seed=0):
    """Data with two dominant orthogonal directions plus a little noise."""
    rng = np.random.default_rng(seed)

    comp1 = normalize_vector(rng.standard_normal(n_features))
    comp2 = rng.standard_normal(n_features)
    comp2 = normalize_vector(comp2 - proj_vec(comp1, comp2))

    data = np.outer(rng.standard_normal(n_samples) * 3.0, comp1) + \
        np.outer(rng.standard_normal(n_samples), comp2)
    data += rng.standard_normal((n_samples, n_features)) * 0.1
    return data


def three_sample_scenario():
    """Vectors [1,0,...], [0,1,...], [1,1,...] of length 22."""
    data = np.zeros((3, 22))
    data[0, 0] = 1.0
    data[1, 1] = 1.0
    data[2, 0] = 1.0
    data[2, 1] = 1.0
    return data


class TestPCAUtils:
    """Tests for the PCA utility functions."""

    def test_normalize_vector(self):
        """Test normalizing a vector to unit length."""
        v = np.array([3.0, 4.0])
        normalized = normalize_vector(v)

        assert np.isclose(np.linalg.norm(normalized), 1.0)
        assert np.isclose(normalized[0] / normalized[1], v[0] / v[1])

        zero_vec = np.zeros(3)
        assert np.array_equal(normalize_vector(zero_vec), zero_vec)

    def test_vector_length(self):
        """Test calculating vector length."""
        assert np.isclose(vector_length(np.array([3.0, 4.0])), 5.0)

    def test_proj_vec(self):
        """Test projecting one vector onto another."""
        u = np.array([1.0, 0.0])
        v = np.array([3.0, 4.0])

        assert np.allclose(proj_vec(u, v), [3.0, 0.0])
        assert np.array_equal(proj_vec(np.zeros(2), v), np.zeros(2))

    def test_as_sample_matrix_rejects_ragged_rows(self):
        """Rows of different lengths are a precondition violation."""
        with pytest.raises(DegenerateInputError):
            as_sample_matrix([[1, 0, 1], [1, 0]])

    def test_as_sample_matrix_converts_lists(self):
        """Nested lists become a float matrix."""
        data = as_sample_matrix([[1, 0], [0, 1], [1, 1]])
        assert data.shape == (3, 2)
        assert data.dtype == float

    def test_center_data(self):
        """Centered data has zero mean in every dimension."""
        data = np.array([[1.0, 2.0], [3.0, 6.0], [5.0, 10.0]])
        center, centered = center_data(data)

        assert np.allclose(center, [3.0, 6.0])
        assert np.allclose(centered.mean(axis=0), 0.0)

    def test_covariance_matrix_matches_numpy(self):
        """Covariance uses the n-1 divisor and is symmetric."""
        data = structured_data(n_samples=20, n_features=5)
        _, centered = center_data(data)
        cov = covariance_matrix(centered)

        assert np.allclose(cov, np.cov(data, rowvar=False))
        assert np.array_equal(cov, cov.T)

    def test_orthogonalize(self):
        """Orthogonalization removes components along earlier vectors."""
        basis = [np.array([1.0, 0.0, 0.0])]
        v = orthogonalize(np.array([1.0, 1.0, 0.0]), basis)

        assert np.allclose(v, [0.0, 1.0, 0.0])

        # Nothing left once the earlier direction is removed
        assert orthogonalize(np.array([2.0, 0.0, 0.0]), basis) is None

    def test_orthogonalize_against_several_vectors(self):
        """The result is a unit vector orthogonal to every basis vector."""
        basis = [normalize_vector(np.array([1.0, 1.0, 0.0, 0.0])),
                 normalize_vector(np.array([1.0, -1.0, 1.0, 0.0]))]
        v = orthogonalize(np.array([0.3, 2.0, -1.0, 0.5]), basis)

        assert np.isclose(vector_length(v), 1.0)
        for prev in basis:
            assert np.isclose(np.dot(v, prev), 0.0, atol=1e-12)
            assert np.allclose(proj_vec(prev, v), 0.0, atol=1e-12)

    def test_deflate(self):
        """Deflation removes the eigenvalue along the given direction."""
        matrix = np.diag([3.0, 1.0])
        deflated, eigval = deflate(matrix, np.array([1.0, 0.0]))

        assert np.isclose(eigval, 3.0)
        assert np.allclose(deflated, np.diag([0.0, 1.0]))

        # The input matrix is left untouched
        assert np.allclose(matrix, np.diag([3.0, 1.0]))

    def test_orient_component(self):
        """Largest-magnitude entry is made positive."""
        assert np.allclose(orient_component(np.array([0.2, -0.9])), [-0.2, 0.9])
        assert np.allclose(orient_component(np.array([0.9, -0.2])), [0.9, -0.2])


class TestPowerIteration:
    """Tests for the power iteration algorithm."""

    def test_power_iteration_simple(self):
        """Test power iteration on a symmetric matrix."""
        matrix = np.array([
            [4.0, 1.0],
            [1.0, 4.0]
        ])
        result = power_iteration(matrix, normalize_vector(np.array([1.0, 0.2])))

        expected = np.array([1.0, 1.0]) / np.sqrt(2.0)
        assert np.isclose(abs(np.dot(result, expected)), 1.0, atol=1e-8)

    def test_power_iteration_zero_matrix(self):
        """A zero matrix keeps the starting vector instead of dividing by zero."""
        start = normalize_vector(np.array([1.0, 2.0, 3.0]))
        result = power_iteration(np.zeros((3, 3)), start)

        assert np.array_equal(result, start)
        assert not np.any(np.isnan(result))

    def test_power_iteration_respects_iteration_cap(self):
        """With a single iteration the result is one multiply-and-normalize step."""
        matrix = np.diag([2.0, 1.0])
        start = normalize_vector(np.array([1.0, 1.0]))
        result = power_iteration(matrix, start, iters=1)

        assert np.allclose(result, normalize_vector(np.array([2.0, 1.0])))

    def test_top_eigenvectors_does_not_modify_input(self):
        """Deflation works on a copy of the covariance matrix."""
        cov = np.diag([3.0, 2.0, 1.0])
        original = cov.copy()

        top_eigenvectors(cov, n_comps=2)

        assert np.array_equal(cov, original)

    def test_top_eigenvectors_diagonal(self):
        """Components of a diagonal matrix are the leading axes, in order."""
        vectors = top_eigenvectors(np.diag([1.0, 5.0, 2.0]), n_comps=2)

        assert len(vectors) == 2
        assert np.isclose(abs(vectors[0][1]), 1.0, atol=1e-6)
        assert np.isclose(abs(vectors[1][2]), 1.0, atol=1e-6)


class TestComputePCA:
    """Tests for the compute_pca function."""

    def test_compute_pca_normal(self):
        """Test PCA on a dataset with two dominant directions."""
        data = structured_data()
        result = compute_pca(data)

        assert result['center'].shape == (10,)
        assert result['comps'].shape == (2, 10)
        assert result['projections'].shape == (100, 2)

        # Unit length
        assert np.isclose(np.linalg.norm(result['comps'][0]), 1.0, atol=1e-6)
        assert np.isclose(np.linalg.norm(result['comps'][1]), 1.0, atol=1e-6)

        # Orthogonal
        assert abs(np.dot(result['comps'][0], result['comps'][1])) < 1e-6

        # Decreasing eigenvalues
        assert result['eigenvalues'][0] >= result['eigenvalues'][1]

    def test_compute_pca_matches_eigh(self):
        """Components agree with a direct eigendecomposition up to sign."""
        data = structured_data()
        result = compute_pca(data)

        eigvals, eigvecs = np.linalg.eigh(np.cov(data, rowvar=False))
        order = np.argsort(eigvals)[::-1]

        for i in range(2):
            expected = eigvecs[:, order[i]]
            assert np.isclose(abs(np.dot(result['comps'][i], expected)), 1.0, atol=1e-6)
            assert np.isclose(result['eigenvalues'][i], eigvals[order[i]], rtol=1e-6)

    def test_compute_pca_matches_sklearn(self):
        """Explained variance ratios agree with scikit-learn."""
        sklearn_decomposition = pytest.importorskip("sklearn.decomposition")

        data = structured_data(seed=3)
        result = compute_pca(data)

        reference = sklearn_decomposition.PCA(n_components=2).fit(data)

        assert np.allclose(result['explained_variance'],
                           reference.explained_variance_ratio_, atol=1e-6)
        for ours, theirs in zip(result['comps'], reference.components_):
            assert np.isclose(abs(np.dot(ours, theirs)), 1.0, atol=1e-6)

    def test_explained_variance_bounds(self):
        """Fractions are within [0, 1] and sum to at most 1."""
        rng = np.random.default_rng(7)
        data = (rng.random((40, 22)) > 0.7).astype(float)
        result = compute_pca(data)

        explained = result['explained_variance']
        assert len(explained) == 2
        assert np.all(explained >= 0.0)
        assert np.all(explained <= 1.0)
        assert explained.sum() <= 1.0 + 1e-9

    def test_explained_variance_uses_pristine_trace(self):
        """The denominator is the trace of the covariance before deflation."""
        data = structured_data(seed=5)
        result = compute_pca(data)

        trace = np.trace(np.cov(data, rowvar=False))
        assert np.isclose(result['total_variance'], trace)
        assert np.allclose(result['explained_variance'], result['eigenvalues'] / trace)

    def test_concrete_three_sample_scenario(self):
        """Three one-hot style samples agree with a direct 2x2 eigen-solve."""
        data = three_sample_scenario()
        result = compute_pca(data)

        assert np.allclose(result['center'][:2], [2.0 / 3.0, 2.0 / 3.0])
        assert np.allclose(result['center'][2:], 0.0)

        # Covariance restricted to the first two dimensions
        block = np.array([[1.0 / 3.0, -1.0 / 6.0],
                          [-1.0 / 6.0, 1.0 / 3.0]])
        eigvals, eigvecs = np.linalg.eigh(block)

        comps = result['comps']
        assert comps.shape == (2, 22)

        # No weight outside the first two dimensions
        assert np.allclose(comps[:, 2:], 0.0)

        # First component is the eigenvector of the larger eigenvalue
        assert np.isclose(abs(np.dot(comps[0][:2], eigvecs[:, 1])), 1.0, atol=1e-4)
        assert np.isclose(abs(np.dot(comps[1][:2], eigvecs[:, 0])), 1.0, atol=1e-4)

        trace = np.trace(block)
        assert np.allclose(result['explained_variance'],
                           [eigvals[1] / trace, eigvals[0] / trace], atol=1e-4)
        assert result['explained_variance'][0] > result['explained_variance'][1]

    def test_identical_samples(self):
        """Zero variance yields zero explained variance rather than NaN."""
        data = np.tile([1.0, 0.0, 1.0, 1.0], (3, 1))
        result = compute_pca(data)

        assert result['total_variance'] == 0.0
        assert np.all(result['explained_variance'] == 0.0)
        assert not np.any(np.isnan(result['explained_variance']))
        assert np.allclose(result['projections'], 0.0)
        assert result['projections'].shape[0] == 3

    def test_single_direction_of_variance(self):
        """Data varying along one axis still gives orthonormal components."""
        data = np.array([
            [0.0, 1.0, 1.0],
            [1.0, 1.0, 1.0],
            [2.0, 1.0, 1.0],
            [3.0, 1.0, 1.0]
        ])
        result = compute_pca(data)

        assert np.isclose(abs(result['comps'][0][0]), 1.0, atol=1e-8)
        assert np.isclose(result['explained_variance'][0], 1.0)
        if len(result['comps']) == 2:
            assert abs(np.dot(result['comps'][0], result['comps'][1])) < 1e-6
            assert np.isclose(result['explained_variance'][1], 0.0, atol=1e-9)

    def test_reproducible_with_seed(self):
        """Same input and seed produce identical output."""
        rng = np.random.default_rng(11)
        data = (rng.random((30, 22)) > 0.6).astype(float)

        first = compute_pca(data, seed=123)
        second = compute_pca(data, seed=123)

        assert np.array_equal(first['comps'], second['comps'])
        assert np.array_equal(first['projections'], second['projections'])

    def test_empty_inputs(self):
        """No samples or no dimensions give an empty result."""
        result = compute_pca([])
        assert len(result['comps']) == 0
        assert len(result['explained_variance']) == 0

        result = compute_pca(np.zeros((4, 0)))
        assert len(result['comps']) == 0
        assert result['projections'].shape == (4, 0)

    def test_single_sample_is_degenerate(self):
        """Covariance is undefined for a single sample."""
        with pytest.raises(DegenerateInputError):
            compute_pca([[1.0, 0.0, 1.0]])

    def test_ragged_input_is_degenerate(self):
        """Inconsistent vector lengths fail fast."""
        with pytest.raises(DegenerateInputError):
            compute_pca([[1, 0, 1], [0, 1, 1], [1, 1]])


class TestProjection:
    """Tests for projecting feature matrices."""

    def test_projections_are_centered_dot_products(self):
        """Each projection is the centered sample dotted with each component."""
        data = structured_data(n_samples=15, n_features=4)
        result = compute_pca(data)

        centered = data - data.mean(axis=0)
        expected = centered @ result['comps'].T
        assert np.allclose(result['projections'], expected)

    def test_pca_project_feature_matrix(self):
        """Projections keep the row order and names of the matrix."""
        data = np.array([
            [1.0, 0.0, 1.0],
            [0.0, 1.0, 1.0],
            [1.0, 1.0, 0.0],
            [0.0, 0.0, 1.0]
        ])
        fmat = FeatureMatrix(data, rownames=['p1', 'p2', 'p3', 'p1'], colnames=['c1', 'c2', 'c3'])

        pca_results, projections = pca_project_feature_matrix(fmat)

        assert pca_results['comps'].shape == (2, 3)
        assert [name for name, _ in projections] == ['p1', 'p2', 'p3', 'p1']
        for _, proj in projections:
            assert proj.shape == (2,)
