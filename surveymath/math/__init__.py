"""
Mathematical components for survey analysis.

This module provides the feature matrix and the power-iteration PCA engine.
"""

from surveymath.math.feature_matrix import FeatureMatrix
from surveymath.math.pca import compute_pca, DegenerateInputError
