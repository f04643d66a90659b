"""
Survey response handling.

This module provides the answer code lists, the vectorizer, the PCA
analysis and the log statistics used by the admin panel.
"""

from surveymath.survey.codes import ALL_CODES, CHALLENGE_CODES, EXPECTATION_CODES
from surveymath.survey.vectorizer import selections_to_vector, responses_to_matrix
from surveymath.survey.analysis import analyze_responses
from surveymath.survey.stats import aggregate_stats
