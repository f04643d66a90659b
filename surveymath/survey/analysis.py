"""
PCA analysis of survey responses for the admin scatter plot.

This module turns fetched response rows into the plot payload: it guards
against too few responses, vectorizes the answers, runs the PCA engine and
formats points and explained-variance percentages.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from surveymath.math.pca import DEFAULT_ITERS, DEFAULT_SEED, pca_project_feature_matrix
from surveymath.survey.vectorizer import responses_to_matrix

logger = logging.getLogger(__name__)

MIN_SAMPLES = 3

N_COMPONENTS = 2

INSUFFICIENT_DATA_MESSAGE = "PCAには少なくとも3件のデータが必要です"

PARTIAL_COMPONENTS_MESSAGE = "主成分を2つ抽出できませんでした"


def insufficient_data_result() -> Dict[str, Any]:
    """Result returned when there are too few responses to analyse."""
    return {
        "points": [],
        "explainedVariance": [],
        "message": INSUFFICIENT_DATA_MESSAGE
    }


def analyze_responses(rows: Sequence[Mapping[str, Any]],
                      seed: Optional[int] = DEFAULT_SEED,
                      iters: int = DEFAULT_ITERS,
                      min_samples: int = MIN_SAMPLES) -> Dict[str, Any]:
    """
    Project survey responses onto their first two principal components.

    Args:
        rows: Response rows with 'id', 'respondent_type', 'challenges' and
            'expectations', in display order
        seed: Seed for the power iteration starting vectors
        iters: Maximum number of power iterations per component
        min_samples: Minimum number of responses required

    Returns:
        Dictionary with 'points' (one per row, in input order),
        'explainedVariance' (percentages, at most two) and, when the plot is
        incomplete, a 'message'
    """
    if len(rows) < max(min_samples, MIN_SAMPLES):
        logger.info(f"Skipping PCA: {len(rows)} responses available")
        return insufficient_data_result()

    fmat = responses_to_matrix(rows)
    pca_results, projections = pca_project_feature_matrix(fmat, N_COMPONENTS, iters, seed)

    points: List[Dict[str, Any]] = []
    for row, (_, proj) in zip(rows, projections):
        coords = [float(c) for c in proj] + [0.0] * (N_COMPONENTS - len(proj))
        points.append({
            "id": row.get("id"),
            "respondent_type": row.get("respondent_type"),
            "x": coords[0],
            "y": coords[1]
        })

    result: Dict[str, Any] = {
        "points": points,
        "explainedVariance": [float(v) * 100 for v in pca_results['explained_variance']]
    }

    if len(pca_results['comps']) < N_COMPONENTS:
        result["message"] = PARTIAL_COMPONENTS_MESSAGE

    logger.info(f"PCA computed for {len(points)} responses "
                f"({len(pca_results['comps'])} components)")

    return result
