"""
Conversion of survey answers into binary feature vectors.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from surveymath.math.feature_matrix import FeatureMatrix
from surveymath.survey.codes import ALL_CODES, CHALLENGE_CODES, EXPECTATION_CODES


def selections_to_vector(challenges: Optional[Iterable[str]],
                         expectations: Optional[Iterable[str]]) -> List[int]:
    """
    Convert a response's selected codes into a one-hot feature vector.

    Codes outside the fixed code lists are ignored.

    Args:
        challenges: Selected challenge codes (None means no selection)
        expectations: Selected expectation codes (None means no selection)

    Returns:
        Vector of length len(CHALLENGE_CODES) + len(EXPECTATION_CODES)
    """
    selected_challenges = set(challenges or [])
    selected_expectations = set(expectations or [])

    vector = [1 if code in selected_challenges else 0 for code in CHALLENGE_CODES]
    vector.extend(1 if code in selected_expectations else 0 for code in EXPECTATION_CODES)

    return vector


def response_to_vector(response: Mapping[str, Any]) -> List[int]:
    """Vectorize a response row with 'challenges' and 'expectations' fields."""
    return selections_to_vector(response.get('challenges'), response.get('expectations'))


def responses_to_matrix(responses: Sequence[Mapping[str, Any]]) -> FeatureMatrix:
    """
    Build a feature matrix from response rows, keeping their order.

    Args:
        responses: Response rows with 'id', 'challenges' and 'expectations'

    Returns:
        FeatureMatrix with one row per response, labelled by id
    """
    vectors = [response_to_vector(response) for response in responses]
    ids = [response.get('id') for response in responses]

    return FeatureMatrix(vectors, rownames=ids, colnames=list(ALL_CODES))
