"""
Answer code lists for the multi-select survey questions.

The order of both lists defines the feature vector dimensions. Changing it
breaks comparability with earlier PCA results, so any change must bump
CODES_VERSION.
"""

CODES_VERSION = '2026.1'

# Challenges perceived in the current curriculum
CHALLENGE_CODES = (
    'content_overload',
    'lack_practice_time',
    'lack_educators',
    'evaluation_issues',
    'lack_genai_education',
    'clinical_quality_variance',
    'priority_unclear',
    'integration_insufficient',
    'local_adaptation_difficult',
    'exam_alignment_weak',
    'other',
)

# Expectations for the next revision
EXPECTATION_CODES = (
    'goal_reduction',
    'clinical_enhancement',
    'genai_education',
    'evaluation_improvement',
    'interprofessional',
    'clinical_quality_enhancement',
    'priority_clarification',
    'integration_enhancement',
    'local_adaptation_enhancement',
    'exam_alignment_enhancement',
    'other',
)

# Column labels of the feature matrix; 'other' occurs in both lists
ALL_CODES = tuple(f'challenge:{code}' for code in CHALLENGE_CODES) + \
    tuple(f'expectation:{code}' for code in EXPECTATION_CODES)

FEATURE_DIM = len(CHALLENGE_CODES) + len(EXPECTATION_CODES)
