"""
Word cloud assembly from interview logs.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Sequence

from surveymath.wordcloud.aggregator import DEFAULT_MAX_WORDS, process_to_word_cloud
from surveymath.wordcloud.processor import extract_keywords, filter_by_frequency, get_date_range
from surveymath.wordcloud.text_extractor import extract_user_messages, simple_tokenize

logger = logging.getLogger(__name__)

DEFAULT_MIN_FREQUENCY = 2

TIME_RANGES = {
    '7d': 7,
    '30d': 30,
    '90d': 90,
    'all': None,
}

SOURCES = ('keywords', 'messages')


def resolve_time_range(time_range: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Convert a time range name into the earliest creation date to include.

    Args:
        time_range: One of '7d', '30d', '90d' or 'all'
        now: Reference time (defaults to the current UTC time)

    Returns:
        Cutoff datetime, or None for 'all'
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}")

    days = TIME_RANGES[time_range]
    if days is None:
        return None

    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def build_word_cloud(logs: Sequence[Mapping[str, Any]],
                     min_frequency: int = DEFAULT_MIN_FREQUENCY,
                     max_words: int = DEFAULT_MAX_WORDS,
                     source: str = 'keywords') -> Dict[str, Any]:
    """
    Build word cloud data from interview logs.

    Args:
        logs: Logs with 'keyword_groups', 'messages' and 'created_at'
        min_frequency: Minimum count for a word to be shown
        max_words: Maximum number of words
        source: 'keywords' to use extracted keyword groups, 'messages' to
            tokenize the respondents' own messages

    Returns:
        Dictionary with 'words' and 'metadata' ('totalResponses', 'dateRange')
    """
    if source not in SOURCES:
        raise ValueError(f"Unknown word cloud source: {source}")

    if source == 'messages':
        words = simple_tokenize(extract_user_messages(logs))
    else:
        words = extract_keywords(logs)

    filtered = filter_by_frequency(words, min_frequency)
    cloud = process_to_word_cloud(filtered, max_words)

    logger.info(f"Word cloud built from {len(logs)} logs: "
                f"{len(words)} words, {len(cloud)} shown")

    return {
        'words': cloud,
        'metadata': {
            'totalResponses': len(logs),
            'dateRange': get_date_range(logs)
        }
    }
