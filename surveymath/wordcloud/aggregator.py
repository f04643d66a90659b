"""
Frequency aggregation for word cloud display.
"""

from collections import Counter
from typing import Dict, Iterable, List, Union

DEFAULT_MAX_WORDS = 50


def aggregate_frequencies(keywords: Iterable[str]) -> Counter:
    """Count how often each keyword occurs, keeping first-seen order."""
    return Counter(keywords)


def to_word_cloud_words(frequencies: Counter,
                        max_words: int = DEFAULT_MAX_WORDS) -> List[Dict[str, Union[str, int]]]:
    """
    Convert keyword counts into word cloud entries.

    Args:
        frequencies: Keyword counts
        max_words: Maximum number of entries to return

    Returns:
        Entries {'text', 'value'} sorted by descending count; ties keep
        first-seen order
    """
    if max_words <= 0:
        return []
    return [{'text': text, 'value': value}
            for text, value in frequencies.most_common(max_words)]


def process_to_word_cloud(keywords: Iterable[str],
                          max_words: int = DEFAULT_MAX_WORDS) -> List[Dict[str, Union[str, int]]]:
    """Aggregate keywords and return the top entries."""
    return to_word_cloud_words(aggregate_frequencies(keywords), max_words)
