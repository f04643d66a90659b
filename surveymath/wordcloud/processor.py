"""
Keyword extraction from interview logs.

Each log carries 'keyword_groups', either a list of
{'category': ..., 'keywords': [...]} entries or a mapping of category to
keyword list.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Sequence


def _iter_groups(keyword_groups: Any) -> Iterable[Mapping[str, Any]]:
    if not keyword_groups:
        return []
    if isinstance(keyword_groups, Mapping):
        return [{'category': category, 'keywords': keywords}
                for category, keywords in keyword_groups.items()]
    return [group for group in keyword_groups if isinstance(group, Mapping)]


def extract_keywords(logs: Iterable[Mapping[str, Any]]) -> List[str]:
    """
    Extract all keywords from interview logs.

    Keywords are trimmed; empty ones are dropped.

    Args:
        logs: Logs containing 'keyword_groups'

    Returns:
        Keywords in log order
    """
    keywords = []

    for log in logs:
        for group in _iter_groups(log.get('keyword_groups')):
            for keyword in group.get('keywords') or []:
                if not isinstance(keyword, str):
                    continue
                normalized = keyword.strip()
                if normalized:
                    keywords.append(normalized)

    return keywords


def filter_by_frequency(keywords: Sequence[str], min_frequency: int) -> List[str]:
    """
    Keep the occurrences of keywords that appear at least min_frequency times.

    Args:
        keywords: Keywords, duplicates included
        min_frequency: Minimum total count

    Returns:
        Filtered keywords, order preserved
    """
    counts = Counter(keywords)
    return [keyword for keyword in keywords if counts[keyword] >= min_frequency]


def _to_iso(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def get_date_range(logs: Sequence[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Get the earliest and latest creation date of the logs.

    Args:
        logs: Logs with an optional 'created_at'

    Returns:
        Dictionary with 'start' and 'end' ISO timestamps; both are the
        current time when no log has a date
    """
    dates = sorted(_to_iso(log['created_at']) for log in logs
                   if log.get('created_at') is not None)

    if not dates:
        now = datetime.now(timezone.utc).isoformat()
        return {'start': now, 'end': now}

    return {'start': dates[0], 'end': dates[-1]}
