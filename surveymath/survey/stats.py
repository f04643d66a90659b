"""
Aggregate statistics over interview logs for the admin dashboard.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)

UNKNOWN_SLUG = "unknown"


def _count_categories(counter: Counter, groups: Any) -> None:
    for group in groups or []:
        if isinstance(group, Mapping) and group.get('category'):
            counter[group['category']] += 1


def _count_items(counter: Counter, items: Iterable[Any]) -> None:
    for item in items or []:
        if isinstance(item, str) and item:
            counter[item] += 1


def aggregate_stats(logs: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Count interview logs by survey template, issue, competency and core item.

    Args:
        logs: Logs with 'template_slug', 'issue_categories' and
            'competency_categories' ({'category', ...} entries) and
            'core_items' (item codes)

    Returns:
        Dictionary with 'totalCount' and the 'slugDistribution',
        'issueDistribution', 'competencyDistribution' and
        'coreItemsDistribution' counts. Logs without a template count as
        'unknown'; each category entry counts once.
    """
    slugs = Counter()
    issues = Counter()
    competencies = Counter()
    core_items = Counter()

    for log in logs:
        slugs[log.get('template_slug') or UNKNOWN_SLUG] += 1
        _count_categories(issues, log.get('issue_categories'))
        _count_categories(competencies, log.get('competency_categories'))
        _count_items(core_items, log.get('core_items'))

    logger.info(f"Statistics aggregated over {len(logs)} logs")

    return {
        'totalCount': len(logs),
        'slugDistribution': dict(slugs),
        'issueDistribution': dict(issues),
        'competencyDistribution': dict(competencies),
        'coreItemsDistribution': dict(core_items)
    }
