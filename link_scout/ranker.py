# File: link_scout/ranker.py
"""link_scout.ranker: Importance order of link opportunities.

Array order is the contract with downstream consumers: "top N" means the
first N records. Sorting is stable, so pages of equal type keep discovery
order and reruns are reproducible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Sequence

from link_scout.classifier import PageType

if TYPE_CHECKING:
    from link_scout.linking import LinkOpportunity

__all__ = ["PRIORITY", "HIGH_VALUE_TYPES", "priority_of", "rank", "high_value", "top_k"]

PRIORITY: Dict[PageType, int] = {
    PageType.HOMEPAGE: 10,
    PageType.SERVICE: 9,
    PageType.PRODUCT: 8,
    PageType.ABOUT: 7,
    PageType.CONTACT: 6,
    PageType.BLOG: 5,
    PageType.OTHER: 1,
}

HIGH_VALUE_TYPES = frozenset({PageType.HOMEPAGE, PageType.SERVICE, PageType.ABOUT, PageType.CONTACT})


def priority_of(page_type: PageType) -> int:
    return PRIORITY.get(PageType(page_type), 0)


def rank(opportunities: Sequence[LinkOpportunity]) -> List[LinkOpportunity]:
    """Stable sort, highest priority first."""
    return sorted(opportunities, key=lambda opp: -priority_of(opp.page_type))


def high_value(opportunities: Sequence[LinkOpportunity]) -> List[LinkOpportunity]:
    """Homepage, service, about and contact links, order preserved."""
    return [opp for opp in opportunities if PageType(opp.page_type) in HIGH_VALUE_TYPES]


def top_k(opportunities: Sequence[LinkOpportunity], k: int) -> List[LinkOpportunity]:
    if k < 0:
        raise ValueError("k must be >= 0")
    return list(opportunities[:k])
