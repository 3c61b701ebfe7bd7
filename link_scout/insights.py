# File: link_scout/insights.py
"""link_scout.insights: Business facts accumulated from the discovered pages.

Each page yields a :class:`PageInsights` record with fixed categories; the
run-level :class:`ContentAnalysis` merges them into insertion-ordered sets
and groups pages by category for the content-analysis artifact.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Generic, Iterable, Iterator, List, Tuple, TypeVar

from link_scout.classifier import PageType
from link_scout.crawler.models import DiscoveredPage, PageSnapshot

__all__ = ["OrderedSet", "PageInsights", "BusinessInsights", "ContentAnalysis", "extract_page_insights"]

SERVICE_KEYWORDS = (
    "consulting",
    "advisory",
    "strategy",
    "planning",
    "implementation",
    "analysis",
    "research",
    "development",
    "management",
    "optimization",
    "digital transformation",
    "marketing",
    "sales",
    "operations",
)
INDUSTRY_KEYWORDS = (
    "healthcare",
    "finance",
    "technology",
    "manufacturing",
    "retail",
    "education",
    "non-profit",
    "government",
    "startup",
    "enterprise",
    "b2b",
    "b2c",
    "saas",
    "fintech",
    "healthtech",
)
TEAM_ROLE_WORDS = ("ceo", "founder", "director", "manager")
TESTIMONIAL_MARKERS = ("testimonial", '"', "review")
CASE_STUDY_MARKERS = ("case study", "success story", "client story")
RESOURCE_URL_MARKERS = ("resource", "download", "guide")

_KEY_TERM_RE = re.compile(r"\b\w+(?:ing|tion|ment|ence)\b")
_MIN_BLOCK, _MAX_BLOCK = 20, 500

T = TypeVar("T")


class OrderedSet(Generic[T]):
    """Set with insertion order, backed by a dict."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: Dict[T, None] = dict.fromkeys(items)

    def add(self, item: T) -> None:
        self._items.setdefault(item, None)

    def update(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[T]:
        return list(self._items)


@dataclass(frozen=True, slots=True)
class PageInsights:
    services: Tuple[str, ...] = ()
    industries: Tuple[str, ...] = ()
    team_members: Tuple[str, ...] = ()
    testimonials: Tuple[str, ...] = ()
    case_studies: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "services": list(self.services),
            "industries": list(self.industries),
            "teamMembers": list(self.team_members),
            "testimonials": list(self.testimonials),
            "caseStudies": list(self.case_studies),
        }


def content_of(snapshot: PageSnapshot) -> List[str]:
    """Headings, paragraphs and list items of readable length."""
    return [block for block in snapshot.content_blocks if _MIN_BLOCK < len(block) < _MAX_BLOCK]


def extract_page_insights(snapshot: PageSnapshot, page_type: PageType) -> PageInsights:
    content = content_of(snapshot)
    text = " ".join(content).lower()

    services: Tuple[str, ...] = ()
    if page_type is PageType.SERVICE or "service" in text or "solution" in text:
        services = tuple(k for k in SERVICE_KEYWORDS if k in text)
    industries = tuple(k for k in INDUSTRY_KEYWORDS if k in text)

    team: List[str] = []
    if page_type is PageType.ABOUT or "team" in text or "leadership" in text:
        team = [item.strip() for item in content if any(role in item.lower() for role in TEAM_ROLE_WORDS)]

    testimonials: List[str] = []
    case_studies: List[str] = []
    for item in content:
        if not 50 < len(item) < _MAX_BLOCK:
            continue
        lowered = item.lower()
        if any(marker in lowered for marker in TESTIMONIAL_MARKERS):
            testimonials.append(item.strip())
        if any(marker in lowered for marker in CASE_STUDY_MARKERS):
            case_studies.append(item.strip())

    return PageInsights(
        services=services,
        industries=industries,
        team_members=tuple(team),
        testimonials=tuple(testimonials),
        case_studies=tuple(case_studies),
    )


@dataclass
class BusinessInsights:
    services: OrderedSet[str] = field(default_factory=OrderedSet)
    industries: OrderedSet[str] = field(default_factory=OrderedSet)
    key_terms: OrderedSet[str] = field(default_factory=OrderedSet)
    team_info: OrderedSet[str] = field(default_factory=OrderedSet)
    testimonials: List[str] = field(default_factory=list)
    case_studies: List[str] = field(default_factory=list)

    def add(self, insights: PageInsights, content: Iterable[str]) -> None:
        self.services.update(insights.services)
        self.industries.update(insights.industries)
        self.team_info.update(insights.team_members)
        self.testimonials.extend(t for t in insights.testimonials if len(t) > 20)
        self.case_studies.extend(c for c in insights.case_studies if len(c) > 20)
        for term in _KEY_TERM_RE.findall(" ".join(content).lower()):
            if 4 < len(term) < 20:
                self.key_terms.add(term)

    def to_dict(self) -> dict:
        return {
            "services": self.services.to_list(),
            "industries": self.industries.to_list(),
            "keyTerms": self.key_terms.to_list(),
            "teamInfo": self.team_info.to_list(),
            "testimonials": list(self.testimonials),
            "caseStudies": list(self.case_studies),
        }


_CATEGORY_BY_TYPE = {
    PageType.HOMEPAGE: "homepage",
    PageType.ABOUT: "about",
    PageType.SERVICE: "services",
    PageType.PRODUCT: "products",
    PageType.BLOG: "blog",
    PageType.CONTACT: "contact",
}


@dataclass(frozen=True, slots=True)
class PageContent:
    url: str
    title: str
    type: str
    content: Tuple[str, ...]
    extracted_info: PageInsights


@dataclass
class ContentAnalysis:
    pages: List[PageContent] = field(default_factory=list)
    content_by_category: Dict[str, List[str]] = field(
        default_factory=lambda: {
            name: [] for name in ("homepage", "about", "services", "products", "resources", "blog", "contact", "other")
        }
    )
    business_insights: BusinessInsights = field(default_factory=BusinessInsights)

    @staticmethod
    def category_of(url: str, page_type: PageType) -> str:
        category = _CATEGORY_BY_TYPE.get(page_type)
        if category is not None:
            return category
        if any(marker in url.lower() for marker in RESOURCE_URL_MARKERS):
            return "resources"
        return "other"

    def add(self, page: DiscoveredPage, page_type: PageType) -> None:
        if page.snapshot is None:
            return
        content = content_of(page.snapshot)
        insights = extract_page_insights(page.snapshot, page_type)
        self.pages.append(
            PageContent(
                url=page.url,
                title=page.snapshot.title,
                type=page_type.value,
                content=tuple(content),
                extracted_info=insights,
            )
        )
        self.content_by_category[self.category_of(page.url, page_type)].append(page.url)
        self.business_insights.add(insights, content)

    def to_dict(self) -> dict:
        return {
            "allPageContents": [
                {
                    "url": p.url,
                    "title": p.title,
                    "type": p.type,
                    "content": list(p.content),
                    "extractedInfo": p.extracted_info.to_dict(),
                }
                for p in self.pages
            ],
            "contentByCategory": {k: list(v) for k, v in self.content_by_category.items()},
            "businessInsights": self.business_insights.to_dict(),
        }
