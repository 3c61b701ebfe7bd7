# File: link_scout/linking.py
"""link_scout.linking: Link opportunity records for classified pages.

Pure data transformation: one fixed template per page type, filled with the
page title (or a label derived from the URL slug).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

from link_scout.classifier import PageType, classify
from link_scout.crawler.models import DiscoveredPage
from link_scout.ranker import priority_of
from link_scout.utils import url_path

__all__ = ["LinkOpportunity", "LinkTemplate", "TEMPLATES", "page_label", "anchor_texts", "generate"]

MAX_ANCHORS = 4
_TITLE_SEPARATORS = re.compile(r"\s+[|–—-]\s+")
_TITLE_PLACEHOLDER = "{title}"


class LinkOpportunity(BaseModel):
    """Persisted record; JSON field names are camelCase."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    title: str
    page_type: PageType = Field(alias="pageType")
    usage_notes: str = Field(alias="usageNotes")
    suggested_anchor_text: List[str] = Field(alias="suggestedAnchorText", min_length=1, max_length=MAX_ANCHORS)
    contextual_relevance: str = Field(alias="contextualRelevance")
    priority_score: int = Field(alias="priorityScore")

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True, slots=True)
class LinkTemplate:
    when_to_link: str
    priority: str
    priority_note: str
    anchors: Tuple[str, ...]
    contextual_relevance: str


TEMPLATES: Dict[PageType, LinkTemplate] = {
    PageType.HOMEPAGE: LinkTemplate(
        when_to_link="When providing company overview or introducing services",
        priority="High",
        priority_note="Use for general company introductions",
        anchors=("homepage", "main page", "company overview"),
        contextual_relevance="Good for general introductions and overview content",
    ),
    PageType.SERVICE: LinkTemplate(
        when_to_link="When discussing specific services or solutions",
        priority="High",
        priority_note="Critical for conversion and service explanation",
        anchors=(_TITLE_PLACEHOLDER, "service details", "learn more about services"),
        contextual_relevance="Essential for converting educational content into service inquiries",
    ),
    PageType.ABOUT: LinkTemplate(
        when_to_link="When establishing credibility or introducing company background",
        priority="Medium",
        priority_note="Great for authority building and credibility",
        anchors=("about us", "company background", "our story"),
        contextual_relevance="Perfect for building trust and authority in content",
    ),
    PageType.CONTACT: LinkTemplate(
        when_to_link="In call-to-action sections or when inviting engagement",
        priority="High",
        priority_note="Essential for call-to-action sections",
        anchors=("contact us", "get in touch", "reach out"),
        contextual_relevance="Primary conversion point for lead generation",
    ),
    PageType.BLOG: LinkTemplate(
        when_to_link="When referencing related topics or providing additional context",
        priority="Medium",
        priority_note="Use for related topics and additional context",
        anchors=(_TITLE_PLACEHOLDER, "related article", "read more"),
        contextual_relevance="Valuable for keeping readers engaged with related content",
    ),
    PageType.PRODUCT: LinkTemplate(
        when_to_link="When mentioning specific products or solutions",
        priority="High",
        priority_note="Direct conversion opportunity",
        anchors=(_TITLE_PLACEHOLDER, "product details", "solution overview"),
        contextual_relevance="Direct conversion opportunity for product-focused content",
    ),
    PageType.OTHER: LinkTemplate(
        when_to_link="When contextually relevant to the content topic",
        priority="Low",
        priority_note="Use when contextually relevant",
        anchors=(_TITLE_PLACEHOLDER,),
        contextual_relevance="Use when naturally fits the content flow",
    ),
}


def slug_label(url: str) -> str:
    """``/services/web-design`` -> ``Web Design``; the root path -> ``Homepage``."""
    segments = [segment for segment in url_path(url).split("/") if segment]
    if not segments:
        return "Homepage"
    slug = unquote(segments[-1]).rsplit(".", 1)[0]
    words = re.sub(r"[-_]+", " ", slug).split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def page_label(page: DiscoveredPage) -> str:
    """Page title without the trailing site name, else the slug label."""
    title = page.snapshot.title.strip() if page.snapshot else ""
    if title:
        head = _TITLE_SEPARATORS.split(title, 1)[0].strip()
        return head if len(head) > 2 else title
    return slug_label(page.url)


def anchor_texts(template: LinkTemplate, label: str) -> List[str]:
    """1..4 anchors: placeholder filled, longer than 2 chars, deduplicated case-insensitively."""
    seen: set[str] = set()
    anchors: List[str] = []
    for anchor in template.anchors:
        text = label if anchor == _TITLE_PLACEHOLDER else anchor
        text = " ".join(text.split())
        if len(text) <= 2 or text.lower() in seen:
            continue
        seen.add(text.lower())
        anchors.append(text)
    if not anchors:
        anchors.append(label if len(label) > 2 else "this page")
    return anchors[:MAX_ANCHORS]


def usage_notes(template: LinkTemplate) -> str:
    return " | ".join(
        (
            f"WHEN: {template.when_to_link}",
            f"CONTEXT: {template.contextual_relevance}",
            f"PRIORITY: {template.priority} - {template.priority_note}",
        )
    )


def generate(page: DiscoveredPage, page_type: Optional[PageType] = None) -> LinkOpportunity:
    """Build the link opportunity of *page*; classifies it when *page_type* is omitted."""
    page_type = PageType(page_type) if page_type is not None else classify(page)
    template = TEMPLATES[page_type]
    label = page_label(page)
    title = page.snapshot.title.strip() if page.snapshot and page.snapshot.title.strip() else label
    return LinkOpportunity(
        url=page.url,
        title=title,
        page_type=page_type,
        usage_notes=usage_notes(template),
        suggested_anchor_text=anchor_texts(template, label),
        contextual_relevance=template.contextual_relevance,
        priority_score=priority_of(page_type),
    )
