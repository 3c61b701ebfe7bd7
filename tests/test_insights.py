# File: tests/test_insights.py
from conftest import SITE
from link_scout.classifier import PageType
from link_scout.crawler.models import DiscoveredPage, PageSnapshot
from link_scout.insights import ContentAnalysis, OrderedSet, extract_page_insights

ABOUT = PageSnapshot(
    url=f"{SITE}/about",
    title="About Acme",
    paragraphs=(
        "We provide consulting and strategy services for healthcare companies.",
        '"Acme transformed our business overnight," says a happy client of theirs.',
        "Read the case study about our work with a regional retail chain and its growth.",
        "Short text",
    ),
    list_items=("Jane Doe, CEO and founder of Acme",),
)


def test_extract_page_insights():
    insights = extract_page_insights(ABOUT, PageType.ABOUT)
    assert insights.services == ("consulting", "strategy")
    assert insights.industries == ("healthcare", "retail")
    assert insights.team_members == ("Jane Doe, CEO and founder of Acme",)
    assert len(insights.testimonials) == 1
    assert insights.testimonials[0].startswith('"Acme transformed')
    assert len(insights.case_studies) == 1
    assert insights.to_dict()["teamMembers"] == list(insights.team_members)


def test_ordered_set():
    items = OrderedSet(["b", "a"])
    items.update(["a", "c", "b"])
    assert items.to_list() == ["b", "a", "c"]
    assert "c" in items
    assert len(items) == 3


def test_content_analysis():
    analysis = ContentAnalysis()
    analysis.add(DiscoveredPage(url=ABOUT.url, snapshot=ABOUT), PageType.ABOUT)
    analysis.add(
        DiscoveredPage(url=f"{SITE}/resources/guide", snapshot=PageSnapshot(url=f"{SITE}/resources/guide")),
        PageType.OTHER,
    )
    analysis.add(DiscoveredPage(url=f"{SITE}/misc", snapshot=PageSnapshot(url=f"{SITE}/misc")), PageType.OTHER)
    analysis.add(DiscoveredPage(url=f"{SITE}/nothing"), PageType.OTHER)

    data = analysis.to_dict()
    assert set(data) == {"allPageContents", "contentByCategory", "businessInsights"}
    assert [page["url"] for page in data["allPageContents"]] == [ABOUT.url, f"{SITE}/resources/guide", f"{SITE}/misc"]
    assert data["contentByCategory"]["about"] == [ABOUT.url]
    assert data["contentByCategory"]["resources"] == [f"{SITE}/resources/guide"]
    assert data["contentByCategory"]["other"] == [f"{SITE}/misc"]

    business = data["businessInsights"]
    assert business["services"] == ["consulting", "strategy"]
    assert "consulting" in business["keyTerms"]
    assert business["teamInfo"] == ["Jane Doe, CEO and founder of Acme"]
    assert len(business["caseStudies"]) == 1
