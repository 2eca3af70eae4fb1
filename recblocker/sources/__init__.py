"""Source modules for scraping recommendations and calling the relation API."""

from .recommendations import RecommendationExtractor, PageRecommendationExtractor, HtmlRecommendationExtractor
from .relation import RelationBlocker

__all__ = [
    "RecommendationExtractor",
    "PageRecommendationExtractor",
    "HtmlRecommendationExtractor",
    "RelationBlocker"
]
