"""
Recommendation Blocker - batch-block the creators recommended next to a Bilibili video.

The package scrapes creator UIDs from the "watch next" sidebar of a video page,
asks for confirmation and blocks them one by one through the relation API.
"""

__version__ = "1.1.0"

from .models.schemas import BlockerConfig, BlockResult, SessionContext
from .run_blocker import BatchBlockOrchestrator
from .sources.recommendations import PageRecommendationExtractor, HtmlRecommendationExtractor
from .sources.relation import RelationBlocker

__all__ = [
    "BlockerConfig",
    "BlockResult",
    "SessionContext",
    "BatchBlockOrchestrator",
    "PageRecommendationExtractor",
    "HtmlRecommendationExtractor",
    "RelationBlocker"
]
