"""Categorization service: keyword classification for API requests."""

import structlog

from apps.api.domains.categorization.schemas import CategoryIn, ClassifyResponse
from packages.categorization.rules import KeywordMatcher

logger = structlog.get_logger()


def classify_batch(descriptions: list[str], categories: list[CategoryIn]) -> list[ClassifyResponse]:
    """Classify descriptions in order, building the matcher once."""
    matcher = KeywordMatcher([c.to_category() for c in categories])

    results = []
    for description in descriptions:
        match = matcher.predict(description)
        results.append(
            ClassifyResponse(category_id=match.category_id, category_name=match.category_name)
        )

    matched = sum(1 for r in results if r.category_id is not None)
    logger.debug("classified", count=len(results), matched=matched, categories=len(categories))
    return results


def classify_single(description: str, categories: list[CategoryIn]) -> ClassifyResponse:
    return classify_batch([description], categories)[0]
