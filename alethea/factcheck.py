import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build

from .config import settings
from .errors import ClaimSearchError
from .models import ClaimReview

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _service():
    return build(
        "factchecktools",
        "v1alpha1",
        developerKey=settings.GOOGLE_FACT_CHECK_API_KEY,
        cache_discovery=False,
    )


def search_claims(query: str, language_code: Optional[str] = None) -> List[ClaimReview]:
    """
    Search Google Fact Check Tools for claims related to a given query.
    Returns the first review of every claim found, in API order.
    Raises ClaimSearchError if the API can't be reached or answers with garbage.
    """
    if not settings.GOOGLE_FACT_CHECK_API_KEY:
        raise ClaimSearchError("GOOGLE_FACT_CHECK_API_KEY is not configured")

    lang = language_code or settings.FACT_CHECK_LANGUAGE
    try:
        res = _service().claims().search(query=query, languageCode=lang).execute()
    except Exception as e:
        logger.error("FactCheck API error: %s", e)
        raise ClaimSearchError(f"Fact check request failed: {e}") from e

    reviews = parse_claims(res)
    logger.info("FactCheck search '%s' returned %d reviews", query, len(reviews))
    return reviews


def parse_claims(res: Dict[str, Any]) -> List[ClaimReview]:
    if not isinstance(res, dict):
        raise ClaimSearchError("Fact check response is not an object")
    claims = res.get("claims") or []
    if not isinstance(claims, list):
        raise ClaimSearchError("Fact check 'claims' is not a list")

    reviews = []
    for i, c in enumerate(claims):
        claim_reviews = (c.get("claimReview") or []) if isinstance(c, dict) else []
        if not claim_reviews or not isinstance(claim_reviews[0], dict):
            if i == 0:
                # later reviews belong to other claims; the best match has none
                logger.warning("Top claim has no review, treating as no match: %r", c)
                return []
            logger.warning("Skipping claim without a review: %r", c)
            continue
        r = claim_reviews[0]
        reviews.append(ClaimReview(
            claim_text=c.get("text"),
            rating=r.get("textualRating") or "",
            publisher=(r.get("publisher") or {}).get("name") or "",
            review_date=r.get("reviewDate"),
            url=r.get("url") or "",
        ))
    return reviews
