"""Verification engine: known claims, then fact-check reviews, then heuristics.

Each step returns a verdict or None; the first verdict wins. Only the
fact-check step touches the network, and its failures fall through to
the heuristic step, so ``verify`` always returns a verdict.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import settings
from .factcheck import search_claims
from .models import (
    ArticleRecord,
    ClaimDetails,
    ClaimReview,
    VerdictStatus,
    VerificationMethod,
    VerificationVerdict,
)

logger = logging.getLogger(__name__)

# case-folded headline -> is fake
KNOWN_CLAIMS = {
    "vaccine contains microchip": True,
    "the earth is flat": True,
    "election results were fraudulent": False,
    "vacina covid contém microchip": True,
    "terra é plana": True,
    "eleições 2022 foram fraudadas": False,
}

TRUSTED_SOURCES = (
    "g1",
    "bbc",
    "reuters",
    "ap",
    "associated press",
    "agência lupa",
    "aos fatos",
)

RED_FLAG_PHRASES = (
    "urgent",
    "share fast",
    "went viral",
    "experts stunned",
    "nobody is talking about this",
    "you won't believe",
    "doctors hate",
    "before it's deleted",
    "miracle cure",
    "shocking",
    "compartilhe rápido",
    "viralizou",
    "especialistas surpresos",
    "ninguém está falando sobre isso",
)

FALSE_MARKERS = ("false", "falso", "falsa", "fake", "pants on fire", "incorrect", "untrue", "not true")
TRUE_MARKERS = ("true", "verdadeiro", "verdadeira", "correct", "accurate")

DATABASE_CONFIDENCE = 0.95
CLAIM_CHECK_CONFIDENCE = 0.9
TRUSTED_SOURCE_SCORE = 0.9
DEFAULT_SOURCE_SCORE = 0.5
RED_FLAG_PENALTY = 0.1
MAX_EXCLAMATIONS = 3
UNVERIFIED_CONFIDENCE = 0.5

ClaimSearch = Callable[..., List[ClaimReview]]


@dataclass(frozen=True)
class ScoringConfig:
    source_weight: float = 0.7
    content_weight: float = 0.3
    true_threshold: float = 0.8
    fake_threshold: float = 0.4

    @classmethod
    def from_settings(cls) -> "ScoringConfig":
        return cls(
            source_weight=settings.SOURCE_WEIGHT,
            content_weight=settings.CONTENT_WEIGHT,
            true_threshold=settings.TRUE_THRESHOLD,
            fake_threshold=settings.FAKE_THRESHOLD,
        )


def verify(
    article: ArticleRecord,
    claim_search: Optional[ClaimSearch] = None,
    scoring: Optional[ScoringConfig] = None,
    language_code: Optional[str] = None,
) -> VerificationVerdict:
    verdict = _database_match(article.title)
    if verdict is None:
        verdict = _external_claim_check(article.title, claim_search or search_claims, language_code)
    if verdict is None:
        verdict = _heuristic_analysis(article, scoring or ScoringConfig.from_settings())
    logger.info("Verified %r: %s (%.2f, %s)", article.title[:80], verdict.status.value,
                verdict.confidence, verdict.method.value)
    return verdict


def _database_match(title: str) -> Optional[VerificationVerdict]:
    is_fake = KNOWN_CLAIMS.get(title.casefold())
    if is_fake is None:
        return None
    return VerificationVerdict(
        status=VerdictStatus.FAKE if is_fake else VerdictStatus.TRUE,
        confidence=DATABASE_CONFIDENCE,
        method=VerificationMethod.DATABASE_MATCH,
    )


def _external_claim_check(title: str, claim_search: ClaimSearch,
                          language_code: Optional[str]) -> Optional[VerificationVerdict]:
    try:
        reviews = claim_search(title, language_code=language_code or settings.FACT_CHECK_LANGUAGE)
    except Exception as e:
        logger.warning("Claim check failed, using local analysis: %s", e)
        return None
    if not reviews:
        return None

    review = reviews[0]
    return VerificationVerdict(
        status=classify_rating(review.rating),
        confidence=CLAIM_CHECK_CONFIDENCE,
        method=VerificationMethod.EXTERNAL_CLAIM_CHECK,
        details=ClaimDetails(
            rating=review.rating,
            publisher=review.publisher,
            review_date=review.review_date,
            url=review.url,
        ),
    )


def classify_rating(rating: str) -> VerdictStatus:
    r = (rating or "").casefold()
    if any(m in r for m in FALSE_MARKERS):
        return VerdictStatus.FAKE
    if any(m in r for m in TRUE_MARKERS):
        return VerdictStatus.TRUE
    return VerdictStatus.UNVERIFIED


# --- Heuristics ---

def source_trust_score(source: str) -> float:
    s = (source or "").casefold()
    return TRUSTED_SOURCE_SCORE if any(t in s for t in TRUSTED_SOURCES) else DEFAULT_SOURCE_SCORE


def count_red_flags(text: str) -> int:
    lowered = text.casefold()
    red_flags = sum(1 for p in RED_FLAG_PHRASES if p in lowered)
    if text.count("!") > MAX_EXCLAMATIONS:
        red_flags += 1
    return red_flags


def content_score(text: str) -> float:
    return 1.0 - min(1.0, count_red_flags(text) * RED_FLAG_PENALTY)


def _heuristic_analysis(article: ArticleRecord, scoring: ScoringConfig) -> VerificationVerdict:
    text = article.content or article.title
    combined = (scoring.source_weight * source_trust_score(article.source)
                + scoring.content_weight * content_score(text))

    if combined > scoring.true_threshold:
        status, confidence = VerdictStatus.TRUE, combined
    elif combined < scoring.fake_threshold:
        status, confidence = VerdictStatus.FAKE, 1.0 - combined
    else:
        status, confidence = VerdictStatus.UNVERIFIED, UNVERIFIED_CONFIDENCE

    return VerificationVerdict(
        status=status,
        confidence=min(1.0, max(0.0, confidence)),
        method=VerificationMethod.HEURISTIC,
    )
