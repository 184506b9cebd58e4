from datetime import datetime
from enum import Enum
from typing import Optional, List
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class Category(str, Enum):
    GENERAL = "general"
    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    SCIENCE = "science"
    SPORTS = "sports"
    TECHNOLOGY = "technology"

    @property
    def tag(self) -> str:
        return CATEGORY_TAGS[self]


# display labels, in the feed locale (pt)
CATEGORY_TAGS = {
    Category.GENERAL: "Geral",
    Category.BUSINESS: "Negócios",
    Category.ENTERTAINMENT: "Entretenimento",
    Category.HEALTH: "Saúde",
    Category.SCIENCE: "Ciência",
    Category.SPORTS: "Esportes",
    Category.TECHNOLOGY: "Tecnologia",
}


class VerdictStatus(str, Enum):
    TRUE = "true"
    FAKE = "fake"
    UNVERIFIED = "unverified"


class VerificationMethod(str, Enum):
    DATABASE_MATCH = "database_match"
    EXTERNAL_CLAIM_CHECK = "external_claim_check"
    HEURISTIC = "heuristic"


class VerificationState(str, Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    CONFIRMED_TRUE = "confirmed_true"
    CONFIRMED_FAKE = "confirmed_fake"


class ClaimReview(BaseModel):
    """First review of one claim returned by the fact-check API."""
    claim_text: Optional[str] = None
    rating: str = ""
    publisher: str = ""
    review_date: Optional[str] = None
    url: str = ""


class ClaimDetails(BaseModel):
    rating: str
    publisher: str
    review_date: Optional[str] = None
    url: str = ""


class VerificationVerdict(BaseModel):
    status: VerdictStatus
    confidence: float = Field(ge=0.0, le=1.0)
    method: VerificationMethod
    details: Optional[ClaimDetails] = None

    @model_validator(mode="after")
    def _details_only_for_claim_check(self):
        external = self.method is VerificationMethod.EXTERNAL_CLAIM_CHECK
        if external and self.details is None:
            raise ValueError("external_claim_check verdicts must carry details")
        if not external and self.details is not None:
            raise ValueError(f"{self.method.value} verdicts cannot carry details")
        return self


class ArticleRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    source: str
    published_at: Optional[datetime] = None
    time: str = ""
    content: Optional[str] = None
    image: str = ""
    url: str = ""
    category: Category = Category.GENERAL
    tag: str = "Geral"
    verification: VerificationState = VerificationState.UNVERIFIED
    verdict: Optional[VerificationVerdict] = None

    @property
    def is_confirmed(self) -> bool:
        return self.verification in (VerificationState.CONFIRMED_TRUE, VerificationState.CONFIRMED_FAKE)

    def mark_pending(self) -> None:
        self.verification = VerificationState.PENDING
        self.verdict = None

    def apply_verdict(self, verdict: VerificationVerdict) -> None:
        if verdict.status is VerdictStatus.TRUE:
            self.verification = VerificationState.CONFIRMED_TRUE
        elif verdict.status is VerdictStatus.FAKE:
            self.verification = VerificationState.CONFIRMED_FAKE
        else:
            self.verification = VerificationState.UNVERIFIED
        self.verdict = verdict

    def reset_verification(self) -> None:
        self.verification = VerificationState.UNVERIFIED


class ArticleIn(BaseModel):
    title: str
    source: str = ""
    content: Optional[str] = None

    def to_record(self) -> ArticleRecord:
        return ArticleRecord(title=self.title, source=self.source, content=self.content)


class NewsOut(BaseModel):
    category: Category
    articles: List[ArticleRecord] = []
