"""Data models shared by the matcher, the response cache and the tracker."""

from enum import Enum
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class WasteCategory(str, Enum):
    """Municipal waste-collection categories (Czech bin labels)."""

    PLAST = "Žlutá: Plasty"
    PAPIR = "Modrá: Papír"
    SKLO = "Zelená/Bílá: Sklo"
    BIO = "Hnědá: Bioodpad"
    SMESNY = "Směsný odpad: Černá popelnice"
    SBERNY_DVUR = "Sběrný dvůr: Nebezpečný nebo velkoobjemový odpad"
    KOVY = "Šedá: Kovy"
    OLEJE = "Sběrný kontejner na jedlé oleje"
    TEXTIL = "Sběrný kontejner na textil"
    LEKARNA = "Lékárna"


class EventKind(str, Enum):
    """Kinds of popularity/analytics events."""

    SEARCH_LOCAL_HIT = "search_local_hit"
    SEARCH_CACHE_HIT = "search_cache_hit"
    SEARCH_AI_CALL = "search_ai_call"
    SEARCH_SUGGESTION_SHOWN = "search_suggestion_shown"
    SEARCH_SUGGESTION_ACCEPTED = "search_suggestion_accepted"
    SEARCH_SUGGESTION_REJECTED = "search_suggestion_rejected"

    IMAGE_CAPTURED = "image_captured"
    IMAGE_COMPRESSED = "image_compressed"
    IMAGE_CACHE_HIT = "image_cache_hit"

    USER_ADDED_ITEM = "user_added_item"
    USER_FEEDBACK_POSITIVE = "user_feedback_positive"
    USER_FEEDBACK_NEGATIVE = "user_feedback_negative"

    ERROR_OFFLINE = "error_offline"
    ERROR_NO_API_KEY = "error_no_api_key"
    ERROR_AI_FAILED = "error_ai_failed"


class QueryVariant(NamedTuple):
    """A rewriting of the user's query and its ranking penalty."""

    text: str
    penalty: float


class WasteRecord(BaseModel):
    """A knowledge-base item."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: WasteCategory
    note: str = ""


class CacheEntry(BaseModel):
    """A previously received AI answer."""

    name: str
    category: WasteCategory
    note: str = ""
    timestamp: int
    query: str | None = None
    image_fingerprint: str | None = None

    def to_record(self) -> WasteRecord:
        return WasteRecord(
            name=self.name, category=self.category, note=self.note
        )


class PopularityEvent(BaseModel):
    """A single tracked user-facing outcome."""

    kind: EventKind
    timestamp: int
    metadata: dict[str, Any] | None = None


class ProviderAnswer(BaseModel):
    """Successful result of the host's AI provider call."""

    name: str
    category: WasteCategory
    note: str | None = None


class Resolution(BaseModel):
    """Outcome of a successful local or cached resolution."""

    record: WasteRecord
    source: Literal["local", "user", "cache"]
    query: str


class Suggestion(BaseModel):
    """A "did you mean" candidate."""

    record: WasteRecord
    score: float
    similarity: float = Field(ge=0.0, le=1.0)
