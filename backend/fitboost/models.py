import threading
import time
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

AssistantType = Literal["trainer", "nutritionist"]
ScanType = Literal["body", "food"]
ASSISTANT_TYPES: tuple[AssistantType, ...] = ("trainer", "nutritionist")

# Sunday first, matching the calendar grid.
WEEKDAYS: list[str] = [
    "Domingo",
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
]

_id_lock = threading.Lock()
_last_id = 0


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_id() -> str:
    """Return a time-derived identifier, strictly increasing within the process."""
    global _last_id
    with _id_lock:
        candidate = now_ms()
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


class UserGoal(str, Enum):
    """Coaching goal chosen during onboarding."""

    LOSE_FAT = "Perder Gordura"
    GAIN_MUSCLE = "Ganhar Massa"
    MAINTAIN = "Manter o Físico"
    HYPERTROPHY = "Hipertrofia"


class TrainingLevel(str, Enum):
    """Self-declared training experience."""

    BEGINNER = "Iniciante"
    ADVANCED = "Avançado"


class UserProfile(BaseModel):
    """Identity plus the coaching parameters fed into every AI prompt."""

    id: str
    email: str
    name: str
    age: Optional[int] = Field(default=None, ge=1, le=120)
    height: Optional[float] = Field(default=None, gt=0)  # cm
    weight: Optional[float] = Field(default=None, gt=0)  # kg
    level: Optional[TrainingLevel] = None
    goal: Optional[UserGoal] = None
    onboarded: bool = False
    is_admin: bool = False
    workout_days: Optional[list[str]] = None

    @field_validator("workout_days")
    @classmethod
    def _normalise_workout_days(cls, days: Optional[list[str]]) -> Optional[list[str]]:
        """Deduplicate and order weekday names by their position in the week."""
        if days is None:
            return None
        unknown = [d for d in days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        return sorted(set(days), key=WEEKDAYS.index)


class GroundingSource(BaseModel):
    """A single web citation returned by search-augmented generation."""

    uri: str
    title: str = ""


class GroundingMetadata(BaseModel):
    """Citations and search queries attached to an AI response."""

    sources: list[GroundingSource] = []
    search_queries: list[str] = []


class ChatMessage(BaseModel):
    """One turn in a conversation."""

    id: str
    role: Literal["user", "assistant"]
    text: str
    grounding_metadata: Optional[GroundingMetadata] = None
    timestamp: int = Field(default_factory=now_ms)


class ChatSession(BaseModel):
    """A persisted transcript within a (user, assistant type) partition."""

    id: str
    user_id: str
    type: AssistantType
    timestamp: int
    last_message: str
    messages: list[ChatMessage]


class AIResponse(BaseModel):
    """What the AI gateway hands back to callers. Always populated."""

    text: str
    grounding_metadata: Optional[GroundingMetadata] = None
