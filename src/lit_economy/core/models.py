"""Pydantic data models: the shared records of the LIT economy.

The runtime objects (``LIT``, ``LITComposer``, ``XenialFusionEngine``) are
plain classes; everything they hand out to callers or to the MCP server is
one of these models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LITState(str, Enum):
    """Lifecycle state derived from a LIT's value."""

    DECAYING = "decaying"
    NASCENT = "nascent"
    STABLE = "stable"
    RESONANT = "resonant"
    TRANSCENDENT = "transcendent"


class Interaction(BaseModel):
    """One recorded event in a LIT's temporal signature."""

    interaction_type: str
    impact: float = 0.0
    timestamp: float = Field(description="Epoch milliseconds")


class Relation(BaseModel):
    """A directed link from one LIT to another."""

    target_id: str
    relation_type: str
    established_at: Optional[float] = Field(None, description="Epoch milliseconds")


class Capability(BaseModel):
    """A named handler a LIT can execute."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    handler: Callable[[dict], Any]
    uses: int = 0
    description: str = ""


class InteractionResult(BaseModel):
    lit_id: str
    interaction_type: str
    result: dict[str, Any] = Field(default_factory=dict)
    new_value: float


class LITSnapshot(BaseModel):
    """Serializable view of a LIT with its derived scores."""

    id: str
    type: str = "generic"
    version: str = "1.0.0"
    content: Any = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    value: float = Field(0.0, ge=0.0, le=1.0)
    coherence: float = 0.0
    agency: float = 0.0
    temporal: float = 0.0
    state: LITState = LITState.NASCENT
    capabilities: list[str] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow)


class EmergenceReport(BaseModel):
    """Emergence metrics of a single fusion."""

    novelty: float = Field(ge=0.0, le=1.0, description="Relative change in content size")
    synergy: float = Field(ge=0.0, description="Value gain over the mean input value")
    stability: float = Field(description="Coherence of the fused LIT")
    resonance: float = Field(ge=0.0, le=1.0, description="How well the input coherences agree")
    score: float


class FusionRecord(BaseModel):
    """Entry in the fusion engine's history."""

    pattern: str
    source_ids: list[str]
    result_id: str
    emergence: EmergenceReport
    timestamp: datetime = Field(default_factory=utcnow)


class FusionSuggestion(BaseModel):
    lit_ids: list[str]
    pattern: str
    potential: float = Field(description="Mean coherence of the pair")
    types: list[str]


class PatternInfo(BaseModel):
    name: str
    description: str
    usage_count: int
    threshold: float


class ProjectCard(BaseModel):
    """A showcase project rendered on the landing page."""

    name: str
    tagline: str
    lit_type: str
    value: float = Field(description="Displayed token value in XEN")
    coherence: float = Field(ge=0.0, le=1.0)
    holders: int
    status: str = "active"
    accent: str = "#8b5cf6"
