"""The LIT (Luminous Information Token) object model.

A LIT is a packet of coherent, agential information: content, a set of named
capabilities, relations to other LITs, and a temporal signature. Its value is
derived from three pillars (coherence, agency, temporal signature) and
determines its lifecycle state.
"""

from __future__ import annotations

import copy
import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Union

from . import scoring
from .errors import CapabilityNotFoundError
from .models import (
    Capability,
    Interaction,
    InteractionResult,
    LITSnapshot,
    LITState,
    Relation,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
CapabilityLike = Union[Capability, Mapping[str, Any]]
RelationLike = Union[Relation, Mapping[str, Any]]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def now_ms() -> float:
    """Wall clock in epoch milliseconds."""
    return time.time() * 1000


def _base36(number: int) -> str:
    if number <= 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_lit_id(timestamp_ms: Optional[float] = None) -> str:
    """Identifier of the form ``LIT-<base36 timestamp>-<7 random chars>``."""
    ts = int(now_ms() if timestamp_ms is None else timestamp_ms)
    return f"LIT-{_base36(ts)}-{uuid.uuid4().hex[:7]}"


class TemporalSignature:
    """Creation time, interaction log and the persistence derived from them."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or now_ms
        self.created_at = self._clock()
        self.last_modified = self.created_at
        self.interactions: list[Interaction] = []
        self.persistence = 0.0

    @property
    def age(self) -> float:
        return self._clock() - self.created_at

    def record(self, interaction_type: str, impact: float = 0.0) -> Interaction:
        timestamp = self._clock()
        interaction = Interaction(interaction_type=interaction_type, impact=impact, timestamp=timestamp)
        self.interactions.append(interaction)
        self.last_modified = timestamp
        self.update_persistence()
        return interaction

    def update_persistence(self) -> None:
        self.persistence = scoring.persistence(self.age, len(self.interactions))

    @property
    def half_life(self) -> float:
        return scoring.half_life(i.impact for i in self.interactions)

    @property
    def temporal_value(self) -> float:
        return scoring.temporal_value(self.persistence, self.age, self.half_life)


class AgentSystem:
    """Named capabilities and the agency they confer."""

    def __init__(self, capabilities: Optional[Iterable[CapabilityLike]] = None):
        self.capabilities: list[Capability] = [
            c if isinstance(c, Capability) else Capability.model_validate(c)
            for c in (capabilities or [])
        ]
        self.autonomy = 0.0
        self.intentionality = 0.0
        self.effectivity = 0.0
        self.calculate_agency()

    def get_capability(self, name: str) -> Capability:
        for capability in self.capabilities:
            if capability.name == name:
                return capability
        raise CapabilityNotFoundError(name)

    @property
    def capability_names(self) -> list[str]:
        return [c.name for c in self.capabilities]

    def define_capability(self, name: str, handler: Callable[[dict], Any], description: str = "") -> Capability:
        capability = Capability(name=name, handler=handler, description=description)
        self.capabilities.append(capability)
        self.calculate_agency()
        return capability

    def execute_capability(self, name: str, context: Optional[dict] = None) -> Any:
        capability = self.get_capability(name)
        capability.uses += 1
        logger.debug("Executing capability %s (use #%d)", name, capability.uses)
        result = capability.handler(context if context is not None else {})
        self.calculate_agency()
        return result

    def calculate_agency(self) -> None:
        count = len(self.capabilities)
        total_uses = sum(c.uses for c in self.capabilities)
        active = sum(1 for c in self.capabilities if c.uses > 0)

        self.autonomy = scoring.autonomy(count)
        self.intentionality = scoring.intentionality(total_uses)
        self.effectivity = scoring.effectivity(active, count)

    @property
    def agency_score(self) -> float:
        return scoring.agency_score(self.autonomy, self.intentionality, self.effectivity)


class CoherenceField:
    """Consistency, resonance and entropy of a piece of content."""

    def __init__(self, content: Any):
        self.content = content
        self.consistency = 0.0
        self.resonance = 0.0
        self.entropy = 0.0
        self.analyze()

    def analyze(self) -> None:
        self.consistency = scoring.measure_consistency(self.content)
        self.resonance = scoring.measure_resonance(self.content)
        self.entropy = scoring.measure_entropy(self.content)

    @property
    def coherence_score(self) -> float:
        return scoring.coherence_score(self.consistency, self.resonance, self.entropy)


class LIT:
    """A Luminous Information Token."""

    def __init__(
        self,
        lit_id: Optional[str] = None,
        lit_type: str = "generic",
        version: str = "1.0.0",
        content: Any = None,
        metadata: Optional[dict[str, Any]] = None,
        capabilities: Optional[Iterable[CapabilityLike]] = None,
        relations: Optional[Iterable[RelationLike]] = None,
        clock: Optional[Clock] = None,
    ):
        self._clock = clock or now_ms
        self.id = lit_id or generate_lit_id(self._clock())
        self.type = lit_type or "generic"
        self.version = version or "1.0.0"

        self.content = content if content is not None else {}
        self.metadata = dict(metadata or {})

        self.coherence_field = CoherenceField(self.content)
        self.agent_system = AgentSystem(capabilities)
        self.temporal_signature = TemporalSignature(self._clock)

        self.relations: list[Relation] = [
            r if isinstance(r, Relation) else Relation.model_validate(r)
            for r in (relations or [])
        ]

        self.state = LITState.NASCENT
        self.update_state()

    def __repr__(self) -> str:
        return f"LIT(id={self.id!r}, type={self.type!r}, state={self.state.value})"

    # ─── Pillars ─────────────────────────────────────────────────────────────

    @property
    def coherence(self) -> float:
        return self.coherence_field.coherence_score

    @property
    def agency(self) -> float:
        return self.agent_system.agency_score

    @property
    def temporal(self) -> float:
        return self.temporal_signature.temporal_value

    def refresh_coherence(self) -> None:
        self.coherence_field = CoherenceField(self.content)

    # ─── Interaction ─────────────────────────────────────────────────────────

    def interact(self, interaction_type: str, data: Optional[dict[str, Any]] = None) -> InteractionResult:
        """Record an interaction; a missing or zero impact counts as 0.1."""
        data = dict(data or {})
        impact = data.get("impact") or 0.1
        self.temporal_signature.record(interaction_type, impact)
        self.update_state()

        return InteractionResult(
            lit_id=self.id,
            interaction_type=interaction_type,
            result=data,
            new_value=self.calculate_value(),
        )

    def transform(self, transform_fn: Callable[[Any], Any]) -> LIT:
        self.content = transform_fn(self.content)
        self.refresh_coherence()
        self.temporal_signature.record("transform", 0.5)
        self.update_state()
        return self

    def relate(self, other: LIT, relation_type: str) -> LIT:
        self.relations.append(Relation(
            target_id=other.id,
            relation_type=relation_type,
            established_at=self._clock(),
        ))
        self.temporal_signature.record("relate", 0.3)
        self.update_state()
        return self

    def execute(self, capability: str, context: Optional[dict[str, Any]] = None) -> Any:
        """Run a capability with this LIT available to the handler as ``context["lit"]``.

        Handlers may mutate content, so coherence is re-measured afterwards.
        """
        ctx = dict(context or {})
        ctx["lit"] = self
        result = self.agent_system.execute_capability(capability, ctx)
        self.refresh_coherence()
        self.update_state()
        return result

    # ─── Value ───────────────────────────────────────────────────────────────

    def calculate_value(self) -> float:
        return scoring.lit_value(self.coherence, self.agency, self.temporal, len(self.relations))

    def update_state(self) -> LITState:
        previous = self.state
        self.state = scoring.classify_state(self.calculate_value())
        if self.state != previous:
            logger.debug("LIT %s: %s -> %s", self.id, previous.value, self.state.value)
        return self.state

    # ─── Serialization ───────────────────────────────────────────────────────

    def snapshot(self) -> LITSnapshot:
        return LITSnapshot(
            id=self.id,
            type=self.type,
            version=self.version,
            content=copy.deepcopy(self.content),
            metadata=copy.deepcopy(self.metadata),
            value=self.calculate_value(),
            coherence=self.coherence,
            agency=self.agency,
            temporal=self.temporal,
            state=self.state,
            capabilities=self.agent_system.capability_names,
            relations=list(self.relations),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.snapshot().model_dump(mode="json")

    @classmethod
    def from_snapshot(cls, data: Union[LITSnapshot, Mapping[str, Any]], clock: Optional[Clock] = None) -> LIT:
        """Rebuild a LIT from a snapshot. Capability handlers are not serialized and start empty."""
        snapshot = data if isinstance(data, LITSnapshot) else LITSnapshot.model_validate(data)
        return cls(
            lit_id=snapshot.id,
            lit_type=snapshot.type,
            version=snapshot.version,
            content=snapshot.content,
            metadata=snapshot.metadata,
            relations=snapshot.relations,
            clock=clock,
        )
