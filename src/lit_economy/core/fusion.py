"""Xenial fusion engine.

Fusion combines two or more LITs into a new one: the inputs' fields are
merged (mostly by string concatenation), the result is composed as a fresh
LIT and re-scored with the same formulas. Emergence metrics compare the
fused LIT against its inputs and feed back into the result as an
interaction boost.
"""

from __future__ import annotations

import copy
import logging
import random
import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence

from .. import config
from . import scoring
from .composer import LITComposer
from .errors import FusionCriteriaError, InsufficientInputsError, LITError, UnknownPatternError
from .lit import LIT
from .models import (
    Capability,
    EmergenceReport,
    FusionRecord,
    FusionSuggestion,
    PatternInfo,
    Relation,
)

logger = logging.getLogger(__name__)

HARMONIC_SYNTHESIS = "Harmonic Synthesis"
PROCESSUAL_INTEGRATION = "Processual Integration"
CREATIVE_AMPLIFICATION = "Creative Amplification"
XENIAL_TRANSCENDENCE = "Xenial Transcendence"

TRANSCENDENCE_VALUE = 0.7
CREATIVE_TYPES = frozenset({"creative", "emergent-creative"})

FusionLogic = Callable[[Sequence[LIT], "XenialFusionEngine"], LIT]


def _field(lit: LIT, key: str, default: Any = None) -> Any:
    """Read a content field; a missing, empty or non-mapping value yields ``default``."""
    if not isinstance(lit.content, Mapping):
        return default
    value = lit.content.get(key)
    return value if value else default


def _isoformat_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _fusion_metadata(domain: str, pattern: str, lits: Sequence[LIT]) -> dict[str, Any]:
    return {
        "domain": domain,
        "created": _isoformat_now(),
        "fusion_pattern": pattern,
        "source_ids": [lit.id for lit in lits],
    }


class FusionPattern:
    """A named strategy for combining LITs."""

    def __init__(
        self,
        name: str,
        description: str,
        fusion_logic: FusionLogic,
        resonance_threshold: Optional[float] = None,
    ):
        self.name = name
        self.description = description
        self.fusion_logic = fusion_logic
        self.resonance_threshold = (
            config.get_fusion_threshold() if resonance_threshold is None else resonance_threshold
        )
        self.usage_count = 0

    def mean_coherence(self, lits: Sequence[LIT]) -> float:
        return scoring.mean([lit.coherence for lit in lits])

    def can_fuse(self, lits: Sequence[LIT]) -> bool:
        if len(lits) < 2:
            return False
        return self.mean_coherence(lits) >= self.resonance_threshold

    def execute(self, lits: Sequence[LIT], engine: XenialFusionEngine) -> LIT:
        self.usage_count += 1
        return self.fusion_logic(lits, engine)

    def info(self) -> PatternInfo:
        return PatternInfo(
            name=self.name,
            description=self.description,
            usage_count=self.usage_count,
            threshold=self.resonance_threshold,
        )


class EmergenceMetrics:
    """How much the fused LIT differs from, and improves on, its inputs."""

    def __init__(self):
        self.novelty = 0.0
        self.synergy = 0.0
        self.stability = 0.0
        self.resonance = 0.0

    def calculate(self, inputs: Sequence[LIT], fused: LIT) -> EmergenceMetrics:
        input_complexity = scoring.mean([len(scoring.content_to_json(lit.content)) for lit in inputs])
        output_complexity = len(scoring.content_to_json(fused.content))
        if input_complexity > 0:
            self.novelty = min(1.0, abs(output_complexity - input_complexity) / input_complexity)
        else:
            self.novelty = 1.0

        input_value = scoring.mean([lit.calculate_value() for lit in inputs])
        output_value = fused.calculate_value()
        self.synergy = max(0.0, (output_value - input_value) / max(0.1, input_value))

        self.stability = fused.coherence

        coherence_variance = scoring.variance([lit.coherence for lit in inputs])
        self.resonance = 1 - min(1.0, coherence_variance)

        return self

    @property
    def emergence_score(self) -> float:
        return scoring.emergence_score(self.novelty, self.synergy, self.stability, self.resonance)

    def report(self) -> EmergenceReport:
        return EmergenceReport(
            novelty=self.novelty,
            synergy=self.synergy,
            stability=self.stability,
            resonance=self.resonance,
            score=self.emergence_score,
        )


class FusionResult:
    """Outcome of ``XenialFusionEngine.fuse``."""

    def __init__(self, fused_lit: LIT, emergence: EmergenceMetrics, pattern: str):
        self.fused_lit = fused_lit
        self.emergence = emergence
        self.pattern = pattern

    def to_dict(self) -> dict[str, Any]:
        return {
            "fused_lit": self.fused_lit.to_dict(),
            "emergence": self.emergence.report().model_dump(mode="json"),
            "pattern": self.pattern,
        }


# ─── Default fusion logic ────────────────────────────────────────────────────


def harmonic_synthesis(lits: Sequence[LIT], engine: XenialFusionEngine) -> LIT:
    """Knowledge + knowledge = higher-order understanding."""
    combined = " ⊕ ".join(_field(lit, "knowledge") or _field(lit, "description", "") for lit in lits)
    topics = [_field(lit, "topic") or _field(lit, "name", "concept") for lit in lits]

    return engine.composer.compose(
        lit_type="synthesis",
        content={
            "fusion_type": "harmonic-synthesis",
            "source_topics": topics,
            "synthesized_knowledge": combined,
            "id": f"synthesis-{uuid.uuid4().hex[:8]}",
            "persistent": True,
            "value": 1.0,
            "metadata": {
                "source_count": len(lits),
                "fused_at": _isoformat_now(),
            },
        },
        metadata=_fusion_metadata("emergent-epistemology", HARMONIC_SYNTHESIS, lits),
        relations=[Relation(target_id=lit.id, relation_type="fused-from") for lit in lits],
    )


def processual_integration(lits: Sequence[LIT], engine: XenialFusionEngine) -> LIT:
    """Process + knowledge = informed process."""
    processes = [lit for lit in lits if lit.type == "process" or _field(lit, "steps")]
    knowledge = [lit for lit in lits if lit.type == "knowledge" or _field(lit, "knowledge")]

    steps = list(_field(processes[0], "steps", [])) if processes else []
    if not steps:
        steps = ["Integrate", "Process", "Transform"]

    enriched_steps = []
    for i, step in enumerate(steps):
        topic = _field(knowledge[i % len(knowledge)], "topic", "context") if knowledge else "context"
        enriched_steps.append(f"{step} [informed by: {topic}]")

    return engine.composer.compose(
        lit_type="informed-process",
        content={
            "fusion_type": "processual-integration",
            "name": "Informed Process",
            "steps": enriched_steps,
            "current_step": 0,
            "knowledge_context": [copy.deepcopy(k.content) for k in knowledge],
            "id": f"informed-process-{uuid.uuid4().hex[:8]}",
            "persistent": True,
        },
        metadata=_fusion_metadata("agential-procedural", PROCESSUAL_INTEGRATION, lits),
    )


def _generate_emergent(context: dict) -> dict[str, Any]:
    lit = context["lit"]
    rng = context.get("rng") or random
    output = {
        "id": f"emergent-{uuid.uuid4().hex[:8]}",
        "timestamp": time.time() * 1000,
        "content": f"✧ Emergent {lit.content['medium']} ✧",
        "novelty_score": 0.7 + rng.random() * 0.3,
        "fusion_signature": lit.content["source_lits"],
    }
    lit.content["outputs"].append(output)
    return output


def creative_amplification(lits: Sequence[LIT], engine: XenialFusionEngine) -> LIT:
    """Creative + creative = novel emergence."""
    mediums = [_field(lit, "medium") or _field(lit, "name", "pattern") for lit in lits]

    return engine.composer.compose(
        lit_type="emergent-creative",
        content={
            "fusion_type": "creative-amplification",
            "medium": " × ".join(mediums),
            "description": f"Emergent fusion of: {', '.join(mediums)}",
            "outputs": [],
            "source_lits": [lit.id for lit in lits],
            "parameters": {
                "complexity": 0.8,
                "novelty": 0.9,
                "fusion_power": len(lits),
            },
            "id": f"emergent-creative-{uuid.uuid4().hex[:8]}",
            "persistent": True,
            "value": 0,
        },
        metadata=_fusion_metadata("emergent-generative", CREATIVE_AMPLIFICATION, lits),
        capabilities=[Capability(name="generate_emergent", handler=_generate_emergent)],
    )


def _resonate(context: dict) -> dict[str, Any]:
    rng = context.get("rng") or random
    return {
        "resonance": "xenial",
        "pattern": "transcendent",
        "harmonic": rng.random() * 0.5 + 0.5,
    }


def xenial_transcendence(lits: Sequence[LIT], engine: XenialFusionEngine) -> LIT:
    """Any high-value LITs = transcendent pattern."""
    avg_value = scoring.mean([lit.calculate_value() for lit in lits])
    total_agency = sum(lit.agency for lit in lits)

    return engine.composer.compose(
        lit_type="xenial-transcendence",
        content={
            "fusion_type": "xenial-transcendence",
            "name": "Transcendent Pattern",
            "description": "A higher-order coherent structure that transcends its components",
            "constituents": [
                {"id": lit.id, "type": lit.type, "contribution": lit.calculate_value()}
                for lit in lits
            ],
            "transcendence_level": avg_value * 1.5,
            "collective_agency": total_agency,
            "id": f"transcendent-{uuid.uuid4().hex[:8]}",
            "persistent": True,
            "value": avg_value * 1.5,
            "metadata": {
                "constituent_count": len(lits),
                "emergence": "xenial",
            },
        },
        metadata=_fusion_metadata("transcendent", XENIAL_TRANSCENDENCE, lits),
        capabilities=[Capability(name="resonate", handler=_resonate)],
    )


# ─── Engine ──────────────────────────────────────────────────────────────────


class XenialFusionEngine:
    """Selects fusion patterns, executes fusions and keeps their history."""

    def __init__(self, composer: LITComposer):
        self.composer = composer
        self.fusion_patterns: dict[str, FusionPattern] = {}
        self.history: list[FusionRecord] = []
        self.initialize_default_patterns()

    def initialize_default_patterns(self) -> None:
        self.register_pattern(FusionPattern(
            HARMONIC_SYNTHESIS,
            "Combines related knowledge into coherent understanding",
            harmonic_synthesis,
        ))
        self.register_pattern(FusionPattern(
            PROCESSUAL_INTEGRATION,
            "Integrates knowledge into executable processes",
            processual_integration,
        ))
        self.register_pattern(FusionPattern(
            CREATIVE_AMPLIFICATION,
            "Combines generative patterns to create novel outputs",
            creative_amplification,
        ))
        self.register_pattern(FusionPattern(
            XENIAL_TRANSCENDENCE,
            "Fuses high-coherence LITs into transcendent patterns",
            xenial_transcendence,
        ))

    def register_pattern(self, pattern: FusionPattern) -> None:
        self.fusion_patterns[pattern.name] = pattern

    def select_pattern(self, lits: Sequence[LIT]) -> FusionPattern:
        """Pick the most appropriate pattern for the given LITs."""
        types = [lit.type for lit in lits]
        avg_value = scoring.mean([lit.calculate_value() for lit in lits])

        if avg_value > TRANSCENDENCE_VALUE:
            return self.fusion_patterns[XENIAL_TRANSCENDENCE]
        if types and all(t in CREATIVE_TYPES for t in types):
            return self.fusion_patterns[CREATIVE_AMPLIFICATION]
        if "process" in types and "knowledge" in types:
            return self.fusion_patterns[PROCESSUAL_INTEGRATION]
        return self.fusion_patterns[HARMONIC_SYNTHESIS]

    def fuse(self, lit_ids: Sequence[str], pattern_name: Optional[str] = None) -> FusionResult:
        """Fuse registered LITs into a new one. Unknown ids are skipped."""
        lits = [lit for lit in (self.composer.find(lit_id) for lit_id in lit_ids) if lit is not None]

        if len(lits) < 2:
            raise InsufficientInputsError(len(lits))

        if pattern_name:
            pattern = self.fusion_patterns.get(pattern_name)
            if pattern is None:
                raise UnknownPatternError(pattern_name)
        else:
            pattern = self.select_pattern(lits)

        if not pattern.can_fuse(lits):
            coherence = pattern.mean_coherence(lits)
            logger.warning("Rejected %s fusion of %d LITs (coherence %.3f)", pattern.name, len(lits), coherence)
            raise FusionCriteriaError(pattern.name, coherence, pattern.resonance_threshold)

        fused = pattern.execute(lits, self)

        emergence = EmergenceMetrics().calculate(lits, fused)
        fused.interact("fusion", {"impact": emergence.emergence_score})

        for source in lits:
            source.relate(fused, "fused-into")

        record = FusionRecord(
            pattern=pattern.name,
            source_ids=[lit.id for lit in lits],
            result_id=fused.id,
            emergence=emergence.report(),
        )
        self.history.append(record)
        logger.info(
            "Fused %d LITs via %s into %s (emergence %.3f)",
            len(lits), pattern.name, fused.id, emergence.emergence_score,
        )

        return FusionResult(fused, emergence, pattern.name)

    def fusion_history(self) -> list[FusionRecord]:
        return list(self.history)

    def available_patterns(self) -> list[PatternInfo]:
        return [pattern.info() for pattern in self.fusion_patterns.values()]

    def suggest_fusions(
        self,
        limit: Optional[int] = None,
        min_coherence: Optional[float] = None,
    ) -> list[FusionSuggestion]:
        """Rank LIT pairs by mean coherence, keeping those above ``min_coherence``."""
        limit = config.get_suggestion_limit() if limit is None else limit
        min_coherence = config.get_suggestion_min_coherence() if min_coherence is None else min_coherence
        if limit < 1:
            raise LITError(f"Suggestion limit must be at least 1 (got {limit})")

        lits = self.composer.all_lits()
        suggestions = []
        for i, first in enumerate(lits):
            for second in lits[i + 1:]:
                potential = (first.coherence + second.coherence) / 2
                if potential <= min_coherence:
                    continue
                pattern = self.select_pattern([first, second])
                suggestions.append(FusionSuggestion(
                    lit_ids=[first.id, second.id],
                    pattern=pattern.name,
                    potential=potential,
                    types=[first.type, second.type],
                ))

        suggestions.sort(key=lambda s: s.potential, reverse=True)
        return suggestions[:limit]
