"""LIT score formulas.

Every function here is stateless: the LIT object model feeds it counters and
content and keeps the results. Value = f(coherence, agency, temporal signature).
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections import Counter
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from .models import LITState

logger = logging.getLogger(__name__)

BASE_HALF_LIFE_MS = 86_400_000  # 24 hours
OPTIMAL_ENTROPY = 0.6
RESONANCE_FACTOR = 0.2

# Upper bounds of each state band; anything above the last one is transcendent.
STATE_BANDS: list[tuple[float, LITState]] = [
    (0.2, LITState.DECAYING),
    (0.4, LITState.NASCENT),
    (0.6, LITState.STABLE),
    (0.8, LITState.RESONANT),
]

_WHITESPACE = re.compile(r"\s+")


def content_to_json(content: Any) -> str:
    """Compact JSON rendering used for entropy and size measurements."""
    return json.dumps(content, separators=(",", ":"), ensure_ascii=False, default=str)


def _is_set(value: Any) -> bool:
    """A field counts as set unless it is missing, None, False, zero or an empty string."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float, str)) and not value:
        return False
    return True


# ─── Coherence ───────────────────────────────────────────────────────────────


def measure_consistency(content: Any) -> float:
    """Internal consistency of content.

    Text: ratio of unique words to words. Mappings and sequences: share of
    entries that hold a value. Anything else sits at the midpoint.
    """
    if isinstance(content, str):
        words = _WHITESPACE.split(content)
        return min(1.0, len(set(words)) / len(words))

    if isinstance(content, Mapping):
        values = list(content.values())
    elif isinstance(content, (list, tuple)):
        values = list(content)
    else:
        return 0.5

    defined = [v for v in values if v is not None]
    return len(defined) / max(1, len(values))


def measure_resonance(content: Any) -> float:
    """Resonance with the XQE substrate: 0.2 per well-known field present."""
    if not isinstance(content, Mapping):
        return 0.0

    factors = [
        _is_set(content.get("metadata")),
        _is_set(content.get("id")),
        _is_set(content.get("relations")),
        "value" in content,
        _is_set(content.get("persistent")),
    ]
    return min(1.0, sum(RESONANCE_FACTOR for present in factors if present))


def measure_entropy(content: Any) -> float:
    """Shannon entropy of the content's JSON text, normalised by 8 bits."""
    text = content_to_json(content)
    if not text:
        return 0.0

    total = len(text)
    entropy = 0.0
    for count in Counter(text).values():
        p = count / total
        entropy -= p * math.log2(p)
    return min(1.0, entropy / 8)


def coherence_score(consistency: float, resonance: float, entropy: float) -> float:
    """Balance consistency and resonance against distance from optimal entropy."""
    optimal_entropy = 1 - abs(OPTIMAL_ENTROPY - entropy)
    return min(1.0, consistency * 0.4 + resonance * 0.4 + optimal_entropy * 0.2)


# ─── Agency ──────────────────────────────────────────────────────────────────


def autonomy(capability_count: int) -> float:
    return min(1.0, capability_count / 10)


def intentionality(total_uses: int) -> float:
    return min(1.0, math.log(1 + total_uses) / 5)


def effectivity(active_capabilities: int, capability_count: int) -> float:
    return active_capabilities / max(1, capability_count)


def agency_score(autonomy_: float, intentionality_: float, effectivity_: float) -> float:
    return (autonomy_ + intentionality_ + effectivity_) / 3


# ─── Temporal signature ──────────────────────────────────────────────────────


def persistence(age_ms: float, interaction_count: int) -> float:
    """Log of age, amplified by interaction density (interactions per second).

    Age is clamped to one millisecond so a freshly created LIT has a finite density.
    """
    age = max(1.0, age_ms)
    density = interaction_count / (age / 1000)
    return math.log(1 + age) * (1 + density)


def half_life(impacts: Iterable[float]) -> float:
    """Temporal stability in milliseconds; every unit of impact adds a day."""
    return BASE_HALF_LIFE_MS * (1 + sum(impacts))


def temporal_value(persistence_: float, age_ms: float, half_life_ms: float) -> float:
    if half_life_ms <= 0:
        return 0.0
    return persistence_ * math.exp(-max(0.0, age_ms) / half_life_ms)


# ─── Value ───────────────────────────────────────────────────────────────────


def lit_value(coherence: float, agency: float, temporal: float, relation_count: int) -> float:
    """Combined value, boosted by network effects from relations, capped at 1."""
    base_value = coherence * 0.4 + agency * 0.35 + temporal * 0.25
    network_bonus = math.log(1 + relation_count) / 5
    return min(1.0, base_value * (1 + network_bonus))


def classify_state(value: float) -> LITState:
    for upper, state in STATE_BANDS:
        if value < upper:
            return state
    return LITState.TRANSCENDENT


# ─── Fusion helpers ──────────────────────────────────────────────────────────


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def variance(values: Sequence[float]) -> float:
    """Population variance."""
    if not values:
        return 0.0
    m = mean(values)
    return sum((v - m) ** 2 for v in values) / len(values)


def emergence_score(novelty: float, synergy: float, stability: float, resonance: float) -> float:
    return novelty * 0.25 + synergy * 0.35 + stability * 0.25 + resonance * 0.15
