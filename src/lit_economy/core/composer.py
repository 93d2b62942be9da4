"""LIT composer: builds LITs and keeps them in an in-memory registry."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from .errors import LITNotFoundError
from .lit import LIT, Clock
from .scoring import mean

logger = logging.getLogger(__name__)


class LITComposer:
    """High-level API for creating, finding and networking LITs."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock
        self.registry: dict[str, LIT] = {}

    def __len__(self) -> int:
        return len(self.registry)

    def __contains__(self, lit_id: object) -> bool:
        return lit_id in self.registry

    def compose(self, **config: Any) -> LIT:
        """Create a LIT from keyword config (see ``LIT.__init__``) and register it."""
        config.setdefault("clock", self._clock)
        lit = LIT(**config)
        self.add(lit)
        logger.info("Composed %s LIT %s (value %.3f, %s)", lit.type, lit.id, lit.calculate_value(), lit.state.value)
        return lit

    def add(self, lit: LIT) -> LIT:
        if lit.id in self.registry:
            logger.warning("Replacing registered LIT %s", lit.id)
        self.registry[lit.id] = lit
        return lit

    def find(self, lit_id: str) -> Optional[LIT]:
        return self.registry.get(lit_id)

    def get(self, lit_id: str) -> LIT:
        lit = self.registry.get(lit_id)
        if lit is None:
            raise LITNotFoundError(lit_id)
        return lit

    def find_by_type(self, lit_type: str) -> list[LIT]:
        return [lit for lit in self.registry.values() if lit.type == lit_type]

    def all_lits(self) -> list[LIT]:
        return list(self.registry.values())

    def network(self, lits: Sequence[LIT], relation_type: str = "connected") -> Sequence[LIT]:
        """Chain LITs: each one relates to its successor."""
        for source, target in zip(lits, lits[1:]):
            source.relate(target, relation_type)
        return lits

    def measure_network_coherence(self) -> float:
        """Mean value over every registered LIT; 0 for an empty registry."""
        return mean([lit.calculate_value() for lit in self.registry.values()])

    def state_distribution(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for lit in self.registry.values():
            counts[lit.state.value] = counts.get(lit.state.value, 0) + 1
        return counts
