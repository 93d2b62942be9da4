"""Domain errors raised by the LIT object model and the fusion engine.

All of them are ``ValueError`` subclasses so that FastMCP reports them to the
client as ordinary tool errors.
"""

from __future__ import annotations


class LITError(ValueError):
    """Base class for every LIT economy error."""


class CapabilityNotFoundError(LITError):
    def __init__(self, name: str):
        super().__init__(f'Capability "{name}" not found')
        self.name = name


class LITNotFoundError(LITError):
    def __init__(self, lit_id: str):
        super().__init__(f'LIT "{lit_id}" not found')
        self.lit_id = lit_id


class InsufficientInputsError(LITError):
    """A fusion was requested with fewer than two resolvable LITs."""

    def __init__(self, found: int):
        super().__init__(f"Fusion requires at least 2 LITs (found {found})")
        self.found = found


class UnknownPatternError(LITError):
    def __init__(self, pattern_name: str):
        super().__init__(f'Fusion pattern "{pattern_name}" not found')
        self.pattern_name = pattern_name


class FusionCriteriaError(LITError):
    """The selected pattern rejected the inputs (mean coherence too low)."""

    def __init__(self, pattern_name: str, coherence: float, threshold: float):
        super().__init__(
            f"LITs do not meet fusion criteria for {pattern_name} "
            f"(coherence {coherence:.3f} < {threshold:.2f})"
        )
        self.pattern_name = pattern_name
        self.coherence = coherence
        self.threshold = threshold
