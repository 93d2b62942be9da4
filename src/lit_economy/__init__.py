"""LIT Economy.

Luminous Information Tokens: content scored for coherence, agency and
temporal value, fused into new LITs, and showcased on the xen.fun landing page.
"""

from typing import Optional

__version__ = "0.1.0"

from .app_definition import LandingPage
from .core.composer import LITComposer


def get_app_html(composer: Optional[LITComposer] = None) -> str:
    """Return the landing page HTML. Re-renders each call so live stats stay current."""
    return LandingPage(composer).render()
