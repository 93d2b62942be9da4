"""LIT Economy MCP server.

FastMCP server exposing the LIT composer and fusion engine as tools, with the
xen.fun landing page as an MCP Apps HTML resource.
Run: lit-economy-mcp
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Union

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from . import config, get_app_html
from .core.catalog import create_demo_network
from .core.composer import LITComposer
from .core.errors import LITError
from .core.fusion import XenialFusionEngine

logger = logging.getLogger(__name__)

MCP_APP_MIME = "text/html;profile=mcp-app"

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
MUTATING = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)

composer = LITComposer()
engine = XenialFusionEngine(composer)


def reset_registry() -> None:
    """Drop every LIT and the fusion history."""
    global composer, engine
    composer = LITComposer()
    engine = XenialFusionEngine(composer)


def seed_demo() -> int:
    """Populate the registry with the demo network; returns the number of LITs created."""
    before = len(composer)
    create_demo_network(composer)
    return len(composer) - before


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and seed the demo network on an empty registry."""
    logging.basicConfig(level=config.get_log_level(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    if config.seed_demo_enabled() and not len(composer):
        created = seed_demo()
        logger.info("Seeded demo network with %d LITs", created)
    yield


mcp = FastMCP(
    "LIT Economy",
    instructions="Compose, interact with and fuse Luminous Information Tokens (LITs). Every LIT is scored for coherence, agency and temporal value.",
    lifespan=lifespan,
)


def _snapshot(lit) -> dict:
    return lit.snapshot().model_dump(mode="json")


# ─── MCP Apps UI Resource ─────────────────────────────────────────────────────

APP_RESOURCE_URI = "ui://lit-economy/app"


@mcp.resource(
    APP_RESOURCE_URI,
    mime_type=MCP_APP_MIME,
)
def app_ui() -> str:
    """xen.fun landing page with featured projects and live network stats."""
    return get_app_html(composer)


# ─── Composition ─────────────────────────────────────────────────────────────


@mcp.tool(annotations=MUTATING)
async def lit_compose(
    lit_type: str = "generic",
    content: Optional[Union[dict[str, Any], str]] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> dict:
    """Compose a new LIT and register it.

    Args:
        lit_type: Free-form type, e.g. 'knowledge', 'process', 'creative'.
        content: JSON object or text. Objects with id, metadata, relations, value
                 and persistent fields resonate more strongly.
        metadata: Descriptive metadata; not scored.
    """
    lit = composer.compose(lit_type=lit_type, content=content, metadata=metadata)
    return _snapshot(lit)


@mcp.tool(annotations=READ_ONLY)
async def lit_get(lit_id: str) -> dict:
    """Fetch one LIT with its current scores.

    Args:
        lit_id: Registry identifier (LIT-...).
    """
    return _snapshot(composer.get(lit_id))


@mcp.tool(annotations=READ_ONLY)
async def lit_list(lit_type: str = "") -> dict:
    """List registered LITs, optionally filtered by type.

    Args:
        lit_type: Only return LITs of this type. Leave empty for all.
    """
    lits = composer.find_by_type(lit_type) if lit_type else composer.all_lits()
    return {
        "lits": [_snapshot(lit) for lit in lits],
        "count": len(lits),
        "summary": f"{len(lits)} LIT(s)" + (f" of type '{lit_type}'" if lit_type else ""),
    }


# ─── Interaction ─────────────────────────────────────────────────────────────


@mcp.tool(annotations=MUTATING)
async def lit_interact(lit_id: str, interaction_type: str, impact: float = 0.1) -> dict:
    """Record an interaction with a LIT; impact extends its half-life.

    Args:
        lit_id: Registry identifier.
        interaction_type: Free-form label, e.g. 'view', 'share'.
        impact: Interaction weight. Zero is treated as the default 0.1.
    """
    lit = composer.get(lit_id)
    result = lit.interact(interaction_type, {"impact": impact})
    return {
        "interaction": result.model_dump(mode="json"),
        "state": lit.state.value,
    }


@mcp.tool(annotations=MUTATING)
async def lit_execute(lit_id: str, capability: str, context: Optional[dict[str, Any]] = None) -> dict:
    """Execute one of a LIT's capabilities.

    Args:
        lit_id: Registry identifier.
        capability: Capability name, e.g. 'execute', 'generate', 'predict'.
        context: Extra arguments for the handler (e.g. {"seed": 42}).
    """
    lit = composer.get(lit_id)
    result = lit.execute(capability, context)
    return {
        "lit_id": lit.id,
        "capability": capability,
        "result": result,
        "new_value": lit.calculate_value(),
        "state": lit.state.value,
    }


@mcp.tool(annotations=MUTATING)
async def lit_relate(source_id: str, target_id: str, relation_type: str = "connected") -> dict:
    """Relate one LIT to another. Relations add a network bonus to value.

    Args:
        source_id: LIT that holds the relation.
        target_id: LIT being pointed at.
        relation_type: Label, e.g. 'supports', 'informs'.
    """
    source = composer.get(source_id)
    target = composer.get(target_id)
    source.relate(target, relation_type)
    return _snapshot(source)


@mcp.tool(annotations=MUTATING)
async def lit_transform_merge(lit_id: str, updates: dict[str, Any]) -> dict:
    """Transform a LIT by merging fields into its JSON object content.

    Args:
        lit_id: Registry identifier.
        updates: Fields to set on the content.
    """
    lit = composer.get(lit_id)
    if not isinstance(lit.content, Mapping):
        raise LITError(f'LIT "{lit_id}" has non-object content and cannot be merged')
    lit.transform(lambda content: {**content, **updates})
    return _snapshot(lit)


# ─── Fusion ──────────────────────────────────────────────────────────────────


@mcp.tool(annotations=MUTATING)
async def lit_fuse(lit_ids: list[str], pattern: str = "") -> dict:
    """Fuse two or more LITs into a new one.

    Args:
        lit_ids: Registry identifiers of the inputs (at least 2).
        pattern: Fusion pattern name. Leave empty to select automatically.
    """
    result = engine.fuse(lit_ids, pattern or None)
    payload = result.to_dict()
    payload["summary"] = (
        f"Fused {len(result.fused_lit.metadata['source_ids'])} LITs via {result.pattern} into {result.fused_lit.id} "
        f"(emergence {result.emergence.emergence_score:.3f}, state {result.fused_lit.state.value})."
    )
    return payload


@mcp.tool(annotations=READ_ONLY)
async def lit_suggest_fusions(limit: int = 5) -> dict:
    """Suggest the most coherent LIT pairs to fuse.

    Args:
        limit: Maximum number of suggestions, at least 1. Default 5.
    """
    suggestions = engine.suggest_fusions(limit=limit)
    return {
        "suggestions": [s.model_dump(mode="json") for s in suggestions],
        "count": len(suggestions),
    }


@mcp.tool(annotations=READ_ONLY)
async def lit_fusion_patterns() -> dict:
    """Available fusion patterns with their thresholds and usage counts."""
    return {"patterns": [p.model_dump(mode="json") for p in engine.available_patterns()]}


@mcp.tool(annotations=READ_ONLY)
async def lit_fusion_history() -> dict:
    """Every fusion performed since the server started."""
    history = engine.fusion_history()
    return {
        "history": [r.model_dump(mode="json") for r in history],
        "count": len(history),
    }


# ─── Network ─────────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def lit_network() -> dict:
    """Network coherence (mean LIT value) and the distribution of LIT states."""
    coherence = composer.measure_network_coherence()
    return {
        "lit_count": len(composer),
        "network_coherence": coherence,
        "states": composer.state_distribution(),
        "summary": f"{len(composer)} LITs with network coherence {coherence:.3f}",
    }


@mcp.tool(annotations=MUTATING)
async def lit_seed_demo() -> dict:
    """Add the six-LIT demo network (knowledge, process, creative, prediction, Symphonia)."""
    created = seed_demo()
    return {"created": created, "lit_count": len(composer)}


@mcp.tool(annotations=READ_ONLY)
async def open_lit_app() -> dict:
    """Open the xen.fun landing page with featured projects and live network stats."""
    return {
        "title": "xen.fun",
        "resource_uri": APP_RESOURCE_URI,
        "lit_count": len(composer),
        "network_coherence": composer.measure_network_coherence(),
        "states": composer.state_distribution(),
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
