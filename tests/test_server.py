"""Tests for the MCP tools, called directly as coroutines."""

import pytest

from lit_economy import server
from lit_economy.core.errors import CapabilityNotFoundError, InsufficientInputsError, LITError, LITNotFoundError


@pytest.fixture(autouse=True)
def fresh_registry():
    server.reset_registry()
    yield
    server.reset_registry()


@pytest.mark.asyncio
async def test_compose_and_get():
    created = await server.lit_compose(lit_type="knowledge", content={"topic": "t", "id": "k"}, metadata={"a": 1})
    assert created["type"] == "knowledge"
    assert created["id"].startswith("LIT-")

    fetched = await server.lit_get(created["id"])
    assert fetched["content"] == {"topic": "t", "id": "k"}
    assert fetched["metadata"] == {"a": 1}


@pytest.mark.asyncio
async def test_get_unknown():
    with pytest.raises(LITNotFoundError):
        await server.lit_get("LIT-missing")


@pytest.mark.asyncio
async def test_list_filters_by_type():
    await server.lit_compose(lit_type="knowledge")
    await server.lit_compose(lit_type="process")

    all_lits = await server.lit_list()
    assert all_lits["count"] == 2

    only_process = await server.lit_list(lit_type="process")
    assert only_process["count"] == 1
    assert only_process["lits"][0]["type"] == "process"


@pytest.mark.asyncio
async def test_interact_and_relate():
    a = await server.lit_compose()
    b = await server.lit_compose()

    interaction = await server.lit_interact(a["id"], "view", impact=0.4)
    assert interaction["interaction"]["interaction_type"] == "view"
    assert interaction["state"] in {"decaying", "nascent", "stable", "resonant", "transcendent"}

    related = await server.lit_relate(a["id"], b["id"], "supports")
    assert related["relations"][0]["target_id"] == b["id"]


@pytest.mark.asyncio
async def test_execute_capability_on_demo_lit():
    await server.lit_seed_demo()
    process = server.composer.find_by_type("process")[0]

    result = await server.lit_execute(process.id, "execute", {"lit": "ignored"})
    assert result["result"]["step"] == "Conception: Define the core meaning"

    with pytest.raises(CapabilityNotFoundError):
        await server.lit_execute(process.id, "teleport")


@pytest.mark.asyncio
async def test_transform_merge():
    lit = await server.lit_compose(content={"id": "x"})
    merged = await server.lit_transform_merge(lit["id"], {"persistent": True})
    assert merged["content"] == {"id": "x", "persistent": True}

    text = await server.lit_compose(content="plain text")
    with pytest.raises(LITError):
        await server.lit_transform_merge(text["id"], {"a": 1})


@pytest.mark.asyncio
async def test_fuse_and_history():
    a = await server.lit_compose(lit_type="knowledge", content={"topic": "a", "knowledge": "alpha", "id": "a", "persistent": True})
    b = await server.lit_compose(lit_type="knowledge", content={"topic": "b", "knowledge": "beta", "id": "b", "persistent": True})

    fused = await server.lit_fuse([a["id"], b["id"]])
    assert fused["pattern"] == "Harmonic Synthesis"
    assert fused["fused_lit"]["content"]["synthesized_knowledge"] == "alpha ⊕ beta"
    assert "Harmonic Synthesis" in fused["summary"]

    history = await server.lit_fusion_history()
    assert history["count"] == 1
    assert history["history"][0]["result_id"] == fused["fused_lit"]["id"]

    patterns = await server.lit_fusion_patterns()
    usage = {p["name"]: p["usage_count"] for p in patterns["patterns"]}
    assert usage["Harmonic Synthesis"] == 1


@pytest.mark.asyncio
async def test_fuse_summary_counts_resolved_inputs():
    a = await server.lit_compose(lit_type="knowledge", content={"topic": "a", "knowledge": "alpha", "id": "a", "persistent": True})
    b = await server.lit_compose(lit_type="knowledge", content={"topic": "b", "knowledge": "beta", "id": "b", "persistent": True})

    fused = await server.lit_fuse([a["id"], "LIT-missing", b["id"]])
    assert fused["summary"].startswith("Fused 2 LITs via ")
    assert fused["fused_lit"]["metadata"]["source_ids"] == [a["id"], b["id"]]


@pytest.mark.asyncio
async def test_fuse_needs_two():
    a = await server.lit_compose()
    with pytest.raises(InsufficientInputsError):
        await server.lit_fuse([a["id"]])


@pytest.mark.asyncio
async def test_network_and_suggestions():
    seeded = await server.lit_seed_demo()
    assert seeded == {"created": 6, "lit_count": 6}

    network = await server.lit_network()
    assert network["lit_count"] == 6
    assert sum(network["states"].values()) == 6

    suggestions = await server.lit_suggest_fusions(limit=2)
    assert suggestions["count"] <= 2

    with pytest.raises(LITError):
        await server.lit_suggest_fusions(limit=0)


@pytest.mark.asyncio
async def test_app_resource_and_tool():
    await server.lit_compose()
    html = server.app_ui()
    assert "xen.fun" in html
    assert "Live Network" in html

    opened = await server.open_lit_app()
    assert opened["resource_uri"] == server.APP_RESOURCE_URI
    assert opened["lit_count"] == 1
    assert opened["states"] == {"decaying": 1}
    assert 'data-bind="lit_count"' in html


@pytest.mark.asyncio
async def test_lifespan_seeds_demo(monkeypatch):
    monkeypatch.setenv("LIT_SEED_DEMO", "1")
    async with server.lifespan(server.mcp):
        assert len(server.composer) == 6


@pytest.mark.asyncio
async def test_lifespan_respects_opt_out(monkeypatch):
    monkeypatch.setenv("LIT_SEED_DEMO", "0")
    async with server.lifespan(server.mcp):
        assert len(server.composer) == 0
