"""Tests for the fusion engine."""

import random

import pytest

from lit_economy.core.errors import FusionCriteriaError, InsufficientInputsError, LITError, UnknownPatternError
from lit_economy.core.fusion import (
    CREATIVE_AMPLIFICATION,
    HARMONIC_SYNTHESIS,
    PROCESSUAL_INTEGRATION,
    XENIAL_TRANSCENDENCE,
    EmergenceMetrics,
    FusionPattern,
)


def knowledge(composer, topic, text):
    return composer.compose(
        lit_type="knowledge",
        content={"topic": topic, "knowledge": text, "id": f"knowledge-{topic}", "persistent": True},
    )


def creative(composer, medium):
    return composer.compose(
        lit_type="creative",
        content={"medium": medium, "outputs": [], "id": f"creative-{medium}", "persistent": True, "value": 0},
    )


def test_default_patterns(engine):
    names = [p.name for p in engine.available_patterns()]
    assert names == [HARMONIC_SYNTHESIS, PROCESSUAL_INTEGRATION, CREATIVE_AMPLIFICATION, XENIAL_TRANSCENDENCE]
    assert all(p.threshold == 0.3 for p in engine.available_patterns())


def test_threshold_from_environment(monkeypatch, engine):
    monkeypatch.setenv("LIT_FUSION_THRESHOLD", "0.45")
    pattern = FusionPattern("Custom", "custom", lambda lits, e: lits[0])
    assert pattern.resonance_threshold == 0.45


class TestPreconditions:
    def test_requires_two_lits(self, composer, engine):
        a = knowledge(composer, "a", "alpha")
        with pytest.raises(InsufficientInputsError):
            engine.fuse([a.id])

    def test_unknown_ids_are_dropped(self, composer, engine):
        a = knowledge(composer, "a", "alpha")
        with pytest.raises(InsufficientInputsError, match="found 1"):
            engine.fuse([a.id, "LIT-missing"])

    def test_unknown_pattern(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        with pytest.raises(UnknownPatternError):
            engine.fuse([a.id, b.id], "Cold Fusion")

    def test_insufficient_coherence(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        engine.fusion_patterns[HARMONIC_SYNTHESIS].resonance_threshold = 2.0
        with pytest.raises(FusionCriteriaError):
            engine.fuse([a.id, b.id], HARMONIC_SYNTHESIS)
        assert engine.fusion_history() == []
        assert len(composer) == 2

    def test_can_fuse(self, composer, engine):
        a = knowledge(composer, "a", "alpha")
        pattern = engine.fusion_patterns[HARMONIC_SYNTHESIS]
        assert not pattern.can_fuse([a])
        assert pattern.can_fuse([a, a])


class TestSelection:
    def test_knowledge_defaults_to_harmonic(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        assert engine.select_pattern([a, b]).name == HARMONIC_SYNTHESIS

    def test_all_creative(self, composer, engine):
        assert engine.select_pattern([creative(composer, "ink"), creative(composer, "clay")]).name == CREATIVE_AMPLIFICATION

    def test_process_and_knowledge(self, composer, engine):
        process = composer.compose(lit_type="process", content={"name": "p", "steps": ["one"]})
        assert engine.select_pattern([process, knowledge(composer, "a", "alpha")]).name == PROCESSUAL_INTEGRATION

    def test_high_value_transcends(self, composer, engine):
        a, b = creative(composer, "ink"), creative(composer, "clay")
        a.interact("view")
        b.interact("view")
        assert engine.select_pattern([a, b]).name == XENIAL_TRANSCENDENCE


class TestFuse:
    def test_harmonic_synthesis(self, composer, engine):
        a = knowledge(composer, "Economics", "Value emerges")
        b = knowledge(composer, "Coherence", "Order persists")
        result = engine.fuse([a.id, b.id], HARMONIC_SYNTHESIS)

        fused = result.fused_lit
        assert result.pattern == HARMONIC_SYNTHESIS
        assert fused.type == "synthesis"
        assert fused.content["synthesized_knowledge"] == "Value emerges ⊕ Order persists"
        assert fused.content["source_topics"] == ["Economics", "Coherence"]
        assert [r.target_id for r in fused.relations] == [a.id, b.id]
        assert fused.metadata["source_ids"] == [a.id, b.id]
        assert fused.id in composer

    def test_fusion_relates_sources_and_records_history(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        result = engine.fuse([a.id, b.id])

        for source in (a, b):
            assert source.relations[-1].target_id == result.fused_lit.id
            assert source.relations[-1].relation_type == "fused-into"

        fusion = result.fused_lit.temporal_signature.interactions[-1]
        assert fusion.interaction_type == "fusion"
        assert fusion.impact == pytest.approx(result.emergence.emergence_score)

        history = engine.fusion_history()
        assert len(history) == 1
        assert history[0].result_id == result.fused_lit.id
        assert history[0].source_ids == [a.id, b.id]
        assert history[0].emergence.score == pytest.approx(result.emergence.emergence_score)
        assert engine.fusion_patterns[result.pattern].usage_count == 1

    def test_processual_integration(self, composer, engine):
        process = composer.compose(lit_type="process", content={"name": "p", "steps": ["Plan", "Build", "Ship"]})
        a = knowledge(composer, "Design", "d")
        b = knowledge(composer, "Ops", "o")
        result = engine.fuse([process.id, a.id, b.id], PROCESSUAL_INTEGRATION)

        assert result.fused_lit.type == "informed-process"
        assert result.fused_lit.content["steps"] == [
            "Plan [informed by: Design]",
            "Build [informed by: Ops]",
            "Ship [informed by: Design]",
        ]
        assert len(result.fused_lit.content["knowledge_context"]) == 2

    def test_processual_integration_detaches_knowledge_context(self, composer, engine):
        process = composer.compose(lit_type="process", content={"name": "p", "steps": ["Plan"]})
        a = composer.compose(
            lit_type="knowledge",
            content={"topic": "Design", "knowledge": "d", "citations": ["c1"], "id": "k", "persistent": True},
        )
        b = knowledge(composer, "Ops", "o")
        result = engine.fuse([process.id, a.id, b.id], PROCESSUAL_INTEGRATION)

        a.content["citations"].append("c2")
        a.content["topic"] = "Changed"

        context = result.fused_lit.content["knowledge_context"][0]
        assert context["citations"] == ["c1"]
        assert context["topic"] == "Design"
        assert context is not a.content

    def test_processual_integration_without_knowledge(self, composer, engine):
        a, b = creative(composer, "ink"), creative(composer, "clay")
        result = engine.fuse([a.id, b.id], PROCESSUAL_INTEGRATION)
        assert result.fused_lit.content["steps"] == [
            "Integrate [informed by: context]",
            "Process [informed by: context]",
            "Transform [informed by: context]",
        ]

    def test_creative_amplification(self, composer, engine):
        a, b = creative(composer, "ink"), creative(composer, "clay")
        result = engine.fuse([a.id, b.id], CREATIVE_AMPLIFICATION)

        fused = result.fused_lit
        assert fused.content["medium"] == "ink × clay"
        assert fused.content["parameters"]["fusion_power"] == 2
        output = fused.execute("generate_emergent", {"rng": random.Random(7)})
        assert output["content"] == "✧ Emergent ink × clay ✧"
        assert 0.7 <= output["novelty_score"] <= 1.0
        assert fused.content["outputs"] == [output]

    def test_xenial_transcendence(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        avg = (a.calculate_value() + b.calculate_value()) / 2
        result = engine.fuse([a.id, b.id], XENIAL_TRANSCENDENCE)

        content = result.fused_lit.content
        assert content["transcendence_level"] == pytest.approx(avg * 1.5)
        assert [c["id"] for c in content["constituents"]] == [a.id, b.id]
        assert result.fused_lit.execute("resonate")["resonance"] == "xenial"

    def test_emergent_handlers_use_context_rng(self, composer, engine):
        a, b = creative(composer, "ink"), creative(composer, "clay")
        amplified = engine.fuse([a.id, b.id], CREATIVE_AMPLIFICATION).fused_lit
        first = amplified.execute("generate_emergent", {"rng": random.Random(3)})
        second = amplified.execute("generate_emergent", {"rng": random.Random(3)})
        assert first["novelty_score"] == second["novelty_score"] == 0.7 + random.Random(3).random() * 0.3

        c, d = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        transcendent = engine.fuse([c.id, d.id], XENIAL_TRANSCENDENCE).fused_lit
        harmonic = transcendent.execute("resonate", {"rng": random.Random(5)})["harmonic"]
        assert harmonic == random.Random(5).random() * 0.5 + 0.5

    def test_to_dict(self, composer, engine):
        a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "beta")
        data = engine.fuse([a.id, b.id]).to_dict()
        assert set(data) == {"fused_lit", "emergence", "pattern"}
        assert set(data["emergence"]) == {"novelty", "synergy", "stability", "resonance", "score"}


def test_emergence_metrics_ranges(composer):
    a, b = knowledge(composer, "a", "alpha"), knowledge(composer, "b", "a much longer body of knowledge")
    fused = composer.compose(content={"id": "f", "combined": "alpha beta"})
    metrics = EmergenceMetrics().calculate([a, b], fused)

    assert 0.0 <= metrics.novelty <= 1.0
    assert metrics.synergy >= 0.0
    assert metrics.stability == pytest.approx(fused.coherence)
    assert 0.0 <= metrics.resonance <= 1.0
    assert metrics.report().score == pytest.approx(metrics.emergence_score)


def test_identical_inputs_resonate_fully(composer):
    a = knowledge(composer, "a", "alpha")
    metrics = EmergenceMetrics().calculate([a, a], a)
    assert metrics.resonance == 1.0
    assert metrics.novelty == 0.0
    assert metrics.synergy == 0.0


class TestSuggestions:
    def test_sorted_and_limited(self, composer, engine):
        for i in range(4):
            knowledge(composer, f"topic{i}", "x" * (i + 1) * 10)
        suggestions = engine.suggest_fusions(limit=3)
        assert len(suggestions) == 3
        potentials = [s.potential for s in suggestions]
        assert potentials == sorted(potentials, reverse=True)
        assert all(s.types == ["knowledge", "knowledge"] for s in suggestions)

    def test_min_coherence_filters(self, composer, engine):
        knowledge(composer, "a", "alpha")
        knowledge(composer, "b", "beta")
        assert engine.suggest_fusions(min_coherence=1.0) == []

    def test_custom_pattern_registration(self, composer, engine):
        captured = {}

        def first_wins(lits, eng):
            captured["count"] = len(lits)
            return eng.composer.compose(content={"id": "winner", "persistent": True})

        engine.register_pattern(FusionPattern("First Wins", "keeps the first", first_wins, resonance_threshold=0.0))
        a, b = composer.compose(content="x"), composer.compose(content="y")
        result = engine.fuse([a.id, b.id], "First Wins")
        assert captured["count"] == 2
        assert result.fused_lit.content["id"] == "winner"

    @pytest.mark.parametrize("limit", [0, -1, -5])
    def test_non_positive_limit_is_rejected(self, composer, engine, limit):
        knowledge(composer, "a", "alpha")
        knowledge(composer, "b", "beta")
        with pytest.raises(LITError, match="at least 1"):
            engine.suggest_fusions(limit=limit)

    def test_limit_one(self, composer, engine):
        knowledge(composer, "a", "alpha")
        knowledge(composer, "b", "beta")
        knowledge(composer, "c", "gamma")
        assert len(engine.suggest_fusions(limit=1)) == 1
