"""Example LIT compositions and the demo network built from them."""

from __future__ import annotations

import copy
import logging
import math
import random
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional, Sequence

from .composer import LITComposer
from .lit import LIT
from .models import Capability

logger = logging.getLogger(__name__)


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.lower())


def _created() -> str:
    return datetime.now(timezone.utc).isoformat()


def _now_ms() -> float:
    return time.time() * 1000


# ─── Knowledge ───────────────────────────────────────────────────────────────


def create_knowledge_lit(composer: LITComposer, topic: str, knowledge: str) -> LIT:
    """A LIT holding coherent information about a concept."""

    def query(context: dict) -> dict[str, Any]:
        return {
            "response": f"Information about {topic}: {knowledge[:100]}...",
            "confidence": 0.8,
        }

    def expand(context: dict) -> dict[str, Any]:
        return {"expanded": True, "new_connections": context.get("connections", [])}

    return composer.compose(
        lit_type="knowledge",
        content={
            "topic": topic,
            "knowledge": knowledge,
            "citations": [],
            "confidence": 0.8,
            "id": f"knowledge-{_slug(topic)}",
            "persistent": True,
        },
        metadata={"domain": "epistemology", "created": _created(), "creator": "xen.fun"},
        capabilities=[
            Capability(name="query", handler=query),
            Capability(name="expand", handler=expand),
        ],
    )


# ─── Process ─────────────────────────────────────────────────────────────────


def _execute_step(context: dict) -> dict[str, Any]:
    content = context["lit"].content
    steps = content["steps"]
    if content["current_step"] >= len(steps):
        return {"status": "completed", "message": "All steps completed"}

    step = steps[content["current_step"]]
    content["current_step"] += 1
    content["metadata"]["completed_steps"] += 1
    content["status"] = "executing"

    return {
        "status": "executing",
        "step": step,
        "progress": content["current_step"] / len(steps) * 100,
    }


def _reset_process(context: dict) -> dict[str, Any]:
    content = context["lit"].content
    content["current_step"] = 0
    content["metadata"]["completed_steps"] = 0
    content["status"] = "ready"
    return {"status": "reset"}


def create_process_lit(composer: LITComposer, name: str, steps: Sequence[str]) -> LIT:
    """A LIT encoding an agential process that executes step by step."""
    return composer.compose(
        lit_type="process",
        content={
            "name": name,
            "steps": list(steps),
            "current_step": 0,
            "status": "ready",
            "id": f"process-{_slug(name)}",
            "persistent": True,
            "metadata": {"total_steps": len(steps), "completed_steps": 0},
        },
        metadata={"domain": "procedural", "created": _created()},
        capabilities=[
            Capability(name="execute", handler=_execute_step),
            Capability(name="reset", handler=_reset_process),
        ],
    )


# ─── Creative ────────────────────────────────────────────────────────────────


def _generate(context: dict) -> dict[str, Any]:
    lit = context["lit"]
    seed = context.get("seed") or int(_now_ms())
    content = lit.content

    output = {
        "id": f"output-{seed}",
        "timestamp": _now_ms(),
        "content": f"{content['style']} {content['medium']} generated with seed {seed}",
        "parameters": copy.deepcopy(content["parameters"]),
    }
    content["outputs"].append(output)
    content["value"] += 0.1
    return output


def _evolve(context: dict) -> dict[str, Any]:
    parameters = context["lit"].content["parameters"]
    mutation = context.get("mutation", 0.1)
    rng = context.get("rng") or random

    for key, value in parameters.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            parameters[key] = value * (1 + (rng.random() - 0.5) * mutation)

    return {"evolved": True, "new_parameters": dict(parameters)}


def create_creative_lit(composer: LITComposer, medium: str, style: str, parameters: dict[str, Any]) -> LIT:
    """A LIT that generates novel outputs through combinatorial agency."""
    return composer.compose(
        lit_type="creative",
        content={
            "medium": medium,
            "style": style,
            "parameters": dict(parameters),
            "outputs": [],
            "id": _slug(f"creative-{medium}-{style}"),
            "persistent": True,
            "value": 0,
        },
        metadata={"domain": "generative", "created": _created()},
        capabilities=[
            Capability(name="generate", handler=_generate),
            Capability(name="evolve", handler=_evolve),
        ],
    )


# ─── Prediction ──────────────────────────────────────────────────────────────


def _predict(context: dict) -> dict[str, Any]:
    content = context["lit"].content
    rng = context.get("rng") or random

    prediction = {
        "id": f"pred-{uuid.uuid4().hex[:8]}",
        "input": context.get("input"),
        "output": rng.random(),
        "confidence": 0.5 + rng.random() * 0.5,
        "timestamp": _now_ms(),
        "verified": False,
    }
    content["predictions"].append(prediction)
    content["metadata"]["total_predictions"] += 1
    return prediction


def _verify(context: dict) -> dict[str, Any]:
    content = context["lit"].content
    prediction_id = context.get("prediction_id")
    outcome = context.get("outcome")

    prediction = next((p for p in content["predictions"] if p["id"] == prediction_id), None)
    if prediction is None:
        return {"error": "Prediction not found"}
    if outcome is None:
        return {"error": "Outcome required"}

    prediction["verified"] = True
    prediction["actual_outcome"] = outcome
    prediction["error"] = abs(prediction["output"] - outcome)

    stats = content["metadata"]
    if prediction["error"] < 0.1:
        stats["correct_predictions"] += 1
    content["accuracy"] = stats["correct_predictions"] / stats["total_predictions"]

    return {"verified": True, "accuracy": content["accuracy"]}


def create_prediction_lit(composer: LITComposer, domain: str, model: str) -> LIT:
    """A LIT that makes predictions and scores itself against outcomes."""
    return composer.compose(
        lit_type="prediction",
        content={
            "domain": domain,
            "model": model,
            "predictions": [],
            "accuracy": 0,
            "id": f"prediction-{_slug(domain)}",
            "persistent": True,
            "relations": [],
            "metadata": {"total_predictions": 0, "correct_predictions": 0},
        },
        metadata={"domain": "forecasting", "created": _created()},
        capabilities=[
            Capability(name="predict", handler=_predict),
            Capability(name="verify", handler=_verify),
        ],
    )


# ─── Symphonia ───────────────────────────────────────────────────────────────


def _analyze_network(context: dict) -> dict[str, Any]:
    harmonic = context["lit"].content["harmonic_state"]
    rng = context.get("rng") or random

    harmonic["frequency"] = 432 + (rng.random() - 0.5) * 20
    harmonic["phase"] = (harmonic["phase"] + math.pi / 4) % (2 * math.pi)
    return {"analyzed": True, "state": dict(harmonic)}


def _compose_piece(context: dict) -> dict[str, Any]:
    content = context["lit"].content
    rng = context.get("rng") or random

    composition = {
        "id": f"comp-{uuid.uuid4().hex[:8]}",
        "timestamp": _now_ms(),
        "harmonics": dict(content["harmonic_state"]),
        "duration": 60 + rng.random() * 240,
        "coherence_score": 0.7 + rng.random() * 0.3,
    }
    content["compositions"].append(composition)
    content["metadata"]["total_compositions"] += 1
    return composition


def create_symphonia_lit(composer: LITComposer) -> LIT:
    """Generative music LIT that follows the harmonic flow of the X1 network."""
    return composer.compose(
        lit_type="generative-music",
        content={
            "name": "Symphonia",
            "description": "A generative music LIT that analyzes the real-time harmonic flow of the X1 network",
            "harmonic_state": {"frequency": 432, "phase": 0.0, "amplitude": 1.0, "waveform": "sine"},
            "compositions": [],
            "id": "symphonia-prime",
            "persistent": True,
            "value": 75000,
            "metadata": {"networked_nodes": 0, "total_compositions": 0},
        },
        metadata={
            "domain": "generative-music",
            "created": _created(),
            "project": "Symphonia",
            "status": "active",
        },
        capabilities=[
            Capability(name="analyzeNetwork", handler=_analyze_network),
            Capability(name="compose", handler=_compose_piece),
        ],
    )


# ─── Demo network ────────────────────────────────────────────────────────────


class DemoNetwork(NamedTuple):
    knowledge: list[LIT]
    process: list[LIT]
    creative: list[LIT]
    prediction: list[LIT]

    @property
    def all(self) -> list[LIT]:
        return [*self.knowledge, *self.process, *self.creative, *self.prediction]


def create_demo_network(composer: LITComposer) -> DemoNetwork:
    """Six example LITs joined by five relations."""
    knowledge1 = create_knowledge_lit(
        composer,
        "Xenial Quantum Economics",
        "The XQE is an economy that emerges from the creation, interaction, and transformation of LITs. "
        "It operates on principles of coherence, agency, and temporal persistence rather than traditional "
        "scarcity-based value.",
    )
    knowledge2 = create_knowledge_lit(
        composer,
        "Coherence Theory",
        "Coherence in information systems is measured by internal consistency, resonance with substrate, "
        "and optimal entropy. High coherence enables stable transmission and meaningful transformation.",
    )
    process1 = create_process_lit(
        composer,
        "LIT Manifestation",
        [
            "Conception: Define the core meaning",
            "Composition: Structure the information",
            "Activation: Instantiate agential capabilities",
            "Validation: Measure coherence and temporal signature",
            "Deployment: Release into XQE substrate",
        ],
    )
    creative1 = create_creative_lit(
        composer,
        "visual art",
        "quantum-organic",
        {"complexity": 0.7, "vibrance": 0.8, "recursion": 3},
    )
    prediction1 = create_prediction_lit(composer, "XQE Patterns", "temporal-coherence-model")
    symphonia = create_symphonia_lit(composer)

    knowledge1.relate(knowledge2, "supports")
    knowledge2.relate(process1, "informs")
    process1.relate(creative1, "enables")
    creative1.relate(symphonia, "inspires")
    prediction1.relate(knowledge1, "analyzes")

    logger.info("Demo network created with %d LITs", len(composer))
    return DemoNetwork(
        knowledge=[knowledge1, knowledge2],
        process=[process1],
        creative=[creative1, symphonia],
        prediction=[prediction1],
    )


def demonstrate(composer: Optional[LITComposer] = None) -> dict[str, Any]:
    """Scripted walk-through of the demo network: execute, generate, predict."""
    composer = composer or LITComposer()
    network = create_demo_network(composer)

    for lit in network.all:
        logger.info("- %s: %s (value: %.3f, state: %s)", lit.id, lit.type, lit.calculate_value(), lit.state.value)

    process = network.process[0]
    steps = []
    for _ in range(3):
        result = process.execute("execute")
        steps.append(result)
        process.interact("execute", {"impact": 0.2})
        logger.info("Process step: %s", result)

    creative = network.creative[0]
    outputs = []
    for i in range(2):
        output = creative.execute("generate", {"seed": int(_now_ms()) + i})
        outputs.append(output)
        creative.interact("generate", {"impact": 0.3})
        logger.info("Generated: %s", output["content"])

    prediction = network.prediction[0].execute("predict", {"input": "future-coherence"})
    logger.info("Prediction: %.3f (confidence %.3f)", prediction["output"], prediction["confidence"])

    network_coherence = composer.measure_network_coherence()
    logger.info("Overall network coherence: %.3f", network_coherence)

    return {
        "lits": [lit.snapshot().model_dump(mode="json") for lit in network.all],
        "process_steps": steps,
        "creative_outputs": outputs,
        "prediction": prediction,
        "network_coherence": network_coherence,
    }
