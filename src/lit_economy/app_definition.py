"""xen.fun landing page: mock project cards plus live registry statistics."""

from __future__ import annotations

from html import escape
from typing import Optional

from mcpbundles_app_ui import App, BarList, Card, DarkTheme, Grid, Raw, Section, Stat, Stats

from .core.composer import LITComposer
from .core.models import ProjectCard


class LandingPage(App):
    """Landing page for xen.fun. Live stats bind to the ``open_lit_app`` result."""

    name = "xen.fun"
    subtitle = "Luminous Information Tokens for the Xenial Quantum Economy"
    theme = DarkTheme(
        accent="#8b5cf6",
        bg_page="#0b0716",
        bg_card="#171027",
        bg_hover="#221838",
        text_primary="#f5f3ff",
        text_secondary="#ddd6fe",
        text_muted="#a5a0c0",
        border="#2e2348",
        success="#10b981",
        warning="#f59e0b",
        error="#ef4444",
        chart_colors=["#8b5cf6", "#06b6d4", "#10b981", "#f97316", "#ec4899"],
    )

    tool_name = "open_lit_app"

    projects = [
        ProjectCard(
            name="Symphonia",
            tagline="A generative music LIT that analyzes the real-time harmonic flow of the X1 network",
            lit_type="generative-music",
            value=75000,
            coherence=0.92,
            holders=1284,
            accent="#8b5cf6",
        ),
        ProjectCard(
            name="Coherence Atlas",
            tagline="A living map of knowledge LITs and the relations that bind them",
            lit_type="knowledge",
            value=42500,
            coherence=0.87,
            holders=932,
            accent="#06b6d4",
        ),
        ProjectCard(
            name="Manifestation Engine",
            tagline="Process LITs that walk an idea from conception to deployment",
            lit_type="process",
            value=31200,
            coherence=0.81,
            holders=517,
            accent="#10b981",
        ),
        ProjectCard(
            name="Quantum Organic",
            tagline="Visual art that evolves its own parameters with every generation",
            lit_type="creative",
            value=18900,
            coherence=0.76,
            holders=2210,
            accent="#f97316",
        ),
        ProjectCard(
            name="XQE Oracle",
            tagline="Prediction LITs scored against verified outcomes",
            lit_type="prediction",
            value=9650,
            coherence=0.64,
            holders=341,
            status="beta",
            accent="#ec4899",
        ),
    ]

    pillars = [
        ("Coherence", "Internal consistency, resonance with the substrate and optimal entropy."),
        ("Agency", "Capabilities a LIT can execute, and how often it actually does."),
        ("Temporal Signature", "Persistence earned through interaction, decaying with age."),
    ]

    footer_text = "Value = f(coherence, agency, temporal signature)"

    def __init__(self, composer: Optional[LITComposer] = None):
        super().__init__()
        self.composer = composer
        self.layout = self._build_layout()

    def _build_layout(self) -> list:
        layout = []
        if self.composer is not None:
            layout.append(self._network_section())
        layout.append(
            Section("Featured LITs", children=[Grid(cols=3)(*(self._project_card(p) for p in self.projects))])
        )
        layout.append(
            Section(
                "Three Pillars of Value",
                children=[Grid(cols=3)(*(Card(title=escape(t), subtitle=escape(text)) for t, text in self.pillars))],
            )
        )
        layout.append(Raw(f'<footer class="card-subtitle">{escape(self.footer_text)}</footer>'))
        return layout

    def _network_section(self) -> Section:
        lit_count = len(self.composer)
        coherence = self.composer.measure_network_coherence()
        states = "".join(
            f'<li data-state="{escape(state)}">{escape(state)}: {count}</li>'
            for state, count in sorted(self.composer.state_distribution().items())
        )
        return Section(
            "Live Network",
            children=[
                Stats(
                    Stat("lit_count", "LITs", primary=True),
                    Stat("network_coherence", "Network Coherence", format="percent"),
                ),
                Card(title="At render time")(
                    Raw(
                        f'<p class="network-snapshot">{lit_count} LIT(s), network coherence {coherence:.3f}</p>'
                        f'<ul class="network-states">{states}</ul>'
                    ),
                ),
                BarList("states", title="States", show_percent=True),
            ],
        )

    @staticmethod
    def _project_card(project: ProjectCard) -> Card:
        status = escape(project.status)
        return Card(title=escape(project.name), subtitle=escape(project.tagline))(
            Raw(
                f'<dl class="project-metrics" style="border-top:3px solid {escape(project.accent)}">'
                f"<dt>Type</dt><dd>{escape(project.lit_type)}</dd>"
                f"<dt>Value</dt><dd>{project.value:,.0f} XEN</dd>"
                f"<dt>Coherence</dt><dd>{project.coherence:.0%}</dd>"
                f"<dt>Holders</dt><dd>{project.holders:,}</dd>"
                f'<dt>Status</dt><dd class="status-{status}">{status}</dd>'
                "</dl>"
            ),
        )
