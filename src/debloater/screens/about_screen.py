"""About screen — display only, no events."""

from __future__ import annotations

from debloater.core.models.state import AboutState
from debloater.ui import tree
from debloater.ui.tree import Node


def render(state: AboutState) -> Node:
    return tree.column(
        tree.label(state.app_name, role="heading"),
        tree.label(f"Version {state.version}"),
        tree.label(state.description),
        tree.label(state.project_url, role="link", href=state.project_url),
        padding=10,
        spacing=10,
    )
