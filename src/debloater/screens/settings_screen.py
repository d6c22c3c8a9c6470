"""Settings screen — preferences that shape the package list."""

from __future__ import annotations

import logging

from debloater.core.errors import ControllerError
from debloater.core.models.event import (
    ExpertModeToggled,
    SettingsEvent,
    ShowUninstalledToggled,
    SortKeySelected,
)
from debloater.core.models.state import SettingsState, SortKey
from debloater.ui import tree
from debloater.ui.tree import Node

_log = logging.getLogger(__name__)

_SORT_OPTIONS: dict[str, str] = {
    SortKey.NAME.value: "Package name",
    SortKey.REMOVAL.value: "Removal recommendation",
}


def update(state: SettingsState, event: SettingsEvent) -> tuple[SettingsState, None]:
    """Apply a settings change.  Never produces a command."""
    if isinstance(event, ExpertModeToggled):
        _log.info("Expert mode %s", "enabled" if event.enabled else "disabled")
        return state.model_copy(update={"expert_mode": event.enabled}), None
    if isinstance(event, ShowUninstalledToggled):
        return state.model_copy(update={"show_uninstalled": event.enabled}), None
    if isinstance(event, SortKeySelected):
        return state.model_copy(update={"sort_key": event.sort_key}), None
    raise ControllerError(f"Unknown settings event: {event!r}")


def render(state: SettingsState) -> Node:
    return tree.column(
        tree.label("Settings", role="heading"),
        tree.checkbox(
            "Expert mode (list packages that are unsafe to remove)",
            state.expert_mode,
            ExpertModeToggled,
            "enabled",
        ),
        tree.checkbox(
            "Show uninstalled packages",
            state.show_uninstalled,
            ShowUninstalledToggled,
            "enabled",
        ),
        tree.select(
            _SORT_OPTIONS,
            state.sort_key.value,
            SortKeySelected,
            "sort_key",
            label_text="Sort packages by",
        ),
        padding=10,
        spacing=10,
    )
