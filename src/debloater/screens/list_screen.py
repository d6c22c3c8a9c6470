"""List screen — installed packages joined with the debloat catalog.

The screen keeps the full row set in its state and derives what is shown
(:func:`visible_rows`) from the filters and the last settings snapshot, so a
settings change never requires a reload.
"""

from __future__ import annotations

import logging

from debloater.core.commands import Command, FetchPackageDetails
from debloater.core.errors import ControllerError
from debloater.core.models.catalog import REMOVAL_RANK, Removal, UadList
from debloater.core.models.device import PackageState
from debloater.core.models.event import (
    ListEvent,
    ListFilterSelected,
    LoadSettings,
    PackageDetailsLoaded,
    PackageSelected,
    PackagesLoaded,
    SearchChanged,
    StateFilterSelected,
)
from debloater.core.models.state import ListPhase, ListState, PackageRow, SortKey
from debloater.ui import tree
from debloater.ui.tree import Node

_log = logging.getLogger(__name__)

_ALL = ""

_LIST_OPTIONS: dict[str, str] = {_ALL: "All lists", **{v.value: v.value.capitalize() for v in UadList}}
_STATE_OPTIONS: dict[str, str] = {_ALL: "All packages", **{s.value: s.value.capitalize() for s in PackageState}}


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def update(state: ListState, event: ListEvent) -> tuple[ListState, Command | None]:
    """Apply *event* to the list state; may return a follow-up command."""
    if isinstance(event, PackagesLoaded):
        return _on_packages_loaded(state, event), None

    if isinstance(event, LoadSettings):
        return state.model_copy(update={"settings": event.settings}), None

    if isinstance(event, SearchChanged):
        return state.model_copy(update={"search": event.text}), None

    if isinstance(event, ListFilterSelected):
        return state.model_copy(update={"list_filter": event.value}), None

    if isinstance(event, StateFilterSelected):
        return state.model_copy(update={"state_filter": event.value}), None

    if isinstance(event, PackageSelected):
        new_state = state.model_copy(
            update={"selected": event.package_id, "details": None, "details_error": None}
        )
        return new_state, FetchPackageDetails(
            generation=state.generation, package_id=event.package_id
        )

    if isinstance(event, PackageDetailsLoaded):
        if event.package_id != state.selected:
            _log.debug("Details for %s arrived after selection moved on", event.package_id)
            return state, None
        return state.model_copy(
            update={"details": event.details, "details_error": event.error}
        ), None

    raise ControllerError(f"Unknown list event: {event!r}")


def _on_packages_loaded(state: ListState, event: PackagesLoaded) -> ListState:
    rows = tuple(
        sorted(
            (PackageRow.join(package, event.catalog) for package in event.packages),
            key=lambda r: r.id,
        )
    )
    if rows:
        phase = ListPhase.READY
    elif event.catalog.error or event.error:
        phase = ListPhase.ERROR
    else:
        phase = ListPhase.EMPTY

    _log.info(
        "Package list loaded: %d packages, catalog of %d entries (generation %d)",
        len(rows),
        len(event.catalog),
        event.generation,
    )
    return state.model_copy(
        update={
            "phase": phase,
            "rows": rows,
            "catalog_size": len(event.catalog),
            "catalog_error": event.catalog.error,
            "device_error": event.error,
            "selected": None,
            "details": None,
            "details_error": None,
        }
    )


# ---------------------------------------------------------------------------
# Derived data
# ---------------------------------------------------------------------------

def visible_rows(state: ListState) -> list[PackageRow]:
    """Rows after settings, filters and search are applied, in display order."""
    settings = state.settings
    needle = state.search.strip().lower()

    rows = []
    for r in state.rows:
        if r.removal is Removal.UNSAFE and not settings.expert_mode:
            continue
        if r.state is PackageState.UNINSTALLED and not settings.show_uninstalled:
            continue
        if state.list_filter is not None and r.list is not state.list_filter:
            continue
        if state.state_filter is not None and r.state is not state.state_filter:
            continue
        if needle and needle not in r.id.lower() and needle not in r.meta.description.lower():
            continue
        rows.append(r)

    if settings.sort_key is SortKey.REMOVAL:
        rows.sort(key=lambda r: (REMOVAL_RANK[r.removal], r.id))
    else:
        rows.sort(key=lambda r: r.id)
    return rows


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

def render(state: ListState) -> Node:
    if state.phase is ListPhase.LOADING:
        return _message("Loading packages from the phone...")
    if state.phase is ListPhase.ERROR:
        reason = state.catalog_error or state.device_error or "unknown error"
        return _message(f"No packages could be loaded ({reason}).")
    if state.phase is ListPhase.EMPTY:
        return _message(
            "No packages found. Connect a phone with USB debugging enabled and press refresh."
        )

    shown = visible_rows(state)
    children = [_filters(state), tree.label(f"{len(shown)} of {len(state.rows)} packages shown", role="caption")]
    if state.catalog_error:
        children.append(
            tree.label(f"Debloat database unavailable: {state.catalog_error}", role="warning")
        )
    children.append(
        tree.row(
            tree.column(*(_package_row(r, r.id == state.selected) for r in shown), role="list", grow=2),
            _details_panel(state),
            spacing=10,
        )
    )
    return tree.column(*children, padding=10, spacing=10)


def _message(text: str) -> Node:
    return tree.column(tree.label(text), padding=10)


def _filters(state: ListState) -> Node:
    return tree.row(
        tree.text_input(state.search, SearchChanged, "text", placeholder="Search packages"),
        tree.select(
            _LIST_OPTIONS,
            state.list_filter.value if state.list_filter else _ALL,
            ListFilterSelected,
            "value",
            label_text="List",
        ),
        tree.select(
            _STATE_OPTIONS,
            state.state_filter.value if state.state_filter else _ALL,
            StateFilterSelected,
            "value",
            label_text="State",
        ),
        spacing=10,
    )


def _package_row(r: PackageRow, selected: bool) -> Node:
    return tree.button(
        r.id,
        PackageSelected(package_id=r.id),
        state=r.state.value,
        removal=r.removal.value,
        list=r.list.value,
        selected=selected,
    )


def _details_panel(state: ListState) -> Node:
    if state.selected is None:
        return tree.column(tree.label("Select a package to see its description."), grow=3)

    r = next((r for r in state.rows if r.id == state.selected), None)
    if r is None:
        return tree.column(tree.label(f"{state.selected} is no longer listed."), grow=3)

    meta = r.meta
    lines = [
        tree.label(r.id, role="heading"),
        tree.label(meta.description or "No description available."),
        tree.label(f"List: {meta.list.value}  |  Removal: {meta.removal.value}  |  State: {r.state.value}"),
    ]
    if meta.dependencies:
        lines.append(tree.label("Depends on: " + ", ".join(meta.dependencies)))
    if meta.needed_by:
        lines.append(tree.label("Needed by: " + ", ".join(meta.needed_by)))
    if meta.labels:
        lines.append(tree.label("Labels: " + ", ".join(meta.labels)))

    if state.details is not None:
        d = state.details
        lines.append(tree.label(f"Version: {d.version_name or '?'} ({d.version_code or '?'})"))
        if d.first_install_time:
            lines.append(tree.label(f"First installed: {d.first_install_time}"))
        if d.code_path:
            lines.append(tree.label(f"Path: {d.code_path}"))
    elif state.details_error:
        lines.append(tree.label(f"Details unavailable: {state.details_error}", role="warning"))
    else:
        lines.append(tree.label("Reading package details...", role="caption"))

    return tree.column(*lines, grow=3)
