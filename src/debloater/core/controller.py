"""Controller — the reducer + renderer pair at the heart of the application.

``update(state, event)`` is the only place application state changes.  It
returns the new state and at most one :class:`Command` for the scheduler.
``render(state)`` projects a state into a display tree without side effects.

Load generations
----------------
Every load, the startup one included, is tagged with
``AppState.load_generation``.  Applying a load restarts the List screen under
a new generation; results still in flight for an older generation are
discarded when they arrive instead of overwriting the fresh state.  A startup
result is applied at most once and never after a refresh.
"""

from __future__ import annotations

import logging

from debloater.core.commands import Command, LoadPackages, QueryDeviceAndCatalog
from debloater.core.errors import ControllerError
from debloater.core.models.event import (
    Event,
    ListScreenEvent,
    LoadResult,
    LoadSettings,
    NavigateToAbout,
    NavigateToList,
    NavigateToSettings,
    PackagesLoaded,
    RequestRefresh,
    SettingsScreenEvent,
    StartupLoadCompleted,
)
from debloater.core.models.state import AppState, ListState, ScreenId
from debloater.screens import about_screen, list_screen, settings_screen
from debloater.ui import tree
from debloater.ui.tree import Node

_log = logging.getLogger(__name__)

UpdateResult = tuple[AppState, Command | None]


def init() -> tuple[AppState, Command]:
    """Initial state plus the startup load that will yield ``StartupLoadCompleted``."""
    state = AppState()
    return state, QueryDeviceAndCatalog(generation=state.load_generation)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def update(state: AppState, event: Event) -> UpdateResult:
    """Apply one event.  Never blocks; recoverable failures are plain data."""
    if isinstance(event, NavigateToAbout):
        return state.model_copy(update={"active_screen": ScreenId.ABOUT}), None

    if isinstance(event, NavigateToSettings):
        return state.model_copy(update={"active_screen": ScreenId.SETTINGS}), None

    if isinstance(event, NavigateToList):
        list_state, command = list_screen.update(
            state.list_state, LoadSettings(settings=state.settings_state)
        )
        return state.model_copy(
            update={"active_screen": ScreenId.LIST, "list_state": list_state}
        ), command

    if isinstance(event, RequestRefresh):
        new_state = _restart_load(state).model_copy(update={"active_screen": ScreenId.LIST})
        _log.info("Refresh requested (generation %d)", new_state.load_generation)
        return new_state, LoadPackages(
            generation=new_state.load_generation, refresh_device=True
        )

    if isinstance(event, StartupLoadCompleted):
        if event.generation != state.load_generation:
            _log.info(
                "Discarding stale StartupLoadCompleted (generation %d, current %d)",
                event.generation,
                state.load_generation,
            )
            return state, None
        new_state = _restart_load(_with_device_label(state, event.device_label))
        if not event.catalog.ok:
            _log.error("Debloat catalog failed to load: %s", event.catalog.error)
        return new_state, LoadPackages(
            generation=new_state.load_generation, catalog=event.catalog
        )

    if isinstance(event, ListScreenEvent):
        return _on_list_event(state, event)

    if isinstance(event, SettingsScreenEvent):
        settings_state, _ = settings_screen.update(state.settings_state, event.inner)
        return state.model_copy(update={"settings_state": settings_state}), None

    raise ControllerError(f"Unhandled event: {event!r}")


def _on_list_event(state: AppState, event: ListScreenEvent) -> UpdateResult:
    inner = event.inner
    if isinstance(inner, LoadResult) and inner.generation != state.load_generation:
        _log.info(
            "Discarding stale %s (generation %d, current %d)",
            type(inner).__name__,
            inner.generation,
            state.load_generation,
        )
        return state, None

    if isinstance(inner, PackagesLoaded) and inner.device_label is not None:
        state = _with_device_label(state, inner.device_label)

    list_state, command = list_screen.update(state.list_state, inner)
    return state.model_copy(update={"list_state": list_state}), command


def _restart_load(state: AppState) -> AppState:
    """Bump the load generation and give the List screen a fresh state."""
    generation = state.load_generation + 1
    return state.model_copy(
        update={
            "load_generation": generation,
            "list_state": ListState(generation=generation, settings=state.settings_state),
        }
    )


def _with_device_label(state: AppState, label: str) -> AppState:
    if label != state.device_label:
        _log.info("PHONE_MODEL: %s", label)
    return state.model_copy(update={"device_label": label})


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

def render(state: AppState) -> Node:
    """Navigation bar plus the body of the active screen."""
    return tree.column(_navigation(state), _body(state), role="root")


def _navigation(state: AppState) -> Node:
    nav = tree.row(
        tree.label(f"Device: {state.device_label}", role="device"),
        tree.space(),
        tree.button("Refresh", RequestRefresh(), icon="refresh", role="primary"),
        tree.button("Apps", NavigateToList(), role="primary"),
        tree.button("About", NavigateToAbout(), role="primary"),
        tree.button("Settings", NavigateToSettings(), role="primary"),
        align="center",
        spacing=10,
    )
    return tree.container(nav, role="navigation", padding=10)


def _body(state: AppState) -> Node:
    if state.active_screen is ScreenId.LIST:
        return list_screen.render(state.list_state).map(ListScreenEvent)
    if state.active_screen is ScreenId.ABOUT:
        return about_screen.render(state.about_state)
    if state.active_screen is ScreenId.SETTINGS:
        return settings_screen.render(state.settings_state).map(SettingsScreenEvent)
    raise ControllerError(f"No screen for {state.active_screen!r}")
