"""NiceGUIHost — mounts display trees into NiceGUI containers.

The host is subscribed to the :class:`~debloater.core.runtime.Runtime` as a
view.  After every update it clears each bound container and rebuilds it from
the new :class:`~debloater.ui.tree.Node` tree; widget interactions are turned
back into events and handed to ``dispatch``.

Text inputs emit on Enter or blur rather than per keystroke, because every
update rebuilds the widgets (and would otherwise steal the focus).
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from nicegui import ui
from pydantic import BaseModel

from debloater.core.models.state import AppState
from debloater.ui.tree import InputBinding, Node

_log = logging.getLogger(__name__)

Dispatch = Callable[[Any], Awaitable[None]]

# Removal level → Quasar colour for package buttons.
_REMOVAL_COLORS: dict[str, str] = {
    "recommended": "positive",
    "advanced": "warning",
    "expert": "orange",
    "unsafe": "negative",
    "unlisted": "grey",
}

_LABEL_CLASSES: dict[str, str] = {
    "heading": "text-h6",
    "caption": "text-caption text-grey-5",
    "warning": "text-warning",
    "device": "text-weight-medium",
}


def box_style(props: dict[str, Any]) -> str:
    """CSS for column / row / container nodes."""
    parts = []
    if "padding" in props:
        parts.append(f"padding: {props['padding']}px;")
    if "spacing" in props:
        parts.append(f"gap: {props['spacing']}px;")
    if "grow" in props:
        parts.append(f"flex: {props['grow']} 1 0; min-width: 0;")
    if props.get("role") == "navigation":
        parts.append("background: #2b2b2b; width: 100%;")
    return " ".join(parts)


def button_props(props: dict[str, Any]) -> str:
    """Quasar props for a button node."""
    if "removal" in props:
        color = _REMOVAL_COLORS.get(props["removal"], "grey")
        flat = "" if props.get("selected") else " flat"
        return f"color={color} align=left no-caps{flat}"
    return "color=primary"


class NiceGUIHost:
    """Renders display trees into one or more NiceGUI containers.

    Supports multiple connected clients — each page calls
    :meth:`bind_container` and every bound container is rebuilt on update.

    Args:
        dispatch: Coroutine function that enqueues an event on the runtime.
    """

    def __init__(self, dispatch: Dispatch) -> None:
        self._dispatch = dispatch
        self._containers: set[ui.element] = set()

    def bind_container(self, container: ui.element, tree: Node) -> None:
        """Bind *container* and render *tree* into it right away."""
        self._containers.add(container)
        self._mount_into(container, tree)
        _log.debug("NiceGUIHost bound container (total=%d)", len(self._containers))

    def unbind_container(self, container: ui.element) -> None:
        """Remove a container binding (call on client disconnect)."""
        self._containers.discard(container)
        _log.debug("NiceGUIHost unbound container (total=%d)", len(self._containers))

    async def show(self, state: AppState, tree: Node) -> None:
        """Runtime view: rebuild every bound container from *tree*."""
        for container in list(self._containers):
            self._mount_into(container, tree)

    # ------------------------------------------------------------------
    # Mounting
    # ------------------------------------------------------------------

    def _mount_into(self, container: ui.element, tree: Node) -> None:
        try:
            container.clear()
            with container:
                self._mount(tree)
        except RuntimeError:
            # The client owning this container has gone away.
            self._containers.discard(container)

    def _mount(self, node: Node) -> None:
        props = node.props
        kind = node.kind

        if kind in ("column", "row", "container"):
            if kind == "row":
                element = ui.row().classes("w-full items-center no-wrap")
            else:
                element = ui.column()
            if props.get("role") == "root":
                element.classes("w-full").style("gap: 0;")
            with element.style(box_style(props)):
                for child in node.children:
                    self._mount(child)

        elif kind == "label":
            if props.get("role") == "link":
                ui.link(props["text"], props.get("href", props["text"]), new_tab=True)
            else:
                ui.label(props["text"]).classes(_LABEL_CLASSES.get(props.get("role", ""), "")).style(
                    "white-space: pre-wrap;"
                )

        elif kind == "space":
            ui.space()

        elif kind == "button":
            ui.button(
                props["text"],
                icon=props.get("icon"),
                on_click=lambda _e, ev=node.on_press: self._emit(ev),
            ).props(button_props(props))

        elif kind == "input":
            field = ui.input(placeholder=props.get("placeholder", ""), value=props.get("value", ""))
            field.props("clearable dense outlined")
            binding = node.on_input
            old = props.get("value", "")
            field.on("keydown.enter", lambda _e, f=field, b=binding: self._emit_changed(b, f.value, old))
            field.on("blur", lambda _e, f=field, b=binding: self._emit_changed(b, f.value, old))

        elif kind == "select":
            ui.select(
                props["options"],
                value=props.get("value"),
                label=props.get("label") or None,
                on_change=lambda e, b=node.on_input: self._emit_input(b, e.value),
            ).props("dense outlined").style("min-width: 180px;")

        elif kind == "checkbox":
            ui.checkbox(
                props["text"],
                value=props.get("value", False),
                on_change=lambda e, b=node.on_input: self._emit_input(b, e.value),
            )

        else:
            _log.warning("NiceGUIHost: unknown node kind %r", kind)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def _emit(self, event: BaseModel | None) -> None:
        if event is not None:
            await self._dispatch(event)

    async def _emit_input(self, binding: InputBinding | None, value: Any) -> None:
        if binding is None:
            return
        await self._dispatch(binding.build(value if value is not None else ""))

    async def _emit_changed(self, binding: InputBinding | None, value: Any, old: Any) -> None:
        if (value or "") != (old or ""):
            await self._emit_input(binding, value)
