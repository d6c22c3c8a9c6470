"""Display tree — the toolkit-independent output of ``render``.

A :class:`Node` describes one widget: its ``kind``, plain ``props``, its
children and the event to emit when the user interacts with it.  Trees are
frozen values, so rendering the same state twice yields equal trees and a host
(see :mod:`debloater.ui.host`) can mount them into any widget toolkit.

Events emitted by a sub-screen are wrapped on the way up with
:meth:`Node.map`, e.g. ``list_screen.render(s).map(ListScreenEvent)``.
"""

from __future__ import annotations

from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field


class InputBinding(BaseModel):
    """Recipe for turning a widget value into an event.

    ``event_type(**{field: value})`` is built first and then wrapped by each
    entry of ``wrappers`` in order (``wrapper(inner=event)``).
    """

    model_config = ConfigDict(frozen=True)

    event_type: type[BaseModel]
    field: str
    wrappers: tuple[type[BaseModel], ...] = ()
    empty_as_none: bool = False

    def build(self, value: Any) -> BaseModel:
        if self.empty_as_none and value in ("", None):
            value = None
        event: BaseModel = self.event_type(**{self.field: value})
        for wrapper in self.wrappers:
            event = wrapper(inner=event)
        return event

    def wrapped(self, wrapper: type[BaseModel]) -> InputBinding:
        return self.model_copy(update={"wrappers": (*self.wrappers, wrapper)})


class Node(BaseModel):
    """One element of the display tree."""

    model_config = ConfigDict(frozen=True)

    kind: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[Node, ...] = ()
    on_press: BaseModel | None = None
    on_input: InputBinding | None = None

    def map(self, wrapper: type[BaseModel]) -> Node:
        """Return a copy whose events (recursively) are wrapped in *wrapper*."""
        return self.model_copy(
            update={
                "children": tuple(child.map(wrapper) for child in self.children),
                "on_press": wrapper(inner=self.on_press) if self.on_press is not None else None,
                "on_input": self.on_input.wrapped(wrapper) if self.on_input is not None else None,
            }
        )

    def walk(self) -> Iterator[Node]:
        """Depth-first iteration over this node and all descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, kind: str) -> list[Node]:
        return [node for node in self.walk() if node.kind == kind]

    def texts(self) -> list[str]:
        """All ``text`` props in document order (handy for assertions)."""
        return [node.props["text"] for node in self.walk() if "text" in node.props]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def column(*children: Node, **props: Any) -> Node:
    return Node(kind="column", props=props, children=children)


def row(*children: Node, **props: Any) -> Node:
    return Node(kind="row", props=props, children=children)


def container(child: Node, **props: Any) -> Node:
    return Node(kind="container", props=props, children=(child,))


def label(text: str, **props: Any) -> Node:
    return Node(kind="label", props={"text": text, **props})


def space() -> Node:
    return Node(kind="space")


def button(text: str, on_press: BaseModel | None = None, **props: Any) -> Node:
    return Node(kind="button", props={"text": text, **props}, on_press=on_press)


def text_input(
    value: str,
    event_type: type[BaseModel],
    field: str,
    placeholder: str = "",
) -> Node:
    return Node(
        kind="input",
        props={"value": value, "placeholder": placeholder},
        on_input=InputBinding(event_type=event_type, field=field),
    )


def select(
    options: dict[str, str],
    value: str,
    event_type: type[BaseModel],
    field: str,
    label_text: str = "",
) -> Node:
    """Dropdown; the ``""`` option is delivered as ``None``."""
    return Node(
        kind="select",
        props={"options": options, "value": value, "label": label_text},
        on_input=InputBinding(event_type=event_type, field=field, empty_as_none=True),
    )


def checkbox(text: str, value: bool, event_type: type[BaseModel], field: str) -> Node:
    return Node(
        kind="checkbox",
        props={"text": text, "value": value},
        on_input=InputBinding(event_type=event_type, field=field),
    )
