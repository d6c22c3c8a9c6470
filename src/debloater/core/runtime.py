"""Runtime — the single control loop that owns :class:`AppState`.

Events are queued on an ``asyncio.Queue`` and applied one at a time, in
arrival order, by a consumer task running :func:`controller.update`.  Commands
returned by the update step go to the :class:`CommandScheduler`, whose results
come back through the same queue.  After every update the state is rendered
and the new display tree is pushed to the subscribed views.

Key behaviours:
* Only the consumer task mutates state; worker threads send events by value
  via :meth:`Runtime.dispatch_threadsafe`.
* Views may be sync or async callables ``view(state, tree)``.
* A view that raises is **auto-unsubscribed** (logged + removed).
* A :class:`~debloater.core.errors.ControllerError` (or any exception from
  the update step) is fatal: the consumer stops and :meth:`wait` re-raises.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable

from debloater.core import controller
from debloater.core.interfaces.device import CatalogLoaderInterface, DeviceInterface
from debloater.core.models.event import Event
from debloater.core.models.state import AppState
from debloater.core.scheduler import CommandScheduler
from debloater.ui.tree import Node

_log = logging.getLogger(__name__)

View = Callable[[AppState, Node], Any]


class Runtime:
    """Hosts the controller: event queue, update loop, command scheduling.

    Args:
        device: Phone collaborator used by commands.
        catalog_loader: Catalog collaborator used by commands.
        on_fatal: Called (on the loop) if the update step fails.
    """

    def __init__(
        self,
        device: DeviceInterface,
        catalog_loader: CatalogLoaderInterface,
        on_fatal: Callable[[BaseException], Any] | None = None,
    ) -> None:
        self._scheduler = CommandScheduler(device, catalog_loader, self.dispatch)
        self._on_fatal = on_fatal
        self._queue: asyncio.Queue[Event] | None = None
        self._consumer_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._views: dict[str, View] = {}
        self._state: AppState = AppState()
        self._tree: Node = controller.render(self._state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Build the initial state, issue the startup load and start consuming.

        Must be called from an ``async`` context that already has a running
        event loop.
        """
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        state, command = controller.init()
        await self._publish(state)
        self._consumer_task = asyncio.create_task(self._consume(), name="controller-loop")
        self._consumer_task.add_done_callback(self._on_consumer_done)
        self._scheduler.schedule(command)
        _log.info("Runtime started")

    async def stop(self) -> None:
        """Cancel the consumer task and any in-flight commands."""
        await self._scheduler.shutdown()
        if self._consumer_task is not None:
            self._consumer_task.cancel()
            try:
                await self._consumer_task
            except asyncio.CancelledError:
                pass
            except Exception:
                # Already reported by _on_consumer_done.
                pass
            self._consumer_task = None
        self._views.clear()
        _log.info("Runtime stopped")

    async def wait(self) -> None:
        """Block until the consumer ends; re-raises a fatal update error."""
        assert self._consumer_task is not None, "Runtime.start() has not been called"
        await self._consumer_task

    async def settle(self) -> None:
        """Wait until the queue is empty and no command is in flight."""
        assert self._queue is not None, "Runtime.start() has not been called"
        while True:
            await self._queue.join()
            if self._scheduler.pending == 0 and self._queue.empty():
                return
            await self._scheduler.drain()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def tree(self) -> Node:
        """Display tree of the current state."""
        return self._tree

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, event: Event) -> None:
        """Enqueue an event (call from async code on the event loop)."""
        assert self._queue is not None, "Runtime.start() has not been called"
        self._queue.put_nowait(event)

    def dispatch_threadsafe(self, event: Event) -> None:
        """Enqueue an event from a non-async thread."""
        assert self._loop is not None, "Runtime.start() has not been called"
        asyncio.run_coroutine_threadsafe(self.dispatch(event), self._loop)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def subscribe(self, view: View) -> str:
        """Register *view*, returning a subscription id.

        The view is called after every update with the new state and tree.
        """
        sub_id = uuid.uuid4().hex
        self._views[sub_id] = view
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        self._views.pop(sub_id, None)

    # ------------------------------------------------------------------
    # Consumer loop
    # ------------------------------------------------------------------

    async def _consume(self) -> None:
        """Drain the queue, applying each event to the controller."""
        assert self._queue is not None
        while True:
            event = await self._queue.get()
            try:
                state, command = controller.update(self._state, event)
                self._scheduler.schedule(command)
                await self._publish(state)
            finally:
                self._queue.task_done()

    async def _publish(self, state: AppState) -> None:
        self._state = state
        self._tree = controller.render(state)
        for sub_id, view in list(self._views.items()):
            try:
                result = view(state, self._tree)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                _log.exception("View %s raised — auto-unsubscribing", view)
                self.unsubscribe(sub_id)

    def _on_consumer_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        _log.critical("Controller loop stopped on an invariant violation", exc_info=exc)
        if self._on_fatal is not None:
            self._on_fatal(exc)
