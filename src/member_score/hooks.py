"""Hook registry: the host side of the plugin contract.

Plugins register callbacks against named extension points. The host
dispatches them at its own lifecycle points with `do_action`, or defers a
dispatch with `schedule_single_event` and drains the queue later with
`run_scheduled`. Dispatch is sequential: one callback finishes (and is
awaited if it returns an awaitable) before the next starts.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

# Extension points owned by the host.
PLUGINS_LOADED = "plugins_loaded"
ADMIN_INIT = "admin_init"
ADMIN_ENQUEUE_SCRIPTS = "admin_enqueue_scripts"
ENQUEUE_SCRIPTS = "wp_enqueue_scripts"

# Custom extension point fired for each scheduled upload batch.
USER_UPLOAD_ADD_BATCH = "member_score_user_upload_add_batch"


@dataclass(frozen=True)
class HookBinding:
    """One row of a registration table: extension point to callback."""

    hook: str
    callback: Callable[..., Any]
    priority: int = DEFAULT_PRIORITY
    accepted_args: int = 1

    @property
    def callback_name(self) -> str:
        return getattr(self.callback, "__qualname__", repr(self.callback))


@dataclass(frozen=True)
class ScheduledEvent:
    hook: str
    args: tuple


class HookRegistry:
    """Named extension points with ordered callbacks.

    With ``strict=False`` (the default) a failing callback is logged and the
    remaining callbacks still run. With ``strict=True`` the exception
    propagates to whoever fired the hook.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._bindings: dict[str, list[HookBinding]] = {}
        self._dispatched: Counter = Counter()
        self._pending: list[ScheduledEvent] = []
        self._drain_lock = asyncio.Lock()

    # ─── Registration ────────────────────────────────────────────────────

    def add_action(
        self,
        hook: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        """Register a callback. Re-adding the same callback at the same priority is a no-op."""
        if not callable(callback):
            raise TypeError(f"callback for {hook!r} is not callable: {callback!r}")
        if accepted_args < 0:
            raise ValueError(f"accepted_args must be >= 0, got {accepted_args}")

        bindings = self._bindings.setdefault(hook, [])
        for existing in bindings:
            if existing.callback == callback and existing.priority == priority:
                logger.debug("Ignoring duplicate registration of %s on %s", existing.callback_name, hook)
                return
        bindings.append(HookBinding(hook, callback, priority, accepted_args))

    def register_table(self, table: Iterable[HookBinding]) -> None:
        """Register every binding of a registration table, in table order."""
        for binding in table:
            self.add_action(binding.hook, binding.callback, binding.priority, binding.accepted_args)

    def remove_action(self, hook: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> bool:
        bindings = self._bindings.get(hook, [])
        for i, existing in enumerate(bindings):
            if existing.callback == callback and existing.priority == priority:
                del bindings[i]
                return True
        return False

    def has_action(self, hook: str, callback: Optional[Callable[..., Any]] = None) -> bool:
        bindings = self._bindings.get(hook, [])
        if callback is None:
            return bool(bindings)
        return any(b.callback == callback for b in bindings)

    def callbacks(self, hook: str) -> list[HookBinding]:
        """Bindings for a hook in dispatch order: priority, then registration order."""
        return sorted(self._bindings.get(hook, []), key=lambda b: b.priority)

    def bindings(self) -> list[HookBinding]:
        return [b for hook in self._bindings for b in self.callbacks(hook)]

    # ─── Dispatch ────────────────────────────────────────────────────────

    async def do_action(self, hook: str, *args: Any) -> None:
        """Run every callback registered on `hook`."""
        self._dispatched[hook] += 1
        for binding in self.callbacks(hook):
            try:
                result = binding.callback(*args[:binding.accepted_args])
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                if self.strict:
                    raise
                logger.error("Callback %s on %s failed: %s", binding.callback_name, hook, exc, exc_info=True)

    def did_action(self, hook: str) -> int:
        """How many times `hook` has been fired."""
        return self._dispatched[hook]

    # ─── Deferred events ─────────────────────────────────────────────────

    def schedule_single_event(self, hook: str, *args: Any) -> bool:
        """Queue a dispatch of `hook` for the next drain.

        Returns False if an identical event is already pending.
        """
        event = ScheduledEvent(hook, args)
        if event in self._pending:
            logger.debug("Event %s already scheduled with the same arguments", hook)
            return False
        self._pending.append(event)
        return True

    @property
    def pending_events(self) -> list[ScheduledEvent]:
        return list(self._pending)

    async def run_scheduled(self) -> int:
        """Dispatch pending events in FIFO order, including ones queued while draining.

        One drain runs at a time; a concurrent caller waits for it to finish
        and then finds the queue empty.
        """
        count = 0
        async with self._drain_lock:
            while self._pending:
                event = self._pending.pop(0)
                await self.do_action(event.hook, *event.args)
                count += 1
        if count:
            logger.info("Dispatched %d scheduled event(s)", count)
        return count
