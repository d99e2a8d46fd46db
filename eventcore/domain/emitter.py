"""Synchronous in-process event emitter.

Listeners are stored per event name in registration order.  ``dispatch``
always iterates a snapshot of the listener list taken before the first
listener runs, so listeners may subscribe or unsubscribe (themselves or
others) while a dispatch is in progress without any listener being skipped
or invoked twice.  Such changes only take effect on the next dispatch.
"""

from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Hashable, get_args

from eventcore.config import ErrorPolicy, get_settings

logger = logging.getLogger(__name__)


def _same_callable(stored: Callable, handler: Callable) -> bool:
    """Identity check that treats ``obj.method`` accesses as one handler.

    Every attribute access creates a new bound method object, so two bound
    methods are the same handler when they wrap the same function on the
    same instance.
    """
    if stored is handler:
        return True
    return (
        inspect.ismethod(stored)
        and inspect.ismethod(handler)
        and stored.__self__ is handler.__self__
        and stored.__func__ is handler.__func__
    )


@dataclass(frozen=True, eq=False)
class _Listener:
    """A registry entry.

    ``original`` is set for one-shot entries: it is the caller's unwrapped
    handler, so removal by that reference still finds the adapter.
    """

    callback: Callable
    original: Callable | None = None

    def matches(self, handler: Callable) -> bool:
        return _same_callable(self.callback, handler) or (
            self.original is not None and _same_callable(self.original, handler)
        )

    @property
    def handler(self) -> Callable:
        return self.original if self.original is not None else self.callback


class EventEmitter:
    """Publish/subscribe registry with ordered, mutation-safe dispatch.

    Exceptions raised by a listener propagate out of ``dispatch`` and abort
    the rest of that dispatch unless the emitter was built with the
    ``"isolate"`` error policy, in which case the failure is logged and the
    remaining listeners still run.
    """

    def __init__(
        self,
        error_policy: ErrorPolicy | None = None,
        max_listeners: int | None = None,
    ) -> None:
        settings = get_settings()
        error_policy = error_policy or settings.error_policy
        if error_policy not in get_args(ErrorPolicy):
            raise ValueError(
                f"unknown error policy {error_policy!r}, expected one of {get_args(ErrorPolicy)}"
            )
        if max_listeners is None:
            max_listeners = settings.max_listeners
        if max_listeners < 0:
            raise ValueError("max_listeners must be >= 0")
        self.error_policy: ErrorPolicy = error_policy
        self.max_listeners: int = max_listeners
        self._subscriptions: dict[Hashable, list[_Listener]] = {}
        self._warned: set[Hashable] = set()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def subscribe(self, event: Hashable, handler: Callable) -> EventEmitter:
        if not callable(handler):
            raise TypeError(
                f"listener must be callable, got {type(handler).__name__}"
            )
        self._add(event, _Listener(handler))
        return self

    def subscribe_once(self, event: Hashable, handler: Callable) -> EventEmitter:
        """Register *handler* for the next dispatch of *event* only.

        The adapter unsubscribes itself before calling *handler*, so a
        re-entrant dispatch of the same event from inside *handler* does not
        reach it again.  An outer dispatch whose snapshot still holds the
        adapter after a nested dispatch fired it skips it as well.
        """
        if not callable(handler):
            raise TypeError(
                f"listener must be callable, got {type(handler).__name__}"
            )
        fired = False

        def adapter(*args: Any, **kwargs: Any) -> Any:
            nonlocal fired
            with self._lock:
                if fired:
                    return None
                fired = True
            self.unsubscribe(event, adapter)
            return handler(*args, **kwargs)

        self._add(event, _Listener(adapter, original=handler))
        return self

    def unsubscribe(self, event: Hashable, handler: Callable) -> EventEmitter:
        """Remove the first listener for *event* registered as *handler*.

        Matches one-shot entries by the handler originally passed to
        ``subscribe_once``.  Unknown events and handlers are ignored.
        """
        with self._lock:
            entries = self._subscriptions.get(event)
            if entries is None:
                return self
            for index, entry in enumerate(entries):
                if entry.matches(handler):
                    del entries[index]
                    logger.debug("listener removed", extra={"event": str(event)})
                    break
            if not entries:
                del self._subscriptions[event]
                self._warned.discard(event)
        return self

    def remove_all_listeners(self, event: Hashable | None = None) -> EventEmitter:
        with self._lock:
            if event is None:
                self._subscriptions.clear()
                self._warned.clear()
            else:
                self._subscriptions.pop(event, None)
                self._warned.discard(event)
        return self

    on = subscribe
    once = subscribe_once
    off = unsubscribe

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: Hashable, *args: Any, **kwargs: Any) -> bool:
        """Call every listener registered for *event*, in order.

        Returns ``False`` when *event* has no listeners.
        """
        with self._lock:
            entries = self._subscriptions.get(event)
            if entries is None:
                return False
            snapshot = list(entries)

        logger.debug(
            "dispatching event",
            extra={"event": str(event), "listeners": len(snapshot)},
        )
        for entry in snapshot:
            if self.error_policy == "isolate":
                try:
                    entry.callback(*args, **kwargs)
                except Exception:
                    logger.exception(
                        "error in event listener", extra={"event": str(event)}
                    )
            else:
                entry.callback(*args, **kwargs)
        return True

    emit = dispatch

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def event_names(self) -> list[Hashable]:
        with self._lock:
            return list(self._subscriptions)

    def listener_count(self, event: Hashable) -> int:
        with self._lock:
            return len(self._subscriptions.get(event, ()))

    def listeners(self, event: Hashable) -> list[Callable]:
        """Return the handlers for *event* as the caller registered them."""
        with self._lock:
            return [entry.handler for entry in self._subscriptions.get(event, ())]

    # ------------------------------------------------------------------

    def _add(self, event: Hashable, entry: _Listener) -> None:
        with self._lock:
            entries = self._subscriptions.setdefault(event, [])
            entries.append(entry)
            count = len(entries)
            leaking = (
                self.max_listeners > 0
                and count > self.max_listeners
                and event not in self._warned
            )
            if leaking:
                self._warned.add(event)
        logger.debug("listener added", extra={"event": str(event)})
        if leaking:
            logger.warning(
                "possible listener leak: %d listeners for %r exceed max_listeners=%d",
                count,
                event,
                self.max_listeners,
            )
