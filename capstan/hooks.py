"""
Lifecycle hooks around command resolution ("find") and execution ("run").
"""
from collections import defaultdict

from .utils import maybe_await

LIFECYCLES = ("before", "after")
EVENTS = ("find", "run")


class Hooks:
    """
    Ordered callbacks keyed by (lifecycle, event).

    Callbacks receive a single payload: the command class (or None) for "find", the
    command instance for "run". They may be coroutines; each one is awaited before the
    next runs, and whatever they raise propagates to the caller.
    """

    def __init__(self):
        self._callbacks = defaultdict(list)

    def add(self, lifecycle, event, callback):
        if lifecycle not in LIFECYCLES:
            raise ValueError("hook lifecycle must be one of %s, got %r" % (", ".join(LIFECYCLES), lifecycle))
        if event not in EVENTS:
            raise ValueError("hook event must be one of %s, got %r" % (", ".join(EVENTS), event))
        if not callable(callback):
            raise TypeError("hook callback must be callable")
        self._callbacks[lifecycle, event].append(callback)

    async def execute(self, lifecycle, event, payload):
        for callback in tuple(self._callbacks.get((lifecycle, event), ())):
            await maybe_await(callback(payload))


__all__ = ("Hooks",)
