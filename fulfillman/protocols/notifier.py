"""
Notifier Protocol - best-effort side channel for order events.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """
    Fire-and-forget message sink (chat webhook, push service, log...).

    Callers never let a notifier failure change control flow.
    """

    def notify(self, message: str) -> None:
        ...
