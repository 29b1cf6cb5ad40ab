"""Polling module: cancellable scheduled fetches and their state."""

from arbview.polling.poller import PollHandle, Poller
from arbview.polling.state import PollState


__all__ = [
    "PollHandle",
    "PollState",
    "Poller",
]
