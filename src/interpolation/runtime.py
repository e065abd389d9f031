"""Message-passing runtime for the interpolation actors.

Actors never call each other directly; they enqueue messages with
`Runtime.send`. Every (sender, receiver) pair has its own FIFO channel and
the runtime only guarantees FIFO order within a channel: `step()` may deliver
the head of any non-empty channel. Each message is processed to completion
before the next one is delivered.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Hashable, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    sender: Hashable
    receiver: Hashable
    action: str
    args: Tuple[Any, ...]


class Actor:
    """Base class of objects driven by runtime messages.

    Subclasses list the names of their message handlers in `actions`.
    """

    actions = ()

    def __init__(self):
        self.name = None
        self.runtime = None

    def bind(self, runtime, name):
        self.runtime = runtime
        self.name = name

    def send(self, receiver, action, *args):
        if self.runtime is None:
            raise RuntimeError(f"{type(self).__name__} is not registered with a runtime")
        self.runtime.send(self.name, receiver, action, *args)

    def receive(self, message):
        if message.action not in self.actions:
            raise ValueError(f"{type(self).__name__} {self.name!r} has no action {message.action!r}")
        getattr(self, message.action)(*message.args)


class Runtime:
    """Registry of named actors and their message channels."""

    def __init__(self):
        self.actors = {}
        self._channels = {}
        self.delivered_count = 0

    def register(self, name, actor):
        if name in self.actors:
            raise ValueError(f"An actor named {name!r} is already registered")
        actor.bind(self, name)
        self.actors[name] = actor
        return actor

    def __getitem__(self, name):
        return self.actors[name]

    def send(self, sender, receiver, action, *args):
        """Enqueue `action(*args)` for `receiver` on the (sender, receiver) channel."""
        if receiver not in self.actors:
            raise KeyError(f"No actor named {receiver!r}")
        channel = self._channels.setdefault((sender, receiver), deque())
        channel.append(Message(sender, receiver, action, args))

    def _nonempty_channels(self):
        return [key for key, channel in self._channels.items() if channel]

    def step(self, rng=None):
        """Deliver one message.

        Parameters
        ----------
        rng : np.random.Generator, optional
            If given, the channel is chosen at random among the non-empty
            ones. Otherwise the first non-empty channel in creation order.

        Returns
        -------
        bool
            False if there was nothing to deliver.
        """
        keys = self._nonempty_channels()
        if not keys:
            return False
        key = keys[int(rng.integers(len(keys)))] if rng is not None else keys[0]
        message = self._channels[key].popleft()
        logger.debug("Delivering %s from %r to %r", message.action, message.sender, message.receiver)
        self.actors[message.receiver].receive(message)
        self.delivered_count += 1
        return True

    def run(self, rng=None, max_steps=1_000_000):
        """Deliver messages until every channel is empty. Returns the number delivered."""
        steps = 0
        while self.step(rng):
            steps += 1
            if steps >= max_steps:
                raise RuntimeError(f"Runtime did not go idle within {max_steps} messages")
        return steps

    def invoke_queued_action(self, receiver, sender=None):
        """Deliver the head message of a channel into `receiver` (from `sender`, or the first one)."""
        for (src, dst), channel in self._channels.items():
            if dst == receiver and channel and (sender is None or src == sender):
                message = channel.popleft()
                self.actors[receiver].receive(message)
                self.delivered_count += 1
                return message
        raise LookupError(f"No queued message for {receiver!r}")

    def queued_actions(self, receiver):
        """Names of the actions waiting for `receiver`, channel by channel."""
        return [
            message.action
            for (_, dst), channel in self._channels.items()
            if dst == receiver
            for message in channel
        ]

    def is_queue_empty(self, receiver=None):
        if receiver is None:
            return not self._nonempty_channels()
        return not self.queued_actions(receiver)
