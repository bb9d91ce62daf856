import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ipc_injector.domain import ChannelAlreadyRegistered, ChannelNotFound, ITransport
from ipc_injector.domain.interfaces import ChannelHandler

logger = logging.getLogger(__name__)


class ChannelEvent(BaseModel):
    """Event delivered to handlers alongside the payload.

    Attributes:
        channel: The channel path the message was addressed to.
        reply_expected: Whether the caller waits for a result.
        sender: Opaque identity of the caller.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    channel: str
    reply_expected: bool
    sender: Optional[Any] = None


class InMemoryTransport(ITransport):
    """In-process channel system.

    A channel has at most one reply handler and any number of
    fire-and-forget listeners.

    Example:
        >>> transport = InMemoryTransport()
        >>> app.bootstrap(transport)
        >>> await transport.invoke("users:get", {"id": 1})
        {'id': 1}
    """

    def __init__(self) -> None:
        self._reply_handlers: Dict[str, ChannelHandler] = {}
        self._listeners: Dict[str, List[ChannelHandler]] = {}

    def register_reply_channel(self, path: str, handler: ChannelHandler) -> None:
        if path in self._reply_handlers:
            raise ChannelAlreadyRegistered(path)
        self._reply_handlers[path] = handler

    def register_fire_and_forget_channel(self, path: str, handler: ChannelHandler) -> None:
        self._listeners.setdefault(path, []).append(handler)

    @property
    def channels(self) -> List[str]:
        return sorted(set(self._reply_handlers) | set(self._listeners))

    async def invoke(self, path: str, payload: Any = None, sender: Optional[Any] = None) -> Any:
        """Send ``payload`` to a reply channel and return the handler result.

        Raises:
            ChannelNotFound: If no reply handler is registered for ``path``.
        """
        handler = self._reply_handlers.get(path)
        if handler is None:
            raise ChannelNotFound(path)
        event = ChannelEvent(channel=path, reply_expected=True, sender=sender)
        return await handler(event, payload)

    async def send(self, path: str, payload: Any = None, sender: Optional[Any] = None) -> None:
        """Deliver ``payload`` to every listener of ``path``, discarding their results."""
        listeners = self._listeners.get(path, [])
        if not listeners:
            logger.debug("No listener for channel %s, message dropped", path)
            return
        event = ChannelEvent(channel=path, reply_expected=False, sender=sender)
        await asyncio.gather(*(listener(event, payload) for listener in listeners))

    def clear(self) -> None:
        self._reply_handlers.clear()
        self._listeners.clear()
