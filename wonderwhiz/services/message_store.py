from typing import Iterator, List, Optional
import itertools
import time
import logging

from wonderwhiz.models.messages import BaseMessage, TocMessage

logger = logging.getLogger(__name__)

class MessageStore:
    """Append-only conversation history for one chat session"""

    def __init__(self):
        self._messages: List[BaseMessage] = []
        # Survives clear() so ids are never reused within a session
        self._counter = itertools.count(1)

    def next_id(self, prefix: str) -> str:
        """Unique id, even for messages created within the same millisecond"""
        return f"{prefix}-{int(time.time() * 1000)}-{next(self._counter)}"

    def append(self, message: BaseMessage) -> BaseMessage:
        self._messages.append(message)
        logger.debug(f"[Messages] Appended {message.id} ({len(self._messages)} total)")
        return message

    def find(self, message_id: str) -> Optional[BaseMessage]:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def latest_toc(self) -> Optional[TocMessage]:
        for message in reversed(self._messages):
            if isinstance(message, TocMessage):
                return message
        return None

    def clear(self) -> None:
        self._messages = []

    def all(self) -> List[BaseMessage]:
        return list(self._messages)

    def __iter__(self) -> Iterator[BaseMessage]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
