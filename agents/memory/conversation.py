"""Flat, ordered conversation memory replayed into every reasoning call."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Union

from agents.models import Message, Role


class ConversationMemory:
    """
    Ordered list of past user/assistant turns.

    Suitable for development, testing, and single-session use cases. Data is
    lost when the process terminates.

    Args:
        max_messages: Optional window; the oldest messages are discarded once
            the window is full. ``None`` keeps everything.
    """

    def __init__(self, max_messages: Optional[int] = None) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be a positive integer or None")
        self._messages: Deque[Message] = deque(maxlen=max_messages)

    def add(self, role: Union[Role, str], content: str) -> Message:
        try:
            role = Role(role)
        except ValueError:
            raise ValueError(f"Invalid role: {role!r}. Allowed: {', '.join(r.value for r in Role)}") from None
        if not isinstance(content, str):
            raise ValueError(f"Message content must be a string, got {type(content).__name__}")

        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    def to_messages(self) -> List[Message]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    @property
    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
