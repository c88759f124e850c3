"""
Базовый интерфейс канала живой доставки.
"""
import logging
from typing import Any, Iterable

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "new-notification"


class LiveChannel:
    """Канал доставки: best-effort, без подтверждения получения."""

    async def push(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError


class CompositeChannel(LiveChannel):
    """Рассылает событие во все каналы; ошибка одного не мешает остальным."""

    def __init__(self, channels: Iterable[LiveChannel] = ()):
        self.channels: list[LiveChannel] = list(channels)

    def add(self, channel: LiveChannel) -> None:
        self.channels.append(channel)

    async def push(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        for channel in self.channels:
            try:
                await channel.push(user_id, event, payload)
            except Exception as e:
                logger.error(
                    f"Failed to push {event} to user {user_id} via {type(channel).__name__}: {e}"
                )
