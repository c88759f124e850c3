"""
Каналы живой доставки уведомлений.
"""
from taskhub.realtime.base import CompositeChannel, LiveChannel
from taskhub.realtime.websocket import ConnectionManager

__all__ = ["LiveChannel", "CompositeChannel", "ConnectionManager"]
