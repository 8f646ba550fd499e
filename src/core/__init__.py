"""Auction Option Filter Core"""
__version__ = "0.1.0"

from src.core.event_bus import AuctionEvent, EventBus
from src.core.event_types import EventTypes

__all__ = [
    "AuctionEvent",
    "EventBus",
    "EventTypes",
]
