"""Analytics package: event facts, payload builders and the tracker."""
from .events import EventName, Fact, MAX_LIST_ITEMS
from .tracker import Tracker, HttpSink, get_tracker

__all__ = [
    "EventName",
    "Fact",
    "MAX_LIST_ITEMS",
    "Tracker",
    "HttpSink",
    "get_tracker",
]
