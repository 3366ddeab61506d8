"""Conversation traversal: engine, session state and a headless player."""

from .history import DisplayedEntry, VisibleHistory
from .notifications import NotificationSink, CallbackSink, RecordingSink
from .player import AutoPlayer
from .queue import ContinuationEntry, ContinuationQueue
from .runner import EngineState, TraversalEngine, SYNTHETIC_EDGE_ID
from .session import ConversationSession
from .variables import VariableStore

__all__ = [
    "DisplayedEntry",
    "VisibleHistory",
    "NotificationSink",
    "CallbackSink",
    "RecordingSink",
    "AutoPlayer",
    "ContinuationEntry",
    "ContinuationQueue",
    "EngineState",
    "TraversalEngine",
    "SYNTHETIC_EDGE_ID",
    "ConversationSession",
    "VariableStore",
]
