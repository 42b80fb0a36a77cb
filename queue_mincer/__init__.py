"""Queue Mincer - a queue of structured items on swappable storage."""

from queue_mincer.loaders import get_loader
from queue_mincer.queue import QueueManager, get_queue
from queue_mincer.settings import QueueSettings, Settings

__version__ = "0.1.0"

__all__ = [
    "QueueManager",
    "QueueSettings",
    "Settings",
    "get_loader",
    "get_queue",
]
