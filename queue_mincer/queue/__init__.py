from queue_mincer.queue.manager import QueueManager, get_queue
from queue_mincer.queue.stores import CachedStore, PassthroughStore

__all__ = ["CachedStore", "PassthroughStore", "QueueManager", "get_queue"]
