"""Sequence stores the QueueManager operates on, one per operating mode."""

from typing import Protocol

from queue_mincer.loaders.base import BaseLoader
from queue_mincer.model import Item, Items


class SequenceStore(Protocol):
    def get_front(self) -> Item | None: ...

    def get_back(self) -> Item | None: ...

    def push_front(self, item: Item) -> None: ...

    def push_back(self, item: Item) -> None: ...

    def replace(self, items: Items) -> None: ...

    def items(self) -> Items: ...

    def __len__(self) -> int: ...


class CachedStore:
    """
    Items loaded once into this process, never written back to the loader.
    """

    def __init__(self, items: Items | None = None) -> None:
        self._items: Items = list(items or [])

    def get_front(self) -> Item | None:
        if not self._items:
            return None
        return self._items.pop(0)

    def get_back(self) -> Item | None:
        if not self._items:
            return None
        return self._items.pop()

    def push_front(self, item: Item) -> None:
        self._items.insert(0, item)

    def push_back(self, item: Item) -> None:
        self._items.append(item)

    def replace(self, items: Items) -> None:
        self._items = list(items)

    def items(self) -> Items:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class PassthroughStore:
    """
    Every operation reads and writes the loader's active content directly,
    nothing is kept in this process between calls.
    """

    def __init__(self, loader: BaseLoader) -> None:
        self.loader = loader

    def get_front(self) -> Item | None:
        return self.loader.remove_item_front()

    def get_back(self) -> Item | None:
        return self.loader.remove_item_back()

    def push_front(self, item: Item) -> None:
        self.loader.add_item_front(item)

    def push_back(self, item: Item) -> None:
        self.loader.add_item_back(item)

    def replace(self, items: Items) -> None:
        self.loader.save_items(items)

    def items(self) -> Items:
        return self.loader.get_items()

    def __len__(self) -> int:
        return len(self.items())
