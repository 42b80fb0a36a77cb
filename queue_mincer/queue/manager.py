from functools import cache, cached_property

from anystore.logging import BoundLogger, get_logger
from anystore.types import Uri

from queue_mincer.exceptions import SchemaMismatch, TemplateNotFound
from queue_mincer.loaders import BaseLoader, get_loader
from queue_mincer.model import Item, Items, ItemTemplate
from queue_mincer.queue.stores import CachedStore, PassthroughStore, SequenceStore
from queue_mincer.settings import QueueMode, get_settings
from queue_mincer.validate import validate

log = get_logger(__name__)


class QueueManager:
    """
    The queue: get and push items at both ends, and load items from templates.

    In `cached` mode the items of the loader's active content are loaded once
    at initialization and all operations work on this copy only. In
    `passthrough` mode every operation reads and writes the loader directly.

    Example:
        ```python
        loader = get_loader(QueueSettings(loader="json"))
        queue = QueueManager(loader, mode="passthrough")
        queue.push_back({"task": "write docs"})
        queue.get_front()
        ```
    """

    def __init__(
        self,
        loader: BaseLoader,
        mode: QueueMode = "passthrough",
        item_template: ItemTemplate | None = None,
    ) -> None:
        self.loader = loader
        self.mode = mode
        self.initialized = False
        self.store: SequenceStore = PassthroughStore(loader)
        self._item_template = item_template

    @cached_property
    def log(self) -> BoundLogger:
        return get_logger(__name__, loader=self.loader.name, mode=self.mode)

    def initialize(self) -> None:
        """Initialize the loader and (in cached mode) load its items, idempotent."""
        if self.initialized:
            return
        self.loader.initialize()
        self._item_template = self._item_template or self.loader.get_item_schema()
        if self.mode == "cached":
            self.store = CachedStore(self.loader.get_items())
        self.initialized = True
        self.log.info("Queue initialized", items=len(self.store))

    @property
    def item_template(self) -> ItemTemplate | None:
        """The configured or inferred item template. Once known, it is fixed."""
        if self._item_template is None:
            self._item_template = self.loader.get_item_schema()
        return self._item_template

    def validate_item(self, item: Item) -> bool:
        return validate(item, self.item_template)

    def ensure_item(self, item: Item) -> None:
        if not self.validate_item(item):
            raise SchemaMismatch(
                f"Item does not match the required schema: {self.item_template}"
            )

    def load_template(self, template_id: str) -> Items:
        if not self.loader.has_template(template_id):
            raise TemplateNotFound(template_id)
        return self.loader.load_template(template_id)

    def size(self) -> int:
        self.initialize()
        return len(self.store)

    def get_front(self) -> Item | None:
        """Remove and return the first item, `None` if the queue is empty"""
        self.initialize()
        return self.store.get_front()

    def get_back(self) -> Item | None:
        """Remove and return the last item, `None` if the queue is empty"""
        self.initialize()
        return self.store.get_back()

    def push_front(self, item: Item) -> None:
        """
        Add an item to the front of the queue

        Raises:
            SchemaMismatch: If the item doesn't match the item template
        """
        self.initialize()
        self.ensure_item(item)
        self.store.push_front(item)
        self.log.debug("Pushed item to front")

    def push_back(self, item: Item) -> None:
        """
        Add an item to the back of the queue

        Raises:
            SchemaMismatch: If the item doesn't match the item template
        """
        self.initialize()
        self.ensure_item(item)
        self.store.push_back(item)
        self.log.debug("Pushed item to back")

    def replace_from_template(self, template_id: str) -> None:
        """
        Replace all items with the items of the given template

        Raises:
            TemplateNotFound: If the template doesn't exist
        """
        self.initialize()
        items = self.load_template(template_id)
        self.store.replace(items)
        self.log.info("Replaced items", template=template_id, items=len(items))

    def add_front_from_template(self, template_id: str) -> None:
        """Add the items of the given template to the front, in their order"""
        self.initialize()
        items = self.load_template(template_id)
        self.store.replace(items + self.store.items())
        self.log.info("Added items to front", template=template_id, items=len(items))

    def add_back_from_template(self, template_id: str) -> None:
        """Add the items of the given template to the back, in their order"""
        self.initialize()
        items = self.load_template(template_id)
        self.store.replace(self.store.items() + items)
        self.log.info("Added items to back", template=template_id, items=len(items))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.loader}, mode={self.mode})>"


@cache
def get_queue(config_uri: Uri | None = None) -> QueueManager:
    """
    Get the initialized [QueueManager][queue_mincer.queue.manager.QueueManager]
    for the current settings, optionally read from the given config file.

    Args:
        config_uri: Path to a yaml or json config file

    Returns:
        queue
    """
    settings = get_settings(config_uri)
    loader = get_loader(settings.queue)
    log.info("Loading queue ...", loader=loader.name, mode=settings.queue.mode)
    queue = QueueManager(
        loader, mode=settings.queue.mode, item_template=settings.queue.item_template
    )
    queue.initialize()
    return queue
