from abc import ABC, abstractmethod
from functools import cached_property
from typing import ClassVar

from anystore.logging import BoundLogger, get_logger

from queue_mincer.exceptions import TemplateNotFound
from queue_mincer.model import Item, Items, ItemTemplate
from queue_mincer.settings import QueueSettings
from queue_mincer.validate import infer_template

DEFAULT_ACTIVE = "queue"


class BaseLoader(ABC):
    """
    Base loader for one storage medium. A loader reads named templates (whole,
    replaceable lists of items) and mutates the *active* content the queue
    operates on.

    Loaders never validate items, this is up to the
    [QueueManager][queue_mincer.queue.manager.QueueManager].
    """

    name: ClassVar[str]

    def __init__(self, settings: QueueSettings) -> None:
        self.settings = settings
        self.initialized = False
        self.active: str | None = settings.active
        self._item_schema: ItemTemplate | None = None
        if settings.item_template:
            self._item_schema = dict(settings.item_template)

    @cached_property
    def log(self) -> BoundLogger:
        return get_logger(f"queue_mincer.{self.__class__.__name__}", loader=self.name)

    def initialize(self) -> None:
        """Set up the storage, idempotent."""
        if self.initialized:
            return
        self.setup()
        self.initialized = True
        self.log.info("Loader initialized", active=self.active)

    @abstractmethod
    def setup(self) -> None:
        """Backend specific initialization, only called once"""

    def get_item_schema(self) -> ItemTemplate | None:
        """
        Get the configured item template, or the one inferred from the first
        item of the first loaded content.
        """
        return self._item_schema

    def ensure_schema(self, items: Items) -> None:
        if self._item_schema is None and items:
            self._item_schema = infer_template(items[0])
            self.log.info("Inferred item template", template=self._item_schema)

    def resolve_active(self, templates: list[str]) -> str:
        """The configured active template, else the first available one"""
        if self.active:
            return self.active
        if templates:
            return templates[0]
        return DEFAULT_ACTIVE

    @abstractmethod
    def list_templates(self) -> list[str]:
        """Available template ids"""

    @abstractmethod
    def has_template(self, template_id: str) -> bool:
        """Check if a template exists"""

    @abstractmethod
    def read_template(self, template_id: str) -> Items:
        """Read an existing template"""

    def load_template(self, template_id: str) -> Items:
        """
        Load all items of a template

        Raises:
            TemplateNotFound: If the template doesn't exist
        """
        if not self.has_template(template_id):
            raise TemplateNotFound(template_id)
        items = self.read_template(template_id)
        self.ensure_schema(items)
        self.log.info("Loaded template", template=template_id, items=len(items))
        return items

    @abstractmethod
    def get_items(self) -> Items:
        """Read the active content"""

    @abstractmethod
    def save_items(self, items: Items) -> None:
        """Replace the active content"""

    def add_item_front(self, item: Item) -> None:
        items = self.get_items()
        items.insert(0, item)
        self.save_items(items)

    def add_item_back(self, item: Item) -> None:
        items = self.get_items()
        items.append(item)
        self.save_items(items)

    def remove_item_front(self) -> Item | None:
        items = self.get_items()
        if not items:
            return None
        item = items.pop(0)
        self.save_items(items)
        return item

    def remove_item_back(self) -> Item | None:
        items = self.get_items()
        if not items:
            return None
        item = items.pop()
        self.save_items(items)
        return item

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.active})>"
