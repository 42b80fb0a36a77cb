from queue_mincer.exceptions import ImproperlyConfigured
from queue_mincer.loaders.base import BaseLoader
from queue_mincer.model import Item, Items
from queue_mincer.settings import QueueSettings


class MemoryLoader(BaseLoader):
    """
    Loader that keeps the items only in this process. Templates are ignored:
    any template id exists and loading one resets the items to an empty list.
    """

    name = "memory"

    def __init__(self, settings: QueueSettings) -> None:
        if not settings.put:
            raise ImproperlyConfigured("The memory loader requires `put` to be true")
        super().__init__(settings)
        self.items: Items = []

    def setup(self) -> None:
        pass

    def list_templates(self) -> list[str]:
        return []

    def has_template(self, template_id: str) -> bool:
        return True

    def read_template(self, template_id: str) -> Items:
        self.log.info("Reset items (template id ignored)", template=template_id)
        self.items = []
        return []

    def get_items(self) -> Items:
        return list(self.items)

    def save_items(self, items: Items) -> None:
        self.items = list(items)
        self.log.debug("Saved items", items=len(items))

    def add_item_front(self, item: Item) -> None:
        self.items.insert(0, item)

    def add_item_back(self, item: Item) -> None:
        self.items.append(item)

    def remove_item_front(self) -> Item | None:
        if not self.items:
            return None
        return self.items.pop(0)

    def remove_item_back(self) -> Item | None:
        if not self.items:
            return None
        return self.items.pop()
