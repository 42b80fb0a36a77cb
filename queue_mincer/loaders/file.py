from abc import abstractmethod
from functools import cached_property
from typing import ClassVar

from anystore.exceptions import DoesNotExist
from anystore.logging import BoundLogger, get_logger
from anystore.store import BaseStore, get_store
from anystore.util import ensure_uri

from queue_mincer.exceptions import StorageError, TemplateNotFound
from queue_mincer.loaders.base import BaseLoader
from queue_mincer.model import Items
from queue_mincer.util import make_filename


class FileLoader(BaseLoader):
    """
    Base loader for one file per template within a templates directory (any
    anystore uri, local by default).

    Layout: {templates_uri}/{templateId}.{extension}

    Every mutation rewrites the whole active file.
    """

    extension: ClassVar[str]

    @cached_property
    def store(self) -> BaseStore:
        return get_store(
            uri=ensure_uri(self.settings.templates_uri), serialization_mode="raw"
        )

    @cached_property
    def log(self) -> BoundLogger:
        name = f"queue_mincer.{self.__class__.__name__}"
        return get_logger(name, loader=self.name, uri=self.store.uri)

    @abstractmethod
    def parse(self, data: bytes, filename: str) -> Items:
        """Parse file contents into items"""

    @abstractmethod
    def dump(self, items: Items) -> bytes:
        """Serialize items into file contents"""

    @property
    def active_filename(self) -> str:
        return make_filename(self.active or self.resolve_active([]), self.extension)

    def setup(self) -> None:
        try:
            self.store._fs.makedirs(self.store.uri, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create templates directory: `{self.store.uri}`",
                self.store.uri,
            ) from e
        self.active = self.resolve_active(self.list_templates())
        self.ensure_schema(self.get_items())

    def list_templates(self) -> list[str]:
        suffix = f".{self.extension}"
        keys = (k for k in self.store.iterate_keys() if "/" not in k)
        return sorted(k[: -len(suffix)] for k in keys if k.endswith(suffix))

    def has_template(self, template_id: str) -> bool:
        return self.store.exists(make_filename(template_id, self.extension))

    def read_template(self, template_id: str) -> Items:
        return self.read(make_filename(template_id, self.extension))

    def read(self, filename: str) -> Items:
        try:
            data = self.store.get(filename)
        except DoesNotExist as e:
            raise TemplateNotFound(filename) from e
        except OSError as e:
            raise StorageError(f"Failed to read file: `{filename}`", filename) from e
        return self.parse(data, filename)

    def write(self, filename: str, items: Items) -> None:
        data = self.dump(items)
        try:
            self.store.put(filename, data)
        except OSError as e:
            raise StorageError(f"Failed to write file: `{filename}`", filename) from e
        self.log.debug("Saved items", file=filename, items=len(items))

    def get_items(self) -> Items:
        filename = self.active_filename
        if not self.store.exists(filename):
            return []
        return self.read(filename)

    def save_items(self, items: Items) -> None:
        self.write(self.active_filename, items)
