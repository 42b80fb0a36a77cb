import json

from queue_mincer.exceptions import FormatError
from queue_mincer.loaders.file import FileLoader
from queue_mincer.model import Items


class JsonLoader(FileLoader):
    """Templates are json files holding a top-level array of items"""

    name = "json"
    extension = "json"

    def parse(self, data: bytes, filename: str) -> Items:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Invalid encoding in file: `{filename}`", filename) from e
        if not text.strip():
            return []
        try:
            items = json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(f"Invalid json in file: `{filename}`", filename) from e
        if not isinstance(items, list):
            raise FormatError(
                f"File `{filename}` does not contain an array", filename
            )
        return items

    def dump(self, items: Items) -> bytes:
        data = json.dumps(items, indent=2, ensure_ascii=False) + "\n"
        return data.encode("utf-8")
