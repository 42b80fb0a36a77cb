"""Loaders: one storage medium each, behind the same interface.

- **MemoryLoader**: items only live in this process
- **JsonLoader**: one json file per template
- **CsvLoader**: one csv file per template
- **SheetsLoader**: one sheet per template in a Google spreadsheet
"""

from queue_mincer.exceptions import ImproperlyConfigured
from queue_mincer.loaders.base import BaseLoader
from queue_mincer.loaders.csvfile import CsvLoader
from queue_mincer.loaders.jsonfile import JsonLoader
from queue_mincer.loaders.memory import MemoryLoader
from queue_mincer.loaders.sheets import SheetsLoader
from queue_mincer.settings import QueueSettings

LOADERS: dict[str, type[BaseLoader]] = {
    MemoryLoader.name: MemoryLoader,
    JsonLoader.name: JsonLoader,
    CsvLoader.name: CsvLoader,
    SheetsLoader.name: SheetsLoader,
}


def get_loader(settings: QueueSettings) -> BaseLoader:
    """
    Get the loader for the configured `loader` discriminator

    Raises:
        ImproperlyConfigured: For an unknown loader or invalid loader settings
    """
    try:
        clz = LOADERS[settings.loader]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown loader: `{settings.loader}` (use one of: {', '.join(LOADERS)})"
        )
    return clz(settings)


__all__ = [
    "BaseLoader",
    "CsvLoader",
    "JsonLoader",
    "MemoryLoader",
    "SheetsLoader",
    "get_loader",
]
