import csv
from io import StringIO

from queue_mincer.exceptions import FormatError
from queue_mincer.loaders.file import FileLoader
from queue_mincer.model import Items
from queue_mincer.util import coerce_cell, dump_cell


class CsvLoader(FileLoader):
    """
    Templates are csv files with a header row. Cells that look like numbers or
    booleans are converted when reading. When writing, the columns are the keys
    of the first item.
    """

    name = "csv"
    extension = "csv"

    def parse(self, data: bytes, filename: str) -> Items:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FormatError(f"Invalid encoding in file: `{filename}`", filename) from e
        if not text.strip():
            return []
        items: Items = []
        try:
            for ix, row in enumerate(csv.DictReader(StringIO(text)), 1):
                if None in row:
                    self.log.warning("Skipping cells without header", file=filename, row=ix)
                items.append(
                    {k: coerce_cell(v) for k, v in row.items() if k is not None}
                )
        except csv.Error as e:
            raise FormatError(f"Invalid csv in file: `{filename}`", filename) from e
        return items

    def dump(self, items: Items) -> bytes:
        if not items:
            return b""
        headers = list(items[0].keys())
        io = StringIO()
        writer = csv.writer(io, lineterminator="\n")
        writer.writerow(headers)
        for item in items:
            writer.writerow([dump_cell(item.get(h)) for h in headers])
        return io.getvalue().encode("utf-8")
