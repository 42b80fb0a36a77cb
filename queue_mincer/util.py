import json
import math
import re
from decimal import Decimal
from typing import Any

from anystore.util import get_extension

NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")


def coerce_cell(value: str | None) -> Any:
    """
    Convert a string cell (csv, spreadsheet) into a number or boolean if it
    looks like one

    Examples:
        >>> coerce_cell("42")
        42
        >>> coerce_cell("-1.5")
        -1.5
        >>> coerce_cell("TRUE")
        True
        >>> coerce_cell("42a")
        "42a"
    """
    if not isinstance(value, str):
        return value
    if NUMERIC.fullmatch(value):
        if "." in value:
            return float(value)
        return int(value)
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def dump_cell(value: Any) -> str:
    """
    Convert a value into a string cell. Structured values are dumped as json.

    Examples:
        >>> dump_cell(False)
        "false"
        >>> dump_cell(None)
        ""
        >>> dump_cell(1e-05)
        "0.00001"
        >>> dump_cell({"a": 1})
        '{"a": 1}'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    if isinstance(value, float) and math.isfinite(value):
        return format(Decimal(repr(value)), "f")
    return str(value)


def make_filename(template_id: str, ext: str) -> str:
    """
    Get the file name for a template id, keeping an already present extension

    Examples:
        >>> make_filename("default", "json")
        "default.json"
        >>> make_filename("default.json", "json")
        "default.json"
    """
    if get_extension(template_id) == ext:
        return template_id
    return f"{template_id}.{ext}"
