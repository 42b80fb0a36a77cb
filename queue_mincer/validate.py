"""Item validation against a field -> kind template"""

from collections.abc import Mapping
from typing import Any

from queue_mincer.model import NULL, Item, ItemTemplate


def kind_of(value: Any) -> str:
    """
    Get the kind name of a runtime value

    Examples:
        >>> kind_of(True)
        "boolean"
        >>> kind_of(1.5)
        "number"
        >>> kind_of(None)
        "null"
    """
    if value is None:
        return NULL
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def is_kind(value: Any, kind: str) -> bool:
    """Check if `value` satisfies the declared `kind`. Unknown kinds are always
    satisfied."""
    kind = kind.lower()
    if kind == "string":
        return isinstance(value, str)
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "object":
        return isinstance(value, Mapping)
    if kind == "array":
        return isinstance(value, (list, tuple))
    return True


def validate(item: Any, template: ItemTemplate | None) -> bool:
    """
    Validate an item against an item template. Every declared field must be
    present with a matching kind, additional fields are allowed.

    Args:
        item: The item to check
        template: Field name -> kind mapping, `None` accepts everything

    Returns:
        Whether the item is valid
    """
    if not template:
        return True
    if not isinstance(item, Mapping):
        return False
    for key, kind in template.items():
        if key not in item:
            return False
        if not is_kind(item[key], kind):
            return False
    return True


def infer_template(item: Item) -> ItemTemplate:
    """Infer an item template from the runtime kinds of an item's values"""
    if not isinstance(item, Mapping):
        return {}
    return {key: kind_of(value) for key, value in item.items()}
