from typing import Any, TypeAlias

Item: TypeAlias = dict[str, Any]
Items: TypeAlias = list[Item]
ItemTemplate: TypeAlias = dict[str, str]

NULL = "null"
"""Inferred kind for `None` values. Not a known kind, so it never invalidates."""
