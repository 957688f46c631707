"""Store serialization helpers.

Handles conversion between Python snake_case and the camelCase keys used in
stored JSON documents.
"""

import re
from typing import Any, Callable

from pydantic import BaseModel


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def to_snake(string: str) -> str:
    """Convert camelCase to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", string).lower()


def model_to_document(model: BaseModel) -> dict[str, Any]:
    """Convert a pydantic model to a JSON-ready store document.

    - Converts field names from snake_case to camelCase
    - Converts dates and datetimes to ISO strings
    - Converts enums to their string values
    """
    data = model.model_dump(mode="json")
    return _convert_keys(data, to_camel)


def document_to_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a store document to a snake_case dict for pydantic parsing."""
    return _convert_keys(data, to_snake)


def _convert_keys(data: dict[str, Any], convert: Callable[[str], str]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        new_key = convert(key) if _is_field_name(key) else key
        if isinstance(value, dict):
            result[new_key] = _convert_keys(value, convert)
        elif isinstance(value, list):
            result[new_key] = [
                _convert_keys(item, convert) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[new_key] = value
    return result


def _is_field_name(key: str) -> bool:
    # Subject names ("Physics") are map keys, not field names
    return bool(key) and key[0].islower()
