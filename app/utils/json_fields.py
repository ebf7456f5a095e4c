"""Defensive decoding of JSON-encoded document attributes."""

import json
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


def parse_json_field(raw: Any, default_factory: Callable[[], Any], field: str = "field") -> Any:
    """
    Decode a JSON string stored in a document attribute.

    Missing or blank values and values that fail to decode (or decode to the
    wrong container type) fall back to ``default_factory()``; a decode failure
    is logged but never raised.
    """
    default = default_factory()
    if raw is None or raw == "":
        return default
    if not isinstance(raw, str):
        return raw if isinstance(raw, type(default)) else default
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to parse {field}: {str(e)}")
        return default
    if not isinstance(value, type(default)):
        logger.warning(f"Unexpected type for {field}: {type(value).__name__}")
        return default
    return value


def dump_json_field(value: Any) -> str:
    return json.dumps(value if value is not None else [], ensure_ascii=False)
