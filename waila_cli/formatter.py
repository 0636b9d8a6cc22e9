"""
JSON rendering of classification results.
"""

import dataclasses
import json
from enum import Enum
from typing import Any, Dict

from .options import OutputOptions
from .params import ClassificationResult, Unrecognized
from .units import DisplayUnit, format_amount, msat_to_unit


def should_display(result: ClassificationResult, options: OutputOptions) -> bool:
    """Unrecognized results are only shown with ``--all``."""
    return options.show_all or not isinstance(result, Unrecognized)


def to_document(result: ClassificationResult, unit: DisplayUnit) -> Dict[str, Any]:
    """
    Build the JSON object for a result.

    Fields that are None are left out. ``amount_msat`` is rescaled into
    ``unit`` and written as ``amount`` (a decimal string) next to ``unit``.

    Args:
        result: Classification result
        unit: Display unit for amounts

    Returns:
        Dict[str, Any]: JSON-ready mapping with a ``kind`` tag
    """
    document: Dict[str, Any] = {"kind": result.KIND}
    for field in dataclasses.fields(result):
        value = getattr(result, field.name)
        if value is None:
            continue
        if field.name == "amount_msat":
            document["amount"] = format_amount(msat_to_unit(value, unit))
            document["unit"] = unit.value
        elif isinstance(value, Enum):
            document[field.name] = value.value
        else:
            document[field.name] = value
    return document


def render(result: ClassificationResult, options: OutputOptions) -> str:
    """Serialize a result, compact when ``flatten`` is set, indented otherwise."""
    document = to_document(result, options.unit)
    if options.flatten:
        return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(document, sort_keys=True, indent=2, ensure_ascii=False)
