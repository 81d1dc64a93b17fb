"""Record analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path

from ..codec.schema import RecordSchema
from ..models.base import BaseRecord
from ..utils.sizing import encoded_size

log = logging.getLogger(__name__)


def analyze_file(file_path: Path) -> None:
    """Analyze all BaseRecord classes in a Python file.

    Args:
        file_path: Path to Python file containing record definitions
    """
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    # Only classes defined in this file, not imported ones
    record_classes = [
        obj
        for _name, obj in inspect.getmembers(module, inspect.isclass)
        if obj is not BaseRecord
        and issubclass(obj, BaseRecord)
        and obj.__module__ == "user_module"
    ]

    if not record_classes:
        print(f"No BaseRecord classes found in {file_path}")
        return

    print("|" * 7, "tlvwire: Schema-driven TLV Codec", "|" * 7)
    print(f"{len(record_classes)} record{'s' if len(record_classes) != 1 else ''} loaded.")
    print("Sizes are in bytes.")
    print()

    for record_class in record_classes:
        analyze_record_class(record_class)


def analyze_record_class(record_class: type[BaseRecord]) -> None:
    """Print the field table of a single record class.

    Args:
        record_class: Record class to analyze
    """
    schema = RecordSchema.from_model(record_class)
    log.debug("analyzing %s (%d fields)", record_class.__name__, len(schema.fields))

    print(f"{'=' * 19} {record_class.__name__} {'=' * 19}")

    zero_size = encoded_size(record_class)
    print(f"Size of all-zero record: {zero_size} bytes")
    if record_class.tlv_max_bytes is not None:
        print(f"Allowed maximum size of record: {record_class.tlv_max_bytes} bytes")
    print(f"Trailing entries: {record_class.tlv_extra}")
    print()

    for i, field in enumerate(schema.fields, 1):
        field_desc = f"{i}. {field.name}"
        kind = field.describe()
        dots = "." * max(1, 40 - len(field_desc) - len(kind))
        suffix = " (optional)" if field.optional else ""
        print(f"        {field_desc}{dots}{kind} tag={field.tag}{suffix}")

    print()
