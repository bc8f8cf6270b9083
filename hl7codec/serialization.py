"""JSON tree form of a Document, with string keys for field/component positions."""

import logging
from typing import Any, Dict, List, Union

from hl7codec.fields import (
    CompositeField,
    Document,
    Field,
    RepeatedField,
    Segment,
    SimpleField,
)

logger = logging.getLogger(__name__)

JSONField = Union[str, Dict[str, str], List[Union[str, Dict[str, str]]]]


def field_to_json(fld: Field) -> JSONField:
    if isinstance(fld, SimpleField):
        return fld.value
    if isinstance(fld, CompositeField):
        return {str(i): v for i, v in sorted(fld.components.items())}
    if isinstance(fld, RepeatedField):
        return [field_to_json(rep) for rep in fld.repetitions]
    raise TypeError(f"Unsupported field type: {type(fld).__name__}")


def segment_to_json(segment: Segment) -> Dict[str, JSONField]:
    return {str(i): field_to_json(segment.fields[i]) for i in sorted(segment.fields)}


def document_to_dict(document: Document) -> Dict[str, Any]:
    """
    {"MSH": {"9": {"1": "MDM", "2": "T02"}, ...}, "OBX": [{...}, {...}]}
    Repeated segments become lists; a single occurrence stays an object.
    """
    out: Dict[str, Any] = {}
    for name, entry in document.items():
        if isinstance(entry, list):
            out[name] = [segment_to_json(seg) for seg in entry]
        else:
            out[name] = segment_to_json(entry)
    return out


def field_from_json(value: Any) -> Field:
    if value is None:
        return SimpleField("")
    if isinstance(value, str):
        return SimpleField(value)
    if isinstance(value, dict):
        return CompositeField({
            idx: _component_text(comp)
            for idx, comp in _numeric_items(value, "component").items()
        })
    if isinstance(value, list):
        if not value:
            return SimpleField("")
        reps = []
        for rep in value:
            parsed = field_from_json(rep)
            if isinstance(parsed, RepeatedField):
                raise ValueError("Repetitions cannot be nested")
            reps.append(parsed)
        return RepeatedField(tuple(reps))
    raise ValueError(f"Unsupported field value: {value!r}")


def segment_from_json(name: str, data: Dict[str, Any]) -> Segment:
    if not isinstance(data, dict):
        raise ValueError(f"Segment {name} must be an object")
    fields = {
        idx: field_from_json(val)
        for idx, val in _numeric_items(data, f"{name} field").items()
    }
    return Segment(name, fields)


def document_from_dict(data: Dict[str, Any]) -> Document:
    """
    Inverse of document_to_dict. Keys that are not positive integers are
    ignored.
    """
    if not isinstance(data, dict):
        raise ValueError("Document must be an object keyed by segment name")

    document = Document()
    for name, entry in data.items():
        occurrences = entry if isinstance(entry, list) else [entry]
        for seg_data in occurrences:
            document.add(segment_from_json(name, seg_data))
    return document


def _numeric_items(data: Dict[Any, Any], label: str) -> Dict[int, Any]:
    items = {}
    for key, val in data.items():
        try:
            idx = int(key)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric %s key %r", label, key)
            continue
        if idx < 1:
            logger.debug("Ignoring non-positive %s key %r", label, key)
            continue
        items[idx] = val
    return items


def _component_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"Component values must be text, got {value!r}")
    return str(value)
