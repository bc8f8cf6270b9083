"""
HL7 v2.x serializer: Document -> pipe-delimited text.

Output always uses the canonical delimiters |^~\\& whatever delimiters the
document was originally parsed with. Segments are emitted in a fixed order
(MDM^T02 by default) and separated by a single carriage return.
"""

import logging
from typing import Optional, Sequence

from hl7codec.config import MDM_T02_SEGMENT_ORDER
from hl7codec.errors import EmptyDocumentError
from hl7codec.fields import (
    CompositeField,
    Document,
    Field,
    RepeatedField,
    Segment,
    SimpleField,
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
COMPONENT_SEPARATOR = "^"
REPETITION_SEPARATOR = "~"
ESCAPE_CHARACTER = "\\"
SUBCOMPONENT_SEPARATOR = "&"
ENCODING_CHARACTERS = (
    f"{COMPONENT_SEPARATOR}{REPETITION_SEPARATOR}{ESCAPE_CHARACTER}{SUBCOMPONENT_SEPARATOR}"
)
SEGMENT_TERMINATOR = "\r"

DEFAULT_SEGMENT_ORDER = MDM_T02_SEGMENT_ORDER


def generate_hl7(
    document: Document,
    segment_order: Optional[Sequence[str]] = None,
) -> str:
    """
    Serialize a Document. Only segments named in `segment_order` are emitted;
    repeated segments keep their stored order.
    """
    if len(document) == 0:
        raise EmptyDocumentError()

    order = tuple(segment_order) if segment_order is not None else DEFAULT_SEGMENT_ORDER

    skipped = [name for name in document.segment_names() if name not in order]
    if skipped:
        logger.debug("Segments outside the output order are not emitted: %s", skipped)

    lines = []
    for name in order:
        for segment in document.occurrences(name):
            lines.append(render_segment(segment))

    return SEGMENT_TERMINATOR.join(lines)


def render_segment(segment: Segment) -> str:
    """
    One segment line; absent positions between 1 and the highest set field
    are written as empty fields.
    """
    if segment.name == "MSH":
        # MSH-1 and MSH-2 are the delimiters themselves
        fields = [segment.name, ENCODING_CHARACTERS]
        fields.extend(render_field(fld) for _, fld in segment.iter_fields(start=3))
    else:
        fields = [segment.name]
        fields.extend(render_field(fld) for _, fld in segment.iter_fields())
    return FIELD_SEPARATOR.join(fields)


def render_field(fld: Field) -> str:
    if isinstance(fld, SimpleField):
        return fld.value
    if isinstance(fld, CompositeField):
        return COMPONENT_SEPARATOR.join(fld.padded())
    if isinstance(fld, RepeatedField):
        return REPETITION_SEPARATOR.join(render_field(rep) for rep in fld.repetitions)
    raise TypeError(f"Unsupported field type: {type(fld).__name__}")
