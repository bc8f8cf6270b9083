"""HL7 v2 codec: parse, generate and MDM^T02 validation."""

from hl7codec.fields import (
    CompositeField,
    Document,
    Field,
    RepeatedField,
    Segment,
    SimpleField,
)
from hl7codec.hl7_generate import generate_hl7
from hl7codec.parse_hl7 import ParseResult, parse_hl7
from hl7codec.validate_hl7 import ValidationReport, validate_mdm

__version__ = "0.3.0"

__all__ = [
    "CompositeField",
    "Document",
    "Field",
    "ParseResult",
    "RepeatedField",
    "Segment",
    "SimpleField",
    "ValidationReport",
    "generate_hl7",
    "parse_hl7",
    "validate_mdm",
]
