from dataclasses import dataclass, field
from typing import List, Optional

from hl7codec.fields import Document, component_of, is_blank

REQUIRED_SEGMENTS = ("MSH", "PID", "TXA")

EXPECTED_MESSAGE_CODE = "MDM"
EXPECTED_TRIGGER_EVENT = "T02"

# TXA positions that should be filled in a complete document notification
RECOMMENDED_TXA_FIELDS = {
    2: "Document Type",
    4: "Activity Date/Time",
    12: "Completion Status",
}


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


def should_validate_mdm(message_type: Optional[str]) -> bool:
    """Callers only run the MDM profile check on MDM messages."""
    return bool(message_type) and message_type.startswith(EXPECTED_MESSAGE_CODE)


def validate_mdm(document: Document) -> ValidationReport:
    """
    Check an MDM^T02 document.
    Missing segments and a missing message type are errors; everything else
    is a warning. Repeated segments are checked on their first occurrence.
    """
    report = ValidationReport()

    # Required segments
    for name in REQUIRED_SEGMENTS:
        if name not in document:
            report.errors.append(f"Missing required segment: {name}")

    # MSH-9 message type
    msh = document.first("MSH")
    if msh is not None:
        msh9 = msh.get(9)
        if is_blank(msh9):
            report.errors.append("MSH-9 (Message Type) is required")
        else:
            code = component_of(msh9, 1)
            trigger = component_of(msh9, 2)
            if code != EXPECTED_MESSAGE_CODE:
                report.warnings.append(
                    f"Expected message type {EXPECTED_MESSAGE_CODE}, found: {code}"
                )
            if trigger != EXPECTED_TRIGGER_EVENT:
                report.warnings.append(
                    f"Expected trigger event {EXPECTED_TRIGGER_EVENT}, found: {trigger}"
                )

    # PID-3 patient identifier
    pid = document.first("PID")
    if pid is not None:
        pid3 = pid.get(3)
        if pid3 is None or component_of(pid3, 1) == "":
            report.warnings.append("PID-3 (Patient Identifier List) is recommended")

    # TXA recommended fields
    txa = document.first("TXA")
    if txa is not None:
        for idx, label in RECOMMENDED_TXA_FIELDS.items():
            if is_blank(txa.get(idx)):
                report.warnings.append(f"TXA-{idx} ({label}) is recommended")

    return report
