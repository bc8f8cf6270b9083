"""
Display names for segments and fields, and a flat row view of a Document
for tabular display.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping

from hl7codec.fields import CompositeField, Document, Field, RepeatedField, SimpleField

SEGMENT_NAMES: Mapping[str, str] = MappingProxyType({
    "MSH": "Message Header",
    "EVN": "Event Type",
    "PID": "Patient Identification",
    "PV1": "Patient Visit",
    "TXA": "Transcription Document Header",
    "OBX": "Observation/Result",
})

FIELD_NAMES: Mapping[str, Mapping[int, str]] = MappingProxyType({
    "MSH": MappingProxyType({
        1: "Field Separator",
        2: "Encoding Characters",
        3: "Sending Application",
        4: "Sending Facility",
        5: "Receiving Application",
        6: "Receiving Facility",
        7: "Date/Time of Message",
        9: "Message Type",
        10: "Message Control ID",
        11: "Processing ID",
        12: "Version ID",
    }),
    "PID": MappingProxyType({
        3: "Patient Identifier List",
        5: "Patient Name",
        7: "Date/Time of Birth",
        8: "Administrative Sex",
        11: "Patient Address",
    }),
    "PV1": MappingProxyType({
        2: "Patient Class",
        3: "Assigned Patient Location",
    }),
    "TXA": MappingProxyType({
        2: "Document Type",
        3: "Content Presentation",
        4: "Activity Date/Time",
        5: "Primary Activity Provider",
        12: "Completion Status",
        16: "Unique Document Number",
    }),
    "OBX": MappingProxyType({
        1: "Set ID",
        2: "Value Type",
        3: "Observation Identifier",
        5: "Observation Value",
        6: "Units",
    }),
})


def field_name(segment: str, index: int, field_names: Mapping = FIELD_NAMES) -> str:
    return field_names.get(segment, {}).get(index, f"Field {index}")


def display_value(fld: Field) -> str:
    """
    Short display text: repetitions joined by "~", and only the non-empty
    components of a composite joined by "^".
    """
    if isinstance(fld, SimpleField):
        return fld.value
    if isinstance(fld, CompositeField):
        return "^".join(v for v in fld.padded() if v)
    if isinstance(fld, RepeatedField):
        return "~".join(display_value(rep) for rep in fld.repetitions)
    raise TypeError(f"Unsupported field type: {type(fld).__name__}")


def document_rows(
    document: Document,
    field_names: Mapping = FIELD_NAMES,
) -> List[Dict[str, str]]:
    """
    One row per stored field, in document order. Segments that occur more
    than once are labelled with their position, e.g. OBX[1].
    """
    rows = []
    for name in document.segment_names():
        repeated = document.is_repeated(name)
        for seg_idx, segment in enumerate(document.occurrences(name)):
            label = f"{name}[{seg_idx}]" if repeated else name
            for index in sorted(segment.fields):
                rows.append({
                    "segment": label,
                    "field_index": str(index),
                    "field_name": field_name(name, index, field_names),
                    "value": display_value(segment.fields[index]),
                })
    return rows
