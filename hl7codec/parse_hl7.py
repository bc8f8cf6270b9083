import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from hl7codec.config import CodecSettings, get_settings
from hl7codec.errors import EmptyInputError, HL7ParseError, MissingHeaderError
from hl7codec.fields import (
    CompositeField,
    Document,
    Field,
    RepeatedField,
    Segment,
    SimpleField,
)

logger = logging.getLogger(__name__)

DEFAULT_FIELD_SEPARATOR = "|"
DEFAULT_ENCODING_CHARACTERS = "^~\\&"

# Segment name plus field separator
MIN_SEGMENT_LENGTH = 4


@dataclass(frozen=True)
class Delimiters:
    field: str = "|"
    component: str = "^"
    repetition: str = "~"
    escape: str = "\\"
    subcomponent: str = "&"


@dataclass
class ParseResult:
    success: bool
    document: Optional[Document] = None
    message_type: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def parse_hl7(text: str, settings: Optional[CodecSettings] = None) -> ParseResult:
    """
    Parse an HL7 v2 message into a Document.
    Fatal problems (empty input, missing MSH) come back as a failed result;
    skipped segments and truncations are listed in warnings.
    """
    warnings: List[str] = []
    try:
        document = parse_hl7_document(text, settings=settings, warnings=warnings)
    except HL7ParseError as e:
        logger.debug("Parse failed: %s", e)
        return ParseResult(success=False, error=str(e), warnings=warnings)

    return ParseResult(
        success=True,
        document=document,
        message_type=extract_message_type(document),
        warnings=warnings,
    )


def parse_hl7_file(path: str, settings: Optional[CodecSettings] = None) -> ParseResult:
    raw = Path(path).read_text()
    return parse_hl7(raw, settings=settings)


def parse_hl7_document(
    text: str,
    settings: Optional[CodecSettings] = None,
    warnings: Optional[List[str]] = None,
) -> Document:
    """
    Same as parse_hl7 but raises EmptyInputError / MissingHeaderError.
    Non-fatal findings are appended to `warnings` when a list is given.
    """
    settings = settings or get_settings()
    if warnings is None:
        warnings = []

    if not text or not text.strip():
        raise EmptyInputError()

    lines = _split_hl7_lines(text)
    if not lines:
        raise EmptyInputError("No segments found in message")

    header = lines[0]
    if not header.startswith("MSH"):
        raise MissingHeaderError()

    delims = read_delimiters(header)
    logger.debug("Delimiters: %r", delims)

    if len(lines) > settings.max_segments:
        warnings.append(
            f"Message has {len(lines)} segments; only the first "
            f"{settings.max_segments} were parsed"
        )
        lines = lines[: settings.max_segments]

    document = Document()
    for line in lines:
        segment = _parse_segment(line, delims, settings, warnings)
        if segment is None:
            continue
        logger.debug("Parsed %s with %d fields", segment.name, len(segment.fields))
        document.add(segment)

    return document


# -------------------------------------------------
# Line handling
# -------------------------------------------------

def _split_hl7_lines(text: str) -> List[str]:
    """
    Normalize HL7 segment breaks (CR, LF, CRLF) and drop blank lines.
    """
    text = text.lstrip("\ufeff")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line.strip() for line in text.split("\n") if line.strip()]


def read_delimiters(header: str) -> Delimiters:
    """
    MSH-1 is the character right after "MSH"; MSH-2 holds the component,
    repetition, escape and sub-component characters in that order.
    """
    field_sep = header[3] if len(header) > 3 else DEFAULT_FIELD_SEPARATOR
    # Stop at the next field separator so a short MSH-2 never swallows MSH-3
    encoding = header[4:].split(field_sep, 1)[0][:4] if len(header) > 4 else ""

    chars = [
        encoding[i] if i < len(encoding) else DEFAULT_ENCODING_CHARACTERS[i]
        for i in range(4)
    ]
    return Delimiters(field_sep, *chars)


# -------------------------------------------------
# Segments
# -------------------------------------------------

def _parse_segment(
    line: str,
    delims: Delimiters,
    settings: CodecSettings,
    warnings: List[str],
) -> Optional[Segment]:
    # Name must be followed directly by the field separator ("PIDX|..." is not a PID)
    if len(line) < MIN_SEGMENT_LENGTH or line[3] != delims.field:
        warnings.append(f"Skipping invalid segment: {line}")
        return None

    name = line[:3]
    parts = line.split(delims.field)

    if name == "MSH":
        # parts[1] is MSH-2, so every header position is shifted by one
        segment = Segment(name, {
            1: SimpleField(delims.field),
            2: SimpleField(parts[1]),
        })
        slices = parts[2:]
        first_index = 3
    else:
        segment = Segment(name)
        slices = parts[1:]
        first_index = 1

    if len(slices) + first_index - 1 > settings.max_fields:
        warnings.append(
            f"{name}: more than {settings.max_fields} fields, extra fields dropped"
        )
        slices = slices[: max(settings.max_fields - first_index + 1, 0)]

    for i, raw in enumerate(slices, start=first_index):
        segment.set(i, _parse_field_slice(raw, name, i, delims, settings, warnings))

    return segment


def _parse_field_slice(
    raw: str,
    segment_name: str,
    index: int,
    delims: Delimiters,
    settings: CodecSettings,
    warnings: List[str],
) -> Field:
    if delims.repetition not in raw:
        return parse_field(raw, delims, settings.max_components, warnings)

    repetitions = raw.split(delims.repetition)
    if len(repetitions) > settings.max_repetitions:
        warnings.append(
            f"{segment_name}-{index}: more than {settings.max_repetitions} "
            f"repetitions, extra repetitions dropped"
        )
        repetitions = repetitions[: settings.max_repetitions]

    return RepeatedField(tuple(
        parse_field(rep, delims, settings.max_components, warnings)
        for rep in repetitions
    ))


def parse_field(
    raw: str,
    delims: Delimiters,
    max_components: int = 100,
    warnings: Optional[List[str]] = None,
) -> Field:
    """
    Parse one field occurrence (no repetition delimiter) into a Simple or
    Composite field. Sub-components stay joined inside their component.
    """
    if not raw or delims.component not in raw:
        return SimpleField(raw or "")

    parts = raw.split(delims.component)
    if len(parts) > max_components:
        if warnings is not None:
            warnings.append(
                f"Field '{raw[:40]}' has more than {max_components} components, "
                f"extra components dropped"
            )
        parts = parts[:max_components]

    # Sub-components are not addressable; each component keeps its "&"-joined text
    return CompositeField({i: comp for i, comp in enumerate(parts, start=1)})


# -------------------------------------------------
# Message type
# -------------------------------------------------

def extract_message_type(document: Document) -> Optional[str]:
    """
    MSH-9 as "CODE^TRIGGER", the code alone when there is no trigger,
    or "Unknown" for a composite without a code.
    """
    msh = document.first("MSH")
    if msh is None:
        return None
    msh9 = msh.get(9)
    if msh9 is None:
        return None

    if isinstance(msh9, RepeatedField):
        msh9 = msh9.repetitions[0]

    if isinstance(msh9, SimpleField):
        return msh9.value
    if isinstance(msh9, CompositeField):
        code = msh9.component(1)
        trigger = msh9.component(2)
        if code and trigger:
            return f"{code}^{trigger}"
        return code or "Unknown"
    raise TypeError(f"Unsupported field type: {type(msh9).__name__}")
