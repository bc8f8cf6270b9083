"""
Field, segment and document model shared by the parser, generator and
validator.

A field is one of three variants:

- SimpleField: plain text with no internal structure
- CompositeField: components keyed by 1-based index
- RepeatedField: several Simple/Composite occurrences of one field position

Segments map 1-based field positions to fields; the segment name (position 0)
is kept separately. A Document groups segments by name, promoting a name to a
list of segments once it is seen a second time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union


# -------------------------------------------------
# Field variants
# -------------------------------------------------

@dataclass(frozen=True)
class SimpleField:
    value: str = ""


@dataclass(frozen=True)
class CompositeField:
    components: Dict[int, str]

    def __post_init__(self):
        _check_indices(self.components, "component")

    def component(self, index: int) -> str:
        """Component by 1-based index, "" when absent."""
        return self.components.get(index, "")

    @property
    def max_index(self) -> int:
        return max(self.components, default=0)

    def padded(self) -> List[str]:
        """Components 1..max with gaps filled by empty strings."""
        return [self.component(i) for i in range(1, self.max_index + 1)]


@dataclass(frozen=True)
class RepeatedField:
    repetitions: Tuple[Union[SimpleField, CompositeField], ...]

    def __post_init__(self):
        if not self.repetitions:
            raise ValueError("RepeatedField needs at least one repetition")
        for rep in self.repetitions:
            if not isinstance(rep, (SimpleField, CompositeField)):
                raise TypeError(f"Invalid repetition type: {type(rep).__name__}")


Field = Union[SimpleField, CompositeField, RepeatedField]


def component_of(fld: Field, index: int) -> str:
    """Component by 1-based index; a simple field only has component 1."""
    if isinstance(fld, SimpleField):
        return fld.value if index == 1 else ""
    if isinstance(fld, CompositeField):
        return fld.component(index)
    if isinstance(fld, RepeatedField):
        return component_of(fld.repetitions[0], index)
    raise TypeError(f"Unsupported field type: {type(fld).__name__}")


def is_blank(fld: Field | None) -> bool:
    """True for an absent field or one without any non-empty text."""
    if fld is None:
        return True
    if isinstance(fld, SimpleField):
        return fld.value == ""
    if isinstance(fld, CompositeField):
        return all(v == "" for v in fld.components.values())
    if isinstance(fld, RepeatedField):
        return all(is_blank(rep) for rep in fld.repetitions)
    raise TypeError(f"Unsupported field type: {type(fld).__name__}")


# -------------------------------------------------
# Segment
# -------------------------------------------------

@dataclass
class Segment:
    name: str
    fields: Dict[int, Field] = field(default_factory=dict)

    def __post_init__(self):
        _check_indices(self.fields, "field")
        for fld in self.fields.values():
            if not isinstance(fld, (SimpleField, CompositeField, RepeatedField)):
                raise TypeError(f"Invalid field type: {type(fld).__name__}")

    def get(self, index: int) -> Field | None:
        return self.fields.get(index)

    def set(self, index: int, fld: Field) -> None:
        _check_indices({index: fld}, "field")
        self.fields[index] = fld

    @property
    def max_index(self) -> int:
        return max(self.fields, default=0)

    def iter_fields(self, start: int = 1) -> Iterator[Tuple[int, Field]]:
        """Yield (index, field) for start..max; absent positions become empty."""
        for i in range(start, self.max_index + 1):
            yield i, self.fields.get(i, SimpleField(""))


# -------------------------------------------------
# Document
# -------------------------------------------------

class Document:
    """Segments grouped by name in first-seen order."""

    def __init__(self):
        self._segments: Dict[str, Union[Segment, List[Segment]]] = {}

    def add(self, segment: Segment) -> None:
        existing = self._segments.get(segment.name)
        if existing is None:
            self._segments[segment.name] = segment
        elif isinstance(existing, list):
            existing.append(segment)
        else:
            self._segments[segment.name] = [existing, segment]

    def __contains__(self, name: object) -> bool:
        return name in self._segments

    def __getitem__(self, name: str) -> Union[Segment, List[Segment]]:
        return self._segments[name]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def items(self):
        return self._segments.items()

    def segment_names(self) -> List[str]:
        return list(self._segments)

    def occurrences(self, name: str) -> List[Segment]:
        entry = self._segments.get(name)
        if entry is None:
            return []
        if isinstance(entry, list):
            return list(entry)
        return [entry]

    def first(self, name: str) -> Segment | None:
        found = self.occurrences(name)
        return found[0] if found else None

    def is_repeated(self, name: str) -> bool:
        return isinstance(self._segments.get(name), list)

    def __repr__(self) -> str:
        counts = ", ".join(f"{n}x{len(self.occurrences(n))}" for n in self._segments)
        return f"Document({counts})"


# -------------------------------------------------
# Helpers
# -------------------------------------------------

def _check_indices(mapping: dict, label: str) -> None:
    for key in mapping:
        if isinstance(key, bool) or not isinstance(key, int) or key < 1:
            raise ValueError(f"Invalid {label} index {key!r}: must be a positive integer")
