"""
Resume Document Structure

Defines the structured representation of resume content for folio, following the
JSON Resume shape (camelCase keys on the wire, snake_case attributes in Python).
This structure is the interface between the Schema, Scoring, Rendering and Editing contexts.

Every class is a frozen dataclass and every list is a tuple, so a document value is
never mutated after construction. Edits go through folio.contexts.schema.reducers, which
return new documents.

Optional fields default to None (absent). An empty string is a value, not an absence,
and survives parsing and serialisation unchanged.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from folio.exceptions import DocumentValidationError


# Field declarations
#
# Each field carries metadata describing its wire key and kind. Parsing and
# serialisation walk these declarations instead of hand-writing a converter per class.

def _text(key: Optional[str] = None):
    return field(default=None, metadata={"kind": "text", "key": key})


def _texts(key: Optional[str] = None):
    return field(default=(), metadata={"kind": "texts", "key": key})


def _flag(key: Optional[str] = None):
    return field(default=None, metadata={"kind": "flag", "key": key})


def _nested(cls, key: Optional[str] = None):
    return field(default=None, metadata={"kind": "nested", "type": cls, "key": key})


def _entries(cls, key: Optional[str] = None, always: bool = False):
    return field(
        default=(), metadata={"kind": "entries", "type": cls, "key": key, "always": always}
    )


def _raw(key: Optional[str] = None):
    return field(default=None, metadata={"kind": "raw", "key": key})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def wire_key(f) -> str:
    """JSON key of a declared dataclass field."""
    return f.metadata.get("key") or _camel(f.name)


def non_blank(values: Iterable[str]) -> Tuple[str, ...]:
    """Drop empty and whitespace-only strings, keeping order."""
    return tuple(value for value in values if value and value.strip())


@dataclass(frozen=True)
class Location:
    address: Optional[str] = _text()
    postal_code: Optional[str] = _text()
    city: Optional[str] = _text()
    country_code: Optional[str] = _text()
    region: Optional[str] = _text()


@dataclass(frozen=True)
class Profile:
    network: Optional[str] = _text()
    username: Optional[str] = _text()
    url: Optional[str] = _text()


@dataclass(frozen=True)
class Basics:
    """Contact details and headline of the resume owner."""

    name: Optional[str] = _text()
    label: Optional[str] = _text()
    image: Optional[str] = _text()
    email: Optional[str] = _text()
    phone: Optional[str] = _text()
    url: Optional[str] = _text()
    summary: Optional[str] = _text()
    location: Optional[Location] = _nested(Location)
    profiles: Tuple[Profile, ...] = _entries(Profile)


@dataclass(frozen=True)
class WorkEntry:
    """
    One position in the work history.

    An entry is ongoing when is_current_role is set or end_date is absent.
    """

    id: Optional[str] = _text()
    name: Optional[str] = _text()
    position: Optional[str] = _text()
    url: Optional[str] = _text()
    start_date: Optional[str] = _text()
    end_date: Optional[str] = _text()
    summary: Optional[str] = _text()
    description: Optional[str] = _text()
    highlights: Tuple[str, ...] = _texts()
    location: Optional[str] = _text()
    is_current_role: Optional[bool] = _flag()

    @property
    def is_ongoing(self) -> bool:
        return bool(self.is_current_role) or not self.end_date


@dataclass(frozen=True)
class VolunteerEntry:
    id: Optional[str] = _text()
    organization: Optional[str] = _text()
    position: Optional[str] = _text()
    url: Optional[str] = _text()
    start_date: Optional[str] = _text()
    end_date: Optional[str] = _text()
    summary: Optional[str] = _text()
    highlights: Tuple[str, ...] = _texts()
    location: Optional[str] = _text()

    @property
    def is_ongoing(self) -> bool:
        return not self.end_date


@dataclass(frozen=True)
class EducationEntry:
    id: Optional[str] = _text()
    institution: Optional[str] = _text()
    url: Optional[str] = _text()
    area: Optional[str] = _text()
    study_type: Optional[str] = _text()
    start_date: Optional[str] = _text()
    end_date: Optional[str] = _text()
    score: Optional[str] = _text()
    courses: Tuple[str, ...] = _texts()
    highlights: Tuple[str, ...] = _texts()
    location: Optional[str] = _text()


@dataclass(frozen=True)
class SkillGroup:
    """A skill category (e.g. "Backend") with its keywords."""

    name: Optional[str] = _text()
    level: Optional[str] = _text()
    keywords: Tuple[str, ...] = _texts()


@dataclass(frozen=True)
class ProjectEntry:
    name: Optional[str] = _text()
    description: Optional[str] = _text()
    highlights: Tuple[str, ...] = _texts()
    keywords: Tuple[str, ...] = _texts()
    start_date: Optional[str] = _text()
    end_date: Optional[str] = _text()
    url: Optional[str] = _text()
    roles: Tuple[str, ...] = _texts()
    entity: Optional[str] = _text()
    project_type: Optional[str] = _text(key="type")

    @property
    def is_ongoing(self) -> bool:
        return not self.end_date


@dataclass(frozen=True)
class Certificate:
    name: Optional[str] = _text()
    date: Optional[str] = _text()
    issuer: Optional[str] = _text()
    url: Optional[str] = _text()


@dataclass(frozen=True)
class Language:
    language: Optional[str] = _text()
    fluency: Optional[str] = _text()


@dataclass(frozen=True)
class ResumeDocument:
    """
    Structured representation of a complete resume document.

    The root aggregate owned by one ResumeRecord. Section order follows the
    JSON Resume schema; entries inside each section keep the user's order.
    """

    basics: Basics = _nested(Basics)
    work: Tuple[WorkEntry, ...] = _entries(WorkEntry, always=True)
    volunteer: Tuple[VolunteerEntry, ...] = _entries(VolunteerEntry, always=True)
    education: Tuple[EducationEntry, ...] = _entries(EducationEntry, always=True)
    skills: Tuple[SkillGroup, ...] = _entries(SkillGroup, always=True)
    projects: Tuple[ProjectEntry, ...] = _entries(ProjectEntry, always=True)
    certificates: Tuple[Certificate, ...] = _entries(Certificate, always=True)
    languages: Tuple[Language, ...] = _entries(Language, always=True)
    meta: Optional[Dict[str, Any]] = _raw()

    def __post_init__(self):
        if self.basics is None:
            object.__setattr__(self, "basics", Basics())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResumeDocument":
        """
        Build a document from a JSON Resume mapping.

        Args:
            data: Mapping with camelCase keys (basics, work, education, ...)

        Returns:
            ResumeDocument instance

        Raises:
            DocumentValidationError: If any field has the wrong shape
        """
        return parse_entry(cls, data, "")

    @classmethod
    def empty(cls, name: str = "") -> "ResumeDocument":
        """Document produced by the create action: a bare basics.name."""
        return cls(basics=Basics(name=name))

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON Resume mapping, omitting absent fields."""
        return serialize_entry(self)

    @property
    def name(self) -> str:
        return self.basics.name or ""


# Sections of the document that hold ordered lists of entries
SECTION_TYPES: Dict[str, type] = {
    f.name: f.metadata["type"]
    for f in fields(ResumeDocument)
    if f.metadata.get("kind") == "entries"
}


def is_displayable(document: ResumeDocument) -> bool:
    """A document may be shown publicly only when basics.name is non-empty."""
    return bool(document.basics.name and document.basics.name.strip())


def _join_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    return type(value).__name__


def coerce_value(f, value: Any, path: str) -> Any:
    """
    Check and convert one raw value for a declared field.

    Dataclass instances of the right type pass through untouched, so reducers can
    accept either parsed entries or raw mappings.

    Raises:
        DocumentValidationError: If the value has the wrong shape
    """
    kind = f.metadata["kind"]

    if value is None:
        if kind in ("texts", "entries"):
            return ()
        return None

    if kind == "text":
        if not isinstance(value, str):
            raise DocumentValidationError(f"expected a string, got {_type_name(value)}", path)
        return value

    if kind == "flag":
        if not isinstance(value, bool):
            raise DocumentValidationError(f"expected a boolean, got {_type_name(value)}", path)
        return value

    if kind == "texts":
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise DocumentValidationError(f"expected a list of strings, got {_type_name(value)}", path)
        for i, item in enumerate(value):
            if not isinstance(item, str):
                raise DocumentValidationError(
                    f"expected a string, got {_type_name(item)}", f"{path}[{i}]"
                )
        return tuple(value)

    if kind == "nested":
        if isinstance(value, f.metadata["type"]):
            return value
        return parse_entry(f.metadata["type"], value, path)

    if kind == "entries":
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise DocumentValidationError(f"expected a list, got {_type_name(value)}", path)
        entry_type = f.metadata["type"]
        return tuple(
            item if isinstance(item, entry_type) else parse_entry(entry_type, item, f"{path}[{i}]")
            for i, item in enumerate(value)
        )

    if kind == "raw":
        if not isinstance(value, Mapping):
            raise DocumentValidationError(f"expected an object, got {_type_name(value)}", path)
        return dict(value)

    raise AssertionError(f"Unhandled field kind: {kind}")


def parse_entry(cls, data: Any, path: str):
    """Parse a mapping into the given schema dataclass. Unknown keys are ignored."""
    if not isinstance(data, Mapping):
        raise DocumentValidationError(f"expected an object, got {_type_name(data)}", path or None)

    values = {}
    for f in fields(cls):
        key = wire_key(f)
        if key in data:
            values[f.name] = coerce_value(f, data[key], _join_path(path, key))
    return cls(**values)


def serialize_entry(entry) -> Dict[str, Any]:
    """Serialise a schema dataclass back to its camelCase mapping."""
    result: Dict[str, Any] = {}
    for f in fields(entry):
        kind = f.metadata["kind"]
        value = getattr(entry, f.name)

        if kind in ("texts", "entries"):
            if not value and not f.metadata.get("always"):
                continue
            if kind == "texts":
                result[wire_key(f)] = list(value)
            else:
                result[wire_key(f)] = [serialize_entry(item) for item in value]
        elif value is None:
            continue
        elif kind == "nested":
            result[wire_key(f)] = serialize_entry(value)
        elif kind == "raw":
            result[wire_key(f)] = dict(value)
        else:
            result[wire_key(f)] = value
    return result
