"""
Copy-on-write updates for resume documents.

Each function takes a document and returns a new one; the input is never modified,
so a snapshot already handed to the scorer or a renderer stays valid while the
editor keeps working on the next value.

Values may be given as schema dataclasses or as raw JSON Resume mappings/lists.
Raw values are validated with the same rules as ResumeDocument.from_dict.
"""

from dataclasses import fields, replace
from typing import Any, Dict

from folio.contexts.schema.resume_data_structure import (
    SECTION_TYPES,
    Basics,
    ResumeDocument,
    coerce_value,
    parse_entry,
    wire_key,
)
from folio.exceptions import DocumentValidationError

# Accept both attribute names ("work") and wire keys ("work") for top-level fields
_DOCUMENT_FIELDS: Dict[str, Any] = {}
for _f in fields(ResumeDocument):
    _DOCUMENT_FIELDS[_f.name] = _f
    _DOCUMENT_FIELDS[wire_key(_f)] = _f

_BASICS_FIELDS: Dict[str, Any] = {}
for _f in fields(Basics):
    _BASICS_FIELDS[_f.name] = _f
    _BASICS_FIELDS[wire_key(_f)] = _f


def update_field(document: ResumeDocument, key: str, value: Any) -> ResumeDocument:
    """
    Replace exactly one top-level field of the document.

    Args:
        document: Current document (left untouched)
        key: Top-level field ("basics", "work", "skills", ...)
        value: New value, as a dataclass/tuple or a raw mapping/list

    Returns:
        New ResumeDocument with the field replaced

    Raises:
        DocumentValidationError: If key is unknown or value has the wrong shape
    """
    f = _DOCUMENT_FIELDS.get(key)
    if f is None:
        raise DocumentValidationError(f"unknown document field '{key}'", key)

    if f.name == "basics" and value is None:
        value = Basics()

    return replace(document, **{f.name: coerce_value(f, value, wire_key(f))})


def update_basics(document: ResumeDocument, **changes: Any) -> ResumeDocument:
    """
    Replace individual basics fields (name, email, location, profiles, ...).

    Example:
        doc = update_basics(doc, email="jane@example.com", location={"city": "Berlin"})
    """
    values = {}
    for key, value in changes.items():
        f = _BASICS_FIELDS.get(key)
        if f is None:
            raise DocumentValidationError(f"unknown basics field '{key}'", f"basics.{key}")
        values[f.name] = coerce_value(f, value, f"basics.{wire_key(f)}")

    return replace(document, basics=replace(document.basics, **values))


def _section_type(section: str) -> type:
    entry_type = SECTION_TYPES.get(section)
    if entry_type is None:
        raise DocumentValidationError(
            f"'{section}' is not a list section (expected one of {sorted(SECTION_TYPES)})",
            section,
        )
    return entry_type


def _coerce_item(section: str, item: Any, index: int):
    entry_type = _section_type(section)
    if isinstance(item, entry_type):
        return item
    return parse_entry(entry_type, item, f"{section}[{index}]")


def _check_index(items: tuple, index: int, section: str) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"{section} index {index} out of range (length {len(items)})")


def add_item(document: ResumeDocument, section: str, item: Any = None) -> ResumeDocument:
    """Append an entry (an empty one if item is None) to a list section."""
    _section_type(section)
    items = getattr(document, section)
    new_item = _coerce_item(section, item if item is not None else {}, len(items))
    return replace(document, **{section: items + (new_item,)})


def update_item(document: ResumeDocument, section: str, index: int, item: Any) -> ResumeDocument:
    """Replace the entry at index in a list section."""
    _section_type(section)
    items = getattr(document, section)
    _check_index(items, index, section)
    new_item = _coerce_item(section, item, index)
    return replace(document, **{section: items[:index] + (new_item,) + items[index + 1 :]})


def remove_item(document: ResumeDocument, section: str, index: int) -> ResumeDocument:
    """Remove the entry at index from a list section."""
    _section_type(section)
    items = getattr(document, section)
    _check_index(items, index, section)
    return replace(document, **{section: items[:index] + items[index + 1 :]})


def move_item(
    document: ResumeDocument, section: str, from_index: int, to_index: int
) -> ResumeDocument:
    """Move an entry within a list section, shifting the entries in between."""
    _section_type(section)
    items = list(getattr(document, section))
    _check_index(tuple(items), from_index, section)
    _check_index(tuple(items), to_index, section)
    items.insert(to_index, items.pop(from_index))
    return replace(document, **{section: tuple(items)})
