"""
Schema Context

Responsibilities:
- Defines the resume document model (basics, work, education, skills, ...)
- Parses and serialises JSON Resume mappings, JSON and YAML files
- Provides copy-on-write reducers for editing

Owns: ResumeDocument and its entry types
Never: Scores, renders or persists documents
"""

from folio.contexts.schema.loader import dump_document, load_document
from folio.contexts.schema.reducers import (
    add_item,
    move_item,
    remove_item,
    update_basics,
    update_field,
    update_item,
)
from folio.contexts.schema.resume_data_structure import (
    SECTION_TYPES,
    Basics,
    Certificate,
    EducationEntry,
    Language,
    Location,
    Profile,
    ProjectEntry,
    ResumeDocument,
    SkillGroup,
    VolunteerEntry,
    WorkEntry,
    is_displayable,
    non_blank,
)
from folio.contexts.schema.samples import sample_document

__all__ = [
    # Data structure classes
    "ResumeDocument",
    "Basics",
    "Location",
    "Profile",
    "WorkEntry",
    "VolunteerEntry",
    "EducationEntry",
    "SkillGroup",
    "ProjectEntry",
    "Certificate",
    "Language",
    "SECTION_TYPES",
    "is_displayable",
    "non_blank",
    # Copy-on-write reducers
    "update_field",
    "update_basics",
    "add_item",
    "update_item",
    "remove_item",
    "move_item",
    # Files and samples
    "load_document",
    "dump_document",
    "sample_document",
]
