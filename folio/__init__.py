"""
folio - CV content model, ATS scoring and dual rendering

A resume builder core: a structured resume document, an applicant-tracking-system
completeness score, an on-screen preview and a paginated PDF rendered from the same
layout, and an autosaving edit session over a record store.

Architecture:
- Schema Context: Resume document model, parsing and copy-on-write reducers
- Scoring Context: ATS rubric and score computation
- Rendering Context: Shared layout, HTML preview and PDF output
- Editing Context: Debounced autosave session state machine
- Storage Context: Resume records with unique slugs and a featured flag
"""

__version__ = "0.1.0"
