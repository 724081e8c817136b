"""
Shared resume layout.

Both renderers (the HTML preview and the PDF document) are backends over the same
declarative layout: which sections exist, which column holds them, in which order,
when they are visible, and how each entry is formatted. build_layout() turns a
ResumeDocument into a ResumeLayout view model and the backends only draw it, so the
two outputs cannot drift apart on structure or content order.

Rules applied here:
- A section with no displayable entry is dropped entirely (no empty headings).
- Entries whose every displayed field is blank are dropped (editors add blank rows).
- Highlights, keywords and roles are filtered of blank strings, order kept.
- Date ranges follow format_date_range(); current work shows "Present".
- An empty name renders as the "Your Name" placeholder.
- Links keep only http, https and mailto targets; anything else is shown unlinked.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from folio.contexts.rendering.dates import format_date_range
from folio.contexts.rendering.images import is_supported_image_ref
from folio.contexts.schema import ResumeDocument, non_blank

PLACEHOLDER_NAME = "Your Name"

LEFT_COLUMN = ("contact", "education", "skills", "languages", "certificates")
MAIN_COLUMN = ("summary", "work", "projects", "volunteer")

SECTION_TITLES = {
    "contact": "Contact",
    "education": "Education",
    "skills": "Skills",
    "languages": "Languages",
    "certificates": "Certificates",
    "summary": "Summary",
    "work": "Experience",
    "projects": "Projects",
    "volunteer": "Volunteering",
}

LINK_SCHEMES = ("http", "https", "mailto")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _link(value: Optional[str]) -> Optional[str]:
    url = _clean(value)
    if url and urlparse(url).scheme.lower() in LINK_SCHEMES:
        return url
    return None


@dataclass(frozen=True)
class LayoutEntry:
    """
    One displayable item of a section, already formatted.

    Attributes:
        title: Main line (position, project name, skill group, language, ...)
        subtitle: Secondary line (employer, institution, organization)
        meta: Small print (location, fluency, issuer, GPA)
        dates: Formatted date range
        description: Free text paragraph
        bullets: Highlight lines
        tags: Keywords
        url: Link target for the title
    """

    title: Optional[str] = None
    subtitle: Optional[str] = None
    meta: Optional[str] = None
    dates: Optional[str] = None
    description: Optional[str] = None
    bullets: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.title
            or self.subtitle
            or self.meta
            or self.dates
            or self.description
            or self.bullets
            or self.tags
        )


@dataclass(frozen=True)
class LayoutSection:
    key: str
    title: str
    column: str
    entries: Tuple[LayoutEntry, ...]


@dataclass(frozen=True)
class LayoutHeader:
    name: str
    label: Optional[str]
    image: Optional[str]
    is_placeholder: bool


@dataclass(frozen=True)
class ResumeLayout:
    """
    Render-ready view of a document.

    Attributes:
        header: Name, label and photo reference
        left: Visible sections of the narrow column, in fixed order
        main: Visible sections of the wide column, in fixed order
    """

    header: LayoutHeader
    left: Tuple[LayoutSection, ...]
    main: Tuple[LayoutSection, ...]

    @property
    def sections(self) -> Tuple[LayoutSection, ...]:
        return self.left + self.main

    @property
    def section_keys(self) -> Tuple[str, ...]:
        return tuple(section.key for section in self.sections)

    def section(self, key: str) -> Optional[LayoutSection]:
        for section in self.sections:
            if section.key == key:
                return section
        return None


# Entry builders, one per section


def _contact_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    basics = document.basics
    entries = []

    email = _clean(basics.email)
    if email:
        entries.append(LayoutEntry(title=email, url=f"mailto:{email}"))

    phone = _clean(basics.phone)
    if phone:
        entries.append(LayoutEntry(title=phone))

    if basics.location:
        place = ", ".join(
            part
            for part in (_clean(basics.location.city), _clean(basics.location.country_code))
            if part
        )
        if place:
            entries.append(LayoutEntry(title=place))

    url = _link(basics.url)
    if url:
        entries.append(LayoutEntry(title="Portfolio", url=url))

    for profile in basics.profiles:
        label = _clean(profile.network) or _clean(profile.username)
        if label:
            entries.append(LayoutEntry(title=label, url=_link(profile.url)))

    return tuple(entries)


def _summary_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    summary = _clean(document.basics.summary)
    return (LayoutEntry(description=summary),) if summary else ()


def _work_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(
            title=_clean(job.position),
            subtitle=_clean(job.name),
            meta=_clean(job.location),
            dates=format_date_range(job.start_date, job.end_date, ongoing=bool(job.is_current_role)),
            description=_clean(job.description) or _clean(job.summary),
            bullets=non_blank(job.highlights),
            url=_link(job.url),
        )
        for job in document.work
    )


def _project_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(
            title=_clean(project.name),
            subtitle=_clean(project.entity),
            meta=", ".join(non_blank(project.roles)) or None,
            dates=format_date_range(project.start_date, project.end_date),
            description=_clean(project.description),
            bullets=non_blank(project.highlights),
            tags=non_blank(project.keywords),
            url=_link(project.url),
        )
        for project in document.projects
    )


def _volunteer_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(
            title=_clean(entry.position),
            subtitle=_clean(entry.organization),
            meta=_clean(entry.location),
            dates=format_date_range(entry.start_date, entry.end_date),
            description=_clean(entry.summary),
            bullets=non_blank(entry.highlights),
            url=_link(entry.url),
        )
        for entry in document.volunteer
    )


def _education_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    entries = []
    for edu in document.education:
        area = _clean(edu.area)
        study_type = _clean(edu.study_type)
        score = _clean(edu.score)
        entries.append(
            LayoutEntry(
                title=area or study_type,
                subtitle=_clean(edu.institution),
                meta=f"GPA: {score}" if score else None,
                dates=format_date_range(edu.start_date, edu.end_date, open_ended=False),
                description=study_type if area else None,
                bullets=non_blank(edu.highlights),
                tags=non_blank(edu.courses),
                url=_link(edu.url),
            )
        )
    return tuple(entries)


def _skill_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(
            title=_clean(group.name),
            meta=_clean(group.level),
            tags=non_blank(group.keywords),
        )
        for group in document.skills
    )


def _language_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(title=_clean(lang.language), meta=_clean(lang.fluency))
        for lang in document.languages
    )


def _certificate_entries(document: ResumeDocument) -> Tuple[LayoutEntry, ...]:
    return tuple(
        LayoutEntry(
            title=_clean(cert.name),
            meta=_clean(cert.issuer),
            dates=_clean(cert.date),
            url=_link(cert.url),
        )
        for cert in document.certificates
    )


SECTION_BUILDERS: Dict[str, Callable[[ResumeDocument], Tuple[LayoutEntry, ...]]] = {
    "contact": _contact_entries,
    "education": _education_entries,
    "skills": _skill_entries,
    "languages": _language_entries,
    "certificates": _certificate_entries,
    "summary": _summary_entries,
    "work": _work_entries,
    "projects": _project_entries,
    "volunteer": _volunteer_entries,
}


def _build_column(document: ResumeDocument, keys: Tuple[str, ...], column: str):
    sections = []
    for key in keys:
        entries = tuple(entry for entry in SECTION_BUILDERS[key](document) if not entry.is_empty)
        if entries:
            sections.append(
                LayoutSection(key=key, title=SECTION_TITLES[key], column=column, entries=entries)
            )
    return tuple(sections)


def build_layout(document: ResumeDocument) -> ResumeLayout:
    """
    Project a document onto the shared two-column layout.

    Args:
        document: Resume document (any fill level, including empty)

    Returns:
        ResumeLayout with only the visible sections
    """
    name = _clean(document.basics.name)
    image = _clean(document.basics.image)

    header = LayoutHeader(
        name=name or PLACEHOLDER_NAME,
        label=_clean(document.basics.label),
        image=image if image and is_supported_image_ref(image) else None,
        is_placeholder=name is None,
    )

    return ResumeLayout(
        header=header,
        left=_build_column(document, LEFT_COLUMN, "left"),
        main=_build_column(document, MAIN_COLUMN, "main"),
    )
