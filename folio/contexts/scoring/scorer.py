"""
ATS Scoring Engine

Scores how complete a resume looks to applicant tracking systems and explains the
score with per-category suggestions.

score() is a pure function: it reads only the document and the rubric, performs no
I/O, and returns the same result for the same input. It never fails on a valid
document; a document with nothing filled in scores 0 with every suggestion listed.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

from folio.contexts.schema import ResumeDocument
from folio.contexts.scoring.rubric import DEFAULT_RUBRIC, ATSRubric, Band, tier_points

# Suggestion texts, in the order they are checked within each category
SUGGEST_NAME = "Add your full name"
SUGGEST_EMAIL = "Add your email address"
SUGGEST_PHONE = "Add your phone number"
SUGGEST_CITY = "Add your city/location"
SUGGEST_LINKEDIN = "Add your LinkedIn profile"
SUGGEST_EXPAND_SUMMARY = "Expand your summary to 100-200 characters"
SUGGEST_ADD_SUMMARY = "Add a professional summary (2-3 sentences)"
SUGGEST_ADD_WORK = "Add at least 2-3 work experiences"
SUGGEST_WORK_HIGHLIGHTS = "Add 2-3 achievements per work experience"
SUGGEST_WORK_DATES = "Add dates to all work experiences"
SUGGEST_COMPLETE_EDUCATION = "Complete institution, degree type, and field of study"
SUGGEST_ADD_EDUCATION = "Add your education background"
SUGGEST_ADD_SKILLS = "Add at least 3-4 skill categories"
SUGGEST_SKILL_KEYWORDS = "Add 3+ keywords per skill category"


@dataclass(frozen=True)
class ScoreCategory:
    """
    Score of one rubric category.

    Attributes:
        name: Category label (e.g. "Work Experience")
        max_points: Points available in this category
        score: Points awarded (0..max_points)
        suggestions: Actionable hints, one per missed check
    """

    name: str
    max_points: int
    score: int
    suggestions: Tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return self.score == self.max_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "maxPoints": self.max_points,
            "score": self.score,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class ATSScore:
    """
    Full ATS score of a document.

    Attributes:
        total: Sum of category scores, 0..100
        categories: Category results in rubric order
        bands: Presentation bands used by the band property
    """

    total: int
    categories: Tuple[ScoreCategory, ...]
    bands: Tuple[Band, ...] = ()

    @property
    def band(self) -> Band:
        return score_band(self.total, self.bands or DEFAULT_RUBRIC.bands)

    @property
    def all_suggestions(self) -> List[str]:
        return [s for category in self.categories for s in category.suggestions]

    def category(self, name: str) -> ScoreCategory:
        for category in self.categories:
            if category.name == name:
                return category
        raise KeyError(name)

    def to_dict(self, include_band: bool = False) -> Dict[str, Any]:
        result = {
            "total": self.total,
            "categories": [category.to_dict() for category in self.categories],
        }
        if include_band:
            band = self.band
            result["band"] = {"label": band.label, "color": band.color}
        return result


def score_band(total: int, bands=None) -> Band:
    """
    Presentation band for a total score.

    Defaults: >=80 Excellent (green), >=60 Good (yellow), >=40 Fair (orange),
    otherwise Needs Work (red).
    """
    bands = bands or DEFAULT_RUBRIC.bands
    ordered = sorted(bands, key=lambda b: b.threshold, reverse=True)
    for band in ordered:
        if total >= band.threshold:
            return band
    return ordered[-1]


def _category(name: str, max_points: int, points: int, suggestions: List[str]) -> ScoreCategory:
    return ScoreCategory(
        name=name,
        max_points=max_points,
        score=max(0, min(points, max_points)),
        suggestions=tuple(suggestions),
    )


def _score_contact(document: ResumeDocument, rubric: ATSRubric) -> ScoreCategory:
    r = rubric.contact
    basics = document.basics
    points = 0
    suggestions = []

    # Presence checks are plain truthiness: "" is missing, whitespace is not
    if basics.name and len(basics.name) >= r.name_min_length:
        points += r.name_points
    else:
        suggestions.append(SUGGEST_NAME)

    if basics.email:
        points += r.email_points
    else:
        suggestions.append(SUGGEST_EMAIL)

    if basics.phone:
        points += r.phone_points
    else:
        suggestions.append(SUGGEST_PHONE)

    if basics.location and basics.location.city:
        points += r.city_points
    else:
        suggestions.append(SUGGEST_CITY)

    if any(profile.network == r.linkedin_network for profile in basics.profiles):
        points += r.linkedin_points
    else:
        suggestions.append(SUGGEST_LINKEDIN)

    return _category(r.name, r.max_points, points, suggestions)


def _score_summary(document: ResumeDocument, rubric: ATSRubric) -> ScoreCategory:
    r = rubric.summary
    summary = document.basics.summary
    suggestions = []

    if summary:
        points = tier_points(len(summary), r.length_tiers)
        if len(summary) < r.expand_below:
            suggestions.append(SUGGEST_EXPAND_SUMMARY)
    else:
        points = 0
        suggestions.append(SUGGEST_ADD_SUMMARY)

    return _category(r.name, r.max_points, points, suggestions)


def _score_work(document: ResumeDocument, rubric: ATSRubric) -> ScoreCategory:
    r = rubric.work
    work = document.work
    suggestions = []

    points = tier_points(len(work), r.count_tiers)
    if not work:
        suggestions.append(SUGGEST_ADD_WORK)

    with_highlights = [
        entry for entry in work if len([h for h in entry.highlights if h]) >= r.min_highlights
    ]
    highlight_points = tier_points(len(with_highlights), r.highlight_tiers)
    points += highlight_points
    if highlight_points == 0:
        suggestions.append(SUGGEST_WORK_HIGHLIGHTS)

    if work:
        if all(entry.start_date for entry in work):
            points += r.dates_points
        else:
            suggestions.append(SUGGEST_WORK_DATES)

    return _category(r.name, r.max_points, points, suggestions)


def _score_education(document: ResumeDocument, rubric: ATSRubric) -> ScoreCategory:
    r = rubric.education
    education = document.education
    points = 0
    suggestions = []

    if education:
        points += r.present_points
        if any(entry.institution and entry.study_type and entry.area for entry in education):
            points += r.complete_points
        else:
            suggestions.append(SUGGEST_COMPLETE_EDUCATION)
    else:
        suggestions.append(SUGGEST_ADD_EDUCATION)

    return _category(r.name, r.max_points, points, suggestions)


def _score_skills(document: ResumeDocument, rubric: ATSRubric) -> ScoreCategory:
    r = rubric.skills
    skills = document.skills
    suggestions = []

    points = tier_points(len(skills), r.count_tiers)
    if not skills:
        suggestions.append(SUGGEST_ADD_SKILLS)
    else:
        with_keywords = [group for group in skills if len(group.keywords) >= r.min_keywords]
        keyword_points = tier_points(len(with_keywords), r.keyword_tiers)
        points += keyword_points
        if keyword_points == 0:
            suggestions.append(SUGGEST_SKILL_KEYWORDS)

    return _category(r.name, r.max_points, points, suggestions)


CATEGORY_SCORERS = (
    _score_contact,
    _score_summary,
    _score_work,
    _score_education,
    _score_skills,
)


def score(
    document: Union[ResumeDocument, Mapping[str, Any]], rubric: ATSRubric = None
) -> ATSScore:
    """
    Score a resume document against the ATS rubric.

    Args:
        document: ResumeDocument, or a JSON Resume mapping (parsed first)
        rubric: Rubric to apply (default: DEFAULT_RUBRIC)

    Returns:
        ATSScore with total (0..100) and the five categories in fixed order:
        Contact Information, Professional Summary, Work Experience, Education, Skills

    Raises:
        DocumentValidationError: Only if a raw mapping has a malformed shape
    """
    rubric = rubric or DEFAULT_RUBRIC
    if not isinstance(document, ResumeDocument):
        document = ResumeDocument.from_dict(document)

    categories = tuple(scorer(document, rubric) for scorer in CATEGORY_SCORERS)
    total = sum(category.score for category in categories)

    return ATSScore(total=total, categories=categories, bands=tuple(rubric.bands))
