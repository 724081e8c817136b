"""
ATS rubric configuration.

The thresholds and points of the scoring rubric are plain configuration, typed by the
dataclasses below and loaded with OmegaConf: the packaged rubric.yaml provides the
defaults, and an optional override file (argument or ATS_RUBRIC_PATH) is merged on top.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
DEFAULT_RUBRIC_FILE = Path(__file__).parent / "rubric.yaml"
ATS_RUBRIC_PATH = os.getenv("ATS_RUBRIC_PATH")

TOTAL_POINTS = 100


@dataclass
class Tier:
    threshold: int = 0
    points: int = 0


@dataclass
class Band:
    threshold: int = 0
    label: str = ""
    color: str = ""


@dataclass
class ContactRubric:
    name: str = "Contact Information"
    max_points: int = 0
    name_points: int = 0
    name_min_length: int = 0
    email_points: int = 0
    phone_points: int = 0
    city_points: int = 0
    linkedin_points: int = 0
    linkedin_network: str = ""


@dataclass
class SummaryRubric:
    name: str = "Professional Summary"
    max_points: int = 0
    length_tiers: List[Tier] = field(default_factory=list)
    expand_below: int = 0


@dataclass
class WorkRubric:
    name: str = "Work Experience"
    max_points: int = 0
    count_tiers: List[Tier] = field(default_factory=list)
    min_highlights: int = 0
    highlight_tiers: List[Tier] = field(default_factory=list)
    dates_points: int = 0


@dataclass
class EducationRubric:
    name: str = "Education"
    max_points: int = 0
    present_points: int = 0
    complete_points: int = 0


@dataclass
class SkillsRubric:
    name: str = "Skills"
    max_points: int = 0
    count_tiers: List[Tier] = field(default_factory=list)
    min_keywords: int = 0
    keyword_tiers: List[Tier] = field(default_factory=list)


@dataclass
class ATSRubric:
    contact: ContactRubric = field(default_factory=ContactRubric)
    summary: SummaryRubric = field(default_factory=SummaryRubric)
    work: WorkRubric = field(default_factory=WorkRubric)
    education: EducationRubric = field(default_factory=EducationRubric)
    skills: SkillsRubric = field(default_factory=SkillsRubric)
    bands: List[Band] = field(default_factory=list)


def tier_points(value: int, tiers: Sequence[Tier]) -> int:
    """Points of the highest tier whose threshold value reaches, or 0."""
    for tier in sorted(tiers, key=lambda t: t.threshold, reverse=True):
        if value >= tier.threshold:
            return tier.points
    return 0


def _max_tier(tiers: Sequence[Tier]) -> int:
    return max((tier.points for tier in tiers), default=0)


def validate_rubric(rubric: ATSRubric) -> None:
    """
    Check that no category can exceed its maximum and that maxima sum to 100.

    Raises:
        ValueError: If the rubric is inconsistent
    """
    contact = rubric.contact
    reachable = {
        contact.name: contact.name_points
        + contact.email_points
        + contact.phone_points
        + contact.city_points
        + contact.linkedin_points,
        rubric.summary.name: _max_tier(rubric.summary.length_tiers),
        rubric.work.name: _max_tier(rubric.work.count_tiers)
        + _max_tier(rubric.work.highlight_tiers)
        + rubric.work.dates_points,
        rubric.education.name: rubric.education.present_points + rubric.education.complete_points,
        rubric.skills.name: _max_tier(rubric.skills.count_tiers)
        + _max_tier(rubric.skills.keyword_tiers),
    }
    maxima = {
        contact.name: contact.max_points,
        rubric.summary.name: rubric.summary.max_points,
        rubric.work.name: rubric.work.max_points,
        rubric.education.name: rubric.education.max_points,
        rubric.skills.name: rubric.skills.max_points,
    }

    for category, points in reachable.items():
        if points > maxima[category]:
            raise ValueError(
                f"Rubric category '{category}' can award {points} points "
                f"but its maximum is {maxima[category]}"
            )

    if sum(maxima.values()) != TOTAL_POINTS:
        raise ValueError(
            f"Rubric category maxima sum to {sum(maxima.values())}, expected {TOTAL_POINTS}"
        )


def load_rubric(path: Optional[Union[str, Path]] = None) -> ATSRubric:
    """
    Load the ATS rubric, merging an optional override file over the defaults.

    Args:
        path: YAML file with any subset of rubric keys (default: ATS_RUBRIC_PATH, if set)

    Returns:
        Validated ATSRubric

    Raises:
        FileNotFoundError: If the override file does not exist
        ValueError: If the merged rubric is inconsistent

    Example:
        # custom_rubric.yaml
        # work:
        #   min_highlights: 3
        rubric = load_rubric("custom_rubric.yaml")
    """
    schema = OmegaConf.structured(ATSRubric)
    config = OmegaConf.merge(schema, OmegaConf.load(DEFAULT_RUBRIC_FILE))

    path = path or ATS_RUBRIC_PATH
    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rubric file not found: {path}")
        config = OmegaConf.merge(config, OmegaConf.load(path))

    rubric = OmegaConf.to_object(config)
    validate_rubric(rubric)
    return rubric


DEFAULT_RUBRIC = load_rubric()
