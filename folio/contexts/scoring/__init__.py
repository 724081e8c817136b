"""
Scoring Context

Responsibilities:
- Computes the ATS completeness score of a resume document
- Explains the score with per-category suggestions
- Loads the configurable rubric and maps totals to presentation bands

Owns: Rubric, score computation, score reports
Never: Modifies documents or performs I/O while scoring
"""

from folio.contexts.scoring.report import format_score_report
from folio.contexts.scoring.rubric import DEFAULT_RUBRIC, ATSRubric, Band, load_rubric
from folio.contexts.scoring.scorer import ATSScore, ScoreCategory, score, score_band

__all__ = [
    "score",
    "score_band",
    "ATSScore",
    "ScoreCategory",
    "ATSRubric",
    "Band",
    "DEFAULT_RUBRIC",
    "load_rubric",
    "format_score_report",
]
