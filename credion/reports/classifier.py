"""Maps free-form report type strings onto a (category, subtype) pair.

The pair is what the report cache keys on and what reports are tagged with,
so the same string must always classify the same way.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from credion.reports.models import ReportCategory, AsicSubtype

logger = logging.getLogger(__name__)

# Checked in order; first substring found wins.
_ASIC_SUBTYPES = (
    ("historical", AsicSubtype.HISTORICAL),
    ("current", AsicSubtype.CURRENT),
    ("company", AsicSubtype.COMPANY),
    ("personal", AsicSubtype.PERSONAL),
    ("document", AsicSubtype.DOCUMENT_SEARCH),
)

_DIRECTOR_CATEGORIES = (
    ("ppsr", ReportCategory.DIRECTOR_PPSR),
    ("bankruptcy", ReportCategory.DIRECTOR_BANKRUPTCY),
    ("property", ReportCategory.DIRECTOR_PROPERTY),
    ("related", ReportCategory.DIRECTOR_RELATED),
)

_SIMPLE_CATEGORIES = (
    ("court", ReportCategory.COURT),
    ("ato", ReportCategory.ATO),
    ("land", ReportCategory.LAND_TITLE),
)

_PLAIN_CATEGORIES = (
    ("ppsr", ReportCategory.PPSR),
    ("property", ReportCategory.PROPERTY),
)


@dataclass(frozen=True)
class ReportClassification:
    category: Optional[str]
    subtype: Optional[str] = None
    recognised: bool = True


def classify(raw_type: Optional[str]) -> ReportClassification:
    """Classify a requested report type. Never raises."""
    raw = raw_type if isinstance(raw_type, str) else ("" if raw_type is None else str(raw_type))
    lowered = raw.lower()

    if "asic" in lowered:
        for needle, subtype in _ASIC_SUBTYPES:
            if needle in lowered:
                return ReportClassification(ReportCategory.ASIC.value, subtype.value)
        return ReportClassification(ReportCategory.ASIC.value, AsicSubtype.CURRENT.value)

    for needle, category in _SIMPLE_CATEGORIES:
        if needle in lowered:
            return ReportClassification(category.value)

    # Must run before the plain "ppsr"/"property" checks below.
    if "director" in lowered:
        for needle, category in _DIRECTOR_CATEGORIES:
            if needle in lowered:
                return ReportClassification(category.value)
        logger.warning(f"Director report type {raw!r} has no recognised qualifier; category left unset")
        return ReportClassification(None, recognised=False)

    for needle, category in _PLAIN_CATEGORIES:
        if needle in lowered:
            return ReportClassification(category.value)

    logger.warning(f"Unrecognised report type {raw!r}; falling back to its uppercased form")
    return ReportClassification(raw.upper(), recognised=False)
