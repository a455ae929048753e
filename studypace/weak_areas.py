"""Weak-area ranking: subcategories below the mastery threshold, weakest first."""
import logging
from typing import Iterable, List

from engine import MASTERY_THRESHOLD
from studypace.models import SubdomainProgressRecord, WeakArea
from studypace.taxonomy import accept_category, normalize_category, normalize_subcategory

logger = logging.getLogger(__name__)


def weak_area_label(main_category: str, subcategory: str) -> str:
    """Display name used in the pacing guide, e.g. "Experimental Design - Reversal designs"."""
    return f"{normalize_category(main_category)} - {normalize_subcategory(subcategory)}"


def rank_weak_areas(
    progress: Iterable[SubdomainProgressRecord],
    threshold: float = MASTERY_THRESHOLD,
    strict_taxonomy: bool = True,
) -> List[WeakArea]:
    """
    Rank subcategories that have not reached mastery.

    Uses the externally tracked current_accuracy, not the attempt rollup.
    Entries at or above `threshold` are dropped, as are rows outside the
    category taxonomy when `strict_taxonomy` is set; the rest are sorted
    ascending by accuracy (stable for ties).
    """
    weak = [
        WeakArea(name=weak_area_label(p.main_category, p.subcategory), percentage=p.current_accuracy)
        for p in progress
        if p.current_accuracy < threshold
        and accept_category(p.main_category, strict=strict_taxonomy) is not None
    ]
    weak.sort(key=lambda w: w.percentage)
    logger.debug(f"{len(weak)} weak areas below {threshold}%")
    return weak
