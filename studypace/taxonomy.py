"""
Closed category taxonomy and label normalization.

Raw labels in the quiz tables carry an enumeration prefix: categories look like
"A. Behaviorism and Philosophical Foundations" and subcategories like
"A.1. Identify the goals of behavior analysis". Grouping always happens on the
normalized (prefix-free) names.
"""
import logging
import re
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

CATEGORY_PREFIX = re.compile(r"^[A-Z]\.\s*")
SUBCATEGORY_PREFIX = re.compile(r"^[A-Z]\.\d+\.\s*")


class Category(str, Enum):
    """The nine top-level exam domains."""

    BEHAVIORISM = "Behaviorism and Philosophical Foundations"
    CONCEPTS = "Concepts and Principles"
    MEASUREMENT = "Measurement, Data Display, and Interpretation"
    EXPERIMENTAL_DESIGN = "Experimental Design"
    ETHICS = "Ethical and Professional Issues"
    ASSESSMENT = "Behavior Assessment"
    BEHAVIOR_CHANGE = "Behavior-Change Procedures"
    INTERVENTIONS = "Selecting and Implementing Interventions"
    SUPERVISION = "Personnel Supervision and Management"


CATEGORY_NAMES = tuple(c.value for c in Category)


def normalize_category(label: Optional[str]) -> str:
    """Strip a leading "A. " style prefix."""
    return CATEGORY_PREFIX.sub("", (label or "").strip())


def normalize_subcategory(label: Optional[str]) -> str:
    """Strip a leading "A.1. " style prefix."""
    return SUBCATEGORY_PREFIX.sub("", (label or "").strip())


def parse_category(label: Optional[str]) -> Optional[Category]:
    """Map a raw or normalized label onto the taxonomy, None when it is not a member."""
    name = normalize_category(label)
    try:
        return Category(name)
    except ValueError:
        return None


def accept_category(label: Optional[str], strict: bool = True) -> Optional[str]:
    """
    Normalized category name to group under, or None if the record must be ignored.

    In strict mode labels outside the taxonomy are dropped (and logged); otherwise
    any non-empty normalized label is accepted.
    """
    name = normalize_category(label)
    if not name:
        logger.warning("Ignoring record with empty category label")
        return None
    if strict and parse_category(name) is None:
        logger.warning(f"Ignoring record outside the category taxonomy: {label!r}")
        return None
    return name
