"""Branch taxonomy and eligibility rules."""

from .branch_taxonomy import (
    BranchTaxonomy,
    categories_for,
    classify,
    get_branch_taxonomy,
    share_category,
)
from .evaluator import (
    BRANCH_NOT_ELIGIBLE,
    EligibilityEvaluator,
    EligibilityVerdict,
    format_cgpa,
    get_eligibility_evaluator,
)

__all__ = [
    "BranchTaxonomy",
    "categories_for",
    "classify",
    "get_branch_taxonomy",
    "share_category",
    "BRANCH_NOT_ELIGIBLE",
    "EligibilityEvaluator",
    "EligibilityVerdict",
    "format_cgpa",
    "get_eligibility_evaluator",
]
