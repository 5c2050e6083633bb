"""
Eligibility evaluator.

Decides whether a student may apply to a posting. Checks run in order and
the first failure wins:

1. CGPA: the student's CGPA (missing counts as 0) must reach the posting's
   minimum.
2. Branch: a posting with no listed branches is open to everyone. Otherwise
   some listed branch must either contain, or be contained in, the
   student's branch (case-insensitive), or share a canonical category with
   it through the branch taxonomy.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from uniplace.data.models import Posting, Student
from uniplace.utils.logger import get_logger

from .branch_taxonomy import BranchTaxonomy, get_branch_taxonomy

logger = get_logger(__name__)

BRANCH_NOT_ELIGIBLE = "Branch not eligible"


@dataclass(frozen=True)
class EligibilityVerdict:
    """Outcome of checking one student against one posting."""

    eligible: bool
    reason: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"eligible": self.eligible, "reason": self.reason}


def format_cgpa(value: float) -> str:
    """Render a CGPA threshold without a trailing '.0'."""
    return f"{value:g}"


class EligibilityEvaluator:
    """
    Pure rule evaluation of a (student, posting) pair.

    Holds no state besides the taxonomy, so one instance can be shared.
    """

    def __init__(self, taxonomy: Optional[BranchTaxonomy] = None):
        self.taxonomy = taxonomy or get_branch_taxonomy()

    def evaluate(self, student: Student, posting: Posting) -> EligibilityVerdict:
        """
        Check a student against a posting's eligibility criteria.

        Args:
            student: Student profile as it is right now
            posting: Posting carrying min_cgpa and eligible_branches

        Returns:
            EligibilityVerdict with the failing reason when ineligible
        """
        cgpa = student.cgpa or 0.0
        if cgpa < posting.min_cgpa:
            verdict = EligibilityVerdict(
                False, f"Requires {format_cgpa(posting.min_cgpa)}+ CGPA"
            )
        elif not self.branch_matches(student.branch, posting.eligible_branches):
            verdict = EligibilityVerdict(False, BRANCH_NOT_ELIGIBLE)
        else:
            verdict = EligibilityVerdict(True)

        logger.debug(
            f"Eligibility student={student.id} posting={posting.id}: "
            f"{verdict.eligible} {verdict.reason}".rstrip()
        )
        return verdict

    def branch_matches(self, student_branch: str, eligible_branches: list[str]) -> bool:
        """Check the branch rule alone."""
        if not eligible_branches:
            return True

        student_text = (student_branch or "").strip().lower()
        for branch in eligible_branches:
            branch_text = branch.strip().lower()
            if not branch_text:
                continue
            # A blank student branch contains nothing
            if student_text and (branch_text in student_text or student_text in branch_text):
                return True
            if self.taxonomy.share_category(branch_text, student_text):
                return True
        return False

    def filter_eligible(
        self, student: Student, postings: Iterable[Posting]
    ) -> Iterator[Posting]:
        """Yield the active postings the student is eligible for."""
        for posting in postings:
            if posting.is_active and self.evaluate(student, posting).eligible:
                yield posting


# Singleton instance
_evaluator: Optional[EligibilityEvaluator] = None


def get_eligibility_evaluator() -> EligibilityEvaluator:
    """Get the shared eligibility evaluator."""
    global _evaluator
    if _evaluator is None:
        _evaluator = EligibilityEvaluator()
    return _evaluator
