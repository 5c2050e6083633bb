"""
Branch taxonomy resolver.

Companies and students spell academic branches inconsistently ("CSE",
"B.Tech CSE", "Computer Science and Engineering"). This module maps free
text onto a small set of canonical categories through alias lookup.

Matching is plain substring containment on lower-cased, trimmed text:
a category matches when one of its aliases occurs in the input, or when
the canonical name and the input contain one another.
"""

from typing import Mapping, Optional

from uniplace.utils.constants import BRANCH_ALIASES


def _normalize(raw_branch: Optional[str]) -> str:
    return (raw_branch or "").strip().lower()


class BranchTaxonomy:
    """Alias lookup over an ordered category table."""

    def __init__(self, aliases: Mapping[str, tuple[str, ...]] = BRANCH_ALIASES):
        # (canonical, lower-cased canonical, aliases) in declaration order
        self._entries = tuple(
            (name, name.lower(), tuple(a.lower() for a in names))
            for name, names in aliases.items()
        )

    @property
    def categories(self) -> list[str]:
        return [name for name, _, _ in self._entries]

    def classify(self, raw_branch: Optional[str]) -> Optional[str]:
        """
        Resolve a branch string to its canonical category.

        Returns the first matching category in declaration order, or None
        when nothing matches. Blank input never matches.
        """
        text = _normalize(raw_branch)
        if not text:
            return None
        for name, key, aliases in self._entries:
            if key in text or text in key or any(alias in text for alias in aliases):
                return name
        return None

    def categories_for(self, raw_branch: Optional[str]) -> set[str]:
        """
        Every category whose alias set the branch string belongs to.

        Unlike classify() this reports all matches, not only the first.
        """
        text = _normalize(raw_branch)
        if not text:
            return set()
        return {
            name
            for name, key, aliases in self._entries
            if key in text or any(alias in text for alias in aliases)
        }

    def share_category(self, first: Optional[str], second: Optional[str]) -> bool:
        """Check whether two branch strings resolve to a common category."""
        return bool(self.categories_for(first) & self.categories_for(second))


# Default taxonomy over the shared alias table
_default_taxonomy = BranchTaxonomy()


def get_branch_taxonomy() -> BranchTaxonomy:
    """Get the taxonomy built on the canonical alias table."""
    return _default_taxonomy


def classify(raw_branch: Optional[str]) -> Optional[str]:
    """Resolve a branch string with the default taxonomy."""
    return _default_taxonomy.classify(raw_branch)


def categories_for(raw_branch: Optional[str]) -> set[str]:
    return _default_taxonomy.categories_for(raw_branch)


def share_category(first: Optional[str], second: Optional[str]) -> bool:
    return _default_taxonomy.share_category(first, second)
