"""
Actor authorization for posting and application management.

Identity is established elsewhere; this only answers whether an already
identified actor may manage a given posting.
"""

from typing import Any, Iterable, Optional

from bson import ObjectId

from uniplace.utils.config import get_settings


class Authorizer:
    """
    Answers ownership and admin questions for recruiter actions.

    Ownership is read from the posting store on every call, so a change of
    owner takes effect immediately.
    """

    def __init__(self, postings: Any, admin_ids: Optional[Iterable[str]] = None):
        self._postings = postings
        if admin_ids is None:
            admin_ids = get_settings().auth.admin_ids
        self._admin_ids = frozenset(str(admin_id) for admin_id in admin_ids)

    def is_admin(self, actor_id: str | ObjectId) -> bool:
        return str(actor_id) in self._admin_ids

    def is_owner(self, actor_id: str | ObjectId, posting_id: str | ObjectId) -> bool:
        posting = self._postings.get_by_id(posting_id)
        return posting is not None and str(posting.company_id) == str(actor_id)

    def can_manage(self, actor_id: str | ObjectId, posting_id: str | ObjectId) -> bool:
        """Owner of the posting or an admin."""
        return self.is_admin(actor_id) or self.is_owner(actor_id, posting_id)
