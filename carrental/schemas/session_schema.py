"""Per-user session context shared by screen-level controllers."""

from typing import Optional

from pydantic import BaseModel


class SessionContext(BaseModel):
    """
    Explicit session state loaded once and injected where needed.

    Replaces scattered key/value storage reads (city, user id, company id)
    with a single object that has a well-defined load/save lifecycle,
    see ``carrental.state.session_store``.
    """
    user_id: Optional[str] = None
    company_id: Optional[str] = None
    city: str = ""
    user_name: str = ""
    notification_preference: Optional[str] = None

    @property
    def is_logged_in(self) -> bool:
        return bool(self.user_id)
