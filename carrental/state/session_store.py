"""
JSON-file persistence for the session context.

The session is loaded once, passed explicitly to controllers, and written
back through ``save``/``update``. A missing or unreadable file yields an
empty session rather than an error.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from carrental.config import settings
from carrental.schemas.session_schema import SessionContext

logger = logging.getLogger(__name__)


class SessionStore:
    """Load/save lifecycle for a single SessionContext file."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path or settings.storage.session_file)

    def load(self) -> SessionContext:
        if not self.path.exists():
            return SessionContext()
        try:
            return SessionContext.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.error("Error loading session from %s: %s", self.path, exc)
            return SessionContext()

    def save(self, context: SessionContext) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(context.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Session saved to %s", self.path)

    def update(self, **changes: Any) -> SessionContext:
        """Apply non-empty changes to the stored session and save it.

        Empty values are ignored so a blank input never wipes a stored id.
        """
        unknown = set(changes) - set(SessionContext.model_fields)
        if unknown:
            raise ValueError(f"Unknown session fields: {sorted(unknown)}")
        applied = {k: v for k, v in changes.items() if v not in (None, "")}
        context = self.load().model_copy(update=applied)
        self.save(context)
        return context

    def clear(self) -> None:
        """Forget the stored session, e.g. on logout."""
        self.path.unlink(missing_ok=True)
        logger.info("Session cleared")
