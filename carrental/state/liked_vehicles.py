"""
Per-user liked vehicles with change subscriptions.

Independent of any UI framework: views subscribe a callback and are told
the user's full liked list after every toggle.

Usage:
    store = LikedVehicleStore()
    unsubscribe = store.subscribe(lambda user_id, liked: print(user_id, liked))
    store.toggle("user-1", "veh-corolla-01")  # -> True
    unsubscribe()
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

Listener = Callable[[str, list[str]], None]

_LIKES_ADAPTER = TypeAdapter(dict[str, list[str]])


class LikedVehicleStore:
    """Liked vehicle ids keyed by user id, optionally persisted to JSON."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self._path = Path(path) if path else None
        self._liked: dict[str, list[str]] = {}
        self._listeners: list[Listener] = []
        if self._path is not None:
            self._load()

    def toggle(self, user_id: str, vehicle_id: str) -> bool:
        """Like or unlike a vehicle. Returns True if it is now liked."""
        liked = self._liked.setdefault(user_id, [])
        if vehicle_id in liked:
            liked.remove(vehicle_id)
            now_liked = False
        else:
            liked.append(vehicle_id)
            now_liked = True
        self._save()
        self._notify(user_id)
        return now_liked

    def contains(self, user_id: str, vehicle_id: str) -> bool:
        return vehicle_id in self._liked.get(user_id, [])

    def liked(self, user_id: str) -> list[str]:
        return list(self._liked.get(user_id, []))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return its unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, user_id: str) -> None:
        snapshot = self.liked(user_id)
        for listener in list(self._listeners):
            listener(user_id, snapshot)

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            self._liked = _LIKES_ADAPTER.validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.error("Error loading liked vehicles from %s: %s", self._path, exc)
            self._liked = {}

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._liked, indent=2), encoding="utf-8")
