from carrental.state.liked_vehicles import LikedVehicleStore
from carrental.state.load_state import Failed, LoadState, Loading, Ready, load
from carrental.state.session_store import SessionStore

__all__ = [
    "LikedVehicleStore",
    "SessionStore",
    "LoadState",
    "Loading",
    "Failed",
    "Ready",
    "load",
]
