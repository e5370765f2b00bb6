"""Tagged union for data-fetching concerns: loading, error or ready."""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Literal, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Loading:
    status: Literal["loading"] = "loading"


@dataclass(frozen=True)
class Failed:
    message: str
    status: Literal["error"] = "error"


@dataclass(frozen=True)
class Ready(Generic[T]):
    data: T
    status: Literal["ready"] = "ready"


LoadState = Union[Loading, Failed, Ready]


def load(fetch: Callable[[], T], error_message: str = "Failed to load data.") -> LoadState:
    """Run ``fetch`` and wrap its result, or its failure, in a LoadState.

    Network errors, missing records and malformed records become ``Failed``;
    anything else propagates.
    """
    try:
        return Ready(fetch())
    except (ConnectionError, TimeoutError, LookupError, ValueError) as exc:
        logger.warning("%s %s: %s", error_message, type(exc).__name__, exc)
        return Failed(f"{error_message} Please try again.")
