"""Checkout correlation ids on log output.

``CheckoutFlow.submit`` stamps each attempt with an id such as
``CHK-1a2b3c4d``; every record logged while that attempt runs carries it as
``record.checkout_id``, so one booking can be followed from quote through
payment and any compensating deletion.

The filter is installed on handlers rather than loggers, so the shared
``LOG_FORMAT`` can render ``%(checkout_id)s`` for records from any module.
``load_config`` installs it on the root handlers.

Usage:
    handler = logging.StreamHandler()
    attach_checkout_id(handler)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    set_checkout_id("CHK-abc123")
    logging.getLogger(__name__).info("Creating pending booking")
    # ... [carrental.checkout.flow] [CHK-abc123] INFO: Creating pending booking
"""

import logging
from contextvars import ContextVar

NO_CHECKOUT_ID = "-"

LOG_FORMAT = "%(asctime)s [%(name)s] [%(checkout_id)s] %(levelname)s: %(message)s"

_checkout_id: ContextVar[str] = ContextVar("checkout_id", default=NO_CHECKOUT_ID)


def set_checkout_id(checkout_id: str) -> None:
    _checkout_id.set(checkout_id)


def get_checkout_id() -> str:
    return _checkout_id.get()


class CheckoutIdFilter(logging.Filter):
    """Stamps the current checkout id on each record, keeping one already set."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "checkout_id"):
            record.checkout_id = _checkout_id.get()  # type: ignore[attr-defined]
        return True


def attach_checkout_id(handler: logging.Handler) -> logging.Handler:
    """Install a CheckoutIdFilter on ``handler`` once and return the handler."""
    if not any(isinstance(f, CheckoutIdFilter) for f in handler.filters):
        handler.addFilter(CheckoutIdFilter())
    return handler


def get_checkout_logger(name: str) -> logging.Logger:
    """Module logger whose records carry the checkout id even before any
    handler sees them, e.g. for ``caplog`` or third-party handlers."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CheckoutIdFilter) for f in logger.filters):
        logger.addFilter(CheckoutIdFilter())
    return logger
