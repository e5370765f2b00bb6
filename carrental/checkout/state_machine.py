"""
Finite state machine for the checkout lifecycle.

A checkout moves from a draft request through quoting, a pending booking
and payment to either a confirmed booking or a cancelled/failed attempt.
Cancelled and failed checkouts can be retried from a fresh draft.

Usage:
    sm = CheckoutStateMachine()
    sm.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)
    assert sm.current_state == CheckoutState.QUOTED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    """All possible states of a checkout attempt."""
    DRAFT = "draft"
    QUOTED = "quoted"
    UNAVAILABLE = "unavailable"
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class CheckoutTrigger(str, Enum):
    """Events that cause state transitions."""
    QUOTE_ADMISSIBLE = "quote_admissible"
    QUOTE_INADMISSIBLE = "quote_inadmissible"
    REQUOTE = "requote"
    BOOKING_CREATED = "booking_created"
    BOOKING_REJECTED = "booking_rejected"
    PAYMENT_INTENT_CREATED = "payment_intent_created"
    PAYMENT_SETUP_FAILED = "payment_setup_failed"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    PAYMENT_CANCELLED = "payment_cancelled"
    PAYMENT_FAILED = "payment_failed"
    CONFIRMATION_FAILED = "confirmation_failed"
    RETRY = "retry"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: CheckoutState
    to_state: CheckoutState
    trigger: CheckoutTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: CheckoutState
    entered_at: datetime
    trigger: Optional[CheckoutTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class CheckoutStateMachine:
    """Deterministic state machine controlling one checkout attempt."""

    TRANSITIONS: list[Transition] = [
        # --- Quoting ---
        Transition(CheckoutState.DRAFT, CheckoutState.QUOTED,
                   CheckoutTrigger.QUOTE_ADMISSIBLE),
        Transition(CheckoutState.DRAFT, CheckoutState.UNAVAILABLE,
                   CheckoutTrigger.QUOTE_INADMISSIBLE),
        Transition(CheckoutState.QUOTED, CheckoutState.DRAFT,
                   CheckoutTrigger.REQUOTE),
        Transition(CheckoutState.UNAVAILABLE, CheckoutState.DRAFT,
                   CheckoutTrigger.REQUOTE),

        # --- Booking submission ---
        Transition(CheckoutState.QUOTED, CheckoutState.PENDING,
                   CheckoutTrigger.BOOKING_CREATED),
        Transition(CheckoutState.QUOTED, CheckoutState.FAILED,
                   CheckoutTrigger.BOOKING_REJECTED),

        # --- Payment setup ---
        Transition(CheckoutState.PENDING, CheckoutState.AWAITING_PAYMENT,
                   CheckoutTrigger.PAYMENT_INTENT_CREATED),
        Transition(CheckoutState.PENDING, CheckoutState.FAILED,
                   CheckoutTrigger.PAYMENT_SETUP_FAILED),

        # --- Payment result ---
        Transition(CheckoutState.AWAITING_PAYMENT, CheckoutState.CONFIRMED,
                   CheckoutTrigger.PAYMENT_SUCCEEDED),
        Transition(CheckoutState.AWAITING_PAYMENT, CheckoutState.CANCELLED,
                   CheckoutTrigger.PAYMENT_CANCELLED),
        Transition(CheckoutState.AWAITING_PAYMENT, CheckoutState.FAILED,
                   CheckoutTrigger.PAYMENT_FAILED),
        Transition(CheckoutState.AWAITING_PAYMENT, CheckoutState.FAILED,
                   CheckoutTrigger.CONFIRMATION_FAILED),

        # --- Retry ---
        Transition(CheckoutState.CANCELLED, CheckoutState.DRAFT,
                   CheckoutTrigger.RETRY),
        Transition(CheckoutState.FAILED, CheckoutState.DRAFT,
                   CheckoutTrigger.RETRY),
    ]

    def __init__(self) -> None:
        self._current_state = CheckoutState.DRAFT
        self._history: list[StateEntry] = [
            StateEntry(state=CheckoutState.DRAFT, entered_at=datetime.now(timezone.utc))
        ]
        self._failure_count: int = 0

    @property
    def current_state(self) -> CheckoutState:
        return self._current_state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def transition(self, trigger: CheckoutTrigger) -> CheckoutState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new checkout state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state

                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                if t.to_state == CheckoutState.FAILED:
                    self._failure_count += 1

                logger.debug(
                    "Checkout transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[CheckoutTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        """A confirmed booking cannot be retried or re-quoted."""
        return self._current_state == CheckoutState.CONFIRMED
