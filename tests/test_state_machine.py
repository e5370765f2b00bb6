"""Tests for the checkout state machine."""

import pytest

from carrental.checkout.state_machine import (
    CheckoutState,
    CheckoutStateMachine,
    CheckoutTrigger,
    InvalidTransitionError,
)


def _to_awaiting_payment(sm: CheckoutStateMachine) -> None:
    sm.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)
    sm.transition(CheckoutTrigger.BOOKING_CREATED)
    sm.transition(CheckoutTrigger.PAYMENT_INTENT_CREATED)


class TestInitialState:
    def test_starts_in_draft(self, state_machine):
        assert state_machine.current_state == CheckoutState.DRAFT

    def test_initial_history_has_one_entry(self, state_machine):
        assert len(state_machine.get_history()) == 1

    def test_initial_failure_count_is_zero(self, state_machine):
        assert state_machine.failure_count == 0

    def test_not_terminal_at_start(self, state_machine):
        assert not state_machine.is_terminal()


class TestQuoting:
    def test_admissible_quote(self, state_machine):
        assert state_machine.transition(CheckoutTrigger.QUOTE_ADMISSIBLE) == CheckoutState.QUOTED

    def test_inadmissible_quote(self, state_machine):
        assert state_machine.transition(CheckoutTrigger.QUOTE_INADMISSIBLE) == CheckoutState.UNAVAILABLE

    def test_requote_from_unavailable(self, state_machine):
        state_machine.transition(CheckoutTrigger.QUOTE_INADMISSIBLE)
        assert state_machine.transition(CheckoutTrigger.REQUOTE) == CheckoutState.DRAFT

    def test_cannot_book_without_quote(self, state_machine):
        with pytest.raises(InvalidTransitionError, match="Valid triggers"):
            state_machine.transition(CheckoutTrigger.BOOKING_CREATED)

    def test_cannot_book_when_unavailable(self, state_machine):
        state_machine.transition(CheckoutTrigger.QUOTE_INADMISSIBLE)
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(CheckoutTrigger.BOOKING_CREATED)


class TestPayment:
    def test_happy_path(self, state_machine):
        _to_awaiting_payment(state_machine)
        assert state_machine.transition(CheckoutTrigger.PAYMENT_SUCCEEDED) == CheckoutState.CONFIRMED
        assert state_machine.is_terminal()
        assert state_machine.get_state_trace() == [
            "draft", "quoted", "pending", "awaiting_payment", "confirmed",
        ]

    def test_cancelled(self, state_machine):
        _to_awaiting_payment(state_machine)
        assert state_machine.transition(CheckoutTrigger.PAYMENT_CANCELLED) == CheckoutState.CANCELLED
        assert state_machine.failure_count == 0

    def test_failed_counts(self, state_machine):
        _to_awaiting_payment(state_machine)
        state_machine.transition(CheckoutTrigger.PAYMENT_FAILED)
        assert state_machine.current_state == CheckoutState.FAILED
        assert state_machine.failure_count == 1

    def test_setup_failure_from_pending(self, state_machine):
        state_machine.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)
        state_machine.transition(CheckoutTrigger.BOOKING_CREATED)
        assert state_machine.transition(CheckoutTrigger.PAYMENT_SETUP_FAILED) == CheckoutState.FAILED

    def test_retry_after_failure(self, state_machine):
        state_machine.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)
        state_machine.transition(CheckoutTrigger.BOOKING_REJECTED)
        assert state_machine.transition(CheckoutTrigger.RETRY) == CheckoutState.DRAFT

    def test_confirmed_is_final(self, state_machine):
        _to_awaiting_payment(state_machine)
        state_machine.transition(CheckoutTrigger.PAYMENT_SUCCEEDED)
        assert state_machine.get_valid_triggers() == []
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(CheckoutTrigger.RETRY)


class TestHistory:
    def test_history_records_triggers(self, state_machine):
        state_machine.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)
        history = state_machine.get_history()
        assert history[-1].trigger == CheckoutTrigger.QUOTE_ADMISSIBLE
        assert history[-1].state == CheckoutState.QUOTED

    def test_history_is_a_copy(self, state_machine):
        state_machine.get_history().clear()
        assert len(state_machine.get_history()) == 1
