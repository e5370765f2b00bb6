"""
Checkout orchestration: quote, pending booking, payment, confirmation.

The evaluator's verdict is a client-side pre-filter; the booking API stays
the authority and re-validates server-side. Every path ends in either an
admissible quote with a price or a failed outcome with a reason. A pending
booking whose payment did not go through is deleted; if that deletion fails
the outcome names the booking id instead of offering a retry.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from carrental.availability.evaluator import Admissibility, evaluate_resource, filter_available
from carrental.availability.pricing import check_driver_selection, compute_price
from carrental.checkout.state_machine import CheckoutState, CheckoutStateMachine, CheckoutTrigger
from carrental.config import settings
from carrental.logging_context import get_checkout_logger, set_checkout_id
from carrental.schemas.booking_schema import BookingPayload, BookingRequest, PriceBreakdown
from carrental.schemas.resource_schema import Driver, Vehicle
from carrental.schemas.session_schema import SessionContext
from carrental.state.load_state import LoadState, load
from carrental.tools import booking, directory, payment
from carrental.tools.payment import PaymentStatus

logger = get_checkout_logger(__name__)

PaymentPresenter = Callable[[str], PaymentStatus]

_DOWNSTREAM_ERRORS = (ConnectionError, TimeoutError)


@dataclass(frozen=True)
class Quote:
    """Admissibility of the vehicle (and driver) plus the price if bookable."""
    vehicle: Admissibility
    driver: Optional[Admissibility] = None
    price: Optional[PriceBreakdown] = None

    @property
    def admissible(self) -> bool:
        return self.vehicle.admissible and (self.driver is None or self.driver.admissible)

    @property
    def rejected_by(self) -> Optional[str]:
        """Which resource failed: "vehicle", "driver" or None."""
        if not self.vehicle:
            return "vehicle"
        if self.driver is not None and not self.driver:
            return "driver"
        return None

    @property
    def message(self) -> str:
        rejected = self.rejected_by
        if rejected == "vehicle":
            return f"Vehicle: {self.vehicle.message}"
        if rejected == "driver":
            return f"Driver: {self.driver.message}"
        return self.vehicle.message


@dataclass(frozen=True)
class CheckoutOutcome:
    """Final result of a submission attempt, ready to show to the user."""
    success: bool
    state: CheckoutState
    message: str
    quote: Optional[Quote] = None
    booking_id: Optional[str] = None
    retryable: bool = False


class CheckoutFlow:
    """
    Runs a booking through quote, submission and payment.

    Collaborators are duck-typed: anything exposing the functions of
    ``carrental.tools.booking``, ``payment`` and ``directory`` works, which
    is how tests substitute failing backends.
    """

    def __init__(
        self,
        booking_api: Any = booking,
        payment_api: Any = payment,
        directory_api: Any = directory,
        currency: Optional[str] = None,
        payment_currency: Optional[str] = None,
    ) -> None:
        self._booking_api = booking_api
        self._payment_api = payment_api
        self._directory_api = directory_api
        self._currency = currency or settings.pricing.currency
        self._payment_currency = payment_currency or settings.pricing.payment_currency
        self.state_machine = CheckoutStateMachine()

    # ------------------------------------------------------------------ #
    # Pure views
    # ------------------------------------------------------------------ #

    def quote(
        self, vehicle: Vehicle, request: BookingRequest, driver: Optional[Driver] = None
    ) -> Quote:
        """
        Evaluate the vehicle and the selected driver, pricing the booking if both pass.

        The driver is looked up from ``request.selected_driver_id`` unless
        it is passed in.

        Raises:
            LookupError: If the selected driver is not in the directory.
            ValueError: If ``driver`` is not the selected driver.
        """
        driver = self._resolve_driver(request, driver)
        vehicle_result = evaluate_resource(vehicle, request)
        driver_result = evaluate_resource(driver, request) if driver is not None else None
        quote = Quote(vehicle=vehicle_result, driver=driver_result)
        if not quote.admissible:
            return quote
        price = compute_price(vehicle, request, driver, currency=self._currency)
        return Quote(vehicle=vehicle_result, driver=driver_result, price=price)

    def available_drivers(self, company_id: str, request: BookingRequest) -> LoadState:
        """Fetch a company's drivers and keep those bookable for ``request``."""
        return load(
            lambda: filter_available(self._directory_api.list_company_drivers(company_id), request),
            error_message="Failed to fetch drivers.",
        )

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def submit(
        self,
        vehicle: Vehicle,
        request: BookingRequest,
        session: SessionContext,
        present_payment: PaymentPresenter,
        driver: Optional[Driver] = None,
        intercity: bool = False,
        city_name: str = "",
    ) -> CheckoutOutcome:
        """
        Quote, create a pending booking, take payment and confirm.

        Args:
            vehicle: Vehicle being rented.
            request: Validated booking interval.
            session: Current session; must carry a user id.
            present_payment: Shows the payment sheet for a client secret and
                returns how it ended.
            driver: The selected driver, if already fetched; otherwise it is
                looked up from ``request.selected_driver_id``.
            intercity: Intercity trips carry no city name.
            city_name: City for local trips.

        Returns:
            CheckoutOutcome describing the final state.
        """
        set_checkout_id(f"CHK-{uuid.uuid4().hex[:8]}")
        sm = self.state_machine = CheckoutStateMachine()

        if not session.is_logged_in:
            return CheckoutOutcome(False, sm.current_state, "User not logged in.")

        try:
            driver = self._resolve_driver(request, driver)
        except LookupError as exc:
            logger.warning("%s", exc)
            return CheckoutOutcome(False, sm.current_state, "Selected driver not found.")

        quote = self.quote(vehicle, request, driver)
        if not quote.admissible:
            sm.transition(CheckoutTrigger.QUOTE_INADMISSIBLE)
            logger.info("Checkout blocked for vehicle %s: %s", vehicle.id, quote.message)
            return CheckoutOutcome(False, sm.current_state, quote.message, quote=quote)
        sm.transition(CheckoutTrigger.QUOTE_ADMISSIBLE)

        payload = BookingPayload(
            vehicle_id=vehicle.id,
            user_id=session.user_id,
            company_id=vehicle.company_id,
            driver_id=driver.id if driver is not None else None,
            from_date=request.from_date,
            to_date=request.to_date,
            from_time=request.from_time,
            to_time=request.to_time,
            intercity=intercity,
            city_name="" if intercity else city_name,
            total_amount=quote.price.total_amount,
            status="pending",
        )

        try:
            created = self._booking_api.create_booking(payload)
        except _DOWNSTREAM_ERRORS as exc:
            logger.warning("Booking service unreachable: %s", exc)
            created = {"success": False, "message": "Could not reach the booking service."}
        if not created["success"]:
            sm.transition(CheckoutTrigger.BOOKING_REJECTED)
            return self._retryable(sm, created["message"], quote)
        booking_id = created["booking_id"]
        sm.transition(CheckoutTrigger.BOOKING_CREATED)

        try:
            intent = self._payment_api.create_payment_intent(
                booking_id, quote.price.total_amount, self._payment_currency
            )
        except _DOWNSTREAM_ERRORS as exc:
            logger.warning("Payment service unreachable: %s", exc)
            intent = {"success": False, "message": "Could not reach the payment service."}
        if not intent["success"]:
            sm.transition(CheckoutTrigger.PAYMENT_SETUP_FAILED)
            if not self._delete_pending(booking_id):
                return self._orphaned(sm, intent["message"], booking_id, quote)
            return self._retryable(sm, intent["message"], quote)
        sm.transition(CheckoutTrigger.PAYMENT_INTENT_CREATED)

        try:
            status = present_payment(intent["client_secret"])
        except _DOWNSTREAM_ERRORS as exc:
            logger.warning("Payment sheet failed: %s", exc)
            status = PaymentStatus.FAILED

        if status == PaymentStatus.CANCELED:
            sm.transition(CheckoutTrigger.PAYMENT_CANCELLED)
            if not self._delete_pending(booking_id):
                return self._orphaned(sm, "Payment cancelled.", booking_id, quote)
            return CheckoutOutcome(
                False, sm.current_state,
                "Payment cancelled. Your pending booking has been removed.",
                quote=quote, retryable=True,
            )
        if status != PaymentStatus.SUCCEEDED:
            sm.transition(CheckoutTrigger.PAYMENT_FAILED)
            if not self._delete_pending(booking_id):
                return self._orphaned(sm, "Payment failed.", booking_id, quote)
            return self._retryable(sm, "Payment failed.", quote)

        if not self._confirm(intent["intent_id"], booking_id, session.user_id):
            sm.transition(CheckoutTrigger.CONFIRMATION_FAILED)
            return CheckoutOutcome(
                False, sm.current_state,
                "Payment received but the booking could not be confirmed. "
                f"Please contact support with reference {booking_id}.",
                quote=quote, booking_id=booking_id,
            )

        sm.transition(CheckoutTrigger.PAYMENT_SUCCEEDED)
        logger.info("Booking %s confirmed, total %s %s", booking_id,
                    quote.price.total_amount, quote.price.currency)
        return CheckoutOutcome(
            True, sm.current_state, "Booking and payment confirmed!",
            quote=quote, booking_id=booking_id,
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _resolve_driver(
        self, request: BookingRequest, driver: Optional[Driver]
    ) -> Optional[Driver]:
        """Return the driver ``request`` selects, fetching it when not given."""
        if driver is None and request.selected_driver_id:
            driver = self._directory_api.get_driver(request.selected_driver_id)
            if driver is None:
                raise LookupError(f"Driver not found: {request.selected_driver_id}")
        check_driver_selection(request, driver)
        return driver

    def _confirm(self, intent_id: str, booking_id: str, user_id: str) -> bool:
        try:
            paid = self._payment_api.confirm_payment(intent_id, booking_id, user_id)
            if not paid["success"]:
                logger.error("Payment confirmation rejected for %s: %s", booking_id, paid["message"])
                return False
            confirmed = self._booking_api.confirm_booking(booking_id)
        except _DOWNSTREAM_ERRORS as exc:
            logger.error("Confirmation of booking %s failed: %s", booking_id, exc)
            return False
        if not confirmed["success"]:
            logger.error("Booking confirmation rejected for %s: %s", booking_id, confirmed["message"])
            return False
        return True

    def _delete_pending(self, booking_id: str) -> bool:
        """Compensating deletion of a pending booking whose payment did not complete."""
        logger.warning("Deleting pending booking %s", booking_id)
        try:
            result = self._booking_api.delete_booking(booking_id)
        except _DOWNSTREAM_ERRORS as exc:
            logger.error("Could not delete pending booking %s: %s", booking_id, exc)
            return False
        if not result["success"]:
            logger.error("Could not delete pending booking %s: %s", booking_id, result["message"])
            return False
        return True

    @staticmethod
    def _orphaned(
        sm: CheckoutStateMachine, message: str, booking_id: str, quote: Quote
    ) -> CheckoutOutcome:
        """Outcome for an unpaid booking whose compensating deletion failed."""
        return CheckoutOutcome(
            False, sm.current_state,
            f"{message} Your pending booking {booking_id} could not be removed. "
            "Please contact support.",
            quote=quote, booking_id=booking_id,
        )

    @staticmethod
    def _retryable(sm: CheckoutStateMachine, message: str, quote: Quote) -> CheckoutOutcome:
        return CheckoutOutcome(
            False, sm.current_state, f"{message} Please try again.",
            quote=quote, retryable=True,
        )
