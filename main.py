"""
Command-line entry point for quoting bookings against the vehicle directory.

Usage:
    python main.py quote --vehicle veh-corolla-01 --from-date 2024-06-10 \
        --to-date 2024-06-10 --from-time 10:00 --to-time 14:00 --driver drv-ali-01
    python main.py drivers --vehicle veh-corolla-01 --from-date 2024-06-10 \
        --to-date 2024-06-12 --from-time 09:00 --to-time 18:00
"""

import argparse
import logging
import sys
from typing import Optional

from carrental.checkout.booking_form import BookingForm
from carrental.checkout.flow import CheckoutFlow
from carrental.config import settings
from carrental.state.load_state import Ready
from carrental.tools import directory

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check vehicle/driver availability and price a rental."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in [
        ("quote", "Check admissibility and print the price breakdown."),
        ("drivers", "List the vehicle company's drivers available for the interval."),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--vehicle", required=True, help="Vehicle id.")
        sub.add_argument("--from-date", required=True, help="Pick-up date (YYYY-MM-DD).")
        sub.add_argument("--to-date", required=True, help="Drop-off date (YYYY-MM-DD).")
        sub.add_argument("--from-time", required=True, help="Pick-up time (HH:MM).")
        sub.add_argument("--to-time", required=True, help="Drop-off time (HH:MM).")
        if name == "quote":
            sub.add_argument("--driver", default=None, help="Optional driver id.")

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    return parser


def _fill_form(args: argparse.Namespace, driver_id: Optional[str]) -> BookingForm:
    form = BookingForm()
    for field_name, value in [
        ("from_date", args.from_date),
        ("to_date", args.to_date),
        ("from_time", args.from_time),
        ("to_time", args.to_time),
    ]:
        ok, msg = form.set_field(field_name, value)
        if not ok:
            raise ValueError(msg)
    if driver_id:
        form.toggle_driver(driver_id)
    return form


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    vehicle = directory.get_vehicle(args.vehicle)
    if vehicle is None:
        logger.error("Vehicle not found: %s", args.vehicle)
        return 1

    driver_id = getattr(args, "driver", None)
    try:
        request = _fill_form(args, driver_id).to_request()
    except ValueError as exc:
        logger.error("Invalid booking input: %s", exc)
        return 1

    flow = CheckoutFlow()

    if args.command == "drivers":
        state = flow.available_drivers(vehicle.company_id or "", request)
        if not isinstance(state, Ready):
            logger.error("%s", getattr(state, "message", "Drivers not loaded."))
            return 1
        if not state.data:
            sys.stdout.write("No drivers available.\n")
        for driver in state.data:
            sys.stdout.write(
                f"{driver.id}\t{driver.name}\t{driver.daily_rate}/day\t{driver.hourly_rate}/hour\n"
            )
        return 0

    driver = None
    if driver_id:
        driver = directory.get_driver(driver_id)
        if driver is None:
            logger.error("Driver not found: %s", driver_id)
            return 1

    quote = flow.quote(vehicle, request, driver)
    if not quote.admissible:
        sys.stdout.write(f"Not available: {quote.message}\n")
        return 1

    price = quote.price
    lines = [
        f"{settings.app_name}: {vehicle.manufacturer} {vehicle.model} ({vehicle.id})",
        f"  Days:    {price.booked_days}",
        f"  Hours:   {price.booked_hours}",
        f"  Vehicle: {price.vehicle_amount} {price.currency}",
        f"  Driver:  {price.driver_amount} {price.currency}",
        f"  Total:   {price.total_amount} {price.currency}",
    ]
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
