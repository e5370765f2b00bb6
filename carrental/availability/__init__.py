from carrental.availability.evaluator import (
    Admissibility,
    UnavailableReason,
    evaluate_resource,
    filter_available,
)
from carrental.availability.pricing import booked_days, booked_hours, compute_price

__all__ = [
    "Admissibility",
    "UnavailableReason",
    "evaluate_resource",
    "filter_available",
    "booked_days",
    "booked_hours",
    "compute_price",
]
