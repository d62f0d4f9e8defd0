"""Tests for booking, stock and restock rules that need no database."""

from datetime import date

import pytest

from healx.core.exceptions import (
    DoctorUnavailableException,
    InvalidStatusTransitionException,
    OutsideHoursException,
)
from healx.schemas.appointments import AppointmentStatus
from healx.schemas.doctors import AvailabilityWindow
from healx.schemas.inventory import RestockUrgency, StockStatus, classify_stock
from healx.schemas.payments import normalize_payment_method
from healx.services.appointment_service import check_availability, check_transition
from healx.services.inventory_service import (
    default_reorder_quantity,
    evaluate_restock_need,
    restock_urgency,
)

# 2026-10-19 is a Monday
MONDAY = date(2026, 10, 19)

SPLIT_SHIFT = [
    AvailabilityWindow(day="Monday", start_time="08:00", end_time="12:00"),
    AvailabilityWindow(day="Monday", start_time="14:00", end_time="18:00"),
]


@pytest.mark.parametrize("time", ["08:00", "11:59", "12:00", "14:00", "18:00"])
def test_time_inside_any_window(time):
    check_availability(SPLIT_SHIFT, MONDAY, time)


@pytest.mark.parametrize("time", ["07:59", "12:01", "13:30", "18:01"])
def test_time_outside_every_window(time):
    with pytest.raises(OutsideHoursException):
        check_availability(SPLIT_SHIFT, MONDAY, time)


def test_no_window_on_weekday():
    with pytest.raises(DoctorUnavailableException):
        check_availability(SPLIT_SHIFT, date(2026, 10, 20), "09:00")


def test_appointment_transitions():
    assert check_transition(AppointmentStatus.PENDING, AppointmentStatus.APPROVED)
    assert check_transition(AppointmentStatus.PENDING, AppointmentStatus.CANCELLED)
    assert check_transition(AppointmentStatus.APPROVED, AppointmentStatus.COMPLETED)
    assert not check_transition(AppointmentStatus.APPROVED, AppointmentStatus.APPROVED)

    for current, requested in (
        (AppointmentStatus.PENDING, AppointmentStatus.COMPLETED),
        (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED),
        (AppointmentStatus.CANCELLED, AppointmentStatus.PENDING),
    ):
        with pytest.raises(InvalidStatusTransitionException):
            check_transition(current, requested)


@pytest.mark.parametrize(
    ("quantity", "minimum", "expected"),
    [
        (0, 10, StockStatus.OUT_OF_STOCK),
        (1, 10, StockStatus.LOW_STOCK),
        (10, 10, StockStatus.LOW_STOCK),
        (11, 10, StockStatus.AVAILABLE),
        (0, 0, StockStatus.OUT_OF_STOCK),
    ],
)
def test_classify_stock(quantity, minimum, expected):
    assert classify_stock(quantity, minimum) == expected


@pytest.mark.parametrize(
    ("quantity", "minimum", "expected"),
    [
        (0, 10, RestockUrgency.CRITICAL),
        (5, 10, RestockUrgency.HIGH),
        (6, 10, RestockUrgency.MEDIUM),
        (10, 10, RestockUrgency.MEDIUM),
        (11, 10, RestockUrgency.LOW),
    ],
)
def test_restock_urgency(quantity, minimum, expected):
    assert restock_urgency(quantity, minimum) == expected


def test_default_reorder_quantity():
    assert default_reorder_quantity(5, 10) == 25
    assert default_reorder_quantity(30, 10) == 20
    assert default_reorder_quantity(40, 10) == 20
    assert default_reorder_quantity(3, 0) == 1


def test_evaluate_restock_need():
    need = evaluate_restock_need(4, 10)
    assert need.needed
    assert need.urgency == RestockUrgency.HIGH
    assert need.suggested_quantity == 26

    assert not evaluate_restock_need(12, 10).needed


def test_normalize_payment_method():
    assert normalize_payment_method("cash") == "Cash"
    assert normalize_payment_method(" INSURANCE ") == "Insurance"
    assert normalize_payment_method("cheque") == "cheque"
    assert normalize_payment_method(None) is None
