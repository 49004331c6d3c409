import pytest

from src.staffing_hours.staffing_hours.attendance.calculator import HoursCalculator
from src.staffing_hours.staffing_hours.attendance.duration import format_duration, parse_duration
from src.staffing_hours.staffing_hours.attendance.strategies.base import (
    CHECKOUT_BEFORE_CHECKIN,
    MISSING_CHECKIN,
    MISSING_CHECKOUT,
)

MASCOT = "Nhân viên Mascot"
SALES = "Nhân viên Bán hàng"
CASHIER = "Nhân viên Thu ngân"


@pytest.fixture
def calculator(normalizer):
    return HoursCalculator(normalizer)


def test_mascot_two_shifts_give_eight_hours(calculator, make_event):
    events = [
        make_event("Checkin", "08:00", position=MASCOT),
        make_event("Checkout", "12:00", position=MASCOT),
        make_event("Checkin", "13:00", position=MASCOT),
        make_event("Checkout", "17:00", position=MASCOT),
    ]

    result = calculator.calculate(events, MASCOT)

    assert result.total_hours == "8 giờ"
    assert result.total_hours_numeric == 8
    assert result.shifts == {"morning": 4, "afternoon": 4}
    assert result.warnings == []


@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_mascot_wrong_punch_count_gives_zero(calculator, make_event, count):
    times = ["08:00", "12:00", "13:00", "17:00", "17:05"][:count]
    kinds = ["Checkin", "Checkout", "Checkin", "Checkout", "Checkout"][:count]
    events = [make_event(k, t, position=MASCOT) for k, t in zip(kinds, times)]

    result = calculator.calculate(events, MASCOT)

    assert result.total_hours_numeric == 0
    assert result.total_hours == "0 giờ 0 phút"
    assert len(result.warnings) == 1
    assert f"hiện có {count}" in result.warnings[0]


def test_mascot_bucket_without_a_pair_gives_no_partial_credit(calculator, make_event):
    events = [
        make_event("Checkin", "08:00", position=MASCOT),
        make_event("Checkout", "09:00", position=MASCOT),
        make_event("Checkin", "10:00", position=MASCOT),
        make_event("Checkout", "12:00", position=MASCOT),
    ]

    result = calculator.calculate(events, MASCOT)

    assert result.total_hours_numeric == 0
    assert any(w.startswith("Ca sáng") for w in result.warnings)
    assert any(w.startswith("Ca chiều") for w in result.warnings)


def test_default_rule_missing_checkout(calculator, make_event):
    result = calculator.calculate([make_event("Checkin", "08:00")], SALES)

    assert result.total_hours_numeric == 0
    assert MISSING_CHECKOUT in result.warnings
    assert MISSING_CHECKIN not in result.warnings


def test_default_rule_uses_earliest_checkin_and_latest_checkout(calculator, make_event):
    events = [
        make_event("Checkout", "17:15"),
        make_event("Checkin", "09:00"),
        make_event("Checkout", "16:00"),
        make_event("Checkin", "08:30"),
    ]

    result = calculator.calculate(events, SALES)

    assert result.total_hours_numeric == pytest.approx(8.75)
    assert result.total_hours == "8 giờ 45 phút"
    assert result.warnings == ["Có 4 lần chấm công trong ngày"]


def test_default_rule_floors_reversed_pair_at_zero(calculator, make_event):
    result = calculator.calculate([make_event("Checkin", "17:00"), make_event("Checkout", "08:00")], SALES)

    assert result.total_hours_numeric == 0
    assert CHECKOUT_BEFORE_CHECKIN in result.warnings


def test_single_pair_rule(calculator, make_event):
    ok = calculator.calculate(
        [make_event("Checkin", "08:00", position=CASHIER), make_event("Checkout", "16:30", position=CASHIER)],
        CASHIER,
    )
    assert ok.total_hours == "8 giờ 30 phút"
    assert ok.warnings == []

    doubled = calculator.calculate(
        [
            make_event("Checkin", "08:00", position=CASHIER),
            make_event("Checkin", "08:10", position=CASHIER),
            make_event("Checkout", "16:30", position=CASHIER),
        ],
        CASHIER,
    )
    assert doubled.total_hours_numeric == 0
    assert doubled.warnings == ["Có 2 lần Checkin, chỉ được phép 1"]


@pytest.mark.parametrize(
    "hours, text",
    [
        (0, "0 giờ 0 phút"),
        (-2, "0 giờ 0 phút"),
        (8, "8 giờ"),
        (0.75, "45 phút"),
        (7.5, "7 giờ 30 phút"),
    ],
)
def test_format_duration(hours, text):
    assert format_duration(hours) == text


def test_format_duration_is_monotonic():
    values = [0, 0.01, 0.5, 0.99, 1, 1.25, 7.5, 8, 12.75]
    parsed = [parse_duration(format_duration(v)) for v in values]

    assert parsed == sorted(parsed)


def test_parse_duration():
    assert parse_duration("8 giờ 30 phút") == 8.5
    assert parse_duration("45 phút") == 0.75
    assert parse_duration("3 giờ") == 3
    assert parse_duration("abc") == 0.0
