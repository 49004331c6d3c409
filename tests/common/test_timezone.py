from datetime import date, datetime, time, timezone

from src.staffing_hours.staffing_hours.common.timezone import TimeNormalizer


def _ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def test_epoch_millis_are_shifted_to_civil_time():
    n = TimeNormalizer(7)
    ms = _ms(datetime(2025, 1, 1, 1, 30, tzinfo=timezone.utc))

    assert n.format_time(ms) == "08:30"
    assert n.date_string(ms) == "2025-01-01"


def test_utc_evening_belongs_to_next_civil_day():
    n = TimeNormalizer(7)

    assert n.date_string("2025-01-01T20:00:00Z") == "2025-01-02"


def test_naive_date_only_and_dd_mm_yyyy_inputs_are_civil():
    n = TimeNormalizer(7)

    assert n.format_datetime("2025-03-05T09:15:00") == "05/03/2025 09:15"
    assert n.to_date("2025-03-05") == date(2025, 3, 5)
    assert n.to_date("05/03/2025") == date(2025, 3, 5)
    assert n.to_epoch_millis(date(2025, 1, 1)) == _ms(datetime(2024, 12, 31, 17, 0, tzinfo=timezone.utc))


def test_invalid_input_falls_back_to_now(monkeypatch):
    n = TimeNormalizer(7)
    fixed = datetime(2025, 6, 1, 10, 0, tzinfo=n.tz)
    monkeypatch.setattr(n, "now", lambda: fixed)

    assert n.to_civil_time("not a date") == fixed
    assert n.to_civil_time(None) == fixed
    assert n.parse("not a date") is None


def test_is_valid_date():
    n = TimeNormalizer(7)

    assert n.is_valid_date("2025-01-01")
    assert not n.is_valid_date("abc")
    assert not n.is_valid_date("1800-01-01")
    assert not n.is_valid_date(None)
    assert not n.is_valid_date(True)


def test_comparisons_truncate_to_day():
    n = TimeNormalizer(7)

    assert n.is_before("2025-01-01T23:00:00", "2025-01-02T00:30:00")
    assert not n.is_before("2025-01-02T08:00:00", "2025-01-02T20:00:00")
    assert n.is_after("2025-01-03", "2025-01-02")
    assert not n.is_before("garbage", "2025-01-02")


def test_date_ranges_overlap_is_inclusive():
    n = TimeNormalizer(7)

    assert n.date_ranges_overlap("2025-01-01", "2025-01-10", "2025-01-10", "2025-01-15")
    assert not n.date_ranges_overlap("2025-01-01", "2025-01-09", "2025-01-10", "2025-01-15")


def test_range_contains():
    n = TimeNormalizer(7)

    assert n.range_contains("2025-01-01", "2025-01-31", "2025-01-01", "2025-01-31")
    assert n.range_contains("2025-01-01", "2025-01-31", "2025-01-05", "2025-01-06")
    assert not n.range_contains("2025-01-01", "2025-01-31", "2024-12-31", "2025-01-06")
    assert not n.range_contains("2025-01-01", "2025-01-31", "2025-01-30", "2025-02-01")


def test_days_between_and_iter_days():
    n = TimeNormalizer(7)

    assert n.days_between("2025-01-01", "2025-01-03") == 2
    assert n.days_between("2025-01-03", "2025-01-01") == -2
    assert n.iter_days("2025-01-30", "2025-02-01") == [date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 1)]


def test_hours_between_and_cutoff():
    n = TimeNormalizer(7)

    assert n.hours_between("2025-01-01T08:00:00", "2025-01-01T12:30:00") == 4.5
    assert n.is_before_cutoff("2025-01-01T12:59:00", time(13, 0))
    assert not n.is_before_cutoff("2025-01-01T13:00:00", time(13, 0))


def test_formatting_helpers():
    n = TimeNormalizer(7)

    assert n.format_date(None) == "N/A"
    assert n.format_time("") == "N/A"
    assert n.format_date("2025-01-06") == "06/01/2025"
    assert n.weekday_name("2025-01-06") == "Thứ Hai"
    assert n.weekday_name("2025-01-12") == "Chủ Nhật"
