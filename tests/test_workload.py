"""Tests for per-resource workload totals and overload warnings."""

from datetime import date, datetime, timezone

from conftest import at, booking

from carecore.engine.intervals import epoch_millis
from carecore.engine.workload import aggregate, generate_warnings, warning_id


def test_totals_are_summed_per_resource():
    totals = aggregate(
        [
            booking("b1", at(9), at(12)),
            booking("b2", at(13), at(15, 30)),
            booking("b3", at(9), at(10), resource_id="staff-2"),
        ]
    )
    assert totals["staff-1"].total_hours == 5.5
    assert totals["staff-2"].total_hours == 1.0
    assert not totals["staff-1"].is_over


def test_nine_hours_is_over_the_default_limit():
    totals = aggregate([booking("b1", at(8), at(12)), booking("b2", at(13), at(18))])
    assert totals["staff-1"].total_hours == 9.0
    assert totals["staff-1"].is_over is True


def test_limit_comparison_is_strict():
    totals = aggregate([booking("b1", at(9), at(17))], limit_hours=8)
    assert totals["staff-1"].total_hours == 8.0
    assert totals["staff-1"].is_over is False


def test_total_is_rounded_before_the_limit_check():
    # 8h 02m -> 8.03h -> rounds to 8.0, which is not over 8
    totals = aggregate([booking("b1", at(9), at(17, 2))], limit_hours=8)
    assert totals["staff-1"].total_hours == 8.0
    assert totals["staff-1"].is_over is False


def test_rounding_goes_half_up():
    # 15 minutes = 0.25h -> 0.3
    totals = aggregate([booking("b1", at(9), at(9, 15))])
    assert totals["staff-1"].total_hours == 0.3


def test_negative_durations_clamp_to_zero():
    totals = aggregate([booking("b1", at(12), at(10)), booking("b2", at(9), at(10))])
    assert totals["staff-1"].total_hours == 1.0


def test_background_and_incomplete_records_are_ignored():
    base = [booking("b1", at(9), at(10))]
    noisy = base + [
        booking("bg", at(0), at(23), is_background=True),
        booking("b2", None, None),
        booking("b3", at(11), at(12), resource_id=None),
    ]
    assert aggregate(noisy) == aggregate(base)


def test_warnings_only_for_overloaded_resources():
    totals = aggregate(
        [
            booking("b1", at(8), at(17, 30)),
            booking("b2", at(9), at(10), resource_id="staff-2"),
        ]
    )
    window_start = at(0)
    warnings = generate_warnings(totals, window_start, at(0))

    assert len(warnings) == 1
    warning = warnings[0]
    assert warning.resource_id == "staff-1"
    assert warning.title == "Overload warning (9.5h)"
    assert warning.is_background is True
    assert warning.plan_id == "warning-staff-1"
    assert warning.id == f"warning-staff-1-{int(window_start.timestamp() * 1000)}"


def test_warning_title_keeps_one_decimal():
    totals = aggregate([booking("b1", at(8), at(12)), booking("b2", at(13), at(18))])
    warnings = generate_warnings(totals, at(0), at(0))
    assert "9.0h" in warnings[0].title


def test_warning_spans_whole_days_of_the_window():
    window_start = datetime(2025, 1, 13, 0, 0, tzinfo=timezone.utc)
    window_end = datetime(2025, 1, 19, 0, 0, tzinfo=timezone.utc)
    totals = aggregate([booking("b1", at(6), at(18))])
    warning = generate_warnings(totals, window_start, window_end)[0]
    assert warning.start == datetime(2025, 1, 13, 0, 0, tzinfo=timezone.utc)
    assert warning.end == datetime(2025, 1, 20, 0, 0, tzinfo=timezone.utc)


def test_regenerating_warnings_is_idempotent():
    totals = aggregate([booking("b1", at(6), at(18))])
    first = generate_warnings(totals, at(0), at(0))
    second = generate_warnings(totals, at(0), at(0))
    assert [w.id for w in first] == [w.id for w in second]
    assert first[0].id == warning_id("staff-1", at(0))


def test_warnings_fed_back_do_not_change_totals():
    bookings = [booking("b1", at(6), at(18))]
    totals = aggregate(bookings)
    warnings = generate_warnings(totals, at(0), at(0))
    assert aggregate(bookings + warnings) == totals


def test_warning_id_uses_exact_milliseconds():
    late = datetime(2096, 2, 29, 23, 59, 59, 999000, tzinfo=timezone.utc)
    expected = (date(2096, 2, 29) - date(1970, 1, 1)).days * 86_400_000 + 86_399_999
    assert epoch_millis(late) == expected
    assert warning_id("staff-1", late) == f"warning-staff-1-{expected}"


def test_epoch_millis_floors_sub_millisecond_parts():
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 0, 1500, tzinfo=timezone.utc)) == 1
    assert epoch_millis(datetime(1969, 12, 31, 23, 59, 59, 999500, tzinfo=timezone.utc)) == -1
