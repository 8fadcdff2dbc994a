from datetime import datetime, timedelta, timezone

import pytest

from app.exceptions import MalformedTimestampError
from app.services.streak_calculator import (
    ActivityRecord,
    StreakPolicy,
    StreakStatus,
    calculate_streak,
    calendar_day_streak,
    extract_activity_instants,
    rolling_window_streak,
    to_utc,
)

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours):
    return NOW - timedelta(hours=hours)


def records(*instants):
    return [ActivityRecord(created_at=i, log_id=f"log-{n}") for n, i in enumerate(instants)]


class TestRollingWindow:

    def test_no_activity(self):
        result = calculate_streak([], now=NOW)
        assert result.streak == 0
        assert result.status is StreakStatus.NO_ACTIVITY
        assert result.last_activity_at is None

    def test_chain_within_window(self):
        # 23h and 26h gaps both fit in 32h
        result = calculate_streak(records(hours_ago(1), hours_ago(24), hours_ago(50)), now=NOW)
        assert result.streak == 3
        assert result.status is StreakStatus.ACTIVE
        assert result.policy is StreakPolicy.ROLLING_WINDOW

    def test_two_day_gap_breaks_chain(self):
        monday = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)
        wednesday = datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)
        result = calculate_streak(records(monday, wednesday), now=wednesday + timedelta(hours=1))
        assert result.streak == 1

    def test_lapsed_when_newest_is_outside_window(self):
        result = calculate_streak(records(hours_ago(33), hours_ago(40)), now=NOW)
        assert result.streak == 0
        assert result.status is StreakStatus.LAPSED
        assert result.last_activity_at == hours_ago(33)

    def test_exactly_window_apart_still_counts(self):
        assert rolling_window_streak([hours_ago(32), hours_ago(64)], NOW) == 2

    def test_older_activity_behind_a_gap_is_ignored(self):
        instants = [hours_ago(1), hours_ago(2), hours_ago(50), hours_ago(51)]
        assert rolling_window_streak(instants, NOW) == 2

    def test_input_order_does_not_matter(self):
        instants = [hours_ago(50), hours_ago(1), hours_ago(24)]
        assert rolling_window_streak(instants, NOW) == 3

    def test_identical_instants_each_count(self):
        assert rolling_window_streak([hours_ago(1), hours_ago(1)], NOW) == 2

    def test_lookback_caps_comparisons(self):
        instants = [hours_ago(h) for h in range(10)]
        assert rolling_window_streak(instants, NOW, max_lookback=3) == 4
        assert rolling_window_streak(instants, NOW, max_lookback=1000) == 10

    def test_custom_window(self):
        instants = [hours_ago(1), hours_ago(20)]
        assert rolling_window_streak(instants, NOW, window_hours=12) == 1
        assert rolling_window_streak(instants, NOW, window_hours=24) == 2


class TestCalendarDay:

    def test_same_day_activity_counts_once(self):
        instants = [NOW.replace(hour=1), NOW.replace(hour=5), NOW.replace(hour=11)]
        assert calendar_day_streak(instants, NOW) == 1

    def test_consecutive_days(self):
        instants = [NOW, NOW - timedelta(days=1), NOW - timedelta(days=2, hours=3)]
        result = calculate_streak(records(*instants), now=NOW, policy=StreakPolicy.CALENDAR_DAY)
        assert result.streak == 3
        assert result.policy is StreakPolicy.CALENDAR_DAY

    def test_yesterday_keeps_streak_alive(self):
        instants = [NOW - timedelta(days=1), NOW - timedelta(days=2)]
        assert calendar_day_streak(instants, NOW) == 2

    def test_lapsed_before_yesterday(self):
        instants = [NOW - timedelta(days=2), NOW - timedelta(days=3)]
        result = calculate_streak(records(*instants), now=NOW, policy="calendar_day")
        assert result.streak == 0
        assert result.status is StreakStatus.LAPSED

    def test_skipped_day_breaks_run(self):
        monday = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)
        wednesday = datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)
        assert calendar_day_streak([monday, wednesday], wednesday) == 1

    def test_days_are_utc(self):
        # 23:30 at UTC-5 on the 9th is already the 10th in UTC
        late_evening = datetime(2024, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        now = datetime(2024, 3, 11, 0, 30, tzinfo=timezone.utc)
        assert calendar_day_streak([late_evening], now) == 1

    def test_lookback_caps_days(self):
        instants = [NOW - timedelta(days=d) for d in range(10)]
        assert calendar_day_streak(instants, NOW, max_lookback=3) == 3


class TestActivityInstants:

    def test_edit_counts_as_activity(self):
        record = ActivityRecord(created_at=hours_ago(40), updated_at=hours_ago(10), log_id="log-1")
        result = calculate_streak([record], now=NOW)
        assert result.streak == 2
        assert result.last_activity_at == hours_ago(10)

    def test_untouched_updated_at_is_not_extra_activity(self):
        record = ActivityRecord(created_at=hours_ago(1), updated_at=hours_ago(1), log_id="log-1")
        assert extract_activity_instants([record]) == [hours_ago(1)]
        assert calculate_streak([record], now=NOW).streak == 1

    def test_iso_strings_are_parsed(self):
        record = ActivityRecord(created_at="2024-03-10T11:00:00Z", updated_at="2024-03-10T06:00:00-05:00")
        assert extract_activity_instants([record]) == [hours_ago(1)]

    def test_naive_datetimes_are_utc(self):
        naive = datetime(2024, 3, 10, 11, 0)
        assert to_utc(naive) == hours_ago(1)
        assert calculate_streak(records(naive), now=NOW).streak == 1

    def test_malformed_timestamp_names_the_log(self):
        with pytest.raises(MalformedTimestampError) as exc_info:
            calculate_streak([ActivityRecord(created_at="yesterday-ish", log_id="log-42")], now=NOW)
        assert exc_info.value.log_id == "log-42"
        assert exc_info.value.field == "created_at"

    def test_malformed_updated_at(self):
        record = ActivityRecord(created_at=hours_ago(1), updated_at=12345, log_id="log-7")
        with pytest.raises(MalformedTimestampError) as exc_info:
            extract_activity_instants([record])
        assert exc_info.value.field == "updated_at"


class TestProperties:

    def test_same_snapshot_same_answer(self):
        snapshot = records(hours_ago(1), hours_ago(20), hours_ago(45))
        assert calculate_streak(snapshot, now=NOW) == calculate_streak(snapshot, now=NOW)

    def test_new_activity_extends_streak(self):
        snapshot = records(hours_ago(10), hours_ago(30))
        before = calculate_streak(snapshot, now=NOW).streak
        after = calculate_streak(snapshot + records(hours_ago(1)), now=NOW).streak
        assert after == before + 1

    @pytest.mark.parametrize("policy", list(StreakPolicy))
    def test_streak_never_negative(self, policy):
        for snapshot in ([], records(hours_ago(100)), records(hours_ago(1))):
            assert calculate_streak(snapshot, now=NOW, policy=policy).streak >= 0
