"""Tests for the platform-independent parts of os_interfaces"""

from datetime import datetime, timedelta, timezone

from os_interfaces.base import LocalNotification, next_fire_date


def notification(fire_date, repeat_interval="none", time_zone=None):
  return LocalNotification(
    fire_date=fire_date,
    repeat_interval=repeat_interval,
    time_zone=time_zone,
    title="Reminder",
    body="Pay bill",
    category="bill-1",
  )


class TestNextFireDate:
  def test_future_fire_date_is_kept(self):
    n = notification(datetime(2024, 1, 1, 9, 0), repeat_interval="day")

    assert next_fire_date(n, now=datetime(2024, 1, 1, 8, 0)) == datetime(
      2024, 1, 1, 9, 0
    )

  def test_past_daily_moves_to_next_wall_clock_occurrence(self):
    n = notification(datetime(2024, 1, 1, 9, 0), repeat_interval="day")
    now = datetime(2024, 3, 5, 8, 0)

    fire = next_fire_date(n, now=now)

    assert fire == datetime(2024, 3, 5, 9, 0)
    assert (fire - now).total_seconds() == 3600.0

  def test_past_daily_later_in_the_day_moves_to_tomorrow(self):
    n = notification(datetime(2024, 1, 1, 9, 0), repeat_interval="day")

    assert next_fire_date(n, now=datetime(2024, 3, 5, 10, 0)) == datetime(
      2024, 3, 6, 9, 0
    )

  def test_daily_due_right_now_moves_a_full_day(self):
    n = notification(datetime(2024, 1, 1, 9, 0), repeat_interval="day")

    assert next_fire_date(n, now=datetime(2024, 1, 1, 9, 0)) == datetime(
      2024, 1, 2, 9, 0
    )

  def test_past_one_shot_is_left_in_the_past(self):
    n = notification(datetime(2024, 1, 1, 9, 0))

    assert next_fire_date(n, now=datetime(2024, 3, 5, 8, 0)) == datetime(
      2024, 1, 1, 9, 0
    )

  def test_naive_fire_date_read_in_time_zone(self):
    tz = timezone(timedelta(hours=2))
    n = notification(datetime(2024, 1, 1, 9, 0), repeat_interval="day", time_zone=tz)

    fire = next_fire_date(n, now=datetime(2024, 1, 2, 6, 0, tzinfo=timezone.utc))

    assert fire == datetime(2024, 1, 2, 9, 0, tzinfo=tz)
