"""
Test notification schedule file parser
Run with: uv run pytest test/test_notification_scheduling.py
"""

from datetime import datetime, time

import pytest
from pydantic import ValidationError

from notification_schedule import (
  NotificationConfig,
  NotificationScheduleConfig,
  parse_notification_config,
)
from notification_schedule.config_parser import next_occurrence


@pytest.fixture
def valid_config_yaml():
  """Fixture providing valid YAML configuration content"""
  return """
pay_bill:
  title: Reminder
  body: Pay bill
  hour: "09:00"
  repeats_daily: true

dentist:
  title: Dentist
  body: |
    Checkup at the clinic.
    Bring the insurance card.
  at: "2024-02-14T15:30:00"

stretch:
  title: Stretch
  body: Stand up for a minute
  hour: "14:30"
"""


@pytest.fixture
def invalid_config_both_time_fields():
  """Fixture with invalid config - both hour and at specified"""
  return """
invalid_notification:
  title: Broken
  body: This should fail
  hour: "09:00"
  at: "2024-02-14T15:30:00"
"""


@pytest.fixture
def invalid_config_no_time_fields():
  """Fixture with invalid config - neither hour nor at specified"""
  return """
invalid_notification:
  title: Broken
  body: This should fail
"""


def write(tmp_path, content):
  config_file = tmp_path / "notifications.yaml"
  config_file.write_text(content)
  return config_file


def test_parse_valid_config(valid_config_yaml, tmp_path):
  config = parse_notification_config(write(tmp_path, valid_config_yaml))

  assert isinstance(config, NotificationScheduleConfig)
  assert set(config.notifications) == {"pay_bill", "dentist", "stretch"}


def test_notification_with_hour(valid_config_yaml, tmp_path):
  config = parse_notification_config(write(tmp_path, valid_config_yaml))
  bill = config.notifications["pay_bill"]

  assert bill.timing == time(9, 0)
  assert bill.repeats_daily is True
  assert bill.title == "Reminder"


def test_notification_with_exact_datetime(valid_config_yaml, tmp_path):
  config = parse_notification_config(write(tmp_path, valid_config_yaml))
  dentist = config.notifications["dentist"]

  assert dentist.timing == datetime(2024, 2, 14, 15, 30)
  assert dentist.repeats_daily is False
  assert "insurance card" in dentist.body


def test_unquoted_yaml_datetime_is_accepted(tmp_path):
  config = parse_notification_config(
    write(
      tmp_path,
      """
trip:
  title: Trip
  body: Leave now
  at: 2024-06-01 07:15:00
""",
    )
  )

  assert config.notifications["trip"].timing == datetime(2024, 6, 1, 7, 15)


def test_invalid_both_time_fields(invalid_config_both_time_fields, tmp_path):
  with pytest.raises(ValueError, match="both 'hour' and 'at' specified"):
    parse_notification_config(write(tmp_path, invalid_config_both_time_fields))


def test_invalid_no_time_fields(invalid_config_no_time_fields, tmp_path):
  with pytest.raises(ValidationError):
    parse_notification_config(write(tmp_path, invalid_config_no_time_fields))


def test_invalid_hour_format(tmp_path):
  with pytest.raises(ValidationError, match="HH:MM"):
    parse_notification_config(
      write(tmp_path, "bad:\n  title: t\n  body: b\n  hour: 'noon'\n")
    )


def test_empty_file_has_no_notifications(tmp_path):
  assert parse_notification_config(write(tmp_path, "")).notifications == {}


def test_file_not_found():
  with pytest.raises(FileNotFoundError):
    parse_notification_config("/nonexistent/path/notifications.yaml")


def test_next_occurrence_later_today():
  now = datetime(2024, 1, 1, 8, 0)

  assert next_occurrence(time(9, 0), now) == datetime(2024, 1, 1, 9, 0)


def test_next_occurrence_rolls_to_tomorrow():
  now = datetime(2024, 1, 31, 9, 0)

  assert next_occurrence(time(9, 0), now) == datetime(2024, 2, 1, 9, 0)


def test_requests_use_keys_as_identifiers(valid_config_yaml, tmp_path):
  config = parse_notification_config(write(tmp_path, valid_config_yaml))

  requests = config.requests(now=datetime(2024, 1, 1, 12, 0))
  by_id = {r.identifier: r for r in requests}

  assert by_id["pay_bill"].fire_at == datetime(2024, 1, 2, 9, 0)
  assert by_id["pay_bill"].repeats_daily is True
  assert by_id["stretch"].fire_at == datetime(2024, 1, 1, 14, 30)
  assert by_id["dentist"].fire_at == datetime(2024, 2, 14, 15, 30)


def test_notification_config_model():
  config = NotificationConfig(
    title="Test",
    body="Body",
    timing="14:30",  # type: ignore[arg-type]
  )

  assert config.timing == time(14, 30)
  assert config.repeats_daily is False


def test_unquoted_yaml_hour_is_a_time_of_day(tmp_path):
  # YAML 1.1 loads an unquoted 14:30 as the integer 870
  config = parse_notification_config(
    write(tmp_path, "stretch:\n  title: t\n  body: b\n  hour: 14:30\n")
  )

  assert config.notifications["stretch"].timing == time(14, 30)
  requests = config.requests(now=datetime(2024, 1, 1, 12, 0))
  assert requests[0].fire_at == datetime(2024, 1, 1, 14, 30)


def test_unquoted_yaml_hour_out_of_range(tmp_path):
  with pytest.raises(ValidationError, match="HH:MM"):
    parse_notification_config(
      write(tmp_path, "late:\n  title: t\n  body: b\n  hour: 24:30\n")
    )


def test_hour_of_wrong_type_is_rejected(tmp_path):
  with pytest.raises(ValueError, match="HH:MM"):
    parse_notification_config(
      write(tmp_path, "bad:\n  title: t\n  body: b\n  hour: true\n")
    )


def test_unquoted_yaml_date_fires_at_midnight(tmp_path):
  config = parse_notification_config(
    write(tmp_path, "trip:\n  title: t\n  body: b\n  at: 2024-06-01\n")
  )

  assert config.notifications["trip"].timing == datetime(2024, 6, 1, 0, 0)


def test_at_must_be_a_datetime(tmp_path):
  with pytest.raises(ValueError, match="'at' must be an ISO datetime"):
    parse_notification_config(
      write(tmp_path, "bad:\n  title: t\n  body: b\n  at: 14:30\n")
    )


def test_notification_config_rejects_numeric_timing():
  with pytest.raises(ValidationError, match="HH:MM"):
    NotificationConfig(title="Test", body="Body", timing=870)  # type: ignore[arg-type]
