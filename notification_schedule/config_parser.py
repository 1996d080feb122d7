"""
Notification schedule file parser
Parses YAML files listing the notifications to schedule
"""

from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, field_validator

from .request import NotificationRequest


def parse_time(v: str) -> time:
  """Parse time string in HH:MM format"""
  try:
    hours, minutes = v.split(":")
    return time(int(hours), int(minutes))
  except (ValueError, AttributeError) as e:
    raise ValueError(f"Time must be in HH:MM format, got: {v}") from e


def next_occurrence(at: time, now: datetime) -> datetime:
  """First datetime after now whose wall-clock time is `at`"""
  candidate = datetime.combine(now.date(), at)
  if candidate <= now:
    candidate += timedelta(days=1)
  return candidate


class NotificationConfig(BaseModel):
  """Configuration for a single notification"""

  title: str
  body: str
  timing: datetime | time
  repeats_daily: bool = False

  @field_validator("timing", mode="before")
  @classmethod
  def parse_timing(cls, v):
    """Parse timing field - "HH:MM" strings, ISO datetimes, or ready objects"""
    match v:
      case datetime() | time():
        return v
      case date():
        return datetime.combine(v, time())
      case str() if "T" in v or "-" in v:
        try:
          return datetime.fromisoformat(v)
        except ValueError as e:
          raise ValueError(f"Invalid ISO datetime: {v}") from e
      case str():
        return parse_time(v)
      case _:
        raise ValueError(f"Timing must be 'HH:MM' or an ISO datetime, got: {v!r}")

  def fire_at(self, now: Optional[datetime] = None) -> datetime:
    if isinstance(self.timing, datetime):
      return self.timing
    return next_occurrence(self.timing, now or datetime.now())

  def to_request(
    self, identifier: str, now: Optional[datetime] = None
  ) -> NotificationRequest:
    return NotificationRequest(
      title=self.title,
      body=self.body,
      fire_at=self.fire_at(now),
      repeats_daily=self.repeats_daily,
      identifier=identifier,
    )


class NotificationScheduleConfig(BaseModel):
  """Complete notification schedule configuration"""

  notifications: Dict[str, NotificationConfig]

  def requests(self, now: Optional[datetime] = None) -> list[NotificationRequest]:
    return [
      config.to_request(identifier, now)
      for identifier, config in self.notifications.items()
    ]


def parse_notification_config(config_path: Path | str) -> NotificationScheduleConfig:
  """
  Parse notification schedule from a YAML file

  Each top-level key is the notification identifier. Entries carry `title`,
  `body`, exactly one of `hour` ("HH:MM") or `at` (ISO datetime), and an
  optional `repeats_daily`.

  Args:
      config_path: Path to the YAML configuration file

  Returns:
      NotificationScheduleConfig keyed by identifier

  Raises:
      FileNotFoundError: If config file doesn't exist
      yaml.YAMLError: If YAML is malformed
      ValueError: If an entry sets both `hour` and `at`, or one of them
          holds a value that is not a time of day / datetime
      pydantic.ValidationError: If config doesn't match schema
  """
  config_path = Path(config_path)

  if not config_path.exists():
    raise FileNotFoundError(f"Configuration file not found: {config_path}")

  with open(config_path, "r") as f:
    raw_config = yaml.safe_load(f) or {}

  notifications = {}
  for identifier, config in raw_config.items():
    if "hour" in config and "at" in config:
      raise ValueError(
        f"Notification '{identifier}': both 'hour' and 'at' specified. "
        "Only one timing field is allowed."
      )

    # Transform hour or at into timing field
    match config:
      case {"at": str() | date() as at_value, **rest}:
        config = {**rest, "timing": at_value}
      case {"at": at_value}:
        raise ValueError(
          f"Notification '{identifier}': 'at' must be an ISO datetime, "
          f"got: {at_value!r}"
        )
      case {"hour": int() as minutes, **rest} if not isinstance(minutes, bool):
        # YAML 1.1 reads an unquoted 14:30 as the base-60 integer 870
        hours, minutes = divmod(minutes, 60)
        config = {**rest, "timing": f"{hours:02d}:{minutes:02d}"}
      case {"hour": str() | time() as hour_value, **rest}:
        config = {**rest, "timing": hour_value}
      case {"hour": hour_value}:
        raise ValueError(
          f"Notification '{identifier}': Time must be in HH:MM format, "
          f"got: {hour_value!r}"
        )
      case _:
        pass  # timing already in correct format

    notifications[str(identifier)] = NotificationConfig(**config)

  return NotificationScheduleConfig(notifications=notifications)
