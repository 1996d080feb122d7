"""Notification requests and the calendar recurrence derived from them."""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

SOON_DELAY = timedelta(seconds=10)


def new_identifier() -> str:
  return str(uuid.uuid4()).upper()


class NotificationRequest(BaseModel):
  """One notification to hand to a scheduler. Never mutated after creation."""

  model_config = ConfigDict(frozen=True)

  title: str
  body: str
  fire_at: datetime
  repeats_daily: bool = False
  identifier: str = Field(default_factory=new_identifier)

  @classmethod
  def soon(
    cls, title: str, body: str, now: Optional[datetime] = None
  ) -> "NotificationRequest":
    """One-shot request firing ten seconds from now under a fresh identifier"""
    now = now or datetime.now()
    return cls(
      title=title,
      body=body,
      fire_at=now + SOON_DELAY,
      repeats_daily=False,
      identifier=new_identifier(),
    )


class RecurrenceDescriptor(BaseModel):
  """Subset of date fields a calendar trigger matches.

  Daily requests carry hour/minute only. One-shot requests add the day of
  month, so a trigger whose day already passed fires next month instead.
  """

  model_config = ConfigDict(frozen=True)

  hour: int = Field(ge=0, le=23)
  minute: int = Field(ge=0, le=59)
  day: Optional[int] = Field(default=None, ge=1, le=31)

  @classmethod
  def for_request(cls, request: NotificationRequest) -> "RecurrenceDescriptor":
    return recurrence_for(request.fire_at, request.repeats_daily)

  def components(self) -> dict[str, int]:
    return self.model_dump(exclude_none=True)


def local_time(moment: datetime) -> datetime:
  """Wall-clock time in the local zone. Naive datetimes are already local."""
  if moment.tzinfo is None:
    return moment
  return moment.astimezone()


def recurrence_for(fire_at: datetime, repeats_daily: bool) -> RecurrenceDescriptor:
  moment = local_time(fire_at)
  if repeats_daily:
    # Only daily repetition is supported
    return RecurrenceDescriptor(hour=moment.hour, minute=moment.minute)
  return RecurrenceDescriptor(day=moment.day, hour=moment.hour, minute=moment.minute)
