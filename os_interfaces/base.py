"""Abstract base classes for OS-specific interfaces"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable, Iterable, Literal, Optional

DEFAULT_SOUND = "default"

RepeatInterval = Literal["day", "none"]


@dataclass(frozen=True)
class NotificationContent:
  """What the user sees when a trigger fires."""

  title: str
  body: str
  category: str
  sound: Optional[str] = DEFAULT_SOUND


@dataclass(frozen=True)
class CalendarTrigger:
  """Date fields a notification center matches against the local clock.

  Fields left as None are wildcards. With only hour/minute set the trigger
  matches once a day; with day/hour/minute it matches once a month.
  """

  hour: int
  minute: int
  day: Optional[int] = None
  repeats: bool = False

  def components(self) -> dict[str, int]:
    fields = {"hour": self.hour, "minute": self.minute}
    if self.day is not None:
      fields["day"] = self.day
    return fields


@dataclass(eq=False)
class LocalNotification:
  """Fire-date/repeat-interval notification handed to a legacy queue.

  Instances compare by identity: a queue cancels exactly the object it was
  given. `handle` is free for the queue to attach its own bookkeeping.
  """

  fire_date: datetime
  repeat_interval: RepeatInterval
  time_zone: Optional[tzinfo]
  title: str
  body: str
  category: str
  sound: Optional[str] = DEFAULT_SOUND
  handle: Any = field(default=None, repr=False)


def next_fire_date(
  notification: LocalNotification, now: Optional[datetime] = None
) -> datetime:
  """When a queue should next show `notification`.

  The fire date is read in the notification's time zone. A daily
  notification whose fire date has passed moves forward by whole days to its
  next wall-clock occurrence after `now`. A passed one-shot date is returned
  unchanged: it is due immediately.
  """
  fire = notification.fire_date
  if fire.tzinfo is None and notification.time_zone is not None:
    fire = fire.replace(tzinfo=notification.time_zone)
  now = now or datetime.now(fire.tzinfo)
  if notification.repeat_interval == "day" and fire <= now:
    fire += timedelta(days=(now - fire).days + 1)
  return fire


class NotificationManager(ABC):
  """Abstract base class for showing a notification right now"""

  @abstractmethod
  async def create_notification(
    self,
    title: str,
    body: str,
    sound: Optional[str] = DEFAULT_SOUND,
    on_clicked: Optional[Callable] = None,
    on_dismissed: Optional[Callable] = None,
  ) -> None:
    """Create and show a notification

    Args:
      title: Notification title
      body: Notification body text
      sound: DEFAULT_SOUND for the system sound, None for silence
      on_clicked: Optional callback when notification is clicked
      on_dismissed: Optional callback when notification is dismissed
    """
    raise NotImplementedError


class NotificationCenter(ABC):
  """Trigger queue that matches calendar components (the modern API)."""

  @abstractmethod
  def add(
    self, identifier: str, content: NotificationContent, trigger: CalendarTrigger
  ) -> None:
    """Submit a request keyed by identifier, replacing any request with that key.

    Args:
      identifier: Key of the pending request
      content: Title, body, sound and category to show
      trigger: Calendar components to match and whether to keep matching
    """
    raise NotImplementedError

  @abstractmethod
  def pending_identifiers(self) -> list[str]:
    """Identifiers of the requests the OS still holds for this application"""
    raise NotImplementedError

  @abstractmethod
  def remove_pending(self, identifiers: Iterable[str]) -> None:
    """Remove pending requests by key. Unknown keys are ignored."""
    raise NotImplementedError

  @abstractmethod
  def remove_all_pending(self) -> None:
    """Remove every pending request of the application"""
    raise NotImplementedError


class LocalNotificationQueue(ABC):
  """Fire-date/repeat-interval queue (the legacy API)."""

  @abstractmethod
  def schedule_local_notification(self, notification: LocalNotification) -> None:
    raise NotImplementedError

  @abstractmethod
  def cancel_local_notification(self, notification: LocalNotification) -> None:
    """Cancel one previously scheduled object. Unknown objects are ignored."""
    raise NotImplementedError

  @abstractmethod
  def cancel_all_local_notifications(self) -> None:
    raise NotImplementedError


class NotificationRegistration(ABC):
  """Permission flow and app metadata. Scheduling never depends on it."""

  @property
  @abstractmethod
  def display_name(self) -> Optional[str]:
    """Display name of the running application"""
    pass

  @abstractmethod
  def request_authorization(self) -> bool:
    """Ask the OS for permission to post notifications

    Returns:
      True if notifications are allowed after the request
    """
    pass


def _never() -> bool:
  return False


@dataclass
class OSImplementations:
  """Bundle of platform implementations injected into the scheduling core.

  The entrypoint for each platform builds one of these. The notification
  center is optional: platforms without calendar triggers leave it None.
  """

  local_notification_queue_cls: Callable[..., LocalNotificationQueue]
  registration_cls: Callable[..., NotificationRegistration]
  notification_center_cls: Optional[Callable[..., NotificationCenter]] = None
  calendar_triggers_available: Callable[[], bool] = _never

  def supports_calendar_triggers(self) -> bool:
    if self.notification_center_cls is None:
      return False
    return bool(self.calendar_triggers_available())

  def notification_center(self, app_name: str) -> NotificationCenter:
    if self.notification_center_cls is None:
      raise RuntimeError("This platform has no calendar notification center")
    return self.notification_center_cls(app_name=app_name)

  def local_notification_queue(self, app_name: str) -> LocalNotificationQueue:
    return self.local_notification_queue_cls(app_name=app_name)

  def registration(self, app_name: str) -> NotificationRegistration:
    return self.registration_cls(app_name=app_name)
