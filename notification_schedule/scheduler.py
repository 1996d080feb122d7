"""Scheduling strategies for local notifications.

Two interchangeable schedulers share one contract (`schedule`, `cancel`):

- CalendarNotificationScheduler submits calendar-component triggers to a
  NotificationCenter (systemd timers on Linux).
- LegacyNotificationScheduler submits fire-date/repeat-interval objects to a
  LocalNotificationQueue (AlarmManager on Android, in-process timers on Linux
  without systemd).

`select_scheduler` picks exactly one of them from platform capability.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from os_interfaces.base import (
  DEFAULT_SOUND,
  CalendarTrigger,
  LocalNotification,
  LocalNotificationQueue,
  NotificationCenter,
  NotificationContent,
  OSImplementations,
)

from .exceptions import NotificationError, SubmissionResult
from .request import NotificationRequest, RecurrenceDescriptor

logger = logging.getLogger(__name__)


def _identifier_list(identifiers: Optional[Iterable[str]]) -> Optional[list[str]]:
  """None means "everything"; a single identifier is not split into characters"""
  if identifiers is None:
    return None
  if isinstance(identifiers, str):
    return [identifiers]
  return list(identifiers)


class NotificationScheduler(ABC):
  """Abstract base class for a notification scheduling strategy"""

  @abstractmethod
  def schedule(
    self,
    title: str,
    body: str,
    fire_at: datetime,
    repeats_daily: bool,
    identifier: str,
  ) -> SubmissionResult:
    """Schedule a notification

    Args:
      title: Notification title
      body: Notification body text
      fire_at: When to fire, local time if naive
      repeats_daily: Fire every day at the same hour and minute
      identifier: Key used to cancel the notification later

    Returns:
      "submitted" once the OS accepted the request, "rejected" if the OS
      layer raised while accepting it
    """
    raise NotImplementedError

  @abstractmethod
  def cancel(self, identifiers: Optional[Iterable[str]] = None) -> SubmissionResult:
    """Cancel pending notifications

    Args:
      identifiers: Keys to cancel (a single key may be passed as a str), or
        None to cancel everything
    """
    raise NotImplementedError

  def schedule_request(self, request: NotificationRequest) -> SubmissionResult:
    return self.schedule(
      title=request.title,
      body=request.body,
      fire_at=request.fire_at,
      repeats_daily=request.repeats_daily,
      identifier=request.identifier,
    )

  def schedule_soon(self, title: str, body: str) -> SubmissionResult:
    """Fire a one-shot notification ten seconds from now"""
    return self.schedule_request(NotificationRequest.soon(title, body))


class CalendarNotificationScheduler(NotificationScheduler):
  """Schedules calendar triggers through a NotificationCenter.

  The OS fires at the next local time matching the recurrence fields, not
  after a duration. A one-shot request matches day/hour/minute only: if that
  moment already passed this month it fires next month.
  """

  def __init__(self, center: NotificationCenter):
    self.center = center

  def build_trigger(self, request: NotificationRequest) -> CalendarTrigger:
    recurrence = RecurrenceDescriptor.for_request(request)
    return CalendarTrigger(
      hour=recurrence.hour,
      minute=recurrence.minute,
      day=recurrence.day,
      repeats=request.repeats_daily,
    )

  def schedule(
    self,
    title: str,
    body: str,
    fire_at: datetime,
    repeats_daily: bool,
    identifier: str,
  ) -> SubmissionResult:
    request = NotificationRequest(
      title=title,
      body=body,
      fire_at=fire_at,
      repeats_daily=repeats_daily,
      identifier=identifier,
    )
    content = NotificationContent(
      title=title, body=body, category=identifier, sound=DEFAULT_SOUND
    )
    trigger = self.build_trigger(request)

    try:
      self.center.add(identifier, content, trigger)
    except Exception as e:
      error = NotificationError.from_exception(
        e,
        name="SCHEDULE_REJECTED",
        source="notification_center",
        context=f"Could not schedule '{identifier}'",
      )
      logger.error(error.description)
      return SubmissionResult.rejected(error, identifier)

    logger.info(
      "Scheduled '%s' matching %s (repeats=%s)",
      identifier,
      trigger.components(),
      trigger.repeats,
    )
    return SubmissionResult.submitted(identifier)

  def cancel(self, identifiers: Optional[Iterable[str]] = None) -> SubmissionResult:
    keys = _identifier_list(identifiers)
    try:
      if keys is None:
        # Clears everything the application has pending, not just ours
        self.center.remove_all_pending()
      else:
        self.center.remove_pending(keys)
    except Exception as e:
      error = NotificationError.from_exception(
        e, name="CANCEL_REJECTED", source="notification_center"
      )
      logger.error("Could not cancel notifications: %s", error.description)
      return SubmissionResult.rejected(error, *(keys or []))

    logger.info("Cancelled %s", "all notifications" if keys is None else keys)
    return SubmissionResult.submitted(*(keys or []))


class LegacyNotificationScheduler(NotificationScheduler):
  """Schedules fire-date notifications through a LocalNotificationQueue.

  Every issued object is appended to a private pending list that only ever
  grows. `cancel` walks that list and cancels each object by reference.
  Unless `filtered_cancel` is set, the identifiers passed to `cancel` only
  decide whether the queue is also told to cancel everything; every object in
  the list is cancelled either way.
  """

  def __init__(self, queue: LocalNotificationQueue, filtered_cancel: bool = False):
    self.queue = queue
    self.filtered_cancel = filtered_cancel
    self._pending: list[LocalNotification] = []

  @property
  def pending(self) -> tuple[LocalNotification, ...]:
    return tuple(self._pending)

  def schedule(
    self,
    title: str,
    body: str,
    fire_at: datetime,
    repeats_daily: bool,
    identifier: str,
  ) -> SubmissionResult:
    notification = LocalNotification(
      fire_date=fire_at,
      repeat_interval="day" if repeats_daily else "none",
      time_zone=datetime.now().astimezone().tzinfo,
      title=title,
      body=body,
      category=identifier,
      sound=DEFAULT_SOUND,
    )
    self._pending.append(notification)

    try:
      self.queue.schedule_local_notification(notification)
    except Exception as e:
      error = NotificationError.from_exception(
        e,
        name="SCHEDULE_REJECTED",
        source="local_queue",
        context=f"Could not schedule '{identifier}'",
      )
      logger.error(error.description)
      return SubmissionResult.rejected(error, identifier)

    logger.info(
      "Scheduled '%s' at %s (repeat=%s)",
      identifier,
      fire_at.isoformat(),
      notification.repeat_interval,
    )
    return SubmissionResult.submitted(identifier)

  def _targets(self, keys: Optional[list[str]]) -> list[LocalNotification]:
    if keys is None or not self.filtered_cancel:
      return list(self._pending)
    wanted = set(keys)
    return [n for n in self._pending if n.category in wanted]

  def cancel(self, identifiers: Optional[Iterable[str]] = None) -> SubmissionResult:
    keys = _identifier_list(identifiers)
    try:
      if keys is None:
        self.queue.cancel_all_local_notifications()
      for notification in self._targets(keys):
        self.queue.cancel_local_notification(notification)
    except Exception as e:
      error = NotificationError.from_exception(
        e, name="CANCEL_REJECTED", source="local_queue"
      )
      logger.error("Could not cancel notifications: %s", error.description)
      return SubmissionResult.rejected(error, *(keys or []))

    logger.info("Cancelled %s", "all notifications" if keys is None else keys)
    return SubmissionResult.submitted(*(keys or []))


def select_scheduler(
  os_impl: OSImplementations, app_name: str, filtered_cancel: bool = False
) -> NotificationScheduler:
  """Pick the calendar scheduler when the platform supports it, else legacy"""
  try:
    modern = os_impl.supports_calendar_triggers()
  except Exception as e:
    logger.warning(f"Calendar trigger probe failed, using legacy queue: {e}")
    modern = False

  if modern:
    logger.info("Using calendar notification center")
    return CalendarNotificationScheduler(os_impl.notification_center(app_name))

  logger.info("Using legacy local notification queue")
  return LegacyNotificationScheduler(
    os_impl.local_notification_queue(app_name), filtered_cancel=filtered_cancel
  )
