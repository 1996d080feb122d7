"""Shared fixtures: in-memory stand-ins for the OS notification collaborators"""

from typing import Iterable, Optional

import pytest

from os_interfaces.base import (
  CalendarTrigger,
  LocalNotification,
  LocalNotificationQueue,
  NotificationCenter,
  NotificationContent,
  NotificationRegistration,
  OSImplementations,
)


class FakeNotificationCenter(NotificationCenter):
  def __init__(self, app_name: str = "test"):
    self.app_name = app_name
    self.requests: dict[str, tuple[NotificationContent, CalendarTrigger]] = {}
    self.calls: list[tuple] = []

  def add(self, identifier, content, trigger):
    self.calls.append(("add", identifier))
    self.requests[identifier] = (content, trigger)

  def pending_identifiers(self):
    return list(self.requests)

  def remove_pending(self, identifiers: Iterable[str]):
    identifiers = list(identifiers)
    self.calls.append(("remove_pending", identifiers))
    for identifier in identifiers:
      self.requests.pop(identifier, None)

  def remove_all_pending(self):
    self.calls.append(("remove_all_pending",))
    self.requests.clear()


class FakeLocalNotificationQueue(LocalNotificationQueue):
  def __init__(self, app_name: str = "test"):
    self.app_name = app_name
    self.scheduled: list[LocalNotification] = []
    self.cancelled: list[LocalNotification] = []
    self.cancel_all_calls = 0

  def schedule_local_notification(self, notification):
    self.scheduled.append(notification)

  def cancel_local_notification(self, notification):
    self.cancelled.append(notification)

  def cancel_all_local_notifications(self):
    self.cancel_all_calls += 1


class FakeRegistration(NotificationRegistration):
  def __init__(self, app_name: str = "test", granted: bool = True):
    self.app_name = app_name
    self.granted = granted
    self.requests = 0

  @property
  def display_name(self) -> Optional[str]:
    return self.app_name.title()

  def request_authorization(self) -> bool:
    self.requests += 1
    return self.granted


@pytest.fixture
def center():
  return FakeNotificationCenter()


@pytest.fixture
def queue():
  return FakeLocalNotificationQueue()


def make_os_impl(
  center: Optional[NotificationCenter] = None,
  queue: Optional[LocalNotificationQueue] = None,
  available: bool = True,
) -> OSImplementations:
  queue = queue or FakeLocalNotificationQueue()
  return OSImplementations(
    local_notification_queue_cls=lambda app_name: queue,
    registration_cls=FakeRegistration,
    notification_center_cls=(lambda app_name: center) if center is not None else None,
    calendar_triggers_available=lambda: available,
  )


@pytest.fixture
def os_impl_factory():
  return make_os_impl
