"""Android wiring: AlarmManager is the only trigger queue."""

from os_interfaces.base import OSImplementations
from os_interfaces.android import (
  AndroidLocalNotificationQueue,
  AndroidNotificationRegistration,
)


def android_os_implementations() -> OSImplementations:
  return OSImplementations(
    local_notification_queue_cls=AndroidLocalNotificationQueue,
    registration_cls=AndroidNotificationRegistration,
  )
