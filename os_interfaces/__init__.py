"""OS interface module - platform-specific implementations

Since we build separate executables for each platform,
import the appropriate implementation directly in the entry points:
- entrypoints/linux.py imports from os_interfaces.linux
- entrypoints/android.py imports from os_interfaces.android
"""

from .base import (
  DEFAULT_SOUND,
  CalendarTrigger,
  LocalNotification,
  LocalNotificationQueue,
  NotificationCenter,
  NotificationContent,
  NotificationManager,
  NotificationRegistration,
  OSImplementations,
  next_fire_date,
)

__all__ = [
  "DEFAULT_SOUND",
  "CalendarTrigger",
  "LocalNotification",
  "LocalNotificationQueue",
  "NotificationCenter",
  "NotificationContent",
  "NotificationManager",
  "NotificationRegistration",
  "OSImplementations",
  "next_fire_date",
]
