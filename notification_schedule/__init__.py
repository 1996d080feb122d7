"""Local notification scheduling module"""

from .config_parser import (
  NotificationConfig,
  NotificationScheduleConfig,
  parse_notification_config,
)
from .exceptions import NotificationError, SubmissionResult
from .manager import LocalNotificationManager
from .request import NotificationRequest, RecurrenceDescriptor, recurrence_for
from .scheduler import (
  CalendarNotificationScheduler,
  LegacyNotificationScheduler,
  NotificationScheduler,
  select_scheduler,
)

__all__ = [
  "CalendarNotificationScheduler",
  "LegacyNotificationScheduler",
  "LocalNotificationManager",
  "NotificationConfig",
  "NotificationError",
  "NotificationRequest",
  "NotificationScheduleConfig",
  "NotificationScheduler",
  "RecurrenceDescriptor",
  "SubmissionResult",
  "parse_notification_config",
  "recurrence_for",
  "select_scheduler",
]
