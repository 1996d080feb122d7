"""Composition root for local notifications."""

import logging
from typing import Optional

from os_interfaces.base import NotificationRegistration, OSImplementations

from .scheduler import NotificationScheduler, select_scheduler
from .settings import AppConfig

logger = logging.getLogger(__name__)


class LocalNotificationManager:
  """Owns the scheduler picked for this platform and the registration flow.

  Both are chosen once here and never replaced.
  """

  def __init__(
    self,
    os_impl: OSImplementations,
    app_name: Optional[str] = None,
    filtered_cancel: Optional[bool] = None,
  ):
    self.app_name = app_name or AppConfig.APP_NAME
    if filtered_cancel is None:
      filtered_cancel = AppConfig.LEGACY_FILTERED_CANCEL

    self.registrator: NotificationRegistration = os_impl.registration(self.app_name)
    self.scheduler: NotificationScheduler = select_scheduler(
      os_impl, self.app_name, filtered_cancel=filtered_cancel
    )
    logger.debug(
      "Notification manager for %s uses %s",
      self.app_name,
      type(self.scheduler).__name__,
    )
