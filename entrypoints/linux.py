"""Linux wiring: systemd timers when reachable, in-process timers otherwise."""

from __future__ import annotations

from functools import partial

from notification_schedule.settings import AppConfig
from os_interfaces.base import OSImplementations
from os_interfaces.linux import (
  LinuxLocalNotificationQueue,
  LinuxNotificationRegistration,
  SystemdNotificationCenter,
  systemd_user_manager_available,
)


def linux_os_implementations(force_legacy: bool | None = None) -> OSImplementations:
  if force_legacy is None:
    force_legacy = AppConfig.FORCE_LEGACY
  return OSImplementations(
    local_notification_queue_cls=LinuxLocalNotificationQueue,
    registration_cls=LinuxNotificationRegistration,
    notification_center_cls=(
      None
      if force_legacy
      else partial(SystemdNotificationCenter, show_command=AppConfig.SHOW_COMMAND)
    ),
    calendar_triggers_available=systemd_user_manager_available,
  )
