"""Linux-specific implementations of OS interfaces"""

import asyncio
import logging
import re
import string
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from desktop_notifier import DEFAULT_SOUND as NOTIFIER_DEFAULT_SOUND
from desktop_notifier import DesktopNotifier
from pystemd.dbuslib import DBus
from pystemd.systemd1 import Manager

from .base import (
  DEFAULT_SOUND,
  CalendarTrigger,
  LocalNotification,
  LocalNotificationQueue,
  NotificationCenter,
  NotificationContent,
  NotificationManager,
  NotificationRegistration,
  next_fire_date,
)

logger = logging.getLogger(__name__)

_UNIT_SAFE = set(string.ascii_letters + string.digits + ":_.-")


def escape_identifier(identifier: str) -> str:
  """Make an identifier usable inside a unit name (reversible)"""
  out = []
  for ch in identifier:
    if ch in _UNIT_SAFE:
      out.append(ch)
    else:
      out.extend(f"\\x{b:02x}" for b in ch.encode())
  return "".join(out)


def unescape_identifier(escaped: str) -> str:
  raw = re.sub(
    rb"\\x([0-9a-f]{2})",
    lambda m: bytes([int(m.group(1), 16)]),
    escaped.encode(),
  )
  return raw.decode()


def systemd_quote(arg: str) -> str:
  """Quote one argument for an Exec*= line"""
  escaped = (
    arg.replace("\\", "\\\\")
    .replace('"', '\\"')
    .replace("\n", "\\n")
    .replace("%", "%%")
    .replace("$", "$$")
  )
  return f'"{escaped}"'


def on_calendar(trigger: CalendarTrigger) -> str:
  """systemd calendar expression matching the trigger's fields"""
  day = "*" if trigger.day is None else f"{trigger.day:02d}"
  return f"*-*-{day} {trigger.hour:02d}:{trigger.minute:02d}:00"


@contextmanager
def _connect_systemd():
  with DBus(user_mode=True) as bus:
    manager = Manager(bus=bus)
    manager.load()
    yield manager


def systemd_user_manager_available() -> bool:
  """Capability probe: can we talk to the systemd user manager over D-Bus?"""
  try:
    with _connect_systemd():
      return True
  except Exception as e:
    logger.info(f"systemd user manager not reachable: {e}")
    return False


class LinuxNotificationManager(NotificationManager):
  """Linux notification manager using desktop-notifier"""

  def __init__(self, app_name: str):
    self.notifier = DesktopNotifier(app_name=app_name)

  async def create_notification(
    self,
    title: str,
    body: str,
    sound: Optional[str] = DEFAULT_SOUND,
    on_clicked: Optional[Callable] = None,
    on_dismissed: Optional[Callable] = None,
  ) -> None:
    """Create and show a notification using desktop-notifier

    Args:
      title: Notification title
      body: Notification body text
      sound: DEFAULT_SOUND for the system sound, None for silence
      on_clicked: Optional callback when notification is clicked
      on_dismissed: Optional callback when notification is dismissed
    """
    try:
      await self.notifier.send(
        title=title,
        message=body,
        sound=NOTIFIER_DEFAULT_SOUND if sound == DEFAULT_SOUND else None,
        on_clicked=on_clicked,
        on_dismissed=on_dismissed,
      )
      logger.info(f"Notification sent: {title}")
    except Exception as e:
      logger.error(f"Failed to send notification: {e}")


class SystemdNotificationCenter(NotificationCenter):
  """Calendar notification center backed by persistent systemd user timers.

  Each identifier owns one `<app>-notification-<identifier>` service/timer
  pair. The service runs `show_command` to display the notification.
  One-shot timers disable themselves after their service ran.
  """

  def __init__(self, app_name: str, show_command: str = "localnotify-show"):
    self.app_name = app_name
    self.show_command = show_command

  # ---- helpers ----
  @property
  def _prefix(self) -> str:
    return f"{self.app_name}-notification-"

  def _user_unit_dir(self) -> Path:
    return Path.home() / ".config/systemd/user"

  def _unit_base(self, identifier: str) -> str:
    return self._prefix + escape_identifier(identifier)

  def _write_unit(self, name: str, content: str) -> Path:
    d = self._user_unit_dir()
    d.mkdir(parents=True, exist_ok=True)
    p = d / name
    p.write_text(content)
    return p

  def _remove_unit_files(self, base: str) -> None:
    for suffix in (".service", ".timer"):
      (self._user_unit_dir() / f"{base}{suffix}").unlink(missing_ok=True)

  def _list_unit_files(self, manager: Manager) -> list[tuple[bytes, bytes]]:
    return [(u[0], u[1]) for u in manager.Manager.ListUnitFiles()]

  def _pending_bases(
    self, manager: Manager, include_fired: bool = False
  ) -> list[str]:
    """Unit bases of this app's timers.

    A one-shot timer disables itself after its service ran, but its unit files
    stay behind until removed. Those are skipped unless `include_fired` is set.
    """
    bases = []
    for path, state in self._list_unit_files(manager):
      name = Path(path.decode()).name
      if not (name.startswith(self._prefix) and name.endswith(".timer")):
        continue
      if state == b"disabled" and not include_fired:
        continue
      bases.append(name.removesuffix(".timer"))
    return bases

  def _service_content(
    self, base: str, content: NotificationContent, repeats: bool
  ) -> str:
    exec_line = " ".join(
      [
        self.show_command,
        "--title",
        systemd_quote(content.title),
        "--body",
        systemd_quote(content.body),
        "--category",
        systemd_quote(content.category),
        "--sound",
        "default" if content.sound == DEFAULT_SOUND else "none",
      ]
    )
    stop_line = ""
    if not repeats:
      timer = systemd_quote(f"{base}.timer")
      stop_line = f"ExecStopPost=systemctl --user disable --now {timer}\n"
    return (
      "[Unit]\n"
      f"Description={self.app_name} notification {systemd_quote(content.category)}\n"
      "\n[Service]\n"
      "Type=oneshot\n"
      f"ExecStart={exec_line}\n"
      f"{stop_line}"
    )

  def _timer_content(self, base: str, calendar: str) -> str:
    return (
      "[Unit]\n"
      f"Description={self.app_name} timer {base}\n"
      "\n[Timer]\n"
      f"OnCalendar={calendar}\n"
      "AccuracySec=1s\n"
      "Persistent=true\n"
      f"Unit={base}.service\n"
      "\n[Install]\n"
      "WantedBy=timers.target\n"
    )

  def _stop_and_disable(self, manager: Manager, base: str) -> None:
    timer = f"{base}.timer".encode()
    try:
      manager.Manager.StopUnit(timer, b"replace")
      manager.Manager.DisableUnitFiles([timer], False)
    except Exception as e:
      logger.warning(f"Could not stop timer {base}: {e}")
    self._remove_unit_files(base)

  # ---- public API ----
  def add(
    self, identifier: str, content: NotificationContent, trigger: CalendarTrigger
  ) -> None:
    base = self._unit_base(identifier)
    calendar = on_calendar(trigger)
    service_txt = self._service_content(base, content, trigger.repeats)
    timer_txt = self._timer_content(base, calendar)

    with _connect_systemd() as m:
      self._write_unit(f"{base}.service", service_txt)
      self._write_unit(f"{base}.timer", timer_txt)
      m.Manager.Reload()
      m.Manager.EnableUnitFiles([f"{base}.timer".encode()], False, True)
      # Restart so a replaced timer picks up its new calendar
      m.Manager.RestartUnit(f"{base}.timer".encode(), b"replace")

    logger.info(f"Scheduled {base} at {calendar}")

  def pending_identifiers(self) -> list[str]:
    with _connect_systemd() as m:
      bases = self._pending_bases(m)
    return [unescape_identifier(b.removeprefix(self._prefix)) for b in bases]

  def remove_pending(self, identifiers: Iterable[str]) -> None:
    with _connect_systemd() as m:
      existing = set(self._pending_bases(m, include_fired=True))
      removed = []
      for identifier in identifiers:
        base = self._unit_base(identifier)
        if base not in existing:
          logger.debug(f"No pending timer for '{identifier}'")
          continue
        self._stop_and_disable(m, base)
        removed.append(base)
      if removed:
        m.Manager.Reload()
    logger.info(f"Removed timers: {removed}")

  def remove_all_pending(self) -> None:
    with _connect_systemd() as m:
      bases = self._pending_bases(m, include_fired=True)
      for base in bases:
        self._stop_and_disable(m, base)
      m.Manager.Reload()
    logger.info(f"Removed all {len(bases)} {self.app_name} timers")


class LinuxLocalNotificationQueue(LocalNotificationQueue):
  """Fire-date queue kept in this process with threading.Timer.

  Used where no systemd user manager is reachable. Timers are daemon threads,
  so scheduled notifications only fire while the process is alive.
  """

  def __init__(
    self, app_name: str, notification_manager: Optional[NotificationManager] = None
  ):
    self.app_name = app_name
    self.notification_manager = notification_manager or LinuxNotificationManager(
      app_name=app_name
    )
    self._timers: dict[LocalNotification, threading.Timer] = {}
    self._lock = threading.Lock()

  def _timer(self, notification: LocalNotification, due: datetime) -> threading.Timer:
    delay = max((due - datetime.now(due.tzinfo)).total_seconds(), 0.0)
    timer = threading.Timer(delay, self._fire, args=(notification, due))
    timer.daemon = True
    return timer

  def _fire(self, notification: LocalNotification, due: datetime) -> None:
    asyncio.run(
      self.notification_manager.create_notification(
        notification.title, notification.body, sound=notification.sound
      )
    )
    # The replacement timer is stored under the same lock as the membership check
    with self._lock:
      if notification not in self._timers:
        return
      if notification.repeat_interval != "day":
        del self._timers[notification]
        return
      now = max(due, datetime.now(due.tzinfo))
      timer = self._timer(notification, next_fire_date(notification, now))
      self._timers[notification] = timer
    timer.start()

  def schedule_local_notification(self, notification: LocalNotification) -> None:
    due = next_fire_date(notification)
    timer = self._timer(notification, due)
    with self._lock:
      self._timers[notification] = timer
    timer.start()
    logger.info(f"Queued '{notification.category}' for {due.isoformat()}")

  def cancel_local_notification(self, notification: LocalNotification) -> None:
    with self._lock:
      timer = self._timers.pop(notification, None)
    if timer is not None:
      timer.cancel()
      logger.info(f"Cancelled '{notification.category}'")

  def cancel_all_local_notifications(self) -> None:
    with self._lock:
      timers = list(self._timers.values())
      self._timers.clear()
    for timer in timers:
      timer.cancel()
    logger.info(f"Cancelled {len(timers)} queued notifications")


class LinuxNotificationRegistration(NotificationRegistration):
  """Notification permission through desktop-notifier"""

  def __init__(self, app_name: str, display_name: Optional[str] = None):
    self._display_name = display_name or app_name
    self.notifier = DesktopNotifier(app_name=self._display_name)

  @property
  def display_name(self) -> Optional[str]:
    return self._display_name

  def request_authorization(self) -> bool:
    try:
      granted = asyncio.run(self.notifier.request_authorisation())
    except Exception as e:
      logger.error(f"Failed to request notification permission: {e}")
      return False
    logger.info(f"Notification permission granted: {granted}")
    return bool(granted)
