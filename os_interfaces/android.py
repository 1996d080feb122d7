"""Android-specific implementations of OS interfaces."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from datetime import datetime
from typing import Callable, Optional

from jnius import PythonJavaClass, autoclass, java_method  # type: ignore

from .base import (
  DEFAULT_SOUND,
  LocalNotification,
  LocalNotificationQueue,
  NotificationManager,
  NotificationRegistration,
  next_fire_date,
)

logger = logging.getLogger(__name__)


# --- PyJNIus handles ---
PythonActivity = autoclass("org.kivy.android.PythonActivity")
Intent = autoclass("android.content.Intent")
IntentFilter = autoclass("android.content.IntentFilter")
PendingIntent = autoclass("android.app.PendingIntent")
NotificationManagerJava = autoclass("android.app.NotificationManager")
NotificationChannel = autoclass("android.app.NotificationChannel")
BuildVersion = autoclass("android.os.Build$VERSION")
NotificationCompatBuilder = autoclass("androidx.core.app.NotificationCompat$Builder")
NotificationCompat = autoclass("androidx.core.app.NotificationCompat")
NotificationManagerCompat = autoclass("androidx.core.app.NotificationManagerCompat")
ActivityCompat = autoclass("androidx.core.app.ActivityCompat")
AlarmManagerJava = autoclass("android.app.AlarmManager")
AndroidRDrawable = autoclass("android.R$drawable")
Context = autoclass("android.content.Context")

ACTION_CLICK = "com.localnotify.NOTIFICATION_CLICKED"
ACTION_DISMISS = "com.localnotify.NOTIFICATION_DISMISSED"
ACTION_ALARM_FIRE = "com.localnotify.ALARM_FIRED"
CHANNEL_ID = "localnotify-general"
POST_NOTIFICATIONS = "android.permission.POST_NOTIFICATIONS"
PERMISSION_REQUEST_CODE = 4_200


def _context():
  return PythonActivity.mActivity.getApplicationContext()


def _flags(base: int | None = None) -> int:
  flag_immutable = PendingIntent.FLAG_IMMUTABLE
  flag_update = PendingIntent.FLAG_UPDATE_CURRENT
  return (base or 0) | flag_immutable | flag_update


def _ensure_channel(ctx, manager) -> None:
  if BuildVersion.SDK_INT < 26:
    return
  channel = NotificationChannel(
    CHANNEL_ID,
    "Notifications",
    NotificationManagerJava.IMPORTANCE_DEFAULT,
  )
  manager.createNotificationChannel(channel)


def _rand_request_code() -> int:
  return random.randint(10_000, 99_999)


def _millis(notification: LocalNotification) -> int:
  return int(next_fire_date(notification).timestamp() * 1000)


class _NotificationReceiver(PythonJavaClass):
  __javainterfaces__ = ["android/content/BroadcastReceiver"]
  __javacontext__ = "app"

  def __init__(self, on_clicked: Optional[Callable], on_dismissed: Optional[Callable]):
    super().__init__()
    self.on_clicked = on_clicked
    self.on_dismissed = on_dismissed

  @java_method("(Landroid/content/Context;Landroid/content/Intent;)V")
  def onReceive(self, _context, intent):
    try:
      action = intent.getAction()
      if action == ACTION_CLICK and self.on_clicked:
        self.on_clicked()
      elif action == ACTION_DISMISS and self.on_dismissed:
        self.on_dismissed()
    except Exception:  # pragma: no cover
      logger.exception("Notification callback failed")


class AndroidNotificationManager(NotificationManager):
  """Android notification manager using PyJNIus NotificationCompat."""

  def __init__(self, app_name: str | None = None):
    self.ctx = _context()
    self.manager = self.ctx.getSystemService(Context.NOTIFICATION_SERVICE)
    _ensure_channel(self.ctx, self.manager)

  async def create_notification(
    self,
    title: str,
    body: str,
    sound: Optional[str] = DEFAULT_SOUND,
    on_clicked: Optional[Callable] = None,
    on_dismissed: Optional[Callable] = None,
  ) -> None:
    receiver = _NotificationReceiver(on_clicked, on_dismissed)
    f = IntentFilter()
    f.addAction(ACTION_CLICK)
    f.addAction(ACTION_DISMISS)
    self.ctx.registerReceiver(receiver, f)

    notification_id = _rand_request_code()
    icon = self.ctx.getApplicationInfo().icon or AndroidRDrawable.ic_dialog_info

    click_intent = Intent(self.ctx, PythonActivity)
    click_intent.setAction(ACTION_CLICK)
    click_intent.putExtra("notification_id", notification_id)
    click_pi = PendingIntent.getBroadcast(
      self.ctx, notification_id, click_intent, _flags()
    )

    dismiss_intent = Intent(self.ctx, PythonActivity)
    dismiss_intent.setAction(ACTION_DISMISS)
    dismiss_intent.putExtra("notification_id", notification_id)
    dismiss_pi = PendingIntent.getBroadcast(
      self.ctx, notification_id + 1, dismiss_intent, _flags()
    )

    defaults = (
      NotificationCompat.DEFAULT_ALL
      if sound == DEFAULT_SOUND
      else NotificationCompat.DEFAULT_LIGHTS | NotificationCompat.DEFAULT_VIBRATE
    )
    builder = (
      NotificationCompatBuilder(self.ctx, CHANNEL_ID)
      .setSmallIcon(icon)
      .setContentTitle(title)
      .setContentText(body)
      .setAutoCancel(True)
      .setPriority(NotificationCompat.PRIORITY_DEFAULT)
      .setDefaults(defaults)
      .setContentIntent(click_pi)
      .setDeleteIntent(dismiss_pi)
    )

    self.manager.notify(notification_id, builder.build())
    logger.info("Notification %s created", notification_id)


class _AlarmReceiver(PythonJavaClass):
  """Shows the notification carried by a fired alarm."""

  __javainterfaces__ = ["android/content/BroadcastReceiver"]
  __javacontext__ = "app"

  def __init__(self, notification_manager: NotificationManager):
    super().__init__()
    self.notification_manager = notification_manager

  @java_method("(Landroid/content/Context;Landroid/content/Intent;)V")
  def onReceive(self, _context, intent):
    title = intent.getStringExtra("title")
    body = intent.getStringExtra("body")
    sound = intent.getStringExtra("sound")

    def run():
      try:
        asyncio.run(
          self.notification_manager.create_notification(title, body, sound=sound)
        )
      except Exception:
        logger.exception("Failed to show alarm notification")

    threading.Thread(target=run, daemon=True).start()


_alarm_receiver: _AlarmReceiver | None = None


def _ensure_alarm_receiver(ctx, notification_manager: NotificationManager) -> _AlarmReceiver:
  global _alarm_receiver
  if _alarm_receiver is None:
    _alarm_receiver = _AlarmReceiver(notification_manager)
    intent_filter = IntentFilter()
    intent_filter.addAction(ACTION_ALARM_FIRE)
    ctx.registerReceiver(_alarm_receiver, intent_filter)
  return _alarm_receiver


class AndroidLocalNotificationQueue(LocalNotificationQueue):
  """Fire-date queue on AlarmManager setExact/setRepeating.

  Each scheduled LocalNotification carries its PendingIntent in `handle`,
  which is what AlarmManager needs to cancel it again.
  """

  def __init__(self, app_name: str | None = None):
    self.ctx = _context()
    self.alarm_manager = self.ctx.getSystemService(Context.ALARM_SERVICE)
    _ensure_alarm_receiver(self.ctx, AndroidNotificationManager())
    self._issued: list[LocalNotification] = []

  def schedule_local_notification(self, notification: LocalNotification) -> None:
    now_ms = int(datetime.now().timestamp() * 1000)
    trigger_at = max(_millis(notification), now_ms + 1000)

    intent = Intent(self.ctx, PythonActivity)
    intent.setAction(ACTION_ALARM_FIRE)
    intent.putExtra("title", notification.title)
    intent.putExtra("body", notification.body)
    intent.putExtra("category", notification.category)
    intent.putExtra("sound", notification.sound or "")

    request_code = _rand_request_code()
    pending_intent = PendingIntent.getBroadcast(
      self.ctx, request_code, intent, _flags()
    )
    notification.handle = pending_intent
    self._issued.append(notification)

    if notification.repeat_interval == "day":
      self.alarm_manager.setRepeating(
        AlarmManagerJava.RTC_WAKEUP,
        trigger_at,
        AlarmManagerJava.INTERVAL_DAY,
        pending_intent,
      )
    elif BuildVersion.SDK_INT >= 23:
      self.alarm_manager.setExactAndAllowWhileIdle(
        AlarmManagerJava.RTC_WAKEUP, trigger_at, pending_intent
      )
    else:
      self.alarm_manager.setExact(
        AlarmManagerJava.RTC_WAKEUP, trigger_at, pending_intent
      )

    logger.info(
      "Scheduled alarm %s for '%s' at %s",
      request_code,
      notification.category,
      notification.fire_date.isoformat(),
    )

  def cancel_local_notification(self, notification: LocalNotification) -> None:
    if notification.handle is None:
      return
    self.alarm_manager.cancel(notification.handle)
    if notification in self._issued:
      self._issued.remove(notification)
    logger.info("Cancelled alarm for '%s'", notification.category)

  def cancel_all_local_notifications(self) -> None:
    # AlarmManager has no cancel-all; walk everything this process issued
    for notification in self._issued:
      if notification.handle is not None:
        self.alarm_manager.cancel(notification.handle)
    self._issued.clear()
    logger.info("Cancelled all alarms")


class AndroidNotificationRegistration(NotificationRegistration):
  """POST_NOTIFICATIONS permission and application label."""

  def __init__(self, app_name: str | None = None):
    self.ctx = _context()

  @property
  def display_name(self) -> Optional[str]:
    label = self.ctx.getPackageManager().getApplicationLabel(
      self.ctx.getApplicationInfo()
    )
    return str(label) if label is not None else None

  def _enabled(self) -> bool:
    compat = getattr(NotificationManagerCompat, "from")(self.ctx)
    return bool(compat.areNotificationsEnabled())

  def request_authorization(self) -> bool:
    if self._enabled():
      return True
    if BuildVersion.SDK_INT >= 33:
      ActivityCompat.requestPermissions(
        PythonActivity.mActivity, [POST_NOTIFICATIONS], PERMISSION_REQUEST_CODE
      )
      logger.info("Requested %s", POST_NOTIFICATIONS)
    return self._enabled()
