"""
Notification scheduler program.

Reads the notification schedule file and hands every entry to the scheduler
picked for this platform, or cancels pending notifications.
"""

import argparse
import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir

from notification_schedule.config_parser import (
  NotificationScheduleConfig,
  parse_notification_config,
)
from notification_schedule.exceptions import SubmissionResult
from notification_schedule.manager import LocalNotificationManager
from notification_schedule.scheduler import LegacyNotificationScheduler
from notification_schedule.settings import AppConfig, configure_logging
from os_interfaces.base import OSImplementations

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "notifications.yaml"


def default_config_path(app_name: str) -> Path:
  return Path(user_config_dir(app_name, ensure_exists=True)) / CONFIG_FILE_NAME


def schedule_all(
  manager: LocalNotificationManager,
  config: NotificationScheduleConfig,
  now: Optional[datetime] = None,
) -> list[SubmissionResult]:
  """Schedule every notification in the config, continuing past rejections"""
  results = []
  for request in config.requests(now):
    logger.info(f"Processing notification: {request.identifier}")
    result = manager.scheduler.schedule_request(request)
    if not result.ok:
      logger.error(
        f"Failed to schedule '{request.identifier}': {result.error.description}"
      )
    results.append(result)
  return results


def _build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    description="Schedule or cancel local notifications from a schedule file."
  )
  parser.add_argument(
    "--config",
    type=Path,
    help=f"Path to the schedule file (default: <user config dir>/{CONFIG_FILE_NAME})",
  )
  parser.add_argument(
    "--cancel",
    nargs="+",
    metavar="ID",
    help="Cancel the pending notifications with these identifiers",
  )
  parser.add_argument(
    "--cancel-all",
    action="store_true",
    help="Cancel every pending notification of the application",
  )
  parser.add_argument(
    "--request-permission",
    action="store_true",
    help="Ask the OS for notification permission before scheduling",
  )
  parser.add_argument(
    "--wait",
    action="store_true",
    help="Keep running so in-process timers can fire (legacy queue on Linux)",
  )
  return parser


def main(
  argv: Optional[list[str]] = None, os_impl: Optional[OSImplementations] = None
) -> None:
  """Main entrypoint for the notification scheduler."""
  args = _build_parser().parse_args(argv)
  configure_logging()

  if os_impl is None:
    from entrypoints import default_os_implementations

    os_impl = default_os_implementations()

  manager = LocalNotificationManager(os_impl, app_name=AppConfig.APP_NAME)

  if args.cancel_all or args.cancel:
    result = manager.scheduler.cancel(None if args.cancel_all else args.cancel)
    if not result.ok:
      sys.exit(1)
    return

  if args.request_permission and not manager.registrator.request_authorization():
    # Scheduling still goes ahead; the OS decides whether anything is shown
    logger.warning("Notification permission not granted")

  config_path = args.config or default_config_path(manager.app_name)
  try:
    schedule_config = parse_notification_config(config_path)
    logger.info(f"Loaded configuration from {config_path}")
  except Exception as e:
    logger.error(f"Failed to load configuration: {e}")
    sys.exit(1)

  results = schedule_all(manager, schedule_config)
  logger.info("Notification scheduling complete")

  if args.wait:
    logger.info("Waiting for queued notifications (Ctrl+C to stop)...")
    try:
      threading.Event().wait()
    except KeyboardInterrupt:
      logger.info("Stopped")
  elif isinstance(manager.scheduler, LegacyNotificationScheduler):
    logger.warning("Legacy queue in use; pass --wait if notifications are in-process")

  if any(not r.ok for r in results):
    sys.exit(1)


if __name__ == "__main__":
  main()
