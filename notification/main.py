"""
Show one system notification.

The systemd service units written by SystemdNotificationCenter run this
program when their timer fires.

Usage:
    localnotify-show --title "Reminder" --body "Pay bill" --category bill-1
"""

import argparse
import asyncio
import logging
from typing import Optional

from notification_schedule.settings import AppConfig, configure_logging
from os_interfaces.base import DEFAULT_SOUND, NotificationManager

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(description="Show a local notification now.")
  parser.add_argument("--title", required=True, help="Notification title")
  parser.add_argument("--body", default="", help="Notification body text")
  parser.add_argument(
    "--category", default=None, help="Identifier the notification was scheduled under"
  )
  parser.add_argument(
    "--sound",
    choices=["default", "none"],
    default="default",
    help="Play the default system sound or stay silent",
  )
  parser.add_argument(
    "--wait",
    action="store_true",
    help="Stay running until the notification is clicked or dismissed",
  )
  return parser


async def show_notification(
  title: str,
  body: str,
  sound: Optional[str],
  notifier: NotificationManager,
) -> None:
  """Show the notification and wait until it is clicked or dismissed."""
  done_event = asyncio.Event()

  def on_clicked():
    logger.info("Notification clicked")
    done_event.set()

  def on_dismissed():
    logger.info("Notification dismissed")
    done_event.set()

  await notifier.create_notification(
    title=title,
    body=body,
    sound=sound,
    on_clicked=on_clicked,
    on_dismissed=on_dismissed,
  )
  logger.info("Waiting for notification interaction...")
  await done_event.wait()


async def main(
  argv: Optional[list[str]] = None,
  notifier: Optional[NotificationManager] = None,
) -> None:
  """Main entrypoint function."""
  args = _build_parser().parse_args(argv)
  configure_logging()

  if notifier is None:
    from os_interfaces.linux import LinuxNotificationManager

    notifier = LinuxNotificationManager(app_name=AppConfig.APP_NAME)

  sound = DEFAULT_SOUND if args.sound == "default" else None
  logger.info(f"Showing notification '{args.category or args.title}'")

  if args.wait:
    await show_notification(args.title, args.body, sound, notifier)
  else:
    await notifier.create_notification(title=args.title, body=args.body, sound=sound)
  logger.info("Done, exiting")


def run() -> None:
  asyncio.run(main())


if __name__ == "__main__":
  run()
