"""
Tests for the localnotify-schedule and localnotify-show programs
Run with: uv run pytest test/test_cli.py
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notification import main as show_main
from notification_schedule import main as schedule_main
from os_interfaces.base import DEFAULT_SOUND, NotificationCenter

SCHEDULE_YAML = """
pay_bill:
  title: Reminder
  body: Pay bill
  hour: "09:00"
  repeats_daily: true

stretch:
  title: Stretch
  body: Stand up
  hour: "14:30"
"""


@pytest.fixture
def schedule_file(tmp_path):
  config_file = tmp_path / "notifications.yaml"
  config_file.write_text(SCHEDULE_YAML)
  return config_file


class TestScheduleProgram:
  """Tests for notification_schedule.main"""

  def test_schedules_every_entry(self, os_impl_factory, center, schedule_file):
    schedule_main.main(["--config", str(schedule_file)], os_impl=os_impl_factory(center))

    assert set(center.requests) == {"pay_bill", "stretch"}
    _, trigger = center.requests["pay_bill"]
    assert trigger.components() == {"hour": 9, "minute": 0}
    assert trigger.repeats is True

  def test_cancel_selected(self, os_impl_factory, center, schedule_file):
    os_impl = os_impl_factory(center)
    schedule_main.main(["--config", str(schedule_file)], os_impl=os_impl)

    schedule_main.main(["--cancel", "stretch"], os_impl=os_impl)

    assert list(center.requests) == ["pay_bill"]

  def test_cancel_all(self, os_impl_factory, queue, schedule_file):
    os_impl = os_impl_factory(queue=queue, available=False)

    schedule_main.main(["--cancel-all"], os_impl=os_impl)

    assert queue.cancel_all_calls == 1

  def test_missing_config_exits_with_error(self, os_impl_factory, center, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
      schedule_main.main(
        ["--config", str(tmp_path / "missing.yaml")], os_impl=os_impl_factory(center)
      )

    assert excinfo.value.code == 1

  def test_rejected_schedule_exits_with_error(self, os_impl_factory, schedule_file):
    center = MagicMock(spec=NotificationCenter)
    center.add.side_effect = RuntimeError("refused")

    with pytest.raises(SystemExit) as excinfo:
      schedule_main.main(
        ["--config", str(schedule_file)], os_impl=os_impl_factory(center)
      )

    assert excinfo.value.code == 1
    assert center.add.call_count == 2

  def test_request_permission_does_not_block_scheduling(
    self, os_impl_factory, center, schedule_file
  ):
    os_impl = os_impl_factory(center)
    os_impl.registration_cls = lambda app_name: MagicMock(
      request_authorization=MagicMock(return_value=False)
    )

    schedule_main.main(
      ["--config", str(schedule_file), "--request-permission"], os_impl=os_impl
    )

    assert len(center.requests) == 2


class TestShowProgram:
  """Tests for notification.main"""

  @pytest.mark.asyncio
  async def test_shows_notification_with_default_sound(self):
    notifier = MagicMock()
    notifier.create_notification = AsyncMock()

    await show_main.main(
      ["--title", "Reminder", "--body", "Pay bill", "--category", "bill-1"],
      notifier=notifier,
    )

    notifier.create_notification.assert_called_once_with(
      title="Reminder", body="Pay bill", sound=DEFAULT_SOUND
    )

  @pytest.mark.asyncio
  async def test_silent_notification(self):
    notifier = MagicMock()
    notifier.create_notification = AsyncMock()

    await show_main.main(["--title", "Quiet", "--sound", "none"], notifier=notifier)

    notifier.create_notification.assert_called_once_with(
      title="Quiet", body="", sound=None
    )

  @pytest.mark.asyncio
  async def test_wait_returns_after_click(self):
    notifier = MagicMock()

    async def click_immediately(**kwargs):
      kwargs["on_clicked"]()

    notifier.create_notification = AsyncMock(side_effect=click_immediately)

    await show_main.main(["--title", "Hi", "--wait"], notifier=notifier)

    notifier.create_notification.assert_called_once()
