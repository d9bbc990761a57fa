import datetime
from unittest.mock import MagicMock

import pytest

from leavenow.errors import NotificationWriteError
from leavenow.reminders import (
    GET_READY_TITLE, LEAVE_NOW_TITLE, InMemoryNotificationStore, JsonNotificationStore,
    PendingReminder, ReminderScheduler, reconcile_reminders
)
from leavenow.route import RouteInfo

NOW = datetime.datetime(2025, 3, 10, 9, 0, tzinfo=datetime.timezone.utc)


def info_leaving_in(seconds, route_time=1200, destination="Dentist"):
    target = NOW + datetime.timedelta(seconds=seconds + route_time)
    return RouteInfo("Highway", route_time, destination, target, NOW + datetime.timedelta(seconds=route_time))


def test_schedules_both_reminders():
    store = InMemoryNotificationStore()
    reconcile_reminders(info_leaving_in(3600), NOW, store)

    reminders = {r.title: r for r in store.list_pending()}
    leave = reminders[LEAVE_NOW_TITLE]
    assert leave.body == "Leave NOW to Dentist"
    assert leave.trigger_time == NOW + datetime.timedelta(seconds=3600)
    assert leave.sound == "default"
    ready = reminders[GET_READY_TITLE]
    assert ready.body == "Get ready to leave to Dentist"
    assert ready.trigger_time == NOW + datetime.timedelta(seconds=3000)


def test_leave_now_ten_seconds_out_is_skipped():
    store = InMemoryNotificationStore()
    reconcile_reminders(info_leaving_in(10), NOW, store)
    assert store.list_pending() == []


def test_leave_now_thirty_one_seconds_out_is_scheduled():
    store = InMemoryNotificationStore()
    reconcile_reminders(info_leaving_in(31), NOW, store)
    titles = [r.title for r in store.list_pending()]
    # the get-ready trigger is ten minutes earlier, so already past
    assert titles == [LEAVE_NOW_TITLE]


def test_updates_existing_reminder_in_place():
    existing = PendingReminder(LEAVE_NOW_TITLE, "Leave NOW to Old Place", NOW, sound="chime")
    store = InMemoryNotificationStore([existing])
    reconcile_reminders(info_leaving_in(1800), NOW, store)

    leave = [r for r in store.list_pending() if r.title == LEAVE_NOW_TITLE]
    assert len(leave) == 1
    assert leave[0].body == "Leave NOW to Dentist"
    assert leave[0].trigger_time == NOW + datetime.timedelta(seconds=1800)
    assert leave[0].sound == "chime"


def test_no_target_does_nothing():
    store = MagicMock()
    reconcile_reminders(RouteInfo.nothing_to_track(), NOW, store)
    store.list_pending.assert_not_called()
    store.upsert.assert_not_called()


def test_long_past_leave_time_skips_get_ready():
    store = MagicMock()
    store.list_pending.return_value = []
    reconcile_reminders(info_leaving_in(-900), NOW, store)
    store.upsert.assert_not_called()


def test_write_failure_is_not_fatal():
    store = MagicMock()
    store.list_pending.return_value = []
    store.upsert.side_effect = NotificationWriteError("disk full")
    scheduler = ReminderScheduler(store)
    scheduler.reconcile(info_leaving_in(3600), NOW)
    assert store.upsert.call_count == 2


def test_each_title_written_once_per_cycle():
    store = MagicMock()
    store.list_pending.return_value = []
    reconcile_reminders(info_leaving_in(3600), NOW, store)
    titles = [call.args[0] for call in store.upsert.call_args_list]
    assert sorted(titles) == sorted([LEAVE_NOW_TITLE, GET_READY_TITLE])


def test_json_store_persists_reminders(tmp_path):
    path = tmp_path / "notifications.json"
    store = JsonNotificationStore(str(path))
    trigger = NOW + datetime.timedelta(hours=1)
    store.upsert(LEAVE_NOW_TITLE, "Leave NOW to Dentist", trigger)

    reloaded = JsonNotificationStore(str(path))
    assert reloaded.list_pending() == [PendingReminder(LEAVE_NOW_TITLE, "Leave NOW to Dentist", trigger)]


def test_json_store_ignores_malformed_file(tmp_path):
    path = tmp_path / "notifications.json"
    path.write_text('[{"title": "Leave Now"}]')
    assert JsonNotificationStore(str(path)).list_pending() == []


def test_json_store_failed_write_leaves_pending_unchanged(tmp_path):
    # a directory cannot be opened for writing
    store = JsonNotificationStore(str(tmp_path))
    with pytest.raises(NotificationWriteError):
        store.upsert(LEAVE_NOW_TITLE, "Leave NOW to Dentist", NOW + datetime.timedelta(hours=1))
    assert store.list_pending() == []


def test_failed_write_is_not_listed_after_reconcile(tmp_path):
    store = JsonNotificationStore(str(tmp_path))
    reconcile_reminders(info_leaving_in(3600), NOW, store)
    assert store.list_pending(NOW) == []


def test_reminders_already_due_are_dropped():
    yesterday = PendingReminder(LEAVE_NOW_TITLE, "Leave NOW to Old Place", NOW - datetime.timedelta(days=1))
    upcoming = PendingReminder(GET_READY_TITLE, "Get ready to leave to Dentist", NOW + datetime.timedelta(minutes=5))
    store = InMemoryNotificationStore([yesterday, upcoming])
    assert store.list_pending(NOW) == [upcoming]
    assert store.list_pending() == [upcoming]


def test_stale_reminder_is_replaced_with_default_sound():
    yesterday = PendingReminder(LEAVE_NOW_TITLE, "Leave NOW to Old Place", NOW - datetime.timedelta(days=1), sound="chime")
    store = InMemoryNotificationStore([yesterday])
    reconcile_reminders(info_leaving_in(3600), NOW, store)
    leave = [r for r in store.list_pending(NOW) if r.title == LEAVE_NOW_TITLE]
    assert leave[0].trigger_time == NOW + datetime.timedelta(seconds=3600)
    assert leave[0].sound == "default"
