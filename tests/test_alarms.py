#!/usr/bin/env python3
"""Tests for expiry alarm scheduling."""
from datetime import date, datetime, timedelta

import pytest

from fleet import (
    Alarm,
    FileAlarmSubsystem,
    MemoryAlarmSubsystem,
    Permission,
    Timestamp,
    Vehicle,
    YamlStore,
    build_alarms,
    schedule_clean_notifications,
    vehicle_to_record,
    watch_vehicles,
)

NOW = datetime(2026, 3, 10, 9, 0)


def in_days(n: int) -> date:
    return NOW.date() + timedelta(days=n)


def pending_tuples(subsystem):
    return sorted((a.fire_at, a.title, a.body) for a in subsystem.list_pending())


class TestBuildAlarms:
    """Tests for build_alarms."""

    def test_fires_seven_days_before_expiry_at_midnight(self):
        vehicle = Vehicle("ABC123", road_tax_expiry=in_days(30))
        alarms = build_alarms([vehicle], NOW)
        assert len(alarms) == 1
        assert alarms[0].fire_at == datetime.combine(in_days(23), datetime.min.time())
        assert alarms[0].title == "⚠️ Roadtax Expiring Soon!"
        assert alarms[0].body == "The Roadtax for ABC123 will expire in 7 days."

    def test_insurance_wording(self):
        alarms = build_alarms([Vehicle("ABC123", insurance_expiry=in_days(30))], NOW)
        assert alarms[0].title == "📄 Insurance Expiring Soon!"
        assert alarms[0].body == "The Insurance for ABC123 will expire in 7 days."

    def test_ids_follow_vehicle_then_field_order(self):
        vehicles = [
            Vehicle("AAA1", road_tax_expiry=in_days(30), insurance_expiry=in_days(40)),
            Vehicle("BBB2", insurance_expiry=in_days(50)),
            Vehicle("CCC3", road_tax_expiry=in_days(60)),
        ]
        alarms = build_alarms(vehicles, NOW)
        assert [a.id for a in alarms] == [1, 2, 3, 4]
        assert [a.body.split(" for ")[1][:4] for a in alarms] == ["AAA1", "AAA1", "BBB2", "CCC3"]
        assert alarms[0].title.endswith("Roadtax Expiring Soon!")
        assert alarms[1].title.endswith("Insurance Expiring Soon!")

    def test_skips_elapsed_warning_dates(self):
        vehicles = [
            Vehicle("PAST1", road_tax_expiry=in_days(3)),
            Vehicle("PAST2", insurance_expiry=in_days(-10)),
            Vehicle("TODAY", road_tax_expiry=in_days(7)),  # warning was 00:00 today
        ]
        assert build_alarms(vehicles, NOW) == []

    def test_tomorrow_warning_is_scheduled(self):
        alarms = build_alarms([Vehicle("ABC123", road_tax_expiry=in_days(8))], NOW)
        assert len(alarms) == 1

    def test_skips_missing_fields(self):
        assert build_alarms([Vehicle("ABC123")], NOW) == []

    def test_accepts_store_timestamps(self):
        vehicle = Vehicle("ABC123", road_tax_expiry=Timestamp.from_date(in_days(30)))
        assert len(build_alarms([vehicle], NOW)) == 1


class TestScheduleCleanNotifications:
    """Tests for cancel-then-reschedule."""

    @pytest.fixture
    def vehicles(self):
        return [
            Vehicle("AAA1", road_tax_expiry=in_days(30), insurance_expiry=in_days(40)),
            Vehicle("BBB2", insurance_expiry=in_days(2)),
        ]

    def test_schedules_future_alarms(self, vehicles):
        subsystem = MemoryAlarmSubsystem()
        alarms = schedule_clean_notifications(vehicles, subsystem, NOW)
        assert len(alarms) == 2
        assert subsystem.list_pending() == alarms

    def test_running_twice_leaves_no_duplicates(self, vehicles):
        subsystem = MemoryAlarmSubsystem()
        schedule_clean_notifications(vehicles, subsystem, NOW)
        first = pending_tuples(subsystem)
        schedule_clean_notifications(vehicles, subsystem, NOW)
        assert pending_tuples(subsystem) == first
        assert len(subsystem.list_pending()) == 2

    def test_stale_alarms_are_cancelled(self):
        subsystem = MemoryAlarmSubsystem()
        subsystem.schedule([Alarm(99, NOW + timedelta(days=1), "Old", "Stale alarm")])
        schedule_clean_notifications([Vehicle("ABC123")], subsystem, NOW)
        assert subsystem.list_pending() == []

    def test_fewer_vehicles_shrinks_alarm_set(self, vehicles):
        subsystem = MemoryAlarmSubsystem()
        schedule_clean_notifications(vehicles, subsystem, NOW)
        schedule_clean_notifications(vehicles[1:], subsystem, NOW)
        assert subsystem.list_pending() == []

    def test_schedule_failure_propagates(self, vehicles):
        class BrokenSubsystem(MemoryAlarmSubsystem):
            def schedule(self, alarms):
                raise RuntimeError("alarm service unavailable")

        with pytest.raises(RuntimeError):
            schedule_clean_notifications(vehicles, BrokenSubsystem(), NOW)


class TestAlarmSubsystems:
    """Tests for the alarm subsystem implementations."""

    def test_memory_permission(self):
        assert MemoryAlarmSubsystem().request_permission() == Permission.GRANTED
        denied = MemoryAlarmSubsystem(permission=Permission.DENIED)
        assert denied.request_permission() == Permission.DENIED

    def test_memory_one_alarm_per_id(self):
        subsystem = MemoryAlarmSubsystem()
        subsystem.schedule([Alarm(1, NOW, "A", "first")])
        subsystem.schedule([Alarm(1, NOW, "A", "second")])
        assert [a.body for a in subsystem.list_pending()] == ["second"]

    def test_file_subsystem_persists(self, tmp_path):
        path = tmp_path / "alarms.yaml"
        vehicles = [Vehicle("ABC123", road_tax_expiry=in_days(30))]
        schedule_clean_notifications(vehicles, FileAlarmSubsystem(path), NOW)

        reloaded = FileAlarmSubsystem(path)
        pending = reloaded.list_pending()
        assert len(pending) == 1
        assert pending[0].body == "The Roadtax for ABC123 will expire in 7 days."
        assert pending[0].fire_at == datetime.combine(in_days(23), datetime.min.time())

    def test_file_subsystem_idempotent_across_runs(self, tmp_path):
        path = tmp_path / "alarms.yaml"
        vehicles = [Vehicle("ABC123", road_tax_expiry=in_days(30), insurance_expiry=in_days(31))]
        schedule_clean_notifications(vehicles, FileAlarmSubsystem(path), NOW)
        schedule_clean_notifications(vehicles, FileAlarmSubsystem(path), NOW)
        assert len(FileAlarmSubsystem(path).list_pending()) == 2


class TestWatchVehicles:
    """Tests for rescheduling on store snapshots."""

    def test_reschedules_on_every_write(self, tmp_path):
        store = YamlStore(tmp_path / "fleet.yaml")
        subsystem = MemoryAlarmSubsystem()
        far = date.today() + timedelta(days=60)

        unsubscribe = watch_vehicles(store, subsystem)
        assert subsystem.list_pending() == []

        store.add_one("cars", vehicle_to_record(Vehicle("AAA1", road_tax_expiry=far)))
        assert len(subsystem.list_pending()) == 1

        store.add_one("cars", vehicle_to_record(Vehicle("BBB2", insurance_expiry=far)))
        assert len(subsystem.list_pending()) == 2

        unsubscribe()
        store.add_one("cars", vehicle_to_record(Vehicle("CCC3", insurance_expiry=far)))
        assert len(subsystem.list_pending()) == 2
