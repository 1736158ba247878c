"""Device alarm scheduling for upcoming road tax and insurance expiries."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

import yaml

from .calculations import LEAD_TIME_DAYS
from .logger import get_logger
from .records import CARS, vehicles_from_snapshot
from .vehicle import EXPIRY_FIELDS, Vehicle

logger = get_logger(__name__)

ALARM_ICONS = {"Roadtax": "⚠️", "Insurance": "📄"}


@dataclass
class Alarm:
    """A device notification to fire at a fixed time."""

    id: int
    fire_at: datetime
    title: str
    body: str


class Permission(Enum):
    GRANTED = "granted"
    DENIED = "denied"


class AlarmSubsystem(ABC):
    """Holds pending alarms and delivers each id at most once."""

    @abstractmethod
    def list_pending(self) -> List[Alarm]:
        ...

    @abstractmethod
    def cancel(self, alarms: Iterable[Alarm]) -> None:
        ...

    @abstractmethod
    def schedule(self, alarms: Iterable[Alarm]) -> None:
        ...

    def request_permission(self) -> Permission:
        return Permission.GRANTED


class MemoryAlarmSubsystem(AlarmSubsystem):
    """In-process alarm subsystem. Scheduling an existing id replaces it."""

    def __init__(self, permission: Permission = Permission.GRANTED):
        self._pending: Dict[int, Alarm] = {}
        self._permission = permission

    def list_pending(self) -> List[Alarm]:
        return sorted(self._pending.values(), key=lambda a: a.id)

    def cancel(self, alarms: Iterable[Alarm]) -> None:
        for alarm in alarms:
            self._pending.pop(alarm.id, None)

    def schedule(self, alarms: Iterable[Alarm]) -> None:
        for alarm in alarms:
            self._pending[alarm.id] = alarm

    def request_permission(self) -> Permission:
        return self._permission


class FileAlarmSubsystem(MemoryAlarmSubsystem):
    """Alarm subsystem whose pending alarms persist in a YAML file."""

    def __init__(self, filename: Union[str, Path]):
        super().__init__()
        self.filename = Path(filename)
        if self.filename.exists():
            with open(self.filename, "r", encoding="utf-8") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader) or []
            for item in data:
                alarm = Alarm(item["id"], item["fireAt"], item["title"], item["body"])
                self._pending[alarm.id] = alarm

    def _save(self) -> None:
        data = [
            {"id": a.id, "fireAt": a.fire_at, "title": a.title, "body": a.body}
            for a in self.list_pending()
        ]
        with open(self.filename, "w", encoding="utf-8") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )

    def cancel(self, alarms: Iterable[Alarm]) -> None:
        super().cancel(alarms)
        self._save()

    def schedule(self, alarms: Iterable[Alarm]) -> None:
        super().schedule(alarms)
        self._save()


def build_alarms(vehicles: Iterable[Vehicle], now: Optional[datetime] = None) -> List[Alarm]:
    """
    Build one alarm per expiry whose 7-day warning moment is still ahead.

    The warning fires at midnight, 7 days before the expiry date. Ids are
    assigned 1, 2, 3... in vehicle order, road tax before insurance.
    """
    now = now or datetime.now()
    alarms = []
    next_id = 1

    for vehicle in vehicles:
        for attr, label in EXPIRY_FIELDS:
            expiry = vehicle.expiry(attr)
            if expiry is None:
                continue
            warning_at = datetime.combine(expiry - timedelta(days=LEAD_TIME_DAYS), time.min)
            # Lead time already elapsed
            if warning_at <= now:
                continue
            alarms.append(
                Alarm(
                    id=next_id,
                    fire_at=warning_at,
                    title=f"{ALARM_ICONS[label]} {label} Expiring Soon!",
                    body=(
                        f"The {label} for {vehicle.plate_number} will expire "
                        f"in {LEAD_TIME_DAYS} days."
                    ),
                )
            )
            next_id += 1

    return alarms


def schedule_clean_notifications(
    vehicles: Iterable[Vehicle],
    subsystem: AlarmSubsystem,
    now: Optional[datetime] = None,
) -> List[Alarm]:
    """
    Replace every pending alarm with the set built from the given vehicles.

    Cancels first so a data refresh never leaves duplicate or stale alarms.
    """
    pending = subsystem.list_pending()
    if pending:
        subsystem.cancel(pending)

    alarms = build_alarms(vehicles, now)
    if alarms:
        subsystem.schedule(alarms)
        logger.info(f"Scheduled {len(alarms)} local notifications.")
    return alarms


def watch_vehicles(store, subsystem: AlarmSubsystem) -> Callable[[], None]:
    """Reschedule alarms on every cars snapshot pushed by the store."""

    def on_change(snapshot):
        schedule_clean_notifications(vehicles_from_snapshot(snapshot), subsystem)

    return store.watch(CARS, on_change)
