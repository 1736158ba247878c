"""Daily sweep for expiries falling exactly one lead time from today."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .calculations import LEAD_TIME_DAYS
from .config import Settings
from .logger import get_logger
from .records import CARS, vehicles_from_snapshot
from .vehicle import EXPIRY_FIELDS, Vehicle

logger = get_logger(__name__)


@dataclass
class SweepAlert:
    """One expiry found by the daily sweep."""

    vehicle_id: Optional[str]
    plate_number: str
    label: str
    expiry: date

    @property
    def message(self) -> str:
        return (
            f"{self.label} for {self.plate_number} expires in exactly "
            f"{LEAD_TIME_DAYS} days."
        )


def daily_check(
    vehicles: Iterable[Vehicle],
    today: Optional[date] = None,
    notify: Optional[Callable[[SweepAlert], None]] = None,
) -> List[SweepAlert]:
    """
    Flag every expiry that lands on exactly today + 7 days.

    This is a same-day match, not a range: 6 or 8 days away yields nothing.
    Each alert is logged and handed to notify (email/push hook) if given.
    """
    today = today or date.today()
    target = today + timedelta(days=LEAD_TIME_DAYS)
    alerts = []

    for vehicle in vehicles:
        for attr, label in EXPIRY_FIELDS:
            if vehicle.expiry(attr) != target:
                continue
            alert = SweepAlert(vehicle.id, vehicle.plate_number, label, target)
            logger.warning(f"[ALERT] {alert.message}")
            if notify is not None:
                notify(alert)
            alerts.append(alert)

    return alerts


def run_daily_check(
    store,
    notify: Optional[Callable[[SweepAlert], None]] = None,
    today: Optional[date] = None,
) -> List[SweepAlert]:
    """Read every vehicle from the store once and sweep them."""
    logger.info("Running daily expiry check...")
    vehicles = vehicles_from_snapshot(store.get_all(CARS))
    alerts = daily_check(vehicles, today=today, notify=notify)
    logger.info(f"Checked {len(vehicles)} vehicles, {len(alerts)} alert(s)")
    return alerts


def local_today(timezone: str, now: Optional[datetime] = None) -> date:
    """The calendar date in a timezone, regardless of the host's own zone."""
    tz = ZoneInfo(timezone)
    now = now.astimezone(tz) if now is not None else datetime.now(tz)
    return now.date()


def scheduled_daily_check(store, timezone: str) -> List[SweepAlert]:
    """Cron job body: sweep against today's date in the trigger's timezone."""
    return run_daily_check(store, today=local_today(timezone))


def build_scheduler(store, settings: Settings) -> BlockingScheduler:
    """Create a scheduler running the daily check on the configured cron."""
    scheduler = BlockingScheduler(timezone=settings.TIMEZONE)
    scheduler.add_job(
        scheduled_daily_check,
        trigger=CronTrigger.from_crontab(settings.SWEEP_CRON, timezone=settings.TIMEZONE),
        args=[store, settings.TIMEZONE],
        id="daily_check",
        name="Daily expiry check",
        replace_existing=True,
    )
    return scheduler
