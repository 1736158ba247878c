"""StatusResult dataclass for evaluated vehicle status."""

from dataclasses import dataclass, field
from typing import List

from .status import Status


@dataclass
class StatusResult:
    """Evaluated status of a vehicle with the alerts that produced it."""

    status: Status = Status.ACTIVE
    alerts: List[str] = field(default_factory=list)

    @property
    def needs_attention(self) -> bool:
        return self.status in (Status.CRITICAL, Status.WARNING)
