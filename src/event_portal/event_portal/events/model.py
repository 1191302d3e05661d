from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..core.constants import ZERO_AMOUNT
from ..core.enums import EventStatus


@dataclass(frozen=True)
class Event:
    """Domain entity: an announced campus activity."""

    event_id: str
    title: str
    description: str
    start_time: datetime
    venue: str
    created_by: str
    is_required: bool
    penalty_amount: Decimal
    qr_code_data: str
    status: EventStatus = EventStatus.UPCOMING

    @property
    def effective_penalty(self) -> Decimal:
        """Penalty that applies to absences; optional events never fine."""
        return self.penalty_amount if self.is_required else ZERO_AMOUNT

    @property
    def is_fineable(self) -> bool:
        return self.effective_penalty > 0

    def to_dict(self, *, include_qr: bool = False) -> dict:
        data = {
            "id": self.event_id,
            "title": self.title,
            "description": self.description,
            "date": self.start_time.isoformat(),
            "venue": self.venue,
            "created_by": self.created_by,
            "is_required": self.is_required,
            "penalty_amount": f"{self.penalty_amount:.2f}",
            "status": self.status.value,
        }
        if include_qr:
            data["qr_code_data"] = self.qr_code_data
        return data
