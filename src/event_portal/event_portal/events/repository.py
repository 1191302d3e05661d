from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    def get_by_id(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def get_by_qr_token(self, qr_code_data: str) -> Optional[Event]:
        raise NotImplementedError

    def get_by_ids(self, event_ids: Iterable[str]) -> Mapping[str, Event]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Event]:
        raise NotImplementedError

    def list_by_creator(self, created_by: str) -> Sequence[Event]:
        raise NotImplementedError

    def create_event(self, event: Event) -> bool:
        """Insert `event`; False when its QR token collides with an existing one."""

        raise NotImplementedError

    def mark_completed(self, event_id: str) -> bool:
        """Conditional update upcoming -> completed.

        Returns True only for the call that performed the transition.
        """

        raise NotImplementedError
