"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the event lifecycle lives in the services.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.event_portal.event_portal.container import build_container
from src.event_portal.event_portal.users.session import InMemorySessionStore


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, sessions=InMemorySessionStore())

    student = container.auth_service.authenticate("student@nvsu.edu.ph", "student", "student123")
    for event in container.event_service.list_upcoming():
        print(event.title, event.start_time, event.effective_penalty)
    for fine in container.attendance_service.outstanding_fines(student.user_id):
        print("owes", fine.amount, "for", fine.event.title)


if __name__ == "__main__":
    main()
