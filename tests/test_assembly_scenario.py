from __future__ import annotations

from decimal import Decimal

from src.event_portal.event_portal.core.enums import AttendanceStatus, EventStatus, Role


def test_assembly_fine_lifecycle(container, faculty, users_repo):
    auth = container.auth_service
    student_a = auth.register(name="A", email="a@campus.edu", role=Role.STUDENT)
    student_b = auth.register(name="B", email="b@campus.edu", role=Role.STUDENT)

    event = container.event_service.create_event(
        current_role=Role.FACULTY,
        created_by=faculty.user_id,
        title="Assembly",
        description="",
        start_time="2026-03-05T09:00",
        venue="Gym",
        is_required=True,
        penalty_amount=150.00,
    )
    assert event.status == EventStatus.UPCOMING

    ledger = container.attendance_service
    ledger.check_in_with_token(event.qr_code_data, student_a.user_id, current_role=Role.STUDENT)
    assert [r.status for r in ledger.records_for_student(student_a.user_id)] == [AttendanceStatus.PRESENT]

    container.event_service.finalize(event.event_id, current_role=Role.FACULTY, user_id=faculty.user_id)
    assert container.event_service.get_event(event.event_id).status == EventStatus.COMPLETED

    b_records = ledger.records_for_student(student_b.user_id)
    assert [(r.status, r.penalty_paid) for r in b_records] == [(AttendanceStatus.ABSENT, False)]
    assert len(ledger.records_for_student(student_a.user_id)) == 1

    fines = ledger.outstanding_fines(student_b.user_id)
    assert [f.amount for f in fines] == [Decimal("150.00")]

    ledger.settle_fine(fines[0].record.record_id, current_role=Role.STUDENT, user_id=student_b.user_id)

    assert ledger.outstanding_fines(student_b.user_id) == []
    assert ledger.records_for_student(student_b.user_id)[0].penalty_paid is True
