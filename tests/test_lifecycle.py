# tests/test_lifecycle.py
import pytest

from academy.models.reservation import Reservation
from academy.services import lifecycle


@pytest.fixture
def online_reservation(client, student, headers_for):
    r = client.post(
        "/api/reservations",
        json={"type": "online", "content": "How do I solve #3?", "photoUrls": []},
        headers=headers_for(student),
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def onsite_reservation(client, student, schedules, headers_for):
    r = client.post(
        "/api/reservations",
        json={"type": "onsite", "scheduleId": schedules[0].id},
        headers=headers_for(student),
    )
    assert r.status_code == 201, r.text
    return r.json()


def patch(client, reservation_id, payload, headers):
    return client.patch(f"/api/reservations/{reservation_id}", json=payload, headers=headers)


class TestTeacherUpdates:
    def test_answer_with_feedback(self, client, teacher, online_reservation, headers_for):
        r = patch(
            client,
            online_reservation["id"],
            {"status": "answered", "teacherFeedback": "see page 10"},
            headers_for(teacher),
        )
        assert r.status_code == 200, r.text
        assert r.json()["status"] == "answered"
        assert r.json()["teacherFeedback"] == "see page 10"

    def test_answer_requires_feedback(self, client, teacher, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"status": "answered"}, headers_for(teacher))
        assert r.status_code == 400
        assert r.json()["detail"]["code"] == "feedback_required"

    def test_confirm_onsite(self, client, teacher, onsite_reservation, headers_for):
        r = patch(client, onsite_reservation["id"], {"status": "confirmed"}, headers_for(teacher))
        assert r.status_code == 200
        assert r.json()["status"] == "confirmed"
        assert r.json()["teacherFeedback"] is None

    def test_answered_can_be_confirmed(self, client, teacher, online_reservation, headers_for):
        rid = online_reservation["id"]
        patch(client, rid, {"status": "answered", "teacherFeedback": "ok"}, headers_for(teacher))
        r = patch(client, rid, {"status": "confirmed"}, headers_for(teacher))
        assert r.status_code == 200
        assert r.json()["status"] == "confirmed"

    def test_cancel_sets_system_feedback(self, client, teacher, onsite_reservation, headers_for):
        r = patch(client, onsite_reservation["id"], {"status": "cancelled"}, headers_for(teacher))
        assert r.status_code == 200
        assert r.json()["status"] == "cancelled"
        assert r.json()["teacherFeedback"] == lifecycle.CANCELLED_FEEDBACK

    def test_cancel_keeps_given_feedback(self, client, teacher, onsite_reservation, headers_for):
        r = patch(
            client,
            onsite_reservation["id"],
            {"status": "cancelled", "teacherFeedback": "academy closed"},
            headers_for(teacher),
        )
        assert r.json()["teacherFeedback"] == "academy closed"

    @pytest.mark.parametrize("target", ["confirmed", "answered"])
    def test_cancelled_is_final(self, client, teacher, online_reservation, headers_for, target):
        rid = online_reservation["id"]
        patch(client, rid, {"status": "cancelled"}, headers_for(teacher))

        r = patch(client, rid, {"status": target, "teacherFeedback": "x"}, headers_for(teacher))
        assert r.status_code == 409
        assert r.json()["detail"]["code"] == "invalid_transition"

        r = patch(client, rid, {"teacherFeedback": "late note"}, headers_for(teacher))
        assert r.status_code == 409

    def test_confirmed_cannot_become_answered(self, client, teacher, onsite_reservation, headers_for):
        rid = onsite_reservation["id"]
        patch(client, rid, {"status": "confirmed"}, headers_for(teacher))
        r = patch(client, rid, {"status": "answered", "teacherFeedback": "x"}, headers_for(teacher))
        assert r.status_code == 409

    def test_pending_cannot_be_set(self, client, teacher, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"status": "pending"}, headers_for(teacher))
        assert r.status_code == 400

    def test_teacher_cannot_send_student_fields(self, client, teacher, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"content": "edited"}, headers_for(teacher))
        assert r.status_code == 400
        assert r.json()["detail"]["code"] == "invalid_payload"

    def test_feedback_only_edit(self, client, teacher, online_reservation, headers_for):
        rid = online_reservation["id"]
        patch(client, rid, {"status": "answered", "teacherFeedback": "first"}, headers_for(teacher))
        r = patch(client, rid, {"teacherFeedback": "second"}, headers_for(teacher))
        assert r.status_code == 200
        assert r.json()["teacherFeedback"] == "second"
        assert r.json()["status"] == "answered"


class TestStudentUpdates:
    def test_owner_edits_pending(self, client, student, online_reservation, headers_for):
        r = patch(
            client,
            online_reservation["id"],
            {"content": "rewritten", "photoUrls": ["https://p/2.jpg"]},
            headers_for(student),
        )
        assert r.status_code == 200
        assert r.json()["content"] == "rewritten"
        assert r.json()["photoUrls"] == ["https://p/2.jpg"]

    def test_owner_cannot_set_status(self, client, db_session, student, online_reservation, headers_for):
        r = patch(
            client,
            online_reservation["id"],
            {"status": "answered", "teacherFeedback": "self-answered"},
            headers_for(student),
        )
        assert r.status_code == 403
        assert r.json()["detail"]["code"] == "teacher_only"

        stored = db_session.get(Reservation, online_reservation["id"])
        assert stored.status == "pending"
        assert stored.teacher_feedback is None

    def test_owner_cannot_send_feedback_alone(self, client, student, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"teacherFeedback": "x"}, headers_for(student))
        assert r.status_code == 403

    def test_non_owner_is_forbidden(self, client, other_student, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"content": "x"}, headers_for(other_student))
        assert r.status_code == 403
        assert r.json()["detail"]["code"] == "not_owner"

    def test_no_edits_after_answer(self, client, student, teacher, online_reservation, headers_for):
        rid = online_reservation["id"]
        patch(client, rid, {"status": "answered", "teacherFeedback": "done"}, headers_for(teacher))

        r = patch(client, rid, {"content": "one more thing"}, headers_for(student))
        assert r.status_code == 409
        assert r.json()["detail"]["code"] == "not_editable"

    def test_unknown_field_is_rejected(self, client, student, online_reservation, headers_for):
        r = patch(client, online_reservation["id"], {"scheduleId": 1}, headers_for(student))
        assert r.status_code == 400

    def test_missing_reservation(self, client, student, headers_for):
        r = patch(client, 424242, {"content": "x"}, headers_for(student))
        assert r.status_code == 404
        assert r.json()["detail"]["code"] == "reservation_not_found"

    def test_requires_login(self, client, online_reservation):
        client.cookies.clear()
        r = client.patch(f"/api/reservations/{online_reservation['id']}", json={"content": "x"})
        assert r.status_code == 401


class TestDelete:
    def test_owner_deletes(self, client, student, onsite_reservation, headers_for):
        r = client.delete(f"/api/reservations/{onsite_reservation['id']}", headers=headers_for(student))
        assert r.status_code == 200
        assert r.json() == {"success": True}

        mine = client.get("/api/reservations/mine", headers=headers_for(student)).json()
        assert mine == []

    def test_teacher_deletes_any_status(self, client, teacher, onsite_reservation, headers_for):
        rid = onsite_reservation["id"]
        patch(client, rid, {"status": "confirmed"}, headers_for(teacher))
        r = client.delete(f"/api/reservations/{rid}", headers=headers_for(teacher))
        assert r.status_code == 200

    def test_other_student_cannot_delete(self, client, other_student, onsite_reservation, headers_for):
        r = client.delete(
            f"/api/reservations/{onsite_reservation['id']}", headers=headers_for(other_student)
        )
        assert r.status_code == 403

    def test_delete_missing(self, client, teacher, headers_for):
        assert client.delete("/api/reservations/999", headers=headers_for(teacher)).status_code == 404

    def test_deleting_frees_the_seat(self, client, student, schedules, onsite_reservation, headers_for):
        client.delete(f"/api/reservations/{onsite_reservation['id']}", headers=headers_for(student))
        listed = client.get("/api/schedules", headers=headers_for(student)).json()
        slot = next(s for s in listed if s["id"] == schedules[0].id)
        assert slot["currentCount"] == 0
        assert slot["isReservedByUser"] is False
