from __future__ import annotations

import logging

from flask import Flask

from ..common.datetime_utils import format_datetime
from ..common.http import api_response, current_user_id, domain_error_response, json_body, login_required
from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/token", methods=["POST"], endpoint="attendance_token")
    @login_required
    def attendance_token():
        try:
            lecture_id = require_positive_int(json_body().get("lecture_id"), "lecture_id")
            issued = container.attendance_service.issue_token(lecture_id, current_user_id())
            return api_response(
                True,
                "Attendance token issued.",
                {"token": issued.token, "expires_at": format_datetime(issued.expires_at)},
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to issue attendance token")
            return api_response(False, "Internal server error.", status=500)

    @app.route("/api/attendance/heartbeat", methods=["POST"], endpoint="attendance_heartbeat")
    @login_required
    def attendance_heartbeat():
        try:
            token = require_non_empty(json_body().get("token"), "token")
            ack = container.attendance_service.record_heartbeat(token, current_user_id())
            return api_response(
                True,
                "Heartbeat recorded.",
                {"lecture_id": ack.lecture_id, "last_seen_at": format_datetime(ack.last_seen_at)},
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to record heartbeat")
            return api_response(False, "Internal server error.", status=500)

    @app.route("/api/lectures/<int:lecture_id>/attendance-live", methods=["GET"], endpoint="attendance_live")
    @login_required
    def attendance_live(lecture_id: int):
        try:
            rows = container.attendance_service.live_attendance(lecture_id, instructor_id=current_user_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to build live attendance for lecture %s", lecture_id)
            return api_response(False, "Internal server error.", status=500)

        data = [
            {
                "student_id": r.student_id,
                "status": r.status.value,
                "checked_in_at": format_datetime(r.checked_in_at),
                "last_seen_at": format_datetime(r.last_seen_at),
                "minutes_attended": r.minutes_attended,
            }
            for r in rows
        ]
        return api_response(True, "Live attendance list (all section students).", data)

    @app.route("/api/lectures/<int:lecture_id>/attendance-summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary(lecture_id: int):
        try:
            summary = container.attendance_service.lecture_summary(lecture_id, instructor_id=current_user_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to summarize attendance for lecture %s", lecture_id)
            return api_response(False, "Internal server error.", status=500)

        return api_response(
            True,
            "Attendance summary.",
            {
                "lecture_id": summary.lecture_id,
                "present_or_late": summary.present_or_late,
                "left": summary.left,
                "absent": summary.absent,
            },
        )
