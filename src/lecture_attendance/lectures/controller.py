from __future__ import annotations

import logging

import click
from flask import Flask

from ..common.datetime_utils import format_datetime
from ..common.http import api_response, current_user_id, domain_error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lectures/<int:lecture_id>/start", methods=["POST"], endpoint="lecture_start")
    @login_required
    def lecture_start(lecture_id: int):
        try:
            lecture = container.lecture_service.start_lecture(lecture_id, instructor_id=current_user_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to start lecture %s", lecture_id)
            return api_response(False, "Internal server error.", status=500)

        return api_response(
            True,
            "Lecture started.",
            {
                "lecture_id": lecture.lecture_id,
                "status": lecture.status.value,
                "starts_at": format_datetime(lecture.starts_at),
                "ends_at": format_datetime(lecture.ends_at),
            },
        )

    @app.route("/api/lectures/<int:lecture_id>/end", methods=["POST"], endpoint="lecture_end")
    @login_required
    def lecture_end(lecture_id: int):
        try:
            result = container.lecture_service.end_lecture(lecture_id, instructor_id=current_user_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Failed to end lecture %s", lecture_id)
            return api_response(False, "Internal server error.", status=500)

        return api_response(
            True,
            "Lecture ended.",
            {"lecture_id": result.lecture_id, "finalized_students": result.finalized_count},
        )

    @app.cli.command("auto-update-lectures")
    def auto_update_lectures():
        """Cancel missed lectures; end and finalize overdue running ones."""
        result = container.lecture_service.auto_update_statuses()
        click.echo(
            f"Auto updated lectures. Cancelled: {result.cancelled}, "
            f"Ended: {result.ended}, Finalized: {result.finalized}"
        )

    @app.cli.command("finalize-lecture")
    @click.argument("lecture_id", type=int)
    def finalize_lecture(lecture_id: int):
        """Re-run attendance finalization for an ended lecture."""
        try:
            result = container.lecture_service.finalize_ended_lecture(lecture_id)
        except DomainError as e:
            raise click.ClickException(str(e)) from e
        click.echo(f"Finalized lecture {result.lecture_id}: {result.finalized_count} students")
