from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteWriteError, TransientFetchError, ValidationError
from ..container import Container
from .model import AttendanceWrite

logger = logging.getLogger(__name__)

SELECT_DATE_MESSAGE = "Select a date to load attendance."


def _limit_arg(default: int) -> int:
    try:
        return max(int(request.args.get("limit", default)), 0)
    except (TypeError, ValueError):
        return default


def _date_arg(name: str):
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    parse_iso_date(value)
    return value


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(RemoteWriteError)
    def handle_remote_write(e):
        return jsonify({"success": False, "message": "Failed to save changes (DB error)."}), 502

    @app.errorhandler(TransientFetchError)
    def handle_transient(e):
        return jsonify({"success": False, "message": str(e)}), 502

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_day_view")
    def attendance_day_view():
        try:
            work_date = _date_arg("date")
        except ValueError:
            return jsonify({"success": False, "message": "date must be YYYY-MM-DD"}), 400
        if not work_date:
            return jsonify({"success": True, "rows": [], "stats": None, "message": SELECT_DATE_MESSAGE})

        view = service.day_view(
            work_date,
            search=request.args.get("q", ""),
            limit=_limit_arg(service.history_limit),
        )
        return jsonify({"success": True, **view.as_dict()})

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_save")
    def attendance_save():
        data = request.get_json(silent=True) or {}
        work_date = data.get("date")
        status = data.get("status") or AttendanceStatus.ABSENT.value

        if data.get("mark_all"):
            saved = service.mark_all(
                work_date=work_date,
                status=status,
                check_in=data.get("check_in"),
                check_out=data.get("check_out"),
                duration=data.get("duration"),
            )
            return jsonify({"success": True, "saved": saved, "message": f"Saved attendance for {saved} users."})

        write = AttendanceWrite(
            user_id=data.get("user_id"),
            date=work_date,
            status=status,
            check_in=data.get("check_in"),
            check_out=data.get("check_out"),
            duration=data.get("duration"),
        )
        saved = service.save(write)
        return jsonify({"success": True, "saved": 1, "record": saved.to_payload(), "message": "Attendance saved."})

    @app.route("/api/attendance/<attendance_id>/delete", methods=["POST"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: str):
        service.delete(attendance_id)
        return jsonify({"success": True, "message": "Attendance record deleted."})

    @app.route("/api/members/<user_id>/attendance", methods=["GET"], endpoint="member_attendance")
    def member_attendance(user_id: str):
        try:
            start = _date_arg("start")
            end = _date_arg("end")
        except ValueError:
            return jsonify({"success": False, "message": "start/end must be YYYY-MM-DD"}), 400

        view = service.member_view(user_id, start_date=start, end_date=end, limit=_limit_arg(service.history_limit))
        return jsonify({"success": True, **view.as_dict()})

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard_stats")
    def dashboard_stats():
        data = container.dashboard_service.build()
        return jsonify({"success": True, **data.as_dict()})
