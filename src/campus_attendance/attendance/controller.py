from __future__ import annotations

import time

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..capture.camera import classify_camera_error
from ..common.datetime_utils import date_key, optional_date
from ..common.web import current_role, json_error, staff_required
from ..container import Container
from ..core.constants import SUBMIT_DEBOUNCE_SECONDS
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DeviceLockedError,
    DuplicateSubmissionError,
    StoreError,
    ValidationError,
)
from ..device_lock.session import DeviceSession, unlock
from .model import AttendanceSubmission

LAST_SUBMIT_KEY = "last_submit_at"


def _roster_json(roster) -> dict:
    return {
        "date": date_key(roster.day),
        "stats": {
            "totalRegistered": roster.stats.total_registered,
            "presentToday": roster.stats.present_today,
            "absentToday": roster.stats.absent_today,
            "attendancePercentage": roster.stats.attendance_percentage,
        },
        "present": [
            {"name": r.name, "regNo": r.reg_no, "time": r.time_text, "date": r.date_text}
            for r in roster.present
        ],
        "absent": [{"name": s.name, "regNo": s.reg_no} for s in roster.absent],
    }


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/student", endpoint="student_portal")
    def student_portal():
        device = DeviceSession.from_mapping(session)
        return render_template("student/portal.html", device=device)

    @app.route("/api/attendance", methods=["POST"], endpoint="api_submit_attendance")
    def api_submit_attendance():
        last = session.get(LAST_SUBMIT_KEY)
        if last is not None and time.time() - float(last) < SUBMIT_DEBOUNCE_SECONDS:
            return json_error("Please wait a moment before submitting again", 429)

        data = request.get_json(silent=True) or {}
        submission = AttendanceSubmission(
            name=str(data.get("name") or ""),
            reg_no=str(data.get("regNo") or ""),
            photo=str(data.get("photo") or ""),
        )

        try:
            result = attendance.submit_attendance(submission, DeviceSession.from_mapping(session))
        except (DeviceLockedError, DuplicateSubmissionError) as e:
            return json_error(str(e), 409)
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError as e:
            return json_error(str(e), 502)
        except Exception:
            app.logger.exception("Attendance submission failed")
            return json_error("System error while recording attendance", 500)

        result.device.store(session)
        # Only accepted submissions start the debounce window.
        session[LAST_SUBMIT_KEY] = time.time()
        record = result.record
        return (
            jsonify(
                {
                    "success": True,
                    "message": f"Attendance recorded for {record.name}",
                    "record": {
                        "name": record.name,
                        "regNo": record.reg_no,
                        "time": record.time_text,
                        "date": record.date_text,
                    },
                }
            ),
            201,
        )

    @app.route("/api/device/unlock", methods=["POST"], endpoint="api_unlock_device")
    def api_unlock_device():
        # Staff either unlock from their own logged-in browser or type the password on the device.
        if current_role() is not Role.STAFF:
            data = request.get_json(silent=True) or {}
            try:
                container.auth_service.authenticate(str(data.get("password") or ""))
            except AuthenticationError as e:
                return json_error(str(e), 403)

        device = DeviceSession.from_mapping(session)
        unlock(device).store(session)
        app.logger.info("Device unlocked (was %s)", device.bound_reg_no)
        return jsonify({"success": True, "message": "Device unlocked"})

    @app.route("/api/camera-error", methods=["POST"], endpoint="api_camera_error")
    def api_camera_error():
        data = request.get_json(silent=True) or {}
        error = classify_camera_error(data.get("name"), data.get("message"))
        app.logger.info("Camera error reported: %s (%s)", error.kind.value, data.get("name"))
        return jsonify({"success": False, "kind": error.kind.value, "message": f"Camera error: {error.message}"})

    @app.route("/staff", endpoint="staff_dashboard")
    @staff_required
    def staff_dashboard():
        roster = attendance.roster()
        return render_template("staff/dashboard.html", roster=roster, active_page="dashboard")

    @app.route("/staff/attendance", endpoint="staff_attendance")
    @staff_required
    def staff_attendance():
        try:
            day = optional_date(request.args.get("date")) or attendance.today()
        except ValidationError as e:
            flash(str(e), "warning")
            day = attendance.today()
        roster = attendance.roster(day)
        return render_template("staff/attendance.html", roster=roster, active_page="attendance")

    @app.route("/staff/attendance/clear", methods=["POST"], endpoint="staff_clear_attendance")
    @staff_required
    def staff_clear_attendance():
        try:
            removed = attendance.clear_attendance(actor=current_role())
            flash(f"Cleared {removed} attendance record(s).", "success")
        except (AuthorizationError, StoreError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Clearing attendance failed")
            flash("System error while clearing attendance", "danger")
        return redirect(url_for("staff_attendance"))

    @app.route("/api/roster", endpoint="api_roster")
    @staff_required
    def api_roster():
        try:
            day = optional_date(request.args.get("date")) or attendance.today()
        except ValidationError as e:
            return json_error(str(e), 400)
        return jsonify({"success": True, **_roster_json(attendance.roster(day))})
