from __future__ import annotations

from functools import wraps

from flask import flash, jsonify, redirect, render_template, request, session, url_for

from ..core.enums import Role

ROLE_KEY = "role"


def current_role() -> Role | None:
    try:
        return Role(session.get(ROLE_KEY))
    except ValueError:
        return None


def staff_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        role = current_role()
        if role is None:
            if request.path.startswith("/api/"):
                return jsonify({"success": False, "message": "Staff login required"}), 401
            flash("Please log in to continue.", "warning")
            return redirect(url_for("staff_login"))

        if role is not Role.STAFF:
            return render_template("403.html"), 403

        return view(*args, **kwargs)

    return wrapper


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status
