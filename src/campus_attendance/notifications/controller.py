from __future__ import annotations

from flask import Flask, flash, redirect, request, url_for

from ..common.datetime_utils import optional_date
from ..common.web import current_role, staff_required
from ..container import Container
from ..core.exceptions import AuthorizationError, NoDataError, NotificationConfigError, ValidationError


def register(app: Flask, container: Container) -> None:
    alerts = container.absence_alert_service

    @app.route("/staff/notify", methods=["POST"], endpoint="staff_notify")
    @staff_required
    def staff_notify():
        try:
            result = alerts.notify_absentees(actor=current_role(), day=optional_date(request.form.get("date")))
            if result.failed:
                flash(f"Sent {result.sent} email(s), {result.failed} failed.", "warning")
                for error in result.errors:
                    flash(error, "danger")
            else:
                flash(f"Sent {result.sent} email(s) to parents.", "success")
        except (NoDataError, NotificationConfigError, ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Sending absence alerts failed")
            flash("System error while sending notifications", "danger")
        return redirect(url_for("staff_dashboard"))
