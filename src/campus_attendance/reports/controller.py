from __future__ import annotations

import io

from flask import Flask, flash, redirect, request, send_file, url_for

from ..common.datetime_utils import optional_date
from ..common.web import staff_required
from ..container import Container
from ..core.exceptions import NoDataError, ValidationError
from .service import ReportFile

ANALYTICS_DEFAULT_DAYS = 30


def _download(report: ReportFile):
    return send_file(
        io.BytesIO(report.content),
        mimetype=report.mimetype,
        as_attachment=True,
        download_name=report.filename,
    )


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    attendance = container.attendance_service

    def export(build):
        try:
            return _download(build())
        except (NoDataError, ValidationError) as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Export failed")
            flash("Failed to export attendance data", "danger")
        return redirect(request.referrer or url_for("staff_attendance"))

    @app.route("/staff/export.xlsx", endpoint="export_xlsx")
    @staff_required
    def export_xlsx():
        return export(lambda: reports.attendance_xlsx(optional_date(request.args.get("date"))))

    @app.route("/staff/export.csv", endpoint="export_csv")
    @staff_required
    def export_csv():
        return export(lambda: reports.attendance_csv(optional_date(request.args.get("date"))))

    @app.route("/staff/export/summary.xlsx", endpoint="export_summary")
    @staff_required
    def export_summary():
        return export(lambda: reports.summary_xlsx(optional_date(request.args.get("date"))))

    @app.route("/staff/export/analytics.xlsx", endpoint="export_analytics")
    @staff_required
    def export_analytics():
        def build():
            start, end = attendance.history_window(ANALYTICS_DEFAULT_DAYS)
            start = optional_date(request.args.get("start")) or start
            end = optional_date(request.args.get("end")) or end
            return reports.analytics_xlsx(start, end)

        return export(build)
