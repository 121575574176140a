from __future__ import annotations

from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import ROLE_KEY, current_role, staff_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError

RESET_EMAIL_KEY = "reset_email"


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/", endpoint="landing")
    def landing():
        if current_role() is Role.STAFF:
            return redirect(url_for("staff_dashboard"))
        return render_template("landing.html")

    @app.route("/staff/login", methods=["GET", "POST"], endpoint="staff_login")
    def staff_login():
        if current_role() is Role.STAFF:
            return redirect(url_for("staff_dashboard"))

        if request.method == "POST":
            try:
                staff = auth.authenticate(request.form.get("password", ""))

                session.permanent = bool(request.form.get("remember_me"))
                app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
                session[ROLE_KEY] = staff.role.value
                session["staff_email"] = staff.email

                flash("Welcome back!", "success")
                return redirect(url_for("staff_dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("Staff login failed")
                flash("System error during login", "danger")

        return render_template("staff/login.html")

    @app.route("/staff/logout", endpoint="staff_logout")
    def staff_logout():
        session.pop(ROLE_KEY, None)
        session.pop("staff_email", None)
        flash("Logged out.", "info")
        return redirect(url_for("landing"))

    @app.route("/staff/forgot", methods=["GET", "POST"], endpoint="forgot_password")
    def forgot_password():
        if request.method == "POST":
            email = request.form.get("email", "").strip()
            try:
                auth.request_reset(email)
                session[RESET_EMAIL_KEY] = email
                flash(f"An OTP has been sent to {email}. It expires in 5 minutes.", "success")
                return redirect(url_for("verify_otp"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("Password reset request failed")
                flash("System error while sending the OTP", "danger")

        return render_template("staff/forgot.html", step="email")

    @app.route("/staff/forgot/verify", methods=["GET", "POST"], endpoint="verify_otp")
    def verify_otp():
        email = session.get(RESET_EMAIL_KEY)
        if not email:
            return redirect(url_for("forgot_password"))

        if request.method == "POST":
            try:
                auth.verify_otp(email, request.form.get("otp", "").strip())
                flash("OTP verified. Choose a new password.", "success")
                return redirect(url_for("reset_password"))
            except ValidationError as e:
                flash(str(e), "danger")

        return render_template("staff/forgot.html", step="verify", email=email)

    @app.route("/staff/forgot/reset", methods=["GET", "POST"], endpoint="reset_password")
    def reset_password():
        email = session.get(RESET_EMAIL_KEY)
        if not email:
            return redirect(url_for("forgot_password"))

        if request.method == "POST":
            try:
                auth.reset_password(
                    email=email,
                    new=request.form.get("new_password", ""),
                    confirm=request.form.get("confirm_password", ""),
                )
                session.pop(RESET_EMAIL_KEY, None)
                flash("Password reset. Log in with your new password.", "success")
                return redirect(url_for("staff_login"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("Password reset failed")
                flash("System error while resetting the password", "danger")

        return render_template("staff/forgot.html", step="reset", email=email)

    @app.route("/staff/security", methods=["GET", "POST"], endpoint="staff_security")
    @staff_required
    def staff_security():
        if request.method == "POST":
            try:
                auth.change_password(
                    actor=current_role(),
                    current=request.form.get("current_password", ""),
                    new=request.form.get("new_password", ""),
                    confirm=request.form.get("confirm_password", ""),
                )
                flash("Password changed successfully.", "success")
                return redirect(url_for("staff_security"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("Password change failed")
                flash("System error while changing the password", "danger")

        return render_template("staff/security.html", active_page="security")
