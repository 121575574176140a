from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import current_role, staff_required
from ..container import Container
from ..core.exceptions import AuthorizationError, StoreError, ValidationError


def register(app: Flask, container: Container) -> None:
    students = container.student_service

    @app.route("/staff/students", methods=["GET", "POST"], endpoint="staff_students")
    @staff_required
    def staff_students():
        if request.method == "POST":
            try:
                student = students.add_student(
                    actor=current_role(),
                    name=request.form.get("name", ""),
                    reg_no=request.form.get("reg_no", ""),
                    email=request.form.get("email"),
                    parent_email=request.form.get("parent_email"),
                )
                flash(f"Added {student.name} ({student.reg_no}).", "success")
                return redirect(url_for("staff_students"))
            except (ValidationError, AuthorizationError, StoreError) as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("Adding student failed")
                flash("System error while adding the student", "danger")

        query = request.args.get("q", "")
        return render_template(
            "staff/students.html",
            students=students.search(query),
            query=query,
            active_page="students",
        )

    @app.route("/staff/students/<reg_no>/delete", methods=["POST"], endpoint="staff_delete_student")
    @staff_required
    def staff_delete_student(reg_no: str):
        try:
            students.delete_student(actor=current_role(), reg_no=reg_no)
            flash(f"Removed {reg_no.upper()}.", "success")
        except (ValidationError, AuthorizationError, StoreError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Deleting student failed")
            flash("System error while removing the student", "danger")
        return redirect(url_for("staff_students"))
