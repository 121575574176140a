"""Campus Attendance portal package.

Organised by feature modules (students, attendance, auth, notifications, ...)
with a thin Flask controller layer over service/repository layers.
"""
