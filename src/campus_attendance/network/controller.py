from __future__ import annotations

from flask import Flask, render_template, request

from ..container import Container

_OPEN_ENDPOINTS = {"static"}


def register(app: Flask, container: Container) -> None:
    gate = container.network_gate

    @app.before_request
    def enforce_network_gate():
        if not gate.enabled or request.endpoint in _OPEN_ENDPOINTS:
            return None

        decision = gate.check(request.remote_addr)
        if not decision.allowed:
            return render_template("access_denied.html", ip=decision.ip), 403
        return None
