from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailClient(Protocol):
    def send(self, service_id: str, template_id: str, variables: Mapping[str, Any]) -> int:
        """Send one templated email; returns the provider's HTTP status."""
        raise NotImplementedError


class EmailJsClient(EmailClient):
    """EmailJS REST client. A status of 200 means the email was accepted."""

    def __init__(
        self,
        public_key: str,
        *,
        private_key: str = "",
        endpoint: str = EMAILJS_SEND_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._public_key = public_key
        self._private_key = private_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()

    def send(self, service_id: str, template_id: str, variables: Mapping[str, Any]) -> int:
        payload: dict[str, Any] = {
            "service_id": service_id,
            "template_id": template_id,
            "user_id": self._public_key,
            "template_params": dict(variables),
        }
        if self._private_key:
            payload["accessToken"] = self._private_key

        response = self._session.post(self._endpoint, json=payload, timeout=self._timeout)
        if response.status_code != 200:
            logger.warning("EmailJS returned %s: %s", response.status_code, response.text[:200])
        return response.status_code
