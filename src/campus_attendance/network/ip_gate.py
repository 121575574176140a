"""Network presence check.

Compares the caller's address with a configured allow-list (e.g. the campus
hotspot's public IP). The address is client-observable and spoofable, so the
gate only steers users to the right network; it is not an access control.

With a lookup client the gate compares the public IP this host is seen as,
which only changes when the host changes network. A successful lookup is
reused for ``lookup_ttl`` seconds.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import requests

logger = logging.getLogger(__name__)

IPIFY_URL = "https://api.ipify.org?format=json"
LOOKUP_TTL_SECONDS = 60.0


class IpLookupClient:
    """Asks a public lookup service which IP this host is seen as."""

    def __init__(self, url: str = IPIFY_URL, *, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    def public_ip(self) -> str:
        response = self._session.get(self._url, timeout=self._timeout)
        response.raise_for_status()
        return str(response.json()["ip"]).strip()


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    ip: Optional[str] = None


class NetworkGate:
    def __init__(
        self,
        allowed_ips: Iterable[str] = (),
        *,
        lookup: Optional[IpLookupClient] = None,
        lookup_ttl: float = LOOKUP_TTL_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._allowed = {ip.strip() for ip in allowed_ips if ip and ip.strip()}
        self._lookup = lookup
        self._lookup_ttl = float(lookup_ttl)
        self._monotonic = monotonic
        self._cached_ip: Optional[str] = None
        self._cached_at = 0.0

    @property
    def enabled(self) -> bool:
        return bool(self._allowed)

    def check(self, client_ip: Optional[str]) -> GateDecision:
        if not self.enabled:
            return GateDecision(allowed=True, ip=client_ip)

        ip = client_ip
        if self._lookup is not None:
            try:
                ip = self._public_ip()
            except (requests.RequestException, KeyError, ValueError) as e:
                logger.error("IP check failed: %s", e)
                return GateDecision(allowed=False, ip=None)

        allowed = bool(ip) and ip.strip() in self._allowed
        if not allowed:
            logger.info("Network gate denied %s", ip)
        return GateDecision(allowed=allowed, ip=ip)

    def _public_ip(self) -> str:
        now = self._monotonic()
        if self._cached_ip is None or now - self._cached_at >= self._lookup_ttl:
            self._cached_ip = self._lookup.public_ip()
            self._cached_at = now
        return self._cached_ip
