"""
Long URL validation.

Accepts absolute http/https URLs with a hostname. In restricted mode also
rejects loopback and common private-range hostnames so the service can't be
pointed at internal addresses.

The private-range check is a prefix/exact match on the lowercased hostname.
It does not cover all of 172.16.0.0/12, IPv6 loopback, or hostnames that
resolve to private addresses (DNS rebinding); it is a first line only.
"""

import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
BLOCKED_HOSTS = ("localhost", "127.0.0.1")
BLOCKED_HOST_PREFIXES = ("10.", "192.168.", "172.16.")


class URLValidator:
    """Stateless validator; ``restricted`` enables the private-host check."""

    def __init__(self, restricted: bool = False):
        self.restricted = restricted

    def validate(self, candidate) -> bool:
        if not candidate or not isinstance(candidate, str):
            logger.debug("Rejected URL: missing or not a string")
            return False

        try:
            parts = urlsplit(candidate)
            # Accessing .port validates it (raises ValueError when out of range)
            parts.port
        except ValueError as e:
            logger.debug("Rejected URL %r: malformed (%s)", candidate, e)
            return False

        if parts.scheme.lower() not in ALLOWED_SCHEMES:
            logger.debug("Rejected URL %r: scheme %r not allowed", candidate, parts.scheme)
            return False

        hostname = parts.hostname  # already lowercased
        if not hostname:
            logger.debug("Rejected URL %r: no hostname", candidate)
            return False

        if any(ch.isspace() for ch in hostname):
            logger.debug("Rejected URL %r: whitespace in hostname", candidate)
            return False

        if self.restricted and self._is_private_host(hostname):
            logger.info("Blocked private/loopback host: %s", hostname)
            return False

        logger.debug("Accepted URL %r", candidate)
        return True

    @staticmethod
    def _is_private_host(hostname: str) -> bool:
        hostname = hostname.lower()
        return hostname in BLOCKED_HOSTS or hostname.startswith(BLOCKED_HOST_PREFIXES)
