"""Source address resolution for the bot guard."""

from __future__ import annotations

from typing import Mapping

from botgate.domain.signals import UNKNOWN_ADDRESS


def _forwarded_for_ips(header_value: str | None) -> list[str]:
    if not header_value:
        return []
    return [part.strip() for part in header_value.split(',')]


def resolve_source_address(headers: Mapping[str, str] | None, remote_addr: str | None) -> str:
    """Return the first X-Forwarded-For entry, else remote_addr, else 'unknown'.

    The forwarded value is taken as-is (no validation); reverse DNS on a bogus
    address simply fails and is handled as a lookup failure.
    """
    if headers is None:
        headers = {}

    forwarded_for = _forwarded_for_ips(headers.get('X-Forwarded-For'))
    if forwarded_for and forwarded_for[0]:
        return forwarded_for[0]

    remote = (remote_addr or '').strip()
    if remote:
        return remote

    return UNKNOWN_ADDRESS
