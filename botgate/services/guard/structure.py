"""Structural User-Agent checks.

Real browsers and declared crawlers send `product/version (comment)` style
strings. These checks reject what is clearly not that shape.
"""

from __future__ import annotations

import re

from botgate.domain.decisions import DenyReason


MIN_USER_AGENT_LENGTH = 10
GENERIC_USER_AGENT_MAX_LENGTH = 15

_ALNUM_ONLY = re.compile(r'^[a-z0-9]+$', re.IGNORECASE)
_PARENTHESIS = re.compile(r'[()]')
_PLATFORM_TOKEN = re.compile(r'WebKit|Apple', re.IGNORECASE)
_BARE_TOOL_NAME = re.compile(r'^[a-zA-Z0-9 _-]{5,40}$')


def check_malformed(user_agent: str) -> str | None:
    """Return the DenyReason for an empty, short or placeholder UA, else None.

    These rules apply to every request, allowlisted crawlers included.
    """
    ua = user_agent or ''

    if ua.strip() == '':
        return DenyReason.EMPTY_UA
    if len(ua) < MIN_USER_AGENT_LENGTH:
        return DenyReason.TOO_SHORT_UA
    if _ALNUM_ONLY.match(ua) and len(ua) < GENERIC_USER_AGENT_MAX_LENGTH:
        return DenyReason.GENERIC_UA
    return None


def has_anomalous_structure(user_agent: str) -> bool:
    """True when the UA lacks every structural marker or is a bare tool name.

    Callers skip this check for allowlisted crawlers, which often send terse
    strings.
    """
    ua = user_agent or ''

    lacks_markers = (
        '/' not in ua
        and not _PARENTHESIS.search(ua)
        and not _PLATFORM_TOKEN.search(ua)
    )
    if lacks_markers:
        return True
    return bool(_BARE_TOOL_NAME.match(ua))
