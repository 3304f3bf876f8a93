"""Per-request bot guard.

Evaluation order:
1. Exempt paths (health checks, sitemap) pass silently.
2. Empty, short or placeholder User-Agents are rejected.
3. Structurally anomalous User-Agents are rejected unless allowlisted.
4. The crawler verifier decides the rest.

Usage:
    guard = create_bot_guard(verbose=True)
    decision = await guard.evaluate(RequestSignal(path, user_agent, ip))
"""

from __future__ import annotations

import logging

from botgate.domain.decisions import Decision, DenyReason
from botgate.domain.signals import RequestSignal
from botgate.services.guard import rules
from botgate.services.guard.structure import check_malformed, has_anomalous_structure
from botgate.services.guard.verifier import CrawlerVerifier


class BotGuard:
    def __init__(self, resolver=None, *, verbose: bool = False, logger: logging.Logger | None = None):
        self.verbose = bool(verbose)
        self.logger = logger or logging.getLogger(__name__)
        self.verifier = CrawlerVerifier(resolver, verbose=self.verbose, logger=self.logger)

    def _diag(self, message: str, *args) -> None:
        if self.verbose:
            self.logger.info(message, *args)

    async def evaluate(self, signal: RequestSignal) -> Decision:
        if rules.is_exempt_path(signal.path):
            return Decision.allow_silent(detail='path_exempt')

        ip = signal.source_address
        ua = signal.user_agent or ''

        self._diag('=== REQUEST LOG === ip=%s ua=%s path=%s', ip, ua, signal.path)

        reason = check_malformed(ua)
        if reason is not None:
            self._diag('🚫 Malformed User-Agent (%s): ip=%s ua=%s', reason, ip, ua)
            return Decision.deny(reason)

        if has_anomalous_structure(ua) and not rules.is_allowlisted(ua):
            self._diag('🚫 Anomalous User-Agent structure: ip=%s ua=%s', ip, ua)
            return Decision.deny(DenyReason.ANOMALOUS_STRUCTURE)

        return await self.verifier.verify(ua, ip)


def create_bot_guard(*, resolver=None, verbose: bool = False, logger: logging.Logger | None = None) -> BotGuard:
    """Build a guard with the default async resolver unless one is given."""
    return BotGuard(resolver, verbose=verbose, logger=logger)
