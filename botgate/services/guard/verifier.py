"""Crawler verification: IP bypass, reverse-DNS check, bot signatures."""

from __future__ import annotations

import logging

from botgate.domain.decisions import Decision, DenyReason
from botgate.domain.signals import UNKNOWN_ADDRESS
from botgate.services.guard import rules
from botgate.services.guard.reverse_dns import AsyncReverseResolver, LookupFailure


class CrawlerVerifier:
    def __init__(self, resolver=None, *, verbose: bool = False, logger: logging.Logger | None = None):
        self.resolver = resolver if resolver is not None else AsyncReverseResolver()
        self.verbose = bool(verbose)
        self.logger = logger or logging.getLogger(__name__)

    def _diag(self, message: str, *args) -> None:
        if self.verbose:
            self.logger.info(message, *args)

    async def verify(self, user_agent: str, source_address: str) -> Decision:
        ua = user_agent or ''
        ip = source_address or UNKNOWN_ADDRESS

        allowlisted = rules.is_allowlisted(ua)
        signature = None if allowlisted else rules.matching_bot_signature(ua)

        bypass = rules.matching_ip_bypass(ua, ip)
        if bypass is not None:
            self._diag('✅ %s IP bypass, DNS skipped: ip=%s ua=%s', bypass.name, ip, ua)
            return Decision.allow_silent(detail=f'{bypass.name}_ip_bypass')

        if ip != UNKNOWN_ADDRESS:
            entry = rules.first_registry_match(ua)
            if entry is not None:
                return await self._verify_entry(entry, ua, ip)

        if signature is not None:
            self._diag('🤖 Suspicious bot blocked: ip=%s ua=%s signature=%s', ip, ua, signature.label)
            return Decision.deny(DenyReason.SUSPICIOUS_BOT, detail=f'signature:{signature.label}')

        return Decision.allow()

    async def _verify_entry(self, entry: rules.CrawlerEntry, ua: str, ip: str) -> Decision:
        if not entry.requires_dns:
            return Decision.allow(detail=f'registry:{entry.name}')

        lookup = await self.resolver.reverse(ip)

        if lookup.ok:
            if any(entry.hostname_matches(host) for host in lookup.hostnames):
                self._diag('✓ Crawler verified: %s ip=%s hosts=%s', entry.name, ip, list(lookup.hostnames))
                return Decision.allow(detail=f'registry:{entry.name}')
            self._diag(
                '🛑 Fake crawler blocked: %s ip=%s ua=%s hosts=%s',
                entry.name, ip, ua, list(lookup.hostnames),
            )
            return Decision.deny(DenyReason.FAKE_CRAWLER, detail=f'registry:{entry.name}')

        if lookup.failure == LookupFailure.UNSUPPORTED:
            # Reverse DNS is unavailable on this host; let known crawlers through.
            self._diag(
                '⚠️ Reverse DNS unsupported, skipped for known crawler %s: ip=%s ua=%s error=%s',
                entry.name, ip, ua, lookup.error,
            )
            return Decision.allow(detail='dns_unsupported')

        self._diag(
            '❌ Reverse DNS failed for %s: ip=%s ua=%s failure=%s error=%s',
            entry.name, ip, ua, lookup.failure, lookup.error,
        )
        return Decision.deny(DenyReason.DNS_LOOKUP_FAILED, detail=f'dns_{lookup.failure}')
