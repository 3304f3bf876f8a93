from __future__ import annotations

from dataclasses import dataclass


class Verdict:
    """Outcome of one guard evaluation.

    ALLOW_SILENT behaves exactly like ALLOW for the client; it only marks that
    a bypass path (exempt URL, provider IP range) was taken.
    """

    ALLOW = 'allow'
    ALLOW_SILENT = 'allow_silent'
    DENY = 'deny'

    ALL = (ALLOW, ALLOW_SILENT, DENY)


class DenyCategory:
    MALFORMED_USER_AGENT = 'malformed_user_agent'
    ANOMALOUS_USER_AGENT = 'anomalous_user_agent'
    SUSPICIOUS_BOT = 'suspicious_bot'


class DenyReason:
    EMPTY_UA = 'empty_ua'
    TOO_SHORT_UA = 'too_short_ua'
    GENERIC_UA = 'generic_ua'
    ANOMALOUS_STRUCTURE = 'anomalous_structure'
    FAKE_CRAWLER = 'fake_crawler'
    DNS_LOOKUP_FAILED = 'dns_lookup_failed'
    SUSPICIOUS_BOT = 'suspicious_bot'

    ALL = (
        EMPTY_UA,
        TOO_SHORT_UA,
        GENERIC_UA,
        ANOMALOUS_STRUCTURE,
        FAKE_CRAWLER,
        DNS_LOOKUP_FAILED,
        SUSPICIOUS_BOT,
    )


REASON_CATEGORIES: dict[str, str] = {
    DenyReason.EMPTY_UA: DenyCategory.MALFORMED_USER_AGENT,
    DenyReason.TOO_SHORT_UA: DenyCategory.MALFORMED_USER_AGENT,
    DenyReason.GENERIC_UA: DenyCategory.MALFORMED_USER_AGENT,
    DenyReason.ANOMALOUS_STRUCTURE: DenyCategory.ANOMALOUS_USER_AGENT,
    DenyReason.FAKE_CRAWLER: DenyCategory.SUSPICIOUS_BOT,
    DenyReason.DNS_LOOKUP_FAILED: DenyCategory.SUSPICIOUS_BOT,
    DenyReason.SUSPICIOUS_BOT: DenyCategory.SUSPICIOUS_BOT,
}

# Public response bodies. One per category so a client cannot tell which
# individual rule rejected it.
CATEGORY_MESSAGES: dict[str, str] = {
    DenyCategory.MALFORMED_USER_AGENT: 'Access denied: invalid User-Agent',
    DenyCategory.ANOMALOUS_USER_AGENT: 'Access denied: anomalous User-Agent',
    DenyCategory.SUSPICIOUS_BOT: 'Access denied to suspicious bots',
}

DENY_STATUS_CODE = 403


@dataclass(frozen=True)
class Decision:
    verdict: str
    reason: str | None = None
    detail: str = ''

    @classmethod
    def allow(cls, detail: str = '') -> 'Decision':
        return cls(Verdict.ALLOW, detail=detail)

    @classmethod
    def allow_silent(cls, detail: str = '') -> 'Decision':
        return cls(Verdict.ALLOW_SILENT, detail=detail)

    @classmethod
    def deny(cls, reason: str, detail: str = '') -> 'Decision':
        if reason not in REASON_CATEGORIES:
            raise ValueError(f'Unknown deny reason: {reason!r}')
        return cls(Verdict.DENY, reason=reason, detail=detail)

    @property
    def allowed(self) -> bool:
        return self.verdict in (Verdict.ALLOW, Verdict.ALLOW_SILENT)

    @property
    def denied(self) -> bool:
        return self.verdict == Verdict.DENY

    @property
    def category(self) -> str | None:
        if self.reason is None:
            return None
        return REASON_CATEGORIES[self.reason]

    @property
    def status_code(self) -> int | None:
        return DENY_STATUS_CODE if self.denied else None

    @property
    def message(self) -> str:
        category = self.category
        if category is None:
            return ''
        return CATEGORY_MESSAGES[category]
