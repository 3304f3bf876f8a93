"""Static rule tables for the bot guard.

Goals:
- Keep every table an ordered, immutable tuple of frozen records.
- First match wins when order matters (crawler registry); any match suffices
  for signature lists.
- Patterns are case-insensitive, matching anywhere in the User-Agent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class BotSignature:
    pattern: re.Pattern
    label: str

    def matches(self, user_agent: str) -> bool:
        return bool(self.pattern.search(user_agent or ''))


@dataclass(frozen=True)
class CrawlerEntry:
    """A named crawler that may be verified by reverse DNS.

    An empty `hostname_suffixes` means the User-Agent alone is trusted.
    """

    name: str
    pattern: re.Pattern
    hostname_suffixes: tuple[str, ...] = ()

    @property
    def requires_dns(self) -> bool:
        return bool(self.hostname_suffixes)

    def matches(self, user_agent: str) -> bool:
        return bool(self.pattern.search(user_agent or ''))

    def hostname_matches(self, hostname: str) -> bool:
        host = (hostname or '').strip().rstrip('.').lower()
        if not host:
            return False
        return any(host.endswith(suffix.lower()) for suffix in self.hostname_suffixes)


@dataclass(frozen=True)
class IpBypassRule:
    name: str
    user_agent_pattern: re.Pattern
    ip_prefixes: tuple[str, ...]

    def matches(self, user_agent: str, source_address: str) -> bool:
        if not self.user_agent_pattern.search(user_agent or ''):
            return False
        return (source_address or '').lower().startswith(self.ip_prefixes)


def _ci(expr: str) -> re.Pattern:
    return re.compile(expr, re.IGNORECASE)


EXEMPT_PATH_PREFIXES = (
    '/api/health',
    '/api/sitemap',
)


_BOT_SIGNATURE_EXPRS = (
    'bot',
    'crawler',
    'spider',
    'crawl',
    'fetch',
    'scrapy',
    'python',
    'httpclient',
    'curl',
    'wget',
    'axios',
    'node-fetch',
    'PostmanRuntime',
    'headlesschrome',
    'go-http-client',
    'java',
    'perl',
    'libwww',
    'Yeti',
    'AhrefsBot',
    'MJ12bot',
    'DotBot',
    'PetalBot',
    'SEOkicks',
    'Baiduspider',
    'Bytespider',
    'GPTBot',
    'ClaudeBot',
)

BOT_SIGNATURES = tuple(
    BotSignature(pattern=_ci(re.escape(expr)), label=expr.lower())
    for expr in _BOT_SIGNATURE_EXPRS
)


_META_SUFFIXES = ('.facebook.com',)

CRAWLER_REGISTRY = (
    # Search engines
    CrawlerEntry('Googlebot', _ci(r'Googlebot'), ('.googlebot.com', '.google.com')),
    CrawlerEntry('Bingbot', _ci(r'Bingbot'), ('.search.msn.com',)),
    CrawlerEntry('Slurp', _ci(r'Slurp'), ('.crawl.yahoo.net',)),
    CrawlerEntry('DuckDuckBot', _ci(r'DuckDuckBot'), ('.duckduckgo.com',)),
    CrawlerEntry('YandexBot', _ci(r'YandexBot'), ('.yandex.com', '.yandex.ru')),
    # SEO tools
    CrawlerEntry('SemrushBot', _ci(r'SemrushBot'), ('.bot.semrush.com', '.semrush.com')),
    CrawlerEntry('Screaming Frog', _ci(r'Screaming Frog SEO Spider'), ('.screamingfrog.co.uk',)),
    CrawlerEntry('Applebot', _ci(r'Applebot'), ('.applebot.apple.com',)),
    # Link previews
    CrawlerEntry('Twitterbot', _ci(r'Twitterbot'), ('.twitter.com',)),
    CrawlerEntry('facebot', _ci(r'facebot'), _META_SUFFIXES),
    CrawlerEntry('facebookexternalhit', _ci(r'facebookexternalhit'), _META_SUFFIXES),
    CrawlerEntry('meta-externalagent', _ci(r'meta-externalagent'), _META_SUFFIXES),
    CrawlerEntry('ChatGPT-User', _ci(r'ChatGPT-User')),
)

# Allowlisted without being a verifiable crawler.
ALWAYS_ALLOW_PATTERNS = (
    _ci(r'uptime-kuma'),
)

# Meta publishes its crawler ranges; reverse DNS for them is unreliable on
# some hosts, so the address prefix is trusted instead.
IP_BYPASS_RULES = (
    IpBypassRule(
        name='meta',
        user_agent_pattern=_ci(r'facebookexternalhit|meta-externalagent|facebot'),
        ip_prefixes=('2a03:2880:', '31.13.', '69.171.', '66.220.', '129.134.'),
    ),
)


def is_exempt_path(path: str) -> bool:
    return (path or '').startswith(EXEMPT_PATH_PREFIXES)


def first_registry_match(user_agent: str) -> CrawlerEntry | None:
    for entry in CRAWLER_REGISTRY:
        if entry.matches(user_agent):
            return entry
    return None


def is_allowlisted(user_agent: str) -> bool:
    if first_registry_match(user_agent) is not None:
        return True
    return any(p.search(user_agent or '') for p in ALWAYS_ALLOW_PATTERNS)


def matching_bot_signature(user_agent: str) -> BotSignature | None:
    for signature in BOT_SIGNATURES:
        if signature.matches(user_agent):
            return signature
    return None


def matching_ip_bypass(user_agent: str, source_address: str) -> IpBypassRule | None:
    for rule in IP_BYPASS_RULES:
        if rule.matches(user_agent, source_address):
            return rule
    return None
