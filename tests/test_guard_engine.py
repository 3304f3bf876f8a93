"""Decision engine behaviour, driven with a deterministic resolver."""

import asyncio
import logging

import pytest

from botgate.domain.decisions import DenyReason, Verdict
from botgate.domain.signals import RequestSignal, UNKNOWN_ADDRESS
from botgate.services.guard.engine import BotGuard, create_bot_guard
from botgate.services.guard.reverse_dns import LookupFailure, ReverseLookup


GOOGLEBOT_UA = 'Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)'
CHROME_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
GOOGLE_IP = '66.249.66.1'


def _evaluate(guard, user_agent, ip=GOOGLE_IP, path='/'):
    return asyncio.run(guard.evaluate(RequestSignal(path=path, user_agent=user_agent, source_address=ip)))


@pytest.mark.parametrize('ua', ['', ' ', 'a', 'Googlebot', 'facebot', 'curl/8.0'])
def test_short_user_agents_always_denied(ua, make_resolver):
    resolver = make_resolver()
    guard = BotGuard(resolver)
    for ip in (GOOGLE_IP, '31.13.24.2', UNKNOWN_ADDRESS):
        decision = _evaluate(guard, ua, ip=ip)
        assert decision.verdict == Verdict.DENY
        assert decision.status_code == 403
    assert resolver.calls == []


@pytest.mark.parametrize('path', ['/api/health', '/api/health/ready', '/api/sitemap', '/api/sitemap.xml'])
def test_exempt_paths_skip_every_check(path, make_resolver):
    resolver = make_resolver()
    decision = _evaluate(BotGuard(resolver), '', ip=UNKNOWN_ADDRESS, path=path)
    assert decision.verdict == Verdict.ALLOW_SILENT
    assert decision.allowed
    assert resolver.calls == []


def test_genuine_googlebot_allowed(make_resolver):
    resolver = make_resolver({GOOGLE_IP: ReverseLookup.resolved(['crawl-66-249-66-1.googlebot.com'])})
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA)
    assert decision.verdict == Verdict.ALLOW
    assert decision.detail == 'registry:Googlebot'
    assert resolver.calls == [GOOGLE_IP]


def test_spoofed_googlebot_denied(make_resolver):
    resolver = make_resolver({'203.0.113.7': ReverseLookup.resolved(['evil.example.com'])})
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA, ip='203.0.113.7')
    assert decision.verdict == Verdict.DENY
    assert decision.reason == DenyReason.FAKE_CRAWLER
    assert decision.message == 'Access denied to suspicious bots'


def test_any_returned_hostname_may_match(make_resolver):
    resolver = make_resolver({GOOGLE_IP: ReverseLookup.resolved(['alias.example.net', 'rate-limited-proxy-66-249-66-1.google.com'])})
    assert _evaluate(BotGuard(resolver), GOOGLEBOT_UA).verdict == Verdict.ALLOW


def test_empty_ptr_answer_is_fake_crawler(make_resolver):
    resolver = make_resolver({GOOGLE_IP: ReverseLookup.resolved([])})
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA)
    assert decision.reason == DenyReason.FAKE_CRAWLER


@pytest.mark.parametrize('failure', [LookupFailure.NOT_FOUND, LookupFailure.TIMEOUT, LookupFailure.RESOLVER_ERROR])
def test_dns_failures_deny(failure, make_resolver):
    resolver = make_resolver(default=ReverseLookup.failed(failure, 'boom'))
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA)
    assert decision.verdict == Verdict.DENY
    assert decision.reason == DenyReason.DNS_LOOKUP_FAILED
    assert len(resolver.calls) == 1


def test_unsupported_dns_fails_open_for_registry_crawler(make_resolver):
    resolver = make_resolver(default=ReverseLookup.failed(LookupFailure.UNSUPPORTED, 'no resolv.conf'))
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA)
    assert decision.verdict == Verdict.ALLOW
    assert decision.detail == 'dns_unsupported'


def test_generic_bot_denied(make_resolver):
    resolver = make_resolver()
    decision = _evaluate(BotGuard(resolver), 'python-requests/2.31.0', ip='198.51.100.4')
    assert decision.reason == DenyReason.SUSPICIOUS_BOT
    assert resolver.calls == []


def test_generic_bot_denied_without_address(make_resolver):
    decision = _evaluate(BotGuard(make_resolver()), 'python-requests/2.31.0', ip=UNKNOWN_ADDRESS)
    assert decision.reason == DenyReason.SUSPICIOUS_BOT


def test_meta_ip_bypass_skips_dns(make_resolver):
    resolver = make_resolver(default=ReverseLookup.failed(LookupFailure.TIMEOUT))
    decision = _evaluate(BotGuard(resolver), 'facebookexternalhit/1.1', ip='31.13.24.2')
    assert decision.verdict == Verdict.ALLOW_SILENT
    assert decision.detail == 'meta_ip_bypass'
    assert resolver.calls == []


def test_meta_agent_outside_ranges_is_dns_verified(make_resolver):
    resolver = make_resolver({'203.0.113.50': ReverseLookup.resolved(['fwdproxy-prn-001.fbsv.net'])})
    decision = _evaluate(BotGuard(resolver), 'facebookexternalhit/1.1', ip='203.0.113.50')
    assert decision.reason == DenyReason.FAKE_CRAWLER
    assert resolver.calls == ['203.0.113.50']


def test_allowlist_precedence_over_bot_signatures(make_resolver):
    resolver = make_resolver()
    ua = 'Mozilla/5.0 AppleWebKit/537.36 (KHTML, like Gecko); compatible; ChatGPT-User/1.0; +https://openai.com/bot'
    decision = _evaluate(BotGuard(resolver), ua)
    assert decision.verdict == Verdict.ALLOW
    assert decision.detail == 'registry:ChatGPT-User'
    assert resolver.calls == []


def test_terse_registry_agent_exempt_from_structure_rule(make_resolver):
    resolver = make_resolver()
    assert _evaluate(BotGuard(resolver), 'ChatGPT-User').verdict == Verdict.ALLOW
    assert resolver.calls == []


def test_terse_unknown_agent_is_anomalous(make_resolver):
    decision = _evaluate(BotGuard(make_resolver()), 'scanner tool v2')
    assert decision.reason == DenyReason.ANOMALOUS_STRUCTURE
    assert decision.message == 'Access denied: anomalous User-Agent'
    # Short enough to fail the length rule first.
    assert _evaluate(BotGuard(make_resolver()), 'scanner1').verdict == Verdict.DENY


def test_registry_crawler_without_address_skips_dns(make_resolver):
    resolver = make_resolver()
    decision = _evaluate(BotGuard(resolver), GOOGLEBOT_UA, ip=UNKNOWN_ADDRESS)
    # Registry crawlers match the generic 'bot' signature but are never
    # denied by it.
    assert decision.verdict == Verdict.ALLOW
    assert resolver.calls == []


def test_uptime_monitor_allowed(make_resolver):
    decision = _evaluate(BotGuard(make_resolver()), 'Uptime-Kuma/1.23.11', ip='10.0.0.5')
    assert decision.verdict == Verdict.ALLOW


def test_browser_allowed_without_dns(make_resolver):
    resolver = make_resolver()
    assert _evaluate(BotGuard(resolver), CHROME_UA).verdict == Verdict.ALLOW
    assert resolver.calls == []


def test_dns_lookup_at_most_once_per_request(make_resolver):
    # Matches several Meta registry entries; only the first is verified.
    resolver = make_resolver(default=ReverseLookup.resolved(['edge-star.facebook.com']))
    ua = 'facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php) facebot meta-externalagent'
    decision = _evaluate(BotGuard(resolver), ua, ip='203.0.113.9')
    assert decision.verdict == Verdict.ALLOW
    assert decision.detail == 'registry:facebot'
    assert resolver.calls == ['203.0.113.9']


def test_same_input_same_decision(make_resolver):
    resolver = make_resolver({'203.0.113.7': ReverseLookup.resolved(['evil.example.com'])})
    guard = BotGuard(resolver)
    for ua, ip in ((GOOGLEBOT_UA, '203.0.113.7'), (CHROME_UA, GOOGLE_IP), ('python-requests/2.31.0', GOOGLE_IP)):
        assert _evaluate(guard, ua, ip=ip) == _evaluate(guard, ua, ip=ip)


def test_verbose_logging(caplog, make_resolver):
    logger = logging.getLogger('botgate.tests.guard')
    guard = create_bot_guard(resolver=make_resolver(), verbose=True, logger=logger)
    with caplog.at_level(logging.INFO, logger='botgate.tests.guard'):
        _evaluate(guard, 'python-requests/2.31.0')
    messages = [r.getMessage() for r in caplog.records]
    assert any('REQUEST LOG' in m for m in messages)
    assert any('Suspicious bot' in m and 'python-requests/2.31.0' in m for m in messages)


def test_quiet_by_default(caplog, make_resolver):
    logger = logging.getLogger('botgate.tests.quiet')
    guard = create_bot_guard(resolver=make_resolver(), logger=logger)
    with caplog.at_level(logging.DEBUG, logger='botgate.tests.quiet'):
        _evaluate(guard, 'python-requests/2.31.0')
        _evaluate(guard, '')
    assert caplog.records == []
