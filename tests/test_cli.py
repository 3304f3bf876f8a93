from botgate import create_app
from botgate.services.guard.reverse_dns import ReverseLookup


def test_classify_generic_bot(runner):
    result = runner.invoke(args=['classify-request', '--user-agent', 'python-requests/2.31.0', '--ip', '198.51.100.4'])
    assert result.exit_code == 0
    assert 'verdict: deny' in result.output
    assert 'reason:  suspicious_bot' in result.output
    assert 'status:  403' in result.output


def test_classify_verified_crawler(runner, resolver):
    resolver.answers['66.249.66.1'] = ReverseLookup.resolved(['crawl-66-249-66-1.googlebot.com'])
    result = runner.invoke(args=[
        'classify-request',
        '-u', 'Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)',
        '--ip', '66.249.66.1',
    ])
    assert result.exit_code == 0
    assert 'verdict: allow' in result.output
    assert 'detail:  registry:Googlebot' in result.output


def test_classify_exempt_path(runner):
    result = runner.invoke(args=['classify-request', '--path', '/api/health'])
    assert result.exit_code == 0
    assert 'verdict: allow_silent' in result.output


def test_classify_requires_guard(resolver):
    app = create_app('testing', overrides={'BOT_GUARD_ENABLED': False}, resolver=resolver)
    result = app.test_cli_runner().invoke(args=['classify-request', '-u', 'curl/8.4.0'])
    assert result.exit_code != 0
    assert 'not installed' in result.output


def test_list_crawlers(runner):
    result = runner.invoke(args=['list-crawlers'])
    assert result.exit_code == 0
    assert 'Googlebot' in result.output
    assert '.googlebot.com' in result.output
    assert 'ChatGPT-User' in result.output
    assert '31.13.' in result.output
