import asyncio

import click
from flask import current_app
from flask.cli import with_appcontext

from botgate.domain.signals import RequestSignal, UNKNOWN_ADDRESS
from botgate.services.guard import rules


@click.command('classify-request')
@click.option('--user-agent', '-u', default='', help='User-Agent header value')
@click.option('--ip', 'ip_address', default=UNKNOWN_ADDRESS, show_default=True, help='Source address')
@click.option('--path', default='/', show_default=True, help='Request path')
@with_appcontext
def classify_request_command(user_agent: str, ip_address: str, path: str) -> None:
    """Run the bot guard once against a synthetic request."""
    guard = current_app.extensions.get('bot_guard')
    if guard is None:
        raise click.ClickException('Bot guard is not installed (BOT_GUARD_ENABLED is off).')

    signal = RequestSignal(path=path or '/', user_agent=user_agent or '', source_address=ip_address or UNKNOWN_ADDRESS)
    decision = asyncio.run(guard.evaluate(signal))

    click.echo(f'verdict: {decision.verdict}')
    if decision.denied:
        click.echo(f'reason:  {decision.reason}')
        click.echo(f'status:  {decision.status_code}')
        click.echo(f'message: {decision.message}')
    if decision.detail:
        click.echo(f'detail:  {decision.detail}')


@click.command('list-crawlers')
def list_crawlers_command() -> None:
    """Print the crawler registry and IP bypass rules."""
    click.echo('Crawler registry:')
    for entry in rules.CRAWLER_REGISTRY:
        suffixes = ', '.join(entry.hostname_suffixes) if entry.requires_dns else '(user-agent only)'
        click.echo(f'  {entry.name:<22} {suffixes}')

    click.echo('IP bypass rules:')
    for rule in rules.IP_BYPASS_RULES:
        click.echo(f"  {rule.name:<22} {', '.join(rule.ip_prefixes)}")
