"""
Flask Application Factory

This module implements the application factory pattern for creating
Flask application instances with the bot guard installed in front of
every route.
"""

from flask import Flask, jsonify
from botgate.config import config
import os


def _safe_log(app, level: str, message: str, *args, **kwargs) -> None:
    """Log without risking startup due to logger misconfiguration."""
    try:
        logger = getattr(app.logger, level)
        logger(message, *args, **kwargs)
    except Exception:
        try:
            import sys

            print(f"[{level.upper()}] {message % args if args else message}", file=sys.stderr)
        except Exception:
            pass


def create_app(config_name='default', overrides=None, resolver=None):
    """
    Application factory function

    Args:
        config_name (str): Configuration name ('development', 'production', 'testing')
        overrides (dict): Config values applied on top of the named config
        resolver: Reverse-DNS resolver for the guard (defaults to dnspython)

    Returns:
        Flask: Configured Flask application instance
    """

    # Normalize config name
    config_name = (config_name or 'default').lower()

    app = Flask(__name__)

    cfg = config.get(config_name) or config['default']
    cfg_obj = cfg() if isinstance(cfg, type) else cfg
    app.config.from_object(cfg_obj)
    if overrides:
        app.config.update(overrides)

    if config_name != 'production' and not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = os.urandom(32)

    try:
        app.logger.setLevel(app.config.get('LOG_LEVEL') or 'INFO')
    except (TypeError, ValueError):
        _safe_log(app, 'warning', 'Invalid LOG_LEVEL %r; keeping default level', app.config.get('LOG_LEVEL'))

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register request lifecycle hooks
    register_request_hooks(app, resolver=resolver)

    @app.after_request
    def _apply_security_headers(response):
        """Apply safe security headers without affecting app logic."""
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
        response.headers.setdefault('Cross-Origin-Resource-Policy', 'same-site')
        return response

    @app.route('/favicon.ico')
    def favicon_placeholder():  # pragma: no cover - trivial route
        return ('', 204)

    return app


def register_blueprints(app):
    """Register Flask blueprints"""

    from botgate.routes.main import main_bp
    from botgate.routes.health import health_bp
    from botgate.routes.sitemap import sitemap_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(health_bp)  # No prefix - accessible at /api/health
    app.register_blueprint(sitemap_bp)


def register_error_handlers(app):
    """Register error handlers for common HTTP errors"""

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors"""
        return jsonify({'error': 'not_found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors"""
        app.logger.exception('Unhandled exception (500): %s', error)
        return jsonify({'error': 'internal_error'}), 500

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors"""
        return ('Forbidden', 403, {'Content-Type': 'text/plain; charset=utf-8'})


def register_cli_commands(app):
    """Register custom Flask CLI commands."""
    from botgate.cli import classify_request_command, list_crawlers_command

    app.cli.add_command(classify_request_command)
    app.cli.add_command(list_crawlers_command)


def register_request_hooks(app, resolver=None):
    """Install the bot guard in front of every request."""

    from flask import Response, g, request

    from botgate.domain.signals import RequestSignal
    from botgate.services.guard.engine import create_bot_guard
    from botgate.utils.client_ip import resolve_source_address

    if not app.config.get('BOT_GUARD_ENABLED', True):
        _safe_log(app, 'warning', 'Bot guard disabled via BOT_GUARD_ENABLED; requests are not filtered')
        return

    app.extensions['bot_guard'] = create_bot_guard(
        resolver=resolver,
        verbose=bool(app.config.get('BOT_GUARD_VERBOSE', False)),
        logger=app.logger,
    )

    @app.before_request
    async def _enforce_bot_guard():
        """Classify the request; answer 403 for rejected clients."""

        g.bot_decision = None
        guard = app.extensions.get('bot_guard')
        if guard is None:
            return None

        signal = RequestSignal(
            path=request.path or '/',
            user_agent=request.headers.get('User-Agent', ''),
            source_address=resolve_source_address(request.headers, request.remote_addr),
        )

        try:
            decision = await guard.evaluate(signal)
        except Exception:
            # A guard bug must not take the site down.
            app.logger.exception('Bot guard evaluation failed: path=%s ip=%s', signal.path, signal.source_address)
            return None

        g.bot_decision = decision
        if decision.denied:
            return Response(decision.message, status=decision.status_code, mimetype='text/plain')
        return None
