"""
Health check endpoints for monitoring the service.

Everything under /api/health bypasses the bot guard, so load balancer
probes and uptime monitors are never rejected for their User-Agent.
"""

from flask import Blueprint, jsonify, current_app
from datetime import datetime
import os

from botgate.services.guard import rules


health_bp = Blueprint('health', __name__)


@health_bp.route('/api/health')
def health_check():
    """
    Lightweight health check for load balancer probes.

    Returns 200 OK if the application is running.
    """
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': current_app.config.get('SITE_NAME', 'botgate'),
    }), 200


@health_bp.route('/api/health/ready')
def readiness_check():
    """
    Readiness check: the guard is installed and its rule tables are loaded.

    Does NOT perform a DNS lookup; resolver problems only affect crawler
    verification and are handled per request.
    """
    checks = {
        'application': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'guard_enabled': bool(current_app.config.get('BOT_GUARD_ENABLED', True)),
        'guard_installed': 'bot_guard' in current_app.extensions,
        'crawler_registry_size': len(rules.CRAWLER_REGISTRY),
        'bot_signature_count': len(rules.BOT_SIGNATURES),
    }

    status_code = 200
    if checks['guard_enabled'] and not checks['guard_installed']:
        status_code = 503
        current_app.logger.error('Readiness check failed: bot guard enabled but not installed')

    checks['overall'] = 'healthy' if status_code == 200 else 'unhealthy'
    return jsonify(checks), status_code


@health_bp.route('/api/health/live')
def liveness_check():
    """
    Liveness probe for container orchestration.
    """
    return jsonify({
        'status': 'alive',
        'pid': os.getpid(),
        'timestamp': datetime.utcnow().isoformat(),
    }), 200
