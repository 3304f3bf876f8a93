"""
WSGI Entry Point for botgate

This module serves as the entry point for WSGI servers (like Gunicorn)
to run the Flask application in production environments.
"""

import os
import sys

# Load .env ONLY for local development. In production, environment
# variables must be provided by the platform. Never rely on a committed file.
if os.environ.get('FLASK_ENV', '').lower() != 'production' and os.environ.get('FLASK_CONFIG', '').lower() != 'production':
    from dotenv import load_dotenv

    load_dotenv(override=False)

from botgate import create_app

# Determine configuration name.
# - Local/dev defaults to development.
# - Production platforms must explicitly set FLASK_ENV/FLASK_CONFIG=production.
config_name = (os.getenv('FLASK_CONFIG') or os.getenv('FLASK_ENV') or 'development').lower()

print(f'🚀 Initializing Flask application with config: {config_name}', file=sys.stderr)

try:
    app = create_app(config_name)
    print('✓ Flask application created successfully', file=sys.stderr)
except Exception as exc:
    print(f'\n{"="*70}', file=sys.stderr)
    print('❌ FATAL: Application initialization failed', file=sys.stderr)
    print(f'{"="*70}', file=sys.stderr)
    print(f'\nError: {exc}', file=sys.stderr)
    print(f'\n{"="*70}\n', file=sys.stderr)
    raise


if __name__ == '__main__':
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    app.run(host=host, port=port)
