"""
Main Blueprint - Public Routes

Stand-in for the application behind the guard:
- Homepage
- robots.txt
"""

from flask import Blueprint, Response, current_app, jsonify


main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return jsonify({
        'service': current_app.config.get('SITE_NAME', 'botgate'),
        'status': 'ok',
    })


@main_bp.route('/robots.txt')
def robots():
    """Generate robots.txt file"""

    site_url = current_app.config.get('SITE_URL', 'http://localhost:5000')

    content = f"""User-agent: *
Allow: /

Sitemap: {site_url}/api/sitemap
"""

    return Response(content, mimetype='text/plain')
