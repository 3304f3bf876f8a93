"""Sitemap endpoint. Exempt from the bot guard so every crawler can read it."""

from flask import Blueprint, Response, current_app, url_for


sitemap_bp = Blueprint('sitemap', __name__)


def _join_site_url(site_url: str, path: str) -> str:
    return f"{(site_url or '').rstrip('/')}/{(path or '').lstrip('/')}"


def generate_sitemap(endpoints):
    """
    Generate XML sitemap content

    Args:
        endpoints: iterable of (endpoint name, changefreq, priority)

    Returns:
        str: XML sitemap content
    """
    site_url = current_app.config.get('SITE_URL', 'http://localhost:5000')

    xml_lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    xml_lines.append('<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">')

    for endpoint, changefreq, priority in endpoints:
        xml_lines.append('<url>')
        xml_lines.append(f'<loc>{_join_site_url(site_url, url_for(endpoint))}</loc>')
        xml_lines.append(f'<changefreq>{changefreq}</changefreq>')
        xml_lines.append(f'<priority>{priority}</priority>')
        xml_lines.append('</url>')

    xml_lines.append('</urlset>')
    return '\n'.join(xml_lines)


@sitemap_bp.route('/api/sitemap')
@sitemap_bp.route('/api/sitemap.xml')
def sitemap():
    """Generate XML sitemap for SEO"""
    sitemap_xml = generate_sitemap([
        ('main.index', 'daily', '1.0'),
    ])
    return Response(sitemap_xml, mimetype='application/xml')
