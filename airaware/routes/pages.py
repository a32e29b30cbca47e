"""
Static page routes for the browser frontend.
"""
from flask import Blueprint, abort, current_app, request, send_from_directory

pages_bp = Blueprint('pages', __name__)

PAGES = {
    '/': 'index.html',
    '/dashboard': 'dashboard.html',
    '/threshold': 'threshold.html',
    '/location': 'location.html',
    '/login': 'login.html',
    '/signup': 'signup.html',
    '/profile': 'profile.html',
}


def _send_page(filename):
    return send_from_directory(current_app.config['PUBLIC_DIR'], filename)


def _page_view(filename):
    def view():
        return _send_page(filename)
    return view


for _path, _filename in PAGES.items():
    pages_bp.add_url_rule(_path, endpoint=_filename.rsplit('.', 1)[0], view_func=_page_view(_filename))


@pages_bp.route('/<path:filename>', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def asset(filename):
    """Scripts, styles and any other file under the public directory."""
    if request.method != 'GET' or request.path.startswith('/api/'):
        abort(404)
    return _send_page(filename)
