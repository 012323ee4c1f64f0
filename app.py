import os
import hmac
from functools import wraps
from flask import Flask, Blueprint, current_app, request, jsonify, session, send_from_directory
from werkzeug.exceptions import RequestEntityTooLarge
from config import Config
from logging_config import get_logger
from models import db, init_db
import gallery
from gallery import GalleryError

logger = get_logger(__name__)

bp = Blueprint('artwall', __name__)

def create_app(config_class=Config):
    app = Flask(__name__, static_folder=config_class.STATIC_FOLDER, static_url_path='/static')
    app.config.from_object(config_class)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    db.init_app(app)
    init_db(app)
    app.register_blueprint(bp)
    return app

# --- MIDDLEWARE & HELPERS ---
def check_admin_credentials(username, password):
    expected_user = current_app.config.get('ADMIN_USERNAME')
    expected_pass = current_app.config.get('ADMIN_PASSWORD')
    if not expected_user or not expected_pass:
        return False
    if not isinstance(username, str) or not isinstance(password, str):
        return False
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    pass_ok = hmac.compare_digest(password.encode(), expected_pass.encode())
    return user_ok and pass_ok

def admin_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        if not session.get('admin'):
            return jsonify({'success': False, 'message': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return wrapped

def request_data():
    """JSON object body if there is one, form fields otherwise."""
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return data
    return request.form

@bp.app_errorhandler(GalleryError)
def handle_gallery_error(e):
    return jsonify({'success': False, 'message': e.message}), e.status_code

@bp.app_errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    logger.info("Rejected request over MAX_CONTENT_LENGTH (%s bytes)", current_app.config['MAX_CONTENT_LENGTH'])
    return jsonify({'success': False, 'message': 'File too large'}), 413

@bp.app_errorhandler(500)
def handle_server_error(e):
    if not request.path.startswith('/api/'):
        return e
    logger.error("Unhandled error on %s %s", request.method, request.path,
                 exc_info=e.original_exception or e)
    return jsonify({'success': False, 'message': 'Server error'}), 500

# --- PAGES ---
@bp.route('/')
def index():
    return send_from_directory(current_app.static_folder, 'index.html')

@bp.route('/admin')
def admin():
    return send_from_directory(current_app.static_folder, 'admin.html')

@bp.route('/dashboard')
def dashboard():
    return send_from_directory(current_app.static_folder, 'dashboard.html')

@bp.route('/uploads/<path:filename>')
def serve_upload(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)

# --- PUBLIC API ---
@bp.route('/api/artworks')
def api_artworks():
    artworks = gallery.list_artworks()
    return jsonify({'success': True, 'artworks': [a.to_dict() for a in artworks]})

@bp.route('/api/artwork/<artwork_id>')
def api_artwork(artwork_id):
    artwork = gallery.get_artwork(artwork_id)
    return jsonify({'success': True, 'artwork': artwork.to_dict()})

@bp.route('/api/comment/<artwork_id>', methods=['POST'])
def api_comment(artwork_id):
    data = request_data()
    gallery.add_comment(artwork_id, data.get('email'), data.get('text'))
    return jsonify({'success': True})

@bp.route('/api/like/<artwork_id>', methods=['POST'])
def api_like(artwork_id):
    likes = gallery.like_artwork(artwork_id)
    return jsonify({'success': True, 'likes': likes})

# --- ADMIN AUTH ---
@bp.route('/api/login', methods=['POST'])
def login():
    data = request_data()
    if check_admin_credentials(data.get('username'), data.get('password')):
        session.clear()
        session.permanent = True
        session['admin'] = True
        logger.info("Admin logged in from %s", request.remote_addr)
        return jsonify({'success': True})
    logger.warning("Failed admin login from %s", request.remote_addr)
    return jsonify({'success': False, 'message': 'Invalid credentials'}), 401

@bp.route('/api/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'success': True})

@bp.route('/api/admin/status')
def admin_status():
    return jsonify({'logged_in': bool(session.get('admin'))})

# --- ADMIN API ---
@bp.route('/api/upload', methods=['POST'])
@admin_required
def api_upload():
    artwork = gallery.create_artwork(
        request.files.get('image'),
        title=request.form.get('title', ''),
        description=request.form.get('description', '')
    )
    return jsonify({'success': True, 'artwork': artwork.to_dict()})

@bp.route('/api/delete/<artwork_id>', methods=['POST'])
@admin_required
def api_delete(artwork_id):
    gallery.delete_artwork(artwork_id)
    return jsonify({'success': True})

if __name__ == '__main__':
    app = create_app()
    port = app.config['PORT']
    debug_mode = app.config['DEBUG_MODE']

    logger.info("Artwall started on port %s (debug=%s)", port, debug_mode)
    app.run(host='0.0.0.0', port=port, debug=debug_mode)
