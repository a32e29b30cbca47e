import os
import logging
from flask import Flask, request, redirect, jsonify, send_from_directory
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)

PUBLIC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'public')


def create_app(test_config=None):
    app = Flask(__name__, static_folder=None)

    is_production = os.getenv('FLASK_ENV') == 'production'

    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['PUBLIC_DIR'] = os.getenv('PUBLIC_DIR', PUBLIC_DIR)
    app.config['AUDIT_LOG_FILE'] = os.getenv('AUDIT_LOG_FILE', 'logs/audit.log')

    if test_config:
        app.config.update(test_config)

    # Require SECRET_KEY — no insecure fallback
    if not app.config.get('SECRET_KEY'):
        raise RuntimeError('SECRET_KEY environment variable is required')

    database_url = app.config.get('SQLALCHEMY_DATABASE_URI')
    if not database_url:
        raise RuntimeError('DATABASE_URL environment variable is required')

    if not database_url.startswith('sqlite'):
        app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {
            'pool_pre_ping': True,
            'pool_recycle': 300,
        })

    # Request size limit (1 MB)
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024

    db.init_app(app)
    migrate.init_app(app, db)

    allowed_origins = os.getenv('ALLOWED_ORIGINS', '')
    if allowed_origins:
        origins_list = [o.strip() for o in allowed_origins.split(',') if o.strip()]
    elif is_production:
        raise RuntimeError(
            'ALLOWED_ORIGINS environment variable is required in production'
        )
    else:
        origins_list = [
            'http://localhost:*',
            'http://127.0.0.1:*',
        ]

    CORS(app, resources={r"/api/*": {"origins": origins_list}})

    if is_production:
        @app.before_request
        def enforce_https():
            if not request.is_secure and request.headers.get('X-Forwarded-Proto', 'http') != 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'no-referrer'
        if request.path.startswith('/api/'):
            response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
            response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate'
        if is_production or request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    from airaware.utils.audit_logger import setup_audit_logging
    setup_audit_logging(app)

    from airaware.models import (  # noqa: F401
        User, Location, Threshold, AirQualityReading, RiskAssessment, Recommendation,
    )

    from airaware.routes.auth import auth_bp
    from airaware.routes.user import user_bp
    from airaware.routes.location import location_bp
    from airaware.routes.thresholds import thresholds_bp
    from airaware.routes.dashboard import dashboard_bp
    from airaware.routes.air import air_bp
    from airaware.routes.pages import pages_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/user')
    app.register_blueprint(location_bp, url_prefix='/api/location')
    app.register_blueprint(thresholds_bp, url_prefix='/api/thresholds')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(air_bp, url_prefix='/api/air')
    app.register_blueprint(pages_bp)

    @app.route('/health')
    def health():
        return {'status': 'healthy'}, 200

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'message': 'Route not found'}), 404
        return send_from_directory(app.config['PUBLIC_DIR'], 'index.html')

    @app.errorhandler(500)
    def server_error(error):
        logger.error('Unhandled error on %s %s', request.method, request.path)
        db.session.rollback()
        return jsonify({'error': 'Server error'}), 500

    @app.cli.command('seed-recommendations')
    def seed_recommendations_command():
        """Insert the default recommendation catalogue."""
        from airaware.models.recommendation import Recommendation
        count = Recommendation.seed_defaults()
        print(f'Added {count} recommendation(s).')

    return app
