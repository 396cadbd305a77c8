from flask import Flask, jsonify
from config import get_config
from models import InvalidEventError
from services.session_service import SessionRegistry, SessionStateError
import logging
from logging.handlers import RotatingFileHandler
import os

def create_app(config_name=None):
    app = Flask(__name__)

    # Get configuration based on environment or passed parameter
    if config_name:
        from config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    # Keep keys in the order the engine builds them (time-of-day, weekday order)
    app.json.sort_keys = False

    # Running intervention sessions live for the lifetime of the process
    app.extensions['session_registry'] = SessionRegistry(
        app.config['MAX_RUNNING_SESSIONS'],
        max_age_seconds=app.config['MAX_SESSION_AGE'],
    )

    # Setup logging
    if not app.debug and not app.testing:
        if app.config['LOG_TO_STDOUT']:
            handler = logging.StreamHandler()
        else:
            log_dir = os.path.dirname(app.config['LOG_FILE'])
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
            handler = RotatingFileHandler(app.config['LOG_FILE'], maxBytes=10240, backupCount=10)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
        handler.setLevel(app.config['LOG_LEVEL'])
        app.logger.addHandler(handler)
        app.logger.setLevel(app.config['LOG_LEVEL'])
        logging.getLogger('services').addHandler(handler)
        logging.getLogger('services').setLevel(app.config['LOG_LEVEL'])
        app.logger.info('Craving Insights startup')

    # Register blueprints
    from routes.analytics import analytics_bp
    from routes.predictions import predictions_bp
    from routes.sessions import sessions_bp

    app.register_blueprint(analytics_bp, url_prefix='/api')
    app.register_blueprint(predictions_bp, url_prefix='/predictions')
    app.register_blueprint(sessions_bp, url_prefix='/sessions')

    @app.route('/health')
    def health():
        return jsonify(status='ok')

    # Error handlers
    @app.errorhandler(InvalidEventError)
    def invalid_event_error(error):
        return jsonify(error=str(error), field=error.field), 400

    @app.errorhandler(SessionStateError)
    def session_state_error(error):
        return jsonify(error=str(error)), 409

    @app.errorhandler(400)
    def bad_request_error(error):
        return jsonify(error='Bad request.'), 400

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify(error='Not found.'), 404

    @app.errorhandler(413)
    def too_large_error(error):
        return jsonify(error='Request body too large.'), 413

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'Internal error: {error}')
        return jsonify(error='Internal server error.'), 500

    return app
