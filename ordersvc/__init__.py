"""Flask application factory."""
import os
import traceback

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ordersvc.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    from ordersvc.logging_setup import configure_logging
    configure_logging(app)

    # Sentry error tracking, production only
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    from ordersvc.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    session_factory = init_db(app)

    # Vocabularies are built once here and shared read-only by every request
    from ordersvc.middleware import SERVICES_KEY, load_request_context, release_request_context
    from ordersvc.services.coordinator import build_services
    app.extensions[SERVICES_KEY] = build_services(session_factory)

    app.before_request(load_request_context)
    app.teardown_request(release_request_context)

    # Error Handlers
    from ordersvc.exceptions import OrderServiceError

    @app.errorhandler(OrderServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            app.logger.error(f"OrderServiceError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"OrderServiceError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from ordersvc.blueprints.health import health_bp
    from ordersvc.blueprints.metrics import metrics_bp
    from ordersvc.blueprints.products import products_bp
    from ordersvc.blueprints.sales import sales_bp
    from ordersvc.blueprints.users import users_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(metrics_bp)
    app.register_blueprint(health_bp)

    from ordersvc.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
