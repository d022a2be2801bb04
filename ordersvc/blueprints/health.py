"""Liveness and readiness checks."""
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ordersvc.database import get_session_factory

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health():
    """Report whether the database answers a trivial query."""
    try:
        with get_session_factory()() as session:
            session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        current_app.logger.error(f"[HEALTH] Database check failed: {e}")
        return jsonify({'status': 'error', 'database': 'unavailable'}), 503

    return jsonify({'status': 'ok', 'database': 'ok'})
