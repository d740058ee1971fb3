# Health check endpoint for production monitoring

from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from libraryhub import db
from libraryhub.models.student import Student
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.utils.timezone_utils import get_local_time

bp = Blueprint('health', __name__)

@bp.route('/health')
def health_check():
    """Health check with database and ledger counts"""

    health_status = {
        'status': 'healthy',
        'timestamp': get_local_time().isoformat(),
        'timezone': current_app.config.get('TIMEZONE'),
        'checks': {}
    }

    # Database connectivity check
    try:
        db.session.execute(text('SELECT 1'))
        health_status['checks']['database'] = 'healthy'
    except SQLAlchemyError as e:
        db.session.rollback()
        health_status['checks']['database'] = f'unhealthy: {str(e)}'
        health_status['status'] = 'unhealthy'

    if health_status['status'] == 'healthy':
        try:
            health_status['checks']['students'] = f'healthy ({Student.query.count()} students)'
            health_status['checks']['ledger'] = f'healthy ({StudentMembershipHistory.query.count()} records)'
        except SQLAlchemyError as e:
            db.session.rollback()
            health_status['checks']['ledger'] = f'unhealthy: {str(e)}'
            health_status['status'] = 'degraded'

    return jsonify(health_status), 200 if health_status['status'] == 'healthy' else 503

@bp.route('/health/simple')
def simple_health_check():
    """Liveness probe for load balancers"""
    return jsonify({'status': 'ok'}), 200
