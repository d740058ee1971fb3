from flask import Blueprint, request, jsonify
from flask_login import login_required
from libraryhub.services.collection_service import CollectionService
from libraryhub.services.membership_service import MembershipService
from libraryhub.services.advance_payment_service import AdvancePaymentService
from libraryhub.services.error_service import handle_errors, admin_or_staff_required
from libraryhub.utils.timezone_utils import get_local_time, month_key

bp = Blueprint('dashboard', __name__)

@bp.route('/stats', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def dashboard_stats():
    """Headline numbers for one month (defaults to the current local month)"""
    month = request.args.get('month') or month_key(get_local_time())
    branch_arg = request.args.get('branchId')

    period, branch_id = CollectionService.parse_filters(month, branch_arg, month_required=True)
    collections = CollectionService.summarize(month, branch_arg)

    return jsonify({
        'month': month,
        'branchId': branch_id,
        'students': MembershipService.counts(branch_id),
        'collections': collections,
        'advancePayments': AdvancePaymentService.total_for_month(*period, branch_id=branch_id)
    })
