from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from libraryhub.services.advance_payment_service import AdvancePaymentService
from libraryhub.services.error_service import handle_errors, admin_or_staff_required

bp = Blueprint('advance_payments', __name__)

@bp.route('', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_advance_payments():
    payments = AdvancePaymentService.list_payments(
        month=request.args.get('month'),
        branch_id=request.args.get('branchId')
    )
    return jsonify({'payments': [payment.to_listing_dict() for payment in payments]})

@bp.route('', methods=['POST'])
@login_required
@admin_or_staff_required
@handle_errors
def create_advance_payment():
    data = request.get_json(silent=True) or {}
    payment = AdvancePaymentService.create_payment(data)
    return jsonify({
        'message': 'Advance payment added successfully',
        'payment': payment.to_dict()
    }), 201

@bp.route('/student/<int:student_id>', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def student_advance_payments(student_id):
    payments = AdvancePaymentService.list_for_student(student_id)
    return jsonify({'payments': [payment.to_dict() for payment in payments]})

@bp.route('/<int:payment_id>', methods=['DELETE'])
@login_required
@admin_or_staff_required
@handle_errors
def delete_advance_payment(payment_id):
    AdvancePaymentService.delete_payment(payment_id)
    return jsonify({'message': 'Advance payment deleted successfully'})

@bp.route('/stats', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def advance_payment_stats():
    days = current_app.config.get('ADVANCE_STATS_DAYS', 30)
    return jsonify({'stats': AdvancePaymentService.get_stats(days)})
