from flask import Blueprint, request, jsonify
from flask_login import login_required
from libraryhub.services.collection_service import CollectionService
from libraryhub.services.payment_service import PaymentReconciliationService
from libraryhub.services.validation_service import ValidationService
from libraryhub.services.error_service import (
    handle_errors, admin_required, admin_or_staff_required, ValidationError
)

bp = Blueprint('collections', __name__)

@bp.route('', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_collections():
    """Ledger rows filtered by ?month=YYYY-MM and ?branchId="""
    rows = CollectionService.list_collections(
        month=request.args.get('month'),
        branch_id=request.args.get('branchId')
    )
    return jsonify({'collections': [row.to_collection_dict() for row in rows]})

@bp.route('/previous-due-paid', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def previous_due_paid():
    """Dues of earlier months settled in the given month"""
    summary = CollectionService.previous_due_paid(
        month=request.args.get('month'),
        branch_id=request.args.get('branchId')
    )
    return jsonify(summary)

@bp.route('/summary', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def collection_summary():
    summary = CollectionService.summarize(
        month=request.args.get('month'),
        branch_id=request.args.get('branchId')
    )
    return jsonify(summary)

@bp.route('/<history_id>', methods=['PUT'])
@login_required
@admin_required
@handle_errors
def update_payment(history_id):
    """Apply a due payment to a ledger row"""
    is_valid, history_id, error = ValidationService.parse_int(history_id, 'history ID')
    if not is_valid:
        raise ValidationError('Invalid history ID')

    data = request.get_json(silent=True) or {}
    updated = PaymentReconciliationService.apply_payment(
        history_id,
        data.get('payment_amount'),
        data.get('payment_method')
    )

    return jsonify({
        'message': 'Payment updated successfully',
        'collection': updated.to_collection_dict()
    })

@bp.route('/<history_id>', methods=['DELETE'])
@login_required
@admin_or_staff_required
@handle_errors
def delete_collection(history_id):
    CollectionService.delete_collection(history_id)
    return jsonify({'message': 'Collection record deleted successfully'})
