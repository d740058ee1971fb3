from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.services.membership_service import MembershipService
from libraryhub.services.advance_payment_service import AdvancePaymentService
from libraryhub.services.validation_service import ValidationService
from libraryhub.services.error_service import handle_errors, admin_or_staff_required, ValidationError

bp = Blueprint('students', __name__)

@bp.route('', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_students():
    students = MembershipService.list_students(
        branch_id=request.args.get('branchId'),
        status=request.args.get('status'),
        search=request.args.get('search')
    )
    return jsonify({'students': [student.to_dict() for student in students]})

@bp.route('/expiring-soon', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def expiring_soon():
    days = current_app.config.get('EXPIRING_SOON_DAYS', 7)
    if request.args.get('days'):
        is_valid, days, error = ValidationService.parse_int(request.args.get('days'), 'days')
        if not is_valid or days < 0:
            raise ValidationError('Invalid days')
    students = MembershipService.expiring_soon(request.args.get('branchId'), days)
    return jsonify({
        'days': days,
        'students': [student.to_dict() for student in students]
    })

@bp.route('/counts', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def student_counts():
    return jsonify(MembershipService.counts(request.args.get('branchId')))

@bp.route('/<int:student_id>', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def get_student(student_id):
    """Student snapshot with billing history (newest first) and advance payments"""
    student = MembershipService.get_student(student_id)
    history = student.history.order_by(
        StudentMembershipHistory.changed_at.desc(), StudentMembershipHistory.id.desc()
    ).all()
    payments = AdvancePaymentService.list_for_student(student.id)

    data = student.to_dict()
    data['history'] = [row.to_collection_dict() for row in history]
    data['advance_payments'] = [payment.to_dict() for payment in payments]
    return jsonify({'student': data})

@bp.route('', methods=['POST'])
@login_required
@admin_or_staff_required
@handle_errors
def create_student():
    data = request.get_json(silent=True) or {}
    student = MembershipService.register_student(data)
    return jsonify({
        'message': 'Student added successfully',
        'student': student.to_dict()
    }), 201

@bp.route('/<int:student_id>/renew', methods=['POST'])
@login_required
@admin_or_staff_required
@handle_errors
def renew_membership(student_id):
    data = request.get_json(silent=True) or {}
    student, history = MembershipService.renew_membership(student_id, data)
    return jsonify({
        'message': 'Membership renewed successfully',
        'student': student.to_dict(),
        'collection': history.to_collection_dict()
    })

@bp.route('/<int:student_id>', methods=['DELETE'])
@login_required
@admin_or_staff_required
@handle_errors
def delete_student(student_id):
    MembershipService.delete_student(student_id)
    return jsonify({'message': 'Student deleted successfully'})
