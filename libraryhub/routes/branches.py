from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from libraryhub import db
from libraryhub.models.branch import Branch, Schedule, Seat, Locker
from libraryhub.services.validation_service import ValidationService
from libraryhub.services.error_service import (
    handle_errors, admin_required, admin_or_staff_required,
    ValidationError, NotFoundError, ConflictError
)

bp = Blueprint('branches', __name__)

def _get_branch(branch_id):
    branch = db.session.get(Branch, branch_id)
    if branch is None:
        raise NotFoundError('Branch')
    return branch

def _parse_unit_number(value, label):
    """Seat/locker numbers may arrive as JSON numbers or strings"""
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    if len(value.strip()) > 20:
        raise ValidationError(f"{label} is too long")
    return value.strip()

@bp.route('', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_branches():
    branches = Branch.query.order_by(Branch.name).all()
    return jsonify({'branches': [branch.to_dict() for branch in branches]})

@bp.route('', methods=['POST'])
@login_required
@admin_required
@handle_errors
def create_branch():
    data = request.get_json(silent=True) or {}
    is_valid, error = ValidationService.validate_name(data.get('name'), 'Branch name')
    if not is_valid:
        raise ValidationError(error)

    name = data['name'].strip()
    if Branch.query.filter(Branch.name.ilike(name)).first():
        raise ConflictError(f"Branch '{name}' already exists")

    branch = Branch(name=name, address=data.get('address'))
    db.session.add(branch)
    db.session.commit()

    current_app.logger.info(f"Branch {branch.id} ({branch.name}) created")
    return jsonify({'message': 'Branch created successfully', 'branch': branch.to_dict()}), 201

@bp.route('/<int:branch_id>/schedules', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_schedules(branch_id):
    branch = _get_branch(branch_id)

    schedules = Schedule.query.filter_by(branch_id=branch.id).order_by(Schedule.start_time, Schedule.id).all()
    return jsonify({'schedules': [schedule.to_dict() for schedule in schedules]})

@bp.route('/<int:branch_id>/schedules', methods=['POST'])
@login_required
@admin_required
@handle_errors
def create_schedule(branch_id):
    branch = _get_branch(branch_id)

    data = request.get_json(silent=True) or {}
    is_valid, error = ValidationService.validate_name(data.get('title'), 'Shift title')
    if not is_valid:
        raise ValidationError(error)

    is_valid, fee, error = ValidationService.parse_money(data.get('fee'), 'Fee')
    if not is_valid:
        raise ValidationError(error)

    schedule = Schedule(
        title=data['title'].strip(),
        branch_id=branch.id,
        start_time=data.get('start_time'),
        end_time=data.get('end_time'),
        fee=fee
    )
    db.session.add(schedule)
    db.session.commit()

    return jsonify({'message': 'Shift created successfully', 'schedule': schedule.to_dict()}), 201

@bp.route('/<int:branch_id>/seats', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_seats(branch_id):
    branch = _get_branch(branch_id)
    seats = Seat.query.filter_by(branch_id=branch.id).order_by(Seat.seat_number, Seat.id).all()
    return jsonify({'seats': [seat.to_dict() for seat in seats]})

@bp.route('/<int:branch_id>/seats', methods=['POST'])
@login_required
@admin_required
@handle_errors
def create_seat(branch_id):
    branch = _get_branch(branch_id)
    data = request.get_json(silent=True) or {}
    seat_number = _parse_unit_number(data.get('seat_number'), 'Seat number')

    if Seat.query.filter_by(branch_id=branch.id, seat_number=seat_number).first():
        raise ConflictError(f"Seat {seat_number} already exists in this branch")

    seat = Seat(seat_number=seat_number, branch_id=branch.id)
    db.session.add(seat)
    db.session.commit()

    current_app.logger.info(f"Seat {seat_number} added to branch {branch.id}")
    return jsonify({'message': 'Seat created successfully', 'seat': seat.to_dict()}), 201

@bp.route('/<int:branch_id>/lockers', methods=['GET'])
@login_required
@admin_or_staff_required
@handle_errors
def list_lockers(branch_id):
    branch = _get_branch(branch_id)
    lockers = Locker.query.filter_by(branch_id=branch.id).order_by(Locker.locker_number, Locker.id).all()
    return jsonify({'lockers': [locker.to_dict() for locker in lockers]})

@bp.route('/<int:branch_id>/lockers', methods=['POST'])
@login_required
@admin_required
@handle_errors
def create_locker(branch_id):
    branch = _get_branch(branch_id)
    data = request.get_json(silent=True) or {}
    locker_number = _parse_unit_number(data.get('locker_number'), 'Locker number')

    if Locker.query.filter_by(branch_id=branch.id, locker_number=locker_number).first():
        raise ConflictError(f"Locker {locker_number} already exists in this branch")

    locker = Locker(locker_number=locker_number, branch_id=branch.id)
    db.session.add(locker)
    db.session.commit()

    current_app.logger.info(f"Locker {locker_number} added to branch {branch.id}")
    return jsonify({'message': 'Locker created successfully', 'locker': locker.to_dict()}), 201
