"""
Student registration and membership periods

Every billing period writes the student snapshot and appends one ledger row
in the same transaction.
"""
import logging
from datetime import timedelta
from sqlalchemy import or_

from libraryhub import db
from libraryhub.models.branch import Branch, Schedule, Seat, Locker
from libraryhub.models.student import Student
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.services.error_service import ValidationError, NotFoundError
from libraryhub.services.validation_service import ValidationService
from libraryhub.utils.timezone_utils import get_local_time, get_local_date

logger = logging.getLogger(__name__)


class MembershipService:

    PROFILE_FIELDS = (
        'email', 'phone', 'address', 'father_name', 'registration_number', 'aadhar_number',
        'profile_image_url', 'aadhaar_front_url', 'aadhaar_back_url',
    )
    ASSIGNMENT_FIELDS = (
        ('branch_id', Branch, 'Branch'),
        ('shift_id', Schedule, 'Shift'),
        ('seat_id', Seat, 'Seat'),
        ('locker_id', Locker, 'Locker'),
    )

    @staticmethod
    def _resolve_assignments(data):
        """Validate branch/shift/seat/locker ids present in the payload"""
        resolved = {}
        for field, model, label in MembershipService.ASSIGNMENT_FIELDS:
            if field not in data:
                continue
            value = data.get(field)
            if value in (None, ''):
                resolved[field] = None
                continue
            is_valid, parsed, error = ValidationService.parse_int(value, f'{label} ID')
            if not is_valid:
                raise ValidationError(f"Invalid {label.lower()} ID")
            if db.session.get(model, parsed) is None:
                raise NotFoundError(label)
            resolved[field] = parsed
        return resolved

    @staticmethod
    def _validate_period(data):
        errors, cleaned = ValidationService.validate_membership_data(data)
        if errors:
            raise ValidationError("Validation failed", errors)
        return cleaned

    @staticmethod
    def _open_period(student, period, remark=None, changed_at=None):
        """Write a billing period onto the snapshot and append its ledger row"""
        amount_paid = period['cash'] + period['online']
        due_amount = period['total_fee'] - amount_paid

        student.membership_start = period['membership_start']
        student.membership_end = period['membership_end']
        student.total_fee = period['total_fee']
        student.cash = period['cash']
        student.online = period['online']
        student.amount_paid = amount_paid
        student.due_amount = due_amount
        student.security_money = period['security_money']
        student.remark = remark
        student.refresh_status()

        history = StudentMembershipHistory(
            student=student,
            **student.identity_snapshot(),
            total_fee=student.total_fee,
            amount_paid=amount_paid,
            due_amount=due_amount,
            cash=student.cash,
            online=student.online,
            security_money=student.security_money,
            remark=remark,
            changed_at=changed_at or get_local_time(),
            prev_due_paid=False
        )
        db.session.add(history)
        return history

    @staticmethod
    def register_student(data, changed_at=None):
        """
        Create a student together with the first membership period

        Args:
            data: Request JSON (profile, assignment and fee fields)
            changed_at: Billing time of the first ledger row (defaults to now)

        Returns:
            The new Student
        """
        is_valid, error = ValidationService.validate_name(data.get('name'))
        if not is_valid:
            raise ValidationError("Validation failed", {'name': [error]})

        period = MembershipService._validate_period(data)
        assignments = MembershipService._resolve_assignments(data)

        student = Student(name=data['name'].strip(), **assignments)
        for field in MembershipService.PROFILE_FIELDS:
            if data.get(field):
                setattr(student, field, data[field])

        db.session.add(student)
        MembershipService._open_period(student, period, data.get('remark'), changed_at)
        db.session.commit()

        logger.info(f"Registered student {student.id} ({student.name})")
        return student

    @staticmethod
    def renew_membership(student_id, data, changed_at=None):
        """
        Start a new billing period for an existing student

        Returns:
            Tuple of (student, new ledger row)
        """
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFoundError('Student')

        period = MembershipService._validate_period(data)
        for field, value in MembershipService._resolve_assignments(data).items():
            setattr(student, field, value)

        history = MembershipService._open_period(student, period, data.get('remark'), changed_at)
        db.session.commit()

        logger.info(f"Renewed membership of student {student.id} until {student.membership_end}")
        return student, history

    @staticmethod
    def get_student(student_id):
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFoundError('Student')
        return student

    @staticmethod
    def refresh_statuses(students, today=None):
        """Bring stored statuses in line with membership_end"""
        today = today or get_local_date()
        changed = [student for student in students if student.refresh_status(today)]
        if changed:
            db.session.commit()
        return len(changed)

    @staticmethod
    def _branch_filter(query, branch_id):
        if branch_id in (None, ''):
            return query
        is_valid, parsed, error = ValidationService.parse_int(branch_id, 'branch ID')
        if not is_valid:
            raise ValidationError("Invalid branch ID")
        return query.filter(Student.branch_id == parsed)

    @staticmethod
    def list_students(branch_id=None, status=None, search=None):
        query = MembershipService._branch_filter(Student.query, branch_id)

        if search and search.strip():
            like = f"%{search.strip()}%"
            query = query.filter(or_(Student.name.ilike(like), Student.phone.ilike(like),
                                     Student.registration_number.ilike(like)))

        students = query.order_by(Student.name).all()
        MembershipService.refresh_statuses(students)

        if status:
            is_valid, error = ValidationService.validate_choice(status, ['active', 'expired'], 'status')
            if not is_valid:
                raise ValidationError(error)
            students = [student for student in students if student.status == status]
        return students

    @staticmethod
    def expiring_soon(branch_id=None, days=7, today=None):
        """Active memberships ending within the next `days` days, soonest first"""
        today = today or get_local_date()
        query = MembershipService._branch_filter(Student.query, branch_id)
        return query.filter(
            Student.membership_end >= today,
            Student.membership_end <= today + timedelta(days=days)
        ).order_by(Student.membership_end, Student.name).all()

    @staticmethod
    def counts(branch_id=None, today=None):
        today = today or get_local_date()
        query = MembershipService._branch_filter(Student.query, branch_id)
        total = query.count()
        active = query.filter(Student.membership_end >= today).count()
        return {'total': total, 'active': active, 'expired': total - active}

    @staticmethod
    def delete_student(student_id):
        """
        Delete a student and their advance payments

        Ledger rows are kept for the collection reports; they lose the link
        to the student.
        """
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFoundError('Student')

        StudentMembershipHistory.query.filter_by(student_id=student.id).update({'student_id': None})
        db.session.delete(student)
        db.session.commit()
        logger.info(f"Deleted student {student_id}")
