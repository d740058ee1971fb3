"""
Advance payments: money a student pays ahead of a billing period.
"""
import logging
from datetime import timedelta
from sqlalchemy import func, distinct
from sqlalchemy.orm import joinedload

from libraryhub import db
from libraryhub.models.student import Student
from libraryhub.models.advance_payment import AdvancePayment
from libraryhub.services.error_service import ValidationError, NotFoundError
from libraryhub.services.validation_service import ValidationService
from libraryhub.utils.helper import to_money, money_to_float
from libraryhub.utils.timezone_utils import get_local_date, month_date_bounds

logger = logging.getLogger(__name__)


class AdvancePaymentService:

    @staticmethod
    def list_payments(month=None, branch_id=None):
        """All advance payments, newest first, optionally by payment month and student branch"""
        query = AdvancePayment.query.join(Student).options(
            joinedload(AdvancePayment.student).joinedload(Student.branch)
        )

        if month:
            is_valid, period, error = ValidationService.parse_month(month)
            if not is_valid:
                raise ValidationError(error)
            start, end = month_date_bounds(*period)
            query = query.filter(AdvancePayment.payment_date >= start, AdvancePayment.payment_date < end)

        if branch_id not in (None, ''):
            is_valid, parsed_branch, error = ValidationService.parse_int(branch_id, 'branch ID')
            if not is_valid:
                raise ValidationError("Invalid branch ID")
            query = query.filter(Student.branch_id == parsed_branch)

        return query.order_by(AdvancePayment.created_at.desc(), AdvancePayment.id.desc()).all()

    @staticmethod
    def list_for_student(student_id):
        return AdvancePayment.query.filter_by(student_id=student_id).order_by(
            AdvancePayment.created_at.desc(), AdvancePayment.id.desc()
        ).all()

    @staticmethod
    def create_payment(data):
        """
        Record an advance payment

        Args:
            data: Request JSON with student_id, amount, optional payment_date and notes

        Returns:
            The new AdvancePayment
        """
        student_id = data.get('student_id')
        amount = data.get('amount')

        if not student_id or amount in (None, '', 0):
            raise ValidationError('Student ID and amount are required')

        is_valid, student_id, error = ValidationService.parse_int(student_id, 'student ID')
        if not is_valid:
            raise ValidationError('Invalid student ID')

        if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
            raise ValidationError('Invalid amount')
        is_valid, amount, error = ValidationService.parse_money(amount, 'Amount', required=True)
        if (is_valid and amount <= 0) or error == 'Amount cannot be negative':
            raise ValidationError('Amount must be greater than 0')
        if not is_valid:
            raise ValidationError(error)

        payment_date = get_local_date()
        if data.get('payment_date'):
            is_valid, payment_date, error = ValidationService.parse_date(data.get('payment_date'), 'Payment date')
            if not is_valid:
                raise ValidationError(error)

        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFoundError('Student')

        payment = AdvancePayment(
            student_id=student.id,
            amount=to_money(amount),
            payment_date=payment_date,
            notes=data.get('notes') or None
        )
        db.session.add(payment)
        db.session.commit()

        logger.info(f"Advance payment #{payment.id} of {payment.amount} recorded for student {student.id}")
        return payment

    @staticmethod
    def delete_payment(payment_id):
        payment = db.session.get(AdvancePayment, payment_id)
        if payment is None:
            raise NotFoundError('Advance payment')

        db.session.delete(payment)
        db.session.commit()
        logger.info(f"Deleted advance payment #{payment_id}")

    @staticmethod
    def get_stats(days=30):
        """Count, sum, average and distinct students over the last `days` days"""
        since = get_local_date() - timedelta(days=days)
        row = db.session.query(
            func.count(AdvancePayment.id),
            func.sum(AdvancePayment.amount),
            func.avg(AdvancePayment.amount),
            func.count(distinct(AdvancePayment.student_id))
        ).filter(AdvancePayment.payment_date >= since).one()

        return {
            'total_payments': int(row[0] or 0),
            'total_amount': money_to_float(row[1]),
            'average_amount': round(money_to_float(row[2]), 2),
            'unique_students': int(row[3] or 0)
        }

    @staticmethod
    def total_for_month(year, month, branch_id=None):
        start, end = month_date_bounds(year, month)
        query = db.session.query(func.coalesce(func.sum(AdvancePayment.amount), 0)).select_from(AdvancePayment).filter(
            AdvancePayment.payment_date >= start, AdvancePayment.payment_date < end
        )
        if branch_id is not None:
            query = query.join(Student, AdvancePayment.student_id == Student.id).filter(Student.branch_id == branch_id)
        return money_to_float(query.scalar())
