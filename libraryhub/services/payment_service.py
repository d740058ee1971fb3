"""
Payment reconciliation for membership collections

Applies a cash/online payment against the due of a ledger row. A row from the
current month absorbs the payment directly; a row from an earlier month only
has its due reduced and the money is booked on a new current-month row flagged
prev_due_paid, so monthly collection totals show when money actually came in.
The student snapshot is kept in step in the same transaction.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError

from libraryhub import db
from libraryhub.models.student import Student
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.services.error_service import (
    ValidationError, NotFoundError, PaymentExceedsDueError, APIError
)
from libraryhub.services.validation_service import ValidationService
from libraryhub.utils.helper import to_money, ZERO
from libraryhub.utils.timezone_utils import get_local_time, is_same_month, month_key

logger = logging.getLogger(__name__)


class PaymentReconciliationService:
    """Applies due payments to the membership ledger and the student snapshot"""

    @staticmethod
    def validate_payment(payment_amount, payment_method):
        is_valid, error = ValidationService.validate_payment_amount(payment_amount)
        if not is_valid:
            raise ValidationError(error)

        is_valid, error = ValidationService.validate_choice(
            payment_method, ValidationService.PAYMENT_METHODS, 'payment_method'
        )
        if not is_valid:
            raise ValidationError("Invalid payment_method")

    @staticmethod
    def apply_payment(history_id, payment_amount, payment_method, now=None):
        """
        Apply a payment to a membership history row

        Args:
            history_id: Ledger row the payment is made against
            payment_amount: Amount paid, a positive number
            payment_method: 'cash' or 'online'
            now: Local time of the payment (defaults to the configured timezone's now)

        Returns:
            The resulting ledger row: the updated row for a current-month
            payment, the newly inserted row for a previous-month payment

        Raises:
            ValidationError: bad amount or method
            PaymentExceedsDueError: payment larger than the outstanding due
            NotFoundError: unknown history row or student
        """
        PaymentReconciliationService.validate_payment(payment_amount, payment_method)
        amount = to_money(payment_amount)
        now = now or get_local_time()

        try:
            history = StudentMembershipHistory.query.filter_by(id=history_id).with_for_update().first()
            if history is None:
                raise NotFoundError(message='History record not found')

            student = None
            if history.student_id is not None:
                student = Student.query.filter_by(id=history.student_id).with_for_update().first()
            if student is None:
                raise NotFoundError(message='Student not found for this history record')

            if history.changed_at and is_same_month(history.changed_at, now):
                result = PaymentReconciliationService._apply_current_month(history, student, amount, payment_method)
            else:
                result = PaymentReconciliationService._apply_previous_month(history, student, amount, payment_method, now)

            db.session.commit()
        except APIError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating payment for history {history_id}: {e}")
            raise

        logger.info(
            f"Applied {payment_method} payment of {amount} to history {history_id} "
            f"(student {student.id}) -> ledger row {result.id}"
        )
        return result

    @staticmethod
    def _apply_current_month(history, student, amount, payment_method):
        cash = to_money(history.cash)
        online = to_money(history.online)
        total_fee = to_money(history.total_fee)
        current_due = to_money(history.due_amount)

        if payment_method == 'cash':
            cash += amount
        else:
            online += amount

        amount_paid = cash + online
        due_amount = total_fee - amount_paid
        if amount > current_due or due_amount < ZERO:
            raise PaymentExceedsDueError(current_due)

        history.cash = cash
        history.online = online
        history.amount_paid = amount_paid
        history.due_amount = due_amount

        # Snapshot mirrors the current billing period
        student.cash = cash
        student.online = online
        student.amount_paid = amount_paid
        student.due_amount = due_amount

        return history

    @staticmethod
    def _apply_previous_month(history, student, amount, payment_method, now):
        current_due = to_money(history.due_amount)
        remaining_due = current_due - amount
        if remaining_due < ZERO:
            raise PaymentExceedsDueError(current_due)

        # The old period keeps its collected figures; only its due shrinks
        history.due_amount = remaining_due

        inc_cash = amount if payment_method == 'cash' else ZERO
        inc_online = amount if payment_method == 'online' else ZERO

        student.cash = to_money(student.cash) + inc_cash
        student.online = to_money(student.online) + inc_online
        student.amount_paid = to_money(student.amount_paid) + amount
        student.due_amount = max(to_money(student.due_amount) - amount, ZERO)

        settlement = StudentMembershipHistory(
            **history.carry_over(),
            total_fee=ZERO,
            amount_paid=amount,
            due_amount=ZERO,
            cash=inc_cash,
            online=inc_online,
            security_money=ZERO,
            remark=StudentMembershipHistory.PREVIOUS_DUE_REMARK,
            changed_at=now,
            prev_due_paid=True,
            source_month=month_key(history.changed_at)
        )
        db.session.add(settlement)
        db.session.flush()
        return settlement
