from datetime import datetime
from decimal import Decimal

import pytest

from libraryhub import db
from libraryhub.models.student import Student
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.services.error_service import (
    ValidationError, NotFoundError, PaymentExceedsDueError
)
from libraryhub.services.payment_service import PaymentReconciliationService

SEPTEMBER = datetime(2026, 9, 10, 18, 30)
OCTOBER = datetime(2026, 10, 5, 11, 0)
LATER_IN_OCTOBER = datetime(2026, 10, 20, 16, 45)


def _reload(student_id, history_id):
    db.session.expire_all()
    return db.session.get(Student, student_id), db.session.get(StudentMembershipHistory, history_id)


class TestCurrentMonthPayment:

    def test_cash_payment_updates_row_and_snapshot(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)

        result = PaymentReconciliationService.apply_payment(history_id, 200, 'cash', now=LATER_IN_OCTOBER)

        student, history = _reload(student_id, history_id)
        assert result.id == history_id
        assert history.cash == Decimal('500.00')
        assert history.online == Decimal('200.00')
        assert history.amount_paid == Decimal('700.00')
        assert history.due_amount == Decimal('300.00')
        assert history.prev_due_paid is False

        assert student.cash == Decimal('500.00')
        assert student.amount_paid == Decimal('700.00')
        assert student.due_amount == Decimal('300.00')
        assert StudentMembershipHistory.query.count() == 1

    def test_online_payment_settles_due_exactly(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)

        PaymentReconciliationService.apply_payment(history_id, 500, 'online', now=LATER_IN_OCTOBER)

        student, history = _reload(student_id, history_id)
        assert history.online == Decimal('700.00')
        assert history.due_amount == Decimal('0.00')
        assert student.due_amount == Decimal('0.00')
        assert student.amount_paid == history.total_fee

    def test_fractional_amount(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)

        PaymentReconciliationService.apply_payment(history_id, 99.5, 'cash', now=LATER_IN_OCTOBER)

        student, history = _reload(student_id, history_id)
        assert history.due_amount == Decimal('400.50')
        assert student.cash == Decimal('399.50')

    def test_repeated_payments_keep_row_consistent(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)

        for amount, method in ((100, 'cash'), (150, 'online'), (50, 'cash')):
            PaymentReconciliationService.apply_payment(history_id, amount, method, now=LATER_IN_OCTOBER)

        student, history = _reload(student_id, history_id)
        assert history.amount_paid == history.cash + history.online
        assert history.due_amount == history.total_fee - history.amount_paid
        assert history.due_amount == Decimal('200.00')
        assert student.amount_paid == history.amount_paid
        assert student.due_amount == history.due_amount

    def test_payment_above_due_is_rejected_without_changes(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)

        with pytest.raises(PaymentExceedsDueError) as excinfo:
            PaymentReconciliationService.apply_payment(history_id, 600, 'cash', now=LATER_IN_OCTOBER)
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == 'Payment exceeds due amount'

        student, history = _reload(student_id, history_id)
        assert history.cash == Decimal('300.00')
        assert history.due_amount == Decimal('500.00')
        assert student.amount_paid == Decimal('500.00')

    def test_fully_paid_row_rejects_any_payment(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER, cash=1000, online=0)

        with pytest.raises(PaymentExceedsDueError):
            PaymentReconciliationService.apply_payment(history_id, 1, 'cash', now=LATER_IN_OCTOBER)


class TestPreviousMonthPayment:

    def test_creates_settlement_row_in_current_month(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)

        settlement = PaymentReconciliationService.apply_payment(history_id, 200, 'online', now=OCTOBER)

        student, history = _reload(student_id, history_id)
        settlement = db.session.get(StudentMembershipHistory, settlement.id)

        # The old period only loses due
        assert history.due_amount == Decimal('300.00')
        assert history.cash == Decimal('300.00')
        assert history.online == Decimal('200.00')
        assert history.amount_paid == Decimal('500.00')

        assert settlement.id != history_id
        assert settlement.student_id == student_id
        assert settlement.name == history.name
        assert settlement.branch_id == history.branch_id
        assert settlement.total_fee == Decimal('0.00')
        assert settlement.amount_paid == Decimal('200.00')
        assert settlement.due_amount == Decimal('0.00')
        assert settlement.cash == Decimal('0.00')
        assert settlement.online == Decimal('200.00')
        assert settlement.prev_due_paid is True
        assert settlement.source_month == '2026-09'
        assert settlement.remark == 'Previous month due paid'
        assert settlement.changed_at == OCTOBER

        assert student.online == Decimal('400.00')
        assert student.cash == Decimal('300.00')
        assert student.amount_paid == Decimal('700.00')
        assert student.due_amount == Decimal('300.00')

    def test_settlements_add_up_to_paid_due(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)

        PaymentReconciliationService.apply_payment(history_id, 125, 'cash', now=OCTOBER)
        PaymentReconciliationService.apply_payment(history_id, 75, 'online', now=LATER_IN_OCTOBER)

        student, history = _reload(student_id, history_id)
        settlements = StudentMembershipHistory.query.filter_by(prev_due_paid=True).all()

        assert len(settlements) == 2
        assert sum(row.amount_paid for row in settlements) == Decimal('200.00')
        assert history.due_amount == Decimal('300.00')
        assert student.due_amount == Decimal('300.00')
        assert student.amount_paid == Decimal('700.00')

    def test_year_boundary_counts_as_previous_month(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=datetime(2025, 12, 31, 23, 59))

        settlement = PaymentReconciliationService.apply_payment(
            history_id, 100, 'cash', now=datetime(2026, 1, 1, 0, 5)
        )

        assert settlement.prev_due_paid is True
        assert settlement.source_month == '2025-12'

    def test_same_month_of_another_year_is_previous(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=datetime(2025, 10, 5))

        settlement = PaymentReconciliationService.apply_payment(history_id, 100, 'cash', now=OCTOBER)

        assert settlement.id != history_id
        assert settlement.source_month == '2025-10'

    def test_payment_above_old_due_is_rejected(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)

        with pytest.raises(PaymentExceedsDueError):
            PaymentReconciliationService.apply_payment(history_id, 500.01, 'cash', now=OCTOBER)

        student, history = _reload(student_id, history_id)
        assert history.due_amount == Decimal('500.00')
        assert student.amount_paid == Decimal('500.00')
        assert StudentMembershipHistory.query.count() == 1

    def test_snapshot_due_never_goes_negative(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)
        student = db.session.get(Student, student_id)
        student.due_amount = 50
        db.session.commit()

        PaymentReconciliationService.apply_payment(history_id, 200, 'cash', now=OCTOBER)

        student, history = _reload(student_id, history_id)
        assert student.due_amount == Decimal('0.00')


class TestPaymentInput:

    @pytest.mark.parametrize('amount', [0, -10, 'abc', '100', None, True, float('nan'), float('inf'), 0.004, 1e30, 1e12])
    def test_invalid_amount(self, app_ctx, make_student, amount):
        student_id, history_id = make_student(changed_at=OCTOBER)

        with pytest.raises(ValidationError) as excinfo:
            PaymentReconciliationService.apply_payment(history_id, amount, 'cash', now=LATER_IN_OCTOBER)
        assert excinfo.value.message == 'Invalid payment_amount'

    @pytest.mark.parametrize('method', ['card', '', None, 'CASH'])
    def test_invalid_method(self, app_ctx, make_student, method):
        student_id, history_id = make_student(changed_at=OCTOBER)

        with pytest.raises(ValidationError) as excinfo:
            PaymentReconciliationService.apply_payment(history_id, 100, method, now=LATER_IN_OCTOBER)
        assert excinfo.value.message == 'Invalid payment_method'

    def test_unknown_history_row(self, app_ctx):
        with pytest.raises(NotFoundError) as excinfo:
            PaymentReconciliationService.apply_payment(4242, 100, 'cash')
        assert excinfo.value.message == 'History record not found'

    def test_history_without_student(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=OCTOBER)
        history = db.session.get(StudentMembershipHistory, history_id)
        history.student_id = None
        db.session.commit()

        with pytest.raises(NotFoundError) as excinfo:
            PaymentReconciliationService.apply_payment(history_id, 100, 'cash', now=LATER_IN_OCTOBER)
        assert excinfo.value.message == 'Student not found for this history record'

    def test_sub_cent_amount_leaves_no_settlement_row(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)

        with pytest.raises(ValidationError):
            PaymentReconciliationService.apply_payment(history_id, 0.004, 'cash', now=OCTOBER)

        assert StudentMembershipHistory.query.filter_by(prev_due_paid=True).count() == 0
        student, history = _reload(student_id, history_id)
        assert history.due_amount == Decimal('500.00')

    def test_amount_rounding_up_to_a_cent_is_accepted(self, app_ctx, make_student):
        student_id, history_id = make_student(changed_at=SEPTEMBER)

        settlement = PaymentReconciliationService.apply_payment(history_id, 0.005, 'cash', now=OCTOBER)

        assert settlement.amount_paid == Decimal('0.01')
