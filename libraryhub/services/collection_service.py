"""
Collection queries over the membership ledger: monthly listings,
previous-due settlements, summaries and record deletion.
"""
import logging
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from libraryhub import db
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.services.error_service import ValidationError, NotFoundError
from libraryhub.services.validation_service import ValidationService
from libraryhub.utils.helper import money_to_float
from libraryhub.utils.timezone_utils import month_bounds

logger = logging.getLogger(__name__)


class CollectionService:
    """Read/delete operations on collection (ledger) records"""

    @staticmethod
    def parse_filters(month=None, branch_id=None, month_required=False):
        """
        Validate the month/branch query filters

        Returns:
            Tuple of ((year, month) or None, branch id or None)
        """
        period = None
        if month or month_required:
            is_valid, period, error = ValidationService.parse_month(month)
            if not is_valid:
                raise ValidationError(error)

        parsed_branch = None
        if branch_id not in (None, ''):
            is_valid, parsed_branch, error = ValidationService.parse_int(branch_id, 'branch ID')
            if not is_valid:
                raise ValidationError("Invalid branch ID")

        return period, parsed_branch

    @staticmethod
    def _filtered_query(period=None, branch_id=None):
        query = StudentMembershipHistory.query
        if period:
            start, end = month_bounds(*period)
            query = query.filter(
                StudentMembershipHistory.changed_at >= start,
                StudentMembershipHistory.changed_at < end
            )
        if branch_id is not None:
            query = query.filter(StudentMembershipHistory.branch_id == branch_id)
        return query

    @staticmethod
    def list_collections(month=None, branch_id=None):
        """Ledger rows for a month and/or branch, ordered by student name"""
        period, branch_id = CollectionService.parse_filters(month, branch_id)
        return CollectionService._filtered_query(period, branch_id).options(
            joinedload(StudentMembershipHistory.branch),
            joinedload(StudentMembershipHistory.shift),
            joinedload(StudentMembershipHistory.student)
        ).order_by(StudentMembershipHistory.name, StudentMembershipHistory.id).all()

    @staticmethod
    def previous_due_paid(month, branch_id=None):
        """
        Settlements of earlier dues recorded in the given month

        Returns:
            Dictionary with the month, the total amount and the records
        """
        period, branch_id = CollectionService.parse_filters(month, branch_id, month_required=True)
        rows = CollectionService._filtered_query(period, branch_id).filter(
            StudentMembershipHistory.prev_due_paid.is_(True)
        ).options(
            joinedload(StudentMembershipHistory.branch)
        ).order_by(StudentMembershipHistory.changed_at.desc(), StudentMembershipHistory.id.desc()).all()

        total = sum(money_to_float(row.amount_paid) for row in rows)
        return {
            'month': month,
            'totalPreviousDuePaid': total,
            'records': [row.to_previous_due_dict() for row in rows]
        }

    @staticmethod
    def summarize(month=None, branch_id=None):
        """Aggregate totals over the filtered ledger rows"""
        period, branch_id = CollectionService.parse_filters(month, branch_id)
        query = CollectionService._filtered_query(period, branch_id)

        H = StudentMembershipHistory
        totals = query.with_entities(
            func.count(H.id),
            func.coalesce(func.sum(H.amount_paid), 0),
            func.coalesce(func.sum(H.due_amount), 0),
            func.coalesce(func.sum(H.cash), 0),
            func.coalesce(func.sum(H.online), 0),
            func.coalesce(func.sum(H.security_money), 0)
        ).one()

        previous_due = query.filter(H.prev_due_paid.is_(True)).with_entities(
            func.coalesce(func.sum(H.amount_paid), 0)
        ).scalar()

        return {
            'totalStudents': int(totals[0] or 0),
            'totalCollected': money_to_float(totals[1]),
            'totalDue': money_to_float(totals[2]),
            'totalCash': money_to_float(totals[3]),
            'totalOnline': money_to_float(totals[4]),
            'totalSecurityMoney': money_to_float(totals[5]),
            'previousDuePaid': money_to_float(previous_due)
        }

    @staticmethod
    def delete_collection(history_id):
        """Delete a ledger row; the student snapshot is left untouched"""
        is_valid, history_id, error = ValidationService.parse_int(history_id, 'history ID')
        if not is_valid:
            raise ValidationError("Invalid history ID")

        history = db.session.get(StudentMembershipHistory, history_id)
        if history is None:
            raise NotFoundError(message='Collection record not found')

        db.session.delete(history)
        db.session.commit()
        logger.info(f"Deleted collection record {history_id}")
