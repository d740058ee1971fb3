# libraryhub/models/__init__.py

from libraryhub.models.user import User
from libraryhub.models.branch import Branch, Schedule, Seat, Locker
from libraryhub.models.student import Student
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.models.advance_payment import AdvancePayment

__all__ = [
    'User',
    'Branch',
    'Schedule',
    'Seat',
    'Locker',
    'Student',
    'StudentMembershipHistory',
    'AdvancePayment'
]
