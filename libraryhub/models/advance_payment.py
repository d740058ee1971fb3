from libraryhub import db
from libraryhub.utils.helper import money_to_float, format_date, format_datetime
from libraryhub.utils.timezone_utils import get_local_time, get_local_date

class AdvancePayment(db.Model):
    """Money received ahead of a billing period; kept apart from the membership ledger"""
    __tablename__ = 'advance_payments'
    __table_args__ = (db.CheckConstraint('amount > 0', name='ck_advance_payments_amount_positive'),)

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, nullable=False, default=get_local_date, index=True)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=get_local_time, index=True)
    updated_at = db.Column(db.DateTime, default=get_local_time, onupdate=get_local_time)

    def to_dict(self):
        return {
            'id': self.id,
            'student_id': self.student_id,
            'amount': money_to_float(self.amount),
            'payment_date': format_date(self.payment_date),
            'notes': self.notes,
            'created_at': format_datetime(self.created_at)
        }

    def to_listing_dict(self):
        """Listing row joined with the student and branch"""
        data = self.to_dict()
        student = self.student
        data.update({
            'student_name': student.name if student else None,
            'student_phone': student.phone if student else None,
            'student_registration_number': student.registration_number if student else None,
            'membership_end': format_date(student.membership_end) if student else None,
            'branch_name': student.branch.name if student and student.branch else None,
            'branch_id': student.branch_id if student else None
        })
        return data

    def __repr__(self):
        return f'<AdvancePayment {self.student_id} {self.amount}>'
