from libraryhub import db
from libraryhub.utils.helper import money_to_float
from libraryhub.utils.timezone_utils import get_local_time, month_key

class StudentMembershipHistory(db.Model):
    """
    Append-only ledger: one row per billing event of a student.

    Rows with prev_due_paid set are synthetic current-month entries recording
    that a due from source_month was settled later.
    """
    __tablename__ = 'student_membership_history'

    PREVIOUS_DUE_REMARK = 'Previous month due paid'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='SET NULL'),
                           nullable=True, index=True)

    # Identity copied from the student at billing time
    name = db.Column(db.String(100), nullable=False, index=True)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(20))
    address = db.Column(db.Text)
    father_name = db.Column(db.String(100))
    registration_number = db.Column(db.String(50))
    aadhar_number = db.Column(db.String(20))
    profile_image_url = db.Column(db.String(1000))
    aadhaar_front_url = db.Column(db.String(1000))
    aadhaar_back_url = db.Column(db.String(1000))

    membership_start = db.Column(db.Date)
    membership_end = db.Column(db.Date)
    status = db.Column(db.String(20))

    # Fee/payment snapshot for this billing period
    total_fee = db.Column(db.Numeric(10, 2), default=0)
    amount_paid = db.Column(db.Numeric(10, 2), default=0)
    due_amount = db.Column(db.Numeric(10, 2), default=0)
    cash = db.Column(db.Numeric(10, 2), default=0)
    online = db.Column(db.Numeric(10, 2), default=0)
    security_money = db.Column(db.Numeric(10, 2), default=0)
    remark = db.Column(db.Text)

    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), index=True)
    shift_id = db.Column(db.Integer, db.ForeignKey('schedules.id'))
    seat_id = db.Column(db.Integer, db.ForeignKey('seats.id'))
    locker_id = db.Column(db.Integer, db.ForeignKey('locker.id'))

    # Billing timestamp, naive local time; decides which month the row belongs to
    changed_at = db.Column(db.DateTime, default=get_local_time, nullable=False, index=True)

    prev_due_paid = db.Column(db.Boolean, default=False, nullable=False, index=True)
    source_month = db.Column(db.String(7))  # YYYY-MM

    # Relationships
    student = db.relationship('Student', backref=db.backref('history', lazy='dynamic'))
    branch = db.relationship('Branch', lazy=True)
    shift = db.relationship('Schedule', lazy=True)

    # Columns carried into a previous-due row besides the identity block
    CARRY_OVER_FIELDS = (
        'student_id', 'name', 'email', 'phone', 'address', 'father_name',
        'registration_number', 'aadhar_number', 'profile_image_url',
        'aadhaar_front_url', 'aadhaar_back_url', 'membership_start',
        'membership_end', 'status', 'branch_id', 'shift_id', 'seat_id', 'locker_id',
    )

    @property
    def billing_month(self):
        return month_key(self.changed_at)

    def carry_over(self):
        return {field: getattr(self, field) for field in self.CARRY_OVER_FIELDS}

    def to_collection_dict(self):
        """Serialize as a collection record for the dashboard"""
        father_name = self.father_name
        if not father_name and self.student:
            father_name = self.student.father_name

        return {
            'historyId': self.id,
            'studentId': self.student_id,
            'name': self.name,
            'fatherName': father_name,
            'shiftTitle': self.shift.title if self.shift else None,
            'totalFee': money_to_float(self.total_fee),
            'amountPaid': money_to_float(self.amount_paid),
            'dueAmount': money_to_float(self.due_amount),
            'cash': money_to_float(self.cash),
            'online': money_to_float(self.online),
            'securityMoney': money_to_float(self.security_money),
            'remark': self.remark or '',
            'createdAt': self.changed_at.isoformat() if self.changed_at else None,
            'branchId': self.branch_id,
            'branchName': self.branch.name if self.branch else None,
            'prevDuePaid': bool(self.prev_due_paid),
            'sourceMonth': self.source_month
        }

    def to_previous_due_dict(self):
        return {
            'historyId': self.id,
            'studentId': self.student_id,
            'name': self.name,
            'amount': money_to_float(self.amount_paid),
            'cash': money_to_float(self.cash),
            'online': money_to_float(self.online),
            'createdAt': self.changed_at.isoformat() if self.changed_at else None,
            'branchId': self.branch_id,
            'branchName': self.branch.name if self.branch else None,
            'sourceMonth': self.source_month
        }

    def __repr__(self):
        return f'<StudentMembershipHistory {self.name} {self.billing_month}>'
