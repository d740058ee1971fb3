from libraryhub import db
from libraryhub.utils.helper import money_to_float, format_date
from libraryhub.utils.timezone_utils import get_local_time, get_local_date

class Student(db.Model):
    """
    Current membership snapshot of a student.

    One row per student, mutated on every payment event. The billing history
    lives in StudentMembershipHistory.
    """
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)

    # Basic Information
    name = db.Column(db.String(100), nullable=False, index=True)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(20))
    address = db.Column(db.Text)
    father_name = db.Column(db.String(100))
    registration_number = db.Column(db.String(50), index=True)
    aadhar_number = db.Column(db.String(20))

    # Documents
    profile_image_url = db.Column(db.String(1000))
    aadhaar_front_url = db.Column(db.String(1000))
    aadhaar_back_url = db.Column(db.String(1000))

    # Membership period
    membership_start = db.Column(db.Date)
    membership_end = db.Column(db.Date, index=True)
    status = db.Column(db.String(20), default='active', index=True)  # active, expired

    # Fee snapshot
    total_fee = db.Column(db.Numeric(10, 2), default=0)
    amount_paid = db.Column(db.Numeric(10, 2), default=0)
    due_amount = db.Column(db.Numeric(10, 2), default=0)
    cash = db.Column(db.Numeric(10, 2), default=0)
    online = db.Column(db.Numeric(10, 2), default=0)
    security_money = db.Column(db.Numeric(10, 2), default=0)
    remark = db.Column(db.Text)

    # Assignment
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), index=True)
    shift_id = db.Column(db.Integer, db.ForeignKey('schedules.id'))
    seat_id = db.Column(db.Integer, db.ForeignKey('seats.id'))
    locker_id = db.Column(db.Integer, db.ForeignKey('locker.id'))

    created_at = db.Column(db.DateTime, default=get_local_time)

    # Relationships
    branch = db.relationship('Branch', lazy=True)
    shift = db.relationship('Schedule', lazy=True)
    seat = db.relationship('Seat', lazy=True)
    locker = db.relationship('Locker', lazy=True)
    advance_payments = db.relationship('AdvancePayment', backref='student', lazy=True,
                                       cascade='all, delete-orphan')

    # Fields copied onto every ledger row for audit continuity
    IDENTITY_FIELDS = (
        'name', 'email', 'phone', 'address', 'father_name', 'registration_number',
        'aadhar_number', 'profile_image_url', 'aadhaar_front_url', 'aadhaar_back_url',
        'membership_start', 'membership_end', 'status',
        'branch_id', 'shift_id', 'seat_id', 'locker_id',
    )

    def compute_status(self, today=None):
        """active while the membership has not ended"""
        today = today or get_local_date()
        if self.membership_end and self.membership_end >= today:
            return 'active'
        return 'expired'

    def refresh_status(self, today=None):
        """Update status from membership_end; returns True when it changed"""
        status = self.compute_status(today)
        if status != self.status:
            self.status = status
            return True
        return False

    def identity_snapshot(self):
        return {field: getattr(self, field) for field in self.IDENTITY_FIELDS}

    def to_dict(self):
        """Convert to dictionary for JSON response"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'father_name': self.father_name,
            'registration_number': self.registration_number,
            'aadhar_number': self.aadhar_number,
            'profile_image_url': self.profile_image_url,
            'membership_start': format_date(self.membership_start),
            'membership_end': format_date(self.membership_end),
            'status': self.status,
            'total_fee': money_to_float(self.total_fee),
            'amount_paid': money_to_float(self.amount_paid),
            'due_amount': money_to_float(self.due_amount),
            'cash': money_to_float(self.cash),
            'online': money_to_float(self.online),
            'security_money': money_to_float(self.security_money),
            'remark': self.remark or '',
            'branch_id': self.branch_id,
            'branch_name': self.branch.name if self.branch else None,
            'shift_id': self.shift_id,
            'shift_title': self.shift.title if self.shift else None,
            'seat_id': self.seat_id,
            'seat_number': self.seat.seat_number if self.seat else None,
            'locker_id': self.locker_id,
            'locker_number': self.locker.locker_number if self.locker else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Student {self.name}>'
