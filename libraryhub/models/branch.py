from libraryhub import db
from libraryhub.utils.helper import money_to_float
from libraryhub.utils.timezone_utils import get_local_time

class Branch(db.Model):
    __tablename__ = 'branches'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    address = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=get_local_time)

    schedules = db.relationship('Schedule', backref='branch', lazy=True, cascade='all, delete-orphan')
    seats = db.relationship('Seat', backref='branch', lazy=True, cascade='all, delete-orphan')
    lockers = db.relationship('Locker', backref='branch', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Branch {self.name}>'


class Schedule(db.Model):
    """A shift (time slot) at a branch"""
    __tablename__ = 'schedules'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), index=True)
    start_time = db.Column(db.String(10))  # "08:00"
    end_time = db.Column(db.String(10))
    fee = db.Column(db.Numeric(10, 2), default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'branch_id': self.branch_id,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'fee': money_to_float(self.fee)
        }


class Seat(db.Model):
    __tablename__ = 'seats'
    __table_args__ = (db.UniqueConstraint('seat_number', 'branch_id', name='unique_seat_number_per_branch'),)

    id = db.Column(db.Integer, primary_key=True)
    seat_number = db.Column(db.String(20), nullable=False)
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'seat_number': self.seat_number,
            'branch_id': self.branch_id
        }


class Locker(db.Model):
    __tablename__ = 'locker'
    __table_args__ = (db.UniqueConstraint('locker_number', 'branch_id', name='unique_locker_number_per_branch'),)

    id = db.Column(db.Integer, primary_key=True)
    locker_number = db.Column(db.String(20), nullable=False)
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'locker_number': self.locker_number,
            'branch_id': self.branch_id
        }
