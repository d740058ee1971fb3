from datetime import timedelta

import pytest

from config import TestingConfig
from libraryhub import create_app, db
from libraryhub.models.user import User
from libraryhub.models.branch import Branch, Schedule
from libraryhub.services.membership_service import MembershipService
from libraryhub.utils.timezone_utils import get_local_date

ADMIN_PASSWORD = 'admin-pass-123'
STAFF_PASSWORD = 'staff-pass-123'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Application context for service level tests (no HTTP requests inside)"""
    with app.app_context():
        yield


@pytest.fixture
def users(app):
    with app.app_context():
        for username, password, role, active in (
            ('admin', ADMIN_PASSWORD, 'admin', True),
            ('staff', STAFF_PASSWORD, 'staff', True),
            ('retired', STAFF_PASSWORD, 'staff', False),
        ):
            user = User(username=username, full_name=username.title(), role=role, is_active=active)
            user.set_password(password)
            db.session.add(user)
        db.session.commit()


def _login(app, username, password):
    client = app.test_client()
    response = client.post('/api/v1/auth/login', json={'username': username, 'password': password})
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app, users):
    return _login(app, 'admin', ADMIN_PASSWORD)


@pytest.fixture
def staff_client(app, users):
    return _login(app, 'staff', STAFF_PASSWORD)


@pytest.fixture
def branch(app):
    """Id of a branch with one morning shift"""
    with app.app_context():
        branch = Branch(name='Central Library', address='12 MG Road')
        db.session.add(branch)
        db.session.flush()
        db.session.add(Schedule(title='Morning', branch_id=branch.id, start_time='06:00',
                                end_time='12:00', fee=1000))
        db.session.commit()
        return branch.id


@pytest.fixture
def shift(app, branch):
    with app.app_context():
        return Schedule.query.filter_by(branch_id=branch).first().id


@pytest.fixture
def make_student(app, branch, shift):
    """
    Register a student and return (student_id, history_id)

    Default period: fee 1000, cash 300, online 200, due 500.
    """
    def _make(name='Aarav Sharma', changed_at=None, total_fee=1000, cash=300, online=200,
              branch_id=None, membership_end=None, **extra):
        today = get_local_date()
        data = {
            'name': name,
            'father_name': 'Rakesh Sharma',
            'phone': '9876543210',
            'membership_start': today.isoformat(),
            'membership_end': (membership_end or today + timedelta(days=30)).isoformat(),
            'total_fee': total_fee,
            'cash': cash,
            'online': online,
            'branch_id': branch_id if branch_id is not None else branch,
            'shift_id': shift if branch_id is None else None,
        }
        data.update(extra)
        with app.app_context():
            student = MembershipService.register_student(data, changed_at=changed_at)
            history = student.history.first()
            return student.id, history.id

    return _make
