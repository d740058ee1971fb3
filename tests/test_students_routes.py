from datetime import timedelta

from libraryhub import db
from libraryhub.models.advance_payment import AdvancePayment
from libraryhub.models.membership_history import StudentMembershipHistory
from libraryhub.utils.timezone_utils import get_local_date


def _period(**extra):
    today = get_local_date()
    data = {
        'membership_start': today.isoformat(),
        'membership_end': (today + timedelta(days=30)).isoformat(),
        'total_fee': 1200,
        'cash': 1000,
        'online': 0,
    }
    data.update(extra)
    return data


class TestRegisterStudent:

    def test_register_creates_first_ledger_row(self, app, staff_client, branch, shift):
        payload = _period(name='Farhan Ali', phone='9000000001', branch_id=branch, shift_id=shift)

        response = staff_client.post('/api/v1/students', json=payload)

        assert response.status_code == 201
        student = response.get_json()['student']
        assert student['status'] == 'active'
        assert student['due_amount'] == 200
        assert student['shift_title'] == 'Morning'

        with app.app_context():
            rows = StudentMembershipHistory.query.filter_by(student_id=student['id']).all()
            assert len(rows) == 1
            assert rows[0].name == 'Farhan Ali'
            assert float(rows[0].due_amount) == 200
            assert rows[0].prev_due_paid is False

    def test_validation_errors(self, staff_client):
        response = staff_client.post('/api/v1/students', json=_period(name=''))
        assert response.status_code == 400
        assert 'name' in response.get_json()['error']['details']['validation_errors']

        response = staff_client.post('/api/v1/students', json=_period(name='Gita', cash=2000))
        assert response.status_code == 400
        assert 'total_fee' in response.get_json()['error']['details']['validation_errors']

        today = get_local_date()
        response = staff_client.post('/api/v1/students', json=_period(
            name='Gita', membership_end=(today - timedelta(days=1)).isoformat()))
        assert 'membership_end' in response.get_json()['error']['details']['validation_errors']

    def test_non_text_name(self, staff_client):
        response = staff_client.post('/api/v1/students', json=_period(name=123))

        assert response.status_code == 400
        assert response.get_json()['error']['details']['validation_errors']['name'] == ['Name must be text']

    def test_unknown_branch(self, staff_client):
        response = staff_client.post('/api/v1/students', json=_period(name='Hari', branch_id=404))
        assert response.status_code == 404


class TestStudentQueries:

    def test_list_search_and_status(self, staff_client, make_student):
        today = get_local_date()
        make_student(name='Ishaan Verma')
        make_student(name='Jaya Kapoor', membership_start=(today - timedelta(days=40)).isoformat(),
                     membership_end=today - timedelta(days=10))

        names = [s['name'] for s in staff_client.get('/api/v1/students').get_json()['students']]
        assert names == ['Ishaan Verma', 'Jaya Kapoor']

        response = staff_client.get('/api/v1/students?search=kapoor')
        assert [s['name'] for s in response.get_json()['students']] == ['Jaya Kapoor']

        response = staff_client.get('/api/v1/students?status=expired')
        assert [s['name'] for s in response.get_json()['students']] == ['Jaya Kapoor']

        response = staff_client.get('/api/v1/students?status=paused')
        assert response.status_code == 400

    def test_counts_and_expiring_soon(self, staff_client, make_student):
        today = get_local_date()
        make_student(name='Soon', membership_end=today + timedelta(days=3))
        make_student(name='Later', membership_end=today + timedelta(days=25))
        make_student(name='Gone', membership_start=(today - timedelta(days=40)).isoformat(),
                     membership_end=today - timedelta(days=1))

        counts = staff_client.get('/api/v1/students/counts').get_json()
        assert counts == {'total': 3, 'active': 2, 'expired': 1}

        expiring = staff_client.get('/api/v1/students/expiring-soon').get_json()
        assert expiring['days'] == 7
        assert [s['name'] for s in expiring['students']] == ['Soon']

    def test_detail_includes_history_and_advances(self, staff_client, make_student):
        student_id, history_id = make_student()
        staff_client.post('/api/v1/advance-payments', json={'student_id': student_id, 'amount': 250})

        response = staff_client.get(f'/api/v1/students/{student_id}')

        student = response.get_json()['student']
        assert [row['historyId'] for row in student['history']] == [history_id]
        assert [p['amount'] for p in student['advance_payments']] == [250]

    def test_missing_student(self, staff_client):
        response = staff_client.get('/api/v1/students/31337')
        assert response.status_code == 404


class TestRenewAndDelete:

    def test_renew_appends_ledger_row(self, app, staff_client, make_student):
        student_id, history_id = make_student()
        today = get_local_date()

        response = staff_client.post(f'/api/v1/students/{student_id}/renew', json=_period(
            membership_start=(today + timedelta(days=31)).isoformat(),
            membership_end=(today + timedelta(days=60)).isoformat(),
            total_fee=900, cash=0, online=900
        ))

        assert response.status_code == 200
        body = response.get_json()
        assert body['student']['total_fee'] == 900
        assert body['student']['due_amount'] == 0
        assert body['collection']['historyId'] != history_id

        with app.app_context():
            assert StudentMembershipHistory.query.filter_by(student_id=student_id).count() == 2
            first = db.session.get(StudentMembershipHistory, history_id)
            assert float(first.total_fee) == 1000

    def test_delete_keeps_ledger(self, app, staff_client, make_student):
        student_id, history_id = make_student()
        staff_client.post('/api/v1/advance-payments', json={'student_id': student_id, 'amount': 250})

        response = staff_client.delete(f'/api/v1/students/{student_id}')

        assert response.status_code == 200
        with app.app_context():
            row = db.session.get(StudentMembershipHistory, history_id)
            assert row is not None
            assert row.student_id is None
            assert AdvancePayment.query.count() == 0

        rows = staff_client.get('/api/v1/collections').get_json()['collections']
        assert rows[0]['studentId'] is None
        assert rows[0]['fatherName'] == 'Rakesh Sharma'
