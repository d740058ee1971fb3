"""Initial schema: users, branches, students and the membership ledger

Revision ID: initial_schema
Revises:
Create Date: 2026-09-28 10:12:41.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_schema'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(80), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'schedules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.Column('start_time', sa.String(10), nullable=True),
        sa.Column('end_time', sa.String(10), nullable=True),
        sa.Column('fee', sa.Numeric(10, 2), nullable=True),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_schedules_branch_id', 'schedules', ['branch_id'])

    op.create_table(
        'seats',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('seat_number', sa.String(20), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('seat_number', 'branch_id', name='unique_seat_number_per_branch')
    )
    op.create_index('ix_seats_branch_id', 'seats', ['branch_id'])

    op.create_table(
        'locker',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('locker_number', sa.String(20), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('locker_number', 'branch_id', name='unique_locker_number_per_branch')
    )
    op.create_index('ix_locker_branch_id', 'locker', ['branch_id'])

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(120), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('father_name', sa.String(100), nullable=True),
        sa.Column('registration_number', sa.String(50), nullable=True),
        sa.Column('aadhar_number', sa.String(20), nullable=True),
        sa.Column('profile_image_url', sa.String(1000), nullable=True),
        sa.Column('aadhaar_front_url', sa.String(1000), nullable=True),
        sa.Column('aadhaar_back_url', sa.String(1000), nullable=True),
        sa.Column('membership_start', sa.Date(), nullable=True),
        sa.Column('membership_end', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('total_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=True),
        sa.Column('due_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('cash', sa.Numeric(10, 2), nullable=True),
        sa.Column('online', sa.Numeric(10, 2), nullable=True),
        sa.Column('security_money', sa.Numeric(10, 2), nullable=True),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.Column('shift_id', sa.Integer(), nullable=True),
        sa.Column('seat_id', sa.Integer(), nullable=True),
        sa.Column('locker_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.ForeignKeyConstraint(['shift_id'], ['schedules.id']),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id']),
        sa.ForeignKeyConstraint(['locker_id'], ['locker.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_students_name', 'students', ['name'])
    op.create_index('ix_students_registration_number', 'students', ['registration_number'])
    op.create_index('ix_students_membership_end', 'students', ['membership_end'])
    op.create_index('ix_students_status', 'students', ['status'])
    op.create_index('ix_students_branch_id', 'students', ['branch_id'])

    op.create_table(
        'student_membership_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(120), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('father_name', sa.String(100), nullable=True),
        sa.Column('registration_number', sa.String(50), nullable=True),
        sa.Column('aadhar_number', sa.String(20), nullable=True),
        sa.Column('profile_image_url', sa.String(1000), nullable=True),
        sa.Column('aadhaar_front_url', sa.String(1000), nullable=True),
        sa.Column('aadhaar_back_url', sa.String(1000), nullable=True),
        sa.Column('membership_start', sa.Date(), nullable=True),
        sa.Column('membership_end', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('total_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=True),
        sa.Column('due_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('cash', sa.Numeric(10, 2), nullable=True),
        sa.Column('online', sa.Numeric(10, 2), nullable=True),
        sa.Column('security_money', sa.Numeric(10, 2), nullable=True),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.Column('branch_id', sa.Integer(), nullable=True),
        sa.Column('shift_id', sa.Integer(), nullable=True),
        sa.Column('seat_id', sa.Integer(), nullable=True),
        sa.Column('locker_id', sa.Integer(), nullable=True),
        sa.Column('changed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id']),
        sa.ForeignKeyConstraint(['shift_id'], ['schedules.id']),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id']),
        sa.ForeignKeyConstraint(['locker_id'], ['locker.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_student_membership_history_student_id', 'student_membership_history', ['student_id'])
    op.create_index('ix_student_membership_history_name', 'student_membership_history', ['name'])
    op.create_index('ix_student_membership_history_branch_id', 'student_membership_history', ['branch_id'])
    op.create_index('ix_student_membership_history_changed_at', 'student_membership_history', ['changed_at'])

def downgrade():
    op.drop_table('student_membership_history')
    op.drop_table('students')
    op.drop_table('locker')
    op.drop_table('seats')
    op.drop_table('schedules')
    op.drop_table('branches')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
