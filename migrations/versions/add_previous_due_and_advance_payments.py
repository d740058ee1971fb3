"""Track previous-month due settlements and add advance payments

Revision ID: add_prev_due_advance
Revises: initial_schema
Create Date: 2026-10-09 16:40:05.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'add_prev_due_advance'
down_revision = 'initial_schema'
branch_labels = None
depends_on = None

def upgrade():
    # Settlement rows for dues of an earlier month
    with op.batch_alter_table('student_membership_history', schema=None) as batch_op:
        batch_op.add_column(sa.Column('prev_due_paid', sa.Boolean(), nullable=False,
                                      server_default=sa.false()))
        batch_op.add_column(sa.Column('source_month', sa.String(7), nullable=True))
        batch_op.create_index('ix_student_membership_history_prev_due_paid', ['prev_due_paid'])

    op.create_table(
        'advance_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_advance_payments_amount_positive'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_advance_payments_student_id', 'advance_payments', ['student_id'])
    op.create_index('ix_advance_payments_payment_date', 'advance_payments', ['payment_date'])
    op.create_index('ix_advance_payments_created_at', 'advance_payments', ['created_at'])

def downgrade():
    op.drop_table('advance_payments')

    with op.batch_alter_table('student_membership_history', schema=None) as batch_op:
        batch_op.drop_index('ix_student_membership_history_prev_due_paid')
        batch_op.drop_column('source_month')
        batch_op.drop_column('prev_due_paid')
