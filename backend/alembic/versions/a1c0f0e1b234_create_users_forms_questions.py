"""create users, forms and questions tables

Revision ID: a1c0f0e1b234
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c0f0e1b234'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False, comment='表示名'),
        sa.Column('role', sa.Enum('USER', 'ADMIN', name='user_role'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'forms',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(200), nullable=False, comment='フォーム名'),
        sa.Column('description', sa.Text(), nullable=True, comment='フォーム説明'),
        sa.Column('user_id', sa.String(36), nullable=False, comment='所有者 (作成後変更不可)'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_forms_user_id', 'forms', ['user_id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('form_id', sa.String(36), nullable=False),
        sa.Column('text', sa.String(500), nullable=False, comment='質問文'),
        sa.Column(
            'type',
            sa.Enum('TEXT', 'TEXTAREA', 'NUMBER', 'EMAIL', 'RADIO', 'CHECKBOX', 'SELECT', 'DATE', name='question_type'),
            nullable=False,
        ),
        sa.Column('order', sa.Integer(), nullable=False, comment='表示順 (0始まり、削除後は歯抜けを許容)'),
        sa.Column('required', sa.Boolean(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=True, comment='選択肢など ({choices: [...]})'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_questions_form_id', 'questions', ['form_id'])
    op.create_index('ix_questions_form_id_order', 'questions', ['form_id', 'order'])


def downgrade() -> None:
    op.drop_index('ix_questions_form_id_order', table_name='questions')
    op.drop_index('ix_questions_form_id', table_name='questions')
    op.drop_table('questions')
    op.drop_index('ix_forms_user_id', table_name='forms')
    op.drop_table('forms')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
