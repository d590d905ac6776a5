"""create report schema

Revision ID: 3b7e0c1d9a42
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3b7e0c1d9a42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MATTER_STATE_VALUES = ('OPEN', 'CLOSED', 'ARCHIVED')


def _id():
    return sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _fk(name, target):
    return sa.Column(name, sa.Integer(), sa.ForeignKey(target, ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'matters',
        _id(),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('status', sa.Enum(*MATTER_STATE_VALUES, name='matterstate'), nullable=False),
    )
    op.create_index('ix_matters_user_id', 'matters', ['user_id'])

    op.create_table(
        'reports',
        _id(),
        *_timestamps(),
        sa.Column('uuid', sa.String(length=64), nullable=True),
        sa.Column('upstream_report_id', sa.String(length=64), nullable=True),
        sa.Column('abn', sa.String(length=32), nullable=True),
        sa.Column('search_key', sa.String(length=500), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('subtype', sa.String(length=64), nullable=True),
        sa.Column('payment_intent_id', sa.String(length=255), nullable=True),
        sa.Column('report_data', postgresql.JSONB(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_reports_uuid', 'reports', ['uuid'])
    op.create_index('ix_reports_abn', 'reports', ['abn'])
    op.create_index('ix_reports_user_id', 'reports', ['user_id'])
    op.create_index('ix_reports_cache_key', 'reports', ['abn', 'category', 'subtype', 'created_at'])

    op.create_table(
        'report_ingestions',
        _id(),
        sa.Column('report_id', sa.Integer(), sa.ForeignKey('reports.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('payload_kind', sa.String(length=32), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('failed_aggregates', sa.Integer(), nullable=False),
    )

    op.create_table(
        'user_reports',
        _id(),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('matter_id', sa.Integer(), sa.ForeignKey('matters.id', ondelete='CASCADE'), nullable=True),
        _fk('report_id', 'reports.id'),
        sa.Column('report_name', sa.String(length=255), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=True),
        sa.Column('type', sa.String(length=64), nullable=True),
        sa.Column('asic_type', sa.String(length=64), nullable=True),
        sa.UniqueConstraint('user_id', 'matter_id', 'report_id', name='uq_user_reports_user_matter_report'),
    )
    op.create_index('ix_user_reports_user_id', 'user_reports', ['user_id'])
    op.create_index('ix_user_reports_matter_id', 'user_reports', ['matter_id'])
    op.create_index('ix_user_reports_report_id', 'user_reports', ['report_id'])
    op.create_index(
        'uq_user_reports_user_report_no_matter',
        'user_reports',
        ['user_id', 'report_id'],
        unique=True,
        postgresql_where=sa.text('matter_id IS NULL'),
        sqlite_where=sa.text('matter_id IS NULL'),
    )

    op.create_table(
        'entities',
        _id(),
        sa.Column('report_id', sa.Integer(), sa.ForeignKey('reports.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('abn', sa.String(length=32), nullable=True),
        sa.Column('acn', sa.String(length=32), nullable=True),
        sa.Column('is_arbn', sa.Boolean(), nullable=False),
        sa.Column('abr_gst_registration_date', sa.String(length=64), nullable=True),
        sa.Column('abr_gst_status', sa.String(), nullable=True),
        sa.Column('abr_postcode', sa.String(), nullable=True),
        sa.Column('abr_state', sa.String(), nullable=True),
        sa.Column('abr_status', sa.String(), nullable=True),
        sa.Column('asic_date_of_registration', sa.String(length=64), nullable=True),
        sa.Column('asic_status', sa.String(), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
        sa.Column('former_names', postgresql.JSONB(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('reference', sa.String(), nullable=True),
        sa.Column('irf', sa.String(), nullable=True),
        sa.Column('review_date', sa.String(length=64), nullable=True),
        sa.Column('name_start_at', sa.String(length=64), nullable=True),
        sa.Column('registered_in', sa.String(), nullable=True),
        sa.Column('organisation_type', sa.String(), nullable=True),
        sa.Column('disclosing_entity', sa.String(), nullable=True),
        sa.Column('organisation_class', sa.String(), nullable=True),
        sa.Column('organisation_sub_class', sa.String(), nullable=True),
        sa.Column('entity_created_at', sa.String(length=64), nullable=True),
    )

    op.create_table(
        'tax_debts',
        _id(),
        sa.Column('report_id', sa.Integer(), sa.ForeignKey('reports.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('date', sa.String(length=64), nullable=True),
        sa.Column('amount', sa.Numeric(15, 2), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('ato_added_at', sa.String(length=64), nullable=True),
        sa.Column('ato_updated_at', sa.String(length=64), nullable=True),
    )

    op.create_table(
        'asic_extracts',
        _id(),
        _fk('report_id', 'reports.id'),
        sa.Column('external_id', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
    )
    op.create_index('ix_asic_extracts_report_id', 'asic_extracts', ['report_id'])

    op.create_table(
        'addresses',
        _id(),
        _fk('asic_extract_id', 'asic_extracts.id'),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('external_id', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('entity', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('care_of', sa.String(), nullable=True),
        sa.Column('address_1', sa.String(), nullable=True),
        sa.Column('address_2', sa.String(), nullable=True),
        sa.Column('suburb', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('postcode', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('start_date', sa.String(length=64), nullable=True),
        sa.Column('end_date', sa.String(length=64), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
    )
    op.create_index('ix_addresses_asic_extract_id', 'addresses', ['asic_extract_id'])
    op.create_index('ix_addresses_category', 'addresses', ['category'])

    op.create_table(
        'directors',
        _id(),
        _fk('asic_extract_id', 'asic_extracts.id'),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('dob', sa.String(length=64), nullable=True),
        sa.Column('place_of_birth', sa.String(), nullable=True),
        sa.Column('director_id_external', sa.String(), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
        sa.Column('start_date', sa.String(length=64), nullable=True),
        sa.Column('end_date', sa.String(length=64), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('address_data', postgresql.JSONB(), nullable=True),
    )
    op.create_index('ix_directors_asic_extract_id', 'directors', ['asic_extract_id'])
    op.create_index('ix_directors_name', 'directors', ['name'])

    op.create_table(
        'shareholders',
        _id(),
        _fk('asic_extract_id', 'asic_extracts.id'),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('acn', sa.String(length=32), nullable=True),
        sa.Column('class', sa.String(), nullable=True),
        sa.Column('number_held', sa.Integer(), nullable=True),
        sa.Column('percentage_held', sa.Numeric(5, 2), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
        sa.Column('beneficially_owned', sa.Boolean(), nullable=True),
        sa.Column('fully_paid', sa.Boolean(), nullable=True),
        sa.Column('jointly_held', sa.Boolean(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('address_data', postgresql.JSONB(), nullable=True),
    )
    op.create_index('ix_shareholders_asic_extract_id', 'shareholders', ['asic_extract_id'])

    op.create_table(
        'share_structures',
        _id(),
        _fk('asic_extract_id', 'asic_extracts.id'),
        sa.Column('class_code', sa.String(), nullable=True),
        sa.Column('class_description', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('share_count', sa.Integer(), nullable=True),
        sa.Column('amount_paid', sa.Numeric(15, 2), nullable=True),
        sa.Column('amount_due', sa.Numeric(15, 2), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
    )
    op.create_index('ix_share_structures_asic_extract_id', 'share_structures', ['asic_extract_id'])

    op.create_table(
        'extract_documents',
        _id(),
        _fk('asic_extract_id', 'asic_extracts.id'),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('document_number', sa.String(), nullable=True),
        sa.Column('form_code', sa.String(), nullable=True),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('effective_at', sa.String(length=64), nullable=True),
        sa.Column('processed_at', sa.String(length=64), nullable=True),
        sa.Column('received_at', sa.String(length=64), nullable=True),
    )
    op.create_index('ix_extract_documents_asic_extract_id', 'extract_documents', ['asic_extract_id'])

    op.create_table(
        'cases',
        _id(),
        _fk('report_id', 'reports.id'),
        sa.Column('uuid', sa.String(length=64), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('notification_time', sa.String(length=64), nullable=True),
        sa.Column('court_name', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('court_type', sa.String(), nullable=True),
        sa.Column('case_type', sa.String(), nullable=True),
        sa.Column('case_number', sa.String(), nullable=True),
        sa.Column('jurisdiction', sa.String(), nullable=True),
        sa.Column('suburb', sa.String(), nullable=True),
        sa.Column('next_hearing_date', sa.String(length=64), nullable=True),
        sa.Column('case_name', sa.Text(), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('total_parties', sa.Integer(), nullable=True),
        sa.Column('total_documents', sa.Integer(), nullable=True),
        sa.Column('total_hearings', sa.Integer(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=True),
        sa.Column('internal_reference', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('other_names', sa.Text(), nullable=True),
        sa.Column('insolvency_risk_factor', sa.Numeric(10, 2), nullable=True),
        sa.Column('party_role', sa.String(), nullable=True),
        sa.Column('most_recent_event', sa.String(length=64), nullable=True),
        sa.Column('match_on', sa.Text(), nullable=True),
    )
    op.create_index('ix_cases_report_id', 'cases', ['report_id'])
    op.create_index('ix_cases_uuid', 'cases', ['uuid'])

    op.create_table(
        'case_parties',
        _id(),
        _fk('case_id', 'cases.id'),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('offence', sa.Text(), nullable=True),
        sa.Column('plea', sa.String(), nullable=True),
        sa.Column('representative_firm', sa.String(), nullable=True),
        sa.Column('representative_name', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('fax', sa.String(), nullable=True),
        sa.Column('abn', sa.String(length=32), nullable=True),
        sa.Column('acn', sa.String(length=32), nullable=True),
    )
    op.create_index('ix_case_parties_case_id', 'case_parties', ['case_id'])

    op.create_table(
        'case_hearings',
        _id(),
        _fk('case_id', 'cases.id'),
        sa.Column('datetime', sa.String(length=64), nullable=True),
        sa.Column('officer', sa.String(), nullable=True),
        sa.Column('court_room', sa.String(), nullable=True),
        sa.Column('court_name', sa.String(), nullable=True),
        sa.Column('court_phone', sa.String(), nullable=True),
        sa.Column('court_address', sa.Text(), nullable=True),
        sa.Column('court_suburb', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('list_no', sa.String(), nullable=True),
        sa.Column('outcome', sa.Text(), nullable=True),
    )
    op.create_index('ix_case_hearings_case_id', 'case_hearings', ['case_id'])

    op.create_table(
        'case_documents',
        _id(),
        _fk('case_id', 'cases.id'),
        sa.Column('datetime', sa.String(length=64), nullable=True),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('filed_by', sa.String(), nullable=True),
    )
    op.create_index('ix_case_documents_case_id', 'case_documents', ['case_id'])

    op.create_table(
        'case_applications',
        _id(),
        _fk('case_id', 'cases.id'),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('date_filed', sa.String(length=64), nullable=True),
        sa.Column('date_finalised', sa.String(length=64), nullable=True),
    )
    op.create_index('ix_case_applications_case_id', 'case_applications', ['case_id'])

    op.create_table(
        'case_judgments',
        _id(),
        _fk('case_id', 'cases.id'),
        sa.Column('uuid', sa.String(length=64), nullable=True),
        sa.Column('unique_id', sa.String(), nullable=True),
        sa.Column('number', sa.String(), nullable=True),
        sa.Column('case_number', sa.String(), nullable=True),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('date', sa.String(length=64), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('court', sa.String(), nullable=True),
        sa.Column('court_type', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('officer', sa.String(), nullable=True),
        sa.Column('case_type', sa.String(), nullable=True),
        sa.Column('catchwords', sa.Text(), nullable=True),
        sa.Column('legislation', sa.Text(), nullable=True),
        sa.Column('cases_cited', sa.Text(), nullable=True),
        sa.Column('result', sa.Text(), nullable=True),
        sa.Column('division', sa.String(), nullable=True),
        sa.Column('registry', sa.String(), nullable=True),
        sa.Column('national_practice_area', sa.String(), nullable=True),
        sa.Column('sub_area', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('number_of_paragraphs', sa.Integer(), nullable=True),
        sa.Column('date_of_last_submission', sa.String(length=64), nullable=True),
        sa.Column('orders', sa.Text(), nullable=True),
        sa.Column('reasons_for_judgment', sa.Text(), nullable=True),
        sa.Column('prior_decisions', postgresql.JSONB(), nullable=False),
    )
    op.create_index('ix_case_judgments_case_id', 'case_judgments', ['case_id'])

    op.create_table(
        'insolvencies',
        _id(),
        _fk('report_id', 'reports.id'),
        sa.Column('uuid', sa.String(length=64), nullable=True),
        sa.Column('type', sa.String(), nullable=True),
        sa.Column('notification_time', sa.String(length=64), nullable=True),
        sa.Column('court_name', sa.String(), nullable=True),
        sa.Column('case_type', sa.String(), nullable=True),
        sa.Column('case_number', sa.String(), nullable=True),
        sa.Column('asic_notice_id', sa.String(), nullable=True),
        sa.Column('case_name', sa.Text(), nullable=True),
        sa.Column('total_parties', sa.Integer(), nullable=True),
        sa.Column('internal_reference', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('other_names', sa.Text(), nullable=True),
        sa.Column('insolvency_risk_factor', sa.Numeric(10, 2), nullable=True),
        sa.Column('match_on', sa.Text(), nullable=True),
    )
    op.create_index('ix_insolvencies_report_id', 'insolvencies', ['report_id'])
    op.create_index('ix_insolvencies_uuid', 'insolvencies', ['uuid'])

    op.create_table(
        'insolvency_parties',
        _id(),
        _fk('insolvency_id', 'insolvencies.id'),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('acn', sa.String(length=32), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
    )
    op.create_index('ix_insolvency_parties_insolvency_id', 'insolvency_parties', ['insolvency_id'])

    op.create_table(
        'ppsr_searches',
        _id(),
        _fk('report_id', 'reports.id'),
        sa.Column('ppsr_cloud_id', sa.String(length=64), nullable=True),
        sa.Column('search_criteria_id', sa.String(length=64), nullable=True),
        sa.Column('search_number', sa.String(length=64), nullable=True),
        sa.Column('search_date_time', sa.String(length=64), nullable=True),
        sa.Column('search_type', sa.String(), nullable=True),
        sa.Column('grantor_type', sa.String(), nullable=True),
        sa.Column('organisation_number', sa.String(length=32), nullable=True),
        sa.Column('organisation_number_type', sa.String(length=16), nullable=True),
        sa.Column('organisation_name', sa.String(), nullable=True),
        sa.Column('result_count', sa.Integer(), nullable=True),
        sa.Column('criteria', postgresql.JSONB(), nullable=True),
    )
    op.create_index('ix_ppsr_searches_report_id', 'ppsr_searches', ['report_id'])
    op.create_index('ix_ppsr_searches_ppsr_cloud_id', 'ppsr_searches', ['ppsr_cloud_id'])

    op.create_table(
        'ppsr_items',
        _id(),
        _fk('ppsr_search_id', 'ppsr_searches.id'),
        sa.Column('registration_number', sa.String(length=64), nullable=True),
        sa.Column('registration_kind', sa.String(), nullable=True),
        sa.Column('registration_start_time', sa.String(length=64), nullable=True),
        sa.Column('registration_end_time', sa.String(length=64), nullable=True),
        sa.Column('registration_change_time', sa.String(length=64), nullable=True),
        sa.Column('collateral_class_type', sa.String(), nullable=True),
        sa.Column('collateral_type', sa.String(), nullable=True),
        sa.Column('collateral_description', sa.Text(), nullable=True),
        sa.Column('proceeds_claimed_description', sa.Text(), nullable=True),
        sa.Column('are_proceeds_claimed', sa.Boolean(), nullable=True),
        sa.Column('is_pmsi', sa.Boolean(), nullable=True),
        sa.Column('is_inventory', sa.Boolean(), nullable=True),
        sa.Column('is_transitional', sa.Boolean(), nullable=True),
        sa.Column('is_migrated', sa.Boolean(), nullable=True),
        sa.Column('giving_of_notice_identifier', sa.String(), nullable=True),
        sa.Column('security_interest_attached_time', sa.String(length=64), nullable=True),
    )
    op.create_index('ix_ppsr_items_ppsr_search_id', 'ppsr_items', ['ppsr_search_id'])
    op.create_index('ix_ppsr_items_registration_number', 'ppsr_items', ['registration_number'])

    op.create_table(
        'ppsr_addresses_for_service',
        _id(),
        sa.Column('ppsr_item_id', sa.Integer(), sa.ForeignKey('ppsr_items.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('addressee', sa.String(), nullable=True),
        sa.Column('email_address', sa.String(), nullable=True),
        sa.Column('fax_number', sa.String(), nullable=True),
        sa.Column('mailing_address', postgresql.JSONB(), nullable=True),
        sa.Column('physical_address', postgresql.JSONB(), nullable=True),
    )

    op.create_table(
        'ppsr_grantors',
        _id(),
        _fk('ppsr_item_id', 'ppsr_items.id'),
        sa.Column('grantor_type', sa.String(), nullable=True),
        sa.Column('organisation_name', sa.String(), nullable=True),
        sa.Column('organisation_number', sa.String(length=32), nullable=True),
        sa.Column('organisation_number_type', sa.String(length=16), nullable=True),
        sa.Column('individual_given_names', sa.String(), nullable=True),
        sa.Column('individual_family_name', sa.String(), nullable=True),
        sa.Column('individual_date_of_birth', sa.String(length=64), nullable=True),
    )
    op.create_index('ix_ppsr_grantors_ppsr_item_id', 'ppsr_grantors', ['ppsr_item_id'])

    op.create_table(
        'ppsr_secured_parties',
        _id(),
        _fk('ppsr_item_id', 'ppsr_items.id'),
        sa.Column('secured_party_type', sa.String(), nullable=True),
        sa.Column('organisation_name', sa.String(), nullable=True),
        sa.Column('organisation_number', sa.String(length=32), nullable=True),
        sa.Column('organisation_number_type', sa.String(length=16), nullable=True),
        sa.Column('individual_given_names', sa.String(), nullable=True),
        sa.Column('individual_family_name', sa.String(), nullable=True),
    )
    op.create_index('ix_ppsr_secured_parties_ppsr_item_id', 'ppsr_secured_parties', ['ppsr_item_id'])


def downgrade() -> None:
    for table in (
        'ppsr_secured_parties', 'ppsr_grantors', 'ppsr_addresses_for_service', 'ppsr_items', 'ppsr_searches',
        'insolvency_parties', 'insolvencies',
        'case_judgments', 'case_applications', 'case_documents', 'case_hearings', 'case_parties', 'cases',
        'extract_documents', 'share_structures', 'shareholders', 'directors', 'addresses', 'asic_extracts',
        'tax_debts', 'entities', 'user_reports', 'report_ingestions', 'reports', 'matters',
    ):
        op.drop_table(table)
    op.execute("DROP TYPE IF EXISTS matterstate")
