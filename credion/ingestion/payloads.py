"""Typed views over the upstream report JSON.

Upstream documents are loosely shaped: any field may be missing, blank, a
number where a string is expected, or an array where text is expected. These
models absorb that so the normalizer only ever sees ``None`` for an absent
value and ``[]`` for an absent collection.

Only the top level is validated eagerly. Each extract, case, insolvency and
PPSR item stays raw until the normalizer parses it inside its own failure
scope, so one malformed entry cannot sink its siblings.
"""
import json
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _as_text(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return json.dumps(value) if value else None
    return value


def _clean_number(value: Any) -> Any:
    if isinstance(value, str):
        cleaned = value.replace(",", "").replace("$", "").replace("%", "").strip()
        return cleaned or None
    return value


LooseText = Annotated[Optional[str], BeforeValidator(_as_text)]
Amount = Annotated[Optional[Decimal], BeforeValidator(_clean_number)]
Count = Annotated[Optional[int], BeforeValidator(_clean_number)]


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str) and not value.strip():
            value = None
        if value is None:
            field = cls.model_fields.get(info.field_name)
            if field is not None and field.default_factory is not None:
                return field.default_factory()
        return value


# ---------------------------------------------------------------------------
# ASIC extract
# ---------------------------------------------------------------------------

class AddressPayload(PayloadModel):
    id: Optional[str] = None
    type: Optional[str] = None
    entity: Optional[str] = None
    address: LooseText = None
    care_of: Optional[str] = None
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    suburb: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    document_number: Optional[str] = None


class PersonPayload(PayloadModel):
    """Anything that can carry an inline address (officeholder, shareholder)."""
    address: Optional[AddressPayload] = None

    @field_validator("address", mode="before")
    @classmethod
    def address_from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"address": value}
        return value

    def address_data(self) -> Optional[Dict[str, Any]]:
        if self.address is None:
            return None
        return self.address.model_dump(exclude_none=True)


class OfficeholderPayload(PersonPayload):
    type: Optional[str] = None
    name: Optional[str] = None
    dob: Optional[str] = None
    place_of_birth: Optional[str] = None
    director_id: Optional[str] = None
    document_number: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_secretary(self) -> bool:
        return (self.type or "").strip().lower() == "secretary"


class ShareholderPayload(PersonPayload):
    name: Optional[str] = None
    acn: Optional[str] = None
    share_class: Optional[str] = Field(default=None, alias="class")
    number_held: Count = None
    percentage_held: Amount = None
    document_number: Optional[str] = None
    beneficially_owned: Optional[bool] = None
    fully_paid: Optional[bool] = None
    jointly_held: Optional[bool] = None
    status: Optional[str] = None


class ShareStructurePayload(PayloadModel):
    class_code: Optional[str] = None
    class_description: Optional[str] = None
    status: Optional[str] = None
    share_count: Count = None
    amount_paid: Amount = None
    amount_due: Amount = None
    document_number: Optional[str] = None


class ExtractDocumentPayload(PayloadModel):
    type: Optional[str] = None
    description: LooseText = None
    document_number: Optional[str] = None
    form_code: Optional[str] = None
    page_count: Count = None
    effective_at: Optional[str] = None
    processed_at: Optional[str] = None
    received_at: Optional[str] = None


class AsicExtractPayload(PayloadModel):
    id: Optional[str] = None
    type: Optional[str] = None
    addresses: List[AddressPayload] = Field(default_factory=list)
    contact_addresses: List[AddressPayload] = Field(default_factory=list)
    directors: List[OfficeholderPayload] = Field(default_factory=list)
    secretaries: List[OfficeholderPayload] = Field(default_factory=list)
    shareholders: List[ShareholderPayload] = Field(default_factory=list)
    share_structures: List[ShareStructurePayload] = Field(default_factory=list)
    documents: List[ExtractDocumentPayload] = Field(default_factory=list)


class EntityPayload(PayloadModel):
    abn: Optional[str] = None
    acn: Optional[str] = None
    is_arbn: Optional[bool] = None
    abr_gst_registration_date: Optional[str] = None
    abr_gst_status: Optional[str] = None
    abr_postcode: Optional[str] = None
    abr_state: Optional[str] = None
    abr_status: Optional[str] = None
    asic_date_of_registration: Optional[str] = None
    asic_status: Optional[str] = None
    document_number: Optional[str] = None
    former_names: List[Any] = Field(default_factory=list)
    name: Optional[str] = None
    reference: Optional[str] = None
    irf: Optional[str] = None
    review_date: Optional[str] = None
    name_start_at: Optional[str] = None
    registered_in: Optional[str] = None
    organisation_type: Optional[str] = None
    disclosing_entity: Optional[str] = None
    organisation_class: Optional[str] = None
    organisation_sub_class: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("former_names", mode="before")
    @classmethod
    def single_former_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class TaxDebtPayload(PayloadModel):
    date: Optional[str] = None
    amount: Amount = None
    status: Optional[str] = None
    ato_added_at: Optional[str] = None
    ato_updated_at: Optional[str] = None


# ---------------------------------------------------------------------------
# Courts and insolvencies
# ---------------------------------------------------------------------------

class CasePartyPayload(PayloadModel):
    name: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    offence: LooseText = None
    plea: Optional[str] = None
    representative_firm: Optional[str] = None
    representative_name: Optional[str] = None
    address: LooseText = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    abn: Optional[str] = None
    acn: Optional[str] = None


class CaseHearingPayload(PayloadModel):
    datetime: Optional[str] = None
    officer: Optional[str] = None
    court_room: Optional[str] = None
    court_name: Optional[str] = None
    court_phone: Optional[str] = None
    court_address: LooseText = None
    court_suburb: Optional[str] = None
    type: Optional[str] = None
    list_no: Optional[str] = None
    outcome: LooseText = None


class CaseDocumentPayload(PayloadModel):
    datetime: Optional[str] = None
    title: LooseText = None
    description: LooseText = None
    filed_by: Optional[str] = None


class CaseApplicationPayload(PayloadModel):
    title: LooseText = None
    type: Optional[str] = None
    status: Optional[str] = None
    date_filed: Optional[str] = None
    date_finalised: Optional[str] = None


class CaseJudgmentPayload(PayloadModel):
    uuid: Optional[str] = None
    unique_id: Optional[str] = None
    number: Optional[str] = None
    case_number: Optional[str] = None
    title: LooseText = None
    date: Optional[str] = None
    url: Optional[str] = None
    state: Optional[str] = None
    court: Optional[str] = None
    court_type: Optional[str] = None
    location: Optional[str] = None
    officer: Optional[str] = None
    case_type: Optional[str] = None
    catchwords: LooseText = None
    legislation: LooseText = None
    cases_cited: LooseText = None
    result: LooseText = None
    division: Optional[str] = None
    registry: Optional[str] = None
    national_practice_area: Optional[str] = None
    sub_area: Optional[str] = None
    category: Optional[str] = None
    number_of_paragraphs: Count = None
    date_of_last_submission: Optional[str] = None
    orders: LooseText = None
    reasons_for_judgment: LooseText = None
    prior_decisions: List[Any] = Field(default_factory=list)


class CasePayload(PayloadModel):
    uuid: Optional[str] = None
    type: Optional[str] = None
    notification_time: Optional[str] = None
    court_name: Optional[str] = None
    state: Optional[str] = None
    court_type: Optional[str] = None
    case_type: Optional[str] = None
    case_number: Optional[str] = None
    jurisdiction: Optional[str] = None
    suburb: Optional[str] = None
    next_hearing_date: Optional[str] = None
    case_name: LooseText = None
    url: Optional[str] = None
    total_parties: Count = None
    total_documents: Count = None
    total_hearings: Count = None
    timezone: Optional[str] = None
    internal_reference: Optional[str] = None
    name: Optional[str] = None
    other_names: LooseText = None
    insolvency_risk_factor: Amount = None
    party_role: Optional[str] = None
    most_recent_event: Optional[str] = None
    match_on: LooseText = None
    parties: List[CasePartyPayload] = Field(default_factory=list)
    hearings: List[CaseHearingPayload] = Field(default_factory=list)
    documents: List[CaseDocumentPayload] = Field(default_factory=list)
    applications: List[CaseApplicationPayload] = Field(default_factory=list)
    judgments: List[CaseJudgmentPayload] = Field(default_factory=list)


class InsolvencyPartyPayload(PayloadModel):
    name: Optional[str] = None
    acn: Optional[str] = None
    url: Optional[str] = None


class InsolvencyPayload(PayloadModel):
    uuid: Optional[str] = None
    type: Optional[str] = None
    notification_time: Optional[str] = None
    court_name: Optional[str] = None
    case_type: Optional[str] = None
    case_number: Optional[str] = None
    asic_notice_id: Optional[str] = None
    case_name: LooseText = None
    total_parties: Count = None
    internal_reference: Optional[str] = None
    name: Optional[str] = None
    other_names: LooseText = None
    insolvency_risk_factor: Amount = None
    match_on: LooseText = None
    parties: List[InsolvencyPartyPayload] = Field(default_factory=list)


def _keyed_entries(value: Any) -> Any:
    """``{uuid: record}`` maps (or plain lists) become ``[(uuid, record), ...]``."""
    if isinstance(value, dict):
        return [(str(key), record) for key, record in value.items()]
    if isinstance(value, list):
        entries = []
        for index, record in enumerate(value):
            key = record.get("uuid") if isinstance(record, dict) else None
            entries.append((str(key or index), record))
        return entries
    return value


class StandardReportPayload(PayloadModel):
    entity: Optional[Dict[str, Any]] = None
    asic_extracts: List[Any] = Field(default_factory=list)
    cases: List[Tuple[str, Any]] = Field(default_factory=list)
    insolvencies: List[Tuple[str, Any]] = Field(default_factory=list)
    current_tax_debt: Optional[Dict[str, Any]] = None

    @field_validator("cases", "insolvencies", mode="before")
    @classmethod
    def keyed_entries(cls, value: Any) -> Any:
        return _keyed_entries(value)


# ---------------------------------------------------------------------------
# PPSR (camelCase upstream)
# ---------------------------------------------------------------------------

class PpsrModel(PayloadModel):
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PpsrPartyPayload(PpsrModel):
    organisation_name: Optional[str] = None
    organisation_number: Optional[str] = None
    organisation_number_type: Optional[str] = None
    individual_given_names: Optional[str] = None
    individual_family_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_party(cls, data: Any) -> Any:
        # Parties may arrive as {"organisation": {...}} / {"individual": {...}}.
        if not isinstance(data, dict):
            return data
        flat = dict(data)
        organisation = data.get("organisation")
        if isinstance(organisation, dict):
            flat.setdefault("organisationName", organisation.get("organisationName") or organisation.get("name"))
            flat.setdefault("organisationNumber", organisation.get("organisationNumber") or organisation.get("number"))
            flat.setdefault("organisationNumberType", organisation.get("organisationNumberType") or organisation.get("numberType"))
        individual = data.get("individual")
        if isinstance(individual, dict):
            flat.setdefault("individualGivenNames", individual.get("givenNames"))
            flat.setdefault("individualFamilyName", individual.get("familyName"))
            flat.setdefault("individualDateOfBirth", individual.get("dateOfBirth"))
        return flat


class GrantorPayload(PpsrPartyPayload):
    grantor_type: Optional[str] = None
    individual_date_of_birth: Optional[str] = None


class SecuredPartyPayload(PpsrPartyPayload):
    secured_party_type: Optional[str] = None


class AddressForServicePayload(PpsrModel):
    addressee: Optional[str] = None
    email_address: Optional[str] = None
    fax_number: Optional[str] = None
    mailing_address: Optional[Dict[str, Any]] = None
    physical_address: Optional[Dict[str, Any]] = None


class PpsrItemPayload(PpsrModel):
    search_criteria_id: Optional[str] = None
    registration_number: Optional[str] = None
    registration_kind: Optional[str] = None
    registration_start_time: Optional[str] = None
    registration_end_time: Optional[str] = None
    registration_change_time: Optional[str] = None
    collateral_class_type: Optional[str] = None
    collateral_type: Optional[str] = None
    collateral_description: LooseText = None
    proceeds_claimed_description: LooseText = None
    are_proceeds_claimed: Optional[bool] = None
    is_pmsi: Optional[bool] = None
    is_inventory: Optional[bool] = None
    is_transitional: Optional[bool] = None
    is_migrated: Optional[bool] = None
    giving_of_notice_identifier: Optional[str] = None
    security_interest_attached_time: Optional[str] = None
    address_for_service: Optional[AddressForServicePayload] = None
    grantors: List[GrantorPayload] = Field(default_factory=list)
    secured_parties: List[SecuredPartyPayload] = Field(default_factory=list)


class SearchCriteriaSummaryPayload(PpsrModel):
    search_criteria_id: Optional[str] = None
    search_number: Optional[str] = None
    search_date_time: Optional[str] = None
    search_type: Optional[str] = None
    grantor_type: Optional[str] = None
    organisation_number: Optional[str] = None
    organisation_number_type: Optional[str] = None
    organisation_name: Optional[str] = None
    result_count: Count = None


class PpsrResource(PpsrModel):
    items: List[Any] = Field(default_factory=list)
    search_criteria_summaries: List[Any] = Field(default_factory=list)


class PpsrReportPayload(PpsrModel):
    ppsr_cloud_id: str
    resource: PpsrResource = Field(default_factory=PpsrResource)


ReportPayload = Union[StandardReportPayload, PpsrReportPayload]


def parse_report_payload(raw: Any) -> ReportPayload:
    """Pick the payload shape: anything carrying a PPSR cloud id is a PPSR search."""
    if not isinstance(raw, dict):
        raise ValueError(f"Report payload must be a JSON object, got {type(raw).__name__}")
    if raw.get("ppsrCloudId"):
        return PpsrReportPayload.model_validate(raw)
    return StandardReportPayload.model_validate(raw)
