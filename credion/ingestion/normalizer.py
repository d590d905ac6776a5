"""Decomposes an upstream report document into the relational schema.

Each extract, case, insolvency and PPSR search is its own aggregate: it is
parsed and written in a separate unit, and a failure is logged, recorded on
the summary and skipped. Entity and tax debt are singletons and their
failures propagate.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from credion.asic.models import (
    AddressCategory,
    Address,
    AsicExtract,
    Director,
    Entity,
    ExtractDocument,
    Shareholder,
    ShareStructure,
    TaxDebt,
)
from credion.courts.models import (
    Case,
    CaseApplication,
    CaseDocument,
    CaseHearing,
    CaseJudgment,
    CaseParty,
    Insolvency,
    InsolvencyParty,
)
from credion.ppsr.models import AddressForService, Grantor, PpsrItem, PpsrSearch, SecuredParty
from credion.ingestion.gateway import PersistenceGateway
from credion.ingestion.payloads import (
    AddressPayload,
    AsicExtractPayload,
    CasePayload,
    EntityPayload,
    InsolvencyPayload,
    PpsrItemPayload,
    PpsrReportPayload,
    SearchCriteriaSummaryPayload,
    StandardReportPayload,
    TaxDebtPayload,
    parse_report_payload,
)

logger = logging.getLogger(__name__)


@dataclass
class AggregateFailure:
    kind: str
    source_id: Optional[str]
    error: str


@dataclass
class IngestionSummary:
    report_id: int
    payload_kind: Optional[str] = None
    skipped: bool = False
    counts: Counter = field(default_factory=Counter)
    failures: List[AggregateFailure] = field(default_factory=list)


def _address_row(extract_id: int, address: AddressPayload, category: AddressCategory, entity: Optional[str] = None) -> Address:
    return Address(
        asic_extract_id=extract_id,
        category=category.value,
        external_id=address.id,
        type=address.type,
        entity=entity if entity is not None else address.entity,
        address=address.address,
        care_of=address.care_of,
        address_1=address.address_1,
        address_2=address.address_2,
        suburb=address.suburb,
        state=address.state,
        postcode=address.postcode,
        country=address.country,
        status=address.status,
        start_date=address.start_date,
        end_date=address.end_date,
        document_number=address.document_number,
    )


def _source_id(raw: Any, key: str, fallback: str) -> str:
    if isinstance(raw, dict) and raw.get(key):
        return str(raw[key])
    return fallback


class ReportIngestionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.gateway = PersistenceGateway(db)

    async def ingest(self, report_id: int, raw_payload: Dict[str, Any]) -> IngestionSummary:
        """Store every section of ``raw_payload`` under ``report_id``.

        Safe to call repeatedly: a report that has already been ingested is
        left untouched and the summary comes back with ``skipped=True``.
        """
        summary = IngestionSummary(report_id=report_id)
        if await self.is_ingested(report_id):
            logger.info(f"Report {report_id} already ingested; skipping")
            summary.skipped = True
            return summary

        payload = parse_report_payload(raw_payload)
        summary.payload_kind = "ppsr" if isinstance(payload, PpsrReportPayload) else "standard"

        if not await self.gateway.claim(report_id, summary.payload_kind):
            logger.info(f"Report {report_id} is being ingested by another request; skipping")
            summary.skipped = True
            return summary

        logger.info(f"Ingesting {summary.payload_kind} payload for report {report_id}")
        try:
            if isinstance(payload, PpsrReportPayload):
                await self._ingest_ppsr(report_id, payload, summary)
            else:
                await self._ingest_standard(report_id, payload, summary)
        except BaseException:
            logger.error(f"Ingestion of report {report_id} aborted; discarding partial rows and the claim")
            await self._discard(report_id)
            raise

        await self.gateway.complete_claim(report_id, len(summary.failures))
        logger.info(
            f"Finished ingesting report {report_id}: {dict(summary.counts)}, "
            f"{len(summary.failures)} aggregate(s) failed"
        )
        return summary

    async def is_ingested(self, report_id: int) -> bool:
        if await self.gateway.has_claim(report_id):
            return True
        for model in (AsicExtract, PpsrSearch):
            result = await self.db.execute(select(model.id).where(model.report_id == report_id).limit(1))
            if result.first() is not None:
                return True
        return False

    async def _discard(self, report_id: int):
        """Remove whatever an aborted run committed so a retry starts clean."""
        await self.db.rollback()
        async with self.gateway.unit(f"discard report {report_id}"):
            for model in (AsicExtract, Case, Insolvency, PpsrSearch, Entity, TaxDebt):
                result = await self.db.execute(select(model).where(model.report_id == report_id))
                for row in result.scalars().all():
                    await self.db.delete(row)
            await self.gateway.release_claim(report_id)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    async def _singleton(self, kind: str, summary: IngestionSummary, store, *args):
        counts = Counter()
        async with self.gateway.unit(kind):
            await store(*args, counts)
        summary.counts.update(counts)

    async def _isolated(self, kind: str, source_id: str, summary: IngestionSummary, store, *args):
        counts = Counter()
        try:
            async with self.gateway.unit(f"{kind} {source_id}"):
                await store(*args, counts)
        except Exception as e:
            logger.exception(f"Failed to ingest {kind} {source_id} for report {summary.report_id}; continuing")
            summary.failures.append(AggregateFailure(kind=kind, source_id=source_id, error=str(e)))
            return
        summary.counts.update(counts)

    async def _add(self, counts: Counter, row):
        await self.gateway.add(row)
        counts[row.__tablename__] += 1
        return row

    async def _add_all(self, counts: Counter, rows: Sequence):
        for row in rows:
            counts[row.__tablename__] += 1
        await self.gateway.add_all(rows)

    # ------------------------------------------------------------------
    # Standard (Alares) payloads
    # ------------------------------------------------------------------

    async def _ingest_standard(self, report_id: int, payload: StandardReportPayload, summary: IngestionSummary):
        if payload.entity is not None:
            await self._singleton("entity", summary, self._store_entity, report_id, payload.entity)

        for index, raw in enumerate(payload.asic_extracts):
            source_id = _source_id(raw, "id", f"extract#{index}")
            await self._isolated("asic_extract", source_id, summary, self._store_asic_extract, report_id, raw)

        for case_uuid, raw in payload.cases:
            await self._isolated("case", case_uuid, summary, self._store_case, report_id, case_uuid, raw)

        for insolvency_uuid, raw in payload.insolvencies:
            await self._isolated(
                "insolvency", insolvency_uuid, summary, self._store_insolvency, report_id, insolvency_uuid, raw
            )

        if payload.current_tax_debt is not None:
            await self._singleton("tax_debt", summary, self._store_tax_debt, report_id, payload.current_tax_debt)

    async def _store_entity(self, report_id: int, raw: Dict[str, Any], counts: Counter):
        data = EntityPayload.model_validate(raw)
        await self._add(counts, Entity(
            report_id=report_id,
            abn=data.abn,
            acn=data.acn,
            is_arbn=bool(data.is_arbn),
            abr_gst_registration_date=data.abr_gst_registration_date,
            abr_gst_status=data.abr_gst_status,
            abr_postcode=data.abr_postcode,
            abr_state=data.abr_state,
            abr_status=data.abr_status,
            asic_date_of_registration=data.asic_date_of_registration,
            asic_status=data.asic_status,
            document_number=data.document_number,
            former_names=list(data.former_names),
            name=data.name,
            reference=data.reference,
            irf=data.irf,
            review_date=data.review_date,
            name_start_at=data.name_start_at,
            registered_in=data.registered_in,
            organisation_type=data.organisation_type,
            disclosing_entity=data.disclosing_entity,
            organisation_class=data.organisation_class,
            organisation_sub_class=data.organisation_sub_class,
            entity_created_at=data.created_at,
        ))

    async def _store_tax_debt(self, report_id: int, raw: Dict[str, Any], counts: Counter):
        data = TaxDebtPayload.model_validate(raw)
        await self._add(counts, TaxDebt(
            report_id=report_id,
            date=data.date,
            amount=data.amount,
            status=data.status,
            ato_added_at=data.ato_added_at,
            ato_updated_at=data.ato_updated_at,
        ))

    async def _store_asic_extract(self, report_id: int, raw: Any, counts: Counter):
        data = AsicExtractPayload.model_validate(raw)
        extract = await self._add(counts, AsicExtract(report_id=report_id, external_id=data.id, type=data.type))
        extract_id = extract.id

        addresses = [_address_row(extract_id, a, AddressCategory.COMPANY) for a in data.addresses]
        addresses += [_address_row(extract_id, a, AddressCategory.CONTACT) for a in data.contact_addresses]

        officeholders = [(d, d.is_secretary) for d in data.directors]
        officeholders += [(s, True) for s in data.secretaries]
        directors = []
        for person, is_secretary in officeholders:
            directors.append(Director(
                asic_extract_id=extract_id,
                type=person.type or ("Secretary" if is_secretary else None),
                name=person.name,
                dob=person.dob,
                place_of_birth=person.place_of_birth,
                director_id_external=person.director_id,
                document_number=person.document_number,
                start_date=person.start_date,
                end_date=person.end_date,
                status=person.status,
                address_data=person.address_data(),
            ))
            if person.address is not None:
                # No person key upstream: the copy is attributable by role only.
                if is_secretary:
                    addresses.append(_address_row(extract_id, person.address, AddressCategory.SECRETARY, "Secretary"))
                else:
                    addresses.append(_address_row(extract_id, person.address, AddressCategory.DIRECTOR, "Director"))

        shareholders = []
        for holder in data.shareholders:
            shareholders.append(Shareholder(
                asic_extract_id=extract_id,
                name=holder.name,
                acn=holder.acn,
                share_class=holder.share_class,
                number_held=holder.number_held,
                percentage_held=holder.percentage_held,
                document_number=holder.document_number,
                beneficially_owned=holder.beneficially_owned,
                fully_paid=holder.fully_paid,
                jointly_held=holder.jointly_held,
                status=holder.status,
                address_data=holder.address_data(),
            ))
            if holder.address is not None:
                addresses.append(_address_row(extract_id, holder.address, AddressCategory.SHAREHOLDER, "Shareholder"))

        share_structures = [
            ShareStructure(
                asic_extract_id=extract_id,
                class_code=s.class_code,
                class_description=s.class_description,
                status=s.status,
                share_count=s.share_count,
                amount_paid=s.amount_paid,
                amount_due=s.amount_due,
                document_number=s.document_number,
            )
            for s in data.share_structures
        ]
        documents = [
            ExtractDocument(
                asic_extract_id=extract_id,
                type=d.type,
                description=d.description,
                document_number=d.document_number,
                form_code=d.form_code,
                page_count=d.page_count,
                effective_at=d.effective_at,
                processed_at=d.processed_at,
                received_at=d.received_at,
            )
            for d in data.documents
        ]

        await self._add_all(counts, addresses + directors + shareholders + share_structures + documents)
        logger.info(
            f"ASIC extract {data.id} stored as {extract_id}: {len(addresses)} addresses, "
            f"{len(directors)} officeholders, {len(shareholders)} shareholders"
        )

    # ------------------------------------------------------------------
    # Courts and insolvencies
    # ------------------------------------------------------------------

    async def _store_case(self, report_id: int, case_uuid: str, raw: Any, counts: Counter):
        data = CasePayload.model_validate(raw)
        case = await self._add(counts, Case(
            report_id=report_id,
            uuid=data.uuid or case_uuid,
            type=data.type,
            notification_time=data.notification_time,
            court_name=data.court_name,
            state=data.state,
            court_type=data.court_type,
            case_type=data.case_type,
            case_number=data.case_number,
            jurisdiction=data.jurisdiction,
            suburb=data.suburb,
            next_hearing_date=data.next_hearing_date,
            case_name=data.case_name,
            url=data.url,
            total_parties=data.total_parties,
            total_documents=data.total_documents,
            total_hearings=data.total_hearings,
            timezone=data.timezone,
            internal_reference=data.internal_reference,
            name=data.name,
            other_names=data.other_names,
            insolvency_risk_factor=data.insolvency_risk_factor,
            party_role=data.party_role,
            most_recent_event=data.most_recent_event,
            match_on=data.match_on,
        ))
        case_id = case.id

        rows = [
            CaseParty(
                case_id=case_id,
                name=p.name,
                type=p.type,
                role=p.role,
                offence=p.offence,
                plea=p.plea,
                representative_firm=p.representative_firm,
                representative_name=p.representative_name,
                address=p.address,
                phone=p.phone,
                fax=p.fax,
                abn=p.abn,
                acn=p.acn,
            )
            for p in data.parties
        ]
        rows += [
            CaseHearing(
                case_id=case_id,
                datetime=h.datetime,
                officer=h.officer,
                court_room=h.court_room,
                court_name=h.court_name,
                court_phone=h.court_phone,
                court_address=h.court_address,
                court_suburb=h.court_suburb,
                type=h.type,
                list_no=h.list_no,
                outcome=h.outcome,
            )
            for h in data.hearings
        ]
        rows += [
            CaseDocument(case_id=case_id, datetime=d.datetime, title=d.title, description=d.description, filed_by=d.filed_by)
            for d in data.documents
        ]
        rows += [
            CaseApplication(
                case_id=case_id,
                title=a.title,
                type=a.type,
                status=a.status,
                date_filed=a.date_filed,
                date_finalised=a.date_finalised,
            )
            for a in data.applications
        ]
        rows += [
            CaseJudgment(
                case_id=case_id,
                uuid=j.uuid,
                unique_id=j.unique_id,
                number=j.number,
                case_number=j.case_number,
                title=j.title,
                date=j.date,
                url=j.url,
                state=j.state,
                court=j.court,
                court_type=j.court_type,
                location=j.location,
                officer=j.officer,
                case_type=j.case_type,
                catchwords=j.catchwords,
                legislation=j.legislation,
                cases_cited=j.cases_cited,
                result=j.result,
                division=j.division,
                registry_name=j.registry,
                national_practice_area=j.national_practice_area,
                sub_area=j.sub_area,
                category=j.category,
                number_of_paragraphs=j.number_of_paragraphs,
                date_of_last_submission=j.date_of_last_submission,
                orders=j.orders,
                reasons_for_judgment=j.reasons_for_judgment,
                prior_decisions=list(j.prior_decisions),
            )
            for j in data.judgments
        ]
        await self._add_all(counts, rows)
        logger.info(f"Case {case.uuid} stored as {case_id} with {len(rows)} child rows")

    async def _store_insolvency(self, report_id: int, insolvency_uuid: str, raw: Any, counts: Counter):
        data = InsolvencyPayload.model_validate(raw)
        insolvency = await self._add(counts, Insolvency(
            report_id=report_id,
            uuid=data.uuid or insolvency_uuid,
            type=data.type,
            notification_time=data.notification_time,
            court_name=data.court_name,
            case_type=data.case_type,
            case_number=data.case_number,
            asic_notice_id=data.asic_notice_id,
            case_name=data.case_name,
            total_parties=data.total_parties,
            internal_reference=data.internal_reference,
            name=data.name,
            other_names=data.other_names,
            insolvency_risk_factor=data.insolvency_risk_factor,
            match_on=data.match_on,
        ))
        await self._add_all(counts, [
            InsolvencyParty(insolvency_id=insolvency.id, name=p.name, acn=p.acn, url=p.url)
            for p in data.parties
        ])
        logger.info(f"Insolvency {insolvency.uuid} stored as {insolvency.id} with {len(data.parties)} parties")

    # ------------------------------------------------------------------
    # PPSR payloads
    # ------------------------------------------------------------------

    async def _ingest_ppsr(self, report_id: int, payload: PpsrReportPayload, summary: IngestionSummary):
        groups = group_ppsr_items(payload.resource.search_criteria_summaries, payload.resource.items)
        for index, (criteria, items) in enumerate(groups):
            source_id = _source_id(criteria, "searchCriteriaId", f"{payload.ppsr_cloud_id}#{index}")
            await self._isolated(
                "ppsr_search", source_id, summary,
                self._store_ppsr_search, report_id, payload.ppsr_cloud_id, criteria, items,
            )

    async def _store_ppsr_search(
        self,
        report_id: int,
        ppsr_cloud_id: str,
        criteria: Optional[Dict[str, Any]],
        items: List[Any],
        counts: Counter,
    ):
        summary = SearchCriteriaSummaryPayload.model_validate(criteria or {})
        search = await self._add(counts, PpsrSearch(
            report_id=report_id,
            ppsr_cloud_id=ppsr_cloud_id,
            search_criteria_id=summary.search_criteria_id,
            search_number=summary.search_number,
            search_date_time=summary.search_date_time,
            search_type=summary.search_type,
            grantor_type=summary.grantor_type,
            organisation_number=summary.organisation_number,
            organisation_number_type=summary.organisation_number_type,
            organisation_name=summary.organisation_name,
            result_count=summary.result_count,
            criteria=criteria,
        ))

        for raw_item in items:
            data = PpsrItemPayload.model_validate(raw_item)
            item = await self._add(counts, PpsrItem(
                ppsr_search_id=search.id,
                registration_number=data.registration_number,
                registration_kind=data.registration_kind,
                registration_start_time=data.registration_start_time,
                registration_end_time=data.registration_end_time,
                registration_change_time=data.registration_change_time,
                collateral_class_type=data.collateral_class_type,
                collateral_type=data.collateral_type,
                collateral_description=data.collateral_description,
                proceeds_claimed_description=data.proceeds_claimed_description,
                are_proceeds_claimed=data.are_proceeds_claimed,
                is_pmsi=data.is_pmsi,
                is_inventory=data.is_inventory,
                is_transitional=data.is_transitional,
                is_migrated=data.is_migrated,
                giving_of_notice_identifier=data.giving_of_notice_identifier,
                security_interest_attached_time=data.security_interest_attached_time,
            ))
            children = []
            service = data.address_for_service
            if service is not None:
                children.append(AddressForService(
                    ppsr_item_id=item.id,
                    addressee=service.addressee,
                    email_address=service.email_address,
                    fax_number=service.fax_number,
                    mailing_address=service.mailing_address,
                    physical_address=service.physical_address,
                ))
            children += [
                Grantor(
                    ppsr_item_id=item.id,
                    grantor_type=g.grantor_type,
                    organisation_name=g.organisation_name,
                    organisation_number=g.organisation_number,
                    organisation_number_type=g.organisation_number_type,
                    individual_given_names=g.individual_given_names,
                    individual_family_name=g.individual_family_name,
                    individual_date_of_birth=g.individual_date_of_birth,
                )
                for g in data.grantors
            ]
            children += [
                SecuredParty(
                    ppsr_item_id=item.id,
                    secured_party_type=p.secured_party_type,
                    organisation_name=p.organisation_name,
                    organisation_number=p.organisation_number,
                    organisation_number_type=p.organisation_number_type,
                    individual_given_names=p.individual_given_names,
                    individual_family_name=p.individual_family_name,
                )
                for p in data.secured_parties
            ]
            await self._add_all(counts, children)

        logger.info(f"PPSR search {summary.search_criteria_id or ppsr_cloud_id} stored with {len(items)} registrations")


def group_ppsr_items(
    summaries: List[Any], items: List[Any]
) -> List[Tuple[Optional[Dict[str, Any]], List[Any]]]:
    """Pair each search-criteria summary with the registrations it returned.

    With no summaries, any items go under one unnamed search. With one
    summary it owns every item. With several, items are matched on
    ``searchCriteriaId`` and anything unmatched goes to the first summary.
    """
    criteria = [s if isinstance(s, dict) else {} for s in summaries]
    if not criteria:
        return [(None, list(items))] if items else []
    if len(criteria) == 1:
        return [(criteria[0], list(items))]

    groups: List[Tuple[Optional[Dict[str, Any]], List[Any]]] = [(c, []) for c in criteria]
    by_id = {str(c["searchCriteriaId"]): i for i, c in enumerate(criteria) if c.get("searchCriteriaId")}
    for item in items:
        key = item.get("searchCriteriaId") if isinstance(item, dict) else None
        index = by_id.get(str(key), 0) if key is not None else 0
        groups[index][1].append(item)
    return groups
