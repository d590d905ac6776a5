from enum import Enum
from sqlalchemy import Column, String, Integer, Boolean, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from credion.database import Base
from credion.shared.models import IntegerIdMixin, JSONType


class AddressCategory(str, Enum):
    COMPANY = "company"
    CONTACT = "contact"
    DIRECTOR = "director"
    SECRETARY = "secretary"
    SHAREHOLDER = "shareholder"


class Entity(Base, IntegerIdMixin):
    """Business profile attached 1:1 to a report."""
    __tablename__ = "entities"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, unique=True)
    abn = Column(String(32), nullable=True)
    acn = Column(String(32), nullable=True)
    is_arbn = Column(Boolean, default=False, nullable=False)
    abr_gst_registration_date = Column(String(64), nullable=True)
    abr_gst_status = Column(String, nullable=True)
    abr_postcode = Column(String, nullable=True)
    abr_state = Column(String, nullable=True)
    abr_status = Column(String, nullable=True)
    asic_date_of_registration = Column(String(64), nullable=True)
    asic_status = Column(String, nullable=True)
    document_number = Column(String, nullable=True)
    former_names = Column(JSONType, nullable=False, default=list)
    name = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    irf = Column(String, nullable=True)
    review_date = Column(String(64), nullable=True)
    name_start_at = Column(String(64), nullable=True)
    registered_in = Column(String, nullable=True)
    organisation_type = Column(String, nullable=True)
    disclosing_entity = Column(String, nullable=True)
    organisation_class = Column(String, nullable=True)
    organisation_sub_class = Column(String, nullable=True)
    entity_created_at = Column(String(64), nullable=True)

    report = relationship("Report", back_populates="entity")


class TaxDebt(Base, IntegerIdMixin):
    """Current ATO debt snapshot, at most one per report."""
    __tablename__ = "tax_debts"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, unique=True)
    date = Column(String(64), nullable=True)
    amount = Column(Numeric(15, 2), nullable=True)
    status = Column(String, nullable=True)
    ato_added_at = Column(String(64), nullable=True)
    ato_updated_at = Column(String(64), nullable=True)

    report = relationship("Report", back_populates="tax_debt")


class AsicExtract(Base, IntegerIdMixin):
    __tablename__ = "asic_extracts"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    external_id = Column(String, nullable=True)
    type = Column(String, nullable=True)  # current | historical

    report = relationship("Report", back_populates="asic_extracts")
    addresses = relationship("Address", back_populates="asic_extract", cascade="all, delete-orphan")
    directors = relationship("Director", back_populates="asic_extract", cascade="all, delete-orphan")
    shareholders = relationship("Shareholder", back_populates="asic_extract", cascade="all, delete-orphan")
    share_structures = relationship("ShareStructure", back_populates="asic_extract", cascade="all, delete-orphan")
    documents = relationship("ExtractDocument", back_populates="asic_extract", cascade="all, delete-orphan")


class Address(Base, IntegerIdMixin):
    """Flat address row.

    Addresses that arrive inline on directors, secretaries and shareholders are
    copied here with the role as category; there is no key back to the person.
    """
    __tablename__ = "addresses"

    asic_extract_id = Column(ForeignKey("asic_extracts.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(32), nullable=False, index=True)
    external_id = Column(String, nullable=True)
    type = Column(String, nullable=True)
    entity = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    care_of = Column(String, nullable=True)
    address_1 = Column(String, nullable=True)
    address_2 = Column(String, nullable=True)
    suburb = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postcode = Column(String, nullable=True)
    country = Column(String, nullable=True)
    status = Column(String, nullable=True)
    start_date = Column(String(64), nullable=True)
    end_date = Column(String(64), nullable=True)
    document_number = Column(String, nullable=True)

    asic_extract = relationship("AsicExtract", back_populates="addresses")


class Director(Base, IntegerIdMixin):
    """Director or secretary office holder, told apart by ``type``."""
    __tablename__ = "directors"

    asic_extract_id = Column(ForeignKey("asic_extracts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=True)
    name = Column(String, nullable=True, index=True)
    dob = Column(String(64), nullable=True)
    place_of_birth = Column(String, nullable=True)
    director_id_external = Column(String, nullable=True)
    document_number = Column(String, nullable=True)
    start_date = Column(String(64), nullable=True)
    end_date = Column(String(64), nullable=True)
    status = Column(String, nullable=True)
    address_data = Column(JSONType, nullable=True)

    asic_extract = relationship("AsicExtract", back_populates="directors")


class Shareholder(Base, IntegerIdMixin):
    __tablename__ = "shareholders"

    asic_extract_id = Column(ForeignKey("asic_extracts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=True)
    acn = Column(String(32), nullable=True)
    share_class = Column("class", String, nullable=True)
    number_held = Column(Integer, nullable=True)
    percentage_held = Column(Numeric(5, 2), nullable=True)
    document_number = Column(String, nullable=True)
    beneficially_owned = Column(Boolean, nullable=True)
    fully_paid = Column(Boolean, nullable=True)
    jointly_held = Column(Boolean, nullable=True)
    status = Column(String, nullable=True)
    address_data = Column(JSONType, nullable=True)

    asic_extract = relationship("AsicExtract", back_populates="shareholders")


class ShareStructure(Base, IntegerIdMixin):
    __tablename__ = "share_structures"

    asic_extract_id = Column(ForeignKey("asic_extracts.id", ondelete="CASCADE"), nullable=False, index=True)
    class_code = Column(String, nullable=True)
    class_description = Column(String, nullable=True)
    status = Column(String, nullable=True)
    share_count = Column(Integer, nullable=True)
    amount_paid = Column(Numeric(15, 2), nullable=True)
    amount_due = Column(Numeric(15, 2), nullable=True)
    document_number = Column(String, nullable=True)

    asic_extract = relationship("AsicExtract", back_populates="share_structures")


class ExtractDocument(Base, IntegerIdMixin):
    """Document lodged with ASIC, as listed on an extract."""
    __tablename__ = "extract_documents"

    asic_extract_id = Column(ForeignKey("asic_extracts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    document_number = Column(String, nullable=True)
    form_code = Column(String, nullable=True)
    page_count = Column(Integer, nullable=True)
    effective_at = Column(String(64), nullable=True)
    processed_at = Column(String(64), nullable=True)
    received_at = Column(String(64), nullable=True)

    asic_extract = relationship("AsicExtract", back_populates="documents")
