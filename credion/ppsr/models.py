from sqlalchemy import Column, String, Integer, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from credion.database import Base
from credion.shared.models import IntegerIdMixin, JSONType


class PpsrSearch(Base, IntegerIdMixin):
    """One grantor search run against the PPSR, with its criteria summary."""
    __tablename__ = "ppsr_searches"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    ppsr_cloud_id = Column(String(64), nullable=True, index=True)
    search_criteria_id = Column(String(64), nullable=True)
    search_number = Column(String(64), nullable=True)
    search_date_time = Column(String(64), nullable=True)
    search_type = Column(String, nullable=True)
    grantor_type = Column(String, nullable=True)
    organisation_number = Column(String(32), nullable=True)
    organisation_number_type = Column(String(16), nullable=True)
    organisation_name = Column(String, nullable=True)
    result_count = Column(Integer, nullable=True)
    criteria = Column(JSONType, nullable=True)

    report = relationship("Report", back_populates="ppsr_searches")
    items = relationship("PpsrItem", back_populates="search", cascade="all, delete-orphan")


class PpsrItem(Base, IntegerIdMixin):
    """A registration (security interest) returned by a search."""
    __tablename__ = "ppsr_items"

    ppsr_search_id = Column(ForeignKey("ppsr_searches.id", ondelete="CASCADE"), nullable=False, index=True)
    registration_number = Column(String(64), nullable=True, index=True)
    registration_kind = Column(String, nullable=True)
    registration_start_time = Column(String(64), nullable=True)
    registration_end_time = Column(String(64), nullable=True)
    registration_change_time = Column(String(64), nullable=True)
    collateral_class_type = Column(String, nullable=True)
    collateral_type = Column(String, nullable=True)
    collateral_description = Column(Text, nullable=True)
    proceeds_claimed_description = Column(Text, nullable=True)
    are_proceeds_claimed = Column(Boolean, nullable=True)
    is_pmsi = Column(Boolean, nullable=True)
    is_inventory = Column(Boolean, nullable=True)
    is_transitional = Column(Boolean, nullable=True)
    is_migrated = Column(Boolean, nullable=True)
    giving_of_notice_identifier = Column(String, nullable=True)
    security_interest_attached_time = Column(String(64), nullable=True)

    search = relationship("PpsrSearch", back_populates="items")
    address_for_service = relationship(
        "AddressForService", back_populates="item", uselist=False, cascade="all, delete-orphan"
    )
    grantors = relationship("Grantor", back_populates="item", cascade="all, delete-orphan")
    secured_parties = relationship("SecuredParty", back_populates="item", cascade="all, delete-orphan")


class AddressForService(Base, IntegerIdMixin):
    __tablename__ = "ppsr_addresses_for_service"

    ppsr_item_id = Column(ForeignKey("ppsr_items.id", ondelete="CASCADE"), nullable=False, unique=True)
    addressee = Column(String, nullable=True)
    email_address = Column(String, nullable=True)
    fax_number = Column(String, nullable=True)
    mailing_address = Column(JSONType, nullable=True)
    physical_address = Column(JSONType, nullable=True)

    item = relationship("PpsrItem", back_populates="address_for_service")


class Grantor(Base, IntegerIdMixin):
    __tablename__ = "ppsr_grantors"

    ppsr_item_id = Column(ForeignKey("ppsr_items.id", ondelete="CASCADE"), nullable=False, index=True)
    grantor_type = Column(String, nullable=True)
    organisation_name = Column(String, nullable=True)
    organisation_number = Column(String(32), nullable=True)
    organisation_number_type = Column(String(16), nullable=True)
    individual_given_names = Column(String, nullable=True)
    individual_family_name = Column(String, nullable=True)
    individual_date_of_birth = Column(String(64), nullable=True)

    item = relationship("PpsrItem", back_populates="grantors")


class SecuredParty(Base, IntegerIdMixin):
    __tablename__ = "ppsr_secured_parties"

    ppsr_item_id = Column(ForeignKey("ppsr_items.id", ondelete="CASCADE"), nullable=False, index=True)
    secured_party_type = Column(String, nullable=True)
    organisation_name = Column(String, nullable=True)
    organisation_number = Column(String(32), nullable=True)
    organisation_number_type = Column(String(16), nullable=True)
    individual_given_names = Column(String, nullable=True)
    individual_family_name = Column(String, nullable=True)

    item = relationship("PpsrItem", back_populates="secured_parties")
