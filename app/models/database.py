"""SQLAlchemy database models, setup and the deal/profile repository."""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Iterator, Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    DateTime,
    Text,
    ForeignKey,
    Index,
    create_engine,
    or_,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from app.config import settings
from app.geography import expand
from app.models.deal import Deal, RewardLevel
from app.models.profile import CompanyProfile

logger = logging.getLogger(__name__)

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


def _load_json(value: Optional[str]) -> dict:
    return json.loads(value) if value else {}


class DealNotFoundError(LookupError):
    """Raised when a deal id does not resolve to a stored deal."""

    def __init__(self, deal_id: str):
        super().__init__(f"Deal with ID {deal_id} not found")
        self.deal_id = deal_id


class DBBuyer(Base):
    """Stored buyer account (only the fields match results display)."""

    __tablename__ = "buyers"

    id = Column(String(36), primary_key=True, default=_new_id)
    full_name = Column(String(500))
    email = Column(String(500), index=True)
    company_name = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)

    profiles = relationship("DBCompanyProfile", back_populates="buyer")


class DBDeal(Base):
    """Stored deal listing."""

    __tablename__ = "deals"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(500), default="")
    seller_id = Column(String(36), index=True)

    industry_sector = Column(String(255), default="")
    geography_selection = Column(String(255), default="")
    years_in_business = Column(Integer)
    deals_completed_last_5_years = Column(Integer)
    visibility = Column(String(20))
    reward_level = Column(String(20), default=RewardLevel.SEED.value)

    financial_details = Column(Text)  # JSON dict
    business_model = Column(Text)  # JSON dict
    management_preferences = Column(Text)  # JSON dict

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_model(self) -> Deal:
        return Deal.model_validate({
            "_id": self.id,
            "title": self.title,
            "seller": self.seller_id,
            "industrySector": self.industry_sector,
            "geographySelection": self.geography_selection,
            "yearsInBusiness": self.years_in_business,
            "dealsCompletedLast5Years": self.deals_completed_last_5_years,
            "visibility": self.visibility,
            "rewardLevel": self.reward_level,
            "financialDetails": _load_json(self.financial_details),
            "businessModel": _load_json(self.business_model),
            "managementPreferences": _load_json(self.management_preferences),
        })


class DBCompanyProfile(Base):
    """Stored buyer company profile."""

    __tablename__ = "company_profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    buyer_id = Column(String(36), ForeignKey("buyers.id"))
    company_name = Column(String(500), default="")
    company_type = Column(String(255))
    capital_entity = Column(String(255))
    deals_completed_last_5_years = Column(Integer)
    average_deal_size = Column(Float)

    # Denormalised from preferences so the candidate query can skip opted-out buyers
    stop_sending_deals = Column(Boolean, default=False)

    preferences = Column(Text)  # JSON dict
    target_criteria = Column(Text)  # JSON dict

    created_at = Column(DateTime, default=datetime.utcnow)

    buyer = relationship("DBBuyer", back_populates="profiles")

    __table_args__ = (
        Index("idx_profile_buyer", "buyer_id"),
        Index("idx_profile_stop_sending", "stop_sending_deals"),
    )

    def get_target_criteria(self) -> dict:
        return _load_json(self.target_criteria)

    def get_preferences(self) -> dict:
        return _load_json(self.preferences)

    def to_model(self, buyer: Optional[DBBuyer] = None) -> CompanyProfile:
        buyer = buyer or self.buyer
        return CompanyProfile.model_validate({
            "_id": self.id,
            "companyName": self.company_name,
            "companyType": self.company_type,
            "capitalEntity": self.capital_entity,
            "dealsCompletedLast5Years": self.deals_completed_last_5_years,
            "averageDealSize": self.average_deal_size,
            "preferences": self.get_preferences(),
            "targetCriteria": self.get_target_criteria(),
            "buyer": {
                "_id": self.buyer_id,
                "fullName": buyer.full_name if buyer else None,
                "email": buyer.email if buyer else None,
            },
        })


class DealRepository:
    """Read and write deals and company profiles."""

    def __init__(self, session: Session):
        self.session = session

    def get_deal(self, deal_id: str) -> Deal:
        """Fetch a deal, raising DealNotFoundError when it does not exist."""
        record = self.session.get(DBDeal, deal_id)
        if record is None:
            raise DealNotFoundError(deal_id)
        return record.to_model()

    def save_buyer(
        self,
        buyer_id: Optional[str] = None,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> str:
        """Insert or update a buyer, returning its id."""
        record = self.session.get(DBBuyer, buyer_id) if buyer_id else None
        if record is None:
            record = DBBuyer(id=buyer_id or _new_id())
            self.session.add(record)

        record.full_name = full_name
        record.email = email
        record.company_name = company_name
        self.session.flush()
        return record.id

    def save_deal(self, deal: Deal) -> str:
        """Insert or update a deal, returning its id."""
        record = self.session.get(DBDeal, deal.id) if deal.id else None
        if record is None:
            record = DBDeal(id=deal.id or _new_id())
            self.session.add(record)

        record.title = deal.title
        record.seller_id = deal.seller_id
        record.industry_sector = deal.industry_sector
        record.geography_selection = deal.geography_selection
        record.years_in_business = deal.years_in_business
        record.deals_completed_last_5_years = deal.deals_completed_last_5_years
        record.visibility = deal.visibility.value if deal.visibility else None
        record.reward_level = deal.reward_level.value
        record.financial_details = deal.financial_details.model_dump_json(by_alias=True)
        record.business_model = deal.business_model.model_dump_json(by_alias=True)
        record.management_preferences = deal.management_preferences.model_dump_json(by_alias=True)
        self.session.flush()
        return record.id

    def save_profile(self, profile: CompanyProfile) -> str:
        """Insert or update a company profile, returning its id."""
        record = self.session.get(DBCompanyProfile, profile.id) if profile.id else None
        if record is None:
            record = DBCompanyProfile(id=profile.id or _new_id())
            self.session.add(record)

        record.buyer_id = profile.buyer.id
        record.company_name = profile.company_name
        record.company_type = profile.company_type
        record.capital_entity = profile.capital_entity
        record.deals_completed_last_5_years = profile.deals_completed_last_5_years
        record.average_deal_size = profile.average_deal_size
        record.stop_sending_deals = profile.preferences.stop_sending_deals
        record.preferences = profile.preferences.model_dump_json(by_alias=True)
        record.target_criteria = profile.target_criteria.model_dump_json(by_alias=True)
        self.session.flush()
        return record.id

    def list_candidate_profiles(
        self,
        deal: Deal,
        prefilter: bool = True,
        batch_size: Optional[int] = None,
    ) -> Iterator[CompanyProfile]:
        """
        Stream candidate profiles for a deal.

        Args:
            deal: The deal buyers are matched against
            prefilter: Skip profiles that cannot pass the mandatory checks
                (opt-outs, geography, industry) before yielding them
            batch_size: Rows fetched per round-trip

        Yields:
            Company profiles joined with their buyer's name and email
        """
        batch_size = batch_size or settings.candidate_batch_size
        query = (
            self.session.query(DBCompanyProfile, DBBuyer)
            .outerjoin(DBBuyer, DBCompanyProfile.buyer_id == DBBuyer.id)
            .order_by(DBCompanyProfile.created_at, DBCompanyProfile.id)
        )
        if prefilter:
            query = query.filter(
                or_(
                    DBCompanyProfile.stop_sending_deals.is_(False),
                    DBCompanyProfile.stop_sending_deals.is_(None),
                )
            )

        expanded = expand(deal.geography_selection)
        skip_marketed = deal.reward_level == RewardLevel.SEED

        for record, buyer in query.yield_per(batch_size):
            try:
                if prefilter and not self._may_match(record, deal, expanded, skip_marketed):
                    continue
                profile = record.to_model(buyer)
            except (ValueError, TypeError) as e:
                # pydantic's ValidationError and json's JSONDecodeError are ValueErrors
                logger.warning(f"Skipping unreadable company profile {record.id}: {e}")
                continue
            yield profile

    @staticmethod
    def _may_match(
        record: DBCompanyProfile,
        deal: Deal,
        expanded: frozenset[str],
        skip_marketed: bool,
    ) -> bool:
        criteria = record.get_target_criteria()
        if skip_marketed and record.get_preferences().get("doNotSendMarketedDeals"):
            return False
        if not expanded.intersection(criteria.get("countries") or []):
            return False
        return deal.industry_sector in (criteria.get("industrySectors") or [])


def load_fixtures(session: Session, data: dict[str, Any]) -> dict[str, int]:
    """Load buyers, deals and company profiles from document-shaped JSON."""
    repo = DealRepository(session)
    counts = {"buyers": 0, "deals": 0, "companyProfiles": 0}

    for buyer in data.get("buyers", []):
        repo.save_buyer(
            buyer_id=buyer.get("_id"),
            full_name=buyer.get("fullName"),
            email=buyer.get("email"),
            company_name=buyer.get("companyName"),
        )
        counts["buyers"] += 1

    for deal in data.get("deals", []):
        repo.save_deal(Deal.model_validate(deal))
        counts["deals"] += 1

    for profile in data.get("companyProfiles", []):
        repo.save_profile(CompanyProfile.model_validate(profile))
        counts["companyProfiles"] += 1

    session.commit()
    logger.info(
        f"Loaded {counts['buyers']} buyers, {counts['deals']} deals, "
        f"{counts['companyProfiles']} company profiles"
    )
    return counts


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.database_url
    engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


def get_session() -> Session:
    """Get a new database session."""
    SessionLocal = init_db()
    return SessionLocal()
