"""API routes for buyer matching."""

import csv
import io
import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from app.config import settings
from app.models import CompanyProfile, Deal, MatchResult
from app.models.database import DealNotFoundError, DealRepository, get_session
from app.score import BuyerMatchScorer

logger = logging.getLogger(__name__)

router = APIRouter()


class MatchRequest(BaseModel):
    """Request body for stateless matching."""

    model_config = ConfigDict(populate_by_name=True)

    deal: Deal
    company_profiles: list[CompanyProfile] = Field(
        default_factory=list, alias="companyProfiles"
    )


def get_db() -> Iterator[Session]:
    """Yield a database session for one request."""
    session = get_session()
    try:
        yield session
    finally:
        session.close()


def _matches_for_seller(
    deal_id: str,
    seller_id: Optional[str],
    session: Session,
) -> list[MatchResult]:
    """Load a seller's deal and rank the stored buyer profiles against it."""
    if not seller_id:
        raise HTTPException(status_code=401, detail="User not authenticated")

    repo = DealRepository(session)
    try:
        deal = repo.get_deal(deal_id)
    except DealNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if deal.seller_id != seller_id:
        logger.warning(f"Seller {seller_id} requested matches for deal {deal_id} they do not own")
        raise HTTPException(
            status_code=403,
            detail="You don't have permission to access this deal's matching buyers",
        )

    scorer = BuyerMatchScorer()
    return scorer.match(deal, repo.list_candidate_profiles(deal))


@router.get("/deals/{deal_id}/matching-buyers", response_model=list[MatchResult])
async def get_matching_buyers(
    deal_id: str,
    x_seller_id: Optional[str] = Header(default=None),
    session: Session = Depends(get_db),
):
    """Get buyer profiles matching a deal, best match first."""
    return _matches_for_seller(deal_id, x_seller_id, session)


@router.get("/deals/{deal_id}/matching-buyers/export")
async def export_matching_buyers(
    deal_id: str,
    limit: int = Query(default=settings.default_export_limit, ge=1),
    x_seller_id: Optional[str] = Header(default=None),
    session: Session = Depends(get_db),
):
    """Export matching buyers as CSV."""
    matches = _matches_for_seller(deal_id, x_seller_id, session)

    output = io.StringIO()
    writer = csv.writer(output)

    # Header
    writer.writerow([
        "Rank", "Company", "Buyer", "Buyer Email", "Match Score",
        "Match Percentage", "Matched Criteria",
    ])

    # Data rows
    for rank, m in enumerate(matches[:limit], 1):
        writer.writerow([
            rank,
            m.company_name,
            m.buyer_name or "",
            m.buyer_email or "",
            m.total_match_score,
            m.match_percentage,
            "; ".join(m.matched_criteria()),
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=matching_buyers_{deal_id[:8]}.csv"},
    )


@router.post("/match", response_model=list[MatchResult])
async def match_profiles(request: MatchRequest):
    """Rank the supplied profiles against the supplied deal without touching storage."""
    scorer = BuyerMatchScorer()
    return scorer.match(request.deal, request.company_profiles)
