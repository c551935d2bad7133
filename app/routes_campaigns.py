# routes_campaigns.py
"""
Routes for marketing campaigns: CRUD plus campaign statistics.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.deps import get_db, ok, ok_list, ok_message
from app.schemas import CampaignCreate, CampaignRead, CampaignUpdate, dump
from app.services import campaigns as service
from app.services import reports
from app.services.periods import parse_range

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


@router.get("/stats/overview")
def campaign_stats(db: Session = Depends(get_db)):
    return ok(reports.campaign_stats(db))


@router.get("")
def list_campaigns(
    status: str | None = Query(None),
    platform: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    start, end = parse_range(start_date, end_date)
    rows = service.list_campaigns(db, status=status, platform=platform, start=start, end=end)
    return ok_list([dump(CampaignRead.model_validate(c)) for c in rows])


@router.get("/{campaign_id}")
def get_campaign(campaign_id: int, db: Session = Depends(get_db)):
    return ok(dump(CampaignRead.model_validate(service.get_campaign(db, campaign_id))))


@router.post("", status_code=201)
def create_campaign(payload: CampaignCreate, db: Session = Depends(get_db)):
    campaign = service.create_campaign(db, payload.model_dump())
    return ok(dump(CampaignRead.model_validate(campaign)))


@router.put("/{campaign_id}")
def update_campaign(campaign_id: int, payload: CampaignUpdate, db: Session = Depends(get_db)):
    campaign = service.update_campaign(db, campaign_id, payload.model_dump(exclude_unset=True))
    return ok(dump(CampaignRead.model_validate(campaign)))


@router.delete("/{campaign_id}")
def delete_campaign(campaign_id: int, db: Session = Depends(get_db)):
    service.delete_campaign(db, campaign_id)
    return ok_message("Campaign deleted successfully")
