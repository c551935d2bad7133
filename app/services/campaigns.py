# app/services/campaigns.py
#
# Campaign write path and lookups.
# Every create and update validates the full record and recomputes
# cost per lead and ROI before the row is written.

import logging
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.services.calculations import compute_campaign_metrics
from app.services.validation import validate_campaign
from models import Campaign

logger = logging.getLogger(__name__)

CAMPAIGN_FIELDS = (
    "name",
    "platform",
    "start_date",
    "end_date",
    "budget",
    "leads_generated",
    "conversions",
    "status",
)


def prepare_campaign(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a campaign record and add its derived fields.

    Returns the normalized record with cost_per_lead and roi set.
    """
    record = validate_campaign(data)
    metrics = compute_campaign_metrics(
        record["budget"], record["leads_generated"], record["conversions"]
    )
    record["cost_per_lead"] = metrics.cost_per_lead
    record["roi"] = metrics.roi
    return record


def _apply(campaign: Campaign, record: Dict[str, Any]) -> None:
    for field in CAMPAIGN_FIELDS + ("cost_per_lead", "roi"):
        setattr(campaign, field, record[field])


def list_campaigns(
    db: Session,
    status: str | None = None,
    platform: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> List[Campaign]:
    """Campaigns matching the filters (date range applies to start_date), newest first."""
    query = db.query(Campaign)
    if status:
        query = query.filter(Campaign.status == status)
    if platform:
        query = query.filter(Campaign.platform == platform)
    if start is not None:
        query = query.filter(Campaign.start_date >= start)
    if end is not None:
        query = query.filter(Campaign.start_date < end)
    return query.order_by(Campaign.created_at.desc(), Campaign.id.desc()).all()


def get_campaign(db: Session, campaign_id: int) -> Campaign:
    campaign = db.get(Campaign, campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign")
    return campaign


def create_campaign(db: Session, data: Dict[str, Any]) -> Campaign:
    record = prepare_campaign(data)
    campaign = Campaign()
    _apply(campaign, record)

    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    logger.info(
        "Created campaign #%s %r (cost/lead=%.2f, roi=%.2f)",
        campaign.id, campaign.name, campaign.cost_per_lead, campaign.roi,
    )
    return campaign


def update_campaign(db: Session, campaign_id: int, changes: Dict[str, Any]) -> Campaign:
    campaign = get_campaign(db, campaign_id)

    current = {field: getattr(campaign, field) for field in CAMPAIGN_FIELDS}
    record = prepare_campaign({**current, **changes})
    _apply(campaign, record)

    db.commit()
    db.refresh(campaign)
    logger.info("Updated campaign #%s (cost/lead=%.2f, roi=%.2f)", campaign.id, campaign.cost_per_lead, campaign.roi)
    return campaign


def delete_campaign(db: Session, campaign_id: int) -> None:
    campaign = get_campaign(db, campaign_id)
    db.delete(campaign)
    db.commit()
    logger.info("Deleted campaign #%s", campaign_id)
