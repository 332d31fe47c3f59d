"""
Campaign routes: the persisted World Cup campaign of a profile.

Matches are folded in the order they are posted here, which must be the
order they were created in the match log.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pitchlog.api.schemas import MatchIn, MatchListRequest
from pitchlog.core.database import get_db
from pitchlog.services.campaign.campaign_service import CampaignService, NotChampionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/campaign", tags=["campaign"])


def _state_payload(state) -> dict:
    return {
        "progress": jsonable_encoder(state.progress),
        "history": jsonable_encoder(state.history),
    }


@router.get("")
def get_campaign(
    profile_id: Optional[str] = Query(None, description="Profile (defaults to PROFILE_ID)"),
    db: Session = Depends(get_db)
):
    """
    Current campaign progress and the archived campaigns.

    A profile with no recorded match reports a fresh campaign 1.
    """
    try:
        service = CampaignService(db, profile_id)
        return _state_payload(service.get_state())
    except SQLAlchemyError as e:
        logger.error(f"Error loading campaign: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/matches")
def record_campaign_match(
    match: MatchIn,
    profile_id: Optional[str] = Query(None, description="Profile (defaults to PROFILE_ID)"),
    db: Session = Depends(get_db)
):
    """
    Fold a newly created match into the campaign.

    Returns:
        - event: what the match did (group_match, qualified, advanced, eliminated, champion, ignored)
        - progress: campaign progress after the match
        - archived: the campaign archived by this match, if any
    """
    try:
        service = CampaignService(db, profile_id)
        step = service.record_match(match.to_domain())
    except SQLAlchemyError as e:
        logger.error(f"Error recording match {match.id} in campaign: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "event": step.event.value,
        "progress": jsonable_encoder(step.progress),
        "archived": jsonable_encoder(step.archived),
    }


@router.post("/clear-champion")
def clear_champion_campaign(
    profile_id: Optional[str] = Query(None, description="Profile (defaults to PROFILE_ID)"),
    db: Session = Depends(get_db)
):
    """Start the next campaign after a title. 409 if the current campaign is not won."""
    try:
        service = CampaignService(db, profile_id)
        progress = service.clear_champion()
    except NotChampionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error clearing champion campaign: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"progress": jsonable_encoder(progress)}


@router.post("/rebuild")
def rebuild_campaign(
    request: MatchListRequest,
    profile_id: Optional[str] = Query(None, description="Profile (defaults to PROFILE_ID)"),
    db: Session = Depends(get_db)
):
    """
    Replace the stored campaign with a full replay of the match list.

    Use after matches are edited or deleted; slicing filters are ignored.
    """
    matches = [m.to_domain() for m in request.matches]
    try:
        service = CampaignService(db, profile_id)
        state = service.rebuild(matches)
    except SQLAlchemyError as e:
        logger.error(f"Error rebuilding campaign: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return _state_payload(state)
