"""
Campaign Progress Repository.

Maps the single per-profile progress row to the immutable CampaignProgress
value and back, so the campaign service never touches columns directly.

Usage:
    repo = CampaignProgressRepository(db)
    progress = repo.load_progress("default")
    repo.save_progress("default", next_progress)
    repo.save()
"""
import uuid
from datetime import datetime, UTC
from typing import Optional

from pitchlog.models import CampaignProgressState
from pitchlog.repositories.base import BaseRepository
from pitchlog.services.campaign.state_machine import CampaignProgress, CampaignStage, GroupStage


class CampaignProgressRepository(BaseRepository[CampaignProgressState]):
    """Repository for the current campaign progress of a profile."""

    def __init__(self, db):
        """Initialize the progress repository."""
        super().__init__(CampaignProgressState, db)

    def find_by_profile(self, profile_id: str) -> Optional[CampaignProgressState]:
        return self.filter_by_first(profile_id=profile_id)

    def load_progress(self, profile_id: str) -> Optional[CampaignProgress]:
        """
        Read the stored progress as a domain value.

        Returns:
            CampaignProgress, or None if the profile has never recorded a match
        """
        row = self.find_by_profile(profile_id)
        if row is None:
            return None
        return CampaignProgress(
            campaign_number=row.campaign_number,
            current_stage=CampaignStage(row.current_stage),
            start_date=row.start_date,
            group_stage=GroupStage(
                matches_played=row.group_matches_played,
                points=row.group_points,
            ),
            completed_stages=tuple(CampaignStage(s) for s in (row.completed_stages or [])),
            champion_of_campaign=row.champion_of_campaign,
        )

    def save_progress(self, profile_id: str, progress: CampaignProgress) -> CampaignProgressState:
        """
        Insert or overwrite the profile's progress row (not committed).

        Args:
            profile_id: Owner of the campaign
            progress: Progress to store

        Returns:
            The pending row
        """
        now = datetime.now(UTC).replace(tzinfo=None)
        row = self.find_by_profile(profile_id)
        if row is None:
            row = self.create(
                id=str(uuid.uuid4()),
                profile_id=profile_id,
                created_at=now,
            )

        row.campaign_number = progress.campaign_number
        row.current_stage = progress.current_stage.value
        row.start_date = progress.start_date
        row.group_matches_played = progress.group_stage.matches_played
        row.group_points = progress.group_stage.points
        row.completed_stages = [s.value for s in progress.completed_stages]
        row.champion_of_campaign = progress.champion_of_campaign
        row.updated_at = now
        return row

    def delete_progress(self, profile_id: str) -> int:
        return self.delete_where(profile_id=profile_id)
