"""
Campaign History Repository.

The history table is an append-only log of archived campaigns. Entries are
never updated; the only bulk delete is the full wipe used before a rebuild.
"""
import uuid
from datetime import datetime, UTC
from typing import List

from pitchlog.models import CampaignHistoryRecord
from pitchlog.repositories.base import BaseRepository
from pitchlog.services.campaign.state_machine import CampaignHistoryEntry, FinalStage


class CampaignHistoryRepository(BaseRepository[CampaignHistoryRecord]):
    """Repository for archived campaigns."""

    def __init__(self, db):
        """Initialize the history repository."""
        super().__init__(CampaignHistoryRecord, db)

    def append(self, profile_id: str, entry: CampaignHistoryEntry) -> CampaignHistoryRecord:
        """Add an archived campaign to the log (not committed)."""
        return self.create(
            id=str(uuid.uuid4()),
            profile_id=profile_id,
            campaign_number=entry.campaign_number,
            start_date=entry.start_date,
            end_date=entry.end_date,
            final_stage=entry.final_stage.value,
            created_at=datetime.now(UTC).replace(tzinfo=None),
        )

    def list_for_profile(self, profile_id: str) -> List[CampaignHistoryEntry]:
        """
        Archived campaigns of a profile, oldest first.

        Campaign numbers only grow, so they give the archive order.
        """
        rows = self.query().filter(
            CampaignHistoryRecord.profile_id == profile_id
        ).order_by(CampaignHistoryRecord.campaign_number).all()

        return [
            CampaignHistoryEntry(
                campaign_number=row.campaign_number,
                start_date=row.start_date,
                end_date=row.end_date,
                final_stage=FinalStage(row.final_stage),
            )
            for row in rows
        ]

    def delete_for_profile(self, profile_id: str) -> int:
        return self.delete_where(profile_id=profile_id)
