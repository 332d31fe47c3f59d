"""
Persistence models.

Usage:
    from pitchlog.models import Base, CampaignProgressState, CampaignHistoryRecord
"""
from pitchlog.models.models import (
    Base,
    CampaignProgressState,
    CampaignHistoryRecord,
)

__all__ = [
    "Base",
    "CampaignProgressState",
    "CampaignHistoryRecord",
]
