"""
Campaign repository module.

Repositories for the two persisted campaign tables.
"""

from pitchlog.repositories.campaign.progress_repository import CampaignProgressRepository
from pitchlog.repositories.campaign.history_repository import CampaignHistoryRepository

__all__ = [
    "CampaignProgressRepository",
    "CampaignHistoryRepository",
]
