"""
Repository layer for data access.

Usage:
    from pitchlog.repositories.campaign import CampaignProgressRepository

    repo = CampaignProgressRepository(db)
    progress = repo.load_progress("default")
"""

from pitchlog.repositories.base import BaseRepository

__all__ = ["BaseRepository"]
