"""
Campaign progression.

- state_machine: pure fold of matches into bracket progress
- campaign_service: persisted ledger (import it directly, it needs the repositories)
"""
from pitchlog.services.campaign.state_machine import (
    CampaignEvent,
    CampaignHistoryEntry,
    CampaignProgress,
    CampaignStage,
    CampaignStep,
    FinalStage,
    GroupStage,
    apply_match,
    clear_champion_campaign,
    replay_campaign,
)

__all__ = [
    "CampaignEvent",
    "CampaignHistoryEntry",
    "CampaignProgress",
    "CampaignStage",
    "CampaignStep",
    "FinalStage",
    "GroupStage",
    "apply_match",
    "clear_champion_campaign",
    "replay_campaign",
]
