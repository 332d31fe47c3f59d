"""
Database models for durable campaign state.

The analytics core keeps no derived state; the only rows written are the
campaign progress record (one per profile) and the append-only campaign
history log.
"""
from sqlalchemy import Column, String, Integer, DateTime, Date, JSON, Index, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CampaignProgressState(Base):
    """Current bracket progress of a profile's campaign (mutable, one row per profile)."""
    __tablename__ = "campaign_progress"

    id = Column(String(36), primary_key=True)
    profile_id = Column(String(64), unique=True, nullable=False, index=True)
    campaign_number = Column(Integer, nullable=False, default=1)
    current_stage = Column(String(20), nullable=False, default="group")  # CampaignStage value
    start_date = Column(Date, nullable=True)  # None until the campaign's first match
    group_matches_played = Column(Integer, nullable=False, default=0)  # 0..3
    group_points = Column(Integer, nullable=False, default=0)
    completed_stages = Column(JSON, nullable=False, default=list)  # ["group", "round_of_16", ...]
    champion_of_campaign = Column(Integer, nullable=True)  # Set on a FINAL win; freezes the campaign
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class CampaignHistoryRecord(Base):
    """Archived campaign attempt. Rows are only ever inserted."""
    __tablename__ = "campaign_history"

    id = Column(String(36), primary_key=True)
    profile_id = Column(String(64), nullable=False, index=True)
    campaign_number = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    final_stage = Column(String(20), nullable=False)  # CampaignStage value or "eliminated_group"
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint('profile_id', 'campaign_number', name='uq_campaign_history_profile_campaign'),
        Index('ix_campaign_history_profile_created', 'profile_id', 'created_at'),
    )
