"""
Service for the persisted campaign ledger.

Wraps the pure state machine with storage: load the profile's progress,
fold the new match, write the next progress and any archived campaign in
one transaction.

Writes are serialized with a process-wide lock so two concurrent match
creations cannot both fold against the same stored progress.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pitchlog.core.config import settings
from pitchlog.repositories.campaign import CampaignHistoryRepository, CampaignProgressRepository
from pitchlog.services.analytics.types import MatchRecord
from pitchlog.services.campaign.state_machine import (
    CampaignEvent,
    CampaignHistoryEntry,
    CampaignProgress,
    CampaignStep,
    apply_match,
    clear_champion_campaign,
    replay_campaign,
)

logger = logging.getLogger(__name__)

_campaign_write_lock = threading.Lock()


class NotChampionError(Exception):
    """Raised when clearing a campaign that has not been won."""


@dataclass(frozen=True)
class CampaignState:
    progress: CampaignProgress
    history: Tuple[CampaignHistoryEntry, ...] = ()


class CampaignService:
    """Service for recording matches against a profile's campaign."""

    def __init__(self, db: Session, profile_id: Optional[str] = None):
        self.db = db
        self.profile_id = profile_id or settings.PROFILE_ID
        self.progress_repo = CampaignProgressRepository(db)
        self.history_repo = CampaignHistoryRepository(db)

    def get_state(self) -> CampaignState:
        """Current progress (a fresh campaign 1 if nothing is stored) and the history log."""
        progress = self.progress_repo.load_progress(self.profile_id) or CampaignProgress.fresh()
        history = tuple(self.history_repo.list_for_profile(self.profile_id))
        return CampaignState(progress=progress, history=history)

    def record_match(self, match: MatchRecord) -> CampaignStep:
        """
        Fold a newly created match into the stored campaign.

        Args:
            match: The match that was just created

        Returns:
            The step applied (next progress, event and archived entry if any)

        Raises:
            SQLAlchemyError: If the write fails; the transaction is rolled back
        """
        with _campaign_write_lock:
            current = self.progress_repo.load_progress(self.profile_id)
            step = apply_match(current, match)

            if step.event == CampaignEvent.IGNORED:
                logger.debug(
                    f"Campaign {step.progress.campaign_number} already won, match {match.id} ignored"
                )
                return step

            try:
                self.progress_repo.save_progress(self.profile_id, step.progress)
                if step.archived is not None:
                    self.history_repo.append(self.profile_id, step.archived)
                self.progress_repo.save()
            except SQLAlchemyError as e:
                self.progress_repo.rollback()
                logger.error(f"Failed to record match {match.id} in campaign: {e}")
                raise

        self._log_step(step)
        return step

    def clear_champion(self) -> CampaignProgress:
        """
        Start the next campaign after a title.

        Raises:
            NotChampionError: If the current campaign has not been won
        """
        with _campaign_write_lock:
            current = self.progress_repo.load_progress(self.profile_id)
            if current is None or not current.is_champion:
                raise NotChampionError("Current campaign has not been won")

            next_progress = clear_champion_campaign(current)
            try:
                self.progress_repo.save_progress(self.profile_id, next_progress)
                self.progress_repo.save()
            except SQLAlchemyError as e:
                self.progress_repo.rollback()
                logger.error(f"Failed to clear champion campaign {current.campaign_number}: {e}")
                raise

        logger.info(
            f"Champion campaign {current.campaign_number} cleared, "
            f"starting campaign {next_progress.campaign_number}"
        )
        return next_progress

    def rebuild(self, matches: Iterable[MatchRecord]) -> CampaignState:
        """
        Discard the stored campaign and replay it from the full match list.

        Matches must be given in creation order. Used after matches are
        edited or deleted, since the ledger itself never rewinds.
        """
        matches = list(matches)
        progress, history = replay_campaign(matches)
        progress = progress or CampaignProgress.fresh()

        with _campaign_write_lock:
            try:
                self.history_repo.delete_for_profile(self.profile_id)
                self.progress_repo.delete_progress(self.profile_id)
                self.progress_repo.flush()
                for entry in history:
                    self.history_repo.append(self.profile_id, entry)
                self.progress_repo.save_progress(self.profile_id, progress)
                self.progress_repo.save()
            except SQLAlchemyError as e:
                self.progress_repo.rollback()
                logger.error(f"Failed to rebuild campaign for profile {self.profile_id}: {e}")
                raise

        logger.info(
            f"Rebuilt campaign from {len(matches)} matches: "
            f"campaign {progress.campaign_number}, {len(history)} archived"
        )
        return CampaignState(progress=progress, history=history)

    def _log_step(self, step: CampaignStep) -> None:
        progress = step.progress
        if step.event == CampaignEvent.QUALIFIED:
            logger.info(
                f"Campaign {progress.campaign_number} qualified from the group "
                f"with {progress.group_stage.points} points"
            )
        elif step.event == CampaignEvent.ADVANCED:
            logger.info(f"Campaign {progress.campaign_number} advanced to {progress.current_stage.value}")
        elif step.event == CampaignEvent.CHAMPION:
            logger.info(f"Campaign {progress.campaign_number} won the final")
        elif step.event == CampaignEvent.ELIMINATED:
            if step.archived is not None:
                logger.info(
                    f"Campaign {step.archived.campaign_number} eliminated at "
                    f"{step.archived.final_stage.value}"
                )
        else:
            logger.debug(
                f"Campaign {progress.campaign_number} group stage: "
                f"{progress.group_stage.matches_played} played, {progress.group_stage.points} points"
            )
