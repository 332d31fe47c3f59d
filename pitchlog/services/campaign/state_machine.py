"""
Campaign progression state machine.

A campaign is one run through a World Cup style bracket:

    GROUP -> ROUND_OF_16 -> QUARTERS -> SEMIS -> FINAL -> champion

Each newly created match is folded into the progress exactly once, in
creation order (not date order). The fold is pure: apply_match() returns
the next progress plus the history entry to archive, if any, and the
caller persists both.

Rules:
- champion set: every further match is ignored until clear_champion_campaign()
- start_date None: the match's date becomes the campaign start
- GROUP: 3 matches, WIN +3, DRAW +1; 4+ points qualify, otherwise the
  campaign is archived as eliminated_group
- ROUND_OF_16 / QUARTERS / SEMIS: a WIN advances, anything else archives
  the campaign at the current stage
- FINAL: a WIN crowns the campaign and archives it immediately; anything
  else archives it at FINAL
- after any elimination a fresh GROUP starts under campaign_number + 1
  with no start date
"""
import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Tuple

from pitchlog.services.analytics.types import MatchRecord, MatchResult

logger = logging.getLogger(__name__)

GROUP_MATCHES = 3
QUALIFYING_POINTS = 4
GROUP_POINTS = {
    MatchResult.WIN: 3,
    MatchResult.DRAW: 1,
    MatchResult.LOSS: 0,
}


class CampaignStage(str, Enum):
    GROUP = "group"
    ROUND_OF_16 = "round_of_16"
    QUARTERS = "quarter_finals"
    SEMIS = "semi_finals"
    FINAL = "final"


KNOCKOUT_ORDER: Tuple[CampaignStage, ...] = (
    CampaignStage.ROUND_OF_16,
    CampaignStage.QUARTERS,
    CampaignStage.SEMIS,
    CampaignStage.FINAL,
)


class FinalStage(str, Enum):
    """Furthest stage of an archived campaign (FINAL covers both title and final defeat)."""
    ELIMINATED_GROUP = "eliminated_group"
    ROUND_OF_16 = "round_of_16"
    QUARTERS = "quarter_finals"
    SEMIS = "semi_finals"
    FINAL = "final"


class CampaignEvent(str, Enum):
    """What a single match did to the campaign."""
    IGNORED = "ignored"  # Champion frozen
    GROUP_MATCH = "group_match"
    QUALIFIED = "qualified"
    ADVANCED = "advanced"
    ELIMINATED = "eliminated"
    CHAMPION = "champion"


@dataclass(frozen=True)
class GroupStage:
    matches_played: int = 0  # 0..3
    points: int = 0


@dataclass(frozen=True)
class CampaignProgress:
    campaign_number: int = 1
    current_stage: CampaignStage = CampaignStage.GROUP
    start_date: Optional[date] = None
    group_stage: GroupStage = GroupStage()
    completed_stages: Tuple[CampaignStage, ...] = ()
    champion_of_campaign: Optional[int] = None

    @classmethod
    def fresh(cls, campaign_number: int = 1) -> "CampaignProgress":
        """A new campaign waiting for its first match."""
        return cls(campaign_number=campaign_number)

    @property
    def is_champion(self) -> bool:
        return self.champion_of_campaign is not None


@dataclass(frozen=True)
class CampaignHistoryEntry:
    """Archived campaign. Never modified once created."""
    campaign_number: int
    start_date: date
    end_date: date
    final_stage: FinalStage


@dataclass(frozen=True)
class CampaignStep:
    """Result of folding one match: the next progress and what to archive."""
    progress: CampaignProgress
    event: CampaignEvent
    archived: Optional[CampaignHistoryEntry] = None


def _archive(progress: CampaignProgress, final_stage: FinalStage, end_date: date) -> CampaignHistoryEntry:
    # apply_match fills start_date before anything is archived
    return CampaignHistoryEntry(
        campaign_number=progress.campaign_number,
        start_date=progress.start_date,
        end_date=end_date,
        final_stage=final_stage,
    )


def _eliminate(progress: CampaignProgress, final_stage: FinalStage, end_date: date) -> CampaignStep:
    return CampaignStep(
        progress=CampaignProgress.fresh(progress.campaign_number + 1),
        event=CampaignEvent.ELIMINATED,
        archived=_archive(progress, final_stage, end_date),
    )


def apply_match(progress: Optional[CampaignProgress], match: MatchRecord) -> CampaignStep:
    """
    Fold one newly created match into the campaign.

    Args:
        progress: Current progress, or None when no campaign exists yet
        match: The match that was just created

    Returns:
        CampaignStep with the next progress and the history entry to append (if any)
    """
    if progress is None:
        progress = CampaignProgress.fresh()

    if progress.is_champion:
        return CampaignStep(progress=progress, event=CampaignEvent.IGNORED)

    if progress.start_date is None:
        progress = replace(progress, start_date=match.date)

    stage = progress.current_stage

    if stage == CampaignStage.GROUP:
        group = GroupStage(
            matches_played=progress.group_stage.matches_played + 1,
            points=progress.group_stage.points + GROUP_POINTS[match.result],
        )
        progress = replace(progress, group_stage=group)

        if group.matches_played < GROUP_MATCHES:
            return CampaignStep(progress=progress, event=CampaignEvent.GROUP_MATCH)

        if group.points >= QUALIFYING_POINTS:
            return CampaignStep(
                progress=replace(
                    progress,
                    current_stage=CampaignStage.ROUND_OF_16,
                    completed_stages=progress.completed_stages + (CampaignStage.GROUP,),
                ),
                event=CampaignEvent.QUALIFIED,
            )
        return _eliminate(progress, FinalStage.ELIMINATED_GROUP, match.date)

    if stage == CampaignStage.FINAL:
        if not match.is_win:
            return _eliminate(progress, FinalStage.FINAL, match.date)

        champion = replace(
            progress,
            champion_of_campaign=progress.campaign_number,
            completed_stages=progress.completed_stages + (CampaignStage.FINAL,),
        )
        return CampaignStep(
            progress=champion,
            event=CampaignEvent.CHAMPION,
            archived=_archive(champion, FinalStage.FINAL, match.date),
        )

    # ROUND_OF_16, QUARTERS, SEMIS
    if not match.is_win:
        return _eliminate(progress, FinalStage(stage.value), match.date)

    next_stage = KNOCKOUT_ORDER[KNOCKOUT_ORDER.index(stage) + 1]
    return CampaignStep(
        progress=replace(
            progress,
            current_stage=next_stage,
            completed_stages=progress.completed_stages + (stage,),
        ),
        event=CampaignEvent.ADVANCED,
    )


def clear_champion_campaign(progress: Optional[CampaignProgress]) -> Optional[CampaignProgress]:
    """
    Start the next campaign after a title.

    Only meaningful when champion_of_campaign is set; any other progress is
    returned unchanged. No history entry is written, the title was archived
    when the final was won.
    """
    if progress is None or not progress.is_champion:
        return progress
    return CampaignProgress.fresh(progress.campaign_number + 1)


def replay_campaign(
    matches: Iterable[MatchRecord],
    progress: Optional[CampaignProgress] = None
) -> Tuple[Optional[CampaignProgress], Tuple[CampaignHistoryEntry, ...]]:
    """
    Fold a whole match list, in the given (creation) order.

    Args:
        matches: Matches oldest-created first; they are not re-sorted by date
        progress: Starting progress (None for a brand new ledger)

    Returns:
        (final progress, history entries archived along the way)
    """
    history = []
    for match in matches:
        step = apply_match(progress, match)
        progress = step.progress
        if step.archived is not None:
            history.append(step.archived)
    return progress, tuple(history)
