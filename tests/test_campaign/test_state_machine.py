"""Unit tests for the campaign progression state machine.

Test Strategy:
1. Group stage scoring and qualification threshold
2. Knockout advancement and elimination at each stage
3. Championship freeze and explicit clear
4. History archiving rules (start date required)
5. Replay of a creation-ordered match list
"""
from dataclasses import FrozenInstanceError
from datetime import date

import pytest
from conftest import make_match, make_matches

from pitchlog.services.campaign.state_machine import (
    CampaignEvent,
    CampaignProgress,
    CampaignStage,
    FinalStage,
    GroupStage,
    apply_match,
    clear_champion_campaign,
    replay_campaign,
)


def _fold(results, progress=None):
    steps = []
    for i, result in enumerate(results):
        step = apply_match(progress, make_match(result, day=i, match_id=f"m{i}"))
        steps.append(step)
        progress = step.progress
    return progress, steps


class TestGroupStage:
    """Test the three-match group stage."""

    def test_no_campaign_starts_campaign_one(self):
        """The first match opens campaign 1 and sets its start date."""
        step = apply_match(None, make_match("WIN", day=0))

        assert step.progress.campaign_number == 1
        assert step.progress.current_stage == CampaignStage.GROUP
        assert step.progress.start_date == date(2024, 1, 1)
        assert step.progress.group_stage == GroupStage(matches_played=1, points=3)
        assert step.event == CampaignEvent.GROUP_MATCH
        assert step.archived is None

    def test_points_only_increase(self):
        """WIN +3, DRAW +1, LOSS +0."""
        progress, _ = _fold(["DRAW", "LOSS"])

        assert progress.group_stage == GroupStage(matches_played=2, points=1)

    def test_three_draws_eliminated(self):
        """3 points is below the 4-point threshold."""
        progress, steps = _fold(["DRAW", "DRAW", "DRAW"])

        assert steps[-1].event == CampaignEvent.ELIMINATED
        assert steps[-1].archived.final_stage == FinalStage.ELIMINATED_GROUP
        assert steps[-1].archived.campaign_number == 1
        assert steps[-1].archived.start_date == date(2024, 1, 1)
        assert steps[-1].archived.end_date == date(2024, 1, 3)
        assert progress == CampaignProgress.fresh(2)
        assert progress.start_date is None

    def test_two_wins_qualify(self):
        """6 points advance to the round of 16."""
        progress, steps = _fold(["WIN", "WIN", "LOSS"])

        assert steps[-1].event == CampaignEvent.QUALIFIED
        assert progress.current_stage == CampaignStage.ROUND_OF_16
        assert progress.completed_stages == (CampaignStage.GROUP,)
        assert progress.group_stage == GroupStage(matches_played=3, points=6)

    def test_four_points_is_enough(self):
        """The threshold is inclusive."""
        progress, _ = _fold(["WIN", "DRAW", "LOSS"])

        assert progress.current_stage == CampaignStage.ROUND_OF_16


class TestKnockouts:
    """Test knockout stages and the final."""

    @pytest.mark.parametrize("wins,final_stage", [
        (0, FinalStage.ROUND_OF_16),
        (1, FinalStage.QUARTERS),
        (2, FinalStage.SEMIS),
        (3, FinalStage.FINAL),
    ])
    def test_non_win_eliminates_at_current_stage(self, wins, final_stage):
        """A draw or loss archives the campaign at the stage it was played in."""
        progress, steps = _fold(["WIN", "WIN", "WIN"] + ["WIN"] * wins + ["DRAW"])

        assert steps[-1].event == CampaignEvent.ELIMINATED
        assert steps[-1].archived.final_stage == final_stage
        assert progress.campaign_number == 2
        assert progress.current_stage == CampaignStage.GROUP

    def test_wins_advance_in_order(self):
        """Each knockout win moves one stage forward."""
        progress, steps = _fold(["WIN", "WIN", "WIN", "WIN", "WIN"])

        assert [s.event for s in steps[3:]] == [CampaignEvent.ADVANCED, CampaignEvent.ADVANCED]
        assert progress.current_stage == CampaignStage.SEMIS
        assert progress.completed_stages == (
            CampaignStage.GROUP, CampaignStage.ROUND_OF_16, CampaignStage.QUARTERS,
        )

    def test_final_win_crowns_and_archives(self):
        """A FINAL win sets the champion and archives immediately."""
        progress, steps = _fold(["WIN", "WIN", "LOSS", "WIN", "WIN", "WIN", "WIN"])

        assert steps[-1].event == CampaignEvent.CHAMPION
        assert progress.champion_of_campaign == 1
        assert progress.is_champion
        assert progress.completed_stages[-1] == CampaignStage.FINAL
        assert steps[-1].archived.final_stage == FinalStage.FINAL
        assert steps[-1].archived.end_date == date(2024, 1, 7)


class TestChampion:
    """Test the frozen champion state and its reset."""

    @pytest.fixture
    def champion(self):
        progress, _ = _fold(["WIN"] * 7)
        return progress

    def test_matches_ignored_after_title(self, champion):
        """Further matches leave the progress untouched."""
        step = apply_match(champion, make_match("LOSS", day=30))

        assert step.event == CampaignEvent.IGNORED
        assert step.progress == champion
        assert step.archived is None

    def test_clear_champion_starts_next_campaign(self, champion):
        """Clearing opens campaign n+1 with no start date."""
        cleared = clear_champion_campaign(champion)

        assert cleared == CampaignProgress.fresh(2)
        assert not cleared.is_champion

    def test_clear_non_champion_is_unchanged(self):
        """Clearing a campaign that was not won changes nothing."""
        progress, _ = _fold(["WIN"])

        assert clear_champion_campaign(progress) is progress
        assert clear_champion_campaign(None) is None


class TestArchiving:
    """Test history entry rules."""

    def test_missing_start_date_taken_from_match(self):
        """A stored progress without a start date archives with the match date."""
        progress = CampaignProgress(
            campaign_number=3,
            current_stage=CampaignStage.ROUND_OF_16,
            start_date=None,
        )
        step = apply_match(progress, make_match("LOSS", day=0))

        assert step.archived is not None
        assert step.archived.start_date == date(2024, 1, 1)

    def test_group_exit_without_start_date_still_archived(self):
        """A stored group stage with no start date archives with the deciding match's date."""
        progress = CampaignProgress(
            campaign_number=2,
            current_stage=CampaignStage.GROUP,
            group_stage=GroupStage(matches_played=2, points=1),
            start_date=None,
        )
        step = apply_match(progress, make_match("LOSS", day=5))

        assert step.event == CampaignEvent.ELIMINATED
        assert step.archived.campaign_number == 2
        assert step.archived.start_date == date(2024, 1, 6)
        assert step.archived.end_date == date(2024, 1, 6)
        assert step.archived.final_stage == FinalStage.ELIMINATED_GROUP

    def test_archived_entry_is_frozen(self):
        """History entries cannot be modified."""
        _, steps = _fold(["LOSS", "LOSS", "LOSS"])

        with pytest.raises(FrozenInstanceError):
            steps[-1].archived.final_stage = FinalStage.FINAL


class TestReplay:
    """Test replay_campaign."""

    def test_replay_to_champion(self):
        """W W L W W W W from scratch is a title with one FINAL entry."""
        progress, history = replay_campaign(make_matches(["WIN", "WIN", "LOSS", "WIN", "WIN", "WIN", "WIN"]))

        assert progress.champion_of_campaign == 1
        assert len(history) == 1
        assert history[0].final_stage == FinalStage.FINAL

    def test_replay_several_campaigns(self):
        """Eliminations number the campaigns consecutively."""
        results = ["DRAW", "DRAW", "DRAW", "WIN", "WIN", "WIN", "LOSS", "WIN"]
        progress, history = replay_campaign(make_matches(results))

        assert [entry.campaign_number for entry in history] == [1, 2]
        assert [entry.final_stage for entry in history] == [FinalStage.ELIMINATED_GROUP, FinalStage.ROUND_OF_16]
        assert progress.campaign_number == 3
        assert progress.group_stage == GroupStage(matches_played=1, points=3)

    def test_replay_uses_given_order(self):
        """The fold follows creation order, not dates."""
        late_win = make_match("WIN", day=10, match_id="late")
        early_draws = [make_match("DRAW", day=i, match_id=f"d{i}") for i in range(2)]

        progress, history = replay_campaign([late_win] + early_draws)

        assert history == ()
        assert progress.start_date == date(2024, 1, 11)
        assert progress.current_stage == CampaignStage.ROUND_OF_16

    def test_replay_empty(self):
        """No matches, no campaign."""
        assert replay_campaign([]) == (None, ())
