"""
Tests for puzzle attempt scoring
"""

from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.models.attempt import PuzzleAttempt
from app.models.user import User
from app.services.scoring_service import ScoringService, calculate_points, compute_quiz_score

NOW = datetime(2025, 3, 12, 9, 0, 0)  # a Wednesday
ALL_CORRECT = [1, 0, 2]


class TestCalculatePoints:

    def test_fast_sliding_puzzle(self):
        # 30s and 25 moves both hit the component cap
        assert calculate_points(30000, 25, "sliding_puzzle") == 36

    def test_optimal_card_matching(self):
        assert calculate_points(60000, 50, "card_matching") == 10

    def test_slow_whack_a_mole(self):
        # speed 0.5, moves 0.5: 0.2 + 0.2 + 0.2 = 0.6 -> 9
        assert calculate_points(120000, 100, "whack_a_mole") == 9

    def test_slow_word_hunt(self):
        # speed 0.25, moves 0.5: 0.1 + 0.2 + 0.2 = 0.5 -> 5
        assert calculate_points(240000, 100, "word_hunt") == 5

    @pytest.mark.parametrize("time_taken,moves", [(0, 10), (1000, 0), (-5, 10)])
    def test_non_positive_inputs_rejected(self, time_taken, moves):
        with pytest.raises(ValueError):
            calculate_points(time_taken, moves, "card_matching")

    def test_unknown_game_type(self):
        with pytest.raises(ValueError):
            calculate_points(1000, 10, "chess")


class TestQuizScore:

    def test_positional_match(self, sample_questions):
        assert compute_quiz_score(sample_questions, [1, 0, 2]) == 3
        assert compute_quiz_score(sample_questions, [1, 1, 2]) == 2

    def test_missing_answers(self, sample_questions):
        assert compute_quiz_score(sample_questions, None) == 0
        assert compute_quiz_score(sample_questions, [1]) == 1


class TestSubmitAttempt:

    def test_first_full_correct_solve_scores(self, db_session, make_campaign, gamer):
        campaign = make_campaign(game_type="sliding_puzzle")

        result = ScoringService.submit_attempt(
            db_session, gamer, campaign.id, time_taken=30000, moves_taken=25,
            solved=True, answers=ALL_CORRECT, now=NOW
        )

        assert result["first_time_solved"] is True
        assert result["points_earned"] == 36
        assert result["quiz_score"] == 3
        assert result["total_questions"] == 3
        assert result["attempt"].timestamp == NOW

    def test_repeat_solve_scores_nothing(self, db_session, make_campaign, gamer):
        campaign = make_campaign()
        ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, ALL_CORRECT, NOW)

        result = ScoringService.submit_attempt(db_session, gamer, campaign.id, 10000, 10, True, ALL_CORRECT, NOW)

        assert result["first_time_solved"] is False
        assert result["points_earned"] == 0
        assert db_session.query(PuzzleAttempt).filter(PuzzleAttempt.first_time_solved == True).count() == 1  # noqa: E712

    def test_partial_answers_do_not_qualify(self, db_session, make_campaign, gamer):
        campaign = make_campaign()

        result = ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, [1, 0, 0], NOW)

        assert result["first_time_solved"] is False
        assert result["points_earned"] == 0
        assert result["quiz_score"] == 2

        # A later full-correct solve still earns the first-time points
        later = ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, ALL_CORRECT, NOW)
        assert later["first_time_solved"] is True

    def test_unsolved_attempt_does_not_qualify(self, db_session, make_campaign, gamer):
        campaign = make_campaign()

        result = ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, False, ALL_CORRECT, NOW)

        assert result["first_time_solved"] is False
        assert result["points_earned"] == 0

    def test_lifetime_analytics(self, db_session, make_campaign, gamer):
        campaign = make_campaign()
        ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, False, ALL_CORRECT, NOW)
        ScoringService.submit_attempt(db_session, gamer, campaign.id, 20000, 15, True, ALL_CORRECT, NOW)

        user = db_session.get(User, gamer.id)
        assert user.attempts == 2
        assert user.total_moves == 40
        assert user.total_time == 50000
        assert user.puzzles_solved == 1
        assert user.total_points == 36
        assert user.success_rate == 0.5

    def test_concurrent_first_solve_downgraded(self, db_session, make_campaign, gamer):
        campaign = make_campaign()
        ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, ALL_CORRECT, NOW)

        # The check races with another request and misses the stored solve
        with patch.object(ScoringService, "has_first_time_solve", return_value=False):
            result = ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, ALL_CORRECT, NOW)

        assert result["first_time_solved"] is False
        assert result["points_earned"] == 0
        assert db_session.query(PuzzleAttempt).count() == 2
        assert db_session.get(User, gamer.id).total_points == 36

    def test_inactive_campaign_rejected(self, db_session, make_campaign, gamer):
        campaign = make_campaign(active=False)

        with pytest.raises(HTTPException) as exc_info:
            ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, ALL_CORRECT, NOW)
        assert exc_info.value.status_code == 400

    def test_missing_campaign(self, db_session, gamer):
        with pytest.raises(HTTPException) as exc_info:
            ScoringService.submit_attempt(db_session, gamer, 9999, 30000, 25, True, ALL_CORRECT, NOW)
        assert exc_info.value.status_code == 404

    def test_non_positive_time_rejected(self, db_session, make_campaign, gamer):
        campaign = make_campaign()

        with pytest.raises(HTTPException) as exc_info:
            ScoringService.submit_attempt(db_session, gamer, campaign.id, 0, 25, True, ALL_CORRECT, NOW)
        assert exc_info.value.status_code == 400

    def test_has_completed(self, db_session, make_campaign, gamer):
        campaign = make_campaign()
        assert ScoringService.has_completed(db_session, gamer.id, campaign.id) is False

        ScoringService.submit_attempt(db_session, gamer, campaign.id, 30000, 25, True, [0, 0, 0], NOW)

        assert ScoringService.has_completed(db_session, gamer.id, campaign.id) is True
