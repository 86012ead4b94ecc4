"""
Puzzle attempt scoring and lifetime analytics
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.models.attempt import PuzzleAttempt
from app.models.campaign import Campaign, CampaignStatus, GameType
from app.models.user import User
from app.utils.money import round_half_up

logger = logging.getLogger(__name__)

OPTIMAL_TIME_SECONDS = 60
OPTIMAL_MOVES = 50
MAX_COMPONENT_SCORE = 2.0
BASE_POINTS = 10

SPEED_WEIGHT = 0.4
MOVE_WEIGHT = 0.4
COMPLETION_WEIGHT = 0.2

DIFFICULTY_MULTIPLIERS = {
    GameType.CARD_MATCHING.value: 1.0,
    GameType.WHACK_A_MOLE.value: 1.5,
    GameType.SLIDING_PUZZLE.value: 2.0,
    GameType.WORD_HUNT.value: 1.0,
}


def calculate_points(time_taken_ms: int, moves_taken: int, game_type: str) -> int:
    """Points for a solve. Time and moves must both be positive."""
    seconds = time_taken_ms / 1000
    if seconds <= 0 or moves_taken <= 0:
        raise ValueError("Time taken and moves taken must be positive")
    if game_type not in DIFFICULTY_MULTIPLIERS:
        raise ValueError(f"Unknown game type: {game_type}")

    speed_score = min(OPTIMAL_TIME_SECONDS / seconds, MAX_COMPONENT_SCORE)
    move_score = min(OPTIMAL_MOVES / moves_taken, MAX_COMPONENT_SCORE)
    weighted = SPEED_WEIGHT * speed_score + MOVE_WEIGHT * move_score + COMPLETION_WEIGHT * 1

    return round_half_up(BASE_POINTS * weighted * DIFFICULTY_MULTIPLIERS[game_type])


def compute_quiz_score(questions: List[Dict[str, Any]], answers: Optional[List[int]]) -> int:
    """Number of answers matching the correct index, compared by position"""
    if not answers:
        return 0
    return sum(
        1 for question, answer in zip(questions, answers)
        if answer == question.get("correct_index")
    )


class ScoringService:
    """Attempt submission and scoring"""

    @staticmethod
    def has_first_time_solve(db: Session, user_id: int, campaign_id: int) -> bool:
        return db.query(PuzzleAttempt.id).filter(
            PuzzleAttempt.user_id == user_id,
            PuzzleAttempt.campaign_id == campaign_id,
            PuzzleAttempt.first_time_solved == True  # noqa: E712
        ).first() is not None

    @staticmethod
    def submit_attempt(db: Session, user: User, campaign_id: int, time_taken: int, moves_taken: int,
                       solved: bool, answers: Optional[List[int]], now: Optional[datetime] = None) -> Dict[str, Any]:
        """Record an attempt and award points for a first full-correct solve"""
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Campaign not found"
            )
        if campaign.status != CampaignStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Campaign is not active"
            )
        if time_taken <= 0 or moves_taken <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Time taken and moves taken must be positive"
            )

        questions = campaign.questions or []
        quiz_score = compute_quiz_score(questions, answers)
        all_correct = quiz_score == len(questions)
        fully_correct = bool(solved) and all_correct

        first_time = fully_correct and not ScoringService.has_first_time_solve(db, user.id, campaign.id)
        points = calculate_points(time_taken, moves_taken, campaign.game_type) if first_time else 0

        attempt_fields = dict(
            user_id=user.id,
            campaign_id=campaign.id,
            time_taken=time_taken,
            moves_taken=moves_taken,
            solved=bool(solved),
            quiz_score=quiz_score,
            answers=list(answers or []),
            timestamp=now or datetime.utcnow()
        )

        attempt = PuzzleAttempt(first_time_solved=first_time, points_earned=points, **attempt_fields)
        db.add(attempt)
        try:
            db.flush()
        except IntegrityError:
            # Another request recorded the first-time solve between our check and insert
            db.rollback()
            logger.warning(f"Concurrent first-time solve for user {user.id} on campaign {campaign.id}")
            first_time, points = False, 0
            attempt = PuzzleAttempt(first_time_solved=False, points_earned=0, **attempt_fields)
            db.add(attempt)

        ScoringService._update_lifetime_analytics(db, user.id, time_taken, moves_taken, first_time, points)
        db.commit()
        db.refresh(attempt)

        if first_time:
            logger.info(f"User {user.id} solved campaign {campaign.id} for the first time, {points} points")

        return {
            "attempt": attempt,
            "game_type": campaign.game_type,
            "quiz_score": quiz_score,
            "total_questions": len(questions),
            "first_time_solved": first_time,
            "points_earned": points
        }

    @staticmethod
    def _update_lifetime_analytics(db: Session, user_id: int, time_taken: int, moves_taken: int,
                                   first_time: bool, points: int) -> None:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            return

        user.attempts = (user.attempts or 0) + 1
        user.total_moves = (user.total_moves or 0) + moves_taken
        user.total_time = (user.total_time or 0) + time_taken
        if first_time:
            user.puzzles_solved = (user.puzzles_solved or 0) + 1
            user.total_points = (user.total_points or 0) + points
        user.success_rate = (user.puzzles_solved or 0) / user.attempts
        db.add(user)

    @staticmethod
    def has_completed(db: Session, user_id: int, campaign_id: int) -> bool:
        """Whether the user has any solved attempt for the campaign"""
        return db.query(PuzzleAttempt.id).filter(
            PuzzleAttempt.user_id == user_id,
            PuzzleAttempt.campaign_id == campaign_id,
            PuzzleAttempt.solved == True  # noqa: E712
        ).first() is not None
