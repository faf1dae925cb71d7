"""
Score submission, user progress and leaderboard endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from flagguess.config import Settings
from flagguess.core.exceptions import ValidationError
from flagguess.core.rate_limit import limiter, score_submit_limit
from flagguess.dependencies import get_settings, get_tracker
from flagguess.game.difficulty import Difficulty
from flagguess.game.tracker import ProgressTracker
from flagguess.schemas.score import (
    LeaderboardEntrySchema,
    LeaderboardResponse,
    ProgressResponse,
    ProgressSchema,
    ScoreSubmitRequest,
    SubmissionResponse,
    SubmissionResultSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scores"])


@router.post("/scores", response_model=SubmissionResponse)
@limiter.limit(score_submit_limit)
async def submit_score(
    request: Request,
    data: ScoreSubmitRequest,
    tracker: ProgressTracker = Depends(get_tracker),
):
    """
    Record a finished game.

    Updates the best score for the user's game type and difficulty; a new
    best unlocks the next difficulty tier.

    Returns:
        Score id, whether this is a new best, the best score and unlocked tiers
    """
    result = tracker.submit(data.to_submission())

    logger.info(
        f"✅ Score {data.score} saved for user {data.user_id} "
        f"({data.game_type}/{data.difficulty}) - new best: {result.new_best_score}"
    )

    return SubmissionResponse(data=SubmissionResultSchema.from_result(result))


@router.get("/users/{user_id}/progress", response_model=ProgressResponse)
async def get_user_progress(
    user_id: str,
    game_type: str = Query(default="flag", alias="gameType"),
    tracker: ProgressTracker = Depends(get_tracker),
):
    """
    Get a user's high scores per tier, unlocked tiers and recent games.

    Unknown users get zero scores and only the easy tier unlocked.
    """
    view = tracker.query_progress(user_id, game_type)
    return ProgressResponse(data=ProgressSchema.from_view(view))


@router.get("/leaderboard/{game_type}/{difficulty}", response_model=LeaderboardResponse)
async def get_leaderboard(
    game_type: str,
    difficulty: Difficulty,
    limit: Optional[int] = Query(default=None, ge=1),
    tracker: ProgressTracker = Depends(get_tracker),
    app_settings: Settings = Depends(get_settings),
):
    """
    Top players for a game type and difficulty, one entry per user.

    Args:
        limit: Maximum number of entries (1 to MAX_LEADERBOARD_LIMIT,
            DEFAULT_LEADERBOARD_LIMIT when omitted)
    """
    if limit is None:
        limit = app_settings.DEFAULT_LEADERBOARD_LIMIT
    if limit > app_settings.MAX_LEADERBOARD_LIMIT:
        raise ValidationError(f"Leaderboard limit must be at most {app_settings.MAX_LEADERBOARD_LIMIT}")

    entries = tracker.query_leaderboard(game_type, difficulty, limit)
    return LeaderboardResponse(
        data=[LeaderboardEntrySchema.from_entry(e) for e in entries],
        game_type=game_type,
        difficulty=difficulty,
        total=len(entries),
    )
