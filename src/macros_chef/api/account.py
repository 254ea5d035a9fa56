"""Rewards and goal endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from macros_chef.api.auth import require_user
from macros_chef.api.schemas import GoalsRequest  # noqa: TC001
from macros_chef.api.serializers import goals_json, rewards_json
from macros_chef.domain.models import CurrentUser  # noqa: TC001
from macros_chef.services.goals import calculate_goals

if TYPE_CHECKING:
    from macros_chef.containers import AppContainer

router = APIRouter(tags=["account"])


@router.get("/rewards")
async def rewards_summary(
    request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    """Return the points balance, tier and recent history."""
    container: AppContainer = request.app.state.container
    return rewards_json(container.rewards_service.get_summary(user.id))


@router.post("/goals/calculate", dependencies=[Depends(require_user)])
async def calculate_goal_targets(body: GoalsRequest) -> dict[str, object]:
    """Return BMR, TDEE and a protein target for the given body profile."""
    return goals_json(calculate_goals(body.to_profile()))
