"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macros_chef.adapters.openai_analysis_client import OpenAIAnalysisClient
from macros_chef.adapters.supabase_grocery_repository import SupabaseGroceryRepository
from macros_chef.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from macros_chef.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from macros_chef.adapters.supabase_rewards_repository import SupabaseRewardsRepository
from macros_chef.adapters.supabase_saved_meal_repository import (
    SupabaseSavedMealRepository,
)
from macros_chef.config import Settings
from macros_chef.services.analysis import AnalysisService
from macros_chef.services.auth import TokenService
from macros_chef.services.edit_sessions import EditSessionService
from macros_chef.services.grocery import GroceryService
from macros_chef.services.meals import MealLogService, SavedMealService
from macros_chef.services.plans import MealPlanService
from macros_chef.services.rewards import RewardsService
from macros_chef.services.session_store import MemorySessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    analysis_service: AnalysisService
    saved_meal_service: SavedMealService
    meal_log_service: MealLogService
    edit_session_service: EditSessionService
    meal_plan_service: MealPlanService
    grocery_service: GroceryService
    rewards_service: RewardsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    rewards_service = RewardsService(SupabaseRewardsRepository(supabase_client))
    saved_meal_service = SavedMealService(
        repository=SupabaseSavedMealRepository(supabase_client),
        rewards_service=rewards_service,
    )
    meal_log_service = MealLogService(
        repository=SupabaseMealLogRepository(supabase_client),
        rewards_service=rewards_service,
    )
    edit_session_service = EditSessionService(
        store=MemorySessionStore(),
        saved_meal_service=saved_meal_service,
        meal_log_service=meal_log_service,
        ttl_seconds=resolved_settings.edit_session_ttl_seconds,
    )
    meal_plan_service = MealPlanService(
        repository=SupabaseMealPlanRepository(supabase_client),
        saved_meal_service=saved_meal_service,
    )
    grocery_service = GroceryService(
        repository=SupabaseGroceryRepository(supabase_client),
        meal_plan_service=meal_plan_service,
    )
    openai_client = OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    token_service = TokenService(
        secret=resolved_settings.jwt_secret,
        algorithm=resolved_settings.jwt_algorithm,
        ttl_days=resolved_settings.jwt_ttl_days,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_service=token_service,
        analysis_service=analysis_service,
        saved_meal_service=saved_meal_service,
        meal_log_service=meal_log_service,
        edit_session_service=edit_session_service,
        meal_plan_service=meal_plan_service,
        grocery_service=grocery_service,
        rewards_service=rewards_service,
        close_resources=close_resources,
    )
