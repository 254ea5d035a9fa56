"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from macros_chef.config import Settings
from macros_chef.containers import AppContainer
from macros_chef.domain.nutrition import (
    Ingredient,
    MealLogEntry,
    NutrientTotals,
    NutritionInfo,
    SavedMeal,
)
from macros_chef.domain.payloads import image_data_url
from macros_chef.domain.planning import GroceryItem, GroceryList, MealPlan, MealPlanItem
from macros_chef.domain.rewards import RewardsBalance, RewardsEntry
from macros_chef.services.analysis import AnalysisClient, AnalysisService
from macros_chef.services.auth import TokenService
from macros_chef.services.edit_sessions import EditSessionService
from macros_chef.services.grocery import GroceryRepository, GroceryService
from macros_chef.services.meals import (
    MealLogRepository,
    MealLogService,
    SavedMealRepository,
    SavedMealService,
)
from macros_chef.services.plans import MealPlanRepository, MealPlanService
from macros_chef.services.rewards import (
    DEFAULT_TIER,
    RewardsRepository,
    RewardsService,
    tier_for_points,
)
from macros_chef.services.session_store import MemorySessionStore

TEST_JWT_SECRET = "test-secret-with-at-least-32-bytes!!"
TEST_SUPABASE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


def make_meal(
    name: str = "Rice and Chicken",
    ingredients: tuple[Ingredient, ...] | None = None,
    image_url: str | None = None,
) -> NutritionInfo:
    """Build a meal whose totals match its ingredients."""
    items = ingredients or (
        Ingredient(
            name="Rice", weight_grams=200, calories=260, protein=5, carbs=56, fat=1
        ),
        Ingredient(
            name="Chicken",
            weight_grams=180,
            calories=297,
            protein=56,
            carbs=0,
            fat=6.5,
        ),
    )
    return NutritionInfo(
        meal_name=name,
        totals=NutrientTotals(
            calories=sum(item.calories for item in items),
            protein=sum(item.protein for item in items),
            carbs=sum(item.carbs for item in items),
            fat=sum(item.fat for item in items),
        ),
        ingredients=items,
        image_url=image_url,
    )


def meal_json(name: str = "Oatmeal") -> dict[str, object]:
    """Return a camelCase meal body as clients send it."""
    return {
        "mealName": name,
        "totalCalories": 300,
        "totalProtein": 10,
        "totalCarbs": 54,
        "totalFat": 5,
        "ingredients": [
            {
                "name": "Oats",
                "weightGrams": 80,
                "calories": 300,
                "protein": 10,
                "carbs": 54,
                "fat": 5,
                "fiber": 8,
            }
        ],
    }


@dataclass
class InMemoryRewardsRepository(RewardsRepository):
    """In-memory rewards repository for tests."""

    balances: dict[int, RewardsBalance] = field(default_factory=dict)
    ledger: list[tuple[int, RewardsEntry]] = field(default_factory=list)
    fail: bool = False

    def get_balance(self, user_id: int) -> RewardsBalance | None:
        return self.balances.get(user_id)

    def award_points(
        self,
        user_id: int,
        event_type: str,
        points_delta: int,
        metadata: dict[str, object],
    ) -> RewardsBalance:
        if self.fail:
            raise RuntimeError("rewards store unavailable")
        entry = RewardsEntry(
            entry_id=len(self.ledger) + 1,
            event_type=event_type,
            points_delta=points_delta,
            created_at=datetime.now(tz=UTC),
            metadata=metadata,
        )
        current = self.balances.get(user_id) or RewardsBalance(0, 0, DEFAULT_TIER)
        points_total = current.points_total + points_delta
        balance = RewardsBalance(
            points_total=points_total,
            points_available=current.points_available + points_delta,
            tier=tier_for_points(points_total),
        )
        self.ledger.append((user_id, entry))
        self.balances[user_id] = balance
        return balance

    def list_ledger(self, user_id: int, limit: int) -> list[RewardsEntry]:
        entries = [entry for owner, entry in self.ledger if owner == user_id]
        return list(reversed(entries))[:limit]


@dataclass
class InMemorySavedMealRepository(SavedMealRepository):
    """In-memory saved meal repository for tests."""

    rows: dict[int, tuple[int, SavedMeal]] = field(default_factory=dict)
    next_id: int = 1

    def list_saved_meals(self, user_id: int) -> list[SavedMeal]:
        meals = [meal for owner, meal in self.rows.values() if owner == user_id]
        return sorted(meals, key=lambda meal: meal.id, reverse=True)

    def get_saved_meal(self, user_id: int, meal_id: int) -> SavedMeal | None:
        row = self.rows.get(meal_id)
        if row is None or row[0] != user_id:
            return None
        return row[1]

    def create_saved_meal(
        self, user_id: int, meal: NutritionInfo, source: str | None
    ) -> SavedMeal:
        image_url = meal.image_url
        saved = SavedMeal(
            id=self.next_id,
            meal=meal,
            source=source,
            has_image=bool(image_url and image_url.startswith("data:")),
            created_at=datetime.now(tz=UTC),
        )
        self.rows[saved.id] = (user_id, saved)
        self.next_id += 1
        return saved

    def delete_saved_meal(self, user_id: int, meal_id: int) -> bool:
        if self.get_saved_meal(user_id, meal_id) is None:
            return False
        del self.rows[meal_id]
        return True


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """In-memory meal log repository for tests."""

    rows: dict[int, tuple[int, MealLogEntry, str | None]] = field(default_factory=dict)
    next_id: int = 1

    def create_entry(
        self, user_id: int, meal: NutritionInfo, image_base64: str | None
    ) -> MealLogEntry:
        entry = MealLogEntry(
            id=self.next_id,
            meal=meal,
            has_image=bool(image_base64),
            created_at=datetime.now(tz=UTC),
        )
        self.rows[entry.id] = (user_id, entry, image_base64)
        self.next_id += 1
        return entry

    def list_entries(self, user_id: int) -> list[MealLogEntry]:
        entries = [entry for owner, entry, _ in self.rows.values() if owner == user_id]
        return sorted(entries, key=lambda entry: entry.id, reverse=True)

    def get_entry(self, user_id: int, entry_id: int) -> MealLogEntry | None:
        row = self.rows.get(entry_id)
        if row is None or row[0] != user_id:
            return None
        _, entry, image_base64 = row
        if image_base64:
            meal = replace(entry.meal, image_url=image_data_url(image_base64))
            return replace(entry, meal=meal)
        return entry


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal plan repository backed by the saved meal fake."""

    saved_meals: InMemorySavedMealRepository
    plans: dict[int, tuple[int, str]] = field(default_factory=dict)
    items: dict[int, tuple[int, int, int, dict[str, object]]] = field(
        default_factory=dict
    )
    next_plan_id: int = 1
    next_item_id: int = 1

    def list_plans(self, user_id: int) -> list[MealPlan]:
        plans = []
        for plan_id, (owner, name) in self.plans.items():
            if owner != user_id:
                continue
            items = [
                MealPlanItem(
                    id=item_id,
                    plan_id=plan_id,
                    meal=self.saved_meals.rows[meal_id][1],
                    metadata=metadata,
                )
                for item_id, (_, item_plan, meal_id, metadata) in self.items.items()
                if item_plan == plan_id
            ]
            plans.append(MealPlan(id=plan_id, name=name, items=items))
        return sorted(plans, key=lambda plan: plan.name)

    def find_plan_id_by_name(self, user_id: int, name: str) -> int | None:
        for plan_id, (owner, plan_name) in self.plans.items():
            if owner == user_id and plan_name == name:
                return plan_id
        return None

    def plan_belongs_to(self, user_id: int, plan_id: int) -> bool:
        row = self.plans.get(plan_id)
        return row is not None and row[0] == user_id

    def create_plan(self, user_id: int, name: str) -> MealPlan:
        plan = MealPlan(id=self.next_plan_id, name=name)
        self.plans[plan.id] = (user_id, name)
        self.next_plan_id += 1
        return plan

    def delete_plan(self, user_id: int, plan_id: int) -> bool:
        if not self.plan_belongs_to(user_id, plan_id):
            return False
        del self.plans[plan_id]
        self.items = {
            item_id: row for item_id, row in self.items.items() if row[1] != plan_id
        }
        return True

    def create_plan_item(
        self,
        user_id: int,
        plan_id: int,
        saved_meal_id: int,
        metadata: dict[str, object],
    ) -> int:
        item_id = self.next_item_id
        self.items[item_id] = (user_id, plan_id, saved_meal_id, metadata)
        self.next_item_id += 1
        return item_id

    def remove_plan_item(self, user_id: int, item_id: int) -> bool:
        row = self.items.get(item_id)
        if row is None or row[0] != user_id:
            return False
        del self.items[item_id]
        return True

    def list_plan_meals(self, user_id: int, plan_ids: list[int]) -> list[NutritionInfo]:
        return [
            self.saved_meals.rows[meal_id][1].meal
            for owner, plan_id, meal_id, _ in self.items.values()
            if owner == user_id and plan_id in plan_ids
        ]


@dataclass
class InMemoryGroceryRepository(GroceryRepository):
    """In-memory grocery repository for tests."""

    lists: dict[int, tuple[int, GroceryList]] = field(default_factory=dict)
    items: dict[int, tuple[int, GroceryItem]] = field(default_factory=dict)
    next_list_id: int = 1
    next_item_id: int = 1

    def list_lists(self, user_id: int) -> list[GroceryList]:
        lists = [item for owner, item in self.lists.values() if owner == user_id]
        return sorted(lists, key=lambda item: item.id, reverse=True)

    def get_list(self, user_id: int, list_id: int) -> GroceryList | None:
        row = self.lists.get(list_id)
        if row is None or row[0] != user_id:
            return None
        return row[1]

    def create_list(self, user_id: int, name: str, is_active: bool) -> GroceryList:
        grocery_list = GroceryList(
            id=self.next_list_id,
            name=name,
            is_active=is_active,
            created_at=datetime.now(tz=UTC),
        )
        self.lists[grocery_list.id] = (user_id, grocery_list)
        self.next_list_id += 1
        return grocery_list

    def set_active(self, user_id: int, list_id: int) -> None:
        for key, (owner, grocery_list) in list(self.lists.items()):
            if owner == user_id:
                active = grocery_list.id == list_id
                self.lists[key] = (owner, replace(grocery_list, is_active=active))

    def delete_list(self, user_id: int, list_id: int) -> bool:
        if self.get_list(user_id, list_id) is None:
            return False
        del self.lists[list_id]
        self.items = {
            key: row for key, row in self.items.items() if row[1].list_id != list_id
        }
        return True

    def list_items(self, user_id: int, list_id: int) -> list[GroceryItem]:
        items = [
            item
            for owner, item in self.items.values()
            if owner == user_id and item.list_id == list_id
        ]
        return sorted(items, key=lambda item: (item.checked, item.name))

    def add_items(
        self, user_id: int, list_id: int, names: list[str]
    ) -> list[GroceryItem]:
        created = []
        for name in names:
            item = GroceryItem(
                id=self.next_item_id, list_id=list_id, name=name, checked=False
            )
            self.items[item.id] = (user_id, item)
            self.next_item_id += 1
            created.append(item)
        return created

    def update_item(
        self, user_id: int, item_id: int, checked: bool
    ) -> GroceryItem | None:
        row = self.items.get(item_id)
        if row is None or row[0] != user_id:
            return None
        item = replace(row[1], checked=checked)
        self.items[item_id] = (user_id, item)
        return item

    def remove_item(self, user_id: int, item_id: int) -> bool:
        row = self.items.get(item_id)
        if row is None or row[0] != user_id:
            return False
        del self.items[item_id]
        return True

    def clear_items(self, user_id: int, list_id: int, checked_only: bool) -> None:
        self.items = {
            key: (owner, item)
            for key, (owner, item) in self.items.items()
            if not (
                owner == user_id
                and item.list_id == list_id
                and (item.checked or not checked_only)
            )
        }


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning queued payloads per schema name."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "schema_name": schema_name,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payloads[schema_name]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SUPABASE_KEY,
        jwt_secret=TEST_JWT_SECRET,
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def rewards_repository() -> InMemoryRewardsRepository:
    return InMemoryRewardsRepository()


@pytest.fixture
def saved_meal_repository() -> InMemorySavedMealRepository:
    return InMemorySavedMealRepository()


@pytest.fixture
def meal_log_repository() -> InMemoryMealLogRepository:
    return InMemoryMealLogRepository()


@pytest.fixture
def meal_plan_repository(
    saved_meal_repository: InMemorySavedMealRepository,
) -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository(saved_meals=saved_meal_repository)


@pytest.fixture
def grocery_repository() -> InMemoryGroceryRepository:
    return InMemoryGroceryRepository()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def rewards_service(rewards_repository: InMemoryRewardsRepository) -> RewardsService:
    return RewardsService(rewards_repository)


@pytest.fixture
def saved_meal_service(
    saved_meal_repository: InMemorySavedMealRepository,
    rewards_service: RewardsService,
) -> SavedMealService:
    return SavedMealService(saved_meal_repository, rewards_service)


@pytest.fixture
def meal_log_service(
    meal_log_repository: InMemoryMealLogRepository,
    rewards_service: RewardsService,
) -> MealLogService:
    return MealLogService(meal_log_repository, rewards_service)


@pytest.fixture
def edit_session_service(
    saved_meal_service: SavedMealService, meal_log_service: MealLogService
) -> EditSessionService:
    return EditSessionService(
        store=MemorySessionStore(),
        saved_meal_service=saved_meal_service,
        meal_log_service=meal_log_service,
    )


@pytest.fixture
def meal_plan_service(
    meal_plan_repository: InMemoryMealPlanRepository,
    saved_meal_service: SavedMealService,
) -> MealPlanService:
    return MealPlanService(meal_plan_repository, saved_meal_service)


@pytest.fixture
def grocery_service(
    grocery_repository: InMemoryGroceryRepository,
    meal_plan_service: MealPlanService,
) -> GroceryService:
    return GroceryService(grocery_repository, meal_plan_service)


@pytest.fixture
def analysis_service(
    settings: Settings, analysis_client: FakeAnalysisClient
) -> AnalysisService:
    return AnalysisService(
        client=analysis_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(secret=settings.jwt_secret)


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    token_service: TokenService,
    analysis_service: AnalysisService,
    saved_meal_service: SavedMealService,
    meal_log_service: MealLogService,
    edit_session_service: EditSessionService,
    meal_plan_service: MealPlanService,
    grocery_service: GroceryService,
    rewards_service: RewardsService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
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


@pytest.fixture
def auth_headers(token_service: TokenService) -> dict[str, str]:
    token = token_service.issue(7, "cook@example.com")
    return {"Authorization": f"Bearer {token}"}
