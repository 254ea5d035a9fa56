"""JSON shapes returned by the HTTP API."""

from datetime import datetime

from macros_chef.domain.nutrition import MealLogEntry, SavedMeal
from macros_chef.domain.payloads import dump_meal
from macros_chef.domain.planning import GroceryItem, GroceryList, MealPlan, MealPlanItem
from macros_chef.domain.rewards import RewardsSummary
from macros_chef.services.edit_sessions import EditSession
from macros_chef.services.goals import GoalTargets


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def saved_meal_json(saved: SavedMeal) -> dict[str, object]:
    return {
        "id": saved.id,
        **dump_meal(saved.meal, source=saved.source),
        "hasImage": saved.has_image,
        "createdAt": _timestamp(saved.created_at),
    }


def meal_log_entry_json(entry: MealLogEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        **dump_meal(entry.meal),
        "hasImage": entry.has_image,
        "createdAt": _timestamp(entry.created_at),
    }


def edit_session_json(session: EditSession) -> dict[str, object]:
    return {
        "id": str(session.id),
        "isDirty": session.is_dirty,
        "meal": dump_meal(session.meal),
    }


def plan_item_json(item: MealPlanItem) -> dict[str, object]:
    return {
        "id": item.id,
        "planId": item.plan_id,
        "metadata": item.metadata,
        "meal": saved_meal_json(item.meal),
    }


def plan_json(plan: MealPlan) -> dict[str, object]:
    return {
        "id": plan.id,
        "name": plan.name,
        "items": [plan_item_json(item) for item in plan.items],
    }


def grocery_list_json(grocery_list: GroceryList) -> dict[str, object]:
    return {
        "id": grocery_list.id,
        "name": grocery_list.name,
        "isActive": grocery_list.is_active,
        "createdAt": _timestamp(grocery_list.created_at),
    }


def grocery_item_json(item: GroceryItem) -> dict[str, object]:
    return {
        "id": item.id,
        "listId": item.list_id,
        "name": item.name,
        "checked": item.checked,
    }


def rewards_json(summary: RewardsSummary) -> dict[str, object]:
    return {
        "pointsTotal": summary.balance.points_total,
        "pointsAvailable": summary.balance.points_available,
        "tier": summary.balance.tier,
        "history": [
            {
                "entryId": entry.entry_id,
                "eventType": entry.event_type,
                "pointsDelta": entry.points_delta,
                "metadata": entry.metadata,
                "createdAt": _timestamp(entry.created_at),
            }
            for entry in summary.history
        ],
    }


def goals_json(targets: GoalTargets) -> dict[str, object]:
    return {"bmr": targets.bmr, "tdee": targets.tdee, "proteinG": targets.protein_g}
