"""User profile domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MacroShare:
    """Fractions of the daily totals assigned to one meal time."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyNutrition:
    """Daily calorie and macro totals computed for a user."""

    daily_calories: float
    daily_protein: float
    daily_carbs: float
    daily_fat: float
    meal_distribution: dict[str, MacroShare] = field(default_factory=dict)


@dataclass(frozen=True)
class UserProfile:
    """Read-only snapshot of a stored user profile."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    username: str | None = None
    gender: str | None = None
    age: int | None = None
    weight: float | None = None
    height: float | None = None
    activity_level: str | None = None
    goal: str | None = None
    allergies: tuple[str, ...] = ()
    food_likes: tuple[str, ...] = ()
    food_dislikes: tuple[str, ...] = ()
    fitness_level: str | None = None
    fitness_goal: str | None = None
    equipment: tuple[str, ...] = ()
    muscle_groups: tuple[str, ...] = ()
    workout_days_per_week: int | None = None
    nutrition: DailyNutrition | None = None

    @property
    def display_name(self) -> str:
        """Return the first name, or a neutral fallback."""
        return self.first_name or "User"

    @property
    def full_name(self) -> str:
        """Return first and last name joined, or a neutral fallback."""
        joined = " ".join(
            part for part in (self.first_name, self.last_name) if part
        ).strip()
        return joined or "User"
