"""Client-side route guard.

Pages ask ``resolve_route`` where the current user may actually go and
redirect when the answer differs from the page they are on.
"""

from enum import Enum

from fitboost.models import UserProfile


class Route(str, Enum):
    LOGIN = "login"
    ONBOARDING = "onboarding"
    DASHBOARD = "dashboard"
    TRAINER = "trainer"
    NUTRITIONIST = "nutritionist"
    BODY_SCAN = "body-scan"
    FOOD_SCAN = "food-scan"
    WORKOUT_CALENDAR = "workout-calendar"
    ADMIN = "admin"


def resolve_route(
    requested: Route,
    user: UserProfile | None,
    editing: bool = False,
) -> Route:
    """Return the route the user should land on when asking for *requested*.

    Args:
        requested: The route being navigated to.
        user: The signed-in profile, or ``None``.
        editing: Set when onboarding is opened to edit an existing profile.

    Returns:
        *requested* when access is allowed, otherwise the redirect target.
    """
    if user is None:
        return Route.LOGIN

    if requested is Route.LOGIN:
        requested = Route.DASHBOARD

    if not user.onboarded:
        return Route.ONBOARDING

    if requested is Route.ONBOARDING and not editing:
        return Route.DASHBOARD

    if requested is Route.ADMIN and not user.is_admin:
        return Route.DASHBOARD

    return requested
