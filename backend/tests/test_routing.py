"""Unit tests for the client-side route guard."""

import pytest

from fitboost.models import UserProfile
from fitboost.routing import Route, resolve_route


def _user(onboarded: bool = True, is_admin: bool = False) -> UserProfile:
    return UserProfile(id="1", email="a@x.com", name="A", onboarded=onboarded, is_admin=is_admin)


class TestSignedOut:
    @pytest.mark.parametrize("route", list(Route))
    def test_every_route_goes_to_login(self, route: Route) -> None:
        assert resolve_route(route, None) is Route.LOGIN


class TestNotOnboarded:
    @pytest.mark.parametrize("route", [Route.DASHBOARD, Route.TRAINER, Route.ADMIN, Route.LOGIN])
    def test_forced_to_onboarding(self, route: Route) -> None:
        assert resolve_route(route, _user(onboarded=False)) is Route.ONBOARDING


class TestOnboarded:
    def test_login_redirects_to_dashboard(self) -> None:
        assert resolve_route(Route.LOGIN, _user()) is Route.DASHBOARD

    def test_onboarding_redirects_unless_editing(self) -> None:
        assert resolve_route(Route.ONBOARDING, _user()) is Route.DASHBOARD
        assert resolve_route(Route.ONBOARDING, _user(), editing=True) is Route.ONBOARDING

    @pytest.mark.parametrize(
        "route",
        [Route.TRAINER, Route.NUTRITIONIST, Route.BODY_SCAN, Route.FOOD_SCAN, Route.WORKOUT_CALENDAR],
    )
    def test_feature_pages_allowed(self, route: Route) -> None:
        assert resolve_route(route, _user()) is route

    def test_admin_page_requires_admin(self) -> None:
        assert resolve_route(Route.ADMIN, _user()) is Route.DASHBOARD
        assert resolve_route(Route.ADMIN, _user(is_admin=True)) is Route.ADMIN
