"""Unit tests for coaching content, prompt builders and translations."""

import pytest

from fitboost.coaching import (
    EXERCISE_DATABASE,
    GREETINGS,
    QUICK_ACTIONS,
    schedule_prompt,
    technique_prompt,
    youtube_search_url,
)
from fitboost.i18n_service import (
    get_supported_languages,
    llm_language_instruction,
    load_translations,
    translate,
)
from fitboost.models import UserGoal


# ── coaching content ──────────────────────────────────────────────────────────


class TestContent:
    def test_every_role_has_greeting_and_actions(self) -> None:
        for role in ("trainer", "nutritionist"):
            assert GREETINGS[role]
            assert QUICK_ACTIONS[role]

    def test_nutritionist_meal_plan_asks_for_grams(self) -> None:
        plan = QUICK_ACTIONS["nutritionist"][0]
        assert plan.label == "Plano Alimentar"
        assert "gramas" in plan.prompt

    def test_exercise_catalogue_not_empty(self) -> None:
        assert all(EXERCISE_DATABASE.values())


class TestYoutubeSearchUrl:
    def test_encodes_exercise(self) -> None:
        assert youtube_search_url("Leg Press 45") == (
            "https://www.youtube.com/results?search_query=tecnica+correta+Leg+Press+45"
        )

    def test_keeps_parentheses(self) -> None:
        assert youtube_search_url("Crossover (Polia Alta)").endswith("Crossover+(Polia+Alta)")


class TestSchedulePrompt:
    def test_days_listed_in_week_order(self) -> None:
        prompt = schedule_prompt(["Sexta-feira", "Segunda-feira"], UserGoal.HYPERTROPHY)
        assert "**Segunda-feira, Sexta-feira**" in prompt
        assert "Hipertrofia" in prompt

    def test_no_goal_uses_default(self) -> None:
        assert "Condicionamento geral" in schedule_prompt(["Domingo"], None)

    def test_empty_days_rejected(self) -> None:
        with pytest.raises(ValueError):
            schedule_prompt([], None)

    def test_unknown_day_rejected(self) -> None:
        with pytest.raises(ValueError, match="Funday"):
            schedule_prompt(["Funday"], None)


class TestTechniquePrompt:
    def test_includes_search_fallback(self) -> None:
        prompt = technique_prompt("Agachamento Livre")
        assert "**Agachamento Livre**" in prompt
        assert youtube_search_url("Agachamento Livre") in prompt
        assert "[Assistir Vídeo no YouTube]" in prompt


# ── translations ──────────────────────────────────────────────────────────────


class TestTranslations:
    def test_bundles_share_keys(self) -> None:
        pt, en = load_translations("pt"), load_translations("en")
        for section in ("ui", "errors"):
            assert set(pt[section]) == set(en[section])  # type: ignore[arg-type]

    def test_unknown_language_falls_back_to_portuguese(self) -> None:
        assert load_translations("xx") == load_translations("pt")

    def test_error_section(self) -> None:
        assert translate("errors.ai_vision", "pt") == "Erro na análise visual."
        assert translate("errors.ai_vision", "en") == "Image analysis failed."

    def test_missing_key_returns_key(self) -> None:
        assert translate("no_such_key") == "no_such_key"

    def test_placeholders_are_formatted(self) -> None:
        assert "3" in translate("admin_users_count", "en", count=3)

    def test_supported_languages(self) -> None:
        assert [lang["code"] for lang in get_supported_languages()] == ["pt", "en"]

    def test_language_instruction(self) -> None:
        assert llm_language_instruction("pt") == ""
        assert "English" in llm_language_instruction("en")
