# tests/test_bootstrap.py

from __future__ import annotations

import json

import pytest

from tasks_datastore.cli.bootstrap import create_initial_state
from tasks_datastore.data.models import SortOrder, UserPreferences

from .fakes import take


@pytest.mark.asyncio
async def test_legacy_preferences_are_migrated_on_first_read(settings) -> None:
    settings.legacy_preferences_path.write_text(
        json.dumps({"sort_order": "BY_DEADLINE", "show_completed": True, "theme": "dark"}),
        "utf-8",
    )
    state = create_initial_state(settings=settings)

    [prefs] = await take(state.user_preferences.user_preferences(), 1)

    assert prefs == UserPreferences(show_completed=True, sort_order=SortOrder.BY_DEADLINE)
    # Keys this app does not own stay in the legacy file.
    assert json.loads(settings.legacy_preferences_path.read_text("utf-8")) == {"theme": "dark"}
    await state.view_model.close()


@pytest.mark.asyncio
async def test_unseeded_state_has_no_tasks(settings) -> None:
    settings.seed_sample_tasks = False
    state = create_initial_state(settings=settings)

    [model] = await take(state.view_model.tasks_ui_model_flow(), 1)

    assert model.tasks == ()
    await state.view_model.close()


@pytest.mark.asyncio
async def test_legacy_string_flag_does_not_turn_show_completed_on(settings) -> None:
    settings.legacy_preferences_path.write_text(
        json.dumps({"show_completed": "false", "sort_order": "BY_PRIORITY"}),
        "utf-8",
    )
    state = create_initial_state(settings=settings)

    [prefs] = await take(state.user_preferences.user_preferences(), 1)

    assert prefs == UserPreferences(show_completed=False, sort_order=SortOrder.BY_PRIORITY)
    assert not settings.legacy_preferences_path.exists()
    await state.view_model.close()
