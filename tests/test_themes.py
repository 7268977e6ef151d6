from __future__ import annotations

from conftest import FailingStore, OSErrorStore, Recorder
from switchplus.events import EventType
from switchplus.storage import ACTIVE_THEME_KEY
from switchplus.themes import DEFAULT_THEME, THEMES, SettingsApp, theme_by_name


def test_catalog_names_match_unlock_feature_ids():
    names = [t.name for t in THEMES]
    assert names[:2] == ["Neon (Default)", "Classic Grey"]
    assert {"Animal Crossing", "Pokemon (Pikachu/Eevee)", "Retro Hacker", "Neon Sunset"} <= set(names)
    assert theme_by_name("Retro Hacker").left_color == "#10b981"
    assert theme_by_name("Nope") is None


def test_selection_is_clamped(ledger, store):
    app = SettingsApp(ledger, store)
    app.handle_input("up")
    assert app.selected_index == 0
    for _ in range(20):
        app.handle_input("down")
    assert app.selected_index == len(THEMES) - 1


def test_locked_theme_cannot_be_applied(ledger, store, bus):
    changed = Recorder()
    bus.subscribe(EventType.THEME_CHANGED, changed)
    app = SettingsApp(ledger, store, bus)
    app.handle_input("down")
    app.handle_input("down")  # Animal Crossing, locked by default
    app.handle_input("a")
    assert store.get(ACTIVE_THEME_KEY) is None
    assert changed.payloads == []
    assert app.active_theme() == DEFAULT_THEME


def test_unlocked_theme_is_stored_and_announced(ledger, store, bus):
    changed = Recorder()
    bus.subscribe(EventType.THEME_CHANGED, changed)
    ledger.unlock_feature("Neon Sunset")
    app = SettingsApp(ledger, store, bus)
    app.selected_index = [t.name for t in THEMES].index("Neon Sunset")
    app.handle_input("a")

    assert store.get(ACTIVE_THEME_KEY) == "Neon Sunset"
    assert changed.payloads[0]["theme"].right_color == "#f59e0b"
    assert app.active_theme().name == "Neon Sunset"


def test_active_theme_falls_back_on_unknown_or_failing_store(ledger, store):
    store.set(ACTIVE_THEME_KEY, "Deleted Theme")
    assert SettingsApp(ledger, store).active_theme() == DEFAULT_THEME
    assert SettingsApp(ledger, FailingStore()).active_theme() == DEFAULT_THEME


def test_raw_os_errors_from_store_are_not_fatal(ledger, bus):
    app = SettingsApp(ledger, OSErrorStore(), bus)
    changed = Recorder()
    bus.subscribe(EventType.THEME_CHANGED, changed)

    assert app.active_theme() == DEFAULT_THEME
    assert app.apply_selected() is True
    assert len(changed.payloads) == 1


def test_update_is_inert(ledger, store):
    app = SettingsApp(ledger, store)
    app.update(1.0)
    assert app.selected_index == 0
