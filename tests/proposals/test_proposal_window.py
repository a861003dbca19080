from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6.QtWidgets import QApplication
except ImportError as exc:  # pragma: no cover - environment-specific
    pytest.skip(f"PySide6 unavailable: {exc}", allow_module_level=True)

from modules.proposals import create_proposal_window  # noqa: E402
from modules.proposals.services.session import VIEW_FORM, VIEW_LIST  # noqa: E402


def _ensure_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def test_window_walks_through_new_save_and_list(settings) -> None:
    _ensure_app()
    window = create_proposal_window(settings=settings)
    window.show()
    session = window.session

    assert window.stack.currentWidget() is window.welcome_page
    assert not window.save_button.isEnabled()

    window.welcome_page.start_button.click()
    assert session.view == VIEW_FORM
    assert window.stack.currentWidget() is window.wizard_panel

    session.wizard.set_value("name", "Nature Workshop")
    assert window.save_button.isEnabled()
    assert window.missing_tag.text() == ""

    window.save_button.click()
    assert session.wizard.current_id is not None
    assert window.save_button.text() == "Save changes"

    window.toggle_button.click()
    assert session.view == VIEW_LIST
    assert window.list_panel.cards.count() == 1

    window.list_panel.search_edit.setText("opera")
    assert window.list_panel.cards.count() == 0

    window.close()
    assert session.service.store.listener_count == 0


def test_wizard_panel_navigation_and_conditional_fields(settings) -> None:
    _ensure_app()
    window = create_proposal_window(settings=settings)
    window.show()
    panel = window.wizard_panel
    window.welcome_page.start_button.click()

    assert not panel.back_button.isEnabled()
    panel.next_button.click()
    assert panel.step_meta.text() == "Step 2 of 14"

    window.session.wizard.go_to("accessibility")
    panel.refresh()
    assert set(panel._editors) == {"accessibility.can_be_adapted"}

    window.session.wizard.choose("accessibility.can_be_adapted", "no")
    assert "accessibility.what_would_be_needed" in panel._editors

    window.session.wizard.go_to("final_notes")
    panel.refresh()
    assert panel.finish_button.isVisibleTo(panel)
    assert not panel.next_button.isVisibleTo(panel)
    window.close()


def test_save_button_is_disabled_while_the_write_runs(settings, monkeypatch) -> None:
    _ensure_app()
    window = create_proposal_window(settings=settings)
    window.show()
    window.welcome_page.start_button.click()
    window.session.wizard.set_value("name", "Nature Workshop")
    store = window.session.service.store
    original_create = store.create
    during = []

    def watched_create(proposal):
        during.append((window.save_button.isEnabled(), window.session.service.saving))
        return original_create(proposal)

    monkeypatch.setattr(store, "create", watched_create)
    window.save_button.click()

    assert during == [(False, True)]
    assert window.save_button.isEnabled()
    assert len(store.list()) == 1
    window.close()
