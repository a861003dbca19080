"""Main window of the workshop proposals app."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6 import QtCore, QtWidgets

from ..models.repository import StoredProposal
from ..services.session import (
    VIEW_FORM,
    VIEW_LIST,
    VIEW_WELCOME,
    Notice,
    ProposalSession,
)
from .list_panel import ProposalListPanel
from .wizard_panel import WizardPanel

logger = logging.getLogger(__name__)


class WelcomePage(QtWidgets.QWidget):
    startRequested = QtCore.Signal()
    continueRequested = QtCore.Signal()
    listRequested = QtCore.Signal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.addStretch()
        title = QtWidgets.QLabel("Activity proposals")
        title.setStyleSheet("font-size: 26px; font-weight: 950;")
        title.setAlignment(QtCore.Qt.AlignCenter)
        subtitle = QtWidgets.QLabel("Describe your workshop step by step and export it as a PDF.")
        subtitle.setAlignment(QtCore.Qt.AlignCenter)
        subtitle.setWordWrap(True)
        layout.addWidget(title)
        layout.addWidget(subtitle)

        buttons = QtWidgets.QHBoxLayout()
        buttons.addStretch()
        self.start_button = QtWidgets.QPushButton("Start a new proposal")
        self.continue_button = QtWidgets.QPushButton("Continue draft")
        self.list_button = QtWidgets.QPushButton("Saved proposals")
        for button in (self.start_button, self.continue_button, self.list_button):
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)
        layout.addStretch()

        self.start_button.clicked.connect(self.startRequested.emit)
        self.continue_button.clicked.connect(self.continueRequested.emit)
        self.list_button.clicked.connect(self.listRequested.emit)


class ProposalWindow(QtWidgets.QMainWindow):
    """Switches between the welcome, form and saved-proposals views."""

    def __init__(self, session: ProposalSession, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("Activity Proposals")
        self.resize(1024, 760)
        self._build_ui()
        self._dispose = self.session.wizard.subscribe(lambda _proposal: self._update_status())
        self._sync_view()

    def _build_ui(self) -> None:
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)

        toolbar = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("New")
        self.new_button.setToolTip("Create a new proposal (clears the form)")
        self.toggle_button = QtWidgets.QPushButton("Saved proposals")
        self.save_button = QtWidgets.QPushButton("Save proposal")
        self.export_button = QtWidgets.QPushButton("Export PDF")
        self.preview_button = QtWidgets.QPushButton("Preview")
        toolbar.addWidget(self.new_button)
        toolbar.addWidget(self.toggle_button)
        toolbar.addStretch()
        toolbar.addWidget(self.save_button)
        toolbar.addWidget(self.preview_button)
        toolbar.addWidget(self.export_button)
        layout.addLayout(toolbar)

        info = QtWidgets.QHBoxLayout()
        self.id_tag = QtWidgets.QLabel()
        self.missing_tag = QtWidgets.QLabel()
        self.missing_tag.setStyleSheet("color: #E65AA6; font-weight: 700;")
        info.addWidget(self.id_tag)
        info.addWidget(self.missing_tag)
        info.addStretch()
        layout.addLayout(info)

        self.stack = QtWidgets.QStackedWidget()
        self.welcome_page = WelcomePage()
        self.wizard_panel = WizardPanel(self.session)
        self.list_panel = ProposalListPanel(self.session)
        self.stack.addWidget(self.welcome_page)
        self.stack.addWidget(self.wizard_panel)
        self.stack.addWidget(self.list_panel)
        layout.addWidget(self.stack, 1)

        self.setCentralWidget(central)
        self.setStatusBar(QtWidgets.QStatusBar())

        self.new_button.clicked.connect(self._on_new)
        self.toggle_button.clicked.connect(self._on_toggle_view)
        self.save_button.clicked.connect(self._on_save)
        self.export_button.clicked.connect(self._on_export)
        self.preview_button.clicked.connect(self._on_preview)
        self.welcome_page.startRequested.connect(self._on_new)
        self.welcome_page.continueRequested.connect(self._on_continue)
        self.welcome_page.listRequested.connect(self._on_show_list)
        self.wizard_panel.exportRequested.connect(self._on_export)
        self.list_panel.openRequested.connect(self._on_open)
        self.list_panel.noticeRaised.connect(self.show_notice)

    # ------------------------------------------------------------------ state sync
    def _sync_view(self) -> None:
        pages = {VIEW_WELCOME: self.welcome_page, VIEW_FORM: self.wizard_panel, VIEW_LIST: self.list_panel}
        self.stack.setCurrentWidget(pages[self.session.view])
        self.toggle_button.setText("Form" if self.session.view == VIEW_LIST else "Saved proposals")
        self._update_status()

    def _update_status(self) -> None:
        self.id_tag.setText(self.session.status_tag)
        missing = self.session.missing_tag
        self.missing_tag.setText(missing or "")
        self.missing_tag.setVisible(missing is not None)
        self.save_button.setText(self.session.save_label)
        self.save_button.setEnabled(self.session.can_save)

    def show_notice(self, notice: Notice) -> None:
        if notice.blocking:
            QtWidgets.QMessageBox.warning(self, "Proposals", notice.message)
        else:
            self.statusBar().showMessage(notice.message, 5000)
        self._update_status()

    # ------------------------------------------------------------------ actions
    def _on_new(self) -> None:
        self.session.new_proposal()
        self.wizard_panel.refresh()
        self._sync_view()

    def _on_continue(self) -> None:
        self.session.show_form()
        self.wizard_panel.refresh()
        self._sync_view()

    def _on_show_list(self) -> None:
        self.session.show_list()
        self._sync_view()

    def _on_toggle_view(self) -> None:
        if self.session.view == VIEW_LIST:
            self._on_continue()
        else:
            self._on_show_list()

    def _on_open(self, stored: StoredProposal) -> None:
        self.session.open_proposal(stored)
        self.wizard_panel.refresh()
        self._sync_view()

    def _on_save(self) -> None:
        self.save_button.setEnabled(False)
        self.save_button.setText("Saving…")
        QtWidgets.QApplication.processEvents()
        self.show_notice(self.session.save())

    def _on_export(self) -> None:
        directory = QtWidgets.QFileDialog.getExistingDirectory(
            self, "Export PDF to folder", str(Path.home())
        )
        if not directory:
            return
        try:
            path = self.session.export_to(Path(directory))
        except OSError as exc:
            logger.error("PDF export failed: %s", exc)
            QtWidgets.QMessageBox.warning(self, "Export PDF", f"Could not write the PDF: {exc}")
            return
        self.statusBar().showMessage(f"Exported {path.name}", 5000)

    def _on_preview(self) -> None:
        from .preview_dialog import PdfPreviewDialog

        dialog = PdfPreviewDialog(self.session.preview(), parent=self)
        dialog.exec()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self.list_panel.release()
        self.wizard_panel.release()
        if self._dispose is not None:
            self._dispose()
            self._dispose = None
        super().closeEvent(event)
