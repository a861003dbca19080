"""Saved proposals view: searchable cards with open and delete actions."""

from __future__ import annotations

from typing import List, Optional

from PySide6 import QtCore, QtWidgets

from ..models.repository import StoredProposal, Subscription
from ..services.proposal_service import card_summary, filter_proposals
from ..services.session import ProposalSession


class ProposalCard(QtWidgets.QFrame):
    openClicked = QtCore.Signal(object)
    deleteClicked = QtCore.Signal(object)

    def __init__(self, stored: StoredProposal, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.stored = stored
        summary = card_summary(stored)
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)
        self.setStyleSheet("ProposalCard { background: #fff; border-radius: 18px; }")

        layout = QtWidgets.QVBoxLayout(self)
        title = QtWidgets.QLabel(summary.title)
        title.setStyleSheet("font-weight: 900; font-size: 16px;")
        layout.addWidget(title)
        layout.addWidget(QtWidgets.QLabel(summary.schedule))
        layout.addWidget(QtWidgets.QLabel(summary.responsible))

        buttons = QtWidgets.QHBoxLayout()
        self.open_button = QtWidgets.QPushButton("Open")
        self.delete_button = QtWidgets.QPushButton("Delete")
        buttons.addWidget(self.open_button)
        buttons.addWidget(self.delete_button)
        buttons.addStretch()
        layout.addLayout(buttons)

        self.open_button.clicked.connect(lambda: self.openClicked.emit(self.stored))
        self.delete_button.clicked.connect(lambda: self.deleteClicked.emit(self.stored))


class ProposalListPanel(QtWidgets.QWidget):
    """Live list of stored proposals.

    The panel subscribes to the store on creation; call :meth:`release` (done
    automatically on close) to drop the subscription.
    """

    openRequested = QtCore.Signal(object)
    noticeRaised = QtCore.Signal(object)

    def __init__(self, session: ProposalSession, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self._items: List[StoredProposal] = []
        self._subscription: Optional[Subscription] = None
        self._build_ui()
        self._subscription = self.session.service.subscribe(self._on_snapshot)

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        toolbar = QtWidgets.QHBoxLayout()
        self.search_edit = QtWidgets.QLineEdit()
        self.search_edit.setPlaceholderText("Search by name, responsible party or axes…")
        self.refresh_button = QtWidgets.QPushButton("Refresh")
        toolbar.addWidget(self.search_edit, 1)
        toolbar.addWidget(self.refresh_button)
        layout.addLayout(toolbar)

        self.cards = QtWidgets.QListWidget()
        self.cards.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)
        self.cards.setSpacing(6)
        layout.addWidget(self.cards, 1)

        self.empty_label = QtWidgets.QLabel("No saved proposals yet.")
        self.empty_label.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.search_edit.textChanged.connect(self._populate)
        self.refresh_button.clicked.connect(self.refresh)

    # ------------------------------------------------------------------ data
    @property
    def visible_items(self) -> List[StoredProposal]:
        return filter_proposals(self._items, self.search_edit.text())

    def refresh(self) -> None:
        self._on_snapshot(self.session.service.list())

    def _on_snapshot(self, items: List[StoredProposal]) -> None:
        self._items = list(items)
        self._populate()

    def _populate(self) -> None:
        self.cards.clear()
        items = self.visible_items
        for stored in items:
            card = ProposalCard(stored)
            card.openClicked.connect(self.openRequested.emit)
            card.deleteClicked.connect(self._on_delete)
            item = QtWidgets.QListWidgetItem()
            item.setSizeHint(card.sizeHint())
            item.setData(QtCore.Qt.UserRole, stored.id)
            self.cards.addItem(item)
            self.cards.setItemWidget(item, card)
        self.empty_label.setVisible(not items)

    # ------------------------------------------------------------------ actions
    def _on_delete(self, stored: StoredProposal) -> None:
        answer = QtWidgets.QMessageBox.question(
            self,
            "Delete proposal",
            "Delete this proposal? This cannot be undone.",
        )
        if answer != QtWidgets.QMessageBox.Yes:
            return
        self.noticeRaised.emit(self.session.delete(stored.id))

    def release(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self.release()
        super().closeEvent(event)
