"""Wizard page: one step of the proposal form at a time."""

from __future__ import annotations

from typing import Dict, List, Optional

from PySide6 import QtCore, QtWidgets

from ..models.proposal_models import Proposal
from ..services.session import ProposalSession
from ..services.wizard import FIELD_CHOICE, FIELD_FLAG, FIELD_LINE, FieldSpec

_DOT_COLORS = {"done": "#1FA35B", "active": "#1F7AE0", "todo": "rgba(17,17,17,0.18)"}


class WizardPanel(QtWidgets.QWidget):
    """Shows the current wizard step and the Back / Next controls."""

    exportRequested = QtCore.Signal()
    stepChanged = QtCore.Signal(int)

    def __init__(self, session: ProposalSession, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self.wizard = session.wizard
        self._editors: Dict[str, QtWidgets.QWidget] = {}
        self._visible_paths: List[str] = []
        self._build_ui()
        self._dispose = self.wizard.subscribe(self._on_proposal_changed)
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        header = QtWidgets.QHBoxLayout()
        self.step_title = QtWidgets.QLabel()
        self.step_title.setStyleSheet("font-size: 20px; font-weight: 900;")
        self.step_meta = QtWidgets.QLabel()
        self.step_meta.setStyleSheet("color: rgba(17,17,17,0.6); font-weight: 700;")
        titles = QtWidgets.QVBoxLayout()
        titles.addWidget(self.step_title)
        titles.addWidget(self.step_meta)
        header.addLayout(titles)
        header.addStretch()
        layout.addLayout(header)

        self.dots_layout = QtWidgets.QHBoxLayout()
        self.dots_layout.setSpacing(6)
        self._dots: List[QtWidgets.QLabel] = []
        for _ in range(self.wizard.step_count):
            dot = QtWidgets.QLabel()
            dot.setFixedSize(10, 10)
            self._dots.append(dot)
            self.dots_layout.addWidget(dot)
        self.dots_layout.addStretch()
        layout.addLayout(self.dots_layout)

        self.content = QtWidgets.QWidget()
        self.form_layout = QtWidgets.QVBoxLayout(self.content)
        self.form_layout.setAlignment(QtCore.Qt.AlignTop)
        layout.addWidget(self.content, 1)

        nav = QtWidgets.QHBoxLayout()
        self.back_button = QtWidgets.QPushButton("Back")
        self.next_button = QtWidgets.QPushButton("Next")
        self.finish_button = QtWidgets.QPushButton("Finish and export")
        nav.addWidget(self.back_button)
        nav.addStretch()
        nav.addWidget(self.next_button)
        nav.addWidget(self.finish_button)
        layout.addLayout(nav)

        self.back_button.clicked.connect(self._on_back)
        self.next_button.clicked.connect(self._on_next)
        self.finish_button.clicked.connect(self.exportRequested.emit)

    # ------------------------------------------------------------------ rendering
    def refresh(self) -> None:
        """Rebuild the editors for the current step."""

        step = self.wizard.step
        self.step_title.setText(step.label)
        self.step_meta.setText(f"Step {self.wizard.index + 1} of {self.wizard.step_count}")
        for dot, state in zip(self._dots, self.wizard.progress()):
            dot.setStyleSheet(f"background: {_DOT_COLORS[state]}; border-radius: 5px;")
        self._rebuild_editors()
        self._update_buttons()

    def _rebuild_editors(self) -> None:
        while self.form_layout.count():
            item = self.form_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._editors.clear()
        fields = self.wizard.visible_fields()
        self._visible_paths = [spec.path for spec in fields]
        for spec in fields:
            self.form_layout.addWidget(self._make_editor(spec))

    def _make_editor(self, spec: FieldSpec) -> QtWidgets.QWidget:
        value = self.wizard.value(spec.path)
        if spec.kind == FIELD_FLAG:
            box = QtWidgets.QCheckBox(spec.label)
            box.setChecked(bool(value))
            box.toggled.connect(lambda checked, path=spec.path: self.wizard.set_value(path, checked))
            self._editors[spec.path] = box
            return box

        container = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(container)
        layout.setContentsMargins(0, 6, 0, 0)
        label = QtWidgets.QLabel(spec.label)
        label.setStyleSheet("font-weight: 800;")
        layout.addWidget(label)

        if spec.kind == FIELD_CHOICE:
            row = QtWidgets.QHBoxLayout()
            group = QtWidgets.QButtonGroup(container)
            current = getattr(value, "value", value)
            for key, text in spec.options:
                radio = QtWidgets.QRadioButton(text)
                radio.setChecked(current == key)
                radio.toggled.connect(
                    lambda checked, path=spec.path, key=key: checked and self.wizard.choose(path, key)
                )
                group.addButton(radio)
                row.addWidget(radio)
            row.addStretch()
            layout.addLayout(row)
            self._editors[spec.path] = container
            return container

        if spec.kind == FIELD_LINE:
            editor = QtWidgets.QLineEdit()
            editor.setPlaceholderText(spec.placeholder)
            editor.setText(str(value))
            editor.textEdited.connect(self.wizard.setter(spec.path))
        else:
            editor = QtWidgets.QPlainTextEdit()
            editor.setPlaceholderText(spec.placeholder)
            editor.setPlainText(str(value))
            editor.textChanged.connect(
                lambda editor=editor, path=spec.path: self.wizard.set_value(path, editor.toPlainText())
            )
        layout.addWidget(editor)
        self._editors[spec.path] = editor
        return container

    def _update_buttons(self) -> None:
        self.back_button.setEnabled(not self.wizard.is_first)
        self.next_button.setVisible(not self.wizard.is_last)
        self.next_button.setEnabled(self.wizard.can_proceed)
        self.finish_button.setVisible(self.wizard.is_last)

    # ------------------------------------------------------------------ events
    def _on_proposal_changed(self, proposal: Proposal) -> None:
        paths = [spec.path for spec in self.wizard.visible_fields()]
        if paths != self._visible_paths:
            # the accessibility answer shows or hides follow-up questions
            self._rebuild_editors()
        self._update_buttons()

    def _on_back(self) -> None:
        if self.wizard.back():
            self.refresh()
            self.stepChanged.emit(self.wizard.index)

    def _on_next(self) -> None:
        if self.wizard.next():
            self.refresh()
            self.stepChanged.emit(self.wizard.index)

    def release(self) -> None:
        if self._dispose is not None:
            self._dispose()
            self._dispose = None
