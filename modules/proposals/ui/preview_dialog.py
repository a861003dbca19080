"""Inline PDF preview of the proposal being edited."""

from __future__ import annotations

from typing import Optional

from PySide6 import QtWidgets
from PySide6.QtPdf import QPdfDocument
from PySide6.QtPdfWidgets import QPdfView

from ..services.exporter import PreviewHandle


class PdfPreviewDialog(QtWidgets.QDialog):
    """Shows a :class:`PreviewHandle` and releases it when the dialog closes."""

    def __init__(self, handle: PreviewHandle, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.handle = handle
        self.setWindowTitle(f"Preview – {handle.filename}")
        self.resize(720, 900)

        layout = QtWidgets.QVBoxLayout(self)
        self.document = QPdfDocument(self)
        self.view = QPdfView(self)
        self.view.setPageMode(QPdfView.PageMode.MultiPage)
        self.view.setDocument(self.document)
        layout.addWidget(self.view, 1)

        footer = QtWidgets.QHBoxLayout()
        footer.addWidget(QtWidgets.QLabel(f"{handle.page_count} page(s)"))
        footer.addStretch()
        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Close, parent=self)
        buttons.rejected.connect(self.reject)
        footer.addWidget(buttons)
        layout.addLayout(footer)

        self.document.load(str(handle.path))
        self.finished.connect(self._release)

    def _release(self, *_args) -> None:
        self.document.close()
        self.handle.release()
