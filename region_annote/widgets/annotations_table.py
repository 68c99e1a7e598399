# region_annote/widgets/annotations_table.py
from __future__ import annotations

from typing import List, Optional, Sequence

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor
from PyQt5.QtWidgets import QAbstractItemView, QTableWidget, QTableWidgetItem, QWidget

from ..domain import Annotation
from ..timeutils import decode_timestamp


TABLE_COLUMNS = ["startTime", "endTime", "comment", "shape", "id"]


class AnnotationsTable(QTableWidget):
    """
    Read-only list of committed annotations, in store order.

    Rows of annotations that are active at the current time are highlighted.
    Double-clicking a row asks to seek to that annotation's start.
    """
    seek_requested = pyqtSignal(float)  # seconds

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(0, len(TABLE_COLUMNS), parent)

        self.setHorizontalHeaderLabels(TABLE_COLUMNS)
        self.horizontalHeader().setStretchLastSection(True)
        self.horizontalHeader().setDefaultSectionSize(120)

        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.cellDoubleClicked.connect(self._on_double_click)

        self._records: List[Annotation] = []
        self._active_ids: set = set()

    # ---------------- Public API ----------------

    def set_records(self, records: Sequence[Annotation]) -> None:
        self._records = list(records or [])
        self.refresh()

    def set_active_ids(self, ids: Sequence[str]) -> None:
        new_ids = set(ids or [])
        if new_ids == self._active_ids:
            return
        self._active_ids = new_ids
        self._paint_active_rows()

    def refresh(self) -> None:
        self.setRowCount(len(self._records))
        for row, rec in enumerate(self._records):
            s = rec.shape
            values = [
                rec.start_time,
                rec.end_time,
                rec.comment,
                f"({s.start_x:g}, {s.start_y:g}) - ({s.end_x:g}, {s.end_y:g})",
                rec.id,
            ]
            for col, text in enumerate(values):
                item = QTableWidgetItem(str(text))
                item.setFlags(item.flags() & ~Qt.ItemIsEditable)
                self.setItem(row, col, item)
        self._paint_active_rows()
        if self._records:
            self.scrollToBottom()

    # ---------------- Internals ----------------

    def _paint_active_rows(self) -> None:
        highlight = QBrush(QColor(249, 115, 22, 70))
        clear = QBrush()
        for row, rec in enumerate(self._records):
            brush = highlight if rec.id in self._active_ids else clear
            for col in range(self.columnCount()):
                item = self.item(row, col)
                if item is not None:
                    item.setBackground(brush)

    def _on_double_click(self, row: int, _col: int) -> None:
        if not (0 <= row < len(self._records)):
            return
        self.seek_requested.emit(decode_timestamp(self._records[row].start_time))
