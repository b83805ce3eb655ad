# ui/inventory_view.py
from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
                             QPushButton, QScrollArea, QFrame, QLineEdit, QComboBox,
                             QMessageBox)
from PyQt5.QtCore import Qt, QTimer, pyqtSignal

from model.inventory import parse_timestamp, total_pages, clamp_page
from model.models import ITEMS_PER_PAGE
from ui.styles import COLOR_PRIMARY
from utils.formatting import locale_date


class ItemCard(QFrame):
    edit_clicked = pyqtSignal(str)
    qr_clicked = pyqtSignal(str)
    delete_clicked = pyqtSignal(str)

    def __init__(self, item):
        super().__init__()
        self.item = item
        self.setObjectName("ItemCard")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 12, 18, 12)

        h_head = QHBoxLayout()
        title = QLabel(item.itemType)
        title.setStyleSheet("font-weight: bold; font-size: 16px; background: transparent;")
        lbl_id = QLabel(item.itemId)
        lbl_id.setStyleSheet(f"color: {COLOR_PRIMARY}; font-weight: bold; background: transparent;")
        h_head.addWidget(title); h_head.addStretch(); h_head.addWidget(lbl_id)
        layout.addLayout(h_head)

        created = parse_timestamp(item.dateCreated)
        details = [
            ("Weight & Purity", f"{item.weight}g • {item.purity}"),
            ("Price", f"${item.totalPrice}"),
            ("Size & Color", f"{item.size or 'N/A'} • {item.color or 'N/A'}"),
            ("Hallmark", item.hallmark or "Not specified"),
            ("Created", locale_date(created) if created else "Unknown"),
            ("Description", item.description or "No description"),
        ]
        grid = QGridLayout()
        for i, (head, text) in enumerate(details):
            cell = QVBoxLayout()
            h = QLabel(head); h.setStyleSheet("color: #888; font-size: 11px; background: transparent;")
            v = QLabel(text); v.setWordWrap(True); v.setStyleSheet("background: transparent;")
            cell.addWidget(h); cell.addWidget(v)
            grid.addLayout(cell, i // 3, i % 3)
        layout.addLayout(grid)

        h_row = QHBoxLayout()
        h_row.addStretch()
        btn_edit = QPushButton("Edit"); btn_edit.clicked.connect(lambda: self.edit_clicked.emit(item.id))
        btn_qr = QPushButton("QR Code"); btn_qr.clicked.connect(lambda: self.qr_clicked.emit(item.id))
        btn_del = QPushButton("Delete"); btn_del.setObjectName("DestructiveButton")
        btn_del.clicked.connect(lambda: self.delete_clicked.emit(item.id))
        for b in (btn_edit, btn_qr, btn_del):
            h_row.addWidget(b)
        layout.addLayout(h_row)


class InventoryWidget(QWidget):
    edit_requested = pyqtSignal(str)
    qr_requested = pyqtSignal(str)
    message = pyqtSignal(str, str)

    def __init__(self, store):
        super().__init__()
        self.store = store
        self.current_page = 1
        self.visible_items = []

        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(300)
        self._search_timer.timeout.connect(self.apply_filters)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(30, 20, 30, 20)

        # Filters
        h_filter = QHBoxLayout()
        self.txt_search = QLineEdit(); self.txt_search.setPlaceholderText("Search by ID, type, description or hallmark")
        self.txt_search.returnPressed.connect(self.apply_filters)
        self.txt_search.textChanged.connect(lambda _text: self._search_timer.start())
        btn_search = QPushButton("Search"); btn_search.clicked.connect(self.apply_filters)
        self.cmb_type = QComboBox(); self.cmb_purity = QComboBox()
        self.cmb_type.activated.connect(self.apply_filters)
        self.cmb_purity.activated.connect(self.apply_filters)
        btn_clear = QPushButton("Clear Filters"); btn_clear.clicked.connect(self.clear_filters)
        h_filter.addWidget(self.txt_search, stretch=1)
        for w in (btn_search, self.cmb_type, self.cmb_purity, btn_clear):
            h_filter.addWidget(w)
        layout.addLayout(h_filter)

        # Cards
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setStyleSheet("background: transparent; border: none;")
        container = QWidget()
        self.list_layout = QVBoxLayout(container)
        self.list_layout.setSpacing(15)
        self.list_layout.setAlignment(Qt.AlignTop)
        scroll.setWidget(container)
        layout.addWidget(scroll)

        # Pagination
        h_pages = QHBoxLayout()
        self.btn_prev = QPushButton("← Prev"); self.btn_prev.clicked.connect(lambda: self.change_page(-1))
        self.btn_next = QPushButton("Next →"); self.btn_next.clicked.connect(lambda: self.change_page(1))
        self.lbl_page = QLabel()
        h_pages.addWidget(self.btn_prev); h_pages.addStretch()
        h_pages.addWidget(self.lbl_page); h_pages.addStretch()
        h_pages.addWidget(self.btn_next)
        layout.addLayout(h_pages)

        self.store.subscribe(self.on_store_event)
        self.refresh_filter_options()
        self.apply_filters()

    def refresh_filter_options(self):
        types, purities = self.store.filter_options()
        for combo, label, values in ((self.cmb_type, "All Types", types),
                                     (self.cmb_purity, "All Purities", purities)):
            selected = combo.currentData() or ""
            combo.blockSignals(True)
            combo.clear()
            combo.addItem(label, "")
            for v in values:
                combo.addItem(v, v)
            index = combo.findData(selected)
            combo.setCurrentIndex(index if index >= 0 else 0)
            combo.blockSignals(False)

    def apply_filters(self):
        self._search_timer.stop()
        self.visible_items = self.store.filter(
            item_type=self.cmb_type.currentData() or "",
            purity=self.cmb_purity.currentData() or "",
            search_term=self.txt_search.text(),
        )
        self.current_page = 1
        self.render()

    def clear_filters(self):
        self.txt_search.blockSignals(True)
        self.txt_search.clear()
        self.txt_search.blockSignals(False)
        self.cmb_type.setCurrentIndex(0)
        self.cmb_purity.setCurrentIndex(0)
        self.apply_filters()

    def change_page(self, step):
        self.current_page = clamp_page(self.visible_items, self.current_page + step)
        self.render()

    def render(self):
        while self.list_layout.count():
            w = self.list_layout.takeAt(0).widget()
            if w:
                w.setParent(None)

        self.current_page = clamp_page(self.visible_items, self.current_page)
        page_items = self.store.paginate(self.visible_items, self.current_page)
        if not page_items:
            empty = QLabel("<h3>No items found</h3><p>Start by adding your first jewelry item</p>")
            empty.setAlignment(Qt.AlignCenter)
            empty.setStyleSheet("color: #6c757d; padding: 60px;")
            self.list_layout.addWidget(empty)

        for item in page_items:
            card = ItemCard(item)
            card.edit_clicked.connect(self.edit_requested.emit)
            card.qr_clicked.connect(self.qr_requested.emit)
            card.delete_clicked.connect(self.delete_item)
            self.list_layout.addWidget(card)

        pages = total_pages(self.visible_items, ITEMS_PER_PAGE)
        self.lbl_page.setText(f"Page {self.current_page} of {pages} "
                              f"({len(page_items)} of {len(self.visible_items)} items)")
        self.btn_prev.setEnabled(self.current_page > 1)
        self.btn_next.setEnabled(self.current_page < pages)

    def delete_item(self, item_id):
        item = self.store.get(item_id)
        if item is None:
            return
        confirm = QMessageBox.question(
            self, "Confirm Delete",
            f"Are you sure you want to delete item {item.itemId}?",
            QMessageBox.Yes | QMessageBox.No
        )
        if confirm == QMessageBox.Yes:
            self.store.delete(item_id)
            self.message.emit("Item deleted successfully", "success")

    def on_store_event(self, event):
        page = self.current_page
        self.refresh_filter_options()
        self.visible_items = self.store.filter(
            item_type=self.cmb_type.currentData() or "",
            purity=self.cmb_purity.currentData() or "",
            search_term=self.txt_search.text(),
        )
        # Stay on the same page after edits; clamp handles shrinking lists.
        self.current_page = 1 if event.kind in ("load", "import") else page
        self.render()
