# main.py
import sys
from datetime import datetime

from PyQt5.QtWidgets import (QApplication, QMainWindow, QStackedWidget, QWidget, QHBoxLayout,
                             QVBoxLayout, QLabel, QListWidget, QAction, QFileDialog)
from PyQt5.QtCore import QTimer
from PyQt5.QtGui import QKeySequence

from model.database import InventoryDB
from model.inventory import InventoryStore
from ui.analytics import AnalyticsWidget
from ui.generator import GeneratorWidget
from ui.inventory_view import InventoryWidget
from ui.settings_view import SettingsWidget
from ui.styles import get_stylesheet, toast_style
from utils.formatting import backup_filename, format_currency

# (key, sidebar text, header title, header subtitle)
PAGES = [
    ("generator", "QR Generator", "QR Code Generator", "Generate QR codes for your jewelry items"),
    ("inventory", "Inventory", "Inventory Management", "Manage your jewelry inventory"),
    ("analytics", "Analytics", "Analytics Dashboard", "View business insights and statistics"),
    ("settings", "Settings", "Settings", "Configure application settings"),
]


class MainApp(QMainWindow):
    def __init__(self, store):
        super().__init__()
        self.store = store
        self.setWindowTitle(store.settings.storeName)
        self.resize(1400, 900)
        self.setStyleSheet(get_stylesheet())

        self._toast_timer = QTimer(self)
        self._toast_timer.setSingleShot(True)
        self._toast_timer.timeout.connect(self.clear_message)

        central = QWidget()
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)
        self.setCentralWidget(central)

        # --- Sidebar ---
        side = QWidget(); side.setFixedWidth(220)
        s_lay = QVBoxLayout(side)
        self.lbl_brand = QLabel(); self.lbl_brand.setObjectName("SectionTitle"); self.lbl_brand.setWordWrap(True)
        s_lay.addWidget(self.lbl_brand)
        self.nav = QListWidget(); self.nav.setObjectName("Sidebar")
        for _, text, _, _ in PAGES:
            self.nav.addItem(text)
        self.nav.currentRowChanged.connect(self.switch_page)
        s_lay.addWidget(self.nav)
        self.lbl_totals = QLabel(); self.lbl_totals.setStyleSheet("color: #888;")
        s_lay.addWidget(self.lbl_totals)
        root.addWidget(side)

        # --- Header + pages ---
        body = QWidget(); m_lay = QVBoxLayout(body)
        self.lbl_title = QLabel(); self.lbl_title.setObjectName("HeaderTitle")
        self.lbl_subtitle = QLabel(); self.lbl_subtitle.setObjectName("HeaderSubtitle")
        m_lay.addWidget(self.lbl_title); m_lay.addWidget(self.lbl_subtitle)

        self.stack = QStackedWidget()
        self.generator = GeneratorWidget(store)
        self.inventory = InventoryWidget(store)
        self.analytics = AnalyticsWidget(store)
        self.settings_page = SettingsWidget(store)
        for page in (self.generator, self.inventory, self.analytics, self.settings_page):
            self.stack.addWidget(page)
        for page in (self.generator, self.inventory, self.settings_page):
            page.message.connect(self.show_message)
        m_lay.addWidget(self.stack)
        root.addWidget(body, stretch=1)

        self.inventory.edit_requested.connect(self.edit_item)
        self.inventory.qr_requested.connect(self.show_item_qr)

        self.build_menu()
        self.store.subscribe(self.on_store_event)
        self.nav.setCurrentRow(0)
        self.refresh_totals()

    def build_menu(self):
        m_file = self.menuBar().addMenu("&File")
        act_new = QAction("New Item", self); act_new.setShortcut(QKeySequence("Ctrl+N"))
        act_new.triggered.connect(self.new_item)
        act_save = QAction("Save", self); act_save.setShortcut(QKeySequence.Save)
        act_save.triggered.connect(self.save_now)
        act_export = QAction("Export Data", self); act_export.setShortcut(QKeySequence("Ctrl+E"))
        act_export.triggered.connect(self.export_data)
        act_import = QAction("Import Data", self)
        act_import.triggered.connect(self.import_data)
        act_quit = QAction("Quit", self); act_quit.setShortcut(QKeySequence.Quit)
        act_quit.triggered.connect(self.close)
        m_file.addAction(act_new)
        m_file.addAction(act_save)
        m_file.addSeparator()
        m_file.addAction(act_export)
        m_file.addAction(act_import)
        m_file.addSeparator()
        m_file.addAction(act_quit)

        m_view = self.menuBar().addMenu("&View")
        for row, (_, text, _, _) in enumerate(PAGES):
            act = QAction(text, self)
            act.triggered.connect(lambda _=False, r=row: self.nav.setCurrentRow(r))
            m_view.addAction(act)

    # --- navigation ---

    def switch_page(self, row):
        if row < 0:
            return
        _, _, title, subtitle = PAGES[row]
        self.stack.setCurrentIndex(row)
        self.lbl_title.setText(title)
        self.lbl_subtitle.setText(subtitle)

    def new_item(self):
        self.nav.setCurrentRow(0)
        self.generator.new_item()

    def edit_item(self, item_id):
        self.nav.setCurrentRow(0)
        self.generator.start_edit(item_id)

    def show_item_qr(self, item_id):
        item = self.store.get(item_id)
        if item:
            self.nav.setCurrentRow(0)
            self.generator.show_qr(item)

    # --- menu actions ---

    def save_now(self):
        result = self.store.save()
        if result:
            self.show_message("Data saved", "success")
        else:
            self.show_message(f"Save failed: {result.error}", "error")

    def export_data(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export Data", backup_filename(datetime.now()), "JSON (*.json)")
        if not path:
            return
        result = self.store.export_file(path)
        if result:
            self.show_message("Data exported successfully!", "success")
        else:
            self.show_message("Failed to export data", "error")

    def import_data(self):
        path, _ = QFileDialog.getOpenFileName(self, "Import Data", "", "JSON (*.json)")
        if not path:
            return
        result = self.store.import_file(path)
        if result:
            self.show_message("Data imported successfully!", "success")
        elif result is not self.store.last_save:
            # Save failures already surface through on_store_event.
            self.show_message("Failed to import data", "error")

    # --- feedback ---

    def show_message(self, text, kind="info"):
        self.statusBar().setStyleSheet(toast_style(kind))
        self.statusBar().showMessage(text)
        self._toast_timer.start(3500)

    def clear_message(self):
        self.statusBar().clearMessage()
        self.statusBar().setStyleSheet("")

    def refresh_totals(self):
        stats = self.store.stats()
        self.lbl_brand.setText(self.store.settings.storeName)
        self.lbl_totals.setText(f"{stats.total_items} items\n{format_currency(stats.total_value)}")

    def on_store_event(self, event):
        self.refresh_totals()
        self.setWindowTitle(self.store.settings.storeName)
        if event.result is not None and not event.result:
            self.show_message(f"Could not save data: {event.result.error}", "error")


def main():
    app = QApplication(sys.argv)
    store = InventoryStore(InventoryDB())
    window = MainApp(store)
    store.load()
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
