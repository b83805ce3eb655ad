# ui/settings_view.py
from PyQt5.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QLineEdit, QPushButton
from PyQt5.QtCore import pyqtSignal

from model.models import ValidationError


class SettingsWidget(QWidget):
    message = pyqtSignal(str, str)

    def __init__(self, store):
        super().__init__()
        self.store = store

        layout = QVBoxLayout(self)
        layout.setContentsMargins(30, 20, 30, 20)
        lbl = QLabel("Store"); lbl.setObjectName("SectionTitle")
        layout.addWidget(lbl)

        form = QFormLayout()
        self.txt_store = QLineEdit()
        form.addRow("Store Name", self.txt_store)
        self.lbl_next = QLabel()
        form.addRow("Next Item ID", self.lbl_next)
        self.lbl_path = QLabel(str(store.db.data_dir))
        self.lbl_path.setStyleSheet("color: #888;")
        form.addRow("Data Folder", self.lbl_path)
        layout.addLayout(form)

        btn_save = QPushButton("Save Settings"); btn_save.setObjectName("PrimaryButton")
        btn_save.clicked.connect(self.save)
        layout.addWidget(btn_save)
        layout.addStretch()

        self.store.subscribe(lambda event: self.refresh())
        self.refresh()

    def refresh(self):
        self.txt_store.setText(self.store.settings.storeName)
        self.lbl_next.setText(self.store.peek_next_item_id())

    def save(self):
        try:
            result = self.store.update_settings(self.txt_store.text())
        except ValidationError:
            self.message.emit("Store name cannot be empty", "error")
            return
        if result:
            self.message.emit("Settings saved", "success")
