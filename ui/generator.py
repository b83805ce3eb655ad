# ui/generator.py
from datetime import datetime

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel,
                             QPushButton, QLineEdit, QComboBox, QPlainTextEdit, QFrame,
                             QFileDialog, QApplication, QScrollArea)
from PyQt5.QtCore import Qt, QTimer, QUrl, pyqtSignal
from PyQt5.QtGui import QPixmap, QImage, QTextDocument
from PyQt5.QtPrintSupport import QPrinter, QPrintDialog

from graphics.qr_label import (build_payload, payload_text, render_qr, to_png_bytes,
                               qr_filename, label_html)
from model.inventory import calculate_price
from model.models import ITEM_TYPES, OTHER_TYPE, FIELDS_BY_NAME, ValidationError, NotFoundError
from utils.formatting import locale_date

# Plain line edits, in form order. itemType and description get their own widgets.
LINE_FIELDS = ["storeName", "itemId", "weight", "purity", "size", "color", "hallmark",
               "goldRate", "makingCharges", "stoneValue", "totalPrice"]
PRICE_INPUTS = ["weight", "goldRate", "makingCharges", "stoneValue"]


class GeneratorWidget(QWidget):
    """Item form on the left, QR preview and label actions on the right."""
    message = pyqtSignal(str, str)  # text, kind

    def __init__(self, store):
        super().__init__()
        self.store = store
        self.editing_id = None
        self.current_qr = None  # (payload, png bytes) of the label on screen

        self._price_timer = QTimer(self)
        self._price_timer.setSingleShot(True)
        self._price_timer.setInterval(500)
        self._price_timer.timeout.connect(lambda: self.calculate_price(quiet=True))

        self.setup_ui()
        self.store.subscribe(self.on_store_event)

    def setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(30, 20, 30, 20)
        layout.setSpacing(25)

        # --- Left: form ---
        form_box = QWidget()
        f_lay = QVBoxLayout(form_box)
        h_mode = QHBoxLayout()
        lbl_form = QLabel("Item Details"); lbl_form.setObjectName("SectionTitle")
        self.lbl_mode = QLabel("Add New")
        h_mode.addWidget(lbl_form); h_mode.addStretch(); h_mode.addWidget(self.lbl_mode)
        f_lay.addLayout(h_mode)

        form = QFormLayout()
        self.inputs = {}
        for name in LINE_FIELDS:
            edit = QLineEdit()
            self.inputs[name] = edit
            label = FIELDS_BY_NAME[name].label + (" *" if FIELDS_BY_NAME[name].required else "")
            form.addRow(label, edit)
            if name == "itemId":
                edit.setReadOnly(True)
                self.cmb_type = QComboBox()
                self.cmb_type.addItems(ITEM_TYPES + [OTHER_TYPE])
                self.cmb_type.currentTextChanged.connect(self.handle_type_change)
                form.addRow("Item Type *", self.cmb_type)
                self.txt_custom = QLineEdit()
                self.txt_custom.setPlaceholderText("Enter custom type")
                self.lbl_custom = QLabel("Custom Type *")
                form.addRow(self.lbl_custom, self.txt_custom)
        for name in PRICE_INPUTS:
            self.inputs[name].textEdited.connect(lambda _text: self._price_timer.start())

        self.txt_desc = QPlainTextEdit(); self.txt_desc.setMaximumHeight(80)
        form.addRow(FIELDS_BY_NAME["description"].label, self.txt_desc)
        f_lay.addLayout(form)

        h_btns = QHBoxLayout()
        btn_calc = QPushButton("Calculate Price"); btn_calc.clicked.connect(lambda: self.calculate_price())
        self.btn_submit = QPushButton("Generate QR Code"); self.btn_submit.setObjectName("PrimaryButton")
        self.btn_submit.clicked.connect(self.submit)
        btn_clear = QPushButton("Clear"); btn_clear.clicked.connect(self.clear_form)
        self.btn_cancel = QPushButton("Cancel Edit"); self.btn_cancel.clicked.connect(self.cancel_edit)
        self.btn_cancel.hide()
        for b in (btn_calc, btn_clear, self.btn_cancel, self.btn_submit):
            h_btns.addWidget(b)
        f_lay.addLayout(h_btns)
        f_lay.addStretch()

        scroll = QScrollArea(); scroll.setWidgetResizable(True)
        scroll.setStyleSheet("background: transparent; border: none;")
        scroll.setWidget(form_box)
        layout.addWidget(scroll, stretch=3)

        # --- Right: QR panel ---
        panel = QFrame(); panel.setObjectName("QRPanel")
        p_lay = QVBoxLayout(panel)
        p_lay.setContentsMargins(20, 20, 20, 20)
        lbl_qr = QLabel("QR Label"); lbl_qr.setObjectName("SectionTitle")
        p_lay.addWidget(lbl_qr)
        self.lbl_status = QLabel()
        p_lay.addWidget(self.lbl_status)

        self.lbl_qr = QLabel(); self.lbl_qr.setObjectName("QRPreview")
        self.lbl_qr.setFixedSize(300, 300)
        self.lbl_qr.setAlignment(Qt.AlignCenter)
        p_lay.addWidget(self.lbl_qr, alignment=Qt.AlignHCenter)

        self.txt_payload = QPlainTextEdit(); self.txt_payload.setReadOnly(True)
        p_lay.addWidget(self.txt_payload)

        self.qr_actions = QWidget()
        h_qr = QHBoxLayout(self.qr_actions); h_qr.setContentsMargins(0, 0, 0, 0)
        btn_save = QPushButton("Save"); btn_save.clicked.connect(self.save_qr)
        btn_print = QPushButton("Print"); btn_print.clicked.connect(self.print_qr)
        btn_copy = QPushButton("Copy Data"); btn_copy.clicked.connect(self.copy_qr)
        for b in (btn_save, btn_print, btn_copy):
            h_qr.addWidget(b)
        p_lay.addWidget(self.qr_actions)
        layout.addWidget(panel, stretch=2)

        self.handle_type_change(self.cmb_type.currentText())
        self.reset_qr_panel()

    # --- form state ---

    def handle_type_change(self, item_type):
        is_other = item_type == OTHER_TYPE
        self.lbl_custom.setVisible(is_other)
        self.txt_custom.setVisible(is_other)
        if not is_other:
            self.txt_custom.clear()

    def collect_fields(self):
        fields = {name: edit.text() for name, edit in self.inputs.items()}
        fields["itemType"] = self.cmb_type.currentText()
        fields["customType"] = self.txt_custom.text()
        fields["description"] = self.txt_desc.toPlainText()
        return fields

    def fill_form(self, item):
        for name, edit in self.inputs.items():
            edit.setText(getattr(item, name))
        if item.itemType in ITEM_TYPES:
            self.cmb_type.setCurrentText(item.itemType)
        else:
            self.cmb_type.setCurrentText(OTHER_TYPE)
            self.txt_custom.setText(item.itemType)
        self.txt_desc.setPlainText(item.description)

    def clear_form(self):
        self._price_timer.stop()
        for edit in self.inputs.values():
            edit.clear()
        self.txt_desc.clear()
        self.cmb_type.setCurrentIndex(0)
        self.inputs["storeName"].setText(self.store.settings.storeName)
        self.reset_qr_panel()
        if self.editing_id is None:
            self.inputs["itemId"].setText(self.store.peek_next_item_id())
        else:
            item = self.store.get(self.editing_id)
            if item:
                self.inputs["itemId"].setText(item.itemId)

    def new_item(self):
        self.editing_id = None
        self._set_mode(False)
        self.clear_form()
        self.inputs["weight"].setFocus()

    def start_edit(self, item_id):
        item = self.store.get(item_id)
        if item is None:
            print(f" [UI] Edit ignored, {item_id} no longer exists.")
            return
        self.editing_id = item_id
        self._set_mode(True)
        self.fill_form(item)
        self.show_qr(item)

    def cancel_edit(self):
        self.editing_id = None
        self._set_mode(False)
        self.clear_form()

    def _set_mode(self, editing):
        self.lbl_mode.setText("Edit Mode" if editing else "Add New")
        self.btn_submit.setText("Update Item" if editing else "Generate QR Code")
        self.btn_cancel.setVisible(editing)

    def submit(self):
        fields = self.collect_fields()
        try:
            if self.editing_id:
                item = self.store.update(self.editing_id, fields)
                self.message.emit("Item updated successfully!", "success")
            else:
                item = self.store.create(fields)
                self.message.emit("New item added successfully!", "success")
        except ValidationError as e:
            self.message.emit(str(e), "error")
            self._focus_field(e.field)
            return
        except NotFoundError as e:
            print(f" [UI] {e}")
            self.cancel_edit()
            return

        self.show_qr(item)
        if not self.editing_id:
            # Keep the label on screen, only roll the form over to the next id.
            self.inputs["itemId"].setText(self.store.peek_next_item_id())

    def _focus_field(self, name):
        if name in self.inputs:
            self.inputs[name].setFocus()
        elif name == "customType":
            self.txt_custom.setFocus()
        elif name == "itemType":
            self.cmb_type.setFocus()

    def calculate_price(self, quiet=False):
        f = self.collect_fields()
        total = calculate_price(f["weight"], f["goldRate"], f["makingCharges"], f["stoneValue"])
        if total is None:
            if not quiet:
                self.message.emit("Please enter weight and gold rate first", "warning")
            return
        self.inputs["totalPrice"].setText(f"{total:.2f}")
        self.message.emit("Price calculated automatically", "info")

    # --- QR panel ---

    def reset_qr_panel(self):
        self.current_qr = None
        self.lbl_qr.clear()
        self.lbl_qr.setText("QR code will appear here")
        self.txt_payload.clear()
        self.txt_payload.hide()
        self.qr_actions.hide()
        self.lbl_status.setText("Ready to generate")

    def show_qr(self, item):
        payload = build_payload(item)
        png = to_png_bytes(render_qr(payload))
        pix = QPixmap()
        pix.loadFromData(png, "PNG")
        self.lbl_qr.setPixmap(pix)
        self.txt_payload.setPlainText(payload_text(payload, indent=2))
        self.txt_payload.show()
        self.qr_actions.show()
        self.lbl_status.setText("Generated")
        self.current_qr = (payload, png)
        print(f" [QR] Rendered label for {item.itemId}")

    def save_qr(self):
        if not self.current_qr:
            self.message.emit("No QR code to save", "error")
            return
        payload, png = self.current_qr

        def ask_path(suggested):
            path, _ = QFileDialog.getSaveFileName(self, "Save QR Code", suggested, "PNG (*.png);;PDF (*.pdf)")
            return path or None

        result = self.store.db.save_image(png, qr_filename(payload), ask_path)
        if result:
            self.message.emit("QR code saved successfully!", "success")
        elif result.error:
            self.message.emit("Error saving QR code", "error")

    def print_qr(self):
        if not self.current_qr:
            self.message.emit("No QR code to print", "error")
            return
        payload, png = self.current_qr

        printer = QPrinter(QPrinter.HighResolution)
        dlg = QPrintDialog(printer, self)
        dlg.setWindowTitle(f"Print QR Label - {payload.get('itemId')}")
        if dlg.exec_() != QPrintDialog.Accepted:
            return

        doc = QTextDocument()
        doc.addResource(QTextDocument.ImageResource, QUrl("qr-label.png"), QImage.fromData(png, "PNG"))
        doc.setHtml(label_html(payload, self.store.settings.storeName, "qr-label.png",
                               locale_date(datetime.now())))
        doc.print_(printer)
        print(f" [QR] Sent label {payload.get('itemId')} to printer")

    def copy_qr(self):
        if not self.current_qr:
            self.message.emit("No QR code data to copy", "error")
            return
        QApplication.clipboard().setText(payload_text(self.current_qr[0], indent=2))
        self.message.emit("QR code data copied to clipboard!", "success")

    # --- store notifications ---

    def on_store_event(self, event):
        if event.kind in ("load", "import"):
            self.editing_id = None
            self._set_mode(False)
            self.clear_form()
        elif event.kind == "settings" and self.editing_id is None:
            self.inputs["storeName"].setText(self.store.settings.storeName)
        elif event.kind == "delete" and event.item_id == self.editing_id:
            self.cancel_edit()
