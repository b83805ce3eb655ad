# ui/analytics.py
from PyQt5.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QFrame
from PyQt5.QtCore import Qt

from utils.formatting import format_currency


class StatCard(QFrame):
    def __init__(self, caption):
        super().__init__()
        self.setObjectName("StatCard")
        lay = QVBoxLayout(self)
        self.lbl_value = QLabel("0"); self.lbl_value.setObjectName("StatValue")
        self.lbl_value.setAlignment(Qt.AlignCenter)
        lbl_caption = QLabel(caption); lbl_caption.setAlignment(Qt.AlignCenter)
        lay.addWidget(self.lbl_value); lay.addWidget(lbl_caption)

    def set_value(self, text):
        self.lbl_value.setText(text)


class AnalyticsWidget(QWidget):
    """Business overview: headline numbers plus counts by type and purity."""
    def __init__(self, store):
        super().__init__()
        self.store = store

        layout = QVBoxLayout(self)
        layout.setContentsMargins(30, 20, 30, 20)

        h_cards = QHBoxLayout()
        self.card_items = StatCard("Total Items")
        self.card_value = StatCard("Total Value")
        self.card_types = StatCard("Item Types")
        self.card_weight = StatCard("Total Weight (g)")
        self.card_avg = StatCard("Average Price")
        for c in (self.card_items, self.card_value, self.card_types, self.card_weight, self.card_avg):
            h_cards.addWidget(c)
        layout.addLayout(h_cards)
        layout.addSpacing(20)

        h_lists = QHBoxLayout()
        self.grid_type = self._breakdown(h_lists, "Items by Type")
        self.grid_purity = self._breakdown(h_lists, "Items by Purity")
        layout.addLayout(h_lists)
        layout.addStretch()

        self.store.subscribe(lambda event: self.refresh())
        self.refresh()

    def _breakdown(self, parent_layout, title):
        box = QVBoxLayout()
        lbl = QLabel(title); lbl.setObjectName("SectionTitle")
        box.addWidget(lbl)
        grid = QGridLayout()
        box.addLayout(grid)
        box.addStretch()
        parent_layout.addLayout(box)
        return grid

    def _fill(self, grid, counts):
        while grid.count():
            w = grid.takeAt(0).widget()
            if w:
                w.setParent(None)
        for row, (name, count) in enumerate(counts.items()):
            grid.addWidget(QLabel(name), row, 0)
            lbl = QLabel(f"<b>{count}</b>"); lbl.setAlignment(Qt.AlignRight)
            grid.addWidget(lbl, row, 1)

    def refresh(self):
        stats = self.store.stats()
        self.card_items.set_value(str(stats.total_items))
        self.card_value.set_value(format_currency(stats.total_value))
        self.card_types.set_value(str(len(stats.by_type)))
        self.card_weight.set_value(f"{stats.total_weight:g}")
        self.card_avg.set_value(format_currency(stats.average_price))
        self._fill(self.grid_type, stats.by_type)
        self._fill(self.grid_purity, stats.by_purity)
