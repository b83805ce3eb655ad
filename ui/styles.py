# ui/styles.py

# Color Palette
COLOR_BACKGROUND = "#0F1A2B"
COLOR_SURFACE = "#141E2F"
COLOR_SURFACE_ALT = "#1B2C44"
COLOR_PRIMARY = "#D4AF37"  # Gold
COLOR_ACCENT = "#B76E79"   # Rose Gold
COLOR_HIGHLIGHT = "#F5F5F5"
COLOR_TEXT_MUTED = "rgba(245, 245, 245, 0.7)"
COLOR_CTA = "#6A0DAD"      # Royal Purple

# Toast colours, keyed by message kind
MESSAGE_COLORS = {
    "success": "#27AE60",
    "error": "#E74C3C",
    "warning": "#F39C12",
    "info": "#3498DB",
}


def get_stylesheet():
    return f"""
    QWidget {{
        background-color: {COLOR_BACKGROUND};
        color: {COLOR_HIGHLIGHT};
        font-family: 'Segoe UI', 'Inter', sans-serif;
        font-size: 14px;
    }}

    /* --- HEADERS --- */
    QLabel#HeaderTitle {{
        font-size: 28px;
        font-weight: 700;
        color: {COLOR_HIGHLIGHT};
    }}
    QLabel#HeaderSubtitle {{
        color: {COLOR_TEXT_MUTED};
    }}
    QLabel#SectionTitle {{
        font-size: 18px;
        font-weight: 600;
        color: {COLOR_PRIMARY};
        border-bottom: 2px solid {COLOR_PRIMARY};
        padding-bottom: 5px;
    }}
    QLabel#StatValue {{
        font-size: 26px;
        font-weight: 700;
        color: {COLOR_PRIMARY};
    }}

    /* --- SIDEBAR --- */
    QListWidget#Sidebar {{
        background-color: {COLOR_SURFACE};
        border: none;
        padding-top: 10px;
    }}
    QListWidget#Sidebar::item {{
        padding: 12px 18px;
        border-radius: 8px;
    }}
    QListWidget#Sidebar::item:selected {{
        background-color: {COLOR_SURFACE_ALT};
        color: {COLOR_PRIMARY};
    }}

    /* --- BUTTONS --- */
    QPushButton {{
        background-color: {COLOR_SURFACE_ALT};
        border: 1px solid rgba(212, 175, 55, 0.5); /* Gold border */
        border-radius: 12px;
        padding: 8px 18px;
        color: {COLOR_HIGHLIGHT};
        font-weight: 600;
    }}
    QPushButton:hover {{
        background-color: {COLOR_PRIMARY};
        color: #000000;
    }}
    QPushButton:disabled {{
        color: #666;
        border: 1px solid #333;
    }}
    QPushButton#PrimaryButton {{
        background: qlineargradient(x1:0, y1:0, x2:1, y2:1, stop:0 {COLOR_CTA}, stop:1 {COLOR_PRIMARY});
        border: none;
    }}
    QPushButton#DestructiveButton {{
        border: 1px solid #ff4444;
        color: #ff8888;
        background-color: transparent;
    }}
    QPushButton#DestructiveButton:hover {{
        background-color: #ff4444;
        color: white;
    }}

    /* --- CARDS (Inventory) --- */
    QFrame#ItemCard, QFrame#StatCard, QFrame#QRPanel {{
        background-color: {COLOR_SURFACE};
        border-radius: 16px;
        border: 1px solid rgba(255, 255, 255, 0.05);
    }}
    QFrame#ItemCard:hover {{
        border: 1px solid {COLOR_PRIMARY};
    }}
    QLabel#QRPreview {{
        background-color: white;
        border-radius: 8px;
        color: #555;
    }}

    /* --- INPUTS --- */
    QLineEdit, QComboBox, QTextEdit, QPlainTextEdit {{
        background-color: {COLOR_SURFACE_ALT};
        border: 1px solid rgba(255, 255, 255, 0.1);
        border-radius: 8px;
        padding: 6px;
        color: white;
    }}
    QLineEdit:focus, QComboBox:focus, QTextEdit:focus {{
        border: 1px solid {COLOR_PRIMARY};
    }}
    QLineEdit:read-only {{
        color: {COLOR_PRIMARY};
        font-weight: bold;
    }}
    """


def toast_style(kind):
    color = MESSAGE_COLORS.get(kind, MESSAGE_COLORS["info"])
    return f"QStatusBar {{ background-color: {color}; color: white; font-weight: 600; }}"
