# mhealthgen/ui/style.py
import sys

if sys.platform == "darwin":
    FONT_STACK = 'Helvetica Neue","Arial'
elif sys.platform.startswith("win"):
    FONT_STACK = 'Segoe UI","Arial'
else:
    FONT_STACK = 'DejaVu Sans","Arial'

# one pen colour per trend key, cycled
SERIES_COLORS = ["#38bdf8", "#f472b6", "#22c55e", "#facc15", "#a78bfa", "#fb923c"]

PREVIEW_QSS = f"""
QMainWindow, QWidget {{
    background: #0b0f14;
    color: #e7eef7;
    font-family: "{FONT_STACK}";
    font-size: 13px;
}}

QLabel#title {{
    font-size: 20px;
    font-weight: 800;
}}

QLabel#muted {{
    color: rgba(231,238,247,0.65);
}}

QFrame#card {{
    background: rgba(255,255,255,0.04);
    border: 1px solid rgba(255,255,255,0.08);
    border-radius: 14px;
}}

QScrollArea {{
    border: none;
}}
"""


def series_color(index: int) -> str:
    return SERIES_COLORS[index % len(SERIES_COLORS)]
