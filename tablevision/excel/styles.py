"""
Workbook theme for the dashboard export: the chart palette's indigo on slate.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from tablevision.config import PALETTE

# ---------------------------------------------------------------------------
# Colors (openpyxl wants bare RRGGBB)
# ---------------------------------------------------------------------------
ACCENT = PALETTE[0].lstrip("#").upper()        # indigo, first chart color
GAIN = PALETTE[2].lstrip("#").upper()          # emerald
LOSS = PALETTE[7].lstrip("#").upper()          # red
INK = "0F172A"
HEADER_BG = "1E293B"
MUTED = "64748B"
RULE = "CBD5E1"
STRIPE = "F8FAFC"
TOTAL_BG = "E0E7FF"
NOTE_BG = "EEF2FF"
WHITE = "FFFFFF"


def solid(rgb: str) -> PatternFill:
    return PatternFill(start_color=rgb, end_color=rgb, fill_type="solid")


def box(rgb: str, top: str = "thin", bottom: str = "thin") -> Border:
    return Border(
        left=Side(style="thin", color=rgb),
        right=Side(style="thin", color=rgb),
        top=Side(style=top, color=rgb),
        bottom=Side(style=bottom, color=rgb),
    )


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=22, bold=True, color=INK)
CAPTION_FONT = Font(name="Calibri", size=11, italic=True, color=MUTED)
SECTION_FONT = Font(name="Calibri", size=13, bold=True, color=ACCENT)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
CELL_FONT = Font(name="Calibri", size=10, color=INK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=INK)
FIGURE_FONT = Font(name="Calibri", size=24, bold=True, color=INK)
GAIN_FIGURE_FONT = Font(name="Calibri", size=24, bold=True, color=GAIN)
LOSS_FIGURE_FONT = Font(name="Calibri", size=24, bold=True, color=LOSS)
FIGURE_LABEL_FONT = Font(name="Calibri", size=9, color=MUTED)
NOTE_TITLE_FONT = Font(name="Calibri", size=11, bold=True, color=ACCENT)
NOTE_FONT = Font(name="Calibri", size=10, color=INK)

# ---------------------------------------------------------------------------
# Fills / borders
# ---------------------------------------------------------------------------
HEADER_FILL = solid(HEADER_BG)
STRIPE_FILL = solid(STRIPE)
TOTAL_FILL = solid(TOTAL_BG)
NOTE_FILL = solid(NOTE_BG)

CELL_BORDER = box(RULE)
HEADER_BORDER = box(HEADER_BG, bottom="medium")
TOTAL_BORDER = box(MUTED, top="medium", bottom="medium")

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="top", wrap_text=True)
