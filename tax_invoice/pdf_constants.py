"""Fixed page geometry for the single-page A4 tax invoice.

All values are in points with a top-left origin.
"""

PAGE_W = 595
PAGE_H = 842
PAGE_SIZE = (PAGE_W, PAGE_H)
MARGIN = 30
USABLE_W = PAGE_W - 2 * MARGIN  # 535
X_LEFT = MARGIN
X_RIGHT = PAGE_W - MARGIN  # 565

# Header band
LOGO_X = 30
LOGO_Y = 30
LOGO_W = 80
STORE_X = 120
STORE_NAME_Y = 40
STORE_INFO_Y = 65
META_X = 400
META_TITLE_Y = 30
META_INFO_Y = 55
HEADER_LINE_H = 15
HEADER_RULE_Y = 130

# Parties band
BILL_TO_X = 30
DELIVERY_X = 300
PARTY_LABEL_Y = 150
PARTY_INFO_Y = 170
PARTY_LINE_H = 15

# Items table
TABLE_TOP = 280
TABLE_RULE_Y = 295
TABLE_HEADERS = ("Item Details", "Batch/Exp", "Qty", "MRP", "Price", "Amount")
COLUMN_WIDTHS = (200, 80, 40, 70, 70, 75)
ITEM_ROW_H = 30

# Summary band
SUMMARY_RULE_GAP = 10
SUMMARY_GAP = 30
SUMMARY_ROW_H = 20
SUMMARY_LABEL_X = 400
SUMMARY_VALUE_X = 490

# Terms band
TERMS_GAP = 100
TERMS_TEXT_GAP = 20
TERMS_LINE_H = 15

# Footer, pinned regardless of content height
FOOTER_THANKS_Y = 780
FOOTER_GENERATED_Y = 795

FONT_SIZE_STORE = 20
FONT_SIZE_TITLE = 16
FONT_SIZE_HEADING = 12
FONT_SIZE_NORMAL = 10
FONT_SIZE_SMALL = 9
FONT_SIZE_FOOTNOTE = 8

DEFAULT_ACCENT = "#2c3e50"
COLOR_TEXT = "#34495e"
COLOR_RULE = "#aaaaaa"
COLOR_FOOTER = "#2c3e50"
COLOR_MUTED = "#666666"
RULE_WIDTH = 1
