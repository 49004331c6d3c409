"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_TIMEZONE_OFFSET_HOURS = 7
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 200
DEFAULT_REQUEST_TIMEOUT = 20

FIXED_SHIFT_CUTOFF = time(13, 0)
FIXED_SHIFT_PUNCHES = 4

ZERO_DURATION = "0 giờ 0 phút"

POSITION_SALES = "Nhân viên Bán hàng"
POSITION_CASHIER = "Nhân viên Thu ngân"
POSITION_RECEPTION = "Nhân viên Tiếp đón"
POSITION_MASCOT = "Nhân viên Mascot"

VALID_POSITIONS = (POSITION_SALES, POSITION_CASHIER, POSITION_RECEPTION, POSITION_MASCOT)
