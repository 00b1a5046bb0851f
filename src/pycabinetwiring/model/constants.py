"""
Global constants for cabinet wiring measurement.

All lengths are in millimetres. Cost and connector values are shared by the
batch processor, the diagnostic dry run and manual measurement, so they must
only be defined here.
"""

# Duct cost per hop / interior cell
WIDE_DUCT_COST = 100  # mm, cell with a horizontal neighbour
NARROW_DUCT_COST = 50  # mm, isolated cell

# Endpoint connector contributions
REGULAR_CONNECTION = 200  # mm
MOTOR_CONNECTION = 500  # mm
DOOR_CONNECTION = 1000  # mm

# Final-segment connector allowance, added once per distance
TAIL_ALLOWANCE = 50  # mm

# Persisted coordinate encoding
MOTOR_ANCHOR_ROW = -1
DOOR_ANCHOR_ROW = -2
ANCHOR_COLUMN_OFFSET = 1000

# Worksheet layout (1-based, openpyxl convention)
HEADER_ROW = 1
FIRST_DATA_ROW = 2
RESULT_COLUMN = 1  # A
ENDPOINT_A_COLUMN = 2  # B
ENDPOINT_B_COLUMN = 3  # C
MAX_LOG_ROW = 1000

# Default cabinet shape
DEFAULT_SECTIONS = 5
DEFAULT_ROWS = 7
DEFAULT_COLS = 4

# Allowed cabinet shape (inclusive)
MAX_SECTIONS = 20
MAX_ROWS = 20
MAX_COLS = 10

# Dry run
DRY_RUN_ROW_LIMIT = 10

STAR_MARKER = "*"
