PHASE_ORDER = [
    "schema",
    "statistics",
    "chart_data",
]

CHART_MODES = ("line", "bar", "pie")
DEFAULT_CHART_MODE = "line"

SUPPORTED_EXTENSIONS = (".csv", ".json")

# Series / slice palette, cycled by position.
COLORS = [
    "#0088FE",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
    "#8884D8",
    "#82CA9D",
    "#FFC658",
    "#FF6B6B",
]

_CSV_TRUE_VALUES = {"true", "TRUE"}
_CSV_FALSE_VALUES = {"false", "FALSE"}
_CSV_FLOAT_PATTERN = r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$"
_MAX_SAFE_INTEGER = 2 ** 53

_DEFAULT_CHART_DPI = 120

SAMPLE_SOURCE_NAME = "sample-data"

SAMPLE_DATA = [
    {"month": "Jan", "sales": 4000, "expenses": 2400, "profit": 1600},
    {"month": "Feb", "sales": 3000, "expenses": 1398, "profit": 1602},
    {"month": "Mar", "sales": 2000, "expenses": 9800, "profit": -7800},
    {"month": "Apr", "sales": 2780, "expenses": 3908, "profit": -1128},
    {"month": "May", "sales": 1890, "expenses": 4800, "profit": -2910},
    {"month": "Jun", "sales": 2390, "expenses": 3800, "profit": -1410},
    {"month": "Jul", "sales": 3490, "expenses": 4300, "profit": -810},
    {"month": "Aug", "sales": 4200, "expenses": 2100, "profit": 2100},
    {"month": "Sep", "sales": 5100, "expenses": 2800, "profit": 2300},
    {"month": "Oct", "sales": 6200, "expenses": 3200, "profit": 3000},
    {"month": "Nov", "sales": 5800, "expenses": 3100, "profit": 2700},
    {"month": "Dec", "sales": 7200, "expenses": 3500, "profit": 3700},
]
