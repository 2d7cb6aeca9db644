"""Feste Konstanten und Standardwerte für Stundenplan-Dokumente und Links.

Alle Werte hier sind Teil des Link-Vertrags (z.B. Sentinel-Farbe, Versions-
Token) oder gelten als eingebaute Rückfallwerte des Sanitizers.
"""

# ─── RASTER ───────────────────────────────────────────────────────────────────

# Wochentage 0=So .. 6=Sa (Anzeige-Reihenfolge wie im Kalender)
DAY_LABELS: tuple[str, ...] = ("日", "月", "火", "水", "木", "金", "土")
FULL_DAY_LABELS: tuple[str, ...] = (
    "日曜日", "月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日",
)
DAY_INDEXES: tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)
DAY_COUNT = 7

MIN_PERIODS = 1
MAX_PERIODS = 8

# Leere aktive Tage → Montag
DEFAULT_ACTIVE_DAY = 1

# ─── TEXTLÄNGEN ───────────────────────────────────────────────────────────────

MAX_TITLE_LENGTH = 80
MAX_TEXT_LENGTH = 80      # Fach, Lehrkraft, Raum, Filterfelder
MAX_MEMO_LENGTH = 240

DEFAULT_TITLE = "わたしの時間割"

# ─── FARBEN + ZEITEN ──────────────────────────────────────────────────────────

# Sentinel: Zellen mit dieser Farbe und ohne Text gelten als leer
DEFAULT_CELL_COLOR = "#5A8BFF"

DEFAULT_PERIOD_START = "09:00"
DEFAULT_PERIOD_END = "09:50"

TEMPLATE_COLORS: tuple[str, ...] = (
    "#5A8BFF",
    "#6FCF97",
    "#F6B94C",
    "#E86B6B",
    "#8D74E8",
    "#36A9E1",
    "#F29E4C",
    "#6CC5A2",
)

# Eingebautes Zeitraster, wenn ein Template eine Stunde nicht definiert
FALLBACK_PERIOD_TIMES: dict[int, tuple[str, str]] = {
    1: ("08:30", "09:20"),
    2: ("09:30", "10:20"),
    3: ("10:40", "11:30"),
    4: ("11:40", "12:30"),
    5: ("13:20", "14:10"),
    6: ("14:20", "15:10"),
    7: ("15:20", "16:10"),
    8: ("16:20", "17:10"),
}

# ─── LINK-VERTRAG ─────────────────────────────────────────────────────────────

URL_VERSION = "1"
URL_VERSION_PARAM = "v"
URL_DATA_PARAM = "t"

# Budget für die Anzeige "x % belegt"
URL_MAX_LENGTH = 2000
URL_WARN_LENGTH = 1700
URL_DANGER_LENGTH = 1900

DEFAULT_FALLBACK_TEMPLATE = "junior-high"
DEFAULT_BASE_URL = "https://example.com/tools/timetable"
