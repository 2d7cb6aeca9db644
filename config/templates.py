"""Template-Bibliothek: benannte Vorlagen für neue Stundenpläne.

Jedes Template liefert aktive Tage, Stundenanzahl, Standardzeiten pro Stunde,
vorbelegte Zellen und optionale Verbünde. Sowohl "Template anwenden" als auch
"Link decodieren" bauen zuerst das Standard-Dokument eines Templates auf.

Zeitraster (Beispiel Universität, 90-Minuten-Einheiten):
1. 09:00 - 10:30
2. 10:40 - 12:10
   ── Mittagspause ──
3. 13:00 - 14:30
4. 14:40 - 16:10
5. 16:20 - 17:50
6. 18:00 - 19:30
"""

from typing import Optional

from pydantic import BaseModel, Field

from config.defaults import (
    DEFAULT_TITLE,
    FALLBACK_PERIOD_TIMES,
    MAX_PERIODS,
    TEMPLATE_COLORS,
)
from models.document import (
    Cell,
    Document,
    Filters,
    Meta,
    TemplateKind,
    TimeRange,
    UiState,
)
from models.timeslot import TimeSlot, empty_grid


class TemplateCell(BaseModel):
    """Vorbelegte Zelle eines Templates."""

    day: int
    period: int
    cell: Cell


class TemplateMerge(BaseModel):
    """Vorbelegter Verbund eines Templates."""

    day: int
    start: int
    span: int


class Template(BaseModel):
    """Benannte Vorlage für ein neues Dokument."""

    id: TemplateKind
    label: str
    description: str
    active_days: list[int]
    period_count: int
    # Stunde → Zeitspanne; fehlende Stunden nutzen FALLBACK_PERIOD_TIMES
    period_times: dict[int, TimeRange]
    cells: list[TemplateCell] = Field(default_factory=list)
    merges: list[TemplateMerge] = Field(default_factory=list)


def _times(*pairs: tuple[str, str]) -> dict[int, TimeRange]:
    return {
        period: TimeRange(start=start, end=end)
        for period, (start, end) in enumerate(pairs, start=1)
    }


def _cell(day: int, period: int, subject: str, teacher: str, room: str,
          color: int, memo: str = "") -> TemplateCell:
    return TemplateCell(
        day=day,
        period=period,
        cell=Cell(subject=subject, teacher=teacher, room=room, memo=memo,
                  color=TEMPLATE_COLORS[color]),
    )


# ─── VORLAGEN ─────────────────────────────────────────────────────────────────

def _elementary() -> Template:
    """Grundschule: 45-Minuten-Stunden, Mo–Fr, 6 Stunden."""
    week = [
        (1, [("国語", "山田先生", "1年1組", 0), ("算数", "山田先生", "1年1組", 1),
             ("生活", "山田先生", "理科室", 5), ("音楽", "田中先生", "音楽室", 4),
             ("図工", "佐藤先生", "図工室", 2), ("学活", "山田先生", "1年1組", 7)]),
        (2, [("国語", "山田先生", "1年1組", 0), ("算数", "山田先生", "1年1組", 1),
             ("体育", "鈴木先生", "校庭", 3), ("図書", "司書先生", "図書室", 6),
             ("生活", "山田先生", "理科室", 5), ("道徳", "山田先生", "1年1組", 7)]),
        (3, [("国語", "山田先生", "1年1組", 0), ("算数", "山田先生", "1年1組", 1),
             ("理科", "高橋先生", "理科室", 5), ("体育", "鈴木先生", "体育館", 3),
             ("図工", "佐藤先生", "図工室", 2), ("学活", "山田先生", "1年1組", 7)]),
        (4, [("国語", "山田先生", "1年1組", 0), ("算数", "山田先生", "1年1組", 1),
             ("社会", "高橋先生", "社会科室", 6), ("音楽", "田中先生", "音楽室", 4),
             ("生活", "山田先生", "1年1組", 5), ("道徳", "山田先生", "1年1組", 7)]),
        (5, [("国語", "山田先生", "1年1組", 0), ("算数", "山田先生", "1年1組", 1),
             ("理科", "高橋先生", "理科室", 5), ("社会", "高橋先生", "社会科室", 6),
             ("体育", "鈴木先生", "校庭", 3), ("終礼", "山田先生", "1年1組", 7)]),
    ]
    return Template(
        id=TemplateKind.ELEMENTARY,
        label="小学校テンプレート",
        description="45分授業を中心に、5〜6コマ運用をすぐ作成できます。",
        active_days=[1, 2, 3, 4, 5],
        period_count=6,
        period_times=_times(
            ("08:35", "09:20"), ("09:30", "10:15"), ("10:35", "11:20"),
            ("11:30", "12:15"), ("13:20", "14:05"), ("14:15", "15:00"),
        ),
        cells=[
            _cell(day, period, *entry)
            for day, entries in week
            for period, entry in enumerate(entries, start=1)
        ],
    )


def _junior_high() -> Template:
    """Mittelschule: 50-Minuten-Stunden, Mo–Sa, 7 Stunden."""
    week = [
        (1, [("国語", "橋本先生", "2-1", 0), ("数学", "井上先生", "2-1", 1),
             ("英語", "Smith先生", "LL教室", 4), ("理科", "佐々木先生", "理科室", 5),
             ("社会", "村上先生", "2-1", 6), ("体育", "小林先生", "体育館", 3),
             ("総合", "橋本先生", "2-1", 7)]),
        (2, [("数学", "井上先生", "2-1", 1), ("国語", "橋本先生", "2-1", 0),
             ("理科", "佐々木先生", "理科室", 5), ("美術", "田辺先生", "美術室", 2),
             ("英語", "Smith先生", "LL教室", 4), ("技術", "岡田先生", "技術室", 6),
             ("学活", "橋本先生", "2-1", 7)]),
        (3, [("社会", "村上先生", "2-1", 6), ("数学", "井上先生", "2-1", 1),
             ("英語", "Smith先生", "LL教室", 4), ("家庭科", "伊藤先生", "家庭科室", 2),
             ("国語", "橋本先生", "2-1", 0), ("音楽", "松本先生", "音楽室", 4),
             ("道徳", "橋本先生", "2-1", 7)]),
        (4, [("理科", "佐々木先生", "理科室", 5), ("英語", "Smith先生", "LL教室", 4),
             ("数学", "井上先生", "2-1", 1), ("社会", "村上先生", "2-1", 6),
             ("保健体育", "小林先生", "校庭", 3), ("国語", "橋本先生", "2-1", 0),
             ("総合", "橋本先生", "2-1", 7)]),
        (5, [("数学", "井上先生", "2-1", 1), ("国語", "橋本先生", "2-1", 0),
             ("理科", "佐々木先生", "理科室", 5), ("英語", "Smith先生", "LL教室", 4),
             ("社会", "村上先生", "2-1", 6), ("体育", "小林先生", "体育館", 3),
             ("終礼", "橋本先生", "2-1", 7)]),
        # Samstag: nur Vormittag
        (6, [("数学", "井上先生", "2-1", 1), ("国語", "橋本先生", "2-1", 0),
             ("英語", "Smith先生", "LL教室", 4), ("総合", "橋本先生", "2-1", 7)]),
    ]
    return Template(
        id=TemplateKind.JUNIOR_HIGH,
        label="中学校テンプレート",
        description="50分授業を想定し、教科・教室・教員の管理に向いた構成です。",
        active_days=[1, 2, 3, 4, 5, 6],
        period_count=7,
        period_times=_times(
            ("08:40", "09:30"), ("09:40", "10:30"), ("10:40", "11:30"),
            ("11:40", "12:30"), ("13:20", "14:10"), ("14:20", "15:10"),
            ("15:20", "16:10"),
        ),
        cells=[
            _cell(day, period, *entry)
            for day, entries in week
            for period, entry in enumerate(entries, start=1)
        ],
    )


def _high_school() -> Template:
    """Oberschule: 6–7 Stunden, Samstagskurse am Vormittag."""
    week = [
        (1, [("現代文", "青木先生", "3-2", 0), ("数学III", "斎藤先生", "3-2", 1),
             ("化学", "長谷川先生", "化学室", 5), ("英語表現", "Brown先生", "3-2", 4),
             ("日本史", "石川先生", "3-2", 6), ("体育", "福田先生", "体育館", 3),
             ("LHR", "青木先生", "3-2", 7)]),
        (2, [("数学III", "斎藤先生", "3-2", 1), ("古典", "青木先生", "3-2", 0),
             ("物理", "長谷川先生", "物理室", 5), ("英語表現", "Brown先生", "3-2", 4),
             ("地理", "石川先生", "3-2", 6), ("情報", "山口先生", "PC室", 2),
             ("探究", "青木先生", "3-2", 7)]),
        (3, [("現代文", "青木先生", "3-2", 0), ("数学III", "斎藤先生", "3-2", 1),
             ("化学", "長谷川先生", "化学室", 5), ("英語表現", "Brown先生", "3-2", 4),
             ("政治経済", "石川先生", "3-2", 6), ("保健", "福田先生", "3-2", 3),
             ("進路", "青木先生", "3-2", 7)]),
        (4, [("数学III", "斎藤先生", "3-2", 1), ("古典", "青木先生", "3-2", 0),
             ("物理", "長谷川先生", "物理室", 5), ("英語表現", "Brown先生", "3-2", 4),
             ("選択演習", "各担当", "演習室", 2), ("体育", "福田先生", "校庭", 3),
             ("探究", "青木先生", "3-2", 7)]),
        (5, [("現代文", "青木先生", "3-2", 0), ("数学III", "斎藤先生", "3-2", 1),
             ("化学", "長谷川先生", "化学室", 5), ("英語表現", "Brown先生", "3-2", 4),
             ("日本史", "石川先生", "3-2", 6), ("ホームルーム", "青木先生", "3-2", 7)]),
        (6, [("土曜講座", "各担当", "講義室A", 2), ("土曜講座", "各担当", "講義室A", 2),
             ("小テスト", "青木先生", "3-2", 6)]),
    ]
    return Template(
        id=TemplateKind.HIGH_SCHOOL,
        label="高校テンプレート",
        description="6〜7コマ中心の高校運用向け。選択科目や土曜授業にも対応。",
        active_days=[1, 2, 3, 4, 5, 6],
        period_count=7,
        period_times=_times(
            ("08:50", "09:40"), ("09:50", "10:40"), ("10:50", "11:40"),
            ("11:50", "12:40"), ("13:30", "14:20"), ("14:30", "15:20"),
            ("15:30", "16:20"),
        ),
        cells=[
            _cell(day, period, *entry)
            for day, entries in week
            for period, entry in enumerate(entries, start=1)
        ],
    )


def _university() -> Template:
    """Universität: 90-Minuten-Einheiten, viele Freistunden, zwei Doppelblöcke."""
    return Template(
        id=TemplateKind.UNIVERSITY,
        label="大学テンプレート",
        description="90分授業・空きコマ多め・連続コマを想定した大学向けテンプレートです。",
        active_days=[1, 2, 3, 4, 5],
        period_count=6,
        period_times=_times(
            ("09:00", "10:30"), ("10:40", "12:10"), ("13:00", "14:30"),
            ("14:40", "16:10"), ("16:20", "17:50"), ("18:00", "19:30"),
        ),
        cells=[
            _cell(1, 1, "線形代数", "佐藤教授", "A101", 0),
            _cell(1, 2, "英語アカデミック", "Miller准教授", "B202", 4),
            _cell(1, 4, "プログラミング演習", "田村講師", "PC-1", 1),
            _cell(2, 2, "微分積分学", "佐藤教授", "A201", 1, "演習付き2コマ連続"),
            _cell(2, 3, "微分積分学", "佐藤教授", "A201", 1, "演習付き2コマ連続"),
            _cell(2, 5, "キャリア形成", "外部講師", "C102", 7),
            _cell(3, 1, "経済学入門", "森教授", "A103", 6),
            _cell(3, 4, "体育実技", "井上講師", "体育館", 3),
            _cell(4, 4, "化学実験", "渡辺教授", "実験棟3F", 5, "白衣必須"),
            _cell(4, 5, "化学実験", "渡辺教授", "実験棟3F", 5, "白衣必須"),
            _cell(5, 2, "メディア論", "川村教授", "D303", 2),
            _cell(5, 3, "ゼミ", "川村教授", "研究室", 2, "発表資料持参"),
        ],
        merges=[
            TemplateMerge(day=2, start=2, span=2),
            TemplateMerge(day=4, start=4, span=2),
        ],
    )


def _custom() -> Template:
    """Leere Vorlage: alle Tage, 8 Stunden, eingebautes Zeitraster."""
    return Template(
        id=TemplateKind.CUSTOM,
        label="カスタム（空の時間割）",
        description="曜日・時限・時刻を自由に編集できる空のテンプレートです。",
        active_days=[0, 1, 2, 3, 4, 5, 6],
        period_count=8,
        period_times=_times(*(FALLBACK_PERIOD_TIMES[p] for p in range(1, MAX_PERIODS + 1))),
    )


TEMPLATES: list[Template] = [
    _elementary(),
    _junior_high(),
    _high_school(),
    _university(),
    _custom(),
]


# ─── ZUGRIFF ──────────────────────────────────────────────────────────────────

def get_template_by_id(template_id: object) -> Template:
    """Template zur ID; unbekannte IDs liefern das Mittelschul-Template."""
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return next(t for t in TEMPLATES if t.id == TemplateKind.JUNIOR_HIGH)


def default_periods(template: Optional[Template] = None) -> list[TimeRange]:
    """Standardzeiten der Stunden 1..8 (Template → FALLBACK_PERIOD_TIMES)."""
    periods: list[TimeRange] = []
    for period in range(1, MAX_PERIODS + 1):
        time = template.period_times.get(period) if template else None
        if time is None:
            start, end = FALLBACK_PERIOD_TIMES[period]
            time = TimeRange(start=start, end=end)
        periods.append(time.model_copy())
    return periods


def create_from_template(
    template_id: object,
    keep_ui: bool = False,
    keep_filters: bool = False,
    previous: Optional[Document] = None,
) -> Document:
    """Erzeugt ein frisches Dokument aus einem Template.

    Args:
        template_id: TemplateKind oder dessen String-Wert.
        keep_ui: UI-Zustand aus ``previous`` übernehmen (ausgewählter Tag wird
            auf den ersten aktiven Tag zurückgesetzt, falls nicht mehr aktiv).
        keep_filters: Filter aus ``previous`` übernehmen.
        previous: Bisheriges Dokument (liefert auch das share_filters-Flag).
    """
    template = get_template_by_id(template_id)
    cells = empty_grid()
    merges = empty_grid()

    for entry in template.cells:
        TimeSlot(entry.day, entry.period).write(cells, entry.cell.model_copy())
    for merge in template.merges:
        TimeSlot(merge.day, merge.start).write(merges, merge.span)

    first_day = template.active_days[0] if template.active_days else 1
    if keep_ui and previous is not None:
        ui = previous.ui.model_copy()
        if ui.selected_day not in template.active_days:
            ui.selected_day = first_day
    else:
        ui = UiState(selected_day=first_day)

    if keep_filters and previous is not None:
        filters = previous.filters.model_copy()
    else:
        filters = Filters()

    return Document(
        meta=Meta(
            title=DEFAULT_TITLE,
            active_days=list(template.active_days),
            period_count=template.period_count,
            template=template.id,
            share_filters=previous.meta.share_filters if previous is not None else True,
        ),
        periods=default_periods(template),
        overrides=empty_grid(),
        cells=cells,
        merges=merges,
        filters=filters,
        ui=ui,
    )
