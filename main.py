"""Stundenplan-Link: Haupt-CLI.

Verwendung:
  python main.py templates                 Vorlagen auflisten
  python main.py new <template>            Neuen Stundenplan als Link erzeugen
  python main.py decode <link>             Link lesen und Raster anzeigen
  python main.py decode <link> --json      Link lesen und Dokument als JSON ausgeben
  python main.py show <link> --day 1       Tagesansicht eines Links
  python main.py cell <link> ...           Zelle in einem Link ändern → neuer Link
  python main.py check-url <url>           URL-Länge einstufen
  python main.py config init               Einstellungen anlegen
  python main.py config show               Einstellungen anzeigen
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

console = Console()

_TEMPLATE_CHOICES = ["elementary", "junior-high", "high-school", "university", "custom"]

_BAND_STYLES = {"safe": "green", "warn": "yellow", "danger": "red"}


def _load_config_or_abort():
    """Lädt die Einstellungen (oder Standardwerte) bzw. bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_budget(url: str) -> None:
    from sharing.url_budget import classify_url_length

    state = classify_url_length(url)
    style = _BAND_STYLES[state.band.value]
    console.print(
        f"[bold]URL-Länge:[/bold] {state.length} Zeichen | "
        f"[{style}]{state.band.value}[/{style}] | "
        f"{state.usage:.0%} des Budgets"
    )
    if state.message:
        console.print(f"[{style}]{state.message}[/{style}]")


def _print_week(doc) -> None:
    from export.tui_renderer import render_week_rows, week_header

    table = Table(title=escape(doc.meta.title), box=box.ROUNDED, show_lines=True)
    for column in week_header(doc):
        table.add_column(column)
    for row in render_week_rows(doc):
        table.add_row(*(escape(value) for value in row))
    console.print(table)


def _print_day(doc, day: int) -> None:
    from export.tui_renderer import day_title, render_day_rows

    table = Table(title=f"{escape(doc.meta.title)} | {day_title(day)}", box=box.ROUNDED)
    for column in ("限", "時間", "分", "科目", "担当", "教室", "メモ"):
        table.add_column(column)
    for row in render_day_rows(doc, day):
        table.add_row(*(escape(value) for value in row))
    console.print(table)


def _decode_or_report(link: str, fallback: Optional[str], config):
    """Decodiert einen Link; Hinweise werden gelb ausgegeben."""
    from sharing.protocol import decode_url

    result = decode_url(link, fallback or config.share.fallback_template)
    if result.advisory:
        console.print(f"[yellow]Hinweis:[/yellow] {escape(result.advisory)}")
    return result


# ─── TEMPLATES ────────────────────────────────────────────────────────────────

@click.command("templates")
def cmd_templates():
    """Listet alle Vorlagen auf."""
    from config.defaults import DAY_LABELS
    from config.templates import TEMPLATES

    table = Table(title="Vorlagen", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Tage")
    table.add_column("Std.")
    table.add_column("Beschreibung")
    for t in TEMPLATES:
        days = "".join(DAY_LABELS[d] for d in t.active_days)
        table.add_row(t.id.value, t.label, days, str(t.period_count), t.description)
    console.print(table)


# ─── NEW ──────────────────────────────────────────────────────────────────────

@click.command("new")
@click.argument("template_id", type=click.Choice(_TEMPLATE_CHOICES))
@click.option("--title", default=None, help="Titel des Stundenplans.")
@click.option("--base-url", default=None, help="Basis-URL (Standard: aus Einstellungen).")
@click.option("--no-share-filters", is_flag=True, default=False,
              help="Filter nicht mit dem Link teilen.")
def cmd_new(template_id: str, title: Optional[str], base_url: Optional[str],
            no_share_filters: bool):
    """Erzeugt einen neuen Stundenplan aus einer Vorlage und gibt den Link aus."""
    from config.templates import create_from_template
    from models.editing import set_share_filters, set_title
    from sharing.protocol import build_share_url

    _, config = _load_config_or_abort()
    doc = create_from_template(template_id)
    if title:
        doc = set_title(doc, title)
    if no_share_filters:
        doc = set_share_filters(doc, False)

    share = build_share_url(doc, base_url or config.share.base_url)
    click.echo(share.url)
    _print_budget(share.url)


# ─── DECODE / SHOW ────────────────────────────────────────────────────────────

@click.command("decode")
@click.argument("link")
@click.option("--fallback", type=click.Choice(_TEMPLATE_CHOICES), default=None,
              help="Rückfall-Template bei fehlendem oder kaputtem Link.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Dokument als JSON ausgeben.")
def cmd_decode(link: str, fallback: Optional[str], as_json: bool):
    """Liest einen Link (URL oder Query) und zeigt die Wochenansicht."""
    _, config = _load_config_or_abort()
    result = _decode_or_report(link, fallback, config)
    if as_json:
        click.echo(result.document.model_dump_json(indent=2))
        return
    _print_week(result.document)


@click.command("show")
@click.argument("link")
@click.option("--day", type=click.IntRange(0, 6), default=None,
              help="Tagesansicht (0=So .. 6=Sa) statt Wochenansicht.")
def cmd_show(link: str, day: Optional[int]):
    """Zeigt einen geteilten Stundenplan im Terminal."""
    _, config = _load_config_or_abort()
    result = _decode_or_report(link, None, config)
    doc = result.document
    if day is None:
        _print_week(doc)
    else:
        _print_day(doc, day)


# ─── CELL ─────────────────────────────────────────────────────────────────────

@click.command("cell")
@click.argument("link")
@click.option("--day", type=click.IntRange(0, 6), required=True, help="Tag (0=So .. 6=Sa).")
@click.option("--period", type=click.IntRange(1, 8), required=True, help="Stunde (1..8).")
@click.option("--subject", default=None, help="Fach.")
@click.option("--teacher", default=None, help="Lehrkraft.")
@click.option("--room", default=None, help="Raum.")
@click.option("--memo", default=None, help="Notiz.")
@click.option("--color", default=None, help="Farbe (#RRGGBB).")
@click.option("--span", type=click.IntRange(1, 8), default=None,
              help="Verbund-Spannweite ab dieser Stunde (1 = aufheben).")
@click.option("--base-url", default=None, help="Basis-URL (Standard: aus Einstellungen).")
def cmd_cell(link: str, day: int, period: int, subject, teacher, room, memo, color,
             span: Optional[int], base_url: Optional[str]):
    """Ändert eine Zelle in einem Link und gibt den neuen Link aus."""
    from models.editing import set_cell, set_merge_span
    from sharing.protocol import build_share_url

    _, config = _load_config_or_abort()
    result = _decode_or_report(link, None, config)
    fields = {
        k: v for k, v in {
            "subject": subject, "teacher": teacher, "room": room,
            "memo": memo, "color": color,
        }.items() if v is not None
    }
    doc = result.document
    if fields:
        doc = set_cell(doc, day, period, **fields)
    if span is not None:
        doc = set_merge_span(doc, day, period, span)

    share = build_share_url(doc, base_url or config.share.base_url)
    click.echo(share.url)
    _print_budget(share.url)


# ─── CHECK-URL ────────────────────────────────────────────────────────────────

@click.command("check-url")
@click.argument("url")
def cmd_check_url(url: str):
    """Stuft die Länge eines Links ein (safe / warn / danger)."""
    _print_budget(url)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Einstellungen anzeigen oder anlegen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuellen Einstellungen an."""
    mgr, config = _load_config_or_abort()
    source = "Standardwerte" if mgr.first_run_check() else str(mgr.DEFAULT_CONFIG)

    table = Table(title="Einstellungen", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("share.base_url", config.share.base_url)
    table.add_row("share.fallback_template", config.share.fallback_template.value)
    table.add_row("logging.level", config.logging.level)
    console.print(table)
    console.print(f"[dim]Quelle: {source}[/dim]")


@cmd_config.command("init")
@click.option("--base-url", default=None, help="Basis-URL für Teilen-Links.")
@click.option("--fallback", type=click.Choice(_TEMPLATE_CHOICES), default=None,
              help="Rückfall-Template.")
@click.option("--force", is_flag=True, default=False, help="Vorhandene Datei überschreiben.")
def config_init(base_url: Optional[str], fallback: Optional[str], force: bool):
    """Legt die Einstellungsdatei mit Standardwerten an."""
    from config.manager import ConfigManager
    from config.schema import AppConfig, ShareConfig

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return

    share = {}
    if base_url:
        share["base_url"] = base_url
    if fallback:
        share["fallback_template"] = fallback
    try:
        config = AppConfig(share=ShareConfig(**share))
    except ValueError as e:
        console.print(f"[red]Ungültige Einstellungen:[/red]\n{escape(str(e))}")
        sys.exit(1)
    mgr.save(config)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe (DEBUG).")
def cli(verbose: bool):
    """Stundenplan-Link: Wochenstundenpläne vollständig als URL teilen.

    Starten Sie mit: python main.py templates
    """
    from config.manager import ConfigManager

    # Ungültige Config erst im Unterbefehl melden (damit "config init --force" möglich bleibt)
    try:
        level = ConfigManager().load_or_default().logging.level
    except ValueError:
        level = "WARNING"
    _setup_logging("DEBUG" if verbose else level)


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_templates)
cli.add_command(cmd_new)
cli.add_command(cmd_decode)
cli.add_command(cmd_show)
cli.add_command(cmd_cell)
cli.add_command(cmd_check_url)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
