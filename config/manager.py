"""Einstellungsdatei der Kommandozeile (``config/app_config.yaml``).

Pydantic validiert, ruamel.yaml schreibt die Datei mit Abschnitts- und
Feldkommentaren. Die Feldkommentare stammen aus den ``description``-Texten
des Schemas, damit Datei und Modell nicht auseinanderlaufen.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import URL_VERSION
from config.schema import AppConfig

logger = logging.getLogger(__name__)
console = Console()

_yaml = YAML()
_yaml.default_flow_style = False
_yaml.width = 120

# Abschnitt → Überschrift in der Datei (Reihenfolge = Reihenfolge in der Datei)
_SECTION_TITLES = {
    "share": "Teilen",
    "logging": "Logging",
}


def _header() -> str:
    return "\n".join([
        "# ============================================",
        "# Stundenplan-Link: Einstellungen",
        f"# Link-Version: v={URL_VERSION}",
        f"# Erstellt: {date.today().isoformat()}",
        "# ============================================",
        "",
    ])


def _section_map(section: BaseModel) -> CommentedMap:
    """Ein Abschnitt als CommentedMap; jedes Feld trägt seine Beschreibung."""
    cm = CommentedMap(section.model_dump(mode="json"))
    for name, field in type(section).model_fields.items():
        if field.description:
            cm.yaml_add_eol_comment(field.description, name)
    return cm


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "app_config.yaml"

    def first_run_check(self) -> bool:
        """True, solange noch keine Einstellungsdatei existiert."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Liest und validiert die Einstellungsdatei.

        Raises:
            FileNotFoundError: Datei existiert nicht.
            ValueError: Datei ist kein YAML-Mapping oder verletzt das Schema.
        """
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Einstellungsdatei fehlt: {target}\n"
                f"Anlegen mit 'python main.py config init'."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = _yaml.load(f)
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Erwartet ein Mapping, gefunden: {type(raw).__name__}"
            )
        try:
            config = AppConfig.model_validate(dict(raw))
        except ValidationError as e:
            raise ValueError(f"Konfigurationsdatei ungültig: {target}\n{e}") from e
        logger.debug(f"Einstellungen geladen: {target}")
        return config

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie ``load``; ohne Datei gelten die eingebauten Standardwerte."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            logger.debug(f"Keine Einstellungsdatei unter {target}, nutze Standardwerte")
            return AppConfig()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> Path:
        """Schreibt die Einstellungen als kommentiertes YAML und gibt den Pfad zurück."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        document = CommentedMap()
        for key, title in _SECTION_TITLES.items():
            document[key] = _section_map(getattr(config, key))
            document.yaml_set_comment_before_after_key(key, before=f"\n─── {title} ───")

        with open(target, "w", encoding="utf-8") as f:
            f.write(_header() + "\n")
            _yaml.dump(document, f)

        console.print(f"[green]✓[/green] Einstellungen gespeichert: {target}")
        return target
