from pydantic import BaseModel, Field, field_validator, model_validator

from config.defaults import DEFAULT_BASE_URL
from models.document import TemplateKind

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ─── TEILEN ───

class ShareConfig(BaseModel):
    """Einstellungen für erzeugte und gelesene Links."""
    # Basis-URL der Stundenplan-Seite; die Query ?v=1&t=... wird angehängt
    base_url: str = Field(DEFAULT_BASE_URL,
        description="Basis-URL für Teilen-Links")
    # Template, auf das beim Lesen eines fehlenden/kaputten Links zurückgefallen wird
    fallback_template: TemplateKind = Field(TemplateKind.JUNIOR_HIGH,
        description="Rückfall-Template beim Decodieren")

    @model_validator(mode='after')
    def validate_base_url(self):
        """Basis-URL muss absolut sein (http/https)."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"base_url muss mit http:// oder https:// beginnen: {self.base_url!r}")
        return self


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Log-Ausgabe der Kommandozeile."""
    # Mindest-Level (DEBUG zeigt auch stille Reparaturen des Sanitizers)
    level: str = Field("WARNING",
        description="Log-Level: DEBUG, INFO, WARNING, ERROR, CRITICAL")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return level


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Kommandozeile."""
    # Link-Einstellungen
    share: ShareConfig = Field(default_factory=ShareConfig)
    # Log-Einstellungen
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
