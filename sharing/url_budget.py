"""URL-Längen-Budget: ordnet einen Teilen-Link in safe / warn / danger ein.

Rein beratend. Ein Link wird nie blockiert, auch nicht jenseits praktischer
Plattform-Grenzen; den Hinweis anzuzeigen ist Sache des Aufrufers.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from config.defaults import URL_DANGER_LENGTH, URL_MAX_LENGTH, URL_WARN_LENGTH

MSG_DANGER = "URLが長すぎる可能性があります。メモを短くするか、科目名を省略してみてください。"
MSG_WARN = "URLが長くなっています。共有前にメモ・説明文の長さを確認してください。"


class UrlBand(str, Enum):
    SAFE = "safe"
    WARN = "warn"
    DANGER = "danger"


class UrlLengthState(BaseModel):
    """Einstufung einer Link-Länge."""

    band: UrlBand
    length: int
    # None bei SAFE
    message: Optional[str] = None

    @property
    def usage(self) -> float:
        return budget_usage(self.length)


def url_length(url: str) -> int:
    """Exakte Länge eines Kandidaten-Links (für Live-Anzeigen beim Bearbeiten)."""
    return len(url)


def budget_usage(length: int) -> float:
    """Anteil des Budgets (URL_MAX_LENGTH) zwischen 0.0 und 1.0."""
    return min(1.0, max(0, length) / URL_MAX_LENGTH)


def classify_length(length: int) -> UrlLengthState:
    if length >= URL_DANGER_LENGTH:
        return UrlLengthState(band=UrlBand.DANGER, length=length, message=MSG_DANGER)
    if length >= URL_WARN_LENGTH:
        return UrlLengthState(band=UrlBand.WARN, length=length, message=MSG_WARN)
    return UrlLengthState(band=UrlBand.SAFE, length=length)


def classify_url_length(url: str) -> UrlLengthState:
    """Einstufung eines fertigen Links."""
    return classify_length(url_length(url))
