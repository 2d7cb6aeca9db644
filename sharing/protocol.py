"""Versioniertes Link-Protokoll: ``?v=<Version>&t=<Payload>``.

Decode ist total: für jede Eingabe entsteht ein gültiges, sanitisiertes
Dokument plus optionaler Hinweistext, niemals eine Ausnahme. Links werden von
Hand bearbeitet oder abgeschnitten; der einzige akzeptable Fehlerfall ist ein
stiller Rückfall auf das Template mit sichtbarem Hinweis.
"""

import logging
from enum import Enum
from typing import Callable, Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel

from config.defaults import (
    DEFAULT_FALLBACK_TEMPLATE,
    URL_DATA_PARAM,
    URL_VERSION,
    URL_VERSION_PARAM,
)
from config.templates import create_from_template
from models.document import DecodeResult, Document
from models.sanitizer import sanitize_document
from sharing.compression import compress, decompress
from sharing.payload import dump_document, load_document

logger = logging.getLogger(__name__)

MSG_MISSING_DATA = "クエリに時間割データがありません。"
MSG_DECOMPRESS_FAILED = "URLの復元に失敗しました。"
MSG_CORRUPTED = "URLデータが壊れているため初期値を表示しています。"


def msg_unsupported_version(version: str) -> str:
    return f"URLバージョン v={version} は未対応です。"


class WireVersion(str, Enum):
    """Bekannte Link-Formate. Heute gibt es genau eines."""

    V1 = "1"


class ShareUrl(BaseModel):
    """Fertiger Teilen-Link."""

    url: str
    query: str
    length: int


# ─── Encode ───────────────────────────────────────────────────────────────────

def encode_token(doc: Document) -> str:
    """Dokument → komprimierter Payload-Token (Wert des ``t``-Parameters)."""
    return compress(dump_document(doc))


def encode_query(doc: Document) -> str:
    """Dokument → ``?v=1&t=…`` (formular-kodiert)."""
    return "?" + urlencode({URL_VERSION_PARAM: URL_VERSION, URL_DATA_PARAM: encode_token(doc)})


def build_share_url(doc: Document, base_url: str) -> ShareUrl:
    """Setzt die Query des Dokuments in ``base_url`` ein.

    Eine vorhandene Query und ein Fragment der Basis-URL werden ersetzt.
    """
    query = encode_query(doc)
    parts = urlsplit(base_url)
    url = urlunsplit((parts.scheme, parts.netloc, parts.path, query[1:], ""))
    return ShareUrl(url=url, query=query, length=len(url))


# ─── Decode ───────────────────────────────────────────────────────────────────

def _decode_v1(token: str) -> DecodeResult:
    json_text = decompress(token)
    if not json_text:
        logger.warning("Link-Payload konnte nicht dekomprimiert werden")
        return DecodeResult(document=create_from_template(DEFAULT_FALLBACK_TEMPLATE),
                            advisory=MSG_DECOMPRESS_FAILED)
    try:
        doc = load_document(json_text)
    except Exception as e:
        logger.warning(f"Link-Payload beschädigt: {type(e).__name__}: {e}")
        return DecodeResult(document=create_from_template(DEFAULT_FALLBACK_TEMPLATE),
                            advisory=MSG_CORRUPTED)
    return DecodeResult(document=doc)


_DECODERS: dict[WireVersion, Callable[[str], DecodeResult]] = {
    WireVersion.V1: _decode_v1,
}


def decode_token(token: Optional[str], version: WireVersion = WireVersion.V1) -> DecodeResult:
    """Decodiert einen nackten Payload-Token einer bekannten Version.

    Der Rückfall ist hier immer das Mittelschul-Template; ``decode_query``
    ersetzt ihn durch das vom Aufrufer gewünschte Template.
    """
    if not token:
        return DecodeResult(document=create_from_template(DEFAULT_FALLBACK_TEMPLATE),
                            advisory=MSG_MISSING_DATA)
    return _DECODERS[version](token)


def _first(params: dict[str, list[str]], key: str) -> Optional[str]:
    values = params.get(key)
    return values[0] if values else None


def decode_query(query: str, fallback_template: object = DEFAULT_FALLBACK_TEMPLATE) -> DecodeResult:
    """Decodiert einen Query-String (mit oder ohne führendes ``?``).

    - ``v`` oder ``t`` fehlt → Template-Standard, kein Hinweis
    - unbekannte Version → Template-Standard + Hinweis mit der Version
    - Payload kaputt → Template-Standard + Hinweis

    Wirft nie eine Ausnahme.
    """
    try:
        text = query or ""
        params = parse_qs(text[1:] if text.startswith("?") else text)
        version = _first(params, URL_VERSION_PARAM)
        token = _first(params, URL_DATA_PARAM)

        if not version or not token:
            return DecodeResult(document=create_from_template(fallback_template))

        try:
            wire_version = WireVersion(version)
        except ValueError:
            logger.warning(f"Nicht unterstützte Link-Version v={version!r}")
            return DecodeResult(document=create_from_template(fallback_template),
                                advisory=msg_unsupported_version(version))

        decoded = decode_token(token, wire_version)
    except Exception as e:
        logger.warning(f"Link konnte nicht gelesen werden: {type(e).__name__}: {e}")
        return DecodeResult(document=create_from_template(fallback_template),
                            advisory=MSG_CORRUPTED)

    if decoded.advisory is not None:
        return DecodeResult(document=create_from_template(fallback_template),
                            advisory=decoded.advisory)
    return decoded


def decode_url(url: str, fallback_template: object = DEFAULT_FALLBACK_TEMPLATE) -> DecodeResult:
    """Wie ``decode_query``, akzeptiert aber eine vollständige URL."""
    text = url or ""
    if "?" not in text and "=" in text:
        return decode_query(text, fallback_template)
    return decode_query(urlsplit(text).query, fallback_template)


def clear_query_state(doc: Document) -> Document:
    """Unabhängige, sanitisierte Kopie (z.B. nach dem Entfernen der Query)."""
    return sanitize_document(doc.clone())
