"""Kompressionsstufe: reversible Textkompression mit URL-sicherer Ausgabe.

lz-string ("EncodedURIComponent"-Variante). Das Alphabet besteht nur aus
A–Z, a–z, 0–9 und ``+-$``; in einem Query-Wert ist kein weiteres Escaping
nötig außer der Formular-Kodierung von ``+``.
"""

import logging

from lzstring import LZString

logger = logging.getLogger(__name__)

_lz = LZString()


def compress(text: str) -> str:
    """Komprimiert ``text``; ``decompress(compress(x)) == x``."""
    return _lz.compressToEncodedURIComponent(text)


def decompress(token: str) -> str:
    """Gegenstück zu ``compress``.

    Fehlerhafte Eingaben liefern ``""`` statt einer Ausnahme. Die Protokoll-
    Schicht wertet einen leeren Rückgabewert als Decode-Fehler.
    """
    if not token:
        return ""
    try:
        text = _lz.decompressFromEncodedURIComponent(token)
    except Exception as e:
        logger.debug(f"Dekompression fehlgeschlagen: {type(e).__name__}: {e}")
        return ""
    return text or ""
