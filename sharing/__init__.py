from sharing.compression import compress, decompress
from sharing.payload import PayloadError, PayloadV1, decode_payload, encode_payload
from sharing.protocol import (
    ShareUrl,
    WireVersion,
    build_share_url,
    decode_query,
    decode_url,
    encode_query,
)
from sharing.url_budget import UrlBand, UrlLengthState, classify_url_length, url_length

# Kurzformen für Aufrufer (UI, Persistenz)
encode = encode_query
decode = decode_query

__all__ = [
    "compress",
    "decompress",
    "PayloadError",
    "PayloadV1",
    "decode_payload",
    "encode_payload",
    "ShareUrl",
    "WireVersion",
    "build_share_url",
    "decode_query",
    "decode_url",
    "encode_query",
    "encode",
    "decode",
    "UrlBand",
    "UrlLengthState",
    "classify_url_length",
    "url_length",
]
