"""Charset detection and decoding for fetched pages.

Chinese web-fiction hosts frequently serve GBK without declaring it, so the
detector walks a cascade of progressively weaker signals and always settles
on a codec.
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Mapping
from urllib.parse import urlsplit

from scraper_service.services.extractors.base import EncodingDecision, EncodingSource

logger = logging.getLogger(__name__)

DEFAULT_CODEC = "utf-8"
GB_CODEC = "gbk"

UTF8_BOM = b"\xef\xbb\xbf"
META_SCAN_BYTES = 2048
SAMPLE_BYTES = 1000
HIGH_BYTE_RATIO = 0.30

# Hosts known to serve GBK pages
KNOWN_GBK_DOMAINS = (
    "69shuba.com",
    "69shuba.cx",
    "qidian.com",
    "zongheng.com",
    "17k.com",
    "jjwxc.net",
    "hongxiu.com",
)

_HEADER_CHARSET = re.compile(r"charset=([^;]+)", re.IGNORECASE)
_META_CHARSET = re.compile(
    r"""<meta[^>]+charset\s*=\s*['"]*([^'">\s]+)""", re.IGNORECASE
)


def normalize_charset(name: str) -> str:
    """Lower-case a charset label and fold the GB family into ``gbk``."""
    charset = name.strip().strip("\"'").lower()
    if "gb" in charset:
        return GB_CODEC
    return charset


def _header(headers: Mapping[str, str], name: str) -> str:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def host_matches(url: str, domains: tuple[str, ...]) -> bool:
    """Return True if the URL's host is one of *domains* or a subdomain of one."""
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(host == domain or host.endswith("." + domain) for domain in domains)


def detect_encoding(
    headers: Mapping[str, str],
    raw_bytes: bytes,
    url: str,
    *,
    high_byte_ratio: float = HIGH_BYTE_RATIO,
) -> EncodingDecision:
    """Pick the codec for *raw_bytes*.

    Signals, strongest first: Content-Type charset, UTF-8 BOM, meta charset in
    the first 2KB, known GBK host, share of high bytes in the first 1000
    bytes. Falls back to utf-8.
    """
    match = _HEADER_CHARSET.search(_header(headers, "content-type"))
    if match and match.group(1).strip().strip("\"'"):
        return EncodingDecision(normalize_charset(match.group(1)), EncodingSource.HEADER)

    if raw_bytes[:3] == UTF8_BOM:
        return EncodingDecision(DEFAULT_CODEC, EncodingSource.BOM)

    head = raw_bytes[:META_SCAN_BYTES].decode("ascii", errors="ignore")
    match = _META_CHARSET.search(head)
    if match:
        return EncodingDecision(normalize_charset(match.group(1)), EncodingSource.META_TAG)

    if url and host_matches(url, KNOWN_GBK_DOMAINS):
        return EncodingDecision(GB_CODEC, EncodingSource.DOMAIN_HEURISTIC)

    sample = raw_bytes[:SAMPLE_BYTES]
    if sample:
        high = sum(1 for byte in sample if byte > 127)
        if high / len(sample) > high_byte_ratio:
            return EncodingDecision(GB_CODEC, EncodingSource.BYTE_STATISTICS)

    return EncodingDecision(DEFAULT_CODEC, EncodingSource.DEFAULT)


def _python_codec(codec: str) -> str:
    if codec in (GB_CODEC, "gb2312"):
        # GB18030 is a strict superset of GBK and GB2312
        return "gb18030"
    name = codecs.lookup(codec).name
    if name == "utf-8":
        return "utf-8-sig"
    return name


def decode_content(raw_bytes: bytes, codec: str) -> str:
    """Decode *raw_bytes* with *codec*; never raises.

    Unknown, non-text or unusable codec names fall back to utf-8 and
    undecodable bytes are replaced.
    """
    try:
        return raw_bytes.decode(_python_codec(codec), errors="replace")
    except (LookupError, UnicodeError):
        logger.warning("Unusable charset %r, decoding as %s", codec, DEFAULT_CODEC)
        return raw_bytes.decode("utf-8-sig", errors="replace")
