import re
from types import MappingProxyType
from typing import Iterable, Optional

MAX_SLUG_LENGTH = 100

_GLYPHS = {
    "а":"a","б":"b","в":"v","г":"g","д":"d","ђ":"dj","е":"e","ж":"z","з":"z","и":"i",
    "ј":"j","к":"k","л":"l","љ":"lj","м":"m","н":"n","њ":"nj","о":"o","п":"p","р":"r",
    "с":"s","т":"t","ћ":"c","у":"u","ф":"f","х":"h","ц":"c","ч":"c","џ":"dz","ш":"s",
    "А":"A","Б":"B","В":"V","Г":"G","Д":"D","Ђ":"Dj","Е":"E","Ж":"Z","З":"Z","И":"I",
    "Ј":"J","К":"K","Л":"L","Љ":"Lj","М":"M","Н":"N","Њ":"Nj","О":"O","П":"P","Р":"R",
    "С":"S","Т":"T","Ћ":"C","У":"U","Ф":"F","Х":"H","Ц":"C","Ч":"C","Џ":"Dz","Ш":"S",
    # латиница са дијакритиком
    "č":"c","ć":"c","đ":"dj","š":"s","ž":"z",
    "Č":"C","Ć":"C","Đ":"Dj","Š":"S","Ž":"Z",
}

GLYPH_MAP = MappingProxyType(_GLYPHS)

_WHITESPACE_RE = re.compile(r"\s+")
_NOT_SLUG_RE = re.compile(r"[^a-z0-9-]")
_HYPHENS_RE = re.compile(r"-{2,}")

def transliterate(text: Optional[str]) -> str:
    """Ћирилица (и латиница са дијакритиком) -> основна латиница, слово по слово."""
    if not text:
        return ""
    return "".join(GLYPH_MAP.get(ch, ch) for ch in text)

def needs_transliteration(text: str) -> bool:
    return any(ch in GLYPH_MAP for ch in text)

def generate_slug(text: Optional[str]) -> str:
    """
    Naslov -> URL slug:
    - transliteracija
    - lower + strip
    - razmaci -> '-'
    - sve osim a-z, 0-9 i '-' se briše
    - sažimanje crtica, bez crtica na krajevima
    - najviše MAX_SLUG_LENGTH karaktera
    """
    s = transliterate(text).lower().strip()
    s = _WHITESPACE_RE.sub("-", s)
    s = _NOT_SLUG_RE.sub("", s)
    s = _HYPHENS_RE.sub("-", s)
    s = s.lstrip("-").rstrip("-")
    # sečenje može da ostavi crticu na kraju
    return s[:MAX_SLUG_LENGTH].rstrip("-")

def generate_unique_slug(base_slug: str, existing: Iterable[str]) -> str:
    taken = frozenset(existing)
    if base_slug not in taken:
        return base_slug
    counter = 1
    while f"{base_slug}-{counter}" in taken:
        counter += 1
    return f"{base_slug}-{counter}"

normalize = generate_slug
uniquify = generate_unique_slug
