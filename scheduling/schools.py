"""
Fallback school classification for imported classes.

The keyword table is an ordered list of (keywords, school_code) pairs and
the first entry with a keyword contained in the subject wins. Matching
ignores case and accents. Subjects that match several entries are a known
source of misclassification.
"""
import json
import unicodedata
from typing import Iterable, List, Optional, Sequence, Tuple

KeywordTable = List[Tuple[Tuple[str, ...], str]]


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _fold(text) -> str:
    return strip_accents(text or "").strip().lower()


def normalize_table(entries: Iterable) -> KeywordTable:
    """Accepts [(keywords, code)] pairs or [{"keywords": [...], "school": code}] dicts."""
    table = []
    for entry in entries or []:
        if isinstance(entry, dict):
            keywords = entry.get("keywords") or []
            code = entry.get("school") or entry.get("code")
        else:
            keywords, code = entry
        if isinstance(keywords, str):
            keywords = [keywords]
        keywords = tuple(dict.fromkeys(_fold(k) for k in keywords if k and k.strip()))
        if keywords and code:
            table.append((keywords, str(code)))
    return table


def load_table(path: str) -> KeywordTable:
    with open(path, "r", encoding="utf-8") as fh:
        return normalize_table(json.load(fh))


def classify_subject(subject: Optional[str], table: Sequence, default_code: str) -> str:
    text = _fold(subject)
    for keywords, code in table:
        if any(k in text for k in keywords):
            return code
    return default_code
