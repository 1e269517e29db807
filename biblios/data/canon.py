"""Bible canon metadata - book names, testaments, chapter counts."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


OLD_TESTAMENT = "old"
NEW_TESTAMENT = "new"

TESTAMENT_LABELS: Dict[str, str] = {
    OLD_TESTAMENT: "Old Testament",
    NEW_TESTAMENT: "New Testament",
}


@dataclass(frozen=True)
class CanonBook:
    """Metadata for a Bible book.

    ``abbr`` is the stable identifier stored in verses, bookmarks and the
    reading position; ``name`` is the long display name.
    """

    abbr: str
    name: str
    testament: str
    chapters: int
    aliases: tuple[str, ...] = ()


_OT = OLD_TESTAMENT
_NT = NEW_TESTAMENT

_CANON_TABLE: Sequence[CanonBook] = (
    # Old Testament
    CanonBook("Gen", "Genesis", _OT, 50, ("ge", "gn")),
    CanonBook("Exod", "Exodus", _OT, 40, ("ex", "exo")),
    CanonBook("Lev", "Leviticus", _OT, 27, ("le", "lv")),
    CanonBook("Num", "Numbers", _OT, 36, ("nu", "nm")),
    CanonBook("Deut", "Deuteronomy", _OT, 34, ("de", "dt")),
    CanonBook("Josh", "Joshua", _OT, 24, ("jos", "jsh")),
    CanonBook("Judg", "Judges", _OT, 21, ("jdg", "jg")),
    CanonBook("Ruth", "Ruth", _OT, 4, ("ru", "rth")),
    CanonBook("1Sam", "1 Samuel", _OT, 31, ("1sa",)),
    CanonBook("2Sam", "2 Samuel", _OT, 24, ("2sa",)),
    CanonBook("1Kgs", "1 Kings", _OT, 22, ("1ki", "1kings")),
    CanonBook("2Kgs", "2 Kings", _OT, 25, ("2ki", "2kings")),
    CanonBook("1Chr", "1 Chronicles", _OT, 29, ("1ch",)),
    CanonBook("2Chr", "2 Chronicles", _OT, 36, ("2ch",)),
    CanonBook("Ezra", "Ezra", _OT, 10, ("ezr",)),
    CanonBook("Neh", "Nehemiah", _OT, 13, ("ne",)),
    CanonBook("Esth", "Esther", _OT, 10, ("est", "es")),
    CanonBook("Job", "Job", _OT, 42, ("jb",)),
    CanonBook("Ps", "Psalms", _OT, 150, ("psa", "psalm", "pss")),
    CanonBook("Prov", "Proverbs", _OT, 31, ("pr", "prv")),
    CanonBook("Eccl", "Ecclesiastes", _OT, 12, ("ec", "ecc", "qoh")),
    CanonBook("Song", "Song of Solomon", _OT, 8, ("so", "sos", "canticles")),
    CanonBook("Isa", "Isaiah", _OT, 66, ("is",)),
    CanonBook("Jer", "Jeremiah", _OT, 52, ("je", "jr")),
    CanonBook("Lam", "Lamentations", _OT, 5, ("la",)),
    CanonBook("Ezek", "Ezekiel", _OT, 48, ("eze", "ezk")),
    CanonBook("Dan", "Daniel", _OT, 12, ("da", "dn")),
    CanonBook("Hos", "Hosea", _OT, 14, ("ho",)),
    CanonBook("Joel", "Joel", _OT, 3, ("jl",)),
    CanonBook("Amos", "Amos", _OT, 9, ("am",)),
    CanonBook("Obad", "Obadiah", _OT, 1, ("ob",)),
    CanonBook("Jonah", "Jonah", _OT, 4, ("jon", "jnh")),
    CanonBook("Mic", "Micah", _OT, 7, ("mi",)),
    CanonBook("Nah", "Nahum", _OT, 3, ("na",)),
    CanonBook("Hab", "Habakkuk", _OT, 3, ("hb",)),
    CanonBook("Zeph", "Zephaniah", _OT, 3, ("zep", "zp")),
    CanonBook("Hag", "Haggai", _OT, 2, ("hg",)),
    CanonBook("Zech", "Zechariah", _OT, 14, ("zec", "zc")),
    CanonBook("Mal", "Malachi", _OT, 4, ("ml",)),
    # New Testament
    CanonBook("Matt", "Matthew", _NT, 28, ("mt",)),
    CanonBook("Mark", "Mark", _NT, 16, ("mk", "mrk")),
    CanonBook("Luke", "Luke", _NT, 24, ("lk", "luk")),
    CanonBook("John", "John", _NT, 21, ("jn", "jhn")),
    CanonBook("Acts", "Acts", _NT, 28, ("ac",)),
    CanonBook("Rom", "Romans", _NT, 16, ("ro", "rm")),
    CanonBook("1Cor", "1 Corinthians", _NT, 16, ("1co",)),
    CanonBook("2Cor", "2 Corinthians", _NT, 13, ("2co",)),
    CanonBook("Gal", "Galatians", _NT, 6, ("ga",)),
    CanonBook("Eph", "Ephesians", _NT, 6, ("ep",)),
    CanonBook("Phil", "Philippians", _NT, 4, ("php", "pp")),
    CanonBook("Col", "Colossians", _NT, 4, ("co",)),
    CanonBook("1Thess", "1 Thessalonians", _NT, 5, ("1th",)),
    CanonBook("2Thess", "2 Thessalonians", _NT, 3, ("2th",)),
    CanonBook("1Tim", "1 Timothy", _NT, 6, ("1ti",)),
    CanonBook("2Tim", "2 Timothy", _NT, 4, ("2ti",)),
    CanonBook("Titus", "Titus", _NT, 3, ("tit",)),
    CanonBook("Phlm", "Philemon", _NT, 1, ("phm",)),
    CanonBook("Heb", "Hebrews", _NT, 13, ("he",)),
    CanonBook("Jas", "James", _NT, 5, ("jm",)),
    CanonBook("1Pet", "1 Peter", _NT, 5, ("1pe",)),
    CanonBook("2Pet", "2 Peter", _NT, 3, ("2pe",)),
    CanonBook("1John", "1 John", _NT, 5, ("1jn",)),
    CanonBook("2John", "2 John", _NT, 1, ("2jn",)),
    CanonBook("3John", "3 John", _NT, 1, ("3jn",)),
    CanonBook("Jude", "Jude", _NT, 1, ("jud",)),
    CanonBook("Rev", "Revelation", _NT, 22, ("re", "rv", "apocalypse")),
)

# Book order list (identifiers)
BOOK_ORDER: List[str] = [book.abbr for book in _CANON_TABLE]

# Lookup tables
_BOOK_BY_ABBR: Dict[str, CanonBook] = {book.abbr: book for book in _CANON_TABLE}
_INDEX_BY_ABBR: Dict[str, int] = {abbr: i for i, abbr in enumerate(BOOK_ORDER)}

# Build alias map
_ALIAS_MAP: Dict[str, str] = {}
for _book in _CANON_TABLE:
    _ALIAS_MAP[_book.abbr.lower()] = _book.abbr
    _ALIAS_MAP[_book.name.lower()] = _book.abbr
    _ALIAS_MAP[_book.name.lower().replace(" ", "")] = _book.abbr
    for _alias in _book.aliases:
        _ALIAS_MAP[_alias] = _book.abbr


def all_books() -> List[CanonBook]:
    """Return the whole canon in order."""
    return list(_CANON_TABLE)


def get_book(name: str) -> Optional[CanonBook]:
    """Get a CanonBook by identifier or long name."""
    book = _BOOK_BY_ABBR.get(name)
    if book:
        return book
    abbr = _ALIAS_MAP.get(name.strip().lower()) if name else None
    return _BOOK_BY_ABBR.get(abbr) if abbr else None


def resolve_alias(alias: str, fuzzy: bool = True) -> Optional[str]:
    """Resolve an abbreviation, long name or alias to a book identifier.

    Exact and punctuation-free matches win. With ``fuzzy`` the earliest book
    in canonical order with an alias starting with the text is returned.
    """
    if not alias:
        return None
    token = alias.strip().lower()
    normalized = token.replace(".", "").replace(" ", "")
    if not normalized:
        return None

    if token in _ALIAS_MAP:
        return _ALIAS_MAP[token]
    if normalized in _ALIAS_MAP:
        return _ALIAS_MAP[normalized]

    if fuzzy:
        candidates = sorted(
            {(_INDEX_BY_ABBR[abbr], abbr) for key, abbr in _ALIAS_MAP.items() if key.startswith(normalized)}
        )
        if candidates:
            return candidates[0][1]

    return None


def book_index(name: str) -> int:
    """Return the canonical position of a book, or -1 when unknown."""
    book = get_book(name)
    if book is None:
        return -1
    return _INDEX_BY_ABBR[book.abbr]


def book_chapters(name: str) -> int:
    """Return the number of chapters in a book (0 when unknown)."""
    book = get_book(name)
    return book.chapters if book else 0


def book_name(name: str) -> str:
    """Return the long display name of a book."""
    book = get_book(name)
    return book.name if book else name


def testament_label(name: str) -> str:
    """Return "Old Testament" / "New Testament" for a book."""
    book = get_book(name)
    if book is None:
        return ""
    return TESTAMENT_LABELS[book.testament]


def first_book() -> str:
    return BOOK_ORDER[0]


def last_book() -> str:
    return BOOK_ORDER[-1]


def next_book(name: str) -> Optional[str]:
    """Return the next book in the canon."""
    idx = book_index(name)
    if 0 <= idx < len(BOOK_ORDER) - 1:
        return BOOK_ORDER[idx + 1]
    return None


def prev_book(name: str) -> Optional[str]:
    """Return the previous book in the canon."""
    idx = book_index(name)
    if idx > 0:
        return BOOK_ORDER[idx - 1]
    return None


def filter_books(query: str) -> List[CanonBook]:
    """Filter books by case-insensitive substring of identifier or name.

    An empty query returns the full canon; order is always canonical.
    """
    needle = query.lower()
    if not needle:
        return list(_CANON_TABLE)
    return [
        book
        for book in _CANON_TABLE
        if needle in book.abbr.lower() or needle in book.name.lower()
    ]
