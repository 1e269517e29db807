"""Error types for biblios."""


class BibliosError(Exception):
    """Base class for all biblios errors."""


class ChapterNotFound(BibliosError):
    """The requested book/chapter does not exist in the verse store."""

    def __init__(self, book: str, chapter: int) -> None:
        self.book = book
        self.chapter = chapter
        super().__init__(f"{book} {chapter} not found")


class EmptyChapter(BibliosError):
    """The chapter exists but holds no verses."""

    def __init__(self, book: str, chapter: int) -> None:
        self.book = book
        self.chapter = chapter
        super().__init__(f"{book} {chapter} has no verses")


class PersistenceError(BibliosError):
    """Reading or writing a settings/state/bookmarks file failed."""

    def __init__(self, path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write {path}: {cause}")
