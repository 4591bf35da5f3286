import os
from typing import List

WORDBOOK_EXTENSION = '.txt'


class WordbookError(Exception):
    pass


class InvalidWordbookName(WordbookError):
    pass


class WordbookNotFound(WordbookError):
    pass


def clean_wordbook_name(name) -> str:
    """Return the trimmed wordbook name, or raise InvalidWordbookName.

    Names are plain file stems: empty names and anything carrying a path
    separator are rejected.
    """
    cleaned = (name or '').strip() if isinstance(name, str) else ''
    if not cleaned or '/' in cleaned or '\\' in cleaned:
        raise InvalidWordbookName(f"invalid wordbook name: {name!r}")
    return cleaned


def _wordbook_stem(filename: str):
    if not filename.lower().endswith(WORDBOOK_EXTENSION):
        return None
    stem = filename[:-len(WORDBOOK_EXTENSION)].strip()
    if not stem or stem.startswith('.'):
        return None
    return stem


def list_wordbooks(directory: str) -> List[str]:
    books = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            stem = _wordbook_stem(entry.name)
            if stem is None:
                continue
            books.append(stem)
    return sorted(books)


def _resolve_wordbook_path(directory: str, name: str) -> str:
    exact = os.path.join(directory, name + WORDBOOK_EXTENSION)
    if os.path.isfile(exact):
        return exact
    # Extension matching is case-insensitive (e.g. "Animals.TXT")
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file() and _wordbook_stem(entry.name) == name:
                return entry.path
    raise WordbookNotFound(f"wordbook not found: {name}")


def normalize_lines(lines) -> List[str]:
    words = []
    for line in lines:
        word = line.strip().lower()
        if word:
            words.append(word)
    return words


def read_wordbook(directory: str, name: str) -> List[str]:
    """Return the lowercase, trimmed, non-empty words of a wordbook in file order."""
    name = clean_wordbook_name(name)
    path = _resolve_wordbook_path(directory, name)
    with open(path, encoding='utf-8-sig') as fh:
        return normalize_lines(fh.read().split('\n'))
