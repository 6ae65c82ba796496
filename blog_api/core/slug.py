"""
Генерация slug для постов и категорий.
"""

import re

# Только ASCII: буквы, цифры и подчеркивание считаются словесными символами
_NON_WORD_RE = re.compile(r"[^\w ]+", re.ASCII)
_SPACES_RE = re.compile(r" +")


def slugify(value: str) -> str:
    """
    Построить slug из названия.

    Приводит строку к нижнему регистру, удаляет все символы кроме
    словесных и пробелов, заменяет каждую серию пробелов на дефис.
    Результат может быть пустым.

    Example:
        >>> slugify("Tech & Science")
        'tech-science'
    """
    lowered = value.lower()
    stripped = _NON_WORD_RE.sub("", lowered)
    return _SPACES_RE.sub("-", stripped)
