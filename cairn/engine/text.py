"""English helpers used to build narration lines."""

from collections import Counter
from typing import Iterable

_VOWELS = "aeiou"


def definite(name: str, capital: bool = False) -> str:
    """
    'goblin' -> 'the goblin' ('The goblin' with capital=True).

    Proper names (starting with a capital letter) are returned unchanged.
    """
    if not name or name[0].isupper():
        return name
    return f"{'The' if capital else 'the'} {name}"


def indefinite(name: str) -> str:
    """'apple' -> 'an apple', 'sword' -> 'a sword'."""
    if not name or name[0].isupper():
        return name
    article = "an" if name[0].lower() in _VOWELS else "a"
    return f"{article} {name}"


def pluralise(name: str) -> str:
    """Naive English plural: box -> boxes, berry -> berries, bag -> bags."""
    lower = name.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return f"{name}es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return f"{name[:-1]}ies"
    return f"{name}s"


def number_of_items(count: int, name: str) -> str:
    """1 -> 'an apple', 3 -> '3 apples'."""
    if count == 1:
        return indefinite(name)
    return f"{count} {pluralise(name)}"


def names_and_counts(names: Iterable[str]) -> str:
    """
    Summarise a collection of names, keeping first-seen order.

    ["apple", "box", "apple"] -> "2 apples, a box"
    """
    counts = Counter(names)
    return ", ".join(number_of_items(count, name) for name, count in counts.items())
