from typing import Callable, Generic, Iterable, List, Sequence, TypeVar

T = TypeVar("T")


def matches_word(text: str, term: str) -> bool:
    """True if the first occurrence of ``term`` in ``text`` is a whole word.

    Word boundaries are the ends of ``text`` or a single space character.
    """
    if not term:
        return False
    begin = text.find(term)
    if begin == -1:
        return False
    end = begin + len(term)
    if begin != 0 and text[begin - 1] != " ":
        return False
    if end != len(text) and text[end] != " ":
        return False
    return True


class SearchEngine(Generic[T]):
    """Linear whole-word search over whatever ``supplier`` currently returns.

    ``info`` picks the text field to search (a video title, a user name).
    Results keep the supplier's order; an item is included as soon as any
    one of the terms matches it.
    """

    def __init__(self, supplier: Callable[[], Iterable[T]], info: Callable[[T], str]):
        self._supplier = supplier
        self._info = info

    def search(self, request: Sequence[str]) -> List[T]:
        result = []
        for element in self._supplier():
            text = self._info(element)
            if any(matches_word(text, term) for term in request):
                result.append(element)
        return result
