from typing import Dict, Iterable, List


def normalize_content_type(raw: str | None) -> str:
    """`Image/PNG; charset=x` -> `image/png`; None -> ``."""
    return (raw or "").split(";")[0].strip().lower()


class MimeClassifier:
    """Maps a declared content type to a storage category.

    Two defaults on purpose: an absent type lands in `fallback`, a present but
    unknown type lands in `default`.
    """

    def __init__(self, category_types: Dict[str, Iterable[str]], *, default: str, fallback: str) -> None:
        # dict order is the priority order
        self._categories: List[tuple[str, frozenset[str]]] = [
            (category, frozenset(t.lower() for t in types)) for category, types in category_types.items()
        ]
        self.default = default
        self.fallback = fallback

    def classify(self, content_type: str | None) -> str:
        if not content_type:
            return self.fallback
        ct = content_type.lower()
        for category, types in self._categories:
            if ct in types:
                return category
        return self.default
