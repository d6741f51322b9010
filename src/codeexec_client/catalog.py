"""Read-only set of languages offered by the executor.

The list is fetched once per session.  The first language is the default
selection and its ``example`` program seeds the editor.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple

from .models import LanguageDescriptor

FAILED_TO_LOAD_MESSAGE = "Failed to load languages."


class LanguageCatalog:
    def __init__(self, languages: Sequence[LanguageDescriptor]) -> None:
        self._languages: Tuple[LanguageDescriptor, ...] = tuple(languages)
        self._by_id = {lang.id: lang for lang in self._languages}

    @classmethod
    async def load(cls, client) -> "LanguageCatalog":
        """Fetch the language list through ``client`` (an ``ExecutorClient``)."""
        return cls(await client.fetch_languages())

    @property
    def languages(self) -> Tuple[LanguageDescriptor, ...]:
        return self._languages

    @property
    def default(self) -> Optional[LanguageDescriptor]:
        return self._languages[0] if self._languages else None

    def get(self, language_id: str) -> LanguageDescriptor:
        try:
            return self._by_id[language_id]
        except KeyError:
            raise KeyError(f"Unknown language: {language_id}") from None

    def example_for(self, language_id: str) -> str:
        return self.get(language_id).example

    def __contains__(self, language_id: object) -> bool:
        return language_id in self._by_id

    def __len__(self) -> int:
        return len(self._languages)

    def __iter__(self) -> Iterator[LanguageDescriptor]:
        return iter(self._languages)
