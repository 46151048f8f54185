"""Word definition domain models."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class WordDefinition:
    """Normalized definition data for a single word.

    Derived from upstream lexical entries, never persisted.
    Keys of definitions/examples/synonyms always appear in parts_of_speech.
    """
    word: str
    phonetics: list[str] = field(default_factory=list)
    parts_of_speech: list[str] = field(default_factory=list)
    definitions: dict[str, list[str]] = field(default_factory=dict)
    examples: dict[str, list[str]] = field(default_factory=dict)
    synonyms: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Wire form, keeping the upstream key names the client expects."""
        return {
            'word': self.word,
            'phonetics': list(self.phonetics),
            'partOfSpeech': list(self.parts_of_speech),
            'definitions': {pos: list(v) for pos, v in self.definitions.items()},
            'examples': {pos: list(v) for pos, v in self.examples.items()},
            'synonyms': {pos: list(v) for pos, v in self.synonyms.items()},
        }


class LookupStatus(str, Enum):
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    UPSTREAM_ERROR = 'upstream_error'


@dataclass(frozen=True)
class LookupOutcome:
    """Immutable result of a dictionary lookup (Value Object).

    Exactly one of `definition` (FOUND) or `error` (UPSTREAM_ERROR) is set;
    NOT_FOUND carries neither.
    """
    word: str
    status: LookupStatus
    definition: WordDefinition | None = None
    error: str | None = None

    @classmethod
    def found(cls, word: str, definition: WordDefinition) -> 'LookupOutcome':
        return cls(word=word, status=LookupStatus.FOUND, definition=definition)

    @classmethod
    def not_found(cls, word: str) -> 'LookupOutcome':
        return cls(word=word, status=LookupStatus.NOT_FOUND)

    @classmethod
    def upstream_error(cls, word: str, error: str) -> 'LookupOutcome':
        return cls(word=word, status=LookupStatus.UPSTREAM_ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND
