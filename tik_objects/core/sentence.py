"""Response sentences.

A device replies with a sequence of sentences. Each sentence starts with a
reply word (``!re``, ``!trap``, ``!done``, ``!fatal``) followed by attribute
words ``=key=value`` and an optional ``.tag=...`` word:

    ["!re", "=.id=*1", "=name=ether1", "=disabled=false"]
    ["!trap", "=category=2", "=message=interrupted"]
    ["!done"]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from tik_objects.core.enums import SentenceKind
from tik_objects.core.exceptions import MissingFieldError, TikObjectsError


@dataclass(frozen=True)
class Sentence(Mapping[str, str]):
    """Ordered, read-only mapping of field key to string value.

    Sentences compare and hash by kind, fields and tag; the originating
    command is not part of their identity.
    """

    kind: ClassVar[SentenceKind]

    fields: dict[str, str] = field(default_factory=dict)
    tag: str | None = None
    command: Any = field(default=None, compare=False)

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __hash__(self) -> int:
        return hash((type(self), tuple(self.fields.items()), self.tag))

    def get_response_field(self, field_name: str) -> str:
        """Return the value of a field, raising MissingFieldError if absent."""
        try:
            return self.fields[field_name]
        except KeyError:
            raise MissingFieldError(field_name, self.command) from None

    def get_response_field_or_default(self, field_name: str, default: str) -> str:
        """Return the value of a field, or *default* if absent."""
        return self.fields.get(field_name, default)

    def words(self) -> list[str]:
        """Render back to the word list form."""
        result = [self.kind.value]
        result.extend(f"={key}={value}" for key, value in self.fields.items())
        if self.tag is not None:
            result.append(f".tag={self.tag}")
        return result


@dataclass(frozen=True, eq=False)
class ReSentence(Sentence):
    """One data row."""

    kind: ClassVar[SentenceKind] = SentenceKind.RE


@dataclass(frozen=True)
class TrapSentence(Sentence):
    """Error row returned in place of a data row."""

    kind: ClassVar[SentenceKind] = SentenceKind.TRAP

    fatal: bool = False

    def __hash__(self) -> int:
        return hash((tuple(self.fields.items()), self.tag, self.fatal))

    @property
    def category(self) -> str | None:
        if self.fatal:
            return "fatal"
        return self.fields.get("category")

    @property
    def message(self) -> str:
        return self.fields.get("message", "")

    def words(self) -> list[str]:
        """Render back to the word list form; a fatal trap renders as ``!fatal``."""
        if not self.fatal:
            return super().words()
        result = [SentenceKind.FATAL.value, self.message]
        result.extend(f"={k}={v}" for k, v in self.fields.items() if k != "message")
        return result


@dataclass(frozen=True, eq=False)
class DoneSentence(Sentence):
    """Terminal row of a command's response."""

    kind: ClassVar[SentenceKind] = SentenceKind.DONE


_SENTENCE_TYPES: dict[str, type[Sentence]] = {
    SentenceKind.RE.value: ReSentence,
    SentenceKind.TRAP.value: TrapSentence,
    SentenceKind.DONE.value: DoneSentence,
}


def parse_sentence(words: Iterable[str], command: Any = None) -> Sentence:
    """Build a typed sentence from its word list.

    Values may contain '='; only the first '=' after the key splits.
    A ``!fatal`` reply carries its message as a bare word and becomes a
    fatal TrapSentence.
    """
    word_list = list(words)
    if not word_list:
        raise TikObjectsError("Cannot parse an empty sentence")

    reply, *rest = word_list
    fields: dict[str, str] = {}
    tag: str | None = None

    if reply == SentenceKind.FATAL.value:
        message = "\n".join(w for w in rest if not w.startswith("="))
        for word in rest:
            if word.startswith("="):
                key, _, value = word[1:].partition("=")
                fields[key] = value
        fields.setdefault("message", message)
        return TrapSentence(fields=fields, command=command, fatal=True)

    sentence_type = _SENTENCE_TYPES.get(reply)
    if sentence_type is None:
        raise TikObjectsError(f"Unknown reply word: {reply!r}")

    for word in rest:
        if word.startswith("="):
            key, _, value = word[1:].partition("=")
            fields[key] = value
        elif word.startswith(".tag="):
            tag = word[len(".tag=") :]

    return sentence_type(fields=fields, tag=tag, command=command)
