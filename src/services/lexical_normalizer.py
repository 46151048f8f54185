"""Lexical response normalization.

Turns the raw entries the upstream dictionary returns for one word into a
single WordDefinition: phonetics deduplicated, definitions/examples/synonyms
grouped by part of speech and merged across entries.

Raw entry shape:
    {
        "word": "hello",
        "phonetics": [{"text": "/həˈləʊ/", "audio": "https://..."}],
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {"definition": "...", "example": "...", "synonyms": ["..."]},
                ],
            },
        ],
    }
"""

from typing import Any

from domain.model.word_definition import WordDefinition

# Per-entry grouped values, in the order the entry lists them
_SpeechMap = dict[str, list[str]]


def normalize_entries(entries: list[dict[str, Any]]) -> WordDefinition:
    """Merge raw lexical entries for a single word into one WordDefinition.

    Args:
        entries: Non-empty list of raw upstream entries, in upstream order.

    Returns:
        WordDefinition whose parts of speech follow first-seen order across
        all entries. Values for a part of speech shared by several entries
        are concatenated, duplicates included.

    Raises:
        ValueError: If entries is empty. Callers must detect the upstream
            not-found shape before normalizing.
    """
    if not entries:
        raise ValueError("normalize_entries() requires at least one entry")

    phonetics: list[str] = []
    speeches: list[str] = []
    per_entry: list[dict[str, _SpeechMap]] = []

    for entry in entries:
        _collect_phonetics(entry, phonetics)
        per_entry.append(_collect_meanings(entry, speeches))

    return WordDefinition(
        word=entries[0].get('word', ''),
        phonetics=phonetics,
        parts_of_speech=speeches,
        definitions=_merge_by_speech(per_entry, speeches, 'definitions'),
        examples=_merge_by_speech(per_entry, speeches, 'examples'),
        synonyms=_merge_by_speech(per_entry, speeches, 'synonyms'),
    )


def _collect_phonetics(entry: dict[str, Any], phonetics: list[str]) -> None:
    """Append usable phonetic spellings of an entry, in place.

    A phonetic is usable only with both text and audio; text already seen is skipped.
    """
    for phonetic in entry.get('phonetics') or []:
        text = phonetic.get('text')
        if text and phonetic.get('audio') and text not in phonetics:
            phonetics.append(text)


def _collect_meanings(entry: dict[str, Any], speeches: list[str]) -> dict[str, _SpeechMap]:
    """Group one entry's definitions, examples and synonyms by part of speech.

    Records newly seen parts of speech in `speeches` (in place).
    """
    grouped: dict[str, _SpeechMap] = {'definitions': {}, 'examples': {}, 'synonyms': {}}

    for meaning in entry.get('meanings') or []:
        speech = meaning.get('partOfSpeech')
        definitions = meaning.get('definitions') or []
        if not speech or not definitions:
            continue
        if speech not in speeches:
            speeches.append(speech)

        for item in definitions:
            grouped['definitions'].setdefault(speech, []).append(item.get('definition', ''))

            example = item.get('example')
            if example:
                grouped['examples'].setdefault(speech, []).append(example)

            synonyms = item.get('synonyms')
            if synonyms:
                grouped['synonyms'].setdefault(speech, []).extend(synonyms)

    return grouped


def _merge_by_speech(
    per_entry: list[dict[str, _SpeechMap]],
    speeches: list[str],
    key: str,
) -> _SpeechMap:
    """Concatenate one grouped field across entries.

    Keys follow the first-seen order in `speeches`; values are not deduplicated.
    """
    merged: _SpeechMap = {}
    for grouped in per_entry:
        for speech, values in grouped[key].items():
            merged.setdefault(speech, []).extend(values)
    return {speech: merged[speech] for speech in speeches if speech in merged}
