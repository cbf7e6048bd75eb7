"""JSON document format for persisted classifier statistics.

The document holds two flat lists:

    {
      "messages": [{"account": 1, "class": "Work", "count": 5}, ...],
      "words": [{"account": 1, "word": "invoice", "class": "Work", "frequency": 8}, ...]
    }

List order carries no meaning; reading a document back yields the same
tables regardless of how the entries were ordered. Entries with a zero
count or frequency are dropped on read.
"""

import json
from typing import Any

ClassMessages = dict[int, dict[str, int]]
WordClassFrequency = dict[int, dict[str, dict[str, int]]]


class PersistenceError(ValueError):
    """A persisted classifier document could not be parsed."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def to_document(
    class_messages: ClassMessages,
    word_class_frequency: WordClassFrequency,
) -> dict[str, list[dict[str, Any]]]:
    """Flatten the in-memory tables into a JSON-serializable document."""
    messages = []
    for account, classes in class_messages.items():
        for clazz, count in classes.items():
            messages.append({"account": account, "class": clazz, "count": count})

    words = []
    for account, word_table in word_class_frequency.items():
        for word, class_frequency in word_table.items():
            for clazz, frequency in class_frequency.items():
                words.append({
                    "account": account,
                    "word": word,
                    "class": clazz,
                    "frequency": frequency,
                })

    return {"messages": messages, "words": words}


def from_document(document: Any) -> tuple[ClassMessages, WordClassFrequency]:
    """Rebuild the in-memory tables from a parsed document.

    Raises:
        PersistenceError: If the document does not have the expected shape
    """
    if not isinstance(document, dict):
        raise PersistenceError("document must be an object")

    class_messages: ClassMessages = {}
    for i, entry in enumerate(_get_list(document, "messages")):
        path = f"messages[{i}]"
        account = _get_int(entry, "account", path)
        clazz = _get_str(entry, "class", path)
        count = _get_count(entry, "count", path)
        if count == 0:
            continue
        class_messages.setdefault(account, {})[clazz] = count

    word_class_frequency: WordClassFrequency = {}
    for i, entry in enumerate(_get_list(document, "words")):
        path = f"words[{i}]"
        account = _get_int(entry, "account", path)
        word = _get_str(entry, "word", path)
        clazz = _get_str(entry, "class", path)
        frequency = _get_count(entry, "frequency", path)
        if frequency == 0:
            continue
        word_table = word_class_frequency.setdefault(account, {})
        word_table.setdefault(word, {})[clazz] = frequency

    return class_messages, word_class_frequency


def dumps(class_messages: ClassMessages, word_class_frequency: WordClassFrequency) -> str:
    """Serialize the tables to indented JSON text."""
    return json.dumps(to_document(class_messages, word_class_frequency), indent=2)


def loads(text: str | bytes) -> tuple[ClassMessages, WordClassFrequency]:
    """Parse JSON text, or UTF-8 encoded bytes, into the tables.

    Raises:
        PersistenceError: If the text is not valid UTF-8 or JSON, or has the
            wrong shape
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PersistenceError(f"invalid UTF-8: {e}") from e
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"invalid JSON: {e}") from e
    return from_document(document)


def _get_list(document: dict, key: str) -> list:
    value = document.get(key)
    if not isinstance(value, list):
        raise PersistenceError("expected a list", key)
    return value


def _get_field(entry: Any, key: str, path: str) -> Any:
    if not isinstance(entry, dict):
        raise PersistenceError("expected an object", path)
    if key not in entry:
        raise PersistenceError("missing field", f"{path}.{key}")
    return entry[key]


def _get_int(entry: Any, key: str, path: str) -> int:
    value = _get_field(entry, key, path)
    # bool is an int subclass but never a valid count or account
    if isinstance(value, bool) or not isinstance(value, int):
        raise PersistenceError("expected an integer", f"{path}.{key}")
    return value


def _get_count(entry: Any, key: str, path: str) -> int:
    value = _get_int(entry, key, path)
    if value < 0:
        raise PersistenceError("must not be negative", f"{path}.{key}")
    return value


def _get_str(entry: Any, key: str, path: str) -> str:
    value = _get_field(entry, key, path)
    if not isinstance(value, str):
        raise PersistenceError("expected a string", f"{path}.{key}")
    return value
