"""String case conversion helpers used for page names and routes."""

import re

_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z]+)([A-Z][a-z])")
_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")


def camel_case_to_kebab_case(text: str) -> str:
    """Convert "exampleABC" or "ExampleText" style names to "example-abc" / "example-text"."""
    text = _ACRONYM_WORD.sub(r"\1-\2", text)
    text = _LOWER_UPPER.sub(r"\1-\2", text)
    return text.lower()


def kebab_case_to_title_camel_case(text: str) -> str:
    """Convert "example-text" to "ExampleText"."""
    return "".join(part[:1].upper() + part[1:] for part in text.split("-"))


def capitalize_first(text: str) -> str:
    """Upper-case only the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def to_identifier(text: str, prefix: str = "Page") -> str:
    """
    Turn arbitrary text into a TitleCamel Python identifier.

    Runs of non-alphanumeric characters act as word separators, so
    "my-first_page" becomes "MyFirstPage". A result starting with a digit gets
    ``prefix`` prepended.
    """
    words = [part for part in _NON_ALNUM.split(text) if part]
    identifier = kebab_case_to_title_camel_case("-".join(words))
    if not identifier or identifier[0].isdigit():
        identifier = prefix + identifier
    return identifier
