"""Name normalization for grouping player contributions.

Match logs are typed by hand, so the same teammate shows up as
"Juan ", "juan" or "JUAN  Perez". Everything that aggregates by player
keys on normalize(name) instead of the raw string:

- Unicode: NFC composition ("José" typed with a combining accent == "José")
- Case: casefold ("STRASSE" == "straße")
- Whitespace: trimmed, internal runs collapsed

Accents and punctuation are kept; "José" and "Jose" stay distinct players.
"""
import unicodedata


def normalize(name: str) -> str:
    """
    Normalize a player name into its grouping key.

    Args:
        name: Raw name as entered

    Returns:
        Normalized key ("" for blank or missing names)

    Examples:
        >>> normalize("  Juan   Perez ")
        'juan perez'
        >>> normalize("MESSI")
        'messi'
        >>> normalize("")
        ''
    """
    if not name:
        return ""

    name = unicodedata.normalize("NFC", name)
    name = name.casefold()
    return " ".join(name.split())


def display_name(name: str) -> str:
    """Trimmed name with collapsed whitespace, original casing kept."""
    if not name:
        return ""
    return " ".join(name.split())


def is_same_player(first: str, second: str) -> bool:
    """True when both names normalize to the same non-empty key."""
    first_key = normalize(first)
    return bool(first_key) and first_key == normalize(second)
