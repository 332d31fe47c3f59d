"""Unit tests for name_normalizer utility.

Test Strategy:
1. Test lowercase conversion
2. Test whitespace trimming and collapsing
3. Test Unicode composition (accents kept)
4. Test edge cases (empty strings, None)

Each test follows the pattern:
- Given: An input name with specific issues
- When: normalize() is called
- Then: Output matches expected normalized form
"""
from pitchlog.services.analytics.name_normalizer import display_name, is_same_player, normalize


class TestNameNormalizer:
    """Test suite for name normalization functionality."""

    # Case Tests
    # ─────────────────────────────────────────────────────────────

    def test_converts_to_lowercase(self):
        """Should casefold names."""
        assert normalize("MESSI") == "messi"
        assert normalize("Juan Perez") == "juan perez"

    def test_casefold_handles_sharp_s(self):
        """Casefolding is stronger than lower()."""
        assert normalize("STRASSE") == normalize("straße")

    # Whitespace Tests
    # ─────────────────────────────────────────────────────────────

    def test_trims_and_collapses_whitespace(self):
        """Should trim ends and collapse internal runs."""
        assert normalize("  Juan   Perez ") == "juan perez"
        assert normalize("Ana\tMaria") == "ana maria"

    # Unicode Tests
    # ─────────────────────────────────────────────────────────────

    def test_composed_and_decomposed_accents_match(self):
        """A combining accent equals the precomposed character."""
        assert normalize("Jose\u0301") == normalize("Jos\u00e9")

    def test_keeps_accents(self):
        """Accented and plain spellings stay distinct players."""
        assert normalize("José") != normalize("Jose")

    # Edge Cases
    # ─────────────────────────────────────────────────────────────

    def test_empty_and_none(self):
        """Blank input normalizes to an empty key."""
        assert normalize("") == ""
        assert normalize(None) == ""
        assert normalize("   ") == ""

    def test_display_name_keeps_casing(self):
        """Display names are only trimmed and collapsed."""
        assert display_name("  Juan   Perez ") == "Juan Perez"
        assert display_name("") == ""

    def test_is_same_player(self):
        """Blank names never match anyone."""
        assert is_same_player("Ana", " ana ")
        assert not is_same_player("Ana", "Bea")
        assert not is_same_player("", "")
