"""Tests for the keyword relevance filter."""

from antnews.ingestion import matches_keywords
from antnews.ingestion.keyword_filter import keywords_for


def test_english_title_matches():
    assert matches_keywords("Ants invade garden", "", "en") is True


def test_french_title_without_keyword_does_not_match():
    assert matches_keywords("Voiture rouge", "", "fr") is False


def test_match_is_case_insensitive_and_uses_description():
    assert matches_keywords("Nouvelle étude", "Les FOURMIS du désert", "fr") is True


def test_accented_keyword():
    assert matches_keywords("Avances en mirmecología", "", "es") is True


def test_unknown_language_falls_back_to_english():
    assert keywords_for("pt") == keywords_for("en")
    assert matches_keywords("Ants everywhere", "", "pt") is True


def test_keywords_are_per_language():
    assert matches_keywords("Ants invade garden", "", "de") is False
