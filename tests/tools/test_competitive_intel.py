"""Tests for the get_competitive_intel tool."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sales_intel.tools.competitive_intel import (
    DEFAULT_ADVICE,
    CompetitiveIntelInput,
    advice_for,
    handle,
    suggest_competitors,
)


class TestLookup:
    async def test_known_competitor(self) -> None:
        text = await handle(CompetitiveIntelInput(competitor="Early Warning System"), None)
        assert text.startswith("# Competitive Intelligence: Early Warning System")
        assert "Found 5 talking points" in text
        assert "## Battle Card Tips" in text
        assert "- Play: EWS Competitive Positioning" in text
        assert "- Content: EWS Battle Card" in text

    async def test_abbreviation_case_insensitive(self) -> None:
        text = await handle(CompetitiveIntelInput(competitor="ews"), None)
        assert "# Competitive Intelligence: Early Warning System" in text
        assert "Found 3 talking points" in text

    async def test_solution_context(self) -> None:
        text = await handle(CompetitiveIntelInput(competitor="Plaid", solution="Account Verification"), None)
        assert "in the context of Account Verification." in text

    async def test_examples_toggle(self) -> None:
        with_examples = await handle(CompetitiveIntelInput(competitor="Plaid"), None)
        without = await handle(CompetitiveIntelInput.model_validate({"competitor": "Plaid", "includeExamples": False}), None)
        assert "**Positioning**" in with_examples
        assert "**Positioning**" not in without


class TestNotFound:
    async def test_suggests_close_names(self) -> None:
        text = await handle(CompetitiveIntelInput(competitor="Plad"), None)
        assert text.startswith("# No Competitive Intelligence Found")
        assert "## Did you mean?\n\n- Plaid" in text
        assert "## Available Competitors" in text
        assert "- **Featurespace**" in text

    async def test_no_suggestions_for_unrelated_name(self) -> None:
        text = await handle(CompetitiveIntelInput(competitor="Zzyzx Holdings"), None)
        assert "Did you mean?" not in text
        assert "## What to do?" in text


class TestSuggestions:
    def test_best_first_and_original_casing(self) -> None:
        assert suggest_competitors("featurspace") == ["Featurespace"]

    def test_limit_and_cutoff(self) -> None:
        candidates = ["abcx", "ABCD", "abxy", "abcdz", "abcdzz"]
        assert suggest_competitors("abcd", candidates) == ["ABCD", "abcdz", "abcdzz"]

    def test_none(self) -> None:
        assert suggest_competitors("qqqqqq") == []


class TestAdvice:
    @pytest.mark.parametrize(
        ("point", "marker"),
        [
            ("We provide real-time fraud detection", "**Use Case**"),
            ("Our API is more flexible", "**Technical Benefit**"),
            ("Better false positive rates", "**Customer Impact**"),
            ("Our machine learning models adapt faster", "**Innovation**"),
            ("Integration takes weeks not months", "**Implementation**"),
        ],
    )
    def test_keyword_advice(self, point: str, marker: str) -> None:
        assert advice_for(point).startswith(marker)

    def test_default(self) -> None:
        assert advice_for("Enterprise-grade security") == DEFAULT_ADVICE


class TestInput:
    def test_empty_competitor_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CompetitiveIntelInput.model_validate({"competitor": ""})

    def test_include_examples_defaults_true(self) -> None:
        assert CompetitiveIntelInput.model_validate({"competitor": "x"}).include_examples
