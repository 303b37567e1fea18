"""Unit tests for ordered rule evaluation."""

from services.rules.engine import Rule, apply_layers, first_match


def _rules():
    return (
        Rule("negative", lambda n: n < 0, lambda n: "negative"),
        Rule("small", lambda n: n < 10, lambda n: "small"),
        Rule("any", lambda n: True, lambda n: "large"),
    )


class TestFirstMatch:
    """Test priority-ordered matching."""

    def test_first_rule_wins(self):
        """Earlier rules take priority over later matches."""
        assert first_match(_rules(), -5) == "negative"
        assert first_match(_rules(), 5) == "small"
        assert first_match(_rules(), 50) == "large"

    def test_no_match(self):
        assert first_match(_rules()[:2], 50) is None


class TestApplyLayers:
    """Test draft threading."""

    def test_matching_rules_apply_in_order(self):
        """Each matching builder sees the previous draft."""
        rules = (
            Rule("even", lambda n: n % 2 == 0, lambda n, draft: draft + ["even"]),
            Rule("odd", lambda n: n % 2 == 1, lambda n, draft: draft + ["odd"]),
            Rule("big", lambda n: n > 5, lambda n, draft: draft + ["big"]),
        )
        assert apply_layers(rules, 8, []) == ["even", "big"]
        assert apply_layers(rules, 3, []) == ["odd"]

    def test_no_layers_returns_draft(self):
        draft = ["start"]
        assert apply_layers((), 1, draft) is draft
