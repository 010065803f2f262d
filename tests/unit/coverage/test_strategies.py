"""Unit tests for conditional coverage strategies."""

import pytest
from rule_coverage.core.coverage import strategies
from rule_coverage.core.coverage.strategies import (
    CONDITIONAL_STRATEGIES, check_conditional, part_covered
)
from rule_coverage.core.types.coverage_result import FeatureCategory
from rule_coverage.core.types.query_features import Conditional, ConditionalType


class TestPartCovered:
    """Test part_covered."""

    def test_bare_attribute(self):
        assert part_covered("@Static", "public static void m()")

    def test_attribute_compared_with_literal(self):
        assert part_covered("@Image = 'join'", "String.join(',', items)")
        assert not part_covered("@Image = 'split'", "String.join(',', items)")

    def test_attribute_compared_with_empty_literal(self):
        assert part_covered("@Image = ''", "String s = '';")
        assert not part_covered("@Image = ''", "String s = 'a';")

    def test_attribute_compared_with_variable(self):
        assert part_covered("@MethodName = $joinMethod", "String.join(parts)")

    def test_path(self):
        assert part_covered(".//IfBlockStatement", "if (x) { }")
        assert not part_covered(".//WhileLoopStatement", "if (x) { }")

    def test_parenthesized_alternatives(self):
        assert part_covered("(@Static or @Final)", "final Integer x;")

    def test_conjunction(self):
        assert not part_covered("@Static and @Final", "final Integer x;")

    def test_negation(self):
        assert part_covered("not(@Final)", "final Integer x;")

    def test_keyword_fallback(self):
        assert part_covered("$isEmptyString(./LiteralExpression)", "String s = 'x';")
        assert not part_covered("$isEmptyString(./LiteralExpression)", "some content without the second conditional")

    @pytest.mark.parametrize("content", ['', '   ', None])
    def test_empty_content(self, content):
        assert not part_covered("@Static", content)

    def test_empty_part_is_covered(self):
        assert part_covered("  ", "anything")


class TestAndOrStrategies:
    """Test check_and and check_or."""

    def test_and_reports_missing_operands(self):
        conditional = Conditional(ConditionalType.AND, "@Static and @Final and .//IfBlockStatement", 0)
        result = strategies.check_and(conditional, "public static void m() { if (x) { } }")

        assert not result.success
        assert result.missing == ['@Final']
        assert result.evidence[0].count == 2
        assert result.evidence[0].required == 3
        assert '@Final' in result.evidence[0].description
        assert '@Static' not in result.evidence[0].description
        assert result.category == FeatureCategory.CONDITIONALS
        assert result.message == 'and: 2/3 parts covered'

    def test_and_all_covered(self):
        conditional = Conditional(ConditionalType.AND, "@Static and @Final", 0)
        result = strategies.check_and(conditional, "public static final Integer X = 1;")

        assert result.success
        assert result.missing == []
        assert result.evidence[0].description == 'All parts covered'

    def test_or_requires_every_alternative(self):
        conditional = Conditional(ConditionalType.OR, "@Static or @Final", 0)
        result = strategies.check_or(conditional, "static void a() { }")

        assert not result.success
        assert result.missing == ['@Final']


class TestNotStrategy:
    """Test check_not."""

    def test_negated_pattern_present(self):
        result = strategies.check_not(Conditional(ConditionalType.NOT, "@Final", 0), "final Integer x;")

        assert result.success

    def test_negated_pattern_absent(self):
        result = strategies.check_not(Conditional(ConditionalType.NOT, "@Final", 0), "static void a() { }")

        assert not result.success
        assert result.missing == ['@Final']

    def test_field_context_needs_static_final_field(self):
        conditional = Conditional(ConditionalType.NOT, "ancestor::FieldDeclarationStatements", 0)

        assert strategies.check_not(conditional, "private static final Integer MAX = 1;").success
        assert not strategies.check_not(conditional, "private final Integer MAX = 1;").success


class TestComparisonStrategy:
    """Test check_comparison."""

    def test_both_attributes_present(self):
        conditional = Conditional(ConditionalType.COMPARISON, "@BeginLine != @EndLine", 0)

        assert strategies.check_comparison(conditional, "x").success

    def test_unknown_attributes_absent(self):
        conditional = Conditional(ConditionalType.COMPARISON, "@Foo = @Bar", 0)
        result = strategies.check_comparison(conditional, "a")

        assert not result.success
        assert result.missing == ["@Foo = @Bar"]

    def test_annotated_values(self):
        conditional = Conditional(ConditionalType.COMPARISON, "@Depth = @Level", 0)

        assert strategies.check_comparison(conditional, "// Depth: 1, Level: 2\n// Depth: 2, Level: 3").success


class TestOtherStrategies:
    """Test check_if, check_quantified and check_boolean_function."""

    def test_if(self):
        conditional = Conditional(ConditionalType.IF, "@Static", 0)

        assert strategies.check_if(conditional, "static void a() { }").success
        assert not strategies.check_if(conditional, "void a() { }").success

    def test_quantified(self):
        conditional = Conditional(ConditionalType.QUANTIFIED, "some $m in .//Method satisfies $m/@Static", 0)

        assert strategies.check_quantified(conditional, "public static void run() { }").success
        assert not strategies.check_quantified(conditional, "Integer x = 1;").success

    def test_boolean_function_literal(self):
        conditional = Conditional(ConditionalType.BOOLEAN_FUNCTION, "contains(@Image, 'join')", 0)

        assert strategies.check_boolean_function(conditional, "String.join(',', xs)").success

        result = strategies.check_boolean_function(conditional, "x.split('a')")
        assert not result.success
        assert result.missing == ["contains(@Image, 'join')"]

    def test_boolean_function_subject_only(self):
        conditional = Conditional(ConditionalType.BOOLEAN_FUNCTION, "exists(.//IfBlockStatement)", 0)

        assert strategies.check_boolean_function(conditional, "if (x) { }").success
        assert not strategies.check_boolean_function(conditional, "while (x) { }").success


class TestDispatch:
    """Test the strategy table."""

    def test_every_type_has_a_strategy(self):
        assert set(CONDITIONAL_STRATEGIES) == set(ConditionalType)

    def test_check_conditional_dispatches(self):
        result = check_conditional(Conditional(ConditionalType.OR, "@Static or @Final", 0), "static final x;")

        assert result.success
        assert result.message == 'or: 2/2 parts covered'

    def test_check_conditional_none_content(self):
        result = check_conditional(Conditional(ConditionalType.AND, "@Static and @Final", 0), None)

        assert not result.success
        assert result.evidence[0].count == 0
