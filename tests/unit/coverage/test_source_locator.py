"""Unit tests for rule-file line lookup."""

import pytest
from rule_coverage.core.analyzer.parsers.rule_file_parser import extract_query_from_text
from rule_coverage.core.coverage.source_locator import RuleFileSource, SourceLocator


INLINE_RULE = """<?xml version="1.0"?>
<rule name="TestRule">
  <properties>
    <property name="xpath" value="//Method[@Flag and @OtherFlag]"/>
  </properties>
</rule>
"""

ESCAPED_INLINE_RULE = """<?xml version="1.0"?>
<rule name="SmallMethod">
  <properties>
    <property name="xpath" value="//Method[@Size &lt;= 3]"/>
  </properties>
  <example>
<![CDATA[
if (a <= b) { }
]]>
  </example>
</rule>
"""

BLOCK_QUERY = "//Method[\n  @Static = true()\n  and @Final = true()\n]"

BLOCK_RULE = """<?xml version="1.0"?>
<rule name="R">
  <properties>
    <property name="xpath">
      <value>
//Method[
  @Static = true()
  and @Final = true()
]
      </value>
    </property>
  </properties>
</rule>
"""

CDATA_RULE = """<?xml version="1.0" ?>
<ruleset>
  <rule name="PreferConcatenationOverStringJoinWithEmpty">
    <properties>
      <property name="xpath">
        <value>
          <![CDATA[
          let $joinMethod := 'join',
            $stringJoinFullName := 'String.join',
            $isEmptyString := function($expr) {
              $expr/@String = true()
                and ($expr/@Image = "''" or $expr/@Image = '""' or string-length($expr/@Image) = 0)
            }
          return //MethodCallExpression[
            @MethodName = $joinMethod
            and @FullMethodName = $stringJoinFullName
            and .//NewListLiteralExpression
            and (
              $isEmptyString(./LiteralExpression)
              or $isEmptyString(./NewListLiteralExpression/following-sibling::LiteralExpression)
            )
          ]
          ]]>
        </value>
      </property>
    </properties>
  </rule>
</ruleset>
"""


@pytest.fixture
def cdata_query():
    """Query text as extracted from the CDATA rule."""
    return extract_query_from_text(CDATA_RULE)


class TestRuleFileSource:
    """Test RuleFileSource."""

    def test_reads_file(self, tmp_path):
        rule_file = tmp_path / "rule.xml"
        rule_file.write_text(INLINE_RULE, encoding='utf-8')

        assert RuleFileSource.read(str(rule_file)) == INLINE_RULE

    def test_missing_file(self, tmp_path):
        assert RuleFileSource.read(str(tmp_path / "missing.xml")) is None

    @pytest.mark.parametrize("path", [None, ''])
    def test_no_path(self, path):
        assert RuleFileSource.read(path) is None


class TestSingleLineSearch:
    """Test lookups in an inline value attribute."""

    def test_attribute_on_property_line(self):
        locator = SourceLocator(INLINE_RULE, "//Method[@Flag and @OtherFlag]")

        assert locator.locate('@OtherFlag') == 4
        assert locator.locate('and') == 4

    def test_content_start_is_property_line(self):
        locator = SourceLocator(INLINE_RULE, "//Method[@Flag and @OtherFlag]")

        assert locator.content_start == 3

    def test_escaped_operator_on_property_line(self):
        locator = SourceLocator(ESCAPED_INLINE_RULE, "//Method[@Size <= 3]")

        assert locator.locate('<=') == 4

    def test_section_is_property_line(self):
        locator = SourceLocator(ESCAPED_INLINE_RULE, "//Method[@Size <= 3]")

        assert locator.inline
        assert (locator.section_start, locator.section_end) == (3, 4)

    def test_example_code_not_searched(self):
        locator = SourceLocator(ESCAPED_INLINE_RULE, "//Method[@Size <= 3]")

        assert locator.locate('if (a') is None
        assert locator.locate('if (a', offset=9) == 4


class TestBlockSearch:
    """Test lookups in a multi-line value element."""

    def test_feature_line(self):
        locator = SourceLocator(BLOCK_RULE, BLOCK_QUERY)

        assert locator.locate('@Final') == 8
        assert locator.locate('@Static') == 7

    def test_whitespace_tolerant(self):
        locator = SourceLocator(BLOCK_RULE, BLOCK_QUERY)

        assert locator.locate('@Final   =   true()') == 8

    def test_no_partial_word_match(self):
        locator = SourceLocator(BLOCK_RULE, BLOCK_QUERY)

        assert locator.locate('Fin') is None

    def test_section_bounds(self):
        locator = SourceLocator(BLOCK_RULE, BLOCK_QUERY)

        assert locator.section_start == 3
        assert locator.section_end == 11
        assert locator.content_start == 5


class TestCdataSearch:
    """Test lookups in a CDATA section."""

    def test_content_start_skips_marker(self, cdata_query):
        locator = SourceLocator(CDATA_RULE, cdata_query)

        assert locator.content_start == 7

    def test_or_alternative_searched_backwards(self, cdata_query):
        locator = SourceLocator(CDATA_RULE, cdata_query)
        line = locator.locate(
            ["or $isEmptyString(./NewListLiteralExpression/following-sibling::LiteralExpression)"],
            backwards=True
        )

        assert line == 20

    def test_candidates_tried_in_order(self, cdata_query):
        locator = SourceLocator(CDATA_RULE, cdata_query)
        line = locator.locate(
            ["or $isEmptyString(./LiteralExpression)", "$isEmptyString(./LiteralExpression)"],
            backwards=True
        )

        assert line == 19


class TestOffsetFallback:
    """Test the offset-based fallback."""

    def test_offset_fallback(self, cdata_query):
        locator = SourceLocator(CDATA_RULE, cdata_query)

        assert locator.locate('no_such_token', offset=cdata_query.index('return')) == 14

    def test_offset_fallback_ignores_leading_blank_lines(self, cdata_query):
        query = "\n" + cdata_query
        locator = SourceLocator(CDATA_RULE, query)

        assert locator.locate('no_such_token', offset=query.index('return')) == 14

    def test_unknown_without_offset(self, cdata_query):
        locator = SourceLocator(CDATA_RULE, cdata_query)

        assert locator.locate('no_such_token') is None

    def test_offset_of(self):
        locator = SourceLocator(BLOCK_RULE, BLOCK_QUERY)

        assert locator.offset_of('@Final') == BLOCK_QUERY.index('@Final')
        assert locator.offset_of('@Missing') is None


class TestUnavailableSource:
    """Test lookups without a usable rule file."""

    def test_missing_file(self):
        locator = SourceLocator.from_file('/nonexistent/rule.xml', '//A')

        assert locator.lines == []
        assert locator.locate('A') is None

    def test_no_rule_text(self):
        assert SourceLocator(None, '//A').locate('A', offset=2) is None

    def test_no_xpath_property(self):
        locator = SourceLocator('<rule>\n  <description>@Name</description>\n</rule>', '//A[@Name]')

        assert locator.content_start is None
        assert locator.locate('@Other', offset=3) is None
