"""Unit tests for rule file query extraction."""

import pytest
from rule_coverage.common.exceptions import RuleFileError
from rule_coverage.core.analyzer.parsers.rule_file_parser import extract_query, extract_query_from_text


VALUE_ELEMENT_RULE = """<?xml version="1.0" encoding="UTF-8"?>
<rule name="AvoidNestedIf">
  <properties>
    <property name="version" value="2.0"/>
    <property name="xpath">
      <value>
//IfBlockStatement[.//IfBlockStatement]
      </value>
    </property>
  </properties>
</rule>
"""

CDATA_RULE = """<?xml version="1.0"?>
<ruleset xmlns="http://pmd.sourceforge.net/ruleset/2.0.0">
  <rule name="AvoidJoin">
    <properties>
      <property name="xpath">
        <value>
          <![CDATA[
          //MethodCallExpression[@MethodName = 'join' and @Image != "x"]
          ]]>
        </value>
      </property>
    </properties>
  </rule>
</ruleset>
"""


class TestExtractQueryFromText:
    """Test extract_query_from_text."""

    def test_value_element(self):
        assert extract_query_from_text(VALUE_ELEMENT_RULE.encode('utf-8')) == \
            '//IfBlockStatement[.//IfBlockStatement]'

    def test_value_attribute(self):
        text = '<rule><properties><property name="xpath" value=" //Method[@Static] "/></properties></rule>'

        assert extract_query_from_text(text) == '//Method[@Static]'

    def test_namespaced_cdata(self):
        query = extract_query_from_text(CDATA_RULE)

        assert query == '//MethodCallExpression[@MethodName = \'join\' and @Image != "x"]'

    def test_no_xpath_property(self):
        text = '<rule><properties><property name="version" value="2.0"/></properties></rule>'

        assert extract_query_from_text(text) is None

    def test_empty_value(self):
        text = '<rule><properties><property name="xpath"><value>   </value></property></properties></rule>'

        assert extract_query_from_text(text) is None

    def test_invalid_xml(self):
        with pytest.raises(RuleFileError, match="Invalid rule XML"):
            extract_query_from_text('<rule><properties>')


class TestExtractQuery:
    """Test extract_query on files."""

    def test_reads_file(self, tmp_path):
        rule_file = tmp_path / "rule.xml"
        rule_file.write_text(VALUE_ELEMENT_RULE, encoding='utf-8')

        assert extract_query(str(rule_file)) == '//IfBlockStatement[.//IfBlockStatement]'

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleFileError, match="Cannot read rule file"):
            extract_query(str(tmp_path / "missing.xml"))

    def test_file_without_query(self, tmp_path):
        rule_file = tmp_path / "rule.xml"
        rule_file.write_text('<rule name="Empty"/>', encoding='utf-8')

        assert extract_query(str(rule_file)) is None
