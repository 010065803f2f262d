"""
Rule definition file reader.

Pulls the XPath query out of a PMD rule XML file. The query lives in the
`xpath` property, either as a `value` attribute or as a `<value>` child
element (plain or CDATA-wrapped).
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional, Union

from rule_coverage.common.exceptions import RuleFileError

logger = logging.getLogger(__name__)

XPATH_PROPERTY_NAME = 'xpath'


def _local_name(tag: str) -> str:
    """Strip an XML namespace from a tag name."""
    return tag.rsplit('}', 1)[-1] if isinstance(tag, str) else ''


def extract_query_from_text(xml_text: Union[str, bytes]) -> Optional[str]:
    """
    Extract the XPath query from rule XML text.

    Args:
        xml_text: Content of a rule definition file (text or raw bytes)

    Returns:
        Trimmed query text, or None if the file has no non-empty xpath property

    Raises:
        RuleFileError: If the text is not well-formed XML
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise RuleFileError(f"Invalid rule XML: {e}")

    for element in root.iter():
        if _local_name(element.tag) != 'property':
            continue
        if element.get('name') != XPATH_PROPERTY_NAME:
            continue

        value = element.get('value')
        if value is None:
            for child in element:
                if _local_name(child.tag) == 'value':
                    value = child.text
                    break

        if value and value.strip():
            return value.strip()
        return None

    return None


def extract_query(rule_file_path: str) -> Optional[str]:
    """
    Extract the XPath query from a rule definition file.

    Args:
        rule_file_path: Path to the rule XML file

    Returns:
        Trimmed query text, or None if the file has no xpath property

    Raises:
        RuleFileError: If the file cannot be read or parsed
    """
    try:
        with open(rule_file_path, 'rb') as f:
            xml_text = f.read()
    except OSError as e:
        raise RuleFileError(f"Cannot read rule file {rule_file_path}: {e}")

    query = extract_query_from_text(xml_text)
    if query is None:
        logger.warning(f"No xpath property found in {rule_file_path}")
    return query
