"""
Source locator.

Maps query features back to 1-based line numbers in the rule definition
file. The query can be stored three ways:
- inline: <property name="xpath" value="..."/> on one line
- a multi-line <value> element
- a <value> element wrapping a CDATA section

Three strategies are tried in order: a single-line search, a search inside
the xpath property block, and finally the feature's offset in the query
text added to the block's first content line.
"""

import re
import logging
from typing import List, Optional, Sequence, Union
from xml.sax.saxutils import unescape

from rule_coverage.core.analyzer.utils import count_newlines, normalize_whitespace

logger = logging.getLogger(__name__)


class RuleFileSource:
    """Reads a rule definition file for line lookups."""

    @staticmethod
    def read(rule_file_path: Optional[str]) -> Optional[str]:
        """
        Read the rule file text.

        Args:
            rule_file_path: Path to the rule XML file

        Returns:
            File text, or None when there is no path or the file cannot be read
        """
        if not rule_file_path:
            return None
        try:
            with open(rule_file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Rule file not readable for line lookup: {rule_file_path}: {e}")
            return None


class SourceLocator:
    """
    Line lookup over one rule file and the query text it stores.

    The file is split into lines once; every lookup is a pure function of
    those lines, the query text and the requested feature.
    """

    XPATH_PROPERTY_PATTERN = re.compile(r'<property\b[^>]*\bname\s*=\s*["\']xpath["\']')
    INLINE_VALUE_PATTERN = re.compile(r'\bvalue\s*=\s*["\']')
    VALUE_OPEN_PATTERN = re.compile(r'<value\b[^>]*>')
    PROPERTY_CLOSE = '</property>'
    CDATA_OPEN = '<![CDATA['
    XML_ENTITIES = {'&quot;': '"', '&apos;': "'"}

    def __init__(self, rule_text: Optional[str], query_text: Optional[str]):
        """
        Initialize locator.

        Args:
            rule_text: Full text of the rule definition file (None if unavailable)
            query_text: Query text features were extracted from
        """
        self.lines: List[str] = rule_text.splitlines() if rule_text else []
        self.query_text = query_text or ''
        self.section_start, self.section_end = self._find_xpath_section()
        self.inline = self.section_start is not None and self._is_inline(self.lines[self.section_start])
        self.escaped = self.section_start is not None and not any(
            self.CDATA_OPEN in line for line in self.lines[self.section_start:self.section_end]
        )
        self.content_start = self._find_content_start()

    @classmethod
    def from_file(cls, rule_file_path: Optional[str], query_text: Optional[str]) -> 'SourceLocator':
        """Build a locator, reading the rule file once."""
        return cls(RuleFileSource.read(rule_file_path), query_text)

    # ------------------------------------------------------------------
    # File structure
    # ------------------------------------------------------------------

    def _find_xpath_section(self):
        """(start, end) line indexes of the xpath property, end exclusive."""
        for i, line in enumerate(self.lines):
            if self.XPATH_PROPERTY_PATTERN.search(line):
                if self._is_inline(line):
                    return i, i + 1
                for j in range(i, len(self.lines)):
                    if self.PROPERTY_CLOSE in self.lines[j]:
                        return i, j + 1
                return i, len(self.lines)
        return None, None

    def _is_inline(self, line: str) -> bool:
        """True for a self-contained <property name="xpath" value="..."/> line."""
        return bool(self.INLINE_VALUE_PATTERN.search(line)) and '<value' not in line

    def _find_content_start(self) -> Optional[int]:
        """Index of the first line holding query text, CDATA marker skipped."""
        if self.section_start is None:
            return None

        start = None
        for i in range(self.section_start, self.section_end):
            line = self.lines[i]
            match = self.VALUE_OPEN_PATTERN.search(line)
            if match is None:
                continue
            rest = line[match.end():]
            if self.CDATA_OPEN in rest:
                rest = rest.split(self.CDATA_OPEN, 1)[1]
                start = i if rest.strip() else i + 1
            elif rest.strip():
                start = i
            elif i + 1 < len(self.lines) and self.lines[i + 1].strip().startswith(self.CDATA_OPEN):
                after_marker = self.lines[i + 1].split(self.CDATA_OPEN, 1)[1]
                start = i + 1 if after_marker.strip() else i + 2
            else:
                start = i + 1
            break

        if start is None:
            # Inline value attribute: the query starts on the property line
            property_line = self.lines[self.section_start]
            if self.INLINE_VALUE_PATTERN.search(property_line):
                return self.section_start
            return None

        while start < len(self.lines) and not self.lines[start].strip():
            start += 1
        return start if start < len(self.lines) else None

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    @staticmethod
    def _pattern_for(text: str) -> 're.Pattern':
        """Whitespace-tolerant pattern that does not match inside longer words."""
        normalized = normalize_whitespace(text)
        body = r'\s+'.join(re.escape(part) for part in normalized.split(' '))
        prefix = r'(?<!\w)' if re.match(r'\w', normalized) else ''
        suffix = r'(?!\w)' if re.search(r'\w$', normalized) else ''
        return re.compile(prefix + body + suffix)

    def offset_of(self, text: Optional[str]) -> Optional[int]:
        """First offset of text in the query, or None."""
        if not text or not self.query_text:
            return None
        match = self._pattern_for(text).search(self.query_text)
        return match.start() if match else None

    def _single_line_search(self, pattern: 're.Pattern') -> Optional[int]:
        for i, line in enumerate(self.lines):
            if 'xpath' not in line or not ('value' in line or 'xpath="' in line):
                continue
            if pattern.search(unescape(line, self.XML_ENTITIES)):
                return i + 1
        return None

    def _block_search(self, pattern: 're.Pattern', backwards: bool) -> Optional[int]:
        if self.content_start is None or self.inline:
            return None
        indexes = range(self.content_start, self.section_end)
        if backwards:
            indexes = reversed(indexes)
        for i in indexes:
            line = unescape(self.lines[i], self.XML_ENTITIES) if self.escaped else self.lines[i]
            if pattern.search(line):
                return i + 1
        return None

    def _offset_fallback(self, offset: Optional[int]) -> Optional[int]:
        if offset is None or offset < 0 or self.content_start is None:
            return None
        if offset > len(self.query_text):
            return None
        if self.inline:
            return self.content_start + 1
        leading = len(self.query_text) - len(self.query_text.lstrip())
        lines_before = count_newlines(self.query_text, offset) - count_newlines(self.query_text, leading)
        line_index = self.content_start + max(lines_before, 0)
        return line_index + 1 if line_index < len(self.lines) else None

    def locate(self, search_texts: Union[str, Sequence[str]], offset: Optional[int] = None,
               backwards: bool = False) -> Optional[int]:
        """
        Find the rule-file line of a feature.

        Args:
            search_texts: Feature text, or candidate texts tried in order
                (e.g. 'or $x(...)' before '$x(...)')
            offset: Offset of the feature in the query text, if known
            backwards: Search the property block from its end (conditionals)

        Returns:
            1-based line number, or None if the feature cannot be placed
        """
        if not self.lines:
            return None
        if isinstance(search_texts, str):
            search_texts = [search_texts]

        try:
            patterns = [self._pattern_for(t) for t in search_texts if t and t.strip()]
            for pattern in patterns:
                line = self._single_line_search(pattern)
                if line is not None:
                    return line
            for pattern in patterns:
                line = self._block_search(pattern, backwards)
                if line is not None:
                    return line
            return self._offset_fallback(offset)
        except re.error as e:
            logger.debug(f"Line lookup failed for {search_texts!r}: {e}")
            return None
