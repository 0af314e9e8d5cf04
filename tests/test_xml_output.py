"""Tests for the XML validation report."""
import os

import pytest
from lxml import etree

from isin_utils import diagnose_isin
from xml_output import IsinReport, xml_safe

SCHEMA = os.path.join(os.path.dirname(__file__), "..", "schemas", "isin_report.xsd")


@pytest.fixture
def outcomes():
    return [
        diagnose_isin(candidate)
        for candidate in ["GB0004005475", "GB0004005470", "000invalid00", "aa0000000000"]
    ]


class TestIsinReport:

    def test_counts(self, outcomes):
        root = IsinReport(outcomes, "unused.xml").to_xml()
        assert root.attrib["total"] == "4"
        assert root.attrib["valid"] == "1"
        assert root.attrib["invalid"] == "3"

    def test_entries(self, outcomes):
        entries = IsinReport(outcomes, "unused.xml").to_xml().findall("isin")
        assert [e.attrib["valid"] for e in entries] == ["true", "false", "false", "false"]
        assert "reason" not in entries[0].attrib
        assert entries[0].text is None
        assert entries[1].attrib["reason"] == "inconsistent_check_digit"
        assert entries[1].attrib["checkDigit"] == "5"
        assert entries[1].text == "The check digit in 'GB0004005470' is inconsistent"
        assert entries[2].attrib["reason"] == "unparsable"
        assert "checkDigit" not in entries[2].attrib
        assert entries[3].attrib["country"] == "AA"

    def test_write_and_verify(self, outcomes, tmp_path):
        path = str(tmp_path / "report.xml")
        report = IsinReport(outcomes, path)
        report.write()
        report.verify(SCHEMA)
        assert etree.parse(path).getroot().tag == "isinReport"

    def test_verify_rejects_invalid_report(self, tmp_path):
        path = tmp_path / "report.xml"
        path.write_text('<isinReport total="x"/>')
        report = IsinReport([], str(path))
        with pytest.raises(etree.DocumentInvalid):
            report.verify(SCHEMA)

    def test_control_character_escaped(self, tmp_path):
        path = str(tmp_path / "report.xml")
        report = IsinReport([diagnose_isin("GB\x0c0004005475")], path)
        report.write()
        report.verify(SCHEMA)
        entry = etree.parse(path).getroot().find("isin")
        assert entry.attrib["value"] == "GB\\x0c0004005475"
        assert entry.text == "'GB\\x0c0004005475' is unparsable"


class TestXmlSafe:

    def test_plain_text_unchanged(self):
        assert xml_safe("Bad country code 'AA' in 'aa0000000000'") == "Bad country code 'AA' in 'aa0000000000'"

    def test_control_characters(self):
        assert xml_safe("GB\x00\x0c1") == "GB\\x00\\x0c1"

    def test_allowed_whitespace_kept(self):
        assert xml_safe("a\tb\nc") == "a\tb\nc"
