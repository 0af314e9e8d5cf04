import datetime
import re
from typing import Sequence

from lxml import etree
from lxml.builder import ElementMaker

from isin_utils import BadCountryCode, Outcome, compute_check_digit, parse_isin

# Characters outside the XML 1.0 Char production
NON_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    """Replace characters XML cannot hold with their Python escape, e.g. \\x0c."""
    return NON_XML_CHARS.sub(lambda m: repr(m.group())[1:-1], text)


class IsinReport:
    def __init__(self, outcomes: Sequence[Outcome], path: str) -> None:
        self.outcomes = outcomes
        self.xml = XMLWriter(path)

    def to_xml(self):
        E = ElementMaker()
        valid_count = sum(1 for outcome in self.outcomes if outcome.is_valid)
        return E.isinReport(
            {
                "generated": datetime.datetime.now().replace(microsecond=0).isoformat(),
                "total": str(len(self.outcomes)),
                "valid": str(valid_count),
                "invalid": str(len(self.outcomes) - valid_count),
            },
            *[self._entry(E, outcome) for outcome in self.outcomes],
        )

    @staticmethod
    def _entry(E, outcome: Outcome):
        attributes = {
            "value": xml_safe(outcome.value),
            "valid": "true" if outcome.is_valid else "false",
        }
        if outcome.reason:
            attributes["reason"] = outcome.reason
        if isinstance(outcome, BadCountryCode):
            attributes["country"] = outcome.country
        parsed = parse_isin(outcome.value)
        if parsed is not None:
            # Expected digit, handy for spotting typos in the last position
            attributes["checkDigit"] = str(compute_check_digit(parsed.prefix))
        element = E.isin(attributes)
        if outcome.message:
            element.text = xml_safe(outcome.message)
        return element

    def write(self):
        self.xml.write(self.to_xml())

    def verify(self, schema_path: str):
        self.xml.verify(schema_path)


class XMLWriter:
    def __init__(self, path: str) -> None:
        self.path = path

    def write(self, element: etree.Element):  # type: ignore
        # Write the xml to a file pretty printed with an xml declaration
        with etree.xmlfile(self.path, encoding="utf-8") as xf:
            xf.write_declaration()
            xf.write(element, pretty_print=True)
            print("XML file written to ", self.path)

    def verify(self, schema_path: str):
        # Verify the generated XML using an xsd schema
        schema = etree.XMLSchema(etree.parse(schema_path))
        xml = etree.parse(self.path)
        schema.assertValid(xml)
        print("XML is valid according to schema ", schema_path)
