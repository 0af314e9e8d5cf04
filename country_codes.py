import os
import re
import warnings
from typing import Iterable, Mapping, Optional

from lxml import etree

from cache_utils import cache_daily
from network_utils import download_or_exit


# ISO 3166-1 alpha-2, officially assigned codes
DEFAULT_COUNTRY_CODES = (
    "AD", "AE", "AF", "AG", "AI", "AL", "AM", "AO", "AQ", "AR", "AS", "AT", "AU", "AW", "AX", "AZ",
    "BA", "BB", "BD", "BE", "BF", "BG", "BH", "BI", "BJ", "BL", "BM", "BN", "BO", "BQ", "BR", "BS",
    "BT", "BV", "BW", "BY", "BZ",
    "CA", "CC", "CD", "CF", "CG", "CH", "CI", "CK", "CL", "CM", "CN", "CO", "CR", "CU", "CV", "CW",
    "CX", "CY", "CZ",
    "DE", "DJ", "DK", "DM", "DO", "DZ",
    "EC", "EE", "EG", "EH", "ER", "ES", "ET",
    "FI", "FJ", "FK", "FM", "FO", "FR",
    "GA", "GB", "GD", "GE", "GF", "GG", "GH", "GI", "GL", "GM", "GN", "GP", "GQ", "GR", "GS", "GT",
    "GU", "GW", "GY",
    "HK", "HM", "HN", "HR", "HT", "HU",
    "ID", "IE", "IL", "IM", "IN", "IO", "IQ", "IR", "IS", "IT",
    "JE", "JM", "JO", "JP",
    "KE", "KG", "KH", "KI", "KM", "KN", "KP", "KR", "KW", "KY", "KZ",
    "LA", "LB", "LC", "LI", "LK", "LR", "LS", "LT", "LU", "LV", "LY",
    "MA", "MC", "MD", "ME", "MF", "MG", "MH", "MK", "ML", "MM", "MN", "MO", "MP", "MQ", "MR", "MS",
    "MT", "MU", "MV", "MW", "MX", "MY", "MZ",
    "NA", "NC", "NE", "NF", "NG", "NI", "NL", "NO", "NP", "NR", "NU", "NZ",
    "OM",
    "PA", "PE", "PF", "PG", "PH", "PK", "PL", "PM", "PN", "PR", "PS", "PT", "PW", "PY",
    "QA",
    "RE", "RO", "RS", "RU", "RW",
    "SA", "SB", "SC", "SD", "SE", "SG", "SH", "SI", "SJ", "SK", "SL", "SM", "SN", "SO", "SR", "SS",
    "ST", "SV", "SX", "SY", "SZ",
    "TC", "TD", "TF", "TG", "TH", "TJ", "TK", "TL", "TM", "TN", "TO", "TR", "TT", "TV", "TW", "TZ",
    "UA", "UG", "UM", "US", "UY", "UZ",
    "VA", "VC", "VE", "VG", "VI", "VN", "VU",
    "WF", "WS",
    "YE", "YT",
    "ZA", "ZM", "ZW",
)

CODE_PATTERN = re.compile(r"[A-Za-z]{2}")


class CountryRegistry:
    """Immutable, case-insensitive set of two-letter country codes."""

    def __init__(self, codes: Iterable[str]) -> None:
        normalized = set()
        for code in codes:
            if not isinstance(code, str) or not code.isascii() or not CODE_PATTERN.fullmatch(code):
                raise ValueError(f"Invalid country code: {code!r}")
            code = code.upper()
            if code in normalized:
                warnings.warn(f"Duplicate country code {code} in country list")
            normalized.add(code)
        self._codes = frozenset(normalized)

    def contains(self, code: str) -> bool:
        if not isinstance(code, str):
            return False
        return code.upper() in self._codes

    def __contains__(self, code) -> bool:
        return self.contains(code)

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self):
        return iter(sorted(self._codes))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CountryRegistry):
            return NotImplemented
        return self._codes == other._codes

    def __hash__(self) -> int:
        return hash(self._codes)

    def __repr__(self) -> str:
        return f"CountryRegistry({len(self._codes)} codes)"

    @classmethod
    def from_xml(cls, path: str) -> "CountryRegistry":
        """
        Load a registry from an XML country list.

        Expected format:
            <countries>
              <country code="GB">United Kingdom</country>
              ...
            </countries>

        Raises:
            OSError: If the file cannot be read
            lxml.etree.XMLSyntaxError: If the file is not well-formed XML
            ValueError: If an entry has no code or an invalid one
        """
        root = etree.parse(path).getroot()
        codes = []
        for element in root.iter("country"):
            code = element.attrib.get("code")
            if code is None:
                raise ValueError(f"Country entry without a code attribute in {path} (line {element.sourceline})")
            codes.append(code)
        return cls(codes)

    def save(self, path: str, names: Optional[Mapping[str, str]] = None):
        names = names or {}
        with etree.xmlfile(path, encoding="utf-8") as xf:
            xf.write_declaration()
            root = etree.Element("countries")
            for code in self:
                el = etree.SubElement(root, "country", code=code)
                el.text = names.get(code)
            xf.write(root, pretty_print=True)


_DEFAULT_REGISTRY = CountryRegistry(DEFAULT_COUNTRY_CODES)


def default_registry() -> CountryRegistry:
    return _DEFAULT_REGISTRY


DEFAULT_COUNTRIES_FILE = "data/countries.xml"


def _download_key(url, output_file=DEFAULT_COUNTRIES_FILE):
    return f"{url}\n{output_file}"


def _download_output(url, output_file=DEFAULT_COUNTRIES_FILE):
    return output_file


@cache_daily("countries.cache", key=_download_key, output=_download_output)
def download_country_codes(url: str, output_file: str = DEFAULT_COUNTRIES_FILE):
    # Fetch an updated country list; skipped if already done today
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    download_or_exit(
        url=url,
        output_file=output_file,
        timeout=30,
        max_retries=3,
        context="country code list"
    )
    print("Country code list downloaded successfully")
