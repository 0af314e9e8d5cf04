import re
import sys
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from country_codes import CountryRegistry, default_registry


ISIN_PATTERN = re.compile(r"([A-Za-z]{2})([A-Za-z0-9]{9})([0-9])")
PREFIX_PATTERN = re.compile(r"[A-Za-z]{2}[A-Za-z0-9]{9}")


class InvalidInputError(ValueError):
    """Raised when compute_check_digit gets something other than 2 letters + 9 alphanumerics."""


class ParsedIsin(NamedTuple):
    country: str
    body: str
    check_digit: str

    @property
    def prefix(self) -> str:
        return self.country + self.body


@dataclass(frozen=True)
class Valid:
    value: str
    is_valid = True
    reason = None

    @property
    def message(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Unparsable:
    value: str
    is_valid = False
    reason = "unparsable"

    @property
    def message(self) -> str:
        return f"'{self.value}' is unparsable"


@dataclass(frozen=True)
class BadCountryCode:
    # Uppercased prefix as it was looked up in the registry
    country: str
    value: str
    is_valid = False
    reason = "bad_country_code"

    @property
    def message(self) -> str:
        return f"Bad country code '{self.country}' in '{self.value}'"


@dataclass(frozen=True)
class InconsistentCheckDigit:
    value: str
    is_valid = False
    reason = "inconsistent_check_digit"

    @property
    def message(self) -> str:
        return f"The check digit in '{self.value}' is inconsistent"


Outcome = Union[Valid, Unparsable, BadCountryCode, InconsistentCheckDigit]


def parse_isin(candidate) -> Optional[ParsedIsin]:
    """
    Split a candidate into country, body and check digit.

    The whole string has to match: 2 letters, 9 letters or digits, 1 decimal
    digit. Nothing is stripped and the case is left as it was given.

    Returns:
        ParsedIsin, or None if the candidate does not have the ISIN shape
    """
    if not isinstance(candidate, str) or not candidate.isascii():
        return None
    match = ISIN_PATTERN.fullmatch(candidate)
    if match is None:
        return None
    return ParsedIsin(*match.groups())


def compute_check_digit(eleven_chars: str) -> int:
    """
    Compute the ISIN check digit using the "double-add-double" algorithm.

    ISIN format: 12 characters
    - 2 letters: Country code (ISO 3166-1 alpha-2)
    - 9 characters: National security identifier (alphanumeric)
    - 1 digit: Check digit (this function)

    Args:
        eleven_chars: The first 11 characters of an ISIN, any case

    Returns:
        The check digit (0-9)

    Raises:
        InvalidInputError: If the argument is not 2 letters + 9 alphanumerics
    """
    if (not isinstance(eleven_chars, str)
            or not eleven_chars.isascii()
            or PREFIX_PATTERN.fullmatch(eleven_chars) is None):
        raise InvalidInputError(f"Invalid data: {eleven_chars!r}")

    # Convert letters to numbers (A=10, B=11, ..., Z=35), then split into digits
    digits = []
    for char in eleven_chars.upper():
        if char.isdigit():
            digits.append(int(char))
        else:
            digits.extend(int(d) for d in str(ord(char) - ord('A') + 10))

    # Double every second digit starting with the rightmost one; the check
    # digit itself will sit to the right of it
    total = 0
    for position, digit in enumerate(reversed(digits)):
        if position % 2 == 0:
            digit *= 2
        total += digit % 10 + digit // 10

    # Tens complement of the last digit of the sum
    return (10 - total % 10) % 10


def diagnose_isin(candidate: str, registry: Optional[CountryRegistry] = None) -> Outcome:
    """
    Check a candidate and return the first failure found, or Valid.

    Checks run in a fixed order: structure, country code, check digit.
    Later checks are skipped once one fails.
    """
    if registry is None:
        registry = default_registry()

    parsed = parse_isin(candidate)
    if parsed is None:
        return Unparsable(candidate if isinstance(candidate, str) else str(candidate))

    country = parsed.country.upper()
    if not registry.contains(country):
        return BadCountryCode(country, candidate)

    if int(parsed.check_digit) != compute_check_digit(parsed.prefix):
        return InconsistentCheckDigit(candidate)

    return Valid(candidate)


def is_valid_isin(candidate: str, registry: Optional[CountryRegistry] = None) -> bool:
    return diagnose_isin(candidate, registry).is_valid


def validate_isin(isin: str, context: str = "",
                  registry: Optional[CountryRegistry] = None) -> str:
    """
    Validate an ISIN or exit the application.

    Args:
        isin: The ISIN to validate
        context: Context string for error messages
        registry: Country codes to accept (defaults to ISO 3166-1)

    Returns:
        The ISIN, unchanged

    Raises:
        SystemExit: If ISIN is invalid
    """
    context_msg = f" for {context}" if context else ""

    if not isin:
        print(f"Error: Empty ISIN provided{context_msg}")
        sys.exit(1)

    outcome = diagnose_isin(isin, registry)
    if not outcome.is_valid:
        print(f"Error: {outcome.message}{context_msg}")
        if isinstance(outcome, Unparsable):
            print("Expected: 2 letters (country) + 9 alphanumeric + 1 check digit")
        elif isinstance(outcome, InconsistentCheckDigit):
            expected = compute_check_digit(isin[:11])
            print(f"The last digit should be {expected} - possible typo")
        sys.exit(1)

    return isin


def prompt_for_isin(label: str, default_isin: Optional[str] = None,
                    registry: Optional[CountryRegistry] = None) -> str:
    """
    Prompt user to enter a valid ISIN.

    Args:
        label: What the ISIN is for, shown in the prompt
        default_isin: Optional default ISIN to suggest
        registry: Country codes to accept

    Returns:
        A valid ISIN entered by the user
    """
    while True:
        prompt = f"Enter the ISIN for {label}"
        if default_isin:
            prompt += f" (or press Enter for {default_isin})"
        prompt += ": "

        user_input = input(prompt)

        # Use default if provided and user pressed Enter
        if not user_input and default_isin:
            user_input = default_isin

        try:
            return validate_isin(user_input, label, registry)
        except SystemExit:
            print("Please try again or press Ctrl+C to exit")
            continue
