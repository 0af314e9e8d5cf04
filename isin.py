from typing import Optional

from country_codes import CountryRegistry
from isin_utils import Outcome, diagnose_isin


class ISIN:
    """
    A candidate ISIN that can be checked and replaced at will.

    Nothing is validated when the value is set. Every call to is_valid(),
    error_reason() or get_value() runs the full diagnosis on the current
    value, so replacing the value is always reflected.

        isin = ISIN("US459056DG91")
        if isin.is_valid():
            print(f"{isin} is valid!")
        else:
            print("Invalid ISIN: " + isin.error_reason())
    """

    def __init__(self, initial_value: Optional[str] = None,
                 registry: Optional[CountryRegistry] = None) -> None:
        self.value = initial_value
        self.registry = registry

    def set_value(self, value: str) -> "ISIN":
        self.value = value
        return self

    def outcome(self) -> Outcome:
        return diagnose_isin("" if self.value is None else self.value, self.registry)

    def is_valid(self) -> bool:
        return self.outcome().is_valid

    def get_value(self) -> Optional[str]:
        if not self.is_valid():
            return None
        return self.value

    def error_reason(self) -> Optional[str]:
        return self.outcome().message

    def __str__(self) -> str:
        return self.get_value() or ""

    def __repr__(self) -> str:
        return f"ISIN({self.value!r})"
