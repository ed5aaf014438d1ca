"""Customer currency resolution and fixed-rate USD conversion.

Order amounts are stored in USD.  Emails show them in the customer's
currency using a fixed rate table; there are no live FX lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_COUNTRY_CODE = "US"
DEFAULT_CURRENCY = "USD"

COUNTRY_NAME_TO_CODE: dict[str, str] = {
    "United States": "US",
    "Saudi Arabia": "SA",
    "United Arab Emirates": "AE",
    "Kuwait": "KW",
    "Qatar": "QA",
    "United Kingdom": "GB",
    "Egypt": "EG",
    "Oman": "OM",
    "Bahrain": "BH",
    "Iraq": "IQ",
    "Jordan": "JO",
    "Turkey": "TR",
    "Lebanon": "LB",
}

COUNTRY_TO_CURRENCY: dict[str, str] = {
    "US": "USD",
    "SA": "SAR",
    "AE": "AED",
    "KW": "KWD",
    "QA": "QAR",
    "GB": "GBP",
    "EG": "EGP",
    "OM": "OMR",
    "BH": "BHD",
    "IQ": "IQD",
    "JO": "JOD",
    "TR": "TRY",
    "LB": "LBP",
}

# Units of currency per 1 USD.
USD_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "SAR": Decimal("3.75"),
    "AED": Decimal("3.67"),
    "KWD": Decimal("0.31"),
    "QAR": Decimal("3.64"),
    "GBP": Decimal("0.79"),
    "EGP": Decimal("50"),
    "OMR": Decimal("0.38"),
    "BHD": Decimal("0.38"),
    "IQD": Decimal("1310"),
    "JOD": Decimal("0.71"),
    "TRY": Decimal("32"),
    "LBP": Decimal("15000"),
}


def resolve_country_code(country_code: str | None, country: str | None) -> str:
    if country_code:
        return country_code.strip().upper()
    if country:
        return COUNTRY_NAME_TO_CODE.get(country.strip(), DEFAULT_COUNTRY_CODE)
    return DEFAULT_COUNTRY_CODE


@dataclass(frozen=True)
class CurrencyConverter:
    currency: str
    rate: Decimal

    @staticmethod
    def for_address(country_code: str | None, country: str | None) -> CurrencyConverter:
        code = resolve_country_code(country_code, country)
        currency = COUNTRY_TO_CURRENCY.get(code, DEFAULT_CURRENCY)
        return CurrencyConverter(currency=currency, rate=USD_RATES.get(currency, Decimal("1")))

    def convert(self, usd_amount: Decimal) -> Decimal:
        return (usd_amount * self.rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def format(self, usd_amount: Decimal) -> str:
        return f"{self.convert(usd_amount):.2f} {self.currency}"
