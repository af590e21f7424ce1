import re

ETHER_DECIMALS = 18

_DECIMAL_PATTERN = re.compile(r"^(\d*)(?:\.(\d*))?$")


def parse_units(value: str, decimals: int = ETHER_DECIMALS) -> int:
    """
    Convert a human decimal string into its integer representation.

    The conversion is exact: a value with more fractional digits than
    `decimals` is rejected instead of rounded.

    Args:
        value: Decimal string, e.g. "1.5"
        decimals: Number of decimals of the currency (18 for ether)

    Raises:
        ValueError: If the value is not a plain non-negative decimal or
            exceeds the currency's precision
    """
    match = _DECIMAL_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid decimal value: {value!r}")

    whole, fraction = match.group(1), match.group(2) or ""
    if not whole and not fraction:
        raise ValueError(f"Invalid decimal value: {value!r}")

    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise ValueError(f"Fractional component exceeds {decimals} decimals: {value!r}")

    return int(whole or "0") * 10**decimals + int(fraction.ljust(decimals, "0") or "0")


def format_units(amount: int, decimals: int = ETHER_DECIMALS) -> str:
    """
    Convert an integer amount into its normalized decimal string.

    Trailing zeros are dropped but at least one fractional digit is kept,
    so 10**18 formats as "1.0" and 15 * 10**17 as "1.5".
    """
    amount = int(amount)
    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"
