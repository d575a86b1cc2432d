import math

SI_PREFIXES = ((1.0e6, "M"), (1.0e3, "k"))


def clamp(value: float, lo: float, hi: float) -> float:
    """Limit value to the closed interval [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from -inf (1.5 -> 2, 2.5 -> 3)."""
    return math.floor(value + 0.5)


def round_to_quantum(value: float, quantum: float) -> float:
    """Round value to the nearest multiple of quantum."""
    return round_half_up(value / quantum) * quantum


def round_significant(value: float, digits: int) -> float:
    """Round value to the given number of significant figures."""
    return float(f"{value:.{digits}g}")


def to_precision(value: float, digits: int) -> str:
    """
    Format value with a fixed number of significant figures in positional
    notation, keeping trailing zeros (101.325 -> '101', 1.5 -> '1.50').
    """
    if value == 0.0 or not math.isfinite(value):
        return f"{value:.{max(digits - 1, 0)}f}"
    # Exponent of the rounded value, so 99.96 -> '100' rather than '100.0'
    exponent = math.floor(math.log10(abs(round_significant(value, digits))))
    decimals = max(digits - 1 - exponent, 0)
    return f"{value:.{decimals}f}"


def with_prefix(value: float, digits: int) -> str:
    """Scale value by an SI prefix and format it: 101325 -> '101 k'."""
    rounded = round_significant(value, digits)
    for factor, symbol in SI_PREFIXES:
        if rounded >= factor:
            return f"{to_precision(value / factor, digits)} {symbol}"
    return f"{to_precision(value, digits)} "
