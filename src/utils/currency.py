import re


def format_boliviano(amount: float) -> str:
    """
    Format an amount as Bolivianos: dot for thousands, comma for decimals.

    >>> format_boliviano(1500.5)
    'Bs. 1.500,50'
    """
    text = f"{amount:,.2f}"  # 1,500.50
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"Bs. {text}"


def parse_boliviano(value: str) -> float:
    """'Bs. 1.500,50' -> 1500.5, '-5' -> -5.0; anything unparseable is 0.0"""
    cleaned = re.sub(r"[^\d,-]", "", value or "")
    negative = cleaned.startswith("-")
    cleaned = cleaned.replace("-", "").replace(",", ".", 1)
    try:
        amount = float(cleaned)
    except ValueError:
        return 0.0
    return -amount if negative else amount
