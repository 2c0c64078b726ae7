from __future__ import annotations


def format_idr(amount: float) -> str:
    """25000 -> '25.000' (Indonesian thousands separator)."""
    rounded = int(round(float(amount)))
    sign = "-" if rounded < 0 else ""
    return sign + f"{abs(rounded):,}".replace(",", ".")


def rupiah(amount: float) -> str:
    return f"Rp {format_idr(amount)}"
