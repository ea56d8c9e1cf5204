from matplotlib.ticker import FuncFormatter

# ----- Unit suffixes, largest first -----
UNITS = ((1_000_000, "M", 2), (1_000, "K", 1))


def format_sales(value):
    """Rescale a sales figure to thousands or millions, e.g. 1534000 -> '1.53M'."""
    for scale, suffix, decimals in UNITS:
        if abs(value) >= scale:
            return f"{value / scale:.{decimals}f}{suffix}"
    return f"{value:.0f}"


def sales_axis_formatter():
    return FuncFormatter(lambda value, _pos: format_sales(value))
