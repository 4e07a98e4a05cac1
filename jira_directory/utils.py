TRUE_VALUES = ("1", "true", "yes", "on")


def strip_wildcards(term, wildcard="%"):
    """Trims SQL-style wildcard characters from both ends; interior ones stay."""
    return term.strip(wildcard)


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def parse_positive_int(value, default):
    """Returns value as a positive int, or the default for anything else."""
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
