"""Fixed, ordered set of transaction categories."""

CATEGORIES = (
    "Alimentação",
    "Transporte",
    "Lazer",
    "Moradia",
    "Compras",
    "Saúde",
    "Educação",
    "Serviços",
    "Outros",
)

# Fallback for descriptions that match no keyword
DEFAULT_CATEGORY = "Outros"


def is_valid_category(name) -> bool:
    """Check whether a name belongs to the category set (exact match)."""
    return name in CATEGORIES
