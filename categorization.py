"""Keyword based categorization of transactions.

Each category except the "Outros" fallback owns an ordered list of keywords.
Categories are tried in declared order and, within a category, keywords in
declared order; the first keyword found (case-insensitively) anywhere in the
description decides the category. Descriptions that match nothing fall back
to "Outros".

Categorization only fills gaps: a transaction that already carries a
category keeps it.
"""

from typing import List, Optional, Tuple
from models.category import DEFAULT_CATEGORY
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

CATEGORY_KEYWORDS: List[Tuple[str, List[str]]] = [
    (
        "Alimentação",
        [
            "supermercado", "mercado", "padaria", "restaurante", "lanchonete",
            "ifood", "uber eats", "rappi", "delivery", "comida", "alimento",
            "açougue", "peixaria", "hortifruti", "bebida", "café", "starbucks",
            "padoka", "barateira", "emporio", "bariloch",
        ],
    ),
    (
        "Transporte",
        [
            "uber", "taxi", "99", "inDriver", "posto", "combustível", "gasolina",
            "estacionamento", "pedágio", "metro", "ônibus", "transporte",
            "auto peças", "oficina", "manutenção",
        ],
    ),
    (
        "Lazer",
        [
            "cinema", "teatro", "show", "festa", "bar", "balada", "viagem",
            "hotel", "pousada", "turismo", "parque", "jogo", "streaming",
            "netflix", "spotify", "amazon prime", "disney",
        ],
    ),
    (
        "Moradia",
        [
            "aluguel", "condomínio", "luz", "água", "energia", "gás", "internet",
            "telefone", "iptu", "reforma", "construção", "material de construção",
            "decoração", "móveis", "eletrodoméstico",
        ],
    ),
    (
        "Compras",
        [
            "loja", "shopping", "amazon", "magazine luiza", "americanas",
            "casas bahia", "extra", "carrefour", "walmart", "compra",
            "e-commerce", "marketplace", "atelie", "atelier", "tudo 10",
        ],
    ),
    (
        "Saúde",
        [
            "farmácia", "drogaria", "hospital", "clínica", "médico", "dentista",
            "laboratório", "exame", "plano de saúde", "unimed", "amil",
            "medicamento", "remédio", "raia",
        ],
    ),
    (
        "Educação",
        [
            "escola", "faculdade", "universidade", "curso", "livro",
            "material escolar", "mensalidade", "matrícula", "educação",
        ],
    ),
    (
        "Serviços",
        [
            "banco", "tarifa", "anuidade", "seguro", "consórcio", "financiamento",
            "serviço", "assinatura", "assinatura mensal", "pagamentos", "tuna",
        ],
    ),
]


def categorize_description(description: Optional[str]) -> str:
    """Return the first category whose keyword appears in the description."""
    text = (description or "").lower()

    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword.lower() in text:
                return category

    return DEFAULT_CATEGORY


def categorize(transaction: Transaction) -> Transaction:
    """Return a copy of the transaction with its category filled in.

    An existing non-empty category is preserved.
    """
    if transaction.category:
        return transaction.copy()
    return transaction.copy(category=categorize_description(transaction.description))


def auto_categorize(transactions: List[Transaction]) -> List[Transaction]:
    """Categorize a batch of transactions.

    Args:
        transactions: Newly parsed transactions; categorized ones are kept as-is.

    Returns:
        New list of transaction copies, every one with a category.
    """
    categorized = [categorize(t) for t in transactions]

    uncategorized = sum(1 for t in categorized if t.category == DEFAULT_CATEGORY)
    logger.info(
        f"Categorized {len(categorized)} transactions "
        f"({uncategorized} fell back to {DEFAULT_CATEGORY})"
    )

    return categorized
