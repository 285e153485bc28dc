import gzip
import pytest
from argparse import Namespace
from decimal import Decimal

from cli import review, transactions
from cli.helpers import format_brl, format_percent, resolve_id, truncate
from tests.helpers import make_transaction

STATEMENT = (
    "Extrato de conta\n"
    "Data Lançamento;Histórico;Descrição;Valor;Saldo\n"
    "15/03/2024;Pix;Ifood;-45,90;1.200,50\n"
    "16/03/2024;Compra;Posto Shell;-100,00;1.100,50\n"
)


class TestHelpers:
    """Tests for CLI formatting helpers."""

    def test_format_brl(self):
        """Test Brazilian currency formatting."""
        assert format_brl(Decimal("1234.5")) == "R$ 1.234,50"
        assert format_brl(Decimal("-45.9")) == "R$ -45,90"
        assert format_brl(Decimal("1200000")) == "R$ 1.200.000,00"
        assert format_brl(None) == "(invalid)"

    def test_format_percent(self):
        """Test signed percentages."""
        assert format_percent(Decimal("12.345")) == "+12.3%"
        assert format_percent(Decimal("-50")) == "-50.0%"

    def test_truncate(self):
        """Test shortening long text."""
        assert truncate("Padaria", 10) == "Padaria"
        assert truncate("Supermercado Pão de Açúcar", 10) == "Superme..."

    def test_resolve_id(self):
        """Test expanding unique prefixes."""
        ids = ["abc123", "abd456", "xyz789"]

        assert resolve_id("abc", ids) == "abc123"
        assert resolve_id("ab", ids) is None
        assert resolve_id("nope", ids) is None


class TestIngestCommand:
    """Tests for the transactions ingest command."""

    def test_ingest_stages_categorized_rows(self, services, tmp_path):
        """Test that an import is categorized and waits for review."""
        csv_file = tmp_path / "extrato.csv"
        csv_file.write_text(STATEMENT, encoding="utf-8")

        transactions.cmd_ingest(Namespace(csv_file=str(csv_file), owner="Giovani"), services)

        pending = services.staging.pending()
        assert [t.category for t in pending] == ["Alimentação", "Transporte"]
        assert all(t.owner == "Giovani" for t in pending)
        assert services.transactions.find_all() == []

    def test_ingest_archives_statement(self, services, tmp_path):
        """Test that a gzip copy is kept when archiving is enabled."""
        services.config.archive_enabled = True
        csv_file = tmp_path / "extrato.csv"
        csv_file.write_text(STATEMENT, encoding="utf-8")

        transactions.cmd_ingest(Namespace(csv_file=str(csv_file), owner="Daniela"), services)

        archives = list(services.config.archive_dir.glob("Daniela_*_extrato.csv.gz"))
        assert len(archives) == 1
        with gzip.open(archives[0], "rt", encoding="utf-8") as f:
            assert f.read() == STATEMENT

    def test_ingest_missing_columns_stages_nothing(self, services, tmp_path):
        """Test that a statement without Saldo exits and leaves the stage alone."""
        csv_file = tmp_path / "extrato.csv"
        csv_file.write_text(
            "Data Lançamento;Histórico;Descrição;Valor\n15/03/2024;Pix;Ifood;-45,90\n",
            encoding="utf-8",
        )

        with pytest.raises(SystemExit):
            transactions.cmd_ingest(Namespace(csv_file=str(csv_file), owner="Daniela"), services)

        assert services.staging.pending() == []

    def test_ingest_missing_file(self, services, tmp_path):
        """Test that a missing file exits with an error."""
        with pytest.raises(SystemExit):
            transactions.cmd_ingest(
                Namespace(csv_file=str(tmp_path / "nope.csv"), owner="Daniela"), services
            )


class TestReviewCommands:
    """Tests for the review commands."""

    def test_commit_blocked_then_fixed(self, services):
        """Test committing a batch after fixing an invalid row by ID prefix."""
        bad = make_transaction(description="")
        services.staging.stage([make_transaction(), bad])

        with pytest.raises(SystemExit):
            review.cmd_commit(Namespace(), services)
        assert services.transactions.find_all() == []

        review.cmd_edit(
            Namespace(transaction_id=bad.id[:12], field="description", value="Farmácia"),
            services,
        )
        review.cmd_commit(Namespace(), services)

        assert len(services.transactions.find_all()) == 2
        assert services.staging.pending() == []

    def test_edit_unknown_row_exits(self, services):
        """Test that editing an unknown row exits with an error."""
        services.staging.stage([make_transaction()])

        with pytest.raises(SystemExit):
            review.cmd_edit(
                Namespace(transaction_id="zzz", field="historic", value="x"), services
            )


class TestTransactionCommands:
    """Tests for commands on committed transactions."""

    def test_update_category(self, services):
        """Test updating a committed transaction by ID prefix."""
        t = make_transaction(category="Outros")
        services.transactions.append([t])

        transactions.cmd_update(
            Namespace(
                transaction_id=t.id[:12],
                date=None,
                historic=None,
                description=None,
                amount="-12,30",
                balance=None,
                category="Lazer",
            ),
            services,
        )

        found = services.transactions.find(t.id)
        assert found.category == "Lazer"
        assert found.amount == Decimal("-12.30")

    def test_delete_with_yes(self, services):
        """Test deleting without the confirmation prompt."""
        t = make_transaction()
        services.transactions.append([t])

        transactions.cmd_delete(Namespace(transaction_id=t.id, yes=True), services)

        assert services.transactions.find_all() == []
