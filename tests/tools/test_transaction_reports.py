"""Tests for transaction analysis tools."""

import pytest
from datetime import date
from decimal import Decimal
from dateutil.relativedelta import relativedelta

from tools.transactions import (
    TREND_DECREASE,
    TREND_INCREASE,
    TREND_STABLE,
    UNKNOWN_PLACE,
    category_comparisons,
    filter_transactions,
    latest_balance,
    monthly_spending,
    percent_change,
    sort_transactions,
    spending_by_category,
    spending_by_owner,
    split_by_owner,
    top_places,
)
from tests.helpers import make_transaction


class TestTableViews:
    """Tests for filter_transactions, sort_transactions and split_by_owner."""

    def test_filter_by_historic_and_description(self):
        """Test case-insensitive substring filters."""
        transactions = [
            make_transaction(historic="Pix enviado", description="Padaria"),
            make_transaction(historic="Compra cartão", description="Padaria Real"),
            make_transaction(historic="Pix recebido", description="Salário"),
        ]

        assert len(filter_transactions(transactions, historic="PIX")) == 2
        assert len(filter_transactions(transactions, description="padaria")) == 2
        assert len(filter_transactions(transactions, historic="pix", description="padaria")) == 1
        assert filter_transactions(transactions) == transactions

    def test_sort_by_date(self):
        """Test sorting by posted date in both directions."""
        transactions = [
            make_transaction(posted_date="2024-03-02"),
            make_transaction(posted_date="2024-01-15"),
            make_transaction(posted_date="2024-02-10"),
        ]

        newest_first = sort_transactions(transactions)
        oldest_first = sort_transactions(transactions, descending=False)

        assert [t.posted_date for t in newest_first] == ["2024-03-02", "2024-02-10", "2024-01-15"]
        assert [t.posted_date for t in oldest_first] == ["2024-01-15", "2024-02-10", "2024-03-02"]

    def test_sort_by_absolute_amount(self):
        """Test that amount sorting ignores the sign."""
        transactions = [
            make_transaction(amount="-500.00"),
            make_transaction(amount="100.00"),
            make_transaction(amount="-20.00"),
        ]

        result = sort_transactions(transactions, field="amount")

        assert [t.amount for t in result] == [Decimal("-500.00"), Decimal("100.00"), Decimal("-20.00")]

    def test_sort_unknown_field(self):
        """Test that only date and amount are sortable."""
        with pytest.raises(ValueError, match="Unknown sort field"):
            sort_transactions([], field="owner")

    def test_split_by_owner(self):
        """Test the separate per-owner view."""
        transactions = [make_transaction(owner="Giovani"), make_transaction(owner="Giovani")]

        result = split_by_owner(transactions)

        assert len(result["Giovani"]) == 2
        assert result["Daniela"] == []


class TestChartSeries:
    """Tests for spending breakdowns."""

    def test_spending_by_category(self):
        """Test expense totals per category, largest first."""
        transactions = [
            make_transaction(amount="-10.00", category="Lazer"),
            make_transaction(amount="-50.00", category="Alimentação"),
            make_transaction(amount="-15.00", category="Lazer"),
            make_transaction(amount="3000.00", category="Outros"),
            make_transaction(amount="-5.00", category=None),
        ]

        result = spending_by_category(transactions)

        assert result == [
            ("Alimentação", Decimal("50.00")),
            ("Lazer", Decimal("25.00")),
            ("Outros", Decimal("5.00")),
        ]

    def test_top_places(self):
        """Test ranking descriptions by expense total."""
        transactions = [make_transaction(description=f"Loja {i}", amount=f"-{i}.00") for i in range(1, 13)]
        transactions += [
            make_transaction(description="Loja 1", amount="-100.00"),
            make_transaction(description="", amount="-1.50"),
        ]

        result = top_places(transactions)

        assert len(result) == 10
        assert result[0] == {"name": "Loja 1", "count": 2, "total": Decimal("101.00")}
        assert result[1]["name"] == "Loja 12"
        assert UNKNOWN_PLACE not in [p["name"] for p in result]
        assert top_places(transactions, limit=20)[-1]["name"] == UNKNOWN_PLACE

    def test_spending_by_owner(self):
        """Test expense totals per owner with zero for owners without spending."""
        transactions = [
            make_transaction(owner="Daniela", amount="-10.00"),
            make_transaction(owner="Daniela", amount="-5.50"),
            make_transaction(owner="Daniela", amount="200.00"),
        ]

        assert spending_by_owner(transactions) == {
            "Daniela": Decimal("15.50"),
            "Giovani": Decimal("0"),
        }

    def test_monthly_spending(self):
        """Test per-month per-owner totals in ascending month order."""
        transactions = [
            make_transaction(posted_date="2024-03-05", owner="Giovani", amount="-30.00"),
            make_transaction(posted_date="2023-12-31", owner="Daniela", amount="-10.00"),
            make_transaction(posted_date="2024-03-20", owner="Daniela", amount="-20.00"),
            make_transaction(posted_date="not a date", owner="Daniela", amount="-99.00"),
        ]

        result = monthly_spending(transactions)

        assert list(result) == ["2023-12", "2024-03"]
        assert result["2024-03"] == {"Daniela": Decimal("20.00"), "Giovani": Decimal("30.00")}
        assert result["2023-12"]["Giovani"] == Decimal("0")

    def test_invalid_amounts_are_ignored(self):
        """Test that rows with an invalid amount don't count as spending."""
        transactions = [make_transaction(amount=None), make_transaction(amount="-1.00")]

        assert spending_by_owner(transactions)["Daniela"] == Decimal("1.00")

    def test_latest_balance(self):
        """Test that the last appended row gives the balance."""
        transactions = [
            make_transaction(posted_date="2024-05-01", balance="900.00"),
            make_transaction(posted_date="2024-04-01", balance="1234.56"),
        ]

        assert latest_balance(transactions) == Decimal("1234.56")
        assert latest_balance([]) is None


class TestCategoryComparisons:
    """Tests for category_comparisons function."""

    def test_percent_change(self):
        """Test relative change, including a zero baseline."""
        assert percent_change(Decimal("150"), Decimal("100")) == Decimal("50")
        assert percent_change(Decimal("50"), Decimal("100")) == Decimal("-50")
        assert percent_change(Decimal("10"), Decimal("0")) == Decimal("100")
        assert percent_change(Decimal("0"), Decimal("0")) == Decimal("0")

    def test_compares_current_previous_and_six_months_ago(self):
        """Test the three calendar months around the reference date."""
        today = date(2024, 7, 18)
        transactions = [
            make_transaction(posted_date="2024-07-02", category="Alimentação", amount="-150.00"),
            make_transaction(posted_date="2024-06-30", category="Alimentação", amount="-100.00"),
            make_transaction(posted_date="2024-01-10", category="Alimentação", amount="-300.00"),
            make_transaction(posted_date="2024-06-15", category="Lazer", amount="-80.00"),
            make_transaction(posted_date="2024-04-15", category="Saúde", amount="-999.00"),
        ]

        result = category_comparisons(transactions, today=today)

        assert [c["category"] for c in result] == ["Alimentação", "Lazer"]
        food = result[0]
        assert food["current"] == Decimal("150.00")
        assert food["previous"] == Decimal("100.00")
        assert food["six_months_ago"] == Decimal("300.00")
        assert food["change_previous"] == Decimal("50")
        assert food["change_six_months"] == Decimal("-50")
        assert food["trend_previous"] == TREND_INCREASE
        assert food["trend_six_months"] == TREND_DECREASE

        leisure = result[1]
        assert leisure["current"] == Decimal("0")
        assert leisure["change_previous"] == Decimal("-100")
        assert leisure["trend_six_months"] == TREND_STABLE

    def test_year_boundary(self):
        """Test that the previous months wrap into the prior year."""
        today = date(2024, 2, 29)
        previous = today.replace(day=1) - relativedelta(months=1)
        six_months_ago = today.replace(day=1) - relativedelta(months=6)
        transactions = [
            make_transaction(posted_date=previous.replace(day=31).isoformat(), amount="-10.00"),
            make_transaction(posted_date=six_months_ago.replace(day=15).isoformat(), amount="-20.00"),
        ]

        result = category_comparisons(transactions, today=today)

        assert previous == date(2024, 1, 1)
        assert six_months_ago == date(2023, 8, 1)
        assert result[0]["previous"] == Decimal("10.00")
        assert result[0]["six_months_ago"] == Decimal("20.00")

    def test_no_spending(self):
        """Test that income alone produces no comparisons."""
        transactions = [make_transaction(posted_date="2024-07-01", amount="500.00")]

        assert category_comparisons(transactions, today=date(2024, 7, 1)) == []
