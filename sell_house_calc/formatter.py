"""Output helpers for the sell-my-house calculator.

This module formats money and percentages and renders the loan summary, the
interest horizon table and the ranked offer list as plain text. It also
exports ranked offers to JSON or CSV. Values are computed by the engine; the
functions here only lay them out.
"""

from __future__ import annotations

import csv
import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from .data_models import AppState, HorizonProjection, Offer, OfferEvaluation
from .utils import currency_to_symbol


def format_currency(value: float, currency: str = "USD") -> str:
    """Format ``value`` as money, e.g. ``$1,234.50`` or ``-£12.00``."""
    symbol = currency_to_symbol(currency)
    sign = "-" if value < 0 else ""
    if not math.isfinite(value):
        return f"{sign}{symbol}{abs(value)}"
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def interest_note(state: AppState) -> str:
    """Describe the assumptions behind the interest horizon figures."""
    loan = state.loan
    compounding = loan.compounding_periods_per_year
    if float(compounding).is_integer():
        compounding = int(compounding)
    return (
        f"Assumes {format_percent(loan.annual_rate_percent)} p.a., "
        f"{compounding}x compounding, based on current balance "
        f"{format_currency(loan.principal, state.currency)}."
    )


def offer_row(offer: Offer, evaluation: OfferEvaluation, rank: int) -> Dict[str, Any]:
    """Flatten an offer and its evaluation into a serialisable dictionary."""
    return {
        "rank": rank,
        "id": offer.id,
        "name": offer.name,
        "amount": offer.amount,
        "days": offer.days,
        "deposit": offer.deposit,
        "subject_to_finance": offer.subject_to_finance,
        "building_pest_inspection": offer.building_pest_inspection,
        "notes": offer.notes,
        "interest_to_settle": evaluation.interest_to_settle,
        "total_to_clear_loan": evaluation.total_to_clear_loan,
        "net_vs_loan": evaluation.net_vs_loan,
        "top_offer": rank == 1,
    }


def print_loan(state: AppState, horizons: Iterable[HorizonProjection]) -> None:
    """Print the loan parameters and the interest accrued over each horizon."""
    loan = state.loan
    print("Loan")
    print("-" * 72)
    print(f"Current balance    : {format_currency(loan.principal, state.currency)}")
    print(f"Annual rate        : {format_percent(loan.annual_rate_percent)}")
    print(f"Compounding / year : {loan.compounding_periods_per_year:g}")
    print(f"Currency           : {state.currency}")
    print("-" * 72)
    print("Days\tInterest\tBalance")
    for h in horizons:
        print(
            f"{h.days:g}\t{format_currency(h.interest, state.currency)}"
            f"\t{format_currency(h.balance, state.currency)}"
        )
    print(interest_note(state))


def print_offers(state: AppState, ranked: List[Tuple[Offer, OfferEvaluation]]) -> None:
    """Print ranked offers best first, marking the top offer."""
    print("Offers")
    print("=" * 72)
    if not ranked:
        print("No offers yet. Add one with 'add-offer'.")
        return
    headers = ["Rank", "Buyer", "Amount", "Days", "Deposit", "Interest", "Net vs loan", "Id"]
    print("\t".join(headers))
    for rank, (offer, evaluation) in enumerate(ranked, start=1):
        row = [
            str(rank),
            offer.display_name,
            format_currency(offer.amount, state.currency),
            f"{offer.days:g}",
            format_percent(offer.deposit),
            format_currency(evaluation.interest_to_settle, state.currency),
            format_currency(evaluation.net_vs_loan, state.currency),
            offer.id,
        ]
        line = "\t".join(row)
        if rank == 1:
            line += "\tTop offer"
        print(line)
        if offer.conditions:
            print(f"\tConditions: {', '.join(offer.conditions)}")
        if offer.has_notes:
            print(f"\tNotes: {offer.notes.strip()}")
    print("=" * 72)


def export_to_json(path: Path, state: AppState, ranked: List[Tuple[Offer, OfferEvaluation]]) -> None:
    """Export loan parameters and ranked offers to a JSON file."""
    data = {
        "loan": {
            "principal": state.loan.principal,
            "annual_rate_percent": state.loan.annual_rate_percent,
            "compounding_periods_per_year": state.loan.compounding_periods_per_year,
            "currency": state.currency,
        },
        "offers": [offer_row(o, e, rank) for rank, (o, e) in enumerate(ranked, start=1)],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, ranked: List[Tuple[Offer, OfferEvaluation]]) -> None:
    """Export ranked offers to a CSV file."""
    header = [
        "Rank",
        "Id",
        "Name",
        "Amount",
        "Days",
        "Deposit",
        "Subject_To_Finance",
        "Building_Pest_Inspection",
        "Interest_To_Settle",
        "Total_To_Clear_Loan",
        "Net_Vs_Loan",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for rank, (o, e) in enumerate(ranked, start=1):
            writer.writerow(
                [
                    rank,
                    o.id,
                    o.name,
                    o.amount,
                    o.days,
                    o.deposit,
                    o.subject_to_finance,
                    o.building_pest_inspection,
                    round(e.interest_to_settle, 2),
                    round(e.total_to_clear_loan, 2),
                    round(e.net_vs_loan, 2),
                ]
            )
