"""Command‑line interface for the sell-my-house calculator.

This module uses the ``click`` library to implement a multi‑command
interface. The calculator state (loan, currency, theme and offers) lives in
the same store the web app uses, so offers entered in one place show up in
the other. Every command loads the state, applies one change, saves it and
prints the result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from . import state as transitions
from .data_models import AppState, THEMES
from .engine import interest_horizons, ranked_evaluations
from .formatter import export_to_csv, export_to_json, print_loan, print_offers
from .logging_setup import setup_logging
from .storage import StateStore, create_store_from_env
from .utils import InvalidInputError

logger = logging.getLogger(__name__)


def _store(ctx: click.Context) -> StateStore:
    return ctx.obj["store"]


def _apply(ctx: click.Context, change, *args, **kwargs) -> AppState:
    """Load the stored state, apply ``change`` and save the result.

    Rejected input is reported as a bad parameter and nothing is saved.
    """
    store = _store(ctx)
    current = store.load()
    try:
        updated = change(current, *args, **kwargs)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc))
    if updated is not current:
        store.save(updated)
    return updated


def _print_state(app_state: AppState) -> None:
    print_loan(app_state, interest_horizons(app_state.loan))
    print_offers(app_state, ranked_evaluations(app_state.loan, app_state.offers))


@click.group()
@click.option(
    "--database-url",
    envvar="SELL_HOUSE_DATABASE_URL",
    default=None,
    help="SQLAlchemy URL of the state store (env SELL_HOUSE_DATABASE_URL).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log what the calculator is doing.")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], verbose: bool) -> None:
    """Compare offers on your house against the cost of carrying your loan."""
    setup_logging("INFO" if verbose else "WARNING")
    ctx.ensure_object(dict)
    if "store" not in ctx.obj:
        ctx.obj["store"] = create_store_from_env(database_url)


@cli.command()
@click.option("--output", "output", type=str, help="Export ranked offers to a file (.json or .csv)")
@click.pass_context
def show(ctx: click.Context, output: Optional[str]) -> None:
    """Print the loan, interest horizons and offers ranked best first."""
    app_state = _store(ctx).load()
    ranked = ranked_evaluations(app_state.loan, app_state.offers)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, app_state, ranked)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, ranked)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Offers exported to {path}")
        return
    print_loan(app_state, interest_horizons(app_state.loan))
    print_offers(app_state, ranked)


@cli.command()
@click.option("--principal", "-p", "principal", help="Current loan balance")
@click.option("--rate", "-r", "rate", help="Annual interest rate (percent)")
@click.option("--compounding", "-m", "compounding", help="Compounding periods per year")
@click.option("--currency", "-c", "currency", help="Currency code (USD, AUD, EUR, GBP)")
@click.pass_context
def loan(
    ctx: click.Context,
    principal: Optional[str],
    rate: Optional[str],
    compounding: Optional[str],
    currency: Optional[str],
) -> None:
    """Update the loan parameters and currency."""
    _apply(ctx, transitions.update_loan, principal=principal, annual_rate=rate, compounding=compounding)
    if currency:
        _apply(ctx, transitions.set_currency, currency)
    _print_state(_store(ctx).load())


@cli.command("add-offer")
@click.option("--amount", "-a", "amount", required=True, help="Offered purchase price")
@click.option("--days", "-d", "days", required=True, help="Days until settlement")
@click.option("--name", "-n", "name", default="", help="Buyer name")
@click.option("--deposit", "deposit", default=None, help="Deposit (percent, 0-100)")
@click.option("--notes", "notes", default="", help="Free-form notes")
@click.option("--subject-to-finance", is_flag=True, help="Offer is subject to finance")
@click.option("--building-pest", "building_pest", is_flag=True, help="Offer is subject to building & pest inspection")
@click.pass_context
def add_offer(
    ctx: click.Context,
    amount: str,
    days: str,
    name: str,
    deposit: Optional[str],
    notes: str,
    subject_to_finance: bool,
    building_pest: bool,
) -> None:
    """Record a new offer."""
    updated = _apply(
        ctx,
        transitions.add_offer,
        amount=amount,
        days=days,
        name=name,
        deposit=deposit,
        notes=notes,
        subject_to_finance=subject_to_finance,
        building_pest_inspection=building_pest,
    )
    logger.info("Offer %s added", updated.offers[-1].id)
    click.echo(f"Added offer {updated.offers[-1].id}")
    print_offers(updated, ranked_evaluations(updated.loan, updated.offers))


@cli.command("edit-offer")
@click.argument("offer_id")
@click.argument("field", type=click.Choice(transitions.EDITABLE_FIELDS))
@click.argument("value")
@click.pass_context
def edit_offer(ctx: click.Context, offer_id: str, field: str, value: str) -> None:
    """Change one field of an existing offer."""
    if transitions.find_offer(_store(ctx).load(), offer_id) is None:
        raise click.UsageError(f"No offer with id {offer_id}")
    updated = _apply(ctx, transitions.update_offer_field, offer_id, field, value)
    print_offers(updated, ranked_evaluations(updated.loan, updated.offers))


@cli.command("remove-offer")
@click.argument("offer_id")
@click.pass_context
def remove_offer(ctx: click.Context, offer_id: str) -> None:
    """Remove an offer."""
    if transitions.find_offer(_store(ctx).load(), offer_id) is None:
        raise click.UsageError(f"No offer with id {offer_id}")
    _apply(ctx, transitions.remove_offer, offer_id)
    click.echo(f"Removed offer {offer_id}")


@cli.command()
@click.argument("theme", required=False, type=click.Choice(THEMES))
@click.pass_context
def theme(ctx: click.Context, theme: Optional[str]) -> None:
    """Set the display theme used by the web app, or toggle it."""
    if theme:
        updated = _apply(ctx, transitions.set_theme, theme)
    else:
        updated = _apply(ctx, transitions.toggle_theme)
    click.echo(f"Theme: {updated.theme}")


@cli.command()
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Restore the default loan and clear all offers (theme is kept)."""
    updated = _apply(ctx, transitions.reset)
    _print_state(updated)


if __name__ == "__main__":
    cli()
