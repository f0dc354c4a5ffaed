import logging
import os
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, url_for

from sell_house_calc import state as transitions
from sell_house_calc.data_models import AppState
from sell_house_calc.engine import interest_horizons, ranked_evaluations
from sell_house_calc.formatter import format_currency, format_percent, interest_note
from sell_house_calc.logging_setup import setup_logging
from sell_house_calc.storage import StateStore, create_store_from_env
from sell_house_calc.utils import InvalidInputError, currency_to_symbol

logger = logging.getLogger(__name__)

CURRENCY_OPTIONS = {
    'USD': {'label': 'US dollar'},
    'AUD': {'label': 'Australian dollar'},
    'EUR': {'label': 'Euro'},
    'GBP': {'label': 'British pound'},
}


def _checkbox(form, name: str) -> bool:
    return form.get(name) in ("on", "1", "true")


def _apply_change(store: StateStore, change, *args, **kwargs) -> Optional[AppState]:
    """Apply ``change`` to the stored state and save it.

    Rejected input is flashed to the user and the stored state is left as it
    was.
    """
    current = store.load()
    try:
        updated = change(current, *args, **kwargs)
    except InvalidInputError as exc:
        logger.info("Rejected input: %s", exc)
        flash(str(exc), "error")
        return None
    if updated is not current:
        store.save(updated)
    return updated


def create_app(store: Optional[StateStore] = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    state_store = store or create_store_from_env(os.environ.get("SELL_HOUSE_DATABASE_URL"))

    @app.template_filter("currency")
    def currency_filter(value: float, code: str = "USD") -> str:
        return format_currency(value, code)

    @app.template_filter("percent")
    def percent_filter(value: float) -> str:
        return format_percent(value)

    @app.get("/")
    def index():
        app_state = state_store.load()
        ranked = ranked_evaluations(app_state.loan, app_state.offers)
        return render_template(
            "index.html",
            state=app_state,
            horizons=interest_horizons(app_state.loan),
            interest_note=interest_note(app_state),
            ranked=ranked,
            currency_options=CURRENCY_OPTIONS,
            currency_symbol=currency_to_symbol(app_state.currency),
        )

    @app.post("/loan")
    def update_loan():
        form = request.form
        _apply_change(
            state_store,
            transitions.update_loan,
            principal=form.get("loan_amount"),
            annual_rate=form.get("annual_rate"),
            compounding=form.get("compounding"),
        )
        if form.get("currency"):
            _apply_change(state_store, transitions.set_currency, form["currency"])
        return redirect(url_for("index"))

    @app.post("/offers")
    def add_offer():
        form = request.form
        _apply_change(
            state_store,
            transitions.add_offer,
            amount=form.get("offer_amount", ""),
            days=form.get("offer_days", ""),
            name=form.get("offer_name", ""),
            deposit=form.get("offer_deposit", ""),
            notes=form.get("offer_notes", ""),
            subject_to_finance=_checkbox(form, "subject_to_finance"),
            building_pest_inspection=_checkbox(form, "building_pest_inspection"),
        )
        return redirect(url_for("index"))

    @app.post("/offers/<offer_id>/edit")
    def edit_offer(offer_id: str):
        form = request.form
        field = form.get("field", "")
        if field in transitions.FLAG_FIELDS:
            value = _checkbox(form, "value")
        else:
            value = form.get("value", "")
        _apply_change(state_store, transitions.update_offer_field, offer_id, field, value)
        return redirect(url_for("index"))

    @app.post("/offers/<offer_id>/remove")
    def remove_offer(offer_id: str):
        _apply_change(state_store, transitions.remove_offer, offer_id)
        return redirect(url_for("index"))

    @app.post("/reset")
    def reset():
        _apply_change(state_store, transitions.reset)
        return redirect(url_for("index"))

    @app.post("/theme")
    def toggle_theme():
        _apply_change(state_store, transitions.toggle_theme)
        return redirect(url_for("index"))

    return app


if __name__ == "__main__":
    setup_logging(os.environ.get("LOG_LEVEL", "INFO"))
    print("Starting Sell My House calculator web app...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
