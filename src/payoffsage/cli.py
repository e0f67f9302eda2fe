"""Command line interface for PayoffSage."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from .config import KNOWN_STRATEGIES, BaseConfig
from .domain.debts import InterestIncludedDebt, to_debt
from .logging_config import get_logger, setup_logging
from .models import PayoffProfile
from .services.amortization import build_amortization_schedule, schedule_totals
from .services.export_csv import export_amortization_csv, export_timeline_csv
from .services.formatting import format_currency, format_payoff_date, format_timeframe
from .services.import_csv import load_debts, load_fundings
from .services.interest import included_interest
from .services.scoring import calculate_debt_score
from .services.strategies import get_strategy
from .services.timeline import calculate_timeline

logger = get_logger("cli")

_csv_path = click.Path(exists=True, dir_okay=False, path_type=Path)


def _start_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


def _load_plan(ctx: click.Context, debts_path: Path, fundings_path: Optional[Path], budget, strategy_id, order):
    config: BaseConfig = ctx.obj
    debts = load_debts(debts_path)
    fundings = load_fundings(fundings_path) if fundings_path else []
    profile = PayoffProfile(
        monthly_payment=budget,
        selected_strategy=strategy_id or config.DEFAULT_STRATEGY,
        preferred_currency=config.CURRENCY_SYMBOL,
    )
    minimums = sum(debt.minimum_payment for debt in debts)
    custom_order = [item.strip() for item in order.split(",") if item.strip()] if order else None
    strategy = get_strategy(profile.selected_strategy, custom_order)
    return debts, fundings, profile, strategy, minimums


def _timeline_for(ctx, debts_path, fundings_path, budget, strategy_id, order, start):
    config: BaseConfig = ctx.obj
    debts, fundings, profile, strategy, minimums = _load_plan(
        ctx, debts_path, fundings_path, budget, strategy_id, order
    )
    payment = profile.effective_payment(minimums)
    results = calculate_timeline(
        debts,
        payment,
        strategy,
        fundings,
        start=_start_date(start),
        currency_symbol=profile.preferred_currency,
        max_months=config.MAX_SIMULATION_MONTHS,
    )
    return results, fundings, profile, strategy, minimums, payment


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Simulate debt payoff plans from CSV files."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config)
    ctx.obj = config


@cli.command("simulate")
@click.option("--debts", "debts_path", type=_csv_path, required=True, help="CSV of debts")
@click.option("--budget", type=float, default=None, help="Total monthly payment (defaults to the minimums)")
@click.option("--strategy", "strategy_id", type=click.Choice(KNOWN_STRATEGIES), default=None)
@click.option("--order", default=None, help="Comma-separated debt ids for the custom strategy")
@click.option("--fundings", "fundings_path", type=_csv_path, default=None, help="CSV of one-time fundings")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def simulate(ctx, debts_path, budget, strategy_id, order, fundings_path, start, export_path) -> None:
    """Compare minimum payments with the accelerated plan."""

    try:
        results, _, profile, strategy, _, payment = _timeline_for(
            ctx, debts_path, fundings_path, budget, strategy_id, order, start
        )
    except ValueError as exc:
        logger.warning("Simulation rejected: %s", exc)
        raise click.ClickException(str(exc)) from exc

    symbol = profile.preferred_currency
    click.echo(f"Strategy: {strategy.name}   Monthly payment: {format_currency(payment, symbol)}")
    for label, scenario in (("Minimum payments", results.baseline), ("Accelerated", results.accelerated)):
        summary = scenario.summary()
        interest = format_currency(summary.total_interest, symbol) if summary.is_payable else "n/a"
        click.echo(
            f"{label}: {format_timeframe(summary.months)}, interest {interest}, "
            f"debt free {format_payoff_date(summary)}"
        )
    if results.interest_saved is not None:
        click.echo(
            f"Saved {format_currency(results.interest_saved, symbol)} and "
            f"{format_timeframe(results.months_saved)}"
        )
    if results.accelerated.shortfall_months:
        click.echo(
            f"Warning: budget is below the required payments in "
            f"{len(results.accelerated.shortfall_months)} month(s)"
        )

    if export_path:
        path = export_timeline_csv(points=results.points, output_path=export_path)
        click.echo(f"Timeline written: {path}")


@cli.command("schedule")
@click.option("--debts", "debts_path", type=_csv_path, required=True, help="CSV of debts")
@click.option("--debt", "debt_id", required=True, help="Id of the debt to schedule")
@click.option("--payment", type=float, default=None, help="Monthly payment (defaults to the minimum)")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def schedule(ctx, debts_path, debt_id, payment, start, export_path) -> None:
    """Print one debt's amortization ledger."""

    config: BaseConfig = ctx.obj
    try:
        debts = {debt.id: debt for debt in load_debts(debts_path)}
        if debt_id not in debts:
            raise ValueError(f"Unknown debt id: {debt_id}")
        rows = build_amortization_schedule(
            debts[debt_id], payment, _start_date(start), config.MAX_SIMULATION_MONTHS
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if not rows:
        click.echo("This payment never covers the interest; the debt cannot be repaid.")
        return

    symbol = debts[debt_id].currency_symbol
    for row in rows:
        click.echo(
            f"{row.month:>4}  {row.date.isoformat()}  "
            f"{format_currency(row.payment, symbol):>12}  "
            f"{format_currency(row.principal, symbol):>12}  "
            f"{format_currency(row.interest, symbol):>10}  "
            f"{format_currency(row.ending_balance, symbol):>12}"
        )
    totals = schedule_totals(rows)
    click.echo(
        f"Total paid {format_currency(totals['total_paid'], symbol)}, "
        f"interest {format_currency(totals['total_interest'], symbol)}"
    )
    debt = to_debt(debts[debt_id])
    if isinstance(debt, InterestIncludedDebt):
        embedded = included_interest(debt)
        if embedded is not None:
            click.echo(f"Interest already included in the balance: {format_currency(embedded, symbol)}")

    if export_path:
        path = export_amortization_csv(rows=rows, output_path=export_path)
        click.echo(f"Schedule written: {path}")


@cli.command("score")
@click.option("--debts", "debts_path", type=_csv_path, required=True, help="CSV of debts")
@click.option("--budget", type=float, default=None, help="Total monthly payment (defaults to the minimums)")
@click.option("--strategy", "strategy_id", type=click.Choice(KNOWN_STRATEGIES), default=None)
@click.option("--order", default=None, help="Comma-separated debt ids for the custom strategy")
@click.option("--fundings", "fundings_path", type=_csv_path, default=None, help="CSV of one-time fundings")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_context
def score(ctx, debts_path, budget, strategy_id, order, fundings_path, start) -> None:
    """Score the accelerated plan against paying minimums only."""

    try:
        results, fundings, _, strategy, minimums, payment = _timeline_for(
            ctx, debts_path, fundings_path, budget, strategy_id, order, start
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    debt_score = calculate_debt_score(
        results.baseline.summary(),
        results.accelerated.summary(),
        monthly_payment=payment,
        minimum_payment_total=minimums,
        strategy_id=strategy.id,
        one_time_fundings=fundings,
    )
    click.echo(f"Debt score: {debt_score.total:.0f}/100 ({debt_score.category})")
    click.echo(f"  Interest savings: {debt_score.interest_score:.1f}/50")
    click.echo(f"  Time savings:     {debt_score.duration_score:.1f}/30")
    click.echo(f"  Payment behavior: {debt_score.behavior_score:.1f}/20")


__all__ = ["cli"]
