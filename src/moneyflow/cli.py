"""Command-line entry points for MoneyFlow."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import click

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelGoalRepository,
    SQLModelLiabilityRepository,
    SQLModelRecurringRepository,
    SQLModelSettingsRepository,
)
from .logging_config import setup_logging
from .services.planner import Planner


def _money(value: Decimal) -> str:
    return f"${value.quantize(Decimal('0.01')):,}"


def build_planner(config: BaseConfig) -> Planner:
    """Wire repositories over the configured database."""

    _engine, session_factory = bootstrap_database(config)
    return Planner(
        liabilities=SQLModelLiabilityRepository(session_factory),
        recurring=SQLModelRecurringRepository(session_factory),
        goals=SQLModelGoalRepository(session_factory),
        budgets=SQLModelBudgetRepository(session_factory),
        settings=SQLModelSettingsRepository(session_factory),
        default_strategy=config.DEFAULT_STRATEGY,
        month_cap=config.PAYOFF_MONTH_CAP,
    )


def _today(value: datetime | None) -> date:
    return value.date() if value is not None else date.today()


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Plan recurring cash flow, debt payoff and a zero-based budget."""

    if ctx.obj is None:
        try:
            config = BaseConfig()
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        setup_logging(config)
        ctx.obj = build_planner(config)


@cli.command("init-db")
@click.pass_obj
def init_db(planner: Planner) -> None:
    """Create the database tables."""

    # Tables are created while the planner is wired up.
    click.echo("Database ready.")


@cli.command()
@click.argument("name", type=click.Choice(["snowball", "avalanche"], case_sensitive=False))
@click.pass_obj
def strategy(planner: Planner, name: str) -> None:
    """Persist the global debt payoff strategy."""

    selected = planner.select_strategy(name)
    click.echo(f"Payoff strategy set to {selected.value}.")


@cli.command()
@click.option(
    "--strategy",
    "strategy_name",
    type=click.Choice(["snowball", "avalanche"], case_sensitive=False),
    default=None,
    help="Override the stored strategy for this run.",
)
@click.option("--surplus", type=click.FLOAT, default=0.0, show_default=True, help="Extra monthly payment.")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def payoff(planner: Planner, strategy_name: str | None, surplus: float, today) -> None:
    """Simulate paying off every stored debt."""

    try:
        result = planner.payoff_plan(
            _today(today), strategy=strategy_name, surplus=Decimal(str(surplus))
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if not result.debts:
        click.echo("No debts recorded.")
        return

    click.echo(f"Strategy: {result.strategy.value}")
    for payoff_state in result.debts:
        when = payoff_state.payoff_date.isoformat() if payoff_state.payoff_date else "not within cap"
        click.echo(
            f"  {payoff_state.debt.name}: {payoff_state.months_to_payoff} months, "
            f"paid off {when}, interest {_money(payoff_state.interest_paid)}"
        )
    click.echo(f"Total interest: {_money(result.total_interest)}")
    click.echo(f"Debt free by: {result.estimated_payoff_date.isoformat()} ({result.total_months} months)")
    if result.capped:
        click.echo(
            f"Warning: stopped after {result.month_cap} months; some debts never pay off "
            "at their current minimums.",
            err=True,
        )


@cli.command()
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def upcoming(planner: Planner, today) -> None:
    """List the next occurrence of every recurring item and debt payment."""

    rows = planner.upcoming_payments(_today(today))
    if not rows:
        click.echo("Nothing scheduled.")
        return
    for row in rows:
        click.echo(
            f"{row.next_date.isoformat()}  {row.status:<8}  {row.name:<30} "
            f"{row.frequency:<12} {_money(row.amount)}"
        )


@cli.command()
@click.option("--year", type=int, default=None, help="Calendar year (defaults to this year).")
@click.pass_obj
def forecast(planner: Planner, year: int | None) -> None:
    """Print the twelve-month zero-based budget forecast."""

    for month in planner.forecast(year or date.today().year):
        balance = month.balance
        click.echo(
            f"{month.label:<15} income {_money(balance.total_income):>12}  "
            f"allocated {_money(balance.total_allocated):>12}  "
            f"left {_money(balance.left_to_allocate):>12}  {balance.status}"
        )


def main() -> None:  # pragma: no cover - console script
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
