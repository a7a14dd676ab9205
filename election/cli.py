"""Command-line entry point for ballotbox

Operates directly on the local state file, so it can inspect or reset an
election without the API server running.
"""

import asyncio
import json
import random

import click

from config import config
from database.state_storage import SQLiteStateStorage
from election import tally
from election.roster import RosterAdmin
from election.simulation import TrafficSimulator
from election.store import CandidateStore
from exceptions import BallotError


def _open_store(db_path):
    if db_path is None:
        config.ensure_data_dir()
    return CandidateStore(SQLiteStateStorage(db_path or config.STATE_DB_PATH))


def _print_standings(store: CandidateStore):
    summary = tally.summarize(store.candidates, ballots_submitted=store.ballots_submitted)
    click.echo(
        f"Total votes: {summary['total_votes']}  "
        f"Ballots (est.): {summary['ballots_cast_estimate']}  "
        f"Ballots (exact): {summary['ballots_submitted']}"
    )
    leader = summary["global_leader"]
    if leader:
        click.echo(f"Leading overall: {leader['name']} ({leader['votes']} votes)")

    for office in summary["offices"]:
        click.echo(f"\n{office['office']} ({office['total_votes']} votes)")
        click.echo("-" * 48)
        for row in office["standings"]:
            click.echo(f"  {row['name']:<28} {row['votes']:>6} {row['share']:>6.1f}%")


@click.group(invoke_without_command=True)
@click.option("--db", "db_path", default=None, help="State database path (default: BALLOT_STATE_DB)")
@click.pass_context
def cli(ctx, db_path):
    """Association election ballot tools"""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("standings")
@click.option("--json", "as_json", is_flag=True, help="Print the dashboard summary as JSON")
@click.pass_context
def standings(ctx, as_json):
    """Show live tallies per office"""
    store = _open_store(ctx.obj["db_path"])
    if as_json:
        summary = tally.summarize(store.candidates, ballots_submitted=store.ballots_submitted)
        click.echo(json.dumps(summary, indent=2))
    else:
        _print_standings(store)


@cli.command("reset")
@click.option("--yes", is_flag=True, help="Confirm the reset without prompting")
@click.pass_context
def reset(ctx, yes):
    """Reset all votes and revert the candidate list to defaults"""
    if not yes:
        click.confirm(
            "Are you sure you want to reset all votes? This will also revert the "
            "candidate list to defaults.",
            abort=True,
        )
    store = _open_store(ctx.obj["db_path"])
    try:
        RosterAdmin(store).reset_election(confirm=True)
    except BallotError as e:
        raise click.ClickException(str(e))
    click.echo(f"Election reset: {len(store)} candidates restored")


@cli.command("simulate")
@click.option("--ticks", default=20, show_default=True, type=click.IntRange(min=1))
@click.option("--seed", default=None, type=int, help="Seed for reproducible runs")
@click.pass_context
def simulate(ctx, ticks, seed):
    """Add random votes, as the dashboard's traffic simulator would"""
    store = _open_store(ctx.obj["db_path"])
    simulator = TrafficSimulator(store, rng=random.Random(seed))
    added = sum(1 for _ in range(ticks) if simulator.tick() is not None)
    click.echo(f"Simulated {ticks} ticks, {added} votes added")


@cli.command("insights")
@click.pass_context
def insights(ctx):
    """Ask Gemini for commentary on the current standings"""
    from analysis.llm.insights import InsightRequester

    store = _open_store(ctx.obj["db_path"])
    report = asyncio.run(InsightRequester().request_insights(store.candidates))
    click.echo(report)


@cli.command("serve")
@click.option("--host", default=None, help="Bind address (default: BALLOT_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: BALLOT_PORT)")
def serve(host, port):
    """Run the API server"""
    import uvicorn

    from server.main import app

    uvicorn.run(
        app,
        host=host or config.API_HOST,
        port=port or config.API_PORT,
        access_log=False,
    )


def main():
    """Entry point for the ballotbox CLI"""
    cli(obj={})


if __name__ == "__main__":
    main()
