"""Command-line interface for draft recommendations and simulations."""

import logging
import sys

import click

from fantasy_draft.config import DRAFT_ROUNDS, NUM_TEAMS, DraftConfig
from fantasy_draft.data_io import load_player_data, load_roster_data
from fantasy_draft.errors import InvalidRecord
from fantasy_draft.models import DraftStatus
from fantasy_draft.needs import analyze_needs
from fantasy_draft.recommendations import recommend
from fantasy_draft.simulation import simulate_full_draft


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors and emojis for different log levels."""

    LEVEL_COLORS = {
        "DEBUG": Colors.BLUE,
        "INFO": "",  # No color - plain white/default
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED,
    }

    LEVEL_EMOJIS = {
        "DEBUG": "🔍 ",
        "INFO": "",  # No emoji for info messages
        "WARNING": "⚠️  ",
        "ERROR": "❌ ",
        "CRITICAL": "💥 ",
    }

    def __init__(self, show_names: bool = False) -> None:
        """Initialize formatter.

        Args:
            show_names: Prefix messages with the emitting logger's name
        """
        super().__init__()
        self.show_names = show_names

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and emojis."""
        level_color = self.LEVEL_COLORS.get(record.levelname, "")
        level_emoji = self.LEVEL_EMOJIS.get(record.levelname, "")

        message = record.getMessage()
        if self.show_names:
            message = f"[{record.name}] {message}"

        if level_color:
            return f"{level_emoji}{level_color}{message}{Colors.RESET}"
        return f"{level_emoji}{message}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application with colors and emojis.

    Args:
        verbose: If True, enable DEBUG level logging with logger names
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(show_names=verbose))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()  # Remove any existing handlers
    root_logger.addHandler(handler)


@click.group()
def main() -> None:
    """Fantasy football draft slot assignment and recommendations."""


@main.command("recommend")
@click.argument("players_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--roster",
    "roster_file",
    type=click.Path(exists=True, dir_okay=False),
    help="CSV file with the team's current roster",
)
@click.option("--team-id", help="Only use roster rows for this team")
@click.option(
    "--round",
    "round_number",
    type=click.IntRange(min=1),
    help="Draft round (default: derived from roster size and --num-teams)",
)
@click.option(
    "--num-teams",
    type=click.IntRange(min=1),
    default=NUM_TEAMS,
    help=f"Number of teams in the draft (default: {NUM_TEAMS})",
)
@click.option(
    "--top",
    type=click.IntRange(min=1),
    default=10,
    help="Number of recommendations to show (default: 10)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging")
def recommend_command(
    players_file: str,
    roster_file: str | None,
    team_id: str | None,
    round_number: int | None,
    num_teams: int,
    top: int,
    verbose: bool,
) -> None:
    """Rank available players for the next pick."""
    setup_logging(verbose)

    try:
        players = load_player_data(players_file)
        roster = load_roster_data(roster_file, team_id) if roster_file else []
    except InvalidRecord as e:
        raise click.ClickException(str(e)) from e

    if round_number is None:
        round_number = len(roster) // num_teams + 1

    needs = analyze_needs(roster)
    click.echo(f"Round {round_number} | roster size {len(roster)}")
    click.echo(f"Needs: {', '.join(sorted(needs.unmet_slots)) or 'none'}")
    if needs.overfilled_slots:
        click.echo(f"Over-filled: {', '.join(sorted(needs.overfilled_slots))}")
    click.echo(f"Bench remaining: {needs.bench_remaining}")

    candidates = recommend(players, roster, round_number=round_number, top_n=top)
    if not candidates:
        click.echo("No recommendations available.")
        return

    for rank, candidate in enumerate(candidates, start=1):
        player = candidate.player
        click.echo(
            f"{rank:>2}. {player.name} ({player.position}, {player.team}) "
            f"{candidate.adjusted_score:.2f} [{candidate.priority.value}] "
            f"{candidate.reason}"
        )


@main.command("simulate")
@click.argument("players_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--num-teams",
    type=click.IntRange(min=1),
    default=NUM_TEAMS,
    help=f"Number of teams in the draft (default: {NUM_TEAMS})",
)
@click.option(
    "--rounds",
    type=click.IntRange(min=1, max=DRAFT_ROUNDS),
    default=DRAFT_ROUNDS,
    help=f"Rounds per team, at most {DRAFT_ROUNDS} (default: {DRAFT_ROUNDS})",
)
@click.option("--seed", type=int, help="Seed for the draft-order shuffle")
@click.option(
    "--no-shuffle", is_flag=True, help="Draft in team-1..team-N order instead"
)
@click.option("--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging")
def simulate_command(
    players_file: str,
    num_teams: int,
    rounds: int,
    seed: int | None,
    no_shuffle: bool,
    verbose: bool,
) -> None:
    """Simulate a snake draft where every team auto-picks."""
    setup_logging(verbose)

    try:
        players = load_player_data(players_file)
    except InvalidRecord as e:
        raise click.ClickException(str(e)) from e

    draft_config = DraftConfig(num_teams=num_teams, total_rounds=rounds)
    simulation = simulate_full_draft(
        players, draft_config=draft_config, seed=seed, shuffle=not no_shuffle
    )

    for team_id in simulation.draft_order:
        click.echo(f"{team_id} ({simulation.team_points(team_id):.1f} pts)")
        for pick in simulation.draft_history:
            if pick.team_id == team_id:
                click.echo(
                    f"  R{pick.round_number:<2} #{pick.pick_number:<3} "
                    f"{pick.slot:<4} {pick.player.name} ({pick.player.position})"
                )

    if simulation.status != DraftStatus.COMPLETED:
        click.echo(
            f"❌ Draft stopped after {len(simulation.draft_history)} of "
            f"{draft_config.total_picks} picks",
            err=True,
        )
        sys.exit(1)

    click.echo(f"✅ Draft completed: {len(simulation.draft_history)} picks")


if __name__ == "__main__":
    main()
