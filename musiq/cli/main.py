"""Main CLI entry point for MusIQ."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import cast

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from musiq import __version__
from musiq.core.config import get_settings
from musiq.core.exceptions import CatalogError, PersistenceError
from musiq.core.models import DIFFICULTY_DESCRIPTIONS, Artist, Difficulty, GamePhase, RoundResult
from musiq.game.controller import GameController
from musiq.game.session import GameSession
from musiq.services.audio import AudioPlayer, PreviewClipPlayer
from musiq.services.catalog import HeardleCatalogClient, InMemorySongCatalog, SongCatalog
from musiq.services.history import GameHistory, HistoryStore, JsonHistoryStore

console = Console()

QUIT_COMMAND = "q"
REPLAY_COMMAND = "r"


def get_catalog(songs_file: Path | None = None) -> SongCatalog:
    """Get the song catalog (a local file when given)."""
    if songs_file is not None:
        return InMemorySongCatalog.from_json_file(songs_file)
    return HeardleCatalogClient(get_settings())


def get_audio_player() -> AudioPlayer:
    """Get the preview clip player."""
    return PreviewClipPlayer(get_settings())


def get_history_store() -> HistoryStore:
    """Get the score history store."""
    return JsonHistoryStore(get_settings().history_path)


@click.group()
@click.version_option(version=__version__, prog_name="musiq")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """MusIQ - Name the song from a few seconds of preview."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


@cli.group()
def artists() -> None:
    """Artist lookup commands."""
    pass


@artists.command()
@click.argument("query")
def search(query: str) -> None:
    """Search artists and playlists you can play against."""
    with console.status(f"Searching for '{query}'..."):
        try:
            results = asyncio.run(get_catalog().search_artists(query))
        except CatalogError as e:
            console.print(f"[red]Search failed: {e}[/red]")
            return

    if not results:
        console.print(f"[yellow]No artists found for '{query}'[/yellow]")
        return

    table = Table(title=f"Artists: {query}")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Genres", style="green")

    for artist in results:
        name = f"{artist.name} (playlist)" if artist.is_playlist else artist.name
        table.add_row(artist.id, name, artist.display_genres)

    console.print(table)


@cli.command()
@click.argument("artist_id")
@click.option("--name", "-n", "artist_name", default=None, help="Artist name shown in history")
@click.option(
    "--difficulty",
    "-d",
    type=click.Choice(["easy", "medium", "hard"]),
    default=None,
    help="Difficulty tier (defaults to settings)",
)
@click.option(
    "--songs-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Play from a saved songs JSON file instead of the online catalog",
)
def play(artist_id: str, artist_name: str | None, difficulty: str | None, songs_file: Path | None) -> None:
    """Play a game against an artist's songs."""
    try:
        catalog = get_catalog(songs_file)
    except CatalogError as e:
        console.print(f"[red]Could not load songs: {e}[/red]")
        return

    controller = GameController(
        catalog=catalog,
        player=get_audio_player(),
        history=get_history_store(),
        settings=get_settings(),
    )
    artist = Artist(id=artist_id, name=artist_name or artist_id)
    tier = cast(Difficulty, difficulty or get_settings().default_difficulty)
    console.print(f"[bold]{artist.name}[/bold] - {tier}: [dim]{DIFFICULTY_DESCRIPTIONS[tier]}[/dim]")

    asyncio.run(_run_game(controller, artist, tier))


async def _run_game(controller: GameController, artist: Artist, difficulty: Difficulty) -> None:
    """Interactive game loop."""
    try:
        with console.status("Loading songs..."):
            session = await controller.start_game(artist, difficulty)
    except CatalogError as e:
        console.print(f"[red]Could not start game: {e}[/red]")
        return

    # Ctrl-C or end of input aborts the prompts; the game is still saved.
    try:
        while session.phase != GamePhase.COMPLETE:
            if session.phase == GamePhase.PLAYING:
                _print_round_status(session)
                guess = click.prompt(
                    "Your guess (blank to skip, r to replay, q to quit)",
                    default="",
                    show_default=False,
                ).strip()

                if guess.lower() == QUIT_COMMAND:
                    controller.abandon()
                    console.print("[yellow]Game abandoned[/yellow]")
                    return
                if guess.lower() == REPLAY_COMMAND:
                    await controller.play_clip()
                elif not guess:
                    await controller.skip()
                else:
                    controller.submit_guess(guess)

            elif session.phase == GamePhase.FEEDBACK:
                if session.last_result is not None:
                    _print_feedback(session.last_result)
                session.hide_feedback()

                if not click.confirm("Next song?", default=True):
                    controller.finish()
                    break
                await controller.next_round()
    finally:
        controller.abandon()

    _print_results(session)


def _print_round_status(session: GameSession) -> None:
    next_duration = session.next_play_duration
    skip_label = f"skip for {next_duration}s" if next_duration else "skip gives up"
    console.print(
        f"\n[bold]Song {session.songs_completed + 1}[/bold] "
        f"[cyan]{session.current_play_duration}s[/cyan] clip "
        f"[dim]({skip_label})[/dim]  "
        f"Score: [magenta]{session.score}[/magenta]  Streak: [magenta]{session.streak}[/magenta]"
    )


def _print_feedback(result: RoundResult) -> None:
    song = result.song
    if result.is_correct:
        line = f"[green]Correct![/green] +{result.points_earned}"
        if result.speed_bonus:
            line += f" [yellow](+{result.bonus_points} speed bonus)[/yellow]"
    elif result.was_skipped:
        line = "[red]Out of attempts.[/red]"
    else:
        line = "[red]Wrong.[/red]"

    console.print(f"{line} It was [bold]{song.name}[/bold] by {song.artist_name}")
    console.print(f"[dim]Guessed in {result.guess_latency_seconds:.1f}s[/dim]")


def _print_results(session: GameSession) -> None:
    lines = [
        f"Score: [bold]{session.score}[/bold]  Rank: [bold]{session.rank.value}[/bold]",
        f"Songs: {session.songs_completed}  Correct: {session.correct_guesses}",
        f"Accuracy: {session.accuracy:.0f}%  Best streak: {session.best_streak}",
        f"Average time per song: {session.average_guess_time_seconds:.1f}s",
    ]
    if session.is_perfect:
        lines.append("[bold yellow]Perfect game![/bold yellow]")
    console.print(Panel("\n".join(lines), title="Game Over"))


@cli.command()
@click.option("--limit", "-l", default=20, help="Number of games")
@click.option("--artist", "-a", "artist_id", default=None, help="Only games for this artist id")
def history(limit: int, artist_id: str | None) -> None:
    """Show recently played games."""
    games = GameHistory.from_store(get_history_store())
    records = games.games_for_artist(artist_id)[:limit] if artist_id else games.recent_games(limit)

    if not records:
        console.print("[yellow]No games played yet[/yellow]")
        return

    table = Table(title="Recent Games")
    table.add_column("Date", style="dim")
    table.add_column("Artist", style="cyan")
    table.add_column("Score", justify="right", style="magenta")
    table.add_column("Rank")
    table.add_column("Accuracy", justify="right")
    table.add_column("Best Streak", justify="right")
    table.add_column("Time", justify="right")

    for record in records:
        table.add_row(
            record.started_at.strftime("%Y-%m-%d %H:%M"),
            record.artist_name or "-",
            str(record.score),
            record.rank.value,
            record.accuracy_percentage,
            str(record.best_streak),
            record.duration_formatted,
        )

    console.print(table)


@cli.command()
@click.option("--limit", "-l", default=10, help="Number of top scores")
def stats(limit: int) -> None:
    """Show the scoreboard."""
    games = GameHistory.from_store(get_history_store())

    console.print("\n[bold]Scoreboard[/bold]")
    console.print(f"  Games played:     [cyan]{games.total_games_played}[/cyan]")
    console.print(f"  Highest score:    [cyan]{games.highest_score}[/cyan]")
    console.print(f"  Average score:    [cyan]{games.average_score:.1f}[/cyan]")
    console.print(f"  Perfect games:    [cyan]{games.perfect_games}[/cyan]")
    console.print(f"  Best streak:      [cyan]{games.best_streak}[/cyan]")
    console.print(f"  Average accuracy: [cyan]{games.average_accuracy:.0f}%[/cyan]")
    console.print(f"  Favorite rank:    [cyan]{games.favorite_rank.value}[/cyan]")
    if games.most_played_artist:
        console.print(f"  Most played:      [cyan]{games.most_played_artist}[/cyan]")

    top = games.top_scores(limit)
    if not top:
        return

    table = Table(title="Top Scores")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Artist", style="cyan")
    table.add_column("Score", justify="right", style="magenta")
    table.add_column("Rank")

    for i, record in enumerate(top, 1):
        table.add_row(str(i), record.artist_name or "-", str(record.score), record.rank.value)

    console.print(table)


@cli.command(name="clear-history")
@click.confirmation_option(prompt="Delete all saved games?")
def clear_history() -> None:
    """Delete all saved games."""
    try:
        get_history_store().clear()
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        return
    console.print("[green]History cleared[/green]")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
