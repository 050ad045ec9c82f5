"""Tests for CLI main module."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from musiq.cli.main import cli, get_catalog
from musiq.core.exceptions import CatalogError
from musiq.core.models import Artist, GameRecord
from musiq.services.catalog import HeardleCatalogClient, InMemorySongCatalog
from musiq.services.history import InMemoryHistoryStore
from tests.helpers import make_song


def _play(args: list[str], user_input: str, store: InMemoryHistoryStore, catalog: object | None = None):
    catalog = catalog or InMemorySongCatalog([make_song("only", "Only Song")])
    player = MagicMock()
    player.play = AsyncMock(return_value=None)
    with (
        patch("musiq.cli.main.get_catalog", return_value=catalog),
        patch("musiq.cli.main.get_audio_player", return_value=player),
        patch("musiq.cli.main.get_history_store", return_value=store),
    ):
        runner = CliRunner()
        return runner.invoke(cli, ["play", "artist_queen", "--name", "Queen", *args], input=user_input)


class TestCli:
    """Tests for main CLI group."""

    def test_cli_help(self) -> None:
        """Test CLI shows help."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "MusIQ" in result.output

    def test_cli_version(self) -> None:
        """Test CLI shows version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "musiq" in result.output

    def test_cli_verbose_option(self) -> None:
        """Test CLI accepts verbose option."""
        runner = CliRunner()
        result = runner.invoke(cli, ["-v", "--help"])

        assert result.exit_code == 0


class TestGetCatalog:
    """Tests for catalog selection."""

    def test_online_catalog_by_default(self) -> None:
        assert isinstance(get_catalog(), HeardleCatalogClient)

    def test_songs_file(self, tmp_path: Path) -> None:
        path = tmp_path / "songs.json"
        path.write_text('[{"id": "1", "attributes": {"name": "Song"}}]', encoding="utf-8")

        catalog = get_catalog(path)

        assert isinstance(catalog, InMemorySongCatalog)
        assert catalog.songs[0].name == "Song"


class TestArtistsCommands:
    """Tests for artists command group."""

    def test_artists_search(self, artist: Artist) -> None:
        """Test artists search command."""
        catalog = InMemorySongCatalog([], artists=[artist])
        with patch("musiq.cli.main.get_catalog", return_value=catalog):
            runner = CliRunner()
            result = runner.invoke(cli, ["artists", "search", "queen"])

        assert result.exit_code == 0
        assert "Queen" in result.output
        assert "artist_queen" in result.output

    def test_artists_search_no_results(self) -> None:
        """Test artists search with no results."""
        with patch("musiq.cli.main.get_catalog", return_value=InMemorySongCatalog([])):
            runner = CliRunner()
            result = runner.invoke(cli, ["artists", "search", "nobody"])

        assert result.exit_code == 0
        assert "No artists found" in result.output

    def test_artists_search_error(self) -> None:
        """Test artists search reports catalog errors."""
        catalog = MagicMock()
        catalog.search_artists = AsyncMock(side_effect=CatalogError("Network error: offline"))
        with patch("musiq.cli.main.get_catalog", return_value=catalog):
            runner = CliRunner()
            result = runner.invoke(cli, ["artists", "search", "queen"])

        assert result.exit_code == 0
        assert "Search failed" in result.output


class TestPlayCommand:
    """Tests for the interactive play command."""

    def test_correct_guess_completes_game(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "hard"], "Only Song\ny\n", history_store)

        assert result.exit_code == 0
        assert "Correct!" in result.output
        assert "Game Over" in result.output
        assert "Perfect game!" in result.output
        assert len(history_store.records) == 1
        assert history_store.records[0].completed is True
        assert history_store.records[0].artist_name == "Queen"

    def test_wrong_guess(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "hard"], "Another Song\nn\n", history_store)

        assert result.exit_code == 0
        assert "Wrong." in result.output
        assert "Only Song" in result.output
        assert history_store.records[0].correct_guesses == 0

    def test_skipping_gives_up(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "hard"], "\n\n\n\n\nn\n", history_store)

        assert result.exit_code == 0
        assert "Out of attempts." in result.output
        assert history_store.records[0].rounds[0].was_skipped is True

    def test_quit_abandons_game(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "hard"], "q\n", history_store)

        assert result.exit_code == 0
        assert "Game abandoned" in result.output
        assert history_store.records[0].completed is False

    def test_end_of_input_saves_game(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "hard"], "Only Song\n", history_store)

        assert result.exit_code == 1
        assert "Aborted!" in result.output
        assert len(history_store.records) == 1
        assert history_store.records[0].completed is False
        assert history_store.records[0].correct_guesses == 1

    def test_no_songs(self, history_store: InMemoryHistoryStore) -> None:
        result = _play(["-d", "easy"], "", history_store, catalog=InMemorySongCatalog([make_song("x", "X", "hard")]))

        assert result.exit_code == 0
        assert "Could not start game" in result.output
        assert history_store.records == []


class TestHistoryCommands:
    """Tests for history, stats and clear-history."""

    def test_history(self, sample_records: list[GameRecord]) -> None:
        with patch("musiq.cli.main.get_history_store", return_value=InMemoryHistoryStore(sample_records)):
            runner = CliRunner()
            result = runner.invoke(cli, ["history"])

        assert result.exit_code == 0
        assert "Recent Games" in result.output
        assert "ABBA" in result.output

    def test_history_for_artist(self, sample_records: list[GameRecord]) -> None:
        with patch("musiq.cli.main.get_history_store", return_value=InMemoryHistoryStore(sample_records)):
            runner = CliRunner()
            result = runner.invoke(cli, ["history", "--artist", "artist_queen"])

        assert result.exit_code == 0
        assert "ABBA" not in result.output

    def test_history_empty(self) -> None:
        with patch("musiq.cli.main.get_history_store", return_value=InMemoryHistoryStore()):
            runner = CliRunner()
            result = runner.invoke(cli, ["history"])

        assert result.exit_code == 0
        assert "No games played yet" in result.output

    def test_stats(self, sample_records: list[GameRecord]) -> None:
        with patch("musiq.cli.main.get_history_store", return_value=InMemoryHistoryStore(sample_records)):
            runner = CliRunner()
            result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 0
        assert "Scoreboard" in result.output
        assert "Top Scores" in result.output
        assert "90" in result.output

    def test_clear_history(self, sample_records: list[GameRecord]) -> None:
        store = InMemoryHistoryStore(sample_records)
        with patch("musiq.cli.main.get_history_store", return_value=store):
            runner = CliRunner()
            result = runner.invoke(cli, ["clear-history", "--yes"])

        assert result.exit_code == 0
        assert "History cleared" in result.output
        assert store.records == []
