"""Tests for the interactive command dispatcher."""

import io
from datetime import date

import pytest  # type: ignore[import-not-found]
from rich.console import Console  # type: ignore[import-not-found]

from time_ledger.analysis.reports import ReportAggregator, cutoff_timestamp
from time_ledger.cli.dispatcher import CommandDispatcher, parse_command, parse_since
from time_ledger.core.models import TimeEntry
from time_ledger.core.storage import TimeLogStore
from time_ledger.core.tracker import TimeTracker


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def dispatcher(
    tracker: TimeTracker, reports: ReportAggregator, console: Console
) -> CommandDispatcher:
    return CommandDispatcher(tracker, reports, console=console)


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


class TestParseCommand:
    """Test line parsing."""

    def test_action_and_args(self) -> None:
        command = parse_command("report alpha since 2025-01-01")

        assert command.action == "report"
        assert command.args == ["alpha", "since", "2025-01-01"]
        assert command.project == "alpha"

    def test_extra_whitespace(self) -> None:
        command = parse_command("  start    alpha  ")

        assert command.action == "start"
        assert command.args == ["alpha"]

    def test_blank_line(self) -> None:
        command = parse_command("   ")

        assert command.action == ""
        assert command.project is None

    def test_parse_since(self) -> None:
        assert parse_since(["alpha"]) is None
        assert parse_since(["alpha", "since", "2025-01-01"]) == "2025-01-01"
        assert parse_since(["alpha", "until", "2025-01-01"]) is None

    def test_parse_since_without_date_means_no_filter(self) -> None:
        assert parse_since(["alpha", "since"]) is None


class TestDispatch:
    """Test command routing."""

    def test_start(self, dispatcher: CommandDispatcher, console: Console, store: TimeLogStore) -> None:
        assert dispatcher.dispatch("start alpha") is True

        assert 'Started tracking "alpha" at' in output_of(console)
        assert len(store.load()) == 1

    def test_stop_shows_duration(
        self, dispatcher: CommandDispatcher, console: Console, clock
    ) -> None:
        dispatcher.dispatch("start alpha")
        clock.advance(3661)

        dispatcher.dispatch("stop alpha")

        output = output_of(console)
        assert 'Stopped tracking "alpha".' in output
        assert "1h 1m (3661s)" in output

    def test_report_on_empty_log(self, dispatcher: CommandDispatcher, console: Console) -> None:
        assert dispatcher.dispatch("report alpha") is True

        output = output_of(console)
        assert 'Report for "alpha"' in output
        assert "Total Sessions: 0" in output
        assert "Total Time:     0h 0m" in output
        assert "Filtering" not in output

    def test_report_with_since_prints_filter_notice(
        self, dispatcher: CommandDispatcher, console: Console, store: TimeLogStore
    ) -> None:
        cutoff = cutoff_timestamp(date(2025, 1, 1))
        store.save(
            [
                TimeEntry(project="alpha", start=cutoff - 100, end=cutoff),
                TimeEntry(project="alpha", start=cutoff + 100, end=cutoff + 3700),
            ]
        )

        dispatcher.dispatch("report alpha since 2025-01-01")

        output = output_of(console)
        assert "> Filtering: Showing logs after 2025-01-01" in output
        assert "Total Sessions: 1" in output
        assert "Total Time:     1h 0m" in output

    def test_report_with_invalid_date(
        self, dispatcher: CommandDispatcher, console: Console
    ) -> None:
        assert dispatcher.dispatch("report alpha since tomorrow") is True

        output = output_of(console)
        assert "Error:" in output
        assert "YYYY-MM-DD" in output
        assert "Report for" not in output

    def test_stop_without_session_prints_error(
        self, dispatcher: CommandDispatcher, console: Console, data_file
    ) -> None:
        assert dispatcher.dispatch("stop alpha") is True

        assert 'Error: No active timer found for "alpha".' in output_of(console)
        assert not data_file.exists()

    @pytest.mark.parametrize("line", ["start", "stop", "report"])
    def test_missing_project_prints_error(
        self, dispatcher: CommandDispatcher, console: Console, line: str
    ) -> None:
        assert dispatcher.dispatch(line) is True

        assert "Error: Please provide a project name." in output_of(console)

    def test_unknown_command(self, dispatcher: CommandDispatcher, console: Console) -> None:
        assert dispatcher.dispatch("dance alpha") is True

        assert 'Unknown command. Try "start [project]"' in output_of(console)

    def test_blank_line_is_unknown(self, dispatcher: CommandDispatcher, console: Console) -> None:
        assert dispatcher.dispatch("") is True

        assert "Unknown command" in output_of(console)

    def test_exit(self, dispatcher: CommandDispatcher, console: Console) -> None:
        assert dispatcher.dispatch("exit") is False

        assert "Goodbye!" in output_of(console)

    def test_corrupt_log_is_reported_and_loop_continues(
        self, dispatcher: CommandDispatcher, console: Console, data_file
    ) -> None:
        data_file.write_text("{broken")

        assert dispatcher.dispatch("start alpha") is True

        assert "corrupted" in output_of(console)
        assert data_file.read_text() == "{broken"

    def test_undecodable_log_is_reported_and_loop_continues(
        self, dispatcher: CommandDispatcher, console: Console, data_file
    ) -> None:
        data_file.write_bytes(b"\xff\xfe garbage")

        assert dispatcher.dispatch("start alpha") is True
        assert dispatcher.dispatch("report alpha") is True

        assert output_of(console).count("corrupted") == 2
        assert data_file.read_bytes() == b"\xff\xfe garbage"

    def test_report_since_without_date_is_unfiltered(
        self, dispatcher: CommandDispatcher, console: Console, store: TimeLogStore
    ) -> None:
        store.save([TimeEntry(project="alpha", start=1000, end=1600)])

        assert dispatcher.dispatch("report alpha since") is True

        output = output_of(console)
        assert "Error" not in output
        assert "Filtering" not in output
        assert "Total Sessions: 1" in output
        assert "Total Time:     0h 10m" in output

    def test_status(self, dispatcher: CommandDispatcher, console: Console) -> None:
        dispatcher.dispatch("start alpha")

        dispatcher.dispatch("status")

        assert "Running Sessions (1)" in output_of(console)

    def test_project_with_markup_is_printed_literally(
        self, dispatcher: CommandDispatcher, console: Console
    ) -> None:
        dispatcher.dispatch("start [bold]x")

        assert 'Started tracking "[bold]x"' in output_of(console)


class TestRunLoop:
    """Test the read-eval loop."""

    def test_runs_until_exit(
        self, dispatcher: CommandDispatcher, console: Console, store: TimeLogStore, clock
    ) -> None:
        lines = iter(["start alpha", "bogus", "stop alpha", "exit", "start never"])
        prompts = []

        def read_line(prompt: str) -> str:
            prompts.append(prompt)
            return next(lines)

        dispatcher.run(read_line, prompt="> ")

        assert prompts == ["> "] * 4
        assert [e.project for e in store.load()] == ["alpha"]
        assert output_of(console).rstrip().endswith("Goodbye!")

    def test_stops_at_end_of_input(
        self, dispatcher: CommandDispatcher, console: Console
    ) -> None:
        def read_line(prompt: str) -> str:
            raise EOFError

        dispatcher.run(read_line)

        assert "Goodbye!" in output_of(console)

    def test_duplicate_start_scenario(
        self, dispatcher: CommandDispatcher, store: TimeLogStore, clock
    ) -> None:
        lines = iter(["start foo", "start foo", "stop foo", "exit"])

        dispatcher.run(lambda prompt: next(lines))

        first, second = store.load()
        assert first.is_running is False
        assert second.is_running is True
