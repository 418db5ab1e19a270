"""
Tests for LoggerStream and Logger.

Tests:
- Writing templated entries to injected stdout/stderr writers
- Level filtering and disabled loggers
- JSON-lines file output
- Writer failures never propagate
"""

import os

import msgspec
import pytest

from cachelab.logging import Entry, Logger, LoggerStream, LoggingConfig, LogLevel
from cachelab.logging.cachelab_logging_models import LoadError, TrackerInfo


@pytest.fixture
def logging_config() -> LoggingConfig:
    return LoggingConfig()


def reset_logging(config: LoggingConfig) -> None:
    config.update(log_level="info", log_output="stderr")
    config.enable("test")


class TestLoggerStreamOutput:
    """Test console output through injected writers."""

    @pytest.mark.asyncio
    async def test_writes_entry_to_stderr(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        stream = LoggerStream(name="test")
        await stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        await stream.log(sample_entry)

        mock_stderr_writer.write.assert_called_once()
        written = mock_stderr_writer.write.call_args[0][0].decode()

        assert "Test log message" in written
        assert "INFO" in written
        assert written.endswith("\n")
        mock_stdout_writer.write.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_template_uses_entry_fields(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
    ) -> None:
        stream = LoggerStream(name="test", template="{level} {window} {sample_count} {message}")
        await stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        await stream.log(
            TrackerInfo(message="started", window=5.0, sample_count=3),
        )

        written = mock_stderr_writer.write.call_args[0][0].decode()
        assert written == "INFO 5.0 3 started\n"

    @pytest.mark.asyncio
    async def test_stdout_output(
        self,
        logging_config: LoggingConfig,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logging_config.update(log_output="stdout")

        try:
            stream = LoggerStream(name="test")
            await stream.initialize(
                stdout_writer=mock_stdout_writer,
                stderr_writer=mock_stderr_writer,
            )

            await stream.log(sample_entry)

            mock_stdout_writer.write.assert_called_once()
            mock_stderr_writer.write.assert_not_called()

        finally:
            reset_logging(logging_config)

    @pytest.mark.asyncio
    async def test_writer_failure_does_not_raise(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        mock_stderr_writer.write.side_effect = OSError("broken pipe")

        stream = LoggerStream(name="test")
        await stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        await stream.log(sample_entry)

        mock_stderr_writer.write.assert_called_once()

    @pytest.mark.asyncio
    async def test_context_template_applies_to_stream(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logger = Logger()
        logger.context(name="test", template="{level}: {message}")
        await logger["test"].stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        await logger.log(sample_entry, name="test")

        written = mock_stderr_writer.write.call_args[0][0].decode()
        assert written == "INFO: Test log message\n"

        await logger.close()


class TestLoggerStreamFiltering:
    """Test level filtering and disabled loggers."""

    @pytest.mark.asyncio
    async def test_entries_below_level_are_dropped(
        self,
        logging_config: LoggingConfig,
        mock_stdout_writer,
        mock_stderr_writer,
    ) -> None:
        logging_config.update(log_level="error")

        try:
            stream = LoggerStream(name="test")
            await stream.initialize(
                stdout_writer=mock_stdout_writer,
                stderr_writer=mock_stderr_writer,
            )

            await stream.log(Entry(message="info", level=LogLevel.INFO))
            mock_stderr_writer.write.assert_not_called()

            await stream.log(LoadError(message="failed", frequency=1, tick=1.0))
            mock_stderr_writer.write.assert_called_once()

        finally:
            reset_logging(logging_config)

    @pytest.mark.asyncio
    async def test_disabled_logger_is_silent(
        self,
        logging_config: LoggingConfig,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logging_config.disable("test")

        try:
            stream = LoggerStream(name="test")
            await stream.initialize(
                stdout_writer=mock_stdout_writer,
                stderr_writer=mock_stderr_writer,
            )

            await stream.log(sample_entry)

            mock_stderr_writer.write.assert_not_called()

        finally:
            reset_logging(logging_config)

    def test_unknown_level_rejected(self, logging_config: LoggingConfig) -> None:
        with pytest.raises(ValueError):
            logging_config.update(log_level="verbose")


class TestLoggerStreamFiles:
    """Test JSON-lines file output."""

    @pytest.mark.asyncio
    async def test_writes_json_lines(
        self,
        temp_log_directory: str,
        mock_stdout_writer,
        mock_stderr_writer,
    ) -> None:
        stream = LoggerStream(name="test")
        await stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        logfile = os.path.join(temp_log_directory, "tracker.json")

        await stream.log(TrackerInfo(message="first", window=5.0, sample_count=0), path=logfile)
        await stream.log(TrackerInfo(message="second", window=5.0, sample_count=2), path=logfile)
        await stream.close()

        with open(logfile) as logs:
            lines = [msgspec.json.decode(line) for line in logs.read().splitlines()]

        assert [line["entry"]["message"] for line in lines] == ["first", "second"]
        assert lines[1]["entry"]["sample_count"] == 2
        assert lines[0]["entry"]["level"] == "INFO"
        assert lines[0]["logger"] == "test"
        assert "timestamp" in lines[0]

        mock_stderr_writer.write.assert_not_called()


class TestLogger:
    """Test named contexts and scheduled logging."""

    @pytest.mark.asyncio
    async def test_schedule_and_flush(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logger = Logger()
        await logger["test"].stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        logger.schedule(sample_entry, name="test")
        await logger.flush()

        mock_stderr_writer.write.assert_called_once()

        await logger.close()

    @pytest.mark.asyncio
    async def test_context_manager_yields_stream(
        self,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logger = Logger()
        logger.context(name="test", template="{message}")
        await logger["test"].stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        async with logger.context(name="test") as stream:
            await stream.log(sample_entry)

        written = mock_stderr_writer.write.call_args[0][0].decode()
        assert written == "Test log message\n"

        await logger.close()

    @pytest.mark.asyncio
    async def test_log_to_directory_uses_default_file(
        self,
        temp_log_directory: str,
        mock_stdout_writer,
        mock_stderr_writer,
        sample_entry: Entry,
    ) -> None:
        logger = Logger()
        await logger["files"].stream.initialize(
            stdout_writer=mock_stdout_writer,
            stderr_writer=mock_stderr_writer,
        )

        await logger.log(sample_entry, name="files", path=temp_log_directory)
        await logger.close()

        with open(os.path.join(temp_log_directory, "logs.json")) as logs:
            line = msgspec.json.decode(logs.readline())

        assert line["logger"] == "files"
        assert line["entry"]["message"] == "Test log message"


class TestLogLevel:
    def test_severity_ordering(self) -> None:
        assert LogLevel.TRACE.severity < LogLevel.DEBUG.severity < LogLevel.INFO.severity
        assert LogLevel.ERROR.severity < LogLevel.FATAL.severity

    def test_to_level(self) -> None:
        assert LogLevel.to_level("warn") == LogLevel.WARN
        assert LogLevel.to_level(LogLevel.ERROR) == LogLevel.ERROR
