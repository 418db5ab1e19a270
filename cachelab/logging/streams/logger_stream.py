import asyncio
import datetime
import functools
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Any,
    Dict,
    TextIO,
    TypeVar,
)

import msgspec

from cachelab.logging.config.logging_config import LoggingConfig
from cachelab.logging.config.stream_type import StreamType
from cachelab.logging.models import Entry, Log

from .protocol import LoggerProtocol

T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"
DEFAULT_LOGFILE = "logs.json"

_STREAMS_DIRECTORY = os.path.dirname(os.path.abspath(__file__))


def parse_log_path(path: str | None) -> tuple[str | None, str | None]:
    """
    Split a log path into (filename, directory). A path without a suffix
    names a directory.
    """
    if not path:
        return None, None

    logfile_path = pathlib.Path(path)
    if logfile_path.suffix:
        return logfile_path.name, str(logfile_path.parent.absolute())

    return None, str(logfile_path.absolute())


class LoggerStream:
    """
    Writes the entries of one named logger.

    Entries without a file destination are formatted with a template and
    written to the stdout or stderr stream LoggingConfig selects. Entries
    with a filename or directory are appended to a JSON-lines file. Write
    failures are reported to stderr and never raised to the caller.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        self._name = name or "default"
        self.template = template
        self.filename = filename
        self.directory = directory

        self._config = LoggingConfig()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._cwd: str | None = None

        self._init_lock = asyncio.Lock()
        self._initialized = False

        self._stream_writers: Dict[StreamType, asyncio.StreamWriter] = {}
        self._files: Dict[str, io.BufferedWriter] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._scheduled: set[asyncio.Future] = set()

    @property
    def name(self) -> str:
        return self._name

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(
        self,
        stdout_writer: asyncio.StreamWriter | None = None,
        stderr_writer: asyncio.StreamWriter | None = None,
    ) -> None:
        async with self._init_lock:
            if self._initialized:
                return

            self._loop = asyncio.get_running_loop()
            self._cwd = await self._loop.run_in_executor(None, os.getcwd)

            if stdout_writer:
                self._stream_writers[StreamType.STDOUT] = stdout_writer

            if stderr_writer:
                self._stream_writers[StreamType.STDERR] = stderr_writer

            for stream_type, stream in (
                (StreamType.STDOUT, sys.stdout),
                (StreamType.STDERR, sys.stderr),
            ):
                if stream_type not in self._stream_writers:
                    writer = await self._connect_stream(stream)
                    if writer:
                        self._stream_writers[stream_type] = writer

            self._initialized = True

    async def _connect_stream(self, stream: TextIO) -> asyncio.StreamWriter | None:
        # Pipe transports only accept pipes, sockets and character devices.
        # Captured or file-redirected output falls back to executor writes.
        try:
            fileno = await self._loop.run_in_executor(None, stream.fileno)
            dup_fileno = await self._loop.run_in_executor(None, os.dup, fileno)

        except (AttributeError, OSError, ValueError, io.UnsupportedOperation):
            return None

        dup_stream = await self._loop.run_in_executor(
            None,
            functools.partial(
                os.fdopen,
                dup_fileno,
                mode="w",
            ),
        )

        try:
            transport, protocol = await self._loop.connect_write_pipe(
                lambda: LoggerProtocol(loop=self._loop),
                dup_stream,
            )

        except (OSError, ValueError):
            dup_stream.close()
            return None

        return asyncio.StreamWriter(
            transport,
            protocol,
            None,
            self._loop,
        )

    def schedule(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        task = asyncio.ensure_future(
            self.log(
                entry,
                template=template,
                path=path,
            )
        )

        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)

    async def log(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        if self._config.enabled(self._name, entry.level) is False:
            return

        if self._initialized is False:
            await self.initialize()

        filename, directory = parse_log_path(path)
        filename = filename or self.filename
        directory = directory or self.directory

        caller = self._caller_context()

        try:
            if filename or directory:
                await self._write_file(
                    entry,
                    caller,
                    filename or DEFAULT_LOGFILE,
                    directory=directory,
                )

            else:
                await self._write_console(
                    entry,
                    caller,
                    template or self.template or DEFAULT_TEMPLATE,
                )

        except Exception as err:
            await self._report_error(entry, err, caller)

    async def _write_console(
        self,
        entry: T,
        caller: Dict[str, Any],
        template: str,
    ) -> None:
        message = entry.to_template(template, context=caller) + "\n"
        output = self._config.output

        stream_writer = self._stream_writers.get(output)
        if stream_writer is None:
            await self._loop.run_in_executor(
                None,
                self._write_to_stream,
                output,
                message,
            )

        elif stream_writer.is_closing() is False:
            stream_writer.write(message.encode())
            await stream_writer.drain()

    def _write_to_stream(self, stream_type: StreamType, message: str) -> None:
        stream = sys.stdout if stream_type == StreamType.STDOUT else sys.stderr
        stream.write(message)
        stream.flush()

    async def _write_file(
        self,
        entry: T,
        caller: Dict[str, Any],
        filename: str,
        directory: str | None = None,
    ) -> None:
        logfile_path = self._to_logfile_path(filename, directory=directory)

        line = msgspec.json.encode(
            Log(
                logger=self._name,
                entry=entry,
                filename=caller["filename"],
                function_name=caller["function_name"],
                line_number=caller["line_number"],
                thread_id=caller["thread_id"],
                timestamp=caller["timestamp"],
            )
        )

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._append_to_file,
                logfile_path,
                line + b"\n",
            )

    def _append_to_file(self, logfile_path: str, line: bytes) -> None:
        logfile = self._files.get(logfile_path)
        if logfile is None or logfile.closed:
            pathlib.Path(logfile_path).parent.mkdir(parents=True, exist_ok=True)
            logfile = self._files[logfile_path] = open(logfile_path, mode="ab")

        logfile.write(line)
        logfile.flush()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ) -> str:
        if pathlib.Path(filename).suffix != ".json":
            raise ValueError(f"Err. - log file {filename} must be a .json file")

        if directory is None:
            directory = self._config.directory or os.path.join(self._cwd, "logs")

        return os.path.join(directory, filename)

    async def _report_error(
        self,
        entry: T,
        err: Exception,
        caller: Dict[str, Any],
    ) -> None:
        try:
            await self._loop.run_in_executor(
                None,
                self._write_to_stream,
                StreamType.STDERR,
                entry.to_template(
                    ERROR_TEMPLATE,
                    context={
                        **caller,
                        "error": str(err),
                    },
                ) + "\n",
            )

        except Exception:
            # Nowhere left to report to.
            pass

    def _caller_context(self) -> Dict[str, Any]:
        """
        Describe the first stack frame outside the logging streams: the
        component that asked for the entry to be logged.
        """
        frame = sys._getframe(1)
        while frame.f_back and os.path.dirname(frame.f_code.co_filename) == _STREAMS_DIRECTORY:
            frame = frame.f_back

        return {
            "filename": frame.f_code.co_filename,
            "function_name": frame.f_code.co_name,
            "line_number": frame.f_lineno,
            "thread_id": threading.get_native_id(),
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
        }

    async def flush(self) -> None:
        if self._scheduled:
            await asyncio.gather(*list(self._scheduled), return_exceptions=True)

        await asyncio.gather(
            *[
                writer.drain()
                for writer in self._stream_writers.values()
                if writer.is_closing() is False
            ],
            return_exceptions=True,
        )

    async def close(self) -> None:
        await self.flush()

        for logfile_path, file_lock in list(self._file_locks.items()):
            async with file_lock:
                logfile = self._files.pop(logfile_path, None)
                if logfile and logfile.closed is False:
                    await self._loop.run_in_executor(None, logfile.close)

        for writer in self._stream_writers.values():
            if writer.is_closing() is False:
                writer.close()

        self._stream_writers.clear()
        self._initialized = False
