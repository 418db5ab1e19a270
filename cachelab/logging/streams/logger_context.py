from .logger_stream import LoggerStream, parse_log_path


class LoggerContext:
    """
    Holds the stream for one logger name. Entering initializes the stream;
    leaving flushes it unless the context is nested inside a longer-lived
    one.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        nested: bool = False,
    ) -> None:
        filename, directory = parse_log_path(path)

        self.name = name
        self.nested = nested
        self.stream = LoggerStream(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
        )

    def configure(
        self,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        if template:
            self.stream.template = template

        filename, directory = parse_log_path(path)

        if filename:
            self.stream.filename = filename

        if directory:
            self.stream.directory = directory

    async def __aenter__(self) -> LoggerStream:
        await self.stream.initialize()
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.nested is False:
            await self.stream.flush()
