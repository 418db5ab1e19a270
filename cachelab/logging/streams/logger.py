from __future__ import annotations

import asyncio
from typing import Dict, TypeVar

from cachelab.logging.models import Entry

from .logger_context import LoggerContext

T = TypeVar('T', bound=Entry)


class Logger:
    """
    Named logger streams shared by the components of one session.

    Each name gets its own LoggerStream, created on first use. Streams
    write to the console unless given a log file path.
    """

    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}
        self._scheduled: set[asyncio.Future] = set()

    def __getitem__(self, name: str) -> LoggerContext:
        return self.context(name=name)

    def context(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        nested: bool = False,
    ) -> LoggerContext:
        if name is None:
            name = 'default'

        context = self._contexts.get(name)
        if context is None:
            context = self._contexts[name] = LoggerContext(name=name)

        context.configure(template=template, path=path)
        context.nested = nested

        return context

    async def log(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        async with self.context(name=name, nested=True) as stream:
            await stream.log(
                entry,
                template=template,
                path=path,
            )

    def schedule(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        """Log without waiting. flush() and close() wait for scheduled entries."""
        task = asyncio.ensure_future(
            self.log(
                entry,
                name=name,
                template=template,
                path=path,
            )
        )

        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)

    async def flush(self) -> None:
        if self._scheduled:
            await asyncio.gather(*list(self._scheduled), return_exceptions=True)

        await asyncio.gather(*[
            context.stream.flush() for context in self._contexts.values()
            if context.stream.initialized
        ])

    async def close(self) -> None:
        if self._scheduled:
            await asyncio.gather(*list(self._scheduled), return_exceptions=True)

        await asyncio.gather(*[
            context.stream.close() for context in self._contexts.values()
            if context.stream.initialized
        ])
