"""Output of discovered addresses: one per line, to a file or to stdout."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Optional, Union

import click

from link_scout.errors import OutputError
from link_scout.logger import logger


class OutputWriter:
    """Writes addresses to *path*, or echoes them to stdout when *path* is None."""

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path is not None else None
        self.count = 0
        self._fh: Optional[IO[str]] = None

    def __enter__(self) -> OutputWriter:
        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._fh = self.path.open("w", encoding="utf-8")
            except OSError as exc:
                raise OutputError(f"Cannot create output file {self.path}: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, url: str) -> None:
        if self._fh is not None:
            self._fh.write(url)
            self._fh.write("\n")
        else:
            click.echo(url)
        self.count += 1

    def close(self) -> None:
        if self._fh is not None:
            self._fh.flush()
            self._fh.close()
            self._fh = None
            logger.info("Wrote %d addresses to %s", self.count, self.path)


__all__ = ["OutputWriter"]
