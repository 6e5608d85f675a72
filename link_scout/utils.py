# File: link_scout/utils.py
"""link_scout.utils: seed loading and small helpers shared by the CLI and the runner."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Union

from link_scout.logger import logger

__all__: Sequence[str] = (
    "read_seed_file",
    "collect_seeds",
)


def read_seed_file(path: Union[str, Path]) -> List[str]:
    """Read a seed file: one address per line, blank lines skipped."""
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("Seed file not found: %s", p)
        raise FileNotFoundError(f"Seed file not found: {p}")
    seeds = [line.strip() for line in p.read_text(encoding="utf-8").splitlines() if line.strip()]
    logger.debug("Loaded %d seeds from %s", len(seeds), p)
    return seeds


def collect_seeds(urls: Iterable[str], input_file: Union[str, Path, None] = None) -> List[str]:
    """Command-line seeds first, then the ones read from *input_file*."""
    seeds = [u.strip() for u in urls if u.strip()]
    if input_file is not None:
        seeds.extend(read_seed_file(input_file))
    return seeds
