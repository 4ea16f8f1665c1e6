# chemrxn_rxnfile/io/loader.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Union

from tqdm import tqdm

from ..results import ReactionFileError, ReadResult
from ..types import Reaction, ReactionFileFormat
from .reader import ReactionReader, ReaderOptions

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_reaction_file(
    path: PathLike,
    fmt: Union[ReactionFileFormat, str] = ReactionFileFormat.AUTO,
    **options,
) -> ReadResult:
    """Read a single ``.rxn`` or ``.rdf`` file.

    Args:
        path: Path to the reaction file.
        fmt: Expected format (``"rxn"``, ``"rd"`` or ``"auto"``).
        **options: Further ``ReaderOptions`` fields.

    Returns:
        ``Ok`` with the reaction or ``Err`` with the diagnostics.
    """
    reader = ReactionReader(ReaderOptions(fmt=fmt, **options))
    logger.info("Loading reaction file %s (format=%s)", path, reader.options.fmt.value)
    with open(path, "r", encoding="utf-8") as fh:
        return reader.read(fh)


def _load_many(
    source: Union[PathLike, Sequence[PathLike]],
    fmt: ReactionFileFormat,
    strict: bool = False,
    progress: bool = False,
    **options,
) -> List[Reaction]:
    """Load one or more reaction files of a given format.

    Args:
        source: A path or a sequence of paths.
        fmt: Format passed to the reader.
        strict: Raise on the first file that fails instead of skipping it.
        progress: Show a ``tqdm`` progress bar.
        **options: Further ``ReaderOptions`` fields.

    Returns:
        Reactions of the files that were read successfully, in input order.

    Raises:
        ReactionFileError: If ``strict`` is True and a file cannot be read.
    """
    paths = [source] if isinstance(source, (str, Path)) else list(source)
    reactions: List[Reaction] = []
    skipped = 0

    for path in tqdm(paths, desc="Reading reactions", disable=not progress):
        result = load_reaction_file(path, fmt=fmt, **options)
        if result.is_ok:
            reactions.append(result.reaction)
            continue
        if strict:
            raise ReactionFileError(
                result.errors, f"Failed to read reaction file {path}: {result.errors[0]}"
            )
        skipped += 1
        logger.warning(
            "Skipping %s: %d errors (first: %s)",
            path,
            len(result.errors),
            result.errors[0],
        )

    logger.info(
        "Loaded %d reactions from %d files (%d skipped)",
        len(reactions),
        len(paths),
        skipped,
    )
    return reactions


def load_rxn(
    source: Union[PathLike, Sequence[PathLike]],
    strict: bool = False,
    progress: bool = False,
    **options,
) -> List[Reaction]:
    """Load MDL ``.rxn`` files.

    Args:
        source: Path or sequence of paths.
        strict: Raise ``ReactionFileError`` instead of skipping failed files.
        progress: Show a progress bar over the files.
        **options: Further ``ReaderOptions`` fields.

    Returns:
        Parsed reactions.
    """
    return _load_many(
        source, ReactionFileFormat.RXN, strict=strict, progress=progress, **options
    )


def load_rdfile(
    source: Union[PathLike, Sequence[PathLike]],
    strict: bool = False,
    progress: bool = False,
    **options,
) -> List[Reaction]:
    """Load RDFiles, including agents from their ``$DATUM $MFMT`` records."""
    return _load_many(
        source, ReactionFileFormat.RD, strict=strict, progress=progress, **options
    )


def load_auto(
    source: Union[PathLike, Sequence[PathLike]],
    strict: bool = False,
    progress: bool = False,
    **options,
) -> List[Reaction]:
    """Load reaction files, detecting RXN or RDFile per file."""
    return _load_many(
        source, ReactionFileFormat.AUTO, strict=strict, progress=progress, **options
    )
