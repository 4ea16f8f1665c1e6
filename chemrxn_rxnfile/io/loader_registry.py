# chemrxn_rxnfile/io/loader_registry.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Protocol,
    Sequence,
    Union,
    overload,
    runtime_checkable,
)

from ..types import Reaction

logger = logging.getLogger(__name__)


@runtime_checkable
class InputLoader(Protocol):
    def __call__(self, source: Any, /, **kwargs: Any) -> Iterable[Reaction]:
        """Load reactions from a source into an iterable of Reactions.

        Args:
            source: Data source, typically a path or a list of paths.
            **kwargs: Additional loader-specific options (e.g., ``strict``,
                ``progress`` or reader options).

        Returns:
            Iterable of ``Reaction`` instances.
        """
        ...


_INPUT_FORMAT_REGISTRY: Dict[str, InputLoader] = {}


class InputFormatError(ValueError):
    """Error raised when registering or retrieving an input format fails."""

    pass


def register_input_format(
    name: str,
    loader: InputLoader,
    *,
    overwrite: bool = False,
) -> None:
    """Register a new input format.

    Args:
        name: Input format name (e.g., ``"rxn"``, ``"rd"``). Prefer lowercase
            with underscores.
        loader: Callable with signature ``loader(source, **kwargs)`` returning
            an iterable of ``Reaction`` instances.
        overwrite: When True, replace any existing loader registered under the
            same name.

    Raises:
        InputFormatError: If the name already exists and ``overwrite`` is False
            or the loader does not satisfy the protocol.
    """
    key = name.strip().lower()
    if not key:
        raise InputFormatError("Input format name must be a non-empty string.")

    if key in _INPUT_FORMAT_REGISTRY and not overwrite:
        raise InputFormatError(
            f"Input format '{key}' already exists. Use overwrite=True to replace it."
        )

    if not isinstance(loader, InputLoader):
        raise InputFormatError(
            f"Loader for format '{key}' does not match InputLoader protocol. "
            f"Expected callable(source, **kwargs) -> Iterable[Reaction]."
        )

    _INPUT_FORMAT_REGISTRY[key] = loader
    logger.debug("Registered input format '%s' (overwrite=%s)", key, overwrite)


def get_input_format(name: str) -> InputLoader:
    """Retrieve the loader registered for the given name.

    Raises:
        InputFormatError: If the format is not registered.
    """
    key = name.strip().lower()
    try:
        return _INPUT_FORMAT_REGISTRY[key]
    except KeyError:
        available = ", ".join(sorted(_INPUT_FORMAT_REGISTRY.keys())) or "<none>"
        raise InputFormatError(
            f"Unknown input format '{key}'. Available formats: {available}"
        ) from None


@overload
def load_reactions(
    source: Union[str, Path, Sequence[Union[str, Path]]],
    *,
    fmt: Literal["rxn", "rd", "auto"],
    strict: bool = False,
    progress: bool = False,
    require_m_end: bool = False,
    guess_tetrahedral_from_bonds: bool = False,
    infer_implicit_hydrogens: bool = True,
) -> List[Reaction]: ...


@overload
def load_reactions(
    source: Any,
    *,
    fmt: str,
    **kwargs: Any,
) -> List[Reaction]: ...


def load_reactions(
    source: Any,
    *,
    fmt: str,
    **kwargs: Any,
) -> List[Reaction]:
    """Load reactions using a registered format loader.

    Args:
        source: Path or list of paths.
        fmt: Registered input format name (``"rxn"``, ``"rd"``, ``"auto"``).
        **kwargs: Extra arguments forwarded to the selected loader.

    Returns:
        List of ``Reaction`` instances produced by the loader.
    """
    logger.info("Loading reactions using format '%s'", fmt)
    loader = get_input_format(fmt)
    return list(loader(source, **kwargs))


def _register_builtin_formats() -> None:
    """Register built-in input formats on import."""
    from .loader import load_auto, load_rdfile, load_rxn

    register_input_format("rxn", load_rxn, overwrite=True)
    register_input_format("rd", load_rdfile, overwrite=True)
    register_input_format("auto", load_auto, overwrite=True)


_register_builtin_formats()
