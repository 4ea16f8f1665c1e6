# chemrxn_rxnfile/io/__init__.py
"""Readers, writers, file loaders and the input format registry."""

from . import loader, loader_registry
from .loader import load_auto, load_rdfile, load_reaction_file, load_rxn
from .loader_registry import (
    InputFormatError,
    get_input_format,
    load_reactions,
    register_input_format,
)
from .reader import (
    ReactionReader,
    ReaderOptions,
    parse_reaction,
    read_reaction,
)
from .writer import (
    ReactionWriter,
    WriterOptions,
    write_reaction,
    write_reaction_file,
)

__all__ = [
    "loader",
    "loader_registry",
    "ReactionReader",
    "ReaderOptions",
    "read_reaction",
    "parse_reaction",
    "ReactionWriter",
    "WriterOptions",
    "write_reaction",
    "write_reaction_file",
    "load_reaction_file",
    "load_rxn",
    "load_rdfile",
    "load_auto",
    "InputFormatError",
    "register_input_format",
    "get_input_format",
    "load_reactions",
]
