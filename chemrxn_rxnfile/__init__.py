# chemrxn_rxnfile/__init__.py


__version__ = "0.1.0"

from .types import (
    Atom,
    Bond,
    BondStereo,
    BondType,
    Radical,
    Reaction,
    ReactionComponent,
    ReactionComponentRole,
    ReactionFileFormat,
    StereoCenter,
    StereoParity,
)
from .results import Err, Ok, ReactionFileError, ReadResult
from .fields import FieldFormatError
from .io import (
    ReactionReader,
    ReaderOptions,
    read_reaction,
    parse_reaction,
    ReactionWriter,
    WriterOptions,
    write_reaction,
    write_reaction_file,
    load_reaction_file,
    load_rxn,
    load_rdfile,
    load_auto,
    InputFormatError,
    register_input_format,
    get_input_format,
    load_reactions,
)
from .io import loader, loader_registry
from .convert import component_to_rdkit, reaction_to_smiles, reaction_to_dataframe

__all__ = [
    # types
    "Atom",
    "Bond",
    "BondStereo",
    "BondType",
    "Radical",
    "Reaction",
    "ReactionComponent",
    "ReactionComponentRole",
    "ReactionFileFormat",
    "StereoCenter",
    "StereoParity",
    # results
    "Ok",
    "Err",
    "ReadResult",
    "ReactionFileError",
    "FieldFormatError",
    # reader / writer
    "ReactionReader",
    "ReaderOptions",
    "read_reaction",
    "parse_reaction",
    "ReactionWriter",
    "WriterOptions",
    "write_reaction",
    "write_reaction_file",
    # loaders
    "load_reaction_file",
    "load_rxn",
    "load_rdfile",
    "load_auto",
    "InputFormatError",
    "register_input_format",
    "get_input_format",
    "load_reactions",
    # convert
    "component_to_rdkit",
    "reaction_to_smiles",
    "reaction_to_dataframe",
]
