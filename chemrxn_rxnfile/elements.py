# chemrxn_rxnfile/elements.py
"""Element lookups and implicit hydrogen inference backed by RDKit."""

from __future__ import annotations

import logging
from typing import Iterable

from rdkit import Chem, rdBase

from .types import Atom, BondType, Radical, ReactionComponent

logger = logging.getLogger(__name__)

_PERIODIC_TABLE = Chem.GetPeriodicTable()

# elements whose charged forms follow the isoelectronic neighbour's valence
_ORGANIC_SUBSET = frozenset({"B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I"})

_BOND_ORDER = {BondType.SINGLE: 1, BondType.DOUBLE: 2, BondType.TRIPLE: 3}

_RADICAL_ELECTRONS = {
    Radical.NONE: 0,
    Radical.SINGLET: 2,
    Radical.DOUBLET: 1,
    Radical.TRIPLET: 2,
}


def atomic_number(symbol: str) -> int:
    """Return the atomic number for an element symbol.

    Args:
        symbol: Case-sensitive element symbol such as ``"C"`` or ``"Cl"``.

    Returns:
        Atomic number, or -1 when the symbol is not a known element.
    """
    if not symbol:
        return -1
    # unknown symbols trip an RDKit precondition that logs a backtrace
    blocker = rdBase.BlockLogs()  # noqa: F841
    try:
        number = _PERIODIC_TABLE.GetAtomicNumber(symbol)
    except Exception:
        return -1
    return number if number > 0 else -1


def is_known_element(symbol: str) -> bool:
    return atomic_number(symbol) > 0


def radical_electrons(radical: Radical) -> int:
    """Number of unpaired/non-bonding electrons RDKit uses for ``radical``."""
    return _RADICAL_ELECTRONS.get(radical, 0)


def _valence_list(atom: Atom) -> Iterable[int]:
    number = atomic_number(atom.symbol)
    if number < 1:
        return ()
    if atom.charge and atom.symbol in _ORGANIC_SUBSET:
        shifted = number - atom.charge
        if shifted < 1:
            return ()
        number = shifted
    return [v for v in _PERIODIC_TABLE.GetValenceList(number) if v >= 0]


def implicit_hydrogen_count(component: ReactionComponent, atom: Atom) -> int:
    """Infer the implicit hydrogen count of ``atom``.

    The smallest default valence that accommodates the explicit bond orders
    plus the radical electrons is used. Elements without a default valence
    (most metals) get no implicit hydrogens.
    """
    used = radical_electrons(atom.radical)
    for bond in component.bonds:
        if bond.start is atom or bond.end is atom:
            used += _BOND_ORDER.get(bond.bond_type, 1)

    for valence in sorted(_valence_list(atom)):
        if valence >= used:
            return valence - used
    return 0


def set_implicit_hydrogens(component: ReactionComponent) -> None:
    """Populate ``Atom.implicit_hydrogens`` for every atom of ``component``."""
    for atom in component.atoms:
        atom.implicit_hydrogens = implicit_hydrogen_count(component, atom)
    logger.debug(
        "Implicit hydrogens set for %d atoms (total %d)",
        len(component.atoms),
        sum(a.implicit_hydrogens for a in component.atoms),
    )
