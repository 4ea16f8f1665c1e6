# chemrxn_rxnfile/stereo.py
"""Tetrahedral stereo centres built from MDL atom parities."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .types import (
    Atom,
    BondStereo,
    BondType,
    ReactionComponent,
    StereoCenter,
    StereoParity,
)

logger = logging.getLogger(__name__)

_WEDGE_STEREOS = frozenset(
    {BondStereo.SINGLE_UP, BondStereo.SINGLE_DOWN, BondStereo.SINGLE_EITHER}
)


def _ordered_neighbors(component: ReactionComponent, atom: Atom) -> List[Atom]:
    index = {id(a): i for i, a in enumerate(component.atoms)}
    return sorted(component.neighbors(atom), key=lambda a: index[id(a)])


def create_tetrahedral_stereo(
    component: ReactionComponent,
    atom: Atom,
    parity: StereoParity,
) -> Optional[StereoCenter]:
    """Build a tetrahedral stereo centre for ``atom``.

    MDL parities are defined over neighbours in ascending atom-number order
    with an implicit hydrogen counted last, so neighbours are sorted by their
    position in ``component.atoms`` and, for three-coordinate centres, the
    central atom fills the fourth slot.

    Args:
        component: Component holding the atom and its complete bond list.
        atom: Candidate stereogenic atom.
        parity: Parity read from the atom line.

    Returns:
        The stereo centre, or ``None`` when the atom does not have exactly
        three or four distinct neighbours.
    """
    neighbors = _ordered_neighbors(component, atom)
    if len({id(a) for a in neighbors}) != len(neighbors):
        return None
    if len(neighbors) == 3:
        neighbors.append(atom)
    if len(neighbors) != 4:
        return None
    return StereoCenter(
        central_atom=atom,
        neighbors=(neighbors[0], neighbors[1], neighbors[2], neighbors[3]),
        parity=parity,
    )


def guess_undefined_tetrahedral_stereo(
    component: ReactionComponent,
    skip_atoms: Iterable[Atom] = (),
) -> List[StereoCenter]:
    """Create UNDEFINED stereo centres from wedge bond information only.

    Every atom that starts a single bond drawn up, down or either, and that
    has no parity of its own, becomes a centre when it has three or four
    neighbours. The centres are appended to ``component.stereo_centers``.

    Returns:
        The centres that were added.
    """
    skipped = {id(a) for a in skip_atoms}
    added: List[StereoCenter] = []
    for bond in component.bonds:
        if bond.bond_type != BondType.SINGLE or bond.stereo not in _WEDGE_STEREOS:
            continue
        atom = bond.start
        if id(atom) in skipped or component.stereo_center_for(atom) is not None:
            continue
        center = create_tetrahedral_stereo(component, atom, StereoParity.UNDEFINED)
        if center is not None:
            component.stereo_centers.append(center)
            added.append(center)
        skipped.add(id(atom))
    if added:
        logger.debug("Guessed %d undefined tetrahedral stereo centres", len(added))
    return added
