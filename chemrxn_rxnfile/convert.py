# chemrxn_rxnfile/convert.py

from __future__ import annotations

import logging
from typing import List

import pandas as pd
from rdkit import Chem
from rdkit.Geometry import Point3D

from .elements import radical_electrons
from .types import BondType, Reaction, ReactionComponent

logger = logging.getLogger(__name__)

_RDKIT_BOND_TYPES = {
    BondType.SINGLE: Chem.BondType.SINGLE,
    BondType.DOUBLE: Chem.BondType.DOUBLE,
    BondType.TRIPLE: Chem.BondType.TRIPLE,
}

ATOM_COLUMNS = [
    "role",
    "component",
    "atom",
    "symbol",
    "x",
    "y",
    "z",
    "charge",
    "radical",
    "isotopic_mass",
    "implicit_hydrogens",
]

# ---------------------- RDKit ---------------------- #


def component_to_rdkit(component: ReactionComponent, sanitize: bool = False) -> Chem.Mol:
    """Build an RDKit molecule from a reaction component.

    Hydrogen counts are taken from ``Atom.implicit_hydrogens`` and fixed on
    the RDKit atoms, so RDKit does not re-derive them. Coordinates are stored
    as a single conformer.

    Args:
        component: Component to convert.
        sanitize: Run ``Chem.SanitizeMol`` on the result.

    Returns:
        The RDKit molecule.

    Raises:
        ValueError: If ``sanitize`` is True and RDKit rejects the structure.
    """
    rw = Chem.RWMol()
    index = {}
    for i, atom in enumerate(component.atoms):
        rd_atom = Chem.Atom(atom.symbol)
        rd_atom.SetFormalCharge(atom.charge)
        rd_atom.SetNumRadicalElectrons(radical_electrons(atom.radical))
        if atom.isotopic_mass:
            rd_atom.SetIsotope(atom.isotopic_mass)
        rd_atom.SetNoImplicit(True)
        rd_atom.SetNumExplicitHs(atom.implicit_hydrogens)
        rw.AddAtom(rd_atom)
        index[id(atom)] = i

    for bond in component.bonds:
        rw.AddBond(
            index[id(bond.start)],
            index[id(bond.end)],
            _RDKIT_BOND_TYPES.get(bond.bond_type, Chem.BondType.SINGLE),
        )

    mol = rw.GetMol()
    if component.atoms:
        conf = Chem.Conformer(len(component.atoms))
        for i, atom in enumerate(component.atoms):
            conf.SetAtomPosition(i, Point3D(atom.x, atom.y, atom.z))
        conf.Set3D(any(atom.z for atom in component.atoms))
        mol.AddConformer(conf, assignId=True)

    if sanitize:
        try:
            Chem.SanitizeMol(mol)
        except Exception as exc:
            logger.error("RDKit rejected %s component: %s", component.role.value, exc)
            raise ValueError(
                f"RDKit could not sanitize {component.role.value} component: {exc}"
            ) from exc
    return mol


def _role_smiles(components: List[ReactionComponent]) -> str:
    smiles = []
    for component in components:
        mol = component_to_rdkit(component, sanitize=True)
        text = Chem.MolToSmiles(mol)
        if text:
            smiles.append(text)
    return ".".join(smiles)


def reaction_to_smiles(reaction: Reaction) -> str:
    """Return a ``reagents>agents>products`` reaction SMILES.

    Raises:
        ValueError: If a component cannot be sanitized by RDKit.
    """
    return ">".join(
        [
            _role_smiles(reaction.reagents),
            _role_smiles(reaction.agents),
            _role_smiles(reaction.products),
        ]
    )


# ---------------------- pandas ---------------------- #


def reaction_to_dataframe(reaction: Reaction) -> pd.DataFrame:
    """Flatten the atoms of a reaction into a ``pandas.DataFrame``.

    Args:
        reaction: Reaction to flatten.

    Returns:
        DataFrame with one row per atom and the columns in ``ATOM_COLUMNS``.
        ``component`` and ``atom`` are 0-based indices within the role and
        the component respectively.
    """
    rows = []
    for role_components in (reaction.reagents, reaction.products, reaction.agents):
        for c_idx, component in enumerate(role_components):
            for a_idx, atom in enumerate(component.atoms):
                rows.append(
                    {
                        "role": component.role.value,
                        "component": c_idx,
                        "atom": a_idx,
                        "symbol": atom.symbol,
                        "x": atom.x,
                        "y": atom.y,
                        "z": atom.z,
                        "charge": atom.charge,
                        "radical": atom.radical.value,
                        "isotopic_mass": atom.isotopic_mass,
                        "implicit_hydrogens": atom.implicit_hydrogens,
                    }
                )
    return pd.DataFrame(rows, columns=ATOM_COLUMNS)
