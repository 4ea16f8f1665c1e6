# chemrxn_rxnfile/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ReactionFileFormat(str, Enum):
    """Reaction file variants understood by the reader and writer."""

    RXN = "rxn"  # bare $RXN block
    RD = "rd"  # $RDFILE header wrapping an RXN block, optional agents trailer
    AUTO = "auto"  # detect from the first line


class ReactionComponentRole(str, Enum):
    """Role of a molecule within a reaction."""

    REAGENT = "reagent"
    PRODUCT = "product"
    AGENT = "agent"  # catalyst, solvent, ...; only read from RDFile trailers


class Radical(str, Enum):
    NONE = "none"
    SINGLET = "singlet"
    DOUBLET = "doublet"
    TRIPLET = "triplet"


class StereoParity(str, Enum):
    ODD = "odd"
    EVEN = "even"
    UNKNOWN = "unknown"
    UNDEFINED = "undefined"  # guessed from wedge bonds only


class BondType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"


class BondStereo(str, Enum):
    NONE = "none"
    SINGLE_UP = "single_up"
    SINGLE_DOWN = "single_down"
    SINGLE_EITHER = "single_either"
    DOUBLE_EITHER = "double_either"


@dataclass
class Atom:
    """A single atom of a connection table.

    Attributes:
        symbol: Element symbol as written in the atom block.
        x: X coordinate.
        y: Y coordinate.
        z: Z coordinate (0 for 2D structures).
        charge: Formal charge.
        radical: Radical state.
        isotopic_mass: Absolute mass number, or ``None`` for natural abundance.
        implicit_hydrogens: Implicit hydrogen count inferred after parsing.
    """

    symbol: str
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    charge: int = 0
    radical: Radical = Radical.NONE
    isotopic_mass: Optional[int] = None
    implicit_hydrogens: int = field(default=0, compare=False)


@dataclass
class Bond:
    """A bond between two atoms of the same component.

    ``start`` and ``end`` keep the order of the bond line; wedge
    stereo is interpreted from ``start``.
    """

    start: Atom
    end: Atom
    bond_type: BondType = BondType.SINGLE
    stereo: BondStereo = BondStereo.NONE


@dataclass
class StereoCenter:
    """Tetrahedral stereo descriptor.

    Attributes:
        central_atom: The stereogenic atom.
        neighbors: Four surrounding atoms in ascending atom-index order. When
            the centre has only three explicit neighbours the central atom
            itself takes the last slot (implicit hydrogen or lone pair).
        parity: Parity of the neighbour arrangement.
    """

    central_atom: Atom
    neighbors: Tuple[Atom, Atom, Atom, Atom]
    parity: StereoParity


@dataclass
class ReactionComponent:
    """One molecule of a reaction together with its role."""

    role: ReactionComponentRole
    atoms: List[Atom] = field(default_factory=list)
    bonds: List[Bond] = field(default_factory=list)
    stereo_centers: List[StereoCenter] = field(default_factory=list)

    # molfile header lines; informational only
    name: str = field(default="", compare=False)
    program: str = field(default="", compare=False)
    comment: str = field(default="", compare=False)

    def atom_index(self, atom: Atom) -> int:
        """Return the 0-based position of ``atom`` (matched by identity).

        Raises:
            ValueError: If the atom does not belong to this component.
        """
        for idx, candidate in enumerate(self.atoms):
            if candidate is atom:
                return idx
        raise ValueError(f"Atom {atom.symbol!r} is not part of this component.")

    def neighbors(self, atom: Atom) -> List[Atom]:
        """Return atoms bonded to ``atom`` in bond-list order."""
        result: List[Atom] = []
        for bond in self.bonds:
            if bond.start is atom:
                result.append(bond.end)
            elif bond.end is atom:
                result.append(bond.start)
        return result

    def stereo_center_for(self, atom: Atom) -> Optional[StereoCenter]:
        for center in self.stereo_centers:
            if center.central_atom is atom:
                return center
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation.

        Bonds and stereo centres reference atoms by 0-based index.
        """
        index = {id(atom): i for i, atom in enumerate(self.atoms)}
        return {
            "role": self.role.value,
            "name": self.name,
            "program": self.program,
            "comment": self.comment,
            "atoms": [
                {
                    "symbol": atom.symbol,
                    "x": atom.x,
                    "y": atom.y,
                    "z": atom.z,
                    "charge": atom.charge,
                    "radical": atom.radical.value,
                    "isotopic_mass": atom.isotopic_mass,
                    "implicit_hydrogens": atom.implicit_hydrogens,
                }
                for atom in self.atoms
            ],
            "bonds": [
                {
                    "start": index[id(bond.start)],
                    "end": index[id(bond.end)],
                    "bond_type": bond.bond_type.value,
                    "stereo": bond.stereo.value,
                }
                for bond in self.bonds
            ],
            "stereo_centers": [
                {
                    "central_atom": index[id(center.central_atom)],
                    "neighbors": [index[id(a)] for a in center.neighbors],
                    "parity": center.parity.value,
                }
                for center in self.stereo_centers
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReactionComponent":
        """Construct a component from the payload produced by ``to_dict``."""
        atoms = [
            Atom(
                symbol=entry["symbol"],
                x=float(entry.get("x", 0.0)),
                y=float(entry.get("y", 0.0)),
                z=float(entry.get("z", 0.0)),
                charge=int(entry.get("charge", 0)),
                radical=Radical(entry.get("radical", Radical.NONE.value)),
                isotopic_mass=entry.get("isotopic_mass"),
                implicit_hydrogens=int(entry.get("implicit_hydrogens", 0)),
            )
            for entry in data.get("atoms", [])
        ]
        bonds = [
            Bond(
                start=atoms[entry["start"]],
                end=atoms[entry["end"]],
                bond_type=BondType(entry.get("bond_type", BondType.SINGLE.value)),
                stereo=BondStereo(entry.get("stereo", BondStereo.NONE.value)),
            )
            for entry in data.get("bonds", [])
        ]
        centers = [
            StereoCenter(
                central_atom=atoms[entry["central_atom"]],
                neighbors=tuple(atoms[i] for i in entry["neighbors"]),  # type: ignore[arg-type]
                parity=StereoParity(entry["parity"]),
            )
            for entry in data.get("stereo_centers", [])
        ]
        return cls(
            role=ReactionComponentRole(data["role"]),
            atoms=atoms,
            bonds=bonds,
            stereo_centers=centers,
            name=data.get("name", ""),
            program=data.get("program", ""),
            comment=data.get("comment", ""),
        )


@dataclass
class Reaction:
    """A reaction read from or written to an RXN/RDFile document.

    Attributes:
        components: Components in declaration order (reagents, then
            products, then agents when read from a file).
        name: Reaction name (RXN header line 2).
        program: User/program/date line (RXN header line 3).
        comment: Comment line (RXN header line 4).
    """

    components: List[ReactionComponent] = field(default_factory=list)

    name: str = field(default="", compare=False)
    program: str = field(default="", compare=False)
    comment: str = field(default="", compare=False)

    def add_component(self, component: ReactionComponent) -> None:
        self.components.append(component)

    def _with_role(self, role: ReactionComponentRole) -> List[ReactionComponent]:
        return [c for c in self.components if c.role == role]

    @property
    def reagents(self) -> List[ReactionComponent]:
        return self._with_role(ReactionComponentRole.REAGENT)

    @property
    def products(self) -> List[ReactionComponent]:
        return self._with_role(ReactionComponentRole.PRODUCT)

    @property
    def agents(self) -> List[ReactionComponent]:
        return self._with_role(ReactionComponentRole.AGENT)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain-Python representation that is JSON serializable."""
        return {
            "name": self.name,
            "program": self.program,
            "comment": self.comment,
            "components": [c.to_dict() for c in self.components],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reaction":
        """Construct a ``Reaction`` from a dictionary payload.

        Args:
            data: Mapping produced by ``to_dict``.

        Returns:
            A populated ``Reaction`` instance.
        """
        return cls(
            components=[
                ReactionComponent.from_dict(entry)
                for entry in data.get("components", []) or []
            ],
            name=data.get("name", ""),
            program=data.get("program", ""),
            comment=data.get("comment", ""),
        )
