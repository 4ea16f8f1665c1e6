# chemrxn_rxnfile/io/writer.py
"""Serialize :class:`Reaction` objects as MDL RXN or RDFile text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .. import codes
from ..fields import encode_decimal, encode_int, encode_string
from ..types import Atom, Reaction, ReactionComponent, ReactionFileFormat

logger = logging.getLogger(__name__)

CTAB_LINE_COUNT = "999"
CTAB_VERSION = " V2000"
MOL_END = "M  END"
MAX_PROPERTY_PAIRS = 8
MAX_PROPERTY_CHARGE = 15

_SUFFIX_FORMATS = {
    "rxn": ReactionFileFormat.RXN,
    "rdf": ReactionFileFormat.RD,
    "rd": ReactionFileFormat.RD,
}


@dataclass(frozen=True)
class WriterOptions:
    """Configuration for :class:`ReactionWriter`.

    Attributes:
        fmt: ``RD`` and ``AUTO`` write the RDFile header before the RXN block;
            ``RXN`` writes the bare RXN block.
        program: Program tag written into the header lines.
        write_charge_lines: Emit ``M  CHG`` lines for atoms charged within
            -15..15; other charges are left out.
        write_isotope_lines: Emit ``M  ISO`` lines for atoms with a positive
            isotopic mass.
        line_ending: Line terminator.
    """

    fmt: ReactionFileFormat = ReactionFileFormat.RD
    program: str = "CHEMRXN"
    write_charge_lines: bool = False
    write_isotope_lines: bool = False
    line_ending: str = "\n"

    def __post_init__(self) -> None:
        if not isinstance(self.fmt, ReactionFileFormat):
            object.__setattr__(
                self, "fmt", ReactionFileFormat(str(self.fmt).strip().lower())
            )


class _TextBuilder:
    """Per-call output buffer."""

    def __init__(self, line_ending: str):
        self._line_ending = line_ending
        self._lines: List[str] = []

    def add(self, line: str) -> None:
        self._lines.append(line)

    def text(self) -> str:
        return "".join(line + self._line_ending for line in self._lines)


def _property_lines(tag: str, pairs: Sequence[Tuple[int, int]]) -> List[str]:
    """Build ``M  XXXnn8 aaa vvv ...`` lines with at most 8 pairs each."""
    lines = []
    for offset in range(0, len(pairs), MAX_PROPERTY_PAIRS):
        chunk = pairs[offset : offset + MAX_PROPERTY_PAIRS]
        body = "".join(encode_int(a, 4) + encode_int(v, 4) for a, v in chunk)
        lines.append(f"M  {tag}" + encode_int(len(chunk), 3) + body)
    return lines


class ReactionWriter:
    """Writes reagents and products of a reaction as RXN or RDFile text.

    Agents are not written. Values that do not fit their columns are written
    as ``0`` instead of raising.
    """

    def __init__(self, options: Optional[WriterOptions] = None, **kwargs):
        base = options or WriterOptions()
        self.options = replace(base, **kwargs) if kwargs else base

    def write(self, reaction: Reaction) -> str:
        """Return the file text for ``reaction``.

        Args:
            reaction: Reaction to serialize.

        Returns:
            RXN or RDFile text, each line terminated by ``line_ending``.
        """
        out = _TextBuilder(self.options.line_ending)
        program = self.options.program
        reagents = reaction.reagents
        products = reaction.products
        agents = reaction.agents
        if agents:
            logger.warning(
                "Reaction has %d agents; agents are not written to %s output",
                len(agents),
                self.options.fmt.value,
            )

        if self.options.fmt in (ReactionFileFormat.RD, ReactionFileFormat.AUTO):
            out.add("$RDFILE 1")
            out.add(f"$DATM    {program}")
            out.add("$RFMT")

        out.add("$RXN")
        out.add(reaction.name or "Reaction 1")
        out.add(reaction.program or f"      {program}")
        out.add(reaction.comment)
        out.add(encode_int(len(reagents), 3) + encode_int(len(products), 3))

        for i, component in enumerate(reagents):
            self._add_component(out, component, f"Reagent {i + 1}")
        for i, component in enumerate(products):
            self._add_component(out, component, f"Product {i + 1}")

        logger.debug(
            "Wrote %d reagents and %d products", len(reagents), len(products)
        )
        return out.text()

    def _add_component(
        self, out: _TextBuilder, component: ReactionComponent, default_name: str
    ) -> None:
        out.add("$MOL")
        out.add(component.name or default_name)
        out.add(component.program or f"  {self.options.program}")
        out.add(component.comment)

        # aaabbblllfffcccsssxxxrrrpppiiimmmvvvvvv
        out.add(
            encode_int(len(component.atoms), 3)
            + encode_int(len(component.bonds), 3)
            + "  0"  # lll
            + "  0"  # fff
            + encode_int(len(component.stereo_centers), 3)
            + "  0" * 5  # sssxxxrrrpppiii
            + CTAB_LINE_COUNT
            + CTAB_VERSION
        )

        index: Dict[int, int] = {id(atom): i for i, atom in enumerate(component.atoms)}
        for atom in component.atoms:
            out.add(self._atom_line(component, atom))
        for bond in component.bonds:
            # 111222tttsssxxxrrrccc
            out.add(
                encode_int(index.get(id(bond.start), -1) + 1, 3)
                + encode_int(index.get(id(bond.end), -1) + 1, 3)
                + encode_int(codes.code_from_bond_type(bond.bond_type), 3)
                + encode_int(codes.code_from_bond_stereo(bond.stereo), 3)
                + "  0" * 3
            )

        if self.options.write_charge_lines:
            pairs = [
                (i + 1, a.charge)
                for i, a in enumerate(component.atoms)
                if a.charge and abs(a.charge) <= MAX_PROPERTY_CHARGE
            ]
            for line in _property_lines("CHG", pairs):
                out.add(line)
        if self.options.write_isotope_lines:
            pairs = [
                (i + 1, a.isotopic_mass)
                for i, a in enumerate(component.atoms)
                if a.isotopic_mass is not None and a.isotopic_mass >= 1
            ]
            for line in _property_lines("ISO", pairs):
                out.add(line)
        out.add(MOL_END)

    def _atom_line(self, component: ReactionComponent, atom: Atom) -> str:
        # xxxxx.xxxxyyyyy.yyyyzzzzz.zzzz aaaddcccssshhhbbbvvvHHH
        center = component.stereo_center_for(atom)
        parity = center.parity if center is not None else None
        return (
            encode_decimal(atom.x)
            + encode_decimal(atom.y)
            + encode_decimal(atom.z)
            + " "
            + encode_string(atom.symbol, 3)
            + " 0"  # dd
            + encode_int(codes.code_from_charge(atom.charge, atom.radical), 3)
            + encode_int(codes.code_from_parity(parity), 3)
            + "  0" * 4  # hhhbbbvvvHHH
        )


def write_reaction(
    reaction: Reaction,
    fmt: Union[ReactionFileFormat, str] = ReactionFileFormat.RD,
    **options,
) -> str:
    """Serialize ``reaction`` to RXN/RDFile text.

    Args:
        reaction: Reaction to serialize.
        fmt: ``"rd"`` (default), ``"auto"`` or ``"rxn"``.
        **options: Further ``WriterOptions`` fields.
    """
    return ReactionWriter(WriterOptions(fmt=fmt, **options)).write(reaction)


def write_reaction_file(
    reaction: Reaction,
    path: Union[str, Path],
    *,
    fmt: Union[ReactionFileFormat, str, None] = None,
    **options,
) -> Path:
    """Write ``reaction`` to ``path``.

    Args:
        reaction: Reaction to serialize.
        path: Destination path.
        fmt: Output format. When omitted, the format is inferred from the file
            extension (``.rxn`` or ``.rdf``/``.rd``).
        **options: Further ``WriterOptions`` fields.

    Returns:
        The path that was written.

    Raises:
        ValueError: If the format cannot be determined.
    """
    out_path = path if isinstance(path, Path) else Path(path)
    if fmt is None:
        suffix = out_path.suffix.lstrip(".").lower()
        if not suffix:
            raise ValueError(
                "File format not provided; supply fmt or a .rxn/.rdf path."
            )
        try:
            fmt = _SUFFIX_FORMATS[suffix]
        except KeyError:
            raise ValueError(
                f"Unsupported export format '{suffix}'. Use 'rxn' or 'rdf'."
            ) from None

    text = write_reaction(reaction, fmt=fmt, **options)
    with out_path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    logger.info("Exported reaction to %s", out_path)
    return out_path
