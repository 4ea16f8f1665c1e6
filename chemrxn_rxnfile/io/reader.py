# chemrxn_rxnfile/io/reader.py
"""Reader for MDL RXN and RDFile reaction text (V2000 connection tables).

The reader is a strict, line-oriented state machine::

    file header -> RXN counts -> reagent blocks -> product blocks
                -> agents trailer (RDFile only)

Any error in the header, the counts line or a reagent/product block stops the
parse and yields an :class:`~chemrxn_rxnfile.results.Err`. Agent blocks are
best effort: a broken agent is skipped and reported as a warning.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from .. import codes, fields
from ..elements import is_known_element, set_implicit_hydrogens
from ..fields import FieldFormatError
from ..results import Err, Ok, ReadResult
from ..stereo import create_tetrahedral_stereo, guess_undefined_tetrahedral_stereo
from ..types import (
    Atom,
    Bond,
    Radical,
    Reaction,
    ReactionComponent,
    ReactionComponentRole,
    ReactionFileFormat,
)

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")

LineSource = Union[str, Iterable[str]]


@dataclass(frozen=True)
class ReaderOptions:
    """Configuration for :class:`ReactionReader`.

    Attributes:
        fmt: Expected file variant; ``AUTO`` detects RXN or RDFile from the
            first line.
        require_m_end: When True, a molecule whose properties block runs to
            the end of input without ``M  END`` is an error. By default the
            end of input terminates the block.
        guess_tetrahedral_from_bonds: Create UNDEFINED stereo centres for
            atoms that start wedge bonds but carry no atom-line parity.
        infer_implicit_hydrogens: Fill ``Atom.implicit_hydrogens`` for every
            component that was read.
    """

    fmt: ReactionFileFormat = ReactionFileFormat.AUTO
    require_m_end: bool = False
    guess_tetrahedral_from_bonds: bool = False
    infer_implicit_hydrogens: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.fmt, ReactionFileFormat):
            object.__setattr__(
                self, "fmt", ReactionFileFormat(str(self.fmt).strip().lower())
            )


class _AtomRecord(NamedTuple):
    symbol: str
    x: float
    y: float
    z: float
    charge_code: int
    parity_code: int


class _PropertyOverride(NamedTuple):
    tag: str  # ISO, CHG or RAD
    atom_number: int  # 1-based
    value: int


def _iter_lines(source: LineSource) -> Iterator[str]:
    """Yield lines without their terminators.

    Strings are split on ``\\n``, ``\\r\\n`` and ``\\r``; a trailing newline
    does not produce an extra empty line.
    """
    if isinstance(source, str):
        lines = _NEWLINE.split(source)
        if lines and lines[-1] == "":
            lines.pop()
        yield from lines
        return
    for line in source:
        yield line.rstrip("\r\n")


def _apply_property_overrides(
    atoms: List[Atom], overrides: Iterable[_PropertyOverride]
) -> None:
    """Apply ``M  ISO/CHG/RAD`` values over the atom-line values, in file order."""
    for override in overrides:
        atom = atoms[override.atom_number - 1]
        if override.tag == "ISO":
            atom.isotopic_mass = override.value
        elif override.tag == "CHG":
            atom.charge = override.value
        elif override.tag == "RAD":
            atom.radical = codes.radical_from_code(override.value)


# ---------------------- per-call parse context ---------------------- #


class _ReactionParser:
    """State of a single parse: line cursor, diagnostics and counters.

    A new instance is created for every call to :meth:`ReactionReader.read`.
    """

    def __init__(self, lines: Iterator[str], options: ReaderOptions):
        self._lines = lines
        self._options = options
        self.line_no = 0
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.agent_failures = 0
        self._context = ""

    # ---- line and field access ----

    def _error(self, message: str) -> None:
        self.errors.append(message)

    def _read_line(self) -> Optional[str]:
        self.line_no += 1
        try:
            return next(self._lines)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            self._error(f"Unable to read line {self.line_no}: {exc}")
            return None

    def _int_field(self, line: str, start: int, width: int) -> Optional[int]:
        try:
            return fields.decode_int(line, start, width)
        except FieldFormatError as exc:
            self._error(f"Line {self.line_no}: {exc}")
            return None

    def _coordinate_field(self, line: str, start: int) -> Optional[float]:
        try:
            return fields.decode_coordinate(line, start)
        except FieldFormatError as exc:
            self._error(f"Line {self.line_no}: {exc}")
            return None

    def _string_field(self, line: str, start: int, width: int) -> Optional[str]:
        try:
            return fields.decode_string(line, start, width)
        except FieldFormatError as exc:
            self._error(f"Line {self.line_no}: {exc}")
            return None

    # ---- top level ----

    def parse(self) -> ReadResult:
        reaction = Reaction()

        fmt = self._read_file_header(reaction)
        if fmt is None or self.errors:
            return Err(list(self.errors))
        logger.debug("Reading reaction as %s", fmt.value)

        counts = self._read_rxn_counts_line()
        if counts is None:
            return Err(list(self.errors))
        n_reagents, n_products = counts
        logger.debug("RXN counts: %d reagents, %d products", n_reagents, n_products)

        sections = (
            (ReactionComponentRole.REAGENT, n_reagents),
            (ReactionComponentRole.PRODUCT, n_products),
        )
        for role, count in sections:
            for i in range(count):
                self._context = f"Reading {role.value} #{i + 1} "
                component = self._read_molecule(role, read_mol_line=True)
                if component is None:
                    return Err(list(self.errors))
                reaction.add_component(component)
        self._context = ""

        if fmt == ReactionFileFormat.RD:
            self._read_agents(reaction)
            if self.errors:
                return Err(list(self.errors))

        return Ok(
            reaction=reaction,
            format=fmt,
            warnings=list(self.warnings),
            agent_failures=self.agent_failures,
        )

    # ---- file headers ----

    def _read_file_header(self, reaction: Reaction) -> Optional[ReactionFileFormat]:
        fmt = self._options.fmt
        if fmt == ReactionFileFormat.RXN:
            ok = self._read_rxn_header(reaction, marker_read=False)
            return fmt if ok else None
        if fmt == ReactionFileFormat.RD:
            ok = self._read_rd_header(marker_read=False) and self._read_rxn_header(
                reaction, marker_read=False
            )
            return fmt if ok else None

        line = self._read_line()
        if line is not None and line.startswith("$RDFILE"):
            ok = self._read_rd_header(marker_read=True) and self._read_rxn_header(
                reaction, marker_read=False
            )
            return ReactionFileFormat.RD if ok else None
        if line is not None and line.startswith("$RXN"):
            ok = self._read_rxn_header(reaction, marker_read=True)
            return ReactionFileFormat.RXN if ok else None

        self._error(
            f"RXN/RDFile Header: Line {self.line_no} is missing or does not "
            "start with $RXN or $RDFILE"
        )
        return None

    def _expect_marker(self, marker: str, section: str) -> bool:
        line = self._read_line()
        if line is None or not line.startswith(marker):
            self._error(
                f"{section}: Line {self.line_no} is missing or does not start "
                f"with {marker}"
            )
            return False
        return True

    def _read_rd_header(self, marker_read: bool) -> bool:
        if not marker_read and not self._expect_marker("$RDFILE", "RDFile Header"):
            return False
        return self._expect_marker("$DATM", "RDFile Header") and self._expect_marker(
            "$RFMT", "RDFile Header"
        )

    def _read_header_lines(
        self, section: str, labels: Tuple[str, str, str]
    ) -> Optional[List[str]]:
        lines: List[str] = []
        for label in labels:
            line = self._read_line()
            if line is None:
                self._error(
                    f"{self._context}{section} ({label}): Line {self.line_no} "
                    "is missing"
                )
                return None
            lines.append(line)
        return lines

    def _read_rxn_header(self, reaction: Reaction, marker_read: bool) -> bool:
        if not marker_read and not self._expect_marker("$RXN", "RXN Header"):
            return False
        lines = self._read_header_lines(
            "RXN Header", ("reaction name", "user name, program, date", "comment")
        )
        if lines is None:
            return False
        reaction.name, reaction.program, reaction.comment = lines
        return True

    def _read_rxn_counts_line(self) -> Optional[Tuple[int, int]]:
        # rrrppp
        line = self._read_line()
        if line is None:
            self._error(f"RXN counts Line {self.line_no} is missing !")
            return None
        rrr = self._int_field(line, 0, 3)
        if rrr is None or rrr < 0:
            self._error(
                f"RXN counts (rrrppp) Line {self.line_no} : incorrect number of "
                f"reagents (rrr part): {line}"
            )
            return None
        ppp = self._int_field(line, 3, 3)
        if ppp is None or ppp < 0:
            self._error(
                f"RXN counts (rrrppp) Line {self.line_no} : incorrect number of "
                f"products (ppp part): {line}"
            )
            return None
        return rrr, ppp

    # ---- molecule blocks ----

    def _read_molecule(
        self, role: ReactionComponentRole, read_mol_line: bool
    ) -> Optional[ReactionComponent]:
        component = ReactionComponent(role=role)

        if read_mol_line:
            line = self._read_line()
            if line is None or not line.startswith("$MOL"):
                self._error(
                    f"{self._context}MOL Start section in Line {self.line_no} is "
                    f"missing or does not start with $MOL --> {line or ''}"
                )
                return None
        header = self._read_header_lines("MOL Header", ("line 1", "line 2", "line 3"))
        if header is None:
            return None
        component.name, component.program, component.comment = header

        counts = self._read_mol_counts_line()
        if counts is None:
            return None
        n_atoms, n_bonds = counts

        records: List[_AtomRecord] = []
        for i in range(n_atoms):
            record = self._read_atom_line(i)
            if record is None:
                return None
            records.append(record)

        # atom-line values first; property lines override them below
        for record in records:
            atom = Atom(record.symbol, record.x, record.y, record.z)
            atom.charge = codes.charge_from_code(record.charge_code)
            if codes.is_doublet_radical_code(record.charge_code):
                atom.radical = Radical.DOUBLET
            component.atoms.append(atom)

        for i in range(n_bonds):
            bond = self._read_bond_line(i, component.atoms)
            if bond is None:
                return None
            component.bonds.append(bond)

        overrides = self._read_properties_block(n_atoms)
        if overrides is None or self.errors:
            return None
        _apply_property_overrides(component.atoms, overrides)

        self._build_stereo(component, records)
        if self._options.infer_implicit_hydrogens:
            set_implicit_hydrogens(component)

        logger.debug(
            "%sdone: %d atoms, %d bonds, %d stereo centres",
            self._context,
            len(component.atoms),
            len(component.bonds),
            len(component.stereo_centers),
        )
        return component

    def _read_mol_counts_line(self) -> Optional[Tuple[int, int]]:
        # aaabbblllfffcccsssxxxrrrpppiiimmmvvvvvv
        line = self._read_line()
        if line is None:
            self._error(f"{self._context}MOL counts Line {self.line_no} is missing !")
            return None
        aaa = self._int_field(line, 0, 3)
        if aaa is None or aaa < 0:
            self._error(
                f"{self._context}MOL counts (aaabbblll...) Line {self.line_no} : "
                f"incorrect number of atoms (aaa part): {line}"
            )
            return None
        bbb = self._int_field(line, 3, 3)
        if bbb is None or bbb < 0:
            self._error(
                f"{self._context}MOL counts (aaabbblll...) Line {self.line_no} : "
                f"incorrect number of bonds (bbb part): {line}"
            )
            return None
        return aaa, bbb

    def _read_atom_line(self, atom_index: int) -> Optional[_AtomRecord]:
        # xxxxx.xxxxyyyyy.yyyyzzzzz.zzzz aaaddcccssshhhbbbvvvHHHrrriiimmmnnneee
        line = self._read_line()
        where = f"{self._context}MOL atom # {atom_index + 1} in Line {self.line_no}"
        if line is None:
            self._error(f"{where} is missing !")
            return None

        coords: List[float] = []
        for axis, start in (("x", 0), ("y", 10), ("z", 20)):
            value = self._coordinate_field(line, start)
            if value is None:
                self._error(f"{where} coordinate {axis} error --> {line}")
                return None
            coords.append(value)

        symbol = self._string_field(line, 30, 4)
        if symbol is None or not is_known_element(symbol):
            self._error(f"{where} atom symbol error --> {line}")
            return None

        charge_code = self._int_field(line, 36, 3)
        if charge_code is None:
            self._error(f"{where} atom charge coding error --> {line}")
            return None

        parity_code = self._int_field(line, 39, 3)
        if parity_code is None:
            self._error(f"{where} atom parity coding error --> {line}")
            return None

        return _AtomRecord(symbol, coords[0], coords[1], coords[2], charge_code, parity_code)

    def _read_bond_line(self, bond_index: int, atoms: List[Atom]) -> Optional[Bond]:
        # 111222tttsssxxxrrrccc
        line = self._read_line()
        where = f"{self._context}MOL bond # {bond_index + 1} in Line {self.line_no}"
        if line is None:
            self._error(f"{where} is missing !")
            return None

        atom_numbers: List[int] = []
        for part, start in (("111", 0), ("222", 3)):
            number = self._int_field(line, start, 3)
            if number is None or not 1 <= number <= len(atoms):
                self._error(f"{where} : incorrect atom number ({part} part): {line}")
                return None
            atom_numbers.append(number)

        ttt = self._int_field(line, 6, 3)
        bond_type = codes.bond_type_from_code(ttt) if ttt is not None else None
        if bond_type is None:
            self._error(f"{where} : incorrect bond type (ttt part): {line}")
            return None

        sss = self._int_field(line, 9, 3)
        stereo = codes.bond_stereo_from_code(sss) if sss is not None else None
        if stereo is None:
            self._error(f"{where} : incorrect bond stereo (sss part): {line}")
            return None

        return Bond(
            start=atoms[atom_numbers[0] - 1],
            end=atoms[atom_numbers[1] - 1],
            bond_type=bond_type,
            stereo=stereo,
        )

    # ---- properties block ----

    def _read_properties_block(self, n_atoms: int) -> Optional[List[_PropertyOverride]]:
        overrides: List[_PropertyOverride] = []
        while True:
            line = self._read_line()
            if line is None:
                if self._options.require_m_end:
                    self._error(
                        f"{self._context}MOL properties block: Line {self.line_no} "
                        "is missing, expected M  END"
                    )
                    return None
                break
            if line.startswith("M  END"):
                break
            tag = line[3:6]
            if line.startswith("M  ") and tag in ("ISO", "CHG", "RAD"):
                overrides.extend(self._read_property_line(line, tag, n_atoms))
            # other lines are skipped; errors only surface after M  END
        return overrides

    def _read_property_line(
        self, line: str, tag: str, n_atoms: int
    ) -> List[_PropertyOverride]:
        # M  XXXnn8 aaa vvv ...
        where = f"M  {tag} molecule property Line {self.line_no} (M  {tag}nn8 aaa vvv ...)"
        n = self._int_field(line, 6, 3)
        if n is None or not 1 <= n <= 8:
            self._error(f"{where} : incorrect number of atoms (nn8 part): {line}")
            return []

        overrides: List[_PropertyOverride] = []
        pos = 9
        for i in range(n):
            atom_number = self._int_field(line, pos, 4)
            if atom_number is None or not 1 <= atom_number <= n_atoms:
                self._error(
                    f"{where} : incorrect atom index for (aaa vvv) pair #{i + 1} "
                    f"in line: {line}"
                )
                return []
            pos += 4
            value = self._int_field(line, pos, 4)
            if value is None or not _property_value_ok(tag, value):
                self._error(
                    f"{where} : incorrect {_PROPERTY_LABELS[tag]} for (aaa vvv) "
                    f"pair #{i + 1} in line: {line}"
                )
                return []
            pos += 4
            overrides.append(_PropertyOverride(tag, atom_number, value))
        return overrides

    # ---- stereo ----

    def _build_stereo(
        self, component: ReactionComponent, records: List[_AtomRecord]
    ) -> None:
        parity_atoms: List[Atom] = []
        for atom, record in zip(component.atoms, records):
            parity = codes.parity_from_code(record.parity_code)
            if parity is None:
                continue
            parity_atoms.append(atom)
            center = create_tetrahedral_stereo(component, atom, parity)
            if center is not None:
                component.stereo_centers.append(center)

        if self._options.guess_tetrahedral_from_bonds:
            guess_undefined_tetrahedral_stereo(component, skip_atoms=parity_atoms)

    # ---- RDFile agents ----

    def _read_agents(self, reaction: Reaction) -> None:
        n_agents = 0
        while True:
            line = self._read_line()
            if line is None:
                break
            if not line.startswith("$DATUM "):
                continue
            if not line[7:].strip().startswith("$MFMT"):
                continue

            n_agents += 1
            self._context = f"Reading agent #{n_agents} "
            first_error = len(self.errors)
            component = self._read_molecule(
                ReactionComponentRole.AGENT, read_mol_line=False
            )
            if component is None:
                failed = self.errors[first_error:]
                del self.errors[first_error:]
                self.warnings.extend(failed)
                self.agent_failures += 1
                logger.warning(
                    "Skipping agent #%d: %s",
                    n_agents,
                    failed[-1] if failed else "unknown error",
                )
                continue
            reaction.add_component(component)
        self._context = ""
        logger.debug(
            "Agents trailer: %d found, %d failed", n_agents, self.agent_failures
        )


_PROPERTY_LABELS = {"ISO": "mass", "CHG": "charge", "RAD": "radical value"}


def _property_value_ok(tag: str, value: int) -> bool:
    if tag == "ISO":
        return value >= 1
    if tag == "CHG":
        return -15 <= value <= 15
    return 0 <= value <= 3


# ---------------------- public API ---------------------- #


class ReactionReader:
    """Reads one reaction per call from RXN or RDFile text.

    The reader only holds immutable options; every :meth:`read` call works
    on its own parse context.

    Example::

        result = ReactionReader(fmt="auto").read(text)
        if result.is_ok:
            reaction = result.reaction
        else:
            print(result.all_errors())
    """

    def __init__(self, options: Optional[ReaderOptions] = None, **kwargs):
        """Initialize the reader.

        Args:
            options: Reader configuration. Defaults to ``ReaderOptions()``.
            **kwargs: Individual ``ReaderOptions`` fields overriding
                ``options``.
        """
        base = options or ReaderOptions()
        self.options = replace(base, **kwargs) if kwargs else base

    def read(self, source: LineSource) -> ReadResult:
        """Parse reaction text.

        Args:
            source: Whole document as a string, or an iterable of lines such
                as an open text file.

        Returns:
            ``Ok`` with the reaction, or ``Err`` with the diagnostics.
        """
        parser = _ReactionParser(_iter_lines(source), self.options)
        result = parser.parse()
        if not result.is_ok:
            logger.debug(
                "Reaction parse failed at line %d with %d errors",
                parser.line_no,
                len(result.errors),
            )
        return result


def read_reaction(
    source: LineSource,
    fmt: Union[ReactionFileFormat, str] = ReactionFileFormat.AUTO,
    **options,
) -> ReadResult:
    """Read a reaction from text and return an ``Ok``/``Err`` result.

    Args:
        source: Reaction text or an iterable of lines.
        fmt: ``"rxn"``, ``"rd"`` or ``"auto"``.
        **options: Further ``ReaderOptions`` fields.
    """
    return ReactionReader(ReaderOptions(fmt=fmt, **options)).read(source)


def parse_reaction(
    source: LineSource,
    fmt: Union[ReactionFileFormat, str] = ReactionFileFormat.AUTO,
    **options,
) -> Reaction:
    """Read a reaction from text.

    Returns:
        The parsed reaction.

    Raises:
        ReactionFileError: If the text cannot be read; ``errors`` holds the
            diagnostics.
    """
    return read_reaction(source, fmt=fmt, **options).unwrap()
