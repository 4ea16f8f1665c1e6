from pathlib import Path

import pytest

from chemrxn_rxnfile.io.reader import ReactionReader, parse_reaction, read_reaction
from chemrxn_rxnfile.results import Err, Ok, ReactionFileError
from chemrxn_rxnfile.types import (
    BondStereo,
    BondType,
    Radical,
    ReactionComponentRole,
    ReactionFileFormat,
)

RESOURCES_DIR = Path(__file__).parent / "resources"


def _atom(symbol, x=0.0, y=0.0, z=0.0, charge_code=0, parity=0):
    return (
        f"{x:10.4f}{y:10.4f}{z:10.4f} {symbol:<3} 0{charge_code:3d}{parity:3d}"
        "  0  0  0  0  0  0  0  0  0"
    )


def _bond(a, b, order=1, stereo=0):
    return f"{a:3d}{b:3d}{order:3d}{stereo:3d}  0  0  0"


def _mol(atoms, bonds=(), props=(), name="", end=True):
    lines = ["$MOL", name, "  TEST", ""]
    lines.append(f"{len(atoms):3d}{len(bonds):3d}  0  0  0  0  0  0  0  0999 V2000")
    lines.extend(atoms)
    lines.extend(bonds)
    lines.extend(props)
    if end:
        lines.append("M  END")
    return lines


def _rxn(reagents=(), products=(), rd=False):
    lines = ["$RDFILE 1", "$DATM    today", "$RFMT"] if rd else []
    lines += ["$RXN", "Sample reaction", "      TEST", "comment"]
    lines.append(f"{len(reagents):3d}{len(products):3d}")
    for mol in list(reagents) + list(products):
        lines.extend(mol)
    return "\n".join(lines) + "\n"


def _methanol(**kwargs):
    return _mol([_atom("C"), _atom("O", x=1.5)], [_bond(1, 2)], **kwargs)


def _read_resource(name):
    return (RESOURCES_DIR / name).read_text(encoding="utf-8")


# ---------------------- happy paths ---------------------- #


def test_read_rxn_resource():
    result = read_reaction(_read_resource("methanol_oxidation.rxn"))

    assert isinstance(result, Ok)
    assert result.format == ReactionFileFormat.RXN
    reaction = result.reaction
    assert len(reaction.reagents) == 1
    assert len(reaction.products) == 1
    assert reaction.agents == []
    assert reaction.name == "Methanol oxidation"
    assert reaction.comment == "two-atom sample"

    methanol = reaction.reagents[0]
    assert methanol.name == "methanol"
    assert [a.symbol for a in methanol.atoms] == ["C", "O"]
    assert methanol.atoms[1].x == 1.5
    assert methanol.bonds[0].start is methanol.atoms[0]
    assert methanol.bonds[0].end is methanol.atoms[1]
    assert [a.implicit_hydrogens for a in methanol.atoms] == [3, 1]

    formaldehyde = reaction.products[0]
    assert formaldehyde.bonds[0].bond_type == BondType.DOUBLE
    assert [a.implicit_hydrogens for a in formaldehyde.atoms] == [2, 0]


def test_auto_detects_rxn():
    text = _read_resource("methanol_oxidation.rxn")

    auto = read_reaction(text, fmt="auto")
    explicit = read_reaction(text, fmt=ReactionFileFormat.RXN)

    assert auto.format == ReactionFileFormat.RXN
    assert auto.reaction == explicit.reaction


def test_read_rdfile_with_agents():
    result = read_reaction(_read_resource("chloromethane_agents.rdf"))

    assert result.is_ok
    assert result.format == ReactionFileFormat.RD
    reaction = result.reaction
    assert len(reaction.reagents) == 2
    assert len(reaction.products) == 1
    assert [c.name for c in reaction.agents] == ["zinc chloride", "water"]
    assert all(c.role == ReactionComponentRole.AGENT for c in reaction.agents)
    assert [c.role for c in reaction.components] == [
        ReactionComponentRole.REAGENT,
        ReactionComponentRole.REAGENT,
        ReactionComponentRole.PRODUCT,
        ReactionComponentRole.AGENT,
        ReactionComponentRole.AGENT,
    ]


def test_broken_agent_is_reported_as_warning():
    result = read_reaction(_read_resource("chloromethane_agents.rdf"))

    assert result.agent_failures == 1
    assert len(result.warnings) == 2
    assert result.warnings[0].startswith("Line ")
    assert "Incorrect coordinate format" in result.warnings[0]
    assert result.warnings[1].startswith("Reading agent #2 MOL atom # 1")
    assert "coordinate x error" in result.warnings[1]


def test_auto_detects_rdfile():
    text = _read_resource("chloromethane_agents.rdf")

    auto = read_reaction(text)
    explicit = read_reaction(text, fmt="rd")

    assert auto.format == ReactionFileFormat.RD
    assert auto.reaction == explicit.reaction
    assert auto.warnings == explicit.warnings


def test_agents_are_ignored_for_rxn_files():
    text = _rxn([_methanol()], []) + "$DATUM $MFMT\n" + "\n".join(
        _methanol()[1:]
    )

    result = read_reaction(text)

    assert result.format == ReactionFileFormat.RXN
    assert result.reaction.agents == []


def test_windows_and_mac_line_endings():
    text = _rxn([_methanol()], [_methanol()])
    expected = read_reaction(text).reaction

    assert read_reaction(text.replace("\n", "\r\n")).reaction == expected
    assert read_reaction(text.replace("\n", "\r")).reaction == expected


def test_reads_iterable_of_lines():
    text = _rxn([_methanol()], [_methanol()])

    result = read_reaction(text.splitlines(keepends=True))

    assert result.is_ok
    assert result.reaction == read_reaction(text).reaction


def test_reads_open_file():
    with open(RESOURCES_DIR / "methanol_oxidation.rxn", encoding="utf-8") as fh:
        result = read_reaction(fh)

    assert result.is_ok
    assert len(result.reaction.components) == 2


def test_empty_reaction():
    result = read_reaction(_rxn([], []))

    assert result.is_ok
    assert result.reaction.components == []


# ---------------------- headers and counts ---------------------- #


def test_rdfile_read_as_rxn_fails():
    result = read_reaction(_rxn([_methanol()], [], rd=True), fmt="rxn")

    assert isinstance(result, Err)
    assert result.errors == [
        "RXN Header: Line 1 is missing or does not start with $RXN"
    ]


def test_rxn_read_as_rdfile_fails():
    result = read_reaction(_rxn([_methanol()], []), fmt="rd")

    assert result.errors == [
        "RDFile Header: Line 1 is missing or does not start with $RDFILE"
    ]


def test_rdfile_header_requires_rfmt():
    text = "$RDFILE 1\n$DATM    today\n$RXN\n"

    result = read_reaction(text)

    assert result.errors == [
        "RDFile Header: Line 3 is missing or does not start with $RFMT"
    ]


@pytest.mark.parametrize("text", ["", "hello\n", "$MOL\n"])
def test_auto_rejects_unknown_header(text):
    result = read_reaction(text)

    assert not result.is_ok
    assert result.errors == [
        "RXN/RDFile Header: Line 1 is missing or does not start with $RXN or $RDFILE"
    ]


def test_missing_rxn_header_line():
    result = read_reaction("$RXN\nname\n")

    assert result.errors == [
        "RXN Header (user name, program, date): Line 3 is missing"
    ]


def test_missing_counts_line():
    result = read_reaction("$RXN\nname\nprogram\ncomment\n")

    assert result.errors == ["RXN counts Line 5 is missing !"]


def test_bad_reagent_count():
    text = "$RXN\nname\nprogram\ncomment\n  x  1\n"

    result = read_reaction(text)

    assert len(result.errors) == 2
    assert result.errors[0] == "Line 5: Error on parsing integer: 'x'"
    assert result.errors[1] == (
        "RXN counts (rrrppp) Line 5 : incorrect number of reagents (rrr part):   x  1"
    )


def test_short_counts_line():
    result = read_reaction("$RXN\nname\nprogram\ncomment\n  1\n")

    assert result.errors[0].startswith("Line 5: Field at columns 4-6 runs past end")
    assert "incorrect number of products (ppp part)" in result.errors[1]


def test_negative_counts_are_rejected():
    result = read_reaction("$RXN\nname\nprogram\ncomment\n -1  1\n")

    assert result.errors == [
        "RXN counts (rrrppp) Line 5 : incorrect number of reagents (rrr part):  -1  1"
    ]


# ---------------------- molecule blocks ---------------------- #


def test_counts_enforcement_reports_missing_atom_line():
    result = read_reaction(_read_resource("truncated_atoms.rxn"))

    assert not result.is_ok
    assert result.errors[0].startswith("Line 12: Incorrect coordinate format")
    assert result.errors[-1].startswith(
        "Reading reagent #1 MOL atom # 2 in Line 12 coordinate x error"
    )


def test_missing_mol_marker():
    mol = _methanol()[1:]

    result = read_reaction(_rxn([mol], []))

    assert result.errors == [
        "Reading reagent #1 MOL Start section in Line 6 is missing or does not "
        "start with $MOL --> "
    ]


def test_missing_mol_marker_at_end_of_input():
    result = read_reaction("$RXN\nSample reaction\n      TEST\ncomment\n  1  0\n")

    assert result.errors == [
        "Reading reagent #1 MOL Start section in Line 6 is missing or does not "
        "start with $MOL --> "
    ]


def test_product_errors_carry_product_context():
    bad = _mol([_atom("C"), _atom("O")], [_bond(1, 2, stereo=2)])

    result = read_reaction(_rxn([_methanol()], [bad]))

    assert not result.is_ok
    assert result.errors[-1].startswith(
        "Reading product #1 MOL bond # 1 in Line 22 : incorrect bond stereo (sss part)"
    )


def test_unknown_element_symbol():
    mol = _mol([_atom("Xx")])

    result = read_reaction(_rxn([mol], []))

    assert result.errors[-1].startswith(
        "Reading reagent #1 MOL atom # 1 in Line 11 atom symbol error"
    )


def test_short_atom_line():
    mol = _mol(["    0.0000    0.0000    0.0000 C"])

    result = read_reaction(_rxn([mol], []))

    assert not result.is_ok
    assert "runs past end of line" in result.errors[0]
    assert "atom symbol error" in result.errors[-1]


def test_charge_codes_on_atom_line():
    mol = _mol(
        [
            _atom("N", charge_code=3),
            _atom("O", charge_code=5),
            _atom("C", charge_code=4),
            _atom("C", charge_code=9),
        ]
    )

    atoms = read_reaction(_rxn([mol], [])).reaction.reagents[0].atoms

    assert [a.charge for a in atoms] == [1, -1, 0, 0]
    assert [a.radical for a in atoms] == [
        Radical.NONE,
        Radical.NONE,
        Radical.DOUBLET,
        Radical.NONE,
    ]


def test_non_numeric_charge_code():
    mol = _mol(["    0.0000    0.0000    0.0000 C   0  x  0  0  0  0"])

    result = read_reaction(_rxn([mol], []))

    assert result.errors[-1].startswith(
        "Reading reagent #1 MOL atom # 1 in Line 11 atom charge coding error"
    )


def test_bond_atom_number_out_of_range():
    mol = _mol([_atom("C"), _atom("O")], [_bond(1, 3)])

    result = read_reaction(_rxn([mol], []))

    assert result.errors == [
        "Reading reagent #1 MOL bond # 1 in Line 13 : incorrect atom number "
        "(222 part):   1  3  1  0  0  0  0"
    ]


def test_unknown_bond_order():
    mol = _mol([_atom("C"), _atom("O")], [_bond(1, 2, order=4)])

    result = read_reaction(_rxn([mol], []))

    assert "incorrect bond type (ttt part)" in result.errors[-1]


def test_bond_stereo_codes_are_read():
    mol = _mol(
        [_atom("C"), _atom("C"), _atom("O"), _atom("N")],
        [_bond(1, 2, stereo=1), _bond(1, 3, stereo=6), _bond(1, 4, stereo=4)],
    )

    bonds = read_reaction(_rxn([mol], [])).reaction.reagents[0].bonds

    assert [b.stereo for b in bonds] == [
        BondStereo.SINGLE_UP,
        BondStereo.SINGLE_DOWN,
        BondStereo.SINGLE_EITHER,
    ]


# ---------------------- properties block ---------------------- #


def test_isotope_property_line():
    mol = _mol(
        [_atom("C"), _atom("O"), _atom("C")],
        [_bond(1, 2), _bond(2, 3)],
        props=["M  ISO  1   3  13"],
    )

    atoms = read_reaction(_rxn([mol], [])).reaction.reagents[0].atoms

    assert atoms[2].isotopic_mass == 13
    assert atoms[0].isotopic_mass is None


def test_charge_property_overrides_atom_line():
    mol = _mol(
        [_atom("N", charge_code=3), _atom("O")],
        [_bond(1, 2)],
        props=["M  CHG  2   1  -1   2   1"],
    )

    atoms = read_reaction(_rxn([mol], [])).reaction.reagents[0].atoms

    assert [a.charge for a in atoms] == [-1, 1]


def test_later_property_lines_win():
    mol = _mol(
        [_atom("C")],
        props=["M  CHG  1   1   2", "M  CHG  1   1  -2", "M  RAD  1   1   3"],
    )

    atom = read_reaction(_rxn([mol], [])).reaction.reagents[0].atoms[0]

    assert atom.charge == -2
    assert atom.radical == Radical.TRIPLET


def test_radical_property_overrides_doublet_code():
    mol = _mol([_atom("C", charge_code=4)], props=["M  RAD  1   1   0"])

    atom = read_reaction(_rxn([mol], [])).reaction.reagents[0].atoms[0]

    assert atom.radical == Radical.NONE


@pytest.mark.parametrize(
    "prop, message",
    [
        ("M  RAD  1   1   4", "incorrect radical value for (aaa vvv) pair #1"),
        ("M  CHG  1   1  16", "incorrect charge for (aaa vvv) pair #1"),
        ("M  ISO  1   1   0", "incorrect mass for (aaa vvv) pair #1"),
        ("M  ISO  9   1  13", "incorrect number of atoms (nn8 part)"),
        ("M  CHG  1   3   1", "incorrect atom index for (aaa vvv) pair #1"),
        ("M  CHG  2   1   1   2", "incorrect charge for (aaa vvv) pair #2"),
    ],
)
def test_invalid_property_lines(prop, message):
    mol = _mol([_atom("C"), _atom("O")], [_bond(1, 2)], props=[prop])

    result = read_reaction(_rxn([mol], []))

    assert not result.is_ok
    assert message in result.errors[-1]
    assert "Line 14" in result.errors[-1]


def test_unknown_property_lines_are_skipped():
    mol = _mol(
        [_atom("C"), _atom("O")],
        [_bond(1, 2)],
        props=["M  ZZC  1   1  xx", "A    1", "label", "M  STY  1   1 SUP"],
    )

    result = read_reaction(_rxn([mol], []))

    assert result.is_ok


def test_end_of_input_terminates_properties_block():
    text = _rxn([_methanol(end=False)], [])

    assert read_reaction(text).is_ok

    result = read_reaction(text, require_m_end=True)
    assert result.errors == [
        "Reading reagent #1 MOL properties block: Line 14 is missing, expected M  END"
    ]


# ---------------------- API ---------------------- #


def test_reader_is_reusable_between_calls():
    reader = ReactionReader(fmt="rxn")

    first = reader.read("garbage\n")
    second = reader.read(_rxn([_methanol()], []))
    third = reader.read("garbage\n")

    assert not first.is_ok
    assert second.is_ok
    assert third.errors == first.errors


def test_reader_options_accept_strings():
    reader = ReactionReader(fmt="RD", require_m_end=True)

    assert reader.options.fmt == ReactionFileFormat.RD
    assert reader.options.require_m_end is True


def test_implicit_hydrogens_can_be_disabled():
    result = read_reaction(_rxn([_methanol()], []), infer_implicit_hydrogens=False)

    assert [a.implicit_hydrogens for a in result.reaction.reagents[0].atoms] == [0, 0]


def test_parse_reaction_raises_with_errors():
    with pytest.raises(ReactionFileError, match="Failed to read reaction") as excinfo:
        parse_reaction("$RXN\n")

    assert excinfo.value.errors == [
        "RXN Header (reaction name): Line 2 is missing"
    ]


def test_parse_reaction_returns_reaction():
    reaction = parse_reaction(_rxn([_methanol()], [_methanol()]))

    assert len(reaction.reagents) == 1
    assert len(reaction.products) == 1
