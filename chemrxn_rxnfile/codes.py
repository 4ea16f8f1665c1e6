# chemrxn_rxnfile/codes.py
"""Translation tables between MDL V2000 numeric codes and the atom/bond model.

Charge, radical and parity lookups fall back to a neutral default for codes
outside their table. Bond order and bond stereo lookups return ``None`` so the
reader can reject the line instead of guessing.
"""

from __future__ import annotations

from typing import Dict, Optional

from .types import BondStereo, BondType, Radical, StereoParity

# MDL charge designation: 0 = uncharged, 1 = +3, 2 = +2, 3 = +1,
# 4 = doublet radical, 5 = -1, 6 = -2, 7 = -3
_CHARGE_BY_CODE: Dict[int, int] = {1: 3, 2: 2, 3: 1, 5: -1, 6: -2, 7: -3}
_CODE_BY_CHARGE: Dict[int, int] = {v: k for k, v in _CHARGE_BY_CODE.items()}

DOUBLET_RADICAL_CODE = 4

_RADICAL_BY_CODE: Dict[int, Radical] = {
    1: Radical.SINGLET,
    2: Radical.DOUBLET,
    3: Radical.TRIPLET,
}
_CODE_BY_RADICAL: Dict[Radical, int] = {v: k for k, v in _RADICAL_BY_CODE.items()}

_PARITY_BY_CODE: Dict[int, StereoParity] = {
    1: StereoParity.ODD,
    2: StereoParity.EVEN,
    3: StereoParity.UNKNOWN,
}
_CODE_BY_PARITY: Dict[StereoParity, int] = {v: k for k, v in _PARITY_BY_CODE.items()}

_BOND_TYPE_BY_CODE: Dict[int, BondType] = {
    1: BondType.SINGLE,
    2: BondType.DOUBLE,
    3: BondType.TRIPLE,
}
_CODE_BY_BOND_TYPE: Dict[BondType, int] = {
    v: k for k, v in _BOND_TYPE_BY_CODE.items()
}

_BOND_STEREO_BY_CODE: Dict[int, BondStereo] = {
    0: BondStereo.NONE,
    1: BondStereo.SINGLE_UP,
    4: BondStereo.SINGLE_EITHER,
    6: BondStereo.SINGLE_DOWN,
    3: BondStereo.DOUBLE_EITHER,
}
_CODE_BY_BOND_STEREO: Dict[BondStereo, int] = {
    v: k for k, v in _BOND_STEREO_BY_CODE.items()
}


# ---------------------- atom charge ---------------------- #


def charge_from_code(code: int) -> int:
    """Return the formal charge for an atom-line charge code.

    Args:
        code: Value of the ``ccc`` atom-line field.

    Returns:
        Signed charge; 0 for code 0, the doublet-radical code 4 and any code
        outside the table.
    """
    return _CHARGE_BY_CODE.get(code, 0)


def is_doublet_radical_code(code: int) -> bool:
    """Return True when the charge field carries the doublet-radical overload."""
    return code == DOUBLET_RADICAL_CODE


def code_from_charge(charge: int, radical: Radical = Radical.NONE) -> int:
    """Return the atom-line charge code for a charge/radical pair.

    Charges outside -3..+3 cannot be expressed and encode as 0. A neutral
    doublet radical uses the overloaded code 4.
    """
    if charge == 0 and radical == Radical.DOUBLET:
        return DOUBLET_RADICAL_CODE
    return _CODE_BY_CHARGE.get(charge, 0)


# ---------------------- radical ---------------------- #


def radical_from_code(code: int) -> Radical:
    return _RADICAL_BY_CODE.get(code, Radical.NONE)


def code_from_radical(radical: Radical) -> int:
    return _CODE_BY_RADICAL.get(radical, 0)


# ---------------------- stereo parity ---------------------- #


def parity_from_code(code: int) -> Optional[StereoParity]:
    """Return the parity for an atom-line ``sss`` code, or ``None`` if unset."""
    return _PARITY_BY_CODE.get(code)


def code_from_parity(parity: Optional[StereoParity]) -> int:
    if parity is None:
        return 0
    return _CODE_BY_PARITY.get(parity, 0)


# ---------------------- bonds ---------------------- #


def bond_type_from_code(code: int) -> Optional[BondType]:
    return _BOND_TYPE_BY_CODE.get(code)


def code_from_bond_type(bond_type: BondType) -> int:
    """Return the bond-line ``ttt`` code; unrecognized orders encode as single."""
    return _CODE_BY_BOND_TYPE.get(bond_type, 1)


def bond_stereo_from_code(code: int) -> Optional[BondStereo]:
    """Return the bond stereo flag for a bond-line ``sss`` code.

    Unknown codes return ``None``; the reader treats that as a hard error.
    """
    return _BOND_STEREO_BY_CODE.get(code)


def code_from_bond_stereo(stereo: BondStereo) -> int:
    return _CODE_BY_BOND_STEREO.get(stereo, 0)
