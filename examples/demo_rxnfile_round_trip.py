# demo_rxnfile_round_trip.py
"""
A minimal demo:
build a small reaction in memory, write it as an RDFile,
read it back and print what the reader saw.
"""

import logging

from chemrxn_rxnfile import (
    Atom,
    Bond,
    BondType,
    Reaction,
    ReactionComponent,
    ReactionComponentRole,
    read_reaction,
    reaction_to_smiles,
    write_reaction,
)


def main():
    logging.basicConfig(level=logging.DEBUG)

    reagent = ReactionComponent(role=ReactionComponentRole.REAGENT, name="methanol")
    reagent.atoms = [Atom("C"), Atom("O", x=1.5)]
    reagent.bonds = [Bond(reagent.atoms[0], reagent.atoms[1], BondType.SINGLE)]

    product = ReactionComponent(role=ReactionComponentRole.PRODUCT, name="formaldehyde")
    product.atoms = [Atom("C"), Atom("O", x=1.5)]
    product.bonds = [Bond(product.atoms[0], product.atoms[1], BondType.DOUBLE)]

    reaction = Reaction([reagent, product], name="Methanol oxidation")

    text = write_reaction(reaction)
    print(text)

    result = read_reaction(text)
    if not result.is_ok:
        print(result.all_errors())
        return

    print(result.summary())
    print(f"SMILES:    {reaction_to_smiles(result.reaction)}")
    print(f"Identical: {result.reaction == reaction}")

    # a broken file reports every diagnostic with its line number
    broken = read_reaction(text.replace("  2  1  0  0", "  3  1  0  0", 1))
    print(broken.all_errors())


if __name__ == "__main__":
    main()
