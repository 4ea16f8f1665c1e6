# chemrxn_rxnfile/results.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .types import Reaction, ReactionFileFormat


class ReactionFileError(ValueError):
    """Raised when reaction text cannot be turned into a ``Reaction``.

    Attributes:
        errors: Diagnostics collected before the reader gave up.
    """

    def __init__(self, errors: Sequence[str], message: Optional[str] = None):
        self.errors: List[str] = list(errors)
        if message is None:
            first = self.errors[0] if self.errors else "unknown error"
            message = f"Failed to read reaction: {first}"
            if len(self.errors) > 1:
                message += f" (+{len(self.errors) - 1} more)"
        super().__init__(message)


@dataclass(frozen=True)
class Ok:
    """Successful read.

    Attributes:
        reaction: The parsed reaction.
        format: File variant that was read (RXN or RD, never AUTO).
        warnings: Diagnostics from agent blocks that were skipped.
        agent_failures: Number of agent blocks that failed to parse.
    """

    reaction: Reaction
    format: ReactionFileFormat
    warnings: List[str] = field(default_factory=list)
    agent_failures: int = 0

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> Reaction:
        return self.reaction

    def summary(self) -> str:
        """Return a one-line description of what was read."""
        reaction = self.reaction
        return (
            f"{self.format.value}: reagents={len(reaction.reagents)}, "
            f"products={len(reaction.products)}, agents={len(reaction.agents)}, "
            f"agent_failures={self.agent_failures}"
        )

    def __str__(self) -> str:
        return self.summary()


@dataclass(frozen=True)
class Err:
    """Failed read carrying the ordered list of diagnostics."""

    errors: List[str]

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Reaction:
        """Raise :class:`ReactionFileError` with the collected diagnostics."""
        raise ReactionFileError(self.errors)

    def all_errors(self) -> str:
        """Return all diagnostics as one block, one newline-terminated line each."""
        return "".join(f"{err}\n" for err in self.errors)

    def summary(self) -> str:
        lines = [f"Errors: {len(self.errors)}"]
        lines.extend(f"  {err}" for err in self.errors)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


ReadResult = Union[Ok, Err]
