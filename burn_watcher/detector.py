from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

PLACEHOLDER = "?"
SPL_TOKEN_PROGRAM = "spl-token"


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _get_list(obj: Any, key: str) -> list:
    v = _get(obj, key)
    return v if isinstance(v, list) else []


def _get_str(obj: Any, key: str, default: str = PLACEHOLDER) -> str:
    v = _get(obj, key)
    return v if isinstance(v, str) else default


@dataclass(frozen=True)
class InstructionNode:
    """The parts of a jsonParsed instruction the burn scan looks at."""

    program: str = ""
    type: str | None = None
    info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> InstructionNode:
        # Unparsed instructions carry "parsed" as a string or omit it entirely
        parsed = _get(raw, "parsed")
        info = _get(parsed, "info")
        return cls(
            program=_get_str(raw, "program", default=""),
            type=_get_str(parsed, "type", default="") or None,
            info=info if isinstance(info, dict) else {},
        )

    def is_burn(self, token_program: str = SPL_TOKEN_PROGRAM) -> bool:
        return (
            self.program == token_program
            and self.type is not None
            and self.type.lower() == "burn"
        )


@dataclass(frozen=True)
class BurnEvent:
    signature: str
    mint: str
    source: str
    amount: str  # raw base-unit string, never parsed
    inner: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.signature,
            "mint": self.mint,
            "source": self.source,
            "amount": self.amount,
            "inner": self.inner,
        }


def iter_top_level(transaction: Any) -> Iterator[InstructionNode]:
    message = _get(_get(transaction, "transaction"), "message")
    for raw in _get_list(message, "instructions"):
        yield InstructionNode.from_raw(raw)


def iter_inner(transaction: Any) -> Iterator[InstructionNode]:
    # Groups are keyed by the invoking top-level index; the scan ignores that link
    for group in _get_list(_get(transaction, "meta"), "innerInstructions"):
        for raw in _get_list(group, "instructions"):
            yield InstructionNode.from_raw(raw)


def _event(signature: str, node: InstructionNode, inner: bool) -> BurnEvent:
    return BurnEvent(
        signature=signature,
        mint=_get_str(node.info, "mint"),
        source=_get_str(node.info, "source"),
        amount=_get_str(node.info, "amount"),
        inner=inner,
    )


def detect(
    transaction: Any, signature: str, token_program: str = SPL_TOKEN_PROGRAM
) -> BurnEvent | None:
    """
    Return the first token-program burn in ``transaction``, or None.

    Top-level instructions are scanned before inner instructions; inner groups
    are scanned in order, then each group's instructions in order. Only one
    event is reported per transaction even if it burns more than once. A null
    transaction (not yet available) yields None.
    """
    if transaction is None:
        return None
    for node in iter_top_level(transaction):
        if node.is_burn(token_program):
            return _event(signature, node, inner=False)
    for node in iter_inner(transaction):
        if node.is_burn(token_program):
            return _event(signature, node, inner=True)
    return None
