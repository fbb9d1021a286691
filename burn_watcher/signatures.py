from __future__ import annotations

from typing import Any, Iterable, Sequence


def extract_signatures(entries: Iterable[Any]) -> list[str]:
    """Signature strings from a getSignaturesForAddress page, order preserved."""
    out: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        sig = entry.get("signature")
        if isinstance(sig, str):
            out.append(sig)
    return out


def new_since(signatures: Sequence[str], watermark: str | None) -> list[str]:
    """
    Signatures newer than ``watermark``, oldest first.

    ``signatures`` must be newest-first, as the RPC node returns them. Scanning
    stops at the first entry equal to the watermark; when the watermark is None
    or not on the page, the whole page counts as new.
    """
    fresh: list[str] = []
    for sig in signatures:
        if sig == watermark:
            break
        fresh.append(sig)
    fresh.reverse()
    return fresh
