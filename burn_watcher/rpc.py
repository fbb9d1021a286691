from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests
from loguru import logger


class RpcError(Exception):
    """Base class for every failure surfaced by the RPC client."""


class TransportError(RpcError):
    """Connection, DNS, TLS or timeout failure before a response arrived."""


class ProtocolError(RpcError):
    """Non-2xx HTTP status, or a JSON-RPC ``error`` member in the envelope."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: int | None = None,
        rpc_message: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.rpc_message = rpc_message


class DecodeError(RpcError):
    """Response body is not the structured data we expected."""


@dataclass
class SolanaRpcClient:
    rpc_url: str
    timeout: float = 15.0
    session: requests.Session = field(default_factory=requests.Session)

    @classmethod
    def create(cls, rpc_url: str, timeout: float = 15.0) -> SolanaRpcClient:
        session = requests.Session()
        session.headers.update({"Content-Type": "application/json"})
        return cls(rpc_url=rpc_url, timeout=timeout, session=session)

    def call(self, method: str, params: list[Any]) -> Any:
        """
        Perform a single JSON-RPC 2.0 request and return its ``result`` member
        (None when absent). No retries; the caller decides what to do next.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        try:
            r = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method}: {e}") from e

        if not 200 <= r.status_code < 300:
            raise ProtocolError(f"RPC error {r.status_code}: {r.text}", status=r.status_code)

        try:
            body = r.json()
        except ValueError as e:
            raise DecodeError(f"{method}: response is not valid JSON") from e
        if not isinstance(body, dict):
            raise DecodeError(f"{method}: unexpected response envelope: {body!r}")

        if "error" in body:
            err = body["error"]
            code = err.get("code") if isinstance(err, dict) else None
            msg = err.get("message") if isinstance(err, dict) else None
            raise ProtocolError(f"rpc error: {err}", status=r.status_code, code=code, rpc_message=msg)

        logger.trace("{} -> HTTP {}", method, r.status_code)
        return body.get("result")

    def get_signatures_for_address(self, address: str, limit: int = 20) -> list[dict]:
        res = self.call("getSignaturesForAddress", [address, {"limit": limit}])
        if not isinstance(res, list):
            raise DecodeError(f"expected array of signatures, got {type(res).__name__}")
        return res

    def get_transaction(self, signature: str) -> dict | None:
        res = self.call(
            "getTransaction",
            [signature, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}],
        )
        # null: the node does not have the transaction (yet)
        if res is not None and not isinstance(res, dict):
            raise DecodeError(f"expected transaction object, got {type(res).__name__}")
        return res

    def close(self) -> None:
        self.session.close()
