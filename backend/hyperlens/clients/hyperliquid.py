"""
Hyperliquid upstream client

PURPOSE: Async access to the public Hyperliquid endpoints used by HyperLens:
the info API (clearinghouse state, mids, market metadata), the explorer API
(Hypercore transactions, blocks and user activity) and the HyperEVM JSON-RPC
endpoint. Uses an httpx async client, one circuit breaker per upstream and
retries on transport errors.

CALLED BY:
    - search/verifier.py
    - services/positions_service.py
"""

from typing import Any, Dict, List, Optional

import httpx

from hyperlens.config.settings import Settings, settings as default_settings
from hyperlens.exceptions import UpstreamError
from hyperlens.utils.decorators import CircuitBreaker, CircuitBreakerOpen, retry
from hyperlens.utils.logger import get_logger

logger = get_logger("clients.hyperliquid")

INFO = "info"
EXPLORER = "explorer"
EVM_RPC = "evm_rpc"


def _as_object(upstream: str, payload: Any, request_type: str) -> Dict[str, Any]:
    """JSON object payload; null becomes {}. Any other shape raises UpstreamError."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise UpstreamError(upstream, f"unexpected {type(payload).__name__} payload for {request_type}")
    return payload


class HyperliquidClient:
    """
    PURPOSE: Thin async wrapper over the Hyperliquid HTTP APIs.

    Every public method returns decoded JSON (or the JSON-RPC "result") and
    raises UpstreamError on HTTP errors, transport failures, malformed
    payloads, JSON-RPC errors, or when the upstream's circuit is open.

    Attributes:
        _urls: Upstream name -> endpoint URL.
        _breakers: Upstream name -> CircuitBreaker.
        _client: Shared httpx.AsyncClient.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        PURPOSE: Initialize the client from settings.

        Args:
            config: Settings providing endpoint URLs and timeouts (defaults to global settings).
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        config = config or default_settings
        self._urls: Dict[str, str] = {
            INFO: config.HYPERLIQUID_INFO_URL,
            EXPLORER: config.HYPERLIQUID_EXPLORER_URL,
            EVM_RPC: config.HYPEREVM_RPC_URL,
        }
        self._breakers: Dict[str, CircuitBreaker] = {
            name: CircuitBreaker(
                name=name,
                failure_threshold=config.CIRCUIT_FAILURE_THRESHOLD,
                reset_timeout=config.CIRCUIT_RESET_SECONDS,
            )
            for name in self._urls
        }
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.HTTP_TIMEOUT_SECONDS,
                connect=config.HTTP_CONNECT_TIMEOUT_SECONDS,
            ),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._rpc_id = 0

    async def close(self) -> None:
        """
        PURPOSE: Close the underlying HTTP client.
        """
        if not self._client.is_closed:
            await self._client.aclose()

    # ────────────────────────────────────────────────────────────
    # Transport
    # ────────────────────────────────────────────────────────────

    @retry(max_retries=2, delay=0.25, backoff=2.0, exceptions=(httpx.TransportError,))
    async def _post_json(self, url: str, body: Dict[str, Any]) -> Any:
        resp = await self._client.post(url, json=body)
        resp.raise_for_status()
        return resp.json()

    async def _request(self, upstream: str, body: Dict[str, Any]) -> Any:
        """
        PURPOSE: POST a JSON body to an upstream under its circuit breaker.

        Args:
            upstream: INFO, EXPLORER or EVM_RPC.
            body: JSON request body.

        Returns:
            Any: Decoded JSON response.

        Raises:
            UpstreamError: On any failure.
        """
        try:
            return await self._breakers[upstream].call(self._post_json, self._urls[upstream], body)
        except CircuitBreakerOpen as e:
            raise UpstreamError(upstream, str(e)) from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "upstream_http_error",
                upstream=upstream,
                status_code=e.response.status_code,
                request_type=body.get("type") or body.get("method"),
            )
            raise UpstreamError(upstream, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "upstream_transport_error",
                upstream=upstream,
                error=str(e),
                request_type=body.get("type") or body.get("method"),
            )
            raise UpstreamError(upstream, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise UpstreamError(upstream, f"invalid JSON response: {e}") from e

    async def info(self, request_type: str, **params: Any) -> Any:
        """POST {"type": request_type, **params} to the info API."""
        return await self._request(INFO, {"type": request_type, **params})

    async def explorer(self, request_type: str, **params: Any) -> Any:
        """POST {"type": request_type, **params} to the explorer API."""
        return await self._request(EXPLORER, {"type": request_type, **params})

    async def rpc(self, method: str, params: List[Any]) -> Any:
        """
        PURPOSE: Call a HyperEVM JSON-RPC method.

        Args:
            method: JSON-RPC method name (e.g. "eth_getBalance").
            params: Positional parameters.

        Returns:
            Any: The "result" member of the response (may be None).

        Raises:
            UpstreamError: On transport failures or a JSON-RPC error object.
        """
        self._rpc_id += 1
        payload = await self._request(EVM_RPC, {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._rpc_id,
        })

        if not isinstance(payload, dict):
            raise UpstreamError(EVM_RPC, f"unexpected response for {method}")
        if payload.get("error"):
            message = payload["error"].get("message", "unknown error") if isinstance(
                payload["error"], dict
            ) else str(payload["error"])
            raise UpstreamError(EVM_RPC, f"{method}: {message}")

        return payload.get("result")

    # ────────────────────────────────────────────────────────────
    # Info API
    # ────────────────────────────────────────────────────────────

    async def clearinghouse_state(self, user: str) -> Dict[str, Any]:
        """Perp clearinghouse state (margin summary and asset positions) of a user."""
        payload = await self.info("clearinghouseState", user=user.lower())
        return _as_object(INFO, payload, "clearinghouseState")

    async def all_mids(self) -> Dict[str, float]:
        """
        PURPOSE: Mid prices for every perp coin.

        Returns:
            Dict[str, float]: coin -> mid price. Unparseable prices are skipped.
        """
        raw = _as_object(INFO, await self.info("allMids"), "allMids")
        mids: Dict[str, float] = {}
        for coin, price in raw.items():
            try:
                mids[coin] = float(price)
            except (TypeError, ValueError):
                continue
        return mids

    async def perp_meta(self) -> Dict[str, Any]:
        """Perp market metadata ({"universe": [{"name": ...}, ...]})."""
        return _as_object(INFO, await self.info("meta"), "meta")

    async def spot_meta(self) -> Dict[str, Any]:
        """Spot metadata ({"tokens": [...], "universe": [...]})."""
        return _as_object(INFO, await self.info("spotMeta"), "spotMeta")

    # ────────────────────────────────────────────────────────────
    # Explorer API (Hypercore)
    # ────────────────────────────────────────────────────────────

    async def user_details(self, user: str) -> Dict[str, Any]:
        """Hypercore transaction history of a user ({"txs": [...]})."""
        payload = await self.explorer("userDetails", user=user.lower())
        return _as_object(EXPLORER, payload, "userDetails")

    async def tx_details(self, tx_hash: str) -> Dict[str, Any]:
        """Hypercore transaction details ({"tx": {...}})."""
        payload = await self.explorer("txDetails", hash=tx_hash.lower())
        return _as_object(EXPLORER, payload, "txDetails")

    async def block_details(self, height: int) -> Dict[str, Any]:
        """Hypercore block details ({"blockDetails": {...}})."""
        payload = await self.explorer("blockDetails", height=height)
        return _as_object(EXPLORER, payload, "blockDetails")

    # ────────────────────────────────────────────────────────────
    # HyperEVM JSON-RPC
    # ────────────────────────────────────────────────────────────

    async def evm_transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """eth_getTransactionByHash; None when the hash is unknown."""
        result = await self.rpc("eth_getTransactionByHash", [tx_hash])
        return _as_object(EVM_RPC, result, "eth_getTransactionByHash") or None

    async def evm_balance(self, address: str) -> int:
        """eth_getBalance at latest, in wei."""
        result = await self.rpc("eth_getBalance", [address, "latest"])
        if not result:
            return 0
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise UpstreamError(EVM_RPC, f"eth_getBalance returned {result!r}") from e

    async def evm_code(self, address: str) -> str:
        """eth_getCode at latest; "0x" for externally owned accounts."""
        result = await self.rpc("eth_getCode", [address, "latest"]) or "0x"
        if not isinstance(result, str):
            raise UpstreamError(EVM_RPC, f"eth_getCode returned {type(result).__name__}")
        return result

    async def evm_block(self, number: int) -> Optional[Dict[str, Any]]:
        """eth_getBlockByNumber without full transactions; None when not produced yet."""
        result = await self.rpc("eth_getBlockByNumber", [hex(number), False])
        return _as_object(EVM_RPC, result, "eth_getBlockByNumber") or None
