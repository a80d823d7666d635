"""
PURPOSE: Tests for the Hyperliquid HTTP client using httpx.MockTransport.

Tests:
- Request payload shapes per endpoint
- Response decoding (mids, hex balances, JSON-RPC results)
- Error mapping to UpstreamError and circuit breaking
- Retries on transport errors
- Malformed payloads surfacing as UpstreamError
"""

import json

import httpx
import pytest

from hyperlens.clients.hyperliquid import HyperliquidClient
from hyperlens.exceptions import UpstreamError

WALLET = "0xdd590902cdac0abb4861a6748a256e888acb8d47"


class Recorder:
    """MockTransport handler recording requests and replaying a response factory."""

    def __init__(self, respond):
        self.respond = respond
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append((str(request.url), body))
        return self.respond(request, body)


def json_response(payload, status_code=200):
    return lambda request, body: httpx.Response(status_code, json=payload)


@pytest.fixture
def make_client(test_settings):
    def _make(handler):
        return HyperliquidClient(test_settings, transport=httpx.MockTransport(handler))

    return _make


class TestInfoApi:
    """Test info API calls."""

    async def test_clearinghouse_state_payload(self, make_client, sample_clearinghouse_state):
        recorder = Recorder(json_response(sample_clearinghouse_state))
        client = make_client(recorder)
        state = await client.clearinghouse_state(WALLET.upper().replace("0X", "0x"))
        assert state["marginSummary"]["accountValue"] == "20000.0"
        url, body = recorder.requests[0]
        assert url == "https://api.test/info"
        assert body == {"type": "clearinghouseState", "user": WALLET}
        await client.close()

    async def test_all_mids_parsed(self, make_client):
        client = make_client(Recorder(json_response({"BTC": "62000.5", "ETH": "2900", "BAD": "n/a"})))
        assert await client.all_mids() == {"BTC": 62000.5, "ETH": 2900.0}
        await client.close()

    async def test_meta_null_becomes_empty(self, make_client):
        client = make_client(Recorder(json_response(None)))
        assert await client.perp_meta() == {}
        await client.close()


class TestExplorerApi:
    """Test explorer API calls."""

    async def test_block_details_payload(self, make_client):
        recorder = Recorder(json_response({"blockDetails": {"height": 5}}))
        client = make_client(recorder)
        assert await client.block_details(5) == {"blockDetails": {"height": 5}}
        assert recorder.requests[0] == ("https://api.test/explorer", {"type": "blockDetails", "height": 5})
        await client.close()


class TestEvmRpc:
    """Test JSON-RPC calls."""

    async def test_balance_hex_decoded(self, make_client):
        recorder = Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0xde0b6b3a7640000"}
        ))
        client = make_client(recorder)
        assert await client.evm_balance(WALLET) == 10**18
        url, body = recorder.requests[0]
        assert url == "https://rpc.test/evm"
        assert body["method"] == "eth_getBalance"
        assert body["params"] == [WALLET, "latest"]
        await client.close()

    async def test_block_number_hex_param(self, make_client):
        recorder = Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": None}
        ))
        client = make_client(recorder)
        assert await client.evm_block(100) is None
        assert recorder.requests[0][1]["params"] == ["0x64", False]
        await client.close()

    async def test_code_defaults_to_empty(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": None}
        )))
        assert await client.evm_code(WALLET) == "0x"
        await client.close()

    async def test_rpc_error(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32000, "message": "boom"}}
        )))
        with pytest.raises(UpstreamError, match="boom"):
            await client.evm_transaction("0x" + "a" * 64)
        await client.close()


class TestErrors:
    """Test error mapping and resilience."""

    async def test_http_error(self, make_client):
        client = make_client(Recorder(json_response({"error": "x"}, status_code=500)))
        with pytest.raises(UpstreamError) as exc_info:
            await client.perp_meta()
        assert exc_info.value.source == "info"
        assert "HTTP 500" in str(exc_info.value)
        await client.close()

    async def test_circuit_opens(self, make_client):
        recorder = Recorder(json_response({}, status_code=503))
        client = make_client(recorder)
        for _ in range(2):
            with pytest.raises(UpstreamError):
                await client.perp_meta()
        with pytest.raises(UpstreamError, match="OPEN"):
            await client.perp_meta()
        assert len(recorder.requests) == 2
        await client.close()

    async def test_breakers_are_per_upstream(self, make_client):
        def respond(request, body):
            if "info" in str(request.url):
                return httpx.Response(500, json={})
            return httpx.Response(200, json={"txs": []})

        client = make_client(Recorder(respond))
        for _ in range(3):
            with pytest.raises(UpstreamError):
                await client.perp_meta()
        assert await client.user_details(WALLET) == {"txs": []}
        await client.close()

    async def test_invalid_json(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(200, content=b"not json")))
        with pytest.raises(UpstreamError, match="invalid JSON"):
            await client.spot_meta()
        await client.close()

    async def test_transport_error_retried(self, make_client):
        attempts = []

        def respond(request, body):
            attempts.append(1)
            if len(attempts) < 3:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"universe": []})

        client = make_client(Recorder(respond))
        assert await client.perp_meta() == {"universe": []}
        assert len(attempts) == 3
        await client.close()


class TestMalformedPayloads:
    """Test well-formed JSON of the wrong shape."""

    async def test_list_instead_of_object(self, make_client):
        client = make_client(Recorder(json_response([{"name": "BTC"}])))
        with pytest.raises(UpstreamError, match="unexpected list payload for meta") as exc_info:
            await client.perp_meta()
        assert exc_info.value.source == "info"
        await client.close()

    async def test_string_mids(self, make_client):
        client = make_client(Recorder(json_response("BTC")))
        with pytest.raises(UpstreamError):
            await client.all_mids()
        await client.close()

    async def test_explorer_number(self, make_client):
        client = make_client(Recorder(json_response(42)))
        with pytest.raises(UpstreamError) as exc_info:
            await client.tx_details("0x" + "a" * 64)
        assert exc_info.value.source == "explorer"
        await client.close()

    async def test_bad_balance_hex(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0xzz"}
        )))
        with pytest.raises(UpstreamError, match="eth_getBalance"):
            await client.evm_balance(WALLET)
        await client.close()

    async def test_non_string_code(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": {"code": "0x"}}
        )))
        with pytest.raises(UpstreamError, match="eth_getCode"):
            await client.evm_code(WALLET)
        await client.close()

    async def test_rpc_transaction_not_object(self, make_client):
        client = make_client(Recorder(lambda request, body: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0xabc"}
        )))
        with pytest.raises(UpstreamError, match="eth_getTransactionByHash"):
            await client.evm_transaction("0x" + "a" * 64)
        await client.close()

    async def test_rpc_response_not_object(self, make_client):
        client = make_client(Recorder(json_response(["x"])))
        with pytest.raises(UpstreamError, match="unexpected response"):
            await client.evm_block(1)
        await client.close()
