"""
Jupiter API Unit Tests

The HTTP layer is served by httpx.MockTransport; no request leaves the process.
"""

import base64
import json

import httpx
import pytest

from conftest import make_quote, make_quote_payload, SOL_MINT, USDC_MINT
from swap_orchestrator.errors import ApiError, ErrorCode
from swap_orchestrator.protocols.jupiter import JupiterAPI

QUOTE_URL = "https://jup.example.com/swap/v1/quote"
SWAP_URL = "https://jup.example.com/swap/v1/swap"


def make_api(handler) -> JupiterAPI:
    return JupiterAPI(
        timeout=5,
        quote_url=QUOTE_URL,
        swap_url=SWAP_URL,
        transport=httpx.MockTransport(handler),
    )


class TestGetQuote:
    """Tests for JupiterAPI.get_quote"""

    @pytest.mark.asyncio
    async def test_sends_expected_parameters(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=make_quote_payload())

        api = make_api(handler)
        quote = await api.get_quote(SOL_MINT, USDC_MINT, 1_500_000_000, 50)
        await api.close()

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert str(request.url).startswith(QUOTE_URL)
        assert request.url.params["inputMint"] == SOL_MINT
        assert request.url.params["outputMint"] == USDC_MINT
        assert request.url.params["amount"] == "1500000000"
        assert request.url.params["slippageBps"] == "50"
        assert quote.out_amount == 150_000_000

    @pytest.mark.asyncio
    async def test_bad_status(self):
        api = make_api(lambda request: httpx.Response(400, text="Could not find any route"))

        with pytest.raises(ApiError) as exc_info:
            await api.get_quote(SOL_MINT, USDC_MINT, 1, 50)
        await api.close()

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == ErrorCode.API_REQUEST_FAILED

    @pytest.mark.asyncio
    async def test_body_not_json(self):
        api = make_api(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(ApiError) as exc_info:
            await api.get_quote(SOL_MINT, USDC_MINT, 1, 50)
        await api.close()

        assert exc_info.value.code == ErrorCode.API_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_missing_fields(self):
        payload = make_quote_payload()
        del payload["otherAmountThreshold"]
        api = make_api(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(ApiError) as exc_info:
            await api.get_quote(SOL_MINT, USDC_MINT, 1_500_000_000, 50)
        await api.close()

        assert exc_info.value.code == ErrorCode.API_INVALID_RESPONSE
        assert "otherAmountThreshold" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_mint_mismatch(self):
        payload = make_quote_payload(input_mint=USDC_MINT, output_mint=SOL_MINT)
        api = make_api(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(ApiError) as exc_info:
            await api.get_quote(SOL_MINT, USDC_MINT, 1_500_000_000, 50)
        await api.close()

        assert exc_info.value.code == ErrorCode.API_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = make_api(handler)
        with pytest.raises(ApiError) as exc_info:
            await api.get_quote(SOL_MINT, USDC_MINT, 1, 50)
        await api.close()

        assert exc_info.value.code == ErrorCode.API_REQUEST_FAILED
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)


class TestGetSwapTransaction:
    """Tests for JupiterAPI.get_swap_transaction"""

    @pytest.mark.asyncio
    async def test_posts_quote_and_decodes_payload(self):
        seen = []
        tx_bytes = b"\x01serialized-transaction"

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"swapTransaction": base64.b64encode(tx_bytes).decode(), "lastValidBlockHeight": 1},
            )

        quote = make_quote()
        api = make_api(handler)
        result = await api.get_swap_transaction(quote, "UserPubkey111")
        await api.close()

        assert result == tx_bytes
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == SWAP_URL
        body = json.loads(request.content)
        assert body == {
            "quoteResponse": quote.raw_response,
            "userPublicKey": "UserPubkey111",
            "wrapAndUnwrapSol": True,
        }

    @pytest.mark.asyncio
    async def test_missing_swap_transaction(self):
        api = make_api(lambda request: httpx.Response(200, json={"error": "nope"}))

        with pytest.raises(ApiError) as exc_info:
            await api.get_swap_transaction(make_quote(), "UserPubkey111")
        await api.close()

        assert exc_info.value.code == ErrorCode.API_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_payload_not_base64(self):
        api = make_api(lambda request: httpx.Response(200, json={"swapTransaction": "not base64!!"}))

        with pytest.raises(ApiError) as exc_info:
            await api.get_swap_transaction(make_quote(), "UserPubkey111")
        await api.close()

        assert exc_info.value.code == ErrorCode.API_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_server_error(self):
        api = make_api(lambda request: httpx.Response(500, text="internal"))

        with pytest.raises(ApiError) as exc_info:
            await api.get_swap_transaction(make_quote(), "UserPubkey111")
        await api.close()

        assert exc_info.value.status_code == 500
