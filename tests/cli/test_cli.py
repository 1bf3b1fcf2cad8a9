import io
import json

import pytest
import requests
from click.testing import CliRunner
from rich.console import Console

from nethermind.pairscope.analytics.coingecko import parse_pools
from nethermind.pairscope.cli import pairscope_cli
from nethermind.pairscope.cli.utils import contract_info_table, trending_pools_table
from nethermind.pairscope.config import ExplorerConfig
from nethermind.pairscope.credentials import CredentialStore
from nethermind.pairscope.types.explorer import ContractCallResult

from ..resources.coingecko_responses import TRENDING_PAGE
from ..resources.explorer_responses import (
    POOL_RETURN_WORDS,
    SLOT0_RETURN,
    SQRT_PRICE_X96,
    USDC_ADDRESS,
    USDC_WETH_POOL,
    WETH_ADDRESS,
    jsonrpc_result,
    word,
)
from ..resources.subgraph_responses import POOL_NOT_FOUND, V3_POOL_DAY_DATA
from ..utils import FakeResponse, FakeSession, sequence_handler


@pytest.fixture(name="runner")
def fixture_runner() -> CliRunner:
    return CliRunner(env={"COLUMNS": "200"})


@pytest.fixture(name="explorer_session")
def fixture_explorer_session(monkeypatch) -> FakeSession:
    def _handler(url, kwargs):
        return FakeResponse(jsonrpc_result(POOL_RETURN_WORDS[kwargs["params"]["data"]]))

    session = FakeSession(_handler)
    monkeypatch.setattr(requests, "get", session.get)
    return session


def _patch_sessions(monkeypatch, *responses) -> FakeSession:
    session = FakeSession(sequence_handler(*responses))
    monkeypatch.setattr(requests, "Session", lambda: session)
    return session


class TestDecodeCommands:
    def test_uint(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "uint", word("0bb8"), "--bits", "24"])
        assert result.exit_code == 0
        assert result.output.strip() == "3000"

    def test_int(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "int", "0xfffffe", "-b", "24"])
        assert result.output.strip() == "-2"

    def test_address(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "address", word(USDC_ADDRESS)])
        assert result.output.strip() == USDC_ADDRESS

    def test_slice(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "slice", "0x" + "11" * 32 + "22" * 32, "62", "4"])
        assert result.output.strip() == "0x1122"

    def test_invalid_bits(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "uint", "0x01", "--bits", "12"])
        assert result.exit_code == 2
        assert "Unsupported bit width 12" in result.output

    def test_slot0(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "slot0", SLOT0_RETURN])
        assert result.exit_code == 0
        assert str(SQRT_PRICE_X96) in result.output

    def test_invalid_slot0(self, runner):
        result = runner.invoke(pairscope_cli, ["decode", "slot0", word("01")])
        assert result.exit_code == 1


class TestKeysCommands:
    def test_set_show_remove(self, runner):
        result = runner.invoke(pairscope_cli, ["keys", "set", "etherscan", "ABCDEFGH12345678"])
        assert result.exit_code == 0
        assert CredentialStore().get("etherscan") == "ABCDEFGH12345678"

        result = runner.invoke(pairscope_cli, ["keys", "show"])
        assert "ABCD****5678" in result.output
        assert "ABCDEFGH12345678" not in result.output

        result = runner.invoke(pairscope_cli, ["keys", "remove", "etherscan"])
        assert "Removed etherscan API key" in result.output
        assert CredentialStore().get("etherscan") is None

    def test_unknown_name(self, runner):
        result = runner.invoke(pairscope_cli, ["keys", "set", "infura", "KEY"])
        assert result.exit_code == 2

    def test_show_empty(self, runner):
        result = runner.invoke(pairscope_cli, ["keys", "show"])
        assert "No API keys saved" in result.output


class TestPoolCommands:
    def test_info(self, runner, explorer_session):
        result = runner.invoke(pairscope_cli, ["pool", "info", USDC_WETH_POOL, "--api-key", "KEY", "--json"])

        assert result.exit_code == 0, result.output
        info = json.loads(result.output)
        assert info["fee"] == "3000"
        assert info["feePercentage"] == 0.3
        assert info["token0"] == USDC_ADDRESS
        assert info["tickSpacing"] == "60"
        assert info["unavailable"] == []
        assert len(explorer_session.requests) == 6

    def test_info_uses_stored_key(self, runner, explorer_session):
        CredentialStore().set("etherscan", "STORED-KEY")

        result = runner.invoke(pairscope_cli, ["pool", "info", USDC_WETH_POOL, "--network", "base"])

        assert result.exit_code == 0, result.output
        params = explorer_session.requests[0][2]["params"]
        assert params["apikey"] == "STORED-KEY"
        assert params["chainid"] == 8453
        assert "Pool Contract Info" in result.output

    def test_info_without_key(self, runner, explorer_session):
        result = runner.invoke(pairscope_cli, ["pool", "info", USDC_WETH_POOL])

        assert result.exit_code == 1
        assert "Etherscan API key is required" in result.output
        assert explorer_session.requests == []

    def test_call(self, runner, explorer_session):
        result = runner.invoke(pairscope_cli, ["pool", "call", USDC_WETH_POOL, "tickSpacing", "--api-key", "KEY"])

        assert result.exit_code == 0, result.output
        assert "SignedInt(bit_width=24, value=60)" in result.output
        assert len(explorer_session.requests) == 1

    def test_volume(self, runner, monkeypatch):
        session = _patch_sessions(monkeypatch, FakeResponse(V3_POOL_DAY_DATA))

        result = runner.invoke(
            pairscope_cli,
            ["pool", "volume", USDC_WETH_POOL, "--subgraph-url", "https://subgraph.test", "--days", "30"],
        )

        assert result.exit_code == 0, result.output
        assert "USDC/WETH" in result.output
        assert "Jan 6, 2024" in result.output
        assert session.requests[0][2]["json"]["variables"]["days"] == 30

    def test_volume_pool_not_found(self, runner, monkeypatch):
        _patch_sessions(monkeypatch, FakeResponse(POOL_NOT_FOUND))

        result = runner.invoke(pairscope_cli, ["pool", "volume", USDC_WETH_POOL, "--subgraph-url", "https://x.test"])

        assert result.exit_code == 1
        assert "Pool not found" in result.output

    def test_volume_invalid_days(self, runner):
        result = runner.invoke(pairscope_cli, ["pool", "volume", USDC_WETH_POOL, "--days", "45"])
        assert result.exit_code == 2


class TestTrendingCommand:
    def test_trending(self, runner, monkeypatch):
        monkeypatch.setenv("COINGECKO_API_KEY", "CG")
        session = _patch_sessions(monkeypatch, FakeResponse(TRENDING_PAGE), FakeResponse({"data": []}))

        result = runner.invoke(pairscope_cli, ["trending"])

        assert result.exit_code == 0, result.output
        assert "Trending Pools" in result.output
        assert session.requests[0][2]["headers"]["x-cg-pro-api-key"] == "CG"

    def test_trending_without_key(self, runner, monkeypatch):
        _patch_sessions(monkeypatch, FakeResponse(TRENDING_PAGE))

        result = runner.invoke(pairscope_cli, ["trending"])

        assert result.exit_code == 1
        assert "CoinGecko API key is required" in result.output


class TestRenderers:
    @staticmethod
    def _render(renderable) -> str:
        console = Console(file=io.StringIO(), force_terminal=True, width=200)
        console.print(renderable)
        return console.file.getvalue()

    def test_contract_info_links_tokens_to_explorer(self):
        config = ExplorerConfig(api_key="KEY", explorer_url="https://basescan.org")
        info = ContractCallResult(
            fee="3000",
            fee_percentage=0.3,
            token_0=USDC_ADDRESS,
            token_1=WETH_ADDRESS,
            liquidity="0",
            tick_spacing="60",
            sqrt_price_x96=str(SQRT_PRICE_X96),
            unavailable=("liquidity",),
        )

        output = self._render(contract_info_table(info, config))

        assert config.address_url(USDC_ADDRESS) in output
        assert config.address_url(WETH_ADDRESS) in output
        assert "(unavailable)" in output

    def test_trending_pools_show_network_option(self):
        pools = parse_pools(TRENDING_PAGE, filter_supported=False)

        table = trending_pools_table(pools)

        assert table.columns[2].header == "--network"
        assert list(table.columns[2].cells) == ["ethereum", "-", "base"]
