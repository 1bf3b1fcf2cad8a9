import pytest

from nethermind.pairscope.config import CoinGeckoConfig, ExplorerConfig, SubgraphConfig
from nethermind.pairscope.credentials import CredentialStore

API_KEY_VARIABLES = ("ETHERSCAN_API_KEY", "THEGRAPH_API_KEY", "COINGECKO_API_KEY", "SUBGRAPH_URL")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keeps tests from reading real API keys from the environment or the user's credential cache"""
    for variable in API_KEY_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.setenv("PAIRSCOPE_HOME", str(tmp_path / "pairscope_home"))


@pytest.fixture(name="credential_store")
def fixture_credential_store(tmp_path) -> CredentialStore:
    return CredentialStore(tmp_path / "credentials" / "credentials.json")


@pytest.fixture(name="sleeps")
def fixture_sleeps() -> list[float]:
    """Collects delays passed to an injected sleep function, ie ``sleep=sleeps.append``"""
    return []


@pytest.fixture(name="explorer_config")
def fixture_explorer_config() -> ExplorerConfig:
    return ExplorerConfig(api_key="test-etherscan-key", call_delay=0.25)


@pytest.fixture(name="subgraph_config")
def fixture_subgraph_config() -> SubgraphConfig:
    return SubgraphConfig(url="https://subgraph.test/graphql", max_retries=3, retry_delay=1.0)


@pytest.fixture(name="coingecko_config")
def fixture_coingecko_config() -> CoinGeckoConfig:
    return CoinGeckoConfig(api_key="test-coingecko-key", base_url="https://coingecko.test/api/v3")
