"""
Test Config and Correlation

Tests for swap_orchestrator.config and infra.correlation.
"""

import logging
from logging.handlers import RotatingFileHandler

from swap_orchestrator.config import (
    SWAP_POLICY,
    ExplorerConfig,
    JupiterConfig,
    LoggingConfig,
    RpcConfig,
    setup_logging,
)
from swap_orchestrator.infra import CorrelationContext, RpcClientConfig, get_correlation_id, log_with_correlation


def test_swap_policy():
    """Policy values are fixed constants"""
    assert SWAP_POLICY.slippage_bps == 50
    assert SWAP_POLICY.send_max_retries == 2
    assert SWAP_POLICY.skip_preflight is True
    assert SWAP_POLICY.wrap_and_unwrap_sol is True
    assert SWAP_POLICY.debounce_seconds == 0.5


def test_env_overrides(monkeypatch):
    """Transport settings come from the environment"""
    monkeypatch.setenv("SOLANA_RPC_URL", "https://rpc.example.com")
    monkeypatch.setenv("RPC_MAX_RETRIES", "7")
    monkeypatch.setenv("JUPITER_API_URL", "https://jup.example.com/swap/v1/")
    monkeypatch.setenv("EXPLORER_TX_URL", "https://explorer.example.com/tx/")

    rpc = RpcConfig()
    jupiter = JupiterConfig()

    assert rpc.url == "https://rpc.example.com"
    assert rpc.max_retries == 7
    assert jupiter.quote_url == "https://jup.example.com/swap/v1/quote"
    assert jupiter.swap_url == "https://jup.example.com/swap/v1/swap"
    assert ExplorerConfig().link("abc") == "https://explorer.example.com/tx/abc"


def test_invalid_env_falls_back(monkeypatch):
    monkeypatch.setenv("RPC_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("RPC_MAX_RETRIES", "many")

    rpc = RpcConfig()
    assert rpc.timeout_seconds == 30.0
    assert rpc.max_retries == 3


def test_jupiter_defaults(monkeypatch):
    monkeypatch.delenv("JUPITER_API_URL", raising=False)
    assert JupiterConfig().quote_url == "https://lite-api.jup.ag/swap/v1/quote"


def test_rpc_client_config_overrides():
    """RpcClientConfig keeps explicit values and fills the rest"""
    client_config = RpcClientConfig(timeout_seconds=60.0, max_retries=5)
    assert client_config.timeout_seconds == 60.0
    assert client_config.max_retries == 5
    assert client_config.commitment is not None
    assert client_config.confirm_poll_interval is not None


def test_setup_logging(tmp_path):
    log_file = tmp_path / "logs" / "swap.log"
    log_config = LoggingConfig(
        log_file=str(log_file),
        log_level="DEBUG",
        console_output=False,
    )

    logger = setup_logging(log_config, logger_name="swap_orchestrator.test_setup")
    logger.debug("hello")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RotatingFileHandler)
    logger.handlers[0].flush()
    assert "hello" in log_file.read_text()

    # Calling again replaces handlers instead of stacking them
    setup_logging(log_config, logger_name="swap_orchestrator.test_setup")
    assert len(logger.handlers) == 1
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


def test_correlation_context(caplog):
    logger = logging.getLogger("swap_orchestrator.test_correlation")

    assert get_correlation_id() is None
    with CorrelationContext("swap") as cid:
        assert cid.startswith("swap_")
        assert get_correlation_id() == cid
        with caplog.at_level(logging.INFO, logger="swap_orchestrator.test_correlation"):
            log_with_correlation(logger, logging.INFO, "sending")
    assert get_correlation_id() is None

    assert caplog.records[-1].getMessage() == f"[{cid}] sending"
    assert caplog.records[-1].correlation_id == cid
