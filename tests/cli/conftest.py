"""Pytest fixtures for CLI tests"""

import pytest
from unittest.mock import Mock
from click.testing import CliRunner
from seqex.proto import predict_pb2


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner"""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SEQEX_* variables of the developer environment out of the tests"""
    for name in (
        "SEQEX_CONFIG",
        "SEQEX_PROFILE",
        "SEQEX_INGRESS_HOST",
        "SEQEX_INGRESS_PORT",
        "SEQEX_CERT_PATH",
        "SEQEX_SCYLLA_CONTACT_POINTS",
        "SEQEX_SCYLLA_USERNAME",
        "SEQEX_SCYLLA_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_config_file(tmp_path):
    """Path of a configuration file that does not exist yet"""
    return str(tmp_path / "seqex" / "config.yaml")


@pytest.fixture
def predict_response():
    """Create a PredictResponse with one float output"""
    response = predict_pb2.PredictResponse()
    response.outputs["probability"].float_val.append(0.5)
    response.model_spec.version.value = 7
    return response


@pytest.fixture
def mock_prediction_client(mocker, predict_response):
    """Mock the gRPC prediction client opened by the pipeline"""
    client = Mock()
    client.predict.return_value = predict_response
    factory = mocker.patch("seqex_cli.session.client_for_endpoint", return_value=client)
    client.factory = factory
    return client


@pytest.fixture
def mock_historical_client(mocker):
    """Mock the historical feature store client"""
    client = Mock()
    client.get_historical_features_with_defaults.return_value = {
        "requests_1_day": 12,
        "winrate_1_day": 0.25,
    }
    mocker.patch("seqex_cli.session.HistoricalFeatureClient", return_value=client)
    return client
