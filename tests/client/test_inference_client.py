#
#   Copyright 2025 Hopsworks AB
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#

from concurrent import futures

import grpc
import pytest
from seqex import request_builder, sequence_example
from seqex.client import base, inference_client
from seqex.client.inference_client import (
    GRPCPredictionClient,
    _ClientCallDetails,
    _PathPrefixInterceptor,
)
from seqex.config import EndpointConfig, ModelConfig
from seqex.constants import PREDICT
from seqex.exceptions import CertificateError
from seqex.proto import predict_pb2
from seqex.proto.prediction_service_pb2_grpc import PREDICT_METHOD


class _RpcError(grpc.RpcError):
    def code(self):
        return grpc.StatusCode.UNAVAILABLE

    def details(self):
        return "connection refused"


class _RecordingHandler(grpc.GenericRpcHandler):
    """Answers every method path with a fixed response and records the paths."""

    def __init__(self, response):
        self.methods = []
        self._response = response

    def service(self, handler_call_details):
        self.methods.append(handler_call_details.method)
        return grpc.unary_unary_rpc_method_handler(
            lambda request, context: self._response,
            request_deserializer=predict_pb2.PredictRequest.FromString,
            response_serializer=predict_pb2.PredictResponse.SerializeToString,
        )


@pytest.fixture
def prediction_server():
    response = predict_pb2.PredictResponse()
    response.outputs["probability"].float_val.append(0.75)
    handler = _RecordingHandler(response)
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=2))
    server.add_generic_rpc_handlers((handler,))
    port = server.add_insecure_port("localhost:0")
    server.start()
    yield "localhost:{}".format(port), handler
    server.stop(None)


class TestPathPrefixInterceptor:
    def test_prefixes_method(self, mocker):
        # Arrange
        interceptor = _PathPrefixInterceptor("/ADS_LST_DNB_BASELINE")
        continuation = mocker.Mock()
        details = _ClientCallDetails(
            method=PREDICT_METHOD,
            timeout=1.0,
            metadata=[("k", "v")],
            credentials=None,
            wait_for_ready=None,
            compression=None,
        )

        # Act
        interceptor.intercept_unary_unary(continuation, details, "request")

        # Assert
        new_details, request = continuation.call_args.args
        assert (
            new_details.method
            == "/ADS_LST_DNB_BASELINE/tensorflow.serving.PredictionService/Predict"
        )
        assert new_details.timeout == 1.0
        assert new_details.metadata == [("k", "v")]
        assert request == "request"

    def test_normalize_path_prefix(self):
        assert inference_client.normalize_path_prefix("ADS") == "/ADS"
        assert inference_client.normalize_path_prefix("/ADS/") == "/ADS"


class TestGRPCPredictionClient:
    def test_insecure_channel(self, mocker):
        # Arrange
        mock_insecure = mocker.patch("grpc.insecure_channel")
        mock_secure = mocker.patch("grpc.secure_channel")
        mock_intercept = mocker.patch("grpc.intercept_channel")

        # Act
        GRPCPredictionClient("100.68.113.134:9500")

        # Assert
        mock_insecure.assert_called_once_with(
            "100.68.113.134:9500",
            options=[
                ("grpc.max_send_message_length", PREDICT.MAX_MESSAGE_LENGTH),
                ("grpc.max_receive_message_length", PREDICT.MAX_MESSAGE_LENGTH),
            ],
        )
        mock_secure.assert_not_called()
        mock_intercept.assert_not_called()

    def test_tls_channel_with_path_prefix(self, mocker):
        # Arrange
        mock_credentials = mocker.patch("grpc.ssl_channel_credentials")
        mock_secure = mocker.patch("grpc.secure_channel")
        mock_intercept = mocker.patch("grpc.intercept_channel")

        # Act
        client = GRPCPredictionClient(
            "ingress.local:443",
            use_tls=True,
            root_certificates=b"PEM",
            path_prefix="ADS_LST_DNB_BASELINE",
        )

        # Assert
        mock_credentials.assert_called_once_with(root_certificates=b"PEM")
        assert mock_secure.call_args.args[:2] == (
            "ingress.local:443",
            mock_credentials.return_value,
        )
        channel, interceptor = mock_intercept.call_args.args
        assert channel is mock_secure.return_value
        assert isinstance(interceptor, _PathPrefixInterceptor)
        assert interceptor._path_prefix == "/ADS_LST_DNB_BASELINE"
        assert client._channel is mock_intercept.return_value

    def test_predict_passes_timeout_and_metadata(self, mocker):
        # Arrange
        mocker.patch("grpc.insecure_channel")
        mock_stub = mocker.patch("seqex.client.inference_client.PredictionServiceStub")
        client = GRPCPredictionClient("localhost:9500")
        request = request_builder.build_predict_request(b"\x12\x00", "m")

        # Act
        response = client.predict(request, metadata=[("a", "b")], timeout=0.5)

        # Assert
        mock_stub.return_value.Predict.assert_called_once_with(
            request=request, metadata=[("a", "b")], timeout=0.5
        )
        assert response is mock_stub.return_value.Predict.return_value

    def test_predict_reraises_rpc_error(self, mocker, caplog):
        # Arrange
        mocker.patch("grpc.insecure_channel")
        mock_stub = mocker.patch("seqex.client.inference_client.PredictionServiceStub")
        mock_stub.return_value.Predict.side_effect = _RpcError()
        client = GRPCPredictionClient("localhost:9500")
        request = request_builder.build_predict_request(b"\x12\x00", "dnb_model_baseline")

        # Act
        with pytest.raises(_RpcError):
            client.predict(request)

        # Assert
        assert "dnb_model_baseline" in caplog.text
        assert "connection refused" in caplog.text

    def test_context_manager_closes_channel(self, mocker):
        # Arrange
        mock_insecure = mocker.patch("grpc.insecure_channel")

        # Act
        with GRPCPredictionClient("localhost:9500"):
            pass

        # Assert
        mock_insecure.return_value.close.assert_called_once()

    def test_path_prefix_reaches_server(self, prediction_server):
        # Arrange
        target, handler = prediction_server
        request = request_builder.build_predict_request(
            sequence_example.encode({"ad_type": ["SC_CPCV_1"]}), "dnb_model_baseline"
        )

        # Act
        with GRPCPredictionClient(target, path_prefix="ADS_LST_DNB_BASELINE") as client:
            response = client.predict(request, timeout=5)

        # Assert
        assert handler.methods == [
            "/ADS_LST_DNB_BASELINE/tensorflow.serving.PredictionService/Predict"
        ]
        assert request_builder.extract_predictions(response) == {"probability": 0.75}

    def test_plain_method_path_without_prefix(self, prediction_server):
        # Arrange
        target, handler = prediction_server
        request = request_builder.build_predict_request(b"\x12\x00", "m")

        # Act
        with GRPCPredictionClient(target) as client:
            client.predict(request, timeout=5)

        # Assert
        assert handler.methods == ["/tensorflow.serving.PredictionService/Predict"]


class TestLoadRootCertificates:
    def test_missing_file(self, tmp_path):
        path = str(tmp_path / "ingress.crt")

        with pytest.raises(CertificateError) as e_info:
            base.load_root_certificates(path)

        assert e_info.value.path == path
        assert "not found" in str(e_info.value)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "ingress.crt"
        path.write_bytes(b"")

        with pytest.raises(CertificateError) as e_info:
            base.load_root_certificates(str(path))

        assert "empty" in str(e_info.value)

    def test_reads_file(self, tmp_path):
        path = tmp_path / "ingress.crt"
        path.write_bytes(b"-----BEGIN CERTIFICATE-----\n")

        assert base.load_root_certificates(str(path)) == b"-----BEGIN CERTIFICATE-----\n"


class TestClientForEndpoint:
    def test_ingress_uses_cert_and_model_path(self, mocker, tmp_path):
        # Arrange
        cert = tmp_path / "ingress.crt"
        cert.write_bytes(b"PEM")
        mock_client = mocker.patch("seqex.client.base.GRPCPredictionClient")
        endpoint = EndpointConfig(
            host="ingress.local",
            port=443,
            use_tls=True,
            cert_path=str(cert),
            path_routing=True,
        )

        # Act
        base.client_for_endpoint(
            endpoint, ModelConfig(name="dnb_model_baseline", path="ADS_LST_DNB_BASELINE")
        )

        # Assert
        mock_client.assert_called_once_with(
            "ingress.local:443",
            use_tls=True,
            root_certificates=b"PEM",
            path_prefix="ADS_LST_DNB_BASELINE",
        )

    def test_pod_has_no_tls_and_no_prefix(self, mocker):
        # Arrange
        mock_client = mocker.patch("seqex.client.base.GRPCPredictionClient")

        # Act
        base.client_for_endpoint(
            EndpointConfig(host="100.68.113.134", port=9500),
            ModelConfig(name="dnb_model_baseline", path="ADS_LST_DNB_BASELINE"),
        )

        # Assert
        mock_client.assert_called_once_with(
            "100.68.113.134:9500",
            use_tls=False,
            root_certificates=None,
            path_prefix=None,
        )

    def test_tls_without_cert_uses_system_roots(self, mocker):
        # Arrange
        mock_client = mocker.patch("seqex.client.base.GRPCPredictionClient")

        # Act
        base.client_for_endpoint(
            EndpointConfig(host="ingress.local", port=443, use_tls=True)
        )

        # Assert
        assert mock_client.call_args.kwargs["root_certificates"] is None

    def test_missing_cert_raises(self, tmp_path):
        endpoint = EndpointConfig(
            host="ingress.local",
            port=443,
            use_tls=True,
            cert_path=str(tmp_path / "missing.crt"),
        )

        with pytest.raises(CertificateError):
            base.client_for_endpoint(endpoint)

    def test_path_routing_requires_model_path(self):
        endpoint = EndpointConfig(host="ingress.local", port=443, path_routing=True)

        with pytest.raises(ValueError):
            base.client_for_endpoint(endpoint, ModelConfig(name="m"))
