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

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import grpc
from seqex.constants import PREDICT
from seqex.proto.prediction_service_pb2_grpc import PredictionServiceStub


_logger = logging.getLogger(__name__)


class _PathPrefixInterceptor(grpc.UnaryUnaryClientInterceptor):
    """Interceptor that prepends a path prefix to gRPC method calls for path-based routing."""

    def __init__(self, path_prefix: str):
        self._path_prefix = path_prefix

    def intercept_unary_unary(self, continuation, client_call_details, request):
        new_method = self._path_prefix + client_call_details.method
        new_details = _ClientCallDetails(
            method=new_method,
            timeout=client_call_details.timeout,
            metadata=client_call_details.metadata,
            credentials=client_call_details.credentials,
            wait_for_ready=client_call_details.wait_for_ready,
            compression=client_call_details.compression,
        )
        return continuation(new_details, request)


class _ClientCallDetails(
    grpc.ClientCallDetails,
):
    """Implementation of grpc.ClientCallDetails for use by interceptors."""

    def __init__(
        self, method, timeout, metadata, credentials, wait_for_ready, compression
    ):
        self.method = method
        self.timeout = timeout
        self.metadata = metadata
        self.credentials = credentials
        self.wait_for_ready = wait_for_ready
        self.compression = compression


def normalize_path_prefix(path: str) -> str:
    """`ADS_LST_DNB_BASELINE` -> `/ADS_LST_DNB_BASELINE`."""
    return "/" + path.strip("/")


class GRPCPredictionClient:
    """Unary client for `tensorflow.serving.PredictionService/Predict`.

    # Arguments
        url: `host:port` of the serving endpoint or ingress.
        use_tls: Open a TLS channel, defaults to `False`.
        root_certificates: PEM encoded CA certificates to trust, the system
            roots are used when `None`. Only used with `use_tls`.
        path_prefix: Path the ingress routes on, prepended to the method path.
    """

    def __init__(
        self,
        url: str,
        use_tls: bool = False,
        root_certificates: Optional[bytes] = None,
        path_prefix: Optional[str] = None,
    ):
        channel_opt = [
            ("grpc.max_send_message_length", PREDICT.MAX_MESSAGE_LENGTH),
            ("grpc.max_receive_message_length", PREDICT.MAX_MESSAGE_LENGTH),
        ]

        if use_tls:
            credentials = grpc.ssl_channel_credentials(
                root_certificates=root_certificates
            )
            self._channel = grpc.secure_channel(url, credentials, options=channel_opt)
        else:
            self._channel = grpc.insecure_channel(url, options=channel_opt)

        # Apply path prefix interceptor for path-based routing
        if path_prefix:
            self._channel = grpc.intercept_channel(
                self._channel, _PathPrefixInterceptor(normalize_path_prefix(path_prefix))
            )

        self._client_stub = PredictionServiceStub(self._channel)
        self._url = url
        _logger.debug(
            "Opened %s channel to %s (path prefix: %s)",
            "TLS" if use_tls else "insecure",
            url,
            path_prefix,
        )

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def close(self):
        """Close the client. Future calls to server will result in an Error."""
        self._channel.close()

    def predict(
        self,
        request,
        metadata: Optional[Sequence[Tuple[str, str]]] = None,
        timeout: Optional[float] = None,
    ):
        """Send a `PredictRequest` and wait for the `PredictResponse`.

        # Arguments
            request: `tensorflow.serving.PredictRequest`.
            metadata: Optional gRPC metadata pairs.
            timeout: Deadline of the call in seconds.

        # Returns
            `tensorflow.serving.PredictResponse`.

        # Raises
            `grpc.RpcError`: If the call fails, unchanged.
        """
        try:
            return self._client_stub.Predict(
                request=request, metadata=metadata, timeout=timeout
            )
        except grpc.RpcError as rpc_error:
            code = rpc_error.code() if hasattr(rpc_error, "code") else None
            details = rpc_error.details() if hasattr(rpc_error, "details") else None
            _logger.error(
                "Predict request for model `%s` to %s failed: %s %s",
                request.model_spec.name,
                self._url,
                code,
                details,
            )
            raise
