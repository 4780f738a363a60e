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
import os
from typing import Optional

from seqex.client.inference_client import GRPCPredictionClient
from seqex.config import EndpointConfig, ModelConfig
from seqex.exceptions import CertificateError


_logger = logging.getLogger(__name__)


def load_root_certificates(path: str) -> bytes:
    """Read PEM encoded root certificates from `path`.

    # Raises
        `CertificateError`: If the file does not exist or is empty.
    """
    if not os.path.isfile(path):
        raise CertificateError(path, "Certificate file not found")
    with open(path, "rb") as f:
        certificates = f.read()
    if not certificates.strip():
        raise CertificateError(path, "Certificate file is empty")
    _logger.debug("Loaded %d bytes of root certificates from %s", len(certificates), path)
    return certificates


def client_for_endpoint(
    endpoint: EndpointConfig, model: Optional[ModelConfig] = None
) -> GRPCPredictionClient:
    """Open a prediction client for an endpoint.

    With TLS the certificate at `endpoint.cert_path` is trusted, or the system
    roots when no path is set. With path routing enabled the `model` path is
    used as method path prefix.

    # Arguments
        endpoint: The endpoint to connect to.
        model: The model variant the client will call. Required for endpoints
            with path routing.

    # Returns
        `GRPCPredictionClient`.

    # Raises
        `CertificateError`: If the configured certificate cannot be loaded.
        `ValueError`: If the endpoint routes on path and the model has no path.
    """
    root_certificates = None
    if endpoint.use_tls and endpoint.cert_path:
        root_certificates = load_root_certificates(endpoint.cert_path)

    path_prefix = None
    if endpoint.path_routing:
        if model is None or not model.path:
            raise ValueError(
                "Endpoint {} routes on the model path, a model with a path is required".format(
                    endpoint.target
                )
            )
        path_prefix = model.path

    return GRPCPredictionClient(
        endpoint.target,
        use_tls=endpoint.use_tls,
        root_certificates=root_certificates,
        path_prefix=path_prefix,
    )
