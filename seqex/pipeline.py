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

"""Historical lookup, feature encoding and prediction, end to end.

!!! example
    ```python
    from seqex import config, historical, pipeline

    settings = config.Settings.from_env()
    with historical.HistoricalFeatureClient(settings.historical) as store:
        with pipeline.InferencePipeline(settings, historical_client=store) as p:
            result = p.predict("749603295", "SC_CPCV_1", "SC", {"city": ["koppal"]})
            print(result.predictions)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import grpc
from seqex import historical, request_builder, sequence_example
from seqex.client import GRPCPredictionClient, client_for_endpoint
from seqex.config import EndpointConfig, ModelConfig, Settings
from seqex.constants import MODEL_VARIANT
from seqex.exceptions import SeqexException
from tqdm.auto import tqdm


_logger = logging.getLogger(__name__)

ClientFactory = Callable[[EndpointConfig, ModelConfig], GRPCPredictionClient]


@dataclass
class PredictionResult:
    """Outcome of one successful prediction."""

    variant: str
    model_name: str
    predictions: Dict[str, Union[float, int]]
    model_version: Optional[int] = None
    request_size: int = 0
    historical_features: Optional[Dict[str, Union[int, float]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "model_name": self.model_name,
            "model_version": self.model_version,
            "request_size": self.request_size,
            "predictions": dict(self.predictions),
        }


@dataclass
class ScoreResult:
    """Outcome of scoring one example against one model variant."""

    example_index: int
    variant: str
    predictions: Dict[str, Union[float, int]] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        return "ok" if self.ok else "error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "example": self.example_index,
            "variant": self.variant,
            "status": self.status,
            "predictions": dict(self.predictions),
            "error": self.error,
        }


def _describe_error(error: Exception) -> str:
    if isinstance(error, grpc.RpcError) and hasattr(error, "code"):
        return "{}: {}".format(error.code().name, error.details())
    return str(error)


class InferencePipeline:
    """Send feature maps to the DNB models, optionally enriched with historical features.

    Prediction clients are opened lazily, one per model variant, and kept until
    `close()`.

    # Arguments
        settings: `Settings` of the process.
        historical_client: Connected `HistoricalFeatureClient`, or `None` to skip
            the historical lookup.
        client_factory: Callable opening a `GRPCPredictionClient` for an endpoint
            and model, defaults to `client_for_endpoint`.
        endpoint: Name of the endpoint to use, `ingress` or `pod`.
    """

    def __init__(
        self,
        settings: Settings,
        historical_client: Optional[historical.HistoricalFeatureClient] = None,
        client_factory: Optional[ClientFactory] = None,
        endpoint: str = "ingress",
    ):
        self._settings = settings
        self._historical_client = historical_client
        self._client_factory = client_factory or client_for_endpoint
        self._endpoint = settings.get_endpoint(endpoint)
        self._clients: Dict[str, GRPCPredictionClient] = {}

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def close(self):
        for client in self._clients.values():
            client.close()
        self._clients = {}

    def _client(self, variant: str, model: ModelConfig) -> GRPCPredictionClient:
        key = variant.upper()
        if key not in self._clients:
            self._clients[key] = self._client_factory(self._endpoint, model)
        return self._clients[key]

    def _timeout(self) -> float:
        return self._settings.defaults.timeout_ms / 1000.0

    def predict_features(
        self,
        features: Mapping[str, Sequence[Any]],
        model: str = MODEL_VARIANT.BASELINE,
        serialized_common: Optional[bytes] = None,
    ) -> PredictionResult:
        """Encode `features` and request a prediction of model variant `model`.

        # Returns
            `PredictionResult`.

        # Raises
            `seqex.exceptions.UnsupportedValueType`: If a feature cannot be encoded.
            `seqex.exceptions.ConfigurationError`: If the model variant is unknown.
            `grpc.RpcError`: If the prediction call fails.
        """
        model_config = self._settings.get_model(model)
        serialized = sequence_example.encode(features)
        request = request_builder.build_predict_request(
            serialized,
            model_config.name,
            signature_name=model_config.signature or self._settings.defaults.signature,
            serialized_common=serialized_common,
        )
        _logger.debug(
            "Requesting prediction from %s with %d features (%d bytes)",
            model_config.name,
            len(features),
            len(serialized),
        )
        response = self._client(model, model_config).predict(
            request, timeout=self._timeout()
        )
        return PredictionResult(
            variant=model.upper(),
            model_name=model_config.name,
            predictions=request_builder.extract_predictions(response),
            model_version=request_builder.model_version(response),
            request_size=len(serialized),
        )

    def build_features(
        self,
        userid: Any,
        ad_type: str,
        source_app: str,
        realtime_features: Optional[Mapping[str, Sequence[Any]]] = None,
    ):
        """Merge identity, historical and real-time features into one feature map.

        Real-time features win over historical ones of the same name.

        # Returns
            `(features, historical_features)`, the latter `None` when there is no store.
        """
        features: Dict[str, Sequence[Any]] = {
            "userid": [str(userid)],
            "ad_type": [ad_type],
            "sourceApp": [source_app],
        }
        historical_features = None
        if self._historical_client is not None:
            historical_features = (
                self._historical_client.get_historical_features_with_defaults(
                    userid, ad_type, source_app
                )
            )
            features.update(historical.to_feature_lists(historical_features))
        if realtime_features:
            features.update(realtime_features)
        return features, historical_features

    def predict(
        self,
        userid: Any,
        ad_type: str,
        source_app: str,
        realtime_features: Optional[Mapping[str, Sequence[Any]]] = None,
        model: str = MODEL_VARIANT.BASELINE,
        serialized_common: Optional[bytes] = None,
    ) -> PredictionResult:
        """Predict for a user, ad type and source app.

        # Arguments
            userid: User id, sent as string feature `userid`.
            ad_type: Ad type, e.g. `SC_CPCV_1`.
            source_app: Source app, e.g. `SC` or `MJ`.
            realtime_features: Additional features of the request.
            model: Model variant, defaults to `BASELINE`.
            serialized_common: Serialized common example sent as input `common`.

        # Returns
            `PredictionResult`.
        """
        features, historical_features = self.build_features(
            userid, ad_type, source_app, realtime_features
        )
        result = self.predict_features(
            features, model=model, serialized_common=serialized_common
        )
        result.historical_features = historical_features
        return result

    def batch_predict(
        self,
        requests: Iterable[Mapping[str, Any]],
        model: str = MODEL_VARIANT.BASELINE,
    ) -> List[PredictionResult]:
        """Run `predict()` for each mapping of `userid`, `ad_type`, `source_app`
        and optionally `realtime_features`, in order."""
        return [
            self.predict(
                request["userid"],
                request["ad_type"],
                request["source_app"],
                realtime_features=request.get("realtime_features"),
                model=model,
            )
            for request in requests
        ]

    def score_all(
        self,
        examples: Sequence[Mapping[str, Sequence[Any]]],
        variants: Sequence[str] = MODEL_VARIANT.ALL,
        progress: bool = True,
    ) -> List[ScoreResult]:
        """Score every example against every model variant.

        A failing call is recorded in its `ScoreResult` and does not stop the run.

        # Returns
            `List[ScoreResult]`, example major.
        """
        results = []
        with tqdm(
            total=len(examples) * len(variants),
            desc="Scoring",
            disable=not progress,
        ) as progress_bar:
            for index, features in enumerate(examples):
                for variant in variants:
                    try:
                        prediction = self.predict_features(features, model=variant)
                        results.append(
                            ScoreResult(index, variant.upper(), prediction.predictions)
                        )
                    except (grpc.RpcError, SeqexException) as e:
                        _logger.warning(
                            "Example %d failed on %s: %s",
                            index,
                            variant,
                            _describe_error(e),
                        )
                        results.append(
                            ScoreResult(index, variant.upper(), error=_describe_error(e))
                        )
                    progress_bar.update(1)
        return results
