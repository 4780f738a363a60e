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

"""Settings for the serving endpoints, models and the historical feature store.

A `Settings` value is built once, at process start, and handed to the clients
that need it. Nothing in this package reads configuration from module state.

!!! example
    ```python
    from seqex import config

    settings = config.Settings.from_env()
    settings.get_model("baseline").path
    # 'ADS_LST_DNB_BASELINE'
    ```
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

import humps
from seqex.constants import HISTORICAL, MODEL_VARIANT, PREDICT
from seqex.exceptions import ConfigurationError


@dataclass(frozen=True)
class EndpointConfig:
    """Where a TensorFlow Serving gRPC endpoint can be reached.

    With `path_routing` the method path is prefixed with the model path, e.g.
    `/ADS_LST_DNB_BASELINE/tensorflow.serving.PredictionService/Predict`, so
    an ingress can route each model variant to its own backend.
    """

    host: str
    port: int
    use_tls: bool = False
    cert_path: Optional[str] = None
    path_routing: bool = False

    @property
    def target(self) -> str:
        return "{}:{}".format(self.host, self.port)


@dataclass(frozen=True)
class ModelConfig:
    """A served model variant.

    # Arguments
        name: Model name in the `ModelSpec` of the request.
        signature: Signature name, defaults to `serving_default`.
        path: Path prefix the ingress routes on, e.g. `ADS_LST_DNB_BASELINE`.
    """

    name: str
    signature: str = PREDICT.DEFAULT_SIGNATURE
    path: Optional[str] = None


@dataclass(frozen=True)
class RequestDefaults:
    timeout_ms: int = PREDICT.DEFAULT_TIMEOUT_MS
    signature: str = PREDICT.DEFAULT_SIGNATURE
    dtype_string: int = 7


def _default_feature_defaults() -> Dict[str, Union[int, float]]:
    return {
        name: 0 if name in HISTORICAL.COUNT_FEATURES else 0.0
        for name in HISTORICAL.FEATURE_NAMES
    }


@dataclass(frozen=True)
class HistoricalStoreConfig:
    """Connection and lookup settings of the ScyllaDB historical feature store.

    Timeouts are in seconds. `feature_defaults` holds the value used for a
    feature when no row exists, or when the row lacks that column.
    """

    contact_points: List[str] = field(default_factory=lambda: ["127.0.0.1"])
    port: int = 9042
    local_dc: str = "datacenter1"
    keyspace: str = HISTORICAL.KEYSPACE
    table: str = HISTORICAL.TABLE
    feature_set_id: str = HISTORICAL.FEATURE_SET_ID
    username: Optional[str] = None
    password: Optional[str] = None
    connect_timeout: float = 5.0
    request_timeout: float = 10.0
    fallback_to_defaults: bool = True
    feature_defaults: Dict[str, Union[int, float]] = field(
        default_factory=_default_feature_defaults
    )


def _default_pod() -> EndpointConfig:
    return EndpointConfig(host="100.68.113.134", port=9500, use_tls=False)


def _default_ingress() -> EndpointConfig:
    return EndpointConfig(
        host="holmes-ads-v2.sharechat.internal",
        port=443,
        use_tls=True,
        cert_path="ingress.crt",
        path_routing=True,
    )


def _default_models() -> Dict[str, ModelConfig]:
    return {
        MODEL_VARIANT.BASELINE: ModelConfig(
            name="dnb_model_baseline", path="ADS_LST_DNB_BASELINE"
        ),
        MODEL_VARIANT.CONSERVATIVE: ModelConfig(
            name="dnb_model_conservative", path="ADS_LST_DNB_CONSERVATIVE"
        ),
        MODEL_VARIANT.AGGRESSIVE: ModelConfig(
            name="dnb_model_aggressive", path="ADS_LST_DNB_AGGRESSIVE"
        ),
    }


def _build(cls, data: Optional[Mapping[str, Any]], section: str):
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            "Section `{}` must be a mapping, got {}".format(section, type(data).__name__)
        )
    known = {f.name for f in dataclasses.fields(cls)}
    kwargs = {}
    for key, value in data.items():
        name = key.lower()
        if name not in known:
            raise ConfigurationError(
                "Unknown setting `{}` in section `{}`".format(key, section)
            )
        kwargs[name] = value
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ConfigurationError("Invalid section `{}`: {}".format(section, e)) from e


@dataclass(frozen=True)
class Settings:
    """All settings of a seqex process.

    Defaults point at the DNB model deployment: direct pod access without TLS,
    and the TLS ingress routing on a per-model path prefix.
    """

    pod: EndpointConfig = field(default_factory=_default_pod)
    ingress: EndpointConfig = field(default_factory=_default_ingress)
    models: Dict[str, ModelConfig] = field(default_factory=_default_models)
    defaults: RequestDefaults = field(default_factory=RequestDefaults)
    historical: HistoricalStoreConfig = field(default_factory=HistoricalStoreConfig)

    ENDPOINTS = ("ingress", "pod")

    def get_model(self, variant: str) -> ModelConfig:
        """Look up a model variant by name, case insensitive.

        # Raises
            `ConfigurationError`: If the variant is not configured.
        """
        model = self.models.get(variant.upper())
        if model is None:
            raise ConfigurationError(
                "Unknown model variant `{}`, configured variants: {}".format(
                    variant, ", ".join(self.models)
                )
            )
        return model

    def get_endpoint(self, name: str = "ingress") -> EndpointConfig:
        if name not in self.ENDPOINTS:
            raise ConfigurationError(
                "Unknown endpoint `{}`, use one of: {}".format(
                    name, ", ".join(self.ENDPOINTS)
                )
            )
        return getattr(self, name)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Settings:
        """Build settings from a (possibly partial) nested mapping.

        Keys may be given in snake_case, camelCase or upper case, e.g. `useTls`,
        `use_tls` and `USE_TLS` are the same setting. Missing sections and keys
        keep their defaults.

        # Arguments
            data: Mapping as loaded from a YAML or JSON file.

        # Returns
            `Settings`.

        # Raises
            `ConfigurationError`: If a section or key is unknown or malformed.
        """
        if not data:
            return cls()
        data = {key.lower(): value for key, value in humps.decamelize(dict(data)).items()}
        unknown = set(data) - {"pod", "ingress", "models", "defaults", "historical"}
        if unknown:
            raise ConfigurationError(
                "Unknown settings section(s): {}".format(", ".join(sorted(unknown)))
            )

        kwargs = {}
        for section, section_cls in (
            ("pod", EndpointConfig),
            ("ingress", EndpointConfig),
            ("defaults", RequestDefaults),
            ("historical", HistoricalStoreConfig),
        ):
            if section not in data:
                continue
            section_data = data[section]
            if section_cls is EndpointConfig:
                # endpoints have no usable defaults, start from the built-in ones
                base = getattr(cls(), section)
                section_data = {**dataclasses.asdict(base), **_lower_keys(section_data)}
            elif section_cls is HistoricalStoreConfig:
                section_data = _lower_keys(section_data)
                if "feature_defaults" in section_data:
                    section_data["feature_defaults"] = {
                        **_default_feature_defaults(),
                        **section_data["feature_defaults"],
                    }
            kwargs[section] = _build(section_cls, section_data, section)

        if "models" in data:
            models = data["models"]
            if not isinstance(models, Mapping):
                raise ConfigurationError("Section `models` must be a mapping")
            kwargs["models"] = {
                variant.upper(): _build(ModelConfig, model, "models." + variant)
                for variant, model in models.items()
            }
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        base: Optional[Settings] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Settings:
        """Apply `SEQEX_*` environment overrides on top of `base`.

        Recognized variables: `SEQEX_INGRESS_HOST`, `SEQEX_INGRESS_PORT`,
        `SEQEX_CERT_PATH`, `SEQEX_SCYLLA_CONTACT_POINTS` (comma separated),
        `SEQEX_SCYLLA_USERNAME` and `SEQEX_SCYLLA_PASSWORD`.
        """
        settings = base or cls()
        environ = os.environ if environ is None else environ

        ingress = {}
        if environ.get("SEQEX_INGRESS_HOST"):
            ingress["host"] = environ["SEQEX_INGRESS_HOST"]
        if environ.get("SEQEX_INGRESS_PORT"):
            try:
                ingress["port"] = int(environ["SEQEX_INGRESS_PORT"])
            except ValueError as e:
                raise ConfigurationError(
                    "SEQEX_INGRESS_PORT must be an integer, got `{}`".format(
                        environ["SEQEX_INGRESS_PORT"]
                    )
                ) from e
        if environ.get("SEQEX_CERT_PATH"):
            ingress["cert_path"] = environ["SEQEX_CERT_PATH"]

        historical = {}
        if environ.get("SEQEX_SCYLLA_CONTACT_POINTS"):
            historical["contact_points"] = [
                point.strip()
                for point in environ["SEQEX_SCYLLA_CONTACT_POINTS"].split(",")
                if point.strip()
            ]
        if environ.get("SEQEX_SCYLLA_USERNAME"):
            historical["username"] = environ["SEQEX_SCYLLA_USERNAME"]
        if environ.get("SEQEX_SCYLLA_PASSWORD"):
            historical["password"] = environ["SEQEX_SCYLLA_PASSWORD"]

        return dataclasses.replace(
            settings,
            ingress=dataclasses.replace(settings.ingress, **ingress),
            historical=dataclasses.replace(settings.historical, **historical),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def _lower_keys(data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            "Expected a mapping, got {}".format(type(data).__name__)
        )
    return {key.lower(): value for key, value in data.items()}
