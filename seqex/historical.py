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

"""Historical user features stored in ScyllaDB.

Rows of the feature store are keyed on `"{userid}|{ad_type}|{source_app}"`
and hold the feature values of one feature set as a single colon separated
string. The column order of that string is `HISTORICAL.FEATURE_NAMES`.

!!! example
    ```python
    from seqex import config, historical

    settings = config.Settings.from_env()
    with historical.HistoricalFeatureClient(settings.historical) as store:
        store.get_historical_features_with_defaults("749603295", "SC_CPCV_1", "SC")
    ```
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from seqex.config import HistoricalStoreConfig
from seqex.constants import HAS_CASSANDRA, HISTORICAL, cassandra_not_installed_message
from seqex.exceptions import HistoricalStoreError


if HAS_CASSANDRA:
    from cassandra import DriverException, OperationTimedOut, RequestExecutionException
    from cassandra.auth import PlainTextAuthProvider
    from cassandra.cluster import Cluster, NoHostAvailable
    from cassandra.policies import DCAwareRoundRobinPolicy

    _DRIVER_ERRORS: Tuple[type, ...] = (
        DriverException,
        OperationTimedOut,
        RequestExecutionException,
        NoHostAvailable,
    )
else:
    _DRIVER_ERRORS = ()


_logger = logging.getLogger(__name__)

HistoricalFeatures = Dict[str, Union[int, float]]


def lookup_key(userid: Any, ad_type: str, source_app: str) -> str:
    return HISTORICAL.KEY_SEPARATOR.join([str(userid), ad_type, source_app])


def _parse_number(raw: str, default: Union[int, float], integral: bool):
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    if integral and number.is_integer():
        return int(number)
    return number


def format_feature_value(value: Union[int, float]) -> str:
    """Decimal text of a historical feature, whole numbers without a fraction.

    ```python
    format_feature_value(5.0), format_feature_value(0.25)
    # ('5', '0.25')
    ```
    """
    # beyond 1e21 the exponent form is kept, e.g. `1e+21`
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def parse_feature_values(
    value: Optional[str], defaults: Mapping[str, Union[int, float]]
) -> HistoricalFeatures:
    """Map a colon separated `value` column onto the named historical features.

    Missing or unparsable entries take their value from `defaults`. Whole request and
    response counts are returned as `int`, everything else as `float`.
    """
    raw_values = str(value).split(HISTORICAL.VALUE_SEPARATOR) if value else []
    features = {}
    for position, name in enumerate(HISTORICAL.FEATURE_NAMES):
        integral = name in HISTORICAL.COUNT_FEATURES
        default = defaults.get(name, 0 if integral else 0.0)
        if position < len(raw_values) and raw_values[position].strip():
            features[name] = _parse_number(raw_values[position], default, integral)
        else:
            features[name] = default
    return features


def to_feature_lists(features: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Render historical features as one element string lists.

    The DNB models parse historical features from bytes features, so the
    numbers are sent as their decimal text, see `format_feature_value()`.

    ```python
    to_feature_lists({"requests_1_day": 12, "winrate_1_day": 0.0})
    # {'requests_1_day': ['12'], 'winrate_1_day': ['0']}
    ```
    """
    return {name: [format_feature_value(value)] for name, value in features.items()}


class HistoricalFeatureClient:
    """Client of the historical feature table.

    # Arguments
        config: Connection and lookup settings.
        defaults: Per feature fallback values, defaults to `config.feature_defaults`.
    """

    def __init__(
        self,
        config: HistoricalStoreConfig,
        defaults: Optional[Mapping[str, Union[int, float]]] = None,
    ):
        self._config = config
        self._defaults = dict(
            config.feature_defaults if defaults is None else defaults
        )
        self._cluster = None
        self._session = None
        self._lookup_statement = None

    @property
    def config(self) -> HistoricalStoreConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._session is not None

    def connect(self) -> HistoricalFeatureClient:
        """Open the session and prepare the lookup statement.

        Calling it on a connected client does nothing.

        # Raises
            `ModuleNotFoundError`: If `cassandra-driver` is not installed.
            `cassandra.cluster.NoHostAvailable`: If no contact point can be reached.
        """
        if self.connected:
            _logger.debug("Historical feature store already connected")
            return self
        if not HAS_CASSANDRA:
            raise ModuleNotFoundError(cassandra_not_installed_message)

        auth_provider = None
        if self._config.username:
            auth_provider = PlainTextAuthProvider(
                username=self._config.username, password=self._config.password
            )

        _logger.info(
            "Connecting to historical feature store at %s:%s",
            ",".join(self._config.contact_points),
            self._config.port,
        )
        cluster = Cluster(
            contact_points=list(self._config.contact_points),
            port=self._config.port,
            auth_provider=auth_provider,
            load_balancing_policy=DCAwareRoundRobinPolicy(
                local_dc=self._config.local_dc
            ),
            connect_timeout=self._config.connect_timeout,
        )
        try:
            session = cluster.connect()
            session.default_timeout = self._config.request_timeout
            self._lookup_statement = session.prepare(
                "SELECT featuresetid, featureversionid, value FROM {}.{} "
                "WHERE id = ? AND featuresetid = ?".format(
                    self._config.keyspace, self._config.table
                )
            )
        except Exception:
            cluster.shutdown()
            raise
        self._cluster = cluster
        self._session = session
        return self

    def close(self):
        if self._cluster is not None:
            self._cluster.shutdown()
            _logger.info("Historical feature store connection closed")
        self._cluster = None
        self._session = None
        self._lookup_statement = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, type, value, traceback):
        self.close()

    def _require_session(self):
        if self._session is None:
            raise HistoricalStoreError(
                "Historical feature store client is not connected, call connect() first"
            )
        return self._session

    def get_historical_features(
        self, userid: Any, ad_type: str, source_app: str
    ) -> Optional[HistoricalFeatures]:
        """Look up the historical features of a user, ad type and source app.

        # Returns
            `Dict[str, Union[int, float]]` with all 18 features, or `None` when the
            store has no row for the key.

        # Raises
            `HistoricalStoreError`: If the client is not connected.
        """
        session = self._require_session()
        key = lookup_key(userid, ad_type, source_app)
        rows = list(
            session.execute(
                self._lookup_statement, (key, self._config.feature_set_id)
            )
        )
        if not rows:
            _logger.debug("No historical features found for key %s", key)
            return None

        row = rows[0]
        _logger.debug(
            "Found historical features for key %s (feature set %s, version %s)",
            key,
            row.featuresetid,
            row.featureversionid,
        )
        return parse_feature_values(row.value, self._defaults)

    def get_historical_features_with_defaults(
        self, userid: Any, ad_type: str, source_app: str
    ) -> HistoricalFeatures:
        """Like `get_historical_features()`, but never returns `None`.

        Keys without a row get the default features. Driver errors are answered
        with the defaults as well when `fallback_to_defaults` is enabled, and
        raised otherwise.
        """
        try:
            features = self.get_historical_features(userid, ad_type, source_app)
        except _DRIVER_ERRORS as e:
            if not self._config.fallback_to_defaults:
                raise
            _logger.warning(
                "Historical feature lookup for key %s failed, using defaults: %s",
                lookup_key(userid, ad_type, source_app),
                e,
            )
            return dict(self._defaults)
        if features is None:
            return dict(self._defaults)
        return features

    def batch_get_historical_features(
        self, keys: Iterable[Tuple[Any, str, str]]
    ) -> List[HistoricalFeatures]:
        """Look up several `(userid, ad_type, source_app)` keys, in order, with defaults."""
        return [
            self.get_historical_features_with_defaults(userid, ad_type, source_app)
            for userid, ad_type, source_app in keys
        ]

    def list_keyspaces(self) -> List[str]:
        session = self._require_session()
        rows = session.execute("SELECT keyspace_name FROM system_schema.keyspaces")
        return [row.keyspace_name for row in rows]

    def test_connection(self) -> Dict[str, str]:
        """Query `system.local` of the coordinator.

        # Returns
            `dict` with `cluster_name` and `release_version`.
        """
        session = self._require_session()
        row = session.execute(
            "SELECT cluster_name, release_version FROM system.local"
        ).one()
        result = {
            "cluster_name": row.cluster_name,
            "release_version": row.release_version,
        }
        _logger.info(
            "Connected to cluster %s, release %s",
            result["cluster_name"],
            result["release_version"],
        )
        return result

    def get_table_schema(self, table: Optional[str] = None) -> List[Dict[str, str]]:
        """Columns of `table` in the configured keyspace, defaults to the feature table.

        # Returns
            `List[dict]`, one `{"column_name": ..., "type": ...}` per column.
        """
        session = self._require_session()
        rows = session.execute(
            "SELECT column_name, type FROM system_schema.columns "
            "WHERE keyspace_name = %s AND table_name = %s",
            (self._config.keyspace, table or self._config.table),
        )
        return [{"column_name": row.column_name, "type": row.type} for row in rows]
