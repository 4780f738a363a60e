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

import importlib.util


# Cassandra / ScyllaDB driver
HAS_CASSANDRA: bool = importlib.util.find_spec("cassandra") is not None
cassandra_not_installed_message = (
    "Cassandra driver package not found. "
    "If you want to look up historical features you can install the corresponding extras via "
    '`pip install "seqex[historical]"`. '
    "You can also install the driver directly in your environment with `pip install cassandra-driver`."
)


class PREDICT:
    SERVICE = "tensorflow.serving.PredictionService"
    METHOD = "Predict"
    EXAMPLES_INPUT = "examples"
    COMMON_INPUT = "common"
    DEFAULT_SIGNATURE = "serving_default"
    DEFAULT_TIMEOUT_MS = 1000
    MAX_MESSAGE_LENGTH = 100 * 1024 * 1024


class MODEL_VARIANT:
    BASELINE = "BASELINE"
    CONSERVATIVE = "CONSERVATIVE"
    AGGRESSIVE = "AGGRESSIVE"

    ALL = (BASELINE, CONSERVATIVE, AGGRESSIVE)


class HISTORICAL:
    KEYSPACE = "ars_feature_store"
    TABLE = "ars_user_features_v2"
    FEATURE_SET_ID = "dnb_historical_features"
    KEY_SEPARATOR = "|"
    VALUE_SEPARATOR = ":"
    # column order of the colon separated `value` column
    FEATURE_NAMES = (
        "requests_1_day",
        "responses_1_day",
        "floor_price_sum_1_day",
        "floor_price_max_1_day",
        "winning_bid_sum_1_day",
        "winning_bid_max_1_day",
        "winrate_1_day",
        "floor_price_avg_1_day",
        "winning_bid_avg_1_day",
        "requests_7_day",
        "responses_7_day",
        "floor_price_sum_7_day",
        "floor_price_max_7_day",
        "winning_bid_sum_7_day",
        "winning_bid_max_7_day",
        "winrate_7_day",
        "floor_price_avg_7_day",
        "winning_bid_avg_7_day",
    )
    COUNT_FEATURES = (
        "requests_1_day",
        "responses_1_day",
        "requests_7_day",
        "responses_7_day",
    )
