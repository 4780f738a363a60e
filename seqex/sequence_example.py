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

"""Build and serialize `tensorflow.SequenceExample` messages from feature maps.

!!! example
    ```python
    from seqex import sequence_example

    data = sequence_example.encode({"ad_type": ["SC_CPCV_1"], "count": [42]})
    print(sequence_example.to_hex(data))
    ```

Every value becomes one `Feature` record of its own, and all records of one
feature name form that name's `FeatureList`. The map of feature lists is always
wrapped in `SequenceExample.feature_lists`; TensorFlow Serving rejects payloads
that put the map anywhere else.

The relative order of feature names in the serialized bytes is not part of the
contract. Consumers must not compare payloads byte for byte unless they were
produced with `deterministic=True`; use `equivalent()` instead.
"""

from __future__ import annotations

import enum
import math
import numbers
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

from google.protobuf import text_format
from seqex.exceptions import UnsupportedValueType
from seqex.proto import example_pb2


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
# doubles at or above this magnitude round to inf in single precision
FLOAT32_OVERFLOW = 2.0**128 - 2.0**103

_BYTES_LIKE = (bytes, bytearray, memoryview)


class FeatureKind(str, enum.Enum):
    """Kind of a feature value, named after the `Feature.kind` oneof member."""

    BYTES = "bytes_list"
    FLOAT = "float_list"
    INT64 = "int64_list"


@dataclass(frozen=True)
class FeatureValue:
    """A single feature value with an explicit kind.

    Passing `FeatureValue`s to `encode()` bypasses type inspection, which is
    useful when a whole number must be sent as a float feature or vice versa.

    # Arguments
        kind: The `FeatureKind` of the value.
        value: `bytes` for `BYTES`, `int` for `INT64`, `float` for `FLOAT`.

    # Raises
        `TypeError`: If `value` does not match `kind`.
    """

    kind: FeatureKind
    value: Union[bytes, int, float]

    def __post_init__(self):
        object.__setattr__(self, "kind", FeatureKind(self.kind))
        if self.kind is FeatureKind.BYTES:
            valid = isinstance(self.value, bytes)
        elif self.kind is FeatureKind.INT64:
            valid = (
                isinstance(self.value, int)
                and not isinstance(self.value, bool)
                and INT64_MIN <= self.value <= INT64_MAX
            )
        else:
            valid = isinstance(self.value, float) and not _overflows_float32(self.value)
        if not valid:
            raise TypeError(
                "{!r} is not a valid {} payload".format(self.value, self.kind.name)
            )

    @classmethod
    def of_bytes(cls, value: Union[str, bytes, bytearray, memoryview]) -> FeatureValue:
        if isinstance(value, str):
            value = value.encode("utf-8")
        return cls(FeatureKind.BYTES, bytes(value))

    @classmethod
    def of_int64(cls, value: int) -> FeatureValue:
        return cls(FeatureKind.INT64, int(value))

    @classmethod
    def of_float(cls, value: float) -> FeatureValue:
        return cls(FeatureKind.FLOAT, float(value))


def _overflows_float32(value: float) -> bool:
    return math.isfinite(value) and abs(value) >= FLOAT32_OVERFLOW


FeatureMap = Mapping[str, Any]


def classify(key: str, value: Any) -> FeatureValue:
    """Map a plain Python value to a `FeatureValue`.

    `str` values are UTF-8 encoded, bytes-like values are kept verbatim,
    integral numbers become int64 features and other real numbers become float
    features. Python keeps `2` and `2.0` apart, so does this function: the
    former is an int64 feature, the latter a float feature.

    # Arguments
        key: Name of the feature the value belongs to, used in error messages.
        value: The value to classify.

    # Returns
        `FeatureValue`.

    # Raises
        `UnsupportedValueType`: If the value is of any other type, a `bool`, an
            integer outside the signed 64 bit range or a finite number beyond
            the single precision range.
    """
    if isinstance(value, FeatureValue):
        return value
    if isinstance(value, str):
        return FeatureValue.of_bytes(value)
    if isinstance(value, _BYTES_LIKE):
        return FeatureValue.of_bytes(value)
    type_name = type(value).__name__
    if isinstance(value, bool):
        raise UnsupportedValueType(key, type_name)
    if isinstance(value, numbers.Integral):
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise UnsupportedValueType(key, type_name, "outside the int64 range")
        return FeatureValue(FeatureKind.INT64, value)
    if isinstance(value, numbers.Real):
        if _overflows_float32(float(value)):
            raise UnsupportedValueType(key, type_name, "outside the float32 range")
        return FeatureValue.of_float(value)
    raise UnsupportedValueType(key, type_name)


def _classify_feature(key: Any, values: Any) -> List[FeatureValue]:
    if not isinstance(key, str):
        raise TypeError(
            "Feature names must be strings, got {}".format(type(key).__name__)
        )
    if not key:
        raise ValueError("Feature names must not be empty")
    if isinstance(values, (str,) + _BYTES_LIKE) or not isinstance(values, Iterable):
        raise UnsupportedValueType(
            key, type(values).__name__, "expected a sequence of values"
        )

    classified = []
    for value in values:
        feature_value = classify(key, value)
        if classified and feature_value.kind is not classified[0].kind:
            raise UnsupportedValueType(
                key,
                type(value).__name__,
                "cannot mix {} and {} values in one feature".format(
                    classified[0].kind.name, feature_value.kind.name
                ),
            )
        classified.append(feature_value)
    return classified


def build_sequence_example(features: FeatureMap):
    """Build the `SequenceExample` message for a feature map.

    All values are validated before the message is assembled.

    # Arguments
        features: Mapping of feature name to a sequence of values.

    # Returns
        `tensorflow.SequenceExample` message.

    # Raises
        `UnsupportedValueType`: If a value cannot be classified, or one feature
            mixes kinds.
    """
    classified: List[Tuple[str, List[FeatureValue]]] = [
        (key, _classify_feature(key, values)) for key, values in features.items()
    ]

    sequence_example = example_pb2.SequenceExample()
    # keeps the wrapper on the wire even when there are no features
    sequence_example.feature_lists.SetInParent()
    feature_list_map = sequence_example.feature_lists.feature_list
    for key, feature_values in classified:
        feature_list = feature_list_map[key]
        for feature_value in feature_values:
            record = feature_list.feature.add()
            getattr(record, feature_value.kind.value).value.append(feature_value.value)
    return sequence_example


def encode(features: FeatureMap, deterministic: bool = False) -> bytes:
    """Serialize a feature map as a `tensorflow.SequenceExample`.

    !!! example
        ```python
        encode({"ad_type": ["SC_CPCV_1"]}).hex()
        # '121c0a1a0a0761645f74797065120f0a0d0a0b0a0953435f435043565f31'
        ```

    Float values are narrowed to single precision on the wire, decoding the
    output returns the nearest 32 bit float, not the original double.

    # Arguments
        features: Mapping of feature name to a sequence of values, see `classify()`.
        deterministic: Ask protobuf for a stable map entry order. Defaults to `False`.

    # Returns
        `bytes`. The serialized message.

    # Raises
        `UnsupportedValueType`: If a value cannot be classified, or one feature
            mixes kinds. No bytes are produced in that case.
    """
    return build_sequence_example(features).SerializeToString(
        deterministic=deterministic
    )


def decode(data: Union[bytes, bytearray, memoryview]) -> Dict[str, List[FeatureValue]]:
    """Parse a serialized `SequenceExample` back into feature values.

    Values of all records of a feature list are returned flattened, in order.
    Context features are ignored.

    # Arguments
        data: The serialized message.

    # Returns
        `Dict[str, List[FeatureValue]]`.
    """
    message = example_pb2.SequenceExample.FromString(bytes(data))
    decoded = {}
    for key, feature_list in message.feature_lists.feature_list.items():
        values = []
        for record in feature_list.feature:
            kind = record.WhichOneof("kind")
            if kind is None:
                continue
            kind = FeatureKind(kind)
            values.extend(
                FeatureValue(kind, value) for value in getattr(record, kind.value).value
            )
        decoded[key] = values
    return decoded


def equivalent(
    left: Union[bytes, bytearray, memoryview], right: Union[bytes, bytearray, memoryview]
) -> bool:
    """Whether two serialized `SequenceExample`s carry the same features, in any map order."""
    return decode(left) == decode(right)


def describe(data: Union[bytes, bytearray, memoryview]) -> str:
    """Text format rendering of a serialized `SequenceExample`."""
    return text_format.MessageToString(
        example_pb2.SequenceExample.FromString(bytes(data))
    )


def to_hex(data) -> str:
    """Lowercase hex string of `data`, two characters per byte, no separators."""
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    """Inverse of `to_hex()`, whitespace in `text` is ignored."""
    return bytes.fromhex("".join(text.split()))
