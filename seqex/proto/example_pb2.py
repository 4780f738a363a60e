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

"""`tensorflow/core/example/{feature,example}.proto` message classes.

Field numbers and nesting are identical to the TensorFlow definitions, so the
bytes produced here are parsed by TensorFlow Serving like any
`tf.train.SequenceExample.SerializeToString()` output.
"""

from seqex.proto import _schema
from seqex.proto._schema import (
    LABEL_REPEATED,
    TYPE_BYTES,
    TYPE_FLOAT,
    TYPE_INT64,
    TYPE_MESSAGE,
)


_PACKAGE = "tensorflow"

_file = _schema.new_file("tensorflow/core/example/example.proto", _PACKAGE)

_bytes_list = _schema.add_message(_file, "BytesList")
_schema.add_field(_bytes_list, "value", 1, TYPE_BYTES, label=LABEL_REPEATED)

_float_list = _schema.add_message(_file, "FloatList")
_schema.add_field(
    _float_list, "value", 1, TYPE_FLOAT, label=LABEL_REPEATED, packed=True
)

_int64_list = _schema.add_message(_file, "Int64List")
_schema.add_field(
    _int64_list, "value", 1, TYPE_INT64, label=LABEL_REPEATED, packed=True
)

_feature = _schema.add_message(_file, "Feature")
_feature.oneof_decl.add().name = "kind"
_schema.add_field(
    _feature, "bytes_list", 1, TYPE_MESSAGE, type_name=".tensorflow.BytesList", oneof_index=0
)
_schema.add_field(
    _feature, "float_list", 2, TYPE_MESSAGE, type_name=".tensorflow.FloatList", oneof_index=0
)
_schema.add_field(
    _feature, "int64_list", 3, TYPE_MESSAGE, type_name=".tensorflow.Int64List", oneof_index=0
)

_features = _schema.add_message(_file, "Features")
_schema.add_map_field(
    _features, "tensorflow.Features", "feature", 1, TYPE_MESSAGE, ".tensorflow.Feature"
)

_feature_list = _schema.add_message(_file, "FeatureList")
_schema.add_field(
    _feature_list,
    "feature",
    1,
    TYPE_MESSAGE,
    label=LABEL_REPEATED,
    type_name=".tensorflow.Feature",
)

# SequenceExample.feature_lists points at this wrapper, not at the map itself
_feature_lists = _schema.add_message(_file, "FeatureLists")
_schema.add_map_field(
    _feature_lists,
    "tensorflow.FeatureLists",
    "feature_list",
    1,
    TYPE_MESSAGE,
    ".tensorflow.FeatureList",
)

_example = _schema.add_message(_file, "Example")
_schema.add_field(_example, "features", 1, TYPE_MESSAGE, type_name=".tensorflow.Features")

_sequence_example = _schema.add_message(_file, "SequenceExample")
_schema.add_field(
    _sequence_example, "context", 1, TYPE_MESSAGE, type_name=".tensorflow.Features"
)
_schema.add_field(
    _sequence_example,
    "feature_lists",
    2,
    TYPE_MESSAGE,
    type_name=".tensorflow.FeatureLists",
)

DESCRIPTOR = _schema.register(_file)

BytesList = _schema.message_class("tensorflow.BytesList")
FloatList = _schema.message_class("tensorflow.FloatList")
Int64List = _schema.message_class("tensorflow.Int64List")
Feature = _schema.message_class("tensorflow.Feature")
Features = _schema.message_class("tensorflow.Features")
FeatureList = _schema.message_class("tensorflow.FeatureList")
FeatureLists = _schema.message_class("tensorflow.FeatureLists")
Example = _schema.message_class("tensorflow.Example")
SequenceExample = _schema.message_class("tensorflow.SequenceExample")
