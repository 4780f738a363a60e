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

"""TensorFlow Serving `Predict` request and response message classes.

Only the parts of `tensor.proto`, `tensor_shape.proto`, `model.proto` and
`predict.proto` that a prediction client sends or reads are declared. Field
numbers match the upstream definitions.
"""

from google.protobuf import wrappers_pb2
from google.protobuf.internal import enum_type_wrapper
from seqex.proto import _schema
from seqex.proto._schema import (
    LABEL_REPEATED,
    TYPE_BOOL,
    TYPE_BYTES,
    TYPE_DOUBLE,
    TYPE_ENUM,
    TYPE_FLOAT,
    TYPE_INT32,
    TYPE_INT64,
    TYPE_MESSAGE,
    TYPE_STRING,
)


_DATA_TYPES = [
    "DT_INVALID",
    "DT_FLOAT",
    "DT_DOUBLE",
    "DT_INT32",
    "DT_UINT8",
    "DT_INT16",
    "DT_INT8",
    "DT_STRING",
    "DT_COMPLEX64",
    "DT_INT64",
    "DT_BOOL",
    "DT_QINT8",
    "DT_QUINT8",
    "DT_QINT32",
    "DT_BFLOAT16",
    "DT_QINT16",
    "DT_QUINT16",
    "DT_UINT16",
    "DT_COMPLEX128",
    "DT_HALF",
    "DT_RESOURCE",
    "DT_VARIANT",
    "DT_UINT32",
    "DT_UINT64",
]

_schema.POOL.AddSerializedFile(wrappers_pb2.DESCRIPTOR.serialized_pb)

# tensorflow/core/framework/tensor.proto
_tensor_file = _schema.new_file("tensorflow/core/framework/tensor.proto", "tensorflow")

_data_type = _tensor_file.enum_type.add()
_data_type.name = "DataType"
for _number, _name in enumerate(_DATA_TYPES):
    _value = _data_type.value.add()
    _value.name = _name
    _value.number = _number

_tensor_shape = _schema.add_message(_tensor_file, "TensorShapeProto")
_dim = _tensor_shape.nested_type.add()
_dim.name = "Dim"
_schema.add_field(_dim, "size", 1, TYPE_INT64)
_schema.add_field(_dim, "name", 2, TYPE_STRING)
_schema.add_field(
    _tensor_shape,
    "dim",
    2,
    TYPE_MESSAGE,
    label=LABEL_REPEATED,
    type_name=".tensorflow.TensorShapeProto.Dim",
)
_schema.add_field(_tensor_shape, "unknown_rank", 3, TYPE_BOOL)

_tensor = _schema.add_message(_tensor_file, "TensorProto")
_schema.add_field(_tensor, "dtype", 1, TYPE_ENUM, type_name=".tensorflow.DataType")
_schema.add_field(
    _tensor, "tensor_shape", 2, TYPE_MESSAGE, type_name=".tensorflow.TensorShapeProto"
)
_schema.add_field(_tensor, "version_number", 3, TYPE_INT32)
_schema.add_field(_tensor, "tensor_content", 4, TYPE_BYTES)
_schema.add_field(_tensor, "float_val", 5, TYPE_FLOAT, label=LABEL_REPEATED, packed=True)
_schema.add_field(
    _tensor, "double_val", 6, TYPE_DOUBLE, label=LABEL_REPEATED, packed=True
)
_schema.add_field(_tensor, "int_val", 7, TYPE_INT32, label=LABEL_REPEATED, packed=True)
_schema.add_field(_tensor, "string_val", 8, TYPE_BYTES, label=LABEL_REPEATED)
_schema.add_field(
    _tensor, "int64_val", 10, TYPE_INT64, label=LABEL_REPEATED, packed=True
)
_schema.add_field(_tensor, "bool_val", 11, TYPE_BOOL, label=LABEL_REPEATED, packed=True)

TENSOR_DESCRIPTOR = _schema.register(_tensor_file)

# tensorflow_serving/apis/{model,predict}.proto
_predict_file = _schema.new_file(
    "tensorflow_serving/apis/predict.proto",
    "tensorflow.serving",
    dependencies=[
        "google/protobuf/wrappers.proto",
        "tensorflow/core/framework/tensor.proto",
    ],
)

_model_spec = _schema.add_message(_predict_file, "ModelSpec")
_schema.add_field(_model_spec, "name", 1, TYPE_STRING)
_schema.add_field(
    _model_spec, "version", 2, TYPE_MESSAGE, type_name=".google.protobuf.Int64Value"
)
_schema.add_field(_model_spec, "signature_name", 3, TYPE_STRING)
_schema.add_field(_model_spec, "version_label", 4, TYPE_STRING)

_predict_request = _schema.add_message(_predict_file, "PredictRequest")
_schema.add_field(
    _predict_request,
    "model_spec",
    1,
    TYPE_MESSAGE,
    type_name=".tensorflow.serving.ModelSpec",
)
_schema.add_map_field(
    _predict_request,
    "tensorflow.serving.PredictRequest",
    "inputs",
    2,
    TYPE_MESSAGE,
    ".tensorflow.TensorProto",
)
_schema.add_field(_predict_request, "output_filter", 3, TYPE_STRING, label=LABEL_REPEATED)

_predict_response = _schema.add_message(_predict_file, "PredictResponse")
_schema.add_map_field(
    _predict_response,
    "tensorflow.serving.PredictResponse",
    "outputs",
    1,
    TYPE_MESSAGE,
    ".tensorflow.TensorProto",
)
_schema.add_field(
    _predict_response,
    "model_spec",
    2,
    TYPE_MESSAGE,
    type_name=".tensorflow.serving.ModelSpec",
)

DESCRIPTOR = _schema.register(_predict_file)

DataType = enum_type_wrapper.EnumTypeWrapper(
    _schema.POOL.FindEnumTypeByName("tensorflow.DataType")
)
DT_INVALID = DataType.Value("DT_INVALID")
DT_FLOAT = DataType.Value("DT_FLOAT")
DT_DOUBLE = DataType.Value("DT_DOUBLE")
DT_INT32 = DataType.Value("DT_INT32")
DT_STRING = DataType.Value("DT_STRING")
DT_INT64 = DataType.Value("DT_INT64")
DT_BOOL = DataType.Value("DT_BOOL")

TensorShapeProto = _schema.message_class("tensorflow.TensorShapeProto")
TensorProto = _schema.message_class("tensorflow.TensorProto")
ModelSpec = _schema.message_class("tensorflow.serving.ModelSpec")
PredictRequest = _schema.message_class("tensorflow.serving.PredictRequest")
PredictResponse = _schema.message_class("tensorflow.serving.PredictResponse")
