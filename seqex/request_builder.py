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

from typing import Dict, Optional, Sequence, Union

import numpy as np
from seqex.constants import PREDICT
from seqex.proto import predict_pb2


_VALUE_FIELDS = {
    predict_pb2.DT_FLOAT: ("float_val", np.float32),
    predict_pb2.DT_DOUBLE: ("double_val", np.float64),
    predict_pb2.DT_INT32: ("int_val", np.int32),
    predict_pb2.DT_INT64: ("int64_val", np.int64),
    predict_pb2.DT_BOOL: ("bool_val", np.bool_),
    predict_pb2.DT_STRING: ("string_val", object),
}


def make_string_tensor(values: Sequence[bytes]):
    """One dimensional `DT_STRING` tensor holding `values`."""
    tensor = predict_pb2.TensorProto(dtype=predict_pb2.DT_STRING)
    tensor.tensor_shape.dim.add(size=len(values))
    tensor.string_val.extend(bytes(value) for value in values)
    return tensor


def build_predict_request(
    serialized_example: bytes,
    model_name: str,
    signature_name: str = PREDICT.DEFAULT_SIGNATURE,
    serialized_common: Optional[bytes] = None,
):
    """Build a `PredictRequest` carrying a serialized `SequenceExample`.

    The example is sent as the `examples` input, a `DT_STRING` tensor of shape
    `[1]`. Models that take shared context features get them through the
    optional `common` input of the same shape.

    # Arguments
        serialized_example: Output of `sequence_example.encode()`.
        model_name: Name of the served model.
        signature_name: Signature to run, defaults to `serving_default`.
        serialized_common: Optional serialized common features.

    # Returns
        `tensorflow.serving.PredictRequest`.

    # Raises
        `ValueError`: If the example or the model name is empty.
    """
    if not serialized_example:
        raise ValueError("serialized_example is required")
    if not model_name:
        raise ValueError("model_name is required")

    request = predict_pb2.PredictRequest()
    request.model_spec.name = model_name
    request.model_spec.signature_name = signature_name
    request.inputs[PREDICT.EXAMPLES_INPUT].CopyFrom(
        make_string_tensor([serialized_example])
    )
    if serialized_common:
        request.inputs[PREDICT.COMMON_INPUT].CopyFrom(
            make_string_tensor([serialized_common])
        )
    return request


def extract_predictions(response) -> Dict[str, Union[float, int]]:
    """First value of every output tensor, keyed by output name.

    `float_val` is preferred over `int64_val`; outputs carrying neither are
    left out.
    """
    predictions = {}
    for name in sorted(response.outputs):
        tensor = response.outputs[name]
        if len(tensor.float_val) > 0:
            predictions[name] = tensor.float_val[0]
        elif len(tensor.int64_val) > 0:
            predictions[name] = tensor.int64_val[0]
    return predictions


def tensor_to_ndarray(tensor) -> np.ndarray:
    """Convert a `TensorProto` into a numpy array of its declared shape.

    A single value is broadcast over the whole shape, as TensorFlow does.

    # Raises
        `ValueError`: If the tensor dtype is not supported.
    """
    if tensor.dtype not in _VALUE_FIELDS:
        raise ValueError(
            "Unsupported tensor dtype: {}".format(predict_pb2.DataType.Name(tensor.dtype))
        )
    field_name, np_dtype = _VALUE_FIELDS[tensor.dtype]
    shape = [dim.size for dim in tensor.tensor_shape.dim]
    num_elements = int(np.prod(shape)) if shape else 1

    if tensor.tensor_content and np_dtype is not object:
        values = np.frombuffer(tensor.tensor_content, dtype=np_dtype).copy()
    else:
        values = np.array(list(getattr(tensor, field_name)), dtype=np_dtype)

    if values.size == 0 and num_elements > 0:
        values = np.full(num_elements, b"" if np_dtype is object else 0, dtype=np_dtype)
    elif values.size == 1 and num_elements > 1:
        values = np.repeat(values, num_elements)
    return values.reshape(shape)


def model_version(response) -> Optional[int]:
    if response.model_spec.HasField("version"):
        return response.model_spec.version.value
    return None
