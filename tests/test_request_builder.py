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

import numpy as np
import pytest
from seqex import request_builder, sequence_example
from seqex.proto import predict_pb2


class TestBuildPredictRequest:
    def test_examples_input(self):
        # Arrange
        serialized = sequence_example.encode({"ad_type": ["SC_CPCV_1"]})

        # Act
        request = request_builder.build_predict_request(
            serialized, "dnb_model_baseline"
        )

        # Assert
        assert request.model_spec.name == "dnb_model_baseline"
        assert request.model_spec.signature_name == "serving_default"
        assert list(request.inputs) == ["examples"]
        tensor = request.inputs["examples"]
        assert tensor.dtype == predict_pb2.DT_STRING == 7
        assert [dim.size for dim in tensor.tensor_shape.dim] == [1]
        assert list(tensor.string_val) == [serialized]

    def test_common_input(self):
        # Act
        request = request_builder.build_predict_request(
            b"\x12\x00", "m", signature_name="predict", serialized_common=b"\x0a\x00"
        )

        # Assert
        assert request.model_spec.signature_name == "predict"
        assert set(request.inputs) == {"examples", "common"}
        assert list(request.inputs["common"].string_val) == [b"\x0a\x00"]

    def test_request_survives_serialization(self):
        # Arrange
        request = request_builder.build_predict_request(b"\x12\x00", "m")

        # Act
        parsed = predict_pb2.PredictRequest.FromString(request.SerializeToString())

        # Assert
        assert parsed == request

    def test_empty_example_rejected(self):
        with pytest.raises(ValueError):
            request_builder.build_predict_request(b"", "m")

    def test_empty_model_name_rejected(self):
        with pytest.raises(ValueError):
            request_builder.build_predict_request(b"\x12\x00", "")


class TestExtractPredictions:
    def test_float_preferred_over_int64(self):
        # Arrange
        response = predict_pb2.PredictResponse()
        response.outputs["probability"].dtype = predict_pb2.DT_FLOAT
        response.outputs["probability"].float_val.extend([0.25, 0.5])
        response.outputs["bucket"].dtype = predict_pb2.DT_INT64
        response.outputs["bucket"].int64_val.append(3)
        response.outputs["label"].dtype = predict_pb2.DT_STRING
        response.outputs["label"].string_val.append(b"x")

        # Act
        predictions = request_builder.extract_predictions(response)

        # Assert
        assert predictions == {"bucket": 3, "probability": 0.25}

    def test_model_version(self):
        # Arrange
        response = predict_pb2.PredictResponse()

        # Act & Assert
        assert request_builder.model_version(response) is None
        response.model_spec.version.value = 12
        assert request_builder.model_version(response) == 12


class TestTensorToNdarray:
    def test_float_values_with_shape(self):
        # Arrange
        tensor = predict_pb2.TensorProto(dtype=predict_pb2.DT_FLOAT)
        tensor.tensor_shape.dim.add(size=2)
        tensor.tensor_shape.dim.add(size=1)
        tensor.float_val.extend([0.5, 0.25])

        # Act
        array = request_builder.tensor_to_ndarray(tensor)

        # Assert
        assert array.shape == (2, 1)
        assert array.dtype == np.float32
        np.testing.assert_array_equal(array, [[0.5], [0.25]])

    def test_tensor_content(self):
        # Arrange
        tensor = predict_pb2.TensorProto(dtype=predict_pb2.DT_INT64)
        tensor.tensor_shape.dim.add(size=3)
        tensor.tensor_content = np.array([1, 2, 3], dtype=np.int64).tobytes()

        # Act
        array = request_builder.tensor_to_ndarray(tensor)

        # Assert
        np.testing.assert_array_equal(array, [1, 2, 3])

    def test_single_value_is_broadcast(self):
        # Arrange
        tensor = predict_pb2.TensorProto(dtype=predict_pb2.DT_INT32)
        tensor.tensor_shape.dim.add(size=4)
        tensor.int_val.append(7)

        # Act & Assert
        np.testing.assert_array_equal(
            request_builder.tensor_to_ndarray(tensor), [7, 7, 7, 7]
        )

    def test_string_tensor(self):
        tensor = request_builder.make_string_tensor([b"a", b"b"])

        assert list(request_builder.tensor_to_ndarray(tensor)) == [b"a", b"b"]

    def test_unsupported_dtype(self):
        tensor = predict_pb2.TensorProto(dtype=predict_pb2.DT_INVALID)

        with pytest.raises(ValueError):
            request_builder.tensor_to_ndarray(tensor)
