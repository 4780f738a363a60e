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

"""Client stub for `tensorflow.serving.PredictionService`."""

import grpc
from seqex.proto import predict_pb2


PREDICT_METHOD = "/tensorflow.serving.PredictionService/Predict"


class PredictionServiceStub:
    """Client stub for the TensorFlow Serving prediction service."""

    def __init__(self, channel: grpc.Channel):
        self.Predict = channel.unary_unary(
            PREDICT_METHOD,
            request_serializer=predict_pb2.PredictRequest.SerializeToString,
            response_deserializer=predict_pb2.PredictResponse.FromString,
        )
