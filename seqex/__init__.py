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

from seqex import version
from seqex.exceptions import (
    CertificateError,
    ConfigurationError,
    HistoricalStoreError,
    SeqexException,
    UnsupportedValueType,
)
from seqex.sequence_example import (
    FeatureKind,
    FeatureValue,
    build_sequence_example,
    decode,
    describe,
    encode,
    equivalent,
    from_hex,
    to_hex,
)


__version__ = version.__version__

__all__ = [
    "CertificateError",
    "ConfigurationError",
    "FeatureKind",
    "FeatureValue",
    "HistoricalStoreError",
    "SeqexException",
    "UnsupportedValueType",
    "build_sequence_example",
    "decode",
    "describe",
    "encode",
    "equivalent",
    "from_hex",
    "to_hex",
]
