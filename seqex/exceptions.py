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

from typing import Optional


class SeqexException(Exception):
    """Generic seqex exception"""


class UnsupportedValueType(SeqexException, TypeError):
    """Raised when a feature value cannot be mapped to a bytes, int64 or float feature."""

    def __init__(
        self, key: str, observed_type: str, reason: Optional[str] = None
    ) -> None:
        message = "Unsupported value type for key \"{}\": {}".format(key, observed_type)
        if reason:
            message = "{} ({})".format(message, reason)
        super().__init__(message)
        self.key = key
        self.observed_type = observed_type
        self.reason = reason


class ConfigurationError(SeqexException):
    """Raised when the settings are incomplete or reference unknown models."""


class CertificateError(SeqexException):
    """Raised when the CA certificate used for TLS cannot be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__("{}: {}".format(reason, path))
        self.path = path


class HistoricalStoreError(SeqexException):
    """Raised when the historical feature store is used in an invalid state."""
