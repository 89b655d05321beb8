"""Core relay logic: configuration, request translation, vendor client and
response normalization.

The most commonly used names are re-exported here.
"""

from leonardo_relay.core.client import LeonardoClient, build_http_client
from leonardo_relay.core.config import RelayConfig
from leonardo_relay.core.errors import (
    GenerationFailed,
    IncompleteResult,
    InvalidParameter,
    MissingParameter,
    RelayError,
    UnexpectedResponseShape,
    VendorError,
)
from leonardo_relay.core.models import (
    GenerationStatus,
    ImageResult,
    NormalizedResult,
    SubmissionResult,
)
from leonardo_relay.core.normalizer import normalize
from leonardo_relay.core.translator import build_generation_payload

__all__ = [
    "LeonardoClient",
    "build_http_client",
    "RelayConfig",
    "RelayError",
    "MissingParameter",
    "InvalidParameter",
    "VendorError",
    "UnexpectedResponseShape",
    "IncompleteResult",
    "GenerationFailed",
    "GenerationStatus",
    "ImageResult",
    "NormalizedResult",
    "SubmissionResult",
    "normalize",
    "build_generation_payload",
]
