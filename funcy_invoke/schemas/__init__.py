"""
funcy_invoke.schemas - descriptors and boundary payloads.

Descriptors are built once at registration time and never mutated:

    TypeSpec -> ParamSpec -> CallableDescriptor
    FieldSpec -> StructDescriptor

Payloads cross the transport boundary:

    InvokeRequest -> (engine) -> InvokeResponse
"""

from .types import (
    ANY,
    FieldSpec,
    Kind,
    StructDescriptor,
    TypeSpec,
    build_type_spec,
    describe_struct,
    type_name,
)
from .signature import (
    CallableDescriptor,
    ParamSpec,
)
from .payload import (
    InvokeRequest,
    InvokeResponse,
    encode_value,
)

__all__ = [
    # Types
    "ANY",
    "FieldSpec",
    "Kind",
    "StructDescriptor",
    "TypeSpec",
    "build_type_spec",
    "describe_struct",
    "type_name",
    # Signatures
    "CallableDescriptor",
    "ParamSpec",
    # Payloads
    "InvokeRequest",
    "InvokeResponse",
    "encode_value",
]
