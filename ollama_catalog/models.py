"""Model records returned by the catalog client.

- ``PartialRecord``: one entry of the ``/api/tags`` listing.
- ``ModelDetails``: the ``details`` object of a ``/api/show`` response.
- ``FullRecord``: a partial record enriched with its ``/api/show`` data.

All records are frozen dataclasses with ``from_dict``/``to_dict``
helpers for their JSON wire form. Decoding failures raise
``DecodeError`` naming the offending field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ollama_catalog.errors import DecodeError

_MISSING = object()

_TYPE_NAMES = {str: "string", int: "integer", dict: "object", list: "array"}


def _field(
    data: dict[str, Any],
    key: str,
    kind: type,
    context: str,
    required: bool = True,
    default: Any = None,
) -> Any:
    """Read ``data[key]`` and check its JSON type."""
    expected = f"{context}.{key}: {_TYPE_NAMES.get(kind, kind.__name__)}"
    value = data.get(key, _MISSING)

    if value is _MISSING or value is None:
        if required:
            raise DecodeError(f"Missing field '{key}' in {context}", expected=expected)
        return default

    # bool is an int subclass but never a valid JSON integer here
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(
            f"Field '{key}' in {context} has type {type(value).__name__}",
            expected=expected,
        )
    return value


def _size(
    data: dict[str, Any], context: str, required: bool = True, default: int = 0
) -> int:
    size = _field(data, "size", int, context, required=required, default=default)
    if size < 0:
        raise DecodeError(
            f"Field 'size' in {context} is negative",
            expected=f"{context}.size: non-negative integer",
        )
    return size


def _require_object(data: Any, context: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected {context} to be an object, got {type(data).__name__}",
            expected=f"{context}: object",
        )
    return data


@dataclass(frozen=True)
class PartialRecord:
    """Catalog entry as listed by ``/api/tags``."""

    name: str
    model_id: str
    modified_at: str
    size: int
    digest: str

    @classmethod
    def from_dict(cls, data: Any) -> PartialRecord:
        data = _require_object(data, "model")
        return cls(
            name=_field(data, "name", str, "model"),
            model_id=_field(data, "model", str, "model"),
            modified_at=_field(data, "modified_at", str, "model"),
            size=_size(data, "model"),
            digest=_field(data, "digest", str, "model"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "model": self.model_id,
            "modified_at": self.modified_at,
            "size": self.size,
            "digest": self.digest,
        }


@dataclass(frozen=True)
class ModelDetails:
    """Format and family metadata of a model."""

    parent_model: str | None = None
    format: str | None = None
    family: str | None = None
    families: tuple[str, ...] | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ModelDetails:
        data = _require_object(data, "details")

        families = _field(data, "families", list, "details", required=False)
        if families is not None:
            for item in families:
                if not isinstance(item, str):
                    raise DecodeError(
                        f"Field 'families' in details holds {type(item).__name__}",
                        expected="details.families: array of string",
                    )
            families = tuple(families)

        return cls(
            parent_model=_field(data, "parent_model", str, "details", required=False),
            format=_field(data, "format", str, "details", required=False),
            family=_field(data, "family", str, "details", required=False),
            families=families,
            parameter_size=_field(data, "parameter_size", str, "details", required=False),
            quantization_level=_field(
                data, "quantization_level", str, "details", required=False
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "parent_model": self.parent_model,
            "format": self.format,
            "family": self.family,
            "families": list(self.families) if self.families is not None else None,
            "parameter_size": self.parameter_size,
            "quantization_level": self.quantization_level,
        }


@dataclass(frozen=True)
class FullRecord:
    """Fully enriched model descriptor."""

    name: str
    model_id: str
    modified_at: str = ""
    size: int = 0
    digest: str = ""
    parameters: str | None = None
    template: str | None = None
    details: ModelDetails = field(default_factory=ModelDetails)
    model_info: Any = None
    modelfile: str | None = None

    @classmethod
    def from_show_response(
        cls,
        data: Any,
        model_id: str,
        fallback: PartialRecord | None = None,
    ) -> FullRecord:
        """Decode an ``/api/show`` response body.

        The detail endpoint does not echo catalog fields. Those it omits
        are taken from ``fallback`` when given, otherwise ``name`` and
        ``model_id`` become the requested identifier and the rest stay
        empty. Fields the server does report are kept as reported.

        Args:
            data: Parsed JSON response
            model_id: Identifier the details were requested for
            fallback: Catalog entry supplying fields the response omits

        Returns:
            FullRecord instance (name not yet matched to any catalog entry)

        Raises:
            DecodeError: If the response does not have the expected shape
        """
        data = _require_object(data, "show response")
        context = "show response"

        if "details" not in data:
            raise DecodeError(
                "Missing field 'details' in show response",
                expected="show response.details: object",
            )

        if fallback is None:
            fallback = PartialRecord(
                name=model_id, model_id=model_id, modified_at="", size=0, digest=""
            )

        return cls(
            name=_field(data, "name", str, context, required=False, default=model_id),
            model_id=_field(
                data, "model", str, context, required=False, default=fallback.model_id
            ),
            modified_at=_field(
                data, "modified_at", str, context, required=False, default=fallback.modified_at
            ),
            size=_size(data, context, required=False, default=fallback.size),
            digest=_field(data, "digest", str, context, required=False, default=fallback.digest),
            parameters=_field(data, "parameters", str, context, required=False),
            template=_field(data, "template", str, context, required=False),
            details=ModelDetails.from_dict(data["details"]),
            model_info=data.get("model_info"),
            modelfile=_field(data, "modelfile", str, context, required=False),
        )

    @classmethod
    def from_dict(cls, data: Any) -> FullRecord:
        data = _require_object(data, "record")
        return cls(
            name=_field(data, "name", str, "record"),
            model_id=_field(data, "model", str, "record"),
            modified_at=_field(data, "modified_at", str, "record"),
            size=_size(data, "record"),
            digest=_field(data, "digest", str, "record"),
            parameters=_field(data, "parameters", str, "record", required=False),
            template=_field(data, "template", str, "record", required=False),
            details=ModelDetails.from_dict(data.get("details", {})),
            model_info=data.get("model_info"),
            modelfile=_field(data, "modelfile", str, "record", required=False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "model": self.model_id,
            "modified_at": self.modified_at,
            "size": self.size,
            "digest": self.digest,
            "modelfile": self.modelfile,
            "parameters": self.parameters,
            "template": self.template,
            "details": self.details.to_dict(),
            "model_info": self.model_info,
        }
