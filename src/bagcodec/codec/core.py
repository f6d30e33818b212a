"""Codec entry point: classify, dispatch by shape, surface explicit results."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bagcodec.codec import arrays, containers, records, scalars
from bagcodec.codec.envelope import read_header
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.registry import (
    ContainerDescriptor,
    PassThroughDescriptor,
    RecordDescriptor,
    ScalarDescriptor,
    TypeRegistry,
)
from bagcodec.codec.result import CodecResult
from bagcodec.codec.shapes import Shape, classify_type_name, classify_value
from bagcodec.config import CodecSettings
from bagcodec.tree import BagObject, bag_from_plain

_LOGGER = logging.getLogger(__name__)


class Codec:
    """Type-tagged, versioned encoder/decoder between values and value trees.

    The registry is captured and frozen on construction; a codec holds no other
    state, so one instance may be shared across threads.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        settings: CodecSettings | None = None,
    ) -> None:
        """Capture registry and settings.

        Args:
            registry: Type registry; defaults to the builtin registry.
            settings: Codec settings; defaults to ``CodecSettings()``.
        """
        self._registry = (
            registry if registry is not None else TypeRegistry.with_builtins()
        )
        self._registry.freeze()
        self._settings = settings or CodecSettings()

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def settings(self) -> CodecSettings:
        return self._settings

    def encode(self, value: Any) -> CodecResult:
        """Encode a value into an envelope.

        Args:
            value: Any value whose shape is classifiable.

        Returns:
            Ok result holding the envelope ``BagObject``, or an error result.
        """
        try:
            return CodecResult.ok(self.to_envelope(value))
        except CodecError as exc:
            self._report("encode", exc)
            return CodecResult.error(exc)

    def decode(self, envelope: BagObject | Mapping[str, Any]) -> CodecResult:
        """Decode an envelope back into a native value.

        Args:
            envelope: Envelope tree, or a plain mapping with the same shape.

        Returns:
            Ok result holding the reconstructed value, or an error result.
        """
        try:
            return CodecResult.ok(self.from_envelope(envelope))
        except CodecError as exc:
            self._report("decode", exc)
            return CodecResult.error(exc)

    def to_envelope(self, value: Any) -> BagObject:
        """Encode a value, raising on failure.

        Raises:
            CodecError: On any encode failure.
        """
        try:
            return self.encode_node(value, 0)
        except RecursionError as exc:
            raise self._depth_error() from exc

    def from_envelope(self, envelope: BagObject | Mapping[str, Any]) -> Any:
        """Decode an envelope, raising on failure.

        Raises:
            CodecError: On any decode failure.
        """
        if isinstance(envelope, Mapping):
            try:
                envelope = bag_from_plain(envelope)
            except TypeError as exc:
                raise CodecError(
                    CodecErrorCode.MALFORMED_ENVELOPE,
                    f"Envelope is not a value tree: {exc}",
                ) from exc
        try:
            return self.decode_node(envelope, 0)
        except RecursionError as exc:
            raise self._depth_error() from exc

    def encode_node(self, value: Any, depth: int) -> BagObject:
        """Encode one (possibly nested) value. Used by the shape encoders."""
        self.check_depth(depth)
        shape = classify_value(value, self._registry)
        if shape == Shape.ARRAY:
            return arrays.encode_array(self, value, depth)
        descriptor = self._registry.descriptor_for_type(type(value))
        match descriptor:
            case ScalarDescriptor():
                return scalars.encode_scalar(descriptor, value)
            case PassThroughDescriptor():
                return scalars.encode_pass_through(descriptor, value)
            case ContainerDescriptor(shape=Shape.COLLECTION):
                return containers.encode_collection(self, descriptor, value, depth)
            case ContainerDescriptor():
                return containers.encode_map(self, descriptor, value, depth)
            case RecordDescriptor():
                return records.encode_record(self, descriptor, value, depth)

    def decode_node(self, envelope: BagObject, depth: int) -> Any:
        """Decode one (possibly nested) envelope. Used by the shape decoders."""
        self.check_depth(depth)
        header = read_header(envelope)
        shape = classify_type_name(header.type, self._registry)
        if shape == Shape.ARRAY:
            return arrays.decode_array(self, envelope, header.type, depth)
        descriptor = self._registry.resolve(header.type)
        match descriptor:
            case ScalarDescriptor():
                return scalars.decode_scalar(descriptor, envelope)
            case PassThroughDescriptor():
                return scalars.decode_pass_through(descriptor, envelope)
            case ContainerDescriptor(shape=Shape.COLLECTION):
                return containers.decode_collection(self, descriptor, envelope, depth)
            case ContainerDescriptor():
                return containers.decode_map(self, descriptor, envelope, depth)
            case RecordDescriptor():
                return records.decode_record(self, descriptor, envelope, depth)

    def check_depth(self, depth: int) -> None:
        """Fail once nesting exceeds ``settings.max_depth``."""
        if depth > self._settings.max_depth:
            raise self._depth_error()

    def _depth_error(self) -> CodecError:
        return CodecError(
            CodecErrorCode.DEPTH_EXCEEDED,
            f"Nesting exceeds max depth {self._settings.max_depth}",
            data={"max_depth": self._settings.max_depth},
        )

    def _report(self, operation: str, exc: CodecError) -> None:
        if self._settings.log_failures:
            _LOGGER.warning("%s failed [%s]: %s", operation, exc.code, exc.message)
