"""Type registry: canonical type name to descriptor; immutable once frozen."""

from __future__ import annotations

import dataclasses
import inspect
import operator
from collections import OrderedDict, deque
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, TypeAlias, get_origin

from pydantic import BaseModel

from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.kinds import ScalarSpec, scalar_specs
from bagcodec.codec.shapes import Shape
from bagcodec.codec.type_names import OBJECT_ELEMENT_NAME
from bagcodec.tree import BagArray, BagObject


def default_type_name(cls: type) -> str:
    """Return ``<module>.<qualname>`` for a type."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class MemberAccessor:
    """Named record member with read and write functions."""

    name: str
    get: Callable[[Any], Any]
    set: Callable[[Any, Any], None]

    @classmethod
    def attribute(cls, name: str) -> MemberAccessor:
        """Accessor backed by plain attribute get/set."""

        def _set(target: Any, value: Any) -> None:
            setattr(target, name, value)

        return cls(name=name, get=operator.attrgetter(name), set=_set)


@dataclass(frozen=True)
class ScalarDescriptor:
    name: str
    py_type: type
    spec: ScalarSpec

    @property
    def shape(self) -> Shape:
        return Shape.SCALAR


@dataclass(frozen=True)
class PassThroughDescriptor:
    """Descriptor for value tree types embedded without a second envelope."""

    name: str
    py_type: type
    shape: Shape


@dataclass(frozen=True)
class ContainerDescriptor:
    """Collection or map descriptor.

    ``build`` receives the decoded elements (collections) or decoded
    ``(key, value)`` pairs (maps) in encoded order and returns a new instance.
    """

    name: str
    py_type: type
    shape: Shape
    build: Callable[[list[Any]], Any]


@dataclass(frozen=True)
class RecordDescriptor:
    """Record descriptor: no-argument factory plus ordered public members."""

    name: str
    py_type: type
    factory: Callable[[], Any]
    members: tuple[MemberAccessor, ...]

    @property
    def shape(self) -> Shape:
        return Shape.RECORD


TypeDescriptor: TypeAlias = (
    ScalarDescriptor | PassThroughDescriptor | ContainerDescriptor | RecordDescriptor
)


def _is_class_var(annotation: object) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head in {"ClassVar", "typing.ClassVar"}
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def record_member_names(cls: type) -> list[str]:
    """Enumerate public members of a record type in declaration order.

    Dataclass fields and pydantic model fields are used when available;
    otherwise the class annotations along the MRO (base classes first).

    Args:
        cls: Record type.

    Returns:
        Public member names.
    """
    if dataclasses.is_dataclass(cls):
        names = [field.name for field in dataclasses.fields(cls)]
    elif issubclass(cls, BaseModel):
        names = list(cls.model_fields)
    else:
        names = []
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, annotation in inspect.get_annotations(klass).items():
                if name not in names and not _is_class_var(annotation):
                    names.append(name)
    return [name for name in names if not name.startswith("_")]


class TypeRegistry:
    """In-process registry: type name <-> descriptor. Read-only once frozen."""

    def __init__(self) -> None:
        """Initialize empty, mutable registry."""
        self._by_name: dict[str, TypeDescriptor] = {}
        self._by_type: dict[type, TypeDescriptor] = {}
        self._frozen = False

    @classmethod
    def with_builtins(cls) -> TypeRegistry:
        """Create a registry holding every builtin scalar, tree, and container type.

        Returns:
            Mutable registry; register records, then freeze.
        """
        registry = cls()
        for spec in scalar_specs():
            registry.register(
                ScalarDescriptor(name=spec.kind.value, py_type=spec.py_type, spec=spec)
            )
        registry.register(
            PassThroughDescriptor(
                name=default_type_name(BagObject),
                py_type=BagObject,
                shape=Shape.VALUE_OBJECT,
            )
        )
        registry.register(
            PassThroughDescriptor(
                name=default_type_name(BagArray),
                py_type=BagArray,
                shape=Shape.VALUE_ARRAY,
            )
        )
        for collection_type in (list, tuple, deque, set, frozenset):
            registry.register_collection(collection_type)
        for map_type in (dict, OrderedDict):
            registry.register_map(map_type)
        return registry

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the registry immutable. Idempotent."""
        self._frozen = True

    def register(self, descriptor: TypeDescriptor) -> None:
        """Register a descriptor under its name and runtime type.

        Args:
            descriptor: Descriptor to add.

        Raises:
            RuntimeError: If the registry is frozen.
            ValueError: If the name or type is already registered.
        """
        if self._frozen:
            raise RuntimeError(
                f"Type registry is frozen; cannot register {descriptor.name!r}"
            )
        if descriptor.name.startswith("[") or descriptor.name == OBJECT_ELEMENT_NAME:
            raise ValueError(f"Reserved type name: {descriptor.name!r}")
        if descriptor.name in self._by_name:
            raise ValueError(f"Type name already registered: {descriptor.name!r}")
        if descriptor.py_type in self._by_type:
            raise ValueError(f"Type already registered: {descriptor.py_type!r}")
        self._by_name[descriptor.name] = descriptor
        self._by_type[descriptor.py_type] = descriptor

    def register_record(
        self,
        cls: type,
        *,
        name: str | None = None,
        members: Sequence[str | MemberAccessor] | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> RecordDescriptor:
        """Register a record type.

        Args:
            cls: Record type.
            name: Canonical name; defaults to ``<module>.<qualname>``.
            members: Member names or accessors; derived from the type when omitted.
            factory: No-argument constructor; defaults to ``model_construct`` for
                pydantic models and ``cls`` otherwise.

        Returns:
            Registered descriptor.

        Raises:
            ValueError: If no public members can be found.
        """
        raw_members = record_member_names(cls) if members is None else members
        accessors = tuple(
            member
            if isinstance(member, MemberAccessor)
            else MemberAccessor.attribute(member)
            for member in raw_members
        )
        if not accessors:
            raise ValueError(f"Record type has no public members: {cls!r}")
        if factory is None:
            factory = cls.model_construct if issubclass(cls, BaseModel) else cls
        descriptor = RecordDescriptor(
            name=name or default_type_name(cls),
            py_type=cls,
            factory=factory,
            members=accessors,
        )
        self.register(descriptor)
        return descriptor

    def register_collection(
        self,
        cls: type,
        *,
        name: str | None = None,
        build: Callable[[list[Any]], Any] | None = None,
    ) -> ContainerDescriptor:
        """Register an ordered collection type.

        Args:
            cls: Collection type.
            name: Canonical name; defaults to ``<module>.<qualname>``.
            build: Builds an instance from decoded elements; defaults to ``cls``.

        Returns:
            Registered descriptor.
        """
        descriptor = ContainerDescriptor(
            name=name or default_type_name(cls),
            py_type=cls,
            shape=Shape.COLLECTION,
            build=build or cls,
        )
        self.register(descriptor)
        return descriptor

    def register_map(
        self,
        cls: type,
        *,
        name: str | None = None,
        build: Callable[[list[Any]], Any] | None = None,
    ) -> ContainerDescriptor:
        """Register a key-value map type.

        Args:
            cls: Map type.
            name: Canonical name; defaults to ``<module>.<qualname>``.
            build: Builds an instance from decoded ``(key, value)`` pairs;
                defaults to ``cls``.

        Returns:
            Registered descriptor.
        """
        descriptor = ContainerDescriptor(
            name=name or default_type_name(cls),
            py_type=cls,
            shape=Shape.MAP,
            build=build or cls,
        )
        self.register(descriptor)
        return descriptor

    def descriptor_for_type(self, cls: type) -> TypeDescriptor:
        """Return the descriptor registered for an exact runtime type.

        Args:
            cls: Runtime type of a value being encoded.

        Returns:
            Registered descriptor.

        Raises:
            CodecError: UNKNOWN_TYPE if the type is not registered.
        """
        descriptor = self._by_type.get(cls)
        if descriptor is None:
            raise CodecError(
                CodecErrorCode.UNKNOWN_TYPE,
                f"Unregistered type: {default_type_name(cls)!r}",
                data={"type": default_type_name(cls)},
            )
        return descriptor

    def resolve(self, name: str) -> TypeDescriptor:
        """Return the descriptor registered under a canonical name.

        Args:
            name: Recorded type name.

        Returns:
            Registered descriptor.

        Raises:
            CodecError: UNKNOWN_TYPE if the name is not registered.
        """
        descriptor = self._by_name.get(name)
        if descriptor is None:
            raise CodecError(
                CodecErrorCode.UNKNOWN_TYPE,
                f"Unknown type name: {name!r}",
                data={"type": name},
            )
        return descriptor

    def resolve_element(self, name: str) -> TypeDescriptor | None:
        """Resolve an object-array element name; None for the generic element."""
        if name == OBJECT_ELEMENT_NAME:
            return None
        return self.resolve(name)

    def name_for_type(self, cls: type) -> str:
        return self.descriptor_for_type(cls).name

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


def register_records(registry: TypeRegistry, types: Iterable[type]) -> None:
    """Register several record types with derived descriptors."""
    for cls in types:
        registry.register_record(cls)
