"""Runtime object store: classes, instances, enums, interfaces and variable scopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from lang4.data import ClassInstObj, FuncObj, PrimType, Primitive, PropsObj, Token, stable_hash


class StorageError(Exception):
    """Raised when a lookup or update in the object store cannot be done."""


@dataclass
class Interface:
    """A named interface that may itself build on other interfaces."""

    oid: int
    name: str
    props: PropsObj = field(default_factory=PropsObj)
    implementing: tuple = ()

    def __post_init__(self) -> None:
        self.implementing = tuple(self.implementing)

    def implements(self, iid: int) -> bool:
        """Return whether interface ``iid`` is among those this one builds on."""
        return iid in self.implementing


@dataclass
class EnumItemInstance:
    """A constructed enum item carrying its payload values."""

    eid: tuple
    iid: int
    props: list


@dataclass
class EnumItem:
    """One variant of an enum, with the types of the values it stores."""

    pid: int
    iid: int
    name: str
    store: list = field(default_factory=list)
    _next_iid: int = field(default=0, init=False, repr=False)

    def construct(self, data: Iterable[Primitive]) -> EnumItemInstance:
        """Build a new instance of this item holding ``data``."""
        instance = EnumItemInstance(eid=(self.pid, self.iid), iid=self._next_iid, props=list(data))
        self._next_iid += 1
        return instance


@dataclass
class EnumObj:
    """A named enum with its items."""

    oid: int
    name: str
    items: list = field(default_factory=list)


class ClassObj:
    """A class definition with static and instance functions keyed by name hash."""

    def __init__(
        self,
        oid: int,
        name: str,
        implementing: Iterable[int] = (),
        props: PropsObj | None = None,
        statics: Iterable[FuncObj] = (),
        insts: Iterable[FuncObj] = (),
    ) -> None:
        self.oid = oid
        self.name = name
        self.props = props if props is not None else PropsObj()
        self.implementing = tuple(implementing)
        self.stat_funcs = {stable_hash(func.name): func for func in statics}
        self.inst_funcs = {stable_hash(func.name): func for func in insts}
        self._next_iid = 0

    @property
    def current_instance_id(self) -> int:
        return self._next_iid

    def create(self) -> ClassInstObj:
        """Make a new instance with the next instance id."""
        instance = ClassInstObj(self.oid, self._next_iid, PropsObj())
        self._next_iid += 1
        return instance

    def implements(self, iid: int) -> bool:
        """Return whether the class implements interface ``iid``."""
        return iid in self.implementing

    def __repr__(self) -> str:
        return (
            f"ClassObj(class_name={self.name!r}, class_id={self.oid}, "
            f"current_instance_id={self._next_iid})"
        )


class Storage:
    """Holds class objects, live instances and a stack of variable scopes."""

    def __init__(self) -> None:
        self.class_objects: dict[int, ClassObj] = {}
        self.class_instances: dict[tuple[int, int], ClassInstObj] = {}
        self._scopes: list[dict[int, tuple[int, Token]]] = []
        self._tracks: list[list[tuple[int, int]]] = []

    @property
    def depth(self) -> int:
        return len(self._scopes)

    def push_scope(self) -> None:
        """Open a new innermost variable scope."""
        self._scopes.append({})
        self._tracks.append([])

    def pop_scope(self) -> None:
        """Close the innermost scope and drop the instances it tracked."""
        if not self._scopes:
            raise StorageError("no scope to pop")
        self._scopes.pop()
        for key in self._tracks.pop():
            self.class_instances.pop(key, None)

    def add_class_obj(self, name: str) -> None:
        """Register an empty class under the hash of ``name``."""
        self.class_objects[stable_hash(name)] = ClassObj(0, name)

    def add_class_inst(self, cid: int) -> ClassInstObj:
        """Create and store a new instance of class ``cid``."""
        try:
            cls = self.class_objects[cid]
        except KeyError:
            raise StorageError(f"no class with id {cid}") from None
        instance = cls.create()
        self.class_instances[(cid, instance.iid)] = instance
        return instance

    def remove_class_obj(self, cid: int) -> None:
        """Remove class ``cid``."""
        if self.class_objects.pop(cid, None) is None:
            raise StorageError(f"no class with id {cid}")

    def remove_class_inst(self, cid: int, iid: int) -> None:
        """Remove instance ``iid`` of class ``cid``."""
        if self.class_instances.pop((cid, iid), None) is None:
            raise StorageError(f"no instance {iid} of class {cid}")

    def get_prim_var(self, varid: int) -> tuple[int, Token]:
        """Find variable ``varid``, searching from the innermost scope outwards."""
        if not self._scopes:
            raise StorageError("no scope is open")
        for scope in reversed(self._scopes):
            if varid in scope:
                return scope[varid]
        raise KeyError(varid)

    def set_prim_var(self, varid: int, value: Token) -> None:
        """Bind ``varid`` to ``value`` in the innermost scope."""
        if not self._scopes:
            raise StorageError("no scope is open")
        self._scopes[-1][varid] = (0, value)

    def _class(self, cid: int) -> ClassObj:
        try:
            return self.class_objects[cid]
        except KeyError:
            raise StorageError(f"no class with id {cid}") from None

    def class_static_op(self, cid: int, opid: int) -> FuncObj:
        """Return static function ``opid`` of class ``cid``."""
        try:
            return self._class(cid).stat_funcs[opid]
        except KeyError:
            raise StorageError(f"class {cid} has no static function {opid}") from None

    def class_inst_op(self, cid: int, opid: int) -> FuncObj:
        """Return instance function ``opid`` of class ``cid``."""
        try:
            return self._class(cid).inst_funcs[opid]
        except KeyError:
            raise StorageError(f"class {cid} has no instance function {opid}") from None


__all__ = [
    "StorageError",
    "Interface",
    "EnumItemInstance",
    "EnumItem",
    "EnumObj",
    "ClassObj",
    "Storage",
    "PrimType",
]