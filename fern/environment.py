from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


class Environment:
    """Persistent mapping from identifiers to runtime values.

    An environment is never changed after construction. `extend` and
    `union` return a new environment whose scope sits on top of the
    receiver, so any closure or stack frame still holding the old handle
    keeps seeing exactly the bindings it captured.
    """
    __slots__ = ('parent', '_values')

    def __init__(self, parent: Optional['Environment'] = None, values: Optional[Mapping[str, Any]] = None):
        self.parent = parent
        self._values: Dict[str, Any] = dict(values) if values else {}

    @classmethod
    def empty(cls) -> 'Environment':
        return cls()

    def get(self, name: str, default: Any = None) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env._values:
                return env._values[name]
            env = env.parent
        return default

    def __contains__(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env._values:
                return True
            env = env.parent
        return False

    def __getitem__(self, name: str) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env._values:
                return env._values[name]
            env = env.parent
        raise KeyError(name)

    def extend(self, name: str, value: Any) -> 'Environment':
        return Environment(self, {name: value})

    def union(self, other: 'Environment') -> 'Environment':
        """Override-union: bindings of `other` shadow bindings of `self`."""
        if not other:
            return self
        if not self:
            return other
        return Environment(self, other.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        scopes = []
        env: Optional[Environment] = self
        while env is not None:
            scopes.append(env._values)
            env = env.parent
        flat: Dict[str, Any] = {}
        for scope in reversed(scopes):
            flat.update(scope)
        return flat

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.to_dict().items())

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())

    def __bool__(self) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if env._values:
                return True
            env = env.parent
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self is other or self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.items())
        return f"Environment({inner})"
