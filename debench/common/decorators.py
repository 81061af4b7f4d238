# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import functools
from . import errors


X = tp.TypeVar("X")


class Registry(tp.MutableMapping[str, X]):
    """Registers functions or objects by name, with optional information attached to each of them.

    Parameters
    ----------
    kind: str
        what the registry holds (eg: "function"), only used in error messages
    """

    def __init__(self, kind: str = "object") -> None:
        super().__init__()
        self.kind = kind
        self.data: tp.Dict[str, X] = {}
        self._information: tp.Dict[str, tp.Dict[tp.Hashable, tp.Any]] = {}

    def register(self, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> X:
        """Decorator method for registering functions/classes under their own name"""
        name = getattr(obj, "__name__", obj.__class__.__name__)
        self.register_name(name, obj, info)
        return obj

    def register_name(self, name: str, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> None:
        if name in self:
            raise errors.DebenchRuntimeError(f'Encountered a {self.kind} name collision "{name}"')
        self[name] = obj
        if info is not None:
            assert isinstance(info, dict)
            self._information[name] = info

    def register_with_info(self, **info: tp.Any) -> tp.Callable[[X], X]:
        """Decorator for registering a function and information about it"""
        return functools.partial(self.register, info=info)

    def unregister(self, name: str) -> None:
        if name in self:
            del self[name]
            self._information.pop(name, None)

    def get_info(self, name: str) -> tp.Dict[tp.Hashable, tp.Any]:
        if name not in self:
            raise errors.DebenchValueError(f'{self.kind.capitalize()} "{name}" is not registered.')
        return self._information.setdefault(name, {})

    def find(self, **info: tp.Any) -> tp.List[str]:
        """Names of the registered objects whose information matches all the provided values"""
        return [
            name
            for name in self
            if all(self._information.get(name, {}).get(key) == val for key, val in info.items())
        ]

    def __getitem__(self, key: str) -> X:
        return self.data[key]

    def __setitem__(self, key: str, value: X) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self) -> tp.Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)
