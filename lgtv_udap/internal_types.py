#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package"""

from __future__ import annotations

from typing import (
    Dict, List, Optional, Union, Any, Tuple, Set, Type, TypeVar, Callable,
    Awaitable, Iterable, Iterator, Mapping, MutableMapping, Sequence,
    AsyncIterable, AsyncIterator, AsyncContextManager,
  )
from types import TracebackType
from typing_extensions import Self

JsonableTypes = (str, int, float, bool, dict, list)
Jsonable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
JsonableDict = Dict[str, Jsonable]
JsonableList = List[Jsonable]

HostAndPort = Tuple[str, int]
