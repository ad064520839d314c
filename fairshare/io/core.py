"""Shared functionality for election file I/O. Internal."""

from __future__ import annotations

import dataclasses
import typing
from numbers import Number
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple


class ParseError(Exception):
    """An input that is invalid according to the given format was detected."""
    pass


@dataclasses.dataclass
class ElectionSetup:
    """A container for data returnable from an election setup file.

    Fields left as None fall back to the defaults of the allocator used.
    """
    votes: Dict[str, Number]
    n_seats: Optional[int] = None
    preferences: Optional[Dict[str, List[str]]] = None
    threshold: Optional[Number] = None
    name: Optional[str] = None
    system: Optional[Any] = None


def loaders(text_loader: Callable[..., Any]
            ) -> Tuple[Callable[..., Any], Callable[..., Any]]:
    """Create load() and loads() functions from a text parsing function."""
    return_annot = typing.get_type_hints(text_loader).get('return', Any)

    def load(file: TextIO, **kwargs) -> return_annot:
        return text_loader(file.read(), **kwargs)

    def loads(text: str, **kwargs) -> return_annot:
        return text_loader(text, **kwargs)

    return load, loads


def dumpers(text_dumper: Callable[..., str]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a text producing function."""

    def dump(file: TextIO, *args, **kwargs) -> None:
        text = text_dumper(*args, **kwargs)
        file.write(text if text.endswith('\n') else text + '\n')

    def dumps(*args, **kwargs) -> str:
        return text_dumper(*args, **kwargs)

    return dump, dumps
