"""Map a request path to the action that serves it: run a SQL file, serve a file, redirect, or 404."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Union
from urllib.parse import unquote_to_bytes

log = logging.getLogger(__name__)

INDEX = "index.sql"
NOT_FOUND = "404.sql"
SQL_EXTENSION = "sql"
FORWARD_SLASH = "/"


@dataclass(frozen=True)
class CustomNotFound:
    """No file matched, but a ``404.sql`` handler was found in a parent directory."""

    path: PurePosixPath


@dataclass(frozen=True)
class Execute:
    """Run the SQL file at ``path``."""

    path: PurePosixPath


@dataclass(frozen=True)
class NotFound:
    """Nothing matched and no ``404.sql`` handler exists."""


@dataclass(frozen=True)
class Redirect:
    """Send the client to ``target``."""

    target: str


@dataclass(frozen=True)
class Serve:
    """Send the static file at ``path`` as is."""

    path: PurePosixPath


RoutingAction = Union[CustomNotFound, Execute, NotFound, Redirect, Serve]


class FileStore(ABC):
    """Something that can tell whether a file exists at a given path."""

    @abstractmethod
    async def contains(self, path: PurePosixPath) -> bool:
        """Return True if a file exists at ``path``."""


def _split_path_and_query(path_and_query: str) -> tuple[str, Optional[str]]:
    without_fragment = path_and_query.split("#", 1)[0]
    path, sep, query = without_fragment.partition("?")
    return path or FORWARD_SLASH, (query if sep else None)


def _extension(path: PurePosixPath) -> Optional[str]:
    name = path.name
    if not name or name == "..":
        return None
    dot = name.rfind(".")
    if dot <= 0:
        return None
    return name[dot + 1 :]


def _with_sql_extension(path: PurePosixPath) -> PurePosixPath:
    if not path.name:
        return path
    return path.with_name(f"{path.name}.{SQL_EXTENSION}")


async def calculate_route(
    path_and_query: str, store: FileStore, prefix: str = FORWARD_SLASH
) -> RoutingAction:
    """Decide how to answer a request for ``path_and_query`` under the site ``prefix``."""
    url_path, query = _split_path_and_query(path_and_query)
    result: RoutingAction
    if not url_path.startswith(prefix):
        result = Redirect(prefix)
    else:
        decoded = unquote_to_bytes(url_path[len(prefix) :]).decode("utf-8", "surrogateescape")
        path = PurePosixPath(decoded)
        extension = _extension(path)
        if extension is None:
            result = await _route_without_extension(url_path, query, path, store)
        else:
            result = await _find_file_or_not_found(path, extension, store)
    log.debug("Route: [%s] -> %r", path_and_query, result)
    return result


async def _route_without_extension(
    url_path: str, query: Optional[str], path: PurePosixPath, store: FileStore
) -> RoutingAction:
    if url_path.endswith(FORWARD_SLASH):
        return await _find_file_or_not_found(path / INDEX, SQL_EXTENSION, store)
    found = await _find_file(_with_sql_extension(path), SQL_EXTENSION, store)
    if found is not None:
        return found
    target = url_path + FORWARD_SLASH
    if query is not None:
        target += f"?{query}"
    return Redirect(target)


async def _find_file_or_not_found(
    path: PurePosixPath, extension: str, store: FileStore
) -> RoutingAction:
    found = await _find_file(path, extension, store)
    if found is not None:
        return found
    return await _find_not_found(path, store)


async def _find_file(
    path: PurePosixPath, extension: str, store: FileStore
) -> Optional[RoutingAction]:
    if not await store.contains(path):
        return None
    return Execute(path) if extension == SQL_EXTENSION else Serve(path)


async def _find_not_found(path: PurePosixPath, store: FileStore) -> RoutingAction:
    for parent in path.parents:
        target = parent / NOT_FOUND
        if await store.contains(target):
            return CustomNotFound(target)
    return NotFound()