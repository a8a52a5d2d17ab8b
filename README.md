# sqlpage-web

Building blocks for a web server that answers requests by running `.sql` files.
The package decides which file a URL maps to. It gathers request pairs into
parameter maps and binds arguments to `sqlpage.` functions. It reads outgoing
HTTP request definitions and buffers response bytes for streaming.

It has no runtime dependencies and is not tied to any HTTP framework. You pass
in strings and get back plain Python values.

## Installation

```
pip install sqlpage-web
```

To run the tests:

```
pip install "sqlpage-web[test]"
pytest
```

## Modules

### `sqlpage_web.routing`

`calculate_route(path_and_query, store, prefix="/")` is a coroutine that returns
one of these frozen dataclasses:

- `Execute(path)`: run the SQL file at `path`.
- `Serve(path)`: send the file at `path` as it is.
- `Redirect(target)`: send the client elsewhere.
- `CustomNotFound(path)`: nothing matched, but a `404.sql` was found.
- `NotFound()`: nothing matched and there is no `404.sql`.

Paths are `PurePosixPath` values relative to the site prefix. The URL is
percent-decoded, and the query and fragment are dropped before matching.

- A path that does not start with `prefix` redirects to `prefix`.
- A path with an extension is looked up as it is. A `.sql` file gives
  `Execute` and any other file gives `Serve`.
- A path that ends in `/` looks for `index.sql` in that directory.
- Any other path without an extension looks for the same path plus `.sql`. If
  that file is missing, the route redirects to the path with a trailing `/` and
  keeps the query string.
- When no file is found, the route looks for `404.sql` in each parent
  directory, starting with the nearest.

The `store` is any `FileStore` subclass, or any object with an async
`contains(path)` method.

### `sqlpage_web.params`

`param_map(pairs)` gathers `(name, value)` pairs into a dict. This works for
query strings, form fields, headers and cookies.

- A name that ends in `[]` loses that suffix and always collects a list.
- A plain name that repeats keeps only its last value.

`merge_values(old, new)` applies the same merging rule on its own.
`as_json_str(value)` returns a single value unchanged and turns a list into a
compact JSON array.

### `sqlpage_web.url_parameters`

`encode_url_parameters(json_text)` turns a JSON object into a query string:

- String values are used as they are.
- Arrays give one `key[]=item` pair per item.
- Other values keep their JSON text.

Every character except ASCII letters and digits is percent-encoded.

### `sqlpage_web.http_fetch_request`

`parse_fetch_request(text)` returns an `HttpFetchRequest`. It has the fields
`url`, `method`, `headers`, `username`, `password`, `body` and `timeout_ms`.

- Text that starts with `http` is taken as a URL and gets `default_headers()`.
- Any other text must be a JSON object with those fields. `body` keeps its raw
  JSON text.

Unknown, duplicate or missing fields raise `ValueError`.

### `sqlpage_web.function_params`

A `FunctionSignature` names a `sqlpage.` function and lists its
`FunctionParam`s. Each parameter has a `ParamKind`:

- `REQUIRED`: one argument, which must not be NULL.
- `OPTIONAL`: one argument, which may be NULL.
- `LIST`: all remaining arguments, with NULLs dropped.
- `OPTIONAL_LIST`: all remaining arguments, with NULLs kept.
- `PARSED`: one argument, passed through the parameter's converter.

`bind(args)` maps the evaluated string arguments (`None` for NULL) to parameter
names. It raises `ValueError` when a value does not fit or when arguments are
left over. `describe()` gives the help text, for example
`sqlpage.fetch(request)`. `as_sql(value)` renders a value as a SQL literal.
`parse_param(value, converter)` converts one value and reports errors in a
readable way.

### `sqlpage_web.response_writer`

`ResponseWriter(queue)` buffers bytes written with `write`. It hands them to a
bounded `asyncio.Queue`:

- `flush()` queues the buffer at once. It raises `BlockingIOError` when the
  queue is full or when `client_closed` is set.
- `async_flush()` waits until the queue has room.
- `close_with_error(msg)` flushes the buffer, then sends `msg` as the last
  piece of the response.

Used as a context manager, the writer flushes what is left on exit.

## Examples

```python
import asyncio
from pathlib import PurePosixPath
from sqlpage_web.routing import calculate_route, Execute, Redirect


class Files:
    def __init__(self, names):
        self.names = set(names)

    async def contains(self, path):
        return str(path) in self.names


store = Files({"folder/index.sql"})
assert asyncio.run(calculate_route("/folder/", store)) == Execute(PurePosixPath("folder/index.sql"))
assert asyncio.run(calculate_route("/folder?a=1", store)) == Redirect("/folder/?a=1")
```

```python
from sqlpage_web.params import param_map
from sqlpage_web.url_parameters import encode_url_parameters

assert param_map([("tag[]", "a"), ("tag[]", "b"), ("x", "1"), ("x", "2")]) == {
    "tag": ["a", "b"],
    "x": "2",
}
assert (
    encode_url_parameters('{"x": "hello world", "num": 123, "arr": [1, 2, 3]}')
    == "x=hello%20world&num=123&arr[]=1&arr[]=2&arr[]=3"
)
```

```python
from sqlpage_web.function_params import FunctionParam, FunctionSignature, ParamKind

sig = FunctionSignature("fetch", [FunctionParam("request"), FunctionParam("opts", ParamKind.OPTIONAL)])
assert sig.describe() == "sqlpage.fetch(request, opts)"
assert sig.bind(["https://example.com"]) == {"request": "https://example.com", "opts": None}
```

## What this package does not do

This package contains no HTTP server and no command to start one. It does not
connect to a database, run SQL statements or render pages. It does not read
request bodies, form data or uploaded files from a live connection. It does not
send the HTTP requests described by `HttpFetchRequest`. It does not build error
responses or status pages. Those parts belong to the application that uses
these modules.