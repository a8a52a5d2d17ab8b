"""URL routing, request parameter maps, function argument binding and response buffering for serving pages built from SQL files."""

__version__ = "0.34.0"