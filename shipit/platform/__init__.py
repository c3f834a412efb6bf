"""Platform adapters: subprocesses, HTTP and the filesystem."""

from .files import atomic_write_text, clear_directory, copy_tree_contents, remove_tree
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .process import ProcessError, run, run_streaming

__all__ = [
    # files
    "atomic_write_text",
    "clear_directory",
    "copy_tree_contents",
    "remove_tree",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # process
    "ProcessError",
    "run",
    "run_streaming",
]
