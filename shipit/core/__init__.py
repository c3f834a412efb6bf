"""Core types shared by every layer."""

from .config import ReleaseConfiguration, load_release_configuration
from .errors import ErrorCode
from .manifest import PackageManifest, load_manifest
from .result import Err, Ok, Result

__all__ = [
    # config
    "ReleaseConfiguration",
    "load_release_configuration",
    # errors
    "ErrorCode",
    # manifest
    "PackageManifest",
    "load_manifest",
    # result
    "Err",
    "Ok",
    "Result",
]
