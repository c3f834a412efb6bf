"""shipit: release automation for JSON-manifest packages."""

__version__ = "0.1.0"
