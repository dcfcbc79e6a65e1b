"""Cross-cutting concerns shared by the client and the tools.

Modules:
- config: environment-backed settings snapshot
- logging_config: stderr logging through structlog
- errors: error taxonomy and classifier
- error_handler: tool invocation wrapper and error rendering
"""

__all__ = [
    "config",
    "logging_config",
    "errors",
    "error_handler",
]
