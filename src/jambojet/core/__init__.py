"""Cross-cutting infrastructure shared by the request layer.

- **config**: Settings loaded from the environment and .env files
- **constants**: Shared constants (status codes, defaults, redaction marker)
- **exceptions**: ApiError hierarchy with error codes and severities
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup and logger factory
- **types**: Type aliases for loosely-typed request data
"""
