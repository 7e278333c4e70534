"""Client-side request validation and serialization for the JamboJet NSK API.

Request objects are built from loosely-typed application data, checked
against the upstream contract before any network call, and serialized to the
exact payload shape the API expects.

- **core**: Configuration, logging, exceptions and shared types
- **validation**: Field format predicates and structural rule helpers
- **requests**: One module per API area holding the concrete request types
- **transport**: Validation-then-send dispatcher and the httpx-backed transport
- **diagnostics**: Configuration status report
"""
