"""Concrete NSK request types, one module per API area.

Every request is a frozen dataclass implementing ``BaseRequest``:
``to_payload()`` serializes without raising, ``validate()`` raises
``ValidationError`` on the first violated rule, and ``validated_payload()``
does both. Named factories pre-fill common field combinations; fluent
``with_*`` methods return modified copies.
"""
