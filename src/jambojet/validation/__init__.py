"""Field format predicates and structural rule helpers."""
