"""Result normalization into the canonical output contract."""
