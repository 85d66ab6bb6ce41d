"""Application Layer: existence-check rules on top of record access."""
