"""Domain layer: gauge value types, ports and the reconciliation pipeline."""
