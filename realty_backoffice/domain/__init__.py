"""Market study domain: value types, models, calculators and repository interface."""
