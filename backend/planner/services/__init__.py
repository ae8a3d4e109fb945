"""Business logic: authorization checks and multi-step mutations."""
