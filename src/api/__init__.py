"""HTTP API for the Maturity Optimizer."""
