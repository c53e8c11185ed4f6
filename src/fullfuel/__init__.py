"""Full Fuel TV backend application (HTTP API and command line)."""
