"""Read-only HTTP API over the synced club news."""
