"""CLI subcommands for shipver."""
