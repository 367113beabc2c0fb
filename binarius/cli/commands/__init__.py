"""Command handlers for the Binarius CLI; each module exposes run(args) -> int."""
