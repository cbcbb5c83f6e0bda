"""TCP client surface for the ABX feed: transport, settings, output and CLI."""
