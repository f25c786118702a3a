"""Host integrations that depend on a GUI toolkit."""
