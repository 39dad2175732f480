"""Business layer: configuration, synchronization and command line."""
