"""Adapters connecting the Logger to other logging and web stacks."""
