"""Adapters binding domain ports to concrete transports and stores."""
