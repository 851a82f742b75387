"""Domain layer: model, ports and tap-session reconciliation."""
