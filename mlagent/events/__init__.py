"""Package lifecycle events: platform handle, event model and dispatcher."""
