"""HTTP layer: app factory, shared guard, storage client, routers and services."""
