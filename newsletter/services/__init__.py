"""Services Layer - persistence operations invoked by the routes."""
