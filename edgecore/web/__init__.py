"""Web API for the EdgeCore journal."""
