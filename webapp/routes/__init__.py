"""HTTP routes for the collapsible tree webapp."""
