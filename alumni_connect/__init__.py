"""Client-side content state for the Alumni Connect campus network."""
