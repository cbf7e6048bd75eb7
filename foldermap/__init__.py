"""Learn mail folders from filed messages and auto-file new ones."""
