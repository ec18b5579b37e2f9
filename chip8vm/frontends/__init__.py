"""Interactive frontends: a pygame window and a curses terminal."""
