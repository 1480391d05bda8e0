"""Terminal user interface: state machine, viewports, key events and curses drawing."""
