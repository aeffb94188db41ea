#!/usr/bin/env python3
"""
Exceptions raised during start-up of the Solar System viewer.

Both are fatal: the viewer cannot run with a broken planet table or without
a drawing surface, so they propagate to `main()` which logs and exits.
"""


class ConfigurationError(Exception):
    """The planet table is missing, incomplete or malformed."""
    pass


class RenderSurfaceError(Exception):
    """The display surface could not be created."""
    pass
