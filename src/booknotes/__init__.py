"""Booknotes: a server-rendered reading log.

This package contains the web application that tracks books you have read,
the SQL-backed record store behind it, and the runtime configuration shared
by the HTTP server and the command line tools.
"""

__version__ = "0.1.0"
