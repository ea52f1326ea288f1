"""
Server modules for ThankMap.

This package contains the REST routes, the Socket.IO event handlers, the
broadcast payload builders and the gratitude queries.
"""
