"""
Arcana CLI.

Terminal client for the Arcana backend. Relays commands over HTTP and
renders responses, including asynchronous job status, in an interactive
text interface.
"""
