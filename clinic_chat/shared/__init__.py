"""
Shared Components

Models, constants, exceptions, configuration and logging used by the client.
"""
