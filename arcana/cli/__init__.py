"""
CLI Client Module.

Command-line client built with Typer for communicating with the Arcana
backend.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the backend
- CLI calls backend via HTTP (httpx) through CommandGateway
- The interactive session (arcana.session, arcana.tui) shares the same gateway

Usage:
    arcana --help
    arcana code generate "a function that reverses a string"
    arcana config set api_key <YOUR_KEY>
    arcana            # interactive mode
"""
