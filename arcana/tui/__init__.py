"""Textual front end for the interactive session."""
