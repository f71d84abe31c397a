"""Interfaces layer for FlowBoard: the command-line presentation."""
