"""Core object model: LITs, their score formulas, the composer and the fusion engine.

Framework-agnostic. Nothing here depends on MCP or any server framework.
"""
