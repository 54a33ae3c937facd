"""
TodoPro MCP Server

Exposes the TodoPro task index as MCP tools.
"""

__version__ = "0.1.0"
