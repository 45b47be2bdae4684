"""Diagnostic Handlers — integration check tool with no collaborators (1 method)."""

from record_gateway.core.project_records import text_content


class DiagnosticHandlers:
    """diagnostic profile — say_hello."""

    async def say_hello(self, input_data: dict) -> dict:
        name = input_data.get("name") or "World"
        return text_content(f"Hello, {name}! This is a test from the MCP server.")
