"""
Error types for the Sheets Wizard tools.

Lower layers raise these; only the dispatcher turns them into
``Error: ...`` text for the caller.
"""


class SheetsToolError(Exception):
    """Base class for every error a tool call can report"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MalformedCredentials(SheetsToolError):
    """The credentials argument is not a usable OAuth2 credential blob"""


class UnknownTool(SheetsToolError):
    """No tool with the requested name is registered"""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentValidationError(SheetsToolError):
    """Tool arguments do not match the tool's input schema"""

    def __init__(self, tool_name: str, problems: list[str]):
        super().__init__(f"Invalid arguments for {tool_name}: {'; '.join(problems)}")
        self.tool_name = tool_name
        self.problems = problems


class RemoteCallFailure(SheetsToolError):
    """The Google Sheets API rejected or failed a request"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ConfigurationError(Exception):
    """Server configuration from the environment is invalid"""
