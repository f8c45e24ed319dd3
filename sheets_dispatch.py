"""
Routes tool calls to their handlers.

Handlers raise; the dispatcher turns every outcome into either a ToolSuccess or
a ToolFailure, and only ``call_tool`` renders that into the text envelope sent
back to the caller. No exception escapes ``dispatch``.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from sheets_auth import SheetsClientFactory
from sheets_errors import RemoteCallFailure, SheetsToolError, UnknownTool
from sheets_handlers import HANDLERS
from sheets_tools import ToolRegistry, registry as default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSuccess:
    payload: dict

    def render(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class ToolFailure:
    message: str

    def render(self) -> str:
        return f"Error: {self.message}"


ToolOutcome = ToolSuccess | ToolFailure


def to_envelope(outcome: ToolOutcome) -> dict:
    """Wrap an outcome in the single-text-block tool result"""
    return {"content": [{"type": "text", "text": outcome.render()}]}


def remote_failure(error: HttpError) -> RemoteCallFailure:
    """Convert a googleapiclient HttpError, keeping the service's own message"""
    reason = getattr(error, "reason", None) or str(error)
    status = getattr(getattr(error, "resp", None), "status", None)
    return RemoteCallFailure(reason, status=int(status) if status else None)


def error_message(error: BaseException) -> str:
    message = str(error)
    return message if message else type(error).__name__


class ToolDispatcher:
    """Looks up a tool by name, validates its arguments and runs its handler"""

    def __init__(
        self,
        registry: ToolRegistry = default_registry,
        client_factory: Callable[[str], Any] | None = None,
        handlers: dict | None = None,
    ):
        self.registry = registry
        self.client_factory = client_factory or SheetsClientFactory()
        self.handlers = dict(HANDLERS if handlers is None else handlers)

    def list_tools(self) -> list[dict]:
        return [descriptor.to_dict() for descriptor in self.registry.list_tools()]

    async def dispatch(self, name: str, arguments: Any) -> ToolOutcome:
        logger.debug("Tool call: %s", name)

        handler = self.handlers.get(name)
        if name not in self.registry or handler is None:
            error = UnknownTool(name)
            logger.warning("%s", error)
            return ToolFailure(error.message)

        try:
            args = self.registry.parse_arguments(name, arguments)
            service = self.client_factory(args.credentials)
            payload = await handler(args, service)
        except SheetsToolError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return ToolFailure(e.message)
        except HttpError as e:
            failure = remote_failure(e)
            logger.warning("Tool %s failed with HTTP %s: %s", name, failure.status, failure)
            return ToolFailure(failure.message)
        except GoogleAuthError as e:
            logger.warning("Tool %s failed to authenticate: %s", name, e)
            return ToolFailure(error_message(e))
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return ToolFailure(error_message(e))

        return ToolSuccess(payload)

    async def call_tool(self, name: str, arguments: Any) -> dict:
        """Run a tool and return its result envelope"""
        return to_envelope(await self.dispatch(name, arguments))
