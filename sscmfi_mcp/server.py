"""MCP stdio server for the SSCMFI bond math engine."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import date
from typing import Any, List, Optional, Set, TextIO

from pydantic import ValidationError

from config import Settings
from sscmfi_mcp.errors import ToolExecutionError, UnknownToolError
from sscmfi_mcp.http_client import EngineClient, EngineError
from sscmfi_mcp.normalizers import normalize_error
from sscmfi_mcp.payloads import Clock, get_payload_builder
from sscmfi_mcp.tool_registry import ToolContext, dispatch_tool, tool_definitions

logger = logging.getLogger(__name__)

SERVER_NAME = "sscmfi-math-engine"
SERVER_VERSION = "1.1.2"
SERVER_INSTRUCTIONS = "Bond math runs on the SSCMFI engine. Use MM/DD/YYYY dates."

# Newest first; unknown client versions are answered with the newest.
SUPPORTED_PROTOCOL_VERSIONS = (
    "2025-11-25",
    "2025-06-18",
    "2025-03-26",
    "2024-11-05",
)


class McpServer:
    """MCP server (tool calls forwarded to the SSCMFI engine)."""

    def __init__(self, engine_client: EngineClient, payload_shape: str = "flat", today: Clock = date.today) -> None:
        self.engine_client = engine_client
        self.context = ToolContext(
            engine_client=engine_client,
            payload_builder=get_payload_builder(payload_shape),
            today=today,
        )
        self.supported_versions = list(SUPPORTED_PROTOCOL_VERSIONS)
        self.initialized = False

    async def handle_message(self, message: dict) -> Optional[dict]:
        """Handle a single JSON-RPC message."""
        method = message.get("method")
        msg_id = message.get("id")

        if method == "initialize":
            return self._handle_initialize(message, msg_id)
        if method == "notifications/initialized":
            self.initialized = True
            return None
        if method == "ping":
            return self._ok(msg_id, {})
        if method == "tools/list":
            return self._ok(msg_id, {"tools": tool_definitions()})
        if method == "tools/call":
            return await self._handle_tool_call(message, msg_id)

        if msg_id is None:
            return None
        return self._error(msg_id, -32601, f"Unknown method: {method}")

    async def aclose(self) -> None:
        await self.engine_client.aclose()

    def _handle_initialize(self, message: dict, msg_id: Any) -> dict:
        params = message.get("params") or {}
        if not isinstance(params, dict):
            return self._error(msg_id, -32602, "Invalid params: expected an object")
        requested_version = params.get("protocolVersion")
        protocol_version = (
            requested_version
            if requested_version in self.supported_versions
            else self.supported_versions[0]
        )
        result = {
            "protocolVersion": protocol_version,
            "capabilities": {
                "tools": {"listChanged": False},
            },
            "serverInfo": {
                "name": SERVER_NAME,
                "version": SERVER_VERSION,
            },
            "instructions": SERVER_INSTRUCTIONS,
        }
        return self._ok(msg_id, result)

    async def _handle_tool_call(self, message: dict, msg_id: Any) -> dict:
        params = message.get("params") or {}
        if not isinstance(params, dict):
            return self._error(msg_id, -32602, "Invalid params: expected an object")
        name = params.get("name")
        arguments = params.get("arguments") or {}

        if not name:
            return self._error(msg_id, -32602, "Missing tool name")

        try:
            result = await dispatch_tool(name, arguments, self.context)
            return self._tool_result(msg_id, result)
        except UnknownToolError as exc:
            return self._error(msg_id, -32602, str(exc))
        except EngineError as exc:
            logger.warning(f"{name} failed upstream (status {exc.status_code}): {exc.message}")
            return self._tool_error(msg_id, normalize_error(exc))
        except ToolExecutionError as exc:
            logger.warning(f"{name} failed: {exc}")
            return self._tool_error(msg_id, str(exc))
        except Exception as exc:
            logger.error(f"Unexpected error in {name}: {exc}", exc_info=True)
            return self._tool_error(msg_id, f"Internal error while running {name}: {exc}")

    @staticmethod
    def _tool_result(msg_id: Any, data: Any) -> dict:
        text = json.dumps(data, indent=2, ensure_ascii=False)
        return {
            "jsonrpc": "2.0",
            "id": msg_id,
            "result": {
                "content": [{"type": "text", "text": text}],
                "isError": False,
            },
        }

    @staticmethod
    def _tool_error(msg_id: Any, text: str) -> dict:
        return {
            "jsonrpc": "2.0",
            "id": msg_id,
            "result": {
                "content": [{"type": "text", "text": text}],
                "isError": True,
            },
        }

    @staticmethod
    def _ok(msg_id: Any, result: dict) -> dict:
        return {"jsonrpc": "2.0", "id": msg_id, "result": result}

    @staticmethod
    def _error(msg_id: Any, code: int, message: str) -> dict:
        return {"jsonrpc": "2.0", "id": msg_id, "error": {"code": code, "message": message}}


async def run_stdio(server: McpServer, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Run MCP stdio event loop.

    Every message is served in its own task, so pipelined tool calls wait on
    the engine concurrently. Returns once stdin is exhausted and all in-flight
    messages are answered.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    pending: Set[asyncio.Task] = set()

    try:
        while True:
            raw_line = await asyncio.to_thread(stdin.readline)
            if not raw_line:
                break
            line = raw_line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as exc:
                response = {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": -32700, "message": f"Parse error: {exc}"},
                }
                _write_response(stdout, response)
                continue

            task = asyncio.create_task(_serve_payload(server, payload, stdout))
            pending.add(task)
            task.add_done_callback(pending.discard)

        if pending:
            await asyncio.gather(*pending)
    finally:
        await server.aclose()


async def _serve_payload(server: McpServer, payload: Any, stdout: TextIO) -> None:
    try:
        responses = await _handle_payload(server, payload)
    except Exception as exc:
        logger.error(f"Unhandled error while serving request: {exc}", exc_info=True)
        msg_id = payload.get("id") if isinstance(payload, dict) else None
        responses = {"jsonrpc": "2.0", "id": msg_id, "error": {"code": -32603, "message": f"Server error: {exc}"}}
    if responses is not None:
        _write_response(stdout, responses)


async def _handle_payload(server: McpServer, payload: Any) -> Optional[Any]:
    if isinstance(payload, list):
        results: List[Optional[dict]] = await asyncio.gather(
            *(_handle_batch_item(server, item) for item in payload)
        )
        return [result for result in results if result is not None] or None

    if not isinstance(payload, dict):
        return {"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "Invalid request"}}

    return await server.handle_message(payload)


async def _handle_batch_item(server: McpServer, item: Any) -> Optional[dict]:
    if not isinstance(item, dict):
        return {"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "Invalid request"}}
    return await server.handle_message(item)


def _write_response(stdout: TextIO, response: Any) -> None:
    stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
    stdout.flush()


def main() -> None:
    """MCP stdio entrypoint."""
    try:
        settings = Settings()
    except ValidationError as exc:
        sys.stderr.write(f"Error: invalid configuration: {exc}\n")
        sys.exit(1)

    logging.basicConfig(
        level=settings.mcp.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        engine_client = EngineClient(settings.engine.api_url, timeout_seconds=settings.engine.timeout_seconds)
        server = McpServer(engine_client, payload_shape=settings.engine.payload_shape)
    except ValueError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(1)

    sys.stderr.write("SSCMFI MCP Server running on stdio\n")
    try:
        asyncio.run(run_stdio(server))
    except Exception as exc:
        logger.error(f"Fatal error in main(): {exc}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
