"""
Client for the remote Python execution service.

Uses the service's REST endpoint directly via requests. One POST per run,
no retries, no explicit timeout unless configured.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://python-backend-w6l2.onrender.com/run"
CONNECTION_ERROR_MESSAGE = "Error connecting to server."


class ExecutionServiceError(Exception):
    """Base exception for execution service errors."""
    pass


class ExecutionConnectionError(ExecutionServiceError):
    """The request never produced a response (DNS, refused, timeout...)."""
    pass


class ExecutionAPIError(ExecutionServiceError):
    """Service answered with a non-success status."""
    pass


class ExecutionResponseError(ExecutionServiceError):
    """Response body was not the expected JSON object."""
    pass


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one run: program output plus optional error and line."""
    output: str = ""
    error: Optional[str] = None
    error_line: Optional[int] = None  # advisory, as reported by the service

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    def display_error(self) -> str:
        """Error text as shown to the user, prefixed with its line if known."""
        if not self.error:
            return ""
        if self.error_line:
            return f"Line {self.error_line}: {self.error}"
        return self.error


EMPTY_RESULT = ExecutionResult()
CONNECTION_FAILURE_RESULT = ExecutionResult(
    output="", error=CONNECTION_ERROR_MESSAGE, error_line=None,
)


class ExecutionClient:
    """Submits code and program input to the remote execution endpoint."""

    def __init__(self, endpoint_url: str = DEFAULT_ENDPOINT,
                 timeout: Optional[float] = None, http=requests):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        # requests module by default: each post is an independent request
        self._http = http

    def submit(self, code: str, program_input: str) -> ExecutionResult:
        """POST one run request and map the reply onto an ExecutionResult.

        Args:
            code: Python source to execute.
            program_input: Text fed to the program's stdin.

        Returns:
            ExecutionResult carrying the service's output, error and
            line number unchanged.

        Raises:
            ExecutionConnectionError: If no response was received.
            ExecutionAPIError: If the service returned a >= 400 status.
            ExecutionResponseError: If the body is not a JSON object.
        """
        payload = {"code": code, "input": program_input}
        logger.info(
            "Submitting run: %d chars of code, %d chars of input",
            len(code), len(program_input),
        )
        try:
            resp = self._http.post(
                self.endpoint_url, json=payload, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExecutionConnectionError(
                f"Request to {self.endpoint_url} failed: {e}"
            ) from e

        self._check_response(resp)
        return self._parse_result(resp)

    def run(self, code: str, program_input: str) -> ExecutionResult:
        """Like submit(), but any service failure becomes the fixed
        connection-error result. Never raises ExecutionServiceError."""
        try:
            result = self.submit(code, program_input)
        except ExecutionServiceError as exc:
            logger.warning("Run failed: %s", exc)
            return CONNECTION_FAILURE_RESULT
        logger.info(
            "Run finished: %d chars of output, error=%s, line=%s",
            len(result.output), result.has_error, result.error_line,
        )
        return result

    def _check_response(self, resp):
        """Check HTTP response for errors."""
        if resp.status_code >= 400:
            raise ExecutionAPIError(
                f"Execution service error {resp.status_code}: {resp.text[:200]}"
            )

    def _parse_result(self, resp):
        try:
            data = resp.json()
        except ValueError as e:
            raise ExecutionResponseError(f"Response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise ExecutionResponseError(
                f"Expected a JSON object, got {type(data).__name__}"
            )

        output = data.get("output")
        error = data.get("error")
        return ExecutionResult(
            output="" if output is None else output,
            error=error or None,
            error_line=data.get("line_number"),
        )
