"""Wrapper around the GitHub Copilot CLI used for AI summaries."""

import logging
import re
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 15
ASK_TIMEOUT = 60
MAX_OUTPUT_BYTES = 1024 * 1024

PROBE_MARKER = "Copilot CLI"
USAGE_MARKERS = ("\nTotal usage est:", "\nAPI time spent:")

_ANSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


def sanitize_output(output: str) -> str:
    """Strip escape codes and the trailing usage statistics block."""
    cleaned = _ANSI_RE.sub("", output).replace("\r", "")

    cut = len(cleaned)
    for marker in USAGE_MARKERS:
        index = cleaned.find(marker)
        if index != -1 and index < cut:
            cut = index
    return cleaned[:cut].strip()


class CopilotCLI:
    """Runs ``gh copilot`` as a subprocess.

    Failures never propagate: the probe reports them as unavailability and
    prompts report them as an empty answer, leaving the fallback decision
    to the caller.
    """

    def __init__(self, command: Optional[Sequence[str]] = None):
        self.command: List[str] = list(command or ("gh", "copilot", "--"))

    def is_available(self) -> bool:
        """Check whether the Copilot CLI is installed and answering."""
        result = self._run(["--version"], timeout=PROBE_TIMEOUT)
        if result is None:
            return False
        available = PROBE_MARKER in result
        logger.debug("Copilot CLI probe: available=%s", available)
        return available

    def ask(self, prompt: str) -> str:
        """Send a prompt and return the cleaned answer, or "" on failure."""
        result = self._run(["-p", prompt], timeout=ASK_TIMEOUT)
        if result is None:
            return ""
        return sanitize_output(result)

    def _run(self, args: List[str], timeout: int) -> Optional[str]:
        cmd = self.command + args
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.debug("%s is not installed", cmd[0])
            return None
        except subprocess.TimeoutExpired:
            logger.debug("Copilot CLI timed out after %ss", timeout)
            return None
        except OSError as e:
            logger.debug("Copilot CLI could not be started: %s", e)
            return None

        if result.returncode != 0:
            logger.debug(
                "Copilot CLI exited with %s: %s",
                result.returncode,
                result.stderr.decode("utf-8", errors="replace").strip()[:200],
            )
            return None
        if len(result.stdout) > MAX_OUTPUT_BYTES:
            logger.debug("Copilot CLI output exceeded %s bytes", MAX_OUTPUT_BYTES)
            return None
        return result.stdout.decode("utf-8", errors="replace")
