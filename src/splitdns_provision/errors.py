"""
Exceptions raised while talking to the DNS server.
"""


class ManagementCommandError(Exception):
    """A DnsServer cmdlet exited non-zero or could not be started."""

    def __init__(self, cmdlet: str, returncode: int | None, stderr: str = ""):
        self.cmdlet = cmdlet
        self.returncode = returncode
        self.stderr = stderr or ""
        detail = self.stderr.strip().split("\n")[-1] if self.stderr.strip() else ""
        msg = f"{cmdlet} failed"
        if returncode is not None:
            msg += f" (exit {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ProvisioningStepFailed(Exception):
    """A reconciliation step failed; the underlying error is kept in ``error``."""

    def __init__(self, step: str, error: Exception):
        self.step = step
        self.error = error
        super().__init__(f"{step}: {error}")
