from dataclasses import dataclass, field
import os

from dotenv import load_dotenv

load_dotenv()

SANDBOX_SERVER_URL = "https://cred-issuance.dev.idw-sandboxes.cf-deployments.org"
ISSUE_PATH = "issueAcdcCredential"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class IssuerConfig:
    server_url: str = field(default_factory=lambda: os.getenv("CREDENTIAL_SERVER_URL") or SANDBOX_SERVER_URL)
    default_identifier: str = field(default_factory=lambda: os.getenv("DEFAULT_IDENTIFIER_ID", ""))
    timeout: float = field(default_factory=lambda: _env_float("CREDENTIAL_SERVER_TIMEOUT", 30.0))

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")

    @property
    def issue_url(self) -> str:
        return f"{self.base_url}/{ISSUE_PATH}"
