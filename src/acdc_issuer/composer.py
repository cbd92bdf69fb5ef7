import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import requests

from .config import IssuerConfig
from .outcome import IssuanceOutcome

LOG = logging.getLogger("acdc_issuer.composer")

SUCCESS_MESSAGE = "Credential issued successfully!"
GENERIC_FAILURE = "Failed to issue credential"


class IssuanceError(Exception):
    """Base class for everything that stops a credential from being issued."""

    kind = "issuance_error"


class ValidationError(IssuanceError, ValueError):
    """Raised when operator input is rejected before any request is sent."""

    kind = "validation_error"


class MissingRequiredField(ValidationError):
    kind = "missing_required_field"


class InvalidAttributesJson(ValidationError):
    kind = "invalid_attributes_json"


class TransportError(IssuanceError, RuntimeError):
    """Raised when the issuance service call does not succeed."""

    kind = "transport_error"


class HttpFailure(TransportError):
    kind = "http_failure"

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(TransportError):
    kind = "network_failure"


@dataclass(frozen=True)
class IssuanceRequest:
    schema_said: str
    aid: str
    attribute: Dict[str, Any] = field(default_factory=dict)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"schemaSaid": self.schema_said, "aid": self.aid}
        if self.attribute:
            body["attribute"] = self.attribute
        return body


def validate_required(identifier: str, schema_reference: str) -> None:
    if not (identifier or "").strip() or not (schema_reference or "").strip():
        raise MissingRequiredField("Please fill in all required fields")


def parse_attributes(text: str) -> Dict[str, Any]:
    if not (text or "").strip():
        return {}
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as err:
        raise InvalidAttributesJson("Invalid JSON in attributes field") from err
    if not isinstance(parsed, dict):
        raise InvalidAttributesJson("Invalid JSON in attributes field")
    return parsed


def compose_request(identifier: str, schema_reference: str, attributes_text: str) -> IssuanceRequest:
    validate_required(identifier, schema_reference)
    return IssuanceRequest(
        schema_said=schema_reference,
        aid=identifier,
        attribute=parse_attributes(attributes_text),
    )


def _error_detail(response: requests.Response) -> str:
    try:
        payload = response.json()
    except (ValueError, RecursionError):
        payload = None
    if isinstance(payload, dict) and payload.get("data"):
        return str(payload["data"])
    return f"HTTP error! status: {response.status_code}"


class IssuanceClient:
    def __init__(self, cfg: IssuerConfig | None = None):
        self.cfg = cfg or IssuerConfig()

    def issue(self, request: IssuanceRequest) -> Any:
        """POST the request body and return the decoded response on a 2xx status."""
        url = self.cfg.issue_url
        try:
            response = requests.post(
                url,
                json=request.to_body(),
                headers={"Content-Type": "application/json"},
                timeout=self.cfg.timeout,
            )
        except requests.RequestException as err:
            raise NetworkFailure(str(err) or GENERIC_FAILURE) from err

        if not response.ok:
            raise HttpFailure(_error_detail(response), response.status_code)

        try:
            return response.json()
        except (ValueError, RecursionError) as err:
            raise NetworkFailure(str(err) or GENERIC_FAILURE) from err


class IssuanceRequestComposer:
    """Validates operator input, sends one issuance request and classifies the answer."""

    def __init__(self, client: IssuanceClient | None = None):
        self.client = client or IssuanceClient()

    def submit(self, identifier: str, schema_reference: str, attributes_text: str) -> IssuanceOutcome:
        try:
            request = compose_request(identifier, schema_reference, attributes_text)
        except ValidationError as err:
            LOG.warning("issuance request rejected: %s", err)
            return IssuanceOutcome.failed(str(err), kind=err.kind)

        LOG.info("requesting %s credential for %s via %s", request.schema_said, request.aid, self.client.cfg.issue_url)
        try:
            data = self.client.issue(request)
        except TransportError as err:
            LOG.warning("failed to issue credential: %s", err)
            return IssuanceOutcome.failed(str(err) or GENERIC_FAILURE, kind=err.kind)

        LOG.info("issued %s credential for %s", request.schema_said, request.aid)
        return IssuanceOutcome.succeeded(SUCCESS_MESSAGE, data)
