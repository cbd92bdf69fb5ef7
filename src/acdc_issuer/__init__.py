"""
ACDC issuer package: schema import and credential issuance requests against a remote issuance service.
"""

from .catalog import DEFAULT_EXAMPLES, ExampleCredential  # noqa: F401
from .composer import IssuanceClient, IssuanceRequest, IssuanceRequestComposer  # noqa: F401
from .config import IssuerConfig  # noqa: F401
from .outcome import IssuanceOutcome  # noqa: F401
from .schema_import import SchemaImport, SchemaImportError, parse_schema  # noqa: F401
from .session import IssuerSession  # noqa: F401
