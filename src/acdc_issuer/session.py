import json
import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from .catalog import DEFAULT_EXAMPLES, ExampleCredential, find_example
from .composer import IssuanceRequestComposer
from .outcome import IssuanceOutcome
from .schema_import import SchemaImport, SchemaImportError, load_schema, parse_schema

LOG = logging.getLogger("acdc_issuer.session")

BUSY_MESSAGE = "A credential issuance is already in progress"


class IssuerSession:
    """
    Operator form state for one issuance screen.

    Holds the three text fields, the latest outcome and the busy flag that
    keeps at most one submission in flight.
    """

    def __init__(
        self,
        composer: IssuanceRequestComposer | None = None,
        catalog: Iterable[ExampleCredential] = DEFAULT_EXAMPLES,
        default_identifier: str = "",
    ):
        self.composer = composer or IssuanceRequestComposer()
        self.catalog = tuple(catalog)
        self.identifier = default_identifier
        self.credential_type = ""
        self.attributes = "{}"
        self.outcome: Optional[IssuanceOutcome] = None
        self._busy = False
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy

    def example_names(self) -> List[str]:
        return [example.name for example in self.catalog]

    def load_example(self, name: str) -> bool:
        example = find_example(name, self.catalog)
        if example is None:
            LOG.warning("unknown example credential %r", name)
            return False
        self.credential_type = example.schema_said
        self.attributes = json.dumps(example.attributes, indent=2)
        return True

    def _apply_import(self, imported: SchemaImport) -> IssuanceOutcome:
        self.credential_type = imported.schema_said
        attributes_text = imported.attributes_text()
        if attributes_text is not None:
            self.attributes = attributes_text
        LOG.info("imported schema %s (%d attribute(s))", imported.schema_said, imported.attributes_found)
        return IssuanceOutcome.succeeded(imported.message, imported.to_serialisable())

    def _import(self, loader, source) -> IssuanceOutcome:
        try:
            imported = loader(source)
        except SchemaImportError as err:
            LOG.warning("schema import failed: %s", err)
            self.outcome = IssuanceOutcome.failed(str(err), kind=err.kind)
        else:
            self.outcome = self._apply_import(imported)
        return self.outcome

    def import_schema_text(self, raw_text: str) -> IssuanceOutcome:
        return self._import(parse_schema, raw_text)

    def import_schema_file(self, path: str | Path) -> IssuanceOutcome:
        return self._import(load_schema, path)

    def submit(self) -> IssuanceOutcome:
        with self._lock:
            if self._busy:
                LOG.warning("submission refused; another issuance is in flight")
                return IssuanceOutcome.failed(BUSY_MESSAGE, kind="busy")
            self._busy = True
            self.outcome = None

        try:
            outcome = self.composer.submit(self.identifier, self.credential_type, self.attributes)
            self.outcome = outcome
            return outcome
        finally:
            with self._lock:
                self._busy = False
