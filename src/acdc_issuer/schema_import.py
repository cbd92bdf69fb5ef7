import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

LOG = logging.getLogger("acdc_issuer.schema_import")

RESERVED_ATTRIBUTE_KEYS = frozenset({"d", "i", "dt"})
UNKNOWN = "Unknown"


class SchemaImportError(ValueError):
    """Raised when a schema document cannot be turned into a credential type."""

    kind = "import_error"


class InvalidSchemaJson(SchemaImportError):
    """Raised when the schema text is not valid JSON."""

    kind = "invalid_json"


class SchemaNotAnObject(SchemaImportError):
    """Raised when the schema parses to anything but a JSON object."""

    kind = "not_an_object"


class MissingSchemaId(SchemaImportError):
    """Raised when `$id` is absent or not a string."""

    kind = "missing_schema_id"


class SchemaReadFailure(SchemaImportError):
    """Raised when the schema file cannot be read."""

    kind = "read_failure"


@dataclass(frozen=True)
class SchemaImport:
    schema_said: str
    attribute_examples: Dict[str, Any] = field(default_factory=dict)
    title: str = UNKNOWN
    credential_type: str = UNKNOWN
    version: str = UNKNOWN

    @property
    def attributes_found(self) -> int:
        return len(self.attribute_examples)

    @property
    def message(self) -> str:
        return f"Schema imported successfully! Schema SAID: {self.schema_said}"

    def attributes_text(self) -> Optional[str]:
        """Pretty-printed examples, or None when there is nothing to pre-fill."""
        if not self.attribute_examples:
            return None
        return json.dumps(self.attribute_examples, indent=2)

    def to_serialisable(self) -> Dict[str, Any]:
        return {
            "schemaSaid": self.schema_said,
            "title": self.title,
            "credentialType": self.credential_type,
            "version": self.version,
            "attributesFound": self.attributes_found,
        }


def _example_value(name: str, spec: Any) -> Any:
    declared = spec.get("type") if isinstance(spec, dict) else None
    if declared == "string":
        return f"example_{name}"
    if declared == "number":
        return 0
    if declared == "boolean":
        return False
    return None


def _metadata(schema: Dict[str, Any], key: str) -> str:
    value = schema.get(key)
    return value if value else UNKNOWN


def attribute_shape(schema: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the mapping at properties.a.oneOf[1].properties, or None if absent."""
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return None
    section = properties.get("a")
    if not isinstance(section, dict):
        return None
    variants = section.get("oneOf")
    if not isinstance(variants, list) or len(variants) < 2:
        return None
    expanded = variants[1]
    if not isinstance(expanded, dict):
        return None
    shape = expanded.get("properties")
    if not isinstance(shape, dict):
        return None
    return shape


def example_attributes(shape: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not shape:
        return {}
    return {
        name: _example_value(name, spec)
        for name, spec in shape.items()
        if name not in RESERVED_ATTRIBUTE_KEYS
    }


def parse_schema(raw_text: str) -> SchemaImport:
    try:
        schema = json.loads(raw_text)
    except (json.JSONDecodeError, RecursionError) as err:
        raise InvalidSchemaJson(f"Failed to import schema: {err}") from err

    if not isinstance(schema, dict):
        raise SchemaNotAnObject("Invalid schema file: Not a valid JSON object")

    schema_said = schema.get("$id")
    if not schema_said or not isinstance(schema_said, str):
        raise MissingSchemaId("Invalid schema file: Missing or invalid $id field (Schema SAID)")

    shape = attribute_shape(schema)
    if shape is None:
        LOG.debug("schema %s declares no attribute shape", schema_said)

    return SchemaImport(
        schema_said=schema_said,
        attribute_examples=example_attributes(shape),
        title=_metadata(schema, "title"),
        credential_type=_metadata(schema, "credentialType"),
        version=_metadata(schema, "version"),
    )


def read_schema(path: str | Path) -> str:
    schema_path = Path(path).expanduser()
    try:
        return schema_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise SchemaReadFailure("Failed to read the schema file") from err


def load_schema(path: str | Path) -> SchemaImport:
    return parse_schema(read_schema(path))
