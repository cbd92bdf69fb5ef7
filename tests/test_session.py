import json
import threading
from pathlib import Path

import pytest

from acdc_issuer.catalog import DEFAULT_EXAMPLES, ExampleCredential
from acdc_issuer.outcome import IssuanceOutcome
from acdc_issuer.session import BUSY_MESSAGE, IssuerSession

DATA = Path(__file__).resolve().parent / "data"


def test_load_example_round_trip(composer):
    session = IssuerSession(composer)
    for example in DEFAULT_EXAMPLES:
        assert session.load_example(example.name) is True
        assert session.credential_type == example.schema_said
        assert session.attributes == json.dumps(example.attributes, indent=2)


def test_unknown_example_changes_nothing(composer):
    session = IssuerSession(composer, catalog=[ExampleCredential("Only", "Eonly", {"a": 1})])
    assert session.example_names() == ["Only"]
    assert session.load_example("Missing") is False
    assert session.credential_type == ""
    assert session.attributes == "{}"


def test_default_identifier_prefills(composer):
    assert IssuerSession(composer, default_identifier="EAbc123").identifier == "EAbc123"


def test_import_schema_file_prefills_fields(composer):
    session = IssuerSession(composer)
    outcome = session.import_schema_file(DATA / "sample_schema.json")

    assert outcome.success is True
    assert session.outcome is outcome
    assert session.credential_type == "EBfdlu8R27Fbx-ehrqwImnK-8Cm79sqbAQ4MmvEAYqao"
    assert json.loads(session.attributes) == {
        "LEI": "example_LEI",
        "gracePeriod": 0,
        "active": False,
        "extra": None,
    }
    assert outcome.data["attributesFound"] == 4
    assert outcome.data["version"] == "1.0.0"


def test_import_without_examples_keeps_manual_attributes(composer):
    session = IssuerSession(composer)
    session.attributes = '{"attendeeName": "Jane"}'
    outcome = session.import_schema_file(DATA / "bare_schema.json")

    assert outcome.success is True
    assert session.credential_type == "ENPXp1vQzRF6JwIuS-mp2U8Uf1MoADoP_GqQ62VsDZWY"
    assert session.attributes == '{"attendeeName": "Jane"}'
    assert outcome.data["title"] == "Unknown"


def test_failed_import_leaves_fields_untouched(composer, tmp_path):
    session = IssuerSession(composer, default_identifier="EAbc123")
    session.load_example("Legal Entity vLEI")
    before = (session.identifier, session.credential_type, session.attributes)

    missing_id = session.import_schema_text(json.dumps({"title": "No id"}))
    assert missing_id.success is False
    assert missing_id.kind == "missing_schema_id"

    unreadable = session.import_schema_file(tmp_path / "absent.json")
    assert unreadable.message == "Failed to read the schema file"
    assert session.outcome is unreadable

    assert (session.identifier, session.credential_type, session.attributes) == before


def test_submit_records_latest_outcome(composer, fake_post):
    session = IssuerSession(composer, default_identifier="EAbc123")
    session.load_example("Legal Entity vLEI")

    first = session.submit()
    assert first.success is True
    assert session.outcome is first
    assert fake_post.call_args.kwargs["json"] == {
        "schemaSaid": "ENPXp1vQzRF6JwIuS-mp2U8Uf1MoADoP_GqQ62VsDZWY",
        "aid": "EAbc123",
        "attribute": {"LEI": "5493000X9UK29YM9OD70"},
    }

    session.identifier = " "
    second = session.submit()
    assert second.success is False
    assert session.outcome is second
    assert session.busy is False


class _BlockingComposer:
    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def submit(self, identifier, schema_reference, attributes_text):
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return IssuanceOutcome.succeeded("Credential issued successfully!", {"ok": True})


def test_second_submission_refused_while_in_flight():
    composer = _BlockingComposer()
    session = IssuerSession(composer, default_identifier="EAbc123")
    session.credential_type = "Eschema"
    results = []

    worker = threading.Thread(target=lambda: results.append(session.submit()))
    worker.start()
    assert composer.started.wait(timeout=5)
    assert session.busy is True
    assert session.outcome is None

    refused = session.submit()
    assert refused.success is False
    assert refused.message == BUSY_MESSAGE
    assert refused.kind == "busy"

    composer.release.set()
    worker.join(timeout=5)

    assert composer.calls == 1
    assert results[0].success is True
    assert session.outcome is results[0]
    assert session.busy is False


def test_busy_flag_clears_after_composer_error():
    class _Exploding:
        def submit(self, *args):
            raise RuntimeError("boom")

    session = IssuerSession(_Exploding(), default_identifier="EAbc123")
    with pytest.raises(RuntimeError):
        session.submit()
    assert session.busy is False


def test_import_schema_text_prefills_fields(composer):
    session = IssuerSession(composer)
    raw = json.dumps(
        {
            "$id": "Eemployee",
            "title": "Foundation Employee",
            "properties": {
                "a": {
                    "oneOf": [
                        {"type": "string"},
                        {
                            "properties": {
                                "d": {"type": "string"},
                                "email": {"type": "string"},
                                "age": {"type": "number"},
                            }
                        },
                    ]
                }
            },
        }
    )
    outcome = session.import_schema_text(raw)

    assert outcome.success is True
    assert outcome.message == "Schema imported successfully! Schema SAID: Eemployee"
    assert session.credential_type == "Eemployee"
    assert session.attributes == json.dumps({"email": "example_email", "age": 0}, indent=2)
    assert outcome.data["title"] == "Foundation Employee"
    assert outcome.data["attributesFound"] == 2


def test_deeply_nested_input_never_escapes_session(composer, fake_post):
    deep = "[" * 200000 + "]" * 200000
    session = IssuerSession(composer, default_identifier="EAbc123")
    session.load_example("Legal Entity vLEI")
    before = (session.credential_type, session.attributes)

    imported = session.import_schema_text(deep)
    assert imported.success is False
    assert imported.kind == "invalid_json"
    assert (session.credential_type, session.attributes) == before

    session.attributes = '{"a": ' + deep + "}"
    submitted = session.submit()
    assert submitted.success is False
    assert submitted.kind == "invalid_attributes_json"
    assert session.busy is False
    fake_post.assert_not_called()
