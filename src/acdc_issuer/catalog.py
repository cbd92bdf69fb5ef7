"""
Example credentials offered to the operator for pre-filling the issuance form.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence


@dataclass(frozen=True)
class ExampleCredential:
    name: str
    schema_said: str
    attributes: Dict[str, Any] = field(default_factory=dict)


DEFAULT_EXAMPLES: Sequence[ExampleCredential] = (
    ExampleCredential(
        name="Rare EVO 2024 Attendee",
        schema_said="EJxnJdxkHbRw2wVFNe4IUOPLt8fEtg9Sr3WyTjlgKoIb",
        attributes={"attendeeName": "John Doe"},
    ),
    ExampleCredential(
        name="Foundation Employee",
        schema_said="EL9oOWU_7zQn_rD--Xsgi3giCWnFDaNvFMUGTOZx1ARO",
        attributes={
            "email": "john.doe@example.com",
            "firstName": "John",
            "lastName": "Doe",
        },
    ),
    ExampleCredential(
        name="Qualified vLEI Issuer Credential",
        schema_said="EBfdlu8R27Fbx-ehrqwImnK-8Cm79sqbAQ4MmvEAYqao",
        attributes={"LEI": "5493000X9UK29YM9OD70", "gracePeriod": 90},
    ),
    ExampleCredential(
        name="Legal Entity vLEI",
        schema_said="ENPXp1vQzRF6JwIuS-mp2U8Uf1MoADoP_GqQ62VsDZWY",
        attributes={"LEI": "5493000X9UK29YM9OD70"},
    ),
)


def find_example(name: str, catalog: Iterable[ExampleCredential] = DEFAULT_EXAMPLES) -> Optional[ExampleCredential]:
    for example in catalog:
        if example.name == name:
            return example
    return None
