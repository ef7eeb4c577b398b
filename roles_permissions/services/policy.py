"""Policy document model.

A policy is a JSON object of sections (``data`` and ``features``), each mapping
an action to an allow-list of resource names::

    {"data": {"view": ["task"]}, "features": {"execute": ["generate_reports"]}}

Documents are decoded once into an immutable in-memory form and queried by exact
string match. ``"*"`` is stored and compared like any other resource name.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from roles_permissions.services.errors import PolicyValidationError

DATA_SECTION = "data"
FEATURES_SECTION = "features"
EVALUATED_SECTIONS: Tuple[str, ...] = (DATA_SECTION, FEATURES_SECTION)

SectionMap = Mapping[str, Mapping[str, Tuple[str, ...]]]


def parse_policy(raw: Any) -> Dict[str, Any]:
    """Validate a policy supplied by a caller and return it as a JSON object.

    Accepts an already decoded mapping or a JSON-encoded string.
    """

    if raw is None:
        raise PolicyValidationError("Policy cannot be null")

    value = raw
    if isinstance(raw, (str, bytes)):
        try:
            value = json.loads(raw)
        except ValueError as exc:
            raise PolicyValidationError(f"Invalid policy JSON: {exc}") from exc
        if value is None:
            raise PolicyValidationError("Policy cannot be null")

    if not isinstance(value, Mapping):
        raise PolicyValidationError("Policy must be a JSON object")
    return dict(value)


def _resource_text(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, (bool, int, float)):
        return json.dumps(entry)
    return None


@dataclass(frozen=True)
class PolicyDocument:
    """Immutable, queryable allow-list policy."""

    sections: SectionMap = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Any) -> "PolicyDocument":
        """Decode a stored policy.

        Sections that are not objects and actions that are not lists grant
        nothing and are dropped. Raises :class:`PolicyValidationError` when the
        document itself is not a JSON object.
        """

        document = parse_policy(raw)
        sections: Dict[str, Dict[str, Tuple[str, ...]]] = {}
        for section_name, actions in document.items():
            if not isinstance(actions, Mapping):
                continue
            allow_lists: Dict[str, Tuple[str, ...]] = {}
            for action, resources in actions.items():
                if not isinstance(resources, list):
                    continue
                texts = (_resource_text(entry) for entry in resources)
                allow_lists[str(action)] = tuple(text for text in texts if text is not None)
            sections[str(section_name)] = allow_lists
        return cls(sections=sections)

    def query(self, section: str, action: str, resource: str) -> bool:
        return resource in self.sections.get(section, {}).get(action, ())

    def allows(self, action: str, resource: str) -> bool:
        """Check the ``data`` section, then ``features``."""

        return any(self.query(section, action, resource) for section in EVALUATED_SECTIONS)
