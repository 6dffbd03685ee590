"""
Item metadata descriptor and its TOML text form.
"""

from dataclasses import dataclass, field
from typing import Dict

import tomli
import tomli_w

from .errors import CoercionError


@dataclass
class Meta:
    """
    Describes which backend produced an item and what its value holds.

    Args:
        backend: Binding name (e.g. 'hue')
        value_type: Logical value type (e.g. 'bool', 'color')
        ext: Free-form extension mapping
    """

    backend: str = ""
    value_type: str = ""
    ext: Dict[str, str] = field(default_factory=dict)

    def as_string(self) -> str:
        """
        Encode as TOML.

        Empty backend/value_type keys are omitted, the [ext] table is always
        written.

        Raises:
            CoercionError: If a field cannot be written as TOML
        """
        record: Dict[str, object] = {}
        if self.backend:
            record["backend"] = self.backend
        if self.value_type:
            record["value_type"] = self.value_type
        record["ext"] = dict(self.ext)
        try:
            return tomli_w.dumps(record)
        except (TypeError, ValueError) as e:
            raise CoercionError("meta", "string", str(e)) from e

    @classmethod
    def from_string(cls, text: str) -> "Meta":
        """
        Parse the TOML produced by as_string().

        Raises:
            CoercionError: If the text is not TOML or has wrongly typed fields
        """
        try:
            record = tomli.loads(text)
        except tomli.TOMLDecodeError as e:
            raise CoercionError(None, "meta", str(e)) from e

        backend = record.get("backend", "")
        value_type = record.get("value_type", "")
        ext = record.get("ext", {})
        if not isinstance(backend, str) or not isinstance(value_type, str):
            raise CoercionError(None, "meta", "backend and value_type must be strings")
        if not isinstance(ext, dict):
            raise CoercionError(None, "meta", "ext must be a table")
        for key, value in ext.items():
            if not isinstance(value, str):
                raise CoercionError(None, "meta", f"ext.{key} must be a string")

        return cls(backend=backend, value_type=value_type, ext=dict(ext))
