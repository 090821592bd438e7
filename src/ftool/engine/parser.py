"""JSON value parser collaborator."""

import codecs
import json
from typing import Any

from ..exceptions import ParseError


class JsonParser:
    def parse(self, data: bytes) -> Any:
        """Parse a JSON document into dicts, lists and scalars.

        Raises:
            ParseError: With the byte offset of the failure when known
        """
        bom = len(codecs.BOM_UTF8) if data.startswith(codecs.BOM_UTF8) else 0
        try:
            text = data[bom:].decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8: {e.reason}", bom + e.start) from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            offset = bom + len(text[: e.pos].encode("utf-8"))
            raise ParseError(f"Invalid JSON: {e.msg}", offset) from e
        except RecursionError as e:
            raise ParseError("Document is nested too deeply to parse") from e
