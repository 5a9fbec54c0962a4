"""
roleInfo.js Literal Parser

The ARIA repository ships ``common/script/roleInfo.js``, a script holding a
single assignment ``var roleInfo = {...};`` whose object literal lists each
role's parent roles and local/all properties. This module reads that literal
with a small tokenizer and recursive-descent parser. Nothing is evaluated:
the accepted grammar is objects, arrays, strings, numbers, true, false and
null, with optional trailing commas and JavaScript comments.

Usage:
    table = load_role_info_table(script_text)
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from aria_kb.core.data_models import PropertyEntry
from aria_kb.core.exceptions import RoleInfoSyntaxError
from aria_kb.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_NESTING_DEPTH = 64


class TokenType(Enum):
    LBRACE = auto()      # {
    RBRACE = auto()      # }
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]
    COLON = auto()       # :
    COMMA = auto()       # ,
    STRING = auto()      # "text" or 'text'
    NUMBER = auto()      # 12, -0.5, 1e3
    IDENTIFIER = auto()  # bare keys, true, false, null
    EOF = auto()


@dataclass
class Token:
    type: TokenType
    value: Any
    line: int
    column: int


_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_ESCAPES = {
    '"': '"', "'": "'", "\\": "\\", "/": "/",
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t",
}

_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_LITERALS = {"true": True, "false": False, "null": None}


class LiteralLexer:
    """Tokenizer for the object-literal subset of JavaScript"""

    def __init__(self, source: str, start: int = 0):
        self.source = source
        self.pos = start
        self.length = len(source)
        self.line = source.count("\n", 0, start) + 1
        self.line_start = source.rfind("\n", 0, start) + 1

    def _error(self, message: str) -> RoleInfoSyntaxError:
        return RoleInfoSyntaxError(message, self.line, self.pos - self.line_start + 1)

    def _newline_at(self, index: int) -> None:
        self.line += 1
        self.line_start = index + 1

    def _skip_ignored(self) -> None:
        """Skip whitespace and comments"""
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch == "\n":
                self._newline_at(self.pos)
                self.pos += 1
            elif ch in " \t\r\ufeff":
                self.pos += 1
            elif self.source.startswith("//", self.pos):
                end = self.source.find("\n", self.pos)
                self.pos = self.length if end == -1 else end
            elif self.source.startswith("/*", self.pos):
                end = self.source.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("unterminated comment")
                for index in range(self.pos, end):
                    if self.source[index] == "\n":
                        self._newline_at(index)
                self.pos = end + 2
            else:
                return

    def tokens(self) -> Iterator[Token]:
        while True:
            self._skip_ignored()
            if self.pos >= self.length:
                yield Token(TokenType.EOF, None, self.line, self.pos - self.line_start + 1)
                return

            ch = self.source[self.pos]
            column = self.pos - self.line_start + 1

            if ch in _PUNCTUATION:
                self.pos += 1
                yield Token(_PUNCTUATION[ch], ch, self.line, column)
            elif ch in "\"'":
                yield Token(TokenType.STRING, self._read_string(ch), self.line, column)
            elif ch == "-" or ch.isdigit():
                match = _NUMBER.match(self.source, self.pos)
                if not match:
                    raise self._error(f"invalid number starting with {ch!r}")
                text = match.group(0)
                self.pos = match.end()
                value = float(text) if any(c in text for c in ".eE") else int(text)
                yield Token(TokenType.NUMBER, value, self.line, column)
            else:
                match = _IDENTIFIER.match(self.source, self.pos)
                if not match:
                    raise self._error(f"unexpected character {ch!r}")
                self.pos = match.end()
                yield Token(TokenType.IDENTIFIER, match.group(0), self.line, column)

    def _read_string(self, quote: str) -> str:
        self.pos += 1
        chars: List[str] = []
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(chars)
            if ch == "\n":
                raise self._error("unterminated string")
            if ch == "\\":
                chars.append(self._read_escape())
                continue
            chars.append(ch)
            self.pos += 1
        raise self._error("unterminated string")

    def _read_escape(self) -> str:
        escape = self.source[self.pos + 1:self.pos + 2]
        if escape == "u":
            digits = self.source[self.pos + 2:self.pos + 6]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise self._error("invalid unicode escape")
            self.pos += 6
            return chr(int(digits, 16))
        if not escape:
            raise self._error("unterminated string")
        self.pos += 2
        # Unknown escapes stand for the character itself, as in JavaScript
        return _ESCAPES.get(escape, escape)


class LiteralParser:
    """Recursive-descent parser producing plain dicts, lists and scalars"""

    def __init__(self, lexer: LiteralLexer):
        self._tokens = lexer.tokens()
        self._current: Optional[Token] = None

    @property
    def current(self) -> Token:
        # Lexed on demand so nothing after the closing token is read
        if self._current is None:
            self._current = next(self._tokens)
        return self._current

    def _advance(self) -> Token:
        token = self.current
        if token.type is not TokenType.EOF:
            self._current = None
        return token

    def _expect(self, token_type: TokenType) -> Token:
        if self.current.type is not token_type:
            raise self._error(f"expected {token_type.name}, found {self._describe(self.current)}")
        return self._advance()

    def _error(self, message: str) -> RoleInfoSyntaxError:
        return RoleInfoSyntaxError(message, self.current.line, self.current.column)

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type is TokenType.EOF:
            return "end of input"
        return f"{token.type.name} {token.value!r}"

    def parse_value(self, depth: int = 0) -> Any:
        if depth > MAX_NESTING_DEPTH:
            raise self._error("nesting too deep")

        token = self.current
        if token.type is TokenType.LBRACE:
            return self._parse_object(depth)
        if token.type is TokenType.LBRACKET:
            return self._parse_array(depth)
        if token.type in (TokenType.STRING, TokenType.NUMBER):
            return self._advance().value
        if token.type is TokenType.IDENTIFIER and token.value in _LITERALS:
            self._advance()
            return _LITERALS[token.value]
        raise self._error(f"unexpected {self._describe(token)}")

    def _parse_object(self, depth: int) -> Dict[str, Any]:
        self._expect(TokenType.LBRACE)
        result: Dict[str, Any] = {}
        while self.current.type is not TokenType.RBRACE:
            key_token = self.current
            if key_token.type in (TokenType.STRING, TokenType.IDENTIFIER):
                key = str(self._advance().value)
            elif key_token.type is TokenType.NUMBER:
                key = str(self._advance().value)
            else:
                raise self._error(f"expected object key, found {self._describe(key_token)}")
            self._expect(TokenType.COLON)
            result[key] = self.parse_value(depth + 1)
            if self.current.type is TokenType.COMMA:
                self._advance()
            elif self.current.type is not TokenType.RBRACE:
                raise self._error(f"expected ',' or '}}', found {self._describe(self.current)}")
        self._advance()
        return result

    def _parse_array(self, depth: int) -> List[Any]:
        self._expect(TokenType.LBRACKET)
        result: List[Any] = []
        while self.current.type is not TokenType.RBRACKET:
            result.append(self.parse_value(depth + 1))
            if self.current.type is TokenType.COMMA:
                self._advance()
            elif self.current.type is not TokenType.RBRACKET:
                raise self._error(f"expected ',' or ']', found {self._describe(self.current)}")
        self._advance()
        return result


def parse_literal(source: str, start: int = 0) -> Any:
    """Parse one literal value beginning at ``start``

    Text after the value is not examined.

    Raises:
        RoleInfoSyntaxError: on anything outside the literal grammar
    """
    parser = LiteralParser(LiteralLexer(source, start))
    return parser.parse_value()


def parse_role_info(script_text: str, variable: str = "roleInfo") -> Dict[str, Any]:
    """Extract and parse the object assigned to ``variable`` in a script

    Raises:
        RoleInfoSyntaxError: when the assignment is missing or its value is
            not an object literal
    """
    assignment = re.search(rf"\b(?:var|let|const)\s+{re.escape(variable)}\s*=\s*", script_text)
    if not assignment:
        raise RoleInfoSyntaxError(f"no assignment to '{variable}' found", 1, 1)

    value = parse_literal(script_text, assignment.end())
    if not isinstance(value, dict):
        line = script_text.count("\n", 0, assignment.end()) + 1
        raise RoleInfoSyntaxError(f"'{variable}' is not an object literal", line, 1)
    return value


class RoleInfoEntry(BaseModel):
    """One role of the structured inheritance table"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    parent_roles: List[str] = Field(default_factory=list, alias="parentRoles")
    localprops: List[PropertyEntry] = Field(default_factory=list)
    allprops: Optional[List[PropertyEntry]] = None

    @field_validator("parent_roles", "localprops", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("localprops", "allprops")
    @classmethod
    def validate_property_names(cls, v):
        if v is None:
            return v
        for entry in v:
            if not isinstance(entry.get("name"), str):
                raise ValueError("every property entry needs a string 'name'")
        return v


def load_role_info_table(script_text: Optional[str],
                         variable: str = "roleInfo") -> Dict[str, RoleInfoEntry]:
    """Parse roleInfo.js text into validated table entries

    Degrades to an empty table with a warning when the text is missing or
    malformed. Individual entries that fail validation are skipped.
    """
    if script_text is None:
        return {}

    try:
        raw = parse_role_info(script_text, variable)
    except RoleInfoSyntaxError as e:
        logger.warning(f"Could not parse roleInfo.js: {e}")
        return {}

    table: Dict[str, RoleInfoEntry] = {}
    for role_name, entry in raw.items():
        if not isinstance(entry, dict):
            logger.warning(f"Skipping roleInfo entry '{role_name}': not an object")
            continue
        try:
            table[role_name] = RoleInfoEntry.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping roleInfo entry '{role_name}': {e.error_count()} invalid field(s)")
    return table
