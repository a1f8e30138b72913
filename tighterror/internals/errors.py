from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional

from tighterror.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    SPEC      = "spec"
    PARSER    = "parser"
    NAME      = "name"
    LAYOUT    = "layout"
    IO        = "io"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    kind: str
    code: str
    severity: Severity
    text: str
    category: Category = Category.SPEC
    doc: str = ""

    def format(self, **kwargs) -> str:
        return _fmt(self, **kwargs)


REGISTRY: Dict[str, ErrorMessage] = {}
_BY_CODE: Dict[str, ErrorMessage] = {}


class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, key: str) -> ErrorMessage:
        """Look an entry up by kind (``BAD_SPEC``) or by code (``TE0001``)."""
        if key in self._registry:
            return self._registry[key]
        return _BY_CODE[key]

    def __iter__(self):
        return iter(self._registry.values())


ERR = _ErrorCatalog(REGISTRY)


class TighterrorError(Exception):
    """A user-facing failure carrying a stable error kind.

    Attributes:
        message: The registry entry describing the failure.
        text: One-line human diagnostic naming the offending item.
        span: Location of the offending node in the spec file, if known.
        filename: Spec file the span refers to, if known.
    """

    def __init__(self, message: ErrorMessage, text: str,
                 span: Optional[Span] = None, filename: Optional[str] = None) -> None:
        super().__init__(text)
        self.message = message
        self.text = text
        self.span = span
        self.filename = filename

    @property
    def kind(self) -> str:
        return self.message.kind

    @property
    def code(self) -> str:
        return self.message.code

    def __str__(self) -> str:
        return f"{self.message.code}: {self.text}"


def fail(em: ErrorMessage, span: Optional[Span] = None, **kwargs) -> NoReturn:
    """Raise a TighterrorError for `em` formatted with `kwargs`."""
    raise TighterrorError(em, _fmt(em, **kwargs), span)


def emit(r: Reporter, err: TighterrorError) -> None:
    if err.message.severity == Severity.ERROR:
        r.error(err.code, err.text, err.span)
    else:
        r.warn(err.code, err.text, err.span)


def raise_internal_error(kind: str, **kwargs) -> NoReturn:
    """Raise a RuntimeError for internal generator errors.

    Internal errors indicate generator bugs, not problems of the
    specification. They abort the emission.

    Args:
        kind: Error kind (e.g., "INTERNAL_INVARIANT")
        **kwargs: Format parameters for the error message

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    msg = _get(kind)
    raise RuntimeError(f"{msg.code}: {_fmt(msg, **kwargs)}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.kind in REGISTRY:
        raise ValueError(f"duplicate error kind {REGISTRY[msg.kind]} in {msg}")
    if msg.code in _BY_CODE:
        raise ValueError(f"duplicate error code {_BY_CODE[msg.code]} in {msg}")
    REGISTRY[msg.kind] = msg
    _BY_CODE[msg.code] = msg

def _get(kind: str) -> ErrorMessage:
    try:
        return REGISTRY[kind]
    except KeyError:
        raise KeyError(f"unknown error kind: {kind}")

def _fmt(msg: ErrorMessage, **kwargs) -> str:
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {msg.kind} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Generic specification errors - TE00xx range
_add(ErrorMessage("BAD_SPEC", "TE0001", Severity.ERROR,
    "bad specification: {reason}",
    Category.SPEC, "The specification violates a rule not covered by a more specific kind."))

# Naming errors - TE01xx range
_add(ErrorMessage("EMPTY_IDENTIFIER", "TE0101", Severity.ERROR,
    "{what} name is empty",
    Category.NAME, "Names of modules, categories, errors and types must not be empty."))

_add(ErrorMessage("BAD_IDENTIFIER_CHARACTERS", "TE0102", Severity.ERROR,
    "{what} name '{name}' contains illegal characters; allowed are {allowed}",
    Category.NAME, "Names must start with a letter and contain only ASCII letters, digits and, for module names, underscores."))

_add(ErrorMessage("BAD_IDENTIFIER_CASE", "TE0103", Severity.ERROR,
    "{what} name '{name}' must be in {case}",
    Category.NAME, "Type-like names are UpperCamelCase; module names are lower_snake_case."))

_add(ErrorMessage("BAD_NAME", "TE0104", Severity.ERROR,
    "{what} name '{name}' is a reserved word",
    Category.NAME, "Names must not be specification keywords or Python keywords; top-level names must not shadow Python built-ins."))

_add(ErrorMessage("BAD_MODULE_IDENTIFIER", "TE0105", Severity.ERROR,
    "{what} '{name}' collides with an identifier of the generated module",
    Category.NAME, "A type-name override equals another generated top-level identifier."))

_add(ErrorMessage("NON_UNIQUE_NAME", "TE0106", Severity.ERROR,
    "{what} name '{name}' is not unique within {scope}",
    Category.NAME, "Names are compared case-insensitively within their scope."))

_add(ErrorMessage("NAME_COLLISION", "TE0107", Severity.ERROR,
    "{what} '{name}' collides with {other}",
    Category.NAME, "Two generated types would get the same name."))

# Parser errors - TE02xx range
_add(ErrorMessage("MISSING_ATTRIBUTE", "TE0201", Severity.ERROR,
    "{obj} is missing mandatory attribute '{attr}'",
    Category.PARSER, "A mandatory attribute of an object is absent."))

_add(ErrorMessage("EMPTY_LIST", "TE0202", Severity.ERROR,
    "'{kw}' list of {obj} must not be empty",
    Category.PARSER, "Modules need categories and categories need errors."))

_add(ErrorMessage("MUTUALLY_EXCLUSIVE_KEYWORDS", "TE0203", Severity.ERROR,
    "'{a}' and '{b}' are mutually exclusive in {obj}",
    Category.PARSER, "Only one of two keywords may be present in the same object."))

_add(ErrorMessage("BAD_OBJECT_ATTRIBUTE", "TE0204", Severity.ERROR,
    "unknown attribute '{attr}' in {obj}",
    Category.PARSER, "The object does not accept this attribute."))

_add(ErrorMessage("BAD_ROOT_LEVEL_KEYWORD", "TE0205", Severity.ERROR,
    "unknown root-level keyword '{kw}'",
    Category.PARSER, "Allowed root-level keywords: main, module, modules, category, categories, errors."))

_add(ErrorMessage("BAD_VALUE_TYPE", "TE0206", Severity.ERROR,
    "value of '{kw}' must be {expected}, got {got}",
    Category.PARSER, "The value has the wrong markup type."))

_add(ErrorMessage("BAD_KEYWORD_TYPE", "TE0207", Severity.ERROR,
    "keyword {kw!r} must be a string",
    Category.PARSER, "Mapping keys must be strings."))

_add(ErrorMessage("BAD_YAML", "TE0208", Severity.ERROR,
    "invalid YAML document: {reason}",
    Category.PARSER, "The YAML file is malformed or holds more than one document."))

_add(ErrorMessage("BAD_TOML", "TE0209", Severity.ERROR,
    "invalid TOML document: {reason}",
    Category.PARSER, "The TOML file is malformed."))

# Layout errors - TE03xx range
_add(ErrorMessage("TOO_MANY_BITS", "TE0301", Severity.ERROR,
    "module '{module}' needs {bits} bits to encode its kinds; at most 64 are supported",
    Category.LAYOUT, "Too many categories or errors to fit a kind into 64 bits."))

# File errors - TE04xx range
_add(ErrorMessage("SPEC_FILE_NOT_FOUND", "TE0401", Severity.ERROR,
    "specification file not found: {path}",
    Category.IO, "No spec path was given and no default spec file exists."))

_add(ErrorMessage("BAD_SPEC_FILE_EXTENSION", "TE0402", Severity.ERROR,
    "unsupported specification file extension: {path}",
    Category.IO, "Spec files must end with .yaml, .yml or .toml."))

_add(ErrorMessage("FAILED_TO_OPEN_SPEC_FILE", "TE0403", Severity.ERROR,
    "failed to open specification file {path}: {reason}",
    Category.IO, "The spec file exists but cannot be read."))

_add(ErrorMessage("FAILED_TO_READ_OUTPUT_FILE", "TE0404", Severity.ERROR,
    "failed to read output file {path}: {reason}",
    Category.IO, "Update mode could not read the existing output file."))

_add(ErrorMessage("FAILED_TO_WRITE_OUTPUT_FILE", "TE0405", Severity.ERROR,
    "failed to write output file {path}: {reason}",
    Category.IO, "The generated code could not be written."))

_add(ErrorMessage("OUTPUT_PATH_NOT_DIRECTORY", "TE0406", Severity.ERROR,
    "output path must be an existing directory in separate-files mode: {path}",
    Category.IO, "Separate-files mode writes one file per module into a directory."))

_add(ErrorMessage("BAD_PATH", "TE0407", Severity.ERROR,
    "bad output path: {path}",
    Category.IO, "The output path has no parent directory or file name."))

# Internal errors (generator bugs) - TE9xxx range
_add(ErrorMessage("INTERNAL_INVARIANT", "TE9001", Severity.ERROR,
    "invariant violated: {message}",
    Category.INTERNAL, "An input that passed validation violated a module builder precondition."))

_add(ErrorMessage("INTERNAL_UNKNOWN_ITEM", "TE9002", Severity.ERROR,
    "unknown symbolic item '{item}'",
    Category.INTERNAL, "The emitter met a node of the symbolic module it cannot render."))
