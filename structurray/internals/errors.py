# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from structurray.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL     = "general"
    ARGUMENT    = "argument"
    DECLARATION = "declaration"
    INTERNAL    = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

# Shape reminder shared by every argument error.
ARGUMENT_SHAPE = "faux_array expects a type and an integer literal, e.g. #[faux_array(u8, 100)]"

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = format_message(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def format_message(code: str, **kwargs) -> str:
    return _fmt(code, **kwargs)

def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for internal generator errors.

    Internal errors (CE0xxx codes) indicate bugs in the generator, not
    problems with the user's declaration.

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(shape=ARGUMENT_SHAPE, **kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors (generator bugs) - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "synthesized field names are not unique: {count} fields produced {distinct} distinct names",
    Category.INTERNAL, "Base62 encoding must be injective; duplicate names indicate a codec bug."))

_add(ErrorMessage("CW0001", Severity.WARNING,
    "file does not end with a newline",
    Category.GENERAL, "The rewritten file keeps the missing trailing newline."))

# Argument errors - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "{shape}: no arguments were found",
    Category.ARGUMENT, "The attribute argument list is empty or starts with a blank type."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "{shape}: only one argument was found ('{text}')",
    Category.ARGUMENT, "No top-level comma separates the type from the field count."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "{shape}: the first argument '{text}' could not be parsed as a type",
    Category.ARGUMENT, "The first argument must be a Rust type expression such as u8 or Option<String>."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "{shape}: the second argument '{text}' could not be parsed as a u32; "
    "use a decimal integer between 0 and {max_count}",
    Category.ARGUMENT, "The field count must be a non-negative decimal integer that fits in 32 bits."))

_add(ErrorMessage("CE1005", Severity.ERROR,
    "{shape}: the field count {count} is a valid u32 but exceeds the platform size limit {size_max}",
    Category.ARGUMENT, "Only possible where the platform size type is narrower than 32 bits."))

_add(ErrorMessage("CW1001", Severity.WARNING,
    "no faux_array attribute found; the file is copied unchanged",
    Category.GENERAL, "Nothing to expand."))

# Declaration errors - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "faux_array can only be attached to struct definitions, found {kind} '{name}'",
    Category.DECLARATION, "Enums, unions, functions and other items cannot become pseudo-arrays."))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "struct '{name}' does not implement serde's Serialize or Deserialize; "
    "add #[derive(Serialize)] so the generated rename attributes take effect",
    Category.DECLARATION, "Every generated field carries #[serde(rename = ...)], which needs a serde derive or impl."))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "struct '{name}' already declares {count} field(s) ({fields}); "
    "faux_array generates every field and requires an empty body",
    Category.DECLARATION, "Remove the existing fields or move them to a separate struct."))

_add(ErrorMessage("CE2004", Severity.ERROR,
    "could not parse the annotated declaration: {detail}",
    Category.DECLARATION, "The item following the attribute is not valid struct syntax."))

_add(ErrorMessage("CE2005", Severity.ERROR,
    "faux_array appears more than once on the same item",
    Category.DECLARATION, "Each struct is expanded once; merge the attributes into one."))
