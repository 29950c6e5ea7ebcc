# docnotes/services/identifiers.py
"""
Identifier normalization and natural keys.

Docset filenames arrive in many spellings (with a `.docset` suffix, with
version numbers, Apple's legacy names) and page paths carry release
segments. Both are reduced to one canonical form before lookup so the same
page never yields two identifiers.
"""
import hashlib
import re
from dataclasses import replace
from typing import Callable, Tuple

from docnotes.core.errors import ValidationError
from docnotes.services.records import IdentifierRecord

APPLE_IOS = "com.apple.adc.documentation.iOS"
APPLE_OSX = "com.apple.adc.documentation.OSX"

# Docset whose pages are keyed by their httrack source instead of page path
HTTRACK_KEYED_DOCSET = "Mono"

# Docset whose httrack sources point at the Objective-C flavour of each page
APPLE_API_REFERENCE = "Apple_API_Reference"

_DOCSET_SUFFIX = re.compile(r"\.docset$")
_VERSION = re.compile(r"[0-9]+\.*[0-9]+(\.*[0-9]+)*")
_DIGITS = re.compile(r"[0-9]")
_PREFIXED_VERSION = re.compile(r"v[0-9]+\.*[0-9]+(\.*[0-9]+)*")
_UNDERSCORE_VERSION = re.compile(r"[0-9]+_*[0-9]+(_*[0-9]+)*")
_NUMBERED_PAGE = re.compile(r"-[2-9]\.html$")
_WWW_PREFIX = re.compile(r"^(www\.)+")
# Keeps the double slash of a URL scheme
_REPEATED_SLASHES = re.compile(r"(?<!:)/{2,}")
_PRERELEASE_DIRS = tuple(
    f"/{sep}{tag}{end}" for sep in "-." for tag in ("alpha", "beta", "rc") for end in "/.-"
)


def normalize_docset_filename(filename: str) -> str:
    filename = _DOCSET_SUFFIX.sub("", filename or "")
    filename = _VERSION.sub("", filename)
    filename = _DIGITS.sub("", filename).strip()
    return filename


def _normalize_apple(identifier: IdentifierRecord) -> IdentifierRecord:
    filename = identifier.docset_filename
    page_path = identifier.page_path
    if filename == "prerelease":
        if page_path.startswith("ios/"):
            return replace(identifier, docset_filename=APPLE_IOS, page_path=page_path[len("ios/"):])
        if page_path.startswith("mac/"):
            return replace(identifier, docset_filename=APPLE_OSX, page_path=page_path[len("mac/"):])
    elif filename == "ios" or filename.endswith("AppleiOS.iOSLibrary"):
        return replace(identifier, docset_filename=APPLE_IOS)
    elif filename == "mac" or filename.endswith("AppleOSX.CoreReference"):
        return replace(identifier, docset_filename=APPLE_OSX)
    return identifier


def _until_stable(step: Callable[[str], str], value: str) -> str:
    # Every step only shortens its input, so this terminates
    while True:
        result = step(value)
        if result == value:
            return result
        value = result


def _clean_page_dir(path: str) -> str:
    path = path.replace("https://", "http://")
    path = path.replace("swiftdoc.org/swift-2/", "swiftdoc.org/")
    path = _PREFIXED_VERSION.sub("", path)
    path = _VERSION.sub("", path)
    path = _UNDERSCORE_VERSION.sub("", path)
    path = _DIGITS.sub("", path)
    for marker in _PRERELEASE_DIRS:
        path = path.replace(marker, "/")
    path = _WWW_PREFIX.sub("", path)
    return _REPEATED_SLASHES.sub("/", path).strip()


def normalize_page_path(page_path: str) -> str:
    """
    Drop version segments from a page path so every release of a docset
    shares one identifier per page.

    Only the directory part loses its digits; the page name keeps them,
    apart from a trailing `-2.html` to `-9.html` duplicate marker.
    """
    page_path = (page_path or "").strip()
    directory, slash, page = page_path.rpartition("/")
    page = _until_stable(lambda name: _NUMBERED_PAGE.sub(".html", name), page)
    if not slash:
        return page
    return _until_stable(_clean_page_dir, directory + slash) + page


def _clean_apple_source(source: str) -> str:
    return source.replace("?language=objc", "").replace("/ns", "/").replace("https://", "")


def normalize_httrack_source(docset_filename: str, source: str) -> str:
    source = (source or "").strip()
    if docset_filename == APPLE_API_REFERENCE:
        source = _until_stable(_clean_apple_source, source)
    return source


def normalize(identifier: IdentifierRecord) -> IdentifierRecord:
    """
    Return the canonical form of an identifier payload.

    Raises ValidationError when the payload names no docset at all.
    Applying it twice gives the same result as applying it once.
    """
    if identifier.is_empty():
        raise ValidationError("Missing parameter: identifier", code="MISSING_IDENTIFIER")
    identifier = replace(
        identifier,
        docset_filename=normalize_docset_filename(identifier.docset_filename),
        page_path=(identifier.page_path or "").strip(),
        httrack_source=(identifier.httrack_source or "").strip(),
    )
    identifier = _normalize_apple(identifier)
    return replace(
        identifier,
        page_path=normalize_page_path(identifier.page_path),
        httrack_source=normalize_httrack_source(identifier.docset_filename, identifier.httrack_source),
    )


def natural_key(identifier: IdentifierRecord) -> Tuple[str, str, str]:
    """
    (docset_filename, key field name, key value) used to look an identifier up.

    Pages of the httrack-keyed docset are identified by their source URL,
    every other page by its path.
    """
    if identifier.docset_filename == HTTRACK_KEYED_DOCSET and identifier.httrack_source:
        return identifier.docset_filename, "httrack_source", identifier.httrack_source
    return identifier.docset_filename, "page_path", identifier.page_path


def lookup_key(identifier: IdentifierRecord) -> str:
    """Fixed-length digest of the natural key, stored in a unique column."""
    return hashlib.sha256("\0".join(natural_key(identifier)).encode("utf-8")).hexdigest()
