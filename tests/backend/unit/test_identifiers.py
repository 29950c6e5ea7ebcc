"""
Unit tests for services.identifiers.
Tests docset filename and page path normalization and natural keys.
"""
import pytest

from docnotes.core.errors import ValidationError
from docnotes.services.identifiers import (
    APPLE_IOS,
    APPLE_OSX,
    lookup_key,
    natural_key,
    normalize,
    normalize_docset_filename,
    normalize_httrack_source,
    normalize_page_path,
)
from docnotes.services.records import IdentifierRecord


@pytest.mark.parametrize("raw, expected", [
    ("Python.docset", "Python"),
    ("Python 3.docset", "Python"),
    ("Django 1.8.4", "Django"),
    ("NodeJS", "NodeJS"),
    ("", ""),
])
def test_normalize_docset_filename(raw, expected):
    assert normalize_docset_filename(raw) == expected


@pytest.mark.parametrize("filename, page_path, expected_filename, expected_path", [
    ("prerelease", "ios/documentation/UIKit.html", APPLE_IOS, "documentation/UIKit.html"),
    ("prerelease", "mac/documentation/AppKit.html", APPLE_OSX, "documentation/AppKit.html"),
    ("ios", "documentation/UIKit.html", APPLE_IOS, "documentation/UIKit.html"),
    ("mac", "documentation/AppKit.html", APPLE_OSX, "documentation/AppKit.html"),
    ("com.apple.adc.documentation.AppleiOS.iOSLibrary", "x.html", APPLE_IOS, "x.html"),
])
def test_apple_docsets_are_mapped(filename, page_path, expected_filename, expected_path):
    result = normalize(IdentifierRecord(docset_filename=filename, page_path=page_path))
    assert result.docset_filename == expected_filename
    assert result.page_path == expected_path


def test_normalize_is_idempotent():
    raw = IdentifierRecord(docset_filename="prerelease", page_path="ios/a.html", docset_name="iOS")
    once = normalize(raw)
    assert normalize(once) == once


@pytest.mark.parametrize("raw, expected", [
    ("library/os.html", "library/os.html"),
    ("docs/v1.2.0/guide/intro-2.html", "docs/guide/intro.html"),
    ("www.sqlalchemy.org/doc/1_4/orm.html", "sqlalchemy.org/doc/orm.html"),
    ("react/16.3-beta/docs/hooks.html", "react/docs/hooks.html"),
    ("https://swiftdoc.org/swift-2/type/Array/", "http://swiftdoc.org/type/Array/"),
    ("python3/library/http.client-3.html", "python/library/http.client.html"),
    ("page-12.html", "page-12.html"),
])
def test_normalize_page_path(raw, expected):
    assert normalize_page_path(raw) == expected


def test_apple_api_reference_httrack_source_is_cleaned():
    source = "https://developer.apple.com/documentation/foundation/nsstring?language=objc"
    assert normalize_httrack_source("Apple_API_Reference", source) == "developer.apple.com/documentation/foundation/string"


def test_other_httrack_sources_are_only_trimmed():
    assert normalize_httrack_source("Mono", " https://mono/nsa?language=objc ") == "https://mono/nsa?language=objc"


def test_release_versions_of_a_page_share_a_lookup_key():
    old = normalize(IdentifierRecord(docset_filename="Django 1.8", page_path="docs/1.8/ref/models.html"))
    new = normalize(IdentifierRecord(docset_filename="Django 4.2.docset", page_path="docs/4.2/ref/models.html"))
    assert lookup_key(old) == lookup_key(new)


def test_page_normalization_is_idempotent():
    raw = IdentifierRecord(
        docset_filename="Apple_API_Reference",
        page_path="www.www.example.com/v2.1/-alpha/-beta///a-3-2.html",
        httrack_source="https://x/nsnsview?language=objc",
    )
    once = normalize(raw)
    assert normalize(once) == once


def test_empty_identifier_is_rejected():
    with pytest.raises(ValidationError) as exc:
        normalize(IdentifierRecord(docset_filename="", page_path="a.html"))
    assert exc.value.code == "MISSING_IDENTIFIER"


def test_natural_key_uses_page_path():
    key = natural_key(IdentifierRecord(docset_filename="Python", page_path="lib/os.html", httrack_source="x"))
    assert key == ("Python", "page_path", "lib/os.html")


def test_natural_key_uses_httrack_source_for_mono():
    key = natural_key(IdentifierRecord(docset_filename="Mono", page_path="a.html", httrack_source="http://mono/a"))
    assert key == ("Mono", "httrack_source", "http://mono/a")


def test_natural_key_for_mono_without_httrack_source():
    key = natural_key(IdentifierRecord(docset_filename="Mono", page_path="a.html"))
    assert key == ("Mono", "page_path", "a.html")
