from __future__ import annotations

import unittest
from urllib.parse import unquote

from outputsafe import (
    EMBEDDING_HAZARDS,
    ContentKind,
    escape_uri,
    filter_normalize_uri,
    normalize_uri,
    ordain_as_safe,
)
from outputsafe.entities import decode_character_references, decode_numeric_reference
from outputsafe.uri import canonicalize, is_safe_uri, percent_encode, uri_scheme

ASCII_CHARS = "".join(chr(code) for code in range(0x80))

FULL_WIDTH = "\N{FULLWIDTH NUMBER SIGN}\N{FULLWIDTH COLON}"
ESCAPED_FULL_WIDTH = "%EF%BC%83%EF%BC%9A"


class TestPercentEncode(unittest.TestCase):
    def test_ascii(self) -> None:
        assert percent_encode("/") == "%2F"
        assert percent_encode("\x00") == "%00"

    def test_multibyte(self) -> None:
        assert percent_encode("\xe9") == "%C3%A9"
        assert percent_encode("\N{LINE SEPARATOR}") == "%E2%80%A8"

    def test_lone_surrogate(self) -> None:
        assert percent_encode(chr(0xD800)) == "%EF%BF%BD"
        assert unquote(percent_encode(chr(0xDFFF))) == "\N{REPLACEMENT CHARACTER}"


class TestEscapeUri(unittest.TestCase):
    def test_minimal_escapes(self) -> None:
        assert escape_uri("\x00\n\x0c\r\"#&'/:=?@") == "%00%0A%0C%0D%22%23%26%27%2F%3A%3D%3F%40"

    def test_embedding_hazards(self) -> None:
        for hazard in EMBEDDING_HAZARDS:
            assert hazard not in escape_uri(hazard), hazard

    def test_ascii(self) -> None:
        expected = (
            "%00%01%02%03%04%05%06%07%08%09%0A%0B%0C%0D%0E%0F"
            "%10%11%12%13%14%15%16%17%18%19%1A%1B%1C%1D%1E%1F"
            "%20%21%22%23%24%25%26%27%28%29*%2B%2C-.%2F"
            "0123456789%3A%3B%3C%3D%3E%3F"
            "%40ABCDEFGHIJKLMNO"
            "PQRSTUVWXYZ%5B%5C%5D%5E_"
            "%60abcdefghijklmno"
            "pqrstuvwxyz%7B%7C%7D%7E%7F"
        )
        assert escape_uri(ASCII_CHARS) == expected

    def test_full_width(self) -> None:
        assert escape_uri(FULL_WIDTH) == ESCAPED_FULL_WIDTH

    def test_other_code_points(self) -> None:
        assert escape_uri("\x85\N{LINE SEPARATOR}") == "%C2%85%E2%80%A8"

    def test_trusted_uri_is_only_normalized(self) -> None:
        value = ordain_as_safe("foo(%27&')", ContentKind.URI)
        assert escape_uri(value) == "foo%28%27&%27%29"

    def test_other_kind_is_fully_escaped(self) -> None:
        value = ordain_as_safe("%28%29", ContentKind.HTML)
        assert escape_uri(value) == "%2528%2529"

    def test_numbers(self) -> None:
        assert escape_uri(42) == "42"
        assert escape_uri(1.5) == "1.5"


class TestNormalizeUri(unittest.TestCase):
    ESCAPED_ASCII = (
        "%00%01%02%03%04%05%06%07%08%09%0A%0B%0C%0D%0E%0F"
        "%10%11%12%13%14%15%16%17%18%19%1A%1B%1C%1D%1E%1F"
        "%20!%22#$%&%27%28%29*+,-./"
        "0123456789:;%3C=%3E?"
        "@ABCDEFGHIJKLMNO"
        "PQRSTUVWXYZ[%5C]^_"
        "`abcdefghijklmno"
        "pqrstuvwxyz%7B|%7D~%7F"
    )

    def test_embedding_hazards(self) -> None:
        for hazard in EMBEDDING_HAZARDS:
            assert hazard not in normalize_uri(hazard), hazard
            assert hazard not in filter_normalize_uri(hazard), hazard

    def test_ascii(self) -> None:
        assert normalize_uri(ASCII_CHARS) == self.ESCAPED_ASCII

    def test_fragment_with_ascii(self) -> None:
        assert filter_normalize_uri("#" + ASCII_CHARS) == "#" + self.ESCAPED_ASCII

    def test_full_width(self) -> None:
        assert normalize_uri(FULL_WIDTH) == ESCAPED_FULL_WIDTH
        assert filter_normalize_uri(FULL_WIDTH) == ESCAPED_FULL_WIDTH

    def test_existing_escapes_are_kept(self) -> None:
        assert normalize_uri("/a%20b?c=%3C") == "/a%20b?c=%3C"


class TestFilterNormalizeUri(unittest.TestCase):
    def test_rejects_unsafe_schemes(self) -> None:
        for uri in (
            "javascript:",
            "javascript:alert(1337)",
            "vbscript:alert(1337)",
            "livescript:alert(1337)",
            "data:,alert(1337)",
            "data:text/javascript,alert%281337%29",
            "file:///etc/passwd",
            "JaVaScRiPt:alert(1337)",
        ):
            assert filter_normalize_uri(uri) == "#zSoyz", uri

    def test_rejects_unknown_schemes(self) -> None:
        assert filter_normalize_uri("ftp://example.com/") == "#zSoyz"
        assert filter_normalize_uri("mocha:alert(1)") == "#zSoyz"

    def test_full_width_colon_is_not_a_scheme(self) -> None:
        result = filter_normalize_uri("javascript\N{FULLWIDTH COLON}alert(1337);")
        assert "javascript\N{FULLWIDTH COLON}" not in result

    def test_rejects_entity_obfuscation(self) -> None:
        decimal = (
            "&#106;&#97;&#118;&#97;&#115;&#99;&#114;&#105;&#112;&#116;"
            "&#58;&#97;&#108;&#101;&#114;&#116;&#40;&#39;&#88;&#83;&#83;&#39;&#41;"
        )
        padded = (
            "&#0000106&#0000097&#0000118&#0000097&#0000115&#0000099&#0000114&#0000105"
            "&#0000112&#0000116&#0000058&#0000097&#0000108&#0000101&#0000114&#0000116"
            "&#0000040&#0000039&#0000088&#0000083&#0000083&#0000039&#0000041"
        )
        hexadecimal = (
            "&#x6A&#x61&#x76&#x61&#x73&#x63&#x72&#x69&#x70&#x74"
            "&#x3A&#x61&#x6C&#x65&#x72&#x74&#x28&#x27&#x58&#x53&#x53&#x27&#x29"
        )
        for uri in (decimal, padded, hexadecimal):
            assert filter_normalize_uri(uri) == "#zSoyz", uri

    def test_rejects_named_entity_colon(self) -> None:
        assert filter_normalize_uri("javascript&colon;alert(1)") == "#zSoyz"

    def test_rejects_percent_encoded_scheme(self) -> None:
        assert filter_normalize_uri("javascript%3Aalert(1)") == "#zSoyz"

    def test_rejects_embedded_whitespace(self) -> None:
        for uri in (
            "jav\tascript:alert('XSS');",
            "jav&#x09;ascript:alert('XSS');",
            "jav&#x0A;ascript:alert('XSS');",
            "jav&#x0D;ascript:alert('XSS');",
            "\nj\n\na\nv\na\ns\nc\nr\ni\np\nt\n:\na\nl\ne\nr\nt\n(\n1\n3\n3\n7\n)",
            "\x0e  javascript:alert('XSS');",
        ):
            assert filter_normalize_uri(uri) == "#zSoyz", uri

    def test_accepts_safe_uris(self) -> None:
        for uri in (
            "http://google.com/",
            "https://google.com/",
            "HTTP://google.com/",
            "mailto:someone@example.com",
            "?a=b&c=d",
            "?a=b:c&d=e",
            "//foo.com:80/",
            "//foo.com/",
            "/foo:bar/",
            "#a:b",
            "#",
            "/",
            "",
        ):
            assert filter_normalize_uri(uri) == uri, uri

    def test_accepted_uri_is_normalized(self) -> None:
        assert filter_normalize_uri("http://a.com/x y'") == "http://a.com/x%20y%27"

    def test_trusted_uri_skips_scheme_check(self) -> None:
        value = ordain_as_safe("javascript:handleClick()", ContentKind.URI)
        assert filter_normalize_uri(value) == "javascript:handleClick%28%29"

    def test_other_kind_is_checked(self) -> None:
        value = ordain_as_safe("javascript:handleClick()", ContentKind.HTML)
        assert filter_normalize_uri(value) == "#zSoyz"


class TestSchemeDetection(unittest.TestCase):
    def test_uri_scheme(self) -> None:
        assert uri_scheme("HTTPS://example.com") == "https"
        assert uri_scheme("/relative/path") is None
        assert uri_scheme("j&#97;vascript:x") == "javascript"

    def test_canonicalize(self) -> None:
        assert canonicalize(" Java\tScript&#58;%41") == "javascript:a"

    def test_disguised_scheme_without_match(self) -> None:
        # "&" before any path delimiter could be an undecoded reference.
        assert not is_safe_uri("foo&bar:x")
        assert not is_safe_uri("1:x")
        assert is_safe_uri("foo/bar:x")


class TestCharacterReferences(unittest.TestCase):
    def test_numeric(self) -> None:
        assert decode_character_references("&#106;&#x6a;&#X6A;") == "jjj"
        assert decode_character_references("&#0000106") == "j"

    def test_invalid_numeric(self) -> None:
        assert decode_numeric_reference("0") == "\ufffd"
        assert decode_numeric_reference("d800", is_hex=True) == "\ufffd"
        assert decode_numeric_reference("110000", is_hex=True) == "\ufffd"
        assert decode_numeric_reference("9" * 40) == "\ufffd"

    def test_windows_1252_range(self) -> None:
        assert decode_numeric_reference("80", is_hex=True) == "\N{EURO SIGN}"

    def test_named(self) -> None:
        assert decode_character_references("&lt;&colon;&amp;") == "<:&"

    def test_legacy_without_semicolon(self) -> None:
        assert decode_character_references("&lt") == "<"
        assert decode_character_references("&notit;", in_attribute=False) == "\xacit;"

    def test_legacy_in_attribute_before_alnum(self) -> None:
        assert decode_character_references("?a=1&copy=2") == "?a=1&copy=2"
        assert decode_character_references("&copyx", in_attribute=False) == "\xa9x"

    def test_unknown_kept(self) -> None:
        assert decode_character_references("&bogus; & &#;") == "&bogus; & &#;"


if __name__ == "__main__":
    unittest.main()
