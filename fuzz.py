#!/usr/bin/env python3
"""
Random fuzzer for outputsafe.
Generates hostile markup, URIs and CSS values and checks the output
invariants every sanitizer must keep.
"""

import argparse
import random
import re
import string
import sys
import time
import traceback

from outputsafe import (
    EMBEDDING_HAZARDS,
    SENTINEL,
    TagWhitelist,
    escape_css_string,
    escape_html,
    escape_html_attribute_nospace,
    escape_js_regex,
    escape_js_string,
    escape_uri,
    filter_css_value,
    filter_html_attributes,
    filter_html_element_name,
    filter_normalize_uri,
    normalize_html,
    normalize_uri,
    strip_html_tags,
)
from outputsafe.constants import SAFE_URI_SCHEMES, URI_SENTINEL
from outputsafe.uri import uri_scheme

# Fuzzing strategies
TAGS = [
    "a", "b", "br", "div", "em", "hr", "i", "img", "li", "p", "s", "span",
    "table", "td", "tr", "u", "ul", "script", "style", "textarea", "title",
    "iframe", "svg", "math", "noscript", "xmp", "plaintext",
]

WHITELIST = TagWhitelist("b", "br", "i", "li", "table", "td", "tr", "ul")

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "onclick", "onload", "data-x",
    "dir", "title", "srcdoc", "formaction", "xlink:href",
]

SPECIAL_CHARS = [
    "\x00", "\x01", "\x0b", "\x0c", "\x0e", "\x7f", "\x85", "\xa0",
    chr(0x2028), chr(0x2029), chr(0x200B), chr(0xFEFF), chr(0xFF1A), chr(0xFFFD),
    "<", ">", "&", '"', "'", "`", "\\", "/", "=", "-",
]

ENTITIES = [
    "&amp;", "&lt;", "&", "&amp", "&#", "&#x", "&#58;", "&#x3A;", "&#0000058",
    "&colon;", "&Tab;", "&NewLine;", "&#x09;", "&#10;", "&#0;", "&#xD800;",
    "&#x110000;", "&#99999999999999999999;", "&notin;", "&notit;",
]

SCHEMES = ["javascript", "JaVaScRiPt", "vbscript", "data", "file", "http", "https", "mailto", "ftp", ""]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_noise():
    """Generate a short run of awkward characters."""
    return "".join(random.choices(SPECIAL_CHARS, k=random.randint(0, 4)))


def obfuscate(text):
    """Hide `text` the way attackers hide a scheme from naive checks."""
    strategies = [
        lambda c: c,
        lambda c: f"&#{ord(c)};",
        lambda c: f"&#x{ord(c):x}",
        lambda c: f"&#{ord(c):07d}",
        lambda c: f"%{ord(c):02X}",
        lambda c: c + random.choice(["\t", "\n", "\r", chr(0x200B), "&#x0A;"]),
        lambda c: c.upper(),
    ]
    return "".join(random.choice(strategies)(c) for c in text)


def fuzz_tag():
    """Generate a tag or something that looks like one."""
    name = random.choice(TAGS)
    strategies = [
        lambda: f"<{name}>",
        lambda: f"</{name}>",
        lambda: f"<{name.upper()}>",
        lambda: f"<{name}/>",
        lambda: f"<{name} {random.choice(ATTRIBUTES)}='{random_string()}'>",
        lambda: f"<{name}/{random.choice(ATTRIBUTES)}=alert(1)>",
        lambda: f"<{name}",
        lambda: f"<<{name}>{name}>",
        lambda: "<!--" + random_string() + "-->",
        lambda: "<![CDATA[" + random_string() + "]]>",
        lambda: "<!DOCTYPE html>",
        lambda: "<",
        lambda: "</",
        lambda: f"<{name} title='>'>",
    ]
    return random.choice(strategies)()


def generate_markup():
    parts = []
    for _ in range(random.randint(1, 30)):
        choice = random.random()
        if choice < 0.45:
            parts.append(fuzz_tag())
        elif choice < 0.7:
            parts.append(random_string(0, 10))
        elif choice < 0.85:
            parts.append(random.choice(ENTITIES))
        else:
            parts.append(random_noise())
    return "".join(parts)


def generate_uri():
    scheme = random.choice(SCHEMES)
    body = random.choice(["alert(1)", "//example.com/", "x?a=b&c=d", "#frag", random_string()])
    if not scheme:
        return random_noise() + random.choice(["/", "?", "#", "//", ""]) + body
    return random_noise() + obfuscate(scheme + ":") + body


def generate_css():
    strategies = [
        lambda: f"{random.randint(-50, 50)}{random.choice(['px', 'em', '%', ''])}",
        lambda: random.choice(["red", "#fff", "#aabbcc", ".class", "#id", "inherit"]),
        lambda: random.choice(["expression(alert(1))", "-moz-binding:url(x)", "behavior", "\\65xpression"]),
        lambda: random_string() + random_noise(),
        lambda: "</style>" + random_string(),
    ]
    return " ".join(random.choice(strategies)() for _ in range(random.randint(1, 3)))


# ---------------------
# Invariant checks
# ---------------------

ESCAPERS = [
    escape_html,
    escape_html_attribute_nospace,
    normalize_html,
    escape_js_string,
    escape_js_regex,
    escape_css_string,
    escape_uri,
    normalize_uri,
]

_OUTPUT_TAG = re.compile(r"<(/?)([^<>]*)>")


def check_no_hazards(value):
    failures = []
    for escaper in ESCAPERS:
        result = escaper(value)
        for hazard in EMBEDDING_HAZARDS:
            if hazard in result:
                failures.append(f"{escaper.__name__} emitted {hazard!r}")
    return failures


def check_balanced(markup):
    failures = []
    result = strip_html_tags(markup, WHITELIST)
    stack = []
    for match in _OUTPUT_TAG.finditer(result):
        is_end, name = match.group(1), match.group(2)
        if name not in WHITELIST:
            failures.append(f"stripper emitted non-whitelisted tag {match.group(0)!r}")
            continue
        if is_end:
            if not stack or stack.pop() != name:
                failures.append(f"stripper emitted unbalanced {match.group(0)!r}")
        elif not WHITELIST.is_void(name):
            stack.append(name)
    if stack:
        failures.append(f"stripper left open tags {stack!r}")
    for hazard in EMBEDDING_HAZARDS:
        if hazard in result:
            failures.append(f"stripper emitted {hazard!r}")
    return failures


def check_uri(uri):
    result = filter_normalize_uri(uri)
    if result == URI_SENTINEL:
        return []
    scheme = uri_scheme(uri)
    if scheme is not None and scheme not in SAFE_URI_SCHEMES:
        return [f"filter_normalize_uri accepted scheme {scheme!r}"]
    return []


def check_filters(value):
    failures = []
    for filter_fn in (filter_css_value, filter_html_attributes, filter_html_element_name):
        result = filter_fn(value)
        if result not in (value, SENTINEL):
            failures.append(f"{filter_fn.__name__} rewrote its input to {result!r}")
    if filter_html_element_name(value) == value and value.lower().startswith("script"):
        failures.append("filter_html_element_name accepted a script element")
    return failures


def run_case():
    markup = generate_markup()
    uri = generate_uri()
    css = generate_css()
    failures = []
    failures.extend(check_no_hazards(markup))
    failures.extend(check_balanced(markup))
    failures.extend(check_uri(uri))
    failures.extend(check_filters(css))
    failures.extend(check_filters(markup))
    return (markup, uri, css), failures


def run_fuzzer(num_tests=1000, seed=None, verbose=False):
    if seed is not None:
        random.seed(seed)
    else:
        seed = random.randint(0, 2**32 - 1)
        random.seed(seed)
        print(f"Using seed: {seed}")

    crashes = []
    violations = []

    print(f"Fuzzing outputsafe with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            inputs, failures = run_case()
        except Exception as e:
            crashes.append({
                "test_num": i,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if failures:
            violations.append({"test_num": i, "inputs": inputs, "failures": failures})
            if verbose:
                print(f"  VIOLATION: Test {i}: {failures[0]}")

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: outputsafe")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    for crash in crashes[:10]:
        print(f"\nCrash in test #{crash['test_num']}: {crash['error']}")
        print(crash["traceback"])

    for violation in violations[:10]:
        print(f"\nTest #{violation['test_num']}:")
        for value in violation["inputs"]:
            print(f"  Input: {value[:200]!r}")
        for failure in violation["failures"]:
            print(f"  {failure}")

    return not crashes and not violations


def main():
    parser = argparse.ArgumentParser(description="Fuzz outputsafe sanitizers with hostile input")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed inputs (no checking)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(repr(generate_markup()))
            print(repr(generate_uri()))
            print(repr(generate_css()))
            print()
        return

    success = run_fuzzer(args.num_tests, seed=args.seed, verbose=args.verbose)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
