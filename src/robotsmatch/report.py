# SPDX-License-Identifier: BSD-3-Clause

"""
Presents the parse results of a robots.txt file as an HTML page.

Every line of the file is listed along with what the parser made of it.
Lines holding the rule that decided the verdict for one of the checked
URLs are highlighted.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from lxml import etree
from lxml.builder import E

from robotsmatch.parser import LineMetadata, split_robots_lines
from robotsmatch.reporter import ParsingReporter, TagName
from robotsmatch.rules import UrlCheckResult

_STYLE_SHEET = """
body {
    margin: 0;
    padding: 0;
    background-color: #FFFFFF;
    color: black;
    font-family: vera, arial, sans-serif;
}
h1, h2 {
    border-top: 1px solid #808080;
    border-bottom: 1px solid #808080;
}
h1 {
    margin: 0 0 12pt 0;
    padding: 3pt 12pt;
    background-color: #E0E0E0;
}
h2 {
    padding: 2pt 12pt;
    background-color: #F0F0F0;
}
table, ul {
    margin: 0 12pt;
}
td {
    padding: 1pt 6pt;
    vertical-align: top;
}
td.lineno {
    text-align: right;
    color: #808080;
}
tr.unknown td.source {
    color: #808080;
}
tr.allow, li.allow {
    background-color: #90FF90;
}
tr.disallow, li.disallow {
    background-color: #FF9090;
}
code {
    background: #F0F0F0;
    color: #000000;
}
"""

# Characters that cannot be represented in an HTML document.
_UNPRINTABLE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufffe\uffff]")


def _printable(text: str) -> str:
    return _UNPRINTABLE.sub("\ufffd", text)


def _flags(metadata: LineMetadata) -> str:
    flags = []
    if metadata.is_acceptable_typo:
        flags.append("typo")
    if metadata.is_missing_colon_separator:
        flags.append("missing colon")
    if metadata.is_line_too_long:
        flags.append("too long")
    if metadata.is_comment:
        flags.append("comment")
    elif metadata.has_comment:
        flags.append("trailing comment")
    return ", ".join(flags)


def _present_verdict(result: UrlCheckResult) -> etree._Element:
    rule = result.rule
    if rule is None:
        reason: list[str | etree._Element] = ["no rule matched"]
    else:
        kind = "allow" if rule.allow else "disallow"
        reason = [f"line {rule.lineno}: {kind} ", E.code(_printable(rule.pattern))]
    return E.li(
        E.code(_printable(result.url)),
        f" is {'allowed' if result.allowed else 'disallowed'} (",
        *reason,
        ")",
        {"class": "allow" if result.allowed else "disallow"},
    )


def render_report(
    body: str | bytes,
    reporter: ParsingReporter,
    results: Iterable[UrlCheckResult] = (),
    title: str = "robots.txt",
) -> str:
    """
    Renders an HTML page describing a parsed robots.txt file.

    @param body:
        Contents of the robots.txt file.
    @param reporter:
        Reporter that was fed the events of parsing C{body}.
    @param results:
        Verdicts for URLs checked against the file.
    @param title:
        Name of the file, for use in headings.
    @return:
        A complete HTML document.
    """

    results = list(results)
    deciding: dict[int, str] = {}
    for result in results:
        if result.rule is not None:
            rule = result.rule
            deciding[rule.lineno] = "allow" if rule.allow else "disallow"

    lines = [
        raw_line.decode("utf-8", "replace") for raw_line in split_robots_lines(body)
    ]
    rows = []
    for parsed in reporter.parse_results():
        lineno = parsed.lineno
        source = lines[lineno - 1] if lineno <= len(lines) else ""
        if lineno in deciding:
            css_class = deciding[lineno]
        elif parsed.tag is TagName.UNKNOWN:
            css_class = "unknown"
        else:
            css_class = "directive"
        rows.append(
            E.tr(
                E.td(str(lineno), {"class": "lineno"}),
                E.td(parsed.tag.name.lower().replace("_", "-")),
                E.td(_flags(parsed.metadata)),
                E.td(E.code(_printable(source)), {"class": "source"}),
                {"class": css_class},
            )
        )

    summary = (
        f"{reporter.last_line_seen} lines, "
        f"{reporter.valid_directives} valid directives, "
        f"{reporter.unused_directives} unused directives"
    )
    content = [
        E.h1(f"Parse report of {title}"),
        E.p(summary),
        E.h2("Lines"),
        E.table(*rows),
    ]
    if results:
        content += [
            E.h2("Checked URLs"),
            E.ul(*(_present_verdict(result) for result in results)),
        ]

    page = E.html(
        E.head(E.title(f"robots.txt report: {title}"), E.style(_STYLE_SHEET)),
        E.body(*content),
    )
    return etree.tostring(
        page,
        method="html",
        encoding="unicode",
        pretty_print=True,
        doctype="<!DOCTYPE html>",
    )
