"""Documentation extracted from a component's implementation source."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_BLOCK_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
_NAME_AFTER_RE = re.compile(
    r"^\s*(?:export\s+)?(?:async\s+)?(?:function\s*\*?|def|class|const|let|var)\s+([A-Za-z_$][\w$]*)"
)
_PARAM_RE = re.compile(r"^(?:\{(?P<type>[^}]*)\}\s*)?(?P<name>[\w$.\[\]=]+)(?:\s*-?\s*(?P<desc>.*))?$")
_RETURNS_RE = re.compile(r"^(?:\{(?P<type>[^}]*)\}\s*)?(?P<desc>.*)$")


class DocArg(BaseModel):
    """A documented parameter."""

    name: str
    type: str | None = None
    description: str = ""


class DocReturns(BaseModel):
    """Documented return value."""

    type: str | None = None
    description: str = ""


class Doclet(BaseModel):
    """A single documented symbol."""

    name: str = ""
    description: str = ""
    args: list[DocArg] = Field(default_factory=list)
    returns: DocReturns | None = None
    access: str = "public"
    kind: str = "function"
    static: bool = False
    examples: list[str] = Field(default_factory=list)


def _clean_comment(body: str) -> list[str]:
    lines = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    return lines


def _split_tags(lines: list[str]) -> tuple[str, list[tuple[str, str]]]:
    """Split comment lines into free description and (tag, text) pairs."""
    description: list[str] = []
    tags: list[tuple[str, str]] = []
    for line in lines:
        if line.startswith("@"):
            tag, _, text = line[1:].partition(" ")
            tags.append((tag, text.strip()))
        elif tags:
            # Continuation of the previous tag (multi-line examples)
            tag, text = tags[-1]
            tags[-1] = (tag, f"{text}\n{line}" if text else line)
        else:
            description.append(line)
    return "\n".join(description).strip(), tags


def _parse_block(body: str, following: str) -> Doclet:
    description, tags = _split_tags(_clean_comment(body))
    doclet = Doclet(description=description)

    for tag, text in tags:
        if tag == "name":
            doclet.name = text
        elif tag in ("description", "desc"):
            doclet.description = text
        elif tag in ("param", "arg", "argument"):
            match = _PARAM_RE.match(text)
            if match is None:
                raise ValueError(f"malformed @{tag}: {text!r}")
            doclet.args.append(
                DocArg(
                    name=match.group("name"),
                    type=match.group("type"),
                    description=(match.group("desc") or "").strip(),
                )
            )
        elif tag in ("returns", "return"):
            match = _RETURNS_RE.match(text)
            doclet.returns = DocReturns(
                type=match.group("type"), description=match.group("desc").strip()
            )
        elif tag == "example":
            doclet.examples.append(text.strip())
        elif tag in ("private", "public", "protected"):
            doclet.access = tag
        elif tag == "static":
            doclet.static = True
        elif tag == "class":
            doclet.kind = "class"

    if not doclet.name:
        match = _NAME_AFTER_RE.match(following)
        if match:
            doclet.name = match.group(1)
            if following.lstrip().startswith(("class", "export class")):
                doclet.kind = "class"
    return doclet


def parse_docs(source: str | None) -> list[Doclet]:
    """Extract doclets from `/** ... */` comments in source.

    Comments that cannot be parsed are skipped.
    """
    if not source:
        return []

    doclets = []
    for match in _BLOCK_RE.finditer(source):
        following = source[match.end():].lstrip("\n").split("\n", 1)[0]
        try:
            doclet = _parse_block(match.group(1), following)
        except ValueError as e:
            logger.warning(f"Skipping malformed doc comment: {e}")
            continue
        if doclet.name or doclet.description:
            doclets.append(doclet)
    return doclets
