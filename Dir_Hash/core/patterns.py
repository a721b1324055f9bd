import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

import pathspec
from pathspec.pattern import RegexPattern

from Dir_Hash.core.errors import DirHashIOError, InvalidPatternError
from Dir_Hash.core.logger import log
from Dir_Hash.core.models import HashOptions, root_ignore_file


# A pattern plus where it came from ("inline" or "<file>:<line>")
SourcedPattern = Tuple[str, str]


# ============================================================
# Pattern set
# ============================================================

@dataclass(frozen=True)
class PatternSet:
    """
    Compiled union of ignore patterns.

    `matches` takes a root-relative, `/`-separated path and has no side
    effects, so one instance can be shared by concurrent callers.
    """
    spec: pathspec.PathSpec
    patterns: Tuple[str, ...] = ()

    def matches(self, rel_path: str) -> bool:
        if not self.patterns:
            return False
        return self.spec.match_file(rel_path)

    def __len__(self) -> int:
        return len(self.patterns)


EMPTY_PATTERN_SET = PatternSet(spec=pathspec.PathSpec([]), patterns=())


# ============================================================
# Glob translation
# ============================================================

# Regex pieces for `**` used as a whole path component
_RECURSIVE_PREFIX = "(?:/?|.*/)"
_RECURSIVE_SUFFIX = "/.*"
_RECURSIVE_ZERO_OR_MORE = "(?:/|/.*/)"


def _parse_class(pattern: str, i: int) -> Tuple[str, int]:
    """
    Translate the `[...]` class starting just after the `[` at `i`.

    Returns the regex class and the index after the closing `]`.
    """
    n = len(pattern)
    negated = False
    if i < n and pattern[i] in "!^":
        negated = True
        i += 1

    ranges: List[List[str]] = []
    first = True
    in_range = False
    while True:
        if i >= n:
            raise ValueError("unclosed character class")
        c = pattern[i]
        i += 1
        if c == "]" and not first:
            break
        if c == "-" and not first:
            if in_range:
                ranges[-1][1] = c
                in_range = False
            else:
                in_range = True
        elif in_range:
            ranges[-1][1] = c
            in_range = False
        else:
            ranges.append([c, c])
        if ranges and ranges[-1][1] < ranges[-1][0]:
            raise ValueError(f"invalid range {ranges[-1][0]}-{ranges[-1][1]}")
        first = False

    if in_range:
        # trailing `-` is a literal member
        ranges.append(["-", "-"])

    body = "".join(
        re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}"
        for lo, hi in ranges
    )
    return f"[{'^' if negated else ''}{body}]", i


def _parse_double_star(
    pattern: str,
    start: int,
    tokens: List[Tuple[str, str]],
    in_alternate: bool,
) -> int:
    """
    Handle `**` whose first `*` is at `start`; returns the next index.

    `**` is recursive only as a whole component (after `/`, the start of
    the glob or an alternate, and before `/`, the end or `,`/`}` inside an
    alternate). Anywhere else it behaves like two `*`.
    """
    i = start + 2
    nxt = pattern[i] if i < len(pattern) else None
    prev = pattern[start - 1] if start > 0 else None
    plain = [("star", ".*"), ("star", ".*")]

    if not tokens:
        if nxt is not None and nxt != "/":
            tokens.extend(plain)
            return i
        tokens.append(("prefix", _RECURSIVE_PREFIX))
        return i + 1 if nxt == "/" else i

    if prev != "/" and not (in_alternate and prev in (",", "{")):
        tokens.extend(plain)
        return i

    if nxt is None or (in_alternate and nxt in ",}"):
        is_suffix = True
    elif nxt == "/":
        is_suffix = False
        i += 1
    else:
        tokens.extend(plain)
        return i

    # Replace the separator literal the recursive token absorbs
    last = tokens.pop()
    if last[0] in ("prefix", "suffix"):
        tokens.append(last)
    elif is_suffix:
        tokens.append(("suffix", _RECURSIVE_SUFFIX))
    else:
        tokens.append(("zero_or_more", _RECURSIVE_ZERO_OR_MORE))
    return i


def glob_to_regex(pattern: str) -> str:
    """
    Translate a glob into a regex matched against the whole relative path.

    - `*` matches any run of characters, `/` included
    - `?` matches any single character
    - `**` as a full component matches zero or more components
    - `[...]` / `[!...]` are character classes
    - `{a,b}` matches either alternative (no nesting)
    Raises ValueError for malformed classes or alternate groups.
    """
    stack: List[List[Tuple[str, str]]] = [[]]
    alternates: Optional[List[List[Tuple[str, str]]]] = None

    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        tokens = stack[-1]

        if c == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                i = _parse_double_star(pattern, i, tokens, alternates is not None)
                continue
            tokens.append(("star", ".*"))
        elif c == "?":
            tokens.append(("any", "."))
        elif c == "[":
            regex, i = _parse_class(pattern, i + 1)
            tokens.append(("class", regex))
            continue
        elif c == "{":
            if alternates is not None:
                raise ValueError("nested alternate groups are not allowed")
            alternates = []
            stack.append([])
        elif c == "," and alternates is not None:
            alternates.append(stack.pop())
            stack.append([])
        elif c == "}":
            if alternates is None:
                raise ValueError("unopened alternate group")
            alternates.append(stack.pop())
            # empty alternatives never match on their own
            parts = ["".join(t for _, t in branch) for branch in alternates]
            parts = [p for p in parts if p]
            stack[-1].append(("alternates", f"(?:{'|'.join(parts)})" if parts else ""))
            alternates = None
        else:
            tokens.append(("literal", re.escape(c)))
        i += 1

    if alternates is not None:
        raise ValueError("unclosed alternate group")

    tokens = stack[0]
    if len(tokens) == 1 and tokens[0][0] == "prefix":
        body = ".*"
    else:
        body = "".join(t for _, t in tokens)
    return rf"(?s)^{body}\Z"


def prepare_pattern(raw: str) -> Optional[str]:
    """
    Turn one raw pattern into the glob handed to the compiler.

    Backslashes become `/`. Returns None for patterns that are dropped:
    empty ones and negations (leading `!`), which are not supported.
    """
    pattern = raw.strip().replace("\\", "/")
    if not pattern:
        return None
    if pattern.startswith("!"):
        return None
    return pattern


# ============================================================
# Public API
# ============================================================

def compile_patterns(
    patterns: Iterable[str],
    source: str = "inline",
) -> PatternSet:
    """
    Compile glob patterns into a single PatternSet.

    Accepts plain strings (all attributed to `source`) or
    (pattern, source) pairs. Fails on the first bad pattern with
    InvalidPatternError; nothing is compiled in that case.
    """
    compiled: List[RegexPattern] = []
    kept: List[str] = []

    for item in patterns:
        if isinstance(item, tuple):
            raw, origin = item
        else:
            raw, origin = item, source

        prepared = prepare_pattern(raw)
        if prepared is None:
            if raw.strip().startswith("!"):
                log("DEBUG", "patterns", f"Dropping negation pattern {raw.strip()!r} ({origin})")
            continue

        try:
            compiled.append(RegexPattern(glob_to_regex(prepared)))
        except (ValueError, re.error) as exc:
            raise InvalidPatternError(raw.strip(), origin, str(exc)) from exc

        kept.append(prepared)

    if not kept:
        return EMPTY_PATTERN_SET

    return PatternSet(spec=pathspec.PathSpec(compiled), patterns=tuple(kept))


def load_pattern_file(path: Path) -> List[SourcedPattern]:
    """
    Read patterns from an ignore file.

    One pattern per line; blank lines and `#` comments are skipped.
    Negation lines are returned too and dropped at compile time.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise DirHashIOError(path, "cannot read ignore file") from exc

    patterns: List[SourcedPattern] = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append((line, f"{path}:{lineno}"))
    return patterns


def build_pattern_set(
    root: Path,
    options: HashOptions,
    on_warning: Optional[Callable[[str], None]] = None,
) -> PatternSet:
    """
    Collect every pattern source named by `options` and compile them.

    Sources, in order:
    - the root ignore file (if enabled and present)
    - each file in options.ignore_files
    - options.ignore_patterns
    Order only affects diagnostics; matching is the union.
    """
    collected: List[SourcedPattern] = []

    if options.load_root_ignore_file:
        dotfile = root_ignore_file(root)
        if dotfile is not None:
            collected.extend(load_pattern_file(dotfile))

    for file in options.ignore_files:
        if not file.is_file():
            if on_warning is not None:
                on_warning(f"skipping ignore file (not found): {file}")
            continue
        collected.extend(load_pattern_file(file))

    collected.extend((p, "inline") for p in options.ignore_patterns)

    pattern_set = compile_patterns(collected)
    log("DEBUG", "patterns", f"Compiled {len(pattern_set)} ignore pattern(s) for {root}")
    return pattern_set
