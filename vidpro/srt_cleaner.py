"""
Georgian filler-word removal for SRT subtitles

Line based: cue numbers and timing lines pass through untouched, text lines
lose whole-word fillers. Lines without fillers are kept byte-for-byte.
"""

import re
from pathlib import Path

FILLER_WORDS = ['ააა', 'ამმ', 'მჰმ', 'მმ', 'მმმ', 'ეჰმ', 'ესე იგი']

# Longest first so 'მმმ' is not consumed as 'მმ' + 'მ'
_FILLER_ALTERNATION = '|'.join(re.escape(w) for w in sorted(FILLER_WORDS, key=len, reverse=True))
FILLER_RE = re.compile(rf'(?<!\w)(?:{_FILLER_ALTERNATION})(?!\w)[,.…]*')
INDEX_RE = re.compile(r'^\ufeff?\d+$')
TIMING_MARKER = '-->'


def is_text_line(line: str) -> bool:
    stripped = line.strip()
    if not stripped:
        return False
    return not (INDEX_RE.match(stripped) or TIMING_MARKER in stripped)


def clean_line(line: str) -> str:
    """Strip fillers from one text line; returns '' if nothing is left"""
    if not FILLER_RE.search(line):
        return line
    cleaned = line
    # removing 'ააა' from 'ესე ააა იგი' leaves a new filler behind
    while FILLER_RE.search(cleaned):
        cleaned = FILLER_RE.sub('', cleaned)
        cleaned = re.sub(r'[ \t]{2,}', ' ', cleaned).strip(' \t')
    # comma orphaned by a leading filler, e.g. 'ააა , ვფიქრობ'
    return re.sub(r'^,+\s*', '', cleaned)


def clean_srt_text(text: str) -> str:
    out = []
    for raw in text.splitlines(keepends=True):
        body = raw.rstrip('\r\n')
        ending = raw[len(body):]
        if not is_text_line(body):
            out.append(raw)
            continue
        cleaned = clean_line(body)
        if cleaned is body:
            out.append(raw)
        elif cleaned:
            out.append(cleaned + ending)
    return ''.join(out)


def count_filler_lines(text: str) -> int:
    return sum(1 for line in text.splitlines() if is_text_line(line) and FILLER_RE.search(line))


def clean_srt_file(inp: Path, out: Path) -> int:
    """Clean inp into out; returns the number of text lines that had fillers"""
    # newline='' keeps the original line endings on both sides
    with open(inp, 'r', encoding='utf-8', newline='') as f:
        text = f.read()
    with open(out, 'w', encoding='utf-8', newline='') as f:
        f.write(clean_srt_text(text))
    return count_filler_lines(text)
