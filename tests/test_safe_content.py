# tests/test_safe_content.py
"""Tests for code-protected text processing."""

from mintport.migration.safe_content import (
    CodeFence,
    map_prose,
    mask_code,
    safe_process_content,
    split_fences,
)


def test_processor_never_sees_code():
    text = "Use `<host>` here\n```\n<host>\n```\nand <host>\n"
    result = safe_process_content(text, lambda t: t.replace("<host>", "HOST"))
    assert result == "Use `<host>` here\n```\n<host>\n```\nand HOST\n"


def test_unclosed_fence_runs_to_end():
    segments = split_fences("a\n```js\ncode\n")
    assert segments[0] == "a\n"
    fence = segments[1]
    assert isinstance(fence, CodeFence)
    assert not fence.closed
    assert fence.lang == "js"
    assert fence.code == "code"


def test_backticks_in_info_string_are_not_a_fence():
    segments = split_fences("```foo`bar```\n")
    assert all(isinstance(s, str) for s in segments)


def test_fence_properties():
    fence = split_fences('  ```go title="a"\nfunc main() {}\n  ```\n')[0]
    assert fence.indent == "  "
    assert fence.marker == "```"
    assert fence.lang == "go"
    assert fence.meta == 'title="a"'
    assert fence.render() == '  ```go title="a"\nfunc main() {}\n  ```\n'


def test_tilde_fences_are_protected():
    text = "~~~\n{var}\n~~~\n{var}\n"
    result = safe_process_content(text, lambda t: t.replace("{var}", "X"))
    assert result == "~~~\n{var}\n~~~\nX\n"


def test_mask_code_keeps_line_structure():
    text = "a `b`\n```\nx\n```\nc\n"
    masked = mask_code(text)
    assert len(masked) == len(text)
    assert masked.count("\n") == text.count("\n")
    assert "x" not in masked
    assert "`" not in masked
    assert masked.startswith("a ")
    assert masked.endswith("c\n")


def test_map_prose_skips_fences():
    assert map_prose("x\n```\nx\n```\nx", str.upper) == "X\n```\nx\n```\nX"
