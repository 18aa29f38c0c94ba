"""
Best-effort, regex based code reformatting.

Docusaurus exports sometimes flatten code onto a handful of lines. These
formatters re-open braces and imports so such blocks become readable again.
They are applied only on request because they also touch well-formed code.
"""

import re
import json


def format_go_code(code: str) -> str:
    result = code
    result = re.sub(r"import \(", "import (\n    ", result)
    result = re.sub(r'"\s+"', '"\n    "', result)
    result = re.sub(r"\)\s*([a-zA-Z])", r")\n\n\1", result)

    # Braces
    result = re.sub(r"\{\s*([a-zA-Z])", r"{\n    \1", result)
    result = re.sub(r"([^}\n])\s*\}", r"\1\n}", result)
    result = re.sub(r"\)\s*\{", ") {", result)
    result = re.sub(r"\}\s*([a-zA-Z])", r"}\n\n\1", result)

    # Struct literals
    result = re.sub(r"\{\s*([A-Z][a-zA-Z]*:)", r"{\n    \1", result)
    result = re.sub(r",\s*([A-Z][a-zA-Z]*:)", r",\n    \1", result)

    # Statements inside function bodies
    result = re.sub(r"^(\s*)([a-z][a-zA-Z]*\s*:=)", r"    \2", result, flags=re.MULTILINE)
    result = re.sub(r"^(\s*)(if|for|switch|case)", r"    \2", result, flags=re.MULTILINE)

    return re.sub(r"\n{3,}", "\n\n", result).strip()


def format_javascript_code(code: str) -> str:
    def _split_imports(match):
        imports = ",\n  ".join(part.strip() for part in match.group(1).split(","))
        return f"import {{\n  {imports}\n}} from"

    result = re.sub(r"import\s*\{([^}]+)\}\s*from", _split_imports, code)
    result = re.sub(r"\{\s*([a-zA-Z])", r"{\n  \1", result)
    result = re.sub(r"([^}\n])\s*\}", r"\1\n}", result)
    result = re.sub(r"\)\s*=>\s*\{", ") => {", result)
    result = re.sub(r"function\s+([a-zA-Z_$][a-zA-Z0-9_$]*)\s*\(", r"function \1(", result)
    result = re.sub(r"\)\s*\{", ") {", result)
    return re.sub(r"\n{3,}", "\n\n", result).strip()


def format_rust_code(code: str) -> str:
    def _split_use(match):
        statement = match.group(0)
        if "{" not in statement:
            return statement

        def _items(inner):
            items = ",\n    ".join(item.strip() for item in inner.group(1).split(","))
            return f"{{\n    {items}\n}}"

        return re.sub(r"\{\s*([^}]+)\s*\}", _items, statement)

    result = re.sub(r"use\s+([^;]+);", _split_use, code)
    result = re.sub(r"fn\s+([a-zA-Z_][a-zA-Z0-9_]*)\s*\(", r"fn \1(", result)
    result = re.sub(r"\)\s*->\s*([^{]+?)\s*\{", r") -> \1 {", result)
    result = re.sub(r"\{\s*([a-zA-Z])", r"{\n    \1", result)
    result = re.sub(r"([^}\n])\s*\}", r"\1\n}", result)
    return re.sub(r"\n{3,}", "\n\n", result).strip()


def format_json_code(code: str) -> str:
    try:
        return json.dumps(json.loads(code), indent=2, ensure_ascii=False)
    except ValueError:
        result = re.sub(r'\{\s*"', '{\n  "', code)
        result = re.sub(r'",\s*"', '",\n  "', result)
        result = re.sub(r"\}\s*,", "\n},", result)
        return re.sub(r"\n{3,}", "\n\n", result).strip()


def format_generic_code(code: str) -> str:
    result = re.sub(r"\{\s*([a-zA-Z])", r"{\n  \1", code)
    result = re.sub(r"([^}\n])\s*\}", r"\1\n}", result)
    result = re.sub(r"\)\s*\{", ") {", result)
    return re.sub(r"\n{3,}", "\n\n", result).strip()


_FORMATTERS = {
    "go": format_go_code,
    "golang": format_go_code,
    "javascript": format_javascript_code,
    "js": format_javascript_code,
    "typescript": format_javascript_code,
    "ts": format_javascript_code,
    "json": format_json_code,
    "jsonc": format_json_code,
    "rust": format_rust_code,
    "rs": format_rust_code,
    "solidity": format_generic_code,
    "sol": format_generic_code,
    "java": format_generic_code,
    "c": format_generic_code,
    "cpp": format_generic_code,
}


def format_code_by_language(lang: str, code: str) -> str:
    """Format code for lang; languages without a formatter are returned as is."""
    formatter = _FORMATTERS.get((lang or "").lower())
    if formatter is None:
        return code
    return formatter(code)
