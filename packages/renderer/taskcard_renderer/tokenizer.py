"""Syntax tokenizer adapter: language registry over Pygments lexers.

Pygments yields a flat stream of ``(ttype, value)`` pairs. Runs of values
that share a highlight category are grouped into ``Node``/``NodeList``
tokens so that painting can pick one color per top-level token, while
uncategorized text stays a bare ``Leaf``.
"""

from __future__ import annotations

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String
from pygments.util import ClassNotFound

from .errors import UnsupportedLanguageError
from .models import Leaf, Node, NodeList, Token

DEFAULT_LANGUAGES: dict[str, str] = {
    "bash": "bash",
    "c": "c",
    "clike": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "cs": "csharp",
    "csharp": "csharp",
    "css": "css",
    "go": "go",
    "html": "html",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "json": "json",
    "kotlin": "kotlin",
    "markup": "html",
    "php": "php",
    "py": "python",
    "python": "python",
    "rb": "ruby",
    "ruby": "ruby",
    "rust": "rust",
    "sh": "bash",
    "shell": "bash",
    "sql": "sql",
    "swift": "swift",
    "ts": "typescript",
    "typescript": "typescript",
    "xml": "xml",
    "yaml": "yaml",
}

# Most specific types first; ``ttype in parent`` matches subtypes too.
_CATEGORIES = (
    (Keyword.Constant, "boolean"),
    (Name.Builtin, "builtin"),
    (Name.Class, "class-name"),
    (Name.Function, "function"),
    (Name.Variable, "variable"),
    (Name.Attribute, "property"),
    (Name.Tag, "tag"),
    (String.Regex, "regex"),
    (Comment, "comment"),
    (String, "string"),
    (Number, "number"),
    (Keyword, "keyword"),
    (Operator.Word, "keyword"),
    (Operator, "operator"),
    (Punctuation, "punctuation"),
)


def category_for(ttype) -> str | None:
    for parent, name in _CATEGORIES:
        if ttype in parent:
            return name
    return None


class LanguageRegistry:
    """Maps language identifiers onto Pygments lexers."""

    def __init__(self, aliases: dict[str, str] | None = None) -> None:
        self._aliases = dict(DEFAULT_LANGUAGES)
        if aliases:
            for language, lexer_name in aliases.items():
                self.register(language, lexer_name)

    def register(self, language: str, lexer_name: str) -> None:
        self._aliases[language.strip().lower()] = lexer_name

    def languages(self) -> list[str]:
        return sorted(self._aliases)

    def supports(self, language: str | None) -> bool:
        return bool(language) and language.strip().lower() in self._aliases

    def resolve(self, language: str | None) -> Lexer:
        if not self.supports(language):
            raise UnsupportedLanguageError(language)
        lexer_name = self._aliases[language.strip().lower()]
        try:
            # Keep leading/trailing newlines untouched so tokens flatten back to the line.
            return get_lexer_by_name(lexer_name, stripnl=False, ensurenl=False)
        except ClassNotFound:
            raise UnsupportedLanguageError(language) from None


default_registry = LanguageRegistry()


def _subcategory(ttype) -> str:
    return str(ttype).rsplit(".", 1)[-1].lower()


def tokenize_line(line: str, lexer: Lexer) -> list[Token]:
    """Tokenize one source line; the tokens flatten back to ``line`` exactly.

    Pygments rewrites carriage returns as newlines, so trailing ``\\r`` is kept
    out of the lexer and re-emitted as a bare ``Leaf``.
    """
    body = line.rstrip("\r")
    tokens: list[Token] = []
    run_category: str | None = None
    run: list[tuple[object, str]] = []

    def flush() -> None:
        if not run:
            return
        category = run_category or ""
        if len(run) == 1:
            tokens.append(Node(category, Leaf(run[0][1])))
        else:
            tokens.append(NodeList(category, tuple(Node(_subcategory(t), Leaf(v)) for t, v in run)))
        run.clear()

    for ttype, value in lex(body, lexer):
        if not value:
            continue
        category = category_for(ttype)
        if category is None:
            flush()
            run_category = None
            tokens.append(Leaf(value))
            continue
        if category != run_category:
            flush()
            run_category = category
        run.append((ttype, value))
    flush()
    if len(body) < len(line):
        tokens.append(Leaf(line[len(body):]))
    return tokens
