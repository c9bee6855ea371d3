import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from taskcard_renderer.errors import UnsupportedLanguageError
from taskcard_renderer.models import Leaf, Node, NodeList
from taskcard_renderer.text import flatten_token, token_category
from taskcard_renderer.tokenizer import LanguageRegistry, category_for, tokenize_line

SAMPLE_JS = """function add(a, b) {
  // sum two numbers
  return a + b * 2.5;
}
const greeting = "hi\\tthere";
"""


class FlattenTests(unittest.TestCase):
    def test_all_variants(self):
        self.assertEqual(flatten_token(Leaf("x")), "x")
        self.assertEqual(flatten_token(Node("keyword", Leaf("let"))), "let")
        self.assertEqual(flatten_token(Node("string", Node("escape", Leaf("\\n")))), "\\n")
        nested = NodeList("string", (Node("double", Leaf('"a')), Node("escape", Leaf("\\n")), Leaf('"')))
        self.assertEqual(flatten_token(nested), '"a\\n"')

    def test_unknown_shapes_flatten_to_empty(self):
        for value in (None, 42, "raw", {"content": "x"}, ["a"]):
            self.assertEqual(flatten_token(value), "")

    def test_flatten_is_idempotent(self):
        token = NodeList("comment", (Node("single", Leaf("// x")),))
        self.assertEqual(flatten_token(token), flatten_token(token))

    def test_category_of_leaf_is_none(self):
        self.assertIsNone(token_category(Leaf(" ")))
        self.assertEqual(token_category(Node("keyword", Leaf("if"))), "keyword")


class TokenizerTests(unittest.TestCase):
    def setUp(self):
        self.registry = LanguageRegistry()

    def test_tokens_flatten_back_to_each_line(self):
        lexer = self.registry.resolve("javascript")
        for line in SAMPLE_JS.split("\n"):
            tokens = tokenize_line(line, lexer)
            self.assertEqual("".join(flatten_token(t) for t in tokens), line)

    def test_javascript_categories(self):
        lexer = self.registry.resolve("javascript")
        categories = {token_category(t) for t in tokenize_line("const x = 1;", lexer)}
        self.assertTrue({"keyword", "number", "operator", "punctuation"} <= categories)

    def test_string_runs_group_into_one_token(self):
        lexer = self.registry.resolve("python")
        literal = '"a\\nb"'
        tokens = tokenize_line(f"s = {literal}", lexer)
        strings = [t for t in tokens if token_category(t) == "string"]
        self.assertEqual(len(strings), 1)
        self.assertEqual(flatten_token(strings[0]), literal)

    def test_carriage_returns_survive_flattening(self):
        lexer = self.registry.resolve("javascript")
        for line in ("const x = 1;\r", "let s = \"a\";\r\r", "\r"):
            tokens = tokenize_line(line, lexer)
            self.assertEqual("".join(flatten_token(t) for t in tokens), line)
        self.assertEqual(tokenize_line("x;\r", lexer)[-1], Leaf("\r"))

    def test_empty_line_has_no_tokens(self):
        self.assertEqual(tokenize_line("", self.registry.resolve("python")), [])

    def test_unsupported_languages(self):
        for language in ("brainfuck", None, ""):
            self.assertFalse(self.registry.supports(language))
            with self.assertRaises(UnsupportedLanguageError):
                self.registry.resolve(language)

    def test_register_alias(self):
        self.registry.register("Plain", "text")
        self.assertIn("plain", self.registry.languages())
        lexer = self.registry.resolve("PLAIN")
        tokens = tokenize_line("nothing to see", lexer)
        self.assertTrue(all(isinstance(t, Leaf) for t in tokens))

    def test_category_for_prefers_specific_types(self):
        from pygments.token import Keyword, Name, Operator

        self.assertEqual(category_for(Keyword.Constant), "boolean")
        self.assertEqual(category_for(Keyword.Declaration), "keyword")
        self.assertEqual(category_for(Operator.Word), "keyword")
        self.assertEqual(category_for(Name.Function.Magic), "function")
        self.assertIsNone(category_for(Name))


if __name__ == "__main__":
    unittest.main()
