from __future__ import annotations

import unittest

from brainflak_jax.lexer import tokenize, tokens_from_stream
from brainflak_jax.parser import ParseError


class LexerTokenTests(unittest.TestCase):
    def _tokens(self, source: str, *, with_spans: bool = False):
        if with_spans:
            return [(tok.kind, tok.text, tok.pos, tok.end) for tok in tokenize(source) if tok.kind != "EOF"]
        return [(tok.kind, tok.text) for tok in tokenize(source) if tok.kind != "EOF"]

    def test_token_golden_nilads_and_brackets_with_spans(self) -> None:
        tokens = self._tokens("()[]{}<>(<[{}]>)", with_spans=True)
        self.assertEqual(
            tokens,
            [
                ("NILAD", "()", 0, 2),
                ("NILAD", "[]", 2, 4),
                ("NILAD", "{}", 4, 6),
                ("LANGLE", "<", 6, 7),
                ("RANGLE", ">", 7, 8),
                ("LPAREN", "(", 8, 9),
                ("LANGLE", "<", 9, 10),
                ("LBRACK", "[", 10, 11),
                ("NILAD", "{}", 11, 13),
                ("RBRACK", "]", 13, 14),
                ("RANGLE", ">", 14, 15),
                ("RPAREN", ")", 15, 16),
            ],
        )

    def test_doubled_angles_split_into_single_tokens(self) -> None:
        tokens = self._tokens("<<()>>", with_spans=True)
        self.assertEqual(
            tokens,
            [
                ("LANGLE", "<", 0, 1),
                ("LANGLE", "<", 1, 2),
                ("NILAD", "()", 2, 4),
                ("RANGLE", ">", 4, 5),
                ("RANGLE", ">", 5, 6),
            ],
        )

    def test_whitespace_and_comments_are_skipped(self) -> None:
        source = "# add the top two values\n( {}\n  {} )  # done\n"
        self.assertEqual(
            self._tokens(source),
            [("LPAREN", "("), ("NILAD", "{}"), ("NILAD", "{}"), ("RPAREN", ")")],
        )

    def test_nilad_fuses_across_whitespace(self) -> None:
        tokens = self._tokens("( )", with_spans=True)
        self.assertEqual(tokens, [("NILAD", "()", 0, 3)])
        self.assertEqual(self._tokens("[ # height\n]"), [("NILAD", "[]")])

    def test_eof_token_is_appended(self) -> None:
        tokens = tokenize("")
        self.assertEqual([(tok.kind, tok.pos, tok.end) for tok in tokens], [("EOF", 0, 0)])

    def test_unexpected_character_reports_span(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            tokenize("(()x)")
        self.assertEqual((ctx.exception.start, ctx.exception.end), (3, 4))
        self.assertIn("Unexpected character", str(ctx.exception))

    def test_parse_error_is_a_syntax_error(self) -> None:
        with self.assertRaises(SyntaxError):
            tokenize("1")

    def test_stream_items_map_to_tokens(self) -> None:
        tokens = tokens_from_stream(["(", "<<", "()", ">>", ")", "<>"])
        self.assertEqual(
            [(tok.kind, tok.text, tok.pos) for tok in tokens],
            [
                ("LPAREN", "(", 0),
                ("LANGLE", "<", 1),
                ("LANGLE", "<", 1),
                ("NILAD", "()", 2),
                ("RANGLE", ">", 3),
                ("RANGLE", ">", 3),
                ("RPAREN", ")", 4),
                ("LANGLE", "<", 5),
                ("RANGLE", ">", 5),
                ("EOF", "", 6),
            ],
        )

    def test_stream_rejects_unknown_items(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            tokens_from_stream(["(", "(]", ")"])
        self.assertEqual(ctx.exception.start, 1)


if __name__ == "__main__":
    unittest.main()
