from __future__ import annotations

import contextlib
import importlib.util
import io
from pathlib import Path
import sys
import tempfile
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None
REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT_PATH = REPO_ROOT / "scripts" / "run_brainflak.py"


def _load_module():
    spec = importlib.util.spec_from_file_location("run_brainflak", SCRIPT_PATH)
    if spec is None or spec.loader is None:
        raise RuntimeError("Unable to load run_brainflak module")
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for the run_brainflak script")
class RunBrainFlakScriptTests(unittest.TestCase):
    def _main(self, argv: list[str]) -> tuple[int, str, str]:
        module = _load_module()
        out = io.StringIO()
        err = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = module.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_inline_code_with_initial_values(self) -> None:
        code, out, _ = self._main(["--code", "({}{})", "10", "20"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "30")

    def test_program_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "subtract.bf"
            path.write_text("# subtract the top from the next\n([{}]{})\n", encoding="utf-8")
            code, out, _ = self._main([str(path), "20", "5"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "15")

    def test_right_stack_values(self) -> None:
        code, out, _ = self._main(["--code", "<>({}{})<>({}<>{}<>)", "1", "--right", "2", "3"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "6")

    def test_ascii_output_prints_top_first(self) -> None:
        code, out, _ = self._main(["--code", "", "--ascii", "105", "72"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "Hi")

    def test_ascii_output_rejects_non_character_values(self) -> None:
        code, out, err = self._main(["--code", "([()])", "--ascii"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("value -1 is not a character code", err)

    def test_overflow_is_reported(self) -> None:
        code, out, err = self._main(["--code", "({}{})", "--dtype", "int8", "100", "100"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("does not fit element type int8", err)

    def test_parse_error_is_reported(self) -> None:
        code, _, err = self._main(["--code", "(()"])
        self.assertEqual(code, 1)
        self.assertIn("Unterminated", err)

    def test_loop_cap_is_reported(self) -> None:
        code, _, err = self._main(["--code", "(()){(())}", "--max-loop-iterations", "5"])
        self.assertEqual(code, 1)
        self.assertIn("loop iteration limit of 5", err)

    def test_unsigned_dtype_is_rejected(self) -> None:
        code, _, err = self._main(["--code", "()", "--dtype", "uint8"])
        self.assertEqual(code, 1)
        self.assertIn("signed integer", err)


if __name__ == "__main__":
    unittest.main()
