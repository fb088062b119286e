from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from variantkeeper.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for the ``python -m variantkeeper`` entry point."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_returns_cli_exit_code(self, exit_code: int) -> None:
        cli_module = MagicMock()
        cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"variantkeeper.cli": cli_module}):
            result = main()

        assert result == exit_code
        cli_module.main.assert_called_once_with()

    def test_import_failure_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """A None entry in sys.modules makes the lazy import raise ImportError."""
        with patch.dict("sys.modules", {"variantkeeper.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "variantkeeper CLI could not be started" in captured.err
        assert "ImportError:" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    def test_reports_version_on_stderr(self, capsys: pytest.CaptureFixture) -> None:
        version_module = MagicMock(__version__="9.9.9")

        with patch.dict("sys.modules", {"variantkeeper.__version__": version_module}):
            _print_startup_error(ImportError("No module named 'httpx'"))

        captured = capsys.readouterr()
        assert "variantkeeper version: 9.9.9" in captured.err
        assert "ImportError: No module named 'httpx'" in captured.err
        assert captured.out == ""

    def test_unknown_version(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict("sys.modules", {"variantkeeper.__version__": None}):
            _print_startup_error(ImportError("boom"))

        assert "variantkeeper version: <unknown>" in capsys.readouterr().err
