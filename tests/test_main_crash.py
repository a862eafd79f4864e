import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import main


class TestMainCrashReport(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.report_dir = Path(self.tmp.name) / "reports"

    def tearDown(self):
        self.tmp.cleanup()

    def test_unexpected_exception_still_writes_summary(self):
        boom = MagicMock(side_effect=RuntimeError("disk on fire"))
        with patch.object(main, "run_build", boom):
            code = main.main(["--report-dir", str(self.report_dir), "--output-dir", self.tmp.name])

        self.assertEqual(code, 1)
        boom.assert_called_once()
        errors = list(self.report_dir.glob("error-*.json"))
        self.assertEqual(len(errors), 1)
        report = json.loads(errors[0].read_text(encoding="utf-8"))
        self.assertEqual(report["exit_reason"], "unhandled exception")
        self.assertEqual(report["failures"][0]["error_type"], "RUNTIME")
        self.assertEqual(report["failures"][0]["message"], "disk on fire")

    def test_failed_build_result_maps_to_exit_code(self):
        failed = main.BuildResult(run_id="r", date="2024-01-01", output_dir="dist")
        failed.exit_reason = "content validation failed"
        with patch.object(main, "run_build", MagicMock(return_value=failed)):
            code = main.main(["--report-dir", str(self.report_dir)])

        self.assertEqual(code, 1)
        self.assertTrue((self.report_dir / "error-2024-01-01.json").exists())


if __name__ == "__main__":
    unittest.main()
