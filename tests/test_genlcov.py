# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

import unittest
from unittest import mock
import io
import os
import sys
import tempfile
from pathlib import Path

from llvm_lcov import __config__ as config
from llvm_lcov import util
from llvm_lcov.genlcov import main, collect_profraws, gen_lcov

from fake_tools import make_fake_tools, expected_report


class CollectProfrawsTestCase(unittest.TestCase):

    def setUp(self):
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.tmp_path = Path(tmp_dir.name)
        self.addCleanup(util.set_quiet, util.quiet)
        util.set_quiet(True)

    def test_files_and_directories(self):
        prof_dir = self.tmp_path/"profiles"
        prof_dir.mkdir()
        for name in ("fuzz-10.profraw", "fuzz-9.profraw", "notes.txt"):
            (prof_dir/name).write_bytes(b"")
        single = self.tmp_path/"default.profraw"
        result = collect_profraws([str(single), str(prof_dir), str(single)])
        self.assertEqual(result, [single,
                                  prof_dir/"fuzz-9.profraw",
                                  prof_dir/"fuzz-10.profraw"])

    def test_directory_without_profraws(self):
        with self.assertWarns(UserWarning) as cm:
            self.assertEqual(collect_profraws([str(self.tmp_path)]), [])
        self.assertIn("no .profraw files found", str(cm.warning))


@unittest.skipIf(sys.platform == "win32", "fake tools are shell scripts")
class MainTestCase(unittest.TestCase):

    def setUp(self):
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.tmp_path = Path(tmp_dir.name)
        tools_dir = self.tmp_path/"tools"
        tools_dir.mkdir()
        self.profdata_tool, self.cov_tool = make_fake_tools(tools_dir)

        patcher = mock.patch.multiple(config,
                                      llvm_profdata_tool="", llvm_cov_tool="",
                                      profdata_filename="llvm_lcov.profdata")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(util.set_quiet, util.quiet)
        home = mock.patch.dict(os.environ, {"HOME": str(self.tmp_path)})
        home.start()
        self.addCleanup(home.stop)

        self.binary = self.tmp_path/"prog"
        self.binary.write_bytes(b"\x7fELF")
        os.chmod(self.binary, 0o755)
        self.profraw = self.tmp_path/"default.profraw"
        self.profraw.write_bytes(b"\x81rforpl\xff")
        self.tool_args = ["--llvm-profdata", str(self.profdata_tool),
                          "--llvm-cov", str(self.cov_tool)]

    def test_write_output_file(self):
        output = self.tmp_path/"coverage.info"
        work_dir = self.tmp_path/"work"
        work_dir.mkdir()
        result = main(["-q", "-b", str(self.binary), "-w", str(work_dir),
                       "-o", str(output), str(self.profraw)] + self.tool_args)
        self.assertIsNone(result)
        self.assertEqual(output.read_bytes(), expected_report(self.binary))
        self.assertTrue((work_dir/"llvm_lcov.profdata").is_file())

    def test_write_stdout(self):
        stdout = mock.Mock()
        stdout.buffer = io.BytesIO()
        with mock.patch("sys.stdout", stdout):
            result = main(["-q", "-b", str(self.binary), str(self.profraw)]
                          + self.tool_args)
        self.assertIsNone(result)
        self.assertEqual(stdout.buffer.getvalue(), expected_report(self.binary))

    def test_tools_from_rc_options(self):
        output = self.tmp_path/"coverage.info"
        result = main(["-q", "-b", str(self.binary), "-o", str(output),
                       "--rc", f"llvm_profdata_tool={self.profdata_tool}",
                       "--rc", f"llvm_cov_tool={self.cov_tool}",
                       str(self.profraw)])
        self.assertIsNone(result)
        self.assertEqual(output.read_bytes(), expected_report(self.binary))

    def test_tools_from_config_file(self):
        rc_file = self.tmp_path/"genlcovrc"
        rc_file.write_text(f"llvm_profdata_tool = {self.profdata_tool}\n"
                           f"llvm_cov_tool = {self.cov_tool}\n"
                           "profdata_filename = merged.profdata\n")
        work_dir = self.tmp_path/"work"
        work_dir.mkdir()
        output = self.tmp_path/"coverage.info"
        result = main(["-q", "--config-file", str(rc_file), "-b", str(self.binary),
                       "-w", str(work_dir), "-o", str(output), str(self.profraw)])
        self.assertIsNone(result)
        self.assertTrue((work_dir/"merged.profdata").is_file())

    def test_merge_failure_is_reported(self):
        result = main(["-q", "-b", str(self.binary), "-o", str(self.tmp_path/"out"),
                       str(self.tmp_path/"missing.profraw")] + self.tool_args)
        self.assertTrue(result.startswith("genlcov: Failure while running "))
        self.assertIn("No such file or directory", result)

    def test_export_failure_is_a_warning(self):
        broken = self.tmp_path/"bin"/"broken"
        broken.parent.mkdir()
        broken.write_bytes(b"\x7fELF")
        os.chmod(broken, 0o755)
        output = self.tmp_path/"coverage.info"
        with mock.patch("sys.stderr", new_callable=io.StringIO) as stderr:
            result = main(["-q", "-b", str(broken.parent), "-o", str(output),
                           str(self.profraw)] + self.tool_args)
        self.assertIsNone(result)
        self.assertEqual(output.read_bytes(), b"")
        self.assertIn("genlcov: WARNING: Suppressing error returned by llvm-cov tool",
                      stderr.getvalue())

    def test_progress_messages(self):
        with mock.patch("sys.stderr", new_callable=io.StringIO) as stderr:
            main(["-b", str(self.binary), "-o", str(self.tmp_path/"out"),
                  str(self.profraw)] + self.tool_args)
        self.assertIn("Finished lcov creation: 1 reports", stderr.getvalue())

    def test_settings_do_not_outlive_the_call(self):
        util.set_quiet(False)
        result = main(["-q", "-b", str(self.binary), "-o", str(self.tmp_path/"out"),
                       "--rc", "profdata_filename=other.profdata",
                       str(self.profraw)] + self.tool_args)
        self.assertIsNone(result)
        self.assertEqual(config.llvm_profdata_tool, "")
        self.assertEqual(config.llvm_cov_tool, "")
        self.assertEqual(config.profdata_filename, "llvm_lcov.profdata")
        self.assertFalse(util.quiet)

    def test_tool_names_looked_up_on_path(self):
        output = self.tmp_path/"coverage.info"
        path = str(self.profdata_tool.parent) + os.pathsep + os.environ.get("PATH", "")
        with mock.patch.dict(os.environ, {"PATH": path}):
            result = main(["-q", "-b", str(self.binary), "-o", str(output),
                           "--llvm-profdata", "llvm-profdata",
                           "--llvm-cov", "llvm-cov", str(self.profraw)])
        self.assertIsNone(result)
        self.assertEqual(output.read_bytes(), expected_report(self.binary))

    def test_gen_lcov_uses_temporary_working_dir(self):
        util.set_quiet(True)
        config.llvm_profdata_tool = str(self.profdata_tool)
        config.llvm_cov_tool = str(self.cov_tool)
        output = self.tmp_path/"coverage.info"
        with mock.patch("llvm_lcov.genlcov.profraws_to_lcov",
                        return_value=[b"SF:a\nend_of_record\n"]) as convert:
            self.assertEqual(gen_lcov([self.profraw], self.binary, None, output), 1)
        work_dir = convert.call_args.args[2]
        self.assertFalse(work_dir.exists())
        self.assertEqual(output.read_bytes(), b"SF:a\nend_of_record\n")


if __name__ == "__main__":
    unittest.main()
