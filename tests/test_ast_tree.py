import unittest

from minishell.ast_tree import Command, JobStatus, PipelineJob


class TestCommand(unittest.TestCase):
    def setUp(self):
        self.sub = Command(["cat"])
        self.command = Command(["test"], next_stage=self.sub)

    def test_01_last_stage(self):
        single = Command(["test"], background=True)
        self.assertIs(single, single.last_stage())
        self.assertIs(self.sub, self.command.last_stage())

    def test_02_stages(self):
        self.assertEqual([self.command, self.sub], list(self.command.stages()))
        self.assertEqual(2, self.command.stage_count())

    def test_03_empty_command_has_no_program(self):
        self.assertIsNone(Command().program)

    def test_04_equality_compares_whole_chain(self):
        self.assertEqual(Command(["test"], next_stage=Command(["cat"])), self.command)
        self.assertNotEqual(Command(["test"]), self.command)
        self.assertNotEqual(Command(["test"], next_stage=Command(["tac"])), self.command)
        self.assertNotEqual(Command(["test"], background=True), Command(["test"]))

    def test_05_to_line(self):
        command = Command(
            ["cat"],
            input_redirect="in",
            next_stage=Command(["head", "-n", "2"], output_redirect="out", append_output=True),
        )
        self.assertEqual("cat < in | head -n 2 >> out", command.to_line())
        self.assertEqual("sleep 1 &", Command(["sleep", "1"], background=True).to_line())


class TestPipelineJob(unittest.TestCase):
    def test_01_new_job_is_parsed(self):
        job = PipelineJob("ls | wc -l")
        self.assertEqual(JobStatus.PARSED, job.status)
        self.assertEqual([], job.pids)
        self.assertIsNone(job.drain_pid)
        self.assertIn("PARSED", repr(job))


if __name__ == "__main__":
    unittest.main(verbosity=2)
