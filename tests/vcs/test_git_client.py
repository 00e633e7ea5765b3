import subprocess
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from commit_split.grouping.change_classifier import ChangeKind
from commit_split.vcs.git_client import GitClient, GitError
from commit_split.vcs.status_parser import ChangeRecord, UnmergedFileError


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestGitClientChanges(unittest.TestCase):
    def test_get_changes_parses_status_and_fetches_diffs(self) -> None:
        output = (
            " M modified_file.py\n"
            "A  added_file.py\n"
            "D  deleted_file.py\n"
            "R  renamed_old.py -> renamed_new.py\n"
            "?? untracked.txt\n"
        )
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            if args[0] == "status":
                return DummyProc(returncode=0, stdout=output, stderr="")
            if args[0] == "diff":
                return DummyProc(returncode=0, stdout=f"diff {args[-1]}", stderr="")
            raise AssertionError(f"Unexpected git command: {args}")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            changes = client.get_changes()

        self.assertEqual(
            changes,
            [
                ChangeRecord("modified_file.py", ChangeKind.MODIFIED, "diff modified_file.py"),
                ChangeRecord("added_file.py", ChangeKind.ADDED, "diff added_file.py"),
                ChangeRecord("deleted_file.py", ChangeKind.DELETED),
                ChangeRecord("renamed_new.py", ChangeKind.RENAMED, "diff renamed_new.py"),
            ],
        )
        diff_targets = sorted(args[-1] for args in calls if args[0] == "diff")
        self.assertEqual(diff_targets, ["added_file.py", "modified_file.py", "renamed_new.py"])

    def test_get_changes_unmerged(self) -> None:
        with patch.object(GitClient, "_run", return_value=DummyProc(stdout="UU both.py\n")):
            with self.assertRaises(UnmergedFileError):
                GitClient(Path("/repo")).get_changes()

    def test_get_status_output_is_trimmed(self) -> None:
        with patch.object(GitClient, "_run", return_value=DummyProc(stdout="\n M a.py\n\n")):
            self.assertEqual(GitClient(Path("/repo")).get_status_output(), "M a.py")

    def test_get_file_diff_appends_warnings(self) -> None:
        proc = DummyProc(stdout="+line\n", stderr="warning: LF will be replaced by CRLF")
        with patch.object(GitClient, "_run", return_value=proc) as mock_run:
            diff = GitClient(Path("/repo")).get_file_diff("a.py")
        mock_run.assert_called_once_with(["diff", "--", "a.py"], check=True)
        self.assertEqual(diff, "+line\n\n[Git Warning/Error]:\nwarning: LF will be replaced by CRLF")

    def test_get_file_diff_failure_returns_none(self) -> None:
        with patch.object(GitClient, "_run", side_effect=GitError("bad path")):
            self.assertIsNone(GitClient(Path("/repo")).get_file_diff("a.py"))


class TestGitClientHistoryAndCommit(unittest.TestCase):
    def test_recent_commit_titles(self) -> None:
        proc = DummyProc(stdout="Add parser\n\nFix typo\n")
        with patch.object(GitClient, "_run", return_value=proc) as mock_run:
            titles = GitClient(Path("/repo")).get_recent_commit_titles(5)
        mock_run.assert_called_once_with(["log", "--pretty=format:%s", "-n", "5"], check=True)
        self.assertEqual(titles, "Add parser\nFix typo")

    def test_recent_commit_titles_without_history(self) -> None:
        err = GitError("your current branch 'main' does not have any commits yet")
        with patch.object(GitClient, "_run", side_effect=err):
            self.assertEqual(GitClient(Path("/repo")).get_recent_commit_titles(), "")

    def test_commit_files(self) -> None:
        with patch.object(GitClient, "_run", return_value=DummyProc()) as mock_run:
            GitClient(Path("/repo")).commit_files("Add parser", ["a.py", "dir/b.py"])
        mock_run.assert_called_once_with(
            ["commit", "-m", "Add parser", "--", "a.py", "dir/b.py"], check=True
        )

    def test_commit_files_empty_is_noop(self) -> None:
        with patch.object(GitClient, "_run") as mock_run:
            GitClient(Path("/repo")).commit_files("Nothing", [])
        mock_run.assert_not_called()

    def test_commit_failure_raises(self) -> None:
        with patch.object(GitClient, "_run", side_effect=GitError("nothing added")):
            with self.assertRaises(GitError):
                GitClient(Path("/repo")).commit_files("Add", ["a.py"])


class TestGitClientRun(unittest.TestCase):
    def test_run_raises_on_failure(self) -> None:
        proc = subprocess.CompletedProcess(["git"], 128, stdout="", stderr="fatal: not a git repository")
        with patch("subprocess.run", return_value=proc):
            with self.assertRaises(GitError) as ctx:
                GitClient(Path("/repo"))._run(["status"])
        self.assertIn("not a git repository", str(ctx.exception))

    def test_run_without_check_returns_result(self) -> None:
        proc = subprocess.CompletedProcess(["git"], 1, stdout="out", stderr="")
        with patch("subprocess.run", return_value=proc):
            result = GitClient(Path("/repo"))._run(["status"], check=False)
        self.assertEqual(result.stdout, "out")

    def test_run_missing_executable(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            with self.assertRaises(GitError):
                GitClient(Path("/repo"))._run(["status"])

    def test_is_available(self) -> None:
        ok = subprocess.CompletedProcess(["git"], 0, stdout="git version 2.43.0\n", stderr="")
        with patch("subprocess.run", return_value=ok):
            self.assertTrue(GitClient.is_available())
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            self.assertFalse(GitClient.is_available())

    def test_find_repo_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            nested = root / "src" / "pkg"
            nested.mkdir(parents=True)
            self.assertEqual(GitClient.find_repo_root(nested), root)
            self.assertEqual(GitClient.find_repo_root(root), root)


if __name__ == "__main__":
    unittest.main()
