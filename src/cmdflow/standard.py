"""The compiled-in standard command set."""

from __future__ import annotations

from cmdflow.command import CommandDefinition, ProcessStep, step


def _cmd(
    name: str,
    description: str,
    langs: list[str] | None,
    steps: list[ProcessStep],
    working_dir: str,
    wait: bool,
) -> CommandDefinition:
    return CommandDefinition(
        name=name,
        description=description,
        langs=langs or [],
        steps=steps,
        working_dir=working_dir,
        wait=wait,
    )


STANDARD_COMMANDS: tuple[CommandDefinition, ...] = (
    _cmd("Run Proj", "run RunExec executable set in project", None, [step("{RunExec}")], "", False),
    # Go
    _cmd("Imports Go File", "run goimports on file", ["Go"], [step("goimports", "-w", "{FilePath}")], "{FileDirPath}", True),
    _cmd("Fmt Go File", "run go fmt on file", ["Go"], [step("gofmt", "-w", "{FilePath}")], "{FileDirPath}", True),
    _cmd(
        "Build Go File",
        "run go build to build in current dir",
        ["Go"],
        [step("go", "build", "-v", "{FileDirPath}")],
        "{FileDirPath}",
        False,
    ),
    _cmd("Build Go Proj", "run go build for project BuildDir", ["Go"], [step("go", "build", "-v", "{BuildDir}")], "{BuildDir}", False),
    _cmd("Test Go", "run go test in current dir", ["Go"], [step("go", "test", "-v", "{FileDirPath}")], "{FileDirPath}", False),
    _cmd("Vet Go", "run go vet in current dir", ["Go"], [step("go", "vet", "{FileDirPath}")], "{FileDirPath}", False),
    # Git
    _cmd("Adds Git", "git add file", None, [step("git", "add", "{FilePath}")], "{FileDirPath}", True),
    _cmd("Status Git", "git status", None, [step("git", "status", "{FileDirPath}")], "{FileDirPath}", True),
    _cmd("Log Git", "git log", None, [step("git", "log", "{FileDirPath}")], "{FileDirPath}", False),
    # The commit message prompt must be answered before git runs, so this one waits.
    _cmd("Commit Git", "git commit", None, [step("git", "commit", "-am", "{PromptString1}")], "{FileDirPath}", True),
    _cmd("Pull Git", "git pull", None, [step("git", "pull")], "", True),
    _cmd("Push Git", "git push", None, [step("git", "push")], "", True),
    # SVN
    _cmd("Adds SVN", "svn add file", None, [step("svn", "add", "{FilePath}")], "{FileDirPath}", True),
    _cmd("Status SVN", "svn status", None, [step("svn", "status", "{FileDirPath}")], "{FileDirPath}", True),
    _cmd("Info SVN", "svn info", None, [step("svn", "info", "{FileDirPath}")], "{FileDirPath}", True),
    _cmd("Log SVN", "svn log", None, [step("svn", "log", "-v", "{FileDirPath}")], "{FileDirPath}", False),
    _cmd("Commit SVN", "svn commit", None, [step("svn", "commit", "-m", "{PromptString1}")], "{FileDirPath}", True),
    _cmd("Update SVN", "svn update", None, [step("svn", "update")], "", True),
    # LaTeX
    _cmd(
        "LaTeX PDF File",
        "run PDFLaTeX on file",
        ["LaTeX"],
        [step("pdflatex", "-file-line-error", "-interaction=nonstopmode", "{FilePath}")],
        "{FileDirPath}",
        False,
    ),
    # Misc testing
    _cmd("List Dir", "list current dir -- just for testing", None, [step("ls", "-la")], "{FileDirPath}", False),
    _cmd("Echo prompt", "echo string prompt 1 -- just for testing", None, [step("echo", "{PromptString1}")], "{FileDirPath}", False),
)
