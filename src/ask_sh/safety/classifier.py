"""Decide whether a shell command needs the user's approval.

The classifier is a fixed list of rules evaluated in order; the first rule
that matches wins. It is pure and never raises: every string, including an
empty one, gets a decision. Over-prompting is acceptable, letting a
destructive command through is not, so git commands that match both a
destructive and a modifying pattern report the destructive reason.
"""

from __future__ import annotations

from dataclasses import dataclass

REASON_GIT = "modifies git repository or remote"
REASON_DESTRUCTIVE_GIT = "destructive git operation"
REASON_FILES = "modifies files or system state"
REASON_PACKAGES = "installs or manages software"
REASON_NETWORK = "performs network operations"
REASON_SYSTEM = "modifies system configuration"
REASON_DATABASE = "performs database operations"
REASON_RISKY = "potentially risky operation"


@dataclass(frozen=True, slots=True)
class ApprovalDecision:
    """Outcome of classifying one command string.

    Attributes:
        needs_approval: True if the user must confirm before execution.
        reason: Short human-readable reason, None for safe commands.
    """

    needs_approval: bool
    reason: str | None = None


SAFE = ApprovalDecision(needs_approval=False)


FILE_COMMANDS = frozenset({
    "rm", "rmdir", "mv", "cp", "dd", "touch", "mkdir", "ln", "chmod", "chown",
    "chgrp", "shred", "nano", "vim", "vi", "emacs", "sed", "tee", "truncate",
    "split", ">>", ">",
})

PACKAGE_MANAGERS = frozenset({
    "brew", "apt", "apt-get", "yum", "dnf", "pacman", "npm", "yarn", "pnpm",
    "pip", "pip3", "cargo", "gem", "go", "composer", "mvn", "gradle", "snap",
    "flatpak", "apk", "zypper",
})

NETWORK_COMMANDS = frozenset({
    "curl", "wget", "fetch", "http", "scp", "rsync", "ssh", "sftp", "ftp", "nc",
    "netcat", "telnet",
})

SYSTEM_PATHS = ("/etc/", "/sys/")

SYSTEM_COMMANDS = frozenset({
    "systemctl", "service", "launchctl", "export", "source", "chsh", "usermod",
    "useradd", "userdel", "groupadd", "groupdel", "passwd", "sudo", "su",
    "mount", "umount", "sysctl", "modprobe",
})

DB_COMMANDS = frozenset({
    "mysql", "psql", "sqlite", "sqlite3", "mongo", "mongosh", "redis-cli",
    "influx", "cql", "cqlsh",
})

# Matched case-sensitively against the whole command line
SQL_KEYWORDS = ("DROP", "DELETE", "UPDATE", "INSERT", "ALTER", "CREATE")

DANGEROUS_PATTERNS = (
    "/dev/",
    "rm -rf",
    "rm -fr",
    ":(){ :|:& };:",
    "> /dev/sda",
    "mkfs",
    "format",
)

DANGEROUS_COMMANDS = frozenset({
    "eval", "exec", "sh", "bash", "zsh", "fish", "dash", "ksh", "python",
    "python3", "perl", "ruby", "node", "kill", "killall", "pkill", "reboot",
    "shutdown", "halt", "crontab", "at", "batch",
})

GIT_LOCAL_MODIFY = (
    "git add", "git commit", "git checkout", "git switch", "git restore",
    "git merge", "git rebase", "git cherry-pick", "git revert", "git stash",
    "git rm", "git mv", "git apply", "git am", "git reset", "git submodule",
)

GIT_NETWORK = (
    "git clone", "git fetch", "git pull", "git push", "git remote add",
    "git remote remove", "git remote set-url",
)

GIT_WORKTREE = ("git worktree add", "git worktree remove")

# Global options that take their value as the next word (git -C <path> ...)
GIT_OPTIONS_WITH_VALUE = frozenset({
    "-C", "-c", "--git-dir", "--work-tree", "--namespace", "--super-prefix",
    "--config-env",
})

# Checked against the lowercased command, so "branch -D" is covered by "branch -d"
GIT_DESTRUCTIVE = (
    "reset --hard", "clean -f", "clean -d", "clean -x", "branch -d",
    "push --force", "push -f", "push --mirror", "filter-branch",
    "reflog delete", "reflog expire", "prune", "gc --prune",
)


def extract_base_command(command: str) -> str:
    """Return the lowercased program name of a command line.

    Leading ``KEY=VALUE`` assignments are skipped and a pipe glued to the
    first word (``ls|wc``) is cut off.
    """
    for word in command.split():
        if "=" in word:
            continue
        return word.split("|", 1)[0].lower()
    return ""


def classify(command: str) -> ApprovalDecision:
    """Classify a shell command.

    Args:
        command: The command line the model asked to run.

    Returns:
        ApprovalDecision; ``SAFE`` when no rule matches.
    """
    cmd = command.strip()
    base = extract_base_command(cmd)

    if base == "git":
        return _classify_git(cmd)

    if base in FILE_COMMANDS or base.startswith("write") or base.endswith("fs"):
        return ApprovalDecision(True, REASON_FILES)

    if base in PACKAGE_MANAGERS or base.startswith("install"):
        return ApprovalDecision(True, REASON_PACKAGES)

    if base in NETWORK_COMMANDS:
        return ApprovalDecision(True, REASON_NETWORK)

    if any(path in cmd for path in SYSTEM_PATHS) or base in SYSTEM_COMMANDS:
        return ApprovalDecision(True, REASON_SYSTEM)

    if base in DB_COMMANDS or any(kw in cmd for kw in SQL_KEYWORDS):
        return ApprovalDecision(True, REASON_DATABASE)

    if any(p in cmd for p in DANGEROUS_PATTERNS) or base in DANGEROUS_COMMANDS:
        return ApprovalDecision(True, REASON_RISKY)

    return SAFE


def _classify_git(cmd: str) -> ApprovalDecision:
    # Drop env assignments and collapse whitespace so prefixes line up
    words = cmd.split()
    while words and "=" in words[0]:
        words.pop(0)
    words = words[:1] + _strip_git_options(words[1:])
    lowered = " ".join(words).lower()

    if any(p in lowered for p in GIT_DESTRUCTIVE):
        return ApprovalDecision(True, REASON_DESTRUCTIVE_GIT)

    if _is_modifying_git(lowered):
        return ApprovalDecision(True, REASON_GIT)

    return SAFE


def _strip_git_options(args: list[str]) -> list[str]:
    """Drop global options between ``git`` and its subcommand."""
    i = 0
    while i < len(args) and args[i].startswith("-"):
        i += 2 if args[i] in GIT_OPTIONS_WITH_VALUE else 1
    return args[i:]


def _is_modifying_git(cmd: str) -> bool:
    if cmd.startswith(GIT_LOCAL_MODIFY + GIT_NETWORK + GIT_WORKTREE):
        return True
    return cmd.startswith("git config") and "--list" not in cmd and "--get" not in cmd
