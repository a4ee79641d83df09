"""Tests for prompt templates, system info and the shell integration."""

from __future__ import annotations

import pytest

from ask_sh.prompts import list_prompts, load_prompt, render, system_prompt, user_prompt
from ask_sh.shell_init import init_script
from ask_sh.system_info import SystemInfo, detect_shell


class TestPrompts:
    """Tests for template loading and rendering."""

    def test_packaged_prompts(self):
        assert set(list_prompts()) >= {"system", "user"}
        assert "{user_os}" in load_prompt("system")

    def test_system_prompt(self):
        prompt = system_prompt("macos", "aarch64", "/bin/zsh")
        assert "macos" in prompt
        assert "aarch64" in prompt
        assert "/bin/zsh" in prompt
        assert "{user_" not in prompt

    def test_user_prompt(self):
        assert user_prompt("show me disk usage") == "User's request:\nshow me disk usage"

    def test_user_input_braces_untouched(self):
        assert user_prompt("what does ${HOME} {x} mean") == "User's request:\nwhat does ${HOME} {x} mean"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SYSTEM_PROMPT", "You run on {user_os}.")
        monkeypatch.setenv("USER_PROMPT", "Q: {user_input}")
        assert system_prompt("linux", "x86_64", "bash") == "You run on linux."
        assert user_prompt("hi") == "Q: hi"

    def test_render_keeps_unknown_and_stray_braces(self):
        assert render("{a} {b}", a=1) == "1 {b}"
        assert render("awk '{print}' {a}", a="x") == "awk '{print}' x"
        assert render("a } {a}", a="x") == "a } x"


class TestSystemInfo:
    """Tests for machine detection."""

    def test_shell_from_env(self):
        assert detect_shell({"SHELL": "/bin/fish"}) == "/bin/fish"

    def test_shell_fallbacks(self):
        assert detect_shell({"BASH_VERSION": "5.2"}) == "Bash"
        assert detect_shell({"ZSH_VERSION": "5.9"}) == "zsh"
        assert detect_shell({}) == "Unknown"

    def test_detect(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("platform.system", lambda: "Darwin")
        monkeypatch.setattr("platform.machine", lambda: "arm64")
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert SystemInfo.detect() == SystemInfo(os="macos", arch="arm64", shell="/bin/zsh")


class TestShellInit:
    """Tests for the --init script."""

    def test_defines_ask_function(self):
        script = init_script()
        assert script.startswith("# This function is automatically generated by ask-sh --init")
        assert "ask() {" in script
        assert 'ask-sh "$@"' in script
