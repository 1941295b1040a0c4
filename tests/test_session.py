"""
Tests for the session and its command handlers, run against InMemoryBackend.

  - Dispatch: empty lines, unknown commands, exit/quit, help
  - cd/pwd: relative and absolute moves, escape denial, refusals
  - ls/du: listing order, long format, sizes, flags
  - file/stat/cat: kinds, classification, caps, failure messages
  - hexdump: windows, strict option parsing, offsets past the end
  - Failure containment: backend errors never escape execute()

Run: python -m pytest tests/test_session.py -v
"""

import stat

import pytest

from fileclient.config.config import ClientConfig
from fileclient.content.formatting import format_time
from fileclient.exceptions import BackendIOError
from fileclient.sandbox.memory import InMemoryBackend
from fileclient.session import Session
from fileclient.tools.registry import CommandResult

MTIME = 1_700_000_000


def make_session(config=None, backend_cls=InMemoryBackend):
    mem = backend_cls("/data")
    mem.seed({
        "readme.txt": "hello world\n",
        "empty.txt": "",
        "sub/inner.py": "print(1)\n",
        "sub/deep/x.bin": bytes(range(256)),
    })
    mem.set_times("readme.txt", MTIME, atime=MTIME + 60, ctime=MTIME + 120)
    return Session(mem, config or ClientConfig())


# ─── Dispatch ─────────────────────────────────────────────────────────────

class TestDispatch:

    def setup_method(self):
        self.session = make_session()

    @pytest.mark.asyncio
    async def test_empty_line(self):
        result = await self.session.execute("")
        assert result.as_tuple() == (True, "")

    @pytest.mark.asyncio
    async def test_whitespace_line(self):
        result = await self.session.execute("   \t ")
        assert result.as_tuple() == (True, "")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line", ["exit", "quit", "  exit  "])
    async def test_exit_terminates(self, line):
        result = await self.session.execute(line)
        assert result.as_tuple() == (False, "exit")
        assert result.terminate is True
        assert result == CommandResult.exit()

    @pytest.mark.asyncio
    async def test_failure_with_exit_text_does_not_terminate(self):
        result = await self.session.execute("cat exit")
        assert result.success is False
        assert result.terminate is False

    @pytest.mark.asyncio
    async def test_unknown_command(self):
        result = await self.session.execute("rm -rf /")
        assert result.success is False
        assert result.message == "Unknown command: rm, use 'help' for available commands"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line", ["help", "?", "help me"])
    async def test_help(self, line):
        result = await self.session.execute(line)
        assert result.success is True
        assert "Available Commands" in result.message
        assert "hexdump" in result.message

    @pytest.mark.asyncio
    async def test_commands_are_case_sensitive(self):
        result = await self.session.execute("LS")
        assert result.success is False


# ─── cd / pwd ─────────────────────────────────────────────────────────────

class TestNavigation:

    def setup_method(self):
        self.session = make_session()

    async def pwd(self):
        return (await self.session.execute("pwd")).message

    @pytest.mark.asyncio
    async def test_initial_directory(self):
        assert self.session.current_directory == "/"
        assert await self.pwd() == "/"

    @pytest.mark.asyncio
    async def test_cd_and_back(self):
        result = await self.session.execute("cd sub")
        assert result.as_tuple() == (True, "")
        assert await self.pwd() == "/sub"

        await self.session.execute("cd ..")
        assert await self.pwd() == "/"

    @pytest.mark.asyncio
    async def test_cd_above_root_is_denied(self):
        result = await self.session.execute("cd ..")
        assert result.success is False
        assert result.message.startswith("Access denied: Cannot navigate above the root directory (..)")
        assert self.session.current_directory == "/"

    @pytest.mark.asyncio
    async def test_cd_deep_escape_is_denied(self):
        await self.session.execute("cd sub")
        result = await self.session.execute("cd ../../etc")
        assert result.message.startswith("Access denied")
        assert self.session.current_directory == "/sub"

    @pytest.mark.asyncio
    async def test_cd_absolute(self):
        await self.session.execute("cd /sub/deep")
        assert await self.pwd() == "/sub/deep"
        await self.session.execute("cd ../..")
        assert await self.pwd() == "/"

    @pytest.mark.asyncio
    async def test_cd_without_argument_goes_to_root(self):
        await self.session.execute("cd sub/deep")
        await self.session.execute("cd")
        assert await self.pwd() == "/"

    @pytest.mark.asyncio
    async def test_cd_missing_directory(self):
        result = await self.session.execute("cd nope")
        assert result.as_tuple() == (False, "Cannot change to directory: nope")

    @pytest.mark.asyncio
    async def test_cd_into_file(self):
        result = await self.session.execute("cd readme.txt")
        assert result.as_tuple() == (False, "Cannot change to directory: readme.txt")
        assert self.session.current_directory == "/"

    @pytest.mark.asyncio
    async def test_cd_and_ls_through_directory_link(self):
        self.session.backend.add_symlink("/shortcut", "sub/deep")

        assert (await self.session.execute("ls shortcut")).as_tuple() == (True, "x.bin")
        assert (await self.session.execute("cd shortcut")).as_tuple() == (True, "")
        assert await self.pwd() == "/shortcut"
        assert (await self.session.execute("du x.bin")).message == "256\tx.bin"

    @pytest.mark.asyncio
    async def test_relative_paths_follow_cwd(self):
        await self.session.execute("cd sub")
        assert (await self.session.execute("cat inner.py")).message == "print(1)\n"
        assert (await self.session.execute("cat ../readme.txt")).message == "hello world\n"
        assert (await self.session.execute("cat /readme.txt")).message == "hello world\n"

    @pytest.mark.asyncio
    async def test_prompt(self):
        assert self.session.prompt() == "[/data] / $ "
        await self.session.execute("cd sub")
        assert self.session.prompt() == "[/data/sub] /sub $ "


# ─── ls / du ──────────────────────────────────────────────────────────────

class TestListing:

    def setup_method(self):
        self.session = make_session()

    @pytest.mark.asyncio
    async def test_ls_names_sorted(self):
        result = await self.session.execute("ls")
        assert result.as_tuple() == (True, "empty.txt readme.txt sub")

    @pytest.mark.asyncio
    async def test_ls_long(self):
        result = await self.session.execute("ls -l")
        lines = result.message.split("\n")
        assert len(lines) == 3
        assert lines[1] == f"-rw-r--r--         12 {format_time(MTIME)} readme.txt"
        assert lines[2].startswith("drwxr-xr-x")
        assert lines[2].endswith(" sub")

    @pytest.mark.asyncio
    async def test_ls_file(self):
        assert (await self.session.execute("ls readme.txt")).message == "readme.txt"
        long = await self.session.execute("ls -l readme.txt")
        assert long.message == f"-rw-r--r--         12 {format_time(MTIME)} readme.txt"

    @pytest.mark.asyncio
    async def test_ls_subdirectory(self):
        result = await self.session.execute("ls sub")
        assert result.message == "deep inner.py"

    @pytest.mark.asyncio
    async def test_ls_missing(self):
        result = await self.session.execute("ls missing")
        assert result.as_tuple() == (False, "Path does not exist: missing")

    @pytest.mark.asyncio
    async def test_ls_empty_directory(self):
        self.session.backend.mkdir("/void")
        result = await self.session.execute("ls void")
        assert result.as_tuple() == (True, "Directory is empty")

    @pytest.mark.asyncio
    async def test_ls_flag_only_keeps_default_target(self):
        result = await self.session.execute("ls -")
        assert result.message == "empty.txt readme.txt sub"

    @pytest.mark.asyncio
    async def test_ls_above_root_is_denied(self):
        result = await self.session.execute("ls ..")
        assert result.success is False
        assert result.message.startswith("Access denied")

    @pytest.mark.asyncio
    async def test_ls_shows_symlink_kind(self):
        self.session.backend.add_symlink("/link.txt", "readme.txt")
        result = await self.session.execute("ls -l link.txt")
        assert result.message.startswith("lrwxrwxrwx")

    @pytest.mark.asyncio
    async def test_du_bytes(self):
        assert (await self.session.execute("du")).message == "277\t."
        assert (await self.session.execute("du sub")).message == "265\tsub"
        assert (await self.session.execute("du readme.txt")).message == "12\treadme.txt"

    @pytest.mark.asyncio
    async def test_du_human_readable(self):
        self.session.backend.seed({"big/blob": b"x" * 1536})
        assert (await self.session.execute("du -h big")).message == "1.5KB\tbig"
        assert (await self.session.execute("du -h sub")).message == "265B\tsub"

    @pytest.mark.asyncio
    async def test_du_missing(self):
        result = await self.session.execute("du -h nope")
        assert result.as_tuple() == (False, "Path does not exist: nope")


# ─── file / stat / cat ────────────────────────────────────────────────────

class TestInspection:

    def setup_method(self):
        self.session = make_session()

    @pytest.mark.asyncio
    async def test_file_text(self):
        result = await self.session.execute("file readme.txt")
        assert result.as_tuple() == (True, "readme.txt: regular file, text file (text/plain)")

    @pytest.mark.asyncio
    async def test_file_binary_without_mime(self):
        result = await self.session.execute("file sub/deep/x.bin")
        assert result.message == "sub/deep/x.bin: regular file, binary file"

    @pytest.mark.asyncio
    async def test_file_directory(self):
        assert (await self.session.execute("file sub")).message == "sub: directory"

    @pytest.mark.asyncio
    async def test_file_character_device(self):
        self.session.backend.add_special("/dev/tty0", stat.S_IFCHR, 0o620)
        assert (await self.session.execute("file dev/tty0")).message == "dev/tty0: character device"

    @pytest.mark.asyncio
    async def test_file_unreadable_content_still_succeeds(self):
        class Unreadable(InMemoryBackend):
            async def read_content(self, path, max_size=0):
                raise BackendIOError("device busy")

        session = make_session(backend_cls=Unreadable)
        result = await session.execute("file readme.txt")
        assert result.as_tuple() == (True, "readme.txt: regular file, cannot read content")

    @pytest.mark.asyncio
    async def test_file_usage(self):
        assert (await self.session.execute("file")).as_tuple() == (False, "Usage: file <path>")
        assert (await self.session.execute("file -x")).as_tuple() == (False, "Usage: file <path>")

    @pytest.mark.asyncio
    async def test_file_missing(self):
        assert (await self.session.execute("file ghost")).as_tuple() == (False, "File does not exist: ghost")

    @pytest.mark.asyncio
    async def test_stat(self):
        result = await self.session.execute("stat readme.txt")
        assert result.success is True
        assert result.message.split("\n") == [
            "File: readme.txt",
            "Type: regular file",
            "Size: 12 bytes",
            "Permissions: -rw-r--r-- (0644)",
            f"Modified: {format_time(MTIME)}",
            f"Accessed: {format_time(MTIME + 60)}",
            f"Created: {format_time(MTIME + 120)}",
        ]

    @pytest.mark.asyncio
    async def test_stat_directory(self):
        result = await self.session.execute("stat sub")
        assert "Type: directory" in result.message
        assert "Permissions: drwxr-xr-x (0755)" in result.message

    @pytest.mark.asyncio
    async def test_stat_usage(self):
        assert (await self.session.execute("stat")).as_tuple() == (False, "Usage: stat <path>")

    @pytest.mark.asyncio
    async def test_cat_text(self):
        assert (await self.session.execute("cat readme.txt")).as_tuple() == (True, "hello world\n")

    @pytest.mark.asyncio
    async def test_cat_utf8(self):
        self.session.backend.seed({"cn.txt": "你好，世界\n"})
        assert (await self.session.execute("cat cn.txt")).message == "你好，世界\n"

    @pytest.mark.asyncio
    async def test_cat_empty(self):
        assert (await self.session.execute("cat empty.txt")).as_tuple() == (True, "File is empty")

    @pytest.mark.asyncio
    async def test_cat_binary_rejected(self):
        result = await self.session.execute("cat sub/deep/x.bin")
        assert result.as_tuple() == (False, "sub/deep/x.bin is a binary file, cannot display")

    @pytest.mark.asyncio
    async def test_cat_directory_rejected(self):
        result = await self.session.execute("cat sub")
        assert result.as_tuple() == (False, "sub is a directory, cannot display content")

    @pytest.mark.asyncio
    async def test_cat_missing(self):
        assert (await self.session.execute("cat nope")).as_tuple() == (False, "File does not exist: nope")

    @pytest.mark.asyncio
    async def test_cat_respects_cap(self):
        session = make_session(ClientConfig(cat_max_bytes=4))
        assert (await session.execute("cat readme.txt")).message == "hell"

    @pytest.mark.asyncio
    async def test_cat_follows_symlink(self):
        self.session.backend.add_symlink("/link.txt", "readme.txt")
        assert (await self.session.execute("cat link.txt")).message == "hello world\n"

    @pytest.mark.asyncio
    async def test_cat_escape_denied(self):
        result = await self.session.execute("cat ../etc/passwd")
        assert result.message.startswith("Access denied")


# ─── hexdump ──────────────────────────────────────────────────────────────

class TestHexdump:

    def setup_method(self):
        self.session = make_session()

    @pytest.mark.asyncio
    async def test_first_line(self):
        result = await self.session.execute("hexdump -len 8 readme.txt")
        expected = "00000000: " + "".join(f"{b:08b} " for b in b"hello wo") + " hello wo"
        assert result.as_tuple() == (True, expected)

    @pytest.mark.asyncio
    async def test_offset_window(self):
        result = await self.session.execute("hexdump -offset 8 -len 4 readme.txt")
        assert result.message.startswith("00000008: 01110010 ")
        assert result.message.endswith(" rld.    ")
        assert "\n" not in result.message

    @pytest.mark.asyncio
    async def test_whole_file(self):
        result = await self.session.execute("hexdump sub/deep/x.bin")
        lines = result.message.split("\n")
        assert len(lines) == 32
        assert lines[-1].startswith("000000f8: ")

    @pytest.mark.asyncio
    async def test_flags_after_path(self):
        result = await self.session.execute("hexdump readme.txt -offset 4 -len 1")
        assert result.message.startswith("00000004: 01101111 ")

    @pytest.mark.asyncio
    async def test_cap_from_config(self):
        session = make_session(ClientConfig(hexdump_max_bytes=16))
        result = await session.execute("hexdump sub/deep/x.bin")
        assert len(result.message.split("\n")) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line,message", [
        ("hexdump -offset abc readme.txt", "Invalid offset value: abc"),
        ("hexdump -offset +5 readme.txt", "Invalid offset value: +5"),
        ("hexdump -len -3 readme.txt", "Invalid length value: -3"),
        ("hexdump -len 1.5 readme.txt", "Invalid length value: 1.5"),
        ("hexdump readme.txt -offset", "Option -offset requires a value"),
    ])
    async def test_invalid_options(self, line, message):
        result = await self.session.execute(line)
        assert result.as_tuple() == (False, message)

    @pytest.mark.asyncio
    async def test_offset_past_end(self):
        result = await self.session.execute("hexdump -offset 100 readme.txt")
        assert result.success is False
        assert result.message.startswith("Offset exceeds file size")

    @pytest.mark.asyncio
    async def test_offset_at_end(self):
        result = await self.session.execute("hexdump -offset 12 readme.txt")
        assert result.as_tuple() == (True, "No data to display (file empty or offset beyond file size)")

    @pytest.mark.asyncio
    async def test_empty_file(self):
        result = await self.session.execute("hexdump empty.txt")
        assert result.as_tuple() == (True, "No data to display (file empty or offset beyond file size)")

    @pytest.mark.asyncio
    async def test_directory_rejected(self):
        result = await self.session.execute("hexdump sub")
        assert result.as_tuple() == (False, "sub is a directory, cannot hexdump")

    @pytest.mark.asyncio
    async def test_usage(self):
        result = await self.session.execute("hexdump -len 4")
        assert result.as_tuple() == (False, "Usage: hexdump [-offset N] [-len N] <path>")


# ─── Failure containment ──────────────────────────────────────────────────

class TestFailureContainment:

    @pytest.mark.asyncio
    async def test_unexpected_backend_error_becomes_failure(self):
        class Broken(InMemoryBackend):
            async def list_directory(self, path):
                raise RuntimeError("boom")

        session = make_session(backend_cls=Broken)
        result = await session.execute("ls")
        assert result.as_tuple() == (False, "ls failed: boom")

    @pytest.mark.asyncio
    async def test_os_error_becomes_failure(self):
        class Flaky(InMemoryBackend):
            async def get_directory_size(self, path, recursive=True):
                raise PermissionError(13, "Permission denied")

        session = make_session(backend_cls=Flaky)
        result = await session.execute("du")
        assert result.as_tuple() == (False, "du: Permission denied")

    @pytest.mark.asyncio
    async def test_session_continues_after_failure(self):
        session = make_session()
        await session.execute("cat nope")
        await session.execute("cd ..")
        assert (await session.execute("pwd")).as_tuple() == (True, "/")
