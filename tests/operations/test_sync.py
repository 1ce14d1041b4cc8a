"""Tests for the IDE sync engine."""

import json
from pathlib import Path

import pytest

from dec.errors import PathTraversalError
from dec.ide.adapters import CodeBuddyIde, CursorIde
from dec.models.mcp import McpConfig, McpServer
from dec.models.pack import McpLaunchSpec
from dec.operations.sync import (
    SELF_SERVER,
    McpPackage,
    RulePackage,
    build_mcp_server,
    clean_ide,
    managed_rule_filename,
    merge_mcp_config,
    render_rules,
    sync_all,
)


def _rule_package(root: Path, name: str, rules: dict[str, str], **variables: object) -> RulePackage:
    install_path = root / "repos" / name
    for rule_path, content in rules.items():
        target = install_path / rule_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return RulePackage(
        name=name,
        install_path=install_path,
        rule_files=tuple(sorted(rules)),
        vars=dict(variables),
    )


def _mcp_package(root: Path, name: str, launch: McpLaunchSpec, **variables: object) -> McpPackage:
    install_path = root / "repos" / name
    install_path.mkdir(parents=True, exist_ok=True)
    return McpPackage(name=name, install_path=install_path, launch=launch, vars=dict(variables))


def _snapshot(project: Path) -> dict[str, bytes]:
    return {
        path.relative_to(project).as_posix(): path.read_bytes()
        for path in sorted(project.rglob("*"))
        if path.is_file()
    }


def test_managed_rule_filename_flattens_path() -> None:
    assert managed_rule_filename("go", "rules/style/naming.mdc") == "dec-go-rules-style-naming.mdc"


class TestRenderRules:
    """Tests for render_rules()."""

    def test_substitutes_package_vars(self, tmp_path: Path) -> None:
        package = _rule_package(
            tmp_path,
            "go",
            {"rules/style.mdc": "Use {{style.indent:-tabs}} and {{team}}."},
            team="core",
        )

        rendered = render_rules([package])

        assert rendered == {"dec-go-rules-style.mdc": "Use tabs and core."}

    def test_missing_template_raises(self, tmp_path: Path) -> None:
        package = RulePackage(
            name="go", install_path=tmp_path / "repos" / "go", rule_files=("rules/gone.mdc",)
        )

        with pytest.raises(FileNotFoundError, match="gone.mdc"):
            render_rules([package])

    @pytest.mark.parametrize("rule_path", ["../../secret.md", "/etc/secret.md"])
    def test_rule_path_outside_package_is_rejected(self, tmp_path: Path, rule_path: str) -> None:
        """Declared rules may only name files inside the package directory."""
        (tmp_path / "secret.md").write_text("TOP SECRET")
        install_path = tmp_path / "repos" / "evil"
        install_path.mkdir(parents=True)
        package = RulePackage(name="evil", install_path=install_path, rule_files=(rule_path,))

        with pytest.raises(PathTraversalError):
            render_rules([package])


class TestBuildMcpServer:
    """Tests for MCP server entry generation."""

    def test_placeholders_in_every_field(self, tmp_path: Path) -> None:
        launch = McpLaunchSpec(
            command="npx",
            args=["server", "--host={{db.host:-localhost}}"],
            env={"TOKEN": "{{token}}", "PORT": "{{db.port:-5432}}"},
        )
        package = _mcp_package(tmp_path, "postgres", launch, token="abc", db={"host": "db1"})

        server = build_mcp_server(package)

        assert server == McpServer(
            command="npx",
            args=["server", "--host=db1"],
            env={"PORT": "5432", "TOKEN": "abc"},
        )

    def test_relative_command_resolves_inside_package(self, tmp_path: Path) -> None:
        package = _mcp_package(tmp_path, "tool", McpLaunchSpec(command="bin/server"))

        server = build_mcp_server(package)

        assert server.command == str(package.install_path / "bin" / "server")

    def test_relative_command_may_not_leave_package(self, tmp_path: Path) -> None:
        package = _mcp_package(tmp_path, "tool", McpLaunchSpec(command="../other/server"))

        with pytest.raises(PathTraversalError):
            build_mcp_server(package)


class TestMergeMcpConfig:
    """Tests for merging generated entries into an existing config."""

    def test_keeps_user_entries_and_replaces_managed(self) -> None:
        existing = McpConfig.model_validate(
            {
                "mcpServers": {
                    "mine": {"command": "my-server"},
                    "dec-old": {"command": "stale"},
                    "dec": {"command": "old-dec"},
                },
                "inputs": [],
            }
        )

        merged = merge_mcp_config(existing, {"dec": SELF_SERVER})

        data = merged.to_dict()
        assert set(data["mcpServers"]) == {"mine", "dec"}
        assert data["mcpServers"]["dec"] == {"command": "dec", "args": ["serve"], "env": {}}
        assert data["inputs"] == []


class TestSyncAll:
    """Tests for syncing rule files and MCP config into IDE directories."""

    def test_writes_rules_and_mcp_config(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        rules = [_rule_package(tmp_path, "go", {"rules/style.mdc": "go style"})]
        mcps = [_mcp_package(tmp_path, "github", McpLaunchSpec(command="gh-mcp"))]

        results = sync_all([CursorIde(), CodeBuddyIde()], project, rules, mcps)

        assert [result.ide for result in results] == ["cursor", "codebuddy"]
        for rules_dir in (project / ".cursor" / "rules", project / ".codebuddy" / "rules"):
            assert (rules_dir / "dec-go-rules-style.mdc").read_text() == "go style"
        for config_path in (project / ".cursor" / "mcp.json", project / ".mcp.json"):
            servers = json.loads(config_path.read_text())["mcpServers"]
            assert set(servers) == {"dec", "dec-github"}
        assert results[0].mcp_servers == ("dec", "dec-github")

    def test_self_entry_present_without_packages(self, tmp_path: Path) -> None:
        project = tmp_path / "project"

        sync_all([CursorIde()], project, [], [])

        servers = json.loads((project / ".cursor" / "mcp.json").read_text())["mcpServers"]
        assert servers == {"dec": {"command": "dec", "args": ["serve"], "env": {}}}

    def test_second_sync_is_byte_identical(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        rules = [
            _rule_package(tmp_path, "go", {"rules/a.mdc": "A {{x:-1}}", "rules/b.md": "B"}),
            _rule_package(tmp_path, "py", {"rules/c.mdc": "C"}),
        ]
        launch = McpLaunchSpec(command="srv", env={"B": "2", "A": "1"})
        mcps = [_mcp_package(tmp_path, "srv", launch)]

        sync_all([CursorIde()], project, rules, mcps)
        first = _snapshot(project)
        sync_all([CursorIde()], project, rules, mcps)

        assert _snapshot(project) == first

    def test_disabling_package_removes_only_its_artifacts(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        go = _rule_package(tmp_path, "go", {"rules/style.mdc": "go"})
        py = _rule_package(tmp_path, "py", {"rules/style.mdc": "py"})
        github = _mcp_package(tmp_path, "github", McpLaunchSpec(command="gh"))
        jira = _mcp_package(tmp_path, "jira", McpLaunchSpec(command="jira"))
        rules_dir = project / ".cursor" / "rules"
        rules_dir.mkdir(parents=True)
        (rules_dir / "team.mdc").write_text("hand written")
        config_path = project / ".cursor" / "mcp.json"
        config_path.write_text(json.dumps({"mcpServers": {"mine": {"command": "mine"}}}))

        sync_all([CursorIde()], project, [go, py], [github, jira])
        results = sync_all([CursorIde()], project, [go], [github])

        assert sorted(p.name for p in rules_dir.iterdir()) == ["dec-go-rules-style.mdc", "team.mdc"]
        assert [p.name for p in results[0].rules_removed] == ["dec-py-rules-style.mdc"]
        servers = json.loads(config_path.read_text())["mcpServers"]
        assert set(servers) == {"dec", "dec-github", "mine"}
        assert servers["mine"] == {"command": "mine"}

    def test_missing_template_leaves_output_untouched(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        go = _rule_package(tmp_path, "go", {"rules/style.mdc": "go"})
        sync_all([CursorIde()], project, [go], [])
        before = _snapshot(project)
        broken = RulePackage(name="py", install_path=tmp_path / "missing", rule_files=("x.mdc",))

        with pytest.raises(FileNotFoundError):
            sync_all([CursorIde()], project, [go, broken], [])

        assert _snapshot(project) == before


class TestCleanIde:
    """Tests for clean_ide()."""

    def test_removes_managed_content_only(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        go = _rule_package(tmp_path, "go", {"rules/style.mdc": "go"})
        github = _mcp_package(tmp_path, "github", McpLaunchSpec(command="gh"))
        adapter = CursorIde()
        sync_all([adapter], project, [go], [github])
        (project / ".cursor" / "rules" / "team.mdc").write_text("mine")
        config = adapter.load_mcp_config(project)
        user_entries = {**config.mcpServers, "mine": {"command": "mine"}}
        adapter.write_mcp_config(project, McpConfig(mcpServers=user_entries))

        result = clean_ide(adapter, project)

        assert [p.name for p in result.rules_removed] == ["dec-go-rules-style.mdc"]
        assert [p.name for p in (project / ".cursor" / "rules").iterdir()] == ["team.mdc"]
        servers = json.loads((project / ".cursor" / "mcp.json").read_text())["mcpServers"]
        assert servers == {"mine": {"command": "mine"}}

    def test_does_not_create_missing_config(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()

        clean_ide(CursorIde(), project)

        assert not (project / ".cursor" / "mcp.json").exists()
